"""Read and write the backup file (JSON array of playlists)."""
import json
from dataclasses import asdict
from typing import List, Union

from pydantic import BaseModel, TypeAdapter, ValidationError, field_validator

from spotify_backup.core.errors import TransferFormatError
from spotify_backup.models.transfer import PlaylistRecord, TrackRecord, TransferDocument


class TrackPayload(BaseModel):
    """Missing or null fields read as empty strings; a track without uri is rejected later, at restore."""
    name: str = ""
    artist: str = ""
    album: str = ""
    uri: str = ""

    @field_validator("name", "artist", "album", "uri", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        return "" if value is None else value


class PlaylistPayload(BaseModel):
    name: str = ""
    tracks: List[TrackPayload] = []

    @field_validator("name", mode="before")
    @classmethod
    def _null_name(cls, value):
        return "" if value is None else value

    @field_validator("tracks", mode="before")
    @classmethod
    def _null_tracks(cls, value):
        return [] if value is None else value


_document_adapter = TypeAdapter(List[PlaylistPayload])


def document_to_list(document: TransferDocument) -> list:
    return [
        {"name": p.name, "tracks": [asdict(t) for t in p.tracks]}
        for p in document
    ]


def dumps_document(document: TransferDocument) -> str:
    return json.dumps(document_to_list(document), ensure_ascii=False, indent=2)


def loads_document(data: Union[bytes, str]) -> TransferDocument:
    """Parse an uploaded backup. Raises TransferFormatError on bad JSON or shape."""
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TransferFormatError("backup file is not UTF-8") from e
    try:
        payload = _document_adapter.validate_json(data)
    except ValidationError as e:
        raise TransferFormatError(f"invalid backup file: {e.error_count()} error(s)") from e
    return [
        PlaylistRecord(
            name=p.name,
            tracks=tuple(
                TrackRecord(name=t.name, artist=t.artist, album=t.album, uri=t.uri)
                for t in p.tracks
            ),
        )
        for p in payload
    ]
