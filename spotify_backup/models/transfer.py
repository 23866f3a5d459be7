"""Transfer document records: tracks and playlists."""
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class TrackRecord:
    """One track as written to the backup file. uri is the dedup and restore key."""
    name: str
    artist: str
    album: str
    uri: str


@dataclass(frozen=True)
class PlaylistRecord:
    """A named, ordered list of tracks."""
    name: str
    tracks: Tuple[TrackRecord, ...] = field(default_factory=tuple)


TransferDocument = List[PlaylistRecord]
