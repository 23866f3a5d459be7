"""Turn Spotify playlist items into transfer TrackRecords."""
from typing import Optional

from spotify_backup.models.transfer import TrackRecord


def normalize_item(item: dict) -> Optional[TrackRecord]:
    """Return a TrackRecord for a playlist_items entry, or None to skip it.

    Removed, unavailable and local-only tracks come back with an empty name;
    podcast episodes are not tracks. Both are skipped. Only the first artist
    is kept.
    """
    track = (item or {}).get("track") or {}
    if track.get("type", "track") != "track":
        return None
    name = track.get("name") or ""
    uri = track.get("uri") or ""
    if not name or not uri:
        return None
    artists = track.get("artists") or []
    first_artist = (artists[0] or {}) if artists else {}
    album = track.get("album") or {}
    return TrackRecord(
        name=name,
        artist=first_artist.get("name") or "",
        album=album.get("name") or "",
        uri=uri,
    )
