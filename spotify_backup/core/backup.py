"""Build a transfer document from the current user's playlists."""
import logging
from typing import Iterable, List

from spotify_backup.core.errors import FetchError
from spotify_backup.core.fetcher import fetch_all_items
from spotify_backup.core.normalizer import normalize_item
from spotify_backup.models.transfer import PlaylistRecord, TransferDocument

logger = logging.getLogger(__name__)


def build_playlist_record(name: str, items: Iterable[dict]) -> PlaylistRecord:
    tracks = []
    for item in items:
        record = normalize_item(item)
        if record is not None:
            tracks.append(record)
    return PlaylistRecord(name=name, tracks=tuple(tracks))


def assemble_backup(client, playlists: Iterable[dict]) -> TransferDocument:
    """Fetch and normalize every playlist.

    Best effort: a playlist whose items cannot be read is logged and left out
    of the document instead of failing the whole backup.
    """
    document: List[PlaylistRecord] = []
    for playlist in playlists:
        name = playlist.get("name") or ""
        try:
            items = fetch_all_items(client, playlist["id"])
        except FetchError as e:
            logger.warning("Skipping playlist %r: %s", name, e)
            continue
        record = build_playlist_record(name, items)
        logger.info("Backed up playlist %r (%d tracks)", name, len(record.tracks))
        document.append(record)
    return document


def backup_current_user(client) -> TransferDocument:
    """Back up all playlists visible to the authenticated user.

    Raises RemoteError if the playlist listing itself fails.
    """
    playlists = client.current_user_playlists()
    logger.info("Found %d playlists", len(playlists))
    return assemble_backup(client, playlists)
