"""Core services: fetch, normalize, dedupe, backup, restore."""
from spotify_backup.core.backup import assemble_backup, backup_current_user
from spotify_backup.core.dedupe import dedupe_tracks
from spotify_backup.core.fetcher import fetch_all_items
from spotify_backup.core.normalizer import normalize_item
from spotify_backup.core.restore import restore_document, restore_playlist

__all__ = [
    "assemble_backup",
    "backup_current_user",
    "dedupe_tracks",
    "fetch_all_items",
    "normalize_item",
    "restore_document",
    "restore_playlist",
]
