"""Data models for the transfer document and restore outcomes."""
from spotify_backup.models.restore import (
    BatchOutcome,
    CompletionEvent,
    PlaylistOutcome,
    PlaylistState,
    ProgressEvent,
    RestoreReport,
    SkippedTrack,
)
from spotify_backup.models.transfer import PlaylistRecord, TrackRecord, TransferDocument

__all__ = [
    "BatchOutcome",
    "CompletionEvent",
    "PlaylistOutcome",
    "PlaylistRecord",
    "PlaylistState",
    "ProgressEvent",
    "RestoreReport",
    "SkippedTrack",
    "TrackRecord",
    "TransferDocument",
]
