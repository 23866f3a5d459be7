"""Restore progress events and per-playlist outcomes."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class PlaylistState(str, Enum):
    CREATE_EMPTY = "create_empty"
    ADD_BATCHES = "add_batches"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ProgressEvent:
    """Emitted after each attempted batch. Ranges are 1-based and inclusive."""
    playlist_name: str
    percent_complete: float
    range_start: int
    range_end: int
    total_tracks: int
    ok: bool = True


@dataclass
class CompletionEvent:
    """Emitted once a playlist's batches have all been attempted."""
    playlist_name: str
    total_tracks_attempted: int


@dataclass
class BatchOutcome:
    range_start: int
    range_end: int
    ok: bool
    error: Optional[str] = None


@dataclass
class SkippedTrack:
    uri: str
    reason: str


@dataclass
class PlaylistOutcome:
    """What happened to one playlist during restore."""
    name: str
    state: PlaylistState = PlaylistState.CREATE_EMPTY
    playlist_id: Optional[str] = None
    total_tracks_attempted: int = 0
    batches: List[BatchOutcome] = field(default_factory=list)
    skipped: List[SkippedTrack] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed_batches(self) -> List[BatchOutcome]:
        return [b for b in self.batches if not b.ok]


@dataclass
class RestoreReport:
    user_id: str
    playlists: List[PlaylistOutcome] = field(default_factory=list)

    @property
    def done(self) -> List[PlaylistOutcome]:
        return [p for p in self.playlists if p.state == PlaylistState.DONE]

    @property
    def failed(self) -> List[PlaylistOutcome]:
        return [p for p in self.playlists if p.state == PlaylistState.FAILED]
