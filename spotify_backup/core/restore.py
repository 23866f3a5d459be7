"""Re-create playlists from a transfer document in bounded batches."""
import logging
import re
from typing import Callable, List, Optional, Sequence, TypeVar

from spotify_backup.config import BATCH_SIZE
from spotify_backup.core.dedupe import dedupe_tracks
from spotify_backup.core.errors import (
    BatchSubmitError,
    CreateError,
    MalformedRecordError,
    RemoteError,
)
from spotify_backup.models.restore import (
    BatchOutcome,
    CompletionEvent,
    PlaylistOutcome,
    PlaylistState,
    ProgressEvent,
    RestoreReport,
    SkippedTrack,
)
from spotify_backup.models.transfer import PlaylistRecord, TransferDocument

logger = logging.getLogger(__name__)

T = TypeVar("T")
ProgressCallback = Callable[[ProgressEvent], None]
CompletionCallback = Callable[[CompletionEvent], None]

TRACK_URI_PREFIX = "spotify:track:"
_TRACK_URI_REGEX = re.compile(r"^spotify:track:([0-9A-Za-z]+)$")


def track_id_from_uri(uri: str) -> str:
    """Return the base62 id of a spotify:track: URI or raise MalformedRecordError."""
    if not uri:
        raise MalformedRecordError(uri, "empty uri")
    if not uri.startswith(TRACK_URI_PREFIX):
        raise MalformedRecordError(uri, "not a spotify:track: uri")
    match = _TRACK_URI_REGEX.match(uri)
    if not match:
        raise MalformedRecordError(uri, "invalid track id")
    return match.group(1)


def partition(items: Sequence[T], size: int = BATCH_SIZE) -> List[Sequence[T]]:
    """Split items into consecutive chunks of at most size."""
    if size <= 0:
        raise ValueError("size must be positive")
    return [items[i:i + size] for i in range(0, len(items), size)]


def restore_playlist(
    client,
    playlist: PlaylistRecord,
    user_id: str,
    on_progress: Optional[ProgressCallback] = None,
    on_complete: Optional[CompletionCallback] = None,
    batch_size: int = BATCH_SIZE,
) -> PlaylistOutcome:
    """Create one playlist and add its tracks.

    CREATE_EMPTY -> ADD_BATCHES -> DONE, or CREATE_EMPTY -> FAILED when the
    playlist cannot be created. Malformed track URIs and failed batches are
    recorded on the outcome and do not stop the playlist.
    """
    logger.info("Processing playlist: %s", playlist.name)
    outcome = PlaylistOutcome(name=playlist.name)
    tracks = dedupe_tracks(playlist.tracks)

    try:
        created = client.create_playlist(
            user_id, playlist.name, description="", public=False, collaborative=False
        )
        if not (created or {}).get("id"):
            raise CreateError(f"create {playlist.name!r}: response has no playlist id")
    except RemoteError as e:
        err = e if isinstance(e, CreateError) else CreateError(
            f"create {playlist.name!r}: {e}", http_status=e.http_status
        )
        logger.error("Error creating playlist %s: %s", playlist.name, err)
        outcome.state = PlaylistState.FAILED
        outcome.error = str(err)
        return outcome
    outcome.playlist_id = created["id"]
    outcome.state = PlaylistState.ADD_BATCHES

    track_ids: List[str] = []
    for track in tracks:
        try:
            track_ids.append(track_id_from_uri(track.uri))
        except MalformedRecordError as e:
            logger.warning("Playlist %s: skipping track %r: %s", playlist.name, track.name, e.reason)
            outcome.skipped.append(SkippedTrack(uri=track.uri, reason=e.reason))

    total = len(track_ids)
    processed = 0
    start = 0
    for batch in partition(track_ids, batch_size):
        end = start + len(batch)
        ok = True
        error = None
        try:
            client.add_tracks_to_playlist(outcome.playlist_id, batch)
        except RemoteError as e:
            err = BatchSubmitError(
                f"tracks {start + 1}-{end}: {e}", http_status=e.http_status
            )
            logger.error("Error adding tracks batch to playlist %s: %s", playlist.name, err)
            ok = False
            error = str(err)
        processed += len(batch)
        percent = 100.0 if processed == total else processed / total * 100
        logger.info(
            "Playlist: %s - Progress: %.2f%% - Adding tracks %d-%d of %d",
            playlist.name, percent, start + 1, end, total,
        )
        outcome.batches.append(BatchOutcome(range_start=start + 1, range_end=end, ok=ok, error=error))
        if on_progress is not None:
            on_progress(ProgressEvent(
                playlist_name=playlist.name,
                percent_complete=percent,
                range_start=start + 1,
                range_end=end,
                total_tracks=total,
                ok=ok,
            ))
        start = end

    outcome.total_tracks_attempted = total
    outcome.state = PlaylistState.DONE
    logger.info("Completed playlist: %s - Added %d unique tracks", playlist.name, total)
    if on_complete is not None:
        on_complete(CompletionEvent(playlist_name=playlist.name, total_tracks_attempted=total))
    return outcome


def restore_document(
    client,
    document: TransferDocument,
    user_id: str,
    on_progress: Optional[ProgressCallback] = None,
    on_complete: Optional[CompletionCallback] = None,
    batch_size: int = BATCH_SIZE,
) -> RestoreReport:
    """Restore every playlist in order; one failed playlist never aborts the run."""
    report = RestoreReport(user_id=user_id)
    for playlist in document:
        report.playlists.append(
            restore_playlist(
                client,
                playlist,
                user_id,
                on_progress=on_progress,
                on_complete=on_complete,
                batch_size=batch_size,
            )
        )
    logger.info(
        "Restore finished: %d done, %d failed", len(report.done), len(report.failed)
    )
    return report
