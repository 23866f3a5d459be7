"""Drop repeated tracks within one playlist."""
from typing import Iterable, List, Set

from spotify_backup.models.transfer import TrackRecord


def dedupe_tracks(tracks: Iterable[TrackRecord]) -> List[TrackRecord]:
    """Keep the first occurrence of each URI, in original order."""
    seen: Set[str] = set()
    out = []
    for t in tracks:
        if t.uri in seen:
            continue
        seen.add(t.uri)
        out.append(t)
    return out
