"""Read every item of a playlist, one bounded page at a time."""
import logging
from typing import List

from spotify_backup.config import PAGE_SIZE
from spotify_backup.core.errors import FetchError, RemoteError

logger = logging.getLogger(__name__)


def fetch_all_items(client, playlist_id: str, page_size: int = PAGE_SIZE) -> List[dict]:
    """Return all playlist_items entries for playlist_id.

    Offsets go 0, page_size, 2*page_size, ... and paging stops at the first
    page shorter than page_size; the response's "total" is not trusted. Any
    page failure raises FetchError and drops what was already read.
    """
    items: List[dict] = []
    offset = 0
    while True:
        try:
            page = client.list_playlist_items(playlist_id, limit=page_size, offset=offset)
        except RemoteError as e:
            raise FetchError(
                f"playlist {playlist_id} offset {offset}: {e}", http_status=e.http_status
            ) from e
        page_items = (page or {}).get("items") or []
        items.extend(page_items)
        logger.debug("Playlist %s: %d items at offset %d", playlist_id, len(page_items), offset)
        if len(page_items) < page_size:
            break
        offset += page_size
    return items
