"""Test configuration and fixtures"""

import pytest

from spotify_backup.core.errors import RemoteError
from spotify_backup.models.transfer import PlaylistRecord, TrackRecord


def track_uri(i):
    return f"spotify:track:{i:022d}"


def make_item(name, uri, artist="Test Artist", album="Test Album", type_="track"):
    """A playlist_items entry shaped like the Web API response."""
    return {
        "added_at": "2023-01-01T00:00:00Z",
        "track": {
            "type": type_,
            "name": name,
            "uri": uri,
            "artists": [{"name": artist}, {"name": "Featured Artist"}],
            "album": {"name": album},
        },
    }


def make_track(i, name=None):
    return TrackRecord(
        name=name or f"Song {i}",
        artist="Test Artist",
        album="Test Album",
        uri=track_uri(i),
    )


def make_playlist(name, count, start=0):
    return PlaylistRecord(name=name, tracks=tuple(make_track(start + i) for i in range(count)))


class FakeGateway:
    """In-memory stand-in for SpotifyGateway that records every call."""

    def __init__(self, playlists=None, items=None, user_id="user-1"):
        self.playlists = playlists or []
        self.items = items or {}
        self.user_id = user_id
        self.fail_fetch = set()  # (playlist_id, offset) or playlist_id
        self.fail_create = set()  # playlist names
        self.create_without_id = set()  # playlist names answered without an id
        self.fail_add_calls = set()  # 0-based index of add_tracks_to_playlist calls
        self.user_error = None
        self.playlists_error = None
        self.page_requests = []
        self.created = []
        self.added = []

    def list_playlist_items(self, playlist_id, limit, offset):
        self.page_requests.append((playlist_id, limit, offset))
        if playlist_id in self.fail_fetch or (playlist_id, offset) in self.fail_fetch:
            raise RemoteError("internal server error", http_status=500)
        items = self.items.get(playlist_id, [])
        # total is deliberately wrong: paging must not depend on it
        return {"items": items[offset:offset + limit], "total": 10**6}

    def create_playlist(self, user_id, name, description="", public=False, collaborative=False):
        self.created.append(
            {
                "user_id": user_id,
                "name": name,
                "description": description,
                "public": public,
                "collaborative": collaborative,
            }
        )
        if name in self.fail_create:
            raise RemoteError("forbidden", http_status=403)
        if name in self.create_without_id:
            return {"name": name}
        return {"id": f"new-{len(self.created)}", "name": name}

    def add_tracks_to_playlist(self, playlist_id, track_ids):
        index = len(self.added)
        self.added.append((playlist_id, list(track_ids)))
        if index in self.fail_add_calls:
            raise RemoteError("too many requests", http_status=429)
        return {"snapshot_id": f"snap-{index}"}

    def current_user(self):
        if self.user_error:
            raise self.user_error
        return {"id": self.user_id, "display_name": "Test User"}

    def current_user_playlists(self):
        if self.playlists_error:
            raise self.playlists_error
        return list(self.playlists)


@pytest.fixture
def gateway():
    return FakeGateway()
