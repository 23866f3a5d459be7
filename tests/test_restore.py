"""Test batched playlist restore"""

import math

import pytest

from spotify_backup.core.errors import MalformedRecordError
from spotify_backup.core.restore import partition, restore_document, restore_playlist, track_id_from_uri
from spotify_backup.models.restore import PlaylistState
from spotify_backup.models.transfer import PlaylistRecord, TrackRecord

from conftest import FakeGateway, make_playlist, make_track


class Recorder:
    def __init__(self):
        self.progress = []
        self.completed = []


@pytest.fixture
def recorder():
    return Recorder()


def _restore(gw, playlist, recorder, **kwargs):
    return restore_playlist(
        gw,
        playlist,
        "user-1",
        on_progress=recorder.progress.append,
        on_complete=recorder.completed.append,
        **kwargs,
    )


class TestTrackIdFromUri:

    def test_strips_scheme_prefix(self):
        assert track_id_from_uri("spotify:track:4uLU6hMCjMI75M1A2tKUQC") == "4uLU6hMCjMI75M1A2tKUQC"

    @pytest.mark.parametrize(
        "uri",
        [
            "",
            "spotify:episode:4uLU6hMCjMI75M1A2tKUQC",
            "spotify:track:",
            "spotify:local:Artist:Album:Song:180",
            "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC",
            "spotify:track:bad id!",
        ],
    )
    def test_malformed(self, uri):
        with pytest.raises(MalformedRecordError):
            track_id_from_uri(uri)


class TestPartition:

    @pytest.mark.parametrize("n", [1, 99, 100, 101, 250, 300])
    def test_batch_count_and_sizes(self, n):
        items = list(range(n))
        batches = partition(items, 100)
        assert len(batches) == math.ceil(n / 100)
        assert len(batches[-1]) == (n % 100 or 100)
        assert [x for b in batches for x in b] == items

    def test_empty(self):
        assert partition([], 100) == []

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            partition([1], 0)


class TestRestorePlaylist:

    def test_creates_private_non_collaborative_playlist(self, recorder):
        gw = FakeGateway()
        _restore(gw, make_playlist("Mix", 3), recorder)
        assert gw.created == [
            {
                "user_id": "user-1",
                "name": "Mix",
                "description": "",
                "public": False,
                "collaborative": False,
            }
        ]

    def test_batches_reproduce_deduplicated_order(self, recorder):
        gw = FakeGateway()
        playlist = make_playlist("Big", 250)
        outcome = _restore(gw, playlist, recorder)
        assert [len(ids) for _, ids in gw.added] == [100, 100, 50]
        assert all(pid == outcome.playlist_id for pid, _ in gw.added)
        sent = [i for _, ids in gw.added for i in ids]
        assert sent == [t.uri.split(":")[-1] for t in playlist.tracks]

    def test_progress_monotonic_and_reaches_100(self, recorder):
        gw = FakeGateway()
        _restore(gw, make_playlist("Odd", 333), recorder)
        percents = [e.percent_complete for e in recorder.progress]
        assert len(percents) == 4
        assert all(b >= a for a, b in zip(percents, percents[1:]))
        assert percents[-1] == pytest.approx(100.0)
        assert [(e.range_start, e.range_end) for e in recorder.progress] == [
            (1, 100), (101, 200), (201, 300), (301, 333),
        ]
        assert all(e.total_tracks == 333 for e in recorder.progress)

    def test_failed_batch_is_skipped_not_retried(self, recorder):
        gw = FakeGateway()
        gw.fail_add_calls.add(1)
        outcome = _restore(gw, make_playlist("Flaky", 300), recorder)
        assert len(gw.added) == 3
        assert outcome.state == PlaylistState.DONE
        assert [b.ok for b in outcome.batches] == [True, False, True]
        assert len(outcome.failed_batches) == 1
        assert recorder.progress[-1].percent_complete == pytest.approx(100.0)
        assert recorder.progress[1].ok is False
        # attempted, not confirmed
        assert recorder.completed[0].total_tracks_attempted == 300

    def test_last_batch_failure_still_reaches_100(self, recorder):
        gw = FakeGateway()
        gw.fail_add_calls.add(1)
        _restore(gw, make_playlist("Tail", 150), recorder)
        assert recorder.progress[-1].percent_complete == pytest.approx(100.0)

    def test_malformed_uri_skips_only_that_track(self, recorder):
        gw = FakeGateway()
        tracks = (
            make_track(1),
            TrackRecord(name="Local", artist="Me", album="", uri="spotify:local:Me::Local:200"),
            TrackRecord(name="Missing", artist="", album="", uri=""),
            make_track(2),
        )
        outcome = _restore(gw, PlaylistRecord(name="Mixed", tracks=tracks), recorder)
        assert gw.added == [(outcome.playlist_id, [make_track(1).uri[14:], make_track(2).uri[14:]])]
        assert [s.uri for s in outcome.skipped] == ["spotify:local:Me::Local:200", ""]
        assert recorder.completed[0].total_tracks_attempted == 2

    def test_create_failure_skips_batches(self, recorder):
        gw = FakeGateway()
        gw.fail_create.add("Nope")
        outcome = _restore(gw, make_playlist("Nope", 10), recorder)
        assert outcome.state == PlaylistState.FAILED
        assert outcome.error
        assert gw.added == []
        assert recorder.progress == []
        assert recorder.completed == []

    def test_create_without_playlist_id_fails(self, recorder):
        gw = FakeGateway()
        gw.create_without_id.add("No Id")
        outcome = _restore(gw, make_playlist("No Id", 10), recorder)
        assert outcome.state == PlaylistState.FAILED
        assert outcome.playlist_id is None
        assert "no playlist id" in outcome.error
        assert gw.added == []
        assert recorder.completed == []

    def test_empty_playlist_is_created_and_done(self, recorder):
        gw = FakeGateway()
        outcome = _restore(gw, PlaylistRecord(name="Empty"), recorder)
        assert outcome.state == PlaylistState.DONE
        assert gw.added == []
        assert recorder.progress == []
        assert recorder.completed[0].total_tracks_attempted == 0


class TestRestoreDocument:

    def test_identical_uris_collapse_to_single_track(self, recorder):
        gw = FakeGateway()
        same = make_track(42)
        document = [PlaylistRecord(name="Repeat", tracks=(same,) * 250)]
        report = restore_document(
            gw,
            document,
            "user-1",
            on_progress=recorder.progress.append,
            on_complete=recorder.completed.append,
        )
        assert len(gw.created) == 1
        assert gw.added == [("new-1", [same.uri[14:]])]
        assert recorder.completed[0].total_tracks_attempted == 1
        assert recorder.progress[-1].percent_complete == pytest.approx(100.0)
        assert report.playlists[0].state == PlaylistState.DONE

    def test_create_failure_does_not_abort_run(self):
        gw = FakeGateway()
        gw.fail_create.add("Second")
        document = [make_playlist("First", 5), make_playlist("Second", 5), make_playlist("Third", 5)]
        report = restore_document(gw, document, "user-1")
        assert [p.state for p in report.playlists] == [
            PlaylistState.DONE, PlaylistState.FAILED, PlaylistState.DONE,
        ]
        assert [p.name for p in report.done] == ["First", "Third"]
        assert [p.name for p in report.failed] == ["Second"]
        assert len(gw.added) == 2

    def test_dedupe_is_per_playlist(self):
        gw = FakeGateway()
        document = [make_playlist("A", 3), make_playlist("B", 3)]
        restore_document(gw, document, "user-1")
        assert [len(ids) for _, ids in gw.added] == [3, 3]
