"""Tests for the sequential download pipeline"""

from unittest.mock import Mock

import pytest

from ssdl.core.exceptions import DownloadError, ResolveError, TagError, TransferError
from ssdl.download.pipeline import DownloadPipeline, TrackState, TrackStatus
from ssdl.youtube.models import MatchConfidence, SourceMatch
from ssdl.youtube.resolver import NO_MATCH_MESSAGE

from fakes import make_track


def verified(url="https://music.youtube.com/watch?v=abc"):
    return SourceMatch(url=url, duration_seconds=200, confidence=MatchConfidence.VERIFIED)


class FakeTransfer:
    """Writes a small file and replays scripted progress"""

    audio_format = "mp3"

    def __init__(self, progress=(), fail_for=()):
        self.progress = list(progress)
        self.fail_for = set(fail_for)
        self.calls = []

    def download(self, url, output_dir, basename, on_progress=None):
        self.calls.append(basename)
        for percent, message in self.progress:
            on_progress(percent, message)
        if basename in self.fail_for:
            raise TransferError("yt-dlp exited with code 1: boom", exit_code=1)
        path = output_dir / f"{basename}.{self.audio_format}"
        path.write_bytes(b"x" * 1234)
        return path


def resolver_failing_for(*titles):
    """Resolver mock that fails for the given titles"""
    def resolve(title, artist, duration_ms):
        if title in titles:
            raise ResolveError(NO_MATCH_MESSAGE)
        return verified()
    return Mock(resolve=Mock(side_effect=resolve))


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "out"


class TestTrackStatus:
    """Test status helpers"""

    def test_advance_never_decreases(self):
        """Lower percent values keep the current percent"""
        status = TrackStatus()
        status.advance(40, "Downloading...")
        status.advance(20, "Converting...")
        assert status.percent == 40
        assert status.message == "Converting..."

    def test_state_groups(self):
        """Active and finished states"""
        assert TrackState.DOWNLOADING.is_active
        assert not TrackState.QUEUED.is_active
        assert TrackState.ERROR.is_finished
        assert not TrackState.METADATA.is_finished


class TestDownloadPipeline:
    """Test the per-track state machine"""

    def test_failed_search_then_success(self, sample_tracks, output_dir):
        """A fails to resolve, B downloads: one result each, in order"""
        pipeline = DownloadPipeline(resolver_failing_for("A"), FakeTransfer(), Mock())

        results = pipeline.run(sample_tracks, output_dir)

        assert [r.success for r in results] == [False, True]
        assert results[0].error == "No match found"
        assert results[0].track.title == "A"
        assert results[1].file_path == output_dir / "B — Y.mp3"
        assert results[1].file_size == 1234
        assert results[1].confidence is MatchConfidence.VERIFIED

    def test_transfer_failure_continues(self, sample_tracks, output_dir):
        """A transfer error fails only that track"""
        transfer = FakeTransfer(fail_for={"A — X"})
        pipeline = DownloadPipeline(resolver_failing_for(), transfer, Mock())

        results = pipeline.run(sample_tracks, output_dir)

        assert [r.success for r in results] == [False, True]
        assert "boom" in results[0].error
        assert transfer.calls == ["A — X", "B — Y"]
        assert pipeline.statuses[0].state is TrackState.ERROR

    def test_one_result_per_track_in_order(self, output_dir):
        """Results follow input order whatever fails"""
        tracks = [make_track(f"T{n}", "Z") for n in range(6)]
        pipeline = DownloadPipeline(resolver_failing_for("T1", "T4"), FakeTransfer(), Mock())

        results = pipeline.run(tracks, output_dir)

        assert [r.track for r in results] == tracks
        assert [r.success for r in results] == [True, False, True, True, False, True]

    def test_tag_failure_is_still_success(self, sample_tracks, output_dir):
        """Tagging is best-effort"""
        tagger = Mock(write=Mock(side_effect=TagError("no tags")))
        pipeline = DownloadPipeline(resolver_failing_for(), FakeTransfer(), tagger)

        results = pipeline.run(sample_tracks, output_dir)

        assert all(r.success for r in results)
        assert tagger.write.call_count == 2
        assert all(s.state is TrackState.DONE for s in pipeline.statuses)

    def test_displayed_percent_never_decreases(self, sample_tracks, output_dir):
        """Out-of-order progress never moves the bar backwards"""
        transfer = FakeTransfer(progress=[(10, "Downloading..."), (55, "Downloading..."),
                                          (30, "Downloading..."), (55, "Converting...")])
        pipeline = DownloadPipeline(resolver_failing_for(), transfer, Mock())
        seen = []

        def on_update(statuses):
            if statuses[0].state is TrackState.DOWNLOADING:
                seen.append(statuses[0].percent)

        pipeline.run(sample_tracks[:1], output_dir, on_update=on_update)

        assert seen == sorted(seen)
        assert seen[-1] == 55

    def test_state_sequence_is_reported(self, sample_tracks, output_dir):
        """Every state change triggers an update"""
        pipeline = DownloadPipeline(resolver_failing_for(), FakeTransfer(), Mock())
        states = []

        def on_update(statuses):
            state = statuses[0].state
            if not states or states[-1] is not state:
                states.append(state)

        pipeline.run(sample_tracks[:1], output_dir, on_update=on_update)

        assert states == [
            TrackState.QUEUED,
            TrackState.SEARCHING,
            TrackState.DOWNLOADING,
            TrackState.METADATA,
            TrackState.DONE,
        ]

    def test_tracks_processed_one_at_a_time(self, sample_tracks, output_dir):
        """The second track stays queued while the first is worked on"""
        pipeline = DownloadPipeline(resolver_failing_for(), FakeTransfer(), Mock())
        overlaps = []

        def on_update(statuses):
            active = [s for s in statuses if s.state.is_active]
            overlaps.append(len(active))

        pipeline.run(sample_tracks, output_dir, on_update=on_update)

        assert max(overlaps) == 1

    def test_missing_file_size_is_zero(self, sample_tracks, output_dir):
        """A file that cannot be measured reports size 0"""
        transfer = Mock(audio_format="mp3")
        transfer.download.return_value = output_dir / "missing.mp3"
        pipeline = DownloadPipeline(resolver_failing_for(), transfer, Mock())

        results = pipeline.run(sample_tracks[:1], output_dir)

        assert results[0].success
        assert results[0].file_size == 0

    def test_unusable_output_directory(self, sample_tracks, tmp_path):
        """An output path that cannot be created aborts the run"""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        pipeline = DownloadPipeline(Mock(), FakeTransfer(), Mock())

        with pytest.raises(DownloadError):
            pipeline.run(sample_tracks, blocker / "sub")

    def test_low_confidence_is_reported(self, sample_tracks, output_dir):
        """Low-confidence matches are flagged on the result"""
        resolver = Mock()
        resolver.resolve.return_value = SourceMatch(
            url="https://www.youtube.com/watch?v=x", duration_seconds=200, confidence=MatchConfidence.LOW
        )
        pipeline = DownloadPipeline(resolver, FakeTransfer(), Mock())

        results = pipeline.run(sample_tracks[:1], output_dir)

        assert results[0].success
        assert results[0].is_low_confidence


class TestUnexpectedErrors:
    """Errors outside the ssdl hierarchy still give one result per track"""

    def test_tagger_crash_is_swallowed(self, sample_tracks, output_dir):
        """Any tagging failure still counts as a download"""
        tagger = Mock()
        tagger.write.side_effect = RuntimeError("mutagen blew up")
        pipeline = DownloadPipeline(resolver_failing_for(), FakeTransfer(), tagger)

        results = pipeline.run(sample_tracks, output_dir)

        assert [r.success for r in results] == [True, True]
        assert all(s.state is TrackState.DONE for s in pipeline.statuses)

    def test_resolver_crash_fails_one_track(self, sample_tracks, output_dir):
        """The next track is still processed"""
        resolver = Mock()
        resolver.resolve.side_effect = [ValueError("bad response"), verified()]
        pipeline = DownloadPipeline(resolver, FakeTransfer(), Mock())

        results = pipeline.run(sample_tracks, output_dir)

        assert [r.success for r in results] == [False, True]
        assert results[0].error == "Search failed: bad response"

    def test_transfer_crash_fails_one_track(self, sample_tracks, output_dir):
        transfer = Mock(audio_format="mp3")
        transfer.download.side_effect = OSError("disk full")
        pipeline = DownloadPipeline(resolver_failing_for(), transfer, Mock())

        results = pipeline.run(sample_tracks, output_dir)

        assert len(results) == 2
        assert not any(r.success for r in results)
        assert results[1].error == "Download failed: disk full"
        assert results[1].confidence is MatchConfidence.VERIFIED

    def test_interrupt_propagates(self, sample_tracks, output_dir):
        """Ctrl+C is not turned into a track failure"""
        resolver = Mock()
        resolver.resolve.side_effect = KeyboardInterrupt
        pipeline = DownloadPipeline(resolver, FakeTransfer(), Mock())

        with pytest.raises(KeyboardInterrupt):
            pipeline.run(sample_tracks, output_dir)
