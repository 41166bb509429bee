"""
Download module for ssdl.

This module turns a list of Spotify tracks into tagged audio files.

Components:
    - DownloadPipeline: Sequential search -> download -> tag state machine
    - YtDlpTransfer: Runs yt-dlp and reports progress
    - TagWriter: Writes ID3 / MP4 tags and cover art with mutagen

Usage:
    from ssdl.download import DownloadPipeline, TagWriter, YtDlpTransfer
    from ssdl.youtube import YouTubeResolver

    pipeline = DownloadPipeline(YouTubeResolver(), YtDlpTransfer(), TagWriter())
    results = pipeline.run(tracks, output_dir, on_update=redraw)
"""

from ssdl.download.metadata import TagWriter, download_artwork
from ssdl.download.pipeline import (
    DownloadPipeline,
    DownloadResult,
    TrackState,
    TrackStatus,
)
from ssdl.download.transfer import ProgressParser, YtDlpTransfer

__all__ = [
    "DownloadPipeline",
    "DownloadResult",
    "TrackState",
    "TrackStatus",
    "TagWriter",
    "download_artwork",
    "ProgressParser",
    "YtDlpTransfer",
]
