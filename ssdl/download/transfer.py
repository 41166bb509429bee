"""
Audio transfer through the external yt-dlp executable.

yt-dlp downloads the source and ffmpeg (invoked by yt-dlp) extracts and
transcodes the audio. The process is run with --newline so every progress
update arrives as its own stdout line:

    [download]  45.2% of  4.81MiB at  1.23MiB/s ETA 00:03
    [ExtractAudio] Destination: /music/Song — Artist.mp3

Progress is reported through a callback as (percent, message) pairs. The
percent never decreases within one transfer: values that do not exceed
the last reported one are dropped.
"""

import re
import subprocess
import tempfile
from pathlib import Path
from typing import Callable

from ssdl.core.exceptions import TransferError
from ssdl.core.logger import get_logger

logger = get_logger(__name__)


ProgressCallback = Callable[[float, str], None]

PROGRESS_PATTERN = re.compile(r"\[download\]\s+([\d.]+)%")
POST_PROCESS_MARKERS = ("[ExtractAudio]", "Post-process")

STDERR_TAIL_CHARS = 500


class ProgressParser:
    """
    Turns yt-dlp output lines into progress callbacks.

    Attributes:
        last_percent: Highest percent reported so far.
    """

    def __init__(self, on_progress: ProgressCallback | None = None) -> None:
        self._on_progress = on_progress
        self.last_percent = 0.0

    def feed(self, line: str) -> None:
        """Parse one output line."""
        match = PROGRESS_PATTERN.search(line)
        if match:
            try:
                percent = float(match.group(1))
            except ValueError:
                percent = None
            if percent is not None and percent > self.last_percent:
                self.last_percent = percent
                self._emit(percent, "Downloading...")

        if any(marker in line for marker in POST_PROCESS_MARKERS):
            self._emit(self.last_percent, "Converting...")

    def finish(self) -> None:
        self.last_percent = 100.0
        self._emit(100.0, "Done")

    def _emit(self, percent: float, message: str) -> None:
        if self._on_progress is not None:
            self._on_progress(percent, message)


class YtDlpTransfer:
    """
    Downloads and transcodes audio by running yt-dlp.

    Attributes:
        executable: yt-dlp command name or path.
        audio_format: Target format passed to --audio-format ("mp3", "m4a").
        audio_quality: "best" or a bitrate in kbps ("320", ...).

    Example:
        transfer = YtDlpTransfer(audio_format="mp3")
        path = transfer.download(url, Path("~/Music/ssdl"), "Song — Artist", print)
    """

    def __init__(
        self,
        executable: str = "yt-dlp",
        audio_format: str = "mp3",
        audio_quality: str = "best"
    ) -> None:
        self.executable = executable
        self.audio_format = audio_format
        self.audio_quality = audio_quality

    def build_command(self, url: str, output_template: str) -> list[str]:
        """Build the yt-dlp argument list."""
        quality = "0" if self.audio_quality == "best" else f"{self.audio_quality}K"
        return [
            self.executable,
            url,
            "--extract-audio",
            "--audio-format", self.audio_format,
            "--audio-quality", quality,
            "--output", output_template,
            "--no-playlist",
            "--no-warnings",
            "--progress",
            "--newline",
            "--no-check-certificates",
        ]

    def download(
        self,
        url: str,
        output_dir: Path,
        basename: str,
        on_progress: ProgressCallback | None = None
    ) -> Path:
        """
        Download a source as an audio file.

        Args:
            url: Source URL.
            output_dir: Existing directory to write into.
            basename: File name without extension (already sanitized).
            on_progress: Receives (percent, message) as the transfer runs.

        Returns:
            Path of the resulting audio file: output_dir/basename.<format>.

        Raises:
            TransferError: With spawn_failed=True if yt-dlp cannot be started,
                           or with exit_code set if it exits non-zero.
        """
        output_template = str(output_dir / f"{basename}.%(ext)s")
        expected_path = output_dir / f"{basename}.{self.audio_format}"
        command = self.build_command(url, output_template)
        parser = ProgressParser(on_progress)

        logger.debug(f"Running: {' '.join(command)}")

        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr_file:
            try:
                process = subprocess.Popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    bufsize=1,
                )
            except OSError as e:
                raise TransferError(
                    f"Failed to spawn yt-dlp: {e}",
                    details={"url": url, "original_error": str(e)},
                    spawn_failed=True
                ) from e

            try:
                for line in process.stdout:
                    parser.feed(line)
                exit_code = process.wait()
            except BaseException:
                process.kill()
                process.wait()
                raise
            finally:
                process.stdout.close()

            stderr_file.seek(0)
            stderr = stderr_file.read()

        if exit_code != 0:
            raise TransferError(
                _failure_message(exit_code, stderr),
                details={"url": url, "stderr": stderr[-STDERR_TAIL_CHARS:]},
                exit_code=exit_code
            )

        parser.finish()
        return expected_path


def _failure_message(exit_code: int, stderr: str) -> str:
    if exit_code < 0:
        return f"yt-dlp was terminated by signal {-exit_code}"

    lines = [line for line in stderr.strip().splitlines() if line.strip()]
    reason = lines[-1] if lines else "no error output"
    return f"yt-dlp exited with code {exit_code}: {reason}"
