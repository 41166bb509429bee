"""
Tag writing for downloaded audio files.

Writes title, artist, album, year, track number and cover art using
mutagen:

    .mp3  ID3v2 frames: TIT2, TPE1, TALB, TDRC, TRCK, APIC (front cover)
    .m4a  iTunes atoms: ©nam, ©ART, ©alb, ©day, trkn, covr

Tagging is best-effort. Failures raise TagError, which the download
pipeline swallows; a missing or broken cover only skips the cover.
"""

from io import BytesIO
from pathlib import Path

import requests
from mutagen.id3 import APIC, ID3, ID3NoHeaderError, TALB, TDRC, TIT2, TPE1, TRCK
from mutagen.mp4 import MP4, MP4Cover
from PIL import Image

from ssdl.core.exceptions import TagError
from ssdl.core.logger import get_logger
from ssdl.spotify.models import Track

logger = get_logger(__name__)


ARTWORK_TIMEOUT = 10
ARTWORK_MAX_SIZE = 1000


def download_artwork(url: str | None, session: requests.Session | None = None) -> bytes | None:
    """
    Download album artwork and normalize it to JPEG.

    Args:
        url: Image URL, or None.
        session: Optional requests session to reuse connections.

    Returns:
        JPEG image data, the original bytes if they cannot be re-encoded,
        or None if the download fails.

    Processing:
        - RGBA/LA/P images are converted to RGB
        - Images larger than 1000x1000 are shrunk (aspect ratio kept)
        - Encoded as JPEG, quality 90
    """
    if not url:
        return None

    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, timeout=ARTWORK_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.debug(f"Artwork download failed for {url}: {e}")
        return None

    image_data = response.content
    try:
        with Image.open(BytesIO(image_data)) as img:
            if img.mode != "RGB":
                img = img.convert("RGB")
            if img.width > ARTWORK_MAX_SIZE or img.height > ARTWORK_MAX_SIZE:
                img.thumbnail((ARTWORK_MAX_SIZE, ARTWORK_MAX_SIZE), Image.Resampling.LANCZOS)
            output = BytesIO()
            img.save(output, format="JPEG", quality=90, optimize=True)
            return output.getvalue()
    except OSError as e:
        logger.debug(f"Artwork could not be re-encoded, embedding as-is: {e}")
        return image_data


class TagWriter:
    """
    Writes Spotify metadata into downloaded files.

    Example:
        TagWriter().write(Path("~/Music/ssdl/B — Y.mp3"), track)
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session

    def write(self, file_path: Path, track: Track) -> None:
        """
        Embed the track's metadata into the file.

        Args:
            file_path: Downloaded .mp3 or .m4a file.
            track: Track whose metadata is written.

        Raises:
            TagError: If the format is unsupported or writing fails.
        """
        suffix = file_path.suffix.lower()
        if suffix not in (".mp3", ".m4a"):
            raise TagError(
                f"Unsupported audio format for tagging: {suffix}",
                details={"file_path": str(file_path)}
            )

        artwork = download_artwork(track.artwork_url, self._session)

        try:
            if suffix == ".mp3":
                self._write_id3(file_path, track, artwork)
            else:
                self._write_mp4(file_path, track, artwork)
        except Exception as e:
            raise TagError(
                f"Failed to write tags to {file_path.name}: {e}",
                details={"file_path": str(file_path), "original_error": str(e)}
            ) from e

        logger.debug(f"Tags written: {file_path.name}")

    def _write_id3(self, file_path: Path, track: Track, artwork: bytes | None) -> None:
        try:
            tags = ID3(file_path)
        except ID3NoHeaderError:
            tags = ID3()

        tags.add(TIT2(encoding=3, text=track.title))
        tags.add(TPE1(encoding=3, text=track.artist))
        tags.add(TALB(encoding=3, text=track.album))
        if track.year:
            tags.add(TDRC(encoding=3, text=track.year))
        if track.track_number:
            tags.add(TRCK(encoding=3, text=str(track.track_number)))
        if artwork:
            tags.delall("APIC")
            tags.add(APIC(encoding=3, mime="image/jpeg", type=3, desc="Cover", data=artwork))

        tags.save(file_path, v2_version=3)

    def _write_mp4(self, file_path: Path, track: Track, artwork: bytes | None) -> None:
        audio = MP4(file_path)
        if audio.tags is None:
            audio.add_tags()

        audio["\xa9nam"] = [track.title]
        audio["\xa9ART"] = [track.artist]
        audio["\xa9alb"] = [track.album]
        if track.year:
            audio["\xa9day"] = [track.year]
        if track.track_number:
            audio["trkn"] = [(track.track_number, 0)]
        if artwork:
            audio["covr"] = [MP4Cover(artwork, imageformat=MP4Cover.FORMAT_JPEG)]

        audio.save()
