"""
Video validation - only widescreen (16:9) videos are imported

FFProbeVideoProbe reads the first video stream's dimensions with ffprobe.
AcceptAllProbe is used when ffprobe is not installed and accepts every video.
"""
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Tuple

from config.import_settings import (
    FFPROBE_BINARY, FFPROBE_TIMEOUT_SECONDS, VIDEO_RATIO_TOLERANCE, VIDEO_TARGET_RATIO
)

logger = logging.getLogger(__name__)


class VideoProbeError(Exception):
    """Raised when a video's dimensions cannot be read"""
    pass


def is_widescreen(width: int, height: int, tolerance: float = VIDEO_RATIO_TOLERANCE) -> bool:
    """True when width/height is within ``tolerance`` of 16:9"""
    if not width or not height:
        return False
    return abs(width / height - VIDEO_TARGET_RATIO) < tolerance


class VideoProbe:
    """Interface for deciding whether a video may be imported"""

    name = "base"

    def accepts(self, video_path: Path) -> bool:
        raise NotImplementedError


class AcceptAllProbe(VideoProbe):
    """Accepts every video without inspecting it"""

    name = "accept-all"

    def accepts(self, video_path: Path) -> bool:
        return True


class FFProbeVideoProbe(VideoProbe):
    """Checks the aspect ratio of the first video stream with ffprobe"""

    name = "ffprobe"

    def __init__(self, binary: str = FFPROBE_BINARY, tolerance: float = VIDEO_RATIO_TOLERANCE,
                 timeout: int = FFPROBE_TIMEOUT_SECONDS):
        self.binary = binary
        self.tolerance = tolerance
        self.timeout = timeout

    def dimensions(self, video_path: Path) -> Optional[Tuple[int, int]]:
        """Return (width, height) of the first video stream, None when it has none"""
        cmd = [
            self.binary,
            "-v", "error",
            "-select_streams", "v:0",
            "-show_entries", "stream=width,height",
            "-of", "csv=s=x:p=0",
            str(Path(video_path).resolve()),
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise VideoProbeError(f"ffprobe timed out for {video_path}") from e
        except OSError as e:
            raise VideoProbeError(f"Could not run ffprobe: {e}") from e

        if result.returncode != 0:
            raise VideoProbeError(f"ffprobe failed for {video_path}: {result.stderr.strip()}")

        output = result.stdout.strip()
        if not output:
            return None
        try:
            width, height = (int(value) for value in output.splitlines()[0].split("x")[:2])
        except ValueError as e:
            raise VideoProbeError(f"Unexpected ffprobe output for {video_path}: {output!r}") from e
        return width, height

    def accepts(self, video_path: Path) -> bool:
        try:
            dims = self.dimensions(video_path)
        except VideoProbeError as e:
            # Unreadable videos are kept rather than dropped
            logger.warning(f"Could not check aspect ratio, accepting video: {e}")
            return True
        if dims is None:
            return False
        width, height = dims
        accepted = is_widescreen(width, height, self.tolerance)
        if not accepted:
            logger.info(f"Skipping video {Path(video_path).name}: {width}x{height} is not 16:9")
        return accepted


def select_video_probe(binary: str = FFPROBE_BINARY) -> VideoProbe:
    """Use ffprobe when it is on PATH, otherwise accept all videos"""
    if shutil.which(binary):
        return FFProbeVideoProbe(binary=binary)
    logger.warning("ffprobe not found, accepting all videos")
    return AcceptAllProbe()
