"""
Image encoding strategies

WebPTranscoder re-encodes images to WebP with Pillow and produces thumbnails.
PassthroughEncoder copies files untouched; it is selected when the installed
Pillow build cannot write WebP, so the degraded mode is visible through
``encoder.name`` instead of surfacing as a silent fallback.
"""
import io
import logging
import shutil
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageOps, features

from config.import_settings import THUMBNAIL_QUALITY, THUMBNAIL_SIZE, WEBP_QUALITY
from services.media_files import get_mime_type

logger = logging.getLogger(__name__)


class ImageEncoder:
    """Interface for turning a source image into stored variants"""

    name = "base"
    supports_thumbnails = False

    def output_suffix(self, source: Path) -> str:
        """Extension the stored file will carry"""
        raise NotImplementedError

    def encode(self, source: Path, destination: Path) -> Path:
        """Write the stored version of ``source`` to ``destination``"""
        raise NotImplementedError

    def make_thumbnail(self, image_path: Path, thumbnail_path: Path) -> Optional[Path]:
        """Write a thumbnail next to the stored image, or return None when unsupported"""
        return None

    def render_variant(self, source: Path, width: int) -> Tuple[bytes, str]:
        """Return (content, media_type) of ``source`` resized to ``width`` pixels"""
        raise NotImplementedError


class WebPTranscoder(ImageEncoder):
    """Re-encodes images to WebP"""

    name = "webp"
    supports_thumbnails = True

    def __init__(self, quality: int = WEBP_QUALITY, thumbnail_quality: int = THUMBNAIL_QUALITY,
                 thumbnail_size: Tuple[int, int] = THUMBNAIL_SIZE):
        self.quality = quality
        self.thumbnail_quality = thumbnail_quality
        self.thumbnail_size = thumbnail_size

    def output_suffix(self, source: Path) -> str:
        return ".webp"

    def encode(self, source: Path, destination: Path) -> Path:
        if source.suffix.lower() == ".webp":
            shutil.copyfile(source, destination)
            return destination

        with Image.open(source) as image:
            self._prepare(image).save(destination, "WEBP", quality=self.quality)
        return destination

    def make_thumbnail(self, image_path: Path, thumbnail_path: Path) -> Optional[Path]:
        with Image.open(image_path) as image:
            thumbnail = self._prepare(image)
            # thumbnail() keeps the aspect ratio and never enlarges
            thumbnail.thumbnail(self.thumbnail_size, Image.Resampling.LANCZOS)
            thumbnail.save(thumbnail_path, "WEBP", quality=self.thumbnail_quality)
        return thumbnail_path

    def render_variant(self, source: Path, width: int) -> Tuple[bytes, str]:
        with Image.open(source) as image:
            variant = self._prepare(image)
            if width < variant.width:
                height = max(1, round(variant.height * width / variant.width))
                variant = variant.resize((width, height), Image.Resampling.LANCZOS)
            buffer = io.BytesIO()
            variant.save(buffer, "WEBP", quality=self.quality)
        return buffer.getvalue(), "image/webp"

    @staticmethod
    def _prepare(image: Image.Image) -> Image.Image:
        """Apply EXIF orientation and normalise the mode to one WebP can store"""
        image = ImageOps.exif_transpose(image)
        if image.mode not in ("RGB", "RGBA"):
            has_alpha = image.mode in ("LA", "PA") or "transparency" in image.info
            image = image.convert("RGBA" if has_alpha else "RGB")
        return image


class PassthroughEncoder(ImageEncoder):
    """Stores images exactly as received"""

    name = "passthrough"

    def output_suffix(self, source: Path) -> str:
        return source.suffix

    def encode(self, source: Path, destination: Path) -> Path:
        shutil.copyfile(source, destination)
        return destination

    def render_variant(self, source: Path, width: int) -> Tuple[bytes, str]:
        return source.read_bytes(), get_mime_type(source.name)


def webp_supported() -> bool:
    """Whether the installed Pillow build can encode WebP"""
    return bool(features.check("webp"))


def select_image_encoder() -> ImageEncoder:
    """Pick the best encoder available on this machine"""
    if webp_supported():
        return WebPTranscoder()
    logger.warning("Pillow was built without WebP support, images will be stored unconverted")
    return PassthroughEncoder()
