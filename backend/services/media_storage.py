"""
Local media storage for imported property files

Layout under UPLOAD_ROOT:
    properties/images/{timestamp}-{name}.webp
    properties/images/thumbnails/thumb-{timestamp}-{name}.webp
    properties/videos/{timestamp}-{name}.{ext}
    properties/files/{timestamp}-{name}.{ext}
    incoming/{timestamp}/...        (folder uploads waiting to be imported)
    developers/{timestamp}-{name}.webp (developer logos)
"""
import logging
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional

from config.import_settings import (
    DEVELOPER_LOGOS_SUBDIR, INCOMING_SUBDIR, PROPERTIES_SUBDIR, PUBLIC_UPLOAD_PREFIX, THUMBNAIL_PREFIX,
    UPLOAD_ROOT
)
from services.image_encoder import ImageEncoder
from services.media_files import get_mime_type, is_ignored, sanitize_filename, strip_extension

logger = logging.getLogger(__name__)

IMAGES_DIR = "images"
THUMBNAILS_DIR = "thumbnails"
VIDEOS_DIR = "videos"
FILES_DIR = "files"


@dataclass
class StoredMedia:
    """A file written to storage and the paths that point at it"""
    url: str
    filename: str
    size: int
    mime_type: str
    path: Path
    thumbnail_path: Optional[Path] = None
    thumbnail_url: Optional[str] = None

    @property
    def written_paths(self) -> List[Path]:
        return [p for p in (self.path, self.thumbnail_path) if p is not None]


def _millis() -> int:
    return int(time.time() * 1000)


class MediaStorage:
    """Writes images, videos and documents under the uploads directory"""

    def __init__(self, encoder: ImageEncoder, upload_root: Path = UPLOAD_ROOT,
                 public_prefix: str = PUBLIC_UPLOAD_PREFIX, clock: Callable[[], int] = _millis):
        self.encoder = encoder
        self.root = Path(upload_root) / PROPERTIES_SUBDIR
        self.public_prefix = public_prefix.rstrip("/")
        self._clock = clock

    @property
    def images_dir(self) -> Path:
        return self.root / IMAGES_DIR

    @property
    def thumbnails_dir(self) -> Path:
        return self.root / IMAGES_DIR / THUMBNAILS_DIR

    @property
    def logos_dir(self) -> Path:
        return self.root.parent / DEVELOPER_LOGOS_SUBDIR

    def _unique_destination(self, directory: Path, name: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        timestamp = self._clock()
        destination = directory / f"{timestamp}-{name}"
        while destination.exists():
            timestamp += 1
            destination = directory / f"{timestamp}-{name}"
        return destination

    def _url_for(self, path: Path) -> str:
        relative = path.relative_to(self.root.parent).as_posix()
        return f"{self.public_prefix}/{relative}"

    def _stored(self, path: Path, thumbnail_path: Optional[Path] = None) -> StoredMedia:
        return StoredMedia(
            url=self._url_for(path),
            filename=path.name,
            size=path.stat().st_size,
            mime_type=get_mime_type(path.name),
            path=path,
            thumbnail_path=thumbnail_path,
            thumbnail_url=self._url_for(thumbnail_path) if thumbnail_path else None,
        )

    def _encode(self, source: Path, destination: Path) -> None:
        try:
            self.encoder.encode(Path(source), destination)
        except Exception:
            # Pillow may leave a partial file behind
            self._remove(destination)
            raise

    def store_image(self, source: Path, original_name: str) -> StoredMedia:
        """Encode an image (WebP when available) and write its thumbnail"""
        stem = sanitize_filename(strip_extension(original_name))
        suffix = self.encoder.output_suffix(Path(original_name))
        destination = self._unique_destination(self.images_dir, f"{stem}{suffix}")
        self._encode(source, destination)

        thumbnail_path = None
        if self.encoder.supports_thumbnails:
            self.thumbnails_dir.mkdir(parents=True, exist_ok=True)
            target = self.thumbnails_dir / f"{THUMBNAIL_PREFIX}{destination.name}"
            try:
                thumbnail_path = self.encoder.make_thumbnail(destination, target)
            except Exception as e:
                # The image is still usable without its thumbnail
                logger.warning(f"Failed to generate thumbnail for {original_name}: {e}")
                self._remove(target)
        return self._stored(destination, thumbnail_path)

    def store_logo(self, source: Path, original_name: str) -> StoredMedia:
        """Encode a developer logo; logos get no thumbnail"""
        stem = sanitize_filename(strip_extension(original_name)) or "logo"
        suffix = self.encoder.output_suffix(Path(original_name))
        destination = self._unique_destination(self.logos_dir, f"{stem}{suffix}")
        self._encode(source, destination)
        return self._stored(destination)

    def _copy(self, source: Path, original_name: str, subdir: str) -> StoredMedia:
        destination = self._unique_destination(self.root / subdir, sanitize_filename(original_name))
        shutil.copyfile(source, destination)
        return self._stored(destination)

    def store_video(self, source: Path, original_name: str) -> StoredMedia:
        return self._copy(source, original_name, VIDEOS_DIR)

    def store_document(self, source: Path, original_name: str) -> StoredMedia:
        return self._copy(source, original_name, FILES_DIR)

    def discard(self, stored: List[StoredMedia]) -> None:
        """Remove files written for a folder whose import did not complete"""
        for media in stored:
            for path in media.written_paths:
                self._remove(path)

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove {path}: {e}")

    def resolve_public_path(self, relative_path: str) -> Optional[Path]:
        """Map a path below /uploads to a file on disk, refusing anything outside it"""
        uploads_root = self.root.parent.resolve()
        candidate = (uploads_root / relative_path).resolve()
        if candidate != uploads_root and uploads_root not in candidate.parents:
            return None
        return candidate

    @property
    def incoming_dir(self) -> Path:
        return self.root.parent / INCOMING_SUBDIR

    def new_incoming_batch(self) -> Path:
        """Empty directory for one folder upload, named after the upload time"""
        self.incoming_dir.mkdir(parents=True, exist_ok=True)
        batch_id = self._clock()
        while (self.incoming_dir / str(batch_id)).exists():
            batch_id += 1
        batch_dir = self.incoming_dir / str(batch_id)
        batch_dir.mkdir()
        return batch_dir

    def stage_file(self, batch_dir: Path, relative_path: str, content: BinaryIO) -> Optional[Path]:
        """Write an uploaded file below ``batch_dir`` keeping its relative path

        Hidden files, OS metadata and paths escaping the batch directory are
        skipped and return None.
        """
        parts = [part for part in relative_path.replace("\\", "/").split("/") if part not in ("", ".")]
        if not parts or ".." in parts or any(is_ignored(part) for part in parts):
            return None
        destination = batch_dir.joinpath(*parts)
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("wb") as buffer:
            shutil.copyfileobj(content, buffer)
        return destination
