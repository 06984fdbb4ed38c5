"""
Uploads router - stores admin uploads and serves property media from local storage
"""
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import FileResponse, Response
from PIL import UnidentifiedImageError

from config.import_settings import (
    MAX_TRANSFORM_WIDTH, TRANSFORM_CACHE_CAPACITY, TRANSFORM_CACHE_TTL_SECONDS
)
from services.image_encoder import select_image_encoder
from services.media_files import IMAGE_EXTENSIONS, MediaKind, classify, get_mime_type
from services.media_storage import MediaStorage, StoredMedia
from services.transform_cache import TransformCache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])

CACHE_HEADERS = {
    "Cache-Control": "public, max-age=31536000, immutable",
    "Access-Control-Allow-Origin": "*"
}


class UploadService:
    """Looks up stored files and renders resized variants through a bounded cache"""

    def __init__(self, storage: MediaStorage, cache: TransformCache):
        self.storage = storage
        self.cache = cache

    def resolve(self, relative_path: str) -> Optional[Path]:
        return self.storage.resolve_public_path(relative_path)

    def variant(self, path: Path, width: int) -> Tuple[bytes, str]:
        # mtime in the key so a replaced file is never served stale
        key = (str(path), width, path.stat().st_mtime_ns)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        rendered = self.storage.encoder.render_variant(path, width)
        self.cache.set(key, rendered)
        return rendered


def build_upload_service() -> UploadService:
    storage = MediaStorage(select_image_encoder())
    cache = TransformCache(TRANSFORM_CACHE_CAPACITY, TRANSFORM_CACHE_TTL_SECONDS)
    return UploadService(storage, cache)


def get_upload_service(request: Request) -> UploadService:
    """The service instance owned by the running application"""
    return request.app.state.upload_service


@router.get("/uploads/{file_path:path}")
async def serve_upload(
    file_path: str,
    w: Optional[int] = Query(None, ge=1, le=MAX_TRANSFORM_WIDTH, description="Resize images to this width"),
    service: UploadService = Depends(get_upload_service)
):
    """Serve a stored file; images can be resized with ?w="""
    path = service.resolve(file_path)
    if path is None:
        raise HTTPException(status_code=403, detail="Access denied")
    if not path.is_file():
        raise HTTPException(status_code=404, detail="File not found")

    if w and path.suffix.lower() in IMAGE_EXTENSIONS:
        try:
            content, media_type = service.variant(path, w)
        except Exception as e:
            logger.error(f"Error resizing {file_path}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Could not resize image")
        return Response(content=content, media_type=media_type, headers=CACHE_HEADERS)

    return FileResponse(path, media_type=get_mime_type(path.name), headers=CACHE_HEADERS)


def _store_upload(upload: UploadFile, store) -> StoredMedia:
    """Spool an upload to a temporary file and hand it to a MediaStorage writer"""
    filename = Path(upload.filename or "").name
    with tempfile.TemporaryDirectory(prefix="property-upload-") as workdir:
        source = Path(workdir) / f"upload{Path(filename).suffix}"
        with source.open("wb") as buffer:
            shutil.copyfileobj(upload.file, buffer)
        return store(source, filename)


def _upload_response(stored: StoredMedia) -> dict:
    return {
        "success": True,
        "url": stored.url,
        "filename": stored.filename,
        "size": stored.size,
        "mime_type": stored.mime_type,
        "thumbnail_url": stored.thumbnail_url,
    }


@router.post("/api/properties/upload-image")
def upload_image(file: UploadFile = File(...), service: UploadService = Depends(get_upload_service)):
    """Store a gallery image (converted to WebP with a thumbnail) or a video"""
    kind = classify(Path(file.filename or "").name)
    if kind not in (MediaKind.image, MediaKind.video):
        raise HTTPException(status_code=400, detail="Only image and video files are accepted")
    try:
        store = service.storage.store_image if kind == MediaKind.image else service.storage.store_video
        stored = _store_upload(file, store)
        logger.info(f"Uploaded {kind.value} {stored.filename}")
        return _upload_response(stored)
    except UnidentifiedImageError:
        raise HTTPException(status_code=400, detail="File is not a valid image")
    except Exception as e:
        logger.error(f"Error uploading image/video: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/api/properties/upload-file")
def upload_file(file: UploadFile = File(...), service: UploadService = Depends(get_upload_service)):
    """Store a downloadable document (brochure, price list, floor plan)"""
    if classify(Path(file.filename or "").name) != MediaKind.document:
        raise HTTPException(status_code=400, detail="Only document files are accepted")
    try:
        stored = _store_upload(file, service.storage.store_document)
        logger.info(f"Uploaded file {stored.filename}")
        return _upload_response(stored)
    except Exception as e:
        logger.error(f"Error uploading file: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/api/developers/upload-logo")
def upload_logo(file: UploadFile = File(...), service: UploadService = Depends(get_upload_service)):
    """Store a developer logo; save the returned url with PATCH /api/developers/{slug}"""
    if classify(Path(file.filename or "").name) != MediaKind.image:
        raise HTTPException(status_code=400, detail="Only image files are accepted")
    try:
        stored = _store_upload(file, service.storage.store_logo)
        logger.info(f"Uploaded logo {stored.filename}")
        return _upload_response(stored)
    except UnidentifiedImageError:
        raise HTTPException(status_code=400, detail="File is not a valid image")
    except Exception as e:
        logger.error(f"Error uploading logo: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
