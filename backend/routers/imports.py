"""
Import router - bulk creation of properties from media folders
"""
import logging
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from config.db_connection import engine
from config.import_settings import IMPORT_BROWSE_ROOTS
from services.folder_importer import FolderImporter, ImportInputError
from services.folder_walker import UploadedFile
from services.image_encoder import select_image_encoder
from services.media_storage import MediaStorage
from services.video_probe import select_video_probe

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties", tags=["imports"])


class ImportFolderRequest(BaseModel):
    """Server-local folder to import"""
    folder_path: Optional[str] = Field(None, alias="folderPath")

    model_config = {"populate_by_name": True}


def get_media_storage() -> MediaStorage:
    return MediaStorage(select_image_encoder())


def get_importer(storage: MediaStorage = Depends(get_media_storage)) -> FolderImporter:
    """FastAPI dependency building an importer with the encoders available on this host"""
    return FolderImporter(engine, storage, select_video_probe())


@router.post("/import-folder")
def import_folder(request: ImportFolderRequest, importer: FolderImporter = Depends(get_importer)):
    """Import every property folder under a directory on the server"""
    try:
        folder_path = (request.folder_path or "").strip()
        report = importer.import_path(folder_path)
        return report.to_response()
    except ImportInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error importing properties: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error importing properties: {e}")


def _save_uploads(files: List[UploadFile], workdir: Path) -> List[UploadedFile]:
    """Write uploads to ``workdir``; the client filename carries the relative path"""
    saved = []
    for index, upload in enumerate(files):
        relative_path = upload.filename or f"file-{index}"
        local_path = workdir / f"{index}{Path(relative_path).suffix}"
        with local_path.open("wb") as buffer:
            shutil.copyfileobj(upload.file, buffer)
        saved.append(UploadedFile(relative_path=relative_path, local_path=local_path))
    return saved


@router.post("/import-folder-files")
def import_folder_files(files: List[UploadFile] = File(default=[]),
                        importer: FolderImporter = Depends(get_importer)):
    """Import a folder picked in the browser and uploaded file by file"""
    try:
        with tempfile.TemporaryDirectory(prefix="property-import-") as workdir:
            uploaded = _save_uploads(files, Path(workdir))
            report = importer.import_uploads(uploaded)
        return report.to_response()
    except ImportInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error importing uploaded folders: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error importing properties: {e}")


@router.post("/upload-folder")
def upload_folder(files: List[UploadFile] = File(default=[]),
                  storage: MediaStorage = Depends(get_media_storage)):
    """Stage a browser-picked folder on the server; import it later with import-folder"""
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")
    try:
        batch_dir = storage.new_incoming_batch()
        saved = 0
        for upload in files:
            if storage.stage_file(batch_dir, upload.filename or "", upload.file) is not None:
                saved += 1
    except Exception as e:
        logger.error(f"Error uploading folder: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error uploading folder: {e}")

    logger.info(f"Staged {saved} file(s) in {batch_dir}")
    return {
        "message": "Upload completed",
        "folderPath": str(batch_dir),
        "uploadId": batch_dir.name,
        "filesSaved": saved,
    }


def get_browse_roots() -> List[Path]:
    return [root.resolve() for root in IMPORT_BROWSE_ROOTS]


def _is_allowed(path: Path, roots: List[Path]) -> bool:
    return any(path == root or root in path.parents for root in roots)


@router.get("/browse-folders")
async def browse_folders(path: str = "", roots: List[Path] = Depends(get_browse_roots)):
    """List subfolders below the allowed import roots for the folder picker"""
    requested = path.strip()
    if not requested:
        available = [{"name": root.name or str(root), "path": str(root)} for root in roots if root.is_dir()]
        return {"roots": available, "folders": [], "parent_path": None, "current_path": None}

    resolved = Path(requested).resolve()
    if not _is_allowed(resolved, roots):
        raise HTTPException(status_code=400, detail="Path not allowed")
    if not resolved.is_dir():
        raise HTTPException(status_code=404, detail="Folder not found")

    try:
        folders = sorted(
            ({"name": child.name, "path": str(child)}
             for child in resolved.iterdir()
             if child.is_dir() and not child.name.startswith(".")),
            key=lambda folder: folder["name"].lower()
        )
    except OSError as e:
        logger.error(f"Error listing {resolved}: {e}")
        raise HTTPException(status_code=500, detail="Failed to list folders")

    parent_path = None if resolved in roots else str(resolved.parent)
    return {"roots": [], "folders": folders, "parent_path": parent_path, "current_path": str(resolved)}
