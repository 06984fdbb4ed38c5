"""
Bulk import of properties from media folders

Each property folder becomes one Property with its gallery and documents.
Folders are processed one after another; a failing folder is recorded in the
report and the import moves on to the next one.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.engine import Engine
from sqlmodel import Session

from config.import_settings import VALID_DISTRICTS
from models.property import Property
from services.folder_naming import parse_folder_name, resolve_district, slugify
from services.folder_walker import (
    UploadedFile, discover_property_folders, district_from_paths, group_uploaded_files, walk_files
)
from services.media_files import MediaKind, classify, document_label, strip_extension
from services.media_storage import MediaStorage, StoredMedia
from services.property_store import (
    add_documents, add_gallery, build_imported_property, find_or_create_area, generate_unique_slug
)
from services.video_probe import VideoProbe

logger = logging.getLogger(__name__)


class ImportInputError(Exception):
    """The import cannot start: bad path, nothing to import"""
    pass


@dataclass
class ImportReport:
    """Outcome of one import run"""
    total_folders: int = 0
    success_list: List[str] = field(default_factory=list)
    error_list: List[str] = field(default_factory=list)

    @property
    def successful(self) -> int:
        return len(self.success_list)

    @property
    def failed(self) -> int:
        return len(self.error_list)

    def add_error(self, folder_name: str, message: str) -> None:
        self.error_list.append(f"{folder_name}: {message}")

    def to_response(self) -> dict:
        return {
            "message": "Import completed",
            "results": {
                "success": list(self.success_list),
                "errors": list(self.error_list),
            },
            "total": self.total_folders,
            "successful": self.successful,
            "failed": self.failed,
        }


@dataclass(frozen=True)
class SourceFile:
    """A file to import and the subfolder it sits in, if any"""
    path: Path
    filename: str
    category: str = ""


def _upload_category(uploaded: UploadedFile, folder_name: str) -> str:
    parts = uploaded.parts
    if len(parts) >= 2 and parts[-2] != folder_name:
        return parts[-2]
    return ""


@dataclass
class FolderMedia:
    """Media stored for one folder, ready to be persisted"""
    images: List[Tuple[StoredMedia, str]] = field(default_factory=list)
    videos: List[Tuple[StoredMedia, str]] = field(default_factory=list)
    documents: List[Tuple[StoredMedia, str]] = field(default_factory=list)

    @property
    def stored(self) -> List[StoredMedia]:
        return [media for media, _ in self.images + self.videos + self.documents]

    def is_empty(self) -> bool:
        return not (self.images or self.videos or self.documents)


class FolderImporter:
    """Turns property folders into Property records"""

    def __init__(self, engine: Engine, storage: MediaStorage, video_probe: VideoProbe,
                 valid_districts: Iterable[str] = None,
                 session_factory: Callable[[Engine], Session] = Session):
        self.engine = engine
        self.storage = storage
        self.video_probe = video_probe
        self.valid_districts = list(valid_districts) if valid_districts is not None else VALID_DISTRICTS
        self._session_factory = session_factory

    def import_path(self, root) -> ImportReport:
        """Import every property folder found under a server-local directory"""
        if not root:
            raise ImportInputError("Folder path is required")
        root = Path(root)
        if not root.exists():
            raise ImportInputError("Folder does not exist")
        if not root.is_dir():
            raise ImportInputError("Path is not a directory")

        folders = discover_property_folders(root)
        if not folders:
            raise ImportInputError("No property folders or files found in directory")

        self._log_start(len(folders), str(root))
        report = ImportReport(total_folders=len(folders))
        for folder in folders:
            sources = [
                SourceFile(path, path.name, path.parent.name if path.parent != folder.path else "")
                for path in walk_files(folder.path)
            ]
            self._import_folder(report, folder.name, sources)
        self._log_finish(report)
        return report

    def import_uploads(self, files: Sequence[UploadedFile]) -> ImportReport:
        """Import browser-uploaded files grouped by the folder they were picked from"""
        if not files:
            raise ImportInputError("No files uploaded")

        groups = group_uploaded_files(files, self.valid_districts)
        if not groups:
            raise ImportInputError("No property folders found in uploaded files")

        self._log_start(len(groups), "uploaded files")
        report = ImportReport(total_folders=len(groups))
        for folder_name, grouped in groups.items():
            sources = [
                SourceFile(uploaded.local_path, uploaded.filename, _upload_category(uploaded, folder_name))
                for uploaded in grouped
            ]
            fallback = district_from_paths(grouped, self.valid_districts)
            self._import_folder(report, folder_name, sources, fallback_district=fallback)
        self._log_finish(report)
        return report

    def _log_start(self, folder_count: int, source: str) -> None:
        logger.info(
            f"Importing {folder_count} folder(s) from {source} "
            f"(image encoder: {self.storage.encoder.name}, video probe: {self.video_probe.name})"
        )

    def _log_finish(self, report: ImportReport) -> None:
        logger.info(
            f"Import finished: {report.successful} succeeded, {report.failed} failed, "
            f"{report.total_folders} folder(s) total"
        )

    def _import_folder(self, report: ImportReport, folder_name: str, sources: List[SourceFile],
                       fallback_district: Optional[str] = None) -> None:
        media = FolderMedia()
        try:
            created = self._process_folder(folder_name, sources, media, fallback_district)
        except Exception as e:
            logger.error(f"Error importing folder '{folder_name}': {e}", exc_info=True)
            self.storage.discard(media.stored)
            report.add_error(folder_name, str(e))
            return
        if created is not None:
            report.success_list.append(folder_name)

    def _process_folder(self, folder_name: str, sources: List[SourceFile], media: FolderMedia,
                        fallback_district: Optional[str]) -> Optional[int]:
        parsed = parse_folder_name(folder_name, self.valid_districts)
        property_name = parsed.property_name
        if not parsed.matched and fallback_district:
            district = fallback_district
        else:
            district = resolve_district(parsed, folder_name)

        self._store_media(property_name, sources, media)
        if media.is_empty():
            logger.info(f"Skipping folder '{folder_name}': no importable media")
            return None

        with self._session_factory(self.engine) as session:
            property_obj = self._persist(session, property_name, district, media)
            session.commit()
            property_id = property_obj.id

        logger.info(
            f"Imported '{folder_name}' as property {property_id}: {len(media.images)} image(s), "
            f"{len(media.videos)} video(s), {len(media.documents)} document(s)"
        )
        return property_id

    def _store_media(self, property_name: str, sources: List[SourceFile], media: FolderMedia) -> None:
        for source_file in sources:
            source, filename = source_file.path, source_file.filename
            kind = classify(filename)
            if kind is None:
                continue
            if kind == MediaKind.image:
                stored = self.storage.store_image(source, filename)
                media.images.append((stored, f"{property_name} - {filename}"))
            elif kind == MediaKind.video:
                if not self.video_probe.accepts(source):
                    continue
                stored = self.storage.store_video(source, filename)
                media.videos.append((stored, strip_extension(filename)))
            else:
                stored = self.storage.store_document(source, filename)
                media.documents.append((stored, document_label(filename, source_file.category)))

    def _persist(self, session: Session, property_name: str, district: str, media: FolderMedia) -> Property:
        area = find_or_create_area(session, district)
        slug = generate_unique_slug(session, slugify(property_name, district))
        property_obj = build_imported_property(property_name, district, area.id, slug)
        session.add(property_obj)
        session.flush()

        add_gallery(
            session,
            property_obj.id,
            [(stored.url, alt) for stored, alt in media.images],
            [(stored.url, title) for stored, title in media.videos],
        )
        add_documents(session, property_obj.id, media.documents)
        return property_obj


def summarize(reports: Iterable[ImportReport]) -> Dict[str, int]:
    """Totals across several runs, used by the CLI when importing many roots"""
    totals = {"total": 0, "successful": 0, "failed": 0}
    for report in reports:
        totals["total"] += report.total_folders
        totals["successful"] += report.successful
        totals["failed"] += report.failed
    return totals
