"""
Directory traversal and upload grouping for the folder importer

Nothing here writes to disk or the database; the importer consumes the
sequences produced below.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from config.import_settings import VALID_DISTRICTS
from services.folder_naming import parse_folder_name
from services.media_files import is_ignored


@dataclass(frozen=True)
class PropertyFolder:
    """A directory that becomes one property"""
    name: str
    path: Path


@dataclass(frozen=True)
class UploadedFile:
    """A browser-uploaded file: where it sits locally and the path it had on the client"""
    relative_path: str
    local_path: Path

    @property
    def filename(self) -> str:
        parts = self.parts
        return parts[-1] if parts else ""

    @property
    def parts(self) -> List[str]:
        return [part for part in self.relative_path.replace("\\", "/").split("/") if part]


def walk_files(root: Path) -> Iterator[Path]:
    """Depth-first walk yielding every importable-looking file under ``root``

    Entries are visited in name order so repeated walks of an unchanged tree
    produce the same sequence. Hidden entries and OS metadata files are
    skipped.
    """
    with os.scandir(root) as scanner:
        entries = sorted(scanner, key=lambda entry: entry.name)
    for entry in entries:
        if is_ignored(entry.name):
            continue
        if entry.is_dir(follow_symlinks=False):
            yield from walk_files(Path(entry.path))
        elif entry.is_file():
            yield Path(entry.path)


def discover_property_folders(root: Path) -> List[PropertyFolder]:
    """Subdirectories of ``root``, or ``root`` itself when it only holds files"""
    root = Path(root)
    with os.scandir(root) as scanner:
        entries = sorted(scanner, key=lambda entry: entry.name)

    subdirs = [entry for entry in entries if entry.is_dir() and not entry.name.startswith(".")]
    if subdirs:
        return [PropertyFolder(name=entry.name, path=Path(entry.path)) for entry in subdirs]

    has_files = any(entry.is_file() and not is_ignored(entry.name) for entry in entries)
    if has_files:
        return [PropertyFolder(name=root.name, path=root)]
    return []


def _property_folder_for(uploaded: UploadedFile, valid_districts: List[str]) -> Optional[str]:
    parts = uploaded.parts
    # Any segment following the "District - Name" convention wins
    for part in parts[:-1]:
        if parse_folder_name(part, valid_districts).matched:
            return part

    if len(parts) <= 1:
        return None
    parent = parts[-2]
    if parent in valid_districts:
        # Files sitting directly in a district folder belong to no property
        return None
    return parent


def group_uploaded_files(files: Iterable[UploadedFile],
                         valid_districts: Iterable[str] = None) -> Dict[str, List[UploadedFile]]:
    """Group uploaded files by the property folder they came from, in first-seen order"""
    districts = list(valid_districts) if valid_districts is not None else VALID_DISTRICTS
    groups: Dict[str, List[UploadedFile]] = {}
    for uploaded in files:
        if is_ignored(uploaded.filename):
            continue
        folder_name = _property_folder_for(uploaded, districts)
        if folder_name is None:
            continue
        groups.setdefault(folder_name, []).append(uploaded)
    return groups


def district_from_paths(files: Iterable[UploadedFile], valid_districts: Iterable[str] = None) -> Optional[str]:
    """First path segment that is exactly a known district name"""
    districts = list(valid_districts) if valid_districts is not None else VALID_DISTRICTS
    for uploaded in files:
        for part in uploaded.parts[:-1]:
            if part in districts:
                return part
    return None
