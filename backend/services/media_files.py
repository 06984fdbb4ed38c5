"""
File classification helpers shared by the importer and the uploads router
"""
import re
from enum import Enum
from pathlib import PurePath
from typing import Optional

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp', '.gif', '.bmp'}
VIDEO_EXTENSIONS = {'.mp4', '.mov', '.avi', '.webm', '.mkv'}
DOCUMENT_EXTENSIONS = {'.pdf', '.doc', '.docx', '.xls', '.xlsx', '.txt'}

# OS metadata files that never belong to a property
IGNORED_FILENAMES = {'.DS_Store', 'Thumbs.db', 'desktop.ini'}

MIME_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.webp': 'image/webp',
    '.gif': 'image/gif',
    '.bmp': 'image/bmp',
    '.mp4': 'video/mp4',
    '.mov': 'video/quicktime',
    '.avi': 'video/x-msvideo',
    '.webm': 'video/webm',
    '.mkv': 'video/x-matroska',
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.xls': 'application/vnd.ms-excel',
    '.xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    '.txt': 'text/plain',
}
DEFAULT_MIME_TYPE = 'application/octet-stream'

# Filename tokens that mark the language of a document
LANGUAGE_PATTERNS = {
    'EN_': 'eng',
    'RU_': 'ru',
    'AR_': 'ar',
    'CN_': 'cn',
    '_EN': 'eng',
    '_RU': 'ru',
    '_AR': 'ar',
    '_CN': 'cn',
}

_UNSAFE_FILENAME_CHARS = re.compile(r'[^a-zA-Z0-9._-]')


class MediaKind(str, Enum):
    """Media bucket of a file, decided by its extension"""
    image = "image"
    video = "video"
    document = "document"


def is_ignored(filename: str) -> bool:
    """Hidden files and OS metadata sentinels"""
    return filename.startswith('.') or filename in IGNORED_FILENAMES


def classify(filename: str) -> Optional[MediaKind]:
    """Return the media bucket of a file, or None when it is not importable"""
    if is_ignored(filename):
        return None
    ext = PurePath(filename).suffix.lower()
    if ext in IMAGE_EXTENSIONS:
        return MediaKind.image
    if ext in VIDEO_EXTENSIONS:
        return MediaKind.video
    if ext in DOCUMENT_EXTENSIONS:
        return MediaKind.document
    return None


def get_mime_type(filename: str) -> str:
    return MIME_TYPES.get(PurePath(filename).suffix.lower(), DEFAULT_MIME_TYPE)


def sanitize_filename(filename: str) -> str:
    """Keep letters, digits, dots, underscores and hyphens; replace the rest with '_'"""
    return _UNSAFE_FILENAME_CHARS.sub('_', filename)


def strip_extension(filename: str) -> str:
    """'brochure.pdf' -> 'brochure'; names without a dot are returned as-is"""
    return re.sub(r'\.[^/.]+$', '', filename)


def detect_language(filename: str) -> Optional[str]:
    upper_filename = filename.upper()
    for pattern, language in LANGUAGE_PATTERNS.items():
        if pattern in upper_filename:
            return language
    return None


def document_label(filename: str, category: str = "") -> str:
    """Readable label for a document, decorated with its language when detected

    Documents kept in a subfolder ("Floor Plans/a.pdf") are labelled after it.
    """
    label = category or strip_extension(filename)
    language = detect_language(filename)
    if language:
        label = f"{label} ({language.upper()})"
    return label
