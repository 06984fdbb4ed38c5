"""
Folder import configuration - uses environment variables with sane defaults
"""
import os
from pathlib import Path

# Storage layout
UPLOAD_ROOT = Path(os.getenv("UPLOAD_ROOT", "public/uploads"))
PUBLIC_UPLOAD_PREFIX = os.getenv("PUBLIC_UPLOAD_PREFIX", "/uploads")
PROPERTIES_SUBDIR = "properties"
# Folder uploads are staged here before import-folder runs on them
INCOMING_SUBDIR = "incoming"
DEVELOPER_LOGOS_SUBDIR = "developers"

# Folder naming convention: "<District> - <Property Name>"
FOLDER_NAME_SEPARATOR = " - "
VALID_DISTRICTS = [
    district.strip()
    for district in os.getenv(
        "IMPORT_VALID_DISTRICTS",
        "Beachfront,Downtown,Dubai Hills,Marina Shores,The Oasis"
    ).split(",")
    if district.strip()
]
FALLBACK_DISTRICT = os.getenv("IMPORT_FALLBACK_DISTRICT", "Downtown")
DEFAULT_CITY = os.getenv("IMPORT_DEFAULT_CITY", "Dubai")
DEFAULT_CURRENCY = os.getenv("IMPORT_DEFAULT_CURRENCY", "AED")

# Placeholder values for imported properties (fixed, edited manually later)
PLACEHOLDER_PRICE = float(os.getenv("IMPORT_PLACEHOLDER_PRICE", "1000000"))
PLACEHOLDER_AREA_SQM = float(os.getenv("IMPORT_PLACEHOLDER_AREA_SQM", "100"))
PLACEHOLDER_BEDROOMS = 2
PLACEHOLDER_BATHROOMS = 2
PLACEHOLDER_PARKING = 1

# Image encoding
WEBP_QUALITY = int(os.getenv("IMPORT_WEBP_QUALITY", "85"))
THUMBNAIL_QUALITY = int(os.getenv("IMPORT_THUMBNAIL_QUALITY", "70"))
THUMBNAIL_SIZE = (200, 200)
THUMBNAIL_PREFIX = "thumb-"

# Video validation
VIDEO_TARGET_RATIO = 16 / 9
VIDEO_RATIO_TOLERANCE = float(os.getenv("IMPORT_VIDEO_RATIO_TOLERANCE", "0.1"))
FFPROBE_BINARY = os.getenv("FFPROBE_BINARY", "ffprobe")
FFPROBE_TIMEOUT_SECONDS = 30

# Slug uniqueness probing stops after this many suffixes
SLUG_MAX_ATTEMPTS = int(os.getenv("SLUG_MAX_ATTEMPTS", "1000"))

# Roots the admin folder picker is allowed to list
IMPORT_BROWSE_ROOTS = [
    Path(root.strip())
    for root in os.getenv("IMPORT_BROWSE_ROOTS", "/uploads,public/uploads").split(",")
    if root.strip()
]

# Resized image variants served from /uploads
TRANSFORM_CACHE_CAPACITY = int(os.getenv("TRANSFORM_CACHE_CAPACITY", "256"))
TRANSFORM_CACHE_TTL_SECONDS = float(os.getenv("TRANSFORM_CACHE_TTL_SECONDS", "3600"))
MAX_TRANSFORM_WIDTH = 2560
