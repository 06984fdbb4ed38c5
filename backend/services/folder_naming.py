"""
Folder naming convention, slugs and SEO boilerplate for imported properties

Property folders are expected to be named "<District> - <Property Name>",
where <District> is one of the configured districts. Anything else falls
back to the full folder name and the default district.
"""
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from config.import_settings import FALLBACK_DISTRICT, FOLDER_NAME_SEPARATOR, VALID_DISTRICTS
from models.property import PropertyType

logger = logging.getLogger(__name__)

FOLDER_NAME_PATTERN = re.compile(r"^(?P<district>.+?) - (?P<name>.+)$", re.DOTALL)
_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# First keyword found wins; APARTMENT otherwise
_TYPE_KEYWORDS = [
    ("VILLA", PropertyType.villa),
    ("TOWNHOUSE", PropertyType.townhouse),
    ("PENTHOUSE", PropertyType.penthouse),
    ("STUDIO", PropertyType.studio),
    ("OFFICE", PropertyType.office),
]


@dataclass(frozen=True)
class ParsedFolderName:
    """Result of parsing a folder name; matched is False for the fallback variant"""
    district: Optional[str]
    property_name: str
    matched: bool


def parse_folder_name(folder_name: str, valid_districts: Iterable[str] = None) -> ParsedFolderName:
    """Split 'District - Name' into its parts when the district is allowed"""
    districts = list(valid_districts) if valid_districts is not None else VALID_DISTRICTS
    match = FOLDER_NAME_PATTERN.match(folder_name)
    if match:
        district = match.group("district").strip()
        parts = [part.strip() for part in match.group("name").split(FOLDER_NAME_SEPARATOR)]
        property_name = FOLDER_NAME_SEPARATOR.join(parts)
        if district in districts and property_name:
            return ParsedFolderName(district=district, property_name=property_name, matched=True)
    return ParsedFolderName(district=None, property_name=folder_name, matched=False)


def resolve_district(parsed: ParsedFolderName, folder_name: str = "") -> str:
    """District to persist, substituting the fallback when the name did not match"""
    if parsed.district:
        return parsed.district
    logger.warning(f"District not found for folder '{folder_name or parsed.property_name}', using default: {FALLBACK_DISTRICT}")
    return FALLBACK_DISTRICT


def slugify(name: str, district: Optional[str] = None) -> str:
    """Lower-case, hyphen-separated slug, optionally prefixed with the district"""
    slug = name.lower()
    if district:
        slug = f"{district.lower()}-{slug}"
    return _NON_ALNUM.sub("-", slug).strip("-")


def district_slug(district: str) -> str:
    """Area slug for a district name ('Dubai Hills' -> 'dubai-hills')"""
    return re.sub(r"\s+", "-", district.strip().lower())


def infer_property_type(property_name: str) -> PropertyType:
    """Guess the property type from keywords in the name"""
    upper_name = property_name.upper()
    for keyword, property_type in _TYPE_KEYWORDS:
        if keyword in upper_name:
            return property_type
    return PropertyType.apartment


def generate_description(property_name: str, district: Optional[str]) -> str:
    district_text = f" in {district}" if district else " in Dubai"
    return (
        f"Discover {property_name}, an exceptional luxury property{district_text}. "
        "This premium real estate opportunity offers world-class amenities, stunning architecture, "
        "and prime location. Perfect for investors seeking high returns and lifestyle excellence "
        "in the heart of Dubai."
    )


def generate_meta_title(property_name: str, district: Optional[str]) -> str:
    district_text = f" in {district}" if district else ""
    return f"{property_name}{district_text} - Luxury Real Estate | SGIP Real Estate"


def generate_meta_description(property_name: str, district: Optional[str]) -> str:
    district_text = f" in {district}" if district else " in Dubai"
    return (
        f"Explore {property_name}{district_text}. Premium luxury property with exceptional amenities. "
        "Investment opportunity in Dubai's most prestigious location."
    )
