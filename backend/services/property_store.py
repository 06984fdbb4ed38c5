"""
Persistence helpers for properties and their media

Functions here only add/flush on the given session; committing (or rolling
back) is left to the caller so a whole property can be written atomically.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import delete, or_
from sqlmodel import Session, select, func

from config.import_settings import (
    DEFAULT_CITY, DEFAULT_CURRENCY, PLACEHOLDER_AREA_SQM, PLACEHOLDER_BATHROOMS,
    PLACEHOLDER_BEDROOMS, PLACEHOLDER_PARKING, PLACEHOLDER_PRICE, SLUG_MAX_ATTEMPTS
)
from models.area import Area
from models.property import Property, PropertyStatus
from models.property_files import PropertyFile
from models.property_images import PropertyImage
from services.folder_naming import (
    district_slug, generate_description, generate_meta_description, generate_meta_title,
    infer_property_type
)
from services.media_storage import StoredMedia

logger = logging.getLogger(__name__)

DEFAULT_SLUG = "property"


class SlugExhaustedError(Exception):
    """Raised when no free slug is found within the attempt cap"""
    pass


def slug_exists(session: Session, slug: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Property.id).where(Property.slug == slug)
    if exclude_id is not None:
        query = query.where(Property.id != exclude_id)
    return session.exec(query).first() is not None


def generate_unique_slug(session: Session, base_slug: str, max_attempts: int = SLUG_MAX_ATTEMPTS,
                         exclude_id: Optional[int] = None) -> str:
    """Return ``base_slug`` or the first free ``base_slug-N`` (N = 1, 2, ...)"""
    base_slug = base_slug or DEFAULT_SLUG
    if not slug_exists(session, base_slug, exclude_id):
        return base_slug
    for counter in range(1, max_attempts + 1):
        candidate = f"{base_slug}-{counter}"
        if not slug_exists(session, candidate, exclude_id):
            return candidate
    raise SlugExhaustedError(f"No free slug for '{base_slug}' after {max_attempts} attempts")


def find_area(session: Session, district: str) -> Optional[Area]:
    """Case-insensitive substring match on the names, exact match on the slug"""
    pattern = f"%{district}%"
    query = select(Area).where(or_(
        Area.name.ilike(pattern),
        Area.name_en.ilike(pattern),
        Area.slug == district_slug(district),
    )).order_by(Area.id)
    return session.exec(query).first()


def find_or_create_area(session: Session, district: str, city: str = DEFAULT_CITY) -> Area:
    area = find_area(session, district)
    if area:
        return area
    area = Area(name=district, name_en=district, city=city, slug=district_slug(district))
    session.add(area)
    session.flush()
    logger.info(f"Created area '{district}' (id={area.id})")
    return area


def build_imported_property(property_name: str, district: str, area_id: int, slug: str) -> Property:
    """Property row with placeholder figures, to be completed by an editor"""
    return Property(
        title=property_name,
        description=generate_description(property_name, district),
        price=PLACEHOLDER_PRICE,
        currency=DEFAULT_CURRENCY,
        type=infer_property_type(property_name),
        status=PropertyStatus.available,
        area_sqm=PLACEHOLDER_AREA_SQM,
        bedrooms=PLACEHOLDER_BEDROOMS,
        bathrooms=PLACEHOLDER_BATHROOMS,
        parking=PLACEHOLDER_PARKING,
        address=f"{property_name}, {district}, {DEFAULT_CITY}",
        city=DEFAULT_CITY,
        district=district,
        area_id=area_id,
        slug=slug,
        meta_title=generate_meta_title(property_name, district),
        meta_description=generate_meta_description(property_name, district),
        is_published=True,
        is_featured=False,
    )


def add_gallery(session: Session, property_id: int, images: Sequence[Tuple[str, str]],
                videos: Sequence[Tuple[str, str]] = ()) -> List[PropertyImage]:
    """Insert (url, alt) pairs; the first image is the main one and videos follow the images"""
    rows = [
        PropertyImage(property_id=property_id, url=url, alt=alt, order=index, is_main=index == 0)
        for index, (url, alt) in enumerate(images)
    ]
    rows.extend(
        PropertyImage(property_id=property_id, url=url, alt=alt, order=len(images) + index, is_main=False)
        for index, (url, alt) in enumerate(videos)
    )
    session.add_all(rows)
    return rows


def add_documents(session: Session, property_id: int,
                  documents: Sequence[Tuple[StoredMedia, str]]) -> List[PropertyFile]:
    rows = [
        PropertyFile(
            property_id=property_id,
            url=stored.url,
            label=label,
            filename=stored.filename,
            size=stored.size,
            mime_type=stored.mime_type,
            order=index,
        )
        for index, (stored, label) in enumerate(documents)
    ]
    session.add_all(rows)
    return rows


def replace_images(session: Session, property_id: int, images: Sequence[dict]) -> None:
    """Drop every gallery row of a property and recreate it from ``images``"""
    session.exec(delete(PropertyImage).where(PropertyImage.property_id == property_id))
    for index, image in enumerate(images):
        session.add(PropertyImage(
            property_id=property_id,
            url=image["url"],
            alt=image.get("alt"),
            order=image.get("order", index),
            is_main=image.get("is_main", index == 0),
        ))


def replace_files(session: Session, property_id: int, files: Sequence[dict]) -> None:
    """Drop every file row of a property and recreate it from ``files``"""
    session.exec(delete(PropertyFile).where(PropertyFile.property_id == property_id))
    for index, item in enumerate(files):
        session.add(PropertyFile(
            property_id=property_id,
            url=item["url"],
            label=item.get("label") or item.get("filename") or "File",
            filename=item.get("filename") or item["url"].rsplit("/", 1)[-1],
            size=item.get("size"),
            mime_type=item.get("mime_type"),
            order=item.get("order", index),
        ))


def delete_property(session: Session, property_obj: Property) -> None:
    """Delete a property together with its media rows"""
    session.exec(delete(PropertyImage).where(PropertyImage.property_id == property_obj.id))
    session.exec(delete(PropertyFile).where(PropertyFile.property_id == property_obj.id))
    session.delete(property_obj)


def delete_all_properties(session: Session) -> int:
    count = session.exec(select(func.count(Property.id))).one()
    session.exec(delete(PropertyImage))
    session.exec(delete(PropertyFile))
    session.exec(delete(Property))
    return count
