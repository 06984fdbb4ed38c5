"""
Properties router - listing, creation, update and deletion of properties
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, model_validator
from sqlmodel import Session, select, func

from config.db_connection import get_session
from config.import_settings import DEFAULT_CURRENCY
from models.area import Area
from models.developer import Developer
from models.property import Property, PropertyStatus, PropertyType
from models.property_files import PropertyFile
from models.property_images import PropertyImage
from services.folder_naming import slugify
from services.property_store import (
    SlugExhaustedError, delete_all_properties, delete_property, find_or_create_area,
    generate_unique_slug, replace_files, replace_images
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["properties"])


class ImageIn(BaseModel):
    """Gallery entry sent by the property form"""
    url: str = Field(..., min_length=1)
    alt: Optional[str] = Field(None, max_length=500)


class FileIn(BaseModel):
    """Document entry sent by the property form"""
    url: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1, max_length=255)
    filename: Optional[str] = Field(None, max_length=255)
    size: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = Field(None, max_length=100)


class PropertyCreate(BaseModel):
    """Property created from the admin form"""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=10, max_length=5000)
    price: float = Field(..., gt=0)
    currency: str = Field(DEFAULT_CURRENCY, min_length=3, max_length=3)
    type: PropertyType = PropertyType.apartment
    status: PropertyStatus = PropertyStatus.available
    area_sqm: float = Field(..., gt=0)
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    parking: Optional[int] = Field(None, ge=0)
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1, max_length=100)
    district: str = Field(..., min_length=1, max_length=100)
    area_id: Optional[int] = Field(None, description="Resolved from the district when omitted")
    developer_id: Optional[int] = None
    features: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    slug: Optional[str] = Field(None, min_length=1, max_length=255, description="Generated from the title when omitted")
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    is_published: bool = False
    is_featured: bool = False
    images: List[ImageIn] = Field(default_factory=list)
    files: List[FileIn] = Field(default_factory=list)


# NOT NULL columns; an update may omit them but not send null
NON_NULLABLE_FIELDS = (
    "title", "description", "price", "currency", "status", "area_sqm", "bedrooms", "bathrooms",
    "address", "city", "district", "area_id", "features", "amenities", "slug", "is_published", "is_featured",
)


class PropertyUpdate(BaseModel):
    """Partial update; omitted fields keep their current value"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    price: Optional[float] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None
    area_sqm: Optional[float] = Field(None, gt=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    parking: Optional[int] = Field(None, ge=0)
    address: Optional[str] = None
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    district: Optional[str] = Field(None, min_length=1, max_length=100)
    area_id: Optional[int] = None
    developer_id: Optional[int] = None
    features: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    meta_title: Optional[str] = Field(None, max_length=255)
    meta_description: Optional[str] = Field(None, max_length=500)
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    images: Optional[List[ImageIn]] = None
    files: Optional[List[FileIn]] = None

    @model_validator(mode="after")
    def reject_cleared_required_fields(self):
        cleared = [name for name in NON_NULLABLE_FIELDS if name in self.model_fields_set and getattr(self, name) is None]
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


def _summary(model) -> Optional[dict]:
    if model is None:
        return None
    return {"id": model.id, "name": model.name, "name_en": model.name_en, "slug": model.slug}


def format_property_data(session: Session, prop: Property, all_images: bool = True) -> dict:
    """Property with its area, developer, images and files, ready for JSON"""
    image_query = select(PropertyImage).where(PropertyImage.property_id == prop.id).order_by(PropertyImage.order)
    if not all_images:
        image_query = image_query.limit(1)
    images = session.exec(image_query).all()
    files = session.exec(
        select(PropertyFile).where(PropertyFile.property_id == prop.id).order_by(PropertyFile.order)
    ).all()
    area = session.get(Area, prop.area_id) if prop.area_id else None
    developer = session.get(Developer, prop.developer_id) if prop.developer_id else None

    data = prop.model_dump()
    data["area"] = _summary(area)
    data["developer"] = _summary(developer)
    data["images"] = [image.model_dump() for image in images]
    data["files"] = [item.model_dump() for item in files]
    return data


def _get_property_or_404(session: Session, property_id: int) -> Property:
    prop = session.get(Property, property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    return prop


@router.get("/properties")
async def get_properties(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=200),
    status: Optional[PropertyStatus] = None,
    session: Session = Depends(get_session)
):
    """List properties, newest first, with their main image and files"""
    try:
        count_query = select(func.count(Property.id))
        query = select(Property)
        if status:
            count_query = count_query.where(Property.status == status)
            query = query.where(Property.status == status)

        total = session.exec(count_query).one()
        offset = (page - 1) * limit
        query = query.order_by(Property.created_at.desc(), Property.id.desc()).offset(offset).limit(limit)
        properties = session.exec(query).all()

        return {
            "properties": [format_property_data(session, prop, all_images=False) for prop in properties],
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": (total + limit - 1) // limit,
        }
    except Exception as e:
        logger.error(f"Error fetching properties: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


def _check_references(session: Session, area_id: Optional[int], developer_id: Optional[int]) -> None:
    if area_id is not None and not session.get(Area, area_id):
        raise HTTPException(status_code=400, detail="Area not found")
    if developer_id is not None and not session.get(Developer, developer_id):
        raise HTTPException(status_code=400, detail="Developer not found")


def _image_rows(images: List[ImageIn]) -> List[dict]:
    return [
        {"url": image.url, "alt": image.alt, "order": index, "is_main": index == 0}
        for index, image in enumerate(images)
    ]


@router.post("/properties", status_code=201)
async def create_property(payload: PropertyCreate, session: Session = Depends(get_session)):
    """Create a property with its gallery and files in one transaction"""
    try:
        _check_references(session, payload.area_id, payload.developer_id)

        data = payload.model_dump(exclude={"images", "files", "slug", "area_id"})
        area_id = payload.area_id
        if area_id is None:
            area_id = find_or_create_area(session, payload.district).id

        slug = generate_unique_slug(session, slugify(payload.slug or payload.title))
        prop = Property(**data, area_id=area_id, slug=slug)
        session.add(prop)
        session.flush()

        replace_images(session, prop.id, _image_rows(payload.images))
        replace_files(session, prop.id, [item.model_dump() for item in payload.files])

        session.commit()
        session.refresh(prop)
        logger.info(f"Created property {prop.id} ({prop.slug})")
        return {"success": True, "property": format_property_data(session, prop)}
    except HTTPException:
        raise
    except SlugExhaustedError as e:
        session.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        session.rollback()
        logger.error(f"Error creating property: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/properties/{property_id}")
async def get_property(property_id: int, session: Session = Depends(get_session)):
    """Get one property with its full gallery and files"""
    try:
        prop = _get_property_or_404(session, property_id)
        return {"property": format_property_data(session, prop)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching property {property_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/properties/{property_id}")
async def update_property(property_id: int, payload: PropertyUpdate, session: Session = Depends(get_session)):
    """Update a property; images/files, when sent, replace the existing rows"""
    try:
        prop = _get_property_or_404(session, property_id)
        updates = payload.model_dump(exclude_unset=True, exclude={"images", "files"})

        _check_references(session, updates.get("area_id"), updates.get("developer_id"))

        if "slug" in updates or "title" in updates:
            base_slug = updates.pop("slug", None) or slugify(updates.get("title") or prop.title)
            if base_slug != prop.slug:
                prop.slug = generate_unique_slug(session, base_slug, exclude_id=prop.id)

        for key, value in updates.items():
            setattr(prop, key, value)
        prop.updated_at = datetime.utcnow()
        session.add(prop)

        if payload.images is not None:
            replace_images(session, prop.id, _image_rows(payload.images))
        if payload.files is not None:
            replace_files(session, prop.id, [item.model_dump() for item in payload.files])

        session.commit()
        session.refresh(prop)
        logger.info(f"Updated property {prop.id} ({prop.slug})")
        return {"success": True, "property": format_property_data(session, prop)}
    except HTTPException:
        raise
    except SlugExhaustedError as e:
        session.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        session.rollback()
        logger.error(f"Error updating property {property_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/properties/{property_id}")
async def remove_property(property_id: int, session: Session = Depends(get_session)):
    """Delete a property and its images and files"""
    try:
        prop = _get_property_or_404(session, property_id)
        delete_property(session, prop)
        session.commit()
        logger.info(f"Deleted property {property_id}")
        return {"success": True, "message": "Property deleted"}
    except HTTPException:
        raise
    except Exception as e:
        session.rollback()
        logger.error(f"Error deleting property {property_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/properties")
async def remove_all_properties(session: Session = Depends(get_session)):
    """Delete every property"""
    try:
        count = delete_all_properties(session)
        session.commit()
        logger.warning(f"Deleted all properties ({count})")
        return {"success": True, "message": f"Deleted {count} properties", "count": count}
    except Exception as e:
        session.rollback()
        logger.error(f"Error deleting properties: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
