"""
Catalogue router - areas and developers used by the property forms and pages
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator
from sqlmodel import Session, select

from config.db_connection import get_session
from models.area import Area
from models.developer import Developer
from models.property import Property
from routers.properties import format_property_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["catalogue"])


@router.get("/areas")
async def get_areas(session: Session = Depends(get_session)):
    """All areas ordered by name"""
    try:
        areas = session.exec(select(Area).order_by(Area.name)).all()
        return {"areas": [area.model_dump() for area in areas]}
    except Exception as e:
        logger.error(f"Error fetching areas: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/developers")
async def get_developers(session: Session = Depends(get_session)):
    """All developers ordered by name"""
    try:
        developers = session.exec(select(Developer).order_by(Developer.name)).all()
        return {"developers": [developer.model_dump() for developer in developers]}
    except Exception as e:
        logger.error(f"Error fetching developers: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/developers/{slug}")
async def get_developer(slug: str, session: Session = Depends(get_session)):
    """A developer with its published properties"""
    try:
        developer = session.exec(select(Developer).where(Developer.slug == slug)).first()
        if not developer:
            raise HTTPException(status_code=404, detail="Developer not found")

        properties = session.exec(
            select(Property)
            .where(Property.developer_id == developer.id, Property.is_published == True)  # noqa: E712
            .order_by(Property.created_at.desc())
        ).all()
        data = developer.model_dump()
        data["properties"] = [format_property_data(session, prop, all_images=False) for prop in properties]
        return {"developer": data}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching developer '{slug}': {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


class DeveloperUpdate(BaseModel):
    """Partial developer update; omitted fields keep their current value"""
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    name_en: Optional[str] = Field(None, max_length=150)
    description: Optional[str] = None
    logo: Optional[str] = None
    website: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)

    @model_validator(mode="after")
    def reject_null_name(self):
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("Fields cannot be null: name")
        return self


@router.patch("/developers/{slug}")
async def update_developer(slug: str, payload: DeveloperUpdate, session: Session = Depends(get_session)):
    """Update developer details, typically the logo after upload-logo"""
    try:
        developer = session.exec(select(Developer).where(Developer.slug == slug)).first()
        if not developer:
            raise HTTPException(status_code=404, detail="Developer not found")

        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(developer, key, value)
        session.add(developer)
        session.commit()
        session.refresh(developer)
        logger.info(f"Updated developer '{slug}'")
        return {"success": True, "developer": developer.model_dump()}
    except HTTPException:
        raise
    except Exception as e:
        session.rollback()
        logger.error(f"Error updating developer '{slug}': {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
