"""
Area model - Named districts that group properties
"""
from typing import Optional
from sqlmodel import SQLModel, Field


class Area(SQLModel, table=True):
    """Area table, reference data created on first use by the importer"""

    __tablename__ = "area"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, description="Localized area name")
    name_en: Optional[str] = Field(default=None, max_length=100, description="English area name")
    city: str = Field(max_length=100, description="City the area belongs to")
    slug: str = Field(max_length=120, unique=True, index=True, description="URL code like 'dubai-hills'")
