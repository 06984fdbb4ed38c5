"""
Property Images model - Gallery media (images and accepted videos) of a property
"""
from typing import Optional
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import ForeignKey, Integer


class PropertyImage(SQLModel, table=True):
    """Gallery entries; videos share this table and are ordered after images"""

    __tablename__ = "property_images"

    id: Optional[int] = Field(default=None, primary_key=True, description="Unique image ID")

    # Relación con propiedad (muchos a uno)
    property_id: int = Field(
        sa_column=Column(Integer, ForeignKey("property.id", ondelete="CASCADE"), nullable=False, index=True),
        description="ID of the owning property"
    )

    url: str = Field(description="Public URL of the stored media")
    alt: Optional[str] = Field(default=None, max_length=500, description="Alternative text")
    order: int = Field(default=0, description="Position in the gallery")
    is_main: bool = Field(default=False, description="Whether this is the cover image")
