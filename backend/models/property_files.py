"""
Property Files model - Downloadable documents (brochures, price lists, floor plans)
"""
from typing import Optional
from sqlmodel import SQLModel, Field, Column
from sqlalchemy import ForeignKey, Integer


class PropertyFile(SQLModel, table=True):
    """Documents attached to a property"""

    __tablename__ = "property_files"

    id: Optional[int] = Field(default=None, primary_key=True, description="Unique file ID")

    property_id: int = Field(
        sa_column=Column(Integer, ForeignKey("property.id", ondelete="CASCADE"), nullable=False, index=True),
        description="ID of the owning property"
    )

    url: str = Field(description="Public URL of the stored file")
    label: str = Field(max_length=255, description="Human readable label")
    filename: str = Field(max_length=255, description="Stored filename")
    size: Optional[int] = Field(default=None, description="File size in bytes")
    mime_type: Optional[str] = Field(default=None, max_length=100, description="MIME type")
    order: int = Field(default=0, description="Position in the file list")
