"""
Developer model - Real estate developers referenced by properties
"""
from typing import Optional
from sqlmodel import SQLModel, Field


class Developer(SQLModel, table=True):
    """Developer table"""

    __tablename__ = "developer"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=150, description="Developer name")
    name_en: Optional[str] = Field(default=None, max_length=150, description="English developer name")
    description: Optional[str] = Field(default=None, description="Short company description")
    logo: Optional[str] = Field(default=None, description="Logo URL")
    website: Optional[str] = Field(default=None, max_length=255, description="Website URL")
    email: Optional[str] = Field(default=None, max_length=255, description="Contact email")
    phone: Optional[str] = Field(default=None, max_length=50, description="Contact phone")
    slug: str = Field(max_length=150, unique=True, index=True, description="URL code like 'emaar'")
