"""
Property model - Represents real estate listings shown on the website
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from sqlmodel import SQLModel, Field, Column, JSON
from sqlalchemy import ForeignKey, Integer


class PropertyType(str, Enum):
    """Property type enumeration"""
    apartment = "APARTMENT"
    villa = "VILLA"
    townhouse = "TOWNHOUSE"
    penthouse = "PENTHOUSE"
    studio = "STUDIO"
    office = "OFFICE"
    retail = "RETAIL"
    warehouse = "WAREHOUSE"
    land = "LAND"


class PropertyStatus(str, Enum):
    """Listing status enumeration"""
    available = "AVAILABLE"
    sold = "SOLD"
    rented = "RENTED"
    reserved = "RESERVED"
    unavailable = "UNAVAILABLE"


class Property(SQLModel, table=True):
    """Property table for the public catalogue"""

    __tablename__ = "property"

    id: Optional[int] = Field(default=None, primary_key=True, description="Unique property ID")

    # Basic information
    title: str = Field(max_length=200, description="Property title")
    description: str = Field(default="", description="Long description shown on the detail page")
    price: float = Field(description="Asking price")
    currency: str = Field(default="AED", max_length=3, description="ISO currency code")
    type: Optional[PropertyType] = Field(default=PropertyType.apartment, description="Property type")
    status: PropertyStatus = Field(default=PropertyStatus.available, description="Listing status")

    # Specifications
    area_sqm: float = Field(description="Property area in square meters")
    bedrooms: int = Field(default=0, description="Number of bedrooms")
    bathrooms: int = Field(default=0, description="Number of bathrooms")
    parking: Optional[int] = Field(default=None, description="Number of parking spaces")

    # Location
    address: str = Field(default="", description="Street address")
    city: str = Field(max_length=100, description="City name")
    district: str = Field(max_length=100, description="District name")
    area_id: int = Field(
        sa_column=Column(Integer, ForeignKey("area.id"), nullable=False, index=True),
        description="ID of the area the property belongs to"
    )
    developer_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("developer.id", ondelete="SET NULL"), nullable=True),
        description="ID of the developer, if known"
    )

    # Features
    features: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Feature list")
    amenities: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Amenity list")

    # SEO
    slug: str = Field(max_length=255, unique=True, index=True, description="URL slug, globally unique")
    meta_title: Optional[str] = Field(default=None, max_length=255, description="SEO title")
    meta_description: Optional[str] = Field(default=None, max_length=500, description="SEO description")

    # Flags
    is_published: bool = Field(default=False, description="Whether the property is visible on the website")
    is_featured: bool = Field(default=False, description="Whether the property is highlighted on the home page")

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")
