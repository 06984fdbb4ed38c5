"""
Database models for the property catalogue
"""

from .area import Area
from .developer import Developer
from .property import Property, PropertyStatus, PropertyType
from .property_images import PropertyImage
from .property_files import PropertyFile

__all__ = ["Area", "Developer", "Property", "PropertyStatus", "PropertyType", "PropertyImage", "PropertyFile"]
