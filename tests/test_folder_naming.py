import pytest

from models.property import PropertyType
from services.folder_naming import (
    district_slug, generate_meta_title, infer_property_type, parse_folder_name, resolve_district, slugify
)


@pytest.mark.parametrize("folder_name, district, name", [
    ("Downtown - Beach Maison", "Downtown", "Beach Maison"),
    ("Dubai Hills - Golf Place", "Dubai Hills", "Golf Place"),
    ("The Oasis - Palmiera", "The Oasis", "Palmiera"),
    ("Beachfront - Tower - Phase 2", "Beachfront", "Tower - Phase 2"),
])
def test_parse_valid_district(folder_name, district, name):
    parsed = parse_folder_name(folder_name)
    assert parsed.matched
    assert parsed.district == district
    assert parsed.property_name == name


@pytest.mark.parametrize("folder_name", [
    "Beach Maison",
    "Jumeirah - Beach Maison",
    "downtown - Beach Maison",
    "Downtown-Beach Maison",
])
def test_parse_unknown_district_falls_back(folder_name):
    parsed = parse_folder_name(folder_name)
    assert not parsed.matched
    assert parsed.district is None
    assert parsed.property_name == folder_name
    assert resolve_district(parsed, folder_name) == "Downtown"


def test_parse_with_custom_districts():
    parsed = parse_folder_name("Jumeirah - Beach Maison", valid_districts=["Jumeirah"])
    assert parsed.district == "Jumeirah"
    assert parsed.property_name == "Beach Maison"


def test_resolve_district_keeps_parsed_value():
    assert resolve_district(parse_folder_name("Marina Shores - Sea View")) == "Marina Shores"


def test_slugify():
    assert slugify("Beach Maison", "Downtown") == "downtown-beach-maison"
    assert slugify("  Tower A (Phase #2)!  ") == "tower-a-phase-2"
    assert slugify("Golf Place", "Dubai Hills") == "dubai-hills-golf-place"


@pytest.mark.parametrize("name, district", [
    ("Beach Maison", "Downtown"),
    ("Tower - Phase 2", "Beachfront"),
    ("--Ünïcode  Villa__", None),
    ("", None),
])
def test_slugify_is_idempotent(name, district):
    slug = slugify(name, district)
    assert slugify(slug) == slug


def test_district_slug():
    assert district_slug("Dubai Hills") == "dubai-hills"
    assert district_slug(" The  Oasis ") == "the-oasis"


@pytest.mark.parametrize("name, expected", [
    ("Palm Villa Estate", PropertyType.villa),
    ("Sunset townhouse", PropertyType.townhouse),
    ("Sky Penthouse", PropertyType.penthouse),
    ("Studio 12", PropertyType.studio),
    ("Office Tower", PropertyType.office),
    ("Beach Maison", PropertyType.apartment),
])
def test_infer_property_type(name, expected):
    assert infer_property_type(name) == expected


def test_meta_title_mentions_district():
    assert generate_meta_title("Beach Maison", "Downtown") == (
        "Beach Maison in Downtown - Luxury Real Estate | SGIP Real Estate"
    )
