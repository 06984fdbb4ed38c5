import pytest

from services.media_files import (
    MediaKind, classify, document_label, get_mime_type, is_ignored, sanitize_filename, strip_extension
)


@pytest.mark.parametrize("filename, kind", [
    ("photo.JPG", MediaKind.image),
    ("photo.jpeg", MediaKind.image),
    ("render.webp", MediaKind.image),
    ("plan.bmp", MediaKind.image),
    ("tour.MOV", MediaKind.video),
    ("tour.mkv", MediaKind.video),
    ("brochure.pdf", MediaKind.document),
    ("prices.xlsx", MediaKind.document),
    ("notes.txt", MediaKind.document),
])
def test_classify_by_extension(filename, kind):
    assert classify(filename) == kind


@pytest.mark.parametrize("filename", ["logo.svg", "archive.zip", "data.xyz", "README", ".hidden.jpg", "Thumbs.db"])
def test_classify_rejects_other_files(filename):
    assert classify(filename) is None


def test_is_ignored():
    assert is_ignored(".DS_Store")
    assert is_ignored("desktop.ini")
    assert is_ignored(".anything")
    assert not is_ignored("photo.jpg")


def test_sanitize_filename():
    assert sanitize_filename("My Photo (1).jpg") == "My_Photo__1_.jpg"
    assert sanitize_filename("../etc/passwd") == ".._etc_passwd"
    assert sanitize_filename("ok_name-2.png") == "ok_name-2.png"


def test_strip_extension():
    assert strip_extension("brochure.pdf") == "brochure"
    assert strip_extension("floor.plan.pdf") == "floor.plan"
    assert strip_extension("README") == "README"


def test_document_label_with_language():
    assert document_label("brochure.pdf") == "brochure"
    assert document_label("EN_Brochure.pdf") == "EN_Brochure (ENG)"
    assert document_label("Price_List_RU.pdf") == "Price_List_RU (RU)"


def test_get_mime_type():
    assert get_mime_type("a.WEBP") == "image/webp"
    assert get_mime_type("a.mov") == "video/quicktime"
    assert get_mime_type("a.unknown") == "application/octet-stream"


def test_document_label_prefers_subfolder():
    assert document_label("plan.pdf", "Floor Plans") == "Floor Plans"
    assert document_label("RU_prices.xlsx", "Price Lists") == "Price Lists (RU)"
