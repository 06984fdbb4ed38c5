import io

import pytest
from PIL import Image

from conftest import write_file, write_image


def test_store_image_writes_webp_and_thumbnail(storage, tmp_path):
    source = write_image(tmp_path / "src" / "Sea View (1).jpg", size=(800, 600))
    stored = storage.store_image(source, source.name)

    assert stored.url.startswith("/uploads/properties/images/")
    assert stored.filename.endswith("-Sea_View__1_.webp")
    assert stored.mime_type == "image/webp"
    assert stored.path.parent == storage.images_dir
    assert stored.size == stored.path.stat().st_size
    assert stored.thumbnail_path == storage.thumbnails_dir / f"thumb-{stored.filename}"
    with Image.open(stored.thumbnail_path) as thumbnail:
        assert max(thumbnail.size) == 200


def test_filenames_carry_millisecond_timestamp(storage, tmp_path):
    source = write_image(tmp_path / "photo.png")
    first = storage.store_image(source, "photo.png")
    second = storage.store_image(source, "photo.png")
    assert first.filename != second.filename
    stamp, _, rest = first.filename.partition("-")
    assert stamp.isdigit() and len(stamp) == 13
    assert rest == "photo.webp"


def test_same_timestamp_does_not_overwrite(tmp_path):
    from services.image_encoder import PassthroughEncoder
    from services.media_storage import MediaStorage

    fixed = MediaStorage(PassthroughEncoder(), upload_root=tmp_path / "uploads", clock=lambda: 1700000000000)
    source = write_file(tmp_path / "brochure.pdf", b"%PDF")
    first = fixed.store_document(source, "brochure.pdf")
    second = fixed.store_document(source, "brochure.pdf")
    assert first.path != second.path
    assert first.path.exists() and second.path.exists()


def test_store_video_and_document_copy_bytes(storage, tmp_path):
    video = write_file(tmp_path / "tour.mp4", b"\x00\x00video")
    document = write_file(tmp_path / "Price List.pdf", b"%PDF-1.4")

    stored_video = storage.store_video(video, "tour.mp4")
    stored_document = storage.store_document(document, "Price List.pdf")

    assert stored_video.url.startswith("/uploads/properties/videos/")
    assert stored_video.path.read_bytes() == b"\x00\x00video"
    assert stored_video.mime_type == "video/mp4"
    assert stored_document.url.startswith("/uploads/properties/files/")
    assert stored_document.filename.endswith("-Price_List.pdf")
    assert stored_document.size == len(b"%PDF-1.4")


def test_discard_removes_written_files(storage, tmp_path):
    stored = storage.store_image(write_image(tmp_path / "a.png"), "a.png")
    storage.discard([stored])
    assert not stored.path.exists()
    assert not stored.thumbnail_path.exists()
    storage.discard([stored])


def test_resolve_public_path_refuses_traversal(storage):
    assert storage.resolve_public_path("properties/images/a.webp") == (
        storage.root / "images" / "a.webp"
    ).resolve()
    assert storage.resolve_public_path("../secret.txt") is None
    assert storage.resolve_public_path("properties/../../etc/passwd") is None


def test_thumbnail_failure_keeps_image(storage, tmp_path, monkeypatch):
    def broken_thumbnail(image_path, thumbnail_path):
        thumbnail_path.write_bytes(b"partial")
        raise OSError("disk full")

    monkeypatch.setattr(storage.encoder, "make_thumbnail", broken_thumbnail)
    stored = storage.store_image(write_image(tmp_path / "a.png"), "a.png")

    assert stored.path.exists()
    assert stored.thumbnail_path is None
    assert list(storage.thumbnails_dir.iterdir()) == []


def test_encode_failure_leaves_no_file(storage, tmp_path):
    source = write_file(tmp_path / "fake.jpg", b"this is not an image")
    with pytest.raises(Exception):
        storage.store_image(source, "fake.jpg")
    assert list(storage.images_dir.iterdir()) == []


def test_stage_file_keeps_relative_path(storage):
    batch = storage.new_incoming_batch()
    staged = storage.stage_file(batch, "Downtown - Tower A\\docs/plan.pdf", io.BytesIO(b"%PDF"))
    assert staged == batch / "Downtown - Tower A" / "docs" / "plan.pdf"
    assert staged.read_bytes() == b"%PDF"
    assert batch.parent == storage.incoming_dir


@pytest.mark.parametrize("relative_path", ["../escape.jpg", "a/../../escape.jpg", ".DS_Store", "a/.hidden/b.jpg", ""])
def test_stage_file_skips_unsafe_paths(storage, relative_path):
    batch = storage.new_incoming_batch()
    assert storage.stage_file(batch, relative_path, io.BytesIO(b"x")) is None
    assert list(batch.iterdir()) == []
    assert not (storage.incoming_dir / "escape.jpg").exists()


def test_incoming_batches_are_distinct(tmp_path):
    from services.image_encoder import PassthroughEncoder
    from services.media_storage import MediaStorage

    fixed = MediaStorage(PassthroughEncoder(), upload_root=tmp_path / "uploads", clock=lambda: 1700000000000)
    assert fixed.new_incoming_batch() != fixed.new_incoming_batch()


def test_store_logo(storage, tmp_path):
    stored = storage.store_logo(write_image(tmp_path / "logo.png"), "logo.png")
    assert stored.path.parent == storage.logos_dir
    assert stored.url == f"/uploads/developers/{stored.filename}"
    assert stored.thumbnail_path is None
