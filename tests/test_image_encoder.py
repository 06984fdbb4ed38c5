import io

import pytest
from PIL import Image

from conftest import write_image
from services.image_encoder import PassthroughEncoder, WebPTranscoder, select_image_encoder, webp_supported

requires_webp = pytest.mark.skipif(not webp_supported(), reason="Pillow built without WebP")


@requires_webp
def test_transcodes_to_webp(tmp_path):
    source = write_image(tmp_path / "photo.jpg", size=(640, 480))
    destination = WebPTranscoder().encode(source, tmp_path / "photo.webp")
    with Image.open(destination) as image:
        assert image.format == "WEBP"
        assert image.size == (640, 480)


@requires_webp
def test_webp_source_is_copied_verbatim(tmp_path):
    source = write_image(tmp_path / "render.webp", fmt="WEBP")
    destination = WebPTranscoder().encode(source, tmp_path / "stored.webp")
    assert destination.read_bytes() == source.read_bytes()


@requires_webp
def test_thumbnail_fits_box_and_keeps_ratio(tmp_path):
    encoder = WebPTranscoder()
    stored = encoder.encode(write_image(tmp_path / "wide.png", size=(800, 400)), tmp_path / "wide.webp")
    thumbnail = encoder.make_thumbnail(stored, tmp_path / "thumb-wide.webp")
    with Image.open(thumbnail) as image:
        assert image.format == "WEBP"
        assert image.size == (200, 100)


@requires_webp
def test_thumbnail_never_upscales(tmp_path):
    encoder = WebPTranscoder()
    stored = encoder.encode(write_image(tmp_path / "small.png", size=(120, 80)), tmp_path / "small.webp")
    with Image.open(encoder.make_thumbnail(stored, tmp_path / "thumb-small.webp")) as image:
        assert image.size == (120, 80)


@requires_webp
def test_palette_images_are_converted(tmp_path):
    source = tmp_path / "anim.gif"
    Image.new("P", (50, 50)).save(source)
    destination = WebPTranscoder().encode(source, tmp_path / "anim.webp")
    with Image.open(destination) as image:
        assert image.format == "WEBP"


@requires_webp
def test_render_variant(tmp_path):
    source = write_image(tmp_path / "big.png", size=(400, 200))
    content, media_type = WebPTranscoder().render_variant(source, 100)
    assert media_type == "image/webp"
    with Image.open(io.BytesIO(content)) as image:
        assert image.size == (100, 50)


def test_passthrough_keeps_file_and_extension(tmp_path):
    source = write_image(tmp_path / "photo.JPG", fmt="JPEG")
    encoder = PassthroughEncoder()
    assert encoder.output_suffix(source) == ".JPG"
    assert not encoder.supports_thumbnails
    destination = encoder.encode(source, tmp_path / "copy.JPG")
    assert destination.read_bytes() == source.read_bytes()
    assert encoder.make_thumbnail(destination, tmp_path / "thumb.JPG") is None


def test_select_encoder_follows_capability(monkeypatch):
    monkeypatch.setattr("services.image_encoder.webp_supported", lambda: False)
    assert select_image_encoder().name == "passthrough"
    monkeypatch.setattr("services.image_encoder.webp_supported", lambda: True)
    assert select_image_encoder().name == "webp"
