import io
import os
import tempfile
from pathlib import Path

# Point configuration at throwaway locations before any backend module is imported
_TEST_UPLOADS = tempfile.mkdtemp(prefix="uploads-test-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("UPLOAD_ROOT", _TEST_UPLOADS)
os.environ.setdefault("IMPORT_BROWSE_ROOTS", _TEST_UPLOADS)

import pytest
from PIL import Image
from sqlmodel import Session

from config.db_connection import build_engine, init_db
from services.folder_importer import FolderImporter
from services.image_encoder import WebPTranscoder
from services.media_storage import MediaStorage
from services.video_probe import AcceptAllProbe, VideoProbe, is_widescreen


class TickingClock:
    """Millisecond clock that advances on every call"""

    def __init__(self, start: int = 1700000000000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


class StaticProbe(VideoProbe):
    """Video probe answering from a table of known dimensions"""

    name = "static"

    def __init__(self, dimensions: dict, default=(1920, 1080)):
        self.dimensions = dimensions
        self.default = default

    def accepts(self, video_path: Path) -> bool:
        width, height = self.dimensions.get(Path(video_path).name, self.default)
        return is_widescreen(width, height)


def write_image(path: Path, size=(400, 300), color=(200, 30, 30), fmt=None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, format=fmt)
    return path


def image_bytes(size=(64, 48), fmt="PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (10, 120, 200)).save(buffer, format=fmt)
    return buffer.getvalue()


def write_file(path: Path, content: bytes = b"data") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://")
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def storage(tmp_path):
    return MediaStorage(WebPTranscoder(), upload_root=tmp_path / "uploads", clock=TickingClock())


@pytest.fixture
def importer(engine, storage):
    return FolderImporter(engine, storage, AcceptAllProbe())


@pytest.fixture
def import_root(tmp_path):
    root = tmp_path / "incoming"
    root.mkdir()
    return root
