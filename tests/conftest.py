import os
import shutil
import struct
import sys
import tempfile
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# --- Point the app at a throwaway media root before config is imported ---
MEDIA_ROOT = tempfile.mkdtemp(prefix="gallery-media-")
os.environ["MEDIA_ROOT"] = MEDIA_ROOT
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("TODAY_OVERRIDE", None)
# -------------------------------------------------------------------------

# Add src to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), "../src"))

from core.storage.local import LocalStorageService  # noqa: E402
from gallery.navigation.clock import CivilClock  # noqa: E402
from gallery.photos.exif import ExifExtractor  # noqa: E402
from gallery.photos.schema import PhotoRecord  # noqa: E402
from gallery.photos.service import PhotoIngestionService  # noqa: E402
from gallery.photos.store import MetadataStore  # noqa: E402

PACIFIC = ZoneInfo("America/Los_Angeles")
TODAY = date(2025, 3, 1)


class FrozenClock(CivilClock):
    def __init__(self, now: datetime):
        super().__init__("America/Los_Angeles")
        self._now = now

    def now(self) -> datetime:
        return self._now


def _clear_media_root():
    for child in Path(MEDIA_ROOT).iterdir():
        if child.is_dir():
            shutil.rmtree(child)
        else:
            child.unlink()


@pytest.fixture
def clock():
    return FrozenClock(datetime(2025, 3, 1, 9, 30, tzinfo=PACIFIC))


@pytest.fixture
def storage(tmp_path):
    return LocalStorageService(media_root=str(tmp_path / "uploads"), media_url="/uploads")


@pytest.fixture
def store(storage):
    return MetadataStore(storage.media_root / "metadata.json")


@pytest.fixture
def service(storage, store, clock):
    return PhotoIngestionService(
        storage,
        store,
        clock,
        max_upload_size=1024 * 1024,
        exif_extractor=ExifExtractor(),
    )


@pytest.fixture
def make_record():
    def _make(day: str, caption: str = "", **kwargs) -> PhotoRecord:
        file_name = kwargs.pop("file_name", f"{day}-1700000000000.jpg")
        return PhotoRecord(
            file_name=file_name,
            date=date.fromisoformat(day),
            caption=caption,
            size=kwargs.pop("size", 3),
            uploaded_at=kwargs.pop("uploaded_at", datetime(2025, 3, 1, 9, 30, tzinfo=PACIFIC)),
            url=f"/uploads/{file_name}",
            **kwargs,
        )

    return _make


@pytest.fixture
def make_jpeg():
    """Smallest byte string piexif accepts as a JPEG, optionally with an APP1 EXIF block."""

    def _make(exif_bytes: bytes = None) -> bytes:
        data = b"\xff\xd8"
        if exif_bytes:
            data += b"\xff\xe1" + struct.pack(">H", len(exif_bytes) + 2) + exif_bytes
        data += b"\xff\xda\x00\x08\x01\x01\x00\x00\x3f\x00" + b"\x00" * 16 + b"\xff\xd9"
        return data

    return _make


@pytest.fixture
def client(clock):
    from fastapi.testclient import TestClient

    from core.dependencies import get_clock
    from main import app

    _clear_media_root()
    app.dependency_overrides[get_clock] = lambda: clock
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    _clear_media_root()
