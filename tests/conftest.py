"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample entries for the aggregator
- A temporary SQLite database and repository
- Temporary photo storage
- FastAPI test client wired to the temporary stores
"""
import os
import tempfile
from typing import Callable, Iterator, Optional

import pytest

# Set env vars BEFORE importing the app so Settings picks them up
_scratch = tempfile.mkdtemp(prefix="litter-log-tests-")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_scratch}/trash.db")
os.environ.setdefault("UPLOAD_DIR", f"{_scratch}/photos")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_TO_FILE", "false")

from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.api.dependencies import get_photo_storage, get_trash_repository  # noqa: E402
from app.domain.models import TrashEntry, TrashType  # noqa: E402
from app.infrastructure.database import Database  # noqa: E402
from app.infrastructure.photo_storage import PhotoStorage  # noqa: E402
from app.infrastructure.trash_repository import TrashRepository  # noqa: E402


JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 256
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 256


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def make_entry() -> Callable[..., TrashEntry]:
    """Factory for in-memory entries with sequential ids."""
    counter = {"n": 0}

    def _make(
        latitude: float,
        longitude: float,
        trash_type: TrashType = TrashType.PLASTIC,
        timestamp: Optional[str] = None,
    ) -> TrashEntry:
        counter["n"] += 1
        return TrashEntry(
            id=f"entry-{counter['n']}",
            timestamp=timestamp or f"2024-05-01T10:00:{counter['n'] % 60:02d}.000Z",
            trash_type=trash_type,
            latitude=latitude,
            longitude=longitude,
        )

    return _make


@pytest.fixture
def mixed_entries(make_entry) -> list[TrashEntry]:
    """Entries spread over three cells and three types."""
    return [
        make_entry(12.9141, 74.8560, TrashType.PLASTIC, "2024-05-01T08:00:00.000Z"),
        make_entry(12.9143, 74.8562, TrashType.PLASTIC, "2024-05-02T09:30:00.000Z"),
        make_entry(12.9139, 74.8558, TrashType.GLASS, "2024-05-03T11:15:00.000Z"),
        make_entry(12.8700, 74.8800, TrashType.PAPER, "2024-05-04T14:45:00.000Z"),
        make_entry(12.8702, 74.8801, TrashType.PLASTIC, "2024-05-05T16:00:00.000Z"),
        make_entry(13.0000, 75.0000, TrashType.HAZARDOUS, "2024-04-30T07:05:00.000Z"),
    ]


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


# ============================================================
# Store Fixtures
# ============================================================

@pytest.fixture
def database(tmp_path) -> Iterator[Database]:
    """Temporary SQLite database with the schema applied."""
    db = Database(f"sqlite:///{tmp_path / 'trash.db'}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def repository(database) -> TrashRepository:
    return TrashRepository(database)


@pytest.fixture
def photo_storage(tmp_path) -> PhotoStorage:
    return PhotoStorage(str(tmp_path / "photos"), max_size_bytes=64 * 1024)


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client(repository, photo_storage) -> Iterator[TestClient]:
    """Test client backed by the temporary database and photo directory."""
    app.dependency_overrides[get_trash_repository] = lambda: repository
    app.dependency_overrides[get_photo_storage] = lambda: photo_storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
