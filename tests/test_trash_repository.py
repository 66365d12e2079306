"""
Unit tests for the SQLAlchemy entry store.

Tests cover:
- Insert with generated id and timestamp
- Round-trip by id
- Filtering, ordering and pagination
- Table constraints
"""
import pytest

from app.domain.exceptions import StorageError
from app.domain.models import EntryFilter, TrashEntryCreate, TrashType
from app.infrastructure import trash_repository as repository_module


@pytest.fixture
def fixed_clock(monkeypatch):
    """Hand out increasing timestamps, one per insert."""
    stamps = iter([
        "2024-05-01T08:00:00.000Z",
        "2024-05-01T21:30:00.000Z",
        "2024-05-02T09:00:00.000Z",
        "2024-05-03T12:00:00.000Z",
        "2024-05-04T18:45:00.000Z",
    ])
    monkeypatch.setattr(repository_module, "utc_now_iso", lambda: next(stamps))


def _create(trash_type=TrashType.PLASTIC, latitude=12.9, longitude=74.8, **kwargs):
    return TrashEntryCreate(trash_type=trash_type, latitude=latitude, longitude=longitude, **kwargs)


# ============================================================
# Insert Tests
# ============================================================

class TestInsert:
    """Tests for storing entries."""

    def test_insert_generates_id_and_timestamp(self, repository):
        entry = repository.insert(_create(user_name="Asha"))

        assert len(entry.id) == 36
        assert entry.timestamp.endswith("Z")
        assert entry.trash_type == TrashType.PLASTIC
        assert entry.user_name == "Asha"
        assert entry.photo_url is None

    def test_insert_then_get_round_trips(self, repository):
        created = repository.insert(_create(
            TrashType.HAZARDOUS,
            latitude=-33.924869,
            longitude=18.424055,
            photo_url="/photos/abc.jpg",
        ))

        fetched = repository.get(created.id)

        assert fetched == created

    def test_get_missing_returns_none(self, repository):
        assert repository.get("does-not-exist") is None

    def test_check_constraint_rejects_bad_latitude(self, repository):
        """The table refuses out-of-range rows even if validation is bypassed."""
        bad = TrashEntryCreate.model_construct(
            trash_type=TrashType.PLASTIC,
            latitude=95.0,
            longitude=0.0,
            photo_url=None,
            user_name=None,
        )

        with pytest.raises(StorageError):
            repository.insert(bad)

        assert repository.count_by_filter() == 0


# ============================================================
# Query Tests
# ============================================================

class TestQueryByFilter:
    """Tests for filtered reads."""

    @pytest.fixture
    def stored(self, repository, fixed_clock):
        return [
            repository.insert(_create(TrashType.PLASTIC)),
            repository.insert(_create(TrashType.GLASS)),
            repository.insert(_create(TrashType.PLASTIC)),
            repository.insert(_create(TrashType.PAPER)),
            repository.insert(_create(TrashType.PLASTIC)),
        ]

    def test_newest_first(self, repository, stored):
        entries = repository.query_by_filter()

        assert [e.id for e in entries] == [e.id for e in reversed(stored)]

    def test_filter_by_type(self, repository, stored):
        entries = repository.query_by_filter(EntryFilter(trash_type=TrashType.PLASTIC))

        assert len(entries) == 3
        assert all(e.trash_type == TrashType.PLASTIC for e in entries)

    def test_date_bounds_are_inclusive(self, repository, stored):
        entry_filter = EntryFilter(
            start_date="2024-05-01T21:30:00.000Z",
            end_date="2024-05-03T12:00:00.000Z",
        )

        entries = repository.query_by_filter(entry_filter)

        assert [e.timestamp for e in entries] == [
            "2024-05-03T12:00:00.000Z",
            "2024-05-02T09:00:00.000Z",
            "2024-05-01T21:30:00.000Z",
        ]

    def test_combined_filters(self, repository, stored):
        entry_filter = EntryFilter(
            start_date="2024-05-02T00:00:00.000Z",
            trash_type=TrashType.PLASTIC,
        )

        entries = repository.query_by_filter(entry_filter)

        assert [e.timestamp for e in entries] == [
            "2024-05-04T18:45:00.000Z",
            "2024-05-02T09:00:00.000Z",
        ]
        assert repository.count_by_filter(entry_filter) == 2

    def test_no_match(self, repository, stored):
        entry_filter = EntryFilter(start_date="2030-01-01T00:00:00.000Z")

        assert repository.query_by_filter(entry_filter) == []
        assert repository.count_by_filter(entry_filter) == 0

    def test_offset_and_limit(self, repository, stored):
        page = repository.query_by_filter(offset=2, limit=2)

        assert [e.id for e in page] == [stored[2].id, stored[1].id]

    def test_count_ignores_pagination(self, repository, stored):
        assert repository.count_by_filter() == 5
