"""
Application service: Orchestration layer for litter entry operations.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional
import logging
import math

from app.domain.exceptions import EntryNotFoundError, InvalidInputError
from app.domain.models import EntryFilter, Statistics, TrashEntry
from app.domain.validation import Invalid, validate_trash_entry_input
from app.infrastructure.photo_storage import PhotoStorage
from app.infrastructure.trash_repository import TrashEntryStore
from app.services.domain.statistics_aggregator import StatisticsAggregator

logger = logging.getLogger(__name__)


@dataclass
class PhotoUpload:
    """A photo received with a submission, not yet stored."""
    stream: BinaryIO
    content_type: Optional[str]
    filename: Optional[str] = None


@dataclass
class EntryPage:
    """One page of entries plus the pagination arithmetic."""
    entries: list[TrashEntry]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


class TrashService:
    """
    Application service for litter entry operations.

    Coordinates validation, photo storage, the entry store and the statistics
    aggregator. Holds no business rules of its own.
    """

    def __init__(
        self,
        repository: TrashEntryStore,
        photo_storage: PhotoStorage,
        aggregator: StatisticsAggregator,
    ):
        """
        Initialize the service with dependencies.

        Args:
            repository: Entry store for persistence
            photo_storage: Storage for uploaded photos
            aggregator: Statistics aggregator
        """
        self.repository = repository
        self.photo_storage = photo_storage
        self.aggregator = aggregator

    def create_entry(
        self,
        trash_type: Optional[str],
        latitude: Optional[str],
        longitude: Optional[str],
        user_name: Optional[str] = None,
        photo: Optional[PhotoUpload] = None,
    ) -> TrashEntry:
        """
        Validate and persist a new entry.

        Fields are validated before the photo is written, and a stored photo
        is removed again if persisting the entry fails.

        Returns:
            The stored entry

        Raises:
            InvalidInputError: If a field is missing or out of range
            UnsupportedMediaError: If the photo is not JPEG or PNG
            PhotoTooLargeError: If the photo exceeds the size limit
            StorageError: If the entry cannot be persisted
        """
        result = validate_trash_entry_input(trash_type, latitude, longitude, user_name)
        if isinstance(result, Invalid):
            logger.warning(f"Rejected trash entry: {result.reason}")
            raise InvalidInputError(result.reason)

        entry_input = result.value
        filename = None
        if photo is not None:
            filename = self.photo_storage.save(photo.stream, photo.content_type, photo.filename)
            entry_input = entry_input.model_copy(
                update={"photo_url": self.photo_storage.url_for(filename)}
            )

        try:
            return self.repository.insert(entry_input)
        except Exception:
            if filename is not None:
                self.photo_storage.delete(filename)
            raise

    def get_entry(self, entry_id: str) -> TrashEntry:
        """
        Fetch one entry.

        Raises:
            EntryNotFoundError: If no entry has this id
        """
        entry = self.repository.get(entry_id)
        if entry is None:
            raise EntryNotFoundError(f"Trash entry '{entry_id}' not found")
        return entry

    def list_entries(
        self,
        entry_filter: EntryFilter,
        page: int,
        limit: int,
    ) -> EntryPage:
        """
        Return one page of entries matching a filter, newest first.

        Args:
            entry_filter: Date bounds and type filter
            page: 1-based page number
            limit: Entries per page

        Returns:
            EntryPage with the slice and the total before pagination
        """
        total = self.repository.count_by_filter(entry_filter)
        entries = self.repository.query_by_filter(
            entry_filter,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return EntryPage(entries=entries, total=total, page=page, limit=limit)

    def get_statistics(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Statistics:
        """
        Compute statistics over entries within a date range.

        Args:
            start_date: Inclusive lower bound (canonical timestamp)
            end_date: Inclusive upper bound (canonical timestamp)
        """
        entries = self.repository.query_by_filter(
            EntryFilter(start_date=start_date, end_date=end_date)
        )
        return self.aggregator.compute(entries)

    def get_photo(self, filename: str) -> Path:
        """
        Resolve a stored photo.

        Raises:
            InvalidFilenameError: If the filename fails the safe pattern
            PhotoNotFoundError: If the photo does not exist
        """
        return self.photo_storage.resolve(filename)
