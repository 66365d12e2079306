"""
Infrastructure layer: Entry Store backed by SQLAlchemy.

The `trash_entries` table repeats the coordinate and type constraints as CHECK
constraints so invalid rows are rejected by the database as well as by the
validation step.
"""
from typing import Optional, Protocol
import logging
import uuid

from sqlalchemy import CheckConstraint, Column, Float, Index, String, desc
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Query, Session
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from app.config import settings
from app.domain.exceptions import StorageError
from app.domain.models import EntryFilter, TrashEntry, TrashEntryCreate, TrashType
from app.infrastructure.database import Base, Database
from app.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

_TYPE_LIST = ", ".join(f"'{value}'" for value in TrashType.values())


class TrashEntryRecord(Base):
    __tablename__ = "trash_entries"

    id         = Column(String(36), primary_key=True)
    timestamp  = Column(String(24), nullable=False, index=True)
    trash_type = Column(String(20), nullable=False, index=True)
    latitude   = Column(Float, nullable=False)
    longitude  = Column(Float, nullable=False)
    photo_url  = Column(String, nullable=True)
    user_name  = Column(String, nullable=True)

    __table_args__ = (
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_trash_entries_latitude"),
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_trash_entries_longitude"),
        CheckConstraint(f"trash_type IN ({_TYPE_LIST})", name="ck_trash_entries_trash_type"),
        Index("idx_trash_entries_location", "latitude", "longitude"),
    )


class TrashEntryStore(Protocol):
    """Operations the application layer needs from an entry store."""

    def insert(self, entry_input: TrashEntryCreate) -> TrashEntry: ...

    def get(self, entry_id: str) -> Optional[TrashEntry]: ...

    def query_by_filter(
        self,
        entry_filter: Optional[EntryFilter] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[TrashEntry]: ...

    def count_by_filter(self, entry_filter: Optional[EntryFilter] = None) -> int: ...


class TrashRepository:
    """
    SQLAlchemy implementation of the entry store.

    Each operation runs in its own session. Writes that hit SQLite lock
    contention are retried with exponential backoff.
    """

    def __init__(self, database: Database):
        self.database = database

    def insert(self, entry_input: TrashEntryCreate) -> TrashEntry:
        """
        Persist a new entry with a generated id and timestamp.

        Args:
            entry_input: Validated entry fields

        Returns:
            The stored entry

        Raises:
            StorageError: If the write fails
        """
        record = TrashEntryRecord(
            id=str(uuid.uuid4()),
            timestamp=utc_now_iso(),
            trash_type=entry_input.trash_type.value,
            latitude=entry_input.latitude,
            longitude=entry_input.longitude,
            photo_url=entry_input.photo_url,
            user_name=entry_input.user_name,
        )

        try:
            self._write(record)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to insert trash entry: {e}",
                extra={"entry_id": record.id, "trash_type": record.trash_type},
            )
            raise StorageError(f"Failed to insert trash entry {record.id}") from e

        logger.info(f"Stored trash entry {record.id} ({record.trash_type})")
        return TrashEntry.model_validate(record)

    @retry(
        stop=stop_after_attempt(settings.db_max_retry_attempts),
        wait=wait_exponential(
            min=settings.db_retry_min_wait,
            max=settings.db_retry_max_wait,
        ),
        retry=retry_if_exception_type(OperationalError),
        reraise=True,
    )
    def _write(self, record: TrashEntryRecord) -> None:
        with self.database.session() as session:
            session.add(record)

    def get(self, entry_id: str) -> Optional[TrashEntry]:
        """
        Fetch a single entry by id.

        Returns:
            The entry, or None if it does not exist
        """
        try:
            with self.database.session() as session:
                record = session.get(TrashEntryRecord, entry_id)
                return TrashEntry.model_validate(record) if record else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to fetch trash entry {entry_id}: {e}") from e

    def query_by_filter(
        self,
        entry_filter: Optional[EntryFilter] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[TrashEntry]:
        """
        Read entries matching a filter, newest first.

        Args:
            entry_filter: Optional date bounds (inclusive) and type
            offset: Number of matching entries to skip
            limit: Maximum number of entries to return

        Returns:
            Matching entries ordered by timestamp descending
        """
        try:
            with self.database.session() as session:
                query = self._filtered(session, entry_filter).order_by(
                    desc(TrashEntryRecord.timestamp),
                    desc(TrashEntryRecord.id),
                )
                if offset:
                    query = query.offset(offset)
                if limit is not None:
                    query = query.limit(limit)
                return [TrashEntry.model_validate(record) for record in query.all()]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to query trash entries: {e}") from e

    def count_by_filter(self, entry_filter: Optional[EntryFilter] = None) -> int:
        """Count entries matching a filter."""
        try:
            with self.database.session() as session:
                return self._filtered(session, entry_filter).count()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to count trash entries: {e}") from e

    @staticmethod
    def _filtered(session: Session, entry_filter: Optional[EntryFilter]) -> Query:
        query = session.query(TrashEntryRecord)
        if entry_filter is None:
            return query

        if entry_filter.start_date:
            query = query.filter(TrashEntryRecord.timestamp >= entry_filter.start_date)
        if entry_filter.end_date:
            query = query.filter(TrashEntryRecord.timestamp <= entry_filter.end_date)
        if entry_filter.trash_type:
            query = query.filter(TrashEntryRecord.trash_type == entry_filter.trash_type.value)
        return query
