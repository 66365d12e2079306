"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from app.infrastructure.database import Database, get_database
from app.infrastructure.photo_storage import PhotoStorage
from app.infrastructure.trash_repository import TrashRepository
from app.services.domain.statistics_aggregator import StatisticsAggregator
from app.services.application.trash_service import TrashService


def get_trash_repository(
    database: Annotated[Database, Depends(get_database)],
) -> TrashRepository:
    """
    Dependency factory for the entry store.

    Args:
        database: Database (injected)

    Returns:
        TrashRepository instance
    """
    return TrashRepository(database)


def get_photo_storage() -> PhotoStorage:
    """Dependency factory for PhotoStorage."""
    return PhotoStorage()


def get_statistics_aggregator() -> StatisticsAggregator:
    """Dependency factory for StatisticsAggregator."""
    return StatisticsAggregator()


def get_trash_service(
    repository: Annotated[TrashRepository, Depends(get_trash_repository)],
    photo_storage: Annotated[PhotoStorage, Depends(get_photo_storage)],
    aggregator: Annotated[StatisticsAggregator, Depends(get_statistics_aggregator)],
) -> TrashService:
    """
    Dependency factory for TrashService.

    Args:
        repository: Entry store (injected)
        photo_storage: Photo storage (injected)
        aggregator: Statistics aggregator (injected)

    Returns:
        TrashService instance
    """
    return TrashService(
        repository=repository,
        photo_storage=photo_storage,
        aggregator=aggregator,
    )


# Type aliases for cleaner route signatures
TrashServiceDep = Annotated[TrashService, Depends(get_trash_service)]
