"""
API router for aggregate statistics.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, Query

from app.api.dependencies import TrashServiceDep
from app.api.routers.trash import COMMON_RESPONSES, build_entry_filter
from app.domain.models import Statistics


router = APIRouter(
    prefix="/stats",
    tags=["statistics"],
)


@router.get(
    "",
    response_model=Statistics,
    summary="Get litter statistics",
    description="""
    Aggregate the entries logged within an optional date range.

    The response includes:
    - Total number of entries and a count per trash type
    - The most common type (ties resolve alphabetically)
    - Up to five hotspots: entries grouped on a 0.01 degree grid, centered
      on the mean position of their members, busiest first
    - The earliest and latest entry timestamp (the current time when no
      entry matches)
    """,
    responses={
        **COMMON_RESPONSES,
        200: {
            "description": "Statistics for the matching entries",
            "content": {
                "application/json": {
                    "example": {
                        "total_count": 3,
                        "most_common_type": "plastic",
                        "hotspots": [
                            {"latitude": 12.9005, "longitude": 74.8005, "count": 2, "radius": 1000},
                            {"latitude": 20.0, "longitude": 80.0, "count": 1, "radius": 1000},
                        ],
                        "type_breakdown": {"plastic": 3},
                        "date_range": {
                            "start": "2024-05-01T10:00:00.000Z",
                            "end": "2024-05-03T18:30:00.000Z",
                        },
                    }
                }
            },
        },
    },
)
def get_statistics(
    trash_service: TrashServiceDep,
    start_date: Annotated[Optional[str], Query(description="Inclusive lower bound (ISO-8601)")] = None,
    end_date: Annotated[Optional[str], Query(description="Inclusive upper bound (ISO-8601)")] = None,
) -> Statistics:
    """
    Get statistics for entries within a date range.

    Args:
        trash_service: Trash service (injected dependency)
        start_date: Optional inclusive lower bound
        end_date: Optional inclusive upper bound

    Returns:
        Statistics computed over the matching entries
    """
    entry_filter = build_entry_filter(start_date, end_date)
    return trash_service.get_statistics(
        start_date=entry_filter.start_date,
        end_date=entry_filter.end_date,
    )
