"""
API router for litter entry endpoints.
"""
from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, Path, Query, UploadFile, status

from app.api.dependencies import TrashServiceDep
from app.api.models.responses import ErrorResponse, TrashEntryListResponse
from app.config import settings
from app.domain.exceptions import InvalidInputError
from app.domain.models import EntryFilter, TrashEntry, TrashType
from app.services.application.trash_service import PhotoUpload
from app.utils.timestamps import normalize_date_bound


router = APIRouter(
    prefix="/trash",
    tags=["trash"],
)

COMMON_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def build_entry_filter(
    start_date: Optional[str],
    end_date: Optional[str],
    trash_type: Optional[TrashType] = None,
) -> EntryFilter:
    """
    Turn raw query values into an EntryFilter with canonical date bounds.

    Raises:
        InvalidInputError: If a date is not valid ISO-8601
    """
    try:
        start = normalize_date_bound(start_date)
    except ValueError:
        raise InvalidInputError("start_date must be an ISO-8601 date or timestamp") from None
    try:
        end = normalize_date_bound(end_date, end_of_range=True)
    except ValueError:
        raise InvalidInputError("end_date must be an ISO-8601 date or timestamp") from None

    return EntryFilter(start_date=start, end_date=end, trash_type=trash_type)


@router.post(
    "",
    response_model=TrashEntry,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Log a litter sighting",
    description="""
    Create a new trash entry from a multipart form.

    The photo is optional and must be a JPEG or PNG no larger than the
    configured size limit. Fields are validated before the photo is stored,
    and a stored photo is removed again if the entry cannot be saved.
    """,
    responses={
        **COMMON_RESPONSES,
        413: {"model": ErrorResponse, "description": "Photo too large"},
        415: {"model": ErrorResponse, "description": "Photo is not JPEG or PNG"},
    },
)
def create_trash_entry(
    trash_service: TrashServiceDep,
    trash_type: Annotated[Optional[str], Form(description="One of the trash types")] = None,
    latitude: Annotated[Optional[str], Form(description="Latitude in degrees (-90..90)")] = None,
    longitude: Annotated[Optional[str], Form(description="Longitude in degrees (-180..180)")] = None,
    user_name: Annotated[Optional[str], Form(description="Optional submitter name")] = None,
    photo: Annotated[Optional[UploadFile], File(description="Optional JPEG/PNG photo")] = None,
) -> TrashEntry:
    """
    Create a trash entry.

    Args:
        trash_service: Trash service (injected dependency)
        trash_type: Trash category
        latitude: Latitude as submitted
        longitude: Longitude as submitted
        user_name: Optional name; omitted for anonymous entries
        photo: Optional photo upload

    Returns:
        The stored entry
    """
    upload = None
    if photo is not None and photo.filename:
        upload = PhotoUpload(
            stream=photo.file,
            content_type=photo.content_type,
            filename=photo.filename,
        )

    return trash_service.create_entry(
        trash_type=trash_type,
        latitude=latitude,
        longitude=longitude,
        user_name=user_name,
        photo=upload,
    )


@router.get(
    "",
    response_model=TrashEntryListResponse,
    response_model_exclude_none=True,
    summary="List trash entries",
    description="""
    Return entries newest first, optionally filtered by an inclusive date
    range and trash type, one page at a time. A plain end_date covers the
    whole day.
    """,
    responses=COMMON_RESPONSES,
)
def list_trash_entries(
    trash_service: TrashServiceDep,
    start_date: Annotated[Optional[str], Query(description="Inclusive lower bound (ISO-8601)")] = None,
    end_date: Annotated[Optional[str], Query(description="Inclusive upper bound (ISO-8601)")] = None,
    trash_type: Annotated[Optional[TrashType], Query(description="Only entries of this type")] = None,
    page: Annotated[int, Query(ge=1, description="1-based page number")] = 1,
    limit: Annotated[
        int, Query(ge=1, le=settings.max_page_size, description="Entries per page")
    ] = settings.default_page_size,
) -> TrashEntryListResponse:
    """
    List trash entries.

    Returns:
        TrashEntryListResponse with the page and pagination totals
    """
    entry_filter = build_entry_filter(start_date, end_date, trash_type)
    result = trash_service.list_entries(entry_filter, page=page, limit=limit)

    return TrashEntryListResponse(
        entries=result.entries,
        total=result.total,
        page=result.page,
        limit=result.limit,
        totalPages=result.total_pages,
    )


@router.get(
    "/{entry_id}",
    response_model=TrashEntry,
    response_model_exclude_none=True,
    summary="Get a trash entry",
    responses={
        **COMMON_RESPONSES,
        404: {"model": ErrorResponse, "description": "Entry not found"},
    },
)
def get_trash_entry(
    entry_id: Annotated[str, Path(description="Entry identifier")],
    trash_service: TrashServiceDep,
) -> TrashEntry:
    """Fetch a single entry by id."""
    return trash_service.get_entry(entry_id)
