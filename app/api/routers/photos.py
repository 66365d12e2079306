"""
API router serving uploaded photos.
"""
from typing import Annotated

from fastapi import APIRouter, Path
from fastapi.responses import FileResponse

from app.api.dependencies import TrashServiceDep
from app.api.models.responses import ErrorResponse


router = APIRouter(
    prefix="/photos",
    tags=["photos"],
)


@router.get(
    "/{filename:path}",
    response_class=FileResponse,
    summary="Get an uploaded photo",
    responses={
        200: {"content": {"image/jpeg": {}, "image/png": {}}},
        400: {"model": ErrorResponse, "description": "Invalid filename"},
        404: {"model": ErrorResponse, "description": "Photo not found"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)
def get_photo(
    filename: Annotated[str, Path(description="Stored photo filename, e.g. <id>.jpg")],
    trash_service: TrashServiceDep,
) -> FileResponse:
    """
    Serve a stored photo.

    Only names made of letters, digits, hyphens and underscores with a
    .jpg/.jpeg/.png extension are accepted; anything else is rejected before
    the file system is touched. The name is matched as a path so encoded
    separators such as ..%2F reach that check instead of the router.
    """
    path = trash_service.get_photo(filename)
    return FileResponse(
        path,
        media_type=trash_service.photo_storage.media_type(filename),
        headers={"Cache-Control": "public, max-age=31536000"},
    )
