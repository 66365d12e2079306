"""
API response models using Pydantic.
"""
from typing import List
from pydantic import BaseModel, Field

from app.domain.models import TrashEntry


class TrashEntryListResponse(BaseModel):
    """Response model for the entry listing endpoint."""
    entries: List[TrashEntry] = Field(
        description="Entries on the requested page, newest first"
    )
    total: int = Field(
        description="Number of matching entries before pagination"
    )
    page: int = Field(
        description="1-based page number"
    )
    limit: int = Field(
        description="Entries per page"
    )
    totalPages: int = Field(
        description="Number of pages for the current limit"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "entries": [
                    {
                        "id": "3f1c6a8e-0f59-4a43-9a0c-2b6f4b8d9e11",
                        "timestamp": "2024-05-01T10:00:00.000Z",
                        "trash_type": "plastic",
                        "latitude": 12.9141,
                        "longitude": 74.856,
                        "photo_url": "/photos/5b0e7c4a9d2f4f0c8a61e3d27b9c4a10.jpg",
                        "user_name": "Asha",
                    }
                ],
                "total": 1,
                "page": 1,
                "limit": 100,
                "totalPages": 1,
            }
        }


class ErrorDetail(BaseModel):
    code: str = Field(description="Machine-readable error code", examples=["INVALID_INPUT"])
    message: str = Field(description="Human-readable description")


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: ErrorDetail
