"""
Domain models for litter entries and their statistics.

These models represent the core domain entities and should be independent
of any infrastructure concerns (databases, file storage, HTTP).
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class TrashType(str, Enum):
    """Supported litter categories."""
    PLASTIC = "plastic"
    GLASS = "glass"
    PAPER = "paper"
    BULKY_ITEM = "bulky_item"
    HAZARDOUS = "hazardous"
    OTHER = "other"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class TrashEntryCreate(BaseModel):
    """Validated input for a new entry (no id or timestamp yet)."""
    trash_type: TrashType
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    photo_url: Optional[str] = None
    user_name: Optional[str] = None


class TrashEntry(BaseModel):
    """A persisted litter sighting."""
    id: str
    timestamp: str = Field(description="ISO-8601 UTC instant, e.g. 2024-05-01T10:00:00.000Z")
    trash_type: TrashType
    latitude: float
    longitude: float
    photo_url: Optional[str] = None
    user_name: Optional[str] = None

    class Config:
        from_attributes = True


class EntryFilter(BaseModel):
    """Filter applied when reading entries from the store."""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    trash_type: Optional[TrashType] = None


class Hotspot(BaseModel):
    """A geographic cluster of entries reported as a single point."""
    latitude: float
    longitude: float
    count: int
    radius: int = Field(description="Display radius in meters")


class DateRange(BaseModel):
    """Earliest and latest timestamp of an entry set."""
    start: str
    end: str


class Statistics(BaseModel):
    """Aggregate view over a set of entries."""
    total_count: int
    most_common_type: str
    hotspots: list[Hotspot]
    type_breakdown: dict[str, int]
    date_range: DateRange
