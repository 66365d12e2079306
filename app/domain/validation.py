"""
Input validation for new entries.

Validation returns a tagged result instead of raising, so callers decide
how an invalid submission is reported before any domain logic runs.
"""
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from app.domain.models import TrashEntryCreate, TrashType


@dataclass(frozen=True)
class Valid:
    """Input passed every check."""
    value: TrashEntryCreate


@dataclass(frozen=True)
class Invalid:
    """Input was rejected; `reason` is safe to show to the caller."""
    reason: str


ValidationResult = Union[Valid, Invalid]


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_coordinate(value: Any) -> Optional[float]:
    """Coerce a form value to a finite float, or None if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def validate_trash_entry_input(
    trash_type: Any,
    latitude: Any,
    longitude: Any,
    user_name: Optional[str] = None,
    photo_url: Optional[str] = None,
) -> ValidationResult:
    """
    Validate the fields of a submission.

    Args:
        trash_type: Raw trash type value
        latitude: Raw latitude (number or numeric string)
        longitude: Raw longitude (number or numeric string)
        user_name: Optional submitter name; blank means anonymous
        photo_url: Relative URL of an already stored photo

    Returns:
        Valid with the parsed input, or Invalid with the first failing reason
    """
    if _is_missing(trash_type):
        return Invalid("trash_type is required")

    if trash_type not in TrashType.values():
        return Invalid(
            f"Invalid trash_type. Must be one of: {', '.join(TrashType.values())}"
        )

    if _is_missing(latitude):
        return Invalid("latitude is required")

    if _is_missing(longitude):
        return Invalid("longitude is required")

    lat = _parse_coordinate(latitude)
    if lat is None:
        return Invalid("latitude must be a number")

    lng = _parse_coordinate(longitude)
    if lng is None:
        return Invalid("longitude must be a number")

    if not -90 <= lat <= 90:
        return Invalid("latitude must be between -90 and 90")

    if not -180 <= lng <= 180:
        return Invalid("longitude must be between -180 and 180")

    name = user_name.strip() if isinstance(user_name, str) else None

    return Valid(TrashEntryCreate(
        trash_type=TrashType(trash_type),
        latitude=lat,
        longitude=lng,
        photo_url=photo_url,
        user_name=name or None,
    ))
