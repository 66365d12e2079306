"""
Unit tests for entry validation and timestamp helpers.
"""
import math
from datetime import datetime, timedelta, timezone

import pytest

from app.domain.models import TrashType
from app.domain.validation import Invalid, Valid, validate_trash_entry_input
from app.utils.timestamps import format_instant, normalize_date_bound, utc_now_iso


# ============================================================
# Validation Tests
# ============================================================

class TestValidateTrashEntryInput:
    """Tests for the tagged validation result."""

    def test_valid_input(self):
        result = validate_trash_entry_input("plastic", "12.9141", "74.856", "Asha")

        assert isinstance(result, Valid)
        assert result.value.trash_type == TrashType.PLASTIC
        assert result.value.latitude == 12.9141
        assert result.value.longitude == 74.856
        assert result.value.user_name == "Asha"

    def test_accepts_numbers(self):
        result = validate_trash_entry_input("glass", -90, 180)

        assert isinstance(result, Valid)
        assert result.value.latitude == -90.0
        assert result.value.longitude == 180.0

    @pytest.mark.parametrize("trash_type", [None, "", "   "])
    def test_missing_trash_type(self, trash_type):
        result = validate_trash_entry_input(trash_type, "1", "1")

        assert result == Invalid("trash_type is required")

    def test_unknown_trash_type(self):
        result = validate_trash_entry_input("metal", "1", "1")

        assert isinstance(result, Invalid)
        assert result.reason.startswith("Invalid trash_type")
        assert "bulky_item" in result.reason

    def test_missing_latitude(self):
        assert validate_trash_entry_input("paper", None, "1") == Invalid("latitude is required")

    def test_missing_longitude(self):
        assert validate_trash_entry_input("paper", "1", "") == Invalid("longitude is required")

    @pytest.mark.parametrize("latitude", ["north", "nan", "inf", math.nan, True])
    def test_non_numeric_latitude(self, latitude):
        result = validate_trash_entry_input("other", latitude, "1")

        assert result == Invalid("latitude must be a number")

    def test_non_numeric_longitude(self):
        result = validate_trash_entry_input("other", "1", "east")

        assert result == Invalid("longitude must be a number")

    @pytest.mark.parametrize("latitude", ["95", "-90.0001", 91])
    def test_latitude_out_of_range(self, latitude):
        result = validate_trash_entry_input("hazardous", latitude, "0")

        assert result == Invalid("latitude must be between -90 and 90")

    @pytest.mark.parametrize("longitude", ["180.5", "-181"])
    def test_longitude_out_of_range(self, longitude):
        result = validate_trash_entry_input("hazardous", "0", longitude)

        assert result == Invalid("longitude must be between -180 and 180")

    def test_blank_user_name_is_anonymous(self):
        result = validate_trash_entry_input("bulky_item", "1", "1", "   ")

        assert isinstance(result, Valid)
        assert result.value.user_name is None

    def test_user_name_is_trimmed(self):
        result = validate_trash_entry_input("bulky_item", "1", "1", "  Ravi ")

        assert result.value.user_name == "Ravi"


# ============================================================
# Timestamp Tests
# ============================================================

class TestTimestamps:
    """Tests for canonical timestamps and filter bounds."""

    def test_format_instant_uses_milliseconds_and_z(self):
        moment = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)

        assert format_instant(moment) == "2024-05-01T10:00:00.123Z"

    def test_format_instant_converts_to_utc(self):
        moment = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_instant(moment) == "2024-05-01T10:00:00.000Z"

    def test_naive_datetime_is_utc(self):
        assert format_instant(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000Z"

    def test_utc_now_iso_shape(self):
        value = utc_now_iso()

        assert len(value) == 24
        assert value.endswith("Z")

    def test_plain_start_date(self):
        assert normalize_date_bound("2024-05-01") == "2024-05-01T00:00:00.000Z"

    def test_plain_end_date_covers_whole_day(self):
        assert normalize_date_bound("2024-05-01", end_of_range=True) == "2024-05-01T23:59:59.999Z"

    def test_full_instant_with_z(self):
        assert normalize_date_bound("2024-05-01T10:30:00Z") == "2024-05-01T10:30:00.000Z"

    def test_full_instant_with_offset(self):
        assert normalize_date_bound("2024-05-01T10:30:00+05:30") == "2024-05-01T05:00:00.000Z"

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_blank_means_no_bound(self, value):
        assert normalize_date_bound(value) is None

    @pytest.mark.parametrize("value", ["yesterday", "2024-13-01", "2024-05-01T25:00:00Z"])
    def test_invalid_dates_raise(self, value):
        with pytest.raises(ValueError):
            normalize_date_bound(value)
