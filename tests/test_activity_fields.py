"""Tests for activity field coercion and photo checks."""

import datetime as dt

import pytest

from sports_tracker.activities.fields import (
    MAX_DURATION_MINUTES,
    coerce_duration,
    normalize_date,
    parse_boolean_flag,
)
from sports_tracker.activities.photos import validate_photo
from sports_tracker.exceptions import PayloadTooLargeError, ValidationError
from sports_tracker.models.activity import Photo


class TestParseBooleanFlag:
    """Tests for tolerant boolean parsing."""

    @pytest.mark.parametrize("value", ["true", "TRUE", " yes ", "1", "on", 1, True])
    def test_truthy(self, value):
        assert parse_boolean_flag(value) is True

    @pytest.mark.parametrize("value", ["false", "No", "0", "off", 0, False])
    def test_falsy(self, value):
        assert parse_boolean_flag(value, default=True) is False

    @pytest.mark.parametrize("value", [None, "", "maybe", "2"])
    def test_unrecognised_uses_default(self, value):
        assert parse_boolean_flag(value) is False
        assert parse_boolean_flag(value, default=True) is True


class TestCoerceDuration:
    """Tests for duration coercion."""

    def test_accepts_numbers_and_numeric_strings(self):
        assert coerce_duration(30) == 30
        assert coerce_duration(45.0) == 45
        assert coerce_duration(" 60 ") == 60

    @pytest.mark.parametrize("value", [0, -5, "0", "abc", None, True, float("nan"), [30]])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            coerce_duration(value)

    def test_rejects_fractional_minutes(self):
        with pytest.raises(ValidationError, match="whole number"):
            coerce_duration("12.5")

    @pytest.mark.parametrize("value", ["1e10", 2**31, 10**12])
    def test_rejects_values_beyond_integer_column(self, value):
        with pytest.raises(ValidationError, match="too large"):
            coerce_duration(value)

    def test_largest_storable_duration(self):
        assert coerce_duration(MAX_DURATION_MINUTES) == 2**31 - 1


class TestNormalizeDate:
    """Tests for calendar date normalization."""

    def test_plain_string(self):
        assert normalize_date("2024-01-31") == dt.date(2024, 1, 31)

    def test_trailing_time_is_ignored(self):
        """Late-evening timestamps must not roll over to another day."""
        assert normalize_date("2024-01-31T23:30:00-08:00") == dt.date(2024, 1, 31)
        assert normalize_date("2024-01-01T00:10:00+14:00") == dt.date(2024, 1, 1)

    def test_date_and_datetime_objects(self):
        assert normalize_date(dt.date(2024, 2, 29)) == dt.date(2024, 2, 29)
        aware = dt.datetime(2024, 3, 1, 23, 59, tzinfo=dt.timezone(dt.timedelta(hours=-10)))
        assert normalize_date(aware) == dt.date(2024, 3, 1)

    def test_output_is_iso(self):
        assert normalize_date("2024-07-04").isoformat() == "2024-07-04"

    @pytest.mark.parametrize("value", ["yesterday", "2024-13-01", "2023-02-29", "01/02/2024"])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            normalize_date(value)


class TestValidatePhoto:
    """Tests for photo upload checks."""

    def test_accepts_image(self):
        photo = validate_photo("image/png", b"\x89PNG....")
        assert photo == Photo(media_type="image/png", data=b"\x89PNG....")
        assert photo.to_data_url().startswith("data:image/png;base64,")

    def test_empty_upload_means_no_photo(self):
        assert validate_photo("image/png", b"") is None

    def test_rejects_non_image(self):
        with pytest.raises(ValidationError, match="Only image uploads are allowed."):
            validate_photo("application/pdf", b"%PDF-1.4")

    def test_rejects_oversized(self):
        data = b"x" * (5 * 1024 * 1024 + 1)
        with pytest.raises(PayloadTooLargeError, match="Photo must be smaller than 5 MB."):
            validate_photo("image/jpeg", data)

    def test_size_error_is_distinct_from_validation_error(self):
        assert not issubclass(PayloadTooLargeError, ValidationError)
