from datetime import datetime, timedelta, timezone

import pytest

from iot_platform.exceptions import ValidationError
from iot_platform.utils.validation import (
    is_present,
    parse_timestamp,
    require_fields,
    strip_identifiers,
    utcnow,
)


class TestParseTimestamp:
    def test_iso_string_with_z(self):
        assert parse_timestamp("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10, 0, 0)

    def test_offset_is_converted_to_utc(self):
        assert parse_timestamp("2024-05-01T12:00:00+02:00") == datetime(2024, 5, 1, 10, 0, 0)

    def test_date_only(self):
        assert parse_timestamp("2024-05-01") == datetime(2024, 5, 1)

    def test_epoch_milliseconds(self):
        assert parse_timestamp(1714557600000) == datetime(2024, 5, 1, 10, 0, 0)

    def test_aware_datetime_becomes_naive_utc(self):
        value = datetime(2024, 5, 1, 10, 0, tzinfo=timezone(timedelta(hours=-4)))
        assert parse_timestamp(value) == datetime(2024, 5, 1, 14, 0)

    @pytest.mark.parametrize("value", ["not-a-date", "", True, {"at": 1}])
    def test_rejects_garbage(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_timestamp(value)
        assert exc_info.value.message.startswith("Invalid timestamp")

    def test_field_name_in_message(self):
        with pytest.raises(ValidationError, match="Invalid start_date"):
            parse_timestamp("yesterday", field="start_date")


def test_utcnow_is_naive_with_millisecond_precision():
    now = utcnow()
    assert now.tzinfo is None
    assert now.microsecond % 1000 == 0


def test_is_present():
    assert is_present(0)
    assert is_present(False)
    assert is_present("x")
    assert not is_present(None)
    assert not is_present("")


def test_require_fields_lists_every_required_field():
    with pytest.raises(ValidationError) as exc_info:
        require_fields({"id": "exp-1", "title": ""}, ("id", "title"))
    assert exc_info.value.message == "Missing required fields: id, title"
    assert exc_info.value.status_code == 400


def test_require_fields_passes():
    require_fields({"id": "exp-1", "title": "T"}, ("id", "title"))


def test_strip_identifiers_returns_a_copy():
    update = {"id": "other", "_id": "x", "title": "New"}
    assert strip_identifiers(update) == {"title": "New"}
    assert update["id"] == "other"
