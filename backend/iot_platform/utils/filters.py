"""
Query Filter Construction
=========================

Turns query-string parameters into MongoDB filter documents.

THE RULE:
---------
Only constrain what was explicitly supplied. A parameter adds a condition
only when it is present AND non-empty, so ``?status=`` behaves exactly like
leaving ``status`` out. Range bounds are independent: a start date alone
gives an open-ended "from" range, an end date alone an open-ended "until".

    build_equality_filter(experiment_id="exp-1", status=None)
        -> {"experiment_id": "exp-1"}

    build_measurement_filter(sensor_id="s1", start_date="2024-01-01")
        -> {"sensor_id": "s1", "timestamp": {"$gte": datetime(2024, 1, 1)}}

None of these functions touch the database.
"""

from typing import Optional

from iot_platform.exceptions import ValidationError
from iot_platform.utils.validation import is_present, parse_timestamp


DEFAULT_MEASUREMENT_LIMIT = 1000
DEFAULT_SENSOR_MEASUREMENT_LIMIT = 100


def build_equality_filter(**params) -> dict:
    """Equality conditions for every supplied, non-empty parameter."""
    return {field: value for field, value in params.items() if is_present(value)}


def build_timestamp_range(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Optional[dict]:
    """
    Inclusive timestamp range, or None when neither bound was supplied.

    Raises:
        ValidationError: if a supplied bound is not a date
    """
    bounds = {}
    if is_present(start_date):
        bounds["$gte"] = parse_timestamp(start_date, field="start_date")
    if is_present(end_date):
        bounds["$lte"] = parse_timestamp(end_date, field="end_date")
    return bounds or None


def build_measurement_filter(
    sensor_id: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> dict:
    """Filter for measurement listings: sensor equality plus timestamp range."""
    query = build_equality_filter(sensor_id=sensor_id)
    time_range = build_timestamp_range(start_date, end_date)
    if time_range:
        query["timestamp"] = time_range
    return query


def parse_limit(value: Optional[str], default: int) -> int:
    """
    Read a ``limit`` query parameter.

    Missing or empty means ``default``. Anything else has to be a positive
    integer; MongoDB treats a limit of 0 as "no limit", which is not what a
    caller asking for 0 items means.
    """
    if not is_present(value):
        return default
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid limit: {value}")
    if limit < 1:
        raise ValidationError(f"Invalid limit: {value}. Must be a positive integer.")
    return limit
