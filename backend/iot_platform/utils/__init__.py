"""
Utility modules for the IoT platform backend.
"""

from iot_platform.utils.validation import (
    IDENTIFIER_FIELDS,
    is_present,
    parse_timestamp,
    require_fields,
    strip_identifiers,
    to_naive_utc,
    utcnow,
)
from iot_platform.utils.filters import (
    DEFAULT_MEASUREMENT_LIMIT,
    DEFAULT_SENSOR_MEASUREMENT_LIMIT,
    build_equality_filter,
    build_measurement_filter,
    build_timestamp_range,
    parse_limit,
)

__all__ = [
    "IDENTIFIER_FIELDS",
    "is_present",
    "parse_timestamp",
    "require_fields",
    "strip_identifiers",
    "to_naive_utc",
    "utcnow",
    "DEFAULT_MEASUREMENT_LIMIT",
    "DEFAULT_SENSOR_MEASUREMENT_LIMIT",
    "build_equality_filter",
    "build_measurement_filter",
    "build_timestamp_range",
    "parse_limit",
]
