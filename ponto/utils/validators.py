import math
import re
from datetime import datetime
from typing import Any

from ponto.exceptions import ValidationError


FINGERPRINT_PATTERN = re.compile(r'^[A-Za-z0-9_-]{8,128}$')
MAX_CLIENT_TIMESTAMP_LENGTH = 40


def validate_required_fields(data: dict, required_fields: list) -> list:
    """Return the required fields that are missing or blank"""
    missing_fields = []

    for field in required_fields:
        if field not in data or data[field] is None or str(data[field]).strip() == '':
            missing_fields.append(field)

    return missing_fields


def validate_choice(value: Any, choices: list, field: str) -> str:
    """Validate an enumerated value"""
    if value not in choices:
        raise ValidationError(f"Invalid {field}: {value!r} (expected one of {', '.join(choices)})", field)
    return value


def validate_number(value: Any, field: str) -> float:
    """Coerce to a finite float"""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field)
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be finite", field)
    return number


def validate_latitude(value: Any) -> float:
    lat = validate_number(value, "lat")
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude out of range: {lat}", "lat")
    return lat


def validate_longitude(value: Any) -> float:
    lon = validate_number(value, "lon")
    if not -180.0 <= lon <= 180.0:
        raise ValidationError(f"Longitude out of range: {lon}", "lon")
    return lon


def validate_accuracy(value: Any) -> float:
    accuracy = validate_number(value, "accuracy_m")
    if accuracy < 0:
        raise ValidationError("accuracy_m must not be negative", "accuracy_m")
    return accuracy


def validate_client_timestamp(value: Any, field: str) -> str:
    """An ISO-8601 timestamp string as sent by the device, stored verbatim"""
    if not isinstance(value, str) or len(value) > MAX_CLIENT_TIMESTAMP_LENGTH:
        raise ValidationError(
            f"{field} must be an ISO-8601 string of at most {MAX_CLIENT_TIMESTAMP_LENGTH} characters", field
        )
    try:
        datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{field} is not an ISO-8601 timestamp: {value!r}", field)
    return value


def validate_fingerprint(value: Any) -> str:
    if not isinstance(value, str) or not FINGERPRINT_PATTERN.match(value):
        raise ValidationError("fingerprint must be 8-128 characters of [A-Za-z0-9_-]", "fingerprint")
    return value


def validate_photo(content: bytes, content_type: str, allowed_types: list, max_size: int) -> None:
    """Validate a submitted photo payload"""
    if not content:
        raise ValidationError("Photo is required", "photo")

    if len(content) > max_size:
        raise ValidationError(f"Photo exceeds maximum size ({max_size} bytes)", "photo")

    if content_type not in allowed_types:
        raise ValidationError(f"Unsupported photo content type: {content_type}", "photo")


def validate_pagination_params(skip: int, limit: int, max_limit: int) -> tuple:
    """Clamp pagination parameters into range"""
    skip = max(0, skip)
    limit = max(1, min(limit, max_limit))
    return skip, limit


def sanitize_input(text: str) -> str:
    """Strip and collapse whitespace"""
    if not text:
        return ""

    text = text.strip()
    return re.sub(r'\s+', ' ', text)
