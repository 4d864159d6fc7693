"""Validation utilities shared by the request schemas and the services."""

import re
from typing import Optional

from core.exceptions import DomainValidationError
from database.models.talent import WEEKDAYS


def validate_phone(phone: str) -> tuple[bool, Optional[str]]:
    """
    Validate phone number format (basic validation).

    Args:
        phone: Phone number to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not phone:
        return False, "Phone number is required"

    cleaned = re.sub(r'[\s\-\(\)\.\+]', '', phone)

    if not re.search(r'\d', cleaned):
        return False, "Phone number must contain digits"

    digits = re.findall(r'\d', cleaned)
    if len(digits) < 7 or len(digits) > 15:
        return False, "Phone number must be between 7 and 15 digits"

    return True, None


def normalize_weekly_schedule(
    schedule: Optional[dict[str, list[str]]],
) -> dict[str, list[str]]:
    """
    Normalize a weekday -> shifts mapping.

    Day names are lower-cased, every weekday is present in the result and
    duplicate shifts are dropped while keeping their first position.

    Raises:
        ValueError: If a key is not a weekday
    """
    normalized: dict[str, list[str]] = {day: [] for day in WEEKDAYS}
    for day, shifts in (schedule or {}).items():
        key = day.strip().lower()
        if key not in normalized:
            raise ValueError(f"Unknown weekday: {day}")
        for shift in shifts or []:
            if shift not in normalized[key]:
                normalized[key].append(shift)
    return normalized


def validate_compensation_range(minimum: float, maximum: float) -> None:
    """
    Enforce a well-formed compensation range.

    Raises:
        DomainValidationError: If a bound is negative or min > max
    """
    if minimum < 0 or maximum < 0:
        raise DomainValidationError("Compensation cannot be negative")
    if minimum > maximum:
        raise DomainValidationError(
            "Compensation minimum cannot exceed the maximum",
            details={"min": minimum, "max": maximum},
        )
