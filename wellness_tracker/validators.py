"""
Shared field validators for request schemas
"""
import re
from typing import List, Optional

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def normalize_time(v: Optional[str]) -> Optional[str]:
    """Accepts H:MM or HH:MM and returns zero-padded HH:MM"""
    if v is None:
        return v
    match = TIME_PATTERN.match(v.strip())
    if not match:
        raise ValueError("Time must be in HH:MM format")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def validate_days(v: Optional[List[int]]) -> Optional[List[int]]:
    """Weekdays are unique integers 0-6 (0 = Sunday)"""
    if v is None:
        return v
    if not all(0 <= day <= 6 for day in v):
        raise ValueError("Days must be integers between 0 and 6")
    if len(v) != len(set(v)):
        raise ValueError("Days must be unique")
    return sorted(v)


def strip_required(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Value cannot be empty")
    return v


def applies_on(days: Optional[List[int]], weekday: int) -> bool:
    """An absent or empty weekday set means every day"""
    return not days or weekday in days


def sunday_based_weekday(day) -> int:
    """0 = Sunday ... 6 = Saturday"""
    return (day.weekday() + 1) % 7


def reject_null(v):
    """For partial updates of columns that cannot be cleared"""
    if v is None:
        raise ValueError("Value cannot be null")
    return v
