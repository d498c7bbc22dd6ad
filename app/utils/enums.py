"""Helpers for columns that store enum values as plain strings."""
from enum import Enum
from typing import Optional, Union


def enum_to_str(v: Union[Enum, str, None]) -> Optional[str]:
    """Return the stored string for an AppRole/AttendanceStatus member or a raw string."""
    if v is None:
        return None
    return v.value if isinstance(v, Enum) else str(v)
