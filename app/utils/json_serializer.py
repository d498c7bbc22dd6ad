"""
Conversion of audit metadata into values a JSON column accepts
"""
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from pydantic import BaseModel

from app.utils.datetime_utils import ensure_utc


def sanitize_for_json(obj: Any) -> Any:
    """
    Recursively convert audit metadata to JSON-safe values.

    Datetimes are normalized to UTC before formatting so old/new timestamps
    in audit entries compare as strings. Enums collapse to their values and
    pydantic models to their dumped dicts.
    """
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return ensure_utc(obj).isoformat()
    if isinstance(obj, (date, time)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [sanitize_for_json(item) for item in obj]
    if isinstance(obj, BaseModel):
        return sanitize_for_json(obj.model_dump())
    return str(obj)
