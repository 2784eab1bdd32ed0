"""
Response envelopes shared by every endpoint
"""
import math
from typing import Any, Optional, Sequence

PHONE_PATTERN = r"^\d{10}$"
PINCODE_PATTERN = r"^\d{6}$"
HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def envelope(data: Any = None, message: Optional[str] = None) -> dict:
    """{success, message?, data} for single-resource responses"""
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def paginated(items: Sequence[Any], total: int, page: int, limit: int, **extra) -> dict:
    """{success, count, total, pagination: {page, pages}, data} for list responses"""
    body = {
        "success": True,
        "count": len(items),
        "total": total,
        "pagination": {"page": page, "pages": page_count(total, limit)},
    }
    body.update(extra)
    body["data"] = list(items)
    return body
