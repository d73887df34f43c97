"""
velada/utils/pagination.py
Lenient limit/offset parsing for the public list endpoints

Bad input never fails the request: non-numeric values fall back to the
defaults and numeric values are clamped into range.
"""
import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0
MIN_LIMIT = 1
MAX_LIMIT = 100
# Longer digit runs saturate instead of reaching int()
MAX_DIGITS = 18


@dataclass(frozen=True)
class PaginationParams:
    limit: int
    offset: int
    page: int


@dataclass(frozen=True)
class PaginationMeta:
    total: int
    limit: int
    offset: int
    page: int
    total_pages: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def _parse_int(raw: Any, default: int) -> int:
    """
    Leading-integer parse: "25abc" -> 25, "abc" -> default, 7.9 -> 7.
    None and empty strings give the default.
    """
    if raw is None:
        return default
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return default if math.isnan(raw) or math.isinf(raw) else int(raw)

    text = str(raw).strip()
    digits = ""
    for index, char in enumerate(text):
        if char.isdigit() and char.isascii():
            digits += char
        elif index == 0 and char in "+-":
            digits += char
        else:
            break
    sign, body = ("-", digits[1:]) if digits[:1] == "-" else ("", digits.lstrip("+"))
    body = body.lstrip("0") or ("0" if body else "")
    if len(body) > MAX_DIGITS:
        return -(10 ** MAX_DIGITS) if sign else 10 ** MAX_DIGITS
    try:
        return int(sign + body)
    except ValueError:
        return default


def parse_pagination_params(limit: Optional[Any] = None, offset: Optional[Any] = None) -> PaginationParams:
    """Clamp limit to [1, 100] (default 10) and offset to >= 0 (default 0)."""
    parsed_limit = min(MAX_LIMIT, max(MIN_LIMIT, _parse_int(limit, DEFAULT_LIMIT)))
    parsed_offset = max(0, _parse_int(offset, DEFAULT_OFFSET))
    return PaginationParams(
        limit=parsed_limit,
        offset=parsed_offset,
        page=parsed_offset // parsed_limit + 1,
    )


def calculate_pagination(total: int, limit: int, offset: int) -> PaginationMeta:
    return PaginationMeta(
        total=total,
        limit=limit,
        offset=offset,
        page=offset // limit + 1,
        total_pages=math.ceil(total / limit),
    )
