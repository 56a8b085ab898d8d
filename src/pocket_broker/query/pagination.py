"""Pagination parameters and page envelopes."""
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass

from pocket_broker.errors import bad_request
from pocket_broker.schemas import Pagination

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
DEFAULT_LIST_LIMIT = 10

_INT_RE = re.compile(r"^[+-]?\d+$")


def parse_int(value: str | None) -> int | None:
    """Strict integer parse; None for missing or non-integer text."""
    if value is None:
        return None
    text = value.strip()
    return int(text) if _INT_RE.match(text) else None


def parse_id(value: str | None, *, error: str = "Valid ID is required",
             code: str = "INVALID_ID") -> int:
    """Parse a required integer identifier or raise 400."""
    parsed = parse_int(value)
    if parsed is None:
        raise bad_request(error, code)
    return parsed


def parse_optional_id(value: str | None, *, error: str, code: str) -> int | None:
    """Parse an optional integer filter; None if absent, 400 if malformed."""
    if value is None or value == "":
        return None
    return parse_id(value, error=error, code=code)


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_page_request(params: Mapping[str, str]) -> PageRequest:
    """page >= 1 (default 1) and limit in 1..100 (default 50); numbers are clamped."""
    page = 1
    limit = DEFAULT_PAGE_SIZE
    raw_page = params.get("page")
    if raw_page:
        parsed = parse_int(raw_page)
        if parsed is None:
            raise bad_request("Invalid page parameter. Must be an integer.", "INVALID_PAGE_PARAMETER")
        page = max(1, parsed)
    raw_limit = params.get("limit")
    if raw_limit:
        parsed = parse_int(raw_limit)
        if parsed is None:
            raise bad_request("Invalid limit parameter. Must be an integer.", "INVALID_LIMIT_PARAMETER")
        limit = min(MAX_PAGE_SIZE, max(1, parsed))
    return PageRequest(page=page, limit=limit)


def parse_page_number(raw_page: str | None, limit: int = DEFAULT_PAGE_SIZE) -> PageRequest:
    """Fixed-size pages: page must be a positive integer."""
    if raw_page is None:
        return PageRequest(page=1, limit=limit)
    page = parse_int(raw_page)
    if page is None or page < 1:
        raise bad_request(
            "Invalid page parameter. Must be a positive integer.", "INVALID_PAGE_PARAMETER"
        )
    return PageRequest(page=page, limit=limit)


@dataclass(frozen=True)
class LimitOffset:
    limit: int = DEFAULT_LIST_LIMIT
    offset: int = 0


def parse_limit_offset(limit: str | None, offset: str | None) -> LimitOffset:
    """limit defaults to 10 and is capped at 100; offset defaults to 0."""
    parsed_limit = DEFAULT_LIST_LIMIT
    if limit:
        value = parse_int(limit)
        if value is None:
            raise bad_request("Invalid limit parameter. Must be an integer.", "INVALID_LIMIT_PARAMETER")
        parsed_limit = min(MAX_PAGE_SIZE, max(1, value))
    parsed_offset = 0
    if offset:
        value = parse_int(offset)
        if value is None:
            raise bad_request("Invalid offset parameter. Must be an integer.", "INVALID_OFFSET_PARAMETER")
        parsed_offset = max(0, value)
    return LimitOffset(limit=parsed_limit, offset=parsed_offset)


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def paginate(request: PageRequest, total: int) -> Pagination:
    return Pagination(
        page=request.page,
        limit=request.limit,
        total=total,
        total_pages=total_pages(total, request.limit),
    )
