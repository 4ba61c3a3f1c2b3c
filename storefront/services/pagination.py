"""
Pagination parameters for catalog listings.

Query values arrive as raw strings. Anything that is not a positive
integer falls back to its default instead of failing the request.
"""

from dataclasses import dataclass, asdict
from typing import Any, Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
DEFAULT_OFFSET = 0
DEFAULT_DESCRIPTION_LENGTH = 200
MAX_LIMIT = 100


@dataclass(frozen=True)
class Pagination:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET
    description_length: int = DEFAULT_DESCRIPTION_LENGTH

    @property
    def sql_offset(self) -> int:
        """Explicit offset wins, otherwise derive it from the page number."""
        if self.offset:
            return self.offset
        return (self.page - 1) * self.limit

    def to_dict(self) -> dict:
        return asdict(self)


def _positive_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def normalize_pagination(
    page: Optional[Any] = None,
    limit: Optional[Any] = None,
    offset: Optional[Any] = None,
    description_length: Optional[Any] = None,
) -> Pagination:
    """
    Coerce raw pagination values to a Pagination.

    Example:
        >>> normalize_pagination(page="2", limit="abc")
        Pagination(page=2, limit=20, offset=0, description_length=200)
    """
    return Pagination(
        page=_positive_int(page, DEFAULT_PAGE),
        limit=min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
        offset=_positive_int(offset, DEFAULT_OFFSET),
        description_length=_positive_int(description_length, DEFAULT_DESCRIPTION_LENGTH),
    )


def truncate_description(description: Optional[str], length: int) -> str:
    """Cut a description to `length` characters, marking the cut with an ellipsis."""
    if not description:
        return ""
    if len(description) <= length:
        return description
    return description[:length].rstrip() + "..."
