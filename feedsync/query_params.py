"""Query-string codec for the community view's filters.

The URL is the source of truth for ``dataType``, ``sort`` and ``page`` so
that reloading or sharing a link reproduces the same listing. Parsing never
raises: absent or malformed values fall back to defaults, where the default
sort is the signed-in user's preference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, quote, urlencode

from .config import get_settings
from .models.sorts import CommentSortType, DataType, SortType, post_to_comment_sort
from .session import UserSession


@dataclass(frozen=True)
class ViewFilters:
    data_type: DataType = DataType.POST
    sort: SortType = SortType.ACTIVE
    page: int = 1

    def __post_init__(self):
        if not isinstance(self.data_type, DataType):
            raise ValueError(f"Unknown data type: {self.data_type!r}")
        if not isinstance(self.sort, SortType):
            raise ValueError(f"Unknown sort: {self.sort!r}")
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise ValueError(f"Page must be a positive integer, got {self.page!r}")

    @property
    def comment_sort(self) -> CommentSortType:
        """Sort to request when the comment listing is shown."""
        return post_to_comment_sort(self.sort)


def fallback_sort() -> SortType:
    try:
        return SortType(get_settings().fallback_sort)
    except ValueError:
        return SortType.ACTIVE


def default_sort(session: Optional[UserSession] = None) -> SortType:
    if session is not None and session.default_sort_type is not None:
        return session.default_sort_type
    return fallback_sort()


def _first(params: dict, key: str) -> Optional[str]:
    values = params.get(key)
    return values[0] if values else None


def parse_page(raw: Optional[str]) -> int:
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


def parse_data_type(raw: Optional[str]) -> DataType:
    try:
        return DataType(raw)
    except ValueError:
        return DataType.POST


def parse_sort(raw: Optional[str], session: Optional[UserSession] = None) -> SortType:
    try:
        return SortType(raw)
    except ValueError:
        return default_sort(session)


def parse(query_string: str, session: Optional[UserSession] = None) -> ViewFilters:
    """Read filters from a query string such as ``?dataType=Comment&page=2``."""
    params = parse_qs(query_string.lstrip("?"))
    return ViewFilters(
        data_type=parse_data_type(_first(params, "dataType")),
        sort=parse_sort(_first(params, "sort"), session),
        page=parse_page(_first(params, "page")),
    )


def serialize(filters: ViewFilters) -> str:
    return "?" + urlencode(
        {
            "dataType": filters.data_type.value,
            "page": str(filters.page),
            "sort": filters.sort.value,
        }
    )


def update_filters(
    filters: ViewFilters,
    data_type: Optional[DataType] = None,
    sort: Optional[SortType] = None,
    page: Optional[int] = None,
) -> ViewFilters:
    """Apply a filter change.

    Picking a sort or data type starts over at page 1; a page-only change
    keeps the rest.
    """
    if page is None:
        page = 1 if (sort is not None or data_type is not None) else filters.page
    return ViewFilters(
        data_type=data_type if data_type is not None else filters.data_type,
        sort=sort if sort is not None else filters.sort,
        page=page,
    )


def community_path(name: str, filters: ViewFilters) -> str:
    return f"/c/{quote(name)}{serialize(filters)}"
