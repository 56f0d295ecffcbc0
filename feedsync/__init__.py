"""Core of the community feed sync layer: API client, codec and request states."""
from .errors import ApiError
from .request_state import (
    EMPTY,
    LOADING,
    Empty,
    Failure,
    Loading,
    RequestState,
    Success,
    api_wrapper,
    is_success,
    wrap,
)
from .query_params import ViewFilters, parse, serialize, update_filters
from .session import BlockRegistry, SessionBlockRegistry, UserSession

__all__ = [
    "ApiError",
    "EMPTY",
    "LOADING",
    "Empty",
    "Failure",
    "Loading",
    "RequestState",
    "Success",
    "api_wrapper",
    "is_success",
    "wrap",
    "ViewFilters",
    "parse",
    "serialize",
    "update_filters",
    "BlockRegistry",
    "SessionBlockRegistry",
    "UserSession",
]
