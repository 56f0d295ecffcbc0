"""Lifecycle of a single remote call.

A slot holding remote data is always one of ``Empty`` (never requested),
``Loading`` (request in flight), ``Success`` (payload available) or
``Failure`` (the call raised ``ApiError``). Only ``Success`` has a ``data``
attribute, so callers must check the variant before reading the payload::

    if isinstance(res, Success):
        render(res.data)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Generic, TypeVar, Union

from .errors import ApiError

T = TypeVar("T")


@dataclass(frozen=True)
class Empty:
    state = "empty"


@dataclass(frozen=True)
class Loading:
    state = "loading"


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T
    state = "success"


@dataclass(frozen=True)
class Failure:
    error: ApiError
    state = "failure"


RequestState = Union[Empty, Loading, Success[T], Failure]

EMPTY = Empty()
LOADING = Loading()


def wrap(outcome: Union[T, ApiError]) -> RequestState[T]:
    """Map a completed call outcome onto ``Success`` or ``Failure``."""
    if isinstance(outcome, ApiError):
        return Failure(outcome)
    return Success(outcome)


async def api_wrapper(call: Awaitable[T]) -> RequestState[T]:
    """Await a remote call and wrap its outcome.

    Only ``ApiError`` becomes a ``Failure``; anything else is a bug and
    propagates.
    """
    try:
        result = await call
    except ApiError as exc:
        return wrap(exc)
    return wrap(result)


def is_success(res: RequestState) -> bool:
    return isinstance(res, Success)
