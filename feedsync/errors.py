"""Exceptions raised at the remote API boundary."""
from typing import Optional


class ApiError(Exception):
    """A remote call that did not produce a usable response.

    ``error`` is the server's error key (Lemmy answers failures with
    ``{"error": "<key>"}``) or one of ``network_error`` / ``invalid_response``
    when the failure happened on our side of the wire.
    """

    def __init__(self, error: str, status_code: Optional[int] = None):
        super().__init__(error)
        self.error = error
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"ApiError({self.error!r}, status_code={self.status_code!r})"
