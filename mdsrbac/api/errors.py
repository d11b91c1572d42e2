"""Exception hierarchy for the metadata service client."""

from __future__ import annotations


class MdsError(Exception):
    """Base class for every error raised by mdsrbac."""


class AuthenticationError(MdsError):
    """Bad credentials or a non-2xx answer from the authenticate endpoint."""

    def __init__(self, message: str, status: int | None = None, body: str = "") -> None:
        self.status = status
        self.body = body
        detail = f" (status={status})" if status is not None else ""
        super().__init__(f"MDS authentication error{detail}: {message}")


class TransportError(MdsError):
    """Network failure or a status outside the accepted band."""

    def __init__(self, request: str, status: int | None = None, body: str = "") -> None:
        self.request = request
        self.status = status
        self.body = body
        if status is None:
            msg = f"Connection failure for {request}"
        else:
            msg = f"Unexpected response status code {status} for {request}"
        super().__init__(msg)


class LookupFailure(MdsError):
    """A read operation failed; callers only ever see it in the logs."""

    def __init__(self, operation: str, cause: Exception) -> None:
        self.operation = operation
        super().__init__(f"lookup {operation} failed: {cause}")
        self.__cause__ = cause


class ScopeError(MdsError, ValueError):
    """A request scope was composed or serialized incorrectly."""


class ClusterScopeError(ScopeError):
    """A cluster id needed by a composition is not configured."""
