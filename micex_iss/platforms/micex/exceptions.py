"""ISS client exceptions."""

from typing import Optional


class MicexError(Exception):
    """Base class for every failure raised by the ISS client."""


class MissingParameter(MicexError, ValueError):
    """Raised before any I/O when a required argument is empty."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"Missing {parameter} parameter")


class NetworkError(MicexError):
    """Raised when the transport fails before an HTTP status is received."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Network error requesting {url}: {reason}")


class UpstreamError(MicexError):
    """Raised when the API answers with a non-200 status."""

    def __init__(self, status: int, reason: Optional[str] = None, url: Optional[str] = None):
        self.status = status
        self.reason = reason or ''
        self.url = url
        super().__init__(f"{status} {self.reason}".strip() + (f" ({url})" if url else ''))


class NotFound(UpstreamError):
    """Upstream answered 404."""


class MalformedResponse(MicexError):
    """Raised when a body is not JSON or a table does not have the expected shape."""


class ShapeMismatch(MalformedResponse):
    """A data row has a different number of values than the table has columns."""

    def __init__(self, row_index: int, expected: int, actual: int):
        self.row_index = row_index
        self.expected = expected
        self.actual = actual
        super().__init__(f"Row {row_index} has {actual} values, expected {expected}")


class NoBoardDefined(MicexError):
    """Raised when a security definition lists no trading boards."""

    def __init__(self, security: str):
        self.security = security
        super().__init__(f"Security {security} doesn't have any board in definition")
