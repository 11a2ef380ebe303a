class SearchError(Exception):
    """Base class for everything a search can fail with."""


class ValidationError(SearchError):
    """Bad or missing request parameters."""


class FormatError(SearchError):
    """Upstream body is not a 4+ element array."""


class StructureError(SearchError):
    """Upstream codes/display columns are not arrays."""


class HttpError(SearchError):
    def __init__(self, status: int, reason: str = ""):
        self.status = status
        self.reason = reason
        super().__init__(f"API request failed: {status} {reason}".rstrip())


class UnknownError(SearchError):
    def __init__(self, message: str = "Unknown error"):
        super().__init__(message)


class SearchFailedError(SearchError):
    """
    Raised at the search boundary. The message carries the scheme prefix,
    the original error is kept as __cause__ and its class as `kind`.
    """

    def __init__(self, method: str, label: str, cause: BaseException):
        detail = str(cause).strip() or str(UnknownError())
        self.method = method
        self.kind = type(cause) if str(cause).strip() else UnknownError
        super().__init__(f"Failed to search {label}: {detail}")
