"""Custom exception classes for the API."""

from typing import Any


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: int = 400, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(APIError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} with id '{resource_id}' not found",
            status_code=404,
            details={"resource": resource, "id": resource_id},
        )


class SearchError(APIError):
    """A food search or record read could not be completed."""

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        super().__init__(message=message, status_code=status_code, details=details)


class IndexNotBuiltError(SearchError):
    """Read attempted before any index was published to the store."""

    def __init__(self, message: str = "Food index has not been built yet"):
        super().__init__(message=message, status_code=503)


class StoreReadError(SearchError):
    """Underlying storage failed during a lookup."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(
            message=message,
            status_code=503,
            details={"operation": operation},
        )


class InconsistentIndexError(SearchError):
    """Postings reference a food id that the store does not hold."""

    def __init__(self, food_id: str):
        self.food_id = food_id
        super().__init__(
            message=f"Index references unknown food id '{food_id}'",
            status_code=500,
            details={"id": food_id},
        )


class IndexBuildError(Exception):
    """Index construction aborted; nothing was published."""


class DataLoadError(Exception):
    """A source data file could not be parsed."""

    def __init__(self, message: str, file: str | None = None, line: int | None = None):
        self.message = message
        self.file = file
        self.line = line
        location = f" ({file}:{line})" if file and line else ""
        super().__init__(f"{message}{location}")
