from __future__ import annotations
from collections.abc import Sequence


class SubmissionValidationError(ValueError):
    """Raised when a submission is missing required fields or targets the wrong desk/type."""

    def __init__(self, message: str, missing_fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.missing_fields = list(missing_fields)


class MalformedRequestError(ValueError):
    """Raised when the request body is not a JSON object."""


class UnmappedValueError(SubmissionValidationError):
    """Raised in strict mode when a value has no entry in its mapping table."""


class UploadError(RuntimeError):
    """Raised when a temporary attachment cannot be uploaded to JSM."""


class DownstreamError(RuntimeError):
    """Raised when JSM rejects the request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
