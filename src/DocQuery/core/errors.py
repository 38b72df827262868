"""Exception hierarchy raised by DocQuery."""

from __future__ import annotations

from typing import Any


class DocQueryError(Exception):
    """Base exception for all library errors.

    Attributes:
        body: Optional diagnostic payload (parsed JSON or raw text of a
            failed response, offending input...).
    """

    def __init__(self, message: str = "", body: Any = None) -> None:
        super().__init__(message)
        self.body = body


class NoReferenceSetError(DocQueryError):
    """A form was submitted without any resolvable reference."""

    def __init__(self, message: str = "No reference set for this form", body: Any = None) -> None:
        super().__init__(message, body=body)


class UnsupportedFormKindError(DocQueryError):
    """The form's method/encoding combination cannot be submitted."""

    def __init__(self, method: str, enctype: str, body: Any = None) -> None:
        super().__init__(f"Unsupported kind of form: {method} / {enctype}", body=body)
        self.method = method
        self.enctype = enctype


class FormSearchError(DocQueryError):
    """The service answered a form submission with a non-200 status."""

    def __init__(self, body: Any = None, status_code: int | None = None) -> None:
        detail = f"HTTP {status_code}" if status_code is not None else "form search failed"
        super().__init__(f"{detail}: {_describe(body)}", body=body)
        self.status_code = status_code


class AuthenticationError(FormSearchError):
    """HTTP 401: missing or invalid access token."""


class AuthorizationError(FormSearchError):
    """HTTP 403: the access token cannot read the requested data."""


class RefNotFoundError(FormSearchError):
    """HTTP 404: the submitted reference does not exist (anymore)."""


class DecodingError(DocQueryError):
    """A response body could not be decoded into the response model."""


def _describe(body: Any) -> str:
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if isinstance(message, str) and message:
            return message
    text = str(body) if body is not None else ""
    return text if len(text) <= 200 else text[:200] + "..."
