from __future__ import annotations

from typing import Optional


class DashboardError(Exception):
    """Base class for errors surfaced at a flow boundary.

    ``http_status`` is the status the API answers with; it is unrelated to any
    status an upstream service returned.
    """

    http_status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DashboardError):
    http_status = 400


class NoProviderConfiguredError(DashboardError):
    http_status = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(
            message
            or "No AI service configured. Please add COHERE_API_KEY or HUGGINGFACE_API_KEY to your environment variables."
        )


class MalformedInputError(DashboardError):
    http_status = 502


class EmptyInputError(DashboardError):
    http_status = 502

    def __init__(self, message: str = "No products data available") -> None:
        super().__init__(message)


class CatalogFetchError(DashboardError):
    http_status = 502

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamError(DashboardError):
    """A provider call failed.

    ``provider`` is the provider id (``"cohere"``), ``status_code`` the status
    it answered with (None when no response arrived) and ``message`` its own
    error text. ``str(err)`` gives the formatted ``"<Label> API error: ..."``.
    """

    http_status = 500

    def __init__(self, provider: str, status_code: Optional[int], message: str, *, label: str = "") -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.label = label or provider

    def __str__(self) -> str:
        if self.status_code is None:
            return f"{self.label} API error: {self.message}"
        return f"{self.label} API error: {self.status_code} - {self.message}"


class FlowBusyError(DashboardError):
    http_status = 409


def user_message(exc: BaseException) -> str:
    """Map an exception to the text shown to the user."""
    if isinstance(exc, UpstreamError):
        if exc.status_code is None:
            return "Network error: Unable to connect to AI service."
        return f"AI service error: {exc}"
    if isinstance(exc, CatalogFetchError):
        return exc.message
    if isinstance(exc, MalformedInputError):
        return f"Data format error: {exc.message}"
    if isinstance(exc, DashboardError):
        return exc.message
    return str(exc) or "An error occurred while processing your request"
