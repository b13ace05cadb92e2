from __future__ import annotations


class ClientError(Exception):
    """Base client-side error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class ApiError(ClientError):
    """Non-2xx response or transport failure on a REST call."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(detail)


class ValidationError(ClientError):
    """Input rejected locally, before any network call."""

    def __init__(self, field: str, detail: str) -> None:
        self.field = field
        super().__init__(detail)
