"""Exceptions raised while talking to the holiday API."""

from typing import Optional


class HolidayCalendarError(Exception):
    """Base exception for all holiday calendar errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class FetchFailure(HolidayCalendarError):
    """Raised when a holiday request fails (network, HTTP status or parse)."""

    def __init__(
        self,
        message: str = "Could not fetch holidays",
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        self.url = url
        super().__init__(message, status_code=status_code)


class MalformedPayload(FetchFailure):
    """Raised when the API answers with data of an unexpected shape."""

    def __init__(self, message: str = "Unexpected data format from holiday API", **kwargs):
        super().__init__(message, **kwargs)
