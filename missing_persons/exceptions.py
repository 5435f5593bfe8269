"""
Custom exception hierarchy for the missing persons browser.

Only one error kind ever reaches a visitor: the upstream data could not be
loaded. Extraction, deduplication, filtering and pagination are total and
never raise.
"""

from __future__ import annotations

# Shown to visitors whenever the upstream feed cannot be loaded.
DATA_UNAVAILABLE_MESSAGE = "ไม่สามารถโหลดข้อมูลได้ กรุณาลองใหม่อีกครั้ง"


class MissingPersonsError(Exception):
    """Base exception for all missing-persons failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class DataUnavailableError(MissingPersonsError):
    """The upstream fetch failed (non-2xx status, network error or bad body)."""

    def __init__(
        self,
        message: str = DATA_UNAVAILABLE_MESSAGE,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        self.status_code = status_code
        super().__init__("FETCH_FAILED", message, details)


class ConfigurationError(MissingPersonsError):
    """An environment setting could not be parsed."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("CONFIG_INVALID", message, details)
