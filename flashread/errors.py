"""
Exception hierarchy for FlashRead.

Every gateway and the extraction adapter raise one of these. The API routes
turn them into ``{"error": message}`` bodies using ``status_code``.

    FlashReadError (base)
    ├── ValidationError         missing or malformed input, raised before any network call
    ├── CredentialError         provider key missing for the selected path
    ├── ProviderError           non-success or unusable response from Groq / RapidAPI / a fetched page
    ├── UnsupportedFormatError  upload MIME type outside the supported set
    ├── ExtractionError         parser ran but produced no usable text
    └── ChatBusyError           a chat message was sent while another is outstanding
"""

from typing import Optional


class FlashReadError(Exception):
    """Base exception for all FlashRead errors."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ValidationError(FlashReadError):
    status_code = 400


class CredentialError(FlashReadError):
    status_code = 400


class ProviderError(FlashReadError):
    """Error reported by (or while talking to) an external provider."""

    status_code = 502


class UnsupportedFormatError(FlashReadError):
    status_code = 400


class ExtractionError(FlashReadError):
    status_code = 400


class ChatBusyError(FlashReadError):
    status_code = 409
