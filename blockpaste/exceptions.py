"""
Paste error taxonomy.
Each error carries the HTTP status and the safe message returned to clients;
internal detail travels on the exception chain and is only logged.
"""


class PasteError(Exception):
    """Base class for all paste handling errors."""

    status_code: int = 500
    default_detail: str = "Unknown error occurred!"

    def __init__(self, detail: str = None, status_code: int = None, reason: str = None):
        self.detail = detail or self.default_detail
        # Logged server-side, never sent to the client
        self.reason = reason or self.detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.detail)


class PasteValidationError(PasteError):
    """Client-caused error: bad path, bad name, oversized body."""

    status_code = 400
    default_detail = "Invalid request"


class PasteNotFoundError(PasteError):
    """Store lookup came back empty or ran past its deadline."""

    status_code = 404
    default_detail = "Paste not found!"


class AuthenticationError(PasteError):
    """AEAD verification failed: wrong key, tampered or unencrypted data."""

    status_code = 500
    default_detail = "Paste decryption failed!"


class FormatError(PasteError):
    """Stored envelope bytes could not be decoded into a paste."""

    status_code = 502
    default_detail = "Paste could not be decoded!"


class StoreError(PasteError):
    """Block store failure other than not-found or timeout."""

    status_code = 500
    default_detail = "Paste store unavailable"
