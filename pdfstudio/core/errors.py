"""
Error taxonomy shared by the HTTP layer and the session state container.

Every error is recoverable: the caller surfaces a generic notification and
the user re-invokes the action. Nothing here is retried automatically.
"""

from typing import Optional


class StudioError(Exception):
    """Base class for every expected failure in the pipeline."""

    status_code: int = 500
    public_message: str = "Operation failed, please retry."

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UsageError(StudioError):
    """Missing file, missing/empty text, or an invalid interaction."""

    status_code = 400
    public_message = "Invalid request."


class ExtractionError(StudioError):
    """The uploaded payload is empty, unreadable, or not a PDF."""

    public_message = "Text extraction failed, please retry."


class ProviderError(StudioError):
    """Network, auth, or provider-side failure while calling the model."""

    public_message = "Generation failed, please retry."


class MalformedArtifactError(StudioError):
    """Model output is not JSON or does not have the expected shape."""

    public_message = "Generation failed, please retry."

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class PayloadTooLargeError(UsageError):
    """Upload exceeds MAX_FILE_SIZE_MB."""

    status_code = 413
    public_message = "File too large."
