"""Error types shared by the calendar and ticket pipelines."""


class InputValidationError(ValueError):
    """Raised when user-supplied input is malformed."""


class ExternalResourceError(RuntimeError):
    """Raised when fetched content does not contain what we expect."""


class QrCodeNotFoundError(ExternalResourceError):
    """The ticket page has no embedded QR code image."""
