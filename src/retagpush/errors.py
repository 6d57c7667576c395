"""Domain errors for retagpush."""


class TransferError(RuntimeError):
    """Raised when the image transfer cannot continue safely."""
