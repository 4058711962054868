
class AttachmentError(RuntimeError):
    """Raised when a selected prescription file cannot be turned into a transport payload."""

    code = "attachment_error"


class DecodeFailure(AttachmentError):
    """Raised when an image attachment cannot be decoded."""

    code = "decode_failure"


class SizeExceeded(AttachmentError):
    """Raised when a non-image attachment is larger than the transport budget."""

    code = "size_exceeded"


class BookingTransportError(RuntimeError):
    """Raised when the booking request never completed (network, timeout, unreadable body)."""
    pass


class WizardStateError(ValueError):
    """Raised when an action is not allowed in the wizard's current step or status."""
    pass
