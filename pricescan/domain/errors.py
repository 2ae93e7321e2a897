"""Typed errors raised by the extraction engine.

"No prices found" is not an error: it is a valid, empty
``CaptureResult`` (see ``CaptureResult.status``).
"""


class PriceScanError(Exception):
    """Base class for engine errors."""


class ImageUnreadable(PriceScanError):
    """The source image is missing, corrupt or cannot be decoded."""


class RecognitionFailure(PriceScanError):
    """The recognition engine failed on every enhancement variant of an image."""


class CancellationRequested(PriceScanError):
    """Processing stopped because the caller cancelled the job."""


class InsufficientSections(PriceScanError):
    """A long-receipt job was started without any sections."""
