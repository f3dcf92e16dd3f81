"""
Errors raised by the image request adapter.

Each error carries two HTTP statuses: ``status_code`` is the distinct status
for its kind, ``legacy_status_code`` is what the /generate-image function
reported historically (500 for everything except rate limiting and billing).
"""


class ImageGenerationError(Exception):
    """Base class for every adapter failure."""

    status_code: int = 500
    legacy_status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ImageGenerationError):
    """Bad input. Raised before any upstream request is made."""

    status_code = 400


class ConfigurationError(ImageGenerationError):
    """A required upstream credential is missing."""

    status_code = 500


class RateLimited(ImageGenerationError):
    status_code = 429
    legacy_status_code = 429

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


class PaymentRequired(ImageGenerationError):
    status_code = 402
    legacy_status_code = 402

    def __init__(self, message: str = "Payment required. Please add credits to your workspace."):
        super().__init__(message)


class UpstreamError(ImageGenerationError):
    """Unexpected provider failure. ``upstream_status`` is None for transport errors."""

    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None, body: str = ""):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body


class NoImageProduced(ImageGenerationError):
    """The provider answered successfully but returned no usable image."""

    status_code = 502

    def __init__(
        self,
        message: str = "No image was generated. The AI model might be experiencing issues.",
    ):
        super().__init__(message)
