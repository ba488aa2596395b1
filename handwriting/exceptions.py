"""
Error types raised by the extraction proxy.

Each ExtractionError carries the HTTP status the API blueprint answers with.
"""


class HandwritingError(Exception):
    """Base exception for the handwriting service."""
    status_code = 500

    def __init__(self, message: str = "", status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(HandwritingError):
    """Raised when the upstream client cannot be built (missing key or SDK)."""


class ExtractionError(HandwritingError):
    """Raised when a batch cannot be turned into text."""


class RateLimitedError(ExtractionError):
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message)


class PaymentRequiredError(ExtractionError):
    status_code = 402

    def __init__(self, message: str = "Payment required. Please add credits to continue."):
        super().__init__(message)


class UpstreamError(ExtractionError):
    """Any other non-success answer (or transport failure) from the gateway."""

    def __init__(self, message: str = "AI gateway error", upstream_status: int = None):
        super().__init__(message)
        self.upstream_status = upstream_status
