"""Error taxonomy shared by services, the production pipeline and the API.

Configuration errors are fatal for the call that hit them, upstream errors
come from third-party APIs and validation errors reject a request before it
has any side effect.
"""


class DocuGenError(Exception):
    """Base class for all DocuGen errors."""

    pass


class ConfigurationError(DocuGenError):
    """Required configuration (usually an API key) is missing."""

    pass


class UpstreamServiceError(DocuGenError):
    """A third-party API call failed or returned something unusable."""

    pass


class NetworkError(UpstreamServiceError):
    """Connection-level failure talking to an upstream API."""

    pass


class RateLimitError(UpstreamServiceError):
    """Upstream API rejected the call because of rate limiting."""

    pass


class ValidationError(DocuGenError):
    """Request input is invalid (unknown option, missing field, oversized upload)."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(DocuGenError):
    """A project or job id does not exist."""

    pass
