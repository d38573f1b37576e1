from typing import Optional, Any

class TextBlastError(Exception):
    """
    Base exception for textblast.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ValidationError(TextBlastError):
    """
    Raised when a request is rejected before any dispatch begins.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)

class AuthenticationError(TextBlastError):
    """
    Raised when the provider rejects our credentials.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ExternalServiceError(TextBlastError):
    """
    Raised when an external service (Twilio, monday.com) fails.
    """
    def __init__(self, message: str = "External service error", code: str = "EXTERNAL_SERVICE_ERROR", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=502, details=details)

class UpstreamFetchError(ExternalServiceError):
    """
    Raised when the record source is unreachable or returns an unexpected shape.
    Fatal to a campaign run.
    """
    def __init__(self, message: str = "Could not fetch recipients", details: Optional[Any] = None):
        super().__init__(message, code="UPSTREAM_FETCH_ERROR", details=details)

class ProviderSendError(ExternalServiceError):
    """
    Raised by the provider adapter when a single message cannot be sent.

    `provider_code` is the provider's numeric error code (None for transport
    failures); `critical` marks codes that predict every later send failing too.
    """
    def __init__(self, message: str, provider_code: Optional[int] = None, critical: bool = False):
        self.provider_code = provider_code
        self.critical = critical
        super().__init__(
            message,
            code="PROVIDER_SEND_ERROR",
            details={"provider_code": provider_code, "critical": critical}
        )
