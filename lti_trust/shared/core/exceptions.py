from typing import Optional, Dict, Any

class LtiTrustException(Exception):
    """Base exception for all LTI trust errors."""
    def __init__(
        self,
        message: str,
        code: str = "internal_error",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

class RequestMalformedError(LtiTrustException):
    """
    Raised when the login-initiation parameter collection (form body or query string)
    cannot be obtained from the inbound request. Not retryable.
    """
    def __init__(self, message: str, code: str = "request_malformed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, status_code=400, details=details)

class KeySourceUnavailableError(LtiTrustException):
    """
    Raised when the key material backing store cannot resolve or return a key.
    Retry policy belongs to the caller or the key source itself.
    """
    def __init__(self, message: str, code: str = "key_source_unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, status_code=503, details=details)

class ConfigurationError(LtiTrustException):
    """Raised when application configuration is invalid or missing."""
    def __init__(self, message: str, code: str = "config_error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, status_code=500, details=details)

class ResourceNotFoundError(LtiTrustException):
    """Raised when a requested resource is not found."""
    def __init__(self, message: str, code: str = "not_found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, status_code=404, details=details)
