"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""
from typing import Any, Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None, details: Any = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Optional structured details (e.g. field errors)
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class InvalidRequestError(LicenseException):
    """Raised when caller input is malformed or incomplete."""

    def __init__(self, message: str = "Invalid request", details: Any = None):
        super().__init__(message, code="INVALID_REQUEST", details=details)


class InvalidLicenseError(LicenseException):
    """Raised when a license fails authenticity verification during renewal."""

    def __init__(self, message: str = "Cannot renew invalid license"):
        super().__init__(message, code="INVALID_LICENSE")


class SignerException(DomainException):
    """Base exception for signer-related errors."""

    pass


class SigningUnavailableError(SignerException):
    """
    Raised when the external signer cannot produce a result.

    The message never contains the signer address or credential;
    the underlying error is available as ``__cause__``.
    """

    TRANSIENT_REASONS = ("timeout", "transport")

    def __init__(
        self,
        message: str = "Signing service unavailable",
        reason: str = "transport",
        status_code: Optional[int] = None,
    ):
        super().__init__(message, code="SIGNING_UNAVAILABLE")
        self.reason = reason
        self.status_code = status_code

    @property
    def transient(self) -> bool:
        """Whether a later retry may succeed."""
        if self.reason in self.TRANSIENT_REASONS:
            return True
        return self.status_code is not None and self.status_code >= 500


class SigningKeyNotFoundError(SignerException):
    """Raised when a signing key does not exist in the signer."""

    def __init__(self, message: str = "Signing key not found"):
        super().__init__(message, code="SIGNING_KEY_NOT_FOUND")
