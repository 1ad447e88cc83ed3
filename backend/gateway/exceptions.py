"""
Gateway Exception Hierarchy

Error codes use a gateway: prefix so API clients can tell them apart
from request validation failures.
"""
from typing import Optional, Dict, Any


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class RoutingContractError(GatewayError):
    """
    Router invoked for a score that must be blocked.

    This is a programming error in the caller, not a runtime condition:
    the charge pipeline only routes decisions that passed the block check.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("gateway:routing:contract_violation", message, details)


class ExplanationUnavailableError(GatewayError):
    """
    External explanation generation failed.

    Examples:
    - Bedrock transport or client error
    - Empty or malformed model reply
    - Call exceeded the configured timeout

    Never leaves the explanation service; it always degrades to the
    local template.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("gateway:explanation:unavailable", message, details)
