"""
Shared error handling for the ShardDog Treat Gateway.
"""

from typing import Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    details: Optional[Any] = None
    code: Optional[str] = None
    message: Optional[str] = None


class TreatGatewayException(Exception):
    """Base exception for Treat Gateway services."""

    status_code = 400
    carries_details = False

    def __init__(self, code: str, message: str, details: Optional[Any] = None,
                 status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        if self.carries_details:
            return ErrorResponse(error=self.message, details=self.details)
        return ErrorResponse(error=self.message)

    def to_content(self) -> dict:
        """Render the JSON body sent to the caller."""
        return self.to_response().model_dump(exclude_unset=True)


class ValidationError(TreatGatewayException):
    """Caller supplied insufficient or malformed input."""

    def __init__(self, message: str = "Validation failed"):
        super().__init__("VALIDATION_ERROR", message, status_code=400)


class WalletRequiredError(TreatGatewayException):
    """A NEAR wallet is needed before a channel can be created."""

    def __init__(self, message: str = "Please provide your NEAR wallet address"):
        super().__init__("WALLET_INPUT_REQUIRED", message, status_code=400)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error="Wallet address required", code=self.code, message=self.message)


class InvalidChannelError(TreatGatewayException):
    """Channel is not known to the credential store."""

    def __init__(self, channel_id: Optional[str] = None):
        super().__init__("INVALID_CHANNEL", "Invalid channel ID", status_code=400)
        self.channel_id = channel_id


class UpstreamError(TreatGatewayException):
    """Upstream treat API answered with a non-success status."""

    carries_details = True

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__("UPSTREAM_ERROR", message, details, status_code=status_code)


class InternalError(TreatGatewayException):
    """Anything unexpected while handling a request."""

    carries_details = True

    def __init__(self, details: Any = None, message: str = "Internal server error"):
        super().__init__("INTERNAL_ERROR", message, details, status_code=500)
