"""
Custom Exceptions for the Regulated Assets client
=================================================

Structured error handling lets callers branch on the failure kind rather
than parsing strings. Rejected and pending approval outcomes are returned
as data, never raised.

Error Codes:
- 1xxx: Client errors (caller input, unsupported flows)
- 2xxx: Configuration errors (stellar.toml, settings)
- 3xxx: Network errors (transport, HTTP status, missing accounts)
- 4xxx: Protocol errors (malformed server responses)
"""

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Structured error codes for user-friendly messages"""

    # 1xxx: Client Errors
    VALIDATION_ERROR = 1001
    UNSUPPORTED_ACTION_METHOD = 1002

    # 2xxx: Configuration Errors
    CONFIGURATION_ERROR = 2001
    INVALID_TOML = 2002

    # 3xxx: Network Errors
    NETWORK_ERROR = 3001
    ACCOUNT_NOT_FOUND = 3002
    TIMEOUT = 3003

    # 4xxx: Protocol Errors
    PARSE_ERROR = 4001


class RegulatedAssetsError(Exception):
    """Base exception for all regulated assets errors"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging"""
        return {
            'error_type': self.__class__.__name__,
            'error_code': int(self.error_code),
            'message': self.message,
            'details': self.details
        }

    def user_message(self) -> str:
        """Get user-friendly error message based on error code"""
        code_messages = {
            ErrorCode.VALIDATION_ERROR: "Invalid input provided",
            ErrorCode.UNSUPPORTED_ACTION_METHOD: "Action must be completed by following the action URL",
            ErrorCode.CONFIGURATION_ERROR: "Configuration error",
            ErrorCode.INVALID_TOML: "Invalid stellar.toml",
            ErrorCode.NETWORK_ERROR: "Network request failed",
            ErrorCode.ACCOUNT_NOT_FOUND: "Account not found on the network",
            ErrorCode.TIMEOUT: "Request timed out",
            ErrorCode.PARSE_ERROR: "Unexpected response from server",
        }
        return f"Error {self.error_code}: {code_messages.get(self.error_code, self.message)}"


class ConfigurationError(RegulatedAssetsError):
    """Raised when stellar.toml data or settings are malformed or incomplete"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
    ):
        super().__init__(message, error_code, details)


class NetworkError(RegulatedAssetsError):
    """Raised on transport failures or non-success HTTP statuses without a usable body"""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.NETWORK_ERROR,
    ):
        super().__init__(message, error_code, details)
        self.status_code = status_code
        if status_code is not None:
            self.details.setdefault('status_code', status_code)


class AccountNotFoundError(NetworkError):
    """Raised when Horizon has no record of the requested account"""

    def __init__(self, account_id: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Account not found: {account_id}",
            status_code=404,
            details=details,
            error_code=ErrorCode.ACCOUNT_NOT_FOUND,
        )
        self.account_id = account_id


class ParseError(RegulatedAssetsError):
    """Raised when a server response lacks the discriminator or required fields"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.PARSE_ERROR, details)


class UnsupportedActionMethodError(RegulatedAssetsError):
    """Raised when action fields are submitted for a non-POST action"""

    def __init__(self, method: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"Action method {method!r} cannot be submitted; follow the action URL instead",
            ErrorCode.UNSUPPORTED_ACTION_METHOD,
            details,
        )
        self.method = method
