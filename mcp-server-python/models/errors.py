"""
Error model for the DEDE e-Service MCP tools.

Provides structured error codes and sanitized error messages.
"""

import re
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Structured error codes for the MCP tools."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolError(Exception):
    """Base exception for tool errors with structured error information."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        retryable: bool = False,
        original_error: Optional[Exception] = None,
        status_code: Optional[int] = None,
    ):
        """
        Initialize a tool error.

        Args:
            code: The error code
            message: Human-readable error message
            retryable: Whether the operation can be retried
            original_error: The original exception if this wraps another error
            status_code: HTTP status returned by the backend, when there was one
        """
        self.code = code
        self.message = message
        self.retryable = retryable
        self.original_error = original_error
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert error to dictionary format for MCP response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "retryable": self.retryable
            }
        }


_BEARER_PATTERN = re.compile(r"(Bearer\s+)[A-Za-z0-9\-._~+/]+=*", re.IGNORECASE)
_TOKEN_PARAM_PATTERN = re.compile(r"((?:access_|refresh_)?token=)[^&\s]+", re.IGNORECASE)


def sanitize_token(error_msg: str) -> str:
    """
    Redact bearer tokens and token query parameters from a message.

    Args:
        error_msg: The original error message

    Returns:
        Message with credentials replaced by a placeholder
    """
    sanitized = _BEARER_PATTERN.sub(r"\1[redacted]", error_msg)
    sanitized = _TOKEN_PARAM_PATTERN.sub(r"\1[redacted]", sanitized)
    return sanitized


def sanitize_stack_trace(error_msg: str) -> str:
    """
    Remove stack traces from error messages.

    Args:
        error_msg: The original error message

    Returns:
        Error message without stack trace
    """
    # Take only the first line (usually the most relevant)
    lines = error_msg.split('\n')
    if lines:
        return lines[0].strip()
    return error_msg


def create_validation_error(message: str) -> ToolError:
    """
    Create a validation error.

    Args:
        message: Description of the validation failure

    Returns:
        ToolError with VALIDATION_ERROR code
    """
    return ToolError(
        code=ErrorCode.VALIDATION_ERROR,
        message=message,
        retryable=False
    )


def create_not_found_error(
    resource: str = "Resource", identifier=None, message: Optional[str] = None
) -> ToolError:
    """
    Create a not found error for a backend resource.

    Args:
        resource: Kind of resource, e.g. "License request"
        identifier: Optional identifier that was looked up
        message: Backend-supplied message; used as-is when given

    Returns:
        ToolError with NOT_FOUND code
    """
    if message is None:
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} not found: {identifier}"
    return ToolError(
        code=ErrorCode.NOT_FOUND,
        message=message,
        retryable=False,
        status_code=404
    )


def create_unauthorized_error(message: str, status_code: Optional[int] = None) -> ToolError:
    """
    Create an authorization error (missing, expired or insufficient token).

    Args:
        message: Description returned by the backend
        status_code: HTTP status (401 or 403)

    Returns:
        ToolError with UNAUTHORIZED code
    """
    return ToolError(
        code=ErrorCode.UNAUTHORIZED,
        message=sanitize_token(message),
        retryable=False,
        status_code=status_code
    )


def create_api_error(
    message: str,
    status_code: Optional[int] = None,
    original_error: Optional[Exception] = None
) -> ToolError:
    """
    Create an error for a request the backend rejected.

    The backend's message is kept verbatim (only credentials are redacted)
    so that callers can surface it to the user unchanged.

    Args:
        message: Message returned by the backend
        status_code: HTTP status code of the response
        original_error: The original exception

    Returns:
        ToolError with API_ERROR code, retryable for 5xx responses
    """
    retryable = status_code is not None and status_code >= 500
    return ToolError(
        code=ErrorCode.API_ERROR,
        message=sanitize_token(message),
        retryable=retryable,
        original_error=original_error,
        status_code=status_code
    )


def create_network_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an error for a request that never got a response.

    Args:
        message: Description of the transport failure
        original_error: The original exception

    Returns:
        ToolError with NETWORK_ERROR code
    """
    sanitized_message = sanitize_stack_trace(sanitize_token(message))

    return ToolError(
        code=ErrorCode.NETWORK_ERROR,
        message=f"Network error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )


def create_malformed_response_error(
    message: str,
    original_error: Optional[Exception] = None
) -> ToolError:
    """
    Create an error for a response whose body does not match its schema.

    Args:
        message: What was wrong with the response
        original_error: The original exception

    Returns:
        ToolError with MALFORMED_RESPONSE code
    """
    sanitized_message = sanitize_stack_trace(message)

    return ToolError(
        code=ErrorCode.MALFORMED_RESPONSE,
        message=f"Malformed response: {sanitized_message}",
        retryable=False,
        original_error=original_error
    )


def create_internal_error(message: str, original_error: Optional[Exception] = None) -> ToolError:
    """
    Create an internal error for unexpected exceptions.

    Args:
        message: Description of the internal error
        original_error: The original exception

    Returns:
        ToolError with INTERNAL_ERROR code
    """
    sanitized_message = sanitize_stack_trace(sanitize_token(message))

    return ToolError(
        code=ErrorCode.INTERNAL_ERROR,
        message=f"Internal error: {sanitized_message}",
        retryable=True,
        original_error=original_error
    )
