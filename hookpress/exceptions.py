"""
Custom Exception Classes for HookPress

This module defines the exception hierarchy shared by the hook engine,
the plugin layer and the HTTP shell. Every exception carries an HTTP
status code and a machine-readable error code so the exception handlers
can render a consistent error envelope.

Errors raised by hook callbacks are never wrapped in these classes: they
propagate to the dispatch caller unchanged.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in error responses."""

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    HOOK_INVALID_ARGUMENT = "HOOK_INVALID_ARGUMENT"
    PLUGIN_NOT_FOUND = "PLUGIN_NOT_FOUND"
    PLUGIN_LOAD_FAILED = "PLUGIN_LOAD_FAILED"
    PLUGIN_OPERATION_INVALID = "PLUGIN_OPERATION_INVALID"
    AUTH_PERMISSION_DENIED = "AUTH_PERMISSION_DENIED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"


class HookPressError(Exception):
    """Base exception class for all HookPress exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Hook Registration Exceptions
# ============================================================================


class InvalidArgumentError(HookPressError):
    """Raised when a hook registration argument is invalid"""

    def __init__(self, message: str, argument: str | None = None):
        details = {"argument": argument} if argument else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code=ErrorCode.HOOK_INVALID_ARGUMENT,
        )


# ============================================================================
# Plugin Exceptions
# ============================================================================


class PluginNotFoundError(HookPressError):
    """Raised when a plugin name is not registered"""

    def __init__(self, name: str):
        super().__init__(
            message=f"Plugin '{name}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"plugin": name},
            error_code=ErrorCode.PLUGIN_NOT_FOUND,
        )


class PluginError(HookPressError):
    """Raised when a plugin fails to load or register its hooks"""

    def __init__(self, name: str, reason: str):
        super().__init__(
            message=f"Plugin '{name}' failed: {reason}",
            details={"plugin": name, "reason": reason},
            error_code=ErrorCode.PLUGIN_LOAD_FAILED,
        )


class InvalidPluginOperationError(HookPressError):
    """Raised when a plugin operation is not allowed in its current state"""

    def __init__(self, name: str, operation: str, reason: str):
        super().__init__(
            message=f"Cannot {operation} plugin '{name}': {reason}",
            status_code=status.HTTP_409_CONFLICT,
            details={"plugin": name, "operation": operation},
            error_code=ErrorCode.PLUGIN_OPERATION_INVALID,
        )


# ============================================================================
# Authorization Exceptions
# ============================================================================


class AuthorizationError(HookPressError):
    """Raised when the current user may not perform an admin action"""

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code=ErrorCode.AUTH_PERMISSION_DENIED,
        )
