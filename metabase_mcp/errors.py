"""Custom exceptions for the Metabase MCP server."""

from typing import Optional


class MetabaseError(Exception):
    """Base exception for all Metabase MCP errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ConfigurationError(MetabaseError, ValueError):
    """Raised when the Metabase URL or credentials are missing or invalid.

    Fatal at startup: the server should not start serving tools.
    """

    def __init__(self, message: str):
        super().__init__(message=message, code="CONFIGURATION_ERROR")


class AuthenticationError(MetabaseError):
    """Raised when the username/password login against Metabase fails."""

    def __init__(self, message: str = "Failed to authenticate with Metabase"):
        super().__init__(message=message, code="AUTHENTICATION_FAILED")
