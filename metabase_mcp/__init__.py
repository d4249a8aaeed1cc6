"""Metabase MCP server: exposes the Metabase REST API to MCP clients."""

from .client import AuthState, MetabaseClient
from .config import MetabaseConfig, load_config
from .errors import AuthenticationError, ConfigurationError, MetabaseError

__all__ = [
    "AuthState",
    "AuthenticationError",
    "ConfigurationError",
    "MetabaseClient",
    "MetabaseConfig",
    "MetabaseError",
    "load_config",
]

__version__ = "0.1.0"
