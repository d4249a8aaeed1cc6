#!/usr/bin/env python3
"""
Metabase MCP Server
Connects MCP clients (Claude Desktop and others) to a Metabase instance.

Setup:
  1. pip install -e .
  2. Set METABASE_URL plus one of:
       METABASE_API_KEY
       METABASE_SESSION_TOKEN
       METABASE_USERNAME and METABASE_PASSWORD
  3. Add `metabase-mcp` as a stdio server in your MCP client config
"""

import json
import logging
import os
import sys
from functools import lru_cache
from typing import Any, Dict, Optional

import httpx
from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .client import ALLOWED_METHODS, MetabaseClient
from .config import load_config
from .errors import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

mcp = FastMCP("metabase_mcp")

# ─── Client ──────────────────────────────────────────────────────────────────


@lru_cache()
def get_client() -> MetabaseClient:
    """Return the process-wide Metabase client, building it on first use."""
    return MetabaseClient(load_config())


def _handle_api_error(e: Exception) -> str:
    """Consistent error formatting."""
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status == 401:
            return "Error: Metabase rejected the credentials. Check METABASE_API_KEY, METABASE_SESSION_TOKEN or METABASE_USERNAME/METABASE_PASSWORD."
        elif status == 403:
            return "Error: Permission denied. The Metabase user lacks access to this resource."
        elif status == 404:
            return "Error: Resource not found. Check the path and ID are correct."
        elif status == 429:
            return "Error: Rate limit exceeded. Wait a moment and retry."
        else:
            body = e.response.text[:500]
            return f"Error: Metabase returned {status}. Response: {body}"
    elif isinstance(e, httpx.TimeoutException):
        return "Error: Request to Metabase timed out."
    elif isinstance(e, (AuthenticationError, ConfigurationError)):
        return f"Error: {e.message}"
    elif isinstance(e, ValueError):
        return f"Error: {e}"
    return f"Error: {type(e).__name__}: {e}"


# ─── Input Models ────────────────────────────────────────────────────────────


class ApiCallInput(BaseModel):
    """Input for a raw Metabase API call."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    method: str = Field(
        ...,
        description="HTTP method: GET, POST, PUT or DELETE",
    )
    path: str = Field(
        ...,
        description="API path starting with /api/ (e.g., '/api/dashboard' or '/api/card/12/query')",
        min_length=5,
    )
    body: Optional[Any] = Field(
        default=None,
        description="JSON request body for POST/PUT",
    )
    query: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Query string parameters; list values are sent as repeated keys",
    )

    @field_validator("method")
    @classmethod
    def _known_method(cls, v: str) -> str:
        verb = v.upper()
        if verb not in ALLOWED_METHODS:
            raise ValueError(f"method must be one of {', '.join(sorted(ALLOWED_METHODS))}")
        return verb

    @field_validator("path")
    @classmethod
    def _api_path(cls, v: str) -> str:
        if not v.startswith("/api/"):
            raise ValueError("path must start with /api/")
        return v


# ─── Tools ───────────────────────────────────────────────────────────────────


@mcp.tool(
    name="metabase_api_call",
    annotations={
        "title": "Call the Metabase API",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def metabase_api_call(params: ApiCallInput) -> str:
    """Make an authenticated request to any Metabase REST endpoint.

    Authentication is handled by the server; do not pass credentials.

    Args:
        params: HTTP method, API path, and optional JSON body and query.

    Returns:
        str: The response JSON, pretty-printed, or an error message.
    """
    try:
        data = await get_client().call(
            params.method, params.path, params.body, params=params.query
        )
        if data is None:
            return f"{params.method} {params.path} succeeded with an empty response."
        if isinstance(data, str):
            return data
        return json.dumps(data, indent=2)
    except Exception as e:
        logger.warning("%s %s failed: %s", params.method, params.path, e)
        return _handle_api_error(e)


# ─── Entry Point ─────────────────────────────────────────────────────────────


def main() -> None:
    # stdout carries the MCP protocol; logs go to stderr.
    logging.basicConfig(
        level=os.environ.get("METABASE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        client = get_client()
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e.message)
        raise SystemExit(1) from e

    logger.info("Starting Metabase MCP server (auth: %s)", client.config.auth_method)
    mcp.run()


if __name__ == "__main__":
    main()
