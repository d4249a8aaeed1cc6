"""Authenticated HTTP client for the Metabase REST API.

Every outbound request funnels through MetabaseClient.call(), which makes
sure a credential is attached before the request is sent. Three modes are
supported, picked once at construction (first match wins):

  1. API key          -> static ``X-API-Key`` header
  2. Session token    -> static ``X-Metabase-Session`` header
  3. Username/password -> lazy login on the first call, then
                          ``X-Metabase-Session`` with the returned id
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import quote

import httpx

from .config import MetabaseConfig
from .errors import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0
SESSION_PATH = "/api/session"
ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

API_KEY_HEADER = "X-API-Key"
SESSION_HEADER = "X-Metabase-Session"

# Default dashcard geometry: one full-width card per row.
DASHCARD_WIDTH = 12
DASHCARD_HEIGHT = 8


class AuthState(Enum):
    UNESTABLISHED = "unestablished"
    API_KEY = "api_key"
    SESSION = "session"


def _query(**params: Any) -> Dict[str, Any]:
    """Drop unset query parameters; httpx would send None as an empty value."""
    return {k: v for k, v in params.items() if v is not None}


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class MetabaseClient:
    """Single authenticated channel to one Metabase instance.

    Args:
        config: Validated connection settings.
        timeout: Per-request timeout in seconds, applied to connect and read.
        transport: Optional httpx transport, mainly for tests.

    Raises:
        ConfigurationError: If no usable credential combination is present.
    """

    def __init__(
        self,
        config: MetabaseConfig,
        *,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config
        self._session_token: Optional[str] = None
        headers = {"Accept": "application/json"}

        if config.api_key:
            logger.info("Using Metabase API key for authentication.")
            headers[API_KEY_HEADER] = config.api_key
            self._auth_state = AuthState.API_KEY
        elif config.session_token:
            logger.info("Using Metabase session token for authentication.")
            self._session_token = config.session_token
            headers[SESSION_HEADER] = config.session_token
            self._auth_state = AuthState.SESSION
        elif config.username and config.password:
            logger.info("Using Metabase username/password for authentication.")
            self._auth_state = AuthState.UNESTABLISHED
        else:
            logger.error("Metabase authentication credentials not configured properly.")
            raise ConfigurationError(
                "Metabase authentication credentials not provided or incomplete."
            )

        self._http = httpx.AsyncClient(
            base_url=config.url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "MetabaseClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def config(self) -> MetabaseConfig:
        return self._config

    @property
    def auth_state(self) -> AuthState:
        return self._auth_state

    @property
    def is_authenticated(self) -> bool:
        return self._auth_state is not AuthState.UNESTABLISHED

    @property
    def session_token(self) -> Optional[str]:
        """Session id sent as X-Metabase-Session; None until one is established or in API-key mode."""
        if self._auth_state is AuthState.SESSION:
            return self._session_token
        return None

    # ─── Authentication ──────────────────────────────────────────────────

    async def ensure_authenticated(self) -> None:
        """Log in if no credential is established yet; otherwise do nothing.

        Concurrent first calls are not deduplicated: each may log in, and the
        last token to arrive wins.
        """
        if self._auth_state is AuthState.UNESTABLISHED:
            await self.login()

    async def login(self) -> str:
        """Create a Metabase session from the configured username/password.

        Returns:
            str: The session id, also attached to all later requests.

        Raises:
            ConfigurationError: If an API key or session token was configured.
            AuthenticationError: If the login request fails for any reason.
        """
        if self._config.auth_method != "password":
            raise ConfigurationError(
                f"Login is only used with username/password authentication (configured: {self._config.auth_method})"
            )

        logger.info("Authenticating with Metabase using username/password...")
        try:
            data = await self._send(
                "POST",
                SESSION_PATH,
                {"username": self._config.username, "password": self._config.password},
            )
            token = data["id"]
            if not isinstance(token, str) or not token:
                raise ValueError(f"Metabase returned an invalid session id: {token!r}")
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error("Authentication failed: %s", e)
            raise AuthenticationError() from e

        self._session_token = token
        self._http.headers[SESSION_HEADER] = token
        self._auth_state = AuthState.SESSION
        logger.info("Successfully authenticated with Metabase")
        return token

    # ─── Generic call ────────────────────────────────────────────────────

    async def call(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Send one request to Metabase and return the decoded response.

        Args:
            method: One of GET, POST, PUT, DELETE (case-insensitive).
            path: Path below the base URL, e.g. ``/api/card``.
            body: JSON payload, or form fields when ``files`` is given.
            params: Query parameters; list values become repeated keys.
            files: Multipart file fields, in httpx ``files=`` form.

        Returns:
            The parsed JSON body, the raw text for non-JSON responses, or
            None for an empty body.

        Raises:
            httpx.HTTPStatusError: On any non-2xx response.
            httpx.TimeoutException: If Metabase does not answer in time.
            AuthenticationError: If a lazy login was needed and failed.
        """
        verb = method.upper()
        if verb not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        if path.split("?", 1)[0] != SESSION_PATH:
            await self.ensure_authenticated()

        return await self._send(verb, path, body, params=params, files=files)

    async def _send(
        self,
        verb: str,
        path: str,
        body: Any = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        kwargs: Dict[str, Any] = {}
        if files is not None:
            kwargs["files"] = files
            if body is not None:
                kwargs["data"] = body
        else:
            kwargs["headers"] = {"Content-Type": "application/json"}
            if body is not None:
                kwargs["json"] = body

        logger.debug("%s %s", verb, path)
        response = await self._http.request(verb, path, params=params, **kwargs)
        response.raise_for_status()

        if not response.content:
            return None
        if "json" in response.headers.get("content-type", "json"):
            return response.json()
        return response.text

    # ─── Dashboards ──────────────────────────────────────────────────────

    async def get_dashboards(self) -> List[Dict[str, Any]]:
        return await self.call("GET", "/api/dashboard")

    async def get_dashboard(self, dashboard_id: int) -> Dict[str, Any]:
        return await self.call("GET", f"/api/dashboard/{dashboard_id}")

    async def create_dashboard(self, dashboard: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call("POST", "/api/dashboard", dashboard)

    async def update_dashboard(self, dashboard_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call("PUT", f"/api/dashboard/{dashboard_id}", updates)

    async def delete_dashboard(self, dashboard_id: int, hard_delete: bool = False) -> Any:
        """Archive a dashboard, or delete it permanently with hard_delete."""
        if hard_delete:
            return await self.call("DELETE", f"/api/dashboard/{dashboard_id}")
        return await self.call("PUT", f"/api/dashboard/{dashboard_id}", {"archived": True})

    async def get_dashboard_related(self, dashboard_id: int) -> Any:
        return await self.call("GET", f"/api/dashboard/{dashboard_id}/related")

    async def get_dashboard_revisions(self, dashboard_id: int) -> Any:
        return await self.call("GET", f"/api/dashboard/{dashboard_id}/revisions")

    async def get_embeddable_dashboards(self) -> Any:
        return await self.call("GET", "/api/dashboard/embeddable")

    async def get_public_dashboards(self) -> Any:
        return await self.call("GET", "/api/dashboard/public")

    async def create_dashboard_public_link(self, dashboard_id: int) -> Any:
        return await self.call("POST", f"/api/dashboard/{dashboard_id}/public_link")

    async def delete_dashboard_public_link(self, dashboard_id: int) -> Any:
        return await self.call("DELETE", f"/api/dashboard/{dashboard_id}/public_link")

    async def copy_dashboard(self, from_dashboard_id: int, copy_data: Optional[Dict[str, Any]] = None) -> Any:
        return await self.call("POST", f"/api/dashboard/{from_dashboard_id}/copy", copy_data or {})

    async def add_card_to_dashboard(
        self,
        dashboard_id: int,
        card_id: int,
        row: Optional[int] = None,
        col: Optional[int] = None,
        size_x: int = DASHCARD_WIDTH,
        size_y: int = DASHCARD_HEIGHT,
        parameter_mappings: Optional[List[Dict[str, Any]]] = None,
        series: Optional[List[Dict[str, Any]]] = None,
    ) -> Any:
        """Append a card to a dashboard, keeping its existing dashcards.

        New cards are stacked below the existing ones unless a position is
        given. Metabase treats a dashcard id of -1 as "create".
        """
        dashboard = await self.get_dashboard(dashboard_id)
        existing = dashboard.get("dashcards") or []

        new_dashcard = {
            "id": -1,
            "card_id": card_id,
            "row": row if row is not None else len(existing) * DASHCARD_HEIGHT,
            "col": col if col is not None else 0,
            "size_x": size_x,
            "size_y": size_y,
            "parameter_mappings": parameter_mappings or [],
            "series": series or [],
        }
        return await self.call(
            "PUT",
            f"/api/dashboard/{dashboard_id}",
            {**dashboard, "dashcards": [*existing, new_dashcard]},
        )

    async def update_dashboard_cards(self, dashboard_id: int, cards: List[Dict[str, Any]]) -> Any:
        """Replace all dashcards on a dashboard."""
        dashboard = await self.get_dashboard(dashboard_id)
        return await self.call("PUT", f"/api/dashboard/{dashboard_id}", {**dashboard, "dashcards": cards})

    async def remove_cards_from_dashboard(self, dashboard_id: int, card_ids: Iterable[int]) -> Any:
        dashboard = await self.get_dashboard(dashboard_id)
        removed = set(card_ids)
        remaining = [
            dc for dc in (dashboard.get("dashcards") or [])
            if dc.get("card_id") not in removed
        ]
        return await self.call("PUT", f"/api/dashboard/{dashboard_id}", {**dashboard, "dashcards": remaining})

    async def favorite_dashboard(self, dashboard_id: int) -> Any:
        return await self.call("POST", f"/api/dashboard/{dashboard_id}/favorite")

    async def unfavorite_dashboard(self, dashboard_id: int) -> Any:
        return await self.call("DELETE", f"/api/dashboard/{dashboard_id}/favorite")

    async def revert_dashboard(self, dashboard_id: int, revision_id: int) -> Any:
        return await self.call("POST", f"/api/dashboard/{dashboard_id}/revert", {"revision_id": revision_id})

    async def save_dashboard(self, dashboard: Dict[str, Any]) -> Any:
        return await self.call("POST", "/api/dashboard/save", dashboard)

    async def save_dashboard_to_collection(self, parent_collection_id: int, dashboard: Dict[str, Any]) -> Any:
        return await self.call("POST", f"/api/dashboard/save/collection/{parent_collection_id}", dashboard)

    # ─── Cards ───────────────────────────────────────────────────────────

    async def get_cards(self, f: Optional[str] = None, model_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """List cards. ``f`` is Metabase's filter option, e.g. 'all' or 'mine'."""
        return await self.call("GET", "/api/card", params=_query(f=f, model_id=model_id))

    async def get_card(self, card_id: int) -> Dict[str, Any]:
        return await self.call("GET", f"/api/card/{card_id}")

    async def create_card(self, card: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call("POST", "/api/card", card)

    async def update_card(
        self,
        card_id: int,
        updates: Dict[str, Any],
        query_params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return await self.call(
            "PUT", f"/api/card/{card_id}", updates, params=_query(**(query_params or {}))
        )

    async def delete_card(self, card_id: int, hard_delete: bool = False) -> Any:
        if hard_delete:
            return await self.call("DELETE", f"/api/card/{card_id}")
        return await self.call("PUT", f"/api/card/{card_id}", {"archived": True})

    async def execute_card(
        self,
        card_id: int,
        ignore_cache: bool = False,
        collection_preview: Optional[bool] = None,
        dashboard_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"ignore_cache": ignore_cache}
        if collection_preview is not None:
            body["collection_preview"] = collection_preview
        if dashboard_id is not None:
            body["dashboard_id"] = dashboard_id
        return await self.call("POST", f"/api/card/{card_id}/query", body)

    async def move_cards(
        self,
        card_ids: List[int],
        collection_id: Optional[int] = None,
        dashboard_id: Optional[int] = None,
    ) -> Any:
        body: Dict[str, Any] = {"card_ids": card_ids}
        if collection_id is not None:
            body["collection_id"] = collection_id
        if dashboard_id is not None:
            body["dashboard_id"] = dashboard_id
        return await self.call("POST", "/api/cards/move", body)

    async def move_cards_to_collection(self, card_ids: List[int], collection_id: Optional[int] = None) -> Any:
        body: Dict[str, Any] = {"card_ids": card_ids}
        if collection_id is not None:
            body["collection_id"] = collection_id
        return await self.call("POST", "/api/card/collections", body)

    async def get_embeddable_cards(self) -> Any:
        return await self.call("GET", "/api/card/embeddable")

    async def execute_pivot_card_query(self, card_id: int, parameters: Optional[Dict[str, Any]] = None) -> Any:
        return await self.call("POST", f"/api/card/pivot/{card_id}/query", parameters or {})

    async def get_public_cards(self) -> Any:
        return await self.call("GET", "/api/card/public")

    async def get_card_param_values(self, card_id: int, param_key: str) -> Any:
        return await self.call("GET", f"/api/card/{card_id}/params/{_segment(param_key)}/values")

    async def search_card_param_values(self, card_id: int, param_key: str, query: str) -> Any:
        return await self.call(
            "GET", f"/api/card/{card_id}/params/{_segment(param_key)}/search/{_segment(query)}"
        )

    async def get_card_param_remapping(self, card_id: int, param_key: str, value: str) -> Any:
        return await self.call(
            "GET", f"/api/card/{card_id}/params/{_segment(param_key)}/remapping", params={"value": value}
        )

    async def create_card_public_link(self, card_id: int) -> Any:
        return await self.call("POST", f"/api/card/{card_id}/public_link")

    async def delete_card_public_link(self, card_id: int) -> Any:
        await self.call("DELETE", f"/api/card/{card_id}/public_link")
        return {"success": True}

    async def execute_card_query_with_format(
        self, card_id: int, export_format: str, parameters: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Run a card and return its results as csv, json, or xlsx."""
        return await self.call(
            "POST", f"/api/card/{card_id}/query/{_segment(export_format)}", parameters or {}
        )

    async def copy_card(self, card_id: int) -> Any:
        return await self.call("POST", f"/api/card/{card_id}/copy")

    async def get_card_dashboards(self, card_id: int) -> Any:
        return await self.call("GET", f"/api/card/{card_id}/dashboards")

    async def get_card_query_metadata(self, card_id: int) -> Any:
        return await self.call("GET", f"/api/card/{card_id}/query_metadata")

    async def get_card_series(
        self,
        card_id: int,
        last_cursor: Optional[int] = None,
        query: Optional[str] = None,
        exclude_ids: Optional[List[int]] = None,
    ) -> Any:
        return await self.call(
            "GET",
            f"/api/card/{card_id}/series",
            params=_query(last_cursor=last_cursor, query=query or None, exclude_ids=exclude_ids),
        )

    # ─── Databases ───────────────────────────────────────────────────────

    async def get_databases(self, **filters: Any) -> Any:
        """List databases. Filters (e.g. include='tables', saved=True) go to the query string."""
        return await self.call("GET", "/api/database", params=_query(**filters))

    async def get_database(self, database_id: int, include: Optional[str] = None, **filters: Any) -> Dict[str, Any]:
        return await self.call(
            "GET", f"/api/database/{database_id}", params=_query(include=include, **filters)
        )

    async def create_database(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call("POST", "/api/database", payload)

    async def update_database(self, database_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call("PUT", f"/api/database/{database_id}", updates)

    async def delete_database(self, database_id: int) -> Any:
        return await self.call("DELETE", f"/api/database/{database_id}")

    async def validate_database(self, engine: str, details: Dict[str, Any]) -> Any:
        return await self.call("POST", "/api/database/validate", {"engine": engine, "details": details})

    async def add_sample_database(self) -> Dict[str, Any]:
        return await self.call("POST", "/api/database/sample_database")

    async def check_database_health(self, database_id: int) -> Any:
        return await self.call("GET", f"/api/database/{database_id}/healthcheck")

    async def get_database_metadata(self, database_id: int) -> Any:
        return await self.call("GET", f"/api/database/{database_id}/metadata")

    async def get_database_schemas(self, database_id: int) -> Any:
        return await self.call("GET", f"/api/database/{database_id}/schemas")

    async def get_database_schema(self, database_id: int, schema: str) -> Any:
        return await self.call("GET", f"/api/database/{database_id}/schema/{_segment(schema)}")

    async def sync_database_schema(self, database_id: int) -> Any:
        return await self.call("POST", f"/api/database/{database_id}/sync_schema")

    async def execute_query(
        self,
        database_id: int,
        query: str,
        parameters: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Run a native (SQL) query against a database."""
        return await self.call(
            "POST",
            "/api/dataset",
            {
                "type": "native",
                "native": {"query": query, "template_tags": {}},
                "parameters": parameters or [],
                "database": database_id,
            },
        )

    async def execute_query_export(
        self,
        export_format: str,
        query: Dict[str, Any],
        format_rows: bool = False,
        pivot_results: bool = False,
        visualization_settings: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return await self.call(
            "POST",
            f"/api/dataset/{_segment(export_format)}",
            {
                "format_rows": format_rows,
                "pivot_results": pivot_results,
                "query": query,
                "visualization_settings": visualization_settings or {},
            },
        )

    # ─── Collections ─────────────────────────────────────────────────────

    async def get_collections(self, archived: bool = False) -> List[Dict[str, Any]]:
        return await self.call("GET", "/api/collection", params={"archived": True} if archived else None)

    async def get_collection(self, collection_id: int) -> Dict[str, Any]:
        return await self.call("GET", f"/api/collection/{collection_id}")

    async def create_collection(self, collection: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call("POST", "/api/collection", collection)

    async def update_collection(self, collection_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call("PUT", f"/api/collection/{collection_id}", updates)

    async def delete_collection(self, collection_id: int) -> Any:
        return await self.call("DELETE", f"/api/collection/{collection_id}")

    async def get_collection_items(self, collection_id: int) -> Any:
        return await self.call("GET", f"/api/collection/{collection_id}/items")

    # ─── Users ───────────────────────────────────────────────────────────

    async def get_users(self, include_deactivated: bool = False) -> Any:
        return await self.call(
            "GET", "/api/user", params={"include_deactivated": True} if include_deactivated else None
        )

    async def get_user(self, user_id: int) -> Dict[str, Any]:
        return await self.call("GET", f"/api/user/{user_id}")

    async def create_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call("POST", "/api/user", user)

    async def update_user(self, user_id: int, updates: Dict[str, Any]) -> Dict[str, Any]:
        return await self.call("PUT", f"/api/user/{user_id}", updates)

    async def delete_user(self, user_id: int) -> Any:
        return await self.call("DELETE", f"/api/user/{user_id}")

    # ─── Permissions ─────────────────────────────────────────────────────

    async def get_permission_groups(self) -> List[Dict[str, Any]]:
        return await self.call("GET", "/api/permissions/group")

    async def create_permission_group(self, name: str) -> Dict[str, Any]:
        return await self.call("POST", "/api/permissions/group", {"name": name})

    async def update_permission_group(self, group_id: int, name: str) -> Dict[str, Any]:
        return await self.call("PUT", f"/api/permissions/group/{group_id}", {"name": name})

    async def delete_permission_group(self, group_id: int) -> Any:
        return await self.call("DELETE", f"/api/permissions/group/{group_id}")

    # ─── Activity ────────────────────────────────────────────────────────

    async def get_most_recently_viewed_dashboard(self) -> Any:
        return await self.call("GET", "/api/activity/most_recently_viewed_dashboard")

    async def get_popular_items(self) -> Any:
        return await self.call("GET", "/api/activity/popular_items")

    async def get_recent_views(self) -> Any:
        return await self.call("GET", "/api/activity/recent_views")

    async def get_recents(self, context: List[str], include_metadata: bool = False) -> Any:
        """Recent items; ``context`` values such as 'views' or 'selections' are sent as repeated keys."""
        return await self.call(
            "GET",
            "/api/activity/recents",
            params={"context": list(context), "include_metadata": include_metadata},
        )

    async def post_recents(self, data: Dict[str, Any]) -> Any:
        return await self.call("POST", "/api/activity/recents", data)

    # ─── Tables ──────────────────────────────────────────────────────────

    async def get_tables(self, ids: Optional[List[int]] = None) -> Any:
        params = {"ids": ",".join(str(i) for i in ids)} if ids else None
        return await self.call("GET", "/api/table", params=params)

    async def update_tables(self, ids: List[int], updates: Dict[str, Any]) -> Any:
        return await self.call("PUT", "/api/table", {"ids": ids, **updates})

    async def get_card_table_fks(self, card_id: int) -> Any:
        return await self.call("GET", f"/api/table/card__{card_id}/fks")

    async def get_card_table_query_metadata(self, card_id: int) -> Any:
        return await self.call("GET", f"/api/table/card__{card_id}/query_metadata")

    async def get_table(
        self,
        table_id: int,
        include_sensitive_fields: Optional[bool] = None,
        include_hidden_fields: Optional[bool] = None,
        include_editable_data_model: Optional[bool] = None,
    ) -> Any:
        return await self.call(
            "GET",
            f"/api/table/{table_id}",
            params=_query(
                include_sensitive_fields=include_sensitive_fields,
                include_hidden_fields=include_hidden_fields,
                include_editable_data_model=include_editable_data_model,
            ),
        )

    async def update_table(self, table_id: int, updates: Dict[str, Any]) -> Any:
        return await self.call("PUT", f"/api/table/{table_id}", updates)

    async def append_csv_to_table(self, table_id: int, filename: str, file_content: str) -> Any:
        return await self.call(
            "POST",
            f"/api/table/{table_id}/append-csv",
            files={"file": (filename, file_content, "text/csv")},
        )

    async def discard_table_field_values(self, table_id: int) -> Any:
        return await self.call("POST", f"/api/table/{table_id}/discard_values")

    async def reorder_table_fields(self, table_id: int, field_order: List[int]) -> Any:
        return await self.call("PUT", f"/api/table/{table_id}/fields/order", field_order)

    async def get_table_fks(self, table_id: int) -> Any:
        return await self.call("GET", f"/api/table/{table_id}/fks")

    async def get_table_query_metadata(
        self,
        table_id: int,
        include_sensitive_fields: Optional[bool] = None,
        include_hidden_fields: Optional[bool] = None,
        include_editable_data_model: Optional[bool] = None,
    ) -> Any:
        return await self.call(
            "GET",
            f"/api/table/{table_id}/query_metadata",
            params=_query(
                include_sensitive_fields=include_sensitive_fields,
                include_hidden_fields=include_hidden_fields,
                include_editable_data_model=include_editable_data_model,
            ),
        )

    async def get_table_related(self, table_id: int) -> Any:
        return await self.call("GET", f"/api/table/{table_id}/related")

    async def replace_table_csv(self, table_id: int, csv_file: str, filename: str = "data.csv") -> Any:
        return await self.call(
            "POST",
            f"/api/table/{table_id}/replace-csv",
            files={"csv_file": (filename, csv_file, "text/csv")},
        )

    async def rescan_table_field_values(self, table_id: int) -> Any:
        return await self.call("POST", f"/api/table/{table_id}/rescan_values")

    async def sync_table_schema(self, table_id: int) -> Any:
        return await self.call("POST", f"/api/table/{table_id}/sync_schema")

    async def get_table_data(self, table_id: int, limit: int = 1000) -> Any:
        return await self.call("GET", f"/api/table/{table_id}/data", params={"limit": limit})

    # ─── Search ──────────────────────────────────────────────────────────

    async def search(self, q: str, **filters: Any) -> Any:
        """Search cards, dashboards, collections and other content."""
        return await self.call("GET", "/api/search", params=_query(q=q, **filters))
