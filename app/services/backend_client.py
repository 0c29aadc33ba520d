# app/services/backend_client.py
"""
Thin async client for the hosted relational backend (PostgREST / Supabase).

Every business rule lives server-side: this module only issues
select / insert / update / delete / rpc requests against named tables,
views and stored procedures and hands back the rows it receives.

URL shape:  {BACKEND_URL}/rest/v1/{table}?select=...&col=op.value
            {BACKEND_URL}/rest/v1/rpc/{function}
Errors:     JSON body {code, message, details, hint} → BackendError
"""

from typing import Any, Iterable, Optional, Sequence, Tuple

import httpx

from app.utils.logger import get_logger

logger = get_logger(__name__)

Filter = Tuple[str, str, Any]           # (column, operator, value)
Order = Tuple[str, bool]                # (column, ascending)

OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "is", "in", "ilike"}

_SINGLE_OBJECT = "application/vnd.pgrst.object+json"
_RETURN_ROWS = "return=representation"

# Postgres error codes the dashboard can explain to staff
FRIENDLY_MESSAGES = {
    "23505": "A record with these details already exists",
    "23503": "Reference error: one of the given ids does not exist",
    "23502": "Required fields are missing",
    "22P02": "Invalid data format",
    "PGRST116": "No matching record found",
}


class BackendError(Exception):
    """A request to the hosted backend failed (network or rejected query)."""

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[str] = None,
                 hint: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
        self.status_code = status_code

    @property
    def friendly_message(self) -> str:
        return FRIENDLY_MESSAGES.get(self.code, self.message)

    def __repr__(self):
        return f"<BackendError code={self.code} status={self.status_code} message={self.message!r}>"


def _format_value(operator: str, value: Any) -> str:
    if operator == "is":
        return "null" if value is None else str(value).lower()
    if operator == "in":
        items = ",".join(f'"{v}"' for v in value)
        return f"({items})"
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def build_params(columns: Optional[str] = None, filters: Optional[Iterable[Filter]] = None,
                 order: Optional[Sequence[Order]] = None, limit: Optional[int] = None,
                 offset: Optional[int] = None) -> list[tuple[str, str]]:
    """Translate select arguments into PostgREST query parameters."""
    params: list[tuple[str, str]] = []
    if columns:
        # Multi-line embedded selects are sent without whitespace
        params.append(("select", "".join(columns.split())))
    for column, operator, value in filters or ():
        if operator not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {operator}")
        params.append((column, f"{operator}.{_format_value(operator, value)}"))
    if order:
        params.append(("order", ",".join(f"{col}.{'asc' if asc else 'desc'}" for col, asc in order)))
    if limit is not None:
        params.append(("limit", str(limit)))
    if offset is not None:
        params.append(("offset", str(offset)))
    return params


class BackendClient:
    """
    One instance per application, created at startup and closed at shutdown.
    Requests are not retried: a failure is logged once and raised to the caller.
    """

    def __init__(self, rest_url: str, headers: dict, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.rest_url = rest_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.rest_url, headers=headers, transport=transport)

    async def close(self):
        await self._client.aclose()

    # ── Reads ─────────────────────────────────────────────────────────────
    async def select(self, table: str, columns: str = "*", filters: Optional[Iterable[Filter]] = None,
                     order: Optional[Sequence[Order]] = None, limit: Optional[int] = None,
                     offset: Optional[int] = None, single: bool = False):
        params = build_params(columns, filters, order, limit, offset)
        headers = {"Accept": _SINGLE_OBJECT} if single else None
        return await self._request("GET", f"/{table}", params=params, headers=headers)

    # ── Writes ────────────────────────────────────────────────────────────
    async def insert(self, table: str, row: dict, columns: str = "*") -> dict:
        params = build_params(columns)
        headers = {"Prefer": _RETURN_ROWS, "Accept": _SINGLE_OBJECT}
        return await self._request("POST", f"/{table}", params=params, json=[row], headers=headers)

    async def update(self, table: str, values: dict, filters: Iterable[Filter], columns: str = "*",
                     single: bool = True):
        params = build_params(columns, filters)
        headers = {"Prefer": _RETURN_ROWS}
        if single:
            headers["Accept"] = _SINGLE_OBJECT
        return await self._request("PATCH", f"/{table}", params=params, json=values, headers=headers)

    async def delete(self, table: str, filters: Iterable[Filter]) -> None:
        await self._request("DELETE", f"/{table}", params=build_params(filters=filters))

    # ── Stored procedures ─────────────────────────────────────────────────
    async def rpc(self, function: str, params: Optional[dict] = None):
        return await self._request("POST", f"/rpc/{function}", json=params or {})

    async def ping(self) -> bool:
        """True when the REST root answers at all (used by health checks)."""
        try:
            response = await self._client.get("/")
        except httpx.HTTPError as e:
            logger.warning(f"Backend unreachable: {e}")
            return False
        return response.status_code < 500

    async def _request(self, method: str, path: str, **kwargs):
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise BackendError(f"Backend request failed: {e}") from e

        if response.status_code >= 400:
            error = _error_from_response(response)
            logger.error(f"{method} {path} → {response.status_code} {error!r}")
            raise error

        logger.debug(f"{method} {path} → {response.status_code}")
        if response.status_code == 204 or not response.content:
            return None
        return response.json()


def _error_from_response(response: httpx.Response) -> BackendError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    return BackendError(
        message=body.get("message") or f"HTTP {response.status_code}",
        code=body.get("code"),
        details=body.get("details"),
        hint=body.get("hint"),
        status_code=response.status_code,
    )
