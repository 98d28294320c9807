"""
Postmark Adapter — Thin async wrapper over the Postmark REST API.

Covers the calls the tools need:
- Server-token calls: server check, send, send with template, template CRUD, outbound stats
- Account-token call: template push between servers

Errors are raised as PostmarkMcpError. No retries: a single failure surfaces
immediately to the caller.
"""

from typing import Any, Literal
from urllib.parse import quote

import httpx

from config import DEFAULT_API_BASE_URL, Settings
from logging_config import log_api_call, log_api_result
from models import ErrorKind, OutboundStats, PostmarkMcpError, PushResult, TemplateSummary

__all__ = [
    "PostmarkClient",
    "HTTP_TIMEOUT",
]

# Default timeout for HTTP requests (seconds)
HTTP_TIMEOUT = 30

USER_AGENT = "postmark-mcp/1.0"

SERVER_TOKEN_HEADER = "X-Postmark-Server-Token"
ACCOUNT_TOKEN_HEADER = "X-Postmark-Account-Token"

Scope = Literal["server", "account"]


def _template_path(template_id_or_alias: str) -> str:
    return f"/templates/{quote(str(template_id_or_alias), safe='')}"


def _error_body(response: httpx.Response) -> dict[str, Any]:
    """Parse a Postmark error body, tolerating non-JSON responses."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class PostmarkClient:
    """
    Postmark API client bound to one server (and optionally one account).

    Use as an async context manager, or call aclose() when done:

        async with PostmarkClient(token) as client:
            await client.send_email({...})
    """

    def __init__(
        self,
        server_token: str,
        account_token: str | None = None,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._server_token = server_token
        self._account_token = account_token
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers={
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "PostmarkClient":
        return cls(
            server_token=settings.server_token,
            account_token=settings.account_token,
            base_url=settings.api_base_url,
            transport=transport,
        )

    async def __aenter__(self) -> "PostmarkClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _auth_headers(self, scope: Scope) -> dict[str, str]:
        if scope == "account":
            if not self._account_token:
                raise PostmarkMcpError(
                    ErrorKind.MISSING_CREDENTIAL,
                    "POSTMARK_ACCOUNT_TOKEN environment variable is required for template push operations",
                )
            return {ACCOUNT_TOKEN_HEADER: self._account_token}
        return {SERVER_TOKEN_HEADER: self._server_token}

    async def _request(
        self,
        method: str,
        path: str,
        scope: Scope = "server",
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send one request. Raises NETWORK_ERROR if no response arrives."""
        headers = self._auth_headers(scope)
        log_api_call(method, path, **(params or {}))
        try:
            response = await self._http.request(
                method, path, headers=headers, json=json, params=params,
            )
        except httpx.TimeoutException:
            raise PostmarkMcpError(ErrorKind.NETWORK_ERROR, f"Request timed out: {method} {path}")
        except httpx.RequestError as e:
            raise PostmarkMcpError(ErrorKind.NETWORK_ERROR, f"Request failed: {method} {path} - {e}")
        log_api_result(method, path, response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            raise PostmarkMcpError(
                ErrorKind.PROVIDER_ERROR,
                f"Postmark returned a non-JSON response ({response.status_code})",
                status=response.status_code,
            )
        if not isinstance(body, dict):
            raise PostmarkMcpError(
                ErrorKind.PROVIDER_ERROR,
                f"Postmark returned an unexpected response shape ({response.status_code})",
                status=response.status_code,
            )
        return body

    async def _call(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        SDK-style server call: JSON in, JSON out.

        Non-2xx responses raise PROVIDER_ERROR with Postmark's ErrorCode and
        Message folded into one string.
        """
        response = await self._request(method, path, json=json, params=params)
        if not response.is_success:
            body = _error_body(response)
            error_code = body.get("ErrorCode")
            message = body.get("Message") or response.reason_phrase
            prefix = f"{error_code} - " if error_code is not None else ""
            raise PostmarkMcpError(
                ErrorKind.PROVIDER_ERROR,
                f"Postmark API error {response.status_code}: {prefix}{message}",
                status=response.status_code,
                error_code=error_code,
            )
        return self._json(response)

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    async def get_server(self) -> dict[str, Any]:
        """Fetch the server this token belongs to. Used to verify the token at startup."""
        return await self._call("GET", "/server")

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    async def send_email(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST /email. Returns Postmark's receipt (MessageID, To, SubmittedAt, ...)."""
        return await self._call("POST", "/email", json=payload)

    async def send_email_with_template(self, payload: dict[str, Any]) -> dict[str, Any]:
        """POST /email/withTemplate."""
        return await self._call("POST", "/email/withTemplate", json=payload)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    async def get_templates(self, count: int = 100, offset: int = 0) -> list[TemplateSummary]:
        """GET /templates — one page of templates on this server."""
        body = await self._call(
            "GET", "/templates", params={"count": str(count), "offset": str(offset)},
        )
        return [TemplateSummary.from_api(t) for t in body.get("Templates") or []]

    async def create_template(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._call("POST", "/templates", json=data)

    async def edit_template(self, template_id_or_alias: str, data: dict[str, Any]) -> dict[str, Any]:
        return await self._call("PUT", _template_path(template_id_or_alias), json=data)

    async def delete_template(self, template_id_or_alias: str) -> dict[str, Any]:
        return await self._call("DELETE", _template_path(template_id_or_alias))

    # ------------------------------------------------------------------
    # Raw calls
    # ------------------------------------------------------------------

    async def get_outbound_stats(
        self,
        tag: str | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
    ) -> OutboundStats:
        """GET /stats/outbound[?fromdate=&todate=&tag=]."""
        params: dict[str, str] = {}
        if from_date:
            params["fromdate"] = from_date
        if to_date:
            params["todate"] = to_date
        if tag:
            params["tag"] = tag

        response = await self._request("GET", "/stats/outbound", params=params or None)
        if not response.is_success:
            raise PostmarkMcpError(
                ErrorKind.PROVIDER_ERROR,
                f"API request failed: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
            )
        return OutboundStats.from_api(self._json(response))

    async def push_templates(
        self,
        source_server_id: str,
        destination_server_id: str,
        perform_changes: bool,
    ) -> PushResult:
        """
        PUT /templates/push — copy templates between servers.

        With perform_changes=False Postmark only reports what would change.
        Requires the account token.
        """
        response = await self._request(
            "PUT",
            "/templates/push",
            scope="account",
            json={
                "SourceServerID": source_server_id,
                "DestinationServerID": destination_server_id,
                "PerformChanges": perform_changes,
            },
        )
        if not response.is_success:
            message = _error_body(response).get("Message") or response.reason_phrase
            raise PostmarkMcpError(
                ErrorKind.PROVIDER_ERROR,
                f"Postmark API Error ({response.status_code}): {message}",
                status=response.status_code,
            )
        return PushResult.from_api(self._json(response))
