"""HTTP client that forwards JSON-RPC messages to an MCP gateway."""

from __future__ import annotations

import codecs
import logging
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from .config import Config

logger = logging.getLogger(__name__)

SID = "mcp-session-id"
ACCEPT_VALUE = "application/json, application/x-ndjson, text/event-stream"
CONTENT_TYPE_VALUE = "application/json; charset=utf-8"


@dataclass(frozen=True)
class PostResult:
    """Outcome of one POST to the gateway."""

    out: str
    session_id: str | None = None
    sse: bool = False


class PostError(Exception):
    """Raised when a POST to the gateway fails."""


def _is_valid_header_value(raw: bytes) -> bool:
    return all((b >= 32 and b != 127) or b == 9 for b in raw)


def _is_visible_ascii(raw: bytes) -> bool:
    return all(32 <= b < 127 or b == 9 for b in raw)


class McpStreamClient:
    """Posts payloads to the configured MCP endpoint and tracks the session id."""

    def __init__(self, config: Config, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._http = httpx.AsyncClient(
            timeout=float(config.mcp_tool_call_timeout), transport=transport
        )
        self._session_id: str | None = None

    def __repr__(self) -> str:
        return f"McpStreamClient(config={self.config!r}, session_id={self._session_id!r})"

    async def __aenter__(self) -> McpStreamClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    def is_auth(self) -> bool:
        """Whether an Authorization header is configured."""
        return bool(self.config.mcp_auth)

    def set_session_id(self, session_id: str | None) -> None:
        """Store the session id; the first non-empty value wins."""
        if self._session_id is None and session_id is not None:
            self._session_id = session_id

    def get_session_id(self) -> str | None:
        return self._session_id

    def is_ready(self) -> bool:
        """Whether the MCP session has been initialised."""
        return self._session_id is not None

    def process_session_id(self, headers: Mapping | httpx.Headers) -> str | None:
        """Record the session id found in response headers and return it."""
        headers = httpx.Headers(headers)
        raw = next(
            (value for key, value in headers.raw if key.lower() == SID.encode()), None
        )
        if raw is None:
            if not self.is_ready():
                logger.debug("Session id not found")
            return None
        if not _is_visible_ascii(raw):
            logger.error("Header contains invalid characters")
            return None
        session_id = raw.decode("ascii")
        self.set_session_id(session_id)
        return session_id

    def _request_headers(self) -> dict[str, str | bytes]:
        headers: dict[str, str | bytes] = {
            "Accept": ACCEPT_VALUE,
            "Content-Type": CONTENT_TYPE_VALUE,
        }
        if self.is_auth():
            auth = self.config.mcp_auth.encode("utf-8")
            if not _is_valid_header_value(auth):
                message = "Invalid auth header: failed to parse header value"
                logger.error(message)
                raise PostError(message)
            headers["Authorization"] = auth
        session_id = self.get_session_id()
        if session_id is not None:
            headers[SID] = session_id
        return headers

    async def stream_post(self, payload: str | bytes) -> PostResult:
        """POST the payload and collect the whole response body.

        Raises ``PostError`` on transport failures, non-success statuses and
        interrupted bodies.
        """
        headers = self._request_headers()
        try:
            request = self._http.build_request(
                "POST", self.config.mcp_server_url, content=payload, headers=headers
            )
            response = await self._http.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise PostError(f"Request failed: {exc}") from exc

        try:
            status = f"{response.status_code} {response.reason_phrase}".strip()
            if not response.is_success:
                try:
                    err_text = (await response.aread()).decode("utf-8", errors="replace")
                except httpx.HTTPError:
                    err_text = "Could not read error body"
                logger.error("Server returned error %s: %s", status, err_text)
                raise PostError(f"Server error {status}: {err_text}")

            is_sse = "text/event-stream" in response.headers.get("content-type", "")
            session_id = self.process_session_id(response.headers)

            decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
            parts: list[str] = []
            try:
                async for chunk in response.aiter_bytes():
                    parts.append(decoder.decode(chunk))
            except httpx.HTTPError as exc:
                raise PostError(f"Stream interrupted: {exc}") from exc
            parts.append(decoder.decode(b"", final=True))
            out = "".join(parts)
        finally:
            await response.aclose()

        logger.debug("Server output length: %d starting with: %.42s ...", len(out), out)
        return PostResult(out=out, session_id=session_id, sse=is_sse)