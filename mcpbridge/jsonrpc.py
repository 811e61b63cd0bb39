"""JSON-RPC helpers: locating request ids and building error replies."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

INTERNAL_ERROR = -32603
_WHITESPACE = " \t\n\r"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


_decoder = json.JSONDecoder(parse_constant=_reject_constant)


def parse_id(json_str: str) -> Any:
    """Return the ``id`` member of a JSON object; raise ``ValueError`` otherwise."""
    document = json.loads(json_str)
    if not isinstance(document, dict):
        raise ValueError("expected a JSON object")
    if "id" not in document:
        raise ValueError("missing field `id`")
    return document["id"]


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    return pos


def _is_valid_id(value: Any) -> bool:
    if value is None or isinstance(value, str):
        return True
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < 2**64


def find_first_id(json_str: str) -> int | str | None:
    """Return the first top-level ``id`` of a JSON object, scanning members in order.

    Returns ``None`` when the text is not an object, has no ``id`` member,
    is malformed before the ``id``, or the id is not a valid JSON-RPC id.
    A null id also yields ``None``.
    """
    pos = _skip_ws(json_str, 0)
    if not json_str.startswith("{", pos):
        return None
    pos = _skip_ws(json_str, pos + 1)
    if json_str.startswith("}", pos):
        return None
    while True:
        if not json_str.startswith('"', pos):
            return None
        try:
            name, pos = _decoder.raw_decode(json_str, pos)
        except ValueError:
            return None
        pos = _skip_ws(json_str, pos)
        if not json_str.startswith(":", pos):
            return None
        pos = _skip_ws(json_str, pos + 1)
        try:
            value, pos = _decoder.raw_decode(json_str, pos)
        except ValueError:
            return None
        if name == "id":
            return value if _is_valid_id(value) else None
        pos = _skip_ws(json_str, pos)
        if not json_str.startswith(",", pos):
            return None
        pos = _skip_ws(json_str, pos + 1)


def error_response(json_str: str, message: str) -> str:
    """Build a JSON-RPC internal-error reply carrying the request's id."""
    request_id = find_first_id(json_str)
    if request_id is None:
        logger.debug("Failed to parse json rpc id from '%s'", json_str)
    reply = {
        "jsonrpc": "2.0",
        "error": {"code": INTERNAL_ERROR, "message": message},
        "id": request_id,
    }
    return json.dumps(reply, separators=(",", ":"), ensure_ascii=False)


async def mcp_error(worker_id: int, json_str: str, message: str, queue: asyncio.Queue) -> None:
    """Put an internal-error reply for the given request onto the output queue."""
    await queue.put(error_response(json_str, message))
    logger.debug("Worker %s: queued JSON-RPC error response", worker_id)