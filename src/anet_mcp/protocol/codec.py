"""Conversion between raw transport payloads and wire models."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from anet_mcp.protocol.errors import InvalidRequestError, TransportDecodeError
from anet_mcp.protocol.models import JsonRpcRequest, JsonRpcResponse


def decode_json(payload: bytes | str) -> Any:
    """Parse *payload* as UTF-8 JSON.

    Raises:
        TransportDecodeError: If the payload is not valid UTF-8 or not JSON.
    """
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TransportDecodeError(str(exc)) from exc
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        raise TransportDecodeError(str(exc)) from exc


def decode_request(payload: bytes | str) -> JsonRpcRequest:
    """Decode a raw payload into a :class:`JsonRpcRequest`.

    Raises:
        TransportDecodeError: The payload is not JSON.
        InvalidRequestError: The JSON is not a request object. ``request_id``
            is populated when the document carried a usable ``id``.
    """
    data = decode_json(payload)
    if not isinstance(data, dict):
        raise InvalidRequestError("request must be a JSON object")
    try:
        return JsonRpcRequest.model_validate(data)
    except ValidationError as exc:
        raw_id = data.get("id")
        usable = isinstance(raw_id, (str, int)) and not isinstance(raw_id, bool)
        request_id = raw_id if usable else None
        raise InvalidRequestError(_summarise(exc), request_id=request_id) from exc


def encode_response(response: JsonRpcResponse) -> bytes:
    """Encode *response* as compact UTF-8 JSON (no trailing newline)."""
    return json.dumps(response.to_wire(), separators=(",", ":")).encode("utf-8")


def decode_response(payload: bytes | str) -> JsonRpcResponse:
    """Decode a response payload, as received by a client."""
    data = decode_json(payload)
    try:
        return JsonRpcResponse.model_validate(data)
    except ValidationError as exc:
        raise InvalidRequestError(_summarise(exc)) from exc


def _summarise(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
