"""Decoder for the double-encoded JSON-RPC responses returned by the MCP aggregator.

The aggregator streams a JSON-RPC envelope, possibly wrapped in event-stream
framing, whose ``result.content[0].text`` member is itself a JSON document.
Each step of the unwrap raises ``DecodeError`` tagged with the stage that
failed so callers can tell a garbled envelope from a bad nested payload.
"""

from __future__ import annotations

import json
import re
from typing import Any

from moneymap.core.errors import DecodeError, DecodeStage

# Greedy: first "{" to last "}" across lines.
_ENVELOPE_RE = re.compile(r"\{.*\}", re.DOTALL)


def extract_envelope(text: str) -> Any:
    """Locate and parse the outer JSON-RPC object inside ``text``."""

    match = _ENVELOPE_RE.search(text or "")
    if match is None:
        raise DecodeError("no JSON object found in response", stage=DecodeStage.EXTRACT)
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise DecodeError(f"parse failed: {exc.msg}", stage=DecodeStage.PARSE) from exc


def unwrap_rpc_text(envelope: Any) -> str:
    """Return the nested text payload carried by a successful RPC envelope."""

    if not isinstance(envelope, dict):
        raise DecodeError("invalid RPC response: envelope is not an object", stage=DecodeStage.ENVELOPE)
    if envelope.get("error"):
        raise DecodeError(f"invalid RPC response: {envelope['error']}", stage=DecodeStage.ENVELOPE)
    result = envelope.get("result")
    content = result.get("content") if isinstance(result, dict) else None
    if not isinstance(content, list) or not content:
        raise DecodeError("invalid RPC response: missing result content", stage=DecodeStage.ENVELOPE)
    first = content[0]
    text = first.get("text") if isinstance(first, dict) else None
    if not isinstance(text, str):
        raise DecodeError("invalid RPC response: content has no text", stage=DecodeStage.ENVELOPE)
    return text


def parse_nested_payload(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"nested payload is not valid JSON: {exc.msg}", stage=DecodeStage.PAYLOAD) from exc


def decode_payload(text: str) -> Any:
    """Run the full unwrap: raw response text to the nested domain payload."""

    return parse_nested_payload(unwrap_rpc_text(extract_envelope(text)))


__all__ = [
    "decode_payload",
    "extract_envelope",
    "parse_nested_payload",
    "unwrap_rpc_text",
]
