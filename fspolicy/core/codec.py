"""Canonical JSON rendering and the padded, URL-quasi-safe base64 encoding of policies."""

from __future__ import annotations

import base64
import json
from typing import Any, Dict, Mapping

from fspolicy.core.timeutil import coerce_expiry, to_epoch_seconds


def document_from_mapping(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    JSON-ready copy of `data`, key order preserved.

    `expiry` always becomes an int Unix timestamp; list-like `call` becomes a list.
    """
    doc: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "expiry":
            value = to_epoch_seconds(coerce_expiry(value))
        elif key == "call" and isinstance(value, tuple):
            value = list(value)
        doc[key] = value
    return doc


def canonical_json(doc: Mapping[str, Any], *, escape_slashes: bool = False) -> bytes:
    raw = json.dumps(document_from_mapping(doc), separators=(",", ":"), ensure_ascii=True)
    if escape_slashes:
        # A literal "/" can only appear inside JSON strings, so this is safe post-dump.
        raw = raw.replace("/", "\\/")
    return raw.encode("utf-8")


def make_base64(data: Any, *, escape_slashes: bool = False) -> str:
    """
    Standard base64 (padding kept), then `+` -> `-` and `/` -> `_`.

    Accepts raw bytes/str, a policy document mapping, or a Policy.
    """
    from fspolicy.policy import Policy

    if isinstance(data, Policy):
        return data.base64
    if isinstance(data, Mapping):
        data = canonical_json(data, escape_slashes=escape_slashes)
    elif isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("ascii").replace("+", "-").replace("/", "_")


def decode_base64(encoded: str) -> Dict[str, Any]:
    """Inverse of `make_base64` for a policy document; returns the decoded JSON object."""
    raw = base64.b64decode(encoded.replace("-", "+").replace("_", "/"), validate=True)
    doc = json.loads(raw.decode("utf-8"))
    if not isinstance(doc, dict):
        raise ValueError("policy document must be a JSON object")
    return doc
