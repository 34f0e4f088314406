from __future__ import annotations

import hashlib
import hmac
from typing import Any, Mapping, Optional

from fspolicy.core.codec import make_base64
from fspolicy.errors import MissingSecretError


def _require_secret(secret: Optional[str]) -> bytes:
    if not secret:
        raise MissingSecretError("A non-empty app secret is required to sign a policy")
    return secret.encode("utf-8")


def hmac_sha256_hex(message: str, secret: Optional[str]) -> str:
    key = _require_secret(secret)
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).hexdigest()


def make_signature(policy: Any, secret: Optional[str]) -> str:
    """
    HMAC-SHA256 (lowercase hex) of a policy's encoded form.

    `policy` may be a Policy, a document mapping (encoded first), or an
    already-encoded string.
    """
    from fspolicy.policy import Policy

    if isinstance(policy, Policy):
        encoded = policy.base64
    elif isinstance(policy, Mapping):
        encoded = make_base64(policy)
    else:
        encoded = str(policy)
    return hmac_sha256_hex(encoded, secret)


def verify_signature(encoded: str, signature: str, secret: Optional[str]) -> bool:
    expected = hmac_sha256_hex(encoded, secret).encode("ascii")
    # Untrusted input: compare bytes so non-ASCII signatures just fail to match.
    supplied = (signature or "").strip().lower().encode("utf-8", "replace")
    return hmac.compare_digest(expected, supplied)
