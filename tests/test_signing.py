from __future__ import annotations

import pytest

from fspolicy import MissingSecretError, Policy
from fspolicy.core.codec import make_base64
from fspolicy.core.signing import make_signature, verify_signature

READ_STAT_BASE64 = "eyJleHBpcnkiOjE1MjU1MDAwMDAsImNhbGwiOlsicmVhZCIsInN0YXQiXSwicGF0aCI6Ii4qIn0="
READ_STAT_SIGNATURE = "938e389b0bec0e023e95ebcc16adef9519c6971cfc95fa5835e18c7e603d346e"


def test_make_signature_accepts_encoded_mapping_or_policy() -> None:
    doc = {"expiry": 1525500000, "call": ["read", "stat"], "path": ".*"}
    assert make_signature(READ_STAT_BASE64, "secret") == READ_STAT_SIGNATURE
    assert make_signature(doc, "secret") == READ_STAT_SIGNATURE
    assert make_signature(Policy(doc), "secret") == READ_STAT_SIGNATURE


def test_make_base64_accepts_policy() -> None:
    p = Policy.from_calls(["read", "stat"], 1525500000)
    assert make_base64(p) == READ_STAT_BASE64


def test_signature_is_lowercase_hex() -> None:
    sig = make_signature(READ_STAT_BASE64, "secret")
    assert sig == sig.lower()
    assert len(sig) == 64
    int(sig, 16)


@pytest.mark.parametrize("secret", ["", None])
def test_empty_secret_is_rejected(secret) -> None:
    with pytest.raises(MissingSecretError):
        make_signature(READ_STAT_BASE64, secret)


def test_verify_signature() -> None:
    assert verify_signature(READ_STAT_BASE64, READ_STAT_SIGNATURE, "secret") is True
    assert verify_signature(READ_STAT_BASE64, READ_STAT_SIGNATURE.upper(), "secret") is True
    assert verify_signature(READ_STAT_BASE64, READ_STAT_SIGNATURE, "other") is False
    assert verify_signature(READ_STAT_BASE64[:-4] + "fQ==", READ_STAT_SIGNATURE, "secret") is False
    assert verify_signature(READ_STAT_BASE64, "", "secret") is False
    assert verify_signature(READ_STAT_BASE64, "\u00e9" * 64, "secret") is False
    assert verify_signature(READ_STAT_BASE64, None, "secret") is False  # type: ignore[arg-type]
