from __future__ import annotations

import copy
import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from fspolicy.core.codec import canonical_json, document_from_mapping, make_base64
from fspolicy.core.options import PolicyOptions, SizeBound, validate_options
from fspolicy.core.signing import hmac_sha256_hex
from fspolicy.core.timeutil import ensure_aware, utcnow
from fspolicy.errors import InvalidArgumentError, MissingSecretError, NotSignedYetError
from fspolicy.models import SecurityParams

logger = logging.getLogger(__name__)

DEFAULT_PATH = ".*"


class Policy:
    """
    A Filestack security policy: validated grants plus their encoded form.

    Construction validates every field (in supplied order) and fails atomically.
    The canonical document and its base64 form are fixed at construction; signatures
    are computed on demand and cached per secret.

    Example:
        policy = Policy({"expiry": 1525500000, "call": ["read", "stat"], "handle": "abc"})
        params = policy.security("app-secret").as_params()
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        *,
        secret: Optional[str] = None,
        escape_slashes: bool = False,
    ):
        """
        Args:
            data: Field map; keys must be among `ALLOWED_KEYS` and `expiry` is required.
            secret: Optional app secret to bind now (used by `signature()`/`renew()` when
                no explicit secret is given).
            escape_slashes: Emit `/` as `\\/` in the canonical JSON (byte-compat knob).
        """
        self._options: PolicyOptions = validate_options(data)
        self._escape_slashes = bool(escape_slashes)
        # Deep copy: caller-owned values must not alias the document.
        self._document: Dict[str, Any] = copy.deepcopy(document_from_mapping(dict(self._options.items())))
        self._json: bytes = canonical_json(self._document, escape_slashes=self._escape_slashes)
        self._base64: str = make_base64(self._json)

        self._lock = threading.Lock()
        self._signatures: Dict[str, str] = {}
        self._secret: Optional[str] = secret or None

    @classmethod
    def from_calls(
        cls,
        calls: Iterable[str],
        expiry: Any,
        path: Optional[str] = DEFAULT_PATH,
        secret: Optional[str] = None,
        *,
        escape_slashes: bool = False,
    ) -> "Policy":
        """Positional form: document keys are `expiry, call, path` (path only when non-empty)."""
        data: Dict[str, Any] = {"expiry": expiry, "call": list(calls)}
        if path:
            data["path"] = path
        return cls(data, secret=secret, escape_slashes=escape_slashes)

    # Fields

    @property
    def options(self) -> PolicyOptions:
        return self._options

    @property
    def expiry(self) -> datetime:
        return self._options.expiry

    @property
    def calls(self) -> Optional[Tuple[str, ...]]:
        return self._options.call

    @property
    def path(self) -> Optional[str]:
        return self._options.path

    @property
    def handle(self) -> Optional[str]:
        return self._options.handle

    @property
    def container(self) -> Optional[str]:
        return self._options.container

    @property
    def url(self) -> Optional[str]:
        return self._options.url

    @property
    def min_size(self) -> Optional[SizeBound]:
        return self._options.min_size

    @property
    def max_size(self) -> Optional[SizeBound]:
        return self._options.max_size

    @property
    def escape_slashes(self) -> bool:
        return self._escape_slashes

    # Encoded forms

    @property
    def document(self) -> Dict[str, Any]:
        """A deep copy of the canonical document (expiry as Unix seconds)."""
        return copy.deepcopy(self._document)

    def to_json(self) -> bytes:
        return self._json

    @property
    def base64(self) -> str:
        return self._base64

    # Signing

    @property
    def is_signed(self) -> bool:
        return self._secret is not None

    def signature(self, secret: Optional[str] = None) -> str:
        """
        HMAC-SHA256 hex digest of `base64` under `secret` (or the bound secret).

        Results are cached per secret value. The last secret used becomes the bound
        secret, which `renew()` carries forward.
        """
        with self._lock:
            key = secret or self._secret
            if not key:
                raise MissingSecretError("A non-empty app secret is required to sign a policy")
            sig = self._signatures.get(key)
            if sig is None:
                sig = hmac_sha256_hex(self._base64, key)
                self._signatures[key] = sig
                logger.debug("Signed policy expiring at %s", self.expiry.isoformat())
            self._secret = key
            return sig

    def security(self, secret: Optional[str] = None) -> SecurityParams:
        return SecurityParams(policy=self._base64, signature=self.signature(secret))

    # Expiry

    def time_until_expiry(self, now: Optional[datetime] = None) -> timedelta:
        """`expiry - now`; negative once the policy has expired."""
        now = ensure_aware(now) if now is not None else utcnow()
        return self.expiry - now

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = ensure_aware(now) if now is not None else utcnow()
        return now >= self.expiry

    def renew(self, time_or_interval: Any, now: Optional[datetime] = None) -> "Policy":
        """
        New policy with the same grants and a new expiry.

        Args:
            time_or_interval: Absolute new expiry (datetime) or a timedelta added to `now`.
            now: Base time for a timedelta. Defaults to the current time.

        Raises:
            InvalidArgumentError: `time_or_interval` is neither a datetime nor a timedelta.
            NotSignedYetError: no secret is associated with this policy yet.
        """
        if isinstance(time_or_interval, datetime):
            expiry = ensure_aware(time_or_interval)
        elif isinstance(time_or_interval, timedelta):
            base = ensure_aware(now) if now is not None else utcnow()
            expiry = base + time_or_interval
        else:
            raise InvalidArgumentError(
                f"renew() needs a datetime or timedelta, got {type(time_or_interval).__name__}"
            )

        with self._lock:
            secret = self._secret
        if secret is None:
            raise NotSignedYetError("This policy hasn't been signed yet, so it can't be renewed")

        data = {key: (expiry if key == "expiry" else value) for key, value in self._options.items()}
        logger.debug("Renewing policy: %s -> %s", self.expiry.isoformat(), expiry.isoformat())
        return Policy(data, secret=secret, escape_slashes=self._escape_slashes)

    # Value semantics

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Policy):
            return NotImplemented
        return self._json == other._json

    def __hash__(self) -> int:
        return hash(self._json)

    def __repr__(self) -> str:
        return f"Policy({self._document!r})"
