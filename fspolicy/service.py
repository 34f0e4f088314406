from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional

from fspolicy.config import PolicyConfig, load_policy_config
from fspolicy.core.timeutil import ensure_aware, utcnow
from fspolicy.errors import MissingSecretError
from fspolicy.models import SecurityParams
from fspolicy.policy import Policy

logger = logging.getLogger(__name__)


def _secret(cfg: PolicyConfig) -> str:
    if not cfg.app_secret:
        raise MissingSecretError("FILESTACK_APP_SECRET is not configured")
    return cfg.app_secret


def build_policy(
    calls: Iterable[str],
    *,
    cfg: Optional[PolicyConfig] = None,
    now: Optional[datetime] = None,
    **fields: Any,
) -> Policy:
    """
    Policy for `calls` expiring `cfg.ttl_seconds` after `now`, bound to the app secret.

    Extra keyword fields (`handle`, `container`, `maxSize`, ...) are added after
    `expiry, call, path` in the order given.
    """
    cfg = cfg or load_policy_config()
    base = ensure_aware(now) if now is not None else utcnow()
    data = {
        "expiry": base + timedelta(seconds=cfg.ttl_seconds),
        "call": list(calls),
        "path": fields.pop("path", cfg.default_path),
    }
    if not data["path"]:
        del data["path"]
    data.update(fields)
    return Policy(data, secret=_secret(cfg), escape_slashes=cfg.escape_slashes)


def issue_policy(
    calls: Iterable[str],
    *,
    cfg: Optional[PolicyConfig] = None,
    now: Optional[datetime] = None,
    **fields: Any,
) -> SecurityParams:
    policy = build_policy(calls, cfg=cfg, now=now, **fields)
    params = policy.security()
    logger.info("Issued policy calls=%s expiry=%s", ",".join(policy.calls or ()), policy.expiry.isoformat())
    return params


def renew_policy(policy: Policy, *, cfg: Optional[PolicyConfig] = None, now: Optional[datetime] = None) -> Policy:
    """Renew `policy` for another configured TTL from `now`."""
    cfg = cfg or load_policy_config()
    return policy.renew(timedelta(seconds=cfg.ttl_seconds), now=now)
