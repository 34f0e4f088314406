from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


@dataclass(frozen=True)
class PolicyConfig:
    app_secret: Optional[str]  # Required for signing via `fspolicy.service`
    ttl_seconds: int
    escape_slashes: bool
    default_path: str


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "y", "on")


@lru_cache(maxsize=1)
def load_policy_config() -> PolicyConfig:
    """
    Load policy issuing configuration from environment variables.

    - FILESTACK_APP_SECRET: app secret shared with Filestack (unset -> cannot sign)
    - FILESTACK_POLICY_TTL_SECONDS: lifetime of issued policies (default 3600, min 60)
    - FILESTACK_POLICY_ESCAPE_SLASHES=1: emit `\\/` in the policy JSON
    - FILESTACK_POLICY_DEFAULT_PATH: path used when none is given (default `.*`)
    """
    raw_ttl = (os.getenv("FILESTACK_POLICY_TTL_SECONDS", "") or "3600").strip() or "3600"
    try:
        ttl = int(float(raw_ttl))
    except (ValueError, OverflowError):
        ttl = 3600
    if ttl <= 60:
        ttl = 60

    return PolicyConfig(
        app_secret=(os.getenv("FILESTACK_APP_SECRET", "") or "").strip() or None,
        ttl_seconds=ttl,
        escape_slashes=_env_bool("FILESTACK_POLICY_ESCAPE_SLASHES", False),
        default_path=(os.getenv("FILESTACK_POLICY_DEFAULT_PATH", "") or "").strip() or ".*",
    )
