"""
Pytest config.

Pins the repo root on sys.path so `import fspolicy` works when invoking a global
`pytest` entrypoint without an editable install, and provides shared fixtures.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()


@pytest.fixture
def golden_fields() -> dict:
    return {
        "expiry": 1525500000,
        "call": ["pick", "read", "stat", "write", "writeUrl", "store", "convert", "remove", "exif"],
        "handle": "FooBarBaz",
        "path": "/some/path/*",
        "container": "some/bucket/*",
        "minSize": "128",
        "maxSize": "1024000",
    }


@pytest.fixture
def golden_expiry() -> datetime:
    return datetime(2018, 5, 5, 6, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _clear_policy_config_cache():
    from fspolicy.config import load_policy_config

    load_policy_config.cache_clear()
    yield
    load_policy_config.cache_clear()
