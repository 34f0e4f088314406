"""Signed access policies for the Filestack file-storage API.

A policy grants a time-bounded, scope-limited capability (which calls, on which
handle/path/container, with optional size bounds). The relying service receives it as
`policy=<base64>&signature=<hmac>` and checks the HMAC against the shared app secret.

`fspolicy.service` issues and renews policies from env configuration (`fspolicy.config`).
"""

from fspolicy.errors import (
    InvalidArgumentError,
    InvalidCallListError,
    InvalidExpiryError,
    MissingSecretError,
    NotSignedYetError,
    PolicyError,
    UnknownOptionError,
)
from fspolicy.models import SecurityParams
from fspolicy.policy import Policy
from fspolicy.service import build_policy, issue_policy, renew_policy

__all__ = [
    "InvalidArgumentError",
    "InvalidCallListError",
    "InvalidExpiryError",
    "MissingSecretError",
    "NotSignedYetError",
    "Policy",
    "PolicyError",
    "SecurityParams",
    "UnknownOptionError",
    "build_policy",
    "issue_policy",
    "renew_policy",
]
