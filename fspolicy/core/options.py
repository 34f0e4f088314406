from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from fspolicy.core.timeutil import coerce_expiry
from fspolicy.errors import InvalidCallListError, InvalidExpiryError, UnknownOptionError

ALLOWED_KEYS: Tuple[str, ...] = (
    "call",
    "container",
    "expiry",
    "handle",
    "maxSize",
    "minSize",
    "path",
    "url",
)

VALID_CALLS: Tuple[str, ...] = (
    "convert",
    "exif",
    "pick",
    "read",
    "remove",
    "stat",
    "store",
    "write",
    "writeUrl",
)

# Wire key -> PolicyOptions attribute.
_ATTRS: Dict[str, str] = {
    "call": "call",
    "container": "container",
    "expiry": "expiry",
    "handle": "handle",
    "maxSize": "max_size",
    "minSize": "min_size",
    "path": "path",
    "url": "url",
}

SizeBound = Union[str, int]


@dataclass(frozen=True)
class PolicyOptions:
    """
    Validated policy fields.

    `keys` records which wire keys were supplied and in what order; it drives the
    canonical document (absent fields are omitted, not serialized as null).
    """

    expiry: datetime
    keys: Tuple[str, ...]
    call: Optional[Tuple[str, ...]] = None
    container: Optional[str] = None
    handle: Optional[str] = None
    max_size: Optional[SizeBound] = None
    min_size: Optional[SizeBound] = None
    path: Optional[str] = None
    url: Optional[str] = None

    def get(self, key: str) -> Any:
        return getattr(self, _ATTRS[key])

    def items(self) -> Iterable[Tuple[str, Any]]:
        for key in self.keys:
            yield key, self.get(key)


def _validate_calls(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise InvalidCallListError('Invalid security policy allowed calls: "call" option must be a list')
    invalid: List[str] = [str(c) for c in value if c not in VALID_CALLS]
    if invalid:
        raise InvalidCallListError(
            f"Invalid security policy allowed calls: {', '.join(invalid)}",
            invalid_calls=tuple(invalid),
        )
    return tuple(value)


def validate_option(option: str, value: Any) -> Any:
    """
    Validate a single option and return its normalized value.

    Only `call` and `expiry` carry shape rules; the other allowed keys pass through.
    """
    if option not in ALLOWED_KEYS:
        raise UnknownOptionError(
            f'Invalid security policy option: "{option}" is not one of {", ".join(ALLOWED_KEYS)}'
        )
    if option == "call":
        return _validate_calls(value)
    if option == "expiry":
        return coerce_expiry(value)
    return value


def validate_options(data: Mapping[str, Any]) -> PolicyOptions:
    """Validate every field in supplied order; the first violation aborts."""
    fields: Dict[str, Any] = {}
    keys: List[str] = []
    for option, value in data.items():
        normalized = validate_option(option, value)
        fields[_ATTRS[option]] = normalized
        keys.append(option)

    if "expiry" not in fields:
        raise InvalidExpiryError('Invalid security policy expiry: "expiry" is required')

    return PolicyOptions(keys=tuple(keys), **fields)
