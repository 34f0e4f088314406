from __future__ import annotations


class PolicyError(ValueError):
    """Base class for policy construction/signing failures (caller-input errors)."""


class UnknownOptionError(PolicyError):
    pass


class InvalidCallListError(PolicyError):
    def __init__(self, message: str, invalid_calls: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.invalid_calls = invalid_calls


class InvalidExpiryError(PolicyError):
    pass


class NotSignedYetError(PolicyError):
    pass


class MissingSecretError(PolicyError):
    pass


class InvalidArgumentError(PolicyError, TypeError):
    """Raised for argument shapes that are programming errors rather than bad data."""
