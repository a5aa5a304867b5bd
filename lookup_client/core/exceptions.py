"""
Application-level exceptions.

A missing lookup table is not an error: fetch returns None and callers retry later.
"""

from __future__ import annotations


class LookupClientError(Exception):
    """Base class for lookup client errors."""


class ConfigurationError(LookupClientError):
    """Invalid or missing configuration (e.g. payer secret key). Raised before any network call."""


class SubmissionFailedError(LookupClientError):
    """A transaction could not be sent or was not confirmed before its blockhash expired."""

    def __init__(self, message: str, signature: str | None = None) -> None:
        super().__init__(message)
        self.signature = signature


class LookupTableOverflowError(LookupClientError):
    """Extending would push a lookup table past its 256-address capacity."""

    def __init__(self, existing: int, adding: int, capacity: int) -> None:
        super().__init__(
            f"Lookup table holds {existing} addresses; adding {adding} exceeds capacity {capacity}"
        )
        self.existing = existing
        self.adding = adding
        self.capacity = capacity


class LookupTableDecodeError(LookupClientError):
    """Account data is not a valid lookup table."""


class LookupTableNotVisibleError(LookupClientError):
    """A lookup table did not reach the expected state before the poll timeout."""


class RpcRequestError(LookupClientError):
    """A cluster read (slot, blockhash, account) failed or timed out."""
