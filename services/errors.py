"""Error kinds raised by the core services."""

from __future__ import annotations


class EnvServerError(Exception):
    """Base class for every error the core reports to callers."""


class ValidationError(EnvServerError):
    """Input is malformed or semantically invalid."""


class NotFoundError(EnvServerError):
    """A location or sensor name does not resolve to a known entity."""


class ConflictError(EnvServerError):
    """A reading with the same (timestamp, sensor, location) already exists."""


class StoreError(EnvServerError):
    """The underlying store failed."""
