"""Exceptions raised by gatewatch."""


class GatewatchError(Exception):
    """Base class for gatewatch errors."""


class FetchError(GatewatchError):
    """The transit feed could not be fetched or decoded.

    ``cause`` is a short label ("status", "network" or "decode") kept for
    diagnostics; callers treat every FetchError the same way.
    """

    def __init__(self, message: str, cause: str = "network"):
        super().__init__(message)
        self.cause = cause


class ConfigError(GatewatchError, ValueError):
    """Configuration is missing or invalid."""
