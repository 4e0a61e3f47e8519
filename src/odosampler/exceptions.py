"""Custom exception hierarchy for odosampler."""

from __future__ import annotations


class OdoError(Exception):
    """Base exception for all odosampler errors."""


class OdoConfigError(OdoError):
    """Invalid or missing configuration."""


class OdoTransportError(OdoError):
    """Snapshot transport could not be brought up."""

    def __init__(
        self,
        message: str,
        *,
        host: str = "",
        port: int | None = None,
    ) -> None:
        self.host = host
        self.port = port
        super().__init__(message)


class OdoTraceError(OdoError):
    """A recorded tick trace could not be parsed.

    ``line`` is the 1-based line number of the offending record, when known.
    """

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        super().__init__(message)
