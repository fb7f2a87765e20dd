"""Exceptions raised by the Polycom Trio driver."""

from __future__ import annotations

from .const import describe_status


class TrioError(Exception):
    """Base exception for the driver."""


class TrioConnectionError(TrioError):
    """Transport failure: network, TLS, timeout, HTTP error or bad JSON."""


class TrioConfigError(TrioError):
    """Invalid driver configuration."""


class TrioCommandError(TrioError):
    """Device answered with a status that is neither success nor ignorable."""

    def __init__(self, host: str, request: str, status: str) -> None:
        """Initialize command error."""
        super().__init__(
            f"Command {request} failed on device {host}: "
            f"status {status} ({describe_status(status)})"
        )
        self.host = host
        self.request = request
        self.status = status


class TrioNotImplementedError(TrioError, NotImplementedError):
    """Operation is not supported by the device."""
