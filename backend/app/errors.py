"""
Exception hierarchy for the networking tools service.

Endpoints translate these into HTTP responses; nothing below the HTTP layer
knows about status codes.
"""


class NetworkToolsError(Exception):
    """Base class for all service errors."""


class ValidationError(NetworkToolsError):
    """Missing or malformed user input."""


class ResolutionError(NetworkToolsError):
    """Hostname did not resolve to an IPv4 address."""


class TraceExecutionError(NetworkToolsError):
    """A diagnostic command could not be run or exited abnormally."""


class EnrichmentFailure(NetworkToolsError):
    """Geolocation lookup for a single hop failed."""

    def __init__(self, ip: str, reason: str, rate_limited: bool = False):
        super().__init__(f"Geo lookup failed for {ip}: {reason}")
        self.ip = ip
        self.reason = reason
        self.rate_limited = rate_limited


class VendorNotFoundError(NetworkToolsError):
    """No vendor is registered for the MAC address prefix."""


class MacLookupError(NetworkToolsError):
    """MAC vendor service could not be queried."""
