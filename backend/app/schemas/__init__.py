"""
Pydantic schemas package.
"""

from .traceroute import (
    TIMEOUT_SENTINEL,
    TracerouteRequest,
    Hop,
    GeoAnnotatedHop,
    TracerouteResult,
)
from .mac import MacLookupResponse

__all__ = [
    # Traceroute
    "TIMEOUT_SENTINEL",
    "TracerouteRequest",
    "Hop",
    "GeoAnnotatedHop",
    "TracerouteResult",
    # MAC
    "MacLookupResponse",
]
