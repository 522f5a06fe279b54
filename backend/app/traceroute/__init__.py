"""
Traceroute pipeline: resolve, trace, parse and geolocate hops.
"""

from .runner import TraceRunner
from .parser import HopDialect, parse_trace_output, get_dialect
from .geo import GeoEnricher
from .orchestrator import TracerouteOrchestrator, validate_hostname

__all__ = [
    "TraceRunner",
    "HopDialect",
    "parse_trace_output",
    "get_dialect",
    "GeoEnricher",
    "TracerouteOrchestrator",
    "validate_hostname",
]
