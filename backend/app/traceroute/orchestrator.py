"""
Traceroute orchestrator.
Coordinates hostname validation, resolution, tracing, parsing and geo enrichment.
"""

import logging
import re
from typing import Any, Optional

from .runner import TraceRunner
from .parser import parse_trace_output, get_dialect
from .geo import GeoEnricher
from ..config import settings
from ..errors import ValidationError
from ..schemas.traceroute import TracerouteResult

logger = logging.getLogger(__name__)

HOSTNAME_PATTERN = re.compile(r"[a-zA-Z0-9.-]+")


def validate_hostname(hostname: Any) -> str:
    """
    Check that a hostname is present and safe to hand to a system command.

    Raises:
        ValidationError: If the hostname is missing or contains other characters
    """
    if not hostname:
        raise ValidationError("Hostname is required")
    if not isinstance(hostname, str) or not HOSTNAME_PATTERN.fullmatch(hostname):
        raise ValidationError("Invalid hostname format")
    return hostname


class TracerouteOrchestrator:
    """Orchestrate a complete traceroute request."""

    def __init__(
        self,
        runner: Optional[TraceRunner] = None,
        enricher: Optional[GeoEnricher] = None,
    ):
        self.runner = runner or TraceRunner(timeout=settings.command_timeout)
        self.enricher = enricher or GeoEnricher()

    def execute_trace(self, hostname: Any) -> TracerouteResult:
        """
        Execute the trace workflow: validate, resolve, trace, parse, enrich.

        Any stage failure propagates immediately. Per-hop enrichment failures
        do not; they leave that hop's geo fields empty.

        Args:
            hostname: Hostname supplied by the client

        Returns:
            TracerouteResult with hops in route order

        Raises:
            ValidationError: Missing or malformed hostname
            ResolutionError: Hostname does not resolve
            TraceExecutionError: DNS or trace command failed to run
        """
        hostname = validate_hostname(hostname)

        destination_ip = self.runner.resolve(hostname)
        raw_output = self.runner.trace(hostname)

        hops = parse_trace_output(raw_output, destination_ip, get_dialect(self.runner.dialect))
        logger.info(f"Parsed {len(hops)} hop(s) to {hostname} ({destination_ip})")

        return TracerouteResult(
            hostname=hostname,
            destination_ip=destination_ip,
            hops=self.enricher.enrich_all(hops),
        )
