"""
Geographic IP enrichment of traceroute hops via ip-api.com.

Free tier: 45 requests/minute, no API key. A full 30-hop trace fits in one
minute's quota, but concurrent traces can exhaust it; lookups rejected for
that reason are reported separately from other failures.
"""

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..errors import EnrichmentFailure
from ..schemas.traceroute import GeoAnnotatedHop, Hop

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

GEO_OK = "ok"
GEO_SKIPPED = "skipped"
GEO_FAILED = "failed"
GEO_RATE_LIMITED = "rate_limited"


def _coordinate(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _text(value: Any) -> str:
    if value is None or value == "":
        return UNKNOWN
    return str(value)


def unlocated(hop: Hop, geo_status: str) -> GeoAnnotatedHop:
    """Hop with every geo field left null."""
    return GeoAnnotatedHop(**hop.model_dump(), geo_status=geo_status)


class GeoEnricher:
    """Best-effort geolocation of hops, one lookup per responding hop."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_workers: Optional[int] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_url = (api_url or settings.geo_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.geo_lookup_timeout
        self.max_workers = max_workers or settings.geo_lookup_parallelism
        self.transport = transport

    def lookup(self, ip: str) -> Dict[str, Any]:
        """
        Query the provider for a single IP.

        Args:
            ip: IPv4 address

        Returns:
            Decoded provider payload

        Raises:
            EnrichmentFailure: On transport errors, timeouts, rate limiting,
                non-200 responses, malformed bodies or a "fail" status
        """
        # httpx timeouts apply per phase; the deadline caps the whole lookup
        deadline = time.monotonic() + self.timeout
        try:
            # Client per lookup: concurrent lookups share nothing
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                with client.stream("GET", f"{self.api_url}/{ip}") as response:
                    if response.status_code == 429:
                        raise EnrichmentFailure(ip, "rate limited by provider", rate_limited=True)
                    if response.status_code != 200:
                        raise EnrichmentFailure(ip, f"HTTP {response.status_code}")

                    body = bytearray()
                    for chunk in response.iter_bytes():
                        if time.monotonic() > deadline:
                            raise EnrichmentFailure(ip, f"timed out after {self.timeout}s")
                        body.extend(chunk)
        except httpx.TimeoutException:
            raise EnrichmentFailure(ip, f"timed out after {self.timeout}s")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise EnrichmentFailure(ip, str(e) or type(e).__name__)

        try:
            data = json.loads(body)
        except ValueError:
            raise EnrichmentFailure(ip, "malformed response")

        if not isinstance(data, dict):
            raise EnrichmentFailure(ip, "malformed response")
        if data.get("status") == "fail":
            raise EnrichmentFailure(ip, data.get("message") or "lookup failed")

        return data

    def enrich_hop(self, hop: Hop) -> GeoAnnotatedHop:
        """
        Annotate one hop with location data.

        Hops that timed out are returned without a lookup. A failed lookup
        yields null geo fields instead of an error.
        """
        if hop.timed_out:
            return unlocated(hop, GEO_SKIPPED)

        try:
            data = self.lookup(hop.ip)
        except EnrichmentFailure as e:
            logger.warning(f"Hop {hop.hop}: {e}")
            return unlocated(hop, GEO_RATE_LIMITED if e.rate_limited else GEO_FAILED)

        return GeoAnnotatedHop(
            **hop.model_dump(),
            lat=_coordinate(data.get("lat")),
            lng=_coordinate(data.get("lon")),
            city=_text(data.get("city")),
            country=_text(data.get("country")),
            network=_text(data.get("network")),
            asn=_text(data.get("as")),
            isp=_text(data.get("isp")),
            geo_status=GEO_OK,
        )

    def enrich_all(self, hops: List[Hop]) -> List[GeoAnnotatedHop]:
        """
        Enrich all hops concurrently.

        Every lookup runs to completion before this returns. Results keep the
        input order regardless of which lookup finishes first.
        """
        if not hops:
            return []

        results: List[Optional[GeoAnnotatedHop]] = [None] * len(hops)

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(hops))) as executor:
            future_to_index = {
                executor.submit(self.enrich_hop, hop): idx for idx, hop in enumerate(hops)
            }

            for future in as_completed(future_to_index):
                idx = future_to_index[future]
                try:
                    results[idx] = future.result()
                except Exception:
                    logger.exception(f"Unexpected error enriching hop {hops[idx].hop}")
                    results[idx] = unlocated(hops[idx], GEO_FAILED)

        located = sum(1 for hop in results if hop.geo_status == GEO_OK)
        logger.info(f"Geolocated {located}/{len(hops)} hop(s)")
        return results
