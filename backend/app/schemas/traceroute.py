"""
Pydantic schemas for traceroute requests and results.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional

# Marker used for a hop that did not answer within the probe timeout
TIMEOUT_SENTINEL = "*"


class TracerouteRequest(BaseModel):
    """Traceroute request body."""

    # Checked by validate_hostname so bad values get a 400 rather than a 422
    hostname: Optional[Any] = None

    model_config = ConfigDict(json_schema_extra={"example": {"hostname": "example.com"}})


class Hop(BaseModel):
    """Single hop parsed from trace output."""

    hop: int
    hostname: str = TIMEOUT_SENTINEL
    ip: str = TIMEOUT_SENTINEL
    rtt: Optional[float] = None  # milliseconds

    @property
    def timed_out(self) -> bool:
        return self.ip == TIMEOUT_SENTINEL


class GeoAnnotatedHop(Hop):
    """Hop with best-effort geolocation data."""

    lat: Optional[float] = None
    lng: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None
    network: Optional[str] = None
    asn: Optional[str] = None
    isp: Optional[str] = None
    # ok | skipped | failed | rate_limited
    geo_status: str = Field(default="skipped", alias="geoStatus")

    model_config = ConfigDict(populate_by_name=True)


class TracerouteResult(BaseModel):
    """Traceroute response schema."""

    hostname: str
    destination_ip: str = Field(alias="destinationIP")
    hops: list[GeoAnnotatedHop] = []

    model_config = ConfigDict(populate_by_name=True)
