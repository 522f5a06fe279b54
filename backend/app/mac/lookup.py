"""
MAC address vendor lookup via api.macvendors.com and bit-level classification.
"""

import logging
from typing import Dict, Optional, Union
from urllib.parse import quote

import httpx

from ..config import settings
from ..errors import MacLookupError, VendorNotFoundError
from ..schemas.mac import MacLookupResponse

logger = logging.getLogger(__name__)

LOCALLY_ADMINISTERED = "Locally Administered"
GLOBALLY_UNIQUE = "Globally Unique"
UNICAST = "Unicast"
MULTICAST = "Multicast"


class MacVendorClient:
    """Look up the registered vendor of a MAC address prefix."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_url = (api_url or settings.mac_vendor_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.mac_lookup_timeout
        self.transport = transport

    def lookup_vendor(self, mac: str) -> str:
        """
        Fetch the vendor name for a MAC address.

        Raises:
            VendorNotFoundError: If the service has no vendor for the prefix
            MacLookupError: On any other failure
        """
        url = f"{self.api_url}/{quote(mac, safe=':-.')}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url)
        except httpx.HTTPError as e:
            raise MacLookupError(f"Failed to fetch vendor information: {e}")

        if response.status_code == 404:
            raise VendorNotFoundError(f"Vendor not found for {mac}")
        if not response.is_success:
            raise MacLookupError(
                f"Failed to fetch vendor information: HTTP {response.status_code}"
            )

        return response.text


def classify_mac(mac: str) -> Dict[str, Union[bool, str]]:
    """
    Classify an address from its second hex character.

    A "2" marks a locally administered (private) address; an even value is
    reported as multicast.
    """
    nibble = mac[1:2].lower()
    is_private = nibble == "2"

    try:
        even = int(nibble, 16) % 2 == 0
    except ValueError:
        even = False

    return {
        "is_private": is_private,
        "type": LOCALLY_ADMINISTERED if is_private else GLOBALLY_UNIQUE,
        "cast": MULTICAST if even else UNICAST,
    }


def lookup_mac(mac: str, client: Optional[MacVendorClient] = None) -> MacLookupResponse:
    """Vendor lookup plus classification for a single address."""
    client = client or MacVendorClient()
    vendor_name = client.lookup_vendor(mac)
    logger.info(f"MAC {mac} belongs to {vendor_name}")

    return MacLookupResponse(vendor_name=vendor_name, mac_address=mac, **classify_mac(mac))
