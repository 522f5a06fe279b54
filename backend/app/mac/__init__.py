"""
MAC address vendor lookup and classification.
"""

from .lookup import MacVendorClient, classify_mac, lookup_mac

__all__ = ["MacVendorClient", "classify_mac", "lookup_mac"]
