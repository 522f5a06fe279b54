"""
Pydantic schemas for MAC address lookups.
"""

from pydantic import BaseModel, ConfigDict, Field


class MacLookupResponse(BaseModel):
    """MAC vendor lookup and classification result."""

    vendor_name: str = Field(alias="vendorName")
    mac_address: str = Field(alias="macAddress")
    is_private: bool = Field(alias="isPrivate")
    type: str  # "Locally Administered" | "Globally Unique"
    cast: str  # "Unicast" | "Multicast"

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "vendorName": "Apple, Inc.",
                "macAddress": "00:1A:2B:3C:4D:5E",
                "isPrivate": False,
                "type": "Globally Unique",
                "cast": "Unicast",
            }
        },
    )
