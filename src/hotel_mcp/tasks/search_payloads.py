"""Utilities for building hotel availability and quote payloads."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

# The backend expects one placeholder age per child rather than a count.
CHILD_PLACEHOLDER_AGE = 8
# Availability pages are always requested at this size.
DEFAULT_PAGE_SIZE = 50


@dataclass
class RoomRequest:
    adults: int
    children: int = 0

    def to_guest(self) -> dict:
        return {
            "adults": self.adults,
            "children": [CHILD_PLACEHOLDER_AGE] * self.children,
            "infant": 0,
        }


@dataclass
class SearchParams:
    latitude: float
    longitude: float
    check_in: str
    check_out: str
    rooms: List[RoomRequest]
    facility_ids: List[int] = field(default_factory=list)

    def to_payload(self) -> dict:
        return {
            "check_in_date": self.check_in,
            "check_out_date": self.check_out,
            "guests": [room.to_guest() for room in self.rooms],
            "location": {
                "latitude": str(self.latitude),
                "longitude": str(self.longitude),
            },
            "facility_ids": list(self.facility_ids),
            "limit": DEFAULT_PAGE_SIZE,
        }


def build_quote_product(hotel: dict[str, Any], rate: dict[str, Any]) -> dict:
    """Single hotel product for a quote request; the opaque rate data is passed verbatim."""
    return {
        "product_type": "hotel",
        "provider_id": rate.get("provider_id"),
        "hotel_id": str(hotel.get("id")),
        "check_in_date": rate.get("check_in_date"),
        "check_out_date": rate.get("check_out_date"),
        "opaque_rate_data": rate.get("opaque"),
    }
