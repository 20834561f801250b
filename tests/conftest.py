from __future__ import annotations

import json
from typing import Any, Callable

import pytest


def _opaque(**fields: Any) -> str:
    return json.dumps(fields)


@pytest.fixture
def make_hotel() -> Callable[..., dict[str, Any]]:
    def _build(hotel_id: Any = 101, **overrides: Any) -> dict[str, Any]:
        hotel: dict[str, Any] = {
            "id": hotel_id,
            "name": "Hotel Lumiere",
            "star_rating": 4,
            "address": "1 Rue de Rivoli, Paris",
            "description": "Boutique hotel near the Louvre",
            "main_photo": "https://img.test/main.jpg",
            "images": [
                {"path": "https://img.test/main.jpg"},
                {"path": "https://img.test/2.jpg"},
                {"path": "https://img.test/3.jpg"},
                {"path": "https://img.test/4.jpg"},
            ],
            "min_price": {"value": "120", "currency": "EUR"},
            "amenities": [{"name": "Pool"}, {"name": "Unknown Facility 12"}, {"name": "Spa"}],
            "policies": [
                {"type": "check_in", "description": ["From 15:00", "Photo ID required"]},
                {"type": "check_out", "description": ["Until 11:00"]},
            ],
            "rooms": [
                {
                    "room_id": "r-suite",
                    "room_name": "Suite",
                    "description": "Top floor suite",
                    "max_occupancy": 4,
                    "images": [{"path": "https://img.test/suite.jpg"}],
                    "amenities": [{"name": "Minibar"}, {"name": "Unknown amenity"}],
                    "min_price": {"value": 300, "currency": "EUR"},
                    "lowest_rate": {"rate_id": "suite-flex"},
                    "rates": [
                        {
                            "rate_id": "suite-flex",
                            "description": "Flexible rate",
                            "selling_price": {"value": 300, "currency": "EUR"},
                            "is_refundable": True,
                            "provider_id": "prov-1",
                            "check_in_date": "2026-11-02",
                            "check_out_date": "2026-11-04",
                            "opaque": _opaque(rate_key="suite"),
                            "policies": [
                                {"type": "cancellation", "description": ["Free cancellation until 1 Nov"]}
                            ],
                        }
                    ],
                },
                {
                    "room_id": "r-double",
                    "room_name": "Double",
                    "min_price": {"value": "120", "currency": "EUR"},
                    "lowest_rate": {"rate_id": "double-bb"},
                    "rates": [
                        {
                            "rate_id": "double-bb",
                            "description": "Bed and breakfast",
                            "selling_price": {"value": "120", "currency": "EUR"},
                            "is_refundable": False,
                            "provider_id": "prov-2",
                            "check_in_date": "2026-11-02",
                            "check_out_date": "2026-11-04",
                            "opaque": _opaque(
                                pricing={"pricing_type": "pay_later"},
                                meal_plan={"description": "Breakfast included"},
                            ),
                        }
                    ],
                },
                {"room_id": "r-unpriced", "room_name": "Mystery", "min_price": None, "rates": []},
            ],
        }
        hotel.update(overrides)
        return hotel

    return _build
