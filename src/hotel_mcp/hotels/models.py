"""Dataclasses for place suggestions and decoded rate metadata."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        converted = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(converted):
        return None
    return converted


@dataclass(frozen=True, slots=True)
class PlaceSuggestion:
    """A geographic candidate returned by place autocomplete."""

    place_id: str
    description: str
    latitude: Optional[float]
    longitude: Optional[float]
    main_text: Optional[str] = None
    types: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def name(self) -> str:
        return self.main_text or self.description

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_summary(self) -> dict[str, object]:
        return {
            "id": self.place_id,
            "name": self.name,
            "type": list(self.types) if self.types else "Unknown",
            "location": self.description or "",
        }

    def to_selected(self) -> dict[str, object]:
        return {
            "id": self.place_id,
            "name": self.name,
            "location": self.description,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PlaceSuggestion":
        structured = payload.get("structured_formatting") or {}
        return cls(
            place_id=str(payload.get("place_id") or ""),
            description=payload.get("description") or "",
            latitude=to_float(payload.get("latitude")),
            longitude=to_float(payload.get("longitude")),
            main_text=structured.get("main_text"),
            types=list(payload.get("types") or []),
            raw=payload,
        )


@dataclass(frozen=True, slots=True)
class RateHints:
    """Pricing type and meal plan recovered from a rate's opaque payload."""

    payment_type: str = "Pay Now"
    meal_plan: Optional[str] = None
    has_pricing_type: bool = False
