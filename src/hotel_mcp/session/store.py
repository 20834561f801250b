"""Per-conversation state shared by the search, details and booking tools.

State is held in memory with no locking: overlapping tool calls against the
same session interleave their writes and the last write wins.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from hotel_mcp.hotels.models import PlaceSuggestion

logger = logging.getLogger(__name__)


@dataclass
class SessionData:
    """Mutable state for one conversation."""

    hotels: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    place_suggestions: List[PlaceSuggestion] = field(default_factory=list)
    confirmed_place: Optional[PlaceSuggestion] = None
    language: str = "en"
    currency: Optional[str] = None
    country_code: Optional[str] = None
    market: Optional[str] = None
    user_ip_address: Optional[str] = None
    conversation_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def reset(
        self,
        *,
        language: str = "en",
        currency: Optional[str] = None,
        country_code: Optional[str] = None,
        market: Optional[str] = None,
        user_ip_address: Optional[str] = "127.0.0.1",
    ) -> str:
        self.hotels = {}
        self.place_suggestions = []
        self.confirmed_place = None
        self.language = language
        self.currency = currency
        self.country_code = country_code
        self.market = market
        self.user_ip_address = user_ip_address
        self.conversation_id = str(uuid.uuid4())
        logger.info("Session reset; conversation %s", self.conversation_id)
        return self.conversation_id

    def record_hotels(self, hotels: Iterable[Dict[str, Any]]) -> int:
        """Upsert hotels keyed by ``str(id)``; an existing entry is replaced as a whole."""
        incoming = {str(hotel["id"]): hotel for hotel in hotels if hotel.get("id") is not None}
        self.hotels.update(incoming)
        logger.debug("Recorded %s hotels (session now holds %s)", len(incoming), len(self.hotels))
        return len(incoming)

    def get_hotel(self, hotel_id: str) -> Optional[Dict[str, Any]]:
        return self.hotels.get(str(hotel_id))

    def set_suggestions(self, places: Iterable[PlaceSuggestion]) -> None:
        self.place_suggestions = list(places)

    def set_confirmed_place(self, place: Optional[PlaceSuggestion]) -> None:
        self.confirmed_place = place

    def find_suggestion(self, place_id: str) -> Optional[PlaceSuggestion]:
        return next((place for place in self.place_suggestions if place.place_id == place_id), None)

    def context(self) -> dict[str, object]:
        return {
            "conversation_id": self.conversation_id,
            "user_ip_address": self.user_ip_address,
            "market": self.market,
            "language": self.language,
            "currency": self.currency,
            "country_code": self.country_code,
        }
