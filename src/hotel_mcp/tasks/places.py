"""Session creation and place selection."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

from hotel_mcp.hotels.facilities import FacilityCatalog
from hotel_mcp.hotels.models import PlaceSuggestion
from hotel_mcp.services.backend_client import BackendUnavailableError
from hotel_mcp.session.store import SessionData

logger = logging.getLogger(__name__)

AUTOCOMPLETE_ERROR_MESSAGE = "Failed to retrieve place suggestions. Please try again with a different query."
NO_PLACES_MESSAGE = "No places found matching your query. Please try a different search term."
NEXT_STEPS = [
    "Use search-hotels to find hotels in the selected place",
    "You can specify place_id in search-hotels to use a different place from alternative_places",
    "You can use the available_facilities list to find the right facilities id to filter hotels by facilities in search-hotels",
]


class PlacesGateway(Protocol):
    async def autocomplete_places(self, query: str, *, language: str = "en") -> Dict[str, Any]:
        ...


class PlacesTask:
    """Resolves free-text locations into the session's confirmed place."""

    def __init__(
        self,
        gateway: PlacesGateway,
        *,
        facilities: Optional[FacilityCatalog] = None,
        default_language: str = "en",
        default_currency: Optional[str] = None,
        default_country_code: Optional[str] = None,
        market: Optional[str] = None,
    ) -> None:
        self.gateway = gateway
        self.facilities = facilities or FacilityCatalog([])
        self.default_language = default_language
        self.default_currency = default_currency
        self.default_country_code = default_country_code
        self.market = market

    async def create_session(
        self,
        session: SessionData,
        place: str,
        *,
        raw_request: Optional[str] = None,
        language: Optional[str] = None,
        currency: Optional[str] = None,
        country_code: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not place or not place.strip():
            return {"status": "error", "message": "Place parameter is required for creating a session."}

        session.reset(
            language=language or self.default_language,
            currency=currency or self.default_currency,
            country_code=country_code or self.default_country_code,
            market=self.market,
        )

        suggestions = await self._lookup(place.strip(), session.language)
        if suggestions is None:
            return {"status": "error", "message": AUTOCOMPLETE_ERROR_MESSAGE}
        if not suggestions:
            return {"status": "empty", "message": NO_PLACES_MESSAGE}

        session.set_suggestions(suggestions)
        session.set_confirmed_place(suggestions[0])
        logger.info("Session %s anchored on %s", session.conversation_id, suggestions[0].name)

        return {
            "status": "success",
            "session_created": True,
            "user_request": raw_request,
            "selected_place": suggestions[0].to_selected(),
            "alternative_places": [suggestion.to_summary() for suggestion in suggestions],
            "next_steps": list(NEXT_STEPS),
            "available_facilities": self.facilities.for_language(session.language),
            "context": session.context(),
        }

    async def autocomplete_places(
        self,
        session: SessionData,
        query: str,
        *,
        language: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not query or not query.strip():
            return {"status": "error", "message": "A query is required to look up places."}

        suggestions = await self._lookup(query.strip(), language or session.language or self.default_language)
        if suggestions is None:
            return {"status": "error", "message": AUTOCOMPLETE_ERROR_MESSAGE}
        if not suggestions:
            return {"status": "empty", "message": NO_PLACES_MESSAGE}

        session.set_suggestions(suggestions)
        if len(suggestions) == 1:
            session.set_confirmed_place(suggestions[0])
            message = (
                "This place has been automatically selected for your search. "
                "You can now use the search-hotels tool to find hotels in this location."
            )
        else:
            message = "Please use the confirm-place tool with the ID of the place you want to select."

        return {
            "status": "success",
            "places": [suggestion.to_summary() for suggestion in suggestions],
            "count": len(suggestions),
            "message": message,
        }

    def confirm_place(self, session: SessionData, place_id: str) -> Dict[str, Any]:
        if not session.place_suggestions:
            return {
                "status": "error",
                "message": "No place suggestions available. Please use the autocomplete-place tool first.",
            }
        selected = session.find_suggestion(place_id)
        if selected is None:
            return {
                "status": "error",
                "message": (
                    f"Place with ID {place_id} not found in the suggestions. "
                    "Please use a valid place ID from the autocomplete results."
                ),
            }
        session.set_confirmed_place(selected)
        return {
            "status": "success",
            "place": selected.to_selected(),
            "message": "Place confirmed. You can now use the search-hotels tool to find hotels in this location.",
        }

    async def _lookup(self, query: str, language: str) -> Optional[List[PlaceSuggestion]]:
        try:
            payload = await self.gateway.autocomplete_places(query, language=language)
        except BackendUnavailableError:
            logger.exception("Place autocomplete failed for query '%s'", query)
            return None
        predictions = payload.get("predictions") or []
        suggestions = [PlaceSuggestion.from_payload(item) for item in predictions if isinstance(item, dict)]
        located = [suggestion for suggestion in suggestions if suggestion.has_coordinates]
        if len(located) < len(suggestions):
            logger.warning(
                "Dropped %s place suggestion(s) without coordinates for query '%s'",
                len(suggestions) - len(located),
                query,
            )
        return located
