"""Search, pagination and cached detail lookups."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from hotel_mcp.hotels.formatter import to_detail, to_summary
from hotel_mcp.hotels.models import PlaceSuggestion
from hotel_mcp.services.backend_client import BackendUnavailableError
from hotel_mcp.session.store import SessionData
from hotel_mcp.tasks.search_payloads import RoomRequest, SearchParams

logger = logging.getLogger(__name__)

HotelView = Callable[[Dict[str, Any]], Dict[str, Any]]

NO_PLACE_MESSAGE = "No place available. Please use the create-session tool first to find and confirm a location."
BACKEND_ERROR_MESSAGE = "Failed to retrieve hotel availability data. Please try again later."
EMPTY_MESSAGE = "No hotels found matching your criteria. Please try different search parameters."
DETAILS_HINT = "Use get-hotel-details tool with the hotel ID to see more information."


class AvailabilityGateway(Protocol):
    async def check_availability(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        ...

    async def load_more(self, next_page_token: str) -> Dict[str, Any]:
        ...


@dataclass
class SearchCriteria:
    check_in_date: str
    check_out_date: str
    adults: int = 2
    children: int = 0
    facilities: List[int] = field(default_factory=list)
    place_id: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def hotel_not_found(hotel_id: str) -> Dict[str, Any]:
    return {
        "status": "error",
        "message": (
            f"Hotel with ID {hotel_id} not found in session. "
            "Please use the search-hotels tool to find hotels first."
        ),
    }


class SearchTask:
    """Runs availability searches and keeps the session's hotel cache current."""

    def __init__(
        self,
        gateway: AvailabilityGateway,
        *,
        view: HotelView = to_summary,
    ) -> None:
        self.gateway = gateway
        self.view = view

    async def search(self, session: SessionData, criteria: SearchCriteria) -> Dict[str, Any]:
        place = self._resolve_place(session, criteria)
        if place is None and not criteria.has_coordinates:
            logger.info("Search rejected: no place selected")
            return {"status": "error", "message": NO_PLACE_MESSAGE}

        if place is not None:
            latitude, longitude = place.latitude, place.longitude
        else:
            latitude, longitude = criteria.latitude, criteria.longitude

        params = SearchParams(
            latitude=latitude,
            longitude=longitude,
            check_in=criteria.check_in_date,
            check_out=criteria.check_out_date,
            rooms=[RoomRequest(adults=criteria.adults, children=criteria.children)],
            facility_ids=list(criteria.facilities or []),
        )
        logger.info(
            "Searching hotels near %s for %s -> %s",
            place.name if place else f"({latitude}, {longitude})",
            criteria.check_in_date,
            criteria.check_out_date,
        )
        try:
            payload = await self.gateway.check_availability(params.to_payload())
        except BackendUnavailableError:
            logger.exception("Availability search failed")
            return {"status": "error", "message": BACKEND_ERROR_MESSAGE}

        result = self._merge_page(session, payload)
        if result["status"] != "success":
            return result
        result["selected_place"] = place.to_selected() if place else None
        result["message"] = DETAILS_HINT
        return result

    async def load_more(self, session: SessionData, next_page_token: str) -> Dict[str, Any]:
        if not next_page_token:
            return {
                "status": "error",
                "message": "A next_page_token from a previous search is required to load more hotels.",
            }
        try:
            payload = await self.gateway.load_more(next_page_token)
        except BackendUnavailableError:
            logger.exception("Loading more availability results failed")
            return {"status": "error", "message": BACKEND_ERROR_MESSAGE}
        return self._merge_page(session, payload)

    def get_details(self, session: SessionData, hotel_id: str) -> Dict[str, Any]:
        """Detail view from the session cache only; never calls the backend."""
        hotel = session.get_hotel(hotel_id)
        if hotel is None:
            return hotel_not_found(hotel_id)
        return {"status": "success", "hotel": to_detail(hotel)}

    def _resolve_place(self, session: SessionData, criteria: SearchCriteria) -> Optional[PlaceSuggestion]:
        if criteria.place_id:
            selected = session.find_suggestion(criteria.place_id)
            if selected is not None:
                session.set_confirmed_place(selected)
                return selected
            logger.warning("Place %s not among current suggestions; using confirmed place", criteria.place_id)
        place = session.confirmed_place
        if place is not None and not place.has_coordinates:
            logger.warning("Confirmed place %s has no coordinates; ignoring it", place.place_id)
            return None
        return place

    def _merge_page(self, session: SessionData, payload: Dict[str, Any]) -> Dict[str, Any]:
        received = [hotel for hotel in payload.get("hotels") or [] if isinstance(hotel, dict)]
        # Only hotels that can be looked up again later are shown.
        hotels = [hotel for hotel in received if hotel.get("id") is not None]
        if len(hotels) < len(received):
            logger.warning("Skipped %s hotel(s) without an id", len(received) - len(hotels))
        if not hotels:
            return {"status": "empty", "message": EMPTY_MESSAGE}

        session.record_hotels(hotels)
        next_page_token = payload.get("next_page_token") or None
        logger.info("Received %s hotels (total %s)", len(hotels), payload.get("total", 0))
        return {
            "status": "success",
            "total_hotels": payload.get("total", 0),
            "results_count": len(hotels),
            "hotels": [self.view(hotel) for hotel in hotels],
            "next_page_token": next_page_token,
            "has_more": next_page_token is not None,
        }
