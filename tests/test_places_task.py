from __future__ import annotations

from typing import Any, Optional

import pytest

from hotel_mcp.hotels.facilities import Facility, FacilityCatalog
from hotel_mcp.services.backend_client import BackendUnavailableError
from hotel_mcp.session.store import SessionData
from hotel_mcp.tasks.places import PlacesTask


def _prediction(place_id: str, name: str, lat: float, lng: float) -> dict[str, Any]:
    return {
        "place_id": place_id,
        "description": f"{name}, France",
        "latitude": lat,
        "longitude": lng,
        "types": ["locality"],
        "structured_formatting": {"main_text": name},
    }


class _FakePlacesGateway:
    def __init__(self, predictions: Optional[list[dict[str, Any]]] = None, error: Optional[Exception] = None) -> None:
        self._predictions = predictions or []
        self._error = error
        self.queries: list[tuple[str, str]] = []

    async def autocomplete_places(self, query: str, *, language: str = "en") -> dict[str, Any]:
        self.queries.append((query, language))
        if self._error:
            raise self._error
        return {"predictions": self._predictions}


def _task(gateway: _FakePlacesGateway) -> PlacesTask:
    catalog = FacilityCatalog([Facility(47, "WiFi available", {"es": "WiFi disponible"})])
    return PlacesTask(gateway, facilities=catalog, default_currency="EUR", default_country_code="fr", market="fr")


@pytest.mark.asyncio
async def test_create_session_confirms_first_suggestion() -> None:
    gateway = _FakePlacesGateway(
        [_prediction("paris", "Paris", 48.85, 2.35), _prediction("paris-tx", "Paris TX", 33.66, -95.55)]
    )
    session = SessionData()
    session.record_hotels([{"id": 1}])

    result = await _task(gateway).create_session(session, " Paris ", raw_request="2 nights", language="es")

    assert result["status"] == "success"
    assert result["selected_place"] == {"id": "paris", "name": "Paris", "location": "Paris, France"}
    assert [place["id"] for place in result["alternative_places"]] == ["paris", "paris-tx"]
    assert result["available_facilities"] == [{"id": 47, "name": "WiFi disponible"}]
    assert result["context"]["currency"] == "EUR"
    assert result["user_request"] == "2 nights"
    assert gateway.queries == [("Paris", "es")]
    assert session.hotels == {}
    assert session.confirmed_place.place_id == "paris"


@pytest.mark.asyncio
async def test_create_session_requires_place() -> None:
    gateway = _FakePlacesGateway()
    session = SessionData()
    session.record_hotels([{"id": 1}])
    conversation = session.conversation_id

    result = await _task(gateway).create_session(session, "   ")

    assert result["status"] == "error"
    assert session.conversation_id == conversation
    assert list(session.hotels) == ["1"]
    assert gateway.queries == []


@pytest.mark.asyncio
async def test_create_session_reports_lookup_failures() -> None:
    failing = _FakePlacesGateway(error=BackendUnavailableError("/autocomplete", "HTTP 502", status=502))
    empty = _FakePlacesGateway([])

    assert (await _task(failing).create_session(SessionData(), "Paris"))["status"] == "error"
    assert (await _task(empty).create_session(SessionData(), "Atlantis"))["status"] == "empty"


@pytest.mark.asyncio
async def test_autocomplete_auto_confirms_single_result() -> None:
    session = SessionData()

    result = await _task(_FakePlacesGateway([_prediction("nice", "Nice", 43.7, 7.26)])).autocomplete_places(
        session, "Nice"
    )

    assert result["count"] == 1
    assert session.confirmed_place.place_id == "nice"


@pytest.mark.asyncio
async def test_autocomplete_with_several_results_waits_for_confirmation() -> None:
    session = SessionData()
    gateway = _FakePlacesGateway([_prediction("a", "A", 1, 1), _prediction("b", "B", 2, 2)])

    result = await _task(gateway).autocomplete_places(session, "x")

    assert result["count"] == 2
    assert session.confirmed_place is None
    assert "confirm-place" in result["message"]


@pytest.mark.asyncio
async def test_confirm_place_selects_suggestion() -> None:
    session = SessionData()
    task = _task(_FakePlacesGateway([_prediction("a", "A", 1, 1), _prediction("b", "B", 2, 2)]))

    assert task.confirm_place(session, "b")["status"] == "error"

    await task.autocomplete_places(session, "x")
    assert task.confirm_place(session, "zzz")["status"] == "error"

    confirmed = task.confirm_place(session, "b")
    assert confirmed["status"] == "success"
    assert session.confirmed_place.place_id == "b"


@pytest.mark.asyncio
async def test_suggestions_without_coordinates_are_dropped() -> None:
    gateway = _FakePlacesGateway(
        [
            {"place_id": "nowhere", "description": "Nowhere"},
            {"place_id": "bad", "description": "Bad", "latitude": "n/a", "longitude": 2.0},
            _prediction("paris", "Paris", 48.85, 2.35),
        ]
    )
    session = SessionData()

    result = await _task(gateway).create_session(session, "Paris")

    assert result["status"] == "success"
    assert [place["id"] for place in result["alternative_places"]] == ["paris"]
    assert session.confirmed_place.latitude == 48.85


@pytest.mark.asyncio
async def test_only_unlocated_suggestions_count_as_empty() -> None:
    gateway = _FakePlacesGateway(
        [
            {"place_id": "nowhere", "description": "Nowhere"},
            {"place_id": "bad", "description": "Bad", "latitude": "n/a", "longitude": "n/a"},
        ]
    )
    session = SessionData()

    created = await _task(gateway).create_session(session, "Nowhere")
    looked_up = await _task(gateway).autocomplete_places(session, "Nowhere")

    assert created["status"] == "empty"
    assert looked_up["status"] == "empty"
    assert session.confirmed_place is None
    assert session.place_suggestions == []
