"""MCP tool server exposing hotel search, details and booking."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Annotated, Any, AsyncIterator, Awaitable, Callable, Dict, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from hotel_mcp.config.settings import Settings
from hotel_mcp.core.rendering import render
from hotel_mcp.hotels.facilities import SUPPORTED_LANGUAGES, FacilityCatalog
from hotel_mcp.hotels.formatter import to_detail, to_summary
from hotel_mcp.services.backend_client import BackendClient
from hotel_mcp.session.store import SessionData
from hotel_mcp.tasks.booking import BookingTask
from hotel_mcp.tasks.places import PlacesTask
from hotel_mcp.tasks.search import SearchCriteria, SearchTask

logger = logging.getLogger(__name__)

SERVER_NAME = "hotel-booking-mcp"


class HotelToolbox:
    """Wires the backend client, the session and the tasks behind the tool surface.

    One toolbox serves one conversation at a time; the stdio server creates a
    single toolbox per process.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        client: Optional[BackendClient] = None,
        session: Optional[SessionData] = None,
        facilities: Optional[FacilityCatalog] = None,
    ) -> None:
        self.settings = settings
        self.client = client or BackendClient(base_url=settings.api_base_url, timeout=settings.http_timeout_s)
        self.session = session or SessionData(language=settings.default_language)
        self.facilities = facilities if facilities is not None else FacilityCatalog.load(settings.facilities_path)
        view = to_summary if settings.server_variant == "customer" else to_detail
        self.search_task = SearchTask(self.client, view=view)
        self.booking_task = BookingTask(
            self.client,
            payment_base_url=settings.payment_base_url,
            poll_interval=settings.quote_poll_interval_s,
            max_attempts=settings.quote_max_attempts,
        )
        self.places_task = PlacesTask(
            self.client,
            facilities=self.facilities,
            default_language=settings.default_language,
            default_currency=settings.default_currency,
            default_country_code=settings.default_country_code,
            market=settings.default_market,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def run(self, tool_name: str, operation: Callable[[], Awaitable[Dict[str, Any]]]) -> str:
        started = time.perf_counter()
        logger.info("Tool %s called", tool_name)
        try:
            result = await operation()
        except Exception:
            logger.exception("Tool %s raised after %.2fs", tool_name, time.perf_counter() - started)
            raise
        logger.info(
            "Tool %s finished with status %s in %.2fs",
            tool_name,
            result.get("status"),
            time.perf_counter() - started,
        )
        return render(result, self.settings.output_format)

    async def create_session(self, place: str, **kwargs: Any) -> str:
        return await self.run(
            "create-session", lambda: self.places_task.create_session(self.session, place, **kwargs)
        )

    async def autocomplete_place(self, query: str, language: Optional[str] = None) -> str:
        return await self.run(
            "autocomplete-place",
            lambda: self.places_task.autocomplete_places(self.session, query, language=language),
        )

    async def confirm_place(self, place_id: str) -> str:
        async def _confirm() -> Dict[str, Any]:
            return self.places_task.confirm_place(self.session, place_id)

        return await self.run("confirm-place", _confirm)

    async def search_hotels(self, criteria: SearchCriteria) -> str:
        return await self.run("search-hotels", lambda: self.search_task.search(self.session, criteria))

    async def load_more_hotels(self, next_page_token: str) -> str:
        return await self.run(
            "load-more-hotels", lambda: self.search_task.load_more(self.session, next_page_token)
        )

    async def get_hotel_details(self, hotel_id: str) -> str:
        async def _details() -> Dict[str, Any]:
            return self.search_task.get_details(self.session, hotel_id)

        return await self.run("get-hotel-details", _details)

    async def book_hotel(self, hotel_id: str, rate_id: str) -> str:
        return await self.run(
            "book-hotel", lambda: self.booking_task.book_hotel(self.session, hotel_id, rate_id)
        )

    def facilities_text(self, language: str) -> str:
        return render({"language": language, "facilities": self.facilities.for_language(language)}, "json")


CheckIn = Annotated[str, Field(description="Check-in date (YYYY-MM-DD)")]
CheckOut = Annotated[str, Field(description="Check-out date (YYYY-MM-DD)")]
Adults = Annotated[int, Field(ge=1, description="Number of adults")]
Children = Annotated[int, Field(ge=0, description="Number of children")]
Facilities = Annotated[
    Optional[list[int]],
    Field(description="Facility IDs to filter hotels by, the IDs can be inferred with the facilities resource."),
]
HotelId = Annotated[str, Field(description="ID of the hotel")]
RateId = Annotated[str, Field(description="ID of the rate to book")]


def _register_shared_tools(server: FastMCP, toolbox: HotelToolbox) -> None:
    async def load_more_hotels(
        next_page_token: Annotated[str, Field(description="Next page token returned by a previous search")],
    ) -> str:
        return await toolbox.load_more_hotels(next_page_token)

    async def get_hotel_details(hotel_id: HotelId) -> str:
        return await toolbox.get_hotel_details(hotel_id)

    async def book_hotel(hotel_id: HotelId, rate_id: RateId) -> str:
        return await toolbox.book_hotel(hotel_id, rate_id)

    server.add_tool(
        load_more_hotels,
        name="load-more-hotels",
        description="Load more hotels based on the next page token got from the previous search.",
    )
    server.add_tool(
        get_hotel_details,
        name="get-hotel-details",
        description=(
            "Get detailed information about a specific hotel by ID, which are found by search-hotels. "
            "Use it to see every room and rate of a hotel the user is interested in."
        ),
    )
    server.add_tool(
        book_hotel,
        name="book-hotel",
        description=(
            "Book a hotel with the chosen hotel's ID and rate's ID. "
            "A payment link is returned, which should be opened in a browser."
        ),
    )


def _register_customer_tools(server: FastMCP, toolbox: HotelToolbox) -> None:
    async def create_session(
        place: Annotated[str, Field(description="Location where the user wants to search for hotels (e.g. 'Paris')")],
        raw_request: Annotated[Optional[str], Field(description="Summary of the user's requirements")] = None,
        language: Annotated[Optional[str], Field(description="ISO 639 language code used by the user")] = None,
        currency: Annotated[Optional[str], Field(description="Currency code (e.g. 'EUR', 'USD')")] = None,
        country_code: Annotated[Optional[str], Field(description="Country code (e.g. 'fr', 'us')")] = None,
    ) -> str:
        return await toolbox.create_session(
            place,
            raw_request=raw_request,
            language=language,
            currency=currency,
            country_code=country_code,
        )

    async def autocomplete_place(
        query: Annotated[str, Field(description="User's input for place search")],
        language: Annotated[Optional[str], Field(description="The language used by the user")] = None,
    ) -> str:
        return await toolbox.autocomplete_place(query, language)

    async def confirm_place(
        place_id: Annotated[str, Field(description="ID of the place to confirm from the suggestions")],
    ) -> str:
        return await toolbox.confirm_place(place_id)

    async def search_hotels(
        check_in_date: CheckIn,
        check_out_date: CheckOut,
        adults: Adults = 2,
        children: Children = 0,
        facilities: Facilities = None,
        place_id: Annotated[
            Optional[str], Field(description="Optional place ID to override the selected place")
        ] = None,
    ) -> str:
        criteria = SearchCriteria(
            check_in_date=check_in_date,
            check_out_date=check_out_date,
            adults=adults,
            children=children,
            facilities=list(facilities or []),
            place_id=place_id,
        )
        return await toolbox.search_hotels(criteria)

    server.add_tool(
        create_session,
        name="create-session",
        description="Create a new booking session and normalize the place for hotel search.",
    )
    server.add_tool(
        autocomplete_place, name="autocomplete-place", description="Get place suggestions based on user input."
    )
    server.add_tool(
        confirm_place, name="confirm-place", description="Confirm a place from the suggestions for hotel search."
    )
    server.add_tool(
        search_hotels,
        name="search-hotels",
        description=(
            "Search for available hotels based on the selected place, dates and other criteria, "
            "returning a list of hotels with their lowest price."
        ),
    )


def _register_standard_tools(server: FastMCP, toolbox: HotelToolbox) -> None:
    async def search_hotels(
        latitude: Annotated[float, Field(description="Latitude of the location")],
        longitude: Annotated[float, Field(description="Longitude of the location")],
        check_in_date: CheckIn,
        check_out_date: CheckOut,
        adults: Adults = 2,
        children: Children = 0,
        facilities: Facilities = None,
    ) -> str:
        criteria = SearchCriteria(
            check_in_date=check_in_date,
            check_out_date=check_out_date,
            adults=adults,
            children=children,
            facilities=list(facilities or []),
            latitude=latitude,
            longitude=longitude,
        )
        return await toolbox.search_hotels(criteria)

    server.add_tool(
        search_hotels,
        name="search-hotels",
        description=(
            "Search for available hotels based on latitude, longitude, dates and other criteria. "
            "More hotels can be loaded with the next page token and load-more-hotels."
        ),
    )

    for language in SUPPORTED_LANGUAGES:
        server.resource(
            f"hotel://facilities/{language}",
            name=f"Hotel Facilities ({language})",
            description=f"Hotel facilities translated to {language}",
            mime_type="application/json",
        )(_facilities_reader(toolbox, language))


def _facilities_reader(toolbox: HotelToolbox, language: str) -> Callable[[], str]:
    def read() -> str:
        return toolbox.facilities_text(language)

    return read


def build_server(toolbox: HotelToolbox, *, variant: Optional[str] = None) -> FastMCP:
    variant = variant or toolbox.settings.server_variant

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
        try:
            yield None
        finally:
            await toolbox.aclose()

    server = FastMCP(SERVER_NAME, lifespan=lifespan)
    if variant == "customer":
        _register_customer_tools(server, toolbox)
    elif variant == "standard":
        _register_standard_tools(server, toolbox)
    else:
        raise ValueError(f"Unknown server variant '{variant}'")
    _register_shared_tools(server, toolbox)
    logger.info("Built %s server (%s variant)", SERVER_NAME, variant)
    return server
