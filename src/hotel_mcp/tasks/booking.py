"""Quote scheduling and polling for hotel bookings.

A booking moves through ``Scheduling -> Polling -> {Succeeded, Failed, TimedOut}``.
The payment link depends only on the quote reference, so a timed-out quote
still hands the caller a usable link.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from hotel_mcp.hotels.formatter import find_rate, format_price
from hotel_mcp.services.backend_client import BackendUnavailableError
from hotel_mcp.session.store import SessionData
from hotel_mcp.tasks.search import hotel_not_found
from hotel_mcp.tasks.search_payloads import build_quote_product
from hotel_mcp.utils.polling import PollResult, poll_until, status_from_field

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_BASE_URL = "https://app.jinko.so/checkout/"
DEFAULT_POLL_INTERVAL_S = 2.0
DEFAULT_MAX_ATTEMPTS = 30

PAYMENT_ACTION = (
    "Make sure the payment_link is displayed to the user so they can click it and pay for the booking."
)


class QuoteGateway(Protocol):
    async def schedule_quote(self, products: list[Dict[str, Any]]) -> Dict[str, Any]:
        ...

    async def pull_quote(self, reference: str) -> Dict[str, Any]:
        ...


def _amount_text(selling_price: Optional[Dict[str, Any]]) -> str:
    selling_price = selling_price if isinstance(selling_price, dict) else {}
    return format_price({"value": selling_price.get("amount"), "currency": selling_price.get("currency")})


class BookingTask:
    """Turns a cached hotel rate into a quote and a payment link."""

    def __init__(
        self,
        gateway: QuoteGateway,
        *,
        payment_base_url: str = DEFAULT_PAYMENT_BASE_URL,
        poll_interval: float = DEFAULT_POLL_INTERVAL_S,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self.gateway = gateway
        self.payment_base_url = payment_base_url
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    def payment_link(self, reference: str) -> str:
        return f"{self.payment_base_url}{reference}"

    async def book_hotel(self, session: SessionData, hotel_id: str, rate_id: str) -> Dict[str, Any]:
        hotel = session.get_hotel(hotel_id)
        if hotel is None:
            return hotel_not_found(hotel_id)

        room, rate = find_rate(hotel.get("rooms"), rate_id)
        if rate is None:
            return {
                "status": "error",
                "message": f"Room or rate with ID {rate_id} not found in hotel {hotel_id}.",
            }

        reference = await self._schedule(hotel, rate)
        if reference is None:
            return {"status": "error", "message": "Failed to schedule quote. Please try again later."}

        payment_link = self.payment_link(reference)
        logger.info(
            "Quote %s scheduled for hotel %s room %s rate %s",
            reference,
            hotel_id,
            room.get("room_id") if room else None,
            rate_id,
        )
        outcome = await self._poll(reference)
        return self._to_result(outcome, reference=reference, payment_link=payment_link)

    async def _schedule(self, hotel: Dict[str, Any], rate: Dict[str, Any]) -> Optional[str]:
        products = [build_quote_product(hotel, rate)]
        try:
            response = await self.gateway.schedule_quote(products)
        except BackendUnavailableError:
            logger.exception("Quote scheduling failed for hotel %s", hotel.get("id"))
            return None
        reference = response.get("reference")
        if not reference:
            logger.warning("Quote schedule response missing reference: %s", response)
            return None
        return str(reference)

    async def _poll(self, reference: str) -> PollResult[Dict[str, Any]]:
        return await poll_until(
            lambda: self.gateway.pull_quote(reference),
            status_from_field("status"),
            interval=self.poll_interval,
            max_attempts=self.max_attempts,
            retry_on=(BackendUnavailableError,),
        )

    def _to_result(
        self,
        outcome: PollResult[Dict[str, Any]],
        *,
        reference: str,
        payment_link: str,
    ) -> Dict[str, Any]:
        if outcome.timed_out:
            return {
                "status": "processing",
                "message": (
                    "Quote is still processing. Please check the status and complete your booking "
                    "using the following payment link."
                ),
                "payment_link": payment_link,
                "quote_id": reference,
            }

        response = outcome.value or {}
        if outcome.failed:
            error = response.get("error") or "Unknown error"
            logger.warning("Quote %s failed: %s", reference, error)
            return {
                "status": "failed",
                "message": f"Quote generation failed: {error}",
                "error": error,
                "quote_id": reference,
            }

        quote = response.get("quote") or {}
        products = quote.get("quoted_products") or []
        result: Dict[str, Any] = {
            "status": "success",
            "action": PAYMENT_ACTION,
            "hotel": "Unknown hotel",
            "check_in": "N/A",
            "check_out": "N/A",
            "total_price": "N/A",
            "payment_link": payment_link,
            "quote_id": reference,
        }
        if products:
            product = products[0]
            rate_info = product.get("rate_info") or {}
            result.update(
                hotel=product.get("hotel_name") or "Unknown hotel",
                check_in=product.get("check_in_date") or "N/A",
                check_out=product.get("check_out_date") or "N/A",
                total_price=_amount_text(rate_info.get("selling_price")),
            )
        return result
