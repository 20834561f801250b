"""Turn raw backend hotel payloads into summary and detail views.

Every function here is pure: inputs are never mutated and malformed fields
degrade to placeholders instead of raising.
"""
from __future__ import annotations

import json
import math
from typing import Any, Dict, Iterable, List, Optional

from .models import RateHints, to_float

PRICE_VALUE_PLACEHOLDER = "N/A"
PRICE_CURRENCY_PLACEHOLDER = "USD"
PAY_NOW = "Pay Now"
PAY_LATER = "Pay Later"
SUMMARY_IMAGE_LIMIT = 3

UNKNOWN_HOTEL_DETAIL: Dict[str, Any] = {
    "id": "unknown",
    "name": "Unknown Hotel",
    "ranking": "N/A",
    "location": "N/A",
    "facilities": [],
    "images": [],
    "rooms": [],
}


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def format_price(price: Optional[Dict[str, Any]]) -> str:
    """Render ``{"value", "currency"}`` as ``"<value> <currency>"`` with N/A / USD fallbacks."""
    price = price if isinstance(price, dict) else {}
    value = price.get("value")
    currency = price.get("currency")
    value_text = PRICE_VALUE_PLACEHOLDER if _is_missing(value) else str(value)
    currency_text = PRICE_CURRENCY_PLACEHOLDER if _is_missing(currency) else str(currency)
    return f"{value_text} {currency_text}"


def decode_opaque(opaque: Any) -> RateHints:
    """Best-effort decode of a rate's opaque payload; any failure yields the defaults."""
    if not isinstance(opaque, str) or not opaque:
        return RateHints()
    try:
        data = json.loads(opaque)
    except (TypeError, ValueError, RecursionError):
        return RateHints()
    if not isinstance(data, dict):
        return RateHints()

    meal_plan = None
    meal_plan_info = data.get("meal_plan")
    if isinstance(meal_plan_info, dict):
        meal_plan = meal_plan_info.get("description")

    pricing_type = None
    pricing = data.get("pricing")
    if isinstance(pricing, dict):
        pricing_type = pricing.get("pricing_type")

    return RateHints(
        payment_type=PAY_LATER if pricing_type == "pay_later" else PAY_NOW,
        meal_plan=meal_plan,
        has_pricing_type=bool(pricing_type),
    )


def _ranking(hotel: Dict[str, Any]) -> str:
    stars = hotel.get("star_rating")
    return f"{stars if stars else 'N/A'} stars"


def _image_paths(images: Optional[Iterable[Any]]) -> List[str]:
    paths: List[str] = []
    for image in images or []:
        path = image.get("path") if isinstance(image, dict) else None
        if path:
            paths.append(path)
    return paths


def _summary_images(hotel: Dict[str, Any]) -> List[str]:
    selected: List[str] = []
    main_photo = hotel.get("main_photo")
    if main_photo:
        selected.append(main_photo)
    for path in _image_paths(hotel.get("images")):
        if len(selected) >= SUMMARY_IMAGE_LIMIT:
            break
        if path in selected:
            continue
        selected.append(path)
    return selected


def _room_price_key(room: Dict[str, Any]) -> float:
    min_price = room.get("min_price")
    if not isinstance(min_price, dict):
        return math.inf
    value = to_float(min_price.get("value"))
    return math.inf if value is None else value


def _named(entries: Optional[Iterable[Any]], *, exclude: str) -> List[str]:
    names: List[str] = []
    for entry in entries or []:
        name = entry.get("name") if isinstance(entry, dict) else None
        if name and exclude not in name:
            names.append(name)
    return names


def _policy_text(policies: Optional[Iterable[Any]], policy_type: str) -> Optional[List[str]]:
    for policy in policies or []:
        if isinstance(policy, dict) and policy.get("type") == policy_type:
            return policy.get("description")
    return None


def _first_line(lines: Any) -> Optional[str]:
    if not lines:
        return None
    if isinstance(lines, str):
        return lines
    return lines[0]


def find_rate(rooms: Optional[Iterable[Any]], rate_id: Any) -> tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
    """Return ``(room, rate)`` for ``rate_id`` scanning every room's rate list."""
    for room in rooms or []:
        if not isinstance(room, dict):
            continue
        for rate in room.get("rates") or []:
            if isinstance(rate, dict) and rate.get("rate_id") == rate_id:
                return room, rate
    return None, None


def _placeholder_rate(price: str) -> Dict[str, Any]:
    return {
        "room_id": "",
        "room_name": "",
        "rate_id": "",
        "price": price,
        "is_refundable": False,
        "payment_type": PAY_NOW,
        "meal_plan": None,
    }


def _lowest_rate(hotel: Dict[str, Any]) -> Dict[str, Any]:
    rooms = [room for room in hotel.get("rooms") or [] if isinstance(room, dict)]
    if not rooms:
        return _placeholder_rate(format_price(None))

    cheapest = sorted(rooms, key=_room_price_key)[0]
    lowest = cheapest.get("lowest_rate") or {}
    rate_id = lowest.get("rate_id") if isinstance(lowest, dict) else None

    rate = None
    if rate_id is not None:
        rate = next(
            (
                candidate
                for candidate in cheapest.get("rates") or []
                if isinstance(candidate, dict) and candidate.get("rate_id") == rate_id
            ),
            None,
        )

    summary = _placeholder_rate(format_price(cheapest.get("min_price")))
    summary["room_id"] = cheapest.get("room_id") or ""
    summary["room_name"] = cheapest.get("room_name") or ""
    summary["rate_id"] = rate_id or ""
    if rate is None:
        return summary

    hints = decode_opaque(rate.get("opaque"))
    summary["is_refundable"] = bool(rate.get("is_refundable"))
    summary["payment_type"] = hints.payment_type
    summary["meal_plan"] = hints.meal_plan
    return summary


def to_summary(hotel: Dict[str, Any]) -> Dict[str, Any]:
    """Listing view: cheapest room and rate plus up to three images."""
    return {
        "id": hotel.get("id"),
        "name": hotel.get("name"),
        "ranking": _ranking(hotel),
        "location": hotel.get("address") or "Unknown location",
        "price": f"From {format_price(hotel.get('min_price'))}",
        "images": _summary_images(hotel),
        "lowest_rate": _lowest_rate(hotel),
    }


def _detail_rate(rate: Dict[str, Any]) -> Dict[str, Any]:
    hints = decode_opaque(rate.get("opaque"))
    payment_type = hints.payment_type if hints.has_pricing_type else (rate.get("description") or PAY_NOW)
    return {
        "rate_id": rate.get("rate_id"),
        "description": rate.get("description") or "",
        "price": format_price(rate.get("selling_price")),
        "is_refundable": bool(rate.get("is_refundable")),
        "cancellation_policy": _policy_text(rate.get("policies"), "cancellation"),
        "meal_plan": hints.meal_plan,
        "payment_type": payment_type,
    }


def _detail_room(room: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "room_id": room.get("room_id"),
        "room_name": room.get("room_name"),
        "description": room.get("description"),
        "images": _image_paths(room.get("images")),
        "amenities": _named(room.get("amenities"), exclude="Unknown"),
        "max_occupancy": room.get("max_occupancy"),
        "rates": [_detail_rate(rate) for rate in room.get("rates") or [] if isinstance(rate, dict)],
    }


def to_detail(hotel: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Full view: every room and every rate, facilities and check-in/out times."""
    if not hotel:
        return {
            key: list(value) if isinstance(value, list) else value
            for key, value in UNKNOWN_HOTEL_DETAIL.items()
        }

    images = _image_paths(hotel.get("images"))
    main_photo = hotel.get("main_photo")
    if main_photo and main_photo not in images:
        images.insert(0, main_photo)

    policies = hotel.get("policies")
    return {
        "id": hotel.get("id"),
        "name": hotel.get("name"),
        "ranking": _ranking(hotel),
        "location": hotel.get("address") or "Unknown location",
        "description": hotel.get("description"),
        "facilities": _named(hotel.get("amenities"), exclude="Unknown Facility"),
        "images": images,
        "check_in": _first_line(_policy_text(policies, "check_in")),
        "check_out": _first_line(_policy_text(policies, "check_out")),
        "rooms": [_detail_room(room) for room in hotel.get("rooms") or [] if isinstance(room, dict)],
    }
