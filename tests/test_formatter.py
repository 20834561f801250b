from __future__ import annotations

import copy

from hotel_mcp.hotels import RateHints, decode_opaque, find_rate, format_price, to_detail, to_summary
from hotel_mcp.hotels.formatter import UNKNOWN_HOTEL_DETAIL


def test_format_price_fallbacks():
    assert format_price({"value": 99.5, "currency": "EUR"}) == "99.5 EUR"
    assert format_price({"value": 10}) == "10 USD"
    assert format_price({"currency": "GBP"}) == "N/A GBP"
    assert format_price(None) == "N/A USD"
    assert format_price({"value": 0, "currency": "EUR"}) == "0 EUR"


def test_decode_opaque_defaults_on_garbage():
    assert decode_opaque(None) == RateHints()
    assert decode_opaque("not json at all") == RateHints()
    assert decode_opaque("[1, 2]") == RateHints()


def test_decode_opaque_reads_pricing_and_meal_plan():
    hints = decode_opaque('{"pricing": {"pricing_type": "pay_later"}, "meal_plan": {"description": "Half board"}}')
    assert hints.payment_type == "Pay Later"
    assert hints.meal_plan == "Half board"
    assert hints.has_pricing_type

    prepaid = decode_opaque('{"pricing": {"pricing_type": "prepaid"}}')
    assert prepaid.payment_type == "Pay Now"
    assert prepaid.has_pricing_type


def test_summary_picks_cheapest_room_by_numeric_price(make_hotel):
    summary = to_summary(make_hotel())

    assert summary["id"] == 101
    assert summary["ranking"] == "4 stars"
    assert summary["price"] == "From 120 EUR"
    assert summary["images"] == [
        "https://img.test/main.jpg",
        "https://img.test/2.jpg",
        "https://img.test/3.jpg",
    ]
    assert summary["lowest_rate"] == {
        "room_id": "r-double",
        "room_name": "Double",
        "rate_id": "double-bb",
        "price": "120 EUR",
        "is_refundable": False,
        "payment_type": "Pay Later",
        "meal_plan": "Breakfast included",
    }


def test_summary_without_rooms_uses_placeholder(make_hotel):
    summary = to_summary(make_hotel(rooms=[], star_rating=None, address=None))

    assert summary["ranking"] == "N/A stars"
    assert summary["location"] == "Unknown location"
    assert summary["lowest_rate"]["price"] == "N/A USD"
    assert summary["lowest_rate"]["room_id"] == ""
    assert summary["lowest_rate"]["payment_type"] == "Pay Now"
    assert summary["lowest_rate"]["is_refundable"] is False
    assert summary["lowest_rate"]["meal_plan"] is None


def test_summary_keeps_room_price_when_lowest_rate_is_missing(make_hotel):
    hotel = make_hotel(
        rooms=[
            {
                "room_id": "r-1",
                "room_name": "Twin",
                "min_price": {"value": 80, "currency": "EUR"},
                "lowest_rate": {"rate_id": "gone"},
                "rates": [{"rate_id": "other", "is_refundable": True}],
            }
        ]
    )

    lowest = to_summary(hotel)["lowest_rate"]
    assert lowest["price"] == "80 EUR"
    assert lowest["rate_id"] == "gone"
    assert lowest["is_refundable"] is False
    assert lowest["meal_plan"] is None


def test_detail_lists_every_room_and_rate(make_hotel):
    detail = to_detail(make_hotel())

    assert detail["facilities"] == ["Pool", "Spa"]
    assert detail["check_in"] == "From 15:00"
    assert detail["check_out"] == "Until 11:00"
    assert [room["room_id"] for room in detail["rooms"]] == ["r-suite", "r-double", "r-unpriced"]

    suite = detail["rooms"][0]
    assert suite["amenities"] == ["Minibar"]
    assert suite["images"] == ["https://img.test/suite.jpg"]
    suite_rate = suite["rates"][0]
    assert suite_rate["price"] == "300 EUR"
    assert suite_rate["payment_type"] == "Flexible rate"
    assert suite_rate["cancellation_policy"] == ["Free cancellation until 1 Nov"]

    double_rate = detail["rooms"][1]["rates"][0]
    assert double_rate["payment_type"] == "Pay Later"
    assert double_rate["meal_plan"] == "Breakfast included"
    assert detail["rooms"][2]["rates"] == []


def test_detail_of_missing_hotel_is_placeholder():
    assert to_detail(None) == UNKNOWN_HOTEL_DETAIL
    assert to_detail({}) == UNKNOWN_HOTEL_DETAIL

    placeholder = to_detail(None)
    placeholder["rooms"].append("x")
    assert UNKNOWN_HOTEL_DETAIL["rooms"] == []


def test_views_do_not_mutate_input(make_hotel):
    hotel = make_hotel()
    snapshot = copy.deepcopy(hotel)

    to_summary(hotel)
    to_detail(hotel)

    assert hotel == snapshot


def test_find_rate_scans_every_room(make_hotel):
    room, rate = find_rate(make_hotel()["rooms"], "double-bb")
    assert room["room_id"] == "r-double"
    assert rate["provider_id"] == "prov-2"

    assert find_rate(make_hotel()["rooms"], "nope") == (None, None)
    assert find_rate(None, "double-bb") == (None, None)


def test_summary_skips_rooms_with_unusable_prices(make_hotel):
    hotel = make_hotel(
        rooms=[
            {"room_id": "r-text", "room_name": "Text", "min_price": {"value": "abc", "currency": "EUR"}},
            {"room_id": "r-none", "room_name": "None", "min_price": None},
            {"room_id": "r-priced", "room_name": "Priced", "min_price": {"value": "999.5", "currency": "EUR"}},
            {"room_id": "r-bool", "room_name": "Bool", "min_price": {"value": True, "currency": "EUR"}},
        ]
    )

    lowest = to_summary(hotel)["lowest_rate"]
    assert lowest["room_id"] == "r-priced"
    assert lowest["price"] == "999.5 EUR"


def test_summary_falls_back_to_first_room_when_none_priced(make_hotel):
    hotel = make_hotel(
        rooms=[
            {"room_id": "r-first", "room_name": "First", "min_price": {"value": "abc"}},
            {"room_id": "r-second", "room_name": "Second"},
        ]
    )

    lowest = to_summary(hotel)["lowest_rate"]
    assert lowest["room_id"] == "r-first"
    assert lowest["price"] == "abc USD"
    assert lowest["is_refundable"] is False
