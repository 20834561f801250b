"""Hotel domain models, view formatting and facility metadata."""

from .facilities import Facility, FacilityCatalog
from .formatter import (
    decode_opaque,
    find_rate,
    format_price,
    to_detail,
    to_summary,
)
from .models import PlaceSuggestion, RateHints

__all__ = [
    "Facility",
    "FacilityCatalog",
    "PlaceSuggestion",
    "RateHints",
    "decode_opaque",
    "find_rate",
    "format_price",
    "to_detail",
    "to_summary",
]
