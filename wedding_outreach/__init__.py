"""Wedding vendor matching and outreach package."""

from .models import Vendor, VendorCategory, VendorMatch, VendorMatches, WeddingRequirements
from .services.chat_formatter import format_vendor_matches_for_chat
from .services.matching_service import (
    calculate_match_score,
    find_matching_vendors,
    get_match_reasons,
    rank_vendors,
)

__all__ = [
    "Vendor",
    "VendorCategory",
    "VendorMatch",
    "VendorMatches",
    "WeddingRequirements",
    "calculate_match_score",
    "find_matching_vendors",
    "format_vendor_matches_for_chat",
    "get_match_reasons",
    "rank_vendors",
]
