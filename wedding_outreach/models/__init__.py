"""Data models - Pure data structures with no business logic."""

from .matching import VendorMatch, VendorMatches
from .vendor import Vendor, VendorCapacity, VendorCategory
from .wedding import VendorOutreach, Wedding, WeddingRequirements, WeddingStatus

__all__ = [
    "Vendor",
    "VendorCapacity",
    "VendorCategory",
    "VendorMatch",
    "VendorMatches",
    "VendorOutreach",
    "Wedding",
    "WeddingRequirements",
    "WeddingStatus",
]
