"""Vendor data models.

Pure data structures with no business logic.
Prices are integers in cents.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any


class VendorCategory(Enum):
    """Closed set of vendor service types."""
    VENUE = "VENUE"
    PHOTOGRAPHER = "PHOTOGRAPHER"
    CATERING = "CATERING"
    FLORIST = "FLORIST"
    ENTERTAINMENT = "ENTERTAINMENT"
    MARQUEE = "MARQUEE"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: Any) -> "VendorCategory":
        """Parse a category name, falling back to OTHER."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            return cls.OTHER


class VendorCapacity(Enum):
    """Rough size tier for venues and caterers."""
    SMALL = "SMALL"    # under 50 guests
    MEDIUM = "MEDIUM"  # 50-149 guests
    LARGE = "LARGE"    # 150+ guests


@dataclass
class Vendor:
    """A wedding vendor as stored by the vendor repository."""
    id: str
    name: str
    category: VendorCategory = VendorCategory.OTHER
    email: str = ""
    phone: str | None = None
    website: str | None = None
    location: str | None = None
    region: str | None = None
    suburb: str | None = None
    address: str | None = None
    description: str = ""
    price_min: int | None = None
    price_max: int | None = None
    price_description: str | None = None
    capacity: VendorCapacity | None = None
    max_guests: int | None = None
    styles: list[str] = dataclass_field(default_factory=list)
    services_offered: list[str] = dataclass_field(default_factory=list)
    rating: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "email": self.email,
            "phone": self.phone,
            "website": self.website,
            "location": self.location,
            "region": self.region,
            "suburb": self.suburb,
            "address": self.address,
            "description": self.description,
            "price_min": self.price_min,
            "price_max": self.price_max,
            "price_description": self.price_description,
            "capacity": self.capacity.value if self.capacity else None,
            "max_guests": self.max_guests,
            "styles": self.styles,
            "services_offered": self.services_offered,
            "rating": self.rating,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vendor":
        """Create from dictionary."""
        capacity = data.get("capacity")
        rating = data.get("rating")
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", "Unknown"),
            category=VendorCategory.parse(data.get("category")),
            email=data.get("email") or "",
            phone=data.get("phone"),
            website=data.get("website"),
            location=data.get("location"),
            region=data.get("region"),
            suburb=data.get("suburb"),
            address=data.get("address"),
            description=data.get("description") or "",
            price_min=_optional_int(data.get("price_min")),
            price_max=_optional_int(data.get("price_max")),
            price_description=data.get("price_description"),
            capacity=VendorCapacity(capacity) if capacity else None,
            max_guests=_optional_int(data.get("max_guests")),
            styles=list(data.get("styles") or []),
            services_offered=list(data.get("services_offered") or []),
            rating=float(rating) if rating is not None else None,
        )


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)
