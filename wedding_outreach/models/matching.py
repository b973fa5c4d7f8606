"""Vendor match result models.

Built fresh on every matching pass and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from typing import Any

from .vendor import Vendor


@dataclass
class VendorMatch:
    """A candidate vendor annotated with its score and match reasons."""
    vendor: Vendor
    match_score: int = 0
    match_reasons: list[str] = dataclass_field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (vendor fields flattened in)."""
        data = self.vendor.to_dict()
        data["match_score"] = self.match_score
        data["match_reasons"] = self.match_reasons
        return data


@dataclass
class VendorMatches:
    """Ranked matches for the three surfaced categories.

    ``total_matches`` counts every nonzero-scoring candidate, including
    categories that never get a list of their own.
    """
    venues: list[VendorMatch] = dataclass_field(default_factory=list)
    photographers: list[VendorMatch] = dataclass_field(default_factory=list)
    caterers: list[VendorMatch] = dataclass_field(default_factory=list)
    total_matches: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "venues": [m.to_dict() for m in self.venues],
            "photographers": [m.to_dict() for m in self.photographers],
            "caterers": [m.to_dict() for m in self.caterers],
            "total_matches": self.total_matches,
        }
