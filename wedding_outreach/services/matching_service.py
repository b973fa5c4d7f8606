"""Matching Service - Vendor scoring and ranking.

This module handles:
- Scoring one vendor against a couple's requirements (0-100)
- Human-readable match reasons
- Ranking candidates and grouping them by category

Interface Contract:
- calculate_match_score(vendor, requirements) -> int
- get_match_reasons(vendor, requirements) -> list[str]
- rank_vendors(vendors, requirements) -> VendorMatches
- MatchingService.find_matching_vendors(requirements) -> VendorMatches
- Repository failures propagate as VendorRepositoryError

Scoring components (each capped, total capped at 100):

    location     30  location 30, else region 20, else suburb 25 (first match only)
    capacity  20+5  venues only; +5 when not more than 1.5x the guest count
    budget    15+5  average price vs. the per-category share of the budget
    style        20  any style tag overlaps the requested style
    keywords     10  +3 per preference found in description/services
    rating       10  +10 at 4.7+, +5 at 4.5+
"""

from __future__ import annotations

import logging
from typing import Iterable

from wedding_outreach.models import (
    Vendor,
    VendorCategory,
    VendorMatch,
    VendorMatches,
    WeddingRequirements,
)
from wedding_outreach.services.vendor_repository import VendorRepository

logger = logging.getLogger(__name__)

# A wedding budget is assumed to split evenly across this many vendor categories.
BUDGET_CATEGORY_SPLIT = 5

# Maximum entries returned per surfaced category.
CATEGORY_RESULT_LIMIT = 5

MAX_SCORE = 100

LOCATION_POINTS = 30
REGION_POINTS = 20
SUBURB_POINTS = 25
CAPACITY_POINTS = 20
CAPACITY_FIT_BONUS = 5
CAPACITY_FIT_RATIO = 1.5
BUDGET_POINTS = 15
BUDGET_WITHIN_BONUS = 5
BUDGET_STRETCH_RATIO = 1.5
STYLE_POINTS = 20
PREFERENCE_POINTS = 3
PREFERENCE_CAP = 10
TOP_RATING = 4.7
TOP_RATING_POINTS = 10
GOOD_RATING = 4.5
GOOD_RATING_POINTS = 5


def _contains(value: str | None, needle: str) -> bool:
    return bool(value) and needle in value.lower()


def _budget_figures(vendor: Vendor, requirements: WeddingRequirements) -> tuple[float, float] | None:
    """(average vendor price, per-category budget share), or None if unknown."""
    if not (requirements.budget_total and vendor.price_min and vendor.price_max):
        return None
    average_price = (vendor.price_min + vendor.price_max) / 2
    per_category = requirements.budget_total / BUDGET_CATEGORY_SPLIT
    return average_price, per_category


def _fits_capacity(vendor: Vendor, requirements: WeddingRequirements) -> bool:
    return bool(
        vendor.category is VendorCategory.VENUE
        and requirements.guest_count
        and vendor.max_guests
        and vendor.max_guests >= requirements.guest_count
    )


def calculate_match_score(vendor: Vendor, requirements: WeddingRequirements) -> int:
    """Score how well a vendor fits the requirements (0-100).

    Pure and deterministic. A missing optional requirement or vendor field
    simply awards nothing for that component.
    """
    score = 0
    location = requirements.location.lower()

    # Only the first matching location field counts
    if _contains(vendor.location, location):
        score += LOCATION_POINTS
    elif _contains(vendor.region, location):
        score += REGION_POINTS
    elif _contains(vendor.suburb, location):
        score += SUBURB_POINTS

    if _fits_capacity(vendor, requirements):
        score += CAPACITY_POINTS
        if vendor.max_guests <= requirements.guest_count * CAPACITY_FIT_RATIO:
            score += CAPACITY_FIT_BONUS

    budget = _budget_figures(vendor, requirements)
    if budget:
        average_price, per_category = budget
        if average_price <= per_category * BUDGET_STRETCH_RATIO:
            score += BUDGET_POINTS
            if average_price <= per_category:
                score += BUDGET_WITHIN_BONUS

    if requirements.style and vendor.styles:
        style = requirements.style.lower()
        if any(style in s.lower() or s.lower() in style for s in vendor.styles):
            score += STYLE_POINTS

    if requirements.preferences:
        vendor_text = f"{vendor.description} {' '.join(vendor.services_offered)}".lower()
        matched = sum(1 for pref in requirements.preferences if pref.lower() in vendor_text)
        score += min(matched * PREFERENCE_POINTS, PREFERENCE_CAP)

    if vendor.rating and vendor.rating >= TOP_RATING:
        score += TOP_RATING_POINTS
    elif vendor.rating and vendor.rating >= GOOD_RATING:
        score += GOOD_RATING_POINTS

    return min(score, MAX_SCORE)


def get_match_reasons(vendor: Vendor, requirements: WeddingRequirements) -> list[str]:
    """Explain a match in plain words.

    This is a presentation concern and does not mirror the score exactly:
    region/suburb matches, the 4.5 rating tier and preference keywords are
    never mentioned.
    """
    reasons: list[str] = []

    if _contains(vendor.location, requirements.location.lower()):
        reasons.append(f"Located in {vendor.location}")

    if requirements.style and vendor.styles:
        style = requirements.style.lower()
        matching_styles = [s for s in vendor.styles if style in s.lower()]
        if matching_styles:
            reasons.append(f"Specializes in {', '.join(matching_styles)} style")

    if _fits_capacity(vendor, requirements):
        reasons.append(f"Can accommodate {requirements.guest_count} guests")

    if vendor.rating and vendor.rating >= TOP_RATING:
        reasons.append(f"Highly rated ({vendor.rating:g}/5.0)")

    budget = _budget_figures(vendor, requirements)
    if budget and budget[0] <= budget[1]:
        reasons.append("Within your budget")

    return reasons


def score_vendor(vendor: Vendor, requirements: WeddingRequirements) -> VendorMatch:
    """Wrap a vendor with its score and reasons."""
    return VendorMatch(
        vendor=vendor,
        match_score=calculate_match_score(vendor, requirements),
        match_reasons=get_match_reasons(vendor, requirements),
    )


def rank_vendors(vendors: Iterable[Vendor], requirements: WeddingRequirements) -> VendorMatches:
    """Score every candidate, drop zeros, sort and group by category.

    The sort is stable, so equal scores keep the candidates' input order.
    """
    scored = [score_vendor(v, requirements) for v in vendors]
    ranked = sorted(
        (m for m in scored if m.match_score > 0),
        key=lambda m: m.match_score,
        reverse=True,
    )

    def top(category: VendorCategory) -> list[VendorMatch]:
        return [m for m in ranked if m.vendor.category is category][:CATEGORY_RESULT_LIMIT]

    return VendorMatches(
        venues=top(VendorCategory.VENUE),
        photographers=top(VendorCategory.PHOTOGRAPHER),
        caterers=top(VendorCategory.CATERING),
        total_matches=len(ranked),
    )


class MatchingService:
    """Loads candidates for a location and ranks them."""

    def __init__(self, repository: VendorRepository | None = None):
        """Initialize with optional vendor repository dependency.

        Args:
            repository: Vendor store. If None, uses the default from config.
        """
        self._repository = repository

    @property
    def repository(self) -> VendorRepository:
        """Lazy load the default vendor repository."""
        if self._repository is None:
            from wedding_outreach.services.registry import build_vendor_repository
            self._repository = build_vendor_repository()
        return self._repository

    def find_matching_vendors(self, requirements: WeddingRequirements) -> VendorMatches:
        """Find and rank vendors for the requirements.

        No validation happens here; an empty location matches every vendor.

        Raises:
            VendorRepositoryError: If the vendor store cannot be read
        """
        candidates = self.repository.find_by_location(requirements.location)
        matches = rank_vendors(candidates, requirements)
        logger.info(
            "[match] location=%s candidates=%d matches=%d venues=%d photographers=%d caterers=%d",
            requirements.location,
            len(candidates),
            matches.total_matches,
            len(matches.venues),
            len(matches.photographers),
            len(matches.caterers),
        )
        return matches


def find_matching_vendors(
    requirements: WeddingRequirements,
    repository: VendorRepository | None = None,
) -> VendorMatches:
    """Find matching vendors using the given (or default) repository."""
    return MatchingService(repository).find_matching_vendors(requirements)
