"""Wedding Service - Build wedding records from questionnaire answers.

Interface Contract:
- save_from_questionnaire(user_id, answers) -> Wedding
- get_current_wedding(user_id) -> Wedding | None
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from wedding_outreach.models import Wedding, WeddingStatus
from wedding_outreach.services.validation import sanitize_string, validate_array
from wedding_outreach.services.wedding_store import WeddingStore, new_id

logger = logging.getLogger(__name__)

UNDECIDED_DATE = "We're still deciding"

GUEST_COUNT_OPTIONS = {
    "Intimate (under 50)": 40,
    "Medium (50-100)": 75,
    "Large (100-150)": 125,
    "Grand (150+)": 200,
}
DEFAULT_GUEST_COUNT = 75

# Budgets in cents
BUDGET_OPTIONS = {
    "Under $30,000": 2500000,
    "$30,000 - $50,000": 4000000,
    "$50,000 - $80,000": 6500000,
    "Above $80,000": 10000000,
}
DEFAULT_BUDGET = 5000000

LOCATION_OPTIONS = {
    "Sydney & surrounds": "Sydney",
    "Blue Mountains": "Blue Mountains",
    "Hunter Valley": "Hunter Valley",
    "South Coast": "South Coast",
    "Other region": "Newcastle",
}
DEFAULT_LOCATION = "Newcastle"

DEFAULT_STYLE = "Modern"


def parse_wedding_date(value: Any) -> date | None:
    """ISO date string, or None when undecided or unparseable."""
    text = sanitize_string(value)
    if not text or text == UNDECIDED_DATE:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.info("[wedding] ignoring unparseable date: %s", text)
        return None


def parse_style(value: Any) -> str:
    """First style of a combined answer like "Rustic & Boho"."""
    text = sanitize_string(value)
    return text.split(" & ")[0].strip() or DEFAULT_STYLE


class WeddingService:
    """Service for creating and reading a couple's wedding."""

    def __init__(self, store: WeddingStore):
        self.store = store

    def get_current_wedding(self, user_id: str) -> Wedding | None:
        return self.store.get_latest_wedding(user_id)

    def save_from_questionnaire(self, user_id: str, answers: dict[str, Any]) -> Wedding:
        """Create or update the user's wedding from questionnaire answers.

        Unknown choices fall back to defaults so a partial questionnaire
        still yields a usable wedding.
        """
        wedding_date = parse_wedding_date(answers.get("date"))
        guest_count = GUEST_COUNT_OPTIONS.get(sanitize_string(answers.get("guest_count")), DEFAULT_GUEST_COUNT)
        budget_total = BUDGET_OPTIONS.get(sanitize_string(answers.get("budget")), DEFAULT_BUDGET)
        location = LOCATION_OPTIONS.get(sanitize_string(answers.get("location")), DEFAULT_LOCATION)
        style = parse_style(answers.get("style"))
        must_haves = [s for s in (sanitize_string(x) for x in validate_array(answers.get("must_haves"), 20)) if s]
        dietary = [s for s in (sanitize_string(x) for x in validate_array(answers.get("dietary_needs"), 20)) if s]

        wedding = self.store.get_latest_wedding(user_id)
        if wedding is None:
            wedding = Wedding(id=new_id(), user_id=user_id, location=location)
            logger.info("[wedding] creating wedding for user=%s", user_id)

        wedding.wedding_date = wedding_date
        wedding.location = location
        wedding.guest_count = guest_count
        wedding.budget_total = budget_total
        wedding.style = style
        wedding.must_haves = must_haves
        wedding.dietary_needs = dietary
        wedding.chat_completed = True
        wedding.status = WeddingStatus.MATCHING

        return self.store.save_wedding(wedding)
