"""Input validation and sanitization.

Everything that arrives over HTTP (or from seed files) goes through here
before it reaches the matching engine, the stores or an LLM prompt.
"""

from __future__ import annotations

import math
import re
from typing import Any

from wedding_outreach.models import Vendor, VendorCapacity, VendorCategory, WeddingRequirements

MAX_STRING_LENGTH = 10000
MAX_PREFERENCES = 20

MIN_GUESTS, MAX_GUESTS = 1, 10000
MIN_BUDGET, MAX_BUDGET = 1000, 10000000  # cents

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
LEADING_INT_RE = re.compile(r"^\s*([-+]?\d+)")
AU_PHONE_RE = re.compile(r"^(0[2-8]\s?\d{4}\s?\d{4}|04\d{2}\s?\d{3}\s?\d{3})$")

PROMPT_INJECTION_PATTERNS = [
    re.compile(r"system:", re.I),
    re.compile(r"assistant:", re.I),
    re.compile(r"\[INST\]", re.I),
    re.compile(r"\[/INST\]", re.I),
    re.compile(r"<\|im_start\|>", re.I),
    re.compile(r"<\|im_end\|>", re.I),
]


class ValidationError(ValueError):
    """Raised when request input is unusable."""
    pass


def sanitize_string(value: Any) -> str:
    """Strip NUL bytes and surrounding whitespace; non-strings become ""."""
    if not isinstance(value, str):
        return ""
    sanitized = value.replace("\0", "").strip()
    return sanitized[:MAX_STRING_LENGTH]


def sanitize_number(
    value: Any,
    *,
    min_value: int | None = None,
    max_value: int | None = None,
    default: int | None = None,
) -> int | None:
    """Parse an integer and clamp it to the given bounds.

    Strings are parsed by their leading integer ("120 guests" -> 120).
    Empty or unparseable input returns ``default``.
    """
    if value is None or value == "" or isinstance(value, bool):
        return default

    if isinstance(value, str):
        match = LEADING_INT_RE.match(value)
        if not match:
            return default
        number = int(match.group(1))
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            return default
        number = int(value)
    else:
        return default

    if min_value is not None and number < min_value:
        return min_value
    if max_value is not None and number > max_value:
        return max_value
    return number


def validate_guest_count(value: Any) -> int | None:
    return sanitize_number(value, min_value=MIN_GUESTS, max_value=MAX_GUESTS)


def validate_budget(value: Any) -> int | None:
    """Budget in cents, clamped to a sane range."""
    return sanitize_number(value, min_value=MIN_BUDGET, max_value=MAX_BUDGET)


def validate_array(value: Any, max_length: int = 100) -> list[Any]:
    """Return ``value`` truncated to ``max_length`` if it is a list, else []."""
    if not isinstance(value, list):
        return []
    return value[:max_length]


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and bool(EMAIL_RE.match(email))


def sanitize_for_ai_prompt(value: Any) -> str:
    """Sanitize user text before it is interpolated into an LLM prompt."""
    sanitized = sanitize_string(value)
    for pattern in PROMPT_INJECTION_PATTERNS:
        sanitized = pattern.sub("", sanitized)
    return sanitized


def parse_match_request(payload: Any) -> WeddingRequirements:
    """Build matching requirements from a request body.

    Raises:
        ValidationError: If the location is missing, empty or whitespace-only
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    location = sanitize_string(payload.get("location"))
    if not location:
        raise ValidationError("Valid location is required")

    style = sanitize_string(payload.get("style")) or None
    preferences = [
        p for p in (sanitize_string(item) for item in validate_array(payload.get("preferences"), MAX_PREFERENCES))
        if p
    ]

    return WeddingRequirements(
        location=location,
        guest_count=validate_guest_count(payload.get("guest_count")),
        budget_total=validate_budget(payload.get("budget_total")),
        style=style,
        date=sanitize_string(payload.get("date")) or None,
        preferences=preferences,
    )


def validate_vendor(vendor: Vendor) -> list[str]:
    """Return data-quality problems for a vendor record (empty when clean)."""
    errors: list[str] = []

    if not vendor.name:
        errors.append("Missing name")
    if not vendor.email:
        errors.append("Missing email")
    elif not is_valid_email(vendor.email):
        errors.append(f"Invalid email format: {vendor.email}")
    if not vendor.location:
        errors.append("Missing location")
    if not vendor.description:
        errors.append("Missing description")
    elif len(vendor.description) < 50:
        errors.append(f"Description too short ({len(vendor.description)} chars, need 50+)")
    elif len(vendor.description) > 500:
        errors.append(f"Description too long ({len(vendor.description)} chars, max 500)")

    if len(vendor.styles) < 2:
        errors.append("Need at least 2 style tags")
    elif len(vendor.styles) > 6:
        errors.append("Too many style tags (max 6)")

    if vendor.price_min and vendor.price_max and vendor.price_min >= vendor.price_max:
        errors.append(
            f"price_min ({vendor.price_min}) must be less than price_max ({vendor.price_max})"
        )

    if vendor.category in (VendorCategory.VENUE, VendorCategory.CATERING) and not vendor.capacity:
        errors.append("VENUE and CATERING must have capacity")

    if vendor.capacity and vendor.max_guests:
        if vendor.capacity is VendorCapacity.SMALL and vendor.max_guests >= 50:
            errors.append("SMALL capacity should be < 50 guests")
        if vendor.capacity is VendorCapacity.MEDIUM and not 50 <= vendor.max_guests < 150:
            errors.append("MEDIUM capacity should be 50-150 guests")
        if vendor.capacity is VendorCapacity.LARGE and vendor.max_guests < 150:
            errors.append("LARGE capacity should be 150+ guests")

    if vendor.phone and not AU_PHONE_RE.match(vendor.phone):
        errors.append(f'Phone format should be "02 XXXX XXXX" or "04XX XXX XXX": {vendor.phone}')

    if vendor.website and not vendor.website.startswith(("https://", "http://")):
        errors.append(f"Website should start with https:// or http://: {vendor.website}")

    return errors
