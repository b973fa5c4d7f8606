"""Render vendor matches as a chat message.

The output is display text for the planning chat, not a machine format.
Only venues, photographers and caterers get a section, even though other
categories count toward the total.
"""

from __future__ import annotations

from wedding_outreach.models import VendorMatch, VendorMatches

VENUE_DESCRIPTION_CHARS = 150
DEFAULT_DESCRIPTION_CHARS = 130

CLOSING_LINE = "Would you like me to reach out to any of these vendors on your behalf?"


def _dollars(cents: int) -> float:
    return cents / 100


def _price_thousands(min_cents: int, max_cents: int, decimals: int) -> str:
    low = _dollars(min_cents) / 1000
    high = _dollars(max_cents) / 1000
    return f"${low:.{decimals}f}k-{high:.{decimals}f}k"


def _price_per_person(min_cents: int, max_cents: int) -> str:
    def fmt(cents: int) -> str:
        return f"{cents // 100}" if cents % 100 == 0 else f"{_dollars(cents):.2f}"
    return f"${fmt(min_cents)}-{fmt(max_cents)}/person"


def _format_entry(match: VendorMatch, facts: list[str], description_chars: int) -> str:
    vendor = match.vendor
    lines = [f"**{vendor.name}**"]
    lines.append(" • ".join([f"📍 {vendor.location or ''}"] + facts))
    lines.append(f"{vendor.description[:description_chars]}...")
    if match.match_reasons:
        lines.append(f"✨ {' • '.join(match.match_reasons)}")
    if vendor.website:
        contact = f"🔗 [Visit Website]({vendor.website})"
        if vendor.phone:
            contact += f" • 📞 {vendor.phone}"
        lines.append(contact)
    return "\n".join(lines) + "\n\n"


def _venue_facts(match: VendorMatch) -> list[str]:
    vendor = match.vendor
    facts = []
    if vendor.max_guests:
        facts.append(f"👥 Up to {vendor.max_guests} guests")
    if vendor.price_min and vendor.price_max:
        facts.append(f"💰 {_price_thousands(vendor.price_min, vendor.price_max, 0)}")
    return facts


def _photographer_facts(match: VendorMatch) -> list[str]:
    vendor = match.vendor
    if vendor.price_min and vendor.price_max:
        return [f"💰 {_price_thousands(vendor.price_min, vendor.price_max, 1)}"]
    return []


def _caterer_facts(match: VendorMatch) -> list[str]:
    vendor = match.vendor
    if vendor.price_min and vendor.price_max:
        return [f"💰 {_price_per_person(vendor.price_min, vendor.price_max)}"]
    return []


SECTIONS = (
    ("🏰 Venues", "venues", _venue_facts, VENUE_DESCRIPTION_CHARS),
    ("📸 Photographers", "photographers", _photographer_facts, DEFAULT_DESCRIPTION_CHARS),
    ("🍽️ Caterers", "caterers", _caterer_facts, DEFAULT_DESCRIPTION_CHARS),
)


def format_vendor_matches_for_chat(matches: VendorMatches) -> str:
    """Format matches as a markdown-ish chat message."""
    message = f"Perfect! I found **{matches.total_matches} vendors** that match your wedding vision:\n\n"

    for title, attr, facts, description_chars in SECTIONS:
        entries: list[VendorMatch] = getattr(matches, attr)
        if not entries:
            continue
        message += f"## {title} ({len(entries)})\n\n"
        for match in entries:
            message += _format_entry(match, facts(match), description_chars)

    message += f"\n{CLOSING_LINE}"
    return message
