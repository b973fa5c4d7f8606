"""Wedding and outreach data models.

Pure data structures with no business logic.
Money is stored as integer cents; timestamps as timezone-aware datetimes.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


def utc_now() -> datetime:
    """Current time (UTC, timezone-aware)."""
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass
class WeddingRequirements:
    """Matching criteria supplied by the caller.

    Only ``location`` is required; every other field is optional and the
    scorer awards zero points for a dimension that is absent.
    """
    location: str
    guest_count: int | None = None
    budget_total: int | None = None
    style: str | None = None
    date: str | None = None
    preferences: list[str] = dataclass_field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "location": self.location,
            "guest_count": self.guest_count,
            "budget_total": self.budget_total,
            "style": self.style,
            "date": self.date,
            "preferences": self.preferences,
        }


class WeddingStatus(Enum):
    """Planning stage of a wedding."""
    PLANNING = "PLANNING"
    MATCHING = "MATCHING"
    OUTREACH = "OUTREACH"
    BOOKED = "BOOKED"


@dataclass
class Wedding:
    """A couple's wedding record."""
    id: str
    user_id: str
    location: str
    wedding_date: date | None = None
    guest_count: int | None = None
    budget_total: int | None = None
    style: str | None = None
    must_haves: list[str] = dataclass_field(default_factory=list)
    dietary_needs: list[str] = dataclass_field(default_factory=list)
    status: WeddingStatus = WeddingStatus.PLANNING
    chat_completed: bool = False
    created_at: datetime = dataclass_field(default_factory=utc_now)
    updated_at: datetime = dataclass_field(default_factory=utc_now)

    def to_requirements(self) -> WeddingRequirements:
        """Matching criteria for this wedding; must-haves act as preference keywords."""
        return WeddingRequirements(
            location=self.location,
            guest_count=self.guest_count,
            budget_total=self.budget_total,
            style=self.style,
            date=_iso(self.wedding_date),
            preferences=list(self.must_haves),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "location": self.location,
            "wedding_date": _iso(self.wedding_date),
            "guest_count": self.guest_count,
            "budget_total": self.budget_total,
            "style": self.style,
            "must_haves": self.must_haves,
            "dietary_needs": self.dietary_needs,
            "status": self.status.value,
            "chat_completed": self.chat_completed,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Wedding":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            location=data.get("location", ""),
            wedding_date=_parse_date(data.get("wedding_date")),
            guest_count=data.get("guest_count"),
            budget_total=data.get("budget_total"),
            style=data.get("style"),
            must_haves=data.get("must_haves", []),
            dietary_needs=data.get("dietary_needs", []),
            status=WeddingStatus(data.get("status", WeddingStatus.PLANNING.value)),
            chat_completed=data.get("chat_completed", False),
            created_at=_parse_datetime(data.get("created_at")) or utc_now(),
            updated_at=_parse_datetime(data.get("updated_at")) or utc_now(),
        )


@dataclass
class VendorOutreach:
    """One inquiry email sent to a vendor and its response tracking."""
    id: str
    wedding_id: str
    vendor_id: str
    email_subject: str
    email_body: str
    message_id: str | None = None
    sent_at: datetime | None = None
    delivered: bool = False
    opened: bool = False
    replied: bool = False
    bounced: bool = False
    replied_at: datetime | None = None
    response_email: str | None = None
    quote: int | None = None
    notes: str | None = None
    created_at: datetime = dataclass_field(default_factory=utc_now)

    @property
    def pending(self) -> bool:
        """Still waiting on the vendor."""
        return not self.replied and not self.bounced

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "wedding_id": self.wedding_id,
            "vendor_id": self.vendor_id,
            "email_subject": self.email_subject,
            "email_body": self.email_body,
            "message_id": self.message_id,
            "sent_at": _iso(self.sent_at),
            "delivered": self.delivered,
            "opened": self.opened,
            "replied": self.replied,
            "bounced": self.bounced,
            "replied_at": _iso(self.replied_at),
            "response_email": self.response_email,
            "quote": self.quote,
            "notes": self.notes,
            "created_at": _iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "VendorOutreach":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            wedding_id=data["wedding_id"],
            vendor_id=data["vendor_id"],
            email_subject=data.get("email_subject", ""),
            email_body=data.get("email_body", ""),
            message_id=data.get("message_id"),
            sent_at=_parse_datetime(data.get("sent_at")),
            delivered=data.get("delivered", False),
            opened=data.get("opened", False),
            replied=data.get("replied", False),
            bounced=data.get("bounced", False),
            replied_at=_parse_datetime(data.get("replied_at")),
            response_email=data.get("response_email"),
            quote=data.get("quote"),
            notes=data.get("notes"),
            created_at=_parse_datetime(data.get("created_at")) or utc_now(),
        )
