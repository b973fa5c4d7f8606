"""Outreach Service - Vendor inquiry drafting, sending and response tracking.

This module handles:
- Drafting inquiry emails for a set of vendors
- Sending drafts and recording one outreach record per vendor
- Logging vendor replies and quotes
- Dashboard statistics

Interface Contract:
- generate_emails(user_id, user_email, wedding_id, vendor_ids) -> list[OutreachDraft]
- send_batch(user_id, wedding_id, drafts) -> BatchSendResult
- add_response(user_id, outreach_id, response_email, quote, notes) -> VendorOutreach
- dashboard_stats(user_id, wedding_id) -> OutreachStats
- Ownership problems raise OutreachAccessError, missing records OutreachNotFoundError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from wedding_outreach.models import VendorOutreach, Wedding, WeddingStatus
from wedding_outreach.models.wedding import utc_now
from wedding_outreach.services.delivery_service import OutgoingEmail, ResendDeliveryService
from wedding_outreach.services.email_service import EmailService
from wedding_outreach.services.vendor_repository import VendorRepository
from wedding_outreach.services.wedding_store import WeddingStore, new_id

logger = logging.getLogger(__name__)


class OutreachServiceError(Exception):
    """Raised when an outreach operation cannot proceed."""
    pass


class OutreachNotFoundError(OutreachServiceError):
    """The wedding, vendor or outreach record does not exist."""
    pass


class OutreachAccessError(OutreachServiceError):
    """The record belongs to another user."""
    pass


@dataclass
class OutreachDraft:
    """A drafted inquiry waiting to be reviewed and sent."""
    vendor_id: str
    vendor_name: str
    vendor_email: str
    vendor_category: str
    subject: str
    body: str
    generated: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "vendor_id": self.vendor_id,
            "vendor_name": self.vendor_name,
            "vendor_email": self.vendor_email,
            "vendor_category": self.vendor_category,
            "subject": self.subject,
            "body": self.body,
            "generated": self.generated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OutreachDraft":
        """Create from dictionary."""
        return cls(
            vendor_id=str(data.get("vendor_id", "")),
            vendor_name=data.get("vendor_name", ""),
            vendor_email=data.get("vendor_email", ""),
            vendor_category=data.get("vendor_category", ""),
            subject=data.get("subject", ""),
            body=data.get("body", ""),
            generated=data.get("generated", True),
        )


@dataclass
class BatchSendResult:
    """Summary of a batch send."""
    sent: int
    total: int
    errors: int
    outreach_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sent": self.sent,
            "total": self.total,
            "errors": self.errors,
            "outreach_ids": self.outreach_ids,
        }


@dataclass
class OutreachStats:
    """Dashboard counters for a wedding's outreach."""
    total_contacted: int = 0
    delivered: int = 0
    opened: int = 0
    responded: int = 0
    pending: int = 0

    @classmethod
    def from_records(cls, records: list[VendorOutreach]) -> "OutreachStats":
        return cls(
            total_contacted=len(records),
            delivered=sum(1 for r in records if r.delivered),
            opened=sum(1 for r in records if r.opened),
            responded=sum(1 for r in records if r.replied),
            pending=sum(1 for r in records if r.pending),
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "total_contacted": self.total_contacted,
            "delivered": self.delivered,
            "opened": self.opened,
            "responded": self.responded,
            "pending": self.pending,
        }


class OutreachService:
    """Service for contacting vendors and tracking their replies."""

    def __init__(
        self,
        store: WeddingStore,
        vendors: VendorRepository,
        email_service: EmailService | None = None,
        delivery: ResendDeliveryService | None = None,
    ):
        self.store = store
        self.vendors = vendors
        self.email_service = email_service or EmailService()
        self.delivery = delivery or ResendDeliveryService()

    def _owned_wedding(self, user_id: str, wedding_id: str) -> Wedding:
        wedding = self.store.get_wedding(wedding_id)
        if wedding is None:
            raise OutreachNotFoundError("Wedding not found")
        if wedding.user_id != user_id:
            raise OutreachAccessError("Wedding not found or access denied")
        return wedding

    def generate_emails(
        self,
        user_id: str,
        user_email: str,
        wedding_id: str,
        vendor_ids: list[str],
    ) -> list[OutreachDraft]:
        """Draft one inquiry email per vendor.

        Raises:
            OutreachNotFoundError: Unknown wedding or none of the vendors exist
            OutreachAccessError: The wedding belongs to someone else
        """
        wedding = self._owned_wedding(user_id, wedding_id)
        vendors = self.vendors.get_many(vendor_ids)
        if not vendors:
            raise OutreachNotFoundError("No vendors found")

        drafts = []
        for vendor in vendors:
            email = self.email_service.generate_vendor_email(vendor, wedding, user_email)
            drafts.append(OutreachDraft(
                vendor_id=vendor.id,
                vendor_name=vendor.name,
                vendor_email=vendor.email,
                vendor_category=vendor.category.value,
                subject=email.subject,
                body=email.body,
                generated=email.generated,
            ))

        logger.info("[outreach] drafted=%d wedding=%s", len(drafts), wedding_id)
        return drafts

    def send_batch(self, user_id: str, wedding_id: str, drafts: list[OutreachDraft]) -> BatchSendResult:
        """Send drafts and record an outreach entry for each.

        Records are created even for messages that failed to send; those
        have no ``sent_at``.

        Raises:
            OutreachServiceError: No drafts given
            OutreachNotFoundError / OutreachAccessError: Wedding lookup failed
            DeliveryServiceError: Email delivery is not configured
        """
        if not drafts:
            raise OutreachServiceError("At least one email is required")
        wedding = self._owned_wedding(user_id, wedding_id)

        messages = [
            OutgoingEmail(
                to=d.vendor_email,
                subject=d.subject,
                body=d.body,
                tags={"wedding_id": wedding_id, "vendor_id": d.vendor_id, "category": d.vendor_category},
            )
            for d in drafts
        ]
        delivery = self.delivery.send_batch(messages)

        outreach_ids = []
        for draft, message_id in zip(drafts, delivery.message_ids):
            record = self.store.create_outreach(VendorOutreach(
                id=new_id(),
                wedding_id=wedding_id,
                vendor_id=draft.vendor_id,
                email_subject=draft.subject,
                email_body=draft.body,
                message_id=message_id,
                sent_at=utc_now() if message_id else None,
            ))
            outreach_ids.append(record.id)

        wedding.status = WeddingStatus.OUTREACH
        self.store.save_wedding(wedding)

        return BatchSendResult(
            sent=delivery.sent,
            total=len(drafts),
            errors=len(delivery.errors),
            outreach_ids=outreach_ids,
        )

    def add_response(
        self,
        user_id: str,
        outreach_id: str,
        response_email: str,
        *,
        quote: int | None = None,
        notes: str | None = None,
    ) -> VendorOutreach:
        """Record a vendor's reply (and optional quote in cents)."""
        outreach = self.store.get_outreach(outreach_id)
        if outreach is None:
            raise OutreachNotFoundError("Outreach not found or access denied")
        wedding = self.store.get_wedding(outreach.wedding_id)
        if wedding is None or wedding.user_id != user_id:
            raise OutreachNotFoundError("Outreach not found or access denied")

        outreach.response_email = response_email
        outreach.replied = True
        outreach.replied_at = utc_now()
        outreach.quote = quote or None
        outreach.notes = notes or None
        return self.store.save_outreach(outreach)

    def list_outreach(self, user_id: str, wedding_id: str) -> list[VendorOutreach]:
        self._owned_wedding(user_id, wedding_id)
        return self.store.list_outreach(wedding_id)

    def list_responses(self, user_id: str, wedding_id: str) -> list[VendorOutreach]:
        """Replied outreach, most recent reply first."""
        replied = [o for o in self.list_outreach(user_id, wedding_id) if o.replied]
        return sorted(replied, key=lambda o: o.replied_at or o.created_at, reverse=True)

    def dashboard_stats(self, user_id: str, wedding_id: str) -> OutreachStats:
        return OutreachStats.from_records(self.list_outreach(user_id, wedding_id))
