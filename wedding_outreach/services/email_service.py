"""Email Service - Vendor inquiry email generation.

This module handles:
- Personalized inquiry emails from a wedding and a vendor
- A fixed template fallback when the LLM fails or returns garbage

Interface Contract:
- generate_vendor_email(vendor, wedding, user_email) -> EmailResult
- Never raises for LLM problems; check EmailResult.generated instead
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date

from wedding_outreach.models import Vendor, Wedding
from wedding_outreach.services.llm_service import LLMServiceError
from wedding_outreach.services.validation import sanitize_for_ai_prompt

logger = logging.getLogger(__name__)

MAX_SUBJECT_CHARS = 60


@dataclass
class EmailResult:
    """Result of email generation."""
    subject: str
    body: str
    generated: bool = True  # False when the template fallback was used


def _long_date(value: date | None) -> str | None:
    return f"{value.day} {value:%B %Y}" if value else None


def _month_year(value: date | None) -> str:
    return f"{value or date.today():%B %Y}"


class EmailService:
    """Service for vendor inquiry email generation."""

    def __init__(self, llm_service=None):
        """Initialize with optional LLM service dependency.

        Args:
            llm_service: LLM service for generation. If None, uses default.
        """
        self._llm = llm_service

    @property
    def llm(self):
        """Lazy load LLM service."""
        if self._llm is None:
            from wedding_outreach.services.llm_service import LLMService
            self._llm = LLMService.get_instance()
        return self._llm

    def generate_vendor_email(self, vendor: Vendor, wedding: Wedding, user_email: str) -> EmailResult:
        """Generate an inquiry email to a vendor on the couple's behalf.

        Args:
            vendor: The vendor being contacted
            wedding: The couple's wedding details
            user_email: Reply-to address included in the body

        Returns:
            EmailResult: AI-drafted email, or the template when drafting fails
        """
        prompt = self._build_generation_prompt(vendor, wedding, user_email)

        try:
            response = self.llm.call(prompt, json_mode=True)
            return self._parse_email_response(response)
        except (LLMServiceError, ValueError) as e:
            logger.warning("[email] drafting failed for vendor=%s, using template: %s", vendor.id, e)
            return self.fallback_email(vendor, wedding, user_email)

    def _build_generation_prompt(self, vendor: Vendor, wedding: Wedding, user_email: str) -> str:
        """Build prompt for email generation."""
        vendor_name = sanitize_for_ai_prompt(vendor.name)
        location = sanitize_for_ai_prompt(wedding.location)
        style = sanitize_for_ai_prompt(wedding.style or "Not specified")
        must_haves = ", ".join(sanitize_for_ai_prompt(h) for h in wedding.must_haves)
        dietary = ", ".join(sanitize_for_ai_prompt(d) for d in wedding.dietary_needs)

        extras = ""
        if wedding.must_haves:
            extras += f"\n- Must-haves: {must_haves}"
        if wedding.dietary_needs:
            extras += f"\n- Dietary requirements: {dietary}"

        return f'''You are helping a couple contact wedding vendors. Generate a professional, warm, and personalized email inquiry.

VENDOR DETAILS:
- Name: {vendor_name}
- Category: {vendor.category.value}
- Location: {vendor.location or 'Not specified'}
- Services: {', '.join(vendor.services_offered) if vendor.services_offered else 'Not specified'}

WEDDING DETAILS:
- Date: {_long_date(wedding.wedding_date) or 'Flexible'}
- Location: {location}
- Guest Count: {wedding.guest_count or 'To be determined'}
- Style: {style}{extras}

REQUIREMENTS:
1. Subject line under {MAX_SUBJECT_CHARS} characters
2. Open warmly and briefly describe the wedding vision and key details
3. Ask about availability for the date and request pricing/packages
4. Mention 1-2 specific things about their services that appeal to the couple
5. End with a clear call-to-action and the couple's contact email: {user_email}
6. Professional but friendly, Australian English, 200-300 words

Return a JSON object with:
- subject: string (email subject line)
- body: string (email body)

Return ONLY the JSON object, no additional text.'''

    def _parse_email_response(self, response: str) -> EmailResult:
        """Parse LLM response into EmailResult.

        Raises:
            ValueError: If the response is not a JSON object with subject and body
        """
        data = json.loads(response)
        if not isinstance(data, dict):
            raise ValueError("Expected a JSON object")
        subject = str(data.get("subject") or "").strip()
        body = str(data.get("body") or "").strip()
        if not subject or not body:
            raise ValueError("Missing subject or body")
        return EmailResult(subject=subject, body=body)

    def fallback_email(self, vendor: Vendor, wedding: Wedding, user_email: str) -> EmailResult:
        """Template inquiry used when AI drafting is unavailable."""
        category = vendor.category.value.lower()
        date_text = _long_date(wedding.wedding_date) or "a date we're still finalising"
        subject = f"Wedding Inquiry - {vendor.category.value} for {_month_year(wedding.wedding_date)}"

        details = [
            f"• Date: {date_text}",
            f"• Location: {wedding.location}",
            f"• Guest Count: {wedding.guest_count or 'Approximately 50-150'} guests",
        ]
        if wedding.style:
            details.append(f"• Style: {wedding.style}")

        paragraphs = [
            f"Dear {vendor.name} team,",
            "I hope this email finds you well. I'm reaching out regarding "
            f"{category} services for our upcoming wedding.",
            "Wedding Details:\n" + "\n".join(details),
            "We're very interested in learning more about your services and would love to know:\n"
            "1. Are you available for our wedding date?\n"
            "2. What packages do you offer, and what are your rates?\n"
            "3. Do you have any portfolio examples we could review?",
        ]
        if wedding.must_haves:
            paragraphs.append(f"We're particularly looking for: {', '.join(wedding.must_haves[:2])}.")
        paragraphs.extend([
            "Please let me know if you'd like to arrange a call or meeting to discuss our "
            "requirements in more detail.",
            "Looking forward to hearing from you!",
            f"Best regards,\n{user_email}",
        ])

        return EmailResult(subject=subject, body="\n\n".join(paragraphs), generated=False)
