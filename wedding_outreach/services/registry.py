"""Default service wiring from config.

The Flask app resolves every collaborator through a ServiceRegistry so tests
can swap in in-memory stores and mock providers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import config
from wedding_outreach.services.delivery_service import ResendDeliveryService
from wedding_outreach.services.email_service import EmailService
from wedding_outreach.services.llm_service import BaseLLMService, LLMService
from wedding_outreach.services.matching_service import MatchingService
from wedding_outreach.services.outreach_service import OutreachService
from wedding_outreach.services.rate_limit import RateLimiter
from wedding_outreach.services.vendor_repository import (
    JsonVendorRepository,
    SupabaseVendorRepository,
    VendorRepository,
)
from wedding_outreach.services.wedding_service import WeddingService
from wedding_outreach.services.wedding_store import WeddingStore

logger = logging.getLogger(__name__)


def build_vendor_repository() -> VendorRepository:
    """Supabase when configured, otherwise the local JSON vendor file."""
    if config.SUPABASE_URL and config.SUPABASE_KEY:
        logger.info("[registry] using Supabase vendor store")
        return SupabaseVendorRepository.from_config(config.SUPABASE_URL, config.SUPABASE_KEY)
    return JsonVendorRepository(config.VENDOR_DATA_FILE)


@dataclass
class ServiceRegistry:
    """Collaborators used by the web app."""
    matching: MatchingService
    weddings: WeddingService
    outreach: OutreachService
    llm: BaseLLMService
    rate_limiter: RateLimiter


def build_default_registry() -> ServiceRegistry:
    vendors = build_vendor_repository()
    store = WeddingStore(config.WEDDING_STORE_FILE)
    llm = LLMService.get_instance()
    return ServiceRegistry(
        matching=MatchingService(vendors),
        weddings=WeddingService(store),
        outreach=OutreachService(
            store,
            vendors,
            email_service=EmailService(llm),
            delivery=ResendDeliveryService(),
        ),
        llm=llm,
        rate_limiter=RateLimiter(),
    )
