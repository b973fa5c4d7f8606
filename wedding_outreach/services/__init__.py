"""Service layer - Business logic modules.

Each service module has a clear interface and can be developed/tested independently.
"""

from .chat_formatter import format_vendor_matches_for_chat
from .delivery_service import ResendDeliveryService
from .email_service import EmailService
from .llm_service import LLMService
from .matching_service import MatchingService, find_matching_vendors
from .outreach_service import OutreachService
from .rate_limit import RateLimiter
from .vendor_repository import (
    InMemoryVendorRepository,
    JsonVendorRepository,
    SupabaseVendorRepository,
)
from .wedding_service import WeddingService
from .wedding_store import WeddingStore

__all__ = [
    "EmailService",
    "InMemoryVendorRepository",
    "JsonVendorRepository",
    "LLMService",
    "MatchingService",
    "OutreachService",
    "RateLimiter",
    "ResendDeliveryService",
    "SupabaseVendorRepository",
    "WeddingService",
    "WeddingStore",
    "find_matching_vendors",
    "format_vendor_matches_for_chat",
]
