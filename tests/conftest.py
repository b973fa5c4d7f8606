"""Test configuration and shared fixtures."""

from datetime import date

import pytest

from wedding_outreach.models import (
    Vendor,
    VendorCategory,
    Wedding,
    WeddingRequirements,
)
from wedding_outreach.models.vendor import VendorCapacity
from wedding_outreach.services.llm_service import LLMServiceError
from wedding_outreach.services.email_service import EmailService
from wedding_outreach.services.delivery_service import DeliveryResult
from wedding_outreach.services.matching_service import MatchingService
from wedding_outreach.services.outreach_service import OutreachService
from wedding_outreach.services.rate_limit import RateLimiter
from wedding_outreach.services.registry import ServiceRegistry
from wedding_outreach.services.vendor_repository import InMemoryVendorRepository
from wedding_outreach.services.wedding_service import WeddingService
from wedding_outreach.services.wedding_store import WeddingStore


# ============================================================================
# Mock Services
# ============================================================================

class MockLLMService:
    """Mock LLM service for tests.

    Set ``response`` to control the return value.
    Set ``should_fail`` (with ``max_failures``) to simulate failures.
    """

    def __init__(self):
        self.response = '{"subject": "Test", "body": "Test body"}'
        self.chat_response = "Congratulations! When is the big day?"
        self.should_fail = False
        self.fail_count = 0
        self.max_failures = 0
        self.call_count = 0
        self.prompts = []
        self.chats = []

    def _maybe_fail(self):
        if self.should_fail and self.fail_count < self.max_failures:
            self.fail_count += 1
            raise LLMServiceError("Mock LLM failure")

    def call(self, prompt: str, *, json_mode: bool = False) -> str:
        self.call_count += 1
        self.prompts.append(prompt)
        self._maybe_fail()
        return self.response

    def chat(self, messages, *, system_prompt=None) -> str:
        self.call_count += 1
        self.chats.append((messages, system_prompt))
        self._maybe_fail()
        return self.chat_response

    def reset(self):
        """Reset counters."""
        self.call_count = 0
        self.fail_count = 0


class MockDeliveryService:
    """Records sent messages and hands back sequential message ids."""

    def __init__(self):
        self.sent = []
        self.fail_indexes = set()

    def send_batch(self, messages):
        result = DeliveryResult()
        for message in messages:
            index = len(self.sent)
            self.sent.append(message)
            if index in self.fail_indexes:
                result.message_ids.append(None)
                result.errors.append(f"failed to send to {message.to}")
            else:
                result.message_ids.append(f"msg_{index}")
        return result


# ============================================================================
# Vendor Fixtures
# ============================================================================

@pytest.fixture
def caves_coastal() -> Vendor:
    """A Newcastle coastal venue."""
    return Vendor(
        id="ven-001",
        name="Caves Coastal",
        category=VendorCategory.VENUE,
        email="bookings@cavescoastal.com.au",
        phone="02 4332 1222",
        website="https://www.cavescoastal.com.au",
        location="Newcastle",
        region="Lake Macquarie",
        suburb="Caves Beach",
        description="Waterfront wedding venue with a seaside ceremony deck, two reception "
                    "rooms and on-site accommodation for guests.",
        price_min=800000,
        price_max=2000000,
        capacity=VendorCapacity.LARGE,
        max_guests=180,
        styles=["Coastal", "Rustic", "Outdoor", "Beachside"],
        services_offered=["Ceremony venue", "Reception venue", "Accommodation"],
        rating=4.8,
    )


@pytest.fixture
def cavanagh_photography() -> Vendor:
    return Vendor(
        id="pho-001",
        name="Cavanagh Photography",
        category=VendorCategory.PHOTOGRAPHER,
        email="info@cavanaghphotography.com.au",
        phone="0407 101 070",
        website="https://cavanaghphotography.com.au",
        location="Newcastle",
        region="Hunter Valley",
        description="Natural, candid wedding photography across Newcastle and the Hunter "
                    "with a small, unobtrusive team.",
        price_min=250000,
        price_max=450000,
        styles=["Natural", "Candid", "Photojournalistic"],
        services_offered=["Full day coverage", "Engagement shoot"],
        rating=4.9,
    )


@pytest.fixture
def wilderness_chef() -> Vendor:
    return Vendor(
        id="cat-001",
        name="The Wilderness Chef",
        category=VendorCategory.CATERING,
        email="cooper@thewildernesschef.com.au",
        phone="0412 345 678",
        website="https://www.thewildernesschef.com.au",
        location="Newcastle",
        region="Newcastle & Hunter",
        description="Open-fire cooking and shared feasting menus built on local produce, "
                    "with vegan and gluten free options.",
        price_min=6500,
        price_max=15000,
        capacity=VendorCapacity.LARGE,
        max_guests=200,
        styles=["Gourmet", "Rustic", "Modern"],
        services_offered=["Shared feasting", "Vegan menus"],
        rating=4.9,
    )


@pytest.fixture
def hunter_florist() -> Vendor:
    """A vendor in a category that never gets its own result list."""
    return Vendor(
        id="flo-001",
        name="Vine & Bloom Florals",
        category=VendorCategory.FLORIST,
        email="studio@vineandbloom.com.au",
        location="Cessnock",
        region="Hunter Valley",
        description="Seasonal garden-style wedding flowers grown and arranged in the Hunter Valley.",
        price_min=150000,
        price_max=600000,
        styles=["Garden", "Rustic"],
        rating=4.8,
    )


@pytest.fixture
def sample_vendors(caves_coastal, cavanagh_photography, wilderness_chef, hunter_florist):
    return [caves_coastal, cavanagh_photography, wilderness_chef, hunter_florist]


@pytest.fixture
def vendor_repository(sample_vendors) -> InMemoryVendorRepository:
    return InMemoryVendorRepository(sample_vendors)


# ============================================================================
# Wedding Fixtures
# ============================================================================

@pytest.fixture
def newcastle_requirements() -> WeddingRequirements:
    """Rustic 150-guest Newcastle wedding on a $50k budget."""
    return WeddingRequirements(
        location="Newcastle",
        guest_count=150,
        budget_total=5000000,
        style="Rustic",
    )


@pytest.fixture
def sample_wedding() -> Wedding:
    return Wedding(
        id="wed-1",
        user_id="couple@example.com",
        location="Newcastle",
        wedding_date=date(2027, 3, 20),
        guest_count=120,
        budget_total=5000000,
        style="Rustic",
        must_haves=["Outdoor ceremony", "Ocean views"],
        dietary_needs=["Vegetarian"],
    )


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def mock_llm() -> MockLLMService:
    return MockLLMService()


@pytest.fixture
def mock_llm_with_email_response(mock_llm: MockLLMService) -> MockLLMService:
    """Mock LLM that returns a drafted vendor email."""
    mock_llm.response = '''{
        "subject": "Wedding Inquiry - March 2027 in Newcastle",
        "body": "Hi Caves Coastal team,\\n\\nWe're planning a rustic wedding..."
    }'''
    return mock_llm


@pytest.fixture
def failing_llm(mock_llm: MockLLMService) -> MockLLMService:
    mock_llm.should_fail = True
    mock_llm.max_failures = 1000
    return mock_llm


@pytest.fixture
def mock_delivery() -> MockDeliveryService:
    return MockDeliveryService()


@pytest.fixture
def wedding_store() -> WeddingStore:
    """In-memory store (no file)."""
    return WeddingStore()


@pytest.fixture
def outreach_service(wedding_store, vendor_repository, mock_llm_with_email_response, mock_delivery):
    return OutreachService(
        wedding_store,
        vendor_repository,
        email_service=EmailService(mock_llm_with_email_response),
        delivery=mock_delivery,
    )


@pytest.fixture
def registry(wedding_store, vendor_repository, mock_llm_with_email_response, outreach_service):
    return ServiceRegistry(
        matching=MatchingService(vendor_repository),
        weddings=WeddingService(wedding_store),
        outreach=outreach_service,
        llm=mock_llm_with_email_response,
        rate_limiter=RateLimiter(),
    )


# ============================================================================
# Flask Fixtures
# ============================================================================

@pytest.fixture
def flask_app(registry, monkeypatch):
    import app as app_module

    monkeypatch.setattr(app_module, "APP_PASSWORD", "letmein")
    app_module.app.config.update(TESTING=True, SERVICES=registry)
    yield app_module.app
    app_module.app.config.pop("SERVICES", None)


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture
def logged_in_client(client):
    with client.session_transaction() as sess:
        sess["user_id"] = "couple@example.com"
        sess["user_email"] = "couple@example.com"
    return client
