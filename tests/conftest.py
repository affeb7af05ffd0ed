"""Shared fixtures for property-scanner tests."""

import asyncio

import pytest

from property_scanner.adapters.base import ListingSource, RentEstimator
from property_scanner.config import Configuration
from property_scanner.exceptions import ProviderError, TransportError
from property_scanner.models.listing import RawListing, RentEstimate
from property_scanner.services.email_sender import MailTransport
from property_scanner.services.notifications import NotificationDispatcher


class CallTracker:
    """Counts overlapping remote calls across fakes."""

    def __init__(self):
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls = []

    async def enter(self, name, *args):
        self.calls.append((name,) + args)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        # Yield so overlapping calls would be observable
        await asyncio.sleep(0)
        self.in_flight -= 1


class FakeListingSource(ListingSource):
    """Listing source keyed by city; cities in `failing` raise ProviderError."""

    def __init__(self, tracker, listings_by_city=None, failing=()):
        self.tracker = tracker
        self.listings_by_city = listings_by_city or {}
        self.failing = set(failing)

    async def search(self, city, region, max_price, status="For Sale", limit=50):
        await self.tracker.enter("search", city, region, max_price, status, limit)
        if city in self.failing:
            raise ProviderError(f"search failed for {city}")
        return list(self.listings_by_city.get(city, []))[:limit]


class FakeRentEstimator(RentEstimator):
    """Rent estimator keyed by address; addresses in `failing` raise ProviderError."""

    def __init__(self, tracker, rents=None, default_rent=2000.0, failing=()):
        self.tracker = tracker
        self.rents = rents or {}
        self.default_rent = default_rent
        self.failing = set(failing)

    async def estimate_rent(self, address, property_type="Single Family"):
        await self.tracker.enter("rent", address, property_type)
        if address in self.failing:
            raise ProviderError(f"no estimate for {address}")
        return RentEstimate(rent=self.rents.get(address, self.default_rent))


class FakeMailTransport(MailTransport):
    """Records messages; raises TransportError when `fail` is set."""

    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def send(self, recipient, subject, body):
        if self.fail:
            raise TransportError("smtp down")
        self.sent.append((recipient, subject, body))
        return True


@pytest.fixture
def criteria():
    """Raw scan criteria matching the golden listing fixture."""
    return {
        "max_price": 300000,
        "min_rent_ratio": 1.0,
        "min_cash_flow": 200,
        "target_markets": ["Cleveland, OH"],
        "down_payment_percent": 20,
        "interest_rate": 6,
        "property_tax_rate": 1.2,
        "maintenance_percent": 1,
        "vacancy_rate": 8,
        "property_management_percent": 10,
        "insurance_monthly": 150,
    }


@pytest.fixture
def config(criteria):
    return Configuration.from_dict(criteria)


@pytest.fixture
def sample_listing():
    """A $200k single family home."""
    return RawListing(
        address="123 Main St, Cleveland, OH 44102",
        city="Cleveland",
        state="OH",
        zip_code="44102",
        price=200000,
        bedrooms=3,
        bathrooms=2,
        square_footage=1400,
        property_type="Single Family",
        listing_id="rc-1",
    )


@pytest.fixture
def make_listing():
    """Factory for listings with a unique address."""

    def _make(n, price=200000, city="Cleveland", state="OH", **kwargs):
        return RawListing(
            address=f"{n} Test Ave",
            city=city,
            state=state,
            zip_code="44102",
            price=price,
            bedrooms=3,
            bathrooms=1,
            **kwargs,
        )

    return _make


@pytest.fixture
def tracker():
    return CallTracker()


@pytest.fixture
def listing_source(tracker):
    return FakeListingSource(tracker)


@pytest.fixture
def rent_estimator(tracker):
    return FakeRentEstimator(tracker)


@pytest.fixture
def mail_transport():
    return FakeMailTransport()


@pytest.fixture
def dispatcher(mail_transport):
    return NotificationDispatcher(mail_transport, "investor@example.com")
