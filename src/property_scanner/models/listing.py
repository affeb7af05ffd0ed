"""Listing data models shared by the providers, the scorer and the scanner."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class MarketDescriptor:
    """A scan target parsed from a "City, Region" string."""

    city: str
    region: str = ""

    @classmethod
    def parse(cls, descriptor: str) -> "MarketDescriptor":
        """
        Split a market string on its first comma.

        "Cleveland, OH" -> city="Cleveland", region="OH"
        "Cleveland"     -> city="Cleveland", region=""
        """
        city, _, region = str(descriptor).partition(",")
        return cls(city=city.strip(), region=region.strip())

    def __str__(self) -> str:
        return f"{self.city}, {self.region}" if self.region else self.city


@dataclass(frozen=True)
class RawListing:
    """
    For-sale listing as returned by a listing source.

    Every field except the address is best-effort; providers frequently
    omit price, size or location details.
    """

    address: str
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    price: Optional[float] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    square_footage: Optional[int] = None
    property_type: Optional[str] = None
    listing_id: Optional[str] = None


@dataclass(frozen=True)
class RentEstimate:
    """Monthly rent estimate for a single address."""

    rent: float


@dataclass(frozen=True)
class ScoredListing:
    """
    Listing enriched with rent, expenses and investment metrics.

    Currency fields are whole dollars, percentage fields carry two
    decimals. Instances are built once by the metrics engine and never
    modified afterwards.
    """

    # Listing
    address: str
    city: str
    state: str
    zip_code: str
    price: float
    bedrooms: float
    bathrooms: float
    square_footage: Optional[int]
    property_type: Optional[str]

    # Monthly figures
    estimated_rent: float
    monthly_mortgage: int
    property_tax: int
    insurance: int
    maintenance: int
    property_management: int
    vacancy: int
    total_expenses: int
    cash_flow: int

    # Ratios
    rent_ratio: float
    cap_rate: float
    roi: float

    score: int
    is_good_deal: bool = False
    listing_id: Optional[str] = None

    def expense_breakdown(self) -> Dict[str, int]:
        """Return the monthly expense lines in display order."""
        return {
            "Mortgage": self.monthly_mortgage,
            "Property Tax": self.property_tax,
            "Insurance": self.insurance,
            "Maintenance": self.maintenance,
            "Property Management": self.property_management,
            "Vacancy Reserve": self.vacancy,
        }

    def location(self) -> str:
        parts = [p for p in (self.city, f"{self.state} {self.zip_code}".strip()) if p]
        return ", ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys used by the HTTP layer."""
        return {
            "id": self.listing_id,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "price": self.price,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "squareFeet": self.square_footage,
            "propertyType": self.property_type,
            "estimatedRent": self.estimated_rent,
            "monthlyMortgage": self.monthly_mortgage,
            "propertyTax": self.property_tax,
            "insurance": self.insurance,
            "maintenance": self.maintenance,
            "propertyManagement": self.property_management,
            "vacancy": self.vacancy,
            "totalExpenses": self.total_expenses,
            "cashFlow": self.cash_flow,
            "rentRatio": self.rent_ratio,
            "capRate": self.cap_rate,
            "roi": self.roi,
            "score": self.score,
            "isGoodDeal": self.is_good_deal,
        }

    def __repr__(self) -> str:
        return f"ScoredListing({self.address!r}, ${self.price:,.0f}, score={self.score})"


@dataclass(frozen=True)
class ScanStats:
    """Counters for a whole scan, taken before the result list is truncated."""

    total: int = 0
    good_deals: int = 0
    alerts_sent: int = 0


@dataclass(frozen=True)
class ScanResult:
    """Top-ranked listings of one scan plus its counters."""

    listings: Tuple[ScoredListing, ...] = ()
    stats: ScanStats = field(default_factory=ScanStats)

    def to_dict(self) -> Dict[str, Any]:
        stats = asdict(self.stats)
        return {
            "properties": [listing.to_dict() for listing in self.listings],
            "stats": {
                "total": stats["total"],
                "goodDeals": stats["good_deals"],
                "alertsSent": stats["alerts_sent"],
            },
        }
