from .listing import (
    MarketDescriptor,
    RawListing,
    RentEstimate,
    ScanResult,
    ScanStats,
    ScoredListing,
)

__all__ = [
    "MarketDescriptor",
    "RawListing",
    "RentEstimate",
    "ScanResult",
    "ScanStats",
    "ScoredListing",
]
