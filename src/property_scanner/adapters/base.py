"""Capability interfaces for listing and rent-estimate providers."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..models.listing import RawListing, RentEstimate

DEFAULT_STATUS = "For Sale"
DEFAULT_PROPERTY_TYPE = "Single Family"


class ListingSource(ABC):
    """
    Search for for-sale listings in one market.

    Implementations raise ProviderError on transport, auth, rate-limit or
    malformed-response failures.
    """

    @abstractmethod
    async def search(
        self,
        city: str,
        region: str,
        max_price: float,
        status: str = DEFAULT_STATUS,
        limit: int = 50,
    ) -> List[RawListing]:
        """Return up to `limit` listings priced at or below max_price."""


class RentEstimator(ABC):
    """Estimate monthly rent for an address. Raises ProviderError on failure."""

    @abstractmethod
    async def estimate_rent(self, address: str, property_type: str = DEFAULT_PROPERTY_TYPE) -> RentEstimate:
        """Return the estimated monthly rent."""


class BaseProvider(ListingSource, RentEstimator):
    """
    Base class for data providers that serve both listings and rents.

    Subclasses should use the @register_adapter decorator to register
    themselves with the adapter registry.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Args:
            config: Provider settings from the `provider` config section
        """
        self.config = config

    def is_available(self) -> bool:
        """
        Check if the provider is configured (API keys etc.).

        Returns:
            True if the provider is ready to use
        """
        return True
