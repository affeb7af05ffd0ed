"""RentCast API client serving for-sale listings and rent estimates."""

import asyncio
import logging
import math
import os
from typing import Any, Dict, List, Optional

import requests

from ..exceptions import ProviderError
from ..models.listing import RawListing, RentEstimate
from ..utils.retry import call_with_retry
from . import register_adapter
from .base import DEFAULT_PROPERTY_TYPE, DEFAULT_STATUS, BaseProvider

logger = logging.getLogger(__name__)

# Transient failures worth another attempt; HTTP errors are not retried
RETRYABLE_ERRORS = (requests.ConnectionError, requests.Timeout)


def _pick(item: Dict[str, Any], keys: List[str]) -> Any:
    for k in keys:
        if item.get(k) not in (None, "", []):
            return item.get(k)
    return None


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_float(value)
    return int(number) if number is not None else None


@register_adapter("rentcast")
class RentCastClient(BaseProvider):
    """
    Client for the RentCast v1 API.

    Endpoints:
    - GET /properties         for-sale search by city/state/max price
    - GET /avm/rent/value     long-term rent estimate for an address

    Blocking requests run in a worker thread so the scan loop can await
    them without stalling the event loop.
    """

    DEFAULT_BASE_URL = "https://api.rentcast.io/v1"

    def __init__(self, config: Optional[Dict[str, Any]] = None, session: Optional[requests.Session] = None):
        super().__init__(config or {})
        self.api_key = self.config.get("api_key") or os.getenv("RENTCAST_API_KEY")
        self.base_url = (
            self.config.get("base_url") or os.getenv("RENTCAST_BASE_URL") or self.DEFAULT_BASE_URL
        ).rstrip("/")
        self.timeout = float(self.config.get("timeout", 30))
        self.max_retries = int(self.config.get("max_retries", 2))
        self.session = session or requests.Session()

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def search(
        self,
        city: str,
        region: str,
        max_price: float,
        status: str = DEFAULT_STATUS,
        limit: int = 50,
    ) -> List[RawListing]:
        params = {
            "city": city,
            "state": region,
            "limit": limit,
            "maxPrice": max_price,
            "status": status,
        }
        data = await asyncio.to_thread(self._get, "/properties", params)

        if isinstance(data, dict):
            data = data.get("listings", data.get("results"))
        if not isinstance(data, list):
            raise ProviderError(f"Unexpected listings payload for {city}, {region}: {type(data).__name__}")

        listings = [self._normalize(item) for item in data if isinstance(item, dict)]
        logger.debug(f"RentCast returned {len(listings)} listings for {city}, {region}")
        return listings

    async def estimate_rent(self, address: str, property_type: str = DEFAULT_PROPERTY_TYPE) -> RentEstimate:
        params = {"address": address, "propertyType": property_type or DEFAULT_PROPERTY_TYPE}
        data = await asyncio.to_thread(self._get, "/avm/rent/value", params)

        if not isinstance(data, dict):
            raise ProviderError(f"Unexpected rent payload for {address}")
        rent = _coerce_float(data.get("rent"))
        return RentEstimate(rent=rent or 0.0)

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        """GET a JSON document, translating every failure to ProviderError."""
        if not self.api_key:
            raise ProviderError("RentCast API key not configured (set RENTCAST_API_KEY)")

        try:
            response = call_with_retry(
                self.session.get,
                f"{self.base_url}{path}",
                params=params,
                headers={"X-Api-Key": self.api_key, "accept": "application/json"},
                timeout=self.timeout,
                max_retries=self.max_retries,
                exceptions=RETRYABLE_ERRORS,
            )
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise ProviderError(f"RentCast {path} returned HTTP {status}") from e
        except ValueError as e:
            raise ProviderError(f"RentCast {path} returned invalid JSON") from e
        except requests.RequestException as e:
            raise ProviderError(f"RentCast {path} request failed: {e}") from e

    def _normalize(self, item: Dict[str, Any]) -> RawListing:
        """Map a RentCast property record onto RawListing."""
        listing_id = _pick(item, ["id", "listingId", "propertyId"])
        return RawListing(
            address=str(_pick(item, ["formattedAddress", "address", "addressLine1"]) or ""),
            city=_pick(item, ["city"]),
            state=_pick(item, ["state"]),
            zip_code=_pick(item, ["zipCode", "zip"]),
            price=_coerce_float(_pick(item, ["price", "listPrice"])),
            bedrooms=_coerce_float(item.get("bedrooms")),
            bathrooms=_coerce_float(item.get("bathrooms")),
            square_footage=_coerce_int(_pick(item, ["squareFootage", "squareFeet"])),
            property_type=_pick(item, ["propertyType"]),
            listing_id=str(listing_id) if listing_id is not None else None,
        )
