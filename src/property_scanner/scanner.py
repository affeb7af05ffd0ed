"""Market scan orchestrator: fetch, enrich, score, alert, rank."""

import asyncio
import logging
from typing import Any, List, Mapping, Optional

from .adapters import get_adapter
from .adapters.base import DEFAULT_PROPERTY_TYPE, DEFAULT_STATUS, ListingSource, RentEstimator
from .config import Configuration, get_env
from .exceptions import ConfigurationError
from .models.listing import MarketDescriptor, RawListing, ScanResult, ScanStats, ScoredListing
from .services.email_sender import SmtpMailTransport
from .services.metrics import analyze_listing
from .services.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

UNKNOWN_ADDRESS = "Address Unknown"


class MarketScanner:
    """
    Scan every configured market and rank the results.

    Coordinates: listing search -> rent estimate -> metrics ->
                 qualification -> alert -> ranking

    Remote calls are made strictly one at a time with a fixed pause after
    each rent lookup. Failures are contained to the market or listing that
    caused them.
    """

    def __init__(
        self,
        listing_source: ListingSource,
        rent_estimator: RentEstimator,
        dispatcher: Optional[NotificationDispatcher] = None,
        request_delay: float = 0.25,
        listing_limit: int = 50,
        max_results: int = 20,
    ):
        self.listing_source = listing_source
        self.rent_estimator = rent_estimator
        self.dispatcher = dispatcher
        self.request_delay = request_delay
        self.listing_limit = listing_limit
        self.max_results = max_results

        # Scans sharing these providers must not interleave their calls
        self._scan_lock = asyncio.Lock()

    async def scan(self, config: Configuration, send_alerts: bool = True) -> ScanResult:
        """
        Run a full scan.

        Args:
            config: Validated scan criteria
            send_alerts: If False, good deals are counted but not emailed

        Returns:
            Top listings by score plus counters for the whole scan
        """
        if not isinstance(config, Configuration):
            raise ConfigurationError("Scan requires a Configuration")

        async with self._scan_lock:
            return await self._run(config, send_alerts)

    async def _run(self, config: Configuration, send_alerts: bool) -> ScanResult:
        logger.info(f"Starting property scan across {len(config.target_markets)} market(s)")

        scored: List[ScoredListing] = []
        good_deals = 0
        alerts_sent = 0

        for market in config.target_markets:
            raw_listings = await self._fetch_market(market, config)

            for raw in raw_listings:
                listing = await self._score_listing(raw, market, config)
                if listing is None:
                    continue

                scored.append(listing)
                if not listing.is_good_deal:
                    continue

                good_deals += 1
                if send_alerts and self.dispatcher is not None:
                    if await self.dispatcher.send_deal_alert(listing):
                        alerts_sent += 1

        # sort() is stable, so equal scores keep scan order
        scored.sort(key=lambda x: x.score, reverse=True)

        stats = ScanStats(total=len(scored), good_deals=good_deals, alerts_sent=alerts_sent)
        logger.info(
            f"Scan complete: {stats.total} properties, {stats.good_deals} good deals, "
            f"{stats.alerts_sent} alerts sent"
        )
        return ScanResult(listings=tuple(scored[: self.max_results]), stats=stats)

    async def _fetch_market(self, market: MarketDescriptor, config: Configuration) -> List[RawListing]:
        """Search one market. Returns [] if the search fails."""
        logger.info(f"Scanning {market}...")

        try:
            raw_listings = await self.listing_source.search(
                market.city,
                market.region,
                config.max_price,
                DEFAULT_STATUS,
                self.listing_limit,
            )
        except Exception as e:
            logger.error(f"Error scanning {market}: {e}")
            return []

        logger.info(f"Found {len(raw_listings)} properties in {market}")
        return list(raw_listings)

    async def _score_listing(
        self, raw: RawListing, market: MarketDescriptor, config: Configuration
    ) -> Optional[ScoredListing]:
        """Enrich one listing with rent and score it. Returns None if any step fails."""
        address = (raw.address or "").strip() or UNKNOWN_ADDRESS
        try:
            listing = normalize_listing(raw, market)
            estimate = await self.rent_estimator.estimate_rent(
                listing.address, listing.property_type or DEFAULT_PROPERTY_TYPE
            )
            return analyze_listing(listing, estimate.rent, config)
        except Exception as e:
            logger.error(f"Error processing {address}: {e}")
            return None
        finally:
            # Rate limiting between rent lookups
            await asyncio.sleep(self.request_delay)


def normalize_listing(raw: RawListing, market: MarketDescriptor) -> RawListing:
    """Fill gaps in a provider listing from the market it was found in."""
    return RawListing(
        address=(raw.address or "").strip() or UNKNOWN_ADDRESS,
        city=raw.city or market.city,
        state=raw.state or market.region,
        zip_code=raw.zip_code or "",
        price=raw.price or 0,
        bedrooms=raw.bedrooms or 0,
        bathrooms=raw.bathrooms or 0,
        square_footage=raw.square_footage or None,
        property_type=raw.property_type,
        listing_id=raw.listing_id,
    )


def build_dispatcher(settings: Optional[Mapping[str, Any]] = None) -> NotificationDispatcher:
    """Create the SMTP-backed dispatcher from the `email` config section and env."""
    settings = settings or {}
    recipient = settings.get("recipient") or get_env("ALERT_EMAIL") or get_env("SMTP_USER")
    return NotificationDispatcher(SmtpMailTransport(), recipient, settings.get("template_dir"))


def build_scanner(settings: Optional[Mapping[str, Any]] = None) -> MarketScanner:
    """
    Create a scanner wired to the configured provider and SMTP alerts.

    Args:
        settings: Full config mapping (uses its `provider` and `email` sections)

    Raises:
        ConfigurationError: If the provider name is unknown
    """
    settings = settings or {}
    provider_settings = dict(settings.get("provider") or {})
    email_settings = settings.get("email") or {}

    provider_name = provider_settings.get("name", "rentcast")
    try:
        provider = get_adapter(provider_name, provider_settings)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    if not provider.is_available():
        logger.warning(f"Provider {provider_name} not available (missing API key?)")

    dispatcher = build_dispatcher(email_settings) if email_settings.get("enabled", True) else None

    return MarketScanner(
        listing_source=provider,
        rent_estimator=provider,
        dispatcher=dispatcher,
        request_delay=float(provider_settings.get("request_delay", 0.25)),
        listing_limit=int(provider_settings.get("listing_limit", 50)),
    )


async def run_scan(
    raw_config: Optional[Mapping[str, Any]],
    *,
    scanner: Optional[MarketScanner] = None,
    send_alerts: bool = True,
) -> ScanResult:
    """
    Scan entry point for external callers (web layer, CLI).

    Args:
        raw_config: Scan criteria mapping (snake_case or camelCase keys)
        scanner: Pre-built scanner; defaults to one built from the environment
        send_alerts: If False, skip emailing good deals

    Raises:
        ConfigurationError: If raw_config is missing or invalid
    """
    config = Configuration.from_dict(raw_config)
    scanner = scanner or build_scanner()
    return await scanner.scan(config, send_alerts=send_alerts)


async def send_test_notification(dispatcher: Optional[NotificationDispatcher] = None) -> bool:
    """Send a test email through the configured transport."""
    dispatcher = dispatcher or build_dispatcher()
    return await dispatcher.send_test_notification()
