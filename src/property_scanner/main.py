"""Command-line entry point for the property scanner."""

import argparse
import asyncio
import json
import logging
import sys

from .config import load_config
from .exceptions import ConfigurationError
from .models.listing import MarketDescriptor, ScanResult
from .scanner import build_dispatcher, build_scanner, run_scan, send_test_notification
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _print_summary(result: ScanResult) -> None:
    print("\n=== Property Scanner Results ===")
    print(f"Scanned: {result.stats.total}")
    print(f"Good deals: {result.stats.good_deals}")
    print(f"Alerts sent: {result.stats.alerts_sent}")
    for listing in result.listings[:10]:
        flag = "*" if listing.is_good_deal else " "
        print(f"\n{flag} {listing.address} ({listing.location()})")
        print(
            f"    ${listing.price:,.0f} | rent ${listing.estimated_rent:,.0f}/mo | "
            f"cash flow ${listing.cash_flow:,}/mo | Score: {listing.score}"
        )
        print(f"    Cap rate {listing.cap_rate}% | Rent ratio {listing.rent_ratio}% | ROI {listing.roi}%")


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Property Scanner - find cash-flowing rental deals across target markets"
    )
    parser.add_argument(
        "-c",
        "--config",
        default="./config/config.yaml",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--market",
        help='Only scan this market (e.g., "Cleveland, OH")',
    )
    parser.add_argument(
        "--no-email",
        action="store_true",
        help="Skip sending deal alerts (useful for testing)",
    )
    parser.add_argument(
        "--test-email",
        action="store_true",
        help="Send a test email to verify configuration",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the scan result as JSON",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    setup_logging("DEBUG" if args.verbose else None)

    try:
        settings = load_config(args.config)
    except (FileNotFoundError, ConfigurationError) as e:
        logger.error(str(e))
        sys.exit(1)

    if args.test_email:
        dispatcher = build_dispatcher(settings.get("email"))
        if asyncio.run(send_test_notification(dispatcher)):
            print(f"Test email sent to {dispatcher.recipient}")
        else:
            print("Failed to send test email - check your configuration")
            sys.exit(1)
        return

    criteria = dict(settings["criteria"])
    if args.market:
        for alias in ("targetMarkets", "targetCities", "target_cities"):
            criteria.pop(alias, None)
        criteria["target_markets"] = [str(MarketDescriptor.parse(args.market))]

    try:
        scanner = build_scanner(settings)
        result = asyncio.run(run_scan(criteria, scanner=scanner, send_alerts=not args.no_email))
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_summary(result)


if __name__ == "__main__":
    main()
