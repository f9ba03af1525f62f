#!/usr/bin/env python3
"""Convert a single matched order and print the comparison outcome.

Fetches the live network catalog and competitor quotes, so the output
reflects current provider pricing rather than the order's settlement time.

Usage:
    python scripts/compare_order.py order.json [--json]
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv

from swapwatch.config import get_settings
from swapwatch.converter import OrderConverter
from swapwatch.feed import FeedError, GardenApiClient, parse_matched_orders
from swapwatch.formatters import build_alert_message
from swapwatch.routing.factory import create_default_aggregator

load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


async def compare(path: Path, as_json: bool) -> int:
    settings = get_settings()

    payload = json.loads(path.read_text())
    # Accept a single order as well as a saved feed response
    if isinstance(payload, dict) and "create_order" in payload:
        payload = [payload]
    page = parse_matched_orders(payload)
    if not page.orders:
        logger.error(f"No valid matched order in {path}")
        return 1

    try:
        catalog = await GardenApiClient.from_settings(settings).get_network_catalog()
    except FeedError as e:
        logger.error(f"Could not load network catalog: {e}")
        return 1

    converter = OrderConverter(create_default_aggregator(settings))
    outcome = await converter.convert(page.orders[0], catalog)
    if outcome is None:
        logger.error(f"Order {page.orders[0].order_id} could not be converted")
        return 1

    if as_json:
        print(json.dumps(outcome.to_dict(), indent=2))
    else:
        print(build_alert_message(outcome))
        print()
        print(f"Volume:          {outcome.volume_usd}")
        print(f"Garden fee:      {outcome.garden_fee_usd}")
        print(f"Fee saved:       {outcome.fee_saved_usd}")
        print(f"Competitor fee:  {outcome.competitor_max_fee_display or '(none)'}")
        print(f"Competitor time: {outcome.competitor_max_time_display or '(none)'}")
        print(f"Time saved:      {outcome.time_saved_display or '(none)'}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Compare one matched order against competitors")
    parser.add_argument("order_file", type=Path, help="JSON file with a matched order")
    parser.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    args = parser.parse_args()

    sys.exit(asyncio.run(compare(args.order_file, args.json)))


if __name__ == "__main__":
    main()
