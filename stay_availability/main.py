"""Main entry point for the stay availability engine."""

import argparse
import asyncio
import json
import sys
from datetime import date, timedelta
from typing import Any, Optional

from stay_availability.clients import AvailabilityAPIClient
from stay_availability.config import configure_logging, get_logger, settings
from stay_availability.services import (
    ApschedulerScheduler,
    AvailabilityIndex,
    AvailabilityRefresher,
)

logger = get_logger(__name__)


def build_summary(
    refresher: AvailabilityRefresher,
    days: int,
    today: Optional[date] = None,
) -> dict[str, Any]:
    """Summarize the refresher's index for the next ``days`` days."""
    today = today or date.today()
    index = refresher.index
    return {
        "property_id": index.property_id,
        "property_name": settings.property_name,
        "last_updated": index.last_updated.isoformat() if index.last_updated else None,
        "stale": refresher.is_stale,
        "error": str(refresher.last_error) if refresher.last_error else None,
        "interval_count": len(index),
        "blocked_dates": [
            d.isoformat() for d in index.blocked_dates(today, today + timedelta(days=days - 1))
        ],
    }


async def main(watch: bool = False, days: int = 60) -> int:
    """Refresh availability for the configured property and print a summary.

    With ``watch`` the refresh keeps running on its schedule until
    interrupted.
    """
    missing = settings.validate_property()
    if missing:
        logger.error("Property config incomplete", missing=missing)
        print(json.dumps({"success": False, "error": f"Missing: {', '.join(missing)}"}))
        return 1

    logger.info(
        "Starting stay availability engine",
        environment=settings.environment,
        property_id=settings.property_id,
    )

    index = AvailabilityIndex(settings.property_id)
    scheduler = ApschedulerScheduler()
    refresher = AvailabilityRefresher(index, AvailabilityAPIClient(), scheduler)

    try:
        success = await refresher.start()
        print(json.dumps(build_summary(refresher, days), indent=2, default=str))
        if not watch:
            return 0 if success else 1

        while True:
            await asyncio.sleep(refresher.interval_seconds)
            print(json.dumps(build_summary(refresher, days), default=str))
    finally:
        refresher.stop()
        scheduler.shutdown()


def run_sync(argv: Optional[list[str]] = None) -> int:
    """Parse arguments and run main() synchronously.

    Returns:
        Exit code from main()
    """
    parser = argparse.ArgumentParser(description="Refresh and print property availability")
    parser.add_argument("--watch", action="store_true", help="Keep refreshing on the schedule")
    parser.add_argument("--days", type=int, default=60, help="Days of blocked dates to print")
    args = parser.parse_args(argv)
    configure_logging()
    try:
        return asyncio.run(main(watch=args.watch, days=args.days))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(run_sync())
