"""Command line access to the economic data cache."""

import argparse
import asyncio
import logging
import sys

from econ_metrics_dashboard.config import Settings
from econ_metrics_dashboard.data import EconomicDataService
from econ_metrics_dashboard.errors import ConfigurationError, UpstreamFetchError
from econ_metrics_dashboard.indicators import TIMEFRAMES, filter_timeframe


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch and cache FRED economic data")
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show cache status and exit",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Refetch every catalog series and rewrite the cache",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--metric",
        type=str,
        help="Show a dashboard metric (e.g. unemployment)",
    )
    target.add_argument(
        "--series",
        type=str,
        help="Show a FRED series (e.g. UNRATE)",
    )
    parser.add_argument(
        "--timeframe",
        type=str.upper,
        choices=list(TIMEFRAMES),
        help="Limit output to a trailing window",
    )
    parser.add_argument(
        "--pct",
        action="store_true",
        help="Show year-over-year percent change of --series",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not read or write the local cache",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.refresh and args.no_cache:
        parser.error("--refresh writes the cache and cannot be combined with --no-cache")
    return args


def print_status(status: dict[str, dict]) -> None:
    print("\nCache Status:")
    print("-" * 70)
    for series_id, info in sorted(status.items()):
        count = info["observation_count"]
        last = info["last_date"] or "N/A"
        title = info.get("title") or ""
        print(f"{series_id:16} | {count:6} obs | Last: {last:10} | {title}")


def print_observations(label: str, observations: list) -> None:
    print(f"\n{label}: {len(observations)} observations")
    for obs in observations[-12:]:
        print(f"  {obs.date.isoformat()}  {obs.value:>12.2f}")


async def run(args: argparse.Namespace, settings: Settings) -> int:
    async with EconomicDataService.from_settings(settings, persist=not args.no_cache) as service:
        if args.status:
            print_status(await service.cache_status())
            return 0

        if args.refresh:
            settings.validate()
            stored = await service.refresh_all()
            if service.store is None:
                print(f"\nFetched {len(stored)} series (cache disabled, nothing stored)")
            else:
                print(f"\nRefreshed {len(stored)} series")
            for series_id, count in stored.items():
                print(f"  {series_id}: {count} observations")
            return 0

        if args.metric:
            result = await service.load_metric(args.metric)
            if result.error:
                print(f"Error: {result.error}")
                if result.fallback_message:
                    print(result.fallback_message)
                return 1
            print(f"Source: {result.source}")
            print_observations(args.metric, filter_timeframe(result.observations, args.timeframe))
            return 0

        if args.series:
            if args.pct:
                observations = filter_timeframe(
                    await service.get_percentage_change(args.series), args.timeframe
                )
                label = f"{args.series} (YoY %)"
            else:
                observations = await service.get_series(args.series, args.timeframe)
                label = args.series
            print_observations(label, observations)
            return 0

    build_parser().print_help()
    return 0


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    args = parse_args()

    try:
        sys.exit(asyncio.run(run(args, Settings())))
    except ConfigurationError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except UpstreamFetchError as e:
        print(f"API error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
