"""Quick check of dashboard metrics."""

import asyncio

from econ_metrics_dashboard.data import EconomicDataService


async def main() -> None:
    async with EconomicDataService.from_settings() as service:
        print("\nEconomic Dashboard - Metric Check")
        print("=" * 60)

        for metric in service.catalog:
            result = await service.load_metric(metric.metric_id)
            if result.error:
                print(f"  {metric.display_name[:30]:30} | ERROR: {result.error}")
                continue
            if not result.observations:
                print(f"  {metric.display_name[:30]:30} | no data")
                continue

            latest = result.observations[-1]
            print(
                f"  {metric.display_name[:30]:30} | {latest.date} | "
                f"{latest.value:>10.2f} | {result.status.value}"
            )


if __name__ == "__main__":
    asyncio.run(main())
