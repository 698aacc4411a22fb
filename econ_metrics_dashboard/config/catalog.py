"""Dashboard metric definitions and their FRED series."""

from dataclasses import dataclass
from typing import Iterator

from econ_metrics_dashboard.models import SeriesMetadata


# Dashboard groupings: which outlook a metric signals
DEFLATIONARY = "deflationary"
INFLATIONARY = "inflationary"
BOTH = "both"
CATEGORIES = (DEFLATIONARY, INFLATIONARY, BOTH)


@dataclass(frozen=True)
class MetricInfo:
    """A dashboard metric backed by one FRED series."""

    metric_id: str
    series_id: str
    display_name: str
    description: str
    unit: str
    frequency: str
    rate_style: bool = False  # shown as year-over-year % change
    category: str = BOTH

    @property
    def is_percentage(self) -> bool:
        """True when values are shown with a % suffix."""
        return self.rate_style or self.unit.startswith("%")


METRICS: tuple[MetricInfo, ...] = (
    # Growth & inflation (levels converted to growth rates)
    MetricInfo(
        "gdp-growth-def",
        "A191RL1Q225SBEA",
        "Real GDP Growth Rate",
        "Quarterly, Seasonally Adjusted Annual Rate, Percent Change from Preceding Period",
        "%",
        "q",
        category=DEFLATIONARY,
        rate_style=True,
    ),
    MetricInfo(
        "inflation-def",
        "CPIAUCSL",
        "Consumer Price Index for All Urban Consumers: All Items",
        "Monthly, Seasonally Adjusted, Index 1982-1984=100",
        "Index",
        "m",
        category=INFLATIONARY,
        rate_style=True,
    ),
    # Labor market
    MetricInfo(
        "unemployment",
        "UNRATE",
        "Unemployment Rate",
        "Monthly, Seasonally Adjusted, Percent",
        "%",
        "m",
        category=DEFLATIONARY,
    ),
    # Rates
    MetricInfo(
        "short-term-interest",
        "DFF",
        "Federal Funds Effective Rate",
        "Daily, Percent, Not Seasonally Adjusted",
        "%",
        "d",
        category=INFLATIONARY,
    ),
    MetricInfo(
        "long-term-interest",
        "GS10",
        "10-Year Treasury Constant Maturity Rate",
        "Monthly, Percent, Not Seasonally Adjusted",
        "%",
        "m",
        category=BOTH,
    ),
    MetricInfo(
        "yield-curve",
        "T10Y2Y",
        "10-Year Treasury Minus 2-Year Treasury",
        "Daily, Percent, Not Seasonally Adjusted",
        "%",
        "d",
        category=DEFLATIONARY,
    ),
    MetricInfo(
        "mortgage-rate",
        "MORTGAGE30US",
        "30-Year Fixed Rate Mortgage Average",
        "Weekly, Percent, Not Seasonally Adjusted",
        "%",
        "w",
        category=INFLATIONARY,
    ),
    # Debt & money
    MetricInfo(
        "debt-to-gdp",
        "GFDEGDQ188S",
        "Federal Debt: Total Public Debt as Percent of GDP",
        "Quarterly, Percent of GDP",
        "% of GDP",
        "q",
        category=INFLATIONARY,
    ),
    MetricInfo(
        "money-supply",
        "M2SL",
        "M2 Money Stock",
        "Monthly, Seasonally Adjusted, Billions of Dollars",
        "$ Billions",
        "m",
        category=INFLATIONARY,
    ),
    MetricInfo(
        "personal-savings",
        "PSAVERT",
        "Personal Saving Rate",
        "Monthly, Seasonally Adjusted, Percent",
        "%",
        "m",
        category=DEFLATIONARY,
    ),
    # Markets
    MetricInfo(
        "stock-market",
        "SP500",
        "S&P 500 Index",
        "Daily, Close, Not Seasonally Adjusted",
        "Index",
        "d",
        category=BOTH,
    ),
    MetricInfo(
        "market-volatility",
        "VIXCLS",
        "CBOE Volatility Index: VIX",
        "Daily, Close, Not Seasonally Adjusted",
        "Index",
        "d",
        category=DEFLATIONARY,
    ),
    MetricInfo(
        "credit-spreads",
        "BAMLH0A0HYM2",
        "ICE BofA US High Yield Index Option-Adjusted Spread",
        "Daily, Percent, Not Seasonally Adjusted",
        "%",
        "d",
        category=DEFLATIONARY,
    ),
    MetricInfo(
        "housing-prices",
        "CSUSHPINSA",
        "S&P CoreLogic Case-Shiller U.S. National Home Price Index",
        "Monthly, Not Seasonally Adjusted, Index Jan 2000=100",
        "Index",
        "m",
        category=INFLATIONARY,
    ),
)


class MetricCatalog:
    """Lookup between dashboard metric ids and FRED series ids."""

    def __init__(self, metrics: tuple[MetricInfo, ...] | list[MetricInfo] = METRICS) -> None:
        self._by_metric = {m.metric_id: m for m in metrics}
        self._by_series: dict[str, MetricInfo] = {}
        for metric in metrics:
            # first metric registered for a series owns it
            self._by_series.setdefault(metric.series_id, metric)

    def __iter__(self) -> Iterator[MetricInfo]:
        return iter(self._by_metric.values())

    def __len__(self) -> int:
        return len(self._by_metric)

    def __contains__(self, metric_id: object) -> bool:
        return metric_id in self._by_metric

    def get(self, metric_id: str) -> MetricInfo | None:
        return self._by_metric.get(metric_id)

    def resolve_series_id(self, metric_id: str) -> str | None:
        """Return the FRED series id for a metric, or None if unknown."""
        metric = self._by_metric.get(metric_id)
        return metric.series_id if metric else None

    def metric_for_series(self, series_id: str) -> MetricInfo | None:
        return self._by_series.get(series_id)

    def is_rate_style(self, metric_id: str) -> bool:
        metric = self._by_metric.get(metric_id)
        return bool(metric and metric.rate_style)

    def by_category(self, category: str) -> list[MetricInfo]:
        """
        Metrics shown under a dashboard category.

        "both" lists every metric. The deflationary and inflationary views
        also include metrics tagged "both".

        Raises:
            ValueError: If the category is not one of CATEGORIES
        """
        key = category.strip().lower()
        if key not in CATEGORIES:
            raise ValueError(
                f"Unknown category {category!r}. Available: {', '.join(CATEGORIES)}"
            )
        if key == BOTH:
            return list(self)
        return [m for m in self if m.category in (key, BOTH)]

    def series_ids(self) -> list[str]:
        """Distinct series ids in catalog order."""
        return list(self._by_series)

    def metadata_for_series(self, series_id: str) -> SeriesMetadata:
        """
        Build the metadata stored with a cached series.

        Series missing from the catalog get generic FRED defaults and use the
        series id as their metric id.
        """
        metric = self._by_series.get(series_id)
        if metric is None:
            return SeriesMetadata(
                series_id=series_id,
                metric_id=series_id,
                display_name=f"FRED Series {series_id}",
                description="Economic data from FRED",
                unit="",
                frequency="Unknown",
            )
        return SeriesMetadata(
            series_id=series_id,
            metric_id=metric.metric_id,
            display_name=metric.display_name,
            description=metric.description,
            unit=metric.unit,
            frequency=metric.frequency,
        )
