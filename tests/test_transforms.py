"""Tests for derived series calculations."""

import pytest

from econ_metrics_dashboard.indicators import (
    filter_timeframe,
    percentage_change,
    process_for_metric,
    to_frame,
)

from helpers import obs


class TestPercentageChange:
    def test_single_year_over_year_point(self):
        series = [obs("2019-01-01", 100), obs("2020-01-01", 110)]

        assert percentage_change(series) == [obs("2020-01-01", 10.0)]

    def test_zero_previous_value_is_skipped(self):
        series = [obs("2019-01-01", 0), obs("2020-01-01", 100)]

        assert percentage_change(series) == []

    def test_single_point(self):
        assert percentage_change([obs("2020-01-01", 100)]) == []

    def test_empty(self):
        assert percentage_change([]) == []

    def test_monthly_series(self):
        series = [
            obs("2019-01-01", 100),
            obs("2019-02-01", 102),
            obs("2019-03-01", 105),
            obs("2020-01-01", 110),
            obs("2020-02-01", 112),
            obs("2020-03-01", 104),
        ]

        assert percentage_change(series) == [
            obs("2020-01-01", 10.0),
            obs("2020-02-01", 9.8),
            obs("2020-03-01", -0.95),
        ]

    def test_unsorted_input_gives_sorted_output(self):
        series = [
            obs("2021-01-01", 121),
            obs("2019-01-01", 100),
            obs("2020-01-01", 110),
        ]

        assert percentage_change(series) == [
            obs("2020-01-01", 10.0),
            obs("2021-01-01", 10.0),
        ]

    def test_missing_prior_year_is_skipped(self):
        series = [obs("2018-01-01", 100), obs("2020-01-01", 120), obs("2021-01-01", 126)]

        assert percentage_change(series) == [obs("2021-01-01", 5.0)]

    def test_unaligned_months_are_skipped(self):
        series = [obs("2019-01-01", 100), obs("2020-02-01", 110)]

        assert percentage_change(series) == []

    def test_negative_previous_uses_absolute_value(self):
        series = [obs("2019-01-01", -50), obs("2020-01-01", -25)]

        assert percentage_change(series) == [obs("2020-01-01", 50.0)]

    def test_rounding_to_two_decimals(self):
        series = [obs("2019-01-01", 3), obs("2020-01-01", 4)]

        assert percentage_change(series) == [obs("2020-01-01", 33.33)]

    @pytest.mark.parametrize(
        "current, expected",
        [(801, 0.13), (809, 1.13), (799, -0.13)],
    )
    def test_ties_round_away_from_zero(self, current, expected):
        series = [obs("2019-01-01", 800), obs("2020-01-01", current)]

        assert percentage_change(series) == [obs("2020-01-01", expected)]

    def test_quarterly_series(self):
        series = [
            obs("2022-01-01", 200),
            obs("2022-04-01", 210),
            obs("2023-01-01", 220),
            obs("2023-04-01", 0),
            obs("2024-01-01", 198),
            obs("2024-04-01", 5),
        ]

        assert percentage_change(series) == [
            obs("2023-01-01", 10.0),
            obs("2023-04-01", -100.0),
            obs("2024-01-01", -10.0),
        ]


class TestFilterTimeframe:
    SERIES = [
        obs("2010-06-01", 1),
        obs("2019-06-01", 2),
        obs("2023-06-01", 3),
        obs("2024-03-01", 4),
        obs("2024-06-01", 5),
    ]

    def test_none_returns_input(self):
        assert filter_timeframe(self.SERIES, None) is self.SERIES

    def test_one_year_window_ends_at_latest_point(self):
        result = filter_timeframe(self.SERIES, "1Y")

        assert [o.value for o in result] == [3, 4, 5]

    def test_five_years(self):
        assert [o.value for o in filter_timeframe(self.SERIES, "5y")] == [2, 3, 4, 5]

    def test_max_sorts(self):
        result = filter_timeframe(list(reversed(self.SERIES)), "MAX")

        assert result == self.SERIES

    def test_empty_series(self):
        assert filter_timeframe([], "1Y") == []

    def test_unknown_timeframe(self):
        with pytest.raises(ValueError, match="Unknown timeframe"):
            filter_timeframe(self.SERIES, "3M")


class TestProcessForMetric:
    SERIES = [obs("2019-01-01", 100), obs("2020-01-01", 110)]

    def test_rate_style_metric_is_converted(self):
        assert process_for_metric(self.SERIES, "inflation-def") == [obs("2020-01-01", 10.0)]
        assert process_for_metric(self.SERIES, "gdp-growth-def") == [obs("2020-01-01", 10.0)]

    def test_other_metrics_pass_through(self):
        assert process_for_metric(self.SERIES, "unemployment") is self.SERIES
        assert process_for_metric(self.SERIES, "stock-market") is self.SERIES
        assert process_for_metric(self.SERIES, "unknown-metric") is self.SERIES


def test_to_frame():
    df = to_frame([obs("2020-02-01", 2), obs("2020-01-01", 1), obs("2020-02-01", 3)])

    assert list(df["value"]) == [1, 3]
    assert str(df.index[0].date()) == "2020-01-01"


def test_to_frame_empty():
    assert to_frame([]).empty
