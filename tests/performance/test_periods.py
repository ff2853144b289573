from datetime import date, datetime, timezone as dt_timezone

import pytest

from performance.periods import (
    MONTH,
    WEEK,
    EvaluationWindow,
    bucket_periods,
    iter_months,
    lookback_range,
    month_window,
    next_period,
    parse_period,
    period_key,
    previous_period,
    span_of,
    week_start,
    window_for,
)


class TestBucketPeriods:
    def test_weekly_buckets_snap_to_mondays(self):
        # 2025-03-05 is a Wednesday, 2025-03-20 a Thursday
        windows = bucket_periods(date(2025, 3, 5), date(2025, 3, 20), WEEK)

        assert [w.start for w in windows] == [date(2025, 3, 3), date(2025, 3, 10), date(2025, 3, 17)]
        assert windows[-1].end == date(2025, 3, 24)
        assert all(w.start.weekday() == 0 for w in windows)

    def test_windows_are_contiguous_and_cover_the_range(self):
        start, end = date(2025, 1, 15), date(2025, 4, 2)
        for granularity in (WEEK, MONTH):
            windows = bucket_periods(start, end, granularity)
            assert windows[0].start <= start
            assert end in windows[-1]
            for prev, nxt in zip(windows, windows[1:]):
                assert prev.end == nxt.start

    def test_monthly_buckets_follow_calendar_months(self):
        windows = bucket_periods(date(2024, 1, 31), date(2024, 3, 1), MONTH)

        assert [(w.start, w.end) for w in windows] == [
            (date(2024, 1, 1), date(2024, 2, 1)),
            (date(2024, 2, 1), date(2024, 3, 1)),
            (date(2024, 3, 1), date(2024, 4, 1)),
        ]
        assert windows[1].last_day == date(2024, 2, 29)

    def test_inverted_range_is_empty(self):
        assert bucket_periods(date(2025, 3, 10), date(2025, 3, 1)) == []

    def test_single_day_range_gives_one_window(self):
        windows = bucket_periods(date(2025, 3, 9), date(2025, 3, 9))
        assert windows == [EvaluationWindow(date(2025, 3, 3), date(2025, 3, 10), WEEK)]

    def test_datetimes_are_reduced_to_dates(self):
        windows = bucket_periods(datetime(2025, 3, 5, 23, 59), datetime(2025, 3, 6, 0, 1))
        assert len(windows) == 1

    def test_aware_datetimes_use_local_dates(self):
        # 02:00 UTC on Monday 2025-03-10 is still Sunday evening in Sao Paulo
        windows = bucket_periods(date(2025, 3, 5), datetime(2025, 3, 10, 2, 0, tzinfo=dt_timezone.utc))
        assert [w.start for w in windows] == [date(2025, 3, 3)]

    def test_unknown_granularity_raises(self):
        with pytest.raises(ValueError):
            bucket_periods(date(2025, 3, 1), date(2025, 3, 2), "quarter")


class TestEvaluationWindow:
    def test_window_is_half_open(self):
        window = window_for(date(2025, 3, 5), WEEK)
        assert date(2025, 3, 3) in window
        assert date(2025, 3, 9) in window
        assert date(2025, 3, 10) not in window

    def test_labels(self):
        assert window_for(date(2025, 3, 5), WEEK).label == "03/03"
        assert window_for(date(2025, 3, 5), MONTH).label == "03/2025"

    def test_span_of_windows(self):
        windows = bucket_periods(date(2025, 3, 5), date(2025, 3, 20))
        span = span_of(windows)
        assert (span.start, span.end) == (date(2025, 3, 3), date(2025, 3, 24))
        assert span_of([]) is None

    def test_week_start_on_monday_is_identity(self):
        assert week_start(date(2025, 3, 3)) == date(2025, 3, 3)
        assert week_start(date(2025, 3, 2)) == date(2025, 2, 24)


class TestPeriodKeys:
    def test_round_trip(self):
        assert period_key(date(2025, 7, 31)) == "2025-07"
        assert parse_period("2025-07") == date(2025, 7, 1)

    @pytest.mark.parametrize(
        "bad", ["2025-13", "2025-7", "25-07", "", None, "2025/07", "9999-12", "0001-01", "0000-05"]
    )
    def test_invalid_period_raises(self, bad):
        with pytest.raises(ValueError):
            parse_period(bad)

    def test_extreme_years_still_have_neighbours(self):
        assert next_period("9998-11") == "9998-12"
        assert previous_period("0002-01") == "0001-12"

    def test_neighbours_cross_year_boundaries(self):
        assert previous_period("2025-01") == "2024-12"
        assert next_period("2024-12") == "2025-01"

    def test_month_window(self):
        window = month_window("2025-02")
        assert (window.start, window.end) == (date(2025, 2, 1), date(2025, 3, 1))

    def test_iter_months_is_inclusive(self):
        assert list(iter_months("2024-11", "2025-02")) == ["2024-11", "2024-12", "2025-01", "2025-02"]
        assert list(iter_months("2025-03", "2025-02")) == []

    def test_lookback_range(self):
        assert lookback_range(date(2025, 3, 31), 30) == (date(2025, 3, 1), date(2025, 3, 31))
