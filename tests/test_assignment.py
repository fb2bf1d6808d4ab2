"""Unit tests for payday assignment, load tracking, paydays and weekends"""

from datetime import date, datetime, timedelta

import pytest

from invoice_scheduler.engine.assignment import PaydayAssigner, PaydayLoadTracker
from invoice_scheduler.engine.exceptions import InvalidInputError
from invoice_scheduler.engine.paydays import eligible_paydays, next_payday, normalize_paydays
from invoice_scheduler.engine.weekend import adjust_for_weekend, is_weekend

TODAY = date(2025, 3, 3)  # Monday


def day(offset: int) -> date:
    return TODAY + timedelta(days=offset)


class TestPaydayLoadTracker:
    """Tests for PaydayLoadTracker."""

    def test_starts_empty(self):
        tracker = PaydayLoadTracker()
        assert tracker.load(TODAY) == 0
        assert tracker.loads() == {}

    def test_commit_increments(self):
        tracker = PaydayLoadTracker()
        assert tracker.commit(TODAY) == 1
        assert tracker.commit(TODAY) == 2
        tracker.commit(day(7))
        assert tracker.loads() == {TODAY: 2, day(7): 1}

    def test_loads_is_a_copy(self):
        tracker = PaydayLoadTracker()
        tracker.commit(TODAY)
        tracker.loads()[TODAY] = 99
        assert tracker.load(TODAY) == 1


class TestPaydays:
    """Tests for payday normalization and eligibility."""

    def test_normalize_dedupes_by_day_and_sorts(self):
        raw = [day(14), datetime(2025, 3, 3, 9, 30), TODAY, datetime(2025, 3, 17, 23, 0)]
        assert normalize_paydays(raw) == [TODAY, day(14)]

    def test_eligible_keeps_today_and_future(self):
        assert eligible_paydays([day(-14), TODAY, day(14)], TODAY) == [TODAY, day(14)]

    def test_eligible_falls_back_to_latest_past_payday(self):
        assert eligible_paydays([day(-30), day(-2)], TODAY) == [day(-2)]

    def test_eligible_empty_without_paydays(self):
        assert eligible_paydays([], TODAY) == []

    def test_next_payday(self):
        paydays = [day(14), TODAY, day(28)]
        assert next_payday(paydays, TODAY) == day(14)
        assert next_payday(paydays, day(-1)) == TODAY
        assert next_payday(paydays, day(28)) is None


class TestPaydayAssigner:
    """Tests for PaydayAssigner."""

    def test_no_paydays_returns_none(self):
        assigner = PaydayAssigner([], TODAY)
        assert assigner.assign(day(5)) is None
        assert assigner.tracker.loads() == {}

    def test_bucketing_uses_half_open_intervals(self):
        """Test an invoice goes to the payday whose [p_i, p_i+1) holds its due date."""
        assigner = PaydayAssigner([TODAY, day(14), day(35)], TODAY)
        assert assigner.assign(day(1)) == TODAY
        assert assigner.assign(day(13)) == TODAY
        assert assigner.assign(day(14)) == day(14)
        assert assigner.assign(day(34)) == day(14)
        assert assigner.assign(day(35)) == day(35)
        assert assigner.assign(day(400)) == day(35)

    def test_past_paydays_are_not_eligible(self):
        assigner = PaydayAssigner([day(-10), day(7)], TODAY)
        assert assigner.paydays == [day(7)]

    def test_orphan_goes_to_earliest_payday(self):
        """Test an invoice due before every payday is pulled forward, not dropped."""
        assigner = PaydayAssigner([day(7), day(21)], TODAY)
        assert assigner.assign(day(2)) == day(7)
        assert assigner.assign(day(-20)) == day(7)

    def test_fallback_to_most_recent_past_payday(self):
        assigner = PaydayAssigner([day(-30), day(-2)], TODAY)
        assert assigner.assign(day(10)) == day(-2)
        assert assigner.assign(day(-40)) == day(-2)

    def test_every_assignment_is_committed(self):
        assigner = PaydayAssigner([TODAY, day(14)], TODAY)
        for offset in (1, 2, 15):
            assigner.assign(day(offset))
        assert assigner.tracker.loads() == {TODAY: 2, day(14): 1}

    def test_overload_moves_to_earlier_lighter_payday(self):
        """Test the sixth invoice in one interval goes to an earlier, emptier payday."""
        assigner = PaydayAssigner([TODAY, day(7)], TODAY)
        assigned = [assigner.assign(day(8 + n)) for n in range(6)]
        assert assigned == [day(7)] * 5 + [TODAY]
        assert assigner.tracker.loads() == {day(7): 5, TODAY: 1}

    def test_overload_stays_when_no_earlier_payday(self):
        """Test the threshold is advisory: with nowhere to go the invoice stays."""
        assigner = PaydayAssigner([day(11), day(-14), day(-28)], TODAY)
        assigned = [assigner.assign(day(1 + n)) for n in range(6)]
        assert assigned == [day(11)] * 6
        assert assigner.tracker.load(day(11)) == 6

    def test_overload_requires_strictly_lighter_payday(self):
        """Test an earlier payday with the same load is not used."""
        assigner = PaydayAssigner([TODAY, day(7)], TODAY, soft_capacity=2)
        assert assigner.assign(day(1)) == TODAY
        assert assigner.assign(day(2)) == TODAY
        assert assigner.assign(day(8)) == day(7)
        assert assigner.assign(day(9)) == day(7)
        # day(7) is full; TODAY carries 2 as well, so it is not lighter
        assert assigner.assign(day(10)) == day(7)

    def test_overload_prefers_nearest_earlier_payday(self):
        assigner = PaydayAssigner([TODAY, day(7), day(14)], TODAY, soft_capacity=1)
        assert assigner.assign(day(15)) == day(14)
        assert assigner.assign(day(16)) == day(7)

    def test_overload_never_moves_later(self):
        """Test an orphan on the first payday has no earlier option."""
        assigner = PaydayAssigner([day(7), day(14)], TODAY, soft_capacity=1)
        assert assigner.assign(day(1)) == day(7)
        assert assigner.assign(day(2)) == day(7)

    def test_rejects_invalid_capacity(self):
        with pytest.raises(InvalidInputError):
            PaydayAssigner([TODAY], TODAY, soft_capacity=0)


class TestWeekendAdjuster:
    """Tests for adjust_for_weekend."""

    def test_saturday_moves_to_friday(self):
        assert adjust_for_weekend(date(2025, 3, 8)) == (date(2025, 3, 7), True)

    def test_sunday_moves_to_friday(self):
        assert adjust_for_weekend(date(2025, 3, 9)) == (date(2025, 3, 7), True)

    def test_weekdays_unchanged(self):
        for offset in range(5):
            weekday = date(2025, 3, 3) + timedelta(days=offset)
            assert adjust_for_weekend(weekday) == (weekday, False)

    def test_never_lands_on_weekend_or_later(self):
        start = date(2025, 1, 1)
        for offset in range(60):
            original = start + timedelta(days=offset)
            adjusted, was_adjusted = adjust_for_weekend(original)
            assert not is_weekend(adjusted)
            assert adjusted <= original
            assert (original - adjusted).days <= 2
            assert was_adjusted == is_weekend(original)

    def test_moves_across_month_boundary(self):
        """Test Saturday the 1st moves back into the previous month."""
        assert adjust_for_weekend(date(2025, 3, 1)) == (date(2025, 2, 28), True)
