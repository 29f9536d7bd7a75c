import itertools
import json
from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.admissibility import (
    AdmissionDecision,
    CandidateReservation,
    RejectionReason,
    calculate_total_price,
    can_cancel,
    evaluate,
    find_conflict,
    is_booking_time_in_past,
    is_within_working_hours,
    load_working_hours,
    overlaps,
)
from app.services.time_utils import REFERENCE_TZ

# Tuesday 10 June 2025, 10:00 in Baku
NOW = datetime(2025, 6, 10, 10, 0, tzinfo=REFERENCE_TZ)
TODAY = date(2025, 6, 10)
TOMORROW = date(2025, 6, 11)
NEXT_MONDAY = date(2025, 6, 16)


def make_field(price="50", working_hours=None):
    return SimpleNamespace(price_per_hour=Decimal(price), working_hours=working_hours)


def booking(start, end, status="CONFIRMED", booking_date=TOMORROW):
    return SimpleNamespace(start_time=start, end_time=end, status=status, booking_date=booking_date)


def candidate(start, end, booking_date=TOMORROW):
    return CandidateReservation(id_field=1, booking_date=booking_date, start_time=start, end_time=end)


class TestEvaluateScenarios:
    def test_admits_free_slot_and_prices_whole_hours(self):
        decision = evaluate(candidate("18:00", "20:00"), make_field(), [], NOW)

        assert decision == AdmissionDecision.admit(Decimal("100.00"))
        assert decision.reason is None

    def test_rejects_overlapping_confirmed_booking(self):
        decision = evaluate(
            candidate("19:00", "21:00"), make_field(), [booking("18:00", "20:00")], NOW
        )

        assert not decision.admitted
        assert decision.reason is RejectionReason.CONFLICT

    def test_adjacent_after_existing_is_admitted(self):
        decision = evaluate(
            candidate("20:00", "21:00"), make_field(), [booking("18:00", "20:00")], NOW
        )

        assert decision.admitted
        assert decision.price == Decimal("50.00")

    def test_adjacent_before_existing_is_admitted(self):
        decision = evaluate(
            candidate("16:00", "18:00"), make_field(), [booking("18:00", "20:00")], NOW
        )

        assert decision.admitted

    def test_disabled_day_rejects_any_time(self):
        schedule = json.dumps(
            {
                "monday": {"open": "00:00", "close": "23:59", "enabled": False},
                "tuesday": {"open": "08:00", "close": "22:00", "enabled": True},
            }
        )

        decision = evaluate(
            candidate("10:00", "11:00", booking_date=NEXT_MONDAY),
            make_field(working_hours=schedule),
            [],
            NOW,
        )

        assert decision.reason is RejectionReason.OUTSIDE_WORKING_HOURS

    def test_start_equal_to_current_time_is_past(self):
        decision = evaluate(candidate("10:00", "11:00", booking_date=TODAY), make_field(), [], NOW)

        assert decision.reason is RejectionReason.PAST_TIME

    def test_missing_field_is_not_found(self):
        decision = evaluate(candidate("18:00", "20:00"), None, [], NOW)

        assert decision.reason is RejectionReason.FIELD_NOT_FOUND
        assert decision.reason.status_code == 404

    def test_checks_short_circuit_in_order(self):
        schedule = json.dumps({"monday": {"open": "08:00", "close": "22:00", "enabled": True}})
        yesterday = date(2025, 6, 9)

        decision = evaluate(
            candidate("18:00", "20:00", booking_date=yesterday),
            make_field(working_hours=schedule),
            [booking("18:00", "20:00", booking_date=yesterday)],
            NOW,
        )

        assert decision.reason is RejectionReason.PAST_TIME

    def test_same_snapshot_gives_same_decision(self):
        field = make_field()
        existing = [booking("18:00", "20:00")]

        first = evaluate(candidate("19:00", "21:00"), field, existing, NOW)
        second = evaluate(candidate("19:00", "21:00"), field, existing, NOW)

        assert first == second


class TestPastTimeCutoff:
    def test_earlier_date_is_past(self):
        assert is_booking_time_in_past(date(2025, 6, 9), "23:00", NOW)

    def test_later_start_today_is_not_past(self):
        assert not is_booking_time_in_past(TODAY, "10:01", NOW)

    def test_future_date_always_passes(self):
        assert not is_booking_time_in_past(TOMORROW, "00:00", NOW)

    def test_naive_now_is_read_as_utc(self):
        # 06:00 UTC is 10:00 in Baku
        naive_now = datetime(2025, 6, 10, 6, 0)

        assert is_booking_time_in_past(TODAY, "10:00", naive_now)
        assert not is_booking_time_in_past(TODAY, "11:00", naive_now)

    def test_utc_evening_is_already_next_day_in_baku(self):
        # 21:00 UTC on the 10th is 01:00 on the 11th in Baku
        utc_now = datetime(2025, 6, 10, 21, 0, tzinfo=timezone.utc)

        assert is_booking_time_in_past(TODAY, "23:00", utc_now)
        assert is_booking_time_in_past(TOMORROW, "00:30", utc_now)
        assert not is_booking_time_in_past(TOMORROW, "02:00", utc_now)


class TestWorkingHours:
    schedule = json.dumps({"wednesday": {"open": "09:00", "close": "21:00", "enabled": True}})

    def test_no_schedule_allows_any_time(self):
        assert is_within_working_hours(TOMORROW, "00:00", "23:59", None)
        assert is_within_working_hours(TOMORROW, "00:00", "23:59", "")

    def test_inside_window(self):
        assert is_within_working_hours(TOMORROW, "09:00", "21:00", self.schedule)

    @pytest.mark.parametrize("start,end", [("08:00", "10:00"), ("20:00", "22:00")])
    def test_outside_window(self, start, end):
        assert not is_within_working_hours(TOMORROW, start, end, self.schedule)

    def test_absent_day_is_closed(self):
        assert not is_within_working_hours(NEXT_MONDAY, "10:00", "11:00", self.schedule)

    def test_missing_open_and_close_use_whole_day(self):
        schedule = json.dumps({"wednesday": {"enabled": True}})

        assert is_within_working_hours(TOMORROW, "00:00", "23:59", schedule)

    def test_accepts_already_decoded_schedule(self):
        schedule = {"wednesday": {"open": "09:00", "close": "21:00", "enabled": True}}

        assert not is_within_working_hours(TOMORROW, "07:00", "08:00", schedule)

    @pytest.mark.parametrize("raw", [{}, "{}", "  {}  "])
    def test_empty_schedule_is_unrestricted(self, raw):
        assert load_working_hours(raw) is None
        assert is_within_working_hours(TOMORROW, "00:00", "23:59", raw)
        assert is_within_working_hours(NEXT_MONDAY, "03:00", "04:00", raw)

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2, 3]", "[]", '"monday"'])
    def test_unreadable_schedule_fails_open(self, raw, caplog):
        with caplog.at_level("WARNING"):
            assert is_within_working_hours(TOMORROW, "03:00", "04:00", raw)

        assert "working hours" in caplog.text

    def test_admitted_bookings_respect_window(self):
        field = make_field(working_hours=self.schedule)
        hours = [f"{hour:02d}:00" for hour in range(24)]

        for start, end in itertools.combinations(hours, 2):
            decision = evaluate(candidate(start, end), field, [], NOW)
            if decision.admitted:
                assert "09:00" <= start and end <= "21:00"


class TestConflicts:
    @pytest.mark.parametrize(
        "start,end",
        [
            ("18:00", "19:00"),  # shares start
            ("17:00", "19:00"),  # covers existing start
            ("19:00", "21:00"),  # covers existing end
            ("18:30", "19:30"),  # inside
            ("17:00", "21:00"),  # contains
        ],
    )
    def test_overlapping_ranges(self, start, end):
        assert overlaps(start, end, booking("18:00", "20:00"))

    @pytest.mark.parametrize("start,end", [("16:00", "18:00"), ("20:00", "22:00")])
    def test_touching_ranges_do_not_overlap(self, start, end):
        assert not overlaps(start, end, booking("18:00", "20:00"))

    def test_cancelled_bookings_do_not_block(self):
        assert find_conflict("18:00", "20:00", [booking("18:00", "20:00", status="CANCELLED")]) is None

    def test_returns_first_conflict(self):
        first = booking("10:00", "12:00")
        second = booking("11:00", "13:00")

        assert find_conflict("11:00", "12:00", [first, second]) is first

    def test_sequentially_admitted_bookings_are_disjoint(self):
        field = make_field()
        hours = [f"{hour:02d}:00" for hour in range(24)]
        admitted = []

        for start, end in itertools.combinations(hours, 2):
            decision = evaluate(candidate(start, end), field, admitted, NOW)
            if decision.admitted:
                admitted.append(booking(start, end))

        for left, right in itertools.combinations(admitted, 2):
            assert left.end_time <= right.start_time or right.end_time <= left.start_time


class TestPricing:
    def test_minutes_are_not_prorated(self):
        assert calculate_total_price(Decimal("40"), "18:30", "20:15") == Decimal("80.00")

    def test_accepts_float_price(self):
        assert calculate_total_price(25.5, "08:00", "11:00") == Decimal("76.50")


class TestCancellation:
    def test_three_hours_ahead_cannot_be_cancelled(self):
        assert not can_cancel(booking("13:00", "14:00", booking_date=TODAY), NOW)

    def test_five_hours_ahead_can_be_cancelled(self):
        assert can_cancel(booking("15:00", "16:00", booking_date=TODAY), NOW)

    def test_exactly_four_hours_ahead_can_be_cancelled(self):
        assert can_cancel(booking("14:00", "15:00", booking_date=TODAY), NOW)

    def test_custom_window(self):
        assert not can_cancel(booking("15:00", "16:00", booking_date=TODAY), NOW, window_hours=6)

    def test_cancelled_booking_cannot_be_cancelled_again(self):
        assert not can_cancel(booking("18:00", "19:00", status="CANCELLED"), NOW)
