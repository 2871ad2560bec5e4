from datetime import date, datetime

import pytest

from barbershop.timeslots import (
    TimeSlot,
    format_time_for_display,
    generate_all_time_slots,
    generate_time_slots,
    is_date_in_past,
    is_time_in_past,
    mark_day_unavailable,
    minutes_to_time,
    normalize_time,
    time_to_minutes,
)


def times(slots):
    return [s.time for s in slots]


def test_time_to_minutes():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("09:30") == 570
    assert time_to_minutes("9:30") == 570
    assert time_to_minutes("23:59") == 1439


@pytest.mark.parametrize("bad", ["24:00", "12:60", "noon", "", "12:5", "1230"])
def test_time_to_minutes_rejects_malformed(bad):
    with pytest.raises(ValueError):
        time_to_minutes(bad)


def test_minutes_to_time_pads():
    assert minutes_to_time(0) == "00:00"
    assert minutes_to_time(65) == "01:05"
    assert minutes_to_time(1439) == "23:59"


@pytest.mark.parametrize("bad", [-1, 1440])
def test_minutes_to_time_outside_day(bad):
    with pytest.raises(ValueError):
        minutes_to_time(bad)


def test_conversions_are_inverse_over_whole_day():
    for m in range(1440):
        t = minutes_to_time(m)
        assert time_to_minutes(t) == m
        assert minutes_to_time(time_to_minutes(t)) == t


def test_normalize_time():
    assert normalize_time("9:05") == "09:05"
    assert normalize_time("09:05") == "09:05"


@pytest.mark.parametrize("raw, shown", [
    ("00:00", "12:00 AM"),
    ("00:30", "12:30 AM"),
    ("09:05", "9:05 AM"),
    ("11:59", "11:59 AM"),
    ("12:00", "12:00 PM"),
    ("13:30", "1:30 PM"),
    ("23:45", "11:45 PM"),
])
def test_format_time_for_display(raw, shown):
    assert format_time_for_display(raw) == shown


def test_is_date_in_past():
    today = date(2030, 6, 10)
    assert is_date_in_past(date(2030, 6, 9), today)
    assert not is_date_in_past(today, today)
    assert not is_date_in_past(date(2030, 6, 11), today)


def test_is_time_in_past_uses_minute_granularity():
    now = datetime(2030, 6, 10, 12, 0, 45)
    assert is_time_in_past("11:59", now)
    assert not is_time_in_past("12:00", now)
    assert not is_time_in_past("12:01", now)


def test_working_day_of_thirty_minute_cuts():
    slots = generate_all_time_slots("09:00", "18:00", 30)
    assert len(slots) == 18
    assert slots[0].time == "09:00"
    assert slots[-1].time == "17:30"
    assert all(time_to_minutes(s.time) < time_to_minutes("18:00") for s in slots)
    assert slots[0].formatted == "9:00 AM"
    assert slots[-1].formatted == "5:30 PM"


def test_bookable_is_ordered_subset_of_full_status():
    reserved = ["10:00", "13:30"]
    blackout = ["09:30", "17:00"]
    full = generate_all_time_slots("09:00", "18:00", 30, reserved, blackout)
    bookable = generate_time_slots("09:00", "18:00", 30, reserved, blackout)

    full_times = times(full)
    bookable_times = times(bookable)
    assert len(set(full_times)) == len(full_times)
    assert len(set(bookable_times)) == len(bookable_times)
    assert bookable_times == [t for t in full_times if t in set(bookable_times)]
    assert set(bookable_times) == set(full_times) - set(reserved) - set(blackout)


def test_reserved_slot_marked_in_full_status_and_omitted_when_bookable():
    full = generate_all_time_slots("09:00", "12:00", 30, reserved_times=["10:00"])
    by_time = {s.time: s for s in full}
    assert by_time["10:00"].reserved is True
    assert by_time["10:00"].unavailable is False
    assert by_time["10:30"].reserved is False

    bookable = generate_time_slots("09:00", "12:00", 30, reserved_times=["10:00"])
    assert "10:00" not in times(bookable)
    assert all(not s.reserved and not s.unavailable for s in bookable)


def test_blackout_marks_slot_unavailable():
    full = generate_all_time_slots("09:00", "11:00", 30, blackout_times=["09:30"])
    assert [(s.time, s.unavailable) for s in full] == [
        ("09:00", False),
        ("09:30", True),
        ("10:00", False),
        ("10:30", False),
    ]


def test_unpadded_reservation_times_match_slots():
    full = generate_all_time_slots("09:00", "10:00", 30, reserved_times=["9:30"])
    assert [s.reserved for s in full] == [False, True]


def test_last_slot_starts_before_close():
    assert times(generate_all_time_slots("09:00", "10:00", 45)) == ["09:00", "09:45"]
    assert times(generate_all_time_slots("09:00", "10:30", 45)) == ["09:00", "09:45"]
    assert times(generate_all_time_slots("09:00", "10:31", 45)) == ["09:00", "09:45", "10:30"]
    assert times(generate_time_slots("17:00", "18:00", 45)) == ["17:00", "17:45"]


def test_open_equal_close_is_empty():
    assert generate_all_time_slots("09:00", "09:00", 30) == []
    assert generate_time_slots("09:00", "09:00", 30) == []


def test_non_positive_duration_rejected():
    with pytest.raises(ValueError):
        generate_all_time_slots("09:00", "18:00", 0)


def test_mark_day_unavailable_overrides_every_flag():
    slots = [
        TimeSlot(time="09:00", formatted="9:00 AM", reserved=True),
        TimeSlot(time="09:30", formatted="9:30 AM", unavailable=True),
        TimeSlot(time="10:00", formatted="10:00 AM"),
    ]
    vetoed = mark_day_unavailable(slots)
    assert all(s.unavailable and not s.reserved for s in vetoed)
    assert times(vetoed) == times(slots)
    # originals untouched
    assert slots[0].reserved is True
