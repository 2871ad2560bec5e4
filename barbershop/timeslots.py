# barbershop/timeslots.py

import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, Iterator, List

MINUTES_PER_DAY = 24 * 60

# Transport-level patterns; hours may come without a leading zero ("9:00")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


@dataclass(frozen=True)
class TimeSlot:
    time: str
    formatted: str
    reserved: bool = False
    unavailable: bool = False

    @property
    def bookable(self) -> bool:
        return not self.reserved and not self.unavailable


def time_to_minutes(t: str) -> int:
    """"HH:MM" -> minutes since midnight."""
    if not isinstance(t, str) or not TIME_PATTERN.match(t):
        raise ValueError(f"Invalid time {t!r}, expected HH:MM")
    hours, minutes = t.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(m: int) -> str:
    """Minutes since midnight -> zero-padded "HH:MM"."""
    if not 0 <= m < MINUTES_PER_DAY:
        raise ValueError(f"{m} is outside a single day")
    return f"{m // 60:02d}:{m % 60:02d}"


def normalize_time(t: str) -> str:
    # "9:00" and "09:00" name the same slot
    return minutes_to_time(time_to_minutes(t))


def format_time_for_display(t: str) -> str:
    """"13:05" -> "1:05 PM", "00:30" -> "12:30 AM"."""
    total = time_to_minutes(t)
    hours, minutes = divmod(total, 60)
    period = "PM" if hours >= 12 else "AM"
    if hours == 0:
        display_hours = 12
    elif hours > 12:
        display_hours = hours - 12
    else:
        display_hours = hours
    return f"{display_hours}:{minutes:02d} {period}"


def is_date_in_past(d: date, today: date) -> bool:
    return d < today


def is_time_in_past(t: str, now: datetime) -> bool:
    # minute granularity: the current minute is still bookable
    return time_to_minutes(t) < now.hour * 60 + now.minute


def _walk(
    open_time: str,
    close_time: str,
    haircut_duration: int,
    reserved_times: Iterable[str],
    blackout_times: Iterable[str],
) -> Iterator[TimeSlot]:
    if haircut_duration <= 0:
        raise ValueError("haircut_duration must be positive")

    reserved = {normalize_time(t) for t in reserved_times}
    blacked_out = {normalize_time(t) for t in blackout_times}

    start = time_to_minutes(open_time)
    end = time_to_minutes(close_time)

    # any start before closing is a slot, the same rule booking applies
    current = start
    while current < end:
        slot_time = minutes_to_time(current)
        yield TimeSlot(
            time=slot_time,
            formatted=format_time_for_display(slot_time),
            reserved=slot_time in reserved,
            unavailable=slot_time in blacked_out,
        )
        current += haircut_duration


def generate_time_slots(
    open_time: str,
    close_time: str,
    haircut_duration: int,
    reserved_times: Iterable[str] = (),
    blackout_times: Iterable[str] = (),
) -> List[TimeSlot]:
    """Bookable slots only: neither reserved nor blacked out.

    ``blackout_times`` must already be limited to blackouts flagged
    unavailable; see ``availability.unavailable_times``.
    """
    return [
        slot
        for slot in _walk(open_time, close_time, haircut_duration, reserved_times, blackout_times)
        if slot.bookable
    ]


def generate_all_time_slots(
    open_time: str,
    close_time: str,
    haircut_duration: int,
    reserved_times: Iterable[str] = (),
    blackout_times: Iterable[str] = (),
) -> List[TimeSlot]:
    """Every slot in working hours, annotated with reserved/unavailable."""
    return list(_walk(open_time, close_time, haircut_duration, reserved_times, blackout_times))


def mark_day_unavailable(slots: Iterable[TimeSlot]) -> List[TimeSlot]:
    return [replace(slot, unavailable=True, reserved=False) for slot in slots]
