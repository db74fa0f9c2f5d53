"""Slot to wall-clock time calculation for the two conference days."""
import logging
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, NamedTuple, Tuple

from processor.errors import InputValidationError

logger = logging.getLogger(__name__)

# foss-north runs on CEST, a fixed +02:00 for both days
CONFERENCE_TZ = timezone(timedelta(hours=2))
CONFERENCE_DAYS = {
    'apr14': 14,
    'apr15': 15,
}
# The calendar serializer writes UTC, so formatted hours carry the offset
TZ_OFFSET_HOURS = 2

SLOT_PATTERN = re.compile(r'^slot(\d+)(a|b)?$')
TIME_PATTERN = re.compile(r'\d\d:\d\d')

ROOM_ODD = 'RunAn'
ROOM_EVEN = 'Scania'


class HourAdjustment(NamedTuple):
    """Shift applied to a slot time when its slot number matches."""
    reason: str
    applies: Callable[[int], bool]
    delta: float


# None of this is documented by the organizers, it mirrors the printed agenda
START_ADJUSTMENTS: Dict[str, Tuple[HourAdjustment, ...]] = {
    'apr14': (
        HourAdjustment('coffee break after slot 12', lambda n: n > 12, 0.5),
    ),
    'apr15': (
        HourAdjustment('lunch break after slot 6', lambda n: n > 6, 1),
        HourAdjustment('slots 9 and 10 move up for the coffee break',
                       lambda n: n > 8, -0.5),
        HourAdjustment('back on full hours after the coffee break',
                       lambda n: n > 10, 0.5),
    ),
}

END_ADJUSTMENTS: Dict[str, Tuple[HourAdjustment, ...]] = {
    'apr14': (
        HourAdjustment('slots 15 and 16 are half slots', lambda n: n > 14, -0.5),
    ),
    'apr15': (
        HourAdjustment('slots 7 and 8 are half slots',
                       lambda n: n in (7, 8), -0.5),
    ),
}


class Slot(NamedTuple):
    """Parsed slot identifier."""
    number: int
    suffix: str

    @property
    def is_half(self) -> bool:
        return self.suffix in ('a', 'b')

    @property
    def room(self) -> str:
        return ROOM_ODD if self.number % 2 else ROOM_EVEN


def parse_slot(slot_id: str) -> Slot:
    """
    Parse a slot identifier such as ``slot7`` or ``slot13b``.

    Raises:
        InputValidationError: If the identifier is not a slot id
    """
    match = SLOT_PATTERN.match(slot_id)
    if not match:
        raise InputValidationError(f'"{slot_id}" is not a valid slot id.')
    return Slot(number=int(match.group(1)), suffix=match.group(2) or '')


def _check_day(day: str) -> None:
    if day not in CONFERENCE_DAYS:
        raise InputValidationError(
            'foss-north 2025 happens during april 14 and 15.'
        )


def slot_hours(day: str, slot_id: str) -> Tuple[float, float]:
    """
    Compute start and end of a slot as fractional hours of the day.

    Args:
        day: Conference day key ("apr14" or "apr15")
        slot_id: Slot identifier

    Returns:
        Tuple of (start_hour, end_hour), e.g. (9.0, 10.0)
    """
    _check_day(day)
    slot = parse_slot(slot_id)

    # Two tracks, so every pair of slots moves the clock an hour
    start = 8 + math.ceil(slot.number / 2)
    if slot.suffix == 'b':
        start += 0.5
    for adjustment in START_ADJUSTMENTS[day]:
        if adjustment.applies(slot.number):
            start += adjustment.delta

    end = start + (0.5 if slot.is_half else 1)
    for adjustment in END_ADJUSTMENTS[day]:
        if adjustment.applies(slot.number):
            end += adjustment.delta

    return start, end


def hours_to_time(hours: float) -> str:
    """Format fractional hours as hh:mm, shifted by the serializer offset."""
    minutes = '00' if hours % 1 == 0 else '30'
    return f'{math.floor(hours) + TZ_OFFSET_HOURS}:{minutes}'.rjust(5, '0')


def slot_times(day: str, slot_id: str) -> Tuple[str, str]:
    """
    Compute formatted start and end times for a slot.

    Args:
        day: Conference day key ("apr14" or "apr15")
        slot_id: Slot identifier

    Returns:
        Tuple of (start, end) hh:mm strings
    """
    start, end = slot_hours(day, slot_id)
    return hours_to_time(start), hours_to_time(end)


def conference_datetime(day: str, time: str) -> datetime:
    """
    Build a timestamp on one of the conference days.

    Args:
        day: Conference day key ("apr14" or "apr15")
        time: hh:mm string as produced by hours_to_time

    Returns:
        Timezone-aware datetime at UTC+02:00

    Raises:
        InputValidationError: For any other day or a malformed time
    """
    _check_day(day)
    if not isinstance(time, str) or not TIME_PATTERN.fullmatch(time):
        raise InputValidationError('"time" must be a valid hh:mm string.')

    hour, minute = (int(part) for part in time.split(':'))
    if hour > 23 or minute > 59:
        raise InputValidationError(f'"{time}" is not a time of day.')
    return datetime(2025, 4, CONFERENCE_DAYS[day], hour, minute,
                    tzinfo=CONFERENCE_TZ)
