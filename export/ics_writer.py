"""Render conference events as an iCalendar file."""
import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

from icalendar import Calendar, Event

from processor.event_processor import EventProcessor
from processor.models import CalendarEvent
from processor.slot_times import CONFERENCE_TZ

logger = logging.getLogger(__name__)

CALENDAR_NAME = 'foss-north 2025'
PRODUCT_ID = '-//net.zegnat//foss-north 2025 Calendar//EN'
VENUE_ADDRESS = 'Chalmersplatsen 1, 412 58 Göteborg'
STAMP_HOUR = 16

# UTC values at line end, e.g. "DTSTART:20250414T090000Z"
UTC_SUFFIX_PATTERN = re.compile(r'(:\d{8}T\d{6})Z(\r?)$', re.MULTILINE)


def make_stamp(now: datetime) -> datetime:
    """
    Creation stamp shared by every VEVENT.

    Args:
        now: Injected clock value, naive values are taken as UTC

    Returns:
        16:00 on the clock's date in the conference timezone
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(CONFERENCE_TZ).replace(
        hour=STAMP_HOUR, minute=0, second=0, microsecond=0
    )


def event_location(event: CalendarEvent) -> str:
    if event.location:
        return f"{event.location}, {VENUE_ADDRESS}"
    return VENUE_ADDRESS


class IcsCalendarWriter:
    """Writer producing the conference calendar text."""

    def __init__(self, stamp: datetime, processor: Optional[EventProcessor] = None):
        """
        Initialize the writer.

        Args:
            stamp: DTSTAMP value for all events (see make_stamp)
            processor: EventProcessor used to derive UIDs
        """
        self.stamp = stamp
        self.processor = processor or EventProcessor()

    def build_calendar(self, events: List[CalendarEvent]) -> Calendar:
        """
        Wrap events in a VCALENDAR with the fixed header fields.

        Args:
            events: Events in output order

        Returns:
            icalendar Calendar component
        """
        calendar = Calendar()
        calendar.add('version', '2.0')
        calendar.add('prodid', PRODUCT_ID)
        calendar.add('name', CALENDAR_NAME)
        calendar.add('x-wr-calname', CALENDAR_NAME)
        calendar.add('method', 'PUBLISH')

        for event in events:
            calendar.add_component(self._build_vevent(event))

        return calendar

    def _build_vevent(self, event: CalendarEvent) -> Event:
        vevent = Event()
        vevent.add('summary', event.summary)
        # Written as UTC and made floating afterwards, see render()
        vevent.add('dtstart', _as_utc(event.start))
        vevent.add('dtend', _as_utc(event.end))
        vevent.add('location', event_location(event))
        vevent.add('dtstamp', _as_utc(self.stamp))
        if event.description:
            vevent.add('description', event.description)
        vevent.add('uid', self.processor.generate_uid(event))
        return vevent

    def render(self, events: List[CalendarEvent]) -> str:
        """
        Render events to iCalendar text.

        Timestamps come out of the serializer in UTC. Their trailing "Z" is
        dropped so clients read them as local times and do not shift them a
        second time.

        Args:
            events: Events in output order

        Returns:
            Calendar file contents
        """
        text = self.build_calendar(events).to_ical().decode('utf-8')
        text = UTC_SUFFIX_PATTERN.sub(r'\1\2', text)
        logger.info(f"Rendered calendar with {len(events)} events")
        return text


def _as_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc)
