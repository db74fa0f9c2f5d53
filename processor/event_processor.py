"""Event processor turning speaker entries into calendar events."""
import base64
import hashlib
import logging
from typing import Iterable, List, Tuple

from processor.models import CalendarEvent, SpeakerEntry
from processor.slot_times import (
    ROOM_EVEN,
    ROOM_ODD,
    conference_datetime,
    hours_to_time,
    parse_slot,
    slot_times,
)

logger = logging.getLogger(__name__)

# Agenda items that are not in speakers.yaml: (day, summary, start, end)
STATIC_EVENTS: Tuple[Tuple[str, str, float, float], ...] = (
    ('apr14', 'Registration / Mingle', 8.5, 9),
    ('apr14', 'Lunch', 12, 13),
    ('apr14', 'Coffee break', 15, 15.5),
    ('apr15', 'Registration / Mingle', 8.5, 9),
    ('apr15', 'Lunch', 12, 13),
    ('apr15', 'Coffee break', 14.5, 15),
)

ROOM_ORDER = {
    ROOM_ODD: 0,
    ROOM_EVEN: 1,
}

UID_PREFIX = 'net.zegnat.se.foss-north.2025.'


class EventProcessor:
    """Builds, completes and orders the conference events."""

    def process_speakers(self, speakers: Iterable[SpeakerEntry]) -> List[CalendarEvent]:
        """
        Build the full, sorted event list for the calendar.

        Args:
            speakers: Validated speaker entries

        Returns:
            Talks plus the fixed agenda items, sorted for output
        """
        events = self.build_events(speakers)
        events.extend(self.static_events())
        logger.info(f"Built {len(events)} calendar events")
        return self.sort_events(events)

    def build_events(self, speakers: Iterable[SpeakerEntry]) -> List[CalendarEvent]:
        """
        Turn scheduled speaker entries into events.

        Entries without a slot or day are not scheduled yet and are skipped.
        """
        events = []
        skipped = 0

        for speaker in speakers:
            if not speaker.is_scheduled:
                skipped += 1
                continue
            events.append(self.build_event(speaker))

        if skipped:
            logger.info(f"Skipped {skipped} unscheduled speaker entries")
        return events

    def build_event(self, speaker: SpeakerEntry) -> CalendarEvent:
        """
        Build the event for one scheduled talk.

        Args:
            speaker: Speaker entry with both slot and day set

        Returns:
            CalendarEvent with room assigned from the slot track
        """
        start_time, end_time = slot_times(speaker.day, speaker.slot)

        names = [speaker.name]
        names.extend(presenter.name for presenter in speaker.copresenters or [])

        return CalendarEvent(
            summary=f"{speaker.title} ({', '.join(names)})",
            start=conference_datetime(speaker.day, start_time),
            end=conference_datetime(speaker.day, end_time),
            location=parse_slot(speaker.slot).room,
            description='\n\n'.join(speaker.abstract),
        )

    def static_events(self) -> List[CalendarEvent]:
        """Registration, lunch and coffee breaks for both days."""
        return [
            CalendarEvent(
                summary=summary,
                start=conference_datetime(day, hours_to_time(start)),
                end=conference_datetime(day, hours_to_time(end)),
            )
            for day, summary, start, end in STATIC_EVENTS
        ]

    def sort_events(self, events: List[CalendarEvent]) -> List[CalendarEvent]:
        """
        Order events by day, then end time, then room.

        RunAn sorts before Scania, and both before events without a room.
        The sort is stable for events that compare equal.
        """
        events.sort(key=self._sort_key)
        return events

    @staticmethod
    def _sort_key(event: CalendarEvent):
        return (
            event.start.date(),
            event.end,
            ROOM_ORDER.get(event.location, len(ROOM_ORDER)),
        )

    def generate_event_id(self, event: CalendarEvent) -> str:
        """
        Generate a stable identifier from summary, start and end.

        Args:
            event: Event to identify

        Returns:
            MD5 digest in URL-safe base64 without padding
        """
        hash_obj = hashlib.md5()
        hash_obj.update(event.summary.encode('utf-8'))
        hash_obj.update(str(_epoch_millis(event.start)).encode('utf-8'))
        hash_obj.update(str(_epoch_millis(event.end)).encode('utf-8'))
        return base64.urlsafe_b64encode(hash_obj.digest()).rstrip(b'=').decode('ascii')

    def generate_uid(self, event: CalendarEvent) -> str:
        """Globally namespaced UID for the VEVENT."""
        return f"{UID_PREFIX}{self.generate_event_id(event)}"


def _epoch_millis(value) -> int:
    return round(value.timestamp() * 1000)
