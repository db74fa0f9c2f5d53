"""Unit tests for EventProcessor."""
import random

import pytest

from processor.event_processor import STATIC_EVENTS, EventProcessor
from processor.models import CalendarEvent, SpeakerEntry
from processor.slot_times import conference_datetime


def make_speaker(**kwargs):
    fields = {
        'name': 'Ada Lovelace',
        'title': 'Notes on the Analytical Engine',
        'abstract': ['First paragraph.', 'Second paragraph.'],
    }
    fields.update(kwargs)
    return SpeakerEntry(**fields)


def make_event(summary, day, start, end, location=None):
    return CalendarEvent(
        summary=summary,
        start=conference_datetime(day, start),
        end=conference_datetime(day, end),
        location=location,
    )


class TestEventProcessor:
    """Test cases for EventProcessor class."""

    def test_build_event(self):
        """Test a scheduled talk becomes an event."""
        processor = EventProcessor()

        event = processor.build_event(make_speaker(slot='slot1', day='apr14'))

        assert event.summary == 'Notes on the Analytical Engine (Ada Lovelace)'
        assert event.description == 'First paragraph.\n\nSecond paragraph.'
        assert event.location == 'RunAn'
        assert event.start == conference_datetime('apr14', '11:00')
        assert event.end == conference_datetime('apr14', '12:00')

    def test_build_event_with_copresenters(self):
        """Test co-presenters are listed after the speaker."""
        processor = EventProcessor()
        speaker = make_speaker(
            slot='slot2',
            day='apr15',
            copresenters=[{'name': 'Charles Babbage'}, {'name': 'Mary Somerville'}],
        )

        event = processor.build_event(speaker)

        assert event.summary == (
            'Notes on the Analytical Engine '
            '(Ada Lovelace, Charles Babbage, Mary Somerville)'
        )
        assert event.location == 'Scania'

    def test_build_event_half_slot(self):
        """Test an a slot lasts half an hour."""
        processor = EventProcessor()

        event = processor.build_event(make_speaker(slot='slot13a', day='apr14'))

        assert event.start == conference_datetime('apr14', '17:30')
        assert event.end == conference_datetime('apr14', '18:00')

    def test_build_events_skips_unscheduled(self):
        """Test entries without slot or day are dropped."""
        processor = EventProcessor()
        speakers = [
            make_speaker(slot='slot1', day='apr14'),
            make_speaker(slot='slot3'),
            make_speaker(day='apr15'),
            make_speaker(),
        ]

        events = processor.build_events(speakers)

        assert len(events) == 1

    def test_process_speakers_adds_static_events(self):
        """Test the fixed agenda items are always included."""
        processor = EventProcessor()

        events = processor.process_speakers([make_speaker(slot='slot1', day='apr14')])

        assert len(events) == len(STATIC_EVENTS) + 1
        assert [event.summary for event in events[:2]] == [
            'Registration / Mingle',
            'Notes on the Analytical Engine (Ada Lovelace)',
        ]


class TestStaticEvents:
    """Test cases for the fixed agenda items."""

    @pytest.mark.parametrize('index,summary,day,start,end', [
        (0, 'Registration / Mingle', 'apr14', '10:30', '11:00'),
        (1, 'Lunch', 'apr14', '14:00', '15:00'),
        (2, 'Coffee break', 'apr14', '17:00', '17:30'),
        (3, 'Registration / Mingle', 'apr15', '10:30', '11:00'),
        (4, 'Lunch', 'apr15', '14:00', '15:00'),
        (5, 'Coffee break', 'apr15', '16:30', '17:00'),
    ])
    def test_static_events(self, index, summary, day, start, end):
        """Test every fixed item has its literal times and no room."""
        event = EventProcessor().static_events()[index]

        assert event.summary == summary
        assert event.start == conference_datetime(day, start)
        assert event.end == conference_datetime(day, end)
        assert event.location is None
        assert event.description is None


class TestSortEvents:
    """Test cases for event ordering."""

    def test_orders_by_day_end_and_room(self):
        """Test day first, then end time, then RunAn, Scania, no room."""
        processor = EventProcessor()
        day2 = make_event('day2', 'apr15', '11:00', '12:00', 'RunAn')
        lunch = make_event('lunch', 'apr14', '14:00', '15:00')
        scania = make_event('scania', 'apr14', '14:00', '15:00', 'Scania')
        runan = make_event('runan', 'apr14', '14:00', '15:00', 'RunAn')
        early = make_event('early', 'apr14', '11:00', '12:00', 'Scania')

        events = processor.sort_events([day2, lunch, scania, runan, early])

        assert [event.summary for event in events] == [
            'early', 'runan', 'scania', 'lunch', 'day2'
        ]

    def test_sort_is_idempotent(self):
        """Test sorting a sorted list leaves it unchanged."""
        processor = EventProcessor()
        speakers = [
            make_speaker(slot=f'slot{number}', day=day, title=f'Talk {day} {number}')
            for day in ('apr14', 'apr15')
            for number in range(1, 13)
        ]
        events = processor.process_speakers(speakers)
        expected = [event.summary for event in events]

        shuffled = list(events)
        random.Random(4).shuffle(shuffled)

        assert [e.summary for e in processor.sort_events(list(events))] == expected
        assert [e.summary for e in processor.sort_events(shuffled)] == expected
        assert processor.sort_events(list(shuffled)) == shuffled

    def test_equal_events_keep_order(self):
        """Test ties keep their input order."""
        processor = EventProcessor()
        first = make_event('first', 'apr14', '11:00', '12:00')
        second = make_event('second', 'apr14', '10:00', '12:00')

        events = processor.sort_events([first, second])

        assert [event.summary for event in events] == ['first', 'second']


class TestGenerateEventId:
    """Test cases for event identifiers."""

    def test_generate_event_id_consistency(self):
        """Test that identifiers are stable for the same event."""
        processor = EventProcessor()
        event = make_event('Lunch', 'apr14', '14:00', '15:00')
        same = make_event('Lunch', 'apr14', '14:00', '15:00', 'RunAn')

        event_id = processor.generate_event_id(event)

        assert event_id == processor.generate_event_id(same)
        # MD5 in unpadded URL-safe base64
        assert len(event_id) == 22
        assert '=' not in event_id and '+' not in event_id and '/' not in event_id

    @pytest.mark.parametrize('other', [
        ('Coffee break', 'apr14', '14:00', '15:00'),
        ('Lunch', 'apr15', '14:00', '15:00'),
        ('Lunch', 'apr14', '14:30', '15:00'),
        ('Lunch', 'apr14', '14:00', '15:30'),
    ])
    def test_generate_event_id_uniqueness(self, other):
        """Test that changing summary, start or end changes the identifier."""
        processor = EventProcessor()
        event = make_event('Lunch', 'apr14', '14:00', '15:00')

        assert processor.generate_event_id(event) != processor.generate_event_id(make_event(*other))

    def test_generate_uid(self):
        """Test the UID carries the calendar namespace."""
        processor = EventProcessor()
        event = make_event('Lunch', 'apr14', '14:00', '15:00')

        uid = processor.generate_uid(event)

        assert uid == f'net.zegnat.se.foss-north.2025.{processor.generate_event_id(event)}'
