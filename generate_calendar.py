"""Generate the foss-north 2025 iCalendar file from speakers.yaml."""
import logging
import os
import sys
from datetime import datetime, timezone
from typing import List, Optional

from export.ics_writer import IcsCalendarWriter, make_stamp
from log_config import setup_logging
from processor.errors import InputValidationError
from processor.event_processor import EventProcessor
from processor.schedule_loader import load_speakers

DEFAULT_SPEAKERS_FILE = 'speakers.yaml'


def main(argv: Optional[List[str]] = None, now: Optional[datetime] = None) -> int:
    """
    Write the conference calendar to standard output.

    Args:
        argv: Command-line arguments without the program name; an optional
            first argument overrides SPEAKERS_FILE
        now: Clock used for the DTSTAMP of every event (default: current time)

    Returns:
        Process exit status
    """
    if argv is None:
        argv = sys.argv[1:]

    speakers_file = argv[0] if argv else os.environ.get(
        'SPEAKERS_FILE', DEFAULT_SPEAKERS_FILE
    )
    setup_logging(os.environ.get('LOG_LEVEL', 'INFO'))
    logger = logging.getLogger(__name__)

    try:
        speakers = load_speakers(speakers_file)
        processor = EventProcessor()
        events = processor.process_speakers(speakers)

        stamp = make_stamp(now or datetime.now(timezone.utc))
        calendar_text = IcsCalendarWriter(stamp, processor).render(events)
    except InputValidationError as e:
        logger.error(
            f"Calendar generation failed: {e}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return 1

    # Only write once the whole calendar is built
    sys.stdout.write(calendar_text)
    sys.stdout.flush()
    return 0


if __name__ == '__main__':
    sys.exit(main())
