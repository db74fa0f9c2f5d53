"""Turn a foss-north ticket into a Catima wallet share link."""
import logging
import os
import sys
from typing import List, Optional

import requests

from log_config import setup_logging
from processor.errors import (
    ExternalResourceError,
    InputValidationError,
    QrCodeNotFoundError,
)
from processor.wallet_link import ticket_to_wallet_link
from scraper.ticket_page import TicketPageScraper, validate_session_id

EXIT_QR_NOT_FOUND = 2


def main(argv: Optional[List[str]] = None) -> int:
    """
    Print the wallet link for the ticket behind a session id.

    Args:
        argv: Command-line arguments without the program name; the first
            one is the sessionid cookie value

    Returns:
        Process exit status
    """
    if argv is None:
        argv = sys.argv[1:]

    ticket_url = os.environ.get('TICKET_URL', TicketPageScraper.BASE_URL)
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
    setup_logging(os.environ.get('LOG_LEVEL', 'INFO'))
    logger = logging.getLogger(__name__)

    try:
        session_id = validate_session_id(argv[0] if argv else None)
        scraper = TicketPageScraper(url=ticket_url, timeout=timeout_seconds)
        ticket = scraper.fetch_ticket(session_id)
        link = ticket_to_wallet_link(ticket)
    except QrCodeNotFoundError as e:
        print(str(e), file=sys.stderr)
        return EXIT_QR_NOT_FOUND
    except (InputValidationError, ExternalResourceError) as e:
        logger.error(
            f"Could not build wallet link: {e}",
            extra={'error_type': type(e).__name__}
        )
        return 1
    except requests.RequestException as e:
        logger.error(
            f"Failed to fetch ticket page: {e}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return 1

    print(link)
    return 0


if __name__ == '__main__':
    sys.exit(main())
