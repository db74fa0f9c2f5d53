"""Scraper for the foss-north ticket view page."""
import base64
import binascii
import logging
import re
from typing import Optional

import requests
from bs4 import BeautifulSoup

from processor.errors import (
    ExternalResourceError,
    InputValidationError,
    QrCodeNotFoundError,
)
from processor.models import TicketPage

logger = logging.getLogger(__name__)

SESSION_ID_PATTERN = re.compile(r'[a-z0-9]{32}')
QR_IMAGE_PATTERN = re.compile(r'data:image/png;base64,([^"]+)"')


def validate_session_id(session_id: Optional[str]) -> str:
    """
    Check that a session id looks like a 32 character Django session key.

    Args:
        session_id: Value from the command line

    Returns:
        The session id unchanged

    Raises:
        InputValidationError: If the value has the wrong shape
    """
    if not isinstance(session_id, str) or not SESSION_ID_PATTERN.fullmatch(session_id):
        raise InputValidationError(
            "Session id must be 32 lowercase letters or digits."
        )
    return session_id


class TicketPageScraper:
    """Fetches and parses the logged-in ticket view."""

    BASE_URL = "https://foss-north.se/events/2025/register/viewticket/"

    def __init__(self, url: Optional[str] = None, timeout: int = 30):
        """
        Initialize the ticket scraper.

        Args:
            url: Ticket view URL (default: BASE_URL)
            timeout: HTTP request timeout in seconds (default: 30)
        """
        self.url = url or self.BASE_URL
        self.timeout = timeout

    def fetch_ticket(self, session_id: str) -> TicketPage:
        """
        Fetch the ticket page and extract holder name and QR image.

        Args:
            session_id: Validated session cookie value

        Returns:
            TicketPage with the decoded PNG bytes

        Raises:
            requests.RequestException: If the request fails
            QrCodeNotFoundError: If the page carries no QR image
        """
        html_content = self._fetch_ticket_html(session_id)
        return self.parse_ticket(html_content)

    def _fetch_ticket_html(self, session_id: str) -> str:
        # Exactly one request, errors are left to the caller
        logger.info("Fetching ticket page")
        response = requests.get(
            self.url,
            headers={'Cookie': f'sessionid={session_id}'},
            timeout=self.timeout
        )
        response.raise_for_status()
        return response.text

    def parse_ticket(self, html_content: str) -> TicketPage:
        """
        Parse the ticket view HTML.

        Args:
            html_content: HTML content of the ticket page

        Returns:
            TicketPage; holder_name is None when it is not on the page
        """
        match = QR_IMAGE_PATTERN.search(html_content)
        if match is None:
            raise QrCodeNotFoundError(
                "Could not find the QRCode on your ticket view."
            )

        return TicketPage(
            holder_name=self._parse_holder_name(html_content),
            qr_png=decode_base64_image(match.group(1)),
        )

    def _parse_holder_name(self, html_content: str) -> Optional[str]:
        soup = BeautifulSoup(html_content, 'html.parser')
        name_elem = soup.find('p', class_='ticket-regname')
        if name_elem is None:
            logger.warning("Ticket holder name not found on ticket page")
            return None
        name = name_elem.get_text(strip=True)
        return name or None


def decode_base64_image(data: str) -> bytes:
    """
    Decode base64 image data, accepting both alphabets and missing padding.

    Raises:
        ExternalResourceError: If the data is not base64
    """
    data = data.strip().replace('+', '-').replace('/', '_').rstrip('=')
    data += '=' * (-len(data) % 4)
    try:
        return base64.urlsafe_b64decode(data)
    except (binascii.Error, ValueError) as e:
        raise ExternalResourceError(f"QR image is not valid base64: {e}") from e
