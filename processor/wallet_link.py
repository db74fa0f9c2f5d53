"""Build Catima wallet share links from ticket QR codes."""
import io
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Optional
from urllib.parse import quote, urlencode

import zxingcpp
from PIL import Image, UnidentifiedImageError

from processor.errors import ExternalResourceError
from processor.models import TicketPage, TicketPayload
from processor.slot_times import CONFERENCE_TZ

logger = logging.getLogger(__name__)

SHARE_URL = "https://catima.app/share"
STORE_NAME = "foss-north 2025"
HEADER_COLOR = "-464712"
UNKNOWN_CARD_ID = "[UNKNOWN]"

# Valid from the start of april 14 through the end of april 15
VALID_FROM = datetime(2025, 4, 14, tzinfo=CONFERENCE_TZ)
VALID_UNTIL = datetime(2025, 4, 16, tzinfo=CONFERENCE_TZ)

# encodeURIComponent leaves these unescaped
FRAGMENT_SAFE = "!~*'()"


def decode_qr_code(png_bytes: bytes) -> str:
    """
    Decode the QR code payload from PNG image data.

    Args:
        png_bytes: Raw PNG file contents

    Returns:
        Text encoded in the QR code

    Raises:
        ExternalResourceError: If the image cannot be read or holds no QR code
    """
    try:
        image = Image.open(io.BytesIO(png_bytes))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ExternalResourceError(f"Could not decode the QR image: {e}") from e

    # 8-bit grayscale pixels are all the barcode reader needs
    pixels = image.convert('L')
    logger.info(f"Decoded QR image ({pixels.width}x{pixels.height})")

    barcode = zxingcpp.read_barcode(pixels, formats=zxingcpp.BarcodeFormat.QRCode)
    if barcode is None or not barcode.text:
        raise ExternalResourceError("No QR code found in the ticket image.")
    return barcode.text


def build_payload(barcode: str, holder_name: Optional[str]) -> TicketPayload:
    """
    Describe the wallet card for a ticket.

    Args:
        barcode: Decoded QR payload
        holder_name: Name printed on the ticket, if found

    Returns:
        TicketPayload with the fixed store metadata
    """
    return TicketPayload(
        store=STORE_NAME,
        note="",
        balance="0",
        validfrom=str(_epoch_millis(VALID_FROM)),
        expiry=str(_epoch_millis(VALID_UNTIL)),
        cardid=holder_name if holder_name is not None else UNKNOWN_CARD_ID,
        barcodeid=barcode,
        barcodetype="QR_CODE",
        headercolor=HEADER_COLOR,
    )


def build_wallet_link(payload: TicketPayload) -> str:
    """
    Build the deep link carrying the payload in its fragment.

    The payload is form-encoded first, then percent-encoded as a whole.
    """
    form_data = urlencode(asdict(payload))
    return f"{SHARE_URL}#{quote(form_data, safe=FRAGMENT_SAFE)}"


def ticket_to_wallet_link(ticket: TicketPage) -> str:
    """Decode the ticket QR code and return the wallet link."""
    barcode = decode_qr_code(ticket.qr_png)
    return build_wallet_link(build_payload(barcode, ticket.holder_name))


def _epoch_millis(value: datetime) -> int:
    return round(value.timestamp() * 1000)
