"""
High-Level D30 Printer Interface.

Splits a rendered label into bands of at most 255 rows and streams them to
the printer one acknowledged write at a time.
"""

import logging

from PIL import Image

from .config import PrintConfig
from .connection import Session
from .discovery import discover
from .errors import ImageError
from .image import build_payload, iter_bands
from .label import render_label

logger = logging.getLogger(__name__)


async def print_job(image: Image.Image, session: Session):
    """
    Send an image to the printer band by band.

    Each band is written and acknowledged before the next one is encoded.
    The first failed write aborts the job; bands after it are never sent.

    Raises:
        ImageError: If the image is empty
        WriteFailed: If a band could not be delivered
    """
    width, height = image.size
    if width <= 0 or height <= 0:
        raise ImageError(f"Cannot print an empty image ({width}x{height})")

    for start, stop in iter_bands(height):
        band = image.crop((0, start, width, stop))
        payload = build_payload(band)
        logger.debug("Sending rows %d-%d (%d bytes)", start, stop, len(payload))
        await session.write(payload)


class D30Printer:
    """
    High-level interface to the D30 label printer.

    Runs one job end to end: discovery, connection, rendering and transfer.
    """

    def __init__(self, config: PrintConfig):
        self.config = config

    def render(self) -> Image.Image:
        """Render the configured label in printer orientation."""
        return render_label(self.config.text, self.config.font)

    async def run(self):
        """
        Find the printer and print the configured label.

        The session is closed whether or not the job succeeds.

        Raises:
            PrinterError: On any discovery, connection, rendering or
                transfer failure
        """
        image = self.render()
        logger.info("Label size: %dx%d pixels", image.width, image.height)

        device = await discover(self.config.criterion(), self.config.scan_time)

        async with await Session.connect(device) as session:
            logger.info("Printing %r...", self.config.text)
            await print_job(image, session)

        logger.info("Print job sent successfully")
