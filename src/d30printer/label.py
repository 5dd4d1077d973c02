"""
Label rendering for the D30 Printer.

Draws text on the fixed label canvas, scaling the font so the text fits
inside the margins, then rotates the canvas into the printer's feed
orientation.
"""

import logging
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from .errors import FontError, LabelError

logger = logging.getLogger(__name__)

# Label canvas before rotation (12x40mm label at 203 DPI)
LABEL_WIDTH = 320
LABEL_HEIGHT = 96

MARGIN = 15
# Font size used to measure the text before scaling
REFERENCE_SIZE = 100

# Printed dots are white: the encoder burns red values above the threshold
BACKGROUND = (0, 0, 0)
FOREGROUND = (255, 255, 255)


def load_font(font: Optional[str], size: float):
    """
    Load a font at the given size.

    Args:
        font: System font name or path to a font file. None selects
            Pillow's embedded default font.
        size: Font size in pixels

    Raises:
        FontError: If the font cannot be found or read
    """
    if font is None:
        return ImageFont.load_default(size=size)

    try:
        return ImageFont.truetype(font, size)
    except OSError as e:
        raise FontError(f"Font does not exist: {font!r}") from e


def _fit_size(text: str, font: Optional[str]) -> float:
    reference = load_font(font, REFERENCE_SIZE)
    left, top, right, bottom = reference.getbbox(text)
    text_width = right - left
    text_height = bottom - top
    if text_width <= 0 or text_height <= 0:
        raise LabelError(f"Text has no printable glyphs: {text!r}")

    scale_x = (LABEL_WIDTH - 2 * MARGIN) / text_width
    scale_y = (LABEL_HEIGHT - 2 * MARGIN) / text_height
    return max(REFERENCE_SIZE * min(scale_x, scale_y) - 1, 1)


def render_text(text: str, font: Optional[str] = None) -> Image.Image:
    """Draw text centered on an unrotated label canvas."""
    if not text:
        raise LabelError("Label text is empty")

    size = _fit_size(text, font)
    logger.debug("Rendering %r at font size %.1f", text, size)
    face = load_font(font, size)

    left, top, right, bottom = face.getbbox(text)
    x = (LABEL_WIDTH - (right - left)) / 2 - left
    y = (LABEL_HEIGHT - (bottom - top)) / 2 - top

    canvas = Image.new("RGB", (LABEL_WIDTH, LABEL_HEIGHT), BACKGROUND)
    ImageDraw.Draw(canvas).text((x, y), text, font=face, fill=FOREGROUND)
    return canvas


def render_label(text: str, font: Optional[str] = None) -> Image.Image:
    """
    Render a label ready for the encoder.

    The canvas is rotated 270 degrees clockwise, so the result is
    LABEL_HEIGHT pixels wide and LABEL_WIDTH pixels tall.
    """
    return render_text(text, font).transpose(Image.Transpose.ROTATE_90)
