"""Tests for label rendering."""

import pytest
from PIL import Image

from d30printer.errors import FontError, LabelError
from d30printer.label import (
    LABEL_HEIGHT,
    LABEL_WIDTH,
    load_font,
    render_label,
    render_text,
)


class TestRenderText:
    """Test drawing text on the unrotated canvas."""

    def test_canvas_size(self):
        img = render_text("Hello")
        assert img.size == (LABEL_WIDTH, LABEL_HEIGHT)
        assert img.mode == "RGB"

    def test_text_is_white_on_black(self):
        img = render_text("Hello")
        colors = {color for _, color in img.getcolors(maxcolors=LABEL_WIDTH * LABEL_HEIGHT)}
        assert (0, 0, 0) in colors
        assert (255, 255, 255) in colors

    def test_text_stays_on_canvas(self):
        """Scaled text is centered and does not touch the canvas edge."""
        img = render_text("A much longer label text")
        left, top, right, bottom = img.getbbox()
        assert left > 0 and top > 0
        assert right < LABEL_WIDTH and bottom < LABEL_HEIGHT

    def test_empty_text_rejected(self):
        with pytest.raises(LabelError, match="empty"):
            render_text("")


class TestRenderLabel:
    """Test the rotated label handed to the encoder."""

    def test_rotated_size(self):
        img = render_label("Hello")
        assert img.size == (LABEL_HEIGHT, LABEL_WIDTH)

    def test_rotation_is_270_clockwise(self):
        """Top-left of the canvas ends up at the bottom-left."""
        flat = render_text("Hello")
        rotated = render_label("Hello")
        assert rotated.tobytes() == flat.transpose(Image.Transpose.ROTATE_90).tobytes()
        for x, y in [(0, 0), (LABEL_WIDTH - 1, 10), (150, 48)]:
            assert rotated.getpixel((y, LABEL_WIDTH - 1 - x)) == flat.getpixel((x, y))


class TestLoadFont:
    """Test font resolution."""

    def test_default_font(self):
        font = load_font(None, 40)
        assert font.getbbox("D30")[2] > 0

    def test_missing_font_raises(self):
        with pytest.raises(FontError, match="does not exist"):
            load_font("/nonexistent/font.ttf", 40)

    def test_render_with_missing_font_raises(self):
        with pytest.raises(FontError):
            render_label("Hello", font="no-such-font-anywhere.ttf")
