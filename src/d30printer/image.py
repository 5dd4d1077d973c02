"""
Bitmap Protocol Encoder for the D30 Printer.

Converts bands of a rendered label into the printer's 1-bit packed bitmap
format. Each band is sent as one payload: a fixed preamble followed by the
packed rows.
"""

from typing import Iterator

from PIL import Image

# Vendor preamble sent before every band (1f1124001b401d7630000c004001)
PREAMBLE = bytes([31, 17, 36, 0, 27, 64, 29, 118, 48, 0, 12, 0, 64, 1])

# Row count is a single byte in the protocol
MAX_BAND_HEIGHT = 255

# Red channel values above this burn a dot
THRESHOLD = 127


def iter_bands(height: int, band_height: int = MAX_BAND_HEIGHT) -> Iterator[tuple]:
    """
    Partition rows ``[0, height)`` into bands.

    Yields ``(start, stop)`` pairs in ascending order. Every band has
    ``band_height`` rows except possibly the last one.

    Raises:
        ValueError: If height is not positive or band_height is out of range
    """
    if height <= 0:
        raise ValueError(f"Image height must be positive, got {height}")
    if not 1 <= band_height <= MAX_BAND_HEIGHT:
        raise ValueError(
            f"Band height must be between 1 and {MAX_BAND_HEIGHT}, got {band_height}"
        )

    for start in range(0, height, band_height):
        yield start, min(start + band_height, height)


def encode_band(image: Image.Image) -> bytes:
    """
    Pack one band of an image into printer bytes.

    Only the red channel is looked at: values above 127 become a 1 bit.
    Each row yields ``width // 8`` bytes, leftmost pixel in the MSB.
    Pixels past the last complete group of 8 are dropped.
    Rows are concatenated top to bottom with no padding.
    """
    if image.mode != "RGB":
        image = image.convert("RGB")

    width, height = image.size
    red = image.getchannel("R").tobytes()
    groups = width // 8

    result = bytearray()
    for row in range(height):
        offset = row * width
        for group in range(groups):
            byte = 0
            base = offset + group * 8
            for bit in range(8):
                if red[base + bit] > THRESHOLD:
                    byte |= 1 << (7 - bit)
            result.append(byte)

    return bytes(result)


def build_payload(image: Image.Image) -> bytes:
    """Return the preamble followed by the packed bytes of one band."""
    return PREAMBLE + encode_band(image)
