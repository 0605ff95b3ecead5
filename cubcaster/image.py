"""In-memory 32-bit pixel images and colour conversion for the display."""

from __future__ import annotations

import sys
from array import array

_TYPECODE = next(code for code in "IL" if array(code).itemsize == 4)
_WORD = 0xFFFFFFFF


class Image:
    """A width x height image of 32-bit 0xAARRGGBB pixels, zero-filled."""

    bpp = 32
    endian = 0

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid image size {width}x{height}")
        self.width = width
        self.height = height
        self.size_line = width * 4
        self.pixels = array(_TYPECODE, bytes(width * height * 4))

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.width + x

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Store ``color`` (truncated to 32 bits) at column x, row y."""
        self.pixels[self._offset(x, y)] = color & _WORD

    def get_pixel(self, x: int, y: int) -> int:
        """Return the 32-bit pixel value at column x, row y."""
        return self.pixels[self._offset(x, y)]

    def fill(self, color: int) -> None:
        """Set every pixel to ``color``."""
        self.pixels[:] = array(_TYPECODE, [color & _WORD]) * len(self.pixels)

    def fill_rect(self, x: int, y: int, width: int, height: int, color: int) -> None:
        """Fill a rectangle, silently clipping the parts outside the image."""
        x0, x1 = max(x, 0), min(x + width, self.width)
        y0, y1 = max(y, 0), min(y + height, self.height)
        if x0 >= x1 or y0 >= y1:
            return
        run = array(_TYPECODE, [color & _WORD]) * (x1 - x0)
        for row in range(y0, y1):
            start = row * self.width
            self.pixels[start + x0:start + x1] = run

    def to_rgb_bytes(self) -> bytes:
        """Return the pixels as packed R, G, B bytes in row-major order."""
        words = self.pixels
        if sys.byteorder == "big":
            words = array(_TYPECODE, words)
            words.byteswap()
        raw = words.tobytes()
        rgb = bytearray(len(self.pixels) * 3)
        rgb[0::3] = raw[2::4]
        rgb[1::3] = raw[1::4]
        rgb[2::3] = raw[0::4]
        return bytes(rgb)


def mask_shifts(red_mask: int, green_mask: int, blue_mask: int) -> tuple[int, ...]:
    """Return (shift, bits) for red, green and blue of a visual's channel masks."""
    result: list[int] = []
    for mask in (red_mask, green_mask, blue_mask):
        if mask <= 0:
            raise ValueError(f"invalid channel mask {mask:#x}")
        shift = 0
        while not mask & 1:
            mask >>= 1
            shift += 1
        bits = 0
        while mask & 1:
            mask >>= 1
            bits += 1
        result.extend((shift, bits))
    return tuple(result)


def convert_color(color: int, depth: int, shifts: tuple[int, ...]) -> int:
    """Convert 0xRRGGBB to a pixel value for a display of the given depth."""
    if depth >= 24:
        return color
    red = (color >> 8) & 0xFF00
    green = color & 0xFF00
    blue = (color << 8) & 0xFF00
    return (
        ((red >> (16 - shifts[1])) << shifts[0])
        + ((green >> (16 - shifts[3])) << shifts[2])
        + ((blue >> (16 - shifts[5])) << shifts[4])
    )