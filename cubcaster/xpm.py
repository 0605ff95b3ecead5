"""Reading XPM images into :class:`~cubcaster.image.Image` objects."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from cubcaster.colors import color_by_name
from cubcaster.image import Image

_TRANSPARENT = 0xFF000000
_ATOI = re.compile(r"\s*([+-]?\d+)")
_HEX = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_QUOTED = re.compile(r'"([^"]*)"')


class XpmError(ValueError):
    """Raised when XPM data cannot be read."""


def split_words(text: str) -> list[str]:
    """Split on spaces and tabs only, dropping empty words."""
    return [word for word in re.split(r"[ \t]+", text) if word]


def _blank_comments(text: str, opener: str, closer: str, keep_closer: bool) -> str:
    chars = list(text)
    in_quote = False
    i = 0
    while i < len(chars):
        if chars[i] == '"':
            in_quote = not in_quote
        elif not in_quote and "".join(chars[i:i + 2]) == opener:
            end = "".join(chars).find(closer, i + 2)
            stop = len(chars) if end == -1 else end + len(closer)
            if keep_closer and end != -1:
                stop = end + len(closer)
            chars[i:stop] = " " * (stop - i)
            i = stop
            continue
        i += 1
    return "".join(chars)


def strip_comments(text: str) -> str:
    """Blank out C comments lying outside quoted strings, keeping the length."""
    text = _blank_comments(text, "/*", "*/", keep_closer=True)
    return _blank_comments(text, "//", "\n", keep_closer=True)


def text_to_rgb(name: str, suffix: str | None) -> int:
    """Resolve an XPM colour: ``#hex``, a colour name, or 0 when unknown.

    ``suffix`` is the word that followed the name; it is joined to it to
    allow two-word names such as ``light blue``.
    """
    if name.startswith("#"):
        match = _HEX.match(name, 1)
        digits = match.group(2) if match else ""
        if not digits:
            return 0
        value = int(digits, 16)
        return -value if match.group(1) == "-" else value
    if suffix is not None:
        name = f"{name} {suffix}"[:63]
    try:
        return color_by_name(name)
    except KeyError:
        return 0


def _atoi(word: str) -> int:
    match = _ATOI.match(word)
    return int(match.group(1)) if match else 0


def parse_xpm_lines(lines: Sequence[str]) -> Image:
    """Build an image from the XPM strings: header, colours, then pixel rows."""
    rows = iter(lines)

    def next_line(what: str) -> str:
        try:
            return next(rows)
        except StopIteration:
            raise XpmError(f"missing {what}") from None

    header = split_words(next_line("header"))
    if len(header) < 4:
        raise XpmError("incomplete header")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if not (width and height and ncolors and cpp):
        raise XpmError("invalid header values")
    if width < 0 or height < 0 or ncolors < 0 or cpp < 0:
        raise XpmError("negative header values")

    # Short codes keep the last definition of a code, long ones the first.
    last_wins = cpp <= 2
    colors: dict[str, int] = {}
    for _ in range(ncolors):
        line = next_line("colour definition")
        words = split_words(line[cpp:])
        try:
            key_index = words.index("c")
        except ValueError:
            raise XpmError(f"no colour key in {line!r}") from None
        if key_index + 1 >= len(words):
            raise XpmError(f"no colour after key in {line!r}")
        suffix = words[key_index + 2] if key_index + 2 < len(words) else None
        rgb = text_to_rgb(words[key_index + 1], suffix)
        code = line[:cpp]
        if last_wins:
            colors[code] = rgb
        else:
            colors.setdefault(code, rgb)

    image = Image(width, height)
    for y in range(height):
        line = next_line("pixel row")
        if len(line) < width * cpp:
            raise XpmError(f"pixel row {y} too short")
        for x in range(width):
            col = colors.get(line[x * cpp:(x + 1) * cpp], 0)
            if col == -1:
                col = _TRANSPARENT
            image.put_pixel(x, y, col)
    return image


def parse_xpm_text(text: str) -> Image:
    """Parse the text of an XPM file."""
    return parse_xpm_lines(_QUOTED.findall(strip_comments(text)))


def load_xpm(path: str | Path) -> Image:
    """Read and parse an XPM file."""
    try:
        text = Path(path).read_text(encoding="latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm_text(text)