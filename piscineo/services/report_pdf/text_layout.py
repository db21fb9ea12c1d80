"""Greedy word wrapping against real font metrics"""

from typing import Callable

# (text, font_size) -> rendered width in points
MeasureFunc = Callable[[str, float], float]


def wrap_text(text: str, measure: MeasureFunc, font_size: float, max_width: float) -> list[str]:
    """
    Split text into lines that fit max_width at the given font size.

    Explicit newlines always break, and an empty paragraph produces an empty
    line so blank lines survive. Words are joined by single spaces; a word
    wider than max_width is put alone on its own line without hyphenation.

    Args:
        text: Text to wrap, may contain newlines
        measure: Font metric function returning the width of a string
        font_size: Font size passed to measure
        max_width: Maximum line width in points

    Returns:
        Lines in reading order (empty list for empty text)
    """
    if not text:
        return []

    lines: list[str] = []
    for paragraph in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        words = [w for w in paragraph.split(" ") if w]
        if not words:
            lines.append("")
            continue

        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if measure(candidate, font_size) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)

    return lines
