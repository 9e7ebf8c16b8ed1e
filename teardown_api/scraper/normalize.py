"""Normalization helpers."""
from __future__ import annotations

import re

LINE_WIDTH = 80

NBSP_RE = re.compile(r"&nbsp;")


def clean_cell(value: str) -> str:
    return NBSP_RE.sub(" ", value).strip()


def reflow_text(text: str, width: int = LINE_WIDTH) -> str:
    """Greedily pack whitespace-separated words into lines of at most ``width``.

    Words are never split, so a word longer than ``width`` ends up on a line
    of its own.
    """

    lines: list[str] = []
    current = ""
    for word in text.split():
        if not current:
            current = word
        elif len(current) + len(word) + 1 <= width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return "\n".join(lines)
