"""Extraction of embedded tables from manual text."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .normalize import clean_cell

logger = logging.getLogger(__name__)

# Some tables in the manual end in <table/> instead of </table>.
TABLE_RE = re.compile(r"<table[^>]*>([\s\S]*?)</?table/?>")
ROW_RE = re.compile(r"<tr>(.*?)</tr>")
CELL_RE = re.compile(r"<td[^>]*>(.*?)</td>")

Table = list[list[str]]


@dataclass(frozen=True)
class TableExtraction:
    """Text with its tables swapped for placeholders, plus the tables."""

    text: str
    tables: dict[str, Table] = field(default_factory=dict)


def table_placeholder(name: str) -> str:
    return f"${{table:{name}}}"


def parse_rows(markup: str) -> Table:
    return [
        [clean_cell(cell) for cell in CELL_RE.findall(row)]
        for row in ROW_RE.findall(markup)
    ]


def extract_tables(text: str) -> TableExtraction:
    """Replace every table in ``text`` with a ``${table:<name>}`` placeholder.

    The first cell of a table's first row is its name; that row is not kept
    in the returned rows.
    """

    tables: dict[str, Table] = {}
    parts: list[str] = []
    position = 0
    for match in TABLE_RE.finditer(text):
        rows = parse_rows(match.group(1))
        if not rows or not rows[0]:
            logger.debug("Skipping table without a name cell at offset %d", match.start())
            continue
        name = rows[0][0]
        parts.append(text[position : match.start()])
        parts.append(table_placeholder(name))
        position = match.end()
        tables[name] = rows[1:]
    parts.append(text[position:])
    return TableExtraction(text="".join(parts).strip(), tables=tables)
