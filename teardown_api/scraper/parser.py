"""Parsing utilities for the Teardown scripting API manual."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any

from .normalize import reflow_text
from .tables import Table, extract_tables

logger = logging.getLogger(__name__)

FRAGMENT_SEPARATOR = "<hr/>"
PARAGRAPH_SEPARATOR = "<p>"
OPTIONAL_MARKER = ", optional"

VERSION_RE = re.compile(r"<h1>.*?\(([\d.]+)\)</h1>")
ARGUMENT_RE = re.compile(
    r"<span class='[^']+name'>([^<]+)</span> "
    r"<span class='argtype'>\(([^<]+)\)</span> &ndash; (.*?)<br/>"
)
EXAMPLE_RE = re.compile(r"<pre class='example'>([\s\S]*?)</pre>")
LINK_TARGET_RE = re.compile(r"<a href='#([^']*)'")


class VersionNotFoundError(ValueError):
    """Raised when the manual header does not carry a version number."""


@dataclass(frozen=True)
class ApiArgument:
    name: str
    type: str
    optional: bool
    desc: str

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "desc": self.desc,
            "optional": self.optional,
            "type": self.type,
        }


@dataclass(frozen=True)
class ApiFunction:
    """Structured representation of one documented function."""

    name: str
    arguments: list[ApiArgument] = field(default_factory=list)
    returns: list[ApiArgument] = field(default_factory=list)
    examples: list[str | None] = field(default_factory=list)
    description: str = ""
    tables: dict[str, Table] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "arguments": [argument.to_dict() for argument in self.arguments],
            "returns": [value.to_dict() for value in self.returns],
            "examples": list(self.examples),
            "description": self.description,
            "tables": self.tables,
        }


@dataclass(frozen=True)
class ApiCategory:
    """A manual section grouping functions under a heading."""

    name: str
    description: str = ""
    tables: dict[str, Table] = field(default_factory=dict)
    entries: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ApiDocument:
    """The whole manual: version tag, categories and functions."""

    version: str
    categories: list[ApiCategory] = field(default_factory=list)
    functions: list[ApiFunction] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        # Categories are not part of the published file.
        return {
            "version": self.version,
            "functions": [function.to_dict() for function in self.functions],
        }


def match_tag(text: str, tag: str) -> re.Match[str] | None:
    return re.search(rf"<{tag}([^>]*)>(.*?)</{tag}>", text)


def segment(parts: list[str], index: int) -> str:
    if -len(parts) <= index < len(parts):
        return parts[index]
    return ""


def parse_arguments(paragraph: str) -> list[ApiArgument]:
    arguments: list[ApiArgument] = []
    for match in ARGUMENT_RE.finditer(paragraph):
        name, raw_type, desc = match.groups()
        marker = raw_type.find(OPTIONAL_MARKER)
        optional = marker > -1
        arguments.append(
            ApiArgument(
                name=name,
                type=raw_type[:marker] if optional else raw_type,
                optional=optional,
                desc=desc,
            )
        )
    return arguments


def parse_example(paragraph: str) -> str | None:
    match = EXAMPLE_RE.search(paragraph)
    if match is None:
        return None
    return match.group(1).strip()


def parse_function(text: str) -> ApiFunction | None:
    """Build an :class:`ApiFunction` from one ``<hr/>``-delimited fragment.

    The fragment is expected to look like::

        <h3>Name</h3> <p>arguments <p>returns <p>description [<p>more] <p>example

    Returns ``None`` when the fragment has no ``<h3>`` heading.
    """

    heading = match_tag(text, "h3")
    if heading is None:
        return None
    paragraphs = text.split(PARAGRAPH_SEPARATOR)
    raw_description = segment(paragraphs, 3).strip()
    if len(paragraphs) > 5:
        raw_description += "\n\n" + segment(paragraphs, 4).strip()
    extraction = extract_tables(raw_description)
    return ApiFunction(
        name=heading.group(2),
        arguments=parse_arguments(segment(paragraphs, 1)),
        returns=parse_arguments(segment(paragraphs, 2)),
        examples=[parse_example(segment(paragraphs, -1))],
        description=reflow_text(extraction.text),
        tables=extraction.tables,
    )


def parse_category(text: str) -> ApiCategory | None:
    """Build an :class:`ApiCategory` from one fragment, or ``None`` without ``<h2>``.

    Paragraphs holding links contribute their ``#anchor`` targets to
    ``entries`` in order of appearance; every other paragraph contributes its
    tables and text.
    """

    heading = match_tag(text, "h2")
    if heading is None:
        return None
    tables: dict[str, Table] = {}
    description: list[str] = []
    entries: list[str] = []
    for part in text.split(PARAGRAPH_SEPARATOR)[1:]:
        if match_tag(part, "a"):
            entries.extend(LINK_TARGET_RE.findall(part))
            continue
        extraction = extract_tables(part)
        tables.update(extraction.tables)
        if extraction.text:
            description.append(extraction.text)
    return ApiCategory(
        name=heading.group(2),
        description="\n\n".join(description),
        tables=tables,
        entries=entries,
    )


def extract_version(text: str) -> str:
    match = VERSION_RE.search(text)
    if match is None:
        raise VersionNotFoundError("No version number found in the manual header")
    return match.group(1)


def parse_document(text: str) -> ApiDocument:
    """Split the manual on ``<hr/>`` and classify every fragment.

    A fragment is a category when it has an ``<h2>`` heading, otherwise a
    function when it has an ``<h3>`` heading; anything else is boilerplate
    and dropped.
    """

    version = extract_version(text)
    categories: list[ApiCategory] = []
    functions: list[ApiFunction] = []
    for index, fragment in enumerate(text.split(FRAGMENT_SEPARATOR)):
        category = parse_category(fragment)
        if category is not None:
            categories.append(replace(category, entries=sorted(category.entries)))
            continue
        function = parse_function(fragment)
        if function is not None:
            functions.append(function)
            continue
        logger.debug("Skipping fragment %d without a heading", index)
    logger.debug(
        "Parsed manual %s: %d categories, %d functions",
        version,
        len(categories),
        len(functions),
    )
    return ApiDocument(version=version, categories=categories, functions=functions)
