"""Locate the ingredient and instruction blocks by their headings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from recipe_ocr.models.recipe import TextLine
from recipe_ocr.services.parser.document import Document

INGREDIENTS_HEADING = re.compile(r"^[^A-Za-z0-9]*(ingredients?)\b(?P<tail>.*)$", re.IGNORECASE)
INSTRUCTIONS_HEADING = re.compile(
    r"^[^A-Za-z0-9]*(instructions?|directions?|method|steps)\b(?P<tail>.*)$", re.IGNORECASE
)

# "Ingredients for 4", "INGREDIENTS (serves 6)"; anything longer reads as prose
MAX_HEADING_TAIL = 25


@dataclass(frozen=True)
class Section:
    """Lines between a heading and the end of its block, heading excluded."""

    heading_index: int
    lines: Tuple[TextLine, ...]

    @property
    def text(self) -> str:
        return "\n".join(line.text for line in self.lines)


def _heading_body(line: TextLine, pattern: Pattern[str]) -> Optional[str]:
    """Return the text after the heading keyword if ``line`` is a heading, else None."""
    m = pattern.match(line.text)
    if not m:
        return None
    tail = m.group("tail").strip()
    if tail.startswith(":"):
        return tail[1:].strip()
    if len(tail) > MAX_HEADING_TAIL or tail.endswith("."):
        return None
    return ""


def _find_heading(doc: Document, pattern: Pattern[str], start: int = 0) -> Optional[Tuple[int, str]]:
    for line in doc.lines[start:]:
        body = _heading_body(line, pattern)
        if body is not None:
            return line.index, body
    return None


def _build_section(doc: Document, heading: Tuple[int, str], end: int) -> Section:
    index, body = heading
    lines = list(doc.lines[index + 1 : end])
    if body:
        lines.insert(0, TextLine(index=index, text=body))
    return Section(heading_index=index, lines=tuple(lines))


def find_ingredients_section(doc: Document) -> Optional[Section]:
    """Ingredient block: from the ingredients heading to the next instructions heading."""
    heading = _find_heading(doc, INGREDIENTS_HEADING)
    if heading is None:
        return None
    end_heading = _find_heading(doc, INSTRUCTIONS_HEADING, heading[0] + 1)
    end = end_heading[0] if end_heading else len(doc.lines)
    return _build_section(doc, heading, end)


def find_instructions_section(doc: Document) -> Optional[Section]:
    """Instruction block: from the instructions heading to the end of the text."""
    heading = _find_heading(doc, INSTRUCTIONS_HEADING)
    if heading is None:
        return None
    # A later ingredients heading (instructions printed first) closes the block
    end_heading = _find_heading(doc, INGREDIENTS_HEADING, heading[0] + 1)
    end = end_heading[0] if end_heading else len(doc.lines)
    return _build_section(doc, heading, end)
