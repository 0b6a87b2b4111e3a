"""Instruction step extraction and formatting."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from recipe_ocr.models.recipe import TextLine
from recipe_ocr.services.parser.document import Document
from recipe_ocr.services.parser.sections import find_instructions_section
from recipe_ocr.services.parser.strategies import contained, first_match

INSTRUCTIONS_PLACEHOLDER = "No instructions found. Please enter the steps manually."

ACTION_VERBS = (
    "preheat", "heat", "mix", "stir", "add", "combine", "cook", "bake", "roast",
    "simmer", "boil", "whisk", "beat", "fold", "pour", "place", "put", "season",
    "serve", "chop", "slice", "dice", "grill", "fry", "saute", "sauté", "melt",
    "blend", "knead", "roll", "cover", "remove", "transfer", "drain", "spread",
    "sprinkle", "bring", "reduce", "toss", "marinate", "refrigerate", "chill",
    "let", "line", "grease", "arrange", "top",
)
MIN_ACTION_WORDS = 6

_STEP_MARKER = re.compile(r"^(?:step\s*\d+\s*[.):-]?|\d+\s*[.):](?!\d)|[*•·–-])\s*", re.IGNORECASE)
_NUMBERED = re.compile(r"^\d+\s*[.):](?!\d)\s*")
_ACTION_LINE = re.compile(rf"^(?:{'|'.join(ACTION_VERBS)})\b", re.IGNORECASE)


def format_instructions(steps: Sequence[str]) -> str:
    """Render steps as ``1. first\\n\\n2. second``."""
    return "\n\n".join(f"{i}. {step}" for i, step in enumerate(steps, start=1))


def _starts_unmarked_step(line: str, previous: Optional[TextLine]) -> bool:
    if not line[:1].isupper():
        return False
    if previous is None or previous.is_blank:
        return True
    return previous.text.rstrip().endswith(".")


def split_steps(lines: Sequence[TextLine]) -> List[str]:
    """
    Group section lines into steps.

    A step starts at a numbered or bulleted line, or at a capitalized line that
    follows a blank line or a finished sentence. Any other line continues the
    current step.
    """
    steps: List[str] = []
    current = ""
    previous: Optional[TextLine] = None
    for line in lines:
        if line.is_blank:
            previous = line
            continue
        marker = _STEP_MARKER.match(line.text)
        if marker:
            if current:
                steps.append(current.strip())
            current = line.text[marker.end():]
        elif not current or _starts_unmarked_step(line.text, previous):
            if current:
                steps.append(current.strip())
            current = line.text
        else:
            current += " " + line.text
        previous = line
    if current.strip():
        steps.append(current.strip())
    return [step for step in steps if step]


def section_steps(doc: Document) -> List[str]:
    section = find_instructions_section(doc)
    return split_steps(section.lines) if section is not None else []


def numbered_steps(doc: Document) -> List[str]:
    steps = []
    for line in doc.lines:
        m = _NUMBERED.match(line.text)
        if m and line.text[m.end():].strip():
            steps.append(line.text[m.end():].strip())
    return steps


def action_verb_steps(doc: Document) -> List[str]:
    return [
        line.text
        for line in doc.lines
        if _ACTION_LINE.match(line.text) and len(line.text.split()) >= MIN_ACTION_WORDS
    ]


STRATEGIES = (
    section_steps,
    numbered_steps,
    action_verb_steps,
)


@contained(INSTRUCTIONS_PLACEHOLDER)
def extract_instructions(text: str) -> str:
    """Numbered instructions, or a placeholder asking for manual entry."""
    steps = first_match(STRATEGIES, Document.from_text(text))
    return format_instructions(steps) if steps else INSTRUCTIONS_PLACEHOLDER
