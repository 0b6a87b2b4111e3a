"""Prep / cook / total time extraction.

Two strategy families feed every time field:

* a positional header-block heuristic for recipe cards that print a row of
  labels ("Prep Time  Cook Time  Servings") with the values on the next line;
* labeled-line patterns such as ``Prep Time: 15 minutes``.

The header block wins when both match. The header-block scan also yields the
servings value, which the servings extractor reuses.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

from recipe_ocr.models.recipe import TextLine
from recipe_ocr.services.parser.document import Document
from recipe_ocr.services.parser.strategies import contained

TIME_FIELDS = ("prepTime", "cookTime", "totalTime")

_SP = r"[^\S\n]*"
_QTY = r"\d+[^\S\n]+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?"
_HOUR_UNIT = r"(?:hours?|hrs?|h)(?![a-z])\.?"
_MINUTE_UNIT = r"(?:minutes?|mins?|m)(?![a-z])\.?"

# "1 hour 30 minutes", "1 1/2 hrs", "1h30", "45 mins"; never spans a line break
DURATION = (
    rf"(?:(?:{_QTY}){_SP}{_HOUR_UNIT}"
    rf"(?:\d{{1,2}}(?!\d)|{_SP}(?:and{_SP})?\d+{_SP}{_MINUTE_UNIT})?"
    rf"|\d+{_SP}{_MINUTE_UNIT})"
)

_HOURS = re.compile(rf"({_QTY}){_SP}{_HOUR_UNIT}", re.IGNORECASE)
_MINUTES = re.compile(rf"(\d+){_SP}{_MINUTE_UNIT}", re.IGNORECASE)
_GLUED_MINUTES = re.compile(r"^(\d{1,2})(?!\d)")

_LABELED_PATTERNS: Dict[str, Tuple[re.Pattern, ...]] = {
    "prepTime": (
        re.compile(rf"\bprep(?:aration)?\s*time\s*:?\s*({DURATION})", re.IGNORECASE),
        re.compile(rf"\bprep(?:aration)?\s*:\s*({DURATION})", re.IGNORECASE),
    ),
    "cookTime": (
        re.compile(rf"\bcook(?:ing)?\s*time\s*:?\s*({DURATION})", re.IGNORECASE),
        re.compile(rf"\bbak(?:e|ing)\s*time\s*:?\s*({DURATION})", re.IGNORECASE),
        re.compile(rf"\bcook(?:ing)?\s*:\s*({DURATION})", re.IGNORECASE),
    ),
    "totalTime": (
        re.compile(rf"\btotal\s*time\s*:?\s*({DURATION})", re.IGNORECASE),
        re.compile(rf"\btime\s*needed\s*:?\s*({DURATION})", re.IGNORECASE),
        re.compile(rf"\bready\s+in\s*:?\s*({DURATION})", re.IGNORECASE),
    ),
}

# Header-block labels, keyed by the recipe field they fill (None: alignment only)
HEADER_LABELS: Tuple[Tuple[Optional[str], re.Pattern], ...] = (
    ("prepTime", re.compile(r"\bprep(?:aration)?\s*time\b", re.IGNORECASE)),
    ("cookTime", re.compile(r"\b(?:cook(?:ing)?|bake|baking)\s*time\b", re.IGNORECASE)),
    ("totalTime", re.compile(r"\btotal\s*time\b", re.IGNORECASE)),
    ("servings", re.compile(r"\b(?:servings|serves|yield)\b", re.IGNORECASE)),
    (None, re.compile(r"\bdiet\s*type\b", re.IGNORECASE)),
    (None, re.compile(r"\bmeal\s*type\b", re.IGNORECASE)),
)

_VALUE_TOKEN = re.compile(
    rf"(?P<duration>{DURATION})"
    r"|(?P<number>\d+(?:\s*[-‐‑‒–—―]\s*\d+)?)"
    r"|(?P<word>[A-Za-z][A-Za-z'-]{0,19})",
    re.IGNORECASE,
)
# Words that trail a number ("4 people") rather than being a value of their own
_VALUE_FILLER = {"people", "persons", "person", "servings", "serving", "portions", "and"}


def parse_quantity(value: str) -> float:
    """Parse ``2``, ``1.5``, ``1/2`` or ``1 1/2`` into a float."""
    value = value.strip()
    total = 0.0
    for part in value.split():
        if "/" in part:
            num, den = part.split("/", 1)
            if int(den):
                total += int(num) / int(den)
        else:
            total += float(part)
    return total


def to_minutes(value: str) -> int:
    """Convert a duration such as ``1 hour 30 minutes`` or ``1h30`` to minutes."""
    total = 0.0
    rest = value
    hours = _HOURS.search(value)
    if hours:
        total += parse_quantity(hours.group(1)) * 60
        rest = value[hours.end():]
        glued = _GLUED_MINUTES.match(rest)
        if glued:
            return int(round(total + int(glued.group(1))))
    minutes = _MINUTES.search(rest)
    if minutes:
        total += int(minutes.group(1))
    return int(round(total))


def format_minutes(minutes: int) -> str:
    """Canonical duration string."""
    return f"{minutes} min"


def normalize_range(value: str) -> str:
    return re.sub(r"\s*[-‐‑‒–—―]\s*", "-", value.strip())


def _header_labels(text: str) -> List[Tuple[int, Optional[str]]]:
    found = []
    for field, pattern in HEADER_LABELS:
        for m in pattern.finditer(text):
            found.append((m.start(), field))
    return sorted(found, key=lambda item: item[0])


def _value_tokens(text: str) -> List[Tuple[str, str]]:
    tokens = []
    for m in _VALUE_TOKEN.finditer(text):
        kind = m.lastgroup
        value = m.group(0).strip()
        if kind == "word" and value.lower() in _VALUE_FILLER:
            continue
        tokens.append((kind, value))
    return tokens


def _assign(field: Optional[str], kind: str, value: str) -> Optional[str]:
    if field is None:
        return None
    if field == "servings":
        return normalize_range(value) if kind == "number" else None
    if kind == "duration":
        minutes = to_minutes(value)
    elif kind == "number" and value.isdigit():
        minutes = int(value)
    else:
        return None
    return format_minutes(minutes) if minutes > 0 else None


def _header_rows(doc: Document) -> Iterator[Tuple[List[Tuple[int, Optional[str]]], TextLine]]:
    """Yield (labels, value line) for each line of two or more labels followed by a line of values."""
    for line in doc.lines:
        if line.is_blank or any(ch.isdigit() for ch in line.text):
            continue
        labels = _header_labels(line.text)
        if len(labels) < 2:
            continue
        below = doc.line_after(line)
        if below is None or below.is_blank or len(_header_labels(below.text)) > 0:
            continue
        tokens = _value_tokens(below.text)
        if tokens and any(kind != "word" for kind, _ in tokens):
            yield labels, below


def header_value_lines(doc: Document) -> Set[int]:
    """Indexes of the value lines that sit under a header row."""
    return {below.index for _, below in _header_rows(doc)}


def header_block_values(doc: Document) -> Dict[str, str]:
    """
    Pair a line of two or more labels with the line of values right below it.

    Values are matched to labels left to right. The label line must not carry
    digits of its own (that is a labeled line, not a header row).
    """
    for labels, below in _header_rows(doc):
        values: Dict[str, str] = {}
        for (_, field), (kind, value) in zip(labels, _value_tokens(below.text)):
            assigned = _assign(field, kind, value)
            if assigned and field not in values:
                values[field] = assigned
        if values:
            return values
    return {}


def header_block_times(doc: Document) -> Dict[str, str]:
    return {k: v for k, v in header_block_values(doc).items() if k in TIME_FIELDS}


def labeled_times(doc: Document) -> Dict[str, str]:
    found: Dict[str, str] = {}
    for field, patterns in _LABELED_PATTERNS.items():
        for pattern in patterns:
            m = pattern.search(doc.text)
            if not m:
                continue
            minutes = to_minutes(m.group(1))
            if minutes > 0:
                found[field] = format_minutes(minutes)
                break
    return found


# Highest priority first; each strategy may fill any subset of the time fields
STRATEGIES: Tuple[Callable[[Document], Dict[str, str]], ...] = (
    header_block_times,
    labeled_times,
)


def _empty_times() -> Dict[str, str]:
    return {field: "" for field in TIME_FIELDS}


@contained(_empty_times)
def extract_times(text: str) -> Dict[str, str]:
    """Extract prepTime, cookTime and totalTime as canonical ``N min`` strings."""
    doc = Document.from_text(text)
    times = _empty_times()
    for strategy in STRATEGIES:
        for field, value in strategy(doc).items():
            if not times[field]:
                times[field] = value
    return times


def derive_total_time(times: Dict[str, str]) -> Dict[str, str]:
    """Fill a missing total from prep + cook when both are known."""
    result = dict(times)
    if not result.get("totalTime") and result.get("prepTime") and result.get("cookTime"):
        result["totalTime"] = format_minutes(to_minutes(result["prepTime"]) + to_minutes(result["cookTime"]))
    return result
