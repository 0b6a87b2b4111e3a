"""Line-indexed view over normalized recipe text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from recipe_ocr.models.recipe import TextLine
from recipe_ocr.utils.text_cleaner import to_lines


@dataclass(frozen=True)
class Document:
    text: str
    lines: Tuple[TextLine, ...]

    @classmethod
    def from_text(cls, text: str) -> "Document":
        return cls(text=text or "", lines=tuple(to_lines(text or "")))

    @property
    def non_empty_lines(self) -> List[str]:
        return [line.text for line in self.lines if not line.is_blank]

    def line_after(self, line: TextLine) -> Optional[TextLine]:
        nxt = line.index + 1
        return self.lines[nxt] if nxt < len(self.lines) else None
