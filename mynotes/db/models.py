"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from mynotes.errors import ValidationError

DEFAULT_CATEGORY_NAME = "General"
NEW_CATEGORY_NAME = "New Category"
UNTITLED = "Untitled"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp; naive values are taken to be UTC."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class SyntaxLanguage(str, Enum):
    """Languages the editor knows how to highlight."""

    PLAIN = "Plain"
    CSHARP = "C#"
    XML = "XML"
    HTML = "HTML"
    JAVASCRIPT = "JavaScript"
    CSS = "CSS"
    JSON = "JSON"
    SQL = "SQL"
    PYTHON = "Python"
    JAVA = "Java"
    CPP = "C++"
    PHP = "PHP"
    MARKDOWN = "MarkDown"

    @classmethod
    def parse(cls, value: str | SyntaxLanguage) -> SyntaxLanguage:
        """Resolve *value* by exact, then case-insensitive, match."""
        if isinstance(value, cls):
            return value
        for lang in cls:
            if lang.value == value:
                return lang
        folded = str(value).strip().casefold()
        for lang in cls:
            if lang.value.casefold() == folded:
                return lang
        choices = ", ".join(lang.value for lang in cls)
        raise ValidationError(f"Unknown syntax language {value!r}; expected one of: {choices}")

    @property
    def display_name(self) -> str:
        return "Plain Text" if self is SyntaxLanguage.PLAIN else self.value

    @property
    def highlighter(self) -> str:
        """Name of the editor's highlighting definition ("" = none)."""
        return _HIGHLIGHTERS.get(self, self.value)


_HIGHLIGHTERS = {
    SyntaxLanguage.PLAIN: "",
    SyntaxLanguage.JSON: "Json",
    SyntaxLanguage.SQL: "TSQL",
}


@dataclass
class Category:
    id: int
    name: str
    parent_id: Optional[int]
    sort_order: int
    created_at: datetime
    updated_at: datetime

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None


@dataclass
class Document:
    id: int
    category_id: int
    title: str = UNTITLED
    content: str = ""
    syntax_language: SyntaxLanguage = SyntaxLanguage.PLAIN
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    def matches(self, text: str) -> bool:
        """Case-insensitive substring match on title or content."""
        needle = text.casefold()
        return needle in self.title.casefold() or needle in self.content.casefold()
