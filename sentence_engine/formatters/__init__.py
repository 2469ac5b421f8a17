"""Worksheet formatter registry.

WHY: The CLI needs a single lookup to find a formatter by name. Adding a
layout means creating the formatter class, importing it here, and adding
one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["json"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sentence_engine.formatters.english_only import EnglishOnlyFormatter
from sentence_engine.formatters.json_export import JSONExportFormatter
from sentence_engine.formatters.worksheet_text import WorksheetTextFormatter

if TYPE_CHECKING:
    from sentence_engine.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "worksheet_text": WorksheetTextFormatter,
    "english_only": EnglishOnlyFormatter,
    "json": JSONExportFormatter,
}
