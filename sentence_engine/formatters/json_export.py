"""Structured JSON export of a worksheet.

WHY: Downstream renderers (print layout, PDF) need the full chunk model,
including verb segments for underlining, not just display strings.

HOW: Serializes the worksheet title/subtitle and every SentenceResult
via SentenceResult.to_dict(), plus the slash display strings so simple
consumers need not rebuild them.

RULES:
- Top-level keys: title, subtitle, sentences
- Each sentence carries english_slash and korean_literal_slash in
  addition to its tagged strings and chunk lists
- ensure_ascii=False so Korean stays readable; 2-space indent
- Output suffix: "-worksheet.json"
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from sentence_engine.core.passage import Worksheet
from sentence_engine.formatters.base import BaseFormatter, FormatterOutput


class JSONExportFormatter(BaseFormatter):
    """Full chunk model as JSON."""

    @property
    def name(self) -> str:
        return "Worksheet JSON"

    def format(self, worksheet: Worksheet) -> List[FormatterOutput]:
        sentences: List[Dict[str, Any]] = []
        for sentence in worksheet.sentences:
            entry = sentence.to_dict()
            entry["english_slash"] = sentence.english_slash()
            entry["korean_literal_slash"] = sentence.korean_literal_slash()
            sentences.append(entry)

        document = {
            "title": worksheet.title,
            "subtitle": worksheet.subtitle,
            "sentences": sentences,
        }
        return [
            FormatterOutput(
                suffix="-worksheet.json",
                content=json.dumps(document, ensure_ascii=False, indent=2),
                media_type="application/json",
            )
        ]
