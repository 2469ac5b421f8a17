"""Plain text teacher worksheet: chunked English with both translations.

WHY: Teachers print or paste a quick answer sheet: every sentence split
into chunks, the literal Korean chunk by chunk underneath, and the
natural translation last. No layout engine needed.

HOW: For each sentence, a numbered English line (slash display string,
or the raw sentence when it never parsed), then an indented literal line
and an indented natural line when present. Sentences are separated by a
blank line, preceded by the title and optional subtitle.

RULES:
- Numbers are two digits, starting at 01
- Unparsed sentences print `original` and skip the literal line
- Verb emphasis is not shown (display strings are plain text)
- Output suffix: "-worksheet.txt"
"""

from __future__ import annotations

from typing import List

from sentence_engine.config import LITERAL_LABEL, NATURAL_LABEL
from sentence_engine.core.passage import SentenceResult, Worksheet
from sentence_engine.formatters.base import BaseFormatter, FormatterOutput


def _sentence_block(number: int, sentence: SentenceResult) -> str:
    lines = ["{:02d} {}".format(number, sentence.english_slash())]
    if sentence.is_parsed and sentence.korean_literal_chunks:
        lines.append("   {}: {}".format(LITERAL_LABEL, sentence.korean_literal_slash()))
    if sentence.korean_natural:
        lines.append("   {}: {}".format(NATURAL_LABEL, sentence.korean_natural))
    return "\n".join(lines)


class WorksheetTextFormatter(BaseFormatter):
    """Numbered sentences with slash chunks and both translations."""

    @property
    def name(self) -> str:
        return "Worksheet Text"

    def format(self, worksheet: Worksheet) -> List[FormatterOutput]:
        header = [worksheet.title]
        if worksheet.subtitle:
            header.append(worksheet.subtitle)

        blocks = ["\n".join(header)]
        for number, sentence in enumerate(worksheet.sentences, start=1):
            blocks.append(_sentence_block(number, sentence))

        return [
            FormatterOutput(
                suffix="-worksheet.txt",
                content="\n\n".join(blocks) + "\n",
                media_type="text/plain",
            )
        ]
