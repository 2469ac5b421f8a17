"""Student practice sheet: chunked English only, no translations.

Students translate each chunk themselves, so only the slash-separated
English is printed, one numbered line per sentence, under the title and
a name line.
"""

from __future__ import annotations

from typing import List

from sentence_engine.core.passage import Worksheet
from sentence_engine.formatters.base import BaseFormatter, FormatterOutput

_NAME_LINE = "이름: _______________"


class EnglishOnlyFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "English Only"

    def format(self, worksheet: Worksheet) -> List[FormatterOutput]:
        lines = [worksheet.title, _NAME_LINE, ""]
        for number, sentence in enumerate(worksheet.sentences, start=1):
            lines.append("{}. {}".format(number, sentence.english_slash()))

        return [
            FormatterOutput(
                suffix="-english.txt",
                content="\n".join(lines) + "\n",
                media_type="text/plain",
            )
        ]
