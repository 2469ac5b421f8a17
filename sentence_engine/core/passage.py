"""Passages, per-sentence analysis results, and worksheets.

WHY: A worksheet is built sentence by sentence: the passage is split,
each sentence goes to the producer, and its tagged English and Korean
literal strings are parsed into chunks. Formatters then lay the results
out. This module holds that per-sentence record and the worksheet that
groups them.

HOW: split_into_sentences uses a look-behind on sentence-ending
punctuation. SentenceResult keeps both the parsed chunks and the raw
tagged strings, so an empty chunk list can always fall back to the
original sentence.

RULES:
- Sentences split after ".", "!" or "?" followed by whitespace
- A sentence whose analysis failed has empty chunk lists and the
  FAILED_ANALYSIS_TEXT natural translation
- apply_english_edit re-serializes the English side; the Korean literal
  side is stale until the caller regenerates it
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sentence_engine.config import DEFAULT_WORKSHEET_TITLE, FAILED_ANALYSIS_TEXT
from sentence_engine.core.codec import chunks_to_slash, chunks_to_tagged, parse_tagged
from sentence_engine.core.ir import Chunk, Segment

_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


def split_into_sentences(passage: str) -> List[str]:
    """Split a passage into trimmed, non-empty sentences."""
    return [
        s.strip()
        for s in _SENTENCE_BOUNDARY_RE.split(passage or "")
        if s.strip()
    ]


@dataclass
class SentenceResult:
    """One analysed sentence of a worksheet.

    RULES:
    - id: 0-based position in the passage
    - english_chunks / korean_literal_chunks: parsed from the tagged strings;
      [] means "unparsed", render `original` instead
    - english_tagged / korean_literal_tagged: wire strings as last produced
      or edited
    """

    id: int
    original: str
    english_chunks: List[Chunk] = field(default_factory=list)
    korean_literal_chunks: List[Chunk] = field(default_factory=list)
    korean_natural: str = ""
    english_tagged: str = ""
    korean_literal_tagged: str = ""

    @property
    def is_parsed(self) -> bool:
        return bool(self.english_chunks)

    def english_slash(self) -> str:
        if not self.english_chunks:
            return self.original
        return chunks_to_slash(self.english_chunks)

    def korean_literal_slash(self) -> str:
        return chunks_to_slash(self.korean_literal_chunks)

    def apply_english_edit(self, chunks: List[Chunk]) -> str:
        """Adopt edited English chunks and return the new tagged string.

        The returned string is what the caller sends for regeneration.
        """
        self.english_chunks = chunks
        self.english_tagged = chunks_to_tagged(chunks)
        return self.english_tagged

    def apply_regenerated(self, korean_literal_tagged: str) -> None:
        self.korean_literal_tagged = korean_literal_tagged
        self.korean_literal_chunks = parse_tagged(korean_literal_tagged)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "original": self.original,
            "english_tagged": self.english_tagged,
            "korean_literal_tagged": self.korean_literal_tagged,
            "korean_natural": self.korean_natural,
            "english_chunks": [_chunk_to_dict(c) for c in self.english_chunks],
            "korean_literal_chunks": [_chunk_to_dict(c) for c in self.korean_literal_chunks],
        }


def _chunk_to_dict(chunk: Chunk) -> Dict[str, Any]:
    return {
        "tag": chunk.tag,
        "text": chunk.text,
        "segments": [_segment_to_dict(s) for s in chunk.segments],
    }


def _segment_to_dict(segment: Segment) -> Dict[str, Any]:
    return {"text": segment.text, "is_verb": segment.is_verb}


def build_sentence_result(
    sentence_id: int,
    original: str,
    english_tagged: str,
    korean_literal_tagged: str,
    korean_natural: str,
) -> SentenceResult:
    """Parse one producer response into a SentenceResult."""
    return SentenceResult(
        id=sentence_id,
        original=original,
        english_chunks=parse_tagged(english_tagged),
        korean_literal_chunks=parse_tagged(korean_literal_tagged),
        korean_natural=korean_natural,
        english_tagged=english_tagged,
        korean_literal_tagged=korean_literal_tagged,
    )


def failed_sentence_result(sentence_id: int, original: str) -> SentenceResult:
    """Placeholder record for a sentence the producer could not analyse."""
    return SentenceResult(
        id=sentence_id,
        original=original,
        korean_natural=FAILED_ANALYSIS_TEXT,
    )


@dataclass
class Worksheet:
    """A titled, ordered list of analysed sentences."""

    sentences: List[SentenceResult]
    title: str = DEFAULT_WORKSHEET_TITLE
    subtitle: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Worksheet:
        """Build a worksheet from producer JSON.

        Expected shape::

            {"title": "...", "subtitle": "...",
             "sentences": [{"original": "...", "english_tagged": "...",
                            "korean_literal_tagged": "...",
                            "korean_natural": "..."}]}

        A sentence without english_tagged is recorded as failed.
        """
        sentences = []
        for index, item in enumerate(data.get("sentences", [])):
            original = item.get("original", "")
            english_tagged = item.get("english_tagged")
            if not english_tagged:
                sentences.append(failed_sentence_result(index, original))
                continue
            sentences.append(build_sentence_result(
                index,
                original,
                english_tagged,
                item.get("korean_literal_tagged", ""),
                item.get("korean_natural", ""),
            ))
        return cls(
            sentences=sentences,
            title=data.get("title") or DEFAULT_WORKSHEET_TITLE,
            subtitle=data.get("subtitle"),
        )
