"""Intermediate representation dataclasses for chunked sentences.

WHY: The producer emits a flat tagged string ("<c1>The <v>quick</v> fox</c1>
<c2>jumps</c2>"). The editor, the regenerator hand-off, and every
worksheet formatter need the same sentence as ordered chunks with
emphasis runs. The IR is the single well-typed form they all share.

HOW: Three dataclasses form a hierarchy:
  Segment — a maximal run of text sharing one emphasis (verb) state
  Chunk   — one translation unit: positional tag, flattened text, segments
  Word    — one whitespace-delimited token, derived on demand (never stored)

RULES:
- Chunk.tag is a 1-based position, not an identity; structural edits renumber
- Chunk.text is derived from Chunk.segments and kept in sync by every mutation
- Chunk.segments is never empty; an empty chunk holds one empty non-verb segment
- Copies handed to an edit session never share Segment objects with the original
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class Segment:
    """A run of chunk text that shares one emphasis state.

    RULES:
    - text keeps its own boundary spacing ("The ", "quick", " fox")
    - is_verb marks the run for underline in rendered output
    """

    text: str
    is_verb: bool = False

    def copy(self) -> Segment:
        return Segment(text=self.text, is_verb=self.is_verb)


@dataclass
class Word:
    """A single whitespace-delimited token with its emphasis flag.

    Words are the unit addressed by split and toggle_verb. They are
    derived from segments on demand and never persisted.

    RULES:
    - attached: no whitespace separates this word from the previous one
      (punctuation against a verb, as in "<v>ran</v>."); the first word
      of a list is never attached
    """

    word: str
    is_verb: bool = False
    attached: bool = False


@dataclass
class Chunk:
    """One translation unit of a sentence.

    WHY: Chunks are what the student sees separated by slashes and what
    the regenerator translates one-for-one (<c1> English ↔ <c1> Korean).

    RULES:
    - tag: 1-based positional number; as parsed on input, renumbered 1..N
      after split or merge
    - text: whitespace-normalized flattening of segments
    - segments: ordered, non-empty
    """

    tag: int
    text: str
    segments: List[Segment] = field(default_factory=list)

    def copy(self) -> Chunk:
        """Deep copy: the new chunk shares no Segment with this one."""
        return Chunk(
            tag=self.tag,
            text=self.text,
            segments=[seg.copy() for seg in self.segments],
        )


def copy_chunks(chunks: List[Chunk]) -> List[Chunk]:
    """Deep copy a chunk sequence (chunks and their segment lists)."""
    return [chunk.copy() for chunk in chunks]
