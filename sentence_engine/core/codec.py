"""Tagged-text codec: wire string ⇄ chunk sequence, plus word helpers.

WHY: The producer and the regenerator speak a flat annotated string
("<c1>The <v>quick</v> fox</c1> <c2>jumps</c2>"). The editor and the
formatters need ordered Chunk objects. This module is the only place
that knows the wire grammar.

HOW: parse_tagged scans matched <cN>...</cN> spans with a backreference
regex, builds segments from <v>...</v> spans inside each span, strips
residual tags, and folds orphan text (anything outside a span) into the
nearest chunk. chunks_to_tagged is the inverse; chunks_to_slash is the
lossy display form. segments_to_words / words_to_segments convert
between emphasis runs and the word list the editor addresses.

RULES:
- Chunk pair: <cN>...</cN> with the same N on both tags; others are noise
- Emphasis pair: <v>...</v>, unnumbered, never nested
- Stray <cN>, </cN>, <v>, </v> tokens are stripped from chunk text
- Orphan text extends the adjacent segment when it is non-verb; next to
  a verb segment it becomes a new non-verb segment, so orphan words
  never gain emphasis
- Zero chunk spans → [] (the caller falls back to raw text)
- Chunks are joined with one space on the wire, " / " for display
- Chunk.text always comes from derive_text(segments)
"""

from __future__ import annotations

import itertools
import re
from typing import List, Optional, Tuple

from sentence_engine.core.ir import Chunk, Segment, Word

# Matched chunk span; the backreference rejects </cM> closing a <cN>.
_CHUNK_SPAN_RE = re.compile(r"<c(\d+)>(.*?)</c\1>", re.DOTALL)

_VERB_SPAN_RE = re.compile(r"<v>(.*?)</v>", re.DOTALL)

_STRAY_CHUNK_TAG_RE = re.compile(r"</?c\d+>")
_STRAY_VERB_TAG_RE = re.compile(r"</?v>")

DISPLAY_SEPARATOR = " / "
"""Join token between chunks in the display string."""


def derive_text(segments: List[Segment]) -> str:
    """Flatten segments into a chunk's human-readable text.

    WHY: Chunk.text must never drift from Chunk.segments. Every code path
    that builds or mutates a chunk calls this one function instead of
    patching text by hand.

    HOW: Concatenate segment texts (they carry their own spacing), then
    collapse whitespace runs to single spaces and strip the ends.
    """
    return " ".join("".join(seg.text for seg in segments).split())


def make_chunk(tag: int, segments: List[Segment]) -> Chunk:
    """Build a chunk whose text is derived from its segments."""
    if not segments:
        segments = [Segment(text="", is_verb=False)]
    return Chunk(tag=tag, text=derive_text(segments), segments=segments)


def renumber(chunks: List[Chunk]) -> List[Chunk]:
    """Reassign tags 1..N in position order (in place) and return the list."""
    for position, chunk in enumerate(chunks, start=1):
        chunk.tag = position
    return chunks


# ---------------------------------------------------------------------------
# Word helpers
# ---------------------------------------------------------------------------


def segments_to_words(segments: List[Segment]) -> List[Word]:
    """Split emphasis runs into the word list the editor addresses.

    RULES:
    - Each segment is split on whitespace runs independently
    - Pure-whitespace tokens are discarded
    - Every word inherits its segment's is_verb
    - A token that touches the previous segment with no whitespace
      between is marked attached ("<v>ran</v>." → "ran", "." attached);
      when both sides share one emphasis state it is the same word and
      the two pieces are joined
    """
    words: List[Word] = []
    # True when whitespace (or the chunk start) precedes the next token
    gap = True
    for seg in segments:
        if not seg.text:
            continue
        if seg.text[0].isspace():
            gap = True
        for position, token in enumerate(seg.text.split()):
            attached = position == 0 and not gap and bool(words)
            if attached and words[-1].is_verb == seg.is_verb:
                prev = words[-1]
                words[-1] = Word(
                    word=prev.word + token, is_verb=prev.is_verb, attached=prev.attached,
                )
            else:
                words.append(Word(word=token, is_verb=seg.is_verb, attached=attached))
        gap = seg.text[-1].isspace()
    return words


def words_to_segments(words: List[Word]) -> List[Segment]:
    """Join words back into maximal same-emphasis segments.

    WHY: Segments are concatenated without separators on the wire and
    when deriving text, so each one must carry its own boundary space.

    RULES:
    - Consecutive words with the same is_verb become one segment,
      joined by single spaces (no space before an attached word)
    - Every segment except the last gets one trailing space, unless the
      next segment starts with an attached word
    - The first word's attached flag is ignored
    - [] → [Segment("", False)], never an empty list
    """
    if not words:
        return [Segment(text="", is_verb=False)]

    segments: List[Segment] = []
    for is_verb, group in itertools.groupby(words, key=lambda w: w.is_verb):
        run = list(group)
        if segments and not run[0].attached:
            segments[-1].text += " "
        text = run[0].word
        for w in run[1:]:
            text += w.word if w.attached else " " + w.word
        segments.append(Segment(text=text, is_verb=is_verb))
    return segments


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------


def _strip_stray_tags(text: str) -> str:
    return _STRAY_VERB_TAG_RE.sub("", _STRAY_CHUNK_TAG_RE.sub("", text))


def _parse_segments(content: str) -> List[Segment]:
    """Build the segment list for one chunk's inner content.

    Text outside <v> spans becomes non-verb segments, text inside becomes
    verb segments, left to right. Empty pieces are dropped.
    """
    content = _STRAY_CHUNK_TAG_RE.sub("", content).strip()

    segments: List[Segment] = []
    cursor = 0
    for match in _VERB_SPAN_RE.finditer(content):
        before = _STRAY_VERB_TAG_RE.sub("", content[cursor:match.start()])
        if before:
            segments.append(Segment(text=before, is_verb=False))
        inner = _STRAY_VERB_TAG_RE.sub("", match.group(1))
        if inner:
            segments.append(Segment(text=inner, is_verb=True))
        cursor = match.end()

    after = _STRAY_VERB_TAG_RE.sub("", content[cursor:])
    if after:
        segments.append(Segment(text=after, is_verb=False))

    if not segments:
        segments.append(Segment(text="", is_verb=False))
    return segments


def _append_orphan(chunk: Chunk, orphan: str) -> None:
    """Append orphan text to the end of a chunk, joined by one space."""
    last = chunk.segments[-1]
    if last.is_verb:
        chunk.segments.append(Segment(text=" " + orphan, is_verb=False))
    elif last.text:
        last.text = last.text.rstrip() + " " + orphan
    else:
        last.text = orphan
    chunk.text = derive_text(chunk.segments)


def _prepend_orphan(chunk: Chunk, orphan: str) -> None:
    """Prepend orphan text to the start of a chunk, joined by one space."""
    first = chunk.segments[0]
    if first.is_verb:
        chunk.segments.insert(0, Segment(text=orphan + " ", is_verb=False))
    elif first.text:
        first.text = orphan + " " + first.text.lstrip()
    else:
        first.text = orphan
    chunk.text = derive_text(chunk.segments)


def parse_tagged(tagged: Optional[str]) -> List[Chunk]:
    """Parse a tagged wire string into an ordered chunk sequence.

    WHY: This is the entry point for every producer output and every
    regenerated translation. It must tolerate sloppy LLM markup: stray
    tags, mismatched closing numbers, text left outside any chunk.

    HOW: Collect (tag, content) for each matched <cN>...</cN> span and the
    orphan text between spans. Build segments per span, then fold each
    non-blank orphan into the chunk before it (or, for text preceding the
    first span, into the first chunk).

    RULES:
    - tag is taken as parsed; gaps and non-1 starts are kept
    - No spans → [] (not an error)
    - Orphan text is never dropped when at least one chunk exists
    - Orphan text next to a verb segment gets its own non-verb segment

    Args:
        tagged: Wire string, e.g. "<c1>The <v>quick</v> fox</c1>".

    Returns:
        Chunk list in input order.
    """
    if not tagged:
        return []

    chunks: List[Chunk] = []
    # (index of preceding chunk or -1, orphan text)
    orphans: List[Tuple[int, str]] = []

    cursor = 0
    for match in _CHUNK_SPAN_RE.finditer(tagged):
        orphans.append((len(chunks) - 1, tagged[cursor:match.start()]))
        chunks.append(make_chunk(int(match.group(1)), _parse_segments(match.group(2))))
        cursor = match.end()
    orphans.append((len(chunks) - 1, tagged[cursor:]))

    if not chunks:
        return []

    for owner, raw in orphans:
        orphan = " ".join(_strip_stray_tags(raw).split())
        if not orphan:
            continue
        if owner >= 0:
            _append_orphan(chunks[owner], orphan)
        else:
            _prepend_orphan(chunks[0], orphan)

    return chunks


# ---------------------------------------------------------------------------
# Serialize / display
# ---------------------------------------------------------------------------


def chunk_to_tagged(chunk: Chunk) -> str:
    body = "".join(
        "<v>{}</v>".format(seg.text) if seg.is_verb else seg.text
        for seg in chunk.segments
    )
    return "<c{tag}>{body}</c{tag}>".format(tag=chunk.tag, body=body)


def chunks_to_tagged(chunks: List[Chunk]) -> str:
    """Serialize chunks to the wire format, joined by single spaces.

    Uses each chunk's current tag, so callers that edited the sequence
    get contiguous 1..N numbering for free.
    """
    return " ".join(chunk_to_tagged(chunk) for chunk in chunks)


def chunks_to_slash(chunks: List[Chunk]) -> str:
    """Display string: chunk texts joined with " / ". Drops emphasis."""
    return DISPLAY_SEPARATOR.join(chunk.text for chunk in chunks)
