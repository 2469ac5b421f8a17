"""Word-level chunk editor: split, merge, and emphasis toggling.

WHY: Students and teachers re-chunk sentences by hand: a click between
words splits a chunk, a click on a chunk's first word merges it back,
a double click marks a word as a verb. Every edit must leave the chunk
sequence in a state the codec can serialize and the regenerator can
translate one chunk per tag.

HOW: Each operation derives the addressed chunk's word list, rebuilds
the affected chunks through words_to_segments / make_chunk (so text is
always derived from segments), and renumbers tags after structural
changes. Operations are pure: they copy the input and return a new
sequence.

RULES:
- split(i, 0) means "merge with the previous chunk"; split(0, 0) is a no-op
- merge(last) is a no-op
- Any other out-of-range chunk or word index raises ChunkIndexError
- split and merge renumber all tags 1..N; toggle_verb never renumbers
- toggle_verb changes segments only, never the visible text
"""

from __future__ import annotations

import logging
from typing import List

from sentence_engine.core.codec import (
    make_chunk,
    renumber,
    segments_to_words,
    words_to_segments,
)
from sentence_engine.core.ir import Chunk, Segment, Word, copy_chunks
from sentence_engine.errors import ChunkIndexError

logger = logging.getLogger(__name__)


def _check_chunk_index(chunks: List[Chunk], index: int) -> None:
    if not 0 <= index < len(chunks):
        raise ChunkIndexError(
            "Chunk index {} out of range (sequence has {} chunks)".format(
                index, len(chunks)
            )
        )


def _check_word_index(words: List[Word], index: int, chunk_index: int) -> None:
    if not 0 <= index < len(words):
        raise ChunkIndexError(
            "Word index {} out of range for chunk {} ({} words)".format(
                index, chunk_index, len(words)
            )
        )


def word_count(chunk: Chunk) -> int:
    return len(segments_to_words(chunk.segments))


def split(chunks: List[Chunk], chunk_index: int, word_index: int) -> List[Chunk]:
    """Split a chunk so that word_index starts a new chunk.

    WHY: The user clicks the word that should begin the next translation
    unit. Clicking the first word has no "before" part, so it is read as
    "join this chunk to the previous one" instead.

    HOW: Partition the chunk's words at word_index, build one chunk from
    each part, splice both in place of the original, renumber.

    RULES:
    - word_index == 0 → merge(chunk_index - 1); no-op when chunk_index == 0
    - Otherwise 0 < word_index < word count, and the result has one
      more chunk than the input
    - before + after words == original words

    Args:
        chunks: Current sequence (not modified).
        chunk_index: Position of the chunk to split.
        word_index: Index of the first word of the new second chunk.

    Returns:
        A new, renumbered chunk sequence.
    """
    _check_chunk_index(chunks, chunk_index)

    if word_index == 0:
        if chunk_index == 0:
            logger.debug("split(0, 0) has no previous chunk; ignoring")
            return copy_chunks(chunks)
        return merge(chunks, chunk_index - 1)

    words = segments_to_words(chunks[chunk_index].segments)
    _check_word_index(words, word_index, chunk_index)

    before = make_chunk(0, words_to_segments(words[:word_index]))
    after = make_chunk(0, words_to_segments(words[word_index:]))

    result = copy_chunks(chunks)
    result[chunk_index:chunk_index + 1] = [before, after]
    return renumber(result)


def merge(chunks: List[Chunk], index: int) -> List[Chunk]:
    """Merge the chunk at index with the chunk that follows it.

    HOW: Concatenate first segments, a single-space non-verb separator,
    and second segments, then round-trip through words so adjacent
    same-emphasis runs across the splice collapse into one segment.

    RULES:
    - index == last → no-op (nothing follows)
    - Result has one chunk fewer; tags renumbered 1..N
    - Merged words == first words + second words
    - Merged text == first text + " " + second text
    """
    _check_chunk_index(chunks, index)

    if index == len(chunks) - 1:
        logger.debug("merge(%d) on last chunk; ignoring", index)
        return copy_chunks(chunks)

    first, second = chunks[index], chunks[index + 1]
    spliced = (
        [seg.copy() for seg in first.segments]
        + [Segment(text=" ", is_verb=False)]
        + [seg.copy() for seg in second.segments]
    )
    merged = make_chunk(0, words_to_segments(segments_to_words(spliced)))

    result = copy_chunks(chunks)
    result[index:index + 2] = [merged]
    return renumber(result)


def toggle_verb(chunks: List[Chunk], chunk_index: int, word_index: int) -> List[Chunk]:
    """Flip the emphasis flag of one word.

    No structural change: tags and chunk count stay as they are.
    """
    _check_chunk_index(chunks, chunk_index)

    target = chunks[chunk_index]
    words = segments_to_words(target.segments)
    _check_word_index(words, word_index, chunk_index)

    flipped = words[word_index]
    words[word_index] = Word(
        word=flipped.word, is_verb=not flipped.is_verb, attached=flipped.attached,
    )

    result = copy_chunks(chunks)
    result[chunk_index] = make_chunk(target.tag, words_to_segments(words))
    return result
