"""Unit tests for the tagged-text codec.

WHY: Every producer response and every edit passes through the codec.
A parsing slip silently drops words from a printed worksheet or breaks
the one-to-one chunk mapping the regenerator relies on.

HOW: Tests are grouped by grammar rule and helper:
  - Chunk spans and tag numbers
  - Verb segments
  - Stray and mismatched tags
  - Orphan text absorption
  - Serialization, display, and round trips
  - segments_to_words / words_to_segments
"""

import pytest

from sentence_engine.core.codec import (
    chunks_to_slash,
    chunks_to_tagged,
    derive_text,
    parse_tagged,
    segments_to_words,
    words_to_segments,
)
from sentence_engine.core.editor import merge, split, toggle_verb
from sentence_engine.core.ir import Chunk, Segment, Word


def _flags(chunk):
    return [(w.word, w.is_verb) for w in segments_to_words(chunk.segments)]


class TestChunkSpans:

    def test_sample_parses_to_expected_chunks(self, sample_tagged, sample_chunks):
        assert parse_tagged(sample_tagged) == sample_chunks

    def test_tags_kept_as_parsed(self):
        chunks = parse_tagged("<c3>a</c3> <c7>b</c7>")
        assert [c.tag for c in chunks] == [3, 7]

    def test_no_spans_returns_empty_list(self):
        assert parse_tagged("The quick fox jumps.") == []

    def test_empty_and_none_input(self):
        assert parse_tagged("") == []
        assert parse_tagged(None) == []

    def test_chunk_text_is_trimmed(self):
        chunks = parse_tagged("<c1>  the  fox </c1>")
        assert chunks[0].text == "the fox"
        assert chunks[0].segments == [Segment("the  fox", False)]

    def test_empty_chunk_has_one_empty_segment(self):
        chunks = parse_tagged("<c1></c1>")
        assert chunks[0].text == ""
        assert chunks[0].segments == [Segment("", False)]

    def test_other_markup_is_literal_text(self):
        chunks = parse_tagged("<c1>a <b>bold</b> word</c1>")
        assert chunks[0].text == "a <b>bold</b> word"


class TestVerbSegments:

    def test_leading_verb(self):
        chunks = parse_tagged("<c1><v>is</v> good</c1>")
        assert chunks[0].segments == [Segment("is", True), Segment(" good", False)]

    def test_whole_chunk_verb(self):
        chunks = parse_tagged("<c1><v>has been working</v></c1>")
        assert chunks[0].segments == [Segment("has been working", True)]
        assert chunks[0].text == "has been working"

    def test_two_verbs_in_one_chunk(self):
        chunks = parse_tagged("<c1>we <v>ran</v> and <v>hid</v></c1>")
        assert [s.is_verb for s in chunks[0].segments] == [False, True, False, True]
        assert chunks[0].text == "we ran and hid"


class TestStrayTags:

    def test_mismatched_close_is_not_a_pair(self):
        # <c1>...</c2> never closes; only the real <c2> pair is matched
        chunks = parse_tagged("<c1>lost words</c2> <c2>kept</c2>")
        assert len(chunks) == 1
        assert chunks[0].tag == 2
        # the unmatched span is orphan text before the first chunk
        assert chunks[0].text == "lost words kept"

    def test_nested_chunk_tag_stripped_from_content(self):
        chunks = parse_tagged("<c1>the <c9>fox</c1>")
        assert chunks[0].text == "the fox"

    def test_unmatched_verb_tags_stripped(self):
        chunks = parse_tagged("<c1>the <v>fox runs</c1>")
        assert chunks[0].text == "the fox runs"
        assert all(not s.is_verb for s in chunks[0].segments)

    def test_stray_close_verb_stripped(self):
        chunks = parse_tagged("<c1><v>runs</v> away</v></c1>")
        assert chunks[0].text == "runs away"
        assert chunks_to_tagged(chunks) == "<c1><v>runs</v> away</c1>"


class TestOrphanText:

    def test_trailing_orphan_appended_to_last_chunk(self):
        chunks = parse_tagged("<c1>the fox</c1> <c2>jumps</c2> away.")
        assert chunks[1].text == "jumps away."
        assert chunks[1].segments[-1].text == "jumps away."

    def test_orphan_between_chunks_goes_to_preceding(self):
        chunks = parse_tagged("<c1>the fox</c1> quickly <c2>jumps</c2>")
        assert chunks[0].text == "the fox quickly"
        assert chunks[1].text == "jumps"

    def test_leading_orphan_prepended_to_first_chunk(self):
        chunks = parse_tagged("So <c1>the fox</c1> <c2>jumps</c2>")
        assert chunks[0].text == "So the fox"
        assert chunks[0].segments[0].text == "So the fox"

    def test_orphan_after_verb_segment_stays_unmarked(self):
        chunks = parse_tagged("<c1>it <v>ran</v></c1> away")
        assert chunks[0].text == "it ran away"
        assert _flags(chunks[0]) == [("it", False), ("ran", True), ("away", False)]

    def test_whitespace_between_chunks_is_not_orphan_text(self, sample_tagged):
        chunks = parse_tagged(sample_tagged)
        assert chunks[0].text == "The quick fox"


class TestSerializeAndDisplay:

    def test_serialize_sample(self, sample_chunks, sample_tagged):
        assert chunks_to_tagged(sample_chunks) == sample_tagged

    def test_display_sample(self, sample_chunks):
        assert chunks_to_slash(sample_chunks) == "The quick fox / jumps over the dog"

    def test_display_of_empty_sequence(self):
        assert chunks_to_slash([]) == ""
        assert chunks_to_tagged([]) == ""

    def test_parse_serialize_parse_is_stable(self):
        raw = "Well, <c2>the <v>fox</v></c2> then <c5><v>jumps</v> high</c5> now"
        first = parse_tagged(raw)
        second = parse_tagged(chunks_to_tagged(first))
        assert [c.tag for c in second] == [c.tag for c in first]
        assert [c.text for c in second] == [c.text for c in first]
        assert [_flags(c) for c in second] == [_flags(c) for c in first]

    @pytest.mark.parametrize("raw", [
        "<c1>The <v>quick</v> fox</c1> <c2>jumps <v>over</v> the dog.</c2>",
        "<c1></c1> <c2>fox</c2>",
        "<c1><v>has been working</v></c1>",
        "<c1>it <v>has</v></c1> <c2><v>been</v> done</c2>",
        "<c1>the dog <v>ran</v>.</c1> <c2><v>Stop</v>!</c2>",
    ], ids=["sample", "empty-chunk", "all-verb", "verbs-across-boundary", "punctuation"])
    def test_serialize_parse_round_trip(self, raw):
        chunks = parse_tagged(raw)
        parsed = parse_tagged(chunks_to_tagged(chunks))
        assert [c.tag for c in parsed] == [c.tag for c in chunks]
        assert [c.text for c in parsed] == [c.text for c in chunks]
        assert [_flags(c) for c in parsed] == [_flags(c) for c in chunks]

    @pytest.mark.parametrize("edit", [
        lambda cs: toggle_verb(cs, 0, 0),
        lambda cs: toggle_verb(cs, 0, 2),
        lambda cs: merge(cs, 0),
        lambda cs: split(cs, 0, 3),
    ], ids=["toggle-first", "unmark-verb", "merge", "split-before-punctuation"])
    def test_round_trip_after_edit(self, edit):
        chunks = edit(parse_tagged("<c1>the dog <v>ran</v>.</c1> <c2><v>Stop</v>!</c2>"))
        parsed = parse_tagged(chunks_to_tagged(chunks))
        assert [c.tag for c in parsed] == list(range(1, len(chunks) + 1))
        assert [c.text for c in parsed] == [c.text for c in chunks]
        assert [_flags(c) for c in parsed] == [_flags(c) for c in chunks]

    def test_round_trip_of_renumbered_sequence(self):
        chunks = [
            Chunk(1, "a b", words_to_segments([Word("a", True), Word("b")])),
            Chunk(2, "c", words_to_segments([Word("c")])),
        ]
        parsed = parse_tagged(chunks_to_tagged(chunks))
        assert [c.tag for c in parsed] == [1, 2]
        assert [c.text for c in parsed] == ["a b", "c"]
        assert [_flags(c) for c in parsed] == [_flags(c) for c in chunks]


class TestWordHelpers:

    def test_segments_to_words(self, sample_chunks):
        words = segments_to_words(sample_chunks[0].segments)
        assert words == [Word("The", False), Word("quick", True), Word("fox", False)]

    def test_whitespace_runs_are_discarded(self):
        words = segments_to_words([Segment("  a \t b  ", False), Segment("   ", True)])
        assert [w.word for w in words] == ["a", "b"]

    def test_words_to_segments_groups_and_spaces(self):
        segments = words_to_segments([
            Word("jumps"), Word("over", True), Word("the"), Word("dog"),
        ])
        assert segments == [
            Segment("jumps ", False),
            Segment("over ", True),
            Segment("the dog", False),
        ]

    def test_empty_words_give_one_empty_segment(self):
        assert words_to_segments([]) == [Segment("", False)]

    @pytest.mark.parametrize("segments", [
        [Segment("", False)],
        [Segment("has been working", True)],
        [Segment("The  big ", False), Segment("red", True), Segment(" fox ran", False)],
        [Segment("it ", False), Segment("has", True), Segment(" ", False),
         Segment("been", True), Segment(" done", False)],
        [Segment("the dog ", False), Segment("ran", True), Segment(".", False)],
        [Segment("a", True), Segment("b", True)],
    ], ids=["empty", "all-verb", "mixed", "verbs-across-splice", "punctuation", "touching-runs"])
    def test_word_round_trip_is_stable(self, segments):
        words = segments_to_words(segments)
        assert segments_to_words(words_to_segments(words)) == words

    def test_punctuation_against_verb_is_attached(self):
        segments = [Segment("the dog ", False), Segment("ran", True), Segment(".", False)]
        words = segments_to_words(segments)
        assert words[-1] == Word(".", False, attached=True)
        assert words_to_segments(words) == segments

    def test_touching_runs_with_one_flag_form_one_word(self):
        words = segments_to_words([Segment("a", True), Segment("b", True)])
        assert words == [Word("ab", True)]

    def test_attached_first_word_gets_no_special_spacing(self):
        segments = words_to_segments([Word(".", False, attached=True), Word("then")])
        assert segments == [Segment(". then", False)]

    @pytest.mark.parametrize("segments, expected", [
        ([Segment("The ", False), Segment("quick", True), Segment(" fox", False)], "The quick fox"),
        ([Segment("  a  ", False), Segment("b", True)], "a b"),
        ([Segment("", False)], ""),
    ])
    def test_derive_text(self, segments, expected):
        assert derive_text(segments) == expected
