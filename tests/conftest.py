"""Shared test fixtures for the sentence_engine test suite.

WHY: Most test modules work on the same sample sentence: two chunks with
one verb each. Centralizing it keeps the expected segment tables in one
place.

HOW: Pytest fixtures provide the wire string, the hand-built chunk list
it must parse to, and a worksheet JSON document with one parsed and one
failed sentence.

RULES:
- SAMPLE_TAGGED parses exactly to the sample_chunks fixture
- Fixtures return fresh objects so tests may mutate them
"""

from typing import Any, Dict

import pytest

from sentence_engine.core.ir import Chunk, Segment

SAMPLE_TAGGED = "<c1>The <v>quick</v> fox</c1> <c2>jumps <v>over</v> the dog</c2>"

SAMPLE_KOREAN_TAGGED = "<c1>그 빠른 여우는</c1> <c2>개를 뛰어넘는다</c2>"


@pytest.fixture
def sample_tagged() -> str:
    return SAMPLE_TAGGED


@pytest.fixture
def sample_chunks():
    """The chunk list SAMPLE_TAGGED parses to."""
    return [
        Chunk(
            tag=1,
            text="The quick fox",
            segments=[
                Segment("The ", False),
                Segment("quick", True),
                Segment(" fox", False),
            ],
        ),
        Chunk(
            tag=2,
            text="jumps over the dog",
            segments=[
                Segment("jumps ", False),
                Segment("over", True),
                Segment(" the dog", False),
            ],
        ),
    ]


@pytest.fixture
def worksheet_data() -> Dict[str, Any]:
    """Producer JSON for a two-sentence worksheet; the second failed."""
    return {
        "title": "UNIT 01",
        "subtitle": "문장 해석 연습",
        "sentences": [
            {
                "original": "The quick fox jumps over the dog.",
                "english_tagged": "<c1>The <v>quick</v> fox</c1> <c2>jumps <v>over</v> the dog.</c2>",
                "korean_literal_tagged": SAMPLE_KOREAN_TAGGED,
                "korean_natural": "빠른 여우가 개를 뛰어넘는다.",
            },
            {
                "original": "It was late.",
            },
        ],
    }
