"""Checks and light repair for producer output before it is parsed.

WHY: The producer (an LLM) is asked for an English tagged string and a
Korean literal tagged string with the same number of chunks, covering
every word of the original sentence. It does not always comply. These
helpers measure what came back, patch the most common failure (a
dropped sentence tail), and phrase feedback for a retry.

HOW: Everything works on the raw wire strings with regexes, without
parsing into chunks, so a report can be produced even for input the
codec would reject as "nothing recognized".

RULES:
- count_tags counts opening <cN> tags only
- extract_text removes chunk and emphasis tags, nothing else
- repair_tagged only ever appends a missing tail inside the last </cN>
- Comparisons are whitespace-normalized
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)

_OPEN_CHUNK_RE = re.compile(r"<c\d+>")
_CLOSE_CHUNK_RE = re.compile(r"</c\d+>")
_ANY_CHUNK_TAG_RE = re.compile(r"</?c\d+>")
_VERB_TAG_RE = re.compile(r"</?v>")


def count_tags(tagged: str) -> int:
    return len(_OPEN_CHUNK_RE.findall(tagged or ""))


def extract_text(tagged: str) -> str:
    """Strip all chunk and emphasis tags, leaving the raw sentence text."""
    return _VERB_TAG_RE.sub("", _ANY_CHUNK_TAG_RE.sub("", tagged or ""))


def normalize_whitespace(text: str) -> str:
    return " ".join((text or "").split())


def tagged_to_slash(tagged: str) -> str:
    """Slash display string straight from a wire string.

    Every closing chunk tag becomes " / "; the trailing separator and all
    emphasis tags are dropped, whitespace runs collapse.
    """
    text = _OPEN_CHUNK_RE.sub("", tagged or "")
    text = _CLOSE_CHUNK_RE.sub(" / ", text)
    text = normalize_whitespace(_VERB_TAG_RE.sub("", text))
    if text.endswith("/"):
        text = text[:-1]
    return text.strip()


def repair_tagged(tagged: str, original: str) -> str:
    """Append text the producer left out at the end of the sentence.

    WHY: The most frequent producer failure is stopping one or two words
    early ("...the dog</c4>" for "...the dog barked."). Re-asking costs a
    round trip; appending the tail to the last chunk is safe.

    HOW: If the tagged text (tags removed, normalized) is a prefix of the
    normalized original, insert " " + missing tail right before the last
    closing chunk tag.

    RULES:
    - Already matching → returned unchanged
    - Not a prefix, or no closing tag at all → returned unchanged
    """
    extracted = normalize_whitespace(extract_text(tagged))
    norm = normalize_whitespace(original)
    if extracted == norm or not norm.startswith(extracted):
        return tagged

    missing = norm[len(extracted):].strip()
    closes = list(_CLOSE_CHUNK_RE.finditer(tagged))
    if not missing or not closes:
        return tagged

    last = closes[-1]
    logger.debug("Repairing tagged text: appending %r to last chunk", missing)
    return tagged[:last.start()] + " " + missing + tagged[last.start():]


@dataclass
class AnalysisCheck:
    """Result of checking one producer response against its sentence.

    RULES:
    - tag_match: English and Korean literal have the same chunk count
    - content_match: English (after repair) reproduces the original text
    - english_tagged: the possibly repaired English wire string
    """

    english_count: int
    korean_count: int
    tag_match: bool
    content_match: bool
    repaired: bool
    english_tagged: str
    original: str
    reconstructed: str

    @property
    def ok(self) -> bool:
        return self.tag_match and self.content_match

    def feedback(self) -> List[str]:
        """Retry hints for the producer, one per failed check."""
        messages = []
        if not self.tag_match:
            messages.append(
                "Tag count mismatch: {} English vs {} Korean chunks.".format(
                    self.english_count, self.korean_count
                )
            )
        if not self.content_match:
            messages.append(
                'Your chunks are missing words. Original: "{}" but your chunks '
                'give: "{}". EVERY word must appear in exactly one chunk.'.format(
                    self.original, self.reconstructed
                )
            )
        return messages


def check_analysis(english_tagged: str, korean_tagged: str, original: str) -> AnalysisCheck:
    """Validate a producer response and repair the English side if possible.

    Args:
        english_tagged: English wire string with <cN> and <v> tags.
        korean_tagged: Korean literal wire string with <cN> tags.
        original: The sentence the producer was asked to analyse.

    Returns:
        AnalysisCheck with counts, match flags, and the repaired string.
    """
    english_count = count_tags(english_tagged)
    korean_count = count_tags(korean_tagged)
    norm = normalize_whitespace(original)

    reconstructed = normalize_whitespace(extract_text(english_tagged))
    repaired = False
    if reconstructed != norm:
        fixed = repair_tagged(english_tagged, original)
        if fixed != english_tagged:
            english_tagged = fixed
            reconstructed = normalize_whitespace(extract_text(english_tagged))
            repaired = True

    check = AnalysisCheck(
        english_count=english_count,
        korean_count=korean_count,
        tag_match=english_count == korean_count,
        content_match=reconstructed == norm,
        repaired=repaired,
        english_tagged=english_tagged,
        original=norm,
        reconstructed=reconstructed,
    )
    if not check.ok:
        logger.warning(
            "Analysis check failed (en=%d, kr=%d, content_match=%s)",
            english_count, korean_count, check.content_match,
        )
    return check
