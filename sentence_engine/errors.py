"""Exception hierarchy for the sentence engine.

WHY: Callers (CLI, HTTP layer, tests) need typed exceptions to tell an
editor programming error (bad index) apart from session misuse (split
with no draft open) and from everything else.

RULES:
- SentenceEngineError is the common base
- ChunkIndexError is also an IndexError so generic handlers still work
- Parsing never raises; malformed markup is cleaned up silently
"""

from __future__ import annotations


class SentenceEngineError(Exception):
    """Base class for all sentence engine errors."""


class ChunkIndexError(SentenceEngineError, IndexError):
    """Raised when a chunk or word index lies outside the sequence.

    RULES:
    - Message names the offending index and the valid range
    - The two boundary no-ops (split(0, 0), merge(last)) never raise this
    """


class SessionStateError(SentenceEngineError):
    """Raised when an edit session transition is not allowed.

    Examples: begin_edit while a draft is already open, commit or cancel
    with no draft, split/merge outside an edit session.
    """
