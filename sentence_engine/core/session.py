"""Edit sessions (committed vs. draft) and click/double-click resolution.

WHY: Re-chunking happens in an explicit edit mode: the user opens a
draft, splits and merges freely, then either commits (the draft becomes
the sentence and is sent for regeneration) or cancels (nothing
changed). Word clicks are ambiguous: one click splits, two quick clicks
on the same word toggle its verb mark. Both concerns are small state
machines and live here, free of any UI framework.

HOW: EditSession is a two-slot object: committed and an optional draft.
begin_edit deep-copies committed into draft, editor operations replace
the draft, commit hands the draft over by reference. ActivationResolver
holds at most one pending split with a deadline; a second activation on
the same word before the deadline turns it into a toggle, otherwise the
split is released by poll(), flush(), or the next activation.

RULES:
- At most one draft per session; begin_edit while editing raises
- split/merge require an open draft
- toggle_verb edits the draft when one is open, else the committed sequence
- Draft and committed never share Chunk or Segment objects
- The resolver emits exactly one action per pending activation
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from sentence_engine.config import ACTIVATION_WINDOW_S
from sentence_engine.core import editor
from sentence_engine.core.codec import chunks_to_slash, chunks_to_tagged, parse_tagged
from sentence_engine.core.ir import Chunk, copy_chunks
from sentence_engine.errors import SessionStateError

logger = logging.getLogger(__name__)

WordTarget = Tuple[int, int]
"""(chunk_index, word_index) addressed by a click."""


class EditSession:
    """Committed chunk sequence plus an optional in-progress draft.

    WHY: Edits must be discardable wholesale, and the regenerator must
    only ever see committed sequences.

    RULES:
    - committed: always present (may be an empty list for unparsed input)
    - draft: None outside edit mode
    - current: the draft while editing, otherwise committed
    """

    def __init__(self, chunks: Optional[List[Chunk]] = None) -> None:
        self.committed: List[Chunk] = list(chunks) if chunks else []
        self.draft: Optional[List[Chunk]] = None

    @classmethod
    def from_tagged(cls, tagged: str) -> EditSession:
        return cls(parse_tagged(tagged))

    @property
    def is_editing(self) -> bool:
        return self.draft is not None

    @property
    def current(self) -> List[Chunk]:
        return self.draft if self.draft is not None else self.committed

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def begin_edit(self) -> List[Chunk]:
        """Open a draft: an independent deep copy of the committed chunks."""
        if self.draft is not None:
            raise SessionStateError("An edit session is already open")
        self.draft = copy_chunks(self.committed)
        return self.draft

    def commit(self) -> List[Chunk]:
        """Replace committed with the draft and close the session."""
        if self.draft is None:
            raise SessionStateError("No edit session to commit")
        self.committed = self.draft
        self.draft = None
        return self.committed

    def cancel(self) -> None:
        """Discard the draft. The committed sequence is untouched."""
        if self.draft is None:
            raise SessionStateError("No edit session to cancel")
        self.draft = None

    def load(self, tagged: str) -> List[Chunk]:
        """Replace the whole sentence with a freshly parsed one.

        Any open draft is dropped with it.
        """
        self.committed = parse_tagged(tagged)
        self.draft = None
        return self.committed

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def _require_draft(self, operation: str) -> List[Chunk]:
        if self.draft is None:
            raise SessionStateError(
                "{} requires an open edit session".format(operation)
            )
        return self.draft

    def split(self, chunk_index: int, word_index: int) -> List[Chunk]:
        self.draft = editor.split(self._require_draft("split"), chunk_index, word_index)
        return self.draft

    def merge(self, index: int) -> List[Chunk]:
        self.draft = editor.merge(self._require_draft("merge"), index)
        return self.draft

    def toggle_verb(self, chunk_index: int, word_index: int) -> List[Chunk]:
        if self.draft is not None:
            self.draft = editor.toggle_verb(self.draft, chunk_index, word_index)
            return self.draft
        self.committed = editor.toggle_verb(self.committed, chunk_index, word_index)
        return self.committed

    def apply(self, action: Activation) -> List[Chunk]:
        """Apply a resolved click to this session."""
        chunk_index, word_index = action.target
        if action.kind is ActivationKind.TOGGLE_VERB:
            return self.toggle_verb(chunk_index, word_index)
        return self.split(chunk_index, word_index)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def tagged(self) -> str:
        """Wire string of the committed sequence (for regeneration)."""
        return chunks_to_tagged(self.committed)

    def slash(self) -> str:
        """Display string of whatever the user currently sees."""
        return chunks_to_slash(self.current)


# ---------------------------------------------------------------------------
# Click / double-click resolution
# ---------------------------------------------------------------------------


class ActivationKind(str, enum.Enum):
    SPLIT = "split"
    TOGGLE_VERB = "toggle_verb"


@dataclass(frozen=True)
class Activation:
    """A resolved word activation, ready for EditSession.apply()."""

    kind: ActivationKind
    target: WordTarget


@dataclass(frozen=True)
class _PendingSplit:
    target: WordTarget
    deadline: float


class ActivationResolver:
    """Turns raw word activations into SPLIT or TOGGLE_VERB actions.

    WHY: A double click is two single clicks. Acting on the first click
    immediately would split the chunk before the second click arrives.

    HOW: States are Idle (pending is None) and PendingSplit(target,
    deadline). The clock is injectable so tests and non-UI callers can
    drive time explicitly.

    RULES:
    - activate() on Idle → PendingSplit, returns []
    - activate() on the same target before the deadline → [TOGGLE_VERB], Idle
    - activate() on another target, or after the deadline → releases the
      pending SPLIT and starts a new PendingSplit
    - poll() after the deadline → [SPLIT], Idle
    - flush() releases a pending SPLIT immediately; reset() drops it
    """

    def __init__(
        self,
        window_s: float = ACTIVATION_WINDOW_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window_s <= 0:
            raise ValueError("Activation window must be positive, got {}".format(window_s))
        self.window_s = window_s
        self._clock = clock
        self._pending: Optional[_PendingSplit] = None

    @property
    def pending_target(self) -> Optional[WordTarget]:
        return self._pending.target if self._pending else None

    def _now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else now

    def activate(self, target: WordTarget, now: Optional[float] = None) -> List[Activation]:
        """Register one activation of a word.

        Returns the actions resolved by this event (possibly none).
        """
        now = self._now(now)
        pending = self._pending

        if pending is not None and pending.target == target and now <= pending.deadline:
            self._pending = None
            return [Activation(ActivationKind.TOGGLE_VERB, target)]

        released = []
        if pending is not None:
            released.append(Activation(ActivationKind.SPLIT, pending.target))

        self._pending = _PendingSplit(target=target, deadline=now + self.window_s)
        return released

    def poll(self, now: Optional[float] = None) -> List[Activation]:
        """Release the pending split once its window has passed."""
        pending = self._pending
        if pending is None or self._now(now) <= pending.deadline:
            return []
        self._pending = None
        return [Activation(ActivationKind.SPLIT, pending.target)]

    def flush(self) -> List[Activation]:
        pending = self._pending
        if pending is None:
            return []
        self._pending = None
        return [Activation(ActivationKind.SPLIT, pending.target)]

    def reset(self) -> None:
        self._pending = None
