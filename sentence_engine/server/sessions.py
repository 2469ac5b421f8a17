"""In-memory store of sentence edit sessions with TTL cleanup.

WHY: The HTTP API lets a client load a sentence, open a draft, split and
merge, and commit, across several requests. Each sentence needs exactly
one EditSession that outlives a single request, and abandoned sessions
must not pile up.

HOW: Two components work together:
  StoredSession — dataclass wrapping an EditSession with id and timestamps
  SessionStore  — thread-safe dict-based store with create/get/list/delete,
                  a `touch` on every access, and TTL cleanup

RULES:
- All store mutations are protected by threading.Lock
- One EditSession per stored sentence; the session enforces single-draft
- TTL is measured from the last access (updated_at), not creation
- Session IDs are UUID4 hex strings generated at creation time
- Creating beyond max_sessions raises ValueError
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from sentence_engine.config import MAX_SESSIONS, SESSION_TTL_SECONDS
from sentence_engine.core.session import EditSession

logger = logging.getLogger(__name__)


@dataclass
class StoredSession:
    """An EditSession plus the bookkeeping the store needs.

    RULES:
    - id: UUID4 hex, immutable after creation
    - original: the raw sentence, used when the tagged text did not parse
    - created_at / updated_at: epoch seconds; updated_at bumps on each access
    """

    id: str
    session: EditSession
    original: Optional[str]
    created_at: float
    updated_at: float


class SessionStore:
    """Thread-safe in-memory store for edit sessions.

    WHY: Concurrent API requests touch different sentences at once. One
    lock around the dict is enough because each sentence's session is
    edited by a single writer at a time.

    RULES:
    - get() returns None for unknown IDs (no exceptions) and bumps updated_at
    - delete() returns False for unknown IDs
    - cleanup_expired() removes sessions idle longer than the TTL
    """

    def __init__(
        self,
        ttl_seconds: int = SESSION_TTL_SECONDS,
        max_sessions: int = MAX_SESSIONS,
    ) -> None:
        self._sessions: Dict[str, StoredSession] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions

    def create(self, tagged: str, original: Optional[str] = None) -> StoredSession:
        """Parse a tagged sentence and store a new session for it."""
        session = EditSession.from_tagged(tagged)

        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                raise ValueError(
                    "Maximum number of sessions ({}) reached".format(self.max_sessions)
                )
            now = time.time()
            stored = StoredSession(
                id=uuid.uuid4().hex,
                session=session,
                original=original,
                created_at=now,
                updated_at=now,
            )
            self._sessions[stored.id] = stored

        logger.info(
            "Created session %s (%d chunks)", stored.id, len(session.committed)
        )
        return stored

    def get(self, session_id: str) -> Optional[StoredSession]:
        with self._lock:
            stored = self._sessions.get(session_id)
            if stored is not None:
                stored.updated_at = time.time()
            return stored

    def list(self) -> List[StoredSession]:
        """All sessions, oldest first."""
        with self._lock:
            return sorted(self._sessions.values(), key=lambda s: s.created_at)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            stored = self._sessions.pop(session_id, None)
        if stored is None:
            return False
        logger.info("Deleted session %s", session_id)
        return True

    def cleanup_expired(self) -> int:
        """Remove sessions idle for longer than the TTL; return the count."""
        now = time.time()
        with self._lock:
            expired = [
                sid for sid, stored in self._sessions.items()
                if now - stored.updated_at > self._ttl_seconds
            ]
            for sid in expired:
                del self._sessions[sid]

        for sid in expired:
            logger.info("Expired session %s", sid)
        return len(expired)
