"""FastAPI application exposing the chunk codec and edit sessions.

WHY: The worksheet front end (and scripts) need to parse producer
output, and to re-chunk sentences interactively with an explicit
draft/commit cycle, without reimplementing the wire grammar client-side.

HOW: A single FastAPI app. POST /parse is stateless. /sessions endpoints
wrap a SessionStore of EditSession objects: create from a tagged string,
open a draft, split/merge/toggle, commit or cancel, delete.

RULES:
- Error responses use the shared ErrorResponse schema
- Unknown session → 404, session state conflicts → 409,
  out-of-range chunk/word index → 422
- The session store is a module-level singleton, cleaned up periodically
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Callable, List

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from sentence_engine import __version__
from sentence_engine.config import SERVER_HOST, SERVER_PORT
from sentence_engine.core.codec import chunks_to_slash, chunks_to_tagged, parse_tagged
from sentence_engine.core.ir import Chunk
from sentence_engine.errors import ChunkIndexError, SessionStateError
from sentence_engine.server.models import (
    CreateSessionRequest,
    ErrorResponse,
    HealthResponse,
    MergeRequest,
    ParseRequest,
    ParseResponse,
    SessionResponse,
    WordTargetRequest,
    chunk_models,
)
from sentence_engine.server.sessions import SessionStore, StoredSession

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App and store setup
# ---------------------------------------------------------------------------

session_store = SessionStore()


async def _periodic_cleanup() -> None:
    """Drop idle sessions every 5 minutes."""
    while True:
        await asyncio.sleep(300)
        session_store.cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(_periodic_cleanup())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


app = FastAPI(
    lifespan=lifespan,
    title="Sentence Engine API",
    description=(
        "Parse phrase-chunked sentences in the <cN>/<v> tagged format and "
        "re-chunk them interactively: open a draft, split, merge, mark verbs, "
        "then commit or cancel."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Session not found"}}
_EDIT_ERRORS = {
    404: {"model": ErrorResponse, "description": "Session not found"},
    409: {"model": ErrorResponse, "description": "No edit session open, or one already open"},
    422: {"model": ErrorResponse, "description": "Chunk or word index out of range"},
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_or_404(session_id: str) -> StoredSession:
    stored = session_store.get(session_id)
    if stored is None:
        raise HTTPException(status_code=404, detail="Session not found: {}".format(session_id))
    return stored


def _session_to_response(stored: StoredSession) -> SessionResponse:
    session = stored.session
    return SessionResponse(
        id=stored.id,
        is_editing=session.is_editing,
        committed=chunk_models(session.committed),
        draft=chunk_models(session.draft) if session.draft is not None else None,
        tagged=session.tagged(),
        slash=session.slash(),
        original=stored.original,
    )


def _run_edit(session_id: str, operation: Callable[[StoredSession], List[Chunk]]) -> SessionResponse:
    """Apply an editor operation, translating core errors to HTTP errors."""
    stored = _get_or_404(session_id)
    try:
        operation(stored)
    except SessionStateError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ChunkIndexError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _session_to_response(stored)


# ---------------------------------------------------------------------------
# Endpoints: Codec
# ---------------------------------------------------------------------------


@app.post(
    "/parse",
    response_model=ParseResponse,
    tags=["codec"],
    summary="Parse a tagged string",
    description=(
        "Parse a <cN>...</cN> tagged string into chunks. Returns an empty chunk "
        "list (not an error) when no chunk span is recognized."
    ),
)
async def parse(request: ParseRequest) -> ParseResponse:
    chunks = parse_tagged(request.tagged)
    return ParseResponse(
        chunks=chunk_models(chunks),
        tagged=chunks_to_tagged(chunks),
        slash=chunks_to_slash(chunks),
    )


# ---------------------------------------------------------------------------
# Endpoints: Sessions
# ---------------------------------------------------------------------------


@app.post(
    "/sessions",
    response_model=SessionResponse,
    status_code=201,
    tags=["sessions"],
    summary="Load a sentence for editing",
    responses={429: {"model": ErrorResponse, "description": "Too many open sessions"}},
)
async def create_session(request: CreateSessionRequest) -> SessionResponse:
    try:
        stored = session_store.create(request.tagged, original=request.original)
    except ValueError as exc:
        raise HTTPException(status_code=429, detail=str(exc))
    return _session_to_response(stored)


@app.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    tags=["sessions"],
    summary="Get a sentence's committed and draft chunks",
    responses=_NOT_FOUND,
)
async def get_session(session_id: str) -> SessionResponse:
    return _session_to_response(_get_or_404(session_id))


@app.delete(
    "/sessions/{session_id}",
    status_code=204,
    tags=["sessions"],
    summary="Delete a session",
    responses=_NOT_FOUND,
)
async def delete_session(session_id: str) -> Response:
    if not session_store.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found: {}".format(session_id))
    return Response(status_code=204)


@app.post(
    "/sessions/{session_id}/edit",
    response_model=SessionResponse,
    tags=["sessions"],
    summary="Open a draft",
    description="Deep-copies the committed chunks into a new draft.",
    responses=_EDIT_ERRORS,
)
async def begin_edit(session_id: str) -> SessionResponse:
    return _run_edit(session_id, lambda s: s.session.begin_edit())


@app.post(
    "/sessions/{session_id}/commit",
    response_model=SessionResponse,
    tags=["sessions"],
    summary="Commit the draft",
    description="Replaces the committed chunks with the draft and closes it.",
    responses=_EDIT_ERRORS,
)
async def commit(session_id: str) -> SessionResponse:
    stored = _get_or_404(session_id)
    response = _run_edit(session_id, lambda s: s.session.commit())
    logger.info("Committed session %s: %s", session_id, stored.session.tagged())
    return response


@app.post(
    "/sessions/{session_id}/cancel",
    response_model=SessionResponse,
    tags=["sessions"],
    summary="Discard the draft",
    responses=_EDIT_ERRORS,
)
async def cancel(session_id: str) -> SessionResponse:
    def _cancel(stored: StoredSession) -> List[Chunk]:
        stored.session.cancel()
        return stored.session.committed

    return _run_edit(session_id, _cancel)


@app.post(
    "/sessions/{session_id}/split",
    response_model=SessionResponse,
    tags=["editing"],
    summary="Split a chunk before a word",
    description=(
        "Starts a new chunk at word_index. word_index 0 merges the chunk into "
        "the previous one instead. Requires an open draft."
    ),
    responses=_EDIT_ERRORS,
)
async def split(session_id: str, request: WordTargetRequest) -> SessionResponse:
    return _run_edit(
        session_id,
        lambda s: s.session.split(request.chunk_index, request.word_index),
    )


@app.post(
    "/sessions/{session_id}/merge",
    response_model=SessionResponse,
    tags=["editing"],
    summary="Merge a chunk with the next one",
    description="No-op for the last chunk. Requires an open draft.",
    responses=_EDIT_ERRORS,
)
async def merge(session_id: str, request: MergeRequest) -> SessionResponse:
    return _run_edit(session_id, lambda s: s.session.merge(request.index))


@app.post(
    "/sessions/{session_id}/toggle-verb",
    response_model=SessionResponse,
    tags=["editing"],
    summary="Toggle a word's verb mark",
    description="Edits the draft when one is open, otherwise the committed chunks.",
    responses=_EDIT_ERRORS,
)
async def toggle_verb(session_id: str, request: WordTargetRequest) -> SessionResponse:
    return _run_edit(
        session_id,
        lambda s: s.session.toggle_verb(request.chunk_index, request.word_index),
    )


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api(host: str = SERVER_HOST, port: int = SERVER_PORT) -> None:
    """Entry point for the sentence-engine-api console script."""
    import uvicorn
    uvicorn.run(app, host=host, port=port)
