"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and the generated OpenAPI docs.

HOW: Each endpoint has its own request model where it takes a body, and
responses share ChunkModel / SessionResponse. Chunk conversion from the
core dataclasses lives here so the app module stays thin.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Indices are 0-based positions; tags are 1-based and informational
- Python 3.9+ compatible (Optional from typing, no PEP 604 unions)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from sentence_engine.core.ir import Chunk


# ---------------------------------------------------------------------------
# Chunk model
# ---------------------------------------------------------------------------


class SegmentModel(BaseModel):
    text: str = Field(description="Segment text including its boundary spacing.")
    is_verb: bool = Field(description="True when the run is marked as a verb (underlined).")


class ChunkModel(BaseModel):
    tag: int = Field(description="1-based chunk position number.")
    text: str = Field(description="Flattened, whitespace-normalized chunk text.")
    segments: List[SegmentModel] = Field(description="Same-emphasis runs, in order.")

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> ChunkModel:
        return cls(
            tag=chunk.tag,
            text=chunk.text,
            segments=[
                SegmentModel(text=s.text, is_verb=s.is_verb) for s in chunk.segments
            ],
        )


def chunk_models(chunks: List[Chunk]) -> List[ChunkModel]:
    return [ChunkModel.from_chunk(c) for c in chunks]


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class ParseRequest(BaseModel):
    tagged: str = Field(description="Tagged wire string, e.g. '<c1>The <v>quick</v> fox</c1>'.")


class CreateSessionRequest(BaseModel):
    tagged: str = Field(description="Tagged wire string for the sentence to edit.")
    original: Optional[str] = Field(
        default=None,
        description="Raw sentence text, shown when the tagged string has no chunks.",
    )


class WordTargetRequest(BaseModel):
    chunk_index: int = Field(description="0-based chunk position.")
    word_index: int = Field(description="0-based word position within the chunk.")


class MergeRequest(BaseModel):
    index: int = Field(description="0-based position of the first chunk to merge.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class ParseResponse(BaseModel):
    chunks: List[ChunkModel] = Field(description="Parsed chunks; empty when nothing was recognized.")
    tagged: str = Field(description="Re-serialized wire string.")
    slash: str = Field(description="Display string, chunks joined by ' / '.")


class SessionResponse(BaseModel):
    id: str = Field(description="Session identifier (UUID hex).")
    is_editing: bool = Field(description="True while a draft is open.")
    committed: List[ChunkModel] = Field(description="Last committed chunk sequence.")
    draft: Optional[List[ChunkModel]] = Field(
        default=None,
        description="In-progress draft, only present while editing.",
    )
    tagged: str = Field(description="Wire string of the committed sequence.")
    slash: str = Field(description="Display string of the current (draft or committed) sequence.")
    original: Optional[str] = Field(default=None, description="Raw sentence text, if supplied.")


class ErrorResponse(BaseModel):
    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
