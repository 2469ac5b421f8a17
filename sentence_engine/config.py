"""Configuration constants, worksheet labels, and .env loading.

WHY: Centralizes every tunable value (click window, session limits,
server address, chunk colour palette) so it is easy to find and
override, instead of being buried in the editor or the HTTP layer.

HOW: python-dotenv loads the .env file on import. Constants are
module-level values, each overridable by an environment variable.

RULES:
- SENTENCE_ENGINE_ACTIVATION_WINDOW_MS: double-click window (default 250 ms)
- SENTENCE_ENGINE_SESSION_TTL / SENTENCE_ENGINE_MAX_SESSIONS: session store limits
- SENTENCE_ENGINE_HOST / SENTENCE_ENGINE_PORT: API server bind address
- CHUNK_COLORS cycles by chunk position, never by tag
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Editor
# ---------------------------------------------------------------------------

ACTIVATION_WINDOW_MS = int(os.getenv("SENTENCE_ENGINE_ACTIVATION_WINDOW_MS", "250"))
ACTIVATION_WINDOW_S = ACTIVATION_WINDOW_MS / 1000.0
"""Second click on the same word within this window toggles instead of splitting."""

# ---------------------------------------------------------------------------
# Session store / API server
# ---------------------------------------------------------------------------

SESSION_TTL_SECONDS = int(os.getenv("SENTENCE_ENGINE_SESSION_TTL", "3600"))
MAX_SESSIONS = int(os.getenv("SENTENCE_ENGINE_MAX_SESSIONS", "500"))
SERVER_HOST = os.getenv("SENTENCE_ENGINE_HOST", "127.0.0.1")
SERVER_PORT = int(os.getenv("SENTENCE_ENGINE_PORT", "8000"))

# ---------------------------------------------------------------------------
# Worksheet presentation
# ---------------------------------------------------------------------------

CHUNK_COLORS = (
    "chunk-1",
    "chunk-2",
    "chunk-3",
    "chunk-4",
    "chunk-5",
    "chunk-6",
)

DEFAULT_WORKSHEET_TITLE = os.getenv("SENTENCE_ENGINE_WORKSHEET_TITLE", "SYNTAX")
LITERAL_LABEL = "직역"
NATURAL_LABEL = "의역"
FAILED_ANALYSIS_TEXT = "분석 실패"


def chunk_color(index: int) -> str:
    """Colour class for the chunk at a 0-based position."""
    return CHUNK_COLORS[index % len(CHUNK_COLORS)]
