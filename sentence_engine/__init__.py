"""Sentence Engine — phrase-chunked sentences for bilingual worksheets.

WHY: Worksheet sentences arrive from a producer as flat tagged strings
("<c1>The <v>quick</v> fox</c1> <c2>jumps</c2>"). Teachers re-chunk them
by hand before the Korean literal translation is regenerated and the
sheet is printed. This package owns that chunk model: parsing,
serializing, and word-level editing with an explicit draft/commit cycle.

HOW: Three layers: the codec (wire string ⇄ chunks), the editor
(split/merge/toggle on chunk sequences) with its edit session, and the
consumers (worksheet formatters, CLI, HTTP API). Each layer is
independently testable.

RULES:
- Chunk sequences are the contract between layers
- Every mutation re-derives chunk text from segments
- The core performs no I/O
"""

__version__ = "0.1.0"
