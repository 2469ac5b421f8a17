"""Core chunk model: IR, codec, editor, edit sessions, validation, passages.

WHY: The core is the stable heart of the package. The IR dataclasses and
the codec are consumed by every formatter, the CLI, and the HTTP API.

HOW: ir.py defines the data structures, codec.py converts them to and
from the tagged wire format, editor.py applies split/merge/toggle,
session.py holds the committed/draft pair and the click resolver,
validation.py checks raw producer output, passage.py groups analysed
sentences into worksheets.

RULES:
- IR dataclasses are the contract — change with care
- Core modules perform no I/O
"""
