"""Abstract base formatter and output container.

WHY: Every worksheet layout consumes the same Worksheet of analysed
sentences but produces different file content. A shared base class lets
the CLI and any other caller run formatters generically.

HOW: BaseFormatter is an ABC with two requirements, a ``name`` property
and a ``format()`` method. FormatterOutput bundles a file suffix with its
content and MIME type.

RULES:
- Subclasses MUST implement ``name`` and ``format()``
- ``format()`` returns a list, one item per output file
- ``suffix`` starts with a hyphen, e.g. ``"-worksheet.txt"``
- The caller prepends the output stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from sentence_engine.core.passage import Worksheet


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the output stem,
                e.g. ``"-worksheet.txt"`` → ``"unit1-worksheet.txt"``.
        content: The file content.
        media_type: MIME type for the content.
    """

    suffix: str
    content: str | bytes
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all worksheet formatters.

    To add a new layout:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Worksheet Text'."""

    @abstractmethod
    def format(self, worksheet: Worksheet) -> list[FormatterOutput]:
        """Render the worksheet into one or more output files."""
