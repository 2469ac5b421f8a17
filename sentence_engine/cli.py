"""Command-line interface for the Sentence Engine.

WHY: Teachers and scripts need the chunk model without the web front
end: inspect what the producer returned, re-chunk a sentence, check a
response against its source sentence, and render worksheets to files.

HOW: argparse with one subcommand per task. Tagged input is a
positional argument, or "-" to read stdin. Edits given to ``edit`` are
applied in command-line order inside a single EditSession and then
committed. Status messages go to stderr; results go to stdout or to
files next to the input (or --output-dir).

RULES:
- parse: tagged → JSON chunk list on stdout
- display: tagged → slash string on stdout
- edit: --split C:W, --merge C, --toggle C:W (repeatable, ordered)
- check: english/korean/original → report; exit 1 when the check fails
- sentences: passage → one sentence per line
- worksheet: JSON → formatter outputs, numeric suffix on name conflicts
- serve: run the HTTP API with uvicorn
- Errors print "Error: ..." to stderr and exit 1
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

from sentence_engine.config import SERVER_HOST, SERVER_PORT
from sentence_engine.core.codec import chunks_to_slash, chunks_to_tagged, parse_tagged
from sentence_engine.core.passage import Worksheet, split_into_sentences
from sentence_engine.core.session import EditSession
from sentence_engine.core.validation import check_analysis
from sentence_engine.errors import SentenceEngineError
from sentence_engine.formatters import FORMATTERS
from sentence_engine.formatters.base import FormatterOutput


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _read_input(value: str) -> str:
    """Return the argument itself, or stdin when it is "-"."""
    if value == "-":
        return sys.stdin.read()
    return value


def _parse_target(value: str) -> Tuple[int, int]:
    """Parse "C:W" into (chunk_index, word_index)."""
    try:
        chunk, word = value.split(":", 1)
        return int(chunk), int(word)
    except ValueError:
        raise argparse.ArgumentTypeError(
            "expected CHUNK:WORD (0-based integers), got '{}'".format(value)
        )


class _OperationAction(argparse.Action):
    """Collect --split/--merge/--toggle into one ordered list."""

    def __call__(self, parser, namespace, values, option_string=None):  # noqa: ANN001
        operations = getattr(namespace, self.dest, None) or []
        operations.append((option_string.lstrip("-"), values))
        setattr(namespace, self.dest, operations)


# ---------------------------------------------------------------------------
# Output files
# ---------------------------------------------------------------------------


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. unit1-worksheet.txt)
    - Conflict: insert counter before the extension (unit1-worksheet-2.txt)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name, suffix_ext = suffix[:dot_idx], suffix[dot_idx:]
    else:
        suffix_name, suffix_ext = suffix, ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_parse(args: argparse.Namespace) -> int:
    chunks = parse_tagged(_read_input(args.tagged))
    if not chunks:
        _status("No chunk tags recognized.")
    payload = [
        {
            "tag": c.tag,
            "text": c.text,
            "segments": [{"text": s.text, "is_verb": s.is_verb} for s in c.segments],
        }
        for c in chunks
    ]
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def _cmd_display(args: argparse.Namespace) -> int:
    print(chunks_to_slash(parse_tagged(_read_input(args.tagged))))
    return 0


def _cmd_edit(args: argparse.Namespace) -> int:
    session = EditSession.from_tagged(_read_input(args.tagged))
    if not session.committed:
        _status("No chunk tags recognized; nothing to edit.")
        return 1

    session.begin_edit()
    for name, value in args.operations or []:
        if name == "split":
            session.split(*value)
        elif name == "merge":
            session.merge(value)
        else:
            session.toggle_verb(*value)
        _status("{} {} → {}".format(name, value, session.slash()))
    session.commit()

    print(chunks_to_slash(session.committed) if args.slash else session.tagged())
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    check = check_analysis(args.english, args.korean or "", args.original)
    _status("English chunks: {}  Korean chunks: {}".format(
        check.english_count, check.korean_count,
    ))
    if check.repaired:
        _status("Repaired missing sentence tail.")
    for message in check.feedback():
        _status(message)
    print(check.english_tagged)
    return 0 if check.ok else 1


def _cmd_sentences(args: argparse.Namespace) -> int:
    if args.passage == "-":
        text = sys.stdin.read()
    else:
        text = Path(args.passage).read_text(encoding="utf-8")
    for sentence in split_into_sentences(text):
        print(sentence)
    return 0


def _cmd_worksheet(args: argparse.Namespace) -> int:
    input_path = Path(args.input_file)
    data: Any = json.loads(input_path.read_text(encoding="utf-8"))
    worksheet = Worksheet.from_dict(data)
    if args.title:
        worksheet.title = args.title

    if args.formats:
        format_keys = [k.strip() for k in args.formats.split(",") if k.strip()]
    else:
        format_keys = list(FORMATTERS.keys())
    for key in format_keys:
        if key not in FORMATTERS:
            raise ValueError("Unknown format '{}'. Available: {}".format(
                key, ", ".join(sorted(FORMATTERS.keys()))
            ))

    output_dir = Path(args.output_dir) if args.output_dir else input_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    _status("{} sentences, formats: {}".format(len(worksheet.sentences), ", ".join(format_keys)))
    for key in format_keys:
        for output in FORMATTERS[key]().format(worksheet):
            path = _save_output(output, input_path.stem, output_dir)
            _status("  Saved: {}".format(path))
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    from sentence_engine.server.app import run_api
    run_api(host=args.host, port=args.port)
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser (kept separate from main() for tests)."""
    parser = argparse.ArgumentParser(
        prog="sentence_engine",
        description="Parse, re-chunk, and render phrase-chunked worksheet sentences.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse", help="Print the chunks of a tagged string as JSON.")
    p.add_argument("tagged", help="Tagged string, or '-' to read stdin.")
    p.set_defaults(func=_cmd_parse)

    p = sub.add_parser("display", help="Print the slash display string.")
    p.add_argument("tagged", help="Tagged string, or '-' to read stdin.")
    p.set_defaults(func=_cmd_display)

    p = sub.add_parser("edit", help="Apply split/merge/toggle edits and print the result.")
    p.add_argument("tagged", help="Tagged string, or '-' to read stdin.")
    p.add_argument(
        "--split", dest="operations", action=_OperationAction, type=_parse_target,
        metavar="C:W", help="Split chunk C so word W starts a new chunk.",
    )
    p.add_argument(
        "--merge", dest="operations", action=_OperationAction, type=int,
        metavar="C", help="Merge chunk C with the next chunk.",
    )
    p.add_argument(
        "--toggle", dest="operations", action=_OperationAction, type=_parse_target,
        metavar="C:W", help="Toggle the verb mark of word W in chunk C.",
    )
    p.add_argument(
        "--slash", action="store_true",
        help="Print the slash display string instead of the tagged string.",
    )
    p.set_defaults(func=_cmd_edit, operations=None)

    p = sub.add_parser("check", help="Check a producer response against its sentence.")
    p.add_argument("--english", required=True, help="English tagged string.")
    p.add_argument("--korean", default=None, help="Korean literal tagged string.")
    p.add_argument("--original", required=True, help="Original English sentence.")
    p.set_defaults(func=_cmd_check)

    p = sub.add_parser("sentences", help="Split a passage file into sentences.")
    p.add_argument("passage", help="Passage text file, or '-' to read stdin.")
    p.set_defaults(func=_cmd_sentences)

    p = sub.add_parser("worksheet", help="Render a worksheet JSON file.")
    p.add_argument("input_file", help="Worksheet JSON (title, sentences[...]).")
    p.add_argument(
        "--formats", default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    p.add_argument("--title", default=None, help="Override the worksheet title.")
    p.add_argument(
        "--output-dir", default=None,
        help="Directory to save output files (default: next to the input file).",
    )
    p.set_defaults(func=_cmd_worksheet)

    p = sub.add_parser("serve", help="Run the HTTP API.")
    p.add_argument("--host", default=SERVER_HOST, help="Bind address (default: %(default)s).")
    p.add_argument("--port", type=int, default=SERVER_PORT, help="Port (default: %(default)s).")
    p.set_defaults(func=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m sentence_engine``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        code = args.func(args)
    except (SentenceEngineError, ValueError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
