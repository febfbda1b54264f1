"""Manga Script: command-line tool and dev server launcher.

    python main.py check script.txt     report issues; exit 1 when invalid
    python main.py render script.txt    print the canonical serialisation
    python main.py format script.txt    normalise whitespace (--write to save)
    python main.py flatten script.txt   print canvas dialogues as JSON
    python main.py serve                run the API with uvicorn

Use "-" to read the script from stdin, or --sample for the bundled script.
"""

import argparse
import json
import logging
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

from manga_script import (
    SAMPLE_SCRIPT,
    document_to_text,
    flatten_document,
    format_issue,
    format_script,
    load_settings,
    parse_script,
    status_label,
    summary_line,
)

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = os.getenv("PORT", "13013")

EXIT_INVALID = 1
EXIT_UNREADABLE = 2


def _read_script(args: argparse.Namespace) -> str:
    if args.sample:
        return SAMPLE_SCRIPT
    if args.file is None:
        raise ValueError("a script file (or --sample) is required")
    if args.file == "-":
        return sys.stdin.read()
    return Path(args.file).read_text(encoding="utf-8")


def _cmd_check(text: str, args: argparse.Namespace) -> int:
    document = parse_script(text, settings=load_settings())
    for issue in document.issues:
        print(f"{issue.severity}: {format_issue(issue)}")
        print(f"    {issue.content}")
    print(f"{status_label(document)}: {summary_line(document)}")
    return 0 if document.is_valid else EXIT_INVALID


def _cmd_render(text: str, args: argparse.Namespace) -> int:
    document = parse_script(text, settings=load_settings())
    print(document_to_text(document))
    return 0 if document.is_valid else EXIT_INVALID


def _cmd_format(text: str, args: argparse.Namespace) -> int:
    formatted = format_script(text)
    if args.write and args.file not in (None, "-") and not args.sample:
        Path(args.file).write_text(formatted, encoding="utf-8")
    else:
        print(formatted)
    return 0


def _cmd_flatten(text: str, args: argparse.Namespace) -> int:
    settings = load_settings()
    document = parse_script(text, settings=settings)
    dialogues = flatten_document(document, settings)
    print(json.dumps([d.model_dump() for d in dialogues], indent=2, ensure_ascii=False))
    return 0 if document.is_valid else EXIT_INVALID


_COMMANDS = {
    "check": _cmd_check,
    "render": _cmd_render,
    "format": _cmd_format,
    "flatten": _cmd_flatten,
}


def _serve(args: argparse.Namespace) -> int:
    print(f"Starting API on http://{args.host}:{args.port} ...")
    cmd = ["uvicorn", "backend.app:app", "--host", args.host, "--port", str(args.port)]
    if args.reload:
        cmd.append("--reload")
    try:
        return subprocess.call(cmd, cwd=ROOT)
    except KeyboardInterrupt:
        print("\nShutting down...")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manga script tool")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("check", "Report parse issues"),
        ("render", "Print the canonical script"),
        ("format", "Normalise whitespace"),
        ("flatten", "Print canvas dialogues as JSON"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("file", nargs="?", default=None, help="Script file, or - for stdin")
        cmd.add_argument("--sample", action="store_true", help="Use the bundled sample script")
        if name == "format":
            cmd.add_argument("--write", action="store_true", help="Rewrite the file in place")

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", default=PORT)
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return _serve(args)

    try:
        text = _read_script(args)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        print(f"error: cannot read script: {e}", file=sys.stderr)
        return EXIT_UNREADABLE
    return _COMMANDS[args.command](text, args)


if __name__ == "__main__":
    sys.exit(main())
