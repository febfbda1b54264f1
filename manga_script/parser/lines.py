"""Line classification and per-line field parsers.

Every function here is stateless and works on one trimmed line. Problems
that make a line unusable raise LineError; recoverable problems (unknown
dialogue kind, bad position token) come back as warning messages next to the
parsed fields. Turning either into a ParseIssue is the builder's job.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from ..config import DEFAULT_SETTINGS, ParserSettings
from ..models import DIALOGUE_KINDS, DialogueKind, Position

LineKind = Literal["chapter", "scene", "dialogue", "unrecognized"]

CHAPTER_MARKER = "#"
SCENE_MARKER = "*"
COMMENT_PREFIX = "//"

_POSITION_RE = re.compile(r"^\{\s*(-?\d+)\s*,\s*(-?\d+)\s*\}$")

CHAPTER_FORMAT = "# Chapter Name"
SCENE_FORMAT = "* Scene Name: Description"
DIALOGUE_FORMAT = "Character: Type: [Position] Text"


class LineError(ValueError):
    """Raised when a line cannot produce a node; the line is skipped."""


@dataclass(frozen=True)
class DialogueFields:
    character: str
    kind: DialogueKind
    text: str
    position: Position | None
    warnings: tuple[str, ...] = ()


def is_ignorable(line: str) -> bool:
    """Blank and // comment lines never reach the classifier."""
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_PREFIX)


def classify_line(line: str) -> LineKind:
    """Classify a trimmed, non-comment line. Marker checks win over ':'."""
    if line.startswith(CHAPTER_MARKER):
        return "chapter"
    if line.startswith(SCENE_MARKER):
        return "scene"
    if ":" in line:
        return "dialogue"
    return "unrecognized"


# ── Chapters and scenes ──────────────────────────────────


def parse_chapter_line(line: str) -> str:
    """`# The Storm` → "The Storm"."""
    if not line.startswith(CHAPTER_MARKER):
        raise LineError(f"Invalid chapter format. Expected: {CHAPTER_FORMAT}")
    name = line[len(CHAPTER_MARKER):].strip()
    if not name:
        raise LineError("Chapter name cannot be empty")
    return name


def parse_scene_line(line: str) -> tuple[str, str]:
    """`* Rooftop: Night falls` → ("Rooftop", "Night falls").

    Splits on the first colon only, so descriptions may contain colons.
    """
    if not line.startswith(SCENE_MARKER):
        raise LineError(f"Invalid scene format. Expected: {SCENE_FORMAT}")
    body = line[len(SCENE_MARKER):]
    if ":" not in body:
        raise LineError(f"Invalid scene format. Expected: {SCENE_FORMAT}")
    name, description = (part.strip() for part in body.split(":", 1))
    if not name:
        raise LineError("Scene name cannot be empty")
    if not description:
        raise LineError("Scene description cannot be empty")
    return name, description


# ── Positions ────────────────────────────────────────────


def split_position_token(remainder: str) -> tuple[str | None, str]:
    """Split a leading `{...}` token off the dialogue remainder.

    Returns (token, rest). token is None when the remainder does not start
    with "{". An unclosed brace takes the first whitespace-delimited word as
    the token so the rest of the line survives as text.
    """
    if not remainder.startswith("{"):
        return None, remainder
    close = remainder.find("}")
    if close == -1:
        parts = remainder.split(None, 1)
        return parts[0], parts[1] if len(parts) > 1 else ""
    return remainder[: close + 1], remainder[close + 1:].lstrip()


def parse_position(token: str, settings: ParserSettings = DEFAULT_SETTINGS) -> Position:
    """`{120,340}` → Position(x=120, y=340), bounds-checked against the canvas."""
    m = _POSITION_RE.match(token)
    if not m:
        raise LineError(f"Invalid position format: {token}. Expected format: {{x,y}}")
    x, y = int(m.group(1)), int(m.group(2))
    if not settings.in_bounds(x, y):
        raise LineError(
            f"Invalid position coordinates: {token}. Position must be {{x,y}} "
            f"where x is 0-{settings.canvas_width} and y is 0-{settings.canvas_height}."
        )
    return Position(x=x, y=y)


# ── Dialogue ─────────────────────────────────────────────


def parse_dialogue_line(
    line: str, settings: ParserSettings = DEFAULT_SETTINGS
) -> DialogueFields:
    """Parse `Character: kind: [{x,y}] text`.

    Character and kind are split on the first two colons; the text keeps any
    further colons. Unknown kinds fall back to "speech" and a malformed
    position token is dropped; both are reported as warnings. When the text
    after a dropped token itself starts with "{", nothing is dropped.
    """
    parts = line.split(":", 2)
    if len(parts) < 3:
        raise LineError(f"Invalid dialogue format. Expected: {DIALOGUE_FORMAT}")

    character = parts[0].strip()
    kind_raw = parts[1].strip()
    remainder = parts[2].strip()

    if not character:
        raise LineError("Character name cannot be empty")

    warnings: list[str] = []

    kind: DialogueKind = "speech"
    if kind_raw in DIALOGUE_KINDS:
        kind = kind_raw  # type: ignore[assignment]
    else:
        warnings.append(
            f"Invalid dialogue type: {kind_raw}. Must be one of: "
            f"{', '.join(DIALOGUE_KINDS)}. Defaulting to 'speech'."
        )

    position: Position | None = None
    text = remainder
    token, rest = split_position_token(remainder)
    if token is not None:
        text = rest
        try:
            position = parse_position(token, settings)
        except LineError as e:
            warnings.append(str(e))
            # A second {...} after a dropped token would read as a position
            # once serialised, so the whole remainder stays as text.
            if rest.startswith("{"):
                text = remainder

    return DialogueFields(
        character=character,
        kind=kind,
        text=text,
        position=position,
        warnings=tuple(warnings),
    )
