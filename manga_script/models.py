"""Core domain models.

Parser, adapters and the API all operate on these types.
Pydantic is used for serialisation at every data boundary; the structural
rules (non-empty names, canvas bounds, unique ids) are enforced by the parser
and re-checked by parser.validate, not by field constraints, so that building
a tree never raises.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

DialogueKind = Literal[
    "speech",
    "thought",
    "shout",
    "whisper",
    "narrator",
]

DIALOGUE_KINDS: tuple[str, ...] = get_args(DialogueKind)

Severity = Literal["warning", "error"]


class Position(BaseModel):
    """A point on the canvas, in canvas pixels."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int


class Dialogue(BaseModel):
    """One line of dialogue, owned by its scene."""

    id: str
    character: str
    kind: DialogueKind = "speech"
    text: str = ""
    position: Position | None = None  # unset when the script gives no {x,y}
    scene_id: str
    chapter_id: str
    source_line: int


class Scene(BaseModel):
    id: str
    name: str
    description: str
    dialogues: list[Dialogue] = Field(default_factory=list)
    chapter_id: str
    source_line: int


class Chapter(BaseModel):
    id: str
    name: str
    scenes: list[Scene] = Field(default_factory=list)
    source_line: int


class ParseIssue(BaseModel):
    """A problem recorded while parsing; never raised."""

    line: int  # 1-based; 0 for document-level findings
    content: str
    message: str
    severity: Severity = "error"


class DocumentMetadata(BaseModel):
    chapter_count: int = 0
    scene_count: int = 0
    dialogue_count: int = 0
    parsed_at: datetime


class Document(BaseModel):
    """A parsed script: chapters → scenes → dialogues, plus issues."""

    chapters: list[Chapter] = Field(default_factory=list)
    issues: list[ParseIssue] = Field(default_factory=list)
    metadata: DocumentMetadata

    @property
    def errors(self) -> list[ParseIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ParseIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def is_valid(self) -> bool:
        """Warnings never block validity; a single error does."""
        return not self.errors


class FlatDialogue(BaseModel):
    """Canvas-side view of a dialogue. `id` is the join key back to the tree."""

    id: str | None = None  # None for bubbles the canvas created itself
    character: str
    kind: DialogueKind = "speech"
    position: Position
    text: str = ""
