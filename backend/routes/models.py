"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel

from manga_script import (
    DialogueKind,
    Document,
    FlatDialogue,
    ParseIssue,
    Position,
    ScriptStats,
)


class ScriptBody(BaseModel):
    text: str


class DocumentBody(BaseModel):
    document: Document


class ReconstructBody(BaseModel):
    dialogues: list[FlatDialogue]
    document: Document | None = None


class DialogueChanges(BaseModel):
    character: str | None = None
    kind: DialogueKind | None = None
    text: str | None = None
    position: Position | None = None


class UpdateDialogueBody(BaseModel):
    document: Document
    changes: DialogueChanges


class ParseResponse(Document):
    stats: ScriptStats
    status: str
    valid: bool


class FlattenResponse(BaseModel):
    dialogues: list[FlatDialogue]
    issues: list[ParseIssue]
    valid: bool


class ScriptResponse(BaseModel):
    document: Document
    text: str


class TextResponse(BaseModel):
    text: str
