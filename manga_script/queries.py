"""Read-side helpers over a Document: lookups, context views, statistics."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from .models import Chapter, Dialogue, Document, FlatDialogue, ParseIssue, Scene

_EDITABLE_FIELDS = frozenset({"character", "kind", "text", "position"})


class ContextDialogue(Dialogue):
    """A dialogue together with the names of the scene and chapter around it."""

    chapter_name: str
    scene_name: str
    scene_description: str


class ScriptStats(BaseModel):
    chapters: int
    scenes: int
    dialogues: int
    issues: int
    error_count: int
    warning_count: int


# ── Lookups ────────────────────────────────────────────────


def all_dialogues(document: Document) -> list[Dialogue]:
    """Every dialogue in script order."""
    return [
        dialogue
        for chapter in document.chapters
        for scene in chapter.scenes
        for dialogue in scene.dialogues
    ]


def find_chapter(document: Document, chapter_id: str) -> Chapter | None:
    for chapter in document.chapters:
        if chapter.id == chapter_id:
            return chapter
    return None


def find_scene(document: Document, scene_id: str) -> Scene | None:
    for chapter in document.chapters:
        for scene in chapter.scenes:
            if scene.id == scene_id:
                return scene
    return None


def find_dialogue(document: Document, dialogue_id: str) -> Dialogue | None:
    for dialogue in all_dialogues(document):
        if dialogue.id == dialogue_id:
            return dialogue
    return None


def dialogue_index(document: Document) -> dict[str, Dialogue]:
    return {d.id: d for d in all_dialogues(document)}


def flat_index(dialogues: list[FlatDialogue]) -> dict[str, FlatDialogue]:
    """Map id → record. Records without an id are left out."""
    return {d.id: d for d in dialogues if d.id}


def dialogues_with_context(document: Document) -> list[ContextDialogue]:
    return [
        ContextDialogue(
            **dialogue.model_dump(),
            chapter_name=chapter.name,
            scene_name=scene.name,
            scene_description=scene.description,
        )
        for chapter in document.chapters
        for scene in chapter.scenes
        for dialogue in scene.dialogues
    ]


# ── Single-dialogue edit ───────────────────────────────────


def update_dialogue(document: Document, dialogue_id: str, **changes: Any) -> Document | None:
    """Return a copy of the document with one dialogue's fields replaced.

    Only character, kind, text and position can change. Returns None when no
    dialogue has the given id; the input document is never modified.
    """
    unknown = set(changes) - _EDITABLE_FIELDS
    if unknown:
        raise TypeError(f"Cannot update dialogue fields: {', '.join(sorted(unknown))}")

    found = False
    chapters: list[Chapter] = []
    for chapter in document.chapters:
        scenes: list[Scene] = []
        for scene in chapter.scenes:
            dialogues: list[Dialogue] = []
            for dialogue in scene.dialogues:
                if not found and dialogue.id == dialogue_id:
                    dialogue = Dialogue.model_validate({**dialogue.model_dump(), **changes})
                    found = True
                dialogues.append(dialogue)
            scenes.append(scene.model_copy(update={"dialogues": dialogues}))
        chapters.append(chapter.model_copy(update={"scenes": scenes}))

    if not found:
        return None
    return document.model_copy(update={"chapters": chapters})


# ── Statistics ─────────────────────────────────────────────


def script_stats(document: Document) -> ScriptStats:
    """Counts taken from the tree itself, not from metadata."""
    return ScriptStats(
        chapters=len(document.chapters),
        scenes=sum(len(ch.scenes) for ch in document.chapters),
        dialogues=len(all_dialogues(document)),
        issues=len(document.issues),
        error_count=len(document.errors),
        warning_count=len(document.warnings),
    )


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def status_label(document: Document) -> str:
    """"Valid", "2 Warnings" or "1 Error"; errors take precedence."""
    if document.errors:
        return _plural(len(document.errors), "Error")
    if document.warnings:
        return _plural(len(document.warnings), "Warning")
    return "Valid"


def summary_line(document: Document) -> str:
    """"1 chapter • 3 scenes • 10 dialogues" from the document metadata."""
    meta = document.metadata
    return " • ".join([
        _plural(meta.chapter_count, "chapter"),
        _plural(meta.scene_count, "scene"),
        _plural(meta.dialogue_count, "dialogue"),
    ])


def format_issue(issue: ParseIssue) -> str:
    return f"Line {issue.line}: {issue.message}"
