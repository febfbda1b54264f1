"""Canvas adapters: Document ⇄ flat dialogue list.

flatten_document() projects the tree into FlatDialogue records, one per
dialogue in chapter → scene → dialogue order, with every record positioned.

reconstruct_document() merges an edited flat list back into a tree:
  - no prior document: one default chapter and scene hold every record;
  - prior document: records fill the existing dialogue slots in order
    (keeping each slot's scene/chapter/source line), surplus records go to
    the last scene of the last chapter, and unmatched trailing slots are
    dropped.
It is a positional merge, not a diff: when the dialogue count changes,
scene boundaries shift rather than being preserved exactly.

Neither function mutates its inputs.
"""

from __future__ import annotations

import logging

from . import ids
from .config import DEFAULT_SETTINGS, ParserSettings
from .ids import Clock, IdGenerator
from .models import Chapter, Dialogue, Document, FlatDialogue, Scene
from .parser import (
    DEFAULT_CHAPTER_NAME,
    DEFAULT_SCENE_NAME,
    build_metadata,
    is_validation_issue,
    validate_document,
)
from .queries import all_dialogues

logger = logging.getLogger(__name__)

GENERATED_SCENE_DESCRIPTION = "Generated scene from dialogue bubbles"

# Source lines of a synthesised tree, following document_to_text's layout:
# "# chapter", blank, "* scene", blank, then one line per dialogue.
_CHAPTER_LINE = 1
_SCENE_LINE = 3
_FIRST_DIALOGUE_LINE = 5


def flatten_document(
    document: Document, settings: ParserSettings | None = None
) -> list[FlatDialogue]:
    """One FlatDialogue per dialogue; unset positions get the default position."""
    default_position = (settings or DEFAULT_SETTINGS).default_position
    return [
        FlatDialogue(
            id=d.id,
            character=d.character,
            kind=d.kind,
            position=d.position or default_position,
            text=d.text,
        )
        for d in all_dialogues(document)
    ]


def reconstruct_document(
    dialogues: list[FlatDialogue],
    original: Document | None = None,
    *,
    settings: ParserSettings | None = None,
    new_id: IdGenerator = ids.new_id,
    now: Clock = ids.utc_now,
) -> Document:
    """Build a new Document from edited flat records.

    Record ids are always adopted when present, so ids assigned by the canvas
    survive; records without one get a fresh id (new dialogues) or keep the
    slot's id (edits of existing dialogues).
    """
    settings = settings or DEFAULT_SETTINGS
    if original is None or not original.chapters:
        document = _build_default_document(dialogues, new_id, now)
    else:
        document = _merge_into(original, dialogues, settings, new_id)
    document.issues.extend(validate_document(document, settings))
    logger.debug(
        "reconstructed document: %d dialogues across %d scenes",
        document.metadata.dialogue_count,
        document.metadata.scene_count,
    )
    return document


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _build_default_document(
    dialogues: list[FlatDialogue], new_id: IdGenerator, now: Clock
) -> Document:
    chapter = Chapter(id=new_id(), name=DEFAULT_CHAPTER_NAME, source_line=_CHAPTER_LINE)
    scene = Scene(
        id=new_id(),
        name=DEFAULT_SCENE_NAME,
        description=GENERATED_SCENE_DESCRIPTION,
        chapter_id=chapter.id,
        source_line=_SCENE_LINE,
    )
    for offset, record in enumerate(dialogues):
        scene.dialogues.append(
            _new_dialogue(record, scene, _FIRST_DIALOGUE_LINE + offset, new_id)
        )
    chapter.scenes.append(scene)
    return Document(chapters=[chapter], metadata=build_metadata([chapter], now))


def _merge_into(
    original: Document,
    dialogues: list[FlatDialogue],
    settings: ParserSettings,
    new_id: IdGenerator,
) -> Document:
    consumed = 0
    dropped = 0
    chapters: list[Chapter] = []

    for chapter in original.chapters:
        scenes: list[Scene] = []
        for scene in chapter.scenes:
            updated: list[Dialogue] = []
            for slot in scene.dialogues:
                if consumed >= len(dialogues):
                    dropped += 1
                    continue
                updated.append(_apply_record(slot, dialogues[consumed], settings))
                consumed += 1
            scenes.append(scene.model_copy(update={"dialogues": updated}))
        chapters.append(chapter.model_copy(update={"scenes": scenes}))

    if dropped:
        # TODO: hand dropped slots back to the caller instead of discarding them
        logger.warning(
            "Flat list is shorter than the document: dropped %d trailing dialogue(s)",
            dropped,
        )

    if consumed < len(dialogues):
        last_chapter = chapters[-1]
        if not last_chapter.scenes:
            last_chapter.scenes.append(Scene(
                id=new_id(),
                name=DEFAULT_SCENE_NAME,
                description=GENERATED_SCENE_DESCRIPTION,
                chapter_id=last_chapter.id,
                source_line=last_chapter.source_line + 2,
            ))
        last_scene = last_chapter.scenes[-1]
        if last_scene.dialogues:
            next_line = last_scene.dialogues[-1].source_line + 1
        else:
            next_line = last_scene.source_line + 2
        for record in dialogues[consumed:]:
            last_scene.dialogues.append(_new_dialogue(record, last_scene, next_line, new_id))
            next_line += 1

    metadata = original.metadata.model_copy(update={
        "scene_count": sum(len(ch.scenes) for ch in chapters),
        "dialogue_count": len(dialogues),
    })
    return Document(
        chapters=chapters,
        issues=[i for i in original.issues if not is_validation_issue(i)],
        metadata=metadata,
    )


def _apply_record(slot: Dialogue, record: FlatDialogue, settings: ParserSettings) -> Dialogue:
    position = record.position
    # flatten_document fills unset positions with the default; don't write it back.
    if slot.position is None and position == settings.default_position:
        position = None
    return slot.model_copy(update={
        "id": record.id or slot.id,
        "character": record.character,
        "kind": record.kind,
        "text": record.text,
        "position": position,
    })


def _new_dialogue(
    record: FlatDialogue, scene: Scene, source_line: int, new_id: IdGenerator
) -> Dialogue:
    return Dialogue(
        id=record.id or new_id(),
        character=record.character,
        kind=record.kind,
        text=record.text,
        position=record.position,
        scene_id=scene.id,
        chapter_id=scene.chapter_id,
        source_line=source_line,
    )
