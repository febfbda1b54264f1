"""Structural self-check over an assembled Document.

The builder already enforces these rules while parsing, so on a freshly
parsed tree this finds nothing. It exists for trees produced by the
adapters, where edited canvas records are spliced back in. Every finding is
a warning: validation never turns a usable document into an invalid one.
"""

from __future__ import annotations

import logging

from ..config import DEFAULT_SETTINGS, ParserSettings
from ..models import DIALOGUE_KINDS, Document, ParseIssue

logger = logging.getLogger(__name__)

VALIDATION_CONTENT = "Document validation"


def is_validation_issue(issue: ParseIssue) -> bool:
    return issue.content == VALIDATION_CONTENT


def validate_document(
    document: Document, settings: ParserSettings = DEFAULT_SETTINGS
) -> list[ParseIssue]:
    """Return warning issues for every structural rule the document breaks."""
    findings: list[ParseIssue] = []
    seen_ids: set[str] = set()

    def warn(line: int, message: str) -> None:
        findings.append(ParseIssue(
            line=max(line, 0),
            content=VALIDATION_CONTENT,
            message=message,
            severity="warning",
        ))

    def check_node(node_id: str, line: int, label: str) -> None:
        if not node_id:
            warn(line, f"{label} has no id")
        elif node_id in seen_ids:
            warn(line, f"Duplicate id {node_id} on {label.lower()}")
        else:
            seen_ids.add(node_id)
        if line < 1:
            warn(0, f"{label} has invalid source line {line}")

    scene_count = 0
    dialogue_count = 0

    for chapter in document.chapters:
        check_node(chapter.id, chapter.source_line, "Chapter")
        if not chapter.name.strip():
            warn(chapter.source_line, "Chapter name cannot be empty")

        for scene in chapter.scenes:
            scene_count += 1
            check_node(scene.id, scene.source_line, "Scene")
            if not scene.name.strip():
                warn(scene.source_line, "Scene name cannot be empty")
            if not scene.description.strip():
                warn(scene.source_line, "Scene description cannot be empty")
            if scene.chapter_id != chapter.id:
                warn(scene.source_line, f"Scene '{scene.name}' references a chapter it does not belong to")

            for dialogue in scene.dialogues:
                dialogue_count += 1
                line = dialogue.source_line
                check_node(dialogue.id, line, "Dialogue")
                if not dialogue.character.strip():
                    warn(line, "Character name cannot be empty")
                if dialogue.kind not in DIALOGUE_KINDS:
                    warn(line, f"Invalid dialogue type: {dialogue.kind}")
                pos = dialogue.position
                if pos is not None and not settings.in_bounds(pos.x, pos.y):
                    warn(line, (
                        f"Position {{{pos.x},{pos.y}}} is outside the canvas "
                        f"(0-{settings.canvas_width}, 0-{settings.canvas_height})"
                    ))
                if dialogue.scene_id != scene.id or dialogue.chapter_id != chapter.id:
                    warn(line, f"Dialogue {dialogue.id} references a scene or chapter it does not belong to")

    meta = document.metadata
    if meta.chapter_count != len(document.chapters):
        warn(0, f"Metadata chapter count {meta.chapter_count} != {len(document.chapters)}")
    if meta.scene_count != scene_count:
        warn(0, f"Metadata scene count {meta.scene_count} != {scene_count}")
    if meta.dialogue_count != dialogue_count:
        warn(0, f"Metadata dialogue count {meta.dialogue_count} != {dialogue_count}")

    if findings:
        logger.warning("Document validation found %d problem(s)", len(findings))
    return findings
