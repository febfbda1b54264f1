"""Document builder: the line-by-line state machine.

States (BuilderState.phase):
  no_chapter  : nothing open yet
  in_chapter  : a chapter is open, no scene
  in_scene    : a chapter and one of its scenes are open

Chapter lines close the open scene and chapter and open a new chapter.
Scene lines close the open scene and open a new one, synthesising a default
chapter first when none is open. Dialogue lines append to the open scene,
synthesising a default chapter and/or scene as needed. Unrecognised lines are
recorded as errors and dropped.

The state lives on one DocumentBuilder instance per parse; nothing is shared
between parses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal

from .. import ids
from ..config import DEFAULT_SETTINGS, ParserSettings
from ..ids import IdGenerator
from ..models import Chapter, Dialogue, ParseIssue, Scene, Severity
from .lines import (
    LineError,
    classify_line,
    is_ignorable,
    parse_chapter_line,
    parse_dialogue_line,
    parse_scene_line,
)

logger = logging.getLogger(__name__)

Phase = Literal["no_chapter", "in_chapter", "in_scene"]

DEFAULT_CHAPTER_NAME = "Default Chapter"
DEFAULT_SCENE_NAME = "Default Scene"
DEFAULT_SCENE_DESCRIPTION = "Auto-generated scene for orphaned dialogue"

UNRECOGNIZED_MESSAGE = (
    "Unrecognized line format. Expected chapter (#), scene (*), "
    "or dialogue (Character: Type: Text)"
)


@dataclass
class BuilderState:
    chapters: list[Chapter] = field(default_factory=list)
    issues: list[ParseIssue] = field(default_factory=list)
    chapter: Chapter | None = None
    scene: Scene | None = None
    line_no: int = 0

    @property
    def phase(self) -> Phase:
        if self.chapter is None:
            return "no_chapter"
        if self.scene is None:
            return "in_chapter"
        return "in_scene"


class DocumentBuilder:
    """Consumes script lines in order and assembles the chapter tree."""

    def __init__(
        self,
        settings: ParserSettings = DEFAULT_SETTINGS,
        new_id: IdGenerator = ids.new_id,
    ) -> None:
        self._settings = settings
        self._new_id = new_id
        self.state = BuilderState()

    # ------------------------------------------------------------------
    # Feeding lines
    # ------------------------------------------------------------------

    def feed(self, line_no: int, raw: str) -> None:
        """Process one raw line (1-based line number)."""
        self.state.line_no = line_no
        if is_ignorable(raw):
            return
        line = raw.strip()
        kind = classify_line(line)
        if kind == "chapter":
            self._on_chapter(line)
        elif kind == "scene":
            self._on_scene(line)
        elif kind == "dialogue":
            self._on_dialogue(line)
        else:
            self._issue(line, UNRECOGNIZED_MESSAGE)

    def close(self) -> list[Chapter]:
        """Close the open scene and chapter; return the finished chapters."""
        self._close_scene()
        self._close_chapter()
        return self.state.chapters

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _on_chapter(self, line: str) -> None:
        try:
            name = parse_chapter_line(line)
        except LineError as e:
            self._issue(line, str(e))
            return
        self._close_scene()
        self._close_chapter()
        self._open_chapter(name)

    def _on_scene(self, line: str) -> None:
        try:
            name, description = parse_scene_line(line)
        except LineError as e:
            self._issue(line, str(e))
            return
        chapter = self.state.chapter
        if chapter is None:
            self._issue(line, "Scene found without chapter. Creating default chapter.", "warning")
            chapter = self._open_chapter(DEFAULT_CHAPTER_NAME)
        self._close_scene()
        self._open_scene(chapter, name, description)

    def _on_dialogue(self, line: str) -> None:
        try:
            fields = parse_dialogue_line(line, self._settings)
        except LineError as e:
            self._issue(line, str(e))
            return
        for message in fields.warnings:
            self._issue(line, message, "warning")

        chapter = self.state.chapter
        if chapter is None:
            self._issue(line, "Dialogue found without chapter. Creating default chapter.", "warning")
            chapter = self._open_chapter(DEFAULT_CHAPTER_NAME)
        scene = self.state.scene
        if scene is None:
            self._issue(line, "Dialogue found without scene. Creating default scene.", "warning")
            scene = self._open_scene(chapter, DEFAULT_SCENE_NAME, DEFAULT_SCENE_DESCRIPTION)

        scene.dialogues.append(Dialogue(
            id=self._new_id(),
            character=fields.character,
            kind=fields.kind,
            text=fields.text,
            position=fields.position,
            scene_id=scene.id,
            chapter_id=chapter.id,
            source_line=self.state.line_no,
        ))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _open_chapter(self, name: str) -> Chapter:
        chapter = Chapter(id=self._new_id(), name=name, source_line=self.state.line_no)
        self.state.chapter = chapter
        self.state.scene = None
        return chapter

    def _open_scene(self, chapter: Chapter, name: str, description: str) -> Scene:
        scene = Scene(
            id=self._new_id(),
            name=name,
            description=description,
            chapter_id=chapter.id,
            source_line=self.state.line_no,
        )
        self.state.scene = scene
        return scene

    def _close_scene(self) -> None:
        if self.state.scene is not None and self.state.chapter is not None:
            self.state.chapter.scenes.append(self.state.scene)
        self.state.scene = None

    def _close_chapter(self) -> None:
        if self.state.chapter is not None:
            self.state.chapters.append(self.state.chapter)
        self.state.chapter = None

    def _issue(self, content: str, message: str, severity: Severity = "error") -> None:
        logger.debug("line %d %s: %s", self.state.line_no, severity, message)
        self.state.issues.append(ParseIssue(
            line=self.state.line_no,
            content=content,
            message=message,
            severity=severity,
        ))
