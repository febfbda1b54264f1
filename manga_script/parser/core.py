"""parse_script(): the total entry point, plus end-of-input finalisation."""

from __future__ import annotations

import logging
import re

from .. import ids
from ..config import DEFAULT_SETTINGS, ParserSettings
from ..ids import Clock, IdGenerator
from ..models import Chapter, Document, DocumentMetadata, ParseIssue
from .builder import DocumentBuilder
from .validate import validate_document

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r?\n")


def _split_lines(text: str) -> list[str]:
    # Only \n and \r\n break lines, so issue line numbers match the editor.
    return _LINE_BREAK_RE.split(text.lstrip("\ufeff"))


def build_metadata(chapters: list[Chapter], now: Clock = ids.utc_now) -> DocumentMetadata:
    """Count the tree; parsed_at comes from the injected clock."""
    return DocumentMetadata(
        chapter_count=len(chapters),
        scene_count=sum(len(ch.scenes) for ch in chapters),
        dialogue_count=sum(len(sc.dialogues) for ch in chapters for sc in ch.scenes),
        parsed_at=now(),
    )


def finalize(
    builder: DocumentBuilder,
    now: Clock = ids.utc_now,
    settings: ParserSettings = DEFAULT_SETTINGS,
) -> Document:
    """Close open nodes, compute metadata, and append validation warnings."""
    chapters = builder.close()
    document = Document(
        chapters=chapters,
        issues=list(builder.state.issues),
        metadata=build_metadata(chapters, now),
    )
    document.issues.extend(validate_document(document, settings))
    return document


def parse_script(
    text: str,
    *,
    settings: ParserSettings | None = None,
    new_id: IdGenerator = ids.new_id,
    now: Clock = ids.utc_now,
) -> Document:
    """Parse a manga script into a Document. Never raises.

    Malformed lines become issues on the result. Any unexpected internal
    fault is logged and returned as a single error issue on an empty
    Document, so callers always get a well-formed result.
    """
    settings = settings or DEFAULT_SETTINGS
    builder = DocumentBuilder(settings, new_id)
    try:
        for line_no, raw in enumerate(_split_lines(text), start=1):
            builder.feed(line_no, raw)
        document = finalize(builder, now, settings)
    except Exception as e:
        logger.exception("Unexpected error in manga script parser")
        return _failed_document(builder.state.line_no, e, now)

    logger.debug(
        "parsed script: %d chapters, %d scenes, %d dialogues, %d issues",
        document.metadata.chapter_count,
        document.metadata.scene_count,
        document.metadata.dialogue_count,
        len(document.issues),
    )
    return document


def _failed_document(line_no: int, error: Exception, now: Clock) -> Document:
    try:
        parsed_at = now()
    except Exception:
        logger.exception("Clock failed; falling back to the system clock")
        parsed_at = ids.utc_now()
    return Document(
        chapters=[],
        issues=[ParseIssue(
            line=max(line_no, 0),
            content="Parser error",
            message=f"Unexpected parser error: {error}",
            severity="error",
        )],
        metadata=DocumentMetadata(parsed_at=parsed_at),
    )
