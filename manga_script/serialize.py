"""Document → script text, and whitespace normalisation of raw scripts."""

import re

from .models import Dialogue, Document, Position

_EXTRA_BLANK_LINES_RE = re.compile(r"\n{3,}")


def position_token(position: Position) -> str:
    return f"{{{position.x},{position.y}}}"


def dialogue_to_line(dialogue: Dialogue) -> str:
    """Alice: speech: {10,20} Hi  (the position segment only when set)."""
    position = f"{position_token(dialogue.position)} " if dialogue.position else ""
    return f"{dialogue.character}: {dialogue.kind}: {position}{dialogue.text}"


def document_to_text(document: Document) -> str:
    """Render a Document back to script syntax.

    Layout: chapter line, blank; scene line, blank; the scene's dialogue
    lines, blank. Trailing whitespace is trimmed from the result, so
    parse_script(document_to_text(d)) rebuilds the same tree (new ids and
    line numbers aside).
    """
    lines: list[str] = []
    for chapter in document.chapters:
        lines.append(f"# {chapter.name}")
        lines.append("")
        for scene in chapter.scenes:
            lines.append(f"* {scene.name}: {scene.description}")
            lines.append("")
            lines.extend(dialogue_to_line(d) for d in scene.dialogues)
            lines.append("")
    return "\n".join(lines).rstrip()


def format_script(text: str) -> str:
    """Strip trailing whitespace per line and collapse runs of blank lines.

    Works on raw text, so comments and unparseable lines are kept as-is.
    """
    stripped = "\n".join(line.rstrip() for line in text.replace("\r\n", "\n").split("\n"))
    return _EXTRA_BLANK_LINES_RE.sub("\n\n", stripped)
