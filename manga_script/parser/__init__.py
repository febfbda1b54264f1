"""Manga script parser.

Turns script text into a Document in one pass:
  1. Split into lines (\\n or \\r\\n); blank and // comment lines are skipped.
  2. Classify each remaining line (lines.classify_line):
       "# Name"                               → chapter
       "* Name: Description"                  → scene
       "Character: kind: [{x,y}] text"        → dialogue
       anything else                          → error, line dropped
  3. Feed the line to the DocumentBuilder state machine, which opens/closes
     chapters and scenes and synthesises default parents for orphans.
  4. Finalise: close open nodes, count the tree, run validate_document.

Problems never raise: each becomes a ParseIssue (severity "error" drops the
line, "warning" keeps a degraded version of it). A Document is valid when it
has no error issues.
"""

from .builder import (  # noqa: F401
    DEFAULT_CHAPTER_NAME,
    DEFAULT_SCENE_DESCRIPTION,
    DEFAULT_SCENE_NAME,
    BuilderState,
    DocumentBuilder,
)
from .core import (  # noqa: F401
    build_metadata,
    finalize,
    parse_script,
)
from .lines import (  # noqa: F401
    DialogueFields,
    LineError,
    classify_line,
    is_ignorable,
    parse_chapter_line,
    parse_dialogue_line,
    parse_position,
    parse_scene_line,
    split_position_token,
)
from .validate import (  # noqa: F401
    VALIDATION_CONTENT,
    is_validation_issue,
    validate_document,
)
