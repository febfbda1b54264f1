"""Manga script: parse, validate, flatten, reconstruct and re-serialise.

Script syntax:

  # <chapter name>

  * <scene name>: <scene description>

  <character>: <kind>: {x,y} <dialogue text>
  <character>: <kind>: <dialogue text>
  // comment

kind is one of speech, thought, shout, whisper, narrator.

Round trip used by the editor:
  parse_script(text)                       → Document   (script → tree)
  flatten_document(document)               → [FlatDialogue] (tree → canvas)
  reconstruct_document(flat, document)     → Document   (canvas edits → tree)
  document_to_text(document)               → str        (tree → script)

All four are pure and never raise on bad input; problems are reported as
ParseIssue entries on the Document.
"""

from .adapters import (  # noqa: F401
    GENERATED_SCENE_DESCRIPTION,
    flatten_document,
    reconstruct_document,
)
from .config import (  # noqa: F401
    DEFAULT_SETTINGS,
    ParserSettings,
    load_settings,
)
from .ids import (  # noqa: F401
    Clock,
    FixedClock,
    IdGenerator,
    SequentialIds,
    new_id,
    utc_now,
)
from .models import (  # noqa: F401
    DIALOGUE_KINDS,
    Chapter,
    Dialogue,
    DialogueKind,
    Document,
    DocumentMetadata,
    FlatDialogue,
    ParseIssue,
    Position,
    Scene,
)
from .parser import (  # noqa: F401
    parse_script,
    validate_document,
)
from .queries import (  # noqa: F401
    ContextDialogue,
    ScriptStats,
    all_dialogues,
    dialogue_index,
    dialogues_with_context,
    find_chapter,
    find_dialogue,
    find_scene,
    flat_index,
    format_issue,
    script_stats,
    status_label,
    summary_line,
    update_dialogue,
)
from .sample import SAMPLE_SCRIPT  # noqa: F401
from .serialize import (  # noqa: F401
    dialogue_to_line,
    document_to_text,
    format_script,
)
