"""Script endpoints: parse, flatten, reconstruct, render, format, edit."""

from fastapi import APIRouter, Depends, HTTPException, Request

from manga_script import (
    SAMPLE_SCRIPT,
    ParserSettings,
    document_to_text,
    flatten_document,
    format_script,
    parse_script,
    reconstruct_document,
    script_stats,
    status_label,
    update_dialogue,
    validate_document,
)
from manga_script.parser import is_validation_issue

from .models import (
    DocumentBody,
    FlattenResponse,
    ParseResponse,
    ReconstructBody,
    ScriptBody,
    ScriptResponse,
    TextResponse,
    UpdateDialogueBody,
)

router = APIRouter(prefix="/script")


def get_settings(request: Request) -> ParserSettings:
    return request.app.state.settings


@router.get("/sample")
async def get_sample() -> TextResponse:
    """The default script a new editor session starts with."""
    return TextResponse(text=SAMPLE_SCRIPT)


@router.post("/parse")
async def parse(body: ScriptBody, settings: ParserSettings = Depends(get_settings)) -> ParseResponse:
    """Parse script text into a document with issues, stats and a status label."""
    document = parse_script(body.text, settings=settings)
    return ParseResponse(
        **document.model_dump(),
        stats=script_stats(document),
        status=status_label(document),
        valid=document.is_valid,
    )


@router.post("/flatten")
async def flatten(body: ScriptBody, settings: ParserSettings = Depends(get_settings)) -> FlattenResponse:
    """Parse script text and return the flat dialogue list for the canvas."""
    document = parse_script(body.text, settings=settings)
    return FlattenResponse(
        dialogues=flatten_document(document, settings),
        issues=document.issues,
        valid=document.is_valid,
    )


@router.post("/reconstruct")
async def reconstruct(
    body: ReconstructBody, settings: ParserSettings = Depends(get_settings)
) -> ScriptResponse:
    """Merge edited canvas dialogues back into the document and re-render the script."""
    document = reconstruct_document(body.dialogues, body.document, settings=settings)
    return ScriptResponse(document=document, text=document_to_text(document))


@router.post("/render")
async def render(body: DocumentBody) -> TextResponse:
    """Serialise a document back to script text."""
    return TextResponse(text=document_to_text(body.document))


@router.post("/format")
async def format_text(body: ScriptBody) -> TextResponse:
    """Normalise whitespace in raw script text."""
    return TextResponse(text=format_script(body.text))


@router.patch("/dialogues/{dialogue_id}")
async def patch_dialogue(
    dialogue_id: str,
    body: UpdateDialogueBody,
    settings: ParserSettings = Depends(get_settings),
) -> ScriptResponse:
    """Edit one dialogue by id (e.g. a bubble dragged on the canvas).

    Only fields present in `changes` are applied. An explicit null position
    clears it; null for any other field leaves that field alone.
    """
    changes = {
        field: value
        for field, value in body.changes.model_dump(exclude_unset=True).items()
        if value is not None or field == "position"
    }
    document = update_dialogue(body.document, dialogue_id, **changes)
    if document is None:
        raise HTTPException(404, "Dialogue not found")
    issues = [i for i in document.issues if not is_validation_issue(i)]
    issues.extend(validate_document(document, settings))
    document = document.model_copy(update={"issues": issues})
    return ScriptResponse(document=document, text=document_to_text(document))
