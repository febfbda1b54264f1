"""Health check and parser settings endpoints."""

from fastapi import APIRouter, Request

from manga_script import ParserSettings

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings(request: Request) -> ParserSettings:
    """Canvas bounds and default bubble position the parser is using."""
    return request.app.state.settings
