"""FastAPI API endpoints under /api.

Endpoint groups: settings (health, parser settings) and script (parse,
flatten, reconstruct, render, format, single-dialogue edit, sample).
The script editor calls parse on every debounced text change and flatten to
sync canvas bubbles; the canvas calls reconstruct (or the dialogue PATCH)
when a bubble moves or is edited, and writes the returned text back into the
editor.
"""

from fastapi import APIRouter

from .script import router as script_router
from .settings import router as settings_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(script_router)
