from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from backend.routes import router
from manga_script import ParserSettings, load_settings

load_dotenv(Path(__file__).parent.parent / ".env")


def create_app(settings: ParserSettings | None = None) -> FastAPI:
    resolved = settings or load_settings()

    app = FastAPI(title="Manga Script")
    app.state.settings = resolved
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (canvas bounds from MANGA_* env vars or defaults)
app = create_app()
