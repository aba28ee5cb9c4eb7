"""Browser pages: the answer UI and the LLM test form."""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).parent / "static"

router = APIRouter(tags=["web"], include_in_schema=False)


@router.get("/")
async def index() -> FileResponse:
    """Search form with rendered answers and in-memory conversation history."""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


@router.get("/llm")
async def llm_test_page() -> FileResponse:
    """Manual query + context form against the LLM gateway."""
    return FileResponse(STATIC_DIR / "llm.html", media_type="text/html")
