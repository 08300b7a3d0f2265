import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from booknotes.config import settings
from booknotes.library import DuplicateEntry, Library, StoreError
from booknotes.services.http_client import cleanup_http_client
from booknotes.services.open_library import OpenLibraryService, Suggestion
from booknotes.sorting import DEFAULT_SORT, SortMode
from booknotes.validators import NoteValidator, RATING_OUT_OF_RANGE, ValidationError

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

# --- Messages shown on the pages ---
LOAD_FAILED = "Something went wrong while loading your notes."
DUPLICATE_NOTE = "This book by the same author already exists in your notes."
ADD_FAILED = "Could not add the note. Try again."
OPEN_FAILED = "Could not open this note."


# --- Models ---
class SuggestionsResponse(BaseModel):
    suggestions: List[Suggestion]


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    db: bool
    total_notes: int


# --- Dependencies ---
def get_library(request: Request) -> Library:
    return request.app.state.library


def get_suggestion_service(request: Request) -> OpenLibraryService:
    return request.app.state.suggestions


# --- Helpers ---
def _redirect(url: str) -> RedirectResponse:
    # 303 so the browser follows a POST with a GET
    return RedirectResponse(url, status_code=303)


def _render_index(request: Request, library: Library, sort: SortMode, error: Optional[str]) -> HTMLResponse:
    """List page with whatever the store can give us; failures become empty defaults."""
    books = library.list_notes(sort).unwrap_or([])
    top_book = library.top_rated().unwrap_or(None)
    return templates.TemplateResponse(request, "index.html", {
        "books": books,
        "top_book": top_book,
        "sort": sort.value,
        "error": error,
    })


def _render_note(request: Request, book, error: Optional[str]) -> HTMLResponse:
    return templates.TemplateResponse(request, "notes.html", {"book": book, "error": error})


def _parse_note_id(raw: str) -> Optional[int]:
    """Path id as an int; None for anything that is not a whole number."""
    return NoteValidator.parse_whole_number(raw)


# --- Routes ---
def register_routes(app: FastAPI) -> None:

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request, sort: Optional[str] = None, library: Library = Depends(get_library)):
        mode = SortMode.parse(sort)
        try:
            return _render_index(request, library, mode, None)
        except Exception as e:
            logger.exception(f"Error loading home page: {e}")
            return templates.TemplateResponse(request, "index.html", {
                "books": [],
                "top_book": None,
                "sort": mode.value,
                "error": LOAD_FAILED,
            })

    @app.get("/search", response_model=SuggestionsResponse)
    async def search(q: Optional[str] = None, service: OpenLibraryService = Depends(get_suggestion_service)):
        """Autocomplete suggestions for the add form; always answers 200."""
        suggestions = await service.suggest(q)
        return SuggestionsResponse(suggestions=suggestions)

    @app.post("/add", response_class=HTMLResponse)
    def add_note(
        request: Request,
        title: Optional[str] = Form(None),
        author: Optional[str] = Form(None),
        notes: Optional[str] = Form(None),
        rating: Optional[str] = Form(None),
        date_read: Optional[str] = Form(None),
        cover_id: Optional[str] = Form(None),  # sent by the autocomplete, not stored
        library: Library = Depends(get_library),
    ):
        try:
            note = NoteValidator.validate_new_note(title, author, notes, rating, date_read)
        except ValidationError as e:
            return _render_index(request, library, DEFAULT_SORT, str(e))

        try:
            library.add_note(note.title, note.author, note.notes, note.rating, note.date_read)
        except DuplicateEntry:
            return _render_index(request, library, DEFAULT_SORT, DUPLICATE_NOTE)
        except StoreError:
            return _render_index(request, library, DEFAULT_SORT, ADD_FAILED)

        return _redirect("/")

    @app.get("/notes/{note_id}", response_class=HTMLResponse)
    def view_note(request: Request, note_id: str, library: Library = Depends(get_library)):
        parsed_id = _parse_note_id(note_id)
        if parsed_id is None:
            logger.warning(f"Note id is not a number: {note_id!r}")
            return _render_note(request, None, OPEN_FAILED)
        result = library.find_note(parsed_id)
        if not result.ok:
            return _render_note(request, None, OPEN_FAILED)
        if result.value is None:
            return _redirect("/")
        return _render_note(request, result.value, None)

    @app.post("/edit/{note_id}", response_class=HTMLResponse)
    def edit_note(
        request: Request,
        note_id: str,
        rating: Optional[str] = Form(None),
        notes: Optional[str] = Form(None),
        library: Library = Depends(get_library),
    ):
        parsed_id = _parse_note_id(note_id)
        new_rating = NoteValidator.parse_rating(rating)
        if new_rating is None:
            if parsed_id is None:
                return _redirect("/")
            current = library.find_note(parsed_id)
            if not current.ok or current.value is None:
                return _redirect("/")
            return _render_note(request, current.value, RATING_OUT_OF_RANGE)

        if parsed_id is None:
            logger.warning(f"Note id is not a number: {note_id!r}")
            return _redirect(f"/notes/{quote(note_id, safe='')}")
        # Update failures are already logged; the note page shows what is stored.
        library.update_note(parsed_id, new_rating, NoteValidator.clean_text(notes))
        return _redirect(f"/notes/{parsed_id}")

    @app.post("/delete/{note_id}")
    def delete_note(note_id: str, library: Library = Depends(get_library)):
        parsed_id = _parse_note_id(note_id)
        if parsed_id is None:
            logger.warning(f"Note id is not a number: {note_id!r}")
        else:
            library.delete_note(parsed_id)
        return _redirect("/")

    @app.get("/health", response_model=HealthResponse)
    def health(library: Library = Depends(get_library)):
        """Liveness check with a quick store count."""
        result = library.count()
        if not result.ok:
            logger.warning(f"Health check could not reach the store: {result.error}")
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc).isoformat(),
            db=result.ok,
            total_notes=result.unwrap_or(0),
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        await cleanup_http_client()


def create_app(library: Optional[Library] = None,
               suggestions: Optional[OpenLibraryService] = None) -> FastAPI:
    """Build the web app around an explicit store and suggestion service."""
    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.library = library or Library(settings.database_file)
    app.state.suggestions = suggestions or OpenLibraryService()

    static_dir = BASE_DIR / "static"
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    register_routes(app)
    return app


app = create_app()
