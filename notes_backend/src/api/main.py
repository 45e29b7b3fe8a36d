import logging
import os

from fastapi import FastAPI, Depends, Form, Path, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from src.api.errors import NoteNotFoundError, NoteStoreError
from src.api.models import TITLE_PATTERN
from src.api.storage import get_store
from src.api.store import NoteStore
from src.api.schemas import (
    NoteCreateRequest,
    NoteUpdateRequest,
    NoteResponse,
    NoteListResponse,
)
from src.api import views

# Environment configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
PORT = int(os.getenv("PORT", "5000"))

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Note Keeper",
    description="Note keeping web app: HTML pages plus a JSON API over a file-backed note store.",
    version="1.0.0",
    openapi_tags=[
        {"name": "Health", "description": "Service health and status."},
        {"name": "Pages", "description": "HTML pages for browsing and editing notes."},
        {"name": "Notes", "description": "JSON CRUD operations for notes."},
    ],
)

# CORS setup - allow frontend
frontend_origin = os.getenv("FRONTEND_ORIGIN", "http://localhost:3000")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _error_response(request: Request, status_code: int, message: str) -> Response:
    if _wants_json(request):
        return JSONResponse(status_code=status_code, content={"detail": message})
    return HTMLResponse(views.render_error(status_code, message), status_code=status_code)


@app.exception_handler(NoteNotFoundError)
async def note_not_found_handler(request: Request, exc: NoteNotFoundError):
    logger.warning("%s %s: %s", request.method, request.url.path, exc)
    return _error_response(request, status.HTTP_404_NOT_FOUND, "Note not found")


@app.exception_handler(NoteStoreError)
async def note_store_error_handler(request: Request, exc: NoteStoreError):
    logger.error("%s %s failed", request.method, request.url.path, exc_info=exc)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Note storage failed")


def _redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


def _to_response(note) -> NoteResponse:
    return NoteResponse.model_validate(note, from_attributes=True)


# -------- Page Routes --------

# PUBLIC_INTERFACE
@app.get("/", response_class=HTMLResponse, tags=["Pages"], summary="List notes, newest first")
def index_page(store: NoteStore = Depends(get_store)):
    """Render every note with its formatted creation date, newest first."""
    return views.render_index(store.list())


# PUBLIC_INTERFACE
@app.get("/create", response_class=HTMLResponse, tags=["Pages"], summary="New note form")
def create_page():
    return views.render_create()


# PUBLIC_INTERFACE
@app.post("/create", tags=["Pages"], summary="Create a note from form fields")
def create_from_form(
    title: str = Form(..., min_length=1, pattern=TITLE_PATTERN),
    text: str = Form(""),
    store: NoteStore = Depends(get_store),
):
    """
    Create a note and redirect to the index.

    Form fields:
        title: note title
        text: note body
    """
    store.create(title, text)
    return _redirect_home()


# PUBLIC_INTERFACE
@app.get("/notes/{note_id}", response_class=HTMLResponse, tags=["Pages"], summary="Show a note")
def show_page(note_id: int = Path(...), store: NoteStore = Depends(get_store)):
    return views.render_show(store.read(note_id))


# PUBLIC_INTERFACE
@app.get("/notes/{note_id}/edit", response_class=HTMLResponse, tags=["Pages"], summary="Edit form")
def edit_page(note_id: int = Path(...), store: NoteStore = Depends(get_store)):
    return views.render_edit(store.read(note_id))


# PUBLIC_INTERFACE
@app.api_route("/notes/{note_id}/edit", methods=["PUT", "POST"], tags=["Pages"], summary="Update a note")
def update_from_form(
    note_id: int = Path(...),
    title: str = Form(..., min_length=1, pattern=TITLE_PATTERN),
    text: str = Form(""),
    store: NoteStore = Depends(get_store),
):
    """
    Replace a note's title and text, then redirect to the index.

    POST is accepted because HTML forms cannot send PUT.
    """
    store.update(note_id, title, text)
    return _redirect_home()


# PUBLIC_INTERFACE
@app.api_route("/notes/{note_id}/delete", methods=["DELETE", "POST"], tags=["Pages"], summary="Delete a note")
def delete_from_form(note_id: int = Path(...), store: NoteStore = Depends(get_store)):
    """Delete a note and redirect to the index. Later notes shift down one id."""
    store.delete(note_id)
    return _redirect_home()


# -------- JSON Routes --------

# PUBLIC_INTERFACE
@app.get("/api/health", tags=["Health"], summary="Health Check")
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON object indicating service status.
    """
    return {"message": "Healthy"}


# PUBLIC_INTERFACE
@app.get("/api/notes", response_model=NoteListResponse, tags=["Notes"], summary="List notes")
def list_notes(store: NoteStore = Depends(get_store)):
    """
    List every note in index order.

    Returns:
        NoteListResponse shaped like the index file: `{"list": [...]}`.
    """
    return NoteListResponse(list=[_to_response(n) for n in store.list()])


# PUBLIC_INTERFACE
@app.post(
    "/api/notes",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Notes"],
    summary="Create a new note",
)
def create_note(payload: NoteCreateRequest, store: NoteStore = Depends(get_store)):
    """
    Create a new note.

    Body:
        title: note title
        text: note body

    Returns:
        Created NoteResponse; its id is the note's position in the index.
    """
    return _to_response(store.create(payload.title, payload.text))


# PUBLIC_INTERFACE
@app.get("/api/notes/{note_id}", response_model=NoteResponse, tags=["Notes"], summary="Get a note by ID")
def get_note(note_id: int = Path(...), store: NoteStore = Depends(get_store)):
    """
    Retrieve a single note by ID.

    Raises:
        404 if no note sits at that position.
    """
    return _to_response(store.read(note_id))


# PUBLIC_INTERFACE
@app.put("/api/notes/{note_id}", response_model=NoteResponse, tags=["Notes"], summary="Update a note by ID")
def update_note(
    payload: NoteUpdateRequest,
    note_id: int = Path(...),
    store: NoteStore = Depends(get_store),
):
    """
    Update a note. Omitted fields keep their current value.
    """
    return _to_response(store.update(note_id, title=payload.title, text=payload.text))


# PUBLIC_INTERFACE
@app.delete(
    "/api/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["Notes"],
    summary="Delete a note by ID",
)
def delete_note(note_id: int = Path(...), store: NoteStore = Depends(get_store)):
    """
    Delete a note. Notes after it are renumbered.
    """
    store.delete(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Create the notes directory and index if missing
@app.on_event("startup")
def on_startup():
    store = app.dependency_overrides.get(get_store, get_store)()
    store.bootstrap()
    logger.info("Note Keeper ready (index=%s, notes=%s)", store.index_path, store.notes_dir)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
