import os

from src.api.store import NoteStore

# Index file and note directory default to the working directory; can be overridden by env
NOTES_INDEX_PATH = os.getenv("NOTES_INDEX_PATH", "./notes.json")
NOTES_DIR = os.getenv("NOTES_DIR", "./notes")

note_store = NoteStore(index_path=NOTES_INDEX_PATH, notes_dir=NOTES_DIR)


def get_store() -> NoteStore:
    """
    Dependency that provides the process-wide note store.
    """
    return note_store
