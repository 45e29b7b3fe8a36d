class NoteStoreError(Exception):
    """Base class for failures raised by the note store."""


class NoteNotFoundError(NoteStoreError):
    """Raised when an id does not resolve to an entry in the index."""

    def __init__(self, note_id: int):
        super().__init__(f"Note {note_id} could not be found")
        self.note_id = note_id


class NoteIOError(NoteStoreError):
    """Raised when reading or writing the index or a note file fails."""


class IndexParseError(NoteStoreError):
    """Raised when the index file is not a valid notes index."""
