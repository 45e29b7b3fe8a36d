from pydantic import BaseModel, Field

# Titles become part of a file name, so path separators are not allowed
TITLE_PATTERN = r"^[^/\\]+$"


def validate_title(title: str) -> str:
    """
    Reject titles that are empty or would escape the notes directory.

    Raises:
        ValueError if the title is empty or contains `/` or `\\`.
    """
    if not title:
        raise ValueError("title must not be empty")
    if "/" in title or "\\" in title:
        raise ValueError(f"title may not contain path separators: {title!r}")
    return title


def derive_note_path(notes_dir: str, title: str, timestamp: int) -> str:
    """
    Build the text file location for a note.

    Only the first space of the title is replaced; the result is fixed at
    creation and never recomputed when the title changes.
    """
    name = title.replace(" ", "_", 1)
    return f"{notes_dir.rstrip('/')}/{name}_{timestamp}.txt"


class Note(BaseModel):
    """
    Note entity as stored in the index. `id` is the note's current position.
    """

    id: int = Field(..., ge=0)
    title: str = Field(..., min_length=1)
    text: str = ""
    timestamp: int = Field(..., description="Creation time in ms since epoch")
    path: str
