"""
JSON index + text file persistence for notes.

The index file holds `{"list": [...]}` with one record per note; each note's
text is also written verbatim to its own file at `path`.
"""

import json
import logging
import os
import threading
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from src.api.errors import IndexParseError, NoteIOError, NoteNotFoundError
from src.api.models import Note, derive_note_path, validate_title

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class NoteStore:
    """
    CRUD over notes backed by one JSON index and one text file per note.

    Every index read and read-modify-write cycle runs under a single lock, so
    concurrent requests in this process cannot lose updates or hand out the
    same id twice.
    """

    def __init__(
        self,
        index_path: str,
        notes_dir: str,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.index_path = index_path
        self.notes_dir = notes_dir
        self._clock = clock or _now_ms
        self._lock = threading.RLock()

    # -------- Index file helpers --------

    def _read_index(self) -> List[dict]:
        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                raw = f.read()
        except OSError as exc:
            raise NoteIOError(f"Could not read index {self.index_path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise IndexParseError(f"Index {self.index_path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("list"), list):
            raise IndexParseError(f"Index {self.index_path} has no 'list' array")
        return data["list"]

    def _write_index(self, records: List[dict]) -> None:
        try:
            with open(self.index_path, "w", encoding="utf-8") as f:
                f.write(json.dumps({"list": records}, indent=2, ensure_ascii=False))
        except OSError as exc:
            raise NoteIOError(f"Could not write index {self.index_path}: {exc}") from exc

    @staticmethod
    def _write_text(path: str, text: str) -> None:
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as exc:
            raise NoteIOError(f"Could not write note file {path}: {exc}") from exc

    @staticmethod
    def _to_note(record: dict, note_id: int) -> Note:
        if not isinstance(record, dict):
            raise IndexParseError(f"Malformed index entry at position {note_id}")
        try:
            return Note.model_validate({**record, "id": note_id})
        except ValidationError as exc:
            raise IndexParseError(f"Malformed index entry at position {note_id}") from exc

    @staticmethod
    def _position(records: List[dict], note_id: int) -> int:
        if note_id < 0 or note_id >= len(records) or not records[note_id]:
            raise NoteNotFoundError(note_id)
        return note_id

    # -------- Public operations --------

    # PUBLIC_INTERFACE
    def bootstrap(self) -> None:
        """
        Create the notes directory and an empty index when they are missing.

        Safe to call repeatedly.
        """
        with self._lock:
            try:
                if os.path.isdir(self.notes_dir):
                    logger.info("notes directory already exists: %s", self.notes_dir)
                else:
                    os.makedirs(self.notes_dir, exist_ok=True)
                    logger.info("notes directory created: %s", self.notes_dir)
            except OSError as exc:
                raise NoteIOError(f"Could not create {self.notes_dir}: {exc}") from exc
            if not os.path.exists(self.index_path):
                self._write_index([])
                logger.info("empty index created: %s", self.index_path)

    # PUBLIC_INTERFACE
    def create(self, title: str, text: str) -> Note:
        """
        Append a new note to the index and write its text file.

        If another note already owns the derived path (same title within the
        same millisecond), the timestamp is bumped by 1 ms until it is free.
        The index is written before the text file; if the file write fails the
        index entry stays in place.
        """
        validate_title(title)
        with self._lock:
            records = self._read_index()
            taken = {record.get("path") for record in records if isinstance(record, dict)}
            timestamp = self._clock()
            path = derive_note_path(self.notes_dir, title, timestamp)
            while path in taken or os.path.exists(path):
                timestamp += 1
                path = derive_note_path(self.notes_dir, title, timestamp)
            note = Note(id=len(records), title=title, text=text, timestamp=timestamp, path=path)
            records.append(note.model_dump())
            self._write_index(records)
            self._write_text(note.path, note.text)
        logger.info("Created note %d at %s", note.id, note.path)
        return note

    # PUBLIC_INTERFACE
    def read(self, note_id: int) -> Note:
        """Return the note at position `note_id`."""
        with self._lock:
            records = self._read_index()
            position = self._position(records, note_id)
            return self._to_note(records[position], position)

    # PUBLIC_INTERFACE
    def list(self) -> List[Note]:
        """Return every note in insertion order."""
        with self._lock:
            records = self._read_index()
        return [self._to_note(record, position) for position, record in enumerate(records)]

    # PUBLIC_INTERFACE
    def update(self, note_id: int, title: Optional[str] = None, text: Optional[str] = None) -> Note:
        """
        Replace a note's title and/or text.

        A `None` argument keeps the stored value. `id`, `timestamp` and `path`
        are left unchanged; the text file at the original path is overwritten.
        """
        if title is not None:
            validate_title(title)
        with self._lock:
            records = self._read_index()
            position = self._position(records, note_id)
            note = self._to_note(records[position], position)
            changes = {}
            if title is not None:
                changes["title"] = title
            if text is not None:
                changes["text"] = text
            note = note.model_copy(update=changes)
            records[position] = note.model_dump()
            self._write_index(records)
            self._write_text(note.path, note.text)
        logger.info("Updated note %d", note.id)
        return note

    # PUBLIC_INTERFACE
    def delete(self, note_id: int) -> Note:
        """
        Remove a note, renumber the notes after it and delete its text file.

        A failed file removal leaves the index already rewritten.
        """
        with self._lock:
            records = self._read_index()
            position = self._position(records, note_id)
            removed = self._to_note(records.pop(position), position)
            records = [{**record, "id": index} for index, record in enumerate(records)]
            self._write_index(records)
            try:
                os.remove(removed.path)
            except OSError as exc:
                raise NoteIOError(f"Could not delete note file {removed.path}: {exc}") from exc
        logger.info("Deleted note %d (%s)", removed.id, removed.path)
        return removed
