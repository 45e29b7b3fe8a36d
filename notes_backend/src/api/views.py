"""
HTML pages for the note keeper: the index of all notes (newest first), the
create form, a single note, the edit form with its delete button, and an error
page for failed requests.
"""

import html as _html
from datetime import datetime, tzinfo
from typing import List, Optional

from src.api.models import Note

APP_TITLE = "Note Keeper"

_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_CSS = """
body{font-family:system-ui,sans-serif;max-width:760px;margin:0 auto;padding:0 16px;color:#222}
nav{display:flex;gap:16px;align-items:center;padding:12px 0;border-bottom:1px solid #ddd}
nav .brand{font-weight:600;font-size:18px;color:#222;text-decoration:none}
.note{border:1px solid #e2e2e2;border-radius:6px;padding:10px 14px;margin:12px 0}
.note h2{margin:0 0 4px;font-size:17px}
.meta{color:#777;font-size:12px}
.text{white-space:pre-wrap}
form.note-form input,form.note-form textarea{width:100%;box-sizing:border-box;margin:4px 0 12px;padding:6px}
form.note-form textarea{min-height:220px}
.danger{color:#b00020}
"""


# PUBLIC_INTERFACE
def format_date(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    """
    Format a millisecond timestamp as `Mon D YYYY H:MM AM/PM`.

    12-hour clock without a leading zero on the hour; `tz` defaults to the
    server's local time zone.
    """
    date = datetime.fromtimestamp(timestamp / 1000, tz=tz)
    hours = date.hour % 12 or 12
    ampm = "PM" if date.hour >= 12 else "AM"
    return f"{_MONTHS[date.month - 1]} {date.day} {date.year} {hours}:{date.minute:02d} {ampm}"


# PUBLIC_INTERFACE
def format_list(notes: List[Note], tz: Optional[tzinfo] = None) -> List[dict]:
    """Rows for the index page, newest first."""
    rows = [
        {
            "id": note.id,
            "title": note.title,
            "text": note.text,
            "created": format_date(note.timestamp, tz),
        }
        for note in notes
    ]
    rows.reverse()
    return rows


def _page(title: str, body: str) -> str:
    t = _html.escape(title)
    return (
        f'<!DOCTYPE html>\n<html lang="en">\n<head>'
        f'<meta charset="utf-8"><meta name="viewport" content="width=device-width,initial-scale=1">'
        f'<title>{t}</title>'
        f'<style>{_CSS}</style>'
        f'</head>\n<body>'
        f'<nav><a class="brand" href="/">{APP_TITLE}</a>'
        f'<a href="/create">New note</a></nav>'
        f'<main>{body}</main>'
        f'</body></html>'
    )


def _note_form(action: str, title: str = "", text: str = "") -> str:
    # HTML forms only submit GET/POST; the edit route accepts POST alongside PUT
    return (
        f'<form class="note-form" action="{_html.escape(action)}" method="post">'
        f'<label>Title<input name="title" required value="{_html.escape(title)}"></label>'
        f'<label>Text<textarea name="text">{_html.escape(text)}</textarea></label>'
        f'<button type="submit">Save</button>'
        f'</form>'
    )


def render_index(notes: List[Note], tz: Optional[tzinfo] = None) -> str:
    rows = format_list(notes, tz)
    if not rows:
        body = '<p class="meta">No notes yet. <a href="/create">Write one.</a></p>'
    else:
        body = "".join(
            f'<div class="note">'
            f'<h2><a href="/notes/{row["id"]}">{_html.escape(row["title"])}</a></h2>'
            f'<div class="meta">{row["created"]}</div>'
            f'</div>'
            for row in rows
        )
    return _page(APP_TITLE, f"<h1>{APP_TITLE}</h1>{body}")


def render_create() -> str:
    return _page("New note", "<h1>New note</h1>" + _note_form("/create"))


def render_show(note: Note, tz: Optional[tzinfo] = None) -> str:
    title = _html.escape(note.title)
    body = (
        f"<h1>{title}</h1>"
        f'<div class="meta">Created {format_date(note.timestamp, tz)}</div>'
        f'<p class="text">{_html.escape(note.text)}</p>'
        f'<a href="/notes/{note.id}/edit">Edit</a>'
    )
    return _page(note.title, body)


def render_edit(note: Note, tz: Optional[tzinfo] = None) -> str:
    body = (
        f"<h1>Edit note</h1>"
        f'<div class="meta">Created {format_date(note.timestamp, tz)}</div>'
        + _note_form(f"/notes/{note.id}/edit", note.title, note.text)
        + f'<form action="/notes/{note.id}/delete" method="post">'
        f'<button class="danger" type="submit">Delete</button></form>'
    )
    return _page(f"Edit {note.title}", body)


def render_error(status_code: int, message: str) -> str:
    body = (
        f"<h1>Error {status_code}</h1>"
        f"<p>{_html.escape(message)}</p>"
        f'<a href="/">Back to notes</a>'
    )
    return _page(f"Error {status_code}", body)
