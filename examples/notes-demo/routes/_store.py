"""In-memory note store shared by the note routes.

Underscore-prefixed, so discovery never serves it; route modules import it
relatively (``from .. import _store``).
"""

import itertools
import threading

_ids = itertools.count(1)
_lock = threading.Lock()
NOTES: dict[str, dict[str, str]] = {}


def add(title: str, body: str) -> dict[str, str]:
    with _lock:
        note_id = str(next(_ids))
        NOTES[note_id] = {"id": note_id, "title": title, "body": body}
        return NOTES[note_id]


def remove(note_id: str) -> bool:
    with _lock:
        return NOTES.pop(note_id, None) is not None
