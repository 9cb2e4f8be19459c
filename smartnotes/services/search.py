"""
In-memory search over an already-fetched list of notes.

A note matches when the query, compared case-insensitively, is a substring
of its title, of its summary (when present) or of any one keyword. An empty
query matches everything. Nothing here touches the database.
"""

from typing import Any, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def note_matches(note: Any, query: str) -> bool:
    needle = query.lower()
    if not needle:
        return True
    if needle in (note.title or "").lower():
        return True
    summary = getattr(note, "summary", None)
    if summary and needle in summary.lower():
        return True
    return any(needle in k.lower() for k in (getattr(note, "keywords", None) or []))


def filter_notes(notes: Sequence[T], query: Optional[str]) -> List[T]:
    """Return the notes matching `query`, preserving their order."""
    if not query:
        return list(notes)
    return [note for note in notes if note_matches(note, query)]
