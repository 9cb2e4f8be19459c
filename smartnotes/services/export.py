"""
SmartNotes Backend — Note Export Formatter
============================================

What:  Converts a note into a downloadable plain-text or Markdown document.
How:   Pure, synchronous, deterministic functions. No I/O, no settings.
Who:   Used by GET /api/notes/{id}/export.

Both formatters are total: a note without a summary renders "No summary",
and a note with no keywords (None or []) has no Keywords section at all.
They accept any object exposing `title`, `summary`, `keywords` and
`original_content` (ORM rows and response schemas alike).

Plain text layout:
    Title
    =====

    Summary:
    <summary or "No summary">

    Keywords: k1, k2          ← only when keywords exist, followed by a blank line

    Original Content:
    <original content verbatim>

Markdown layout:
    # Title

    ## Summary

    <summary or "No summary">

    ## Keywords               ← only when keywords exist

    - k1
    - k2

    ## Original Content

    <original content verbatim>
"""

import re
from typing import Any, Tuple

from smartnotes.exceptions import ValidationError

NO_SUMMARY = "No summary"

# format → (extension, media type)
EXPORT_FORMATS = {
    "txt": ("txt", "text/plain; charset=utf-8"),
    "md": ("md", "text/markdown; charset=utf-8"),
}

_FILENAME_UNSAFE = re.compile(r"[^a-z0-9]")


def _summary_of(note: Any) -> str:
    return getattr(note, "summary", None) or NO_SUMMARY


def _keywords_of(note: Any) -> list:
    return list(getattr(note, "keywords", None) or [])


def to_plain_text(note: Any) -> str:
    title = note.title
    content = f"{title}\n{'=' * len(title)}\n\nSummary:\n{_summary_of(note)}\n\n"
    keywords = _keywords_of(note)
    if keywords:
        content += f"Keywords: {', '.join(keywords)}\n\n"
    content += f"Original Content:\n{note.original_content}"
    return content


def to_markdown(note: Any) -> str:
    content = f"# {note.title}\n\n## Summary\n\n{_summary_of(note)}\n\n"
    keywords = _keywords_of(note)
    if keywords:
        bullets = "\n".join(f"- {k}" for k in keywords)
        content += f"## Keywords\n\n{bullets}\n\n"
    content += f"## Original Content\n\n{note.original_content}"
    return content


def export_filename(title: str, extension: str) -> str:
    """
    Derive a download filename from a note title.

    Lower-cases the title and replaces every character outside [a-z0-9]
    with an underscore, one underscore per character:

        >>> export_filename("Q1 Report!!", "txt")
        'q1_report__.txt'
    """
    stem = _FILENAME_UNSAFE.sub("_", title.lower())
    return f"{stem}.{extension}"


def render_export(note: Any, fmt: str) -> Tuple[str, bytes, str]:
    """
    Render a note for download.

    Returns:
        (filename, UTF-8 document bytes, media type)

    Raises:
        ValidationError: fmt is not "txt" or "md"
    """
    key = (fmt or "").lower()
    if key not in EXPORT_FORMATS:
        raise ValidationError(
            message=f"Unsupported export format '{fmt}'. Use 'txt' or 'md'.",
            field="format",
            context={"allowed_formats": sorted(EXPORT_FORMATS)},
        )
    extension, media_type = EXPORT_FORMATS[key]
    body = to_markdown(note) if key == "md" else to_plain_text(note)
    return export_filename(note.title, extension), body.encode("utf-8"), media_type
