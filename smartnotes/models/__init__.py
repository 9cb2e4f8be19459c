# Models package init
# Importing every model here registers it with Base.metadata, which Alembic
# and the test suite rely on.
from smartnotes.models.identity import AuthSession, Identity
from smartnotes.models.profile import Profile
from smartnotes.models.folder import Folder
from smartnotes.models.note import Note, SummaryLength, SummaryTone
from smartnotes.models.tag import Tag, note_tags

__all__ = [
    "AuthSession",
    "Identity",
    "Profile",
    "Folder",
    "Note",
    "SummaryLength",
    "SummaryTone",
    "Tag",
    "note_tags",
]
