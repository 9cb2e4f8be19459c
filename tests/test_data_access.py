"""
SmartNotes Backend — Data Access Facade Tests
===============================================

What:  Owner scoping and the CRUD contract of DataAccessFacade.
How:   Real ORM round-trips against an in-memory SQLite database, with two
       identities (alice, bob) sharing it.

What we test:
    ✅ Every read, update and delete is scoped to the caller
    ✅ Owner and timestamps can't be written by callers
    ✅ Delete is idempotent; folder delete detaches notes
    ✅ Constraint violations surface as ValidationError
    ✅ Tag links and profile updates
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from smartnotes.exceptions import AuthenticationError, NotFoundError, ValidationError
from smartnotes.models import Folder, Identity, Note, Tag
from smartnotes.services.data_access import DataAccessFacade
from smartnotes.session import SessionContext


def days_ago(n: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=n)


class TestInsertAndGet:

    @pytest.mark.asyncio
    async def test_insert_assigns_id_owner_and_timestamps(self, alice_facade, alice, note_payload):
        note = await alice_facade.insert(Note, note_payload)

        assert isinstance(note.id, uuid.UUID)
        assert note.user_id == alice.id
        assert note.created_at is not None
        assert note.updated_at is not None
        assert note.original_content == note_payload["original_content"]

    @pytest.mark.asyncio
    async def test_insert_ignores_caller_supplied_owner(self, alice_facade, alice, bob, note_payload):
        note = await alice_facade.insert(Note, {**note_payload, "user_id": bob.id})
        assert note.user_id == alice.id

    @pytest.mark.asyncio
    async def test_get_returns_own_record(self, alice_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        fetched = await alice_facade.get(Note, note.id)
        assert fetched.id == note.id

    @pytest.mark.asyncio
    async def test_get_foreign_record_is_not_found(self, alice_facade, bob_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)

        with pytest.raises(NotFoundError) as exc_info:
            await bob_facade.get(Note, note.id)
        assert exc_info.value.resource == "note"

    @pytest.mark.asyncio
    async def test_get_unknown_id_is_not_found(self, alice_facade):
        with pytest.raises(NotFoundError):
            await alice_facade.get(Note, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_insert_rejects_unknown_fields(self, alice_facade, note_payload):
        with pytest.raises(ValidationError):
            await alice_facade.insert(Note, {**note_payload, "colour": "red"})

    @pytest.mark.asyncio
    async def test_check_constraint_violation_is_validation_error(self, alice_facade, note_payload):
        with pytest.raises(ValidationError):
            await alice_facade.insert(Note, {**note_payload, "summary_length": "enormous"})

    @pytest.mark.asyncio
    async def test_note_cannot_be_filed_in_foreign_folder(self, alice_facade, bob_facade, note_payload):
        bobs_folder = await bob_facade.insert(Folder, {"name": "Bob's"})

        with pytest.raises(ValidationError) as exc_info:
            await alice_facade.insert(Note, {**note_payload, "folder_id": bobs_folder.id})
        assert exc_info.value.field == "folder_id"


class TestList:

    @pytest.mark.asyncio
    async def test_list_only_returns_callers_records(self, alice_facade, bob_facade, note_payload):
        await alice_facade.insert(Note, note_payload)
        await bob_facade.insert(Note, {**note_payload, "title": "Bob's note"})

        alice_notes = await alice_facade.list(Note)
        bob_notes = await bob_facade.list(Note)

        assert [n.title for n in alice_notes] == ["Photosynthesis Basics"]
        assert [n.title for n in bob_notes] == ["Bob's note"]

    @pytest.mark.asyncio
    async def test_list_is_newest_first_with_limit(self, alice_facade, db_session, note_payload):
        for age, title in [(3, "old"), (1, "new"), (2, "middle")]:
            note = await alice_facade.insert(Note, {**note_payload, "title": title})
            note.created_at = days_ago(age)
        await db_session.flush()

        notes = await alice_facade.list(Note)
        assert [n.title for n in notes] == ["new", "middle", "old"]

        limited = await alice_facade.list(Note, limit=2)
        assert [n.title for n in limited] == ["new", "middle"]

    @pytest.mark.asyncio
    async def test_list_empty_is_valid(self, alice_facade):
        assert await alice_facade.list(Note) == []

    @pytest.mark.asyncio
    async def test_list_equality_filter(self, alice_facade, note_payload):
        folder = await alice_facade.insert(Folder, {"name": "Biology"})
        await alice_facade.insert(Note, {**note_payload, "folder_id": folder.id})
        await alice_facade.insert(Note, {**note_payload, "title": "Loose"})

        filed = await alice_facade.list(Note, folder_id=folder.id)
        unfiled = await alice_facade.list(Note, folder_id=None)

        assert [n.title for n in filed] == ["Photosynthesis Basics"]
        assert [n.title for n in unfiled] == ["Loose"]

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_order_column(self, alice_facade):
        with pytest.raises(ValidationError):
            await alice_facade.list(Note, order_by="popularity")


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_changes_fields(self, alice_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        updated = await alice_facade.update(Note, note.id, {"title": "Renamed", "keywords": ["x"]})

        assert updated.title == "Renamed"
        assert updated.keywords == ["x"]

    @pytest.mark.asyncio
    async def test_update_never_changes_owner_or_id(self, alice_facade, alice, bob, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        original_id = note.id

        updated = await alice_facade.update(Note, note.id, {"user_id": bob.id, "id": uuid.uuid4()})

        assert updated.user_id == alice.id
        assert updated.id == original_id

    @pytest.mark.asyncio
    async def test_update_refreshes_updated_at(self, alice_facade, db_session, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        note.updated_at = days_ago(5)
        await db_session.flush()
        stale = note.updated_at

        updated = await alice_facade.update(Note, note.id, {"title": "Fresh"})
        assert updated.updated_at > stale

    @pytest.mark.asyncio
    async def test_update_foreign_record_is_not_found_and_unchanged(self, alice_facade, bob_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)

        with pytest.raises(NotFoundError):
            await bob_facade.update(Note, note.id, {"title": "Hijacked"})

        assert (await alice_facade.get(Note, note.id)).title == "Photosynthesis Basics"


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_then_get_is_not_found(self, alice_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        await alice_facade.delete(Note, note.id)

        with pytest.raises(NotFoundError):
            await alice_facade.get(Note, note.id)

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, alice_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        await alice_facade.delete(Note, note.id)
        await alice_facade.delete(Note, note.id)
        await alice_facade.delete(Note, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_delete_foreign_record_changes_nothing(self, alice_facade, bob_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        await bob_facade.delete(Note, note.id)

        assert (await alice_facade.get(Note, note.id)).id == note.id

    @pytest.mark.asyncio
    async def test_folder_delete_detaches_notes(self, alice_facade, note_payload):
        folder = await alice_facade.insert(Folder, {"name": "Biology"})
        note = await alice_facade.insert(Note, {**note_payload, "folder_id": folder.id})

        await alice_facade.delete(Folder, folder.id)

        survivor = await alice_facade.get(Note, note.id)
        assert survivor.folder_id is None
        assert await alice_facade.list(Folder) == []


class TestCount:

    @pytest.mark.asyncio
    async def test_count_all_and_since(self, alice_facade, bob_facade, db_session, note_payload):
        recent = await alice_facade.insert(Note, note_payload)
        old = await alice_facade.insert(Note, note_payload)
        old.created_at = days_ago(30)
        await bob_facade.insert(Note, note_payload)
        await db_session.flush()

        assert await alice_facade.count(Note) == 2
        assert await alice_facade.count(Note, since=days_ago(7)) == 1
        assert recent.id != old.id


class TestTags:

    @pytest.mark.asyncio
    async def test_attach_list_detach(self, alice_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        zeta = await alice_facade.insert(Tag, {"name": "zeta"})
        alpha = await alice_facade.insert(Tag, {"name": "alpha", "color": "#ff0000"})

        await alice_facade.attach_tag(note.id, zeta.id)
        await alice_facade.attach_tag(note.id, alpha.id)
        await alice_facade.attach_tag(note.id, alpha.id)

        tags = await alice_facade.list_note_tags(note.id)
        assert [t.name for t in tags] == ["alpha", "zeta"]

        await alice_facade.detach_tag(note.id, zeta.id)
        assert [t.name for t in await alice_facade.list_note_tags(note.id)] == ["alpha"]

    @pytest.mark.asyncio
    async def test_cannot_attach_foreign_tag(self, alice_facade, bob_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        bobs_tag = await bob_facade.insert(Tag, {"name": "bob"})

        with pytest.raises(NotFoundError):
            await alice_facade.attach_tag(note.id, bobs_tag.id)

    @pytest.mark.asyncio
    async def test_deleting_tag_removes_links(self, alice_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        tag = await alice_facade.insert(Tag, {"name": "temp"})
        await alice_facade.attach_tag(note.id, tag.id)

        await alice_facade.delete(Tag, tag.id)

        assert await alice_facade.list_note_tags(note.id) == []

    @pytest.mark.asyncio
    async def test_tags_of_loaded_note(self, alice_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        tag = await alice_facade.insert(Tag, {"name": "exam"})
        await alice_facade.attach_tag(note.id, tag.id)

        assert [t.name for t in await alice_facade.tags_of(note)] == ["exam"]

    @pytest.mark.asyncio
    async def test_tags_of_foreign_note_is_not_found(self, alice_facade, bob_facade, note_payload):
        note = await alice_facade.insert(Note, note_payload)
        with pytest.raises(NotFoundError):
            await bob_facade.tags_of(note)


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_profile(self, alice_facade, alice):
        profile = await alice_facade.get_profile()
        assert profile.user_id == alice.id
        assert profile.full_name == "Alice Liddell"

    @pytest.mark.asyncio
    async def test_update_profile_mirrors_display_name(self, alice_facade, alice, db_session):
        profile = await alice_facade.update_profile({"full_name": "Alice Pleasance"})
        assert profile.full_name == "Alice Pleasance"

        identity = await db_session.get(Identity, alice.id)
        assert identity.full_name == "Alice Pleasance"


class TestUnauthenticated:

    @pytest.mark.asyncio
    async def test_every_operation_requires_identity(self, db_session, note_payload):
        facade = DataAccessFacade(db_session, SessionContext())

        with pytest.raises(AuthenticationError):
            await facade.list(Note)
        with pytest.raises(AuthenticationError):
            await facade.insert(Note, note_payload)
        with pytest.raises(AuthenticationError):
            await facade.get_profile()
