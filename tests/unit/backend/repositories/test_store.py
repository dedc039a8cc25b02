"""
Unit Tests for the in-memory entity store.

Covers owner scoping, the folder-delete cascade, ordering, and the
guarantee that callers never hold references into stored state.
"""

from datetime import timedelta
from unittest.mock import patch

import pytest

from notelens.backend.repositories.store import MemoryEntityStore


class TestUsers:
    async def test_create_user_assigns_id(self, store: MemoryEntityStore):
        user = await store.create_user(username="ada", password="hash")

        assert user.id
        assert user.username == "ada"
        assert await store.get_user(user.id) == user

    async def test_usernames_are_not_unique(self, store: MemoryEntityStore):
        first = await store.create_user(username="ada")
        second = await store.create_user(username="ada")

        assert first.id != second.id
        assert (await store.get_user_by_username("ada")).id == first.id

    async def test_unknown_user_is_none(self, store: MemoryEntityStore):
        assert await store.get_user("missing") is None
        assert await store.get_user_by_username("nobody") is None


class TestNoteOwnership:
    """Notes are only visible to and mutable by their owner."""

    async def test_list_returns_only_own_notes(self, store: MemoryEntityStore):
        await store.create_note(user_id="alice", title="A1")
        await store.create_note(user_id="alice", title="A2")
        await store.create_note(user_id="bob", title="B1")

        alice_notes = await store.get_notes_by_user_id("alice")
        bob_notes = await store.get_notes_by_user_id("bob")

        assert {n.title for n in alice_notes} == {"A1", "A2"}
        assert [n.title for n in bob_notes] == ["B1"]

    async def test_get_note_of_other_user_is_none(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="secret")

        assert await store.get_note(note.id, "bob") is None
        assert (await store.get_note(note.id, "alice")).title == "secret"

    async def test_update_note_of_other_user_does_not_mutate(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="original")

        result = await store.update_note(note.id, {"title": "hijacked"}, "bob")

        assert result is None
        assert (await store.get_note(note.id, "alice")).title == "original"

    async def test_update_missing_note_is_none(self, store: MemoryEntityStore):
        assert await store.update_note("missing", {"title": "x"}, "alice") is None

    async def test_delete_note_of_other_user_is_false(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="keep")

        assert await store.delete_note(note.id, "bob") is False
        assert await store.get_note(note.id, "alice") is not None

    async def test_delete_own_note(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="bye")

        assert await store.delete_note(note.id, "alice") is True
        assert await store.get_note(note.id, "alice") is None
        assert await store.delete_note(note.id, "alice") is False


class TestNoteLifecycle:
    async def test_create_sets_timestamps_and_defaults(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="t", content="<p>c</p>")

        assert note.created_at == note.updated_at
        assert note.folder_id is None
        assert note.content == "<p>c</p>"

    async def test_empty_folder_id_becomes_none(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="t", folder_id="")

        assert note.folder_id is None

    async def test_update_merges_and_advances_updated_at(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="t", content="old")

        updated = await store.update_note(note.id, {"content": "new"}, "alice")

        assert updated.title == "t"
        assert updated.content == "new"
        assert updated.updated_at > note.created_at
        assert updated.created_at == note.created_at

    async def test_updated_at_advances_even_when_clock_does_not(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="t")

        with patch("notelens.backend.repositories.note.utc_now", return_value=note.created_at):
            updated = await store.update_note(note.id, {"title": "u"}, "alice")

        assert updated.updated_at == note.created_at + timedelta(microseconds=1)

    async def test_update_ignores_identity_fields(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="t")

        updated = await store.update_note(
            note.id, {"id": "other", "user_id": "bob", "title": "u"}, "alice"
        )

        assert updated.id == note.id
        assert updated.user_id == "alice"
        assert await store.get_notes_by_user_id("bob") == []

    async def test_update_can_clear_folder(self, store: MemoryEntityStore):
        folder = await store.create_folder(user_id="alice", name="Work")
        note = await store.create_note(user_id="alice", title="t", folder_id=folder.id)

        updated = await store.update_note(note.id, {"folder_id": None}, "alice")

        assert updated.folder_id is None

    async def test_returned_records_are_copies(self, store: MemoryEntityStore):
        note = await store.create_note(user_id="alice", title="t")

        note.title = "mutated outside"
        fetched = await store.get_note(note.id, "alice")
        fetched.user_id = "bob"

        stored = await store.get_note(note.id, "alice")
        assert stored.title == "t"
        assert stored.user_id == "alice"


class TestOrdering:
    async def test_notes_listed_most_recent_first(self, store: MemoryEntityStore):
        first = await store.create_note(user_id="alice", title="first")
        await store.create_note(user_id="alice", title="second")
        await store.create_note(user_id="alice", title="third")

        await store.update_note(first.id, {"content": "touched"}, "alice")

        titles = [n.title for n in await store.get_notes_by_user_id("alice")]
        assert titles[0] == "first"
        assert set(titles) == {"first", "second", "third"}

    async def test_listing_is_non_increasing_by_last_activity(self, store: MemoryEntityStore):
        notes = [await store.create_note(user_id="alice", title=str(i)) for i in range(5)]
        await store.update_note(notes[2].id, {"title": "2b"}, "alice")
        await store.update_note(notes[0].id, {"title": "0b"}, "alice")

        listed = await store.get_notes_by_user_id("alice")

        activity = [n.last_activity for n in listed]
        assert activity == sorted(activity, reverse=True)
        assert listed[0].title == "0b"
        assert listed[1].title == "2b"

    async def test_folders_ordered_by_name_case_insensitive(self, store: MemoryEntityStore):
        for name in ["beta", "Alpha", "gamma", "alpha"]:
            await store.create_folder(user_id="alice", name=name)

        names = [f.name for f in await store.get_folders_by_user_id("alice")]

        assert names == ["Alpha", "alpha", "beta", "gamma"]


class TestFolders:
    async def test_folder_ownership(self, store: MemoryEntityStore):
        folder = await store.create_folder(user_id="alice", name="Work")

        assert await store.get_folder(folder.id, "bob") is None
        assert await store.get_folders_by_user_id("bob") == []
        assert await store.update_folder(folder.id, {"name": "Mine"}, "bob") is None
        assert (await store.get_folder(folder.id, "alice")).name == "Work"

    async def test_update_folder_renames(self, store: MemoryEntityStore):
        folder = await store.create_folder(user_id="alice", name="Work")

        renamed = await store.update_folder(folder.id, {"name": "Office"}, "alice")

        assert renamed.name == "Office"
        assert renamed.created_at == folder.created_at

    async def test_delete_folder_cascades_to_owner_notes_only(self, store: MemoryEntityStore):
        folder = await store.create_folder(user_id="alice", name="Work")
        in_folder = await store.create_note(user_id="alice", title="in", folder_id=folder.id)
        loose = await store.create_note(user_id="alice", title="loose")
        other_folder = await store.create_folder(user_id="alice", name="Home")
        elsewhere = await store.create_note(user_id="alice", title="home", folder_id=other_folder.id)
        # Folder ids are loose references: another user may point at the same id.
        bobs = await store.create_note(user_id="bob", title="bob", folder_id=folder.id)

        assert await store.delete_folder(folder.id, "alice") is True

        assert await store.get_folder(folder.id, "alice") is None
        assert await store.get_note(in_folder.id, "alice") is None
        assert await store.get_note(loose.id, "alice") is not None
        assert await store.get_note(elsewhere.id, "alice") is not None
        assert await store.get_note(bobs.id, "bob") is not None

    async def test_delete_folder_of_other_user_is_false(self, store: MemoryEntityStore):
        folder = await store.create_folder(user_id="alice", name="Work")
        note = await store.create_note(user_id="alice", title="in", folder_id=folder.id)

        assert await store.delete_folder(folder.id, "bob") is False
        assert await store.get_note(note.id, "alice") is not None

    async def test_folder_notes(self, store: MemoryEntityStore):
        folder = await store.create_folder(user_id="alice", name="Work")
        older = await store.create_note(user_id="alice", title="older", folder_id=folder.id)
        newer = await store.create_note(user_id="alice", title="newer", folder_id=folder.id)
        await store.create_note(user_id="alice", title="loose")
        await store.update_note(newer.id, {"content": "bump"}, "alice")

        notes = await store.get_folder_notes(folder.id, "alice")

        assert [n.id for n in notes] == [newer.id, older.id]
        assert await store.get_folder_notes(folder.id, "bob") == []

    async def test_note_without_folder_absent_from_every_folder(self, store: MemoryEntityStore):
        work = await store.create_folder(user_id="alice", name="Work")
        home = await store.create_folder(user_id="alice", name="Home")
        loose = await store.create_note(user_id="alice", title="loose")

        assert loose.id in [n.id for n in await store.get_notes_by_user_id("alice")]
        for folder in (work, home):
            assert loose.id not in [n.id for n in await store.get_folder_notes(folder.id, "alice")]


class TestCounts:
    async def test_counts_per_kind(self, store: MemoryEntityStore):
        await store.create_user(username="ada")
        folder = await store.create_folder(user_id="alice", name="Work")
        await store.create_note(user_id="alice", title="n", folder_id=folder.id)

        assert store.counts() == {"users": 1, "notes": 1, "folders": 1}


@pytest.mark.parametrize("name", ["", "  "])
async def test_store_does_not_enforce_folder_names(store: MemoryEntityStore, name: str):
    folder = await store.create_folder(user_id="alice", name=name)

    assert folder.name == name
