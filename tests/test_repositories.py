import json
import os
import stat
from datetime import date, timedelta

import pytest

from tort_todo.dates import CalendarDate, parse_date
from tort_todo.errors import DocumentError, IdNotFound, NoteNotFound
from tort_todo.models import COMPLETED_STATUS, Todo
from tort_todo.repositories import JsonFileRepository, TodoStore
from tort_todo.utils import lowest_free_id, split_tags


def store_with_ids(*ids):
    return TodoStore([Todo(id=i, subject=f"todo {i}") for i in ids])


class TestTags:
    def test_split_tags(self):
        projects, contexts = split_tags("Call +Work @phone about +q3 + @ plan")
        assert projects == ["Work", "q3"]
        assert contexts == ["phone"]

    def test_no_tags(self):
        assert split_tags("just words") == ([], [])


class TestIdAllocation:
    def test_empty_store_starts_at_one(self, store):
        assert store.add("first") == 1

    def test_fills_lowest_gap(self):
        assert store_with_ids(1, 3).add("gap") == 2

    def test_dense_store_appends(self):
        assert store_with_ids(1, 2, 3).add("next") == 4

    def test_ignores_zero_and_out_of_order_ids(self):
        assert store_with_ids(0, 2).add("x") == 1
        assert lowest_free_id([5, 1, 2]) == 3

    def test_deleted_ids_are_reused(self, store):
        for subject in ("a", "b", "c"):
            store.add(subject)
        store.delete(2)
        assert store.add("d") == 2
        assert [t.id for t in store] == [1, 3, 2]


class TestAdd:
    def test_add_populates_fields(self, store, today):
        todo_id = store.add("Buy milk +grocery @errand", parse_date("tom", today), "weekly")
        todo = store.find_mut(todo_id)
        assert todo.projects == ["grocery"]
        assert todo.contexts == ["errand"]
        assert todo.due.value == today + timedelta(days=1)
        assert todo.recur == "weekly"
        assert todo.status == ""
        assert todo.notes is None
        assert not (todo.completed or todo.archived or todo.is_priority)
        assert todo.completed_date is None

    def test_uuids_are_unique(self, store):
        a = store.find_mut(store.add("a"))
        b = store.find_mut(store.add("b"))
        assert a.uuid and b.uuid and a.uuid != b.uuid

    def test_defaults_without_due_or_recur(self, store):
        todo = store.find_mut(store.add("plain"))
        assert todo.due == CalendarDate.unset()
        assert todo.recur == ""


class TestMutations:
    def test_unknown_id_raises_without_mutation(self):
        s = store_with_ids(1)
        before = [t.model_copy(deep=True) for t in s]
        for op in (
            lambda: s.edit(9, "x"),
            lambda: s.delete(9),
            lambda: s.set_status(9, "x"),
            lambda: s.complete(9, True),
            lambda: s.prioritize(9, True),
            lambda: s.add_note(9, "x"),
        ):
            with pytest.raises(IdNotFound) as exc:
                op()
            assert exc.value.todo_id == 9
        assert list(s) == before

    def test_delete_removes_only_target(self):
        s = store_with_ids(1, 2, 3)
        s.delete(2)
        assert len(s) == 2
        assert [t.id for t in s] == [1, 3]
        with pytest.raises(IdNotFound):
            s.find(2)

    def test_edit_keeps_due_when_unset_and_leaves_tags(self, store, today):
        todo_id = store.add("old +proj", CalendarDate(today))
        store.edit(todo_id, "new +other", CalendarDate.unset(), None)
        todo = store.find_mut(todo_id)
        assert todo.subject == "new +other"
        assert todo.due.value == today
        assert todo.projects == ["proj"]
        assert todo.recur == ""

    def test_edit_replaces_due_and_recur_when_given(self, store, today):
        todo_id = store.add("x", CalendarDate(today), "daily")
        store.edit(todo_id, "y", CalendarDate(date(2030, 1, 1)), "monthly")
        todo = store.find_mut(todo_id)
        assert todo.due.value == date(2030, 1, 1)
        assert todo.recur == "monthly"

    def test_status_set_and_clear(self, store):
        todo_id = store.add("x")
        store.set_status(todo_id, "waiting")
        assert store.find_mut(todo_id).status == "waiting"
        store.set_status(todo_id, "")
        assert store.find_mut(todo_id).status == ""

    def test_complete_and_reopen(self, store):
        todo_id = store.add("x")
        store.set_status(todo_id, "waiting")
        store.complete(todo_id, True)
        todo = store.find_mut(todo_id)
        assert todo.completed is True
        assert todo.status == COMPLETED_STATUS
        first_stamp = todo.completed_date
        assert first_stamp is not None and first_stamp.tzinfo is not None

        store.complete(todo_id, True)
        assert todo.completed is True
        assert todo.completed_date is not None
        assert todo.completed_date >= first_stamp

        store.complete(todo_id, False)
        assert todo.completed is False
        assert todo.completed_date is None
        assert todo.status == ""

    def test_prioritize_is_idempotent(self, store):
        todo_id = store.add("x")
        store.prioritize(todo_id, True)
        store.prioritize(todo_id, True)
        assert store.find_mut(todo_id).is_priority is True
        store.prioritize(todo_id, False)
        assert store.find_mut(todo_id).is_priority is False

    def test_archive(self, store):
        todo_id = store.add("x")
        store.archive(todo_id)
        assert store.find_mut(todo_id).archived is True


class TestNotes:
    def test_add_creates_list(self, store):
        todo_id = store.add("x")
        assert store.add_note(todo_id, "first") == 0
        assert store.add_note(todo_id, "second") == 1
        assert store.find_mut(todo_id).notes == ["first", "second"]

    def test_edit_note(self, store):
        todo_id = store.add("x")
        store.add_note(todo_id, "first")
        store.edit_note(todo_id, 0, "changed")
        assert store.find_mut(todo_id).notes == ["changed"]

    def test_note_errors(self, store):
        todo_id = store.add("x")
        with pytest.raises(NoteNotFound) as exc:
            store.edit_note(todo_id, 0, "nothing here")
        assert (exc.value.todo_id, exc.value.index) == (todo_id, 0)
        store.add_note(todo_id, "only")
        with pytest.raises(NoteNotFound):
            store.delete_note(todo_id, 1)
        with pytest.raises(NoteNotFound):
            store.edit_note(todo_id, -1, "negative")
        with pytest.raises(IdNotFound):
            store.delete_note(99, 0)

    def test_deleting_last_note_reverts_to_absent(self, store):
        todo_id = store.add("x")
        store.add_note(todo_id, "a")
        store.add_note(todo_id, "b")
        store.delete_note(todo_id, 0)
        assert store.find_mut(todo_id).notes == ["b"]
        store.delete_note(todo_id, 0)
        assert store.find_mut(todo_id).notes is None


class TestScenario:
    def test_add_status_complete(self, store, today):
        todo_id = store.add("Buy milk +grocery @errand", parse_date("tom", today))
        assert todo_id == 1
        assert len(store) == 1
        store.set_status(1, "waiting")
        assert store.find_mut(1).status == "waiting"
        store.complete(1, True)
        todo = store.find_mut(1)
        assert todo.status == COMPLETED_STATUS
        assert todo.completed is True


class TestJsonFileRepository:
    def test_round_trip(self, tmp_path, today):
        path = tmp_path / "home.json"
        path.write_text("[]", encoding="utf-8")
        repo = JsonFileRepository(path)

        store = repo.load()
        todo_id = store.add("Buy milk +grocery", CalendarDate(today))
        store.add_note(todo_id, "semi-skimmed")
        store.complete(todo_id, True)
        repo.save(store)

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw[0]["due"] == "2026-10-19"
        assert raw[0]["notes"] == ["semi-skimmed"]
        assert raw[0]["completed_date"] != ""

        reloaded = repo.load()
        todo = reloaded.find_mut(todo_id)
        assert todo.due.value == today
        assert todo.projects == ["grocery"]
        assert todo.completed is True
        assert todo.completed_date is not None

    def test_empty_values_round_trip(self, tmp_path):
        path = tmp_path / "home.json"
        repo = JsonFileRepository(path)
        store = TodoStore()
        store.add("no dates")
        repo.save(store)
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw[0]["due"] == ""
        assert raw[0]["completed_date"] == ""
        assert raw[0]["notes"] is None

    def test_tolerates_missing_optional_fields_and_empty_notes(self, tmp_path):
        path = tmp_path / "old.json"
        path.write_text(json.dumps([{"id": 4, "subject": "legacy", "notes": []}]), encoding="utf-8")
        todo = JsonFileRepository(path).load().find_mut(4)
        assert todo.notes is None
        assert todo.due == CalendarDate.unset()

    def test_invalid_field_is_reported(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"id": 1, "subject": "x", "due": "soon"}]), encoding="utf-8")
        with pytest.raises(DocumentError) as exc:
            JsonFileRepository(path).load()
        assert "due" in str(exc.value)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(DocumentError):
            JsonFileRepository(path).load()

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentError):
            JsonFileRepository(tmp_path / "nope.json").load()

    def test_save_writes_through_symlink(self, tmp_path):
        target = tmp_path / "real.json"
        target.write_text("[]", encoding="utf-8")
        link = tmp_path / "link.json"
        link.symlink_to(target)
        repo = JsonFileRepository(link)
        store = repo.load()
        store.add("via link")
        repo.save(store)
        assert link.is_symlink()
        assert json.loads(target.read_text(encoding="utf-8"))[0]["subject"] == "via link"

    @pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
    def test_save_keeps_file_mode(self, tmp_path):
        path = tmp_path / "home.json"
        path.write_text("[]", encoding="utf-8")
        os.chmod(path, 0o644)
        repo = JsonFileRepository(path)
        store = repo.load()
        store.add("keep my mode")
        repo.save(store)
        assert stat.S_IMODE(path.stat().st_mode) == 0o644
