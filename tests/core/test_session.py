import logging

from archytask.core.models import Heading, Todo
from archytask.core.models.settings import SidebarSettings
from archytask.core.session import EditState, OutlineSession


class FakeConfigManager:
    def __init__(self, settings):
        self._settings = settings

    def get_settings(self):
        return self._settings


def test_load_outline_replaces_lists_and_resets_interaction_state(make_session, outline, shape):
    session = make_session(["a", "b"], archived=["[x] z"], selected=[1])
    session.archive_selection.set_single(0)
    session.edit.item_id = "a"
    session.history.save(session)

    session.load_outline(outline(["x", "  y"]), outline(["old", "## Stray"]))

    assert shape(session.items) == ["x", "  y"]
    assert shape(session.archived_items) == ["[x] old"]
    assert session.selection.is_empty and session.selection.active_index == -1
    assert session.archive_selection.is_empty
    assert session.edit == EditState()
    assert len(session.history) == 1


def test_constructor_normalizes_archive_list():
    session = OutlineSession([Todo(id="a")], [Heading(id="h"), Todo(id="b", indent=1)])
    assert [i.id for i in session.archived_items] == ["b"]
    assert session.archived_items[0].is_checked is True


def test_listeners_receive_changes_and_notices(make_session, recorder):
    session = make_session(["a"])
    rec = recorder(session)
    seen = []
    session.add_listener(on_changed=lambda items, archived: seen.append([i.id for i in items]))

    session.outline_changed()
    assert rec.changed == 1
    assert seen == [["a"]]


def test_failing_listener_is_logged_and_others_still_run(make_session, recorder, caplog):
    session = make_session(["a"])

    def boom(items, archived):
        raise RuntimeError("listener exploded")

    session.add_listener(on_changed=boom)
    rec = recorder(session)

    with caplog.at_level(logging.ERROR):
        session.outline_changed()

    assert rec.changed == 1
    assert "outline_changed listener failed" in caplog.text


def test_remove_listener(make_session):
    session = make_session(["a"])
    calls = []

    def listener(message, icon):
        calls.append(message)

    session.add_listener(on_notify=listener)
    session.remove_listener(listener)
    session.remove_listener(listener)
    session.outline_changed()
    assert calls == []


def test_undo_and_redo_emit_change_and_notice(make_session, recorder, shape):
    session = make_session(["a", "b"])
    rec = recorder(session)
    session.history.save(session)
    session.items.pop()

    assert session.undo() is True
    assert shape(session.items) == ["a", "b"]
    assert session.redo() is True
    assert shape(session.items) == ["a"]

    assert rec.changed == 2
    assert rec.notices == [("Undo", "discard"), ("Redo", "redo")]


def test_undo_without_history_is_silent(make_session, recorder):
    session = make_session(["a"])
    rec = recorder(session)
    assert session.undo() is False
    assert session.redo() is False
    assert rec.changed == 0
    assert rec.notices == []


def test_apply_settings_overrides_are_validated():
    session = OutlineSession()
    assert session.settings == SidebarSettings()

    session.apply_settings(task_move_modifier="alt", new_item_trigger="enter")
    assert session.settings.task_move_modifier == "alt"
    assert session.settings.new_item_trigger == "enter"

    session.apply_settings(task_move_modifier="meta")
    assert session.settings.task_move_modifier == "ctrl"
    assert session.settings.new_item_trigger == "enter"

    replacement = SidebarSettings(task_move_modifier="alt")
    assert session.apply_settings(replacement) is replacement


def test_from_config_uses_packaged_defaults():
    session = OutlineSession.from_config()
    assert session.settings.max_history == 50
    assert session.history.max_history == 50


def test_from_config_sizes_history_from_settings():
    session = OutlineSession.from_config(FakeConfigManager({"history": {"max_entries": 5}}))
    assert session.history.max_history == 5


def test_snapshot_copies_both_lists(make_session):
    session = make_session(["a"], archived=["z"])
    snap = session.snapshot()
    session.items[0].title = "changed"
    items, archived = snap.materialize()
    assert items[0].title == "a"
    assert archived[0].id == "z"
