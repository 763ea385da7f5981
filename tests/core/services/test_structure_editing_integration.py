from archytask.core.document_store import DebouncedSaver, load_document, save_document
from archytask.core.models import Heading
from archytask.core.session import OutlineSession


# These integration tests drive a real OutlineSession through several services
# and check history, structural and persistence guarantees across operations.


def _view(session):
    return [i.id for i in session.items], [i.id for i in session.archived_items]


def _assert_no_orphaned_children(items):
    for index, item in enumerate(items):
        if item.indent == 1:
            assert index > 0, "child at top of list"
            assert not isinstance(items[index - 1], Heading), f"child {item.id!r} right after a heading"


def test_undo_all_then_redo_all(make_session, structure_editing_service, edit_session_service):
    svc = structure_editing_service
    session = make_session(["## A", "p", "  c1", "q", "## B", "r"], archived=["z"])
    initial = _view(session)

    steps = [
        lambda: (svc.select(session, 3), svc.move(session, "up"))[1],
        lambda: (svc.select(session, 2), svc.archive(session))[1],
        lambda: (svc.select(session, 3), svc.move_to_prev_heading(session))[1],
        lambda: (svc.select_archived(session, 0), svc.restore(session))[1],
        lambda: (svc.select(session, 1), svc.duplicate(session))[1],
        lambda: svc.toggle_checked(session),
        lambda: edit_session_service.edit_note(session, 0, "n"),
    ]
    for step in steps:
        assert step().success is True
        _assert_no_orphaned_children(session.items)

    final = _view(session)
    assert [i.title for i in session.items] == ["A", "r", "r", "q", "B", "p", "c1"]
    assert [i.title for i in session.archived_items] == ["z"]
    assert len(session.history) == len(steps)

    while session.undo():
        pass
    assert _view(session) == initial

    while session.redo():
        pass
    assert _view(session) == final


def test_history_is_capped_at_fifty(make_session, edit_session_service):
    session = make_session(["a"])
    for n in range(55):
        edit_session_service.edit_note(session, 0, f"n{n}")
    assert len(session.history) == 50

    for _ in range(50):
        assert session.undo() is True
    assert session.items[0].note == "n4"
    assert session.history.can_undo() is False


def test_rejected_operations_leave_no_history(make_session, structure_editing_service):
    session = make_session(["## A", "p", "## Archive"], selected=[1])
    svc = structure_editing_service

    assert svc.change_indent(session, +1).success is False
    assert svc.move(session, "down").success is False
    assert svc.move_to_next_heading(session).success is False
    assert len(session.history) == 0


def test_edit_document_and_save(tmp_path, structure_editing_service, edit_session_service):
    path = tmp_path / "archytask.md"
    loaded = load_document(path)
    session = OutlineSession()
    session.load_outline(loaded.items, loaded.archived_items)
    saver = DebouncedSaver(path, delay=60)
    session.add_listener(on_changed=saver.schedule)

    structure_editing_service.select(session, 1)
    structure_editing_service.archive(session)
    edit_session_service.add_item(session)
    edit_session_service.commit(session, "written by the test")
    assert saver.flush() is True

    reloaded = load_document(path)
    assert [i.title for i in reloaded.items] == [i.title for i in session.items]
    assert [i.title for i in reloaded.archived_items] == [i.title for i in session.archived_items]
    assert "written by the test" in path.read_text(encoding="utf-8")

    save_document(path, session.items, session.archived_items)
    assert load_document(path).archived_items[0].is_checked is True
