import pytest

from archytask.core.generators import stringify_items
from archytask.core.models import Heading, Todo
from archytask.core.parser import parse_markdown


def _titles(items):
    return [(type(i).__name__, i.title, i.indent) for i in items]


# ------------------------------------------------------------------ reading


def test_parse_headings_and_todos():
    result = parse_markdown("## Inbox\n- [ ] first\n- [x] done\n")
    assert _titles(result.items) == [("Heading", "Inbox", 0), ("Todo", "first", 0), ("Todo", "done", 0)]
    assert [i.is_checked for i in result.items[1:]] == [False, True]
    assert result.archived_items == []


def test_parse_assigns_fresh_unique_ids():
    result = parse_markdown("- [ ] a\n- [ ] a\n")
    assert result.items[0].id != result.items[1].id


@pytest.mark.parametrize(
    "line, indent",
    [
        ("- [ ] t", 0),
        ("\t- [ ] t", 1),
        ("    - [ ] t", 1),
        ("  - [ ] t", 0),
        ("\t\t- [ ] t", 1),
        ("        - [ ] t", 1),
    ],
)
def test_parse_indent_levels_are_clamped(line, indent):
    assert parse_markdown(line).items[0].indent == indent


def test_parse_ignores_unrecognized_lines():
    content = "# Title\nrandom text\n* [ ] star bullet\n- [X] upper\n- [ ] ok\n"
    assert [i.title for i in parse_markdown(content).items] == ["ok"]


def test_parse_keeps_empty_titles():
    assert parse_markdown("- [ ] \n").items[0].title == ""


def test_archive_section_collects_checked_todos():
    content = "## A\n- [ ] a\n## Archive\n- [ ] old\n\t- [x] kid\n"
    result = parse_markdown(content)

    assert _titles(result.items) == [("Heading", "A", 0), ("Todo", "a", 0)]
    assert _titles(result.archived_items) == [("Todo", "old", 0), ("Todo", "kid", 1)]
    assert all(i.is_checked for i in result.archived_items)


def test_later_heading_leaves_archive_section():
    result = parse_markdown("## Archive\n- [x] z\n## Later\n- [ ] w\n")
    assert [i.title for i in result.archived_items] == ["z"]
    assert _titles(result.items) == [("Heading", "Later", 0), ("Todo", "w", 0)]


def test_note_attaches_to_previous_item():
    content = "- [ ] a\n    ```plane\n    line one\n      indented\n    ```\n- [ ] b\n"
    a, b = parse_markdown(content).items
    assert a.note == "line one\n  indented"
    assert b.note == ""


def test_note_lines_without_prefix_are_left_stripped():
    content = "## H\n```plane\n  loose line\n```\n"
    assert parse_markdown(content).items[0].note == "loose line"


def test_note_before_any_item_is_dropped():
    result = parse_markdown("```plane\nfloating\n```\n- [ ] a\n")
    assert [i.note for i in result.items] == [""]


def test_note_lines_are_not_parsed_as_items():
    content = "- [ ] a\n    ```plane\n    - [ ] not a task\n    ## not a heading\n    ```\n"
    result = parse_markdown(content)
    assert len(result.items) == 1
    assert result.items[0].note == "- [ ] not a task\n## not a heading"


def test_crlf_line_endings():
    result = parse_markdown("## A\r\n- [x] t\r\n")
    assert _titles(result.items) == [("Heading", "A", 0), ("Todo", "t", 0)]
    assert result.items[1].title == "t"


def test_only_newline_splits_lines():
    result = parse_markdown("## H\n- [ ] a\u2028b\x85c\n")
    assert [i.title for i in result.items] == ["H", "a\u2028b\x85c"]


# ------------------------------------------------------------------ writing


def test_writer_renders_items_and_archive():
    items = [Heading(id="h", title="A"), Todo(id="p", title="p"), Todo(id="c", title="c", indent=1, is_checked=True)]
    archived = [Todo(id="z", title="z", is_checked=False)]

    assert stringify_items(items, archived) == "## A\n- [ ] p\n\t- [x] c\n## Archive\n- [x] z\n"


def test_writer_omits_empty_archive_and_blank_notes():
    items = [Todo(id="p", title="p", note="   \n  ")]
    assert stringify_items(items) == "- [ ] p\n"
    assert stringify_items([]) == ""


def test_writer_indents_note_block():
    items = [Heading(id="h", title="H", note="one\ntwo")]
    assert stringify_items(items) == "## H\n    ```plane\n    one\n    two\n    ```\n"


# --------------------------------------------------------------- round trip


@pytest.mark.parametrize(
    "document",
    [
        "## A\n- [ ] p\n\t- [x] c\n    ```plane\n    line one\n      two\n    ```\n## B\n- [x] q\n",
        "## A\n- [ ] a\n## Archive\n- [x] old\n\t- [x] kid\n",
        "## H\n- [ ] a\u2028b\n- [ ] form\x0cfeed\x1crecord\n",
    ],
)
def test_canonical_documents_round_trip(document):
    result = parse_markdown(document)
    assert stringify_items(result.items, result.archived_items) == document
