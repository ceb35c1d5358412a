from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from roadmapsync.markup.lines import LineCursor
from roadmapsync.markup.nodes import MappingNode, NodeKind, SequenceNode
from roadmapsync.markup.parser import (
    MarkupSyntaxError,
    load_markup,
    parse_block,
    parse_list,
    parse_markup,
)

END_TO_END = dedent(
    """\
    OWNER: acme
    REPOS:
      core: acme/core
    LABELS:
      - name: bug
        color: "d73a4a"
    MILESTONES:
      - repoKey: core
        title: "Q1 Goals"
        issues:
          - title: "Add retries"
            labels: [reliability]
    """
)


def test_parse_markup_builds_nested_tree() -> None:
    tree = parse_markup(END_TO_END)

    assert isinstance(tree, MappingNode)
    assert tree.keys() == ["OWNER", "REPOS", "LABELS", "MILESTONES"]
    assert tree.to_python() == {
        "OWNER": "acme",
        "REPOS": {"core": "acme/core"},
        "LABELS": [{"name": "bug", "color": "d73a4a"}],
        "MILESTONES": [
            {
                "repoKey": "core",
                "title": "Q1 Goals",
                "issues": [{"title": "Add retries", "labels": ["reliability"]}],
            },
        ],
    }


def test_parse_markup_is_deterministic() -> None:
    assert parse_markup(END_TO_END) == parse_markup(END_TO_END)


def test_literal_block_scalar_strips_key_indent() -> None:
    text = "notes: |\n  line one\n  line two\n\n\nnext: 1\n"
    tree = parse_markup(text)
    assert tree["notes"].value == "line one\nline two"
    assert tree["next"].value == 1


def test_literal_block_keeps_trailing_whitespace_inside_lines() -> None:
    tree = parse_markup("notes: |\n  x   \n    \n  y\n")
    assert tree["notes"].value == "x   \n\ny"


def test_literal_block_trims_only_the_end_of_the_text() -> None:
    assert parse_markup("notes: |\n  last   \n").to_python() == {"notes": "last"}


def test_literal_block_keeps_blank_lines_comments_and_extra_indent() -> None:
    text = dedent(
        """\
        notes: |
          first  # not a comment here
            indented

          # also kept
        after: x  # this one is stripped
        """
    )
    tree = parse_markup(text)
    assert tree["notes"].value == "first  # not a comment here\n  indented\n\n# also kept"
    assert tree["after"].value == "x"


def test_literal_block_in_nested_mapping() -> None:
    text = "outer:\n  notes: |\n    alpha\n    beta\n  tail: end\n"
    assert parse_markup(text).to_python() == {"outer": {"notes": "alpha\nbeta", "tail": "end"}}


def test_literal_block_as_first_field_of_list_item() -> None:
    text = dedent(
        """\
        items:
          - body: |
              first line
              second line
            title: After block
        """
    )
    assert parse_markup(text).to_python() == {
        "items": [{"body": "first line\nsecond line", "title": "After block"}],
    }


def test_multi_field_list_item_merges_into_one_object() -> None:
    text = "issues:\n  - title: Fix bug\n    labels: [bug, urgent]\n"
    issues = parse_markup(text)["issues"]
    assert isinstance(issues, SequenceNode)
    assert issues.to_python() == [{"title": "Fix bug", "labels": ["bug", "urgent"]}]


def test_list_item_duplicate_keys_last_write_wins() -> None:
    text = "items:\n  - title: one\n    title: two\n"
    assert parse_markup(text).to_python() == {"items": [{"title": "two"}]}


def test_scalar_list_items() -> None:
    text = "tags:\n  - alpha\n  - 42\n  - 'quoted'\n  - null\n"
    assert parse_markup(text).to_python() == {"tags": ["alpha", 42, "quoted", None]}


def test_list_item_with_nested_list_and_mapping() -> None:
    text = dedent(
        """\
        milestones:
          - title: M1
            issues:
              - title: I1
              - title: I2
            meta:
              owner: me
          - title: M2
        """
    )
    assert parse_markup(text).to_python() == {
        "milestones": [
            {
                "title": "M1",
                "issues": [{"title": "I1"}, {"title": "I2"}],
                "meta": {"owner": "me"},
            },
            {"title": "M2"},
        ],
    }


def test_first_list_field_with_nested_list() -> None:
    text = "groups:\n  - members:\n    - a\n    - b\n    name: g\n"
    assert parse_markup(text).to_python() == {"groups": [{"members": ["a", "b"], "name": "g"}]}


def test_first_list_field_nests_one_step_below_marker() -> None:
    assert parse_markup("items:\n  - meta:\n    a: 1\n").to_python() == {"items": [{"meta": {"a": 1}}]}


def test_first_list_field_without_children_is_empty_mapping() -> None:
    text = "items:\n  - meta:\n  - title: next\n"
    assert parse_markup(text).to_python() == {"items": [{"meta": {}}, {"title": "next"}]}


def test_first_list_field_two_steps_below_marker_fails() -> None:
    with pytest.raises(MarkupSyntaxError, match="expected 4 columns, got 6"):
        parse_markup("items:\n  - meta:\n      a: 1\n")


def test_empty_key_becomes_empty_mapping() -> None:
    tree = parse_markup("empty:\nnext: 1\ntrailing:\n")
    assert tree["empty"] == MappingNode()
    assert tree["trailing"].kind is NodeKind.MAPPING
    assert tree.to_python() == {"empty": {}, "next": 1, "trailing": {}}


def test_comments_blank_lines_and_crlf_are_ignored() -> None:
    text = "# heading comment\r\nOWNER: acme   # trailing\r\n\r\n  # indented comment\r\nREPOS:\r\n  core: c\r\n"
    assert parse_markup(text).to_python() == {"OWNER": "acme", "REPOS": {"core": "c"}}


def test_tabs_count_as_one_indent_step() -> None:
    text = "REPOS:\n\tcore: c\n\tweb: w\n"
    assert parse_markup(text).to_python() == {"REPOS": {"core": "c", "web": "w"}}


def test_value_keeps_text_after_first_colon() -> None:
    tree = parse_markup('url: https://example.com\ndue: "2025-03-31T00:00:00Z"\n')
    assert tree["url"].value == "https://example.com"
    assert tree["due"].value == "2025-03-31T00:00:00Z"


def test_four_column_jump_fails_instead_of_guessing() -> None:
    with pytest.raises(MarkupSyntaxError) as excinfo:
        parse_markup("REPOS:\n    core: acme/core\n")
    assert excinfo.value.line_number == 2
    assert "core: acme/core" in str(excinfo.value)


def test_unexpected_indent_after_scalar_value_fails() -> None:
    with pytest.raises(MarkupSyntaxError, match="Unexpected indent"):
        parse_markup("OWNER: acme\n  stray: value\n")


def test_indentation_between_levels_fails() -> None:
    with pytest.raises(MarkupSyntaxError):
        parse_markup("outer:\n  a: 1\n b: 2\n")


def test_list_object_field_between_levels_fails() -> None:
    with pytest.raises(MarkupSyntaxError, match="list object"):
        parse_markup("items:\n  - title: a\n   body: b\n")


def test_list_marker_after_keys_at_same_indent_fails() -> None:
    with pytest.raises(MarkupSyntaxError, match="List item outside of a list"):
        parse_markup("OWNER: acme\n- stray\n")


def test_line_without_colon_fails() -> None:
    with pytest.raises(MarkupSyntaxError, match="Invalid line") as excinfo:
        parse_markup("OWNER: acme\njust words\n")
    assert excinfo.value.line_number == 2


def test_list_object_without_key_fails() -> None:
    with pytest.raises(MarkupSyntaxError, match="Invalid list object item"):
        parse_markup("items:\n  - : orphan\n")


def test_deeper_list_marker_inside_object_item_fails() -> None:
    with pytest.raises(MarkupSyntaxError):
        parse_markup("items:\n  - title: a\n      - nested\n")


def test_parse_block_and_list_frames_can_run_in_isolation() -> None:
    cursor = LineCursor.from_text("  - a\n  - b\nkey: v\n")
    assert parse_list(cursor, 2).to_python() == ["a", "b"]
    assert parse_block(cursor, 0).to_python() == {"key": "v"}
    assert cursor.at_end()


def test_parse_block_stops_at_list_marker_on_same_indent() -> None:
    cursor = LineCursor.from_text("a: 1\n- item\n")
    assert parse_block(cursor, 0).to_python() == {"a": 1}
    assert cursor.peek().is_list_marker


def test_load_markup_reads_file(tmp_path: Path) -> None:
    path = tmp_path / "fragment.txt"
    path.write_text(END_TO_END, encoding="utf-8")
    assert load_markup(path) == parse_markup(END_TO_END)
