"""Tests for the checklist line parser and encoder."""

from remindian.checklist_parser import encode_item, leading_indent, parse_line, parse_lines, split_lines


class TestParseLine:
    def test_simple_line(self):
        item = parse_line("- [] this is a reminder")
        assert item is not None
        assert item.checked is False
        assert item.title == "this is a reminder"
        assert item.comment is None
        assert item.has_comment is False

    def test_checked_lowercase(self):
        item = parse_line("- [x] completed task")
        assert item.checked is True
        assert item.title == "completed task"

    def test_checked_uppercase(self):
        item = parse_line("- [X] done task")
        assert item.checked is True
        assert item.title == "done task"

    def test_space_token_is_unchecked(self):
        item = parse_line("- [ ] open task")
        assert item.checked is False
        assert item.title == "open task"

    def test_indented_line(self):
        item = parse_line("\t   - [] another reminder")
        assert item.title == "another reminder"
        assert item.raw_line == "\t   - [] another reminder"

    def test_line_with_comment(self):
        item = parse_line("- [] do something  %% created on 2025-09-14 %%")
        assert item.title == "do something"
        assert item.comment == "created on 2025-09-14"
        assert item.external_id is None
        assert item.external_list is None

    def test_empty_comment(self):
        item = parse_line("- [] do something %%%%")
        assert item.title == "do something"
        assert item.comment == ""

    def test_annotation_sets_link(self):
        item = parse_line("- [ ] Call Bob  %% ABC-123 -- work %%", list_name="home")
        assert item.comment == "ABC-123 -- work"
        assert item.external_id == "ABC-123"
        assert item.external_list == "work"
        assert item.list_name == "home"

    def test_rejects_extra_spaces_after_hyphen(self):
        assert parse_line("-   [] bad spacing") is None

    def test_rejects_missing_space_after_hyphen(self):
        assert parse_line("-[] no space") is None

    def test_rejects_unclosed_comment(self):
        assert parse_line("- [] bad line %% unclosed comment") is None

    def test_rejects_missing_space_after_bracket(self):
        assert parse_line("- []no space") is None

    def test_rejects_empty_title(self):
        assert parse_line("- [ ]    ") is None
        assert parse_line("- [ ] %% ABC-1 -- work %%") is None

    def test_rejects_other_tokens(self):
        assert parse_line("- [-] cancelled") is None
        assert parse_line("- [xx] doubled") is None

    def test_rejects_plain_text(self):
        assert parse_line("# Heading") is None
        assert parse_line("") is None
        assert parse_line("* [ ] star bullet") is None

    def test_trailing_whitespace_allowed(self):
        item = parse_line("- [ ] task  %% note %%  \t")
        assert item.title == "task"
        assert item.comment == "note"

    def test_single_percent_in_title(self):
        item = parse_line("- [ ] raise coverage to 90%")
        assert item.title == "raise coverage to 90%"

    def test_title_is_trimmed(self):
        item = parse_line("- [ ]    padded title   ")
        assert item.title == "padded title"

    def test_line_number_and_list(self):
        item = parse_line("- [ ] task", list_name="work", line_number=7)
        assert item.line_number == 7
        assert item.list_name == "work"


class TestParseLines:
    def test_mixed_inline(self):
        content = "- [] good one\n-   [] bad\n   - [] spaced okay\n- [] another %% meta %%"
        items = parse_lines(content)
        assert [i.title for i in items] == ["good one", "spaced okay", "another"]
        assert items[-1].comment == "meta"
        assert [i.line_number for i in items] == [1, 3, 4]

    def test_default_list(self):
        items = parse_lines("- [] task")
        assert items[0].list_name == "remindian"

    def test_list_is_passed_through(self):
        items = parse_lines("- [] a\n- [x] b", list_name="groceries")
        assert {i.list_name for i in items} == {"groceries"}

    def test_crlf_line_numbers(self):
        items = parse_lines("intro\r\n- [ ] first\r\n\r\n- [x] second\r\n")
        assert [(i.line_number, i.title) for i in items] == [(2, "first"), (4, "second")]

    def test_fixture_mixed1(self, fixture_text):
        items = parse_lines(fixture_text("mixed1.md"))
        assert [i.title for i in items] == ["first reminder", "second reminder", "third reminder"]
        assert items[0].comment == "created 2025-09-14"
        assert [i.checked for i in items] == [False, True, False]

    def test_fixture_mixed2(self, fixture_text):
        items = parse_lines(fixture_text("mixed2.md"))
        assert [i.title for i in items] == ["indented task one", "task two", "trailing spaces", "final valid"]
        assert items[1].comment == "meta"
        assert items[2].comment == "comment with spaces"

    def test_titles_never_empty(self, fixture_text):
        for name in ("mixed1.md", "mixed2.md"):
            for item in parse_lines(fixture_text(name)):
                assert item.title.strip()


class TestEncodeItem:
    def test_canonical_lines_are_fixed_points(self):
        lines = [
            "- [ ] this is a reminder",
            "- [x] completed task",
            "\t   - [ ] another reminder",
            "  - [ ] do something  %% created on 2025-09-14 %%",
            "- [x] linked  %% ABC-1 -- work %%",
        ]
        for line in lines:
            assert encode_item(parse_line(line)) == line

    def test_normalizes_empty_brackets(self):
        assert encode_item(parse_line("- [] task")) == "- [ ] task"

    def test_normalizes_uppercase_x(self):
        assert encode_item(parse_line("- [X] task")) == "- [x] task"

    def test_normalizes_comment_spacing(self):
        item = parse_line("- [ ] trailing spaces\t%%   comment with spaces   %%   ")
        assert encode_item(item) == "- [ ] trailing spaces  %% comment with spaces %%"

    def test_keeps_indentation(self):
        item = parse_line("\t  - [] indented   %%note%%")
        assert encode_item(item) == "\t  - [ ] indented  %% note %%"

    def test_encoding_is_idempotent(self):
        item = parse_line("   - [X]   messy   %%  ABC-1 --   work  %% ")
        once = encode_item(item)
        assert encode_item(parse_line(once)) == once


class TestHelpers:
    def test_split_lines_keeps_trailing_empty_line(self):
        assert split_lines("a\nb\n") == ["a", "b", ""]

    def test_split_lines_handles_all_terminators(self):
        assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]

    def test_leading_indent(self):
        assert leading_indent("\t  - [ ] x") == "\t  "
        assert leading_indent("- [ ] x") == ""
