"""Tests for commit message footer parsing."""

from __future__ import annotations

from commitgate.context.footers import (
    CHANGE_ID,
    SIGNED_OFF_BY,
    FooterLine,
    footer_values,
    parse_footer_lines,
    split_paragraphs,
)


class TestSplitParagraphs:
    def test_blank_lines_separate(self) -> None:
        assert split_paragraphs("a\nb\n\n\nc\n") == [["a", "b"], ["c"]]

    def test_whitespace_only_line_is_blank(self) -> None:
        assert split_paragraphs("a\n   \nb") == [["a"], ["b"]]

    def test_empty_message(self) -> None:
        assert split_paragraphs("") == []


class TestParseFooterLines:
    def test_last_paragraph_only(self) -> None:
        message = "Subject\n\nBody: not a footer\n\nChange-Id: I123\nBug: 42\n"
        assert parse_footer_lines(message) == [
            FooterLine(key="Change-Id", value="I123"),
            FooterLine(key="Bug", value="42"),
        ]

    def test_single_paragraph_has_no_footers(self) -> None:
        assert parse_footer_lines("Change-Id: I123\n") == []

    def test_continuation_lines_join_previous_value(self) -> None:
        message = "Subject\n\nSigned-off-by: Jane\n  <jane@example.com>\n"
        assert parse_footer_lines(message) == [
            FooterLine(key="Signed-off-by", value="Jane <jane@example.com>"),
        ]

    def test_non_footer_lines_skipped(self) -> None:
        message = "Subject\n\nsee https://example.com for details\nBug: 7\n"
        assert [f.key for f in parse_footer_lines(message)] == ["Bug"]


class TestFooterLine:
    def test_key_case_insensitive(self) -> None:
        assert FooterLine(key="change-id", value="x").matches(CHANGE_ID)
        assert not FooterLine(key="Change-Ids", value="x").matches(CHANGE_ID)

    def test_email_in_angle_brackets(self) -> None:
        footer = FooterLine(key=SIGNED_OFF_BY, value="Jane Doe <jane@example.com>")
        assert footer.email_address() == "jane@example.com"

    def test_bare_email(self) -> None:
        assert FooterLine(key=SIGNED_OFF_BY, value="jane@example.com").email_address() == (
            "jane@example.com"
        )

    def test_no_email(self) -> None:
        assert FooterLine(key=SIGNED_OFF_BY, value="Jane Doe").email_address() is None
        assert FooterLine(key=SIGNED_OFF_BY, value="Jane <jane@").email_address() is None

    def test_footer_values(self) -> None:
        footers = [
            FooterLine(key="Change-Id", value="I1"),
            FooterLine(key="Bug", value="2"),
            FooterLine(key="CHANGE-ID", value="I3"),
        ]
        assert footer_values(footers, CHANGE_ID) == ["I1", "I3"]
