import pytest

from combparse import (
    FailureKind,
    decimal_integer,
    digit,
    float_number,
    header,
    letter,
    parse,
    parse_all,
    skip_comments,
    skip_eol,
    skip_trivia,
    skip_whitespace,
    comment,
)


class TestCharacterClasses:
    @pytest.mark.parametrize("text", ["0", "5", "9"])
    def test_digit(self, text: str) -> None:
        assert parse(digit, text).value == text

    def test_digit_rejects_letter(self) -> None:
        r = parse(digit, "a")
        assert not r
        assert r.expected == ("digit",)

    @pytest.mark.parametrize("text", ["a", "Z"])
    def test_letter(self, text: str) -> None:
        assert parse(letter, text).value == text

    @pytest.mark.parametrize("text", ["1", "_", "é"])
    def test_letter_is_ascii_only(self, text: str) -> None:
        assert not parse(letter, text)


class TestDecimalInteger:
    def test_parses_prefix(self) -> None:
        r = parse(decimal_integer, "123abc")
        assert r.value == 123
        assert r.rest.remaining == "abc"

    def test_leading_zeros(self) -> None:
        assert parse(decimal_integer, "007").value == 7

    def test_long_digit_runs_do_not_overflow(self) -> None:
        digits = "9" * 60
        assert parse(decimal_integer, digits).value == int(digits)

    def test_requires_a_digit(self) -> None:
        r = parse(decimal_integer, "abc")
        assert not r
        assert not r.consumed
        assert r.message == "Expected decimal integer, found 'a'."


class TestFloatNumber:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1.5", 1.5),
            ("-2.25", -2.25),
            ("3e2", 300.0),
            ("1.5E-1", 0.15),
            (".5", 0.5),
        ],
    )
    def test_valid(self, text: str, expected: float) -> None:
        r = parse_all(float_number, text)
        assert r
        assert r.value == pytest.approx(expected)

    def test_plain_integer_is_not_a_float(self) -> None:
        r = parse(float_number, "12")
        assert not r
        assert r.consumed

    def test_fraction_consumes_before_failing(self) -> None:
        r = parse(float_number, "1/2")
        assert not r
        assert r.consumed


class TestSkipping:
    def test_skip_whitespace(self) -> None:
        r = parse(skip_whitespace(), "  \n \nx")
        assert r.rest.remaining == "x"

    def test_skip_whitespace_custom_characters(self) -> None:
        r = parse(skip_whitespace("\t"), "\t\t x")
        assert r.rest.remaining == " x"

    def test_skip_eol(self) -> None:
        assert parse(skip_eol, "\n\n\nx").rest.remaining == "x"
        assert parse(skip_eol, "x").rest.pos == 0

    def test_skip_single_comment(self) -> None:
        r = parse(skip_comments(), "; it has been 3 days since this comment was updated")
        assert r.rest.is_eof()

    def test_skip_several_comments(self) -> None:
        r = parse(skip_comments(), "; foo\n# bar\n\n; baz\nrest")
        assert r.rest.remaining == "rest"

    def test_skip_comments_custom_markers(self) -> None:
        assert parse(skip_comments("%"), "% note\nx").rest.remaining == "x"
        assert parse(skip_comments("%"), "; note\nx").rest.pos == 0

    def test_comment_before_header(self) -> None:
        r = parse_all(skip_comments() >> header, "; woot\n[blah]")
        assert r
        assert r.value.name == "blah"

    def test_skipping_never_fails(self) -> None:
        r = parse(skip_whitespace() >> skip_comments() >> skip_eol, "")
        assert r
        assert r.value is None

    def test_comment_markers_only_at_line_start(self) -> None:
        r = parse_all(skip_comments(), "x ; not a comment")
        assert not r
        assert r.kind is FailureKind.TRAILING_INPUT

    def test_single_comment_line(self) -> None:
        r = parse(comment(), "# one\n\nx")
        assert r.rest.remaining == "x"
        assert not parse(comment(), " # indented")

    @pytest.mark.parametrize(
        "text",
        [
            "; foo\n  \nx",
            "; foo\n; bar\n  \n; hah\nx",
            "  \n# a\n \n\n; b\nx",
        ],
    )
    def test_skip_trivia_in_any_order(self, text: str) -> None:
        assert parse(skip_trivia(), text).rest.remaining == "x"

    def test_skip_comments_stops_at_blank_line_with_spaces(self) -> None:
        assert parse(skip_comments(), "; foo\n  \n; bar\n").rest.remaining == "  \n; bar\n"
