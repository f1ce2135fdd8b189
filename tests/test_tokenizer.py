from __future__ import annotations

import pytest

from htmlplusplus.exceptions import (
    ExpectedAttributeNameError,
    ExpectedLiteralError,
    ExpectedTagNameError,
    NewlineInInlineCodeError,
    RawHtmlCommentError,
    UnclosedQuotedAttributeError,
)
from htmlplusplus.models import Mode, Tag, Token, TokenKind
from htmlplusplus.tokenizer import MarkupTokenizer


def _tokens(source: str, mode: Mode = Mode.NORMAL, backticks: bool = False) -> list[Token]:
    tokenizer = MarkupTokenizer(source, backticks_enabled=backticks)
    tokens = []
    while (token := tokenizer.pop_token(mode)) is not None:
        tokens.append(token)
    return tokens


def _kinds(tokens: list[Token]) -> list[tuple[TokenKind, object]]:
    return [(token.kind, token.value) for token in tokens]


def test_text_newline_and_pipe():
    assert _kinds(_tokens("a|b\nc")) == [
        (TokenKind.TEXT, "a"),
        (TokenKind.PIPE, None),
        (TokenKind.TEXT, "b"),
        (TokenKind.NEWLINE, None),
        (TokenKind.TEXT, "c"),
    ]


def test_open_tag_with_attributes():
    [token] = _tokens('<a href="x y" id=top  data-n = 3>')

    assert token.kind is TokenKind.OPEN_TAG
    assert token.value == Tag("a", {"href": "x y", "id": "top", "data-n": "3"})
    assert list(token.value.attributes) == ["href", "id", "data-n"]


def test_attribute_whitespace_may_span_lines():
    [token] = _tokens('<p\n\tclass="x"\r\n>')

    assert token.value == Tag("p", {"class": "x"})


def test_quoted_attribute_values_are_verbatim():
    [token] = _tokens('<p title="a <b> & c\'s">')

    assert token.value.attributes == {"title": "a <b> & c's"}


def test_self_closing_tag():
    [token] = _tokens('<img src="a.png" />')

    assert token.kind is TokenKind.SELF_CLOSE_TAG
    assert token.value == Tag("img", {"src": "a.png"})


def test_close_tag_allows_trailing_whitespace():
    assert _kinds(_tokens("</b \n>")) == [(TokenKind.CLOSE_TAG, "b")]


def test_tag_names_are_case_sensitive():
    [token] = _tokens("<Note>")

    assert token.value.name == "Note"


def test_token_offsets():
    tokens = _tokens("ab<i>c</i>")

    assert [token.offset for token in tokens] == [0, 2, 5, 6]
    assert tokens[1].value.offset == 2


@pytest.mark.parametrize("source", ["a < b", "<", "<1>", "< p>"])
def test_loose_angle_bracket_is_escaped_text(source: str):
    texts = [token.value for token in _tokens(source)]

    assert all(token.kind is TokenKind.TEXT for token in _tokens(source))
    assert "".join(texts) == source.replace("<", "&lt;")


@pytest.mark.parametrize("source", ["x <\u0130stanbul", "5 <\u212a"])
def test_non_ascii_letter_after_angle_bracket_is_text(source: str):
    tokens = _tokens(source)

    assert all(token.kind is TokenKind.TEXT for token in tokens)
    assert "".join(token.value for token in tokens) == source.replace("<", "&lt;")


def test_raw_html_comment_is_rejected():
    with pytest.raises(RawHtmlCommentError) as excinfo:
        _tokens("ok <!-- no -->")

    assert excinfo.value.offset == 3
    assert "<comment>" in str(excinfo.value)


def test_unclosed_quoted_attribute():
    with pytest.raises(UnclosedQuotedAttributeError) as excinfo:
        _tokens('<a href="x>')

    assert excinfo.value.offset == 8


def test_missing_attribute_name():
    with pytest.raises(ExpectedAttributeNameError):
        _tokens("<a =x>")


def test_missing_equals_sign():
    with pytest.raises(ExpectedLiteralError) as excinfo:
        _tokens("<a href>")

    assert excinfo.value.literal == "="
    assert excinfo.value.offset == 7


def test_self_close_requires_angle_bracket():
    with pytest.raises(ExpectedLiteralError) as excinfo:
        _tokens("<br/ >")

    assert excinfo.value.literal == ">"


def test_close_tag_requires_name():
    with pytest.raises(ExpectedTagNameError):
        _tokens("</>")


def test_unterminated_open_tag():
    with pytest.raises(ExpectedAttributeNameError):
        _tokens("<p")


def test_code_mode_captures_until_close_tag():
    tokenizer = MarkupTokenizer("if a <b> c:\n  x</code>rest")

    text = tokenizer.pop_token(Mode.CODE)
    close = tokenizer.pop_token(Mode.CODE)

    assert (text.kind, text.value) == (TokenKind.TEXT, "if a <b> c:\n  x")
    assert (close.kind, close.value) == (TokenKind.CLOSE_TAG, "code")
    assert tokenizer.pop_token(Mode.NORMAL).value == "rest"


def test_code_mode_without_close_tag_takes_the_rest():
    assert _kinds(_tokens("x | `y`", mode=Mode.CODE, backticks=True)) == [
        (TokenKind.TEXT, "x | `y`")
    ]


def test_backticks_are_text_when_disabled():
    assert _kinds(_tokens("a `b` c")) == [(TokenKind.TEXT, "a `b` c")]


def test_backticks_are_tokens_when_enabled():
    assert _kinds(_tokens("a`b", backticks=True)) == [
        (TokenKind.TEXT, "a"),
        (TokenKind.BACKTICK, None),
        (TokenKind.TEXT, "b"),
    ]


def test_inline_code_keeps_pipes_and_angle_brackets():
    assert _kinds(_tokens("a|<b>", mode=Mode.INLINE_CODE, backticks=True)) == [
        (TokenKind.TEXT, "a|<b>")
    ]


def test_doubled_backtick_is_a_literal_backtick():
    tokenizer = MarkupTokenizer("x``y`z", backticks_enabled=True)

    assert tokenizer.pop_token(Mode.INLINE_CODE).value == "x`y"
    assert tokenizer.pop_token(Mode.INLINE_CODE).kind is TokenKind.BACKTICK


def test_newline_in_inline_code_is_rejected():
    with pytest.raises(NewlineInInlineCodeError) as excinfo:
        _tokens("ab\ncd", mode=Mode.INLINE_CODE, backticks=True)

    assert excinfo.value.offset == 2


def test_empty_input_has_no_tokens():
    assert _tokens("") == []
