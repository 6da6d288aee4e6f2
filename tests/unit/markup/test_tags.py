"""Tests for markup scanning helpers."""

import pytest

from fizzterm.markup.tags import (
    CONTENT_ORIGIN,
    TagIndex,
    absolutize_url,
    decode_entities,
    find_matching_close,
    get_attribute,
    get_int_attribute,
    strip_tags,
)


class TestDecodeEntities:
    """Tests for decode_entities."""

    @pytest.mark.parametrize(
        ("escaped", "expected"),
        [
            ("&lt;", "<"),
            ("&gt;", ">"),
            ("&amp;", "&"),
            ("&quot;", '"'),
            ("&#39;", "'"),
            ("&nbsp;", " "),
        ],
    )
    def test_each_entity(self, escaped: str, expected: str) -> None:
        assert decode_entities(escaped) == expected

    def test_mixed_text(self) -> None:
        assert decode_entities("a &lt;b&gt; &amp; &quot;c&quot;") == 'a <b> & "c"'

    def test_single_pass(self) -> None:
        assert decode_entities("&amp;lt;") == "&lt;"
        assert decode_entities("&amp;quot;") == "&quot;"

    def test_unknown_entities_untouched(self) -> None:
        assert decode_entities("&copy; &#169;") == "&copy; &#169;"

    @pytest.mark.parametrize("text", ["plain", "a & b", "x < y", "", "tea; & biscuits"])
    def test_idempotent_on_entity_free_text(self, text: str) -> None:
        assert decode_entities(decode_entities(text)) == text == decode_entities(text)


class TestFindMatchingClose:
    """Tests for find_matching_close."""

    def test_simple(self) -> None:
        markup = "<b>bold</b> after"
        assert find_matching_close(markup, "b", 3) == (7, 11)

    def test_nested_same_name(self) -> None:
        markup = "<div>a<div>b</div>c</div>d"
        start, end = find_matching_close(markup, "div", 5)
        assert markup[start:end] == "</div>"
        assert markup[end:] == "d"

    def test_similar_names_do_not_nest(self) -> None:
        markup = "<b>x<br>y<blockquote>q</blockquote></b>"
        assert find_matching_close(markup, "b", 3) == (len(markup) - 4, len(markup))

    def test_case_insensitive(self) -> None:
        assert find_matching_close("<P>text</P>", "p", 3) == (7, 11)

    def test_unmatched(self) -> None:
        assert find_matching_close("<i>never closed", "i", 3) is None

    def test_unbalanced_nesting(self) -> None:
        assert find_matching_close("<b>a<b>b</b>", "b", 3) is None

    def test_self_closing_does_not_nest(self) -> None:
        assert find_matching_close("<span>a<span/>b</span>", "span", 6) == (15, 22)

    def test_many_unclosed_opens(self) -> None:
        assert find_matching_close("<b>" * 20000, "b", 3) is None


class TestTagIndex:
    """Tests for TagIndex."""

    @pytest.mark.parametrize(
        "markup",
        [
            "<b>bold</b> after",
            "<div>a<div>b</div>c</div>d",
            "<b>x<br>y<blockquote>q</blockquote></b>",
            "<P>text</P>",
            "<b>a<b>b</b>",
            "<span>a<span/>b</span>",
            "<i>a<b>b</i>c</b>",
        ],
    )
    def test_agrees_with_find_matching_close(self, markup: str) -> None:
        index = TagIndex(markup)
        first_open = markup.index(">") + 1
        name = markup[1 : markup.index(">")].lower()
        assert index.matching_close(0) == find_matching_close(markup, name, first_open)

    def test_inner_open_pairs_with_inner_close(self) -> None:
        markup = "<div>a<div>b</div>c</div>"
        assert TagIndex(markup).matching_close(markup.index("<div>", 1)) == (12, 18)

    def test_close_past_end_is_unmatched(self) -> None:
        markup = "<i>a<b>b</i>c</b>"
        index = TagIndex(markup)
        assert index.matching_close(4) == (13, 17)
        assert index.matching_close(4, end=9) is None

    def test_unmatched_and_unknown_positions(self) -> None:
        index = TagIndex("<b>" * 3 + "</i>")
        assert index.matching_close(0) is None
        assert index.matching_close(1) is None


class TestAttributes:
    """Tests for attribute helpers."""

    def test_double_quoted(self) -> None:
        assert get_attribute(' href="https://x.y/z"', "href") == "https://x.y/z"

    def test_single_quoted(self) -> None:
        assert get_attribute(" href='/a'", "href") == "/a"

    def test_missing(self) -> None:
        assert get_attribute(' class="x"', "href") is None

    def test_empty_is_missing(self) -> None:
        assert get_attribute(' alt=""', "alt") is None

    def test_name_boundary(self) -> None:
        attrs = ' data-url="/wrong" url="/right"'
        assert get_attribute(attrs, "url") == "/right"

    def test_hyphenated_name(self) -> None:
        assert get_attribute(' content-type="image/png"', "content-type") == "image/png"

    def test_value_is_decoded(self) -> None:
        assert get_attribute(' caption="Q&amp;A"', "caption") == "Q&A"

    def test_int_attribute(self) -> None:
        assert get_int_attribute(' width="640"', "width") == 640

    @pytest.mark.parametrize("attrs", [' width="auto"', ' width="12px"', ' width="-3"', ""])
    def test_int_attribute_rejects_non_digits(self, attrs: str) -> None:
        assert get_int_attribute(attrs, "width") is None


class TestUrls:
    """Tests for absolutize_url."""

    def test_relative_url(self) -> None:
        assert absolutize_url("/blobs/42") == f"{CONTENT_ORIGIN}/blobs/42"

    def test_origin_is_service_host(self) -> None:
        assert CONTENT_ORIGIN == "https://app.fizzy.do"

    def test_absolute_url_unchanged(self) -> None:
        assert absolutize_url("https://example.com/a.png") == "https://example.com/a.png"

    def test_other_relative_forms_unchanged(self) -> None:
        assert absolutize_url("blobs/42") == "blobs/42"


def test_strip_tags() -> None:
    assert strip_tags("<b>a</b><i>b<br/>c</i>") == "abc"
