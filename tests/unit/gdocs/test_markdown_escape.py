"""Unit tests for markdown escaping."""

import pytest

from gdocs.markdown_escape import (
    MARKDOWN_SPECIAL_CHARS,
    escape_link_url,
    escape_markdown,
    unescape_link_url,
    unescape_markdown,
)


class TestEscapeMarkdown:
    def test_brackets_and_hash_are_escaped(self):
        assert escape_markdown("50% off [deal] #1") == "50% off \\[deal\\] \\#1"

    def test_plain_text_is_unchanged(self):
        assert escape_markdown("Nothing special here.") == "Nothing special here."

    @pytest.mark.parametrize("char", list(MARKDOWN_SPECIAL_CHARS))
    def test_each_special_char_gets_a_backslash(self, char):
        assert escape_markdown(char) == "\\" + char

    def test_backslash_is_escaped_before_other_chars(self):
        assert escape_markdown("a\\*b") == "a\\\\\\*b"

    def test_html_characters_become_entities(self):
        assert escape_markdown("<u>x</u> & y") == "&lt;u&gt;x&lt;/u&gt; &amp; y"

    def test_ampersand_is_not_double_encoded(self):
        assert escape_markdown("<") == "&lt;"


class TestUnescapeMarkdown:
    def test_inverse_of_escape(self):
        text = "a*b_c~d`e[f]g#h|i\\j <k> & l"
        assert unescape_markdown(escape_markdown(text)) == text

    def test_text_without_escapes_is_unchanged(self):
        assert unescape_markdown("hello world") == "hello world"

    def test_entities_are_decoded(self):
        assert unescape_markdown("&lt;b&gt; &amp;") == "<b> &"

    def test_escape_is_stable_after_round_trip(self):
        text = "**not bold** [x](y) #tag"
        escaped = escape_markdown(text)
        assert escape_markdown(unescape_markdown(escaped)) == escaped

    def test_backslash_before_ordinary_char_is_kept(self):
        assert unescape_markdown("C:\\path") == "C:\\path"


class TestLinkUrlEscaping:
    def test_parentheses_are_escaped(self):
        assert escape_link_url("https://x.y/Foo_(bar)") == "https://x.y/Foo_\\(bar\\)"

    def test_plain_url_is_unchanged(self):
        assert escape_link_url("https://example.com/a?b=c") == "https://example.com/a?b=c"

    @pytest.mark.parametrize("url", ["https://x.y/Foo_(bar)", "https://x.y/a\\b", "https://x.y/)("])
    def test_unescape_is_inverse(self, url):
        assert unescape_link_url(escape_link_url(url)) == url
