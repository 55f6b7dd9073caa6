"""Tests for XML escaping, entity decoding and name checks."""

import pytest

from xmlit.utils.escape import escape_attr, escape_text, is_name, unescape


class TestEscape:
    def test_text(self):
        assert escape_text("Fish & <Chips> \"'") == "Fish &amp; &lt;Chips&gt; \"'"

    def test_attr(self):
        assert escape_attr("say \"hi\" & <go> 'now'") == (
            "say &quot;hi&quot; &amp; &lt;go&gt; 'now'"
        )

    def test_plain_values_unchanged(self):
        value = "plain text"
        assert escape_text(value) is value
        assert escape_attr(value) is value

    def test_ampersand_is_escaped_once(self):
        assert escape_text("&amp;") == "&amp;amp;"


class TestUnescape:
    @pytest.mark.parametrize(
        ("raw", "text"),
        [
            ("&amp;&lt;&gt;&quot;&apos;", "&<>\"'"),
            ("&#65;&#x42;&#X43;", "AB&#X43;"),
            ("&#x1F98A;", "\U0001f98a"),
            ("&nbsp; &foo", "&nbsp; &foo"),
            ("&#1114112;", "&#1114112;"),
            ("no entities", "no entities"),
        ],
    )
    def test_unescape(self, raw, text):
        assert unescape(raw) == text


class TestNames:
    @pytest.mark.parametrize("name", ["a", "_x", "itunes:image", "x-y.z", "été", "a1"])
    def test_valid(self, name):
        assert is_name(name)

    @pytest.mark.parametrize("name", ["", "1a", "-a", "a b", "a>", ".x"])
    def test_invalid(self, name):
        assert not is_name(name)
