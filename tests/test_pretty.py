"""Tests for pretty output layout."""

import pytest

from xmlit import RenderConfig


class TestLayout:
    def test_zoo(self, zoo, pretty):
        assert zoo.render(name="Tony", config=pretty) == (
            '<zoo name="Lorem Ipsum" openingYear="2013">\n'
            "  <cat>Tony</cat>\n"
            "</zoo>"
        )

    def test_nested_elements(self, env, pretty):
        template = env.from_string("<a><b><c>x</c></b></a>")
        assert template.render(config=pretty) == (
            "<a>\n"
            "  <b>\n"
            "    <c>x</c>\n"
            "  </b>\n"
            "</a>"
        )

    def test_custom_indent(self, env):
        template = env.from_string("<a><b><c/></b></a>")
        assert template.render(config=RenderConfig.pretty(indent=4)) == (
            "<a>\n    <b>\n        <c />\n    </b>\n</a>"
        )

    def test_zero_indent(self, env):
        template = env.from_string("<a><b/></a>")
        assert template.render(config=RenderConfig.pretty(indent=0)) == "<a>\n<b />\n</a>"

    def test_text_only_element_stays_inline(self, env, pretty):
        assert env.from_string("<a>hi {x}</a>").render(x="there", config=pretty) == (
            "<a>hi there</a>"
        )

    def test_self_closing_root(self, env, pretty):
        assert env.from_string("<a/>").render(config=pretty) == "<a />"

    def test_empty_element(self, env, pretty):
        assert env.from_string("<a></a>").render(config=pretty) == "<a></a>"

    def test_comment_gets_its_own_line(self, env, pretty):
        assert env.from_string("<a><!--c--></a>").render(config=pretty) == (
            "<a>\n  <!--c-->\n</a>"
        )

    def test_declaration_and_root(self, env, pretty):
        template = env.from_string('<?xml version="1.0"?><a><b/></a>')
        assert template.render(config=pretty) == (
            '<?xml version="1.0"?>\n<a>\n  <b />\n</a>'
        )

    def test_mixed_content_keeps_text_inline(self, env, pretty):
        template = env.from_string("<p>Hello <b>world</b>!</p>")
        assert template.render(config=pretty) == "<p>Hello \n  <b>world</b>!\n</p>"

    def test_no_leading_or_trailing_newline(self, env, pretty):
        output = env.from_string("<a><b/><c/></a>").render(config=pretty)
        assert not output.startswith("\n")
        assert not output.endswith("\n")

    def test_environment_default_config(self, pretty_env):
        assert pretty_env.from_string("<a><b/></a>").render() == "<a>\n  <b />\n</a>"

    def test_explicit_config_overrides_default(self, pretty_env):
        template = pretty_env.from_string("<a><b/></a>")
        assert template.render(config=RenderConfig.compact()) == "<a><b/></a>"


class TestRepeatedChildren:
    @pytest.fixture
    def feed(self, env):
        return env.from_string("<rss><channel>{..items}</channel></rss>")

    @pytest.fixture
    def item(self, env):
        return env.from_string("<item><title>{t}</title></item>")

    def test_fragments_indent_at_their_depth(self, feed, item, pretty):
        items = [item.bind(t="a"), item.bind(t="b")]
        assert feed.render(items=items, config=pretty) == (
            "<rss>\n"
            "  <channel>\n"
            "    <item>\n"
            "      <title>a</title>\n"
            "    </item>\n"
            "    <item>\n"
            "      <title>b</title>\n"
            "    </item>\n"
            "  </channel>\n"
            "</rss>"
        )

    def test_empty_sequence_keeps_end_tag_inline(self, feed, pretty):
        assert feed.render(items=[], config=pretty) == (
            "<rss>\n  <channel></channel>\n</rss>"
        )

    def test_scalar_items_stay_inline(self, env, pretty):
        template = env.from_string("<list>{..items}</list>")
        assert template.render(items=["a", "b"], config=pretty) == "<list>ab</list>"

    def test_static_siblings_and_fragments(self, env, item, pretty):
        template = env.from_string("<channel><title>t</title>{..items}</channel>")
        assert template.render(items=[item.bind(t="a")], config=pretty) == (
            "<channel>\n"
            "  <title>t</title>\n"
            "  <item>\n"
            "    <title>a</title>\n"
            "  </item>\n"
            "</channel>"
        )

    def test_same_template_renders_both_layouts(self, feed, item, pretty):
        items = [item.bind(t="a")]
        compact = feed.render(items=items)
        assert compact == "<rss><channel><item><title>a</title></item></channel></rss>"
        assert "\n" in feed.render(items=items, config=pretty)
        assert feed.render(items=items) == compact
