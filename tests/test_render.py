"""Tests for compact rendering: values, escaping, optional and sequence slots."""

import pytest

import xmlit
from xmlit import BindingError, ErrorCode, Fragment, RenderConfig


class TestZoo:
    def test_compact(self, zoo):
        assert zoo.render(name="Tony") == (
            '<zoo name="Lorem Ipsum" openingYear="2013"><cat>Tony</cat></zoo>'
        )

    def test_module_level_api(self):
        template = xmlit.compile('<zoo name="Lorem Ipsum" openingYear={2013}><cat>{name}</></>')
        assert xmlit.render(template, {"name": "Tony"}) == (
            '<zoo name="Lorem Ipsum" openingYear="2013"><cat>Tony</cat></zoo>'
        )

    def test_template_is_reusable(self, zoo):
        first = zoo.render(name="Tony")
        assert zoo.render(name="Rex") != first
        assert zoo.render(name="Tony") == first

    def test_dict_and_keyword_values_merge(self, env):
        template = env.from_string("<a x={x}>{y}</a>")
        assert template.render({"x": 1, "y": 2}, y=3) == '<a x="1">3</a>'

    def test_self_closing_compact(self, env):
        assert env.from_string("<a><br/><br /></a>").render() == "<a><br/><br/></a>"

    def test_comments_and_raw_pass_through(self, env):
        source = '<?xml version="1.0"?><!DOCTYPE a><a><!-- note --><![CDATA[<x>]]></a>'
        assert env.from_string(source).render() == source

    def test_top_level_text(self, env):
        assert env.from_string("Hello, {name}!").render(name="World") == "Hello, World!"


class TestEscaping:
    def test_text_escaping(self, env):
        template = env.from_string("<a>{x}</a>")
        assert template.render(x='<b> & "q" \'s\'') == "<a>&lt;b&gt; &amp; \"q\" 's'</a>"

    def test_attribute_escaping(self, env):
        template = env.from_string("<a t={x}/>")
        assert template.render(x='<"&>\'') == '<a t="&lt;&quot;&amp;&gt;\'"/>'

    def test_literal_text_is_escaped(self, env):
        template = env.from_string("<a>&lt;tag&gt; &amp; more</a>")
        assert template.render() == "<a>&lt;tag&gt; &amp; more</a>"

    def test_literal_attribute_is_requoted(self, env):
        assert env.from_string("<a t='say \"hi\"'/>").render() == '<a t="say &quot;hi&quot;"/>'

    def test_literal_braces_in_text(self, env):
        assert env.from_string("<a>{{x}}</a>").render() == "<a>{x}</a>"

    def test_values_are_converted_with_str(self, env):
        template = env.from_string("<a n={n}>{f}</a>")
        assert template.render(n=3, f=1.5) == '<a n="3">1.5</a>'


class TestOptional:
    def test_absent_suppresses_attribute_and_text(self, env):
        template = env.from_string('<a href?{url} id="x">{?label}</a>')
        assert template.render(url=None, label=None) == '<a id="x"></a>'

    def test_present_renders_like_scalar(self, env):
        optional = env.from_string("<a href?{url}>{?label}</a>")
        scalar = env.from_string("<a href={url}>{label}</a>")
        values = {"url": "/x?a=1&b=2", "label": "<go>"}
        assert optional.render(values) == scalar.render(values)

    def test_optional_slots_may_be_omitted(self, env):
        assert env.from_string("<a x?{x}>{?y}</a>").render() == "<a></a>"

    def test_falsy_values_are_present(self, env):
        template = env.from_string("<a n?{n}>{?t}</a>")
        assert template.render(n=0, t="") == '<a n="0"></a>'


class TestRepeatedAttributes:
    def test_named_repeated_attribute(self, env):
        template = env.from_string("<a class{..classes}/>")
        assert template.render(classes=["x"]) == '<a class="x"/>'
        assert template.render(classes=()) == "<a/>"

    def test_named_repeated_attribute_is_written_once(self, env):
        template = env.from_string("<a class{..classes}/>")
        with pytest.raises(BindingError) as exc_info:
            template.render(classes=["x", "y"])
        assert exc_info.value.code is ErrorCode.INVALID_ITEM
        assert "'class'" in exc_info.value.message

    def test_spread_cannot_repeat_a_template_attribute(self, env):
        template = env.from_string('<a id="x" {..attrs}/>')
        with pytest.raises(BindingError) as exc_info:
            template.render(attrs={"id": "y"})
        assert exc_info.value.code is ErrorCode.INVALID_ITEM
        assert "'id'" in exc_info.value.message

    def test_spread_cannot_repeat_its_own_name(self, env):
        template = env.from_string("<a {..attrs}/>")
        with pytest.raises(BindingError) as exc_info:
            template.render(attrs=[("k", "1"), ("k", "2")])
        assert exc_info.value.code is ErrorCode.INVALID_ITEM

    def test_two_spreads_share_the_element_names(self, env):
        template = env.from_string("<a c{..c} {..d}/>")
        with pytest.raises(BindingError):
            template.render(c=["x"], d=[("c", "y")])
        assert template.render(c=["x"], d=[("d", "y")]) == '<a c="x" d="y"/>'

    def test_skipped_pair_does_not_take_the_name(self, env):
        template = env.from_string("<a {..attrs}/>")
        assert template.render(attrs=[("k", None), ("k", "2")]) == '<a k="2"/>'

    def test_names_are_tracked_per_element_and_per_render(self, env):
        template = env.from_string("<a {..x}><b {..y}/></a>")
        values = {"x": [("k", "1")], "y": [("k", "2")]}
        assert template.render(values) == template.render(values) == '<a k="1"><b k="2"/></a>'

    def test_unnamed_spread_of_pairs(self, env):
        template = env.from_string('<a id="1" {..attrs}/>')
        assert template.render(attrs=[("b", 2), ("a", "<1>")]) == '<a id="1" b="2" a="&lt;1&gt;"/>'

    def test_spread_of_mapping_skips_none(self, env):
        template = env.from_string("<a {..attrs}/>")
        attrs = {"id": "1", "title": None, "xml:lang": "en"}
        assert template.render(attrs=attrs) == '<a id="1" xml:lang="en"/>'

    def test_empty_sequences(self, env):
        template = env.from_string("<a c{..c} {..d}/>")
        assert template.render(c=[], d={}) == "<a/>"

    def test_invalid_spread_name(self, env):
        template = env.from_string("<a {..attrs}/>")
        with pytest.raises(BindingError) as exc_info:
            template.render(attrs=[("1x", "v")])
        assert exc_info.value.code is ErrorCode.INVALID_ITEM

    def test_spread_item_must_be_a_pair(self, env):
        template = env.from_string("<a {..attrs}/>")
        with pytest.raises(BindingError) as exc_info:
            template.render(attrs=["id"])
        assert exc_info.value.code is ErrorCode.INVALID_ITEM

    def test_none_item_in_named_repeated_attribute(self, env):
        template = env.from_string("<a class{..c}/>", name="a.xml")
        with pytest.raises(BindingError) as exc_info:
            template.render(c=["x", None])
        assert exc_info.value.code is ErrorCode.INVALID_ITEM
        assert exc_info.value.template_name == "a.xml"


class TestRepeatedChildren:
    def test_scalars_become_escaped_text(self, env):
        template = env.from_string("<list>{..items}</list>")
        assert template.render(items=[1, "<2>", "&"]) == "<list>1&lt;2&gt;&amp;</list>"

    def test_fragments_render_in_order(self, env):
        item = env.from_string("<item>{title}</item>")
        feed = env.from_string("<channel>{..items}</channel>")
        items = [item.bind(title="a"), item.bind(title="b & c")]
        assert feed.render(items=items) == (
            "<channel><item>a</item><item>b &amp; c</item></channel>"
        )

    def test_empty_sequence(self, env):
        assert env.from_string("<channel>{..items}</channel>").render(items=[]) == (
            "<channel></channel>"
        )

    def test_generator_is_consumed_once(self, env):
        template = env.from_string("<l>{..items}</l>")
        assert template.render(items=(c for c in "abc")) == "<l>abc</l>"

    def test_slotless_template_as_child(self, env):
        br = env.from_string("<br/>")
        assert env.from_string("<p>{..parts}</p>").render(parts=[br, "x", br]) == (
            "<p><br/>x<br/></p>"
        )

    def test_template_with_slots_must_be_bound(self, env):
        item = env.from_string("<item>{title}</item>")
        with pytest.raises(BindingError):
            env.from_string("<l>{..items}</l>").render(items=[item])

    def test_none_item(self, env):
        with pytest.raises(BindingError) as exc_info:
            env.from_string("<l>{..items}</l>").render(items=[None])
        assert exc_info.value.code is ErrorCode.INVALID_ITEM

    def test_nested_fragments(self, env):
        leaf = env.from_string("<leaf>{n}</leaf>")
        branch = env.from_string("<branch>{..leaves}</branch>")
        tree = env.from_string("<tree>{..branches}</tree>")
        branches = [branch.bind(leaves=[leaf.bind(n=i) for i in range(2)]) for _ in range(2)]
        expected = "<tree>" + "<branch><leaf>0</leaf><leaf>1</leaf></branch>" * 2 + "</tree>"
        assert tree.render(branches=branches) == expected


class TestFragment:
    def test_fragment_renders_on_its_own(self, env):
        fragment = env.from_string("<cat>{name}</cat>").bind(name="Tony")
        assert isinstance(fragment, Fragment)
        assert fragment.render() == "<cat>Tony</cat>"
        assert str(fragment) == "<cat>Tony</cat>"

    def test_bind_checks_values_immediately(self, env):
        with pytest.raises(BindingError):
            env.from_string("<cat>{name}</cat>").bind()

    def test_values_copy(self, env):
        fragment = env.from_string("<cat>{name}</cat>").bind(name="Tony")
        assert fragment.values == {"name": "Tony"}

    def test_fragment_render_with_config(self, env):
        fragment = env.from_string("<a><b/></a>").bind()
        assert fragment.render(RenderConfig.pretty()) == "<a>\n  <b />\n</a>"
