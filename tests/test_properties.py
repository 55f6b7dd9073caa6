"""Property-based tests for rendering.

Rendered output is read back with ``xml.etree.ElementTree`` to check that
escaping round-trips and that layout never changes document structure.
"""

import xml.etree.ElementTree as ET

from hypothesis import given, settings
from hypothesis import strategies as st

from xmlit import Environment, RenderConfig, parse
from .strategies import element_trees, serialize, trees, xml_attr_text, xml_text

env = Environment()
PRETTY = RenderConfig.pretty()

TEXT = env.from_string("<a>{x}</a>")
ATTR = env.from_string("<a v={x}/>")
OPTIONAL = env.from_string('<a x?{v} y="1">{?t}</a>')
ITEM = env.from_string("<i>{n}</i>")
LIST = env.from_string("<l>{..items}</l>")


def shape(element: ET.Element) -> tuple:
    """Tag, attributes, non-layout text and children of an element."""
    text = (element.text or "").strip()
    return (
        element.tag,
        element.attrib,
        text,
        [shape(child) for child in element],
    )


class TestEscapingRoundTrip:
    @given(xml_text)
    def test_text(self, value):
        root = ET.fromstring(TEXT.render(x=value))
        assert (root.text or "") == value

    @given(xml_attr_text)
    def test_attribute(self, value):
        root = ET.fromstring(ATTR.render(x=value))
        assert root.attrib["v"] == value

    @given(st.dictionaries(st.sampled_from(["a", "b", "c", "xml:lang"]), xml_attr_text))
    def test_spread(self, attrs):
        root = ET.fromstring(env.from_string("<e {..attrs}/>").render(attrs=attrs))
        expected = {
            ("{http://www.w3.org/XML/1998/namespace}lang" if k == "xml:lang" else k): v
            for k, v in attrs.items()
        }
        assert root.attrib == expected


class TestRendering:
    @given(xml_text, xml_text)
    def test_idempotent(self, a, b):
        template = env.from_string("<p t={a}>{b}</p>")
        assert template.render(a=a, b=b) == template.render(a=a, b=b)

    @given(st.one_of(st.none(), xml_attr_text), st.one_of(st.none(), xml_text))
    def test_optional_suppression(self, v, t):
        root = ET.fromstring(OPTIONAL.render(v=v, t=t))
        assert root.attrib.get("y") == "1"
        assert root.attrib.get("x") == v
        assert (root.text or "") == (t or "")

    @given(st.lists(st.integers()))
    def test_sequence_order(self, numbers):
        items = [ITEM.bind(n=n) for n in numbers]
        root = ET.fromstring(LIST.render(items=items))
        assert [int(child.text) for child in root] == numbers


class TestStructure:
    @given(trees)
    @settings(max_examples=60)
    def test_shorthand_close_is_equivalent(self, tree):
        explicit = serialize(tree)
        shorthand = serialize(tree, shorthand=True)
        assert parse(explicit) == parse(shorthand)
        assert env.from_string(explicit).render() == env.from_string(shorthand).render()

    @given(trees)
    @settings(max_examples=60)
    def test_compact_output_parses(self, tree):
        output = env.from_string(serialize(tree)).render()
        assert ET.fromstring(output).tag == tree[1]

    @given(element_trees)
    @settings(max_examples=60)
    def test_pretty_preserves_structure(self, tree):
        template = env.from_string(serialize(tree))
        compact = ET.fromstring(template.render())
        pretty = ET.fromstring(template.render(config=PRETTY))
        assert shape(pretty) == shape(compact)

    @given(element_trees)
    @settings(max_examples=30)
    def test_pretty_output_is_stable_under_reparse(self, tree):
        pretty = env.from_string(serialize(tree)).render(config=PRETTY)
        assert env.from_string(pretty).render(config=PRETTY) == pretty
