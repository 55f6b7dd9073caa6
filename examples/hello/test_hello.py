"""Tests for the hello example."""


class TestHelloApp:
    """Verify the hello example renders correctly."""

    def test_output(self, example_app) -> None:
        assert example_app.output == "<greeting>Hello, World!</greeting>"

    def test_rerender_with_different_values(self, example_app) -> None:
        result = example_app.template.render(name="<xmlit>")
        assert result == "<greeting>Hello, &lt;xmlit&gt;!</greeting>"

    def test_zoo(self, example_app) -> None:
        assert example_app.zoo_output == (
            '<zoo name="Lorem Ipsum" openingYear="2013"><cat>Tony</cat></zoo>'
        )
        assert example_app.zoo_pretty == (
            '<zoo name="Lorem Ipsum" openingYear="2013">\n  <cat>Tony</cat>\n</zoo>'
        )
