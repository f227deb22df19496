"""Tests for the hello example."""

from attpl import Context


class TestHelloApp:
    """Verify the hello example renders correctly."""

    def test_output(self, example_app) -> None:
        assert example_app.output == "Hello, World!"

    def test_rerender_with_different_context(self, example_app) -> None:
        result = example_app.template.render(Context().set_param("name", "attpl"))
        assert result == "Hello, attpl!"

    def test_values_are_escaped(self, example_app) -> None:
        result = example_app.template.render(Context().set_param("name", "<script>"))
        assert result == "Hello, &lt;script&gt;!"
