"""Tests for the file-loader example."""


class TestFileLoaderApp:
    """Verify file-based template loading with inheritance and includes."""

    def test_home_has_title(self, example_app) -> None:
        assert "<title>Welcome | My Site</title>" in example_app.home_output

    def test_home_has_content(self, example_app) -> None:
        assert "<h1>Welcome</h1>" in example_app.home_output
        assert "attpl-powered site" in example_app.home_output

    def test_loop_values_escaped(self, example_app) -> None:
        assert "<li>First post</li><li>Tom &amp; Jerry</li>" in example_app.home_output

    def test_home_comments_stripped(self, example_app) -> None:
        assert "<!--" not in example_app.home_output

    def test_about_has_content(self, example_app) -> None:
        assert "<title>About Us | My Site</title>" in example_app.about_output
        assert "directive templates for Python" in example_app.about_output

    def test_missing_include_placeholder(self, example_app) -> None:
        assert "<!-- Warning: Include file not found -->" in example_app.about_output
        assert example_app.about_template.warnings == (
            "Include file 'partials/missing_sidebar' not found.",
        )

    def test_nav_included_in_both(self, example_app) -> None:
        for output in [example_app.home_output, example_app.about_output]:
            assert "<nav>" in output
            assert 'href="/"' in output
            assert 'href="/about"' in output

    def test_footer_inherited(self, example_app) -> None:
        for output in [example_app.home_output, example_app.about_output]:
            assert "Powered by attpl &middot; 2026" in output

    def test_dependencies(self, example_app) -> None:
        assert example_app.home_template.dependencies == (
            "layout",
            "partials/nav",
            "partials/footer",
        )
