"""Pytest configuration and fixtures for attpl tests."""

import pytest

from attpl import Context, DictLoader, Environment, MemorySourceCache


@pytest.fixture
def env():
    """Create an Environment with no templates of its own."""
    return Environment(loader=DictLoader({}))


@pytest.fixture
def site_templates():
    """A small site: a layout, a page extending it, and shared partials."""
    return {
        "layout": (
            "<html><head><title>@block[title]Default@end[title]</title></head>"
            "<body>@include[nav]@block[content]@end[content]</body></html>"
        ),
        "page": (
            "@extend[layout]"
            "@block[title]{{title}}@end[title]"
            "@block[content]<h1>{{title}}</h1>@end[content]"
        ),
        "nav": "<nav>@forEach[links]<a href=\"{{url}}\">{{label}}</a>@end[links]</nav>",
        "footer": "<footer>{{year}}</footer>",
        "users": "<ul>@forEach[users]<li>{{name}}</li>@end[users]</ul>",
    }


@pytest.fixture
def env_with_loader(site_templates):
    """Create an Environment over the ``site_templates`` mapping."""
    return Environment(loader=DictLoader(site_templates))


@pytest.fixture
def make_env():
    """Factory for Environments over an ad-hoc template mapping."""

    def factory(templates: dict[str, str], **kwargs) -> Environment:
        return Environment(loader=DictLoader(templates), **kwargs)

    return factory


@pytest.fixture
def fake_clock():
    """Mutable clock for source cache expiry tests."""

    class FakeClock:
        def __init__(self) -> None:
            self.now = 1_700_000_000.0

        def __call__(self) -> float:
            return self.now

        def advance(self, hours: float) -> None:
            self.now += hours * 3600

    return FakeClock()


@pytest.fixture
def memory_cache(fake_clock):
    return MemorySourceCache(clock=fake_clock)


@pytest.fixture
def ctx():
    """An empty render Context."""
    return Context()


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
