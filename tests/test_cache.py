"""Tests for source caches and their use by the Environment."""

from __future__ import annotations

import logging
import os

import pytest

from attpl import (
    CacheEntry,
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSourceCache,
    FileSystemLoader,
    FunctionLoader,
    InvalidArgumentError,
    MemorySourceCache,
)
from attpl.environment.cache import cache_key


class TestCacheKey:
    def test_stable_sha256(self) -> None:
        key = cache_key("/srv/tmpl/home.tpl")
        assert key == cache_key("/srv/tmpl/home.tpl")
        assert len(key) == 64

    def test_distinct_paths_distinct_keys(self) -> None:
        assert cache_key("/a/home.tpl") != cache_key("/b/home.tpl")


class TestCacheEntry:
    def test_fresh_until_max_age(self) -> None:
        entry = CacheEntry(key="k", content="c", stored_at=0.0)
        assert entry.is_fresh(now=24 * 3600, max_age_hours=24)
        assert not entry.is_fresh(now=24 * 3600 + 1, max_age_hours=24)


class TestMemorySourceCache:
    def test_miss_when_never_stored(self, memory_cache) -> None:
        assert memory_cache.get("/x") is None

    def test_put_then_get(self, memory_cache) -> None:
        memory_cache.put("/x", "text")
        assert memory_cache.get("/x") == "text"
        assert len(memory_cache) == 1

    def test_put_overwrites(self, memory_cache) -> None:
        memory_cache.put("/x", "old")
        memory_cache.put("/x", "new")
        assert memory_cache.get("/x") == "new"

    def test_expires_lazily(self, memory_cache, fake_clock) -> None:
        memory_cache.put("/x", "text")
        fake_clock.advance(hours=2)
        assert memory_cache.get("/x", max_age_hours=1) is None
        assert memory_cache.get("/x", max_age_hours=3) == "text"
        assert len(memory_cache) == 1

    def test_default_max_age_is_a_day(self, memory_cache, fake_clock) -> None:
        memory_cache.put("/x", "text")
        fake_clock.advance(hours=24)
        assert memory_cache.get("/x") == "text"
        fake_clock.advance(hours=0.01)
        assert memory_cache.get("/x") is None


class TestFileSourceCache:
    def test_roundtrip(self, tmp_path, fake_clock) -> None:
        cache = FileSourceCache(tmp_path, clock=fake_clock)
        cache.put("/srv/home.tpl", "<h1>{{t}}</h1>")
        assert cache.get("/srv/home.tpl") == "<h1>{{t}}</h1>"
        assert cache.path_for("/srv/home.tpl").name == f"{cache_key('/srv/home.tpl')}.cache"

    def test_no_temp_files_left(self, tmp_path, fake_clock) -> None:
        cache = FileSourceCache(tmp_path, clock=fake_clock)
        cache.put("/a", "1")
        cache.put("/a", "2")
        assert [p.suffix for p in tmp_path.iterdir()] == [".cache"]

    def test_expiry_uses_mtime(self, tmp_path, fake_clock) -> None:
        cache = FileSourceCache(tmp_path, clock=fake_clock)
        cache.put("/a", "1")
        fake_clock.advance(hours=25)
        assert cache.get("/a") is None
        assert cache.get("/a", max_age_hours=26) == "1"

    def test_externally_aged_file_is_stale(self, tmp_path, fake_clock) -> None:
        cache = FileSourceCache(tmp_path, clock=fake_clock)
        cache.put("/a", "1")
        old = fake_clock.now - 48 * 3600
        os.utime(cache.path_for("/a"), (old, old))
        assert cache.get("/a") is None

    def test_default_directory_is_temp(self) -> None:
        import tempfile

        assert str(FileSourceCache().directory) == tempfile.gettempdir()

    def test_unwritable_directory_degrades(self, tmp_path, caplog) -> None:
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file")
        cache = FileSourceCache(blocker / "sub")
        with caplog.at_level(logging.WARNING, logger="attpl.environment.cache"):
            cache.put("/a", "1")
            assert cache.get("/a") is None
        assert "write failed" in caplog.text

    def test_unreadable_entry_degrades(self, tmp_path, caplog) -> None:
        cache = FileSourceCache(tmp_path)
        cache.path_for("/a").mkdir()
        with caplog.at_level(logging.WARNING, logger="attpl.environment.cache"):
            assert cache.get("/a") is None
        assert "read failed" in caplog.text


class TestEnvironmentCaching:
    @pytest.fixture
    def tmpl_dir(self, tmp_path):
        folder = tmp_path / "tmpl"
        folder.mkdir()
        (folder / "home.tpl").write_text("v1 {{x}}")
        return folder

    def test_disabled_by_default(self, tmpl_dir) -> None:
        env = Environment(folder=tmpl_dir)
        assert env.caching is False
        assert env.source_cache is None

    def test_enable_creates_file_cache(self, tmpl_dir) -> None:
        env = Environment(folder=tmpl_dir)
        env.enable_caching(True)
        assert isinstance(env.source_cache, FileSourceCache)
        assert env.max_cache_age_hours == 24

    def test_cached_source_survives_file_change(self, tmpl_dir, memory_cache) -> None:
        env = Environment(folder=tmpl_dir, caching=True, source_cache=memory_cache)
        assert env.load("home").render() == "v1 "
        (tmpl_dir / "home.tpl").write_text("v2 {{x}}")
        env.clear_cache()
        assert env.load("home").render() == "v1 "

    def test_expired_entry_reloads(self, tmpl_dir, memory_cache, fake_clock) -> None:
        env = Environment(folder=tmpl_dir, source_cache=memory_cache)
        env.enable_caching(True, max_age_hours=1)
        env.load("home")
        (tmpl_dir / "home.tpl").write_text("v2")
        fake_clock.advance(hours=2)
        env.clear_cache()
        assert env.load("home").render() == "v2"

    def test_key_is_resolved_path(self, tmpl_dir, memory_cache) -> None:
        env = Environment(folder=tmpl_dir, caching=True, source_cache=memory_cache)
        env.load("home")
        resolved = FileSystemLoader(tmpl_dir).resolve("home")
        assert memory_cache.get(resolved) == "v1 {{x}}"

    def test_disabled_cache_is_bypassed(self, tmpl_dir, memory_cache) -> None:
        env = Environment(folder=tmpl_dir, source_cache=memory_cache)
        env.load("home")
        assert len(memory_cache) == 0

    def test_disable_again(self, tmpl_dir, memory_cache) -> None:
        env = Environment(folder=tmpl_dir, caching=True, source_cache=memory_cache)
        env.load("home")
        env.enable_caching(False)
        (tmpl_dir / "home.tpl").write_text("v2")
        assert env.load("home").render() == "v2"

    def test_includes_use_the_cache(self, tmpl_dir, memory_cache) -> None:
        (tmpl_dir / "page.tpl").write_text("[@include[home]]")
        env = Environment(folder=tmpl_dir, caching=True, source_cache=memory_cache)
        env.load("page")
        assert len(memory_cache) == 2

    def test_cache_hit_logged_at_debug(self, tmpl_dir, memory_cache, caplog) -> None:
        env = Environment(folder=tmpl_dir, caching=True, source_cache=memory_cache)
        with caplog.at_level(logging.DEBUG, logger="attpl"):
            env.load("home")
            env.clear_cache()
            env.load("home")
        assert "Source cache miss" in caplog.text
        assert "Source cache hit" in caplog.text

    @pytest.mark.parametrize(("allow", "hours"), [("yes", 1), (True, "1"), (True, True)])
    def test_enable_caching_validates(self, tmpl_dir, allow, hours) -> None:
        env = Environment(folder=tmpl_dir)
        with pytest.raises(InvalidArgumentError):
            env.enable_caching(allow, hours)


class TestCacheIsolation:
    """Same template name, different loaders: each environment sees its own text."""

    def test_dict_loaders_share_a_file_cache(self, tmp_path) -> None:
        shared = FileSourceCache(tmp_path)
        first = Environment(DictLoader({"page": "A"}), caching=True, source_cache=shared)
        second = Environment(DictLoader({"page": "B"}), caching=True, source_cache=shared)
        assert first.load("page").render() == "A"
        assert second.load("page").render() == "B"

    def test_dict_loaders_with_default_cache(self) -> None:
        first = Environment(DictLoader({"page": "A"}), caching=True)
        second = Environment(DictLoader({"page": "B"}), caching=True)
        assert first.load("page").render() == "A"
        assert second.load("page").render() == "B"

    def test_function_loaders_share_a_cache(self, memory_cache) -> None:
        first = Environment(
            FunctionLoader({"page": "A"}.get), caching=True, source_cache=memory_cache
        )
        second = Environment(
            FunctionLoader({"page": "B"}.get), caching=True, source_cache=memory_cache
        )
        assert first.load("page").render() == "A"
        assert second.load("page").render() == "B"
        assert len(memory_cache) == 2

    def test_same_dict_loader_hits_the_cache(self, memory_cache) -> None:
        loader = DictLoader({"page": "A"})
        env = Environment(loader, caching=True, source_cache=memory_cache)
        env.load("page")
        assert memory_cache.get(loader.resolve("page")) == "A"
        assert env.load("page").filename is None

    def test_loader_without_resolve_bypasses_cache(self, memory_cache) -> None:
        class BareLoader:
            def get_source(self, name):
                return "bare", None

        env = Environment(BareLoader(), caching=True, source_cache=memory_cache)
        assert env.load("page").render() == "bare"
        assert len(memory_cache) == 0

    def test_choice_loader_keys_by_owning_layer(self, tmp_path, memory_cache) -> None:
        (tmp_path / "home.tpl").write_text("disk")
        files = FileSystemLoader(tmp_path)
        overrides = DictLoader({"nav": "N"})
        env = Environment(
            ChoiceLoader([overrides, files]), caching=True, source_cache=memory_cache
        )
        env.load("home")
        env.load("nav")
        assert memory_cache.get(files.resolve("home")) == "disk"
        assert memory_cache.get(overrides.resolve("nav")) == "N"
