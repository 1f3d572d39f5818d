"""Tests for the registry, code generation and redirect resolution."""

import re
from concurrent.futures import ThreadPoolExecutor

import pytest

from shortlinks import errors
from shortlinks.codes import CodeGenerator
from shortlinks.registry import Registry, check_code, normalize_url


class TestNormalizeUrl:

    @pytest.mark.parametrize("raw, expected", [
        ("example.com", "https://example.com"),
        ("http://example.com", "http://example.com"),
        ("https://example.com/a?b=c", "https://example.com/a?b=c"),
        ("HTTPS://Example.com", "HTTPS://Example.com"),
        ("  example.com/path ", "https://example.com/path"),
    ])
    def test_scheme_prefix(self, raw, expected):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_rejected(self, raw):
        with pytest.raises(errors.ValidationError):
            normalize_url(raw)


class TestCheckCode:

    @pytest.mark.parametrize("code", ["a", "abc123", "my-link_2", "x" * 64])
    def test_accepted(self, code):
        assert check_code(code) == code

    @pytest.mark.parametrize("code", ["a/b", "with space", "caf\u00e9", "x" * 65, "..", "a?b"])
    def test_rejected(self, code):
        with pytest.raises(errors.ValidationError):
            check_code(code)


class TestCodeGenerator:

    def test_default_is_six_hex_chars(self):
        assert re.fullmatch(r"[0-9a-f]{6}", CodeGenerator().generate())

    def test_byte_count(self):
        assert len(CodeGenerator(nbytes=5).generate()) == 10

    def test_rejects_zero_bytes(self):
        with pytest.raises(ValueError):
            CodeGenerator(nbytes=0)


class TestRegistry:

    def test_create_with_code(self, registry, store):
        link = registry.create("example.com", "ex")

        fetched = store.get_by_code("ex")
        assert fetched.id == link.id
        assert fetched.url == "https://example.com"
        assert fetched.hits == 0

    def test_create_generates_code(self, registry):
        link = registry.create("https://example.com")

        assert re.fullmatch(r"[0-9a-f]{6}", link.code)

    def test_empty_code_means_generate(self, registry):
        link = registry.create("https://example.com", "")

        assert link.code != ""

    def test_missing_url(self, registry, store):
        with pytest.raises(errors.ValidationError):
            registry.create(None, "abc")

        assert store.get_by_code("abc") is None

    def test_unroutable_code_rejected(self, registry, store):
        with pytest.raises(errors.ValidationError):
            registry.create("example.com", "a/b")

        assert store.list_all() == []

    def test_duplicate_custom_code_leaves_existing(self, registry, store):
        registry.create("https://first.example", "taken")

        with pytest.raises(errors.DuplicateCodeError):
            registry.create("https://second.example", "taken")

        assert store.get_by_code("taken").url == "https://first.example"

    def test_generated_collision_retried(self, store, fixed_codes):
        store.insert("aaaaaa", "https://existing.example")
        registry = Registry(store, fixed_codes("aaaaaa", "bbbbbb"), code_attempts=3)

        link = registry.create("https://new.example")

        assert link.code == "bbbbbb"

    def test_generated_collision_retries_are_bounded(self, store, fixed_codes):
        store.insert("aaaaaa", "https://existing.example")
        generator = fixed_codes("aaaaaa", "aaaaaa", "aaaaaa", "never")
        registry = Registry(store, generator, code_attempts=3)

        with pytest.raises(errors.DuplicateCodeError):
            registry.create("https://new.example")

        assert generator.codes == ["never"]

    def test_custom_code_never_retried(self, store, fixed_codes):
        store.insert("mine", "https://existing.example")
        generator = fixed_codes("unused")
        registry = Registry(store, generator)

        with pytest.raises(errors.DuplicateCodeError):
            registry.create("https://new.example", "mine")

        assert generator.codes == ["unused"]

    def test_list_newest_first(self, registry):
        registry.create("one.example", "one")
        registry.create("two.example", "two")

        assert [link.code for link in registry.list()] == ["two", "one"]

    def test_delete_is_idempotent(self, registry, store):
        registry.create("example.com", "gone")

        registry.delete("gone")
        registry.delete("gone")

        assert store.get_by_code("gone") is None


class TestResolver:

    def test_resolve_returns_url_and_counts(self, registry, resolver, store):
        registry.create("example.com", "go")

        assert resolver.resolve("go") == "https://example.com"
        assert store.get_by_code("go").hits == 1

    def test_resolve_unknown(self, resolver, store):
        with pytest.raises(errors.NotFound):
            resolver.resolve("nope")

        assert store.list_all() == []

    def test_sequential_resolutions(self, registry, resolver, store):
        registry.create("example.com", "seq")

        for _ in range(5):
            resolver.resolve("seq")

        assert store.get_by_code("seq").hits == 5

    def test_concurrent_resolutions(self, registry, resolver, store):
        registry.create("example.com", "busy")

        with ThreadPoolExecutor(max_workers=10) as pool:
            urls = list(pool.map(lambda _: resolver.resolve("busy"), range(50)))

        assert set(urls) == {"https://example.com"}
        assert store.get_by_code("busy").hits == 50
