"""Tests for the paste service registry."""

from __future__ import annotations

import re

import pytest

from repaste_bot.errors import UnknownPasteService
from repaste_bot.services.paste_sites import (
    DEFAULT_SITES,
    PasteSite,
    PasteSiteResolver,
    RawFile,
    is_fiddle,
    normalize_newlines,
    strip_jsbin_banner,
)


def _urls(specs):
    return {spec.extension: spec.source_url for spec in specs}


class TestResolve:
    def setup_method(self):
        self.resolver = PasteSiteResolver()

    def test_pastebin(self):
        specs = self.resolver.resolve("https://pastebin.com/AbC123")
        assert _urls(specs) == {"js": "https://pastebin.com/raw/AbC123"}
        assert specs[0].transform("a\r\nb") == "a\nb"

    def test_pastebin_raw_link(self):
        assert _urls(self.resolver.resolve("http://pastebin.com/raw/AbC123")) == {
            "js": "https://pastebin.com/raw/AbC123"
        }

    def test_gist(self):
        specs = self.resolver.resolve("https://gist.github.com/octocat/6cad326836d38bd3a7ae")
        assert _urls(specs) == {"js": "https://gist.githubusercontent.com/octocat/6cad326836d38bd3a7ae/raw"}

    def test_gist_without_user(self):
        specs = self.resolver.resolve("https://gist.github.com/6cad326836d38bd3a7ae")
        assert _urls(specs) == {"js": "https://gist.github.com/6cad326836d38bd3a7ae/raw"}

    def test_dpaste(self):
        assert _urls(self.resolver.resolve("https://dpaste.com/ABCD1234")) == {
            "js": "https://dpaste.com/ABCD1234.txt"
        }

    def test_codepen_has_three_files(self):
        specs = self.resolver.resolve("https://codepen.io/bob/pen/xyzAB")
        assert _urls(specs) == {
            "js": "https://codepen.io/bob/pen/xyzAB.js",
            "css": "https://codepen.io/bob/pen/xyzAB.css",
            "html": "https://codepen.io/bob/pen/xyzAB.html",
        }

    def test_codepen_full_view(self):
        specs = self.resolver.resolve("https://codepen.io/bob/full/xyzAB")
        assert _urls(specs)["js"] == "https://codepen.io/bob/pen/xyzAB.js"

    def test_jsbin_with_revision(self):
        specs = self.resolver.resolve("https://jsbin.com/wuqoye/3/edit?js,output")
        assert _urls(specs) == {
            "js": "https://jsbin.com/wuqoye/3.js",
            "css": "https://jsbin.com/wuqoye/3.css",
            "html": "https://jsbin.com/wuqoye/3.html",
        }

    def test_jsbin_without_revision(self):
        assert _urls(self.resolver.resolve("http://jsbin.com/wuqoye"))["js"] == "https://jsbin.com/wuqoye.js"

    def test_unknown_service(self):
        with pytest.raises(UnknownPasteService) as exc:
            self.resolver.resolve("http://unknown-host.example/abc")
        assert exc.value.url == "http://unknown-host.example/abc"

    def test_resolution_is_repeatable(self):
        url = "https://codepen.io/bob/pen/xyzAB"
        assert self.resolver.resolve(url) == self.resolver.resolve(url)

    def test_custom_registry(self):
        site = PasteSite(
            name="example",
            pattern=re.compile(r"^https?://paste\.example/(?P<id>\w+)"),
            files=(RawFile("js", lambda m: f"https://paste.example/raw/{m.group('id')}"),),
        )
        resolver = PasteSiteResolver([site])
        assert _urls(resolver.resolve("https://paste.example/q1")) == {"js": "https://paste.example/raw/q1"}
        with pytest.raises(UnknownPasteService):
            resolver.resolve("https://pastebin.com/AbC123")

    def test_default_sites_have_unique_names(self):
        names = [site.name for site in DEFAULT_SITES]
        assert len(names) == len(set(names))


class TestFiddleDetection:
    def test_jsfiddle(self):
        assert is_fiddle("https://jsfiddle.net/bob/abc123/")

    def test_other(self):
        assert not is_fiddle("https://pastebin.com/abc")


class TestTransforms:
    def test_normalize_newlines(self):
        assert normalize_newlines("a\r\nb\r\n") == "a\nb\n"

    def test_strip_jsbin_banner(self):
        html = "<!-- Created using jsbin.com\nSource can be edited via x -->\n<div>hi</div>"
        assert strip_jsbin_banner(html) == "<div>hi</div>"

    def test_strip_jsbin_banner_leaves_other_comments(self):
        html = "<!-- layout -->\n<div>hi</div>"
        assert strip_jsbin_banner(html) == html
