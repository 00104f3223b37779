"""Known paste services and how to reach their raw content.

Each ``PasteSite`` pairs a URL pattern with one ``RawFile`` per file kind the
service exposes. A ``RawFile`` builds the raw-content URL from the pattern's
match and optionally carries a transform applied to the downloaded text.
Resolution never touches the network.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable

from repaste_bot.errors import UnknownPasteService
from repaste_bot.models import RawFileSpec, Transform, identity

logger = logging.getLogger(__name__)

UrlBuilder = Callable[["re.Match[str]"], str]

FIDDLE_PATTERN = re.compile(r"jsfiddle\.net")


@dataclass(frozen=True)
class RawFile:
    extension: str
    build_url: UrlBuilder
    transform: Transform = identity


@dataclass(frozen=True)
class PasteSite:
    name: str
    pattern: re.Pattern[str]
    files: tuple[RawFile, ...]

    def specs_for(self, match: re.Match[str]) -> tuple[RawFileSpec, ...]:
        return tuple(
            RawFileSpec(extension=f.extension, source_url=f.build_url(match), transform=f.transform)
            for f in self.files
        )


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n")


_JSBIN_BANNER = re.compile(r"^\s*<!--(?:(?!-->).)*?jsbin.*?-->\s*", re.IGNORECASE | re.DOTALL)


def strip_jsbin_banner(text: str) -> str:
    return _JSBIN_BANNER.sub("", text, count=1)


def _template(fmt: str) -> UrlBuilder:
    return lambda m: fmt.format(**m.groupdict())


def _jsbin(extension: str) -> UrlBuilder:
    def build(m: re.Match[str]) -> str:
        rev = f"/{m.group('rev')}" if m.group("rev") else ""
        return f"https://jsbin.com/{m.group('id')}{rev}.{extension}"

    return build


def _gist_raw(m: re.Match[str]) -> str:
    # /raw on gist.github.com redirects to the owner's raw file
    if m.group("user"):
        return f"https://gist.githubusercontent.com/{m.group('user')}/{m.group('id')}/raw"
    return f"https://gist.github.com/{m.group('id')}/raw"


def _site(name: str, pattern: str, *files: RawFile) -> PasteSite:
    return PasteSite(name=name, pattern=re.compile(pattern, re.IGNORECASE), files=files)


DEFAULT_SITES: tuple[PasteSite, ...] = (
    _site(
        "pastebin",
        r"^https?://(?:www\.)?pastebin\.com/(?:raw/|raw\.php\?i=)?(?P<id>\w+)",
        RawFile("js", _template("https://pastebin.com/raw/{id}"), normalize_newlines),
    ),
    _site(
        "gist",
        r"^https?://gist\.github\.com/(?:(?P<user>[\w-]+)/)?(?P<id>[0-9a-f]+)",
        RawFile("js", _gist_raw),
    ),
    _site(
        "hastebin",
        r"^https?://(?:www\.)?hastebin\.com/(?:raw/)?(?P<id>\w+)",
        RawFile("js", _template("https://hastebin.com/raw/{id}")),
    ),
    _site(
        "dpaste.com",
        r"^https?://(?:www\.)?dpaste\.com/(?P<id>\w+)",
        RawFile("js", _template("https://dpaste.com/{id}.txt")),
    ),
    _site(
        "dpaste.org",
        r"^https?://(?:www\.)?dpaste\.org/(?P<id>\w+)",
        RawFile("js", _template("https://dpaste.org/{id}/raw"), normalize_newlines),
    ),
    _site(
        "bpaste",
        r"^https?://bpaste\.net/(?:show|raw)/(?P<id>\w+)",
        RawFile("js", _template("https://bpaste.net/raw/{id}")),
    ),
    _site(
        "paste.ee",
        r"^https?://paste\.ee/[pr]/(?P<id>\w+)",
        RawFile("js", _template("https://paste.ee/r/{id}")),
    ),
    _site(
        "ideone",
        r"^https?://(?:www\.)?ideone\.com/(?:plain/)?(?P<id>\w+)",
        RawFile("js", _template("https://ideone.com/plain/{id}")),
    ),
    _site(
        "codepen",
        r"^https?://codepen\.io/(?P<user>[\w-]+)/(?:pen|details|full|debug)/(?P<id>\w+)",
        RawFile("js", _template("https://codepen.io/{user}/pen/{id}.js")),
        RawFile("css", _template("https://codepen.io/{user}/pen/{id}.css")),
        RawFile("html", _template("https://codepen.io/{user}/pen/{id}.html")),
    ),
    _site(
        "jsbin",
        r"^https?://(?:output\.)?jsbin\.com/(?P<id>\w+)(?:/(?P<rev>\d+))?",
        RawFile("js", _jsbin("js")),
        RawFile("css", _jsbin("css")),
        RawFile("html", _jsbin("html"), strip_jsbin_banner),
    ),
)


def is_fiddle(url: str) -> bool:
    """jsfiddle links need the dedicated fetcher instead of raw URLs."""
    return bool(FIDDLE_PATTERN.search(url))


class PasteSiteResolver:
    """Map a paste URL to the raw files behind it."""

    def __init__(self, sites: Iterable[PasteSite] = DEFAULT_SITES) -> None:
        self._sites = tuple(sites)

    @property
    def sites(self) -> tuple[PasteSite, ...]:
        return self._sites

    def resolve(self, url: str) -> tuple[RawFileSpec, ...]:
        """Return the raw file specs for ``url`` or raise UnknownPasteService."""
        for site in self._sites:
            match = site.pattern.match(url)
            if match:
                logger.debug("Resolved %s as %s", url, site.name)
                return site.specs_for(match)
        raise UnknownPasteService(url)
