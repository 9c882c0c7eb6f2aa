"""URL helpers: absolutization, scheme/host extraction, site path for rule matching."""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urljoin, urlsplit

# Browsers ignore tabs and newlines anywhere in a URL ("java\tscript:").
_IGNORED_CHARS = re.compile(r"[\t\n\r]")


def clean(url: str) -> str:
    """Strip surrounding whitespace and the characters browsers ignore."""
    return _IGNORED_CHARS.sub("", url).strip(" \x00\x0b\x0c")


def resolve(base: str, relative: str) -> str:
    """Resolve `relative` against `base`. Raises ValueError on unparseable URLs."""
    relative = clean(relative)
    if not base:
        return relative
    return urljoin(clean(base), relative)


def scheme(url: str) -> str:
    """Lower-case scheme of `url`, or "" when it has none or cannot be parsed."""
    try:
        return urlsplit(url).scheme.lower()
    except ValueError:
        return ""


def host(url: str) -> str:
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def base_path(url: str) -> str:
    """Path, query and fragment of `url`: the part site rules are matched against."""
    try:
        parts = urlsplit(clean(url))
    except ValueError:
        return "/"
    path = parts.path or "/"
    if parts.query:
        path += "?" + parts.query
    if parts.fragment:
        path += "#" + parts.fragment
    return path


def host_matches(hostname: str, pattern: str) -> bool:
    """True if `hostname` is `pattern` or one of its subdomains."""
    pattern = pattern.lower().lstrip(".")
    return hostname == pattern or hostname.endswith("." + pattern)


def has_host(url: str, patterns: Iterable[str]) -> bool:
    """True if the host of `url` is one of `patterns` or a subdomain of one."""
    hostname = host(url)
    return bool(hostname) and any(host_matches(hostname, p) for p in patterns)


def contains_any(url: str, patterns: Iterable[str]) -> bool:
    """Case-insensitive substring search ("twitter.com/share", "icon.png")."""
    lowered = url.lower()
    return any(p.lower() in lowered for p in patterns)
