"""RSS/Atom feed parser producing entries ready for the HTML filter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import feedparser

from feedsafe.core.models import FilterConfig
from feedsafe.filter.html import sanitize
from feedsafe.rules.loader import RuleRepository


@dataclass
class FeedEntry:
    title: str
    url: str
    content: str  # raw from parse_feed, sanitized from sanitize_feed


def parse_feed(data: bytes) -> list[FeedEntry]:
    """Parse a feed document already in memory.

    feedparser's own sanitizer and relative-URI resolution are disabled:
    the entry markup is handed over untouched. Entries without a link
    fall back to the feed's link as their site URL.
    """
    feed = feedparser.parse(data, sanitize_html=False, resolve_relative_uris=False)
    site = feed.feed.get("link", "")
    entries: list[FeedEntry] = []

    for entry in feed.entries:
        # Prefer full content over the summary
        content = ""
        if entry.get("content"):
            content = entry.content[0].get("value", "")
        elif "summary" in entry:
            content = entry.summary

        entries.append(FeedEntry(
            title=entry.get("title", ""),
            url=entry.get("link", "") or site,
            content=content,
        ))

    return entries


def sanitize_feed(
    data: bytes,
    config: Optional[FilterConfig] = None,
    rules: Optional[RuleRepository] = None,
) -> list[FeedEntry]:
    """Parse a feed and sanitize every entry against its own link."""
    return [
        FeedEntry(title=e.title, url=e.url, content=sanitize(e.content, e.url, config, rules))
        for e in parse_feed(data)
    ]
