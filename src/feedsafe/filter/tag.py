"""Tag-level policy: whitelist decisions, rendering and text-level cleanup."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

VOID_TAGS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})

# Attribute-less element whose content is empty or whitespace.
_EMPTY_TAG = re.compile(r"<([a-zA-Z][a-zA-Z0-9-]*)>\s*</\1>")
_BREAK_RUN = re.compile(r"(?:<br\s*/?>\s*){2,}", re.IGNORECASE)
_PIXEL_SIZE = re.compile(r"\s*[01](?:px)?\s*", re.IGNORECASE)


class TagPolicy:
    def __init__(self, whitelisted_tags: Iterable[str] = (), blacklisted_tags: Iterable[str] = ()) -> None:
        self.whitelisted_tags = frozenset(whitelisted_tags)
        self.blacklisted_tags = frozenset(blacklisted_tags)
        self._blacklist = [
            (
                re.compile(rf"<{re.escape(tag)}\b[^>]*>.*?</{re.escape(tag)}\s*>", re.IGNORECASE | re.DOTALL),
                re.compile(rf"<{re.escape(tag)}\b.*\Z", re.IGNORECASE | re.DOTALL),
            )
            for tag in sorted(self.blacklisted_tags)
        ]

    def is_allowed(self, tag: str, attributes: Mapping[str, str]) -> bool:
        """Whitelisted and not a tracking pixel."""
        return self.is_allowed_tag(tag) and not self.is_pixel_tracker(tag, attributes)

    def is_allowed_tag(self, tag: str) -> bool:
        return tag in self.whitelisted_tags

    def is_blacklisted_tag(self, tag: str) -> bool:
        return tag.lower() in self.blacklisted_tags

    @staticmethod
    def is_pixel_tracker(tag: str, attributes: Mapping[str, str]) -> bool:
        if tag != "img":
            return False
        width = attributes.get("width")
        height = attributes.get("height")
        if width is None or height is None:
            return False
        return bool(_PIXEL_SIZE.fullmatch(width) and _PIXEL_SIZE.fullmatch(height))

    @staticmethod
    def is_void_tag(tag: str) -> bool:
        return tag in VOID_TAGS

    def open_html_tag(self, tag: str, attributes: str = "") -> str:
        return f"<{tag} {attributes}>" if attributes else f"<{tag}>"

    def close_html_tag(self, tag: str) -> str:
        return "" if self.is_void_tag(tag) else f"</{tag}>"

    def remove_blacklisted_tags(self, data: str) -> str:
        """Remove blacklisted tags and everything inside them from raw markup.

        Runs until nothing changes, so payloads split by an inner tag
        (``<scr<script></script>ipt>``) are removed too. An unterminated
        blacklisted tag swallows the rest of the input.
        """
        previous = None
        while previous != data:
            previous = data
            for paired, _ in self._blacklist:
                data = paired.sub("", data)
        for _, dangling in self._blacklist:
            data = dangling.sub("", data)
        return data

    def remove_empty_tags(self, data: str) -> str:
        """Remove empty attribute-less elements until none are left.

        Dropping ``<b></b>`` in ``<p><b></b></p>`` empties the ``p``, hence
        the loop.
        """
        count = 1
        while count:
            data, count = _EMPTY_TAG.subn("", data)
        return data

    def remove_multiple_break_tags(self, data: str) -> str:
        return _BREAK_RUN.sub("<br>", data)
