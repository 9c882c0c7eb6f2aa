"""Attribute-level policy: filtering, validation and URL rewriting."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Callable, Optional
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from feedsafe.core.models import FilterConfig, ImageProxyProtocol
from feedsafe.utils import url
from feedsafe.utils.text import escape

logger = logging.getLogger(__name__)

# Embedding tags and the attribute holding their source URL.
FRAME_SOURCES = {"iframe": "src", "frame": "src", "embed": "src", "object": "data"}

_YOUTUBE_HOSTS = ("youtube.com", "youtube-nocookie.com")
_INTEGER = re.compile(r"[0-9]+")


class _TagRejected(Exception):
    """Raised by a filter step when the whole tag must be dropped."""


class AttributePolicy:
    """Filters the attributes of an allowed tag for one site.

    Each attribute goes through the filter steps in order. A step returns
    the (possibly rewritten) value, ``None`` to drop the attribute, or
    raises ``_TagRejected`` to drop the tag itself.
    """

    def __init__(self, website: str, config: FilterConfig) -> None:
        self.website = website
        self.whitelisted_attributes = config.whitelisted_tags
        self.scheme_whitelist = config.scheme_whitelist
        self.url_attributes = config.url_attributes
        self.integer_attributes = config.integer_attributes
        self.attribute_overrides = config.attribute_overrides
        self.required_attributes = config.required_attributes
        self.media_blacklist = config.media_blacklist
        self.media_attributes = config.media_attributes
        self.iframe_whitelist = config.iframe_whitelist
        self.image_proxy_url = config.image_proxy_url
        self.image_proxy_callback: Optional[Callable[[str], str]] = config.image_proxy_callback
        self.image_proxy_protocol = config.image_proxy_protocol
        self._filters = (
            self.filter_allowed_attribute,
            self.filter_integer_attribute,
            self.rewrite_absolute_url,
            self.filter_iframe_attribute,
            self.filter_blacklisted_media,
            self.filter_protocol_url_attribute,
            self.rewrite_image_proxy_url,
            self.secure_iframe_src,
            self.remove_youtube_autoplay,
        )

    def filter(self, tag: str, attributes: Mapping[str, str]) -> Optional[dict[str, str]]:
        """Return the surviving attributes of `tag`, or None if the tag is rejected."""
        filtered: dict[str, str] = {}
        try:
            for name, value in attributes.items():
                for step in self._filters:
                    value = step(tag, name, value)
                    if value is None:
                        break
                else:
                    filtered[name] = value
        except _TagRejected:
            logger.debug("Rejected <%s> for %s", tag, self.website)
            return None
        return filtered

    def has_required_attributes(self, tag: str, attributes: Mapping[str, str]) -> bool:
        return all(name in attributes for name in self.required_attributes.get(tag, ()))

    def add_overrides(self, tag: str, attributes: Mapping[str, str]) -> dict[str, str]:
        """Force the configured values for `tag`, replacing filtered ones."""
        return {**attributes, **self.attribute_overrides.get(tag, {})}

    def to_html(self, attributes: Mapping[str, str]) -> str:
        return " ".join(f'{name}="{escape(value)}"' for name, value in attributes.items())

    # --- Filter steps ---

    def is_url_attribute(self, name: str) -> bool:
        return name in self.url_attributes or name in self.media_attributes

    def filter_allowed_attribute(self, tag: str, name: str, value: str) -> Optional[str]:
        return value if name in self.whitelisted_attributes.get(tag, ()) else None

    def filter_integer_attribute(self, tag: str, name: str, value: str) -> Optional[str]:
        if name not in self.integer_attributes:
            return value
        value = value.strip()
        return str(int(value)) if _INTEGER.fullmatch(value) else None

    def rewrite_absolute_url(self, tag: str, name: str, value: str) -> Optional[str]:
        if not self.is_url_attribute(name):
            return value
        try:
            return url.resolve(self.website, value)
        except ValueError:
            return None

    def filter_iframe_attribute(self, tag: str, name: str, value: str) -> Optional[str]:
        if FRAME_SOURCES.get(tag) == name and not url.has_host(value, self.iframe_whitelist):
            raise _TagRejected
        return value

    def filter_blacklisted_media(self, tag: str, name: str, value: str) -> Optional[str]:
        if name in self.media_attributes and url.contains_any(value, self.media_blacklist):
            raise _TagRejected
        return value

    def filter_protocol_url_attribute(self, tag: str, name: str, value: str) -> Optional[str]:
        if self.is_url_attribute(name) and url.scheme(value) not in self.scheme_whitelist:
            return None
        return value

    def rewrite_image_proxy_url(self, tag: str, name: str, value: str) -> Optional[str]:
        if tag != "img" or name not in self.media_attributes:
            return value
        protocol = self.image_proxy_protocol
        if protocol != ImageProxyProtocol.ALL and url.scheme(value) != protocol.value:
            return value
        if self.image_proxy_url:
            prefix = self.image_proxy_url.split("%s", 1)[0]
            if prefix and value.startswith(prefix):
                return value
            encoded = quote(value, safe="")
            if "%s" in self.image_proxy_url:
                return self.image_proxy_url.replace("%s", encoded, 1)
            return self.image_proxy_url + encoded
        if self.image_proxy_callback is not None:
            return self.image_proxy_callback(value)
        return value

    def secure_iframe_src(self, tag: str, name: str, value: str) -> Optional[str]:
        if FRAME_SOURCES.get(tag) == name and value.lower().startswith("http://"):
            return "https://" + value[7:]
        return value

    def remove_youtube_autoplay(self, tag: str, name: str, value: str) -> Optional[str]:
        if FRAME_SOURCES.get(tag) != name:
            return value
        hostname = url.host(value)
        if not any(url.host_matches(hostname, h) for h in _YOUTUBE_HOSTS):
            return value
        parts = urlsplit(value)
        query = parse_qsl(parts.query, keep_blank_values=True)
        kept = [(k, v) for k, v in query if k != "autoplay"]
        if len(kept) == len(query):
            return value
        return urlunsplit(parts._replace(query=urlencode(kept)))
