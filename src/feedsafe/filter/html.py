"""HTML filter: turns untrusted feed markup into the whitelisted subset.

Pipeline, in order:

1. pre-filter: blacklisted tags and their content are cut from the raw text
2. structural parse: html5lib events are replayed through the tag and
   attribute policies into the output buffer
3. post-filter: empty elements, site rules, repeated line breaks, trim
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from feedsafe.core.errors import MalformedInputError
from feedsafe.core.models import DEFAULT_FILTER_CONFIG, FilterConfig
from feedsafe.filter.attribute import AttributePolicy
from feedsafe.filter.parser import parse_events
from feedsafe.filter.tag import TagPolicy
from feedsafe.rules.engine import SiteRuleEngine
from feedsafe.rules.loader import RuleLoader, RuleRepository
from feedsafe.utils.text import escape, normalize_spaces

logger = logging.getLogger(__name__)

# Parsed as raw text: entities inside are never decoded, and browsers do
# not render the content. The element may be kept, its text never is.
RAW_TEXT_TAGS = frozenset({"iframe", "noembed", "noframes", "xmp"})


@dataclass
class ElementFrame:
    tag: str
    emitted: bool = False
    suppress_content: bool = False


class HtmlFilter:
    """One sanitization pass over `html` for the site at `website`.

    Implements the parser's EventHandler; the output buffer and the frame
    stack live on the instance and die with it.
    """

    def __init__(self, html: str, website: str, config: FilterConfig, rules: RuleRepository) -> None:
        self.input = html
        self.website = website
        self.config = config
        self.tag = TagPolicy(config.whitelisted_tags, config.blacklisted_tags)
        self.attribute = AttributePolicy(website, config)
        self.rules = SiteRuleEngine(rules)
        self.output: list[str] = []
        self.frames: list[ElementFrame] = []

    def execute(self) -> str:
        markup = self.pre_filter(self.input)
        try:
            parse_events(markup, self)
        except MalformedInputError as exc:
            logger.warning("Keeping partial output for %s: %s", self.website, exc)
            self.close_open_elements()
        except Exception:
            logger.exception("Filtering aborted for %s, keeping partial output", self.website)
            self.close_open_elements()
        return self.post_filter("".join(self.output))

    def pre_filter(self, html: str) -> str:
        return self.tag.remove_blacklisted_tags(html)

    def post_filter(self, output: str) -> str:
        output = self.tag.remove_empty_tags(output)
        try:
            output = self.rules.apply(output, self.website)
        except Exception:
            logger.exception("Site rules failed for %s, output left unchanged", self.website)
        output = self.tag.remove_multiple_break_tags(output)
        return output.strip()

    def close_open_elements(self) -> None:
        while self.frames:
            frame = self.frames.pop()
            if frame.emitted:
                self.output.append(self.tag.close_html_tag(frame.tag))

    # --- Parser events ---

    def on_open_tag(self, tag: str, attributes: dict[str, str]) -> None:
        blocked = self.tag.is_blacklisted_tag(tag) or self._in_suppressed()
        frame = ElementFrame(tag, suppress_content=blocked or tag in RAW_TEXT_TAGS)
        self.frames.append(frame)
        if blocked or not self.tag.is_allowed(tag, attributes):
            return

        filtered = self.attribute.filter(tag, attributes)
        if filtered is not None and self.attribute.has_required_attributes(tag, filtered):
            filtered = self.attribute.add_overrides(tag, filtered)
            self.output.append(self.tag.open_html_tag(tag, self.attribute.to_html(filtered)))
            frame.emitted = True

    def on_close_tag(self, tag: str) -> None:
        if not self.frames:
            return
        frame = self.frames.pop()
        if frame.emitted and not self.tag.is_void_tag(frame.tag):
            self.output.append(self.tag.close_html_tag(frame.tag))

    def on_text(self, content: str) -> None:
        if self._in_suppressed():
            return
        self.output.append(escape(normalize_spaces(content)))

    def _in_suppressed(self) -> bool:
        return bool(self.frames) and self.frames[-1].suppress_content


def sanitize(
    html: str,
    website: str,
    config: Optional[FilterConfig] = None,
    rules: Optional[RuleRepository] = None,
) -> str:
    """Sanitize feed markup from `website`; never raises.

    Without a config the restrictive DEFAULT_FILTER_CONFIG applies (all tags
    stripped); without a rule repository no site rules apply.
    """
    if config is None:
        config = DEFAULT_FILTER_CONFIG
    if rules is None:
        rules = RuleLoader()
    return HtmlFilter(html, website, config, rules).execute()
