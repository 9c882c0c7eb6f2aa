import pytest

from feedsafe.core.models import FilterConfig


@pytest.fixture
def feed_config():
    """A feed-reader policy close to config/default.yaml, small enough to reason about."""
    return FilterConfig(
        whitelisted_tags={
            "a": ["href", "title"],
            "img": ["src", "alt", "width", "height"],
            "iframe": ["src", "width", "height"],
            "p": [],
            "b": [],
            "i": [],
            "strong": [],
            "em": [],
            "br": [],
            "ul": [],
            "li": [],
            "blockquote": [],
        },
        scheme_whitelist=["http", "https", "mailto"],
        integer_attributes=["width", "height"],
        required_attributes={"a": ["href"], "img": ["src"], "iframe": ["src"]},
        attribute_overrides={"a": {"rel": "noreferrer", "target": "_blank"}},
        media_blacklist=["feeds.feedburner.com", "twitter.com/share"],
        iframe_whitelist=["youtube.com", "player.vimeo.com"],
    )


class StaticRules:
    """Rule repository returning the same rule set for every site."""

    def __init__(self, rule_set):
        self.rule_set = rule_set
        self.requested = []

    def rules_for_site(self, site_url):
        self.requested.append(site_url)
        return self.rule_set


@pytest.fixture
def static_rules():
    return StaticRules
