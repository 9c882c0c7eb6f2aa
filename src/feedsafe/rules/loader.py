"""Per-site rule repository backed by YAML files.

A folder holds one file per host, e.g. ``config/rules/example.com.yaml``::

    filter:
      - url: '^/blog/'
        substitutions:
          - search: '<p>Sponsored</p>'
            replace: ''
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, Union

import yaml
from pydantic import ValidationError

from feedsafe.rules.models import EMPTY_RULE_SET, SiteRuleSet
from feedsafe.utils import url

logger = logging.getLogger(__name__)


class RuleRepository(Protocol):
    def rules_for_site(self, site_url: str) -> SiteRuleSet: ...


def candidate_names(hostname: str) -> list[str]:
    """Rule file names tried for `hostname`, most specific first.

    ``www.example.com`` -> ``www.example.com``, ``example.com``,
    ``.example.com`` (the last one is shared by every subdomain).
    """
    names = [hostname]
    if hostname.startswith("www."):
        names.append(hostname[4:])
    dot = hostname.find(".")
    if dot != -1:
        names.append(hostname[dot:])
    return names


class RuleLoader:
    def __init__(self, folders: Iterable[Union[str, Path]] = ()) -> None:
        self.folders = [Path(f) for f in folders]

    def rules_for_site(self, site_url: str) -> SiteRuleSet:
        """Rules of the first folder holding a file for the site's host."""
        hostname = url.host(site_url)
        if not hostname:
            return EMPTY_RULE_SET
        for folder in self.folders:
            for name in candidate_names(hostname):
                path = folder / f"{name}.yaml"
                if path.is_file():
                    return self.load_file(path)
        return EMPTY_RULE_SET

    @staticmethod
    def load_file(path: Path) -> SiteRuleSet:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return SiteRuleSet.model_validate({"rules": data.get("filter") or []})
        except (OSError, UnicodeDecodeError, yaml.YAMLError, ValidationError, AttributeError) as exc:
            logger.warning("Ignoring unreadable rule file %s: %s", path, exc)
            return EMPTY_RULE_SET
