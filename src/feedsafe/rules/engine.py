"""Site-specific regex post-processing of sanitized output."""

from __future__ import annotations

import logging
import re

from feedsafe.core.errors import RuleCompilationError
from feedsafe.rules.loader import RuleRepository
from feedsafe.rules.models import Substitution
from feedsafe.utils import url

logger = logging.getLogger(__name__)


def compile_substitution(substitution: Substitution) -> re.Pattern:
    try:
        return re.compile(substitution.search)
    except re.error as exc:
        raise RuleCompilationError(substitution.search, str(exc)) from exc


class SiteRuleEngine:
    """Applies every rule whose URL pattern matches the site path.

    Rules are applied in declared order; a site can match several of them.
    """

    def __init__(self, repository: RuleRepository) -> None:
        self.repository = repository

    def rules_for(self, site_url: str) -> list[tuple[re.Pattern, str]]:
        rule_set = self.repository.rules_for_site(site_url)
        path = url.base_path(site_url)
        substitutions: list[tuple[re.Pattern, str]] = []
        for rule in rule_set.rules:
            try:
                if not re.search(rule.url_pattern, path):
                    continue
            except re.error as exc:
                logger.warning("Skipping site rule with invalid URL pattern %r: %s", rule.url_pattern, exc)
                continue
            for substitution in rule.substitutions:
                try:
                    substitutions.append((compile_substitution(substitution), substitution.replace))
                except RuleCompilationError as exc:
                    logger.warning("%s", exc)
        return substitutions

    def apply(self, content: str, site_url: str) -> str:
        for pattern, replace in self.rules_for(site_url):
            try:
                content = pattern.sub(replace, content)
            except re.error as exc:
                # Bad group reference in the replacement template.
                logger.warning("%s", RuleCompilationError(pattern.pattern, str(exc)))
        return content
