"""Site rule models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Substitution(BaseModel):
    model_config = ConfigDict(frozen=True)

    search: str
    replace: str = ""


class SiteRule(BaseModel):
    """Substitutions for the pages of a site whose path matches `url_pattern`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url_pattern: str = Field(alias="url")
    substitutions: list[Substitution] = Field(default_factory=list)


class SiteRuleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    rules: list[SiteRule] = Field(default_factory=list)


EMPTY_RULE_SET = SiteRuleSet()
