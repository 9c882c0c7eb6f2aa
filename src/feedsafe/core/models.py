"""Pydantic models for the feedsafe filter policy."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ImageProxyProtocol(str, Enum):
    ALL = "all"
    HTTP = "http"
    HTTPS = "https"


# --- Filter policy ---

def _empty_mapping() -> Mapping:
    return MappingProxyType({})


class FilterConfig(BaseModel):
    """Read-only policy snapshot consumed by the HTML filter.

    Every field defaults to its most restrictive value: with no tags
    whitelisted all markup is stripped and only escaped text survives.
    """

    model_config = ConfigDict(frozen=True)

    whitelisted_tags: Mapping[str, frozenset[str]] = Field(default_factory=_empty_mapping)
    blacklisted_tags: frozenset[str] = frozenset({"script", "style"})
    scheme_whitelist: frozenset[str] = frozenset()
    url_attributes: frozenset[str] = frozenset({"href", "src", "poster", "cite"})
    integer_attributes: frozenset[str] = frozenset()
    attribute_overrides: Mapping[str, Mapping[str, str]] = Field(default_factory=_empty_mapping)
    required_attributes: Mapping[str, frozenset[str]] = Field(default_factory=_empty_mapping)
    media_blacklist: frozenset[str] = frozenset()
    media_attributes: frozenset[str] = frozenset({"src"})
    iframe_whitelist: frozenset[str] = frozenset()
    image_proxy_url: Optional[str] = None
    image_proxy_callback: Optional[Callable[[str], str]] = None
    image_proxy_protocol: ImageProxyProtocol = ImageProxyProtocol.ALL

    @field_validator("scheme_whitelist", mode="before")
    @classmethod
    def _normalize_schemes(cls, value):
        # Accept "https", "HTTPS" and "https://" alike.
        if value is None:
            return frozenset()
        return frozenset(str(s).lower().split(":", 1)[0] for s in value)

    @field_validator("whitelisted_tags", "required_attributes", mode="before")
    @classmethod
    def _normalize_tag_map(cls, value):
        if value is None:
            return {}
        if isinstance(value, (list, tuple, set, frozenset)):
            # A bare list of tags means "these tags, no attributes".
            return {str(tag): frozenset() for tag in value}
        return {str(tag): frozenset(attrs or ()) for tag, attrs in value.items()}

    @field_validator("attribute_overrides", mode="before")
    @classmethod
    def _normalize_overrides(cls, value):
        if value is None:
            return {}
        return {str(tag): {str(k): str(v) for k, v in (attrs or {}).items()} for tag, attrs in value.items()}

    @field_validator("whitelisted_tags", "required_attributes", "attribute_overrides", mode="after")
    @classmethod
    def _freeze_mapping(cls, value):
        # frozen=True only blocks reassignment; the maps themselves must not change either.
        return MappingProxyType({
            k: MappingProxyType(dict(v)) if isinstance(v, Mapping) else v for k, v in value.items()
        })

    @model_validator(mode="after")
    def _check_image_proxy(self) -> FilterConfig:
        if self.image_proxy_url and self.image_proxy_callback is not None:
            raise ValueError("image_proxy_url and image_proxy_callback are mutually exclusive")
        return self


DEFAULT_FILTER_CONFIG = FilterConfig()


# --- App config ---

class RulesConfig(BaseModel):
    folders: list[str] = Field(default_factory=lambda: ["config/rules"])


class AppConfig(BaseModel):
    filter: FilterConfig = Field(default_factory=FilterConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
