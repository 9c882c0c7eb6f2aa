"""Configuration loader: YAML files + environment variables."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from feedsafe.core.models import AppConfig, FilterConfig, ImageProxyProtocol, RulesConfig


def _find_project_root() -> Path:
    """Walk up from cwd to find a directory containing pyproject.toml."""
    cwd = Path.cwd()
    for p in [cwd, *cwd.parents]:
        if (p / "pyproject.toml").exists():
            return p
    return cwd


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML + environment variables.

    Priority: env vars > .env file > YAML defaults. Settings missing from
    both fall back to the restrictive FilterConfig defaults.
    """
    root = _find_project_root()
    load_dotenv(root / ".env")

    # Load YAML
    yaml_path = Path(config_path) if config_path else root / "config" / "default.yaml"
    yaml_data: dict = {}
    if yaml_path.exists():
        with open(yaml_path) as f:
            yaml_data = yaml.safe_load(f) or {}

    # Build filter config with env overrides
    filter_data = dict(yaml_data.get("filter") or {})
    proxy_url = os.getenv("FEEDSAFE_IMAGE_PROXY_URL", filter_data.get("image_proxy_url"))
    if proxy_url:
        filter_data["image_proxy_url"] = proxy_url
    proxy_protocol = os.getenv("FEEDSAFE_IMAGE_PROXY_PROTOCOL", filter_data.get("image_proxy_protocol", "all"))
    filter_data["image_proxy_protocol"] = ImageProxyProtocol(proxy_protocol)
    filter_cfg = FilterConfig(**filter_data)

    # Rule folders, relative entries resolved against the project root
    rules_data = yaml_data.get("rules") or {}
    folders = rules_data.get("folders", ["config/rules"])
    env_folder = os.getenv("FEEDSAFE_RULES_FOLDER")
    if env_folder:
        folders = [env_folder, *folders]
    rules = RulesConfig(folders=[str(root / f) if not Path(f).is_absolute() else f for f in folders])

    return AppConfig(filter=filter_cfg, rules=rules)
