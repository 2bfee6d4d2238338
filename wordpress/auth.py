"""WordPress site configuration and authentication."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path(__file__).parent.parent / "config"
_SITES_FILE = "wordpress_sites.yaml"

# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30


@dataclass
class SiteConfig:
    """Connection settings for one WordPress site."""

    name: str
    base_url: str
    username: str
    application_password: str
    timeout: int = DEFAULT_TIMEOUT

    @property
    def api_url(self) -> str:
        """Full REST API base URL (e.g. https://example.com/wp/wp-json/wp/v2)."""
        return f"{self.base_url.rstrip('/')}/wp-json/wp/v2"

    @property
    def auth_tuple(self) -> tuple[str, str]:
        """HTTP Basic Auth credentials for an application password."""
        return (self.username, self.application_password)

    @classmethod
    def from_env(cls, name: str = "default") -> SiteConfig:
        """Load site config from environment variables.

        Reads: WP_BASE_URL, WP_USERNAME, WP_APP_PASSWORD
        Optional: WP_TIMEOUT
        """
        base_url = os.environ.get("WP_BASE_URL", "")
        username = os.environ.get("WP_USERNAME", "")
        password = os.environ.get("WP_APP_PASSWORD", "")

        if not all([base_url, username, password]):
            raise ValueError(
                "Missing WordPress env vars. Set WP_BASE_URL, "
                "WP_USERNAME, and WP_APP_PASSWORD."
            )

        timeout_str = os.environ.get("WP_TIMEOUT")

        return cls(
            name=name,
            base_url=base_url,
            username=username,
            application_password=password,
            timeout=int(timeout_str) if timeout_str else DEFAULT_TIMEOUT,
        )


def load_site_config(
    site_name: str,
    config_path: str | Path | None = None,
) -> SiteConfig:
    """Load a site configuration by name from the YAML config file.

    Falls back to environment variables if the config file doesn't exist
    or doesn't list the requested site.

    Raises:
        ValueError: If the site is not found and env vars aren't set.
    """
    filepath = Path(config_path) if config_path else _CONFIG_DIR / _SITES_FILE

    if filepath.exists():
        config = _load_from_yaml(filepath, site_name)
        if config:
            return config
        logger.info(
            "Site '%s' not found in %s, trying env vars", site_name, filepath
        )

    return SiteConfig.from_env(site_name)


def _load_from_yaml(filepath: Path, site_name: str) -> SiteConfig | None:
    data = _read_sites_file(filepath)

    site_data: dict[str, Any] | None = data.get(site_name)
    if site_data is None:
        return None

    missing = {"base_url", "username", "application_password"} - set(site_data)
    if missing:
        raise ValueError(
            f"Site '{site_name}' in {filepath} is missing: {', '.join(sorted(missing))}"
        )

    return SiteConfig(
        name=site_name,
        base_url=site_data["base_url"],
        username=site_data["username"],
        application_password=site_data["application_password"],
        timeout=int(site_data.get("timeout", DEFAULT_TIMEOUT)),
    )


def list_sites(config_path: str | Path | None = None) -> list[str]:
    """List all site names from the YAML config file."""
    filepath = Path(config_path) if config_path else _CONFIG_DIR / _SITES_FILE

    if not filepath.exists():
        return []

    return sorted(_read_sites_file(filepath))


def _read_sites_file(filepath: Path) -> dict[str, Any]:
    with filepath.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not data or "sites" not in data:
        return {}
    return data["sites"] or {}
