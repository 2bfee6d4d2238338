"""Local store of registered field groups and options pages.

Plays the part of ACF's ``acf_add_local_field_group`` /
``acf_add_options_page``: registration hands the finalized config here,
and the collected groups can be exported as an ACF JSON export (the
format ACF's "Import" tool reads) or as ACF local JSON files.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class Registry:
    """Field groups keyed by group key, options pages keyed by menu slug.

    Registering the same key twice replaces the earlier config.
    """

    def __init__(self):
        self.field_groups: dict[str, dict[str, Any]] = {}
        self.options_pages: dict[str, dict[str, Any]] = {}

    def add_local_field_group(self, config: dict[str, Any]) -> None:
        key = config["key"]
        if key in self.field_groups:
            logger.warning("Field group %s registered again, replacing", key)

        self.field_groups[key] = config
        logger.info(
            "Registered field group %s (%d fields)",
            key,
            len(config.get("fields", [])),
        )

    def add_options_page(self, config: dict[str, Any]) -> None:
        slug = config["menu_slug"]
        if slug in self.options_pages:
            logger.warning("Options page %s registered again, replacing", slug)

        self.options_pages[slug] = config
        logger.info("Registered options page %s", slug)

    def is_local_field_group(self, key: str) -> bool:
        return key in self.field_groups

    def get_field_group(self, key: str) -> dict[str, Any] | None:
        return self.field_groups.get(key)

    def clear(self) -> None:
        self.field_groups.clear()
        self.options_pages.clear()

    # --- Export ---

    def export(self) -> list[dict[str, Any]]:
        """Return all field groups as an ACF export (a list of groups, sorted by key)."""
        return [self.field_groups[key] for key in sorted(self.field_groups)]

    def write_local_json(self, directory: str | Path) -> list[Path]:
        """Write one ``<group key>.json`` file per field group.

        This is the layout ACF's local JSON feature loads from a theme's
        ``acf-json`` directory.

        Returns:
            Paths of the files written.
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        for config in self.export():
            filepath = directory / f"{config['key']}.json"
            with filepath.open("w", encoding="utf-8") as f:
                json.dump(config, f, indent=4)
            written.append(filepath)

        logger.info("Wrote %d field groups to %s", len(written), directory)
        return written


default_registry = Registry()
