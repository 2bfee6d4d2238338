"""ACF options pages.

See https://www.advancedcustomfields.com/resources/acf_add_options_page/
for every config option and its default.

``page_title`` comes from the title passed to the constructor; ``post_id``
and ``menu_slug`` come from the page id, which is the title lowercased with
spaces replaced by dashes. ACF stores an options page's values in the
options table as ``<id>_<field name>``, so the page doubles as a binding
for field groups.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from acf.bindings import BindingKind, MetaDataBinding
from acf.registry import default_registry

if TYPE_CHECKING:
    from acf.registry import Registry
    from wordpress.meta import MetaStore

logger = logging.getLogger(__name__)


def slugify_title(title: str) -> str:
    """Derive an options page id from its title ("My Site Settings" -> "my-site-settings")."""
    return title.lower().replace(" ", "-")


class OptionsPage(MetaDataBinding):
    kind = BindingKind.OPTIONS_PAGE

    def __init__(
        self,
        title: str,
        config: dict[str, Any] | None = None,
        store: MetaStore | None = None,
    ):
        super().__init__(store)
        self._config: dict[str, Any] = {}
        self.title = title
        self.set_id(slugify_title(title))
        self.set_config(config or {})

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, title: str) -> None:
        """Set the title and ``page_title``. The page id stays as it is."""
        self._title = title
        self.set_config({"page_title": title})

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, page_id: str) -> OptionsPage:
        """Change the page id, along with the ``post_id`` and ``menu_slug`` config."""
        self._id = page_id
        self.set_config({"post_id": page_id, "menu_slug": page_id})
        return self

    @property
    def binding_name(self) -> str:
        return self._id

    def get_config(self) -> dict[str, Any]:
        return self._config

    def set_config(self, config: dict[str, Any]) -> OptionsPage:
        """Merge new config values into the existing ones."""
        self._config.update(config)
        return self

    def register(self, registry: Registry | None = None) -> dict[str, Any]:
        """Register the page. Call once per page."""
        if registry is None:
            registry = default_registry

        logger.debug("Registering options page %s", self._id)
        config = dict(self._config)
        registry.add_options_page(config)
        return config

    # --- Values ---

    def option_name(self, key: str) -> str:
        return f"{self._id}_{key}"

    def get_meta_value(self, key: str) -> Any:
        return self.store.get(self.option_name(key))

    def set_meta_value(self, key: str, value: Any) -> bool:
        """Write an option. Returns False if the store did not update it."""
        return self.store.set(self.option_name(key), value)
