"""Entities that own field values and decide where a field group shows up.

A field group registered against a binding gets a location rule and a
group key segment derived from the binding's kind:

    View            page_template == app/Views<file>.php   view_<file>
    CustomPostType  post_type == <slug>                    post_type_<slug>
    CustomTaxonomy  taxonomy == <slug>                     taxonomy_<slug>
    OptionsPage     options_page == <id>                   options_<id>
    User            user_form == all                       user
"""

from __future__ import annotations

import enum
from typing import Any

from wordpress.meta import MemoryMetaStore, MetaStore


class BindingKind(enum.Enum):
    VIEW = "view"
    POST_TYPE = "post_type"
    TAXONOMY = "taxonomy"
    OPTIONS_PAGE = "options_page"
    USER = "user"


class MetaDataBinding:
    """Base for anything that stores named values for a field group.

    Subclasses set ``kind`` and ``binding_name``: the file path, slug, page
    id, or "all" that location rules are built from.
    """

    kind: BindingKind
    binding_name: str

    def __init__(self, store: MetaStore | None = None):
        self.store = store if store is not None else MemoryMetaStore()

    def get_meta_value(self, key: str) -> Any:
        return self.store.get(key)

    def set_meta_value(self, key: str, value: Any) -> bool:
        return self.store.set(key, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.binding_name!r})"


class View(MetaDataBinding):
    """A page template under ``app/Views``.

    Args:
        file_name: Template path relative to the views directory, with a
            leading slash and no extension (e.g. "/pages/about").
        store: Where the page's values live.
        default: True for the theme's default page template, which ACF
            matches with the literal "default".
    """

    kind = BindingKind.VIEW

    def __init__(self, file_name: str, store: MetaStore | None = None, default: bool = False):
        super().__init__(store)
        self.file_name = file_name
        self.default = default

    @property
    def binding_name(self) -> str:
        return self.file_name

    @property
    def template(self) -> str:
        if self.default:
            return "default"
        return f"app/Views{self.file_name}.php"


class CustomPostType(MetaDataBinding):
    kind = BindingKind.POST_TYPE

    def __init__(self, post_type: str, store: MetaStore | None = None):
        super().__init__(store)
        self.post_type = post_type

    @property
    def binding_name(self) -> str:
        return self.post_type


class CustomTaxonomy(MetaDataBinding):
    kind = BindingKind.TAXONOMY

    def __init__(self, name: str, store: MetaStore | None = None):
        super().__init__(store)
        self.name = name

    @property
    def binding_name(self) -> str:
        return self.name


class User(MetaDataBinding):
    """User profile forms. Field groups bound here show on every user form."""

    kind = BindingKind.USER

    @property
    def binding_name(self) -> str:
        return "all"
