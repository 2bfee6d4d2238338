"""Declarative builder for ACF field group configuration.

Accumulates field declarations, group settings, and location rules, then
emits the plain dict ACF expects for ``acf_add_local_field_group`` (the
same shape found in an ACF JSON export).

Field keys are derived from the group key when ``build()`` runs, so
renaming the group key (e.g. to namespace it per binding) renames every
field key with it:

    group_event_fields_post_type_event
        -> field_event_fields_post_type_event_title
        -> field_event_fields_post_type_event_speakers_name
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from acf.errors import FieldNameCollisionError

logger = logging.getLogger(__name__)

# Group settings ACF fills in when a group is created through the admin UI
GROUP_DEFAULTS: dict[str, Any] = {
    "menu_order": 0,
    "position": "normal",
    "style": "default",
    "label_placement": "top",
    "instruction_placement": "label",
    "hide_on_screen": [],
    "active": True,
    "description": "",
}

# Field types whose sub-fields are declared with a nested builder
NESTED_TYPES = frozenset({"group", "repeater"})


def labelize(name: str) -> str:
    """Turn a field name into a human-readable label (event_date -> Event Date)."""
    return " ".join(word.capitalize() for word in name.replace("-", "_").split("_") if word)


@dataclass
class _FieldDeclaration:
    name: str
    type: str
    settings: dict[str, Any] = field(default_factory=dict)
    sub_fields: FieldsBuilder | None = None
    layouts: dict[str, FieldsBuilder] | None = None


class LocationBuilder:
    """Builds ACF location rules.

    ACF locations are a list of rule groups: rules inside a group are
    AND-ed, groups are OR-ed.
    """

    def __init__(self, param: str, operator: str, value: Any):
        self._groups: list[list[dict[str, Any]]] = [[_rule(param, operator, value)]]

    def and_(self, param: str, operator: str, value: Any) -> LocationBuilder:
        self._groups[-1].append(_rule(param, operator, value))
        return self

    def or_(self, param: str, operator: str, value: Any) -> LocationBuilder:
        self._groups.append([_rule(param, operator, value)])
        return self

    def build(self) -> list[list[dict[str, Any]]]:
        return copy.deepcopy(self._groups)


def _rule(param: str, operator: str, value: Any) -> dict[str, Any]:
    return {"param": param, "operator": operator, "value": value}


class FieldsBuilder:
    """Collects the fields and settings of one ACF field group.

    Builders also describe the sub-fields of group, repeater, and flexible
    content layouts; only the outermost builder's group settings and
    location end up in the final config.
    """

    def __init__(self, name: str, group_config: dict[str, Any] | None = None):
        self.name = name
        self._fields: list[_FieldDeclaration] = []
        self._group_config: dict[str, Any] = {
            "key": f"group_{name}",
            "title": labelize(name),
        }
        if group_config:
            self._group_config.update(group_config)
        self._location: LocationBuilder | None = None

    # --- Group settings ---

    def set_group_config(self, key: str, value: Any) -> FieldsBuilder:
        self._group_config[key] = value
        return self

    def get_group_config(self, key: str, default: Any = None) -> Any:
        return self._group_config.get(key, default)

    # --- Location ---

    def set_location(self, param: str, operator: str, value: Any) -> LocationBuilder:
        """Start a new location; replaces any rules set before."""
        self._location = LocationBuilder(param, operator, value)
        return self._location

    def get_location(self) -> LocationBuilder | None:
        return self._location

    # --- Fields ---

    @property
    def field_names(self) -> list[str]:
        return [decl.name for decl in self._fields]

    def add_field(self, name: str, field_type: str, **settings: Any) -> FieldsBuilder:
        """Declare a field of any ACF type. Extra settings pass through as-is."""
        self._add(_FieldDeclaration(name=name, type=field_type, settings=settings))
        return self

    def add_text(self, name: str, **settings: Any) -> FieldsBuilder:
        return self.add_field(name, "text", **settings)

    def add_textarea(self, name: str, **settings: Any) -> FieldsBuilder:
        return self.add_field(name, "textarea", **settings)

    def add_wysiwyg(self, name: str, **settings: Any) -> FieldsBuilder:
        return self.add_field(name, "wysiwyg", **settings)

    def add_number(self, name: str, **settings: Any) -> FieldsBuilder:
        return self.add_field(name, "number", **settings)

    def add_email(self, name: str, **settings: Any) -> FieldsBuilder:
        return self.add_field(name, "email", **settings)

    def add_url(self, name: str, **settings: Any) -> FieldsBuilder:
        return self.add_field(name, "url", **settings)

    def add_link(self, name: str, **settings: Any) -> FieldsBuilder:
        return self.add_field(name, "link", **settings)

    def add_image(self, name: str, **settings: Any) -> FieldsBuilder:
        settings.setdefault("return_format", "array")
        return self.add_field(name, "image", **settings)

    def add_true_false(self, name: str, **settings: Any) -> FieldsBuilder:
        settings.setdefault("ui", 1)
        return self.add_field(name, "true_false", **settings)

    def add_select(
        self,
        name: str,
        choices: dict[str, str] | list[str],
        **settings: Any,
    ) -> FieldsBuilder:
        """Declare a select field. A plain list of choices uses each value as its label."""
        if not isinstance(choices, dict):
            choices = {choice: choice for choice in choices}
        return self.add_field(name, "select", choices=dict(choices), **settings)

    def add_group(self, name: str, builder: FieldsBuilder, **settings: Any) -> FieldsBuilder:
        self._add(_FieldDeclaration(name=name, type="group", settings=settings, sub_fields=builder))
        return self

    def add_repeater(self, name: str, builder: FieldsBuilder, **settings: Any) -> FieldsBuilder:
        settings.setdefault("layout", "block")
        self._add(_FieldDeclaration(name=name, type="repeater", settings=settings, sub_fields=builder))
        return self

    def add_flexible_content(
        self,
        name: str,
        layouts: dict[str, FieldsBuilder] | list[FieldsBuilder],
        **settings: Any,
    ) -> FieldsBuilder:
        """Declare a flexible content field.

        Args:
            name: Field name.
            layouts: Layout builders keyed by layout name. A list uses each
                builder's own name.
        """
        if not isinstance(layouts, dict):
            layouts = {layout.name: layout for layout in layouts}
        self._add(_FieldDeclaration(
            name=name,
            type="flexible_content",
            settings=settings,
            layouts=dict(layouts),
        ))
        return self

    def add_fields(self, builder: FieldsBuilder) -> FieldsBuilder:
        """Copy another builder's fields into this one (group settings are ignored)."""
        for decl in builder._fields:
            self._add(copy.copy(decl))
        return self

    def _add(self, decl: _FieldDeclaration) -> None:
        if decl.name in self.field_names:
            raise FieldNameCollisionError(decl.name, self.name)
        self._fields.append(decl)

    # --- Finalize ---

    def build(self) -> dict[str, Any]:
        """Finalize into an ACF field group dict."""
        config = copy.deepcopy(GROUP_DEFAULTS)
        config.update(copy.deepcopy(self._group_config))

        group_key = config["key"]
        config["fields"] = self._build_fields(_field_prefix(group_key))
        config["location"] = self._location.build() if self._location else []

        logger.debug(
            "Built field group %s with %d top-level fields",
            group_key,
            len(config["fields"]),
        )
        return config

    def _build_fields(self, prefix: str) -> list[dict[str, Any]]:
        built: list[dict[str, Any]] = []

        for decl in self._fields:
            key = f"{prefix}_{decl.name}"
            settings = copy.deepcopy(decl.settings)
            entry: dict[str, Any] = {
                "key": key,
                "label": settings.pop("label", labelize(decl.name)),
                "name": decl.name,
                "type": decl.type,
            }
            entry.update(settings)

            if decl.type in NESTED_TYPES and decl.sub_fields is not None:
                entry["sub_fields"] = decl.sub_fields._build_fields(key)

            elif decl.type == "flexible_content":
                entry["layouts"] = _build_layouts(key, decl.layouts or {})

            built.append(entry)

        return built


def _field_prefix(group_key: str) -> str:
    if group_key.startswith("group_"):
        group_key = group_key[len("group_"):]
    return f"field_{group_key}"


def _build_layouts(field_key: str, layouts: dict[str, FieldsBuilder]) -> dict[str, dict]:
    """Build flexible content layouts, keyed by layout key like ACF exports them."""
    built: dict[str, dict] = {}
    for layout_name, builder in layouts.items():
        layout_key = f"layout_{field_key[len('field_'):]}_{layout_name}"
        built[layout_key] = {
            "key": layout_key,
            "name": layout_name,
            "label": labelize(layout_name),
            "display": "block",
            "sub_fields": builder._build_fields(f"{field_key}_{layout_name}"),
        }
    return built
