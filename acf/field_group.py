"""Object-oriented ACF field groups.

Subclass ``FieldGroup``, declare fields in ``configure``, and register the
group against a binding:

    class EventFields(FieldGroup):
        def configure(self, builder):
            speakers = FieldsBuilder("speakers").add_text("name")
            return builder.add_text("venue").add_repeater("speakers", speakers)

    events = CustomPostType("event", store)
    EventFields(events).register()

Values are read and written through the binding with keys namespaced the
way ACF stores repeater rows: ``speakers_0_name``, ``speakers_1_name``...
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any, Callable

from acf.bindings import BindingKind
from acf.builder import FieldsBuilder, LocationBuilder
from acf.errors import (
    BindingMissingError,
    InvalidFlexibleContentPayloadError,
    UnknownLocationKindError,
)
from acf.registry import default_registry

if TYPE_CHECKING:
    from acf.bindings import MetaDataBinding
    from acf.registry import Registry

logger = logging.getLogger(__name__)

RowFactory = Callable[[Any], Any]


class RowTypeRegistry:
    """Maps flexible content row tags to the classes that wrap those rows.

    Flexible content fields store one tag per row; each row is built by
    calling the registered factory with the row's ``FieldGroup``.
    """

    def __init__(self):
        self._factories: dict[str, RowFactory] = {}

    def register(self, tag: str, factory: RowFactory) -> None:
        if tag in self._factories and self._factories[tag] is not factory:
            logger.warning("Row type %r registered again, replacing", tag)
        self._factories[tag] = factory

    def resolve(self, tag: str) -> RowFactory | None:
        return self._factories.get(tag)

    def unregister(self, tag: str) -> None:
        self._factories.pop(tag, None)

    def __contains__(self, tag: object) -> bool:
        return tag in self._factories


row_types = RowTypeRegistry()


def row_type(tag: str | None = None) -> Callable[[type], type]:
    """Class decorator registering a flexible content row type.

    The tag defaults to the class name.
    """
    def decorator(cls: type) -> type:
        row_types.register(tag or cls.__name__, cls)
        return cls
    return decorator


def snake_case(name: str) -> str:
    """EventDetails -> event_details."""
    return re.sub(r"[A-Z]", lambda m: "_" + m.group(0).lower(), name).lstrip("_")


class FieldGroup:
    """A set of custom fields attached to a binding.

    Args:
        binding: The entity that owns the values (a post type, taxonomy,
            view, options page, or user form). Passing another
            ``FieldGroup`` makes this group one of its repeater rows; the
            binding is then inherited from the parent.
        meta_value_namespace: Key segment for this row, e.g. "speakers_0".
    """

    # Register taxonomy groups under post_type_<slug> group keys, as
    # earlier releases did, so existing keys keep matching.
    legacy_taxonomy_key = False

    def __init__(
        self,
        binding: MetaDataBinding | FieldGroup | None = None,
        meta_value_namespace: str = "",
    ):
        self.meta_value_namespace = meta_value_namespace
        self.parent: FieldGroup | None = None
        self.binding: MetaDataBinding | None = None

        if isinstance(binding, FieldGroup):
            self.parent = binding
            self.binding = binding.binding
        else:
            self.binding = binding

        self._config: FieldsBuilder | None = None
        self._repeater_rows: dict[tuple[str, int], FieldGroup] = {}
        self._meta_values: dict[str, list[Any]] = {}

    @classmethod
    def group_name(cls) -> str:
        return snake_case(cls.__name__)

    # --- Configuration ---

    def configure(self, builder: FieldsBuilder) -> FieldsBuilder:
        """Declare this group's fields. Override in subclasses."""
        return builder

    def get_config(self) -> FieldsBuilder:
        if self._config is None:
            self._config = self.configure(FieldsBuilder(self.group_name()))
        return self._config

    def set_group_config(self, key: str, value: Any) -> FieldGroup:
        self.get_config().set_group_config(key, value)
        return self

    def hide_on_screen(self, value: str) -> FieldGroup:
        """Hide an element of the edit screen (e.g. "the_content", "excerpt")."""
        hide = list(self.get_config().get_group_config("hide_on_screen") or [])
        hide.append(value)
        self.get_config().set_group_config("hide_on_screen", hide)
        return self

    def hide_content_editor(self) -> FieldGroup:
        return self.hide_on_screen("the_content")

    def set_location(self, param: str, operator: str, value: Any) -> LocationBuilder:
        """Add a location rule, AND-ed with any rule already set."""
        builder = self.get_config()
        location = builder.get_location()

        if location is None:
            return builder.set_location(param, operator, value)

        return location.and_(param, operator, value)

    # --- Registration ---

    def register(
        self,
        binding: MetaDataBinding | None = None,
        order: int = 0,
        registry: Registry | None = None,
    ) -> dict[str, Any]:
        """Register the group with a location derived from its binding.

        Args:
            binding: Binding to target. Defaults to the group's own.
            order: Position of the group on the edit screen (menu_order).
            registry: Where to register. Defaults to the shared registry.

        Returns:
            The final ACF field group config.

        Raises:
            BindingMissingError: If there's no binding to target.
            UnknownLocationKindError: If the binding isn't a known kind.
        """
        if binding is None:
            binding = self.binding
        if binding is None:
            raise BindingMissingError(self.group_name())

        self._set_location_for_binding(binding)

        builder = self.get_config()
        builder.set_group_config("menu_order", order)
        config = builder.build()

        if registry is None:
            registry = default_registry
        registry.add_local_field_group(config)

        return config

    def _set_location_for_binding(self, binding: MetaDataBinding) -> None:
        kind = getattr(binding, "kind", None)

        if kind is BindingKind.VIEW:
            segment = "view_" + binding.file_name.replace("/", "")
            param, value = "page_template", binding.template
        elif kind is BindingKind.POST_TYPE:
            segment = f"post_type_{binding.post_type}"
            param, value = "post_type", binding.post_type
        elif kind is BindingKind.TAXONOMY:
            prefix = "post_type" if self.legacy_taxonomy_key else "taxonomy"
            segment = f"{prefix}_{binding.name}"
            param, value = "taxonomy", binding.name
        elif kind is BindingKind.OPTIONS_PAGE:
            segment = f"options_{binding.id}"
            param, value = "options_page", binding.id
        elif kind is BindingKind.USER:
            segment = "user"
            param, value = "user_form", "all"
        else:
            raise UnknownLocationKindError(binding)

        self._namespace_group_key(segment)
        self.set_location(param, "==", value)
        logger.debug("Located %s at %s == %s", self.group_name(), param, value)

    def _namespace_group_key(self, segment: str) -> None:
        builder = self.get_config()
        builder.set_group_config("key", f"{builder.get_group_config('key')}_{segment}")

    # --- Values ---

    def get_meta_value(self, key: str, index: int | None = None) -> Any:
        """Read a field value, or the repeater row ``index`` of field ``key``."""
        if index is not None:
            return self._get_repeater_row(key, index)

        return self._require_binding().get_meta_value(self.get_namespaced_meta_field_key(key))

    def set_meta_value(self, key: str, value: Any) -> bool:
        return self._require_binding().set_meta_value(self.get_namespaced_meta_field_key(key), value)

    def meta(self, key: str, index: int | None = None) -> Any:
        """Shorthand for ``get_meta_value``, meant for templates."""
        return self.get_meta_value(key, index)

    def get_meta_values(self, key: str, row_class: type | str | None = None) -> list[Any]:
        """Return the rows of a repeater or flexible content field.

        A numeric stored value is a repeater row count; each row is this
        group's row ``FieldGroup``, wrapped in ``row_class`` if given. A
        list of tags (or a JSON array of them) is a flexible content
        field; each row is built by the row type registered for its tag.

        Rows are resolved once per key and cached.

        Raises:
            InvalidFlexibleContentPayloadError: If the stored value is
                neither, or names an unregistered row type.
        """
        if key not in self._meta_values:
            self._meta_values[key] = self._resolve_meta_values(key, row_class)
        return self._meta_values[key]

    def _resolve_meta_values(self, key: str, row_class: type | str | None) -> list[Any]:
        value = self.get_meta_value(key)
        count, tags = _parse_collection_value(key, value)

        wrap: RowFactory | None = None
        if tags is None and row_class is not None:
            wrap = _resolve_row_factory(key, value, row_class)

        rows: list[Any] = []
        for i in range(count):
            row = self.get_meta_value(key, i)
            if tags is not None:
                rows.append(_resolve_row_factory(key, value, tags[i])(row))
            elif wrap is not None:
                rows.append(wrap(row))
            else:
                rows.append(row)

        logger.debug("Resolved %d rows for %s", len(rows), self.get_namespaced_meta_field_key(key))
        return rows

    def _get_repeater_row(self, key: str, index: int) -> FieldGroup:
        cache_key = (key, index)
        if cache_key not in self._repeater_rows:
            self._repeater_rows[cache_key] = type(self)(self, f"{key}_{index}")
        return self._repeater_rows[cache_key]

    def _require_binding(self) -> MetaDataBinding:
        if self.binding is None:
            raise BindingMissingError(self.group_name())
        return self.binding

    # --- Namespacing ---

    def namespace_chain(self) -> list[str]:
        """Namespace segments from the root group down to this one."""
        chain: list[str] = []
        group: FieldGroup | None = self
        while group is not None:
            chain.append(group.meta_value_namespace)
            group = group.parent
        chain.reverse()
        return chain

    def get_namespaced_meta_field_key(self, key: str) -> str:
        """Prefix a field name with every non-empty namespace segment."""
        segments = [s.strip("_") for s in self.namespace_chain()]
        return "_".join([s for s in segments if s] + [key])


def _parse_collection_value(key: str, value: Any) -> tuple[int, list[str] | None]:
    """Read a stored repeater/flexible content value.

    Any integral number, or a string holding one ("3", "3.0"), is a row
    count.

    Returns:
        (row count, row tags); tags are None for plain repeaters.
    """
    if value is None or value == "":
        return 0, None

    if isinstance(value, bool):
        raise InvalidFlexibleContentPayloadError(key, value, "expected a row count or row types")

    if isinstance(value, (int, float)):
        return _row_count(key, value, value), None

    tags = value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            number = None
        if number is not None:
            return _row_count(key, value, number), None

        try:
            tags = json.loads(value)
        except ValueError as e:
            raise InvalidFlexibleContentPayloadError(
                key, value, "not a row count or JSON array"
            ) from e

    if isinstance(tags, (list, tuple)) and all(isinstance(tag, str) for tag in tags):
        return len(tags), list(tags)

    raise InvalidFlexibleContentPayloadError(key, value, "expected a row count or row types")


def _row_count(key: str, value: Any, number: int | float) -> int:
    if isinstance(number, float) and not number.is_integer():
        raise InvalidFlexibleContentPayloadError(key, value, "row count is not a whole number")
    if number < 0:
        raise InvalidFlexibleContentPayloadError(key, value, "negative row count")
    return int(number)


def _resolve_row_factory(key: str, value: Any, row_class: type | str) -> RowFactory:
    if not isinstance(row_class, str):
        return row_class

    factory = row_types.resolve(row_class)
    if factory is None:
        raise InvalidFlexibleContentPayloadError(
            key, value, f"unregistered row type {row_class!r}"
        )
    return factory
