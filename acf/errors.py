"""Exceptions raised while declaring, registering, or reading field groups."""

from __future__ import annotations


class ACFError(Exception):
    """Base class for field group errors."""


class BindingMissingError(ACFError):
    """Raised when a field group is registered without anything to bind to."""

    def __init__(self, group: str):
        super().__init__(
            f"Field group {group!r} has no binding. Pass one to register() "
            f"or construct the group with one."
        )
        self.group = group


class UnknownLocationKindError(ACFError):
    """Raised when a binding matches none of the known location kinds."""

    def __init__(self, binding: object):
        super().__init__(
            f"Cannot derive a location rule from {type(binding).__name__}"
        )
        self.binding = binding


class InvalidFlexibleContentPayloadError(ACFError):
    """Raised when a stored repeater/flexible content value can't be read."""

    def __init__(self, field_key: str, value: object, reason: str = ""):
        message = f"Invalid collection value for {field_key!r}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.field_key = field_key
        self.value = value


class FieldNameCollisionError(ACFError):
    """Raised when two fields with the same name are declared side by side."""

    def __init__(self, name: str, builder: str):
        super().__init__(f"Field {name!r} declared twice in {builder!r}")
        self.name = name
        self.builder = builder
