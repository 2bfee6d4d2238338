"""Key-value stores that back field group and options page values.

Bindings never talk to WordPress directly; they read and write through
one of these stores. ``MemoryMetaStore`` keeps values in a dict (useful
for tests and dry runs), the REST stores persist through a
``WordPressClient``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from wordpress.client import WordPressClient

logger = logging.getLogger(__name__)


class MetaStore(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> bool: ...


class MemoryMetaStore:
    """Dict-backed store. Missing keys read as None."""

    def __init__(self, values: dict[str, Any] | None = None):
        self.values: dict[str, Any] = dict(values or {})

    def get(self, key: str) -> Any:
        return self.values.get(key)

    def set(self, key: str, value: Any) -> bool:
        """Store a value. Returns False if it was already stored unchanged."""
        if key in self.values and self.values[key] == value:
            return False
        self.values[key] = value
        return True


class RestMetaStore:
    """Meta of a single WordPress object (post, term, or user) over REST.

    The meta keys must be registered with ``show_in_rest`` on the site,
    otherwise WordPress leaves them out of the ``meta`` object.

    Values are fetched once and cached; writes update the cache.
    """

    def __init__(self, client: WordPressClient, object_type: str, object_id: int):
        self.client = client
        self.object_type = object_type
        self.object_id = object_id
        self._meta: dict[str, Any] | None = None

    def get(self, key: str) -> Any:
        if self._meta is None:
            self._meta = self.client.get_meta(self.object_type, self.object_id)
        return self._meta.get(key)

    def set(self, key: str, value: Any) -> bool:
        meta = self.client.update_meta(self.object_type, self.object_id, {key: value})
        if key not in meta:
            logger.warning(
                "Meta %r was not saved on %s %d; is it registered with show_in_rest?",
                key,
                self.object_type,
                self.object_id,
            )
            return False
        if self._meta is not None:
            self._meta[key] = meta[key]
        return True


class OptionStore:
    """Site options (the ``wp_options`` table) over the settings endpoint."""

    def __init__(self, client: WordPressClient):
        self.client = client
        self._settings: dict[str, Any] | None = None

    def get(self, key: str) -> Any:
        if self._settings is None:
            self._settings = self.client.get_settings()
        return self._settings.get(key)

    def set(self, key: str, value: Any) -> bool:
        updated = self.client.update_settings({key: value})
        if key not in updated:
            logger.warning(
                "Option %r was not saved; is it registered with show_in_rest?",
                key,
            )
            return False
        if self._settings is not None:
            self._settings[key] = updated[key]
        return True
