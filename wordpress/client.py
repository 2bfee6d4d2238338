"""WordPress REST API client for object meta and site options."""

from __future__ import annotations

import logging
from typing import Any

import requests

from wordpress.auth import SiteConfig

logger = logging.getLogger(__name__)

# REST collections for the object types that carry meta
_META_COLLECTIONS = {
    "post": "posts",
    "page": "pages",
    "user": "users",
    "category": "categories",
    "post_tag": "tags",
}


class WordPressClient:
    """Reads and writes meta values and options over the REST API.

    Uses Application Passwords for authentication (WordPress 5.6+). Meta
    keys only show up in responses when they are registered with
    ``show_in_rest``; options need ``register_setting`` with
    ``show_in_rest`` to appear under /settings.
    """

    def __init__(self, config: SiteConfig):
        self.config = config
        self._session = requests.Session()
        self._session.auth = config.auth_tuple
        self._session.headers.update({"Accept": "application/json"})

    # --- Meta ---

    def get_meta(self, object_type: str, object_id: int) -> dict[str, Any]:
        """Fetch the meta of a post, term, or user.

        Args:
            object_type: "post", "page", "user", a custom post type slug,
                or a taxonomy's REST base.
            object_id: WordPress object ID.

        Returns:
            The object's ``meta`` dict (empty if none is exposed).

        Raises:
            WordPressAPIError: If the API request fails.
        """
        endpoint = f"{self._endpoint(object_type)}/{object_id}"
        params = {"_fields": "id,meta", "context": "edit"}

        result = self._request("GET", endpoint, params=params)
        return result.get("meta") or {}

    def update_meta(
        self,
        object_type: str,
        object_id: int,
        meta: dict[str, Any],
    ) -> dict[str, Any]:
        """Write meta values. Only the given keys are changed.

        Returns:
            The object's meta as stored after the update.

        Raises:
            WordPressAPIError: If the API request fails.
        """
        endpoint = f"{self._endpoint(object_type)}/{object_id}"

        logger.info(
            "Updating %d meta keys on %s %d", len(meta), object_type, object_id
        )

        result = self._request("POST", endpoint, json={"meta": meta})
        return result.get("meta") or {}

    # --- Options ---

    def get_settings(self) -> dict[str, Any]:
        """Fetch all options exposed through the settings endpoint."""
        return self._request("GET", f"{self.config.api_url}/settings")

    def update_settings(self, values: dict[str, Any]) -> dict[str, Any]:
        """Update options. Returns every exposed option after the update."""
        logger.info("Updating options: %s", ", ".join(sorted(values)))
        return self._request("POST", f"{self.config.api_url}/settings", json=values)

    # --- Utilities ---

    def test_connection(self) -> dict[str, Any]:
        """Test the API connection and authentication.

        Returns:
            Dict with 'ok' bool and 'user' or 'error' info.
        """
        try:
            result = self._request("GET", f"{self.config.api_url}/users/me")
            return {
                "ok": True,
                "user": result.get("name", ""),
                "user_id": result.get("id"),
            }
        except WordPressAPIError as e:
            return {
                "ok": False,
                "error": str(e),
                "status_code": e.status_code,
            }

    # --- Internal ---

    def _endpoint(self, object_type: str) -> str:
        """Build the collection URL for an object type."""
        # Custom post types and taxonomies use their own REST base
        slug = _META_COLLECTIONS.get(object_type, object_type)
        return f"{self.config.api_url}/{slug}"

    def _request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> Any:
        """Make an authenticated API request."""
        kwargs.setdefault("timeout", self.config.timeout)

        response = self._session.request(method, url, **kwargs)
        self._check_response(response)
        return response.json()

    @staticmethod
    def _check_response(response: requests.Response) -> None:
        """Check for API errors and raise WordPressAPIError if needed."""
        if response.ok:
            return

        try:
            error_data = response.json()
            message = error_data.get("message", response.reason)
            code = error_data.get("code", "")
        except ValueError:
            message = response.text or response.reason
            code = ""

        raise WordPressAPIError(
            message=f"WordPress API error: {message}",
            status_code=response.status_code,
            error_code=code,
            response_body=response.text,
        )


class WordPressAPIError(Exception):
    """Raised when a WordPress REST API request fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str = "",
        response_body: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.response_body = response_body
