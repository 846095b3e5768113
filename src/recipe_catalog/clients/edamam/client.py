"""HTTP client for the Edamam recipe search API and its image CDN."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

import httpx
import orjson
from pydantic import ValidationError

from recipe_catalog.clients.edamam.models import RecipeSearchPage
from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from types import TracebackType

logger = get_logger(__name__)


class EdamamClientError(Exception):
    """A request to Edamam failed or returned an unusable payload."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class EdamamClient:
    """Client for the Edamam recipe search API.

    Pages are followed through the absolute ``_links.next.href`` cursor the
    API returns, so only the first page URL is built here.
    """

    DEFAULT_BASE_URL: Final[str] = "https://api.edamam.com/api/recipes/v2"

    def __init__(
        self,
        app_id: str,
        app_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            app_id: Edamam application id.
            app_key: Edamam application key.
            base_url: Recipe search endpoint.
            timeout: Per-request timeout in seconds.
            http_client: HTTP client to use; one is created on
                :meth:`initialize` when omitted.
        """
        self.app_id = app_id
        self.base_url = base_url
        self._app_key = app_key
        self._timeout = timeout
        self._http = http_client
        self._owns_http_client = http_client is None

    async def initialize(self) -> None:
        """Initialize the HTTP client if not provided."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        logger.info("EdamamClient initialized", base_url=self.base_url)

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.info("EdamamClient shutdown")

    async def __aenter__(self) -> EdamamClient:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.shutdown()

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            msg = "EdamamClient not initialized. Call initialize() first."
            raise RuntimeError(msg)
        return self._http

    def search_url(self, query: str) -> str:
        """Build the first-page URL for a public recipe search."""
        params = {
            "type": "public",
            "q": query,
            "app_id": self.app_id,
            "app_key": self._app_key,
        }
        return str(httpx.URL(self.base_url, params=params))

    async def fetch_page(self, url: str) -> RecipeSearchPage:
        """Fetch and parse one search results page.

        Raises:
            EdamamClientError: On transport errors, non-2xx responses, or a
                body that is not a search page.
        """
        try:
            response = await self.http.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EdamamClientError(
                f"Edamam returned HTTP {e.response.status_code}",
                url=_redact(url),
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise EdamamClientError(
                f"Edamam request failed: {e}", url=_redact(url)
            ) from e

        try:
            return RecipeSearchPage.model_validate(orjson.loads(response.content))
        except (orjson.JSONDecodeError, ValidationError) as e:
            raise EdamamClientError(
                "Malformed Edamam search response",
                url=_redact(url),
                status_code=response.status_code,
            ) from e

    async def fetch_image(self, url: str, *, timeout: float | None = None) -> bytes:
        """Download one image.

        Raises:
            EdamamClientError: On transport errors or non-2xx responses.
        """
        try:
            response = await self.http.get(
                url, timeout=timeout if timeout is not None else self._timeout
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EdamamClientError(
                f"Image download returned HTTP {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise EdamamClientError(f"Image download failed: {e}", url=url) from e
        return response.content


def _redact(url: str) -> str:
    """Strip the app key from a URL before it reaches logs or errors."""
    parsed = httpx.URL(url)
    if "app_key" not in parsed.params:
        return url
    return str(parsed.copy_set_param("app_key", "***"))
