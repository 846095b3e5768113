"""Rate-limited walk over the Edamam cursor-paginated search results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from aiolimiter import AsyncLimiter

from recipe_catalog.clients.edamam import EdamamClientError
from recipe_catalog.ingestion.exceptions import PageFetchError
from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from recipe_catalog.clients.edamam import EdamamClient, RecipeSearchPage

logger = get_logger(__name__)


class Paginator:
    """Lazily yields search pages, one fetch per ``page_delay`` seconds.

    The first page's ``count`` seeds ``remaining``, which drops by each
    page's hit count. Walking continues only while ``remaining`` is above
    ``budget_threshold`` and the API returned a next cursor.
    """

    def __init__(
        self,
        client: EdamamClient,
        first_url: str,
        *,
        budget_threshold: int = 9000,
        page_delay: float = 6.1,
        limiter: AsyncLimiter | None = None,
    ) -> None:
        self._client = client
        self._first_url = first_url
        self.budget_threshold = budget_threshold
        self._limiter = limiter or AsyncLimiter(1, page_delay)
        self.remaining: int | None = None
        self.pages_fetched = 0
        self.records_fetched = 0

    async def pages(self) -> AsyncIterator[RecipeSearchPage]:
        """Yield pages until the budget is spent or the cursor runs out.

        Raises:
            PageFetchError: If any page fetch fails. There are no retries.
        """
        url: str | None = self._first_url
        while url is not None:
            page = await self._fetch(url)
            self.pages_fetched += 1
            self.records_fetched += len(page.hits)
            if self.remaining is None:
                self.remaining = page.count
            self.remaining -= len(page.hits)

            yield page

            if self.remaining <= self.budget_threshold:
                logger.info(
                    "Record budget reached",
                    remaining=self.remaining,
                    threshold=self.budget_threshold,
                )
                return
            if not page.hits:
                logger.info("Empty page, stopping", pages=self.pages_fetched)
                return
            url = page.next_url

        logger.info("No next page", pages=self.pages_fetched)

    async def _fetch(self, url: str) -> RecipeSearchPage:
        async with self._limiter:
            try:
                return await self._client.fetch_page(url)
            except EdamamClientError as e:
                raise PageFetchError(
                    str(e), url=e.url, status_code=e.status_code
                ) from e
