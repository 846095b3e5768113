"""Download image variants of accepted recipes into the content directory."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Final
from uuid import uuid4

from recipe_catalog.clients.edamam import EdamamClientError
from recipe_catalog.ingestion.exceptions import ImageFetchError
from recipe_catalog.ingestion.models import ImageDownloadResult
from recipe_catalog.observability.logging import get_logger


if TYPE_CHECKING:
    from recipe_catalog.clients.edamam import EdamamClient

logger = get_logger(__name__)

IMAGE_SUFFIX: Final[str] = ".jpg"


def new_image_filename() -> str:
    return uuid4().hex + IMAGE_SUFFIX


class ImageFetcher:
    """Stores every image variant of a recipe under a freshly generated name.

    Downloads share one semaphore, so at most ``concurrency`` images are in
    flight regardless of how many recipes are fetched at once. A failed
    download is logged and counted; the generated filename stays in the
    mapping either way.
    """

    def __init__(
        self,
        client: EdamamClient,
        image_dir: Path | str,
        *,
        concurrency: int = 8,
        timeout: float | None = None,
    ) -> None:
        if concurrency < 1:
            msg = "concurrency must be at least 1"
            raise ValueError(msg)
        self._client = client
        self.image_dir = Path(image_dir)
        self._timeout = timeout
        self._semaphore = asyncio.Semaphore(concurrency)

    def ensure_directory(self) -> None:
        self.image_dir.mkdir(parents=True, exist_ok=True)

    async def fetch_all(
        self,
        image_sets: list[dict[str, str]],
    ) -> list[ImageDownloadResult]:
        """Download several recipes' images concurrently, preserving order."""
        return list(await asyncio.gather(*[self.fetch(urls) for urls in image_sets]))

    async def fetch(self, image_urls: dict[str, str]) -> ImageDownloadResult:
        """Download one recipe's images.

        Args:
            image_urls: Image size label to remote URL.

        Returns:
            Size label to stored filename, with the same keys as ``image_urls``.
        """
        filenames = {size: new_image_filename() for size in image_urls}

        async def fetch_one(size: str, url: str) -> str | None:
            try:
                await self._store(url, filenames[size], size)
            except ImageFetchError as e:
                logger.warning(
                    "Image download failed",
                    size=e.size,
                    url=e.url,
                    filename=filenames[size],
                    error=str(e),
                )
                return size
            return None

        failures = await asyncio.gather(
            *[fetch_one(size, url) for size, url in image_urls.items()]
        )
        failed = tuple(size for size in failures if size is not None)
        return ImageDownloadResult(
            images=filenames,
            downloaded=len(filenames) - len(failed),
            failed=failed,
        )

    async def _store(self, url: str, filename: str, size: str) -> None:
        async with self._semaphore:
            try:
                content = await self._client.fetch_image(url, timeout=self._timeout)
            except EdamamClientError as e:
                raise ImageFetchError(str(e), url=url, size=size) from e

        path = self.image_dir / filename
        try:
            await asyncio.get_running_loop().run_in_executor(
                None, path.write_bytes, content
            )
        except OSError as e:
            raise ImageFetchError(f"Could not write {path}: {e}", url=url, size=size) from e
