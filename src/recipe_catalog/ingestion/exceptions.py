"""Exceptions for the ingestion job.

A validation rejection is not an exception: the validator returns a
``ValidationResult`` and the record is skipped.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base exception for ingestion errors."""


class IngestionConfigError(IngestionError):
    """Raised when a credential or setting required to start a run is missing."""


class PageFetchError(IngestionError):
    """Raised when a search page cannot be fetched or parsed.

    This includes transport errors, non-2xx responses, and payloads that
    are not a search results page. Fatal for the run.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ImageFetchError(IngestionError):
    """Raised when one image cannot be downloaded or written.

    Handled inside the image fetcher; never aborts a record or the run.
    """

    def __init__(self, message: str, url: str, size: str | None = None) -> None:
        self.url = url
        self.size = size
        super().__init__(message)


class BulkLoadError(IngestionError):
    """Raised when a batch insert fails. Fatal for the run."""

    def __init__(self, table: str, message: str) -> None:
        self.table = table
        super().__init__(f"Bulk insert into '{table}' failed: {message}")
