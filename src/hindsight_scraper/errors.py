"""Exception hierarchy for the scraper.

Recovered locally: CacheNotFound, CacheCorrupt, ResolutionFailed.
Fatal to a run: ConfigMissing, FetchFailed, CacheWriteFailed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hindsight_scraper.models.records import PipelineResult


class ScraperError(Exception):
    """Base class for all scraper errors."""


class ConfigMissing(ScraperError):
    """A required connection or credential value is absent or unusable."""

    def __init__(self, names: list[str], detail: str | None = None) -> None:
        self.names = names
        msg = f"missing configuration: {', '.join(names)}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class CacheNotFound(ScraperError):
    """No cache file exists."""


class CacheCorrupt(ScraperError):
    """The cache file exists but cannot be deserialized."""


class FetchFailed(ScraperError):
    """Retrieving the event history failed. No partial result is kept."""


class ResolutionFailed(ScraperError):
    """A single transaction could not be resolved."""

    def __init__(self, tx_hash: str | None, reason: str) -> None:
        self.tx_hash = tx_hash
        self.reason = reason
        super().__init__(f"{tx_hash}: {reason}")


class CacheWriteFailed(ScraperError):
    """Persisting the snapshot failed.

    ``result`` carries the in-memory result of the run when there is one.
    """

    def __init__(self, message: str, result: PipelineResult | None = None) -> None:
        super().__init__(message)
        self.result = result
