# src/feefo_schema/core/container.py
from __future__ import annotations

import logging

import httpx

from feefo_schema.adapters.feefo import FeefoApiClient
from feefo_schema.core.config import Settings
from feefo_schema.domain.ports import ReviewSourcePort
from feefo_schema.repositories.base import AbstractCacheStore
from feefo_schema.repositories.sqlite_cache_store import SQLiteCacheStore
from feefo_schema.services.feefo_cache import FeefoDataCache
from feefo_schema.services.payload_renderer import PayloadRenderer
from feefo_schema.services.refresh_scheduler import RefreshScheduler
from feefo_schema.services.refresh_service import RefreshService

logger = logging.getLogger(__name__)


class Container:
    """
    Wires the refresh pipeline and the renderer together.
    ``start()`` registers the recurring refresh job, ``stop()`` tears everything down.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: httpx.AsyncClient,
        store: AbstractCacheStore,
        source: ReviewSourcePort,
    ) -> None:
        self.settings = settings
        self.http_client = http_client
        self.store = store
        self.cache = FeefoDataCache(store, prefix=settings.option_prefix)
        self.refresh_service = RefreshService(source=source, cache=self.cache)
        self.renderer = PayloadRenderer(self.cache)
        self.scheduler = RefreshScheduler(run_on_start=settings.refresh_on_start)

    def start(self) -> bool:
        """Schedules the refresh job unless it already is. Returns True if newly scheduled."""
        return self.scheduler.schedule(
            self.settings.refresh_job_id,
            self.settings.refresh_interval_seconds,
            [self.refresh_service.refresh_summary, self.refresh_service.refresh_reviews],
        )

    async def stop(self) -> None:
        await self.scheduler.shutdown()
        await self.http_client.aclose()
        if isinstance(self.store, SQLiteCacheStore):
            self.store.dispose()


def build_container(
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
    store: AbstractCacheStore | None = None,
    source: ReviewSourcePort | None = None,
) -> Container:
    if http_client is None:
        http_client = httpx.AsyncClient(
            headers={"User-Agent": f"FeefoProductSchema/{settings.app_version}"},
            follow_redirects=True,
        )
    if store is None:
        sqlite_store = SQLiteCacheStore(database_url=settings.database_url)
        sqlite_store.initialize()
        store = sqlite_store
    if source is None:
        source = FeefoApiClient(http_client=http_client, settings=settings)

    logger.info(
        "Feefo integration targets %s/%s (merchant '%s')",
        settings.feefo_api_base_url,
        settings.feefo_api_version,
        settings.merchant_identifier or "-",
    )
    return Container(settings=settings, http_client=http_client, store=store, source=source)
