"""Assemble one consistent view of arena state for a decision cycle."""

from typing import List

from loguru import logger
from pydantic import BaseModel, ConfigDict

from .client import ArenaClient
from .models import AssetInfo, ClockResponse, Portfolio, VersionResponse


class MarketSnapshot(BaseModel):
    """Everything the strategy sees for one interval."""

    model_config = ConfigDict(frozen=True)

    version: VersionResponse
    clock: ClockResponse
    portfolio: Portfolio
    assets: List[AssetInfo]

    @property
    def interval_start(self) -> str:
        return self.clock.current_interval.start_time


class MarketSnapshotReader:
    """Reads version, clock, portfolio and assets in that order.

    The first failing call aborts the read; nothing is cached between cycles.
    """

    def __init__(self, client: ArenaClient, agent_id: str) -> None:
        self._client = client
        self._agent_id = agent_id

    async def check_version(self) -> VersionResponse:
        logger.info("Checking API version...")
        version = await self._client.check_version()
        logger.info("API version OK (schema={})", version.schema_version)
        return version

    async def read_state(self, version: VersionResponse) -> MarketSnapshot:
        """Read clock, portfolio and assets once the version is known to match."""
        logger.info("Fetching game clock...")
        clock = await self._client.get_clock()
        logger.info(
            "Interval {} ({}s remaining)",
            clock.current_interval.id,
            clock.seconds_remaining,
        )

        logger.info("Fetching portfolio...")
        portfolio = await self._client.get_portfolio(self._agent_id)
        logger.info("Portfolio NAV: ${:.2f}", portfolio.nav_usd)

        logger.info("Fetching assets...")
        assets = await self._client.get_assets()
        logger.info("{} assets available", len(assets))

        return MarketSnapshot(
            version=version, clock=clock, portfolio=portfolio, assets=assets
        )

    async def read(self) -> MarketSnapshot:
        version = await self.check_version()
        return await self.read_state(version)
