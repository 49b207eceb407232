"""FastAPI dependencies for dependency injection."""

from tradecup.config import Config
from tradecup.datasources import DataSource, PriceSource
from tradecup.services import (
    EnrollmentService,
    LeaderboardService,
    PrizePoolCache,
    PrizePoolService,
)

# Global instances - initialized at app startup
_datasource: DataSource | None = None
_price_source: PriceSource | None = None
_config: Config = Config()
_prize_pool_cache = PrizePoolCache()


def set_datasource(datasource: DataSource) -> None:
    """Set the global datasource instance."""
    global _datasource
    _datasource = datasource
    _prize_pool_cache.clear()


def get_datasource() -> DataSource:
    """Get the global datasource instance for dependency injection."""
    if _datasource is None:
        raise RuntimeError("DataSource not initialized. Call set_datasource() first.")
    return _datasource


def set_price_source(price_source: PriceSource) -> None:
    """Set the global price source instance."""
    global _price_source
    _price_source = price_source


def get_price_source() -> PriceSource:
    if _price_source is None:
        raise RuntimeError("PriceSource not initialized. Call set_price_source() first.")
    return _price_source


def set_config(config: Config) -> None:
    global _config
    _config = config


def get_prize_pool_cache() -> PrizePoolCache:
    return _prize_pool_cache


def get_leaderboard_service() -> LeaderboardService:
    return LeaderboardService(
        get_datasource(),
        get_price_source(),
        skip_missing_profiles=_config.skip_missing_profiles,
        failure_policy=_config.failure_policy,
    )


def get_prize_pool_service() -> PrizePoolService:
    return PrizePoolService(get_datasource(), _prize_pool_cache)


def get_enrollment_service() -> EnrollmentService:
    return EnrollmentService(get_datasource(), _prize_pool_cache)
