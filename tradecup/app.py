"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tradecup import __version__
from tradecup.config import Config
from tradecup.datasources import (
    AlpacaPriceSource,
    DataSource,
    InMemoryDataSource,
    PriceSource,
    StaticPriceSource,
    SupabaseDataSource,
)
from tradecup.api import router
from tradecup.api.dependencies import set_config, set_datasource, set_price_source

logger = logging.getLogger(__name__)


def create_datasource(config: Config) -> DataSource:
    """Hosted database when configured, in-memory local store otherwise."""
    if config.local_mode:
        return InMemoryDataSource()
    return SupabaseDataSource(url=config.supabase_url, api_key=config.supabase_key)


def create_price_source(config: Config) -> PriceSource:
    """Alpaca when keys are configured. Without keys no live price is known."""
    if not config.live_prices_enabled:
        return StaticPriceSource()
    return AlpacaPriceSource(
        api_key=config.alpaca_api_key,
        api_secret=config.alpaca_api_secret,
        api_url=config.alpaca_data_url,
    )


def create_app(config: Config | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.
    
    Args:
        config: Application configuration. If None, loads from environment.
        
    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()
    
    datasource = create_datasource(config)
    price_source = create_price_source(config)
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info("Starting Championship Ledger API")
        if config.local_mode:
            logger.info("No database configured, using local in-memory store")
        else:
            logger.info(f"Using database: {config.supabase_url}")
        if not config.live_prices_enabled:
            logger.info("No market data keys configured, holdings valued at average price")
        logger.info(
            f"Leaderboard policies: failure={config.failure_policy.value}, "
            f"skip_missing_profiles={config.skip_missing_profiles}"
        )
        
        set_config(config)
        set_datasource(datasource)
        set_price_source(price_source)
        
        yield
        
        # Shutdown
        logger.info("Shutting down...")
        await datasource.close()
        await price_source.close()
    
    app = FastAPI(
        title="Championship Ledger API",
        description="Leaderboards and prize pools for trading championships",
        version=__version__,
        lifespan=lifespan,
    )
    
    # Include API routes
    app.include_router(router)
    
    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}
    
    return app
