"""Application entry point."""

import logging
import uvicorn

from tradecup.config import Config
from tradecup.app import create_app

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def describe(config: Config) -> str:
    """One-line summary of where data and prices come from."""
    data = "in-memory store" if config.local_mode else f"database at {config.supabase_url}"
    prices = "live Alpaca prices" if config.live_prices_enabled else "average prices only"
    return (
        f"{data}, {prices}, failure policy {config.failure_policy.value}, "
        f"missing profiles {'skipped' if config.skip_missing_profiles else 'rejected'}"
    )


def main():
    """Run the championship ledger API."""
    config = Config.from_env()
    app = create_app(config)

    logger.info(f"Starting championship ledger on {config.host}:{config.port}: {describe(config)}")
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
    )


if __name__ == "__main__":
    main()
