"""Application configuration."""

import os
from dataclasses import dataclass
from typing import Optional

from tradecup.services.leaderboard_service import FailurePolicy


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Application configuration loaded from environment variables."""
    
    # API settings
    host: str = "0.0.0.0"
    port: int = 8000
    
    # Hosted database (PostgREST). Local in-memory mode when unset.
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    
    # Market data. Holdings are valued at average price when keys are unset.
    alpaca_data_url: str = "https://data.alpaca.markets"
    alpaca_api_key: Optional[str] = None
    alpaca_api_secret: Optional[str] = None
    
    # Leaderboard policies
    skip_missing_profiles: bool = True
    failure_policy: FailurePolicy = FailurePolicy.ABORT
    
    @property
    def local_mode(self) -> bool:
        return not (self.supabase_url and self.supabase_key)
    
    @property
    def live_prices_enabled(self) -> bool:
        return bool(self.alpaca_api_key and self.alpaca_api_secret)
    
    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_key=os.getenv("SUPABASE_KEY") or None,
            alpaca_data_url=os.getenv(
                "ALPACA_DATA_URL",
                "https://data.alpaca.markets"
            ),
            alpaca_api_key=os.getenv("ALPACA_API_KEY") or None,
            alpaca_api_secret=os.getenv("ALPACA_API_SECRET") or None,
            skip_missing_profiles=_env_flag("LEADERBOARD_SKIP_MISSING_PROFILES", True),
            failure_policy=FailurePolicy(
                os.getenv("LEADERBOARD_FAILURE_POLICY", "abort").strip().lower()
            ),
        )
