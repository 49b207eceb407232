from .base import DataSource, PriceSource
from .memory import InMemoryDataSource, StaticPriceSource
from .supabase import SupabaseDataSource
from .alpaca import AlpacaPriceSource

__all__ = [
    "DataSource",
    "PriceSource",
    "InMemoryDataSource",
    "StaticPriceSource",
    "SupabaseDataSource",
    "AlpacaPriceSource",
]
