"""Leaderboard and prize pool service for trading championships."""

__version__ = "1.0.0"
