"""
Table Tennis Ratings - Core Package

Deterministic replay of match and game records into Elo ratings and derived
player statistics:
- Match totals and Elo replay (tt_ratings.elo)
- Player and leaderboard statistics (tt_ratings.stats)
- Store-row adapters and caller-side selection (tt_ratings.ingestion)
- Shared configuration and utilities
"""

from tt_ratings.config import ConfigurationError, EloConfig, StatsConfig

__version__ = "0.1.0"

__all__ = ["ConfigurationError", "EloConfig", "StatsConfig", "__version__"]
