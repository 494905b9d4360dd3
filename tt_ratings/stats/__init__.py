"""
Derived Statistics

Modules:
- perspective: Decided matches seen from one player's side
- matchups: Opponent and partner aggregates
- player: Full statistics record for one player
- leaderboard: One summary row per known player
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name in ("compute_player_stats", "PlayerStats", "StreakInfo", "RatedResult"):
        from tt_ratings.stats import player
        return getattr(player, name)
    if name in ("compute_leaderboard", "leaderboard_frame", "LeaderboardRow"):
        from tt_ratings.stats import leaderboard
        return getattr(leaderboard, name)
    if name in ("MatchupRecord", "compute_opponent_records", "compute_partner_records"):
        from tt_ratings.stats import matchups
        return getattr(matchups, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
