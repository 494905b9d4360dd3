"""
Elo Rating System

Modules:
- totals: Per-match game and point totals from game rows
- engine: Canonical-order Elo replay and its three output views
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name in ("build_match_totals", "group_games_by_match", "is_decided"):
        from tt_ratings.elo import totals
        return getattr(totals, name)
    if name in (
        "EloReplay",
        "MatchRatingUpdate",
        "EloPoint",
        "expected_score",
        "calculate_elo_ratings",
        "calculate_elo_match_states",
        "calculate_elo_deltas_for_player",
        "rating_trajectory",
    ):
        from tt_ratings.elo import engine
        return getattr(engine, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
