"""
Data Ingestion

Modules:
- records: Store export adapters and caller-side match selection
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name in (
        "IngestionError",
        "RecordError",
        "matches_from_frame",
        "games_from_frame",
        "roster_from_frame",
        "select_matches",
        "select_games",
        "load_latest_export",
    ):
        from tt_ratings.ingestion import records
        return getattr(records, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
