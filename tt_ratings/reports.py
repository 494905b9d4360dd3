"""
Leaderboard Report Export

Reads the newest match, game and profile exports from the store, replays
them, and writes one leaderboard CSV per match type. Nothing from a previous
run is reused: each report is rebuilt from the exports alone.

Usage:
    python -m tt_ratings.reports
    OR
    from tt_ratings.reports import process_exports
"""

from tt_ratings.config import (
    EXPORTS_FOLDER,
    GAMES_PATTERN,
    MATCH_TYPES,
    MATCHES_PATTERN,
    OUTPUT_FOLDER,
    PROFILES_PATTERN,
    EloConfig,
    StatsConfig,
)
from tt_ratings.ingestion.records import (
    games_from_frame,
    load_latest_export,
    matches_from_frame,
    roster_from_frame,
    select_games,
    select_matches,
)
from tt_ratings.stats.leaderboard import compute_leaderboard, leaderboard_frame
from tt_ratings.utils import atomic_write_csv, cleanup_old_files, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def build_leaderboards(matches, games, roster_ids=(), elo_config: EloConfig | None = None,
                       stats_config: StatsConfig | None = None) -> dict:
    """
    Leaderboard DataFrames keyed by match type.

    Singles and doubles are rated independently, each over its own
    active matches.
    """
    boards = {}
    for match_type in sorted(MATCH_TYPES):
        selected = select_matches(matches, match_type=match_type)
        selected_games = select_games(games, selected)
        rows = compute_leaderboard(
            selected, selected_games, roster_ids=roster_ids,
            elo_config=elo_config, stats_config=stats_config,
        )
        boards[match_type] = leaderboard_frame(rows)
        logger.info(f"{match_type.title()}: {len(selected)} matches, {len(rows)} players")
    return boards


def process_exports(exports_folder=None, output_folder=None, elo_config: EloConfig | None = None,
                    stats_config: StatsConfig | None = None) -> dict:
    """
    Build and write leaderboards from the newest store exports.

    Returns:
        dict of match_type -> leaderboard DataFrame (empty dict if exports are missing)
    """
    exports_folder = exports_folder or EXPORTS_FOLDER
    output_folder = output_folder or OUTPUT_FOLDER

    matches_df = load_latest_export(MATCHES_PATTERN, exports_folder)
    games_df = load_latest_export(GAMES_PATTERN, exports_folder)
    if matches_df is None or games_df is None:
        logger.error("Match and game exports are both required")
        return {}

    matches = matches_from_frame(matches_df)
    games = games_from_frame(games_df)
    roster = roster_from_frame(load_latest_export(PROFILES_PATTERN, exports_folder))
    logger.info(f"Loaded {len(matches)} matches, {len(games)} games, {len(roster)} profiles")

    boards = build_leaderboards(matches, games, roster, elo_config, stats_config)

    active_dates = [match.match_date for match in matches if match.is_active]
    stamp = max(active_dates).strftime('%Y%m%d') if active_dates else "empty"

    for match_type, df in boards.items():
        output_csv = output_folder / f"leaderboard_{match_type}_{stamp}.csv"
        atomic_write_csv(df, output_csv, index=False)
        cleanup_old_files(f"leaderboard_{match_type}_*.csv", keep_file=output_csv, folder=output_folder)
        logger.info(f"Exported {match_type} leaderboard: {output_csv}")
        if not df.empty:
            logger.info("\n" + df.head(10).to_string(index=False))

    return boards


def main():
    return process_exports(
        elo_config=EloConfig.from_env(),
        stats_config=StatsConfig.from_env(),
    )


if __name__ == "__main__":
    results = main()
