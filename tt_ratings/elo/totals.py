"""
Match totals aggregation.

Folds per-game scores into per-match game wins and point totals. Games are
the only source of truth for who won a match; cached totals on match rows
are never read.
"""

from collections import defaultdict

from tt_ratings.models import MatchTotals
from tt_ratings.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def build_match_totals(matches, games) -> dict[str, MatchTotals]:
    """
    Aggregate game rows into totals keyed by match id.

    Args:
        matches: Matches under consideration
        games: Games belonging to those matches (others are ignored)

    Returns:
        dict of match_id -> MatchTotals. Matches without games are absent.
    """
    match_ids = {match.id for match in matches}
    totals: dict[str, MatchTotals] = {}
    dropped = 0

    for game in games:
        if game.match_id not in match_ids:
            dropped += 1
            continue

        current = totals.get(game.match_id)
        if current is None:
            current = totals[game.match_id] = MatchTotals()

        current.side_a_points += game.side_a_score
        current.side_b_points += game.side_b_score

        winner = game.winner_side
        if winner == "A":
            current.side_a_wins += 1
            current.total_games += 1
        elif winner == "B":
            current.side_b_wins += 1
            current.total_games += 1

    if dropped:
        logger.debug(f"Ignored {dropped} game(s) referencing matches outside the selection")

    return totals


def group_games_by_match(matches, games) -> dict[str, list]:
    """Known games per match, ordered by game number."""
    match_ids = {match.id for match in matches}
    grouped = defaultdict(list)
    for game in games:
        if game.match_id in match_ids:
            grouped[game.match_id].append(game)
    return {match_id: sorted(rows, key=lambda g: g.game_number) for match_id, rows in grouped.items()}


def is_decided(totals: MatchTotals | None) -> bool:
    """A match with no totals, no games, or level game wins is still pending."""
    return totals is not None and totals.is_decided
