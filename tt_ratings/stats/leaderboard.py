"""
Leaderboard Statistics

One summary row per known player: record, game and point aggregates, and
current Elo. Elo is withheld (None) for players below the minimum-matches
threshold.
"""

from collections import defaultdict
from dataclasses import asdict, dataclass

import pandas as pd

from tt_ratings.config import DEFAULT_ELO_CONFIG, DEFAULT_STATS_CONFIG, EloConfig, StatsConfig
from tt_ratings.elo.engine import calculate_elo_ratings
from tt_ratings.elo.totals import build_match_totals, is_decided
from tt_ratings.models import other_side
from tt_ratings.utils import percentage, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

LEADERBOARD_COLUMNS = [
    'rank', 'player_id', 'elo', 'matches_played', 'wins', 'losses', 'win_pct',
    'games_won', 'games_lost', 'game_diff', 'points_for', 'points_against', 'point_diff',
]


@dataclass(frozen=True)
class LeaderboardRow:
    player_id: str
    matches_played: int
    wins: int
    losses: int
    win_pct: float | None
    games_won: int
    games_lost: int
    game_diff: int
    points_for: int
    points_against: int
    point_diff: int
    elo: float | None
    rank: int | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def _empty_totals():
    return {
        'matches_played': 0,
        'wins': 0,
        'losses': 0,
        'games_won': 0,
        'games_lost': 0,
        'points_for': 0,
        'points_against': 0,
    }


def aggregate_records(matches, totals) -> dict[str, dict]:
    """Per-player win/loss, game and point sums over decided matches."""
    records = defaultdict(_empty_totals)

    for match in matches:
        match_totals = totals.get(match.id)
        if not is_decided(match_totals):
            continue
        winner = match_totals.winner_side
        for side in ("A", "B"):
            opposing = other_side(side)
            for player_id in match.roster(side):
                entry = records[player_id]
                entry['matches_played'] += 1
                entry['wins' if side == winner else 'losses'] += 1
                entry['games_won'] += match_totals.wins_for(side)
                entry['games_lost'] += match_totals.wins_for(opposing)
                entry['points_for'] += match_totals.points_for(side)
                entry['points_against'] += match_totals.points_for(opposing)

    return records


def compute_leaderboard(matches, games, roster_ids=(), totals=None,
                        elo_config: EloConfig | None = None,
                        stats_config: StatsConfig | None = None) -> list[LeaderboardRow]:
    """
    Build leaderboard rows for every roster player and every player seen in a decided match.

    Args:
        matches: Caller-filtered matches
        games: Active games of those matches
        roster_ids: Known player ids; included even with zero matches
        totals: Precomputed match totals (built from games when omitted)
        elo_config: Elo constants
        stats_config: Thresholds (min_matches_for_elo)

    Returns:
        Ranked rows (by Elo) first, then unranked rows by matches played
    """
    elo_config = elo_config or DEFAULT_ELO_CONFIG
    stats_config = stats_config or DEFAULT_STATS_CONFIG

    if totals is None:
        totals = build_match_totals(matches, games)
    ratings = calculate_elo_ratings(matches, totals, seed_player_ids=roster_ids, config=elo_config)
    records = aggregate_records(matches, totals)

    player_ids = set(roster_ids) | set(records)
    rows = []
    for player_id in player_ids:
        entry = records.get(player_id) or _empty_totals()
        played = entry['matches_played']
        show_elo = played >= stats_config.min_matches_for_elo
        rows.append(LeaderboardRow(
            player_id=player_id,
            matches_played=played,
            wins=entry['wins'],
            losses=entry['losses'],
            win_pct=percentage(entry['wins'], played),
            games_won=entry['games_won'],
            games_lost=entry['games_lost'],
            game_diff=entry['games_won'] - entry['games_lost'],
            points_for=entry['points_for'],
            points_against=entry['points_against'],
            point_diff=entry['points_for'] - entry['points_against'],
            elo=ratings.get(player_id, elo_config.baseline) if show_elo else None,
        ))

    ranked = sorted((r for r in rows if r.elo is not None), key=lambda r: (-r.elo, r.player_id))
    unranked = sorted((r for r in rows if r.elo is None), key=lambda r: (-r.matches_played, r.player_id))
    ranked = [
        LeaderboardRow(**{**asdict(row), 'rank': position})
        for position, row in enumerate(ranked, start=1)
    ]

    logger.debug(f"Leaderboard: {len(ranked)} ranked, {len(unranked)} below {stats_config.min_matches_for_elo} matches")
    return ranked + unranked


def leaderboard_frame(rows) -> pd.DataFrame:
    """Leaderboard rows as a DataFrame with a fixed column order."""
    df = pd.DataFrame([row.to_dict() for row in rows], columns=LEADERBOARD_COLUMNS)
    df['rank'] = df['rank'].astype('Int64')
    return df
