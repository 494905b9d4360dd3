"""
Player Statistics

Derived statistics for one player over a caller-filtered match set:
record, game and point aggregates, margins, deciding/deuce/comeback
counts, streaks and form, Elo trajectory, and opponent/partner matchups.

Everything is recomputed from the match, game and Elo inputs on each call.
Ratios with a zero denominator are None rather than an error.

Usage:
    from tt_ratings.stats import compute_player_stats
    stats = compute_player_stats("p1", matches, games, roster_ids=roster)
"""

from dataclasses import asdict, dataclass, field
from datetime import date

import numpy as np

from tt_ratings.config import DEFAULT_ELO_CONFIG, DEFAULT_STATS_CONFIG, EloConfig, StatsConfig
from tt_ratings.elo.engine import EloPoint, calculate_elo_match_states
from tt_ratings.elo.totals import build_match_totals, group_games_by_match
from tt_ratings.models import other_side
from tt_ratings.stats.matchups import (
    MatchupRecord,
    best_by_win_rate,
    compute_opponent_records,
    compute_partner_records,
    most_frequent,
    most_positive_point_diff,
    worst_by_win_rate,
)
from tt_ratings.stats.perspective import build_player_matches, is_deuce
from tt_ratings.utils import percentage, safe_ratio, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class StreakInfo:
    kind: str | None = None  # "W", "L", or None before any decided match
    length: int = 0


@dataclass(frozen=True)
class RatedResult:
    match_id: str
    match_date: date
    opponent_ids: tuple
    opponent_rating: float


@dataclass
class PlayerStats:
    player_id: str

    # Record
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    win_pct: float | None = None

    # Games
    games_won: int = 0
    games_lost: int = 0
    game_diff: int = 0
    game_win_pct: float | None = None

    # Points
    points_for: int = 0
    points_against: int = 0
    point_diff: int = 0
    avg_point_diff_per_game: float | None = None
    avg_point_diff_per_match: float | None = None

    # Margins (match point differential)
    avg_win_margin: float | None = None
    avg_loss_margin: float | None = None
    best_win_margin: int | None = None
    worst_loss_margin: int | None = None
    straight_game_wins: int = 0

    # Deciding games, comebacks, deuces
    deciding_wins: int = 0
    deciding_losses: int = 0
    deciding_win_pct: float | None = None
    comeback_wins: int = 0
    blown_leads: int = 0
    deuce_games: int = 0
    deuce_wins: int = 0
    deuce_losses: int = 0
    deuce_win_pct: float | None = None

    # Streaks and form
    current_streak: StreakInfo = field(default_factory=StreakInfo)
    longest_win_streak: int = 0
    longest_loss_streak: int = 0
    wins_last_5: int = 0
    wins_last_10: int = 0

    # Elo
    current_elo: float | None = None
    highest_elo: float | None = None
    lowest_elo: float | None = None
    elo_trajectory: list[EloPoint] = field(default_factory=list)
    elo_deltas: dict = field(default_factory=dict)
    last_elo_delta: float | None = None
    last_10_elo_delta: float | None = None
    avg_elo_delta: float | None = None
    toughest_win: RatedResult | None = None

    # Matchups
    opponents: dict = field(default_factory=dict)
    best_opponent: MatchupRecord | None = None
    worst_opponent: MatchupRecord | None = None
    partners: dict = field(default_factory=dict)
    most_frequent_partner: MatchupRecord | None = None
    best_partner: MatchupRecord | None = None
    worst_partner: MatchupRecord | None = None
    most_positive_partner: MatchupRecord | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def _mean(values) -> float | None:
    if not values:
        return None
    return float(np.mean(values))


def compute_streaks(outcomes) -> tuple[StreakInfo, int, int]:
    """
    Scan win/loss outcomes in chronological order.

    Returns:
        (current streak, longest win streak, longest loss streak)
    """
    run_kind = None
    run_length = 0
    longest = {"W": 0, "L": 0}

    for won in outcomes:
        kind = "W" if won else "L"
        if kind == run_kind:
            run_length += 1
        else:
            run_kind, run_length = kind, 1
        longest[kind] = max(longest[kind], run_length)

    return StreakInfo(kind=run_kind, length=run_length), longest["W"], longest["L"]


def _apply_record(stats: PlayerStats, player_matches) -> None:
    stats.matches_played = len(player_matches)
    stats.wins = sum(1 for r in player_matches if r.won)
    stats.losses = stats.matches_played - stats.wins
    stats.win_pct = percentage(stats.wins, stats.matches_played)

    stats.games_won = sum(r.games_won for r in player_matches)
    stats.games_lost = sum(r.games_lost for r in player_matches)
    stats.game_diff = stats.games_won - stats.games_lost
    games_played = stats.games_won + stats.games_lost
    stats.game_win_pct = percentage(stats.games_won, games_played)

    stats.points_for = sum(r.points_for for r in player_matches)
    stats.points_against = sum(r.points_against for r in player_matches)
    stats.point_diff = stats.points_for - stats.points_against
    stats.avg_point_diff_per_game = safe_ratio(stats.point_diff, games_played)
    stats.avg_point_diff_per_match = safe_ratio(stats.point_diff, stats.matches_played)


def _apply_margins(stats: PlayerStats, player_matches) -> None:
    win_margins = [r.point_margin for r in player_matches if r.won]
    loss_margins = [-r.point_margin for r in player_matches if not r.won]

    stats.avg_win_margin = _mean(win_margins)
    stats.avg_loss_margin = _mean(loss_margins)
    stats.best_win_margin = max(win_margins) if win_margins else None
    stats.worst_loss_margin = max(loss_margins) if loss_margins else None
    stats.straight_game_wins = sum(1 for r in player_matches if r.is_straight_win)


def _apply_game_detail(stats: PlayerStats, player_matches) -> None:
    deciders = [r for r in player_matches if r.went_the_distance]
    stats.deciding_wins = sum(1 for r in deciders if r.won)
    stats.deciding_losses = len(deciders) - stats.deciding_wins
    stats.deciding_win_pct = percentage(stats.deciding_wins, len(deciders))

    # Outcome differs from the first game played
    stats.comeback_wins = sum(1 for r in player_matches if r.won and r.first_game_won is False)
    stats.blown_leads = sum(1 for r in player_matches if not r.won and r.first_game_won is True)

    for record in player_matches:
        for score_for, score_against in record.games:
            if is_deuce(score_for, score_against):
                stats.deuce_games += 1
                if score_for > score_against:
                    stats.deuce_wins += 1
                else:
                    stats.deuce_losses += 1
    stats.deuce_win_pct = percentage(stats.deuce_wins, stats.deuce_games)


def _apply_form(stats: PlayerStats, player_matches) -> None:
    outcomes = [r.won for r in player_matches]
    stats.current_streak, stats.longest_win_streak, stats.longest_loss_streak = compute_streaks(outcomes)
    stats.wins_last_5 = sum(outcomes[-5:])
    stats.wins_last_10 = sum(outcomes[-10:])


def _apply_elo(stats: PlayerStats, player_matches, updates_by_match, baseline) -> None:
    trajectory = []
    toughest = None

    for record in player_matches:
        update = updates_by_match.get(record.match_id)
        if update is None:
            continue
        trajectory.append(EloPoint(
            match_id=record.match_id,
            match_date=record.match.match_date,
            rating=update.post_ratings[stats.player_id],
            delta=update.delta_for(stats.player_id),
        ))
        if record.won:
            opponent_rating = update.side_rating(other_side(record.side))
            if toughest is None or opponent_rating > toughest.opponent_rating:
                toughest = RatedResult(
                    match_id=record.match_id,
                    match_date=record.match.match_date,
                    opponent_ids=record.opponents,
                    opponent_rating=opponent_rating,
                )

    deltas = [point.delta for point in trajectory]
    ratings = [point.rating for point in trajectory]

    stats.elo_trajectory = trajectory
    stats.elo_deltas = {point.match_id: point.delta for point in trajectory}
    stats.current_elo = ratings[-1] if ratings else baseline
    # Series starts at the seeded baseline
    series = [baseline] + ratings
    stats.highest_elo = max(series)
    stats.lowest_elo = min(series)
    stats.last_elo_delta = deltas[-1] if deltas else None
    stats.last_10_elo_delta = float(sum(deltas[-10:])) if deltas else None
    stats.avg_elo_delta = _mean(deltas)
    stats.toughest_win = toughest


def _apply_matchups(stats: PlayerStats, player_matches, config: StatsConfig) -> None:
    stats.opponents = compute_opponent_records(player_matches)
    stats.best_opponent = best_by_win_rate(stats.opponents, config.min_matchup_matches)
    stats.worst_opponent = worst_by_win_rate(stats.opponents, config.min_matchup_matches)

    doubles = [r for r in player_matches if r.partners]
    stats.partners = compute_partner_records(doubles)
    threshold = config.min_partnership_games
    stats.most_frequent_partner = most_frequent(stats.partners, threshold, sample="games")
    stats.best_partner = best_by_win_rate(stats.partners, threshold, sample="games")
    stats.worst_partner = worst_by_win_rate(stats.partners, threshold, sample="games")
    stats.most_positive_partner = most_positive_point_diff(stats.partners, threshold, sample="games")


def compute_player_stats(player_id: str, matches, games, roster_ids=(), totals=None, match_states=None,
                         elo_config: EloConfig | None = None,
                         stats_config: StatsConfig | None = None) -> PlayerStats:
    """
    Compute the full statistics record for one player.

    Args:
        player_id: Target player
        matches: Caller-filtered matches (date window, match type); the whole
                 set is replayed for Elo, not only the player's matches
        games: Active games of those matches
        roster_ids: Known player ids to seed at baseline
        totals: Precomputed match totals (built from games when omitted)
        match_states: Precomputed Elo trace (replayed when omitted)
        elo_config: Elo constants (defaults when omitted)
        stats_config: Minimum-sample thresholds (defaults when omitted)

    Returns:
        PlayerStats for player_id
    """
    elo_config = elo_config or DEFAULT_ELO_CONFIG
    stats_config = stats_config or DEFAULT_STATS_CONFIG

    if totals is None:
        totals = build_match_totals(matches, games)
    if match_states is None:
        seeds = tuple(roster_ids) + (player_id,)
        match_states = calculate_elo_match_states(matches, totals, seed_player_ids=seeds, config=elo_config)

    updates_by_match = {update.match_id: update for update in match_states}
    games_by_match = group_games_by_match(matches, games)
    player_matches = build_player_matches(player_id, matches, totals, games_by_match)

    stats = PlayerStats(player_id=player_id)
    _apply_record(stats, player_matches)
    _apply_margins(stats, player_matches)
    _apply_game_detail(stats, player_matches)
    _apply_form(stats, player_matches)
    _apply_elo(stats, player_matches, updates_by_match, elo_config.baseline)
    _apply_matchups(stats, player_matches, stats_config)

    logger.debug(f"Computed stats for {player_id}: {stats.wins}-{stats.losses} over {stats.matches_played} matches")
    return stats
