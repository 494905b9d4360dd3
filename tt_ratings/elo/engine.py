"""
Elo Rating Engine

Replays decided matches in canonical order and updates a per-player rating
state as each match is processed. Nothing is stored between calls: every
output is rebuilt from scratch from the matches and totals it is given, so
edits, voids and back-dated matches are always reflected correctly.

Three views over the same replay:
- calculate_elo_ratings: final rating per player (leaderboards)
- calculate_elo_match_states: pre/post ratings per decided match
- calculate_elo_deltas_for_player: rating change per match for one player

Usage:
    from tt_ratings.elo import build_match_totals, calculate_elo_ratings
    totals = build_match_totals(matches, games)
    ratings = calculate_elo_ratings(matches, totals, seed_player_ids=roster)
"""

from dataclasses import dataclass
from datetime import date

from tt_ratings.config import DEFAULT_ELO_CONFIG, EloConfig
from tt_ratings.elo.totals import is_decided
from tt_ratings.ordering import order_matches
from tt_ratings.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass
class RatingState:
    rating: float
    matches_played: int = 0


@dataclass(frozen=True)
class MatchRatingUpdate:
    """Ratings around one decided match, keyed by player id."""

    match_id: str
    side_a_ids: tuple
    side_b_ids: tuple
    pre_ratings: dict
    pre_matches: dict
    post_ratings: dict
    expected_a: float
    actual_a: float
    k_a: float
    k_b: float

    def delta_for(self, player_id: str) -> float | None:
        if player_id not in self.post_ratings:
            return None
        return self.post_ratings[player_id] - self.pre_ratings[player_id]

    def side_rating(self, side: str) -> float:
        """Pre-match side rating (mean of members) for "A" or "B"."""
        ids = self.side_a_ids if side == "A" else self.side_b_ids
        return sum(self.pre_ratings[player_id] for player_id in ids) / len(ids)


@dataclass(frozen=True)
class EloPoint:
    match_id: str
    match_date: date
    rating: float
    delta: float


def expected_score(rating_a, rating_b, scale=DEFAULT_ELO_CONFIG.scale):
    """Calculate expected probability of side A beating side B"""
    return 1 / (1 + 10 ** ((rating_b - rating_a) / scale))


def decaying_k(matches_played: int, config: EloConfig) -> float:
    """
    K that decays from k_max toward k_min with the player's experience.

    Halves the distance to k_min every k_half_life matches.
    """
    return config.k_min + (config.k_max - config.k_min) * 0.5 ** (matches_played / config.k_half_life)


def resolve_k(match, member_states, config: EloConfig) -> float:
    """K for one side of a match under the configured policy."""
    weight = config.format_weight(match.match_format, match.match_type)

    if config.k_policy == "decaying":
        side_k = sum(decaying_k(state.matches_played, config) for state in member_states) / len(member_states)
        return side_k * weight

    doubles_multiplier = config.doubles_multiplier if match.match_type == "doubles" else 1
    return config.k_factor * weight * doubles_multiplier


def _mean_rating(states) -> float:
    return sum(state.rating for state in states) / len(states)


class EloReplay:
    """
    One replay over a fixed snapshot of matches.

    Iterating yields a MatchRatingUpdate per decided match in canonical
    order. State lives only on this object and is discarded with it.
    """

    def __init__(self, matches, totals, seed_player_ids=(), config: EloConfig | None = None):
        self.config = config or DEFAULT_ELO_CONFIG
        self.matches = order_matches(matches)
        self.totals = totals
        self.states: dict[str, RatingState] = {}
        self.skipped = 0
        for player_id in seed_player_ids:
            self.ensure_state(player_id)

    def ensure_state(self, player_id: str) -> RatingState:
        state = self.states.get(player_id)
        if state is None:
            state = self.states[player_id] = RatingState(rating=self.config.baseline)
        return state

    def process(self, match) -> MatchRatingUpdate | None:
        """Apply one match; return None when it is pending or has an empty side."""
        totals = self.totals.get(match.id)
        if not is_decided(totals):
            self.skipped += 1
            return None
        if not match.side_a or not match.side_b:
            logger.debug(f"Skipping match {match.id}: empty roster")
            self.skipped += 1
            return None

        config = self.config
        team_a = [self.ensure_state(player_id) for player_id in match.side_a]
        team_b = [self.ensure_state(player_id) for player_id in match.side_b]

        pre_ratings = {}
        pre_matches = {}
        for player_id, state in zip(match.players, team_a + team_b):
            pre_ratings[player_id] = state.rating
            pre_matches[player_id] = state.matches_played

        score_a = totals.side_a_wins / totals.total_games
        score_b = 1 - score_a
        expected_a = expected_score(_mean_rating(team_a), _mean_rating(team_b), config.scale)
        expected_b = 1 - expected_a

        k_a = resolve_k(match, team_a, config)
        k_b = resolve_k(match, team_b, config)
        delta_a = k_a * (score_a - expected_a)
        delta_b = k_b * (score_b - expected_b)

        post_ratings = {}
        for ids, states, delta in ((match.side_a, team_a, delta_a), (match.side_b, team_b, delta_b)):
            for player_id, state in zip(ids, states):
                state.rating = max(config.floor, state.rating + delta)
                state.matches_played += 1
                post_ratings[player_id] = state.rating

        return MatchRatingUpdate(
            match_id=match.id,
            side_a_ids=tuple(match.side_a),
            side_b_ids=tuple(match.side_b),
            pre_ratings=pre_ratings,
            pre_matches=pre_matches,
            post_ratings=post_ratings,
            expected_a=expected_a,
            actual_a=score_a,
            k_a=k_a,
            k_b=k_b,
        )

    def __iter__(self):
        for match in self.matches:
            update = self.process(match)
            if update is not None:
                yield update

    def run(self) -> list[MatchRatingUpdate]:
        updates = list(self)
        logger.debug(
            f"Replayed {len(updates)} decided matches, skipped {self.skipped}, "
            f"{len(self.states)} players rated"
        )
        return updates

    @property
    def ratings(self) -> dict[str, float]:
        return {player_id: state.rating for player_id, state in self.states.items()}


def calculate_elo_ratings(matches, totals, seed_player_ids=(), config: EloConfig | None = None) -> dict[str, float]:
    """
    Final rating per player after replaying every decided match.

    Seeded players with no decided matches keep the baseline rating.
    """
    replay = EloReplay(matches, totals, seed_player_ids, config)
    replay.run()
    return replay.ratings


def calculate_elo_match_states(matches, totals, seed_player_ids=(), config: EloConfig | None = None) -> list[MatchRatingUpdate]:
    """Pre/post ratings and pre-match experience for every decided match, in canonical order."""
    return EloReplay(matches, totals, seed_player_ids, config).run()


def calculate_elo_deltas_for_player(matches, totals, player_id: str, seed_player_ids=(),
                                    config: EloConfig | None = None) -> dict[str, float]:
    """
    Rating change attributable to player_id, keyed by match id.

    The delta is measured after the floor clamp, so summing them onto the
    baseline in canonical order reproduces the player's rating exactly.
    """
    replay = EloReplay(matches, totals, seed_player_ids, config)
    if player_id:
        replay.ensure_state(player_id)

    deltas = {}
    for update in replay:
        delta = update.delta_for(player_id)
        if delta is not None:
            deltas[update.match_id] = delta
    return deltas


def rating_trajectory(matches, deltas: dict, baseline: float = DEFAULT_ELO_CONFIG.baseline) -> list[EloPoint]:
    """
    Rebuild a player's rating series from per-match deltas.

    Seeds at baseline and adds each delta in canonical order, one point per
    match that has a delta.
    """
    rating = baseline
    points = []
    for match in order_matches(matches):
        delta = deltas.get(match.id)
        if delta is None:
            continue
        rating += delta
        points.append(EloPoint(match_id=match.id, match_date=match.match_date, rating=rating, delta=delta))
    return points
