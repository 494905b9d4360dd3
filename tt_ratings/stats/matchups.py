"""
Head-to-head and partnership aggregates for one player.

Each opponent (and, in doubles, each partner) gets a running record built
from the player's decided matches. Only pairings with a configured minimum
sample qualify for the picks: opponents are counted in matches, partners in
games played together.
"""

from collections import defaultdict
from dataclasses import dataclass

from tt_ratings.utils import percentage, safe_ratio


@dataclass(frozen=True)
class MatchupRecord:
    player_id: str
    matches: int
    games: int
    wins: int
    losses: int
    points_for: int
    points_against: int

    @property
    def win_ratio(self) -> float | None:
        return safe_ratio(self.wins, self.matches)

    @property
    def win_pct(self) -> float | None:
        return percentage(self.wins, self.matches)

    @property
    def point_diff(self) -> int:
        return self.points_for - self.points_against


def _empty_record():
    return {
        'matches': 0,
        'games': 0,
        'wins': 0,
        'losses': 0,
        'points_for': 0,
        'points_against': 0,
    }


def _aggregate(player_matches, members) -> dict[str, MatchupRecord]:
    stats = defaultdict(_empty_record)

    for record in player_matches:
        for other_id in members(record):
            entry = stats[other_id]
            entry['matches'] += 1
            entry['games'] += record.games_played
            entry['points_for'] += record.points_for
            entry['points_against'] += record.points_against
            if record.won:
                entry['wins'] += 1
            else:
                entry['losses'] += 1

    return {
        other_id: MatchupRecord(player_id=other_id, **entry)
        for other_id, entry in sorted(stats.items())
    }


def compute_opponent_records(player_matches) -> dict[str, MatchupRecord]:
    """Record against each individual opponent (both members of a doubles pair count)."""
    return _aggregate(player_matches, lambda record: record.opponents)


def compute_partner_records(player_matches) -> dict[str, MatchupRecord]:
    """Record alongside each doubles partner."""
    return _aggregate(player_matches, lambda record: record.partners)


def _qualifying(records, minimum, sample):
    return [r for r in records.values() if r.matches > 0 and getattr(r, sample) >= minimum]


def best_by_win_rate(records: dict, minimum: int, sample: str = "matches") -> MatchupRecord | None:
    """Highest win rate; ties go to the larger sample, then the lower id."""
    candidates = _qualifying(records, minimum, sample)
    if not candidates:
        return None
    return min(candidates, key=lambda r: (-r.win_ratio, -r.matches, r.player_id))


def worst_by_win_rate(records: dict, minimum: int, sample: str = "matches") -> MatchupRecord | None:
    """Lowest win rate; ties go to the larger sample, then the lower id."""
    candidates = _qualifying(records, minimum, sample)
    if not candidates:
        return None
    return min(candidates, key=lambda r: (r.win_ratio, -r.matches, r.player_id))


def most_frequent(records: dict, minimum: int, sample: str = "matches") -> MatchupRecord | None:
    candidates = _qualifying(records, minimum, sample)
    if not candidates:
        return None
    return min(candidates, key=lambda r: (-r.matches, -r.wins, r.player_id))


def most_positive_point_diff(records: dict, minimum: int, sample: str = "matches") -> MatchupRecord | None:
    """Largest positive point differential; None if nobody is in the black."""
    candidates = [r for r in _qualifying(records, minimum, sample) if r.point_diff > 0]
    if not candidates:
        return None
    return min(candidates, key=lambda r: (-r.point_diff, -r.matches, r.player_id))
