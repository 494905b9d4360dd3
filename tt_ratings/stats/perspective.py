"""
Player-perspective view of decided matches.

Turns side A / side B rows into "for / against" records for one player so
the statistics modules never have to branch on which side the player sat.
"""

from dataclasses import dataclass

from tt_ratings.elo.totals import is_decided
from tt_ratings.models import Match, other_side
from tt_ratings.ordering import order_matches

DEUCE_MIN_SCORE = 10
DEUCE_MARGIN = 2


def is_deuce(score_for: int, score_against: int) -> bool:
    """A game that went past 10-10 and was settled by exactly two points."""
    return min(score_for, score_against) >= DEUCE_MIN_SCORE and abs(score_for - score_against) == DEUCE_MARGIN


@dataclass(frozen=True)
class PlayerMatch:
    match: Match
    side: str
    partners: tuple
    opponents: tuple
    won: bool
    games_won: int
    games_lost: int
    points_for: int
    points_against: int
    games: tuple  # (score_for, score_against) per completed game, by game number

    @property
    def match_id(self) -> str:
        return self.match.id

    @property
    def games_played(self) -> int:
        return self.games_won + self.games_lost

    @property
    def point_margin(self) -> int:
        return self.points_for - self.points_against

    @property
    def is_straight_win(self) -> bool:
        return self.won and self.games_lost == 0

    @property
    def went_the_distance(self) -> bool:
        """The format's final possible game was played."""
        return self.games_played == self.match.max_games

    @property
    def first_game_won(self) -> bool | None:
        if not self.games:
            return None
        score_for, score_against = self.games[0]
        return score_for > score_against


def build_player_matches(player_id: str, matches, totals, games_by_match=None) -> list[PlayerMatch]:
    """
    Decided matches involving player_id, in canonical order.

    Args:
        player_id: Target player
        matches: Caller-filtered match set (may include other players' matches)
        totals: dict of match_id -> MatchTotals
        games_by_match: Optional dict of match_id -> ordered games
    """
    games_by_match = games_by_match or {}
    records = []

    for match in order_matches(matches):
        side = match.side_of(player_id)
        if side is None:
            continue
        match_totals = totals.get(match.id)
        if not is_decided(match_totals):
            continue

        opposing = other_side(side)
        game_scores = tuple(
            (game.score_for(side), game.score_for(opposing))
            for game in games_by_match.get(match.id, ())
            if game.winner_side is not None
        )

        records.append(PlayerMatch(
            match=match,
            side=side,
            partners=tuple(p for p in match.roster(side) if p != player_id),
            opponents=tuple(match.roster(opposing)),
            won=match_totals.winner_side == side,
            games_won=match_totals.wins_for(side),
            games_lost=match_totals.wins_for(opposing),
            points_for=match_totals.points_for(side),
            points_against=match_totals.points_for(opposing),
            games=game_scores,
        ))

    return records
