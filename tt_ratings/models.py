"""
Record types consumed by the ratings engine.

Match and Game mirror the rows handed over by the match store. They are
read-only inputs; MatchTotals is derived per replay and never persisted.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone

import pandas as pd

from tt_ratings.config import MATCH_FORMATS

FORMAT_MAX_GAMES = {fmt: int(fmt[2:]) for fmt in MATCH_FORMATS}
_TRUE_STRINGS = frozenset({"true", "t", "1", "yes", "y"})
_FALSE_STRINGS = frozenset({"false", "f", "0", "no", "n", ""})


def other_side(side: str) -> str:
    return "B" if side == "A" else "A"


def is_missing(value) -> bool:
    """True for the empty-cell markers stores and pandas produce."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return value is pd.NaT or value is pd.NA


def parse_bool(value, default: bool = True) -> bool:
    """
    Read a flag cell; empty cells fall back to default.

    Raises:
        ValueError: If a string is not a recognised boolean spelling
    """
    if is_missing(value):
        return default
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    return bool(value)


def to_date(value) -> date:
    """Coerce a store value (ISO string, Timestamp, datetime) to a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def to_timestamp(value) -> datetime:
    """Coerce a store value to a naive UTC datetime so all rows compare cleanly."""
    stamp = pd.Timestamp(value)
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert(timezone.utc).tz_localize(None)
    return stamp.to_pydatetime()


def _roster(value) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return tuple(str(player_id) for player_id in value)


@dataclass(frozen=True)
class Match:
    id: str
    match_date: date
    created_at: datetime
    match_type: str
    match_format: str
    side_a: tuple
    side_b: tuple
    is_active: bool = True
    competition_type: str = "ranked"
    competition_id: str | None = None

    @property
    def max_games(self) -> int:
        return FORMAT_MAX_GAMES[self.match_format]

    @property
    def players(self) -> tuple:
        return self.side_a + self.side_b

    def side_of(self, player_id: str) -> str | None:
        """Return "A" or "B" for a participant, None otherwise."""
        if player_id in self.side_a:
            return "A"
        if player_id in self.side_b:
            return "B"
        return None

    def roster(self, side: str) -> tuple:
        return self.side_a if side == "A" else self.side_b

    @classmethod
    def from_row(cls, row) -> "Match":
        """
        Build a Match from a store row.

        Accepts either team_a/team_b (roster view) or side_a/side_b keys.
        Cached win/loss columns on the row are ignored.
        """
        side_a = row.get("team_a", row.get("side_a"))
        side_b = row.get("team_b", row.get("side_b"))
        competition_id = row.get("competition_id")
        return cls(
            id=str(row["id"]),
            match_date=to_date(row["match_date"]),
            created_at=to_timestamp(row["created_at"]),
            match_type=row["match_type"],
            match_format=row["match_format"],
            side_a=_roster(side_a),
            side_b=_roster(side_b),
            is_active=parse_bool(row.get("is_active")),
            competition_type=row.get("competition_type") or "ranked",
            competition_id=str(competition_id) if competition_id else None,
        )


@dataclass(frozen=True)
class Game:
    match_id: str
    game_number: int
    side_a_score: int
    side_b_score: int
    is_active: bool = True

    @property
    def winner_side(self) -> str | None:
        if self.side_a_score > self.side_b_score:
            return "A"
        if self.side_b_score > self.side_a_score:
            return "B"
        return None

    def score_for(self, side: str) -> int:
        return self.side_a_score if side == "A" else self.side_b_score

    @classmethod
    def from_row(cls, row) -> "Game":
        return cls(
            match_id=str(row["match_id"]),
            game_number=int(row["game_number"]),
            side_a_score=int(row["side_a_score"]),
            side_b_score=int(row["side_b_score"]),
            is_active=parse_bool(row.get("is_active")),
        )


@dataclass
class MatchTotals:
    side_a_wins: int = 0
    side_b_wins: int = 0
    side_a_points: int = 0
    side_b_points: int = 0
    total_games: int = 0

    @property
    def is_decided(self) -> bool:
        """At least one completed game and a game-count leader."""
        return self.total_games > 0 and self.side_a_wins != self.side_b_wins

    @property
    def winner_side(self) -> str | None:
        if not self.is_decided:
            return None
        return "A" if self.side_a_wins > self.side_b_wins else "B"

    def wins_for(self, side: str) -> int:
        return self.side_a_wins if side == "A" else self.side_b_wins

    def points_for(self, side: str) -> int:
        return self.side_a_points if side == "A" else self.side_b_points
