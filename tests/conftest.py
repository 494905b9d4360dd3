"""
Shared builders for match and game records.
"""

import datetime as dt

import pytest

from tt_ratings.config import EloConfig
from tt_ratings.models import Game, Match

FLAT_WEIGHTS = {"bo1": 1.0, "bo3": 1.0, "bo5": 1.0, "bo7": 1.0}


def build_match(match_id, side_a, side_b, match_date="2025-01-01", created_at=None,
                match_format="bo3", match_type=None, is_active=True, competition_type="ranked"):
    side_a = (side_a,) if isinstance(side_a, str) else tuple(side_a)
    side_b = (side_b,) if isinstance(side_b, str) else tuple(side_b)
    return Match(
        id=match_id,
        match_date=dt.date.fromisoformat(match_date),
        created_at=dt.datetime.fromisoformat(created_at or f"{match_date}T12:00:00"),
        match_type=match_type or ("doubles" if len(side_a) == 2 else "singles"),
        match_format=match_format,
        side_a=side_a,
        side_b=side_b,
        is_active=is_active,
        competition_type=competition_type,
    )


def build_games(match_id, *scores, is_active=True):
    return [
        Game(match_id=match_id, game_number=number, side_a_score=a, side_b_score=b, is_active=is_active)
        for number, (a, b) in enumerate(scores, start=1)
    ]


@pytest.fixture
def make_match():
    return build_match


@pytest.fixture
def make_games():
    return build_games


@pytest.fixture
def flat_config():
    """Classic Elo constants: scale 400, fixed K=32, every format weighted 1."""
    return EloConfig(baseline=1000, floor=400, scale=400, k_factor=32, format_weights=FLAT_WEIGHTS)
