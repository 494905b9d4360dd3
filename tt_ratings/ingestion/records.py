"""
Store Record Adapters

Turns match-store exports (pandas DataFrames or CSV files) into Match / Game
records, and applies the caller-side selection the store's list queries
support: active flag, date window, match type, competition, and player.
The rating engine never filters on its own; views call select_matches first.

Usage:
    from tt_ratings.ingestion import load_latest_export, matches_from_frame
    matches = matches_from_frame(load_latest_export("matches_*.csv"))
"""

import pandas as pd

from tt_ratings.config import EXPORTS_FOLDER, MATCH_FORMATS, MATCH_TYPES
from tt_ratings.models import Game, Match, is_missing, parse_bool, to_date
from tt_ratings.utils import setup_logging, validate_match_type

# --- Module Logger ---
logger = setup_logging(__name__)

MATCH_REQUIRED_FIELDS = ("id", "match_date", "created_at", "match_type", "match_format")
GAME_REQUIRED_FIELDS = ("match_id", "game_number", "side_a_score", "side_b_score")


class IngestionError(Exception):
    """Custom exception for ingestion errors"""
    pass


class RecordError(IngestionError, ValueError):
    """A store row is missing required fields or carries unknown values"""
    pass


def parse_roster(value) -> tuple:
    """
    Normalise a roster cell to a tuple of player ids.

    Accepts sequences and the text forms stores export arrays as:
    "a,b", "{a,b}" and '["a","b"]'.
    """
    if is_missing(value):
        return ()
    if isinstance(value, str):
        stripped = value.strip().strip("{}[]")
        parts = (part.strip().strip('"').strip("'").strip() for part in stripped.split(","))
        return tuple(part for part in parts if part)
    return tuple(str(player_id) for player_id in value)


def _clean_row(row) -> dict:
    return {key: (None if is_missing(value) else value) for key, value in dict(row).items()}


def _require(row: dict, required, index) -> None:
    missing = [name for name in required if row.get(name) is None]
    if missing:
        raise RecordError(f"Row {index}: missing field(s): {', '.join(missing)}")


def matches_from_frame(df: pd.DataFrame) -> list[Match]:
    """
    Build Match records from a matches export.

    Raises:
        RecordError: If a row lacks required fields or has an unknown type/format
    """
    matches = []
    for index, raw in df.iterrows():
        row = _clean_row(raw)
        _require(row, MATCH_REQUIRED_FIELDS, index)
        if row["match_type"] not in MATCH_TYPES:
            raise RecordError(f"Row {index}: unknown match_type '{row['match_type']}'")
        if row["match_format"] not in MATCH_FORMATS:
            raise RecordError(f"Row {index}: unknown match_format '{row['match_format']}'")

        row["team_a"] = parse_roster(row.get("team_a", row.get("side_a")))
        row["team_b"] = parse_roster(row.get("team_b", row.get("side_b")))
        try:
            row["is_active"] = parse_bool(row.get("is_active"))
        except ValueError as e:
            raise RecordError(f"Row {index}: {e}") from e
        matches.append(Match.from_row(row))

    logger.debug(f"Loaded {len(matches)} match rows")
    return matches


def games_from_frame(df: pd.DataFrame) -> list[Game]:
    """
    Build Game records from a games export.

    Raises:
        RecordError: If a row lacks required fields
    """
    games = []
    for index, raw in df.iterrows():
        row = _clean_row(raw)
        _require(row, GAME_REQUIRED_FIELDS, index)
        try:
            row["is_active"] = parse_bool(row.get("is_active"))
        except ValueError as e:
            raise RecordError(f"Row {index}: {e}") from e
        games.append(Game.from_row(row))

    logger.debug(f"Loaded {len(games)} game rows")
    return games


def roster_from_frame(df: pd.DataFrame | None, include_inactive: bool = False) -> list[str]:
    """Player ids from a profiles export, active profiles only by default."""
    if df is None or df.empty:
        return []
    roster = []
    for index, raw in df.iterrows():
        row = _clean_row(raw)
        if row.get("id") is None:
            continue
        try:
            is_active = parse_bool(row.get("is_active"))
        except ValueError as e:
            raise RecordError(f"Row {index}: {e}") from e
        if not include_inactive and not is_active:
            continue
        roster.append(str(row["id"]))
    return roster


def select_matches(matches, date_from=None, date_to=None, match_type: str | None = None,
                   competition_type: str | None = None, competition_id: str | None = None,
                   player_id: str | None = None, include_inactive: bool = False) -> list[Match]:
    """
    Apply the store's list-query options to an in-memory match set.

    Date bounds are inclusive. Input order is preserved.
    """
    validate_match_type(match_type)
    start = to_date(date_from) if date_from is not None else None
    end = to_date(date_to) if date_to is not None else None

    selected = []
    for match in matches:
        if not include_inactive and not match.is_active:
            continue
        if start is not None and match.match_date < start:
            continue
        if end is not None and match.match_date > end:
            continue
        if match_type is not None and match.match_type != match_type:
            continue
        if competition_type is not None and match.competition_type != competition_type:
            continue
        if competition_id is not None and match.competition_id != competition_id:
            continue
        if player_id is not None and match.side_of(player_id) is None:
            continue
        selected.append(match)
    return selected


def select_games(games, matches, include_inactive: bool = False) -> list[Game]:
    """Games joined to the selected matches (active games only by default)."""
    match_ids = {match.id for match in matches}
    return [
        game for game in games
        if game.match_id in match_ids and (include_inactive or game.is_active)
    ]


def load_latest_export(pattern: str, folder=None) -> pd.DataFrame | None:
    """Read the newest export matching pattern, or None if there is none."""
    target_folder = folder or EXPORTS_FOLDER
    files = sorted(target_folder.glob(pattern))
    if not files:
        logger.warning(f"No files matching {pattern} found in {target_folder}")
        return None
    latest = files[-1]
    logger.info(f"Loading data from {latest}")
    return pd.read_csv(latest, dtype={"id": str, "match_id": str})
