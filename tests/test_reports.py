"""
Tests for the leaderboard report export.
"""

import pandas as pd
import pytest

from tt_ratings.config import StatsConfig
from tt_ratings.reports import process_exports


@pytest.fixture
def exports(tmp_path):
    raw = tmp_path / "raw"
    raw.mkdir()
    pd.DataFrame({
        'id': ['m1', 'm2', 'm3', 'm4'],
        'match_date': ['2025-01-01', '2025-01-02', '2025-01-03', '2025-01-04'],
        'created_at': ['2025-01-01T10:00:00Z'] * 4,
        'match_type': ['singles', 'singles', 'doubles', 'singles'],
        'match_format': ['bo3', 'bo3', 'bo1', 'bo3'],
        'team_a': ['p1', 'p2', 'p1,p2', 'p1'],
        'team_b': ['p2', 'p3', 'p3,p4', 'p3'],
        'is_active': [True, True, True, False],
    }).to_csv(raw / "matches_20250104.csv", index=False)
    pd.DataFrame({
        'match_id': ['m1', 'm1', 'm2', 'm2', 'm3', 'm4', 'm4'],
        'game_number': [1, 2, 1, 2, 1, 1, 2],
        'side_a_score': [11, 11, 11, 11, 11, 11, 11],
        'side_b_score': [4, 6, 9, 7, 13, 0, 0],
        'is_active': [True] * 7,
    }).to_csv(raw / "games_20250104.csv", index=False)
    pd.DataFrame({
        'id': ['p1', 'p2', 'p3', 'p4', 'p5'],
        'is_active': [True, True, True, True, False],
    }).to_csv(raw / "profiles_20250104.csv", index=False)
    return tmp_path


class TestProcessExports:
    """Tests for process_exports function."""

    def test_writes_one_board_per_match_type(self, exports):
        out = exports / "processed"
        boards = process_exports(exports / "raw", out, stats_config=StatsConfig(min_matches_for_elo=1))

        assert set(boards) == {"singles", "doubles"}
        # Stamp comes from the latest active match (m4 is inactive)
        singles = pd.read_csv(out / "leaderboard_singles_20250103.csv")
        doubles = pd.read_csv(out / "leaderboard_doubles_20250103.csv")

        assert len(singles) == 4  # three players plus p4 from the roster
        assert singles.loc[0, 'player_id'] == 'p1'
        assert singles.set_index('player_id').loc['p4', 'matches_played'] == 0
        assert set(doubles.loc[doubles['rank'].notna(), 'player_id']) == {'p1', 'p2', 'p3', 'p4'}

    def test_old_boards_are_cleaned_up(self, exports):
        out = exports / "processed"
        out.mkdir()
        (out / "leaderboard_singles_20240101.csv").write_text("stale")

        process_exports(exports / "raw", out)

        assert not (out / "leaderboard_singles_20240101.csv").exists()
        assert (out / "leaderboard_singles_20250103.csv").exists()

    def test_missing_exports(self, tmp_path):
        assert process_exports(tmp_path, tmp_path / "processed") == {}
