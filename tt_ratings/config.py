"""
Central configuration for the table tennis ratings engine.

Module-level constants are the documented defaults. Every replay receives an
explicit EloConfig / StatsConfig built from them, so callers (and tests) can
override any subset without touching process-wide state.
"""

import math
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DATA_FOLDER = PROJECT_ROOT / "data"
OUTPUT_FOLDER = DATA_FOLDER / "processed"
EXPORTS_FOLDER = DATA_FOLDER / "raw"

# Store export file patterns
MATCHES_PATTERN = "matches_*.csv"
GAMES_PATTERN = "games_*.csv"
PROFILES_PATTERN = "profiles_*.csv"

# --- Match Vocabulary ---
MATCH_TYPES = frozenset({"singles", "doubles"})
MATCH_FORMATS = ("bo1", "bo3", "bo5", "bo7")
COMPETITION_TYPES = frozenset({"ranked", "tournament"})

# --- Elo System Configuration ---
BASELINE_RATING = 1000  # Starting rating for every player
RATING_FLOOR = 400  # Hard floor: players can never go below this
LOGISTIC_SCALE = 1000  # Rating gap that means 10:1 expected odds
K_FACTOR = 40
DOUBLES_MULTIPLIER = 1.0

# Longer formats carry more signal
FORMAT_WEIGHTS = {"bo1": 0.5, "bo3": 1.0, "bo5": 1.5, "bo7": 2.0}

# --- K Policy Configuration ---
# "fixed": K_FACTOR * format weight (* doubles multiplier)
# "decaying": per-player K from K_MAX toward K_MIN by matches played
K_POLICY = "fixed"
K_POLICIES = frozenset({"fixed", "decaying"})
DECAYING_K_MAX = 64
DECAYING_K_MIN = 16
DECAYING_K_HALF_LIFE = 20

# --- Statistics Thresholds ---
MIN_MATCHES_FOR_ELO = 5  # Leaderboard hides Elo below this
MIN_MATCHUP_MATCHES = 3  # Opponent must be met this often to count
MIN_PARTNERSHIP_GAMES = 3  # Games played together before a partner qualifies

ENV_PREFIX = "TT_"

# --- Logging ---
PACKAGE_LOGGER = "tt_ratings"
LOG_LEVEL = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL", "INFO").strip().upper() or "INFO"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ConfigurationError(ValueError):
    """Raised when a configuration is internally inconsistent."""
    pass


def read_env_number(key: str, fallback: float) -> float:
    """Read a numeric environment variable, falling back when unset or invalid."""
    raw = os.environ.get(key)
    if raw is None or not raw.strip():
        return fallback
    try:
        value = float(raw)
    except ValueError:
        return fallback
    return value if math.isfinite(value) else fallback


def _frozen_weights(weights):
    if weights is None:
        return None
    return MappingProxyType(dict(weights))


@dataclass(frozen=True)
class EloConfig:
    """Numeric constants for one Elo replay."""

    baseline: float = BASELINE_RATING
    floor: float = RATING_FLOOR
    scale: float = LOGISTIC_SCALE
    k_policy: str = K_POLICY
    k_factor: float = K_FACTOR
    k_max: float = DECAYING_K_MAX
    k_min: float = DECAYING_K_MIN
    k_half_life: float = DECAYING_K_HALF_LIFE
    doubles_multiplier: float = DOUBLES_MULTIPLIER
    format_weights: dict = field(default_factory=lambda: dict(FORMAT_WEIGHTS))
    doubles_format_weights: dict | None = None

    def __post_init__(self):
        object.__setattr__(self, "format_weights", _frozen_weights(self.format_weights))
        object.__setattr__(self, "doubles_format_weights", _frozen_weights(self.doubles_format_weights))
        self.validate()

    def validate(self) -> None:
        """
        Reject configurations that cannot produce a meaningful replay.

        Raises:
            ConfigurationError: On the first inconsistency found
        """
        if self.k_policy not in K_POLICIES:
            raise ConfigurationError(
                f"Unknown k_policy: '{self.k_policy}'. "
                f"Allowed values: {', '.join(sorted(K_POLICIES))}"
            )
        for name in ("scale", "k_factor", "k_max", "k_min", "k_half_life", "doubles_multiplier"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")
        if self.k_min > self.k_max:
            raise ConfigurationError(f"k_min ({self.k_min}) exceeds k_max ({self.k_max})")
        if self.floor > self.baseline:
            # New players would start below the floor and be clamped on their first loss
            raise ConfigurationError(
                f"Rating floor ({self.floor}) is above the baseline rating ({self.baseline})"
            )

        tables = [("format_weights", self.format_weights)]
        if self.doubles_format_weights is not None:
            tables.append(("doubles_format_weights", self.doubles_format_weights))
        for table_name, table in tables:
            missing = [fmt for fmt in MATCH_FORMATS if fmt not in table]
            if missing:
                raise ConfigurationError(f"{table_name} is missing format(s): {', '.join(missing)}")
            for fmt, weight in table.items():
                if weight <= 0:
                    raise ConfigurationError(f"{table_name}[{fmt}] must be positive, got {weight}")

    def format_weight(self, match_format: str, match_type: str = "singles") -> float:
        if match_type == "doubles" and self.doubles_format_weights is not None:
            return self.doubles_format_weights[match_format]
        return self.format_weights[match_format]

    @classmethod
    def from_env(cls, environ_prefix: str = ENV_PREFIX, **overrides) -> "EloConfig":
        """
        Build a config from TT_ELO_* environment variables.

        Unset, blank or non-numeric values fall back to the defaults.
        Keyword overrides win over the environment.
        """
        prefix = f"{environ_prefix}ELO_"
        values = {}
        for f in fields(cls):
            if f.name in ("format_weights", "doubles_format_weights"):
                continue
            default = getattr(cls, f.name)
            if f.name == "k_policy":
                raw = os.environ.get(f"{prefix}K_POLICY", "").strip().lower()
                values[f.name] = raw or default
            else:
                values[f.name] = read_env_number(f"{prefix}{f.name.upper()}", default)

        values["format_weights"] = {
            fmt: read_env_number(f"{prefix}WEIGHT_{fmt.upper()}", FORMAT_WEIGHTS[fmt])
            for fmt in MATCH_FORMATS
        }
        doubles_keys = {fmt: f"{prefix}DOUBLES_WEIGHT_{fmt.upper()}" for fmt in MATCH_FORMATS}
        if any(os.environ.get(key, "").strip() for key in doubles_keys.values()):
            values["doubles_format_weights"] = {
                fmt: read_env_number(key, values["format_weights"][fmt])
                for fmt, key in doubles_keys.items()
            }

        values.update(overrides)
        return cls(**values)


@dataclass(frozen=True)
class StatsConfig:
    """Minimum-sample thresholds for the derived statistics."""

    min_matches_for_elo: int = MIN_MATCHES_FOR_ELO
    min_matchup_matches: int = MIN_MATCHUP_MATCHES
    min_partnership_games: int = MIN_PARTNERSHIP_GAMES

    def __post_init__(self):
        for name in ("min_matches_for_elo", "min_matchup_matches", "min_partnership_games"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} cannot be negative, got {getattr(self, name)}")

    @classmethod
    def from_env(cls, environ_prefix: str = ENV_PREFIX, **overrides) -> "StatsConfig":
        prefix = f"{environ_prefix}STATS_"
        values = {
            name: int(read_env_number(f"{prefix}{name.upper()}", getattr(cls, name)))
            for name in ("min_matches_for_elo", "min_matchup_matches", "min_partnership_games")
        }
        values.update(overrides)
        return cls(**values)


DEFAULT_ELO_CONFIG = EloConfig()
DEFAULT_STATS_CONFIG = StatsConfig()
