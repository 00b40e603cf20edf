"""Configuration schemas and loading for the challenge ladder."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

MIN_RACE = 5
MAX_RANK_DIFF = 5

DEFAULT_DISCIPLINES = ["8-ball", "9-ball", "10-ball"]
DEFAULT_VENUES = {
    "valley-hub": "Valley Hub",
    "eagles-4040": "Eagles 4040",
}

DB_PATH_ENV = "LADDER_DB_PATH"


class LadderConfig(BaseModel):
    """Complete ladder configuration.

    Attributes:
        min_race: Minimum race length accepted when a challenge is created.
        max_rank_diff: Maximum rank distance between challenger and challenged.
        disciplines: Allowed discipline names. Empty list accepts any discipline.
        venues: Venue catalogue keyed by venue id. Empty mapping accepts any venue.
        database_path: DuckDB file backing the ladder store.
        output_dir: Directory for exported standings.
    """

    min_race: int = Field(default=MIN_RACE, ge=1)
    max_rank_diff: int = Field(default=MAX_RANK_DIFF, ge=1)
    disciplines: list[str] = Field(default_factory=lambda: list(DEFAULT_DISCIPLINES))
    venues: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_VENUES))
    database_path: str = "./ladder.duckdb"
    output_dir: str = "./reports"

    @field_validator("disciplines")
    @classmethod
    def validate_disciplines(cls, v: list[str]) -> list[str]:
        """Ensure discipline names are non-empty strings."""
        for name in v:
            if not name or not name.strip():
                msg = "Discipline names cannot be empty"
                raise ValueError(msg)
        return v

    @field_validator("venues")
    @classmethod
    def validate_venues(cls, v: dict[str, str]) -> dict[str, str]:
        for venue_id in v:
            if not venue_id or not venue_id.strip():
                msg = "Venue ids cannot be empty"
                raise ValueError(msg)
        return v

    def get_database_path(self) -> Path:
        """Get database path from environment or config."""
        return Path(os.environ.get(DB_PATH_ENV) or self.database_path)

    def venue_name(self, venue_id: str) -> str:
        """Display name for a venue id, falling back to the id itself."""
        return self.venues.get(venue_id, venue_id)


def load_config(path: str | Path) -> LadderConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Validated LadderConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValidationError: If config is invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open() as f:
        data = yaml.safe_load(f) or {}

    return LadderConfig.model_validate(data)
