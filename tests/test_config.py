"""Tests for configuration loading and validation."""

import tempfile
from pathlib import Path

import pydantic
import pytest
import yaml

from challenge_ladder.core.config import (
    DB_PATH_ENV,
    MAX_RANK_DIFF,
    MIN_RACE,
    LadderConfig,
    load_config,
)


class TestLadderConfig:
    """Tests for LadderConfig."""

    def test_defaults(self):
        """Test default rules and catalogues."""
        config = LadderConfig()

        assert config.min_race == MIN_RACE == 5
        assert config.max_rank_diff == MAX_RANK_DIFF == 5
        assert config.disciplines == ["8-ball", "9-ball", "10-ball"]
        assert config.venues == {"valley-hub": "Valley Hub", "eagles-4040": "Eagles 4040"}

    def test_defaults_not_shared(self):
        """Test mutable defaults are copied per instance."""
        a = LadderConfig()
        a.disciplines.append("snooker")
        assert "snooker" not in LadderConfig().disciplines

    def test_min_race_must_be_positive(self):
        with pytest.raises(pydantic.ValidationError):
            LadderConfig(min_race=0)

    def test_max_rank_diff_must_be_positive(self):
        with pytest.raises(pydantic.ValidationError):
            LadderConfig(max_rank_diff=0)

    def test_empty_discipline_fails(self):
        with pytest.raises(pydantic.ValidationError, match="Discipline names cannot be empty"):
            LadderConfig(disciplines=["8-ball", " "])

    def test_empty_venue_id_fails(self):
        with pytest.raises(pydantic.ValidationError, match="Venue ids cannot be empty"):
            LadderConfig(venues={"": "Nowhere"})

    def test_venue_name(self):
        config = LadderConfig()
        assert config.venue_name("valley-hub") == "Valley Hub"
        assert config.venue_name("pool-palace") == "pool-palace"

    def test_database_path_env_override(self, monkeypatch):
        """Test the environment overrides the configured database path."""
        config = LadderConfig(database_path="./from-config.duckdb")

        monkeypatch.delenv(DB_PATH_ENV, raising=False)
        assert config.get_database_path() == Path("./from-config.duckdb")

        monkeypatch.setenv(DB_PATH_ENV, "/tmp/from-env.duckdb")
        assert config.get_database_path() == Path("/tmp/from-env.duckdb")


class TestLoadConfig:
    """Tests for YAML loading."""

    def test_load_valid_config(self):
        """Test loading valid YAML config."""
        config_data = {
            "min_race": 7,
            "max_rank_diff": 3,
            "disciplines": ["9-ball"],
            "venues": {"valley-hub": "Valley Hub"},
            "database_path": "./test.duckdb",
        }

        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump(config_data, f)
            f.flush()

            config = load_config(f.name)
            assert config.min_race == 7
            assert config.max_rank_diff == 3
            assert config.disciplines == ["9-ball"]
            assert config.database_path == "./test.duckdb"

    def test_empty_file_uses_defaults(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("")
            f.flush()

            config = load_config(f.name)
            assert config.min_race == MIN_RACE

    def test_invalid_value_fails(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump({"min_race": -2}, f)
            f.flush()

            with pytest.raises(pydantic.ValidationError):
                load_config(f.name)

    def test_missing_file_raises(self):
        """Test missing config file raises error."""
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_config("/nonexistent/path/config.yaml")

    def test_example_config_loads(self):
        """Test the shipped example configuration is valid."""
        example = Path(__file__).resolve().parent.parent / "ladder.example.yaml"

        config = load_config(example)

        assert config == LadderConfig(database_path="./ladder.duckdb")
