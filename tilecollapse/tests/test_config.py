"""Tests for SolverSettings."""

import pytest
from pydantic import ValidationError

from tilecollapse.config import SolverSettings
from tilecollapse.generation.wfc import SelectionPolicy, WFCSolver

ENV_NAMES = [
    "TILECOLLAPSE_GRID_SIZE",
    "TILECOLLAPSE_STEP_INTERVAL",
    "TILECOLLAPSE_SELECTION_POLICY",
    "TILECOLLAPSE_SEED",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Unset settings variables and undo anything load_dotenv adds."""
    for name in ENV_NAMES:
        # setenv first so monkeypatch restores the variable to "unset" on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestDefaults:
    """Test default settings."""

    def test_defaults(self):
        settings = SolverSettings()
        assert settings.grid_size == 10
        assert settings.step_interval == 0.1
        assert settings.selection_policy == SelectionPolicy.BASELINE
        assert settings.seed is None

    def test_settings_are_frozen(self):
        with pytest.raises(ValidationError):
            SolverSettings().grid_size = 5

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            SolverSettings(grid_size=0)
        with pytest.raises(ValidationError):
            SolverSettings(step_interval=-0.5)

    def test_solver_from_settings(self):
        settings = SolverSettings(grid_size=4, seed=3, selection_policy=SelectionPolicy.EXHAUSTIVE)
        solver = WFCSolver.from_settings(settings)
        assert solver.grid.size == 4
        assert solver.selection_policy == SelectionPolicy.EXHAUSTIVE


class TestFromEnv:
    """Test loading settings from the environment."""

    def test_reads_environment(self, clean_env, tmp_path):
        clean_env.setenv("TILECOLLAPSE_GRID_SIZE", "6")
        clean_env.setenv("TILECOLLAPSE_SELECTION_POLICY", "exhaustive")
        clean_env.setenv("TILECOLLAPSE_SEED", "42")

        settings = SolverSettings.from_env(tmp_path / "missing.env")
        assert settings.grid_size == 6
        assert settings.selection_policy == SelectionPolicy.EXHAUSTIVE
        assert settings.seed == 42
        assert settings.step_interval == 0.1

    def test_reads_dotenv_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("TILECOLLAPSE_STEP_INTERVAL=0.25\nTILECOLLAPSE_GRID_SIZE=8\n")

        settings = SolverSettings.from_env(env_file)
        assert settings.step_interval == 0.25
        assert settings.grid_size == 8

    def test_environment_beats_dotenv(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("TILECOLLAPSE_GRID_SIZE=8\n")
        clean_env.setenv("TILECOLLAPSE_GRID_SIZE", "12")

        assert SolverSettings.from_env(env_file).grid_size == 12

    def test_invalid_environment_value(self, clean_env, tmp_path):
        clean_env.setenv("TILECOLLAPSE_SELECTION_POLICY", "sideways")
        with pytest.raises(ValidationError):
            SolverSettings.from_env(tmp_path / "missing.env")
