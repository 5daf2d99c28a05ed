"""Solver settings for tilecollapse.

Settings are an immutable Pydantic model. They can be built directly or
read from the environment (and a .env file) with SolverSettings.from_env().

Environment variables:
    TILECOLLAPSE_GRID_SIZE         Cells per side (default 10)
    TILECOLLAPSE_STEP_INTERVAL     Seconds between runner steps (default 0.1)
    TILECOLLAPSE_SELECTION_POLICY  "baseline" or "exhaustive"
    TILECOLLAPSE_SEED              Integer seed for the solver's random source
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .generation.wfc import DEFAULT_GRID_SIZE, SelectionPolicy

ENV_PREFIX = "TILECOLLAPSE_"
DEFAULT_STEP_INTERVAL = 0.1  # One step per 100 ms keeps the fill visible


class SolverSettings(BaseModel):
    """Configuration shared by the solver and its runner."""

    model_config = ConfigDict(frozen=True)

    grid_size: int = Field(default=DEFAULT_GRID_SIZE, ge=1)
    step_interval: float = Field(default=DEFAULT_STEP_INTERVAL, ge=0.0)
    selection_policy: SelectionPolicy = SelectionPolicy.BASELINE
    seed: int | None = None

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> SolverSettings:
        """Build settings from TILECOLLAPSE_* environment variables.

        Values in ``env_file`` (or a .env found by python-dotenv) are loaded
        first but never override variables already set in the environment.
        Unset variables fall back to the field defaults.

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value.
        """
        load_dotenv(env_file)

        values: dict[str, str] = {}
        for name in cls.model_fields:
            raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip() != "":
                values[name] = raw.strip()

        return cls.model_validate(values)
