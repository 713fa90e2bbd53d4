"""Generation settings for dungen.

GenerationConfig is a frozen pydantic model. Values come from keyword
arguments, or from DUNGEN_* environment variables via from_env(). The CLI
loads a .env file before calling from_env().
"""

from __future__ import annotations

import os
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "DUNGEN_"

RulesetName = Literal["simple", "dungeon"]


class GenerationConfig(BaseModel):
    """Settings for one map generation request."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=10, ge=1)
    height: int = Field(default=15, ge=1)
    max_iterations: int = Field(default=10000, ge=1)
    max_attempts: int = Field(default=1, ge=1)  # Fresh grids to try before failing
    seed: int | None = None  # None = nondeterministic
    ruleset: RulesetName = "simple"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> GenerationConfig:
        """Build a config from DUNGEN_* variables.

        Unset or empty variables keep the defaults; keyword overrides that
        are not None win over the environment.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for field_name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{field_name.upper()}", "").strip()
            if raw:
                values[field_name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)

    def with_updates(self, **updates) -> GenerationConfig:
        """Return a validated copy with some fields replaced."""
        return type(self).model_validate({**self.model_dump(), **updates})
