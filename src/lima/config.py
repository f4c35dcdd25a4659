"""Parser configuration.

Options can be built directly or loaded from a YAML mapping:

    division_precision: 28
    division_rounding: ROUND_HALF_EVEN
    render_context_lines: 1
"""

import decimal
from decimal import MAX_EMAX, MIN_EMIN, Context
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

ROUNDING_MODES = {
    decimal.ROUND_CEILING,
    decimal.ROUND_DOWN,
    decimal.ROUND_FLOOR,
    decimal.ROUND_HALF_DOWN,
    decimal.ROUND_HALF_EVEN,
    decimal.ROUND_HALF_UP,
    decimal.ROUND_UP,
    decimal.ROUND_05UP,
}


class ParserOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    division_precision: int = Field(default=28, ge=1)  # significant digits kept by "/"
    division_rounding: str = decimal.ROUND_HALF_EVEN
    render_context_lines: int = Field(default=0, ge=0)  # extra lines shown around a diagnostic

    @field_validator("division_rounding")
    @classmethod
    def _known_rounding_mode(cls, value: str) -> str:
        if value not in ROUNDING_MODES:
            raise ValueError(f"unknown rounding mode {value!r}, expected one of {sorted(ROUNDING_MODES)}")
        return value

    def division_context(self) -> Context:
        return Context(
            prec=self.division_precision,
            rounding=self.division_rounding,
            Emax=MAX_EMAX,
            Emin=MIN_EMIN,
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ParserOptions":
        """Load options from a YAML file. An empty file gives the defaults."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping of parser options")
        return cls(**data)
