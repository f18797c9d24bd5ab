"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, ValidationError

from .enums import Shift


class GeoConfig(BaseModel):
    shift_max_km: dict[Shift, PositiveFloat] | None = None
    inner_band_ratio: float | None = Field(default=None, gt=0.0, le=1.0)
    geo_match_threshold: int | None = Field(default=None, ge=0, le=100)
    district_match_cutoff: float | None = Field(default=None, ge=0.0, le=100.0)

    model_config = ConfigDict(extra="forbid")


class NumberingConfig(BaseModel):
    brand_codes: dict[str, str] | None = None

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    geo: GeoConfig = Field(default_factory=GeoConfig)
    numbering: NumberingConfig = Field(default_factory=NumberingConfig)

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        geo_settings = self.geo.model_dump(exclude_none=True)
        if "shift_max_km" in geo_settings:
            geo_settings["shift_max_km"] = {
                Shift(shift): km for shift, km in geo_settings["shift_max_km"].items()
            }
        if geo_settings:
            settings["geo"] = geo_settings
        numbering_settings = self.numbering.model_dump(exclude_none=True)
        if numbering_settings:
            settings["numbering"] = numbering_settings
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
