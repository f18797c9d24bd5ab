from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from staffreq.config import load_settings, read_config
from staffreq.schemas import Shift
from staffreq.schemas.config import AppConfig, load_config


def test_load_config_to_settings():
    app_config = load_config(
        {
            "geo": {"shift_max_km": {"Night": 12}, "geo_match_threshold": 70},
            "numbering": {"brand_codes": {"marca_bembos": "BMB"}},
        }
    )

    assert isinstance(app_config, AppConfig)
    settings = app_config.to_settings()
    assert settings["geo"]["shift_max_km"] == {Shift.NIGHT: 12.0}
    assert settings["geo"]["geo_match_threshold"] == 70
    assert "inner_band_ratio" not in settings["geo"]
    assert settings["numbering"]["brand_codes"]["marca_bembos"] == "BMB"


def test_empty_config_yields_no_settings():
    assert load_config({}).to_settings() == {}


def test_load_config_rejects_non_mapping():
    with pytest.raises(pydantic.ValidationError):
        load_config(["geo"])


def test_load_config_rejects_unknown_sections():
    with pytest.raises(pydantic.ValidationError):
        load_config({"evaluators": {}})


def test_load_config_rejects_unknown_shift():
    with pytest.raises(pydantic.ValidationError):
        load_config({"geo": {"shift_max_km": {"Graveyard": 5}}})


def test_read_config_from_yaml(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "geo:\n  inner_band_ratio: 0.4\n  district_match_cutoff: 90\n",
        encoding="utf-8",
    )

    app_config = read_config(path)

    assert app_config.geo.inner_band_ratio == pytest.approx(0.4)
    assert load_settings(path) == {"geo": {"inner_band_ratio": 0.4, "district_match_cutoff": 90.0}}
    assert load_settings(None) == {}


@pytest.mark.parametrize("max_km", [0, -5])
def test_load_config_rejects_non_positive_shift_threshold(max_km: float):
    with pytest.raises(pydantic.ValidationError):
        load_config({"geo": {"shift_max_km": {"Morning": max_km}}})
