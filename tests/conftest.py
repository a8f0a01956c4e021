"""Shared test fixtures."""

from __future__ import annotations

import pytest

from radar_config import DEFAULT_CATEGORIES, ChartConfig, build_categories
from radar_layout import compute_layout

from tests._data import SAMPLE_CSV, SCENARIO_ANGLES, SCENARIO_MAGNITUDES


@pytest.fixture
def config() -> ChartConfig:
    # code defaults, independent of Configs/config.toml
    return ChartConfig()


@pytest.fixture
def categories():
    entries = [dict(e, angle=a) for e, a in zip(DEFAULT_CATEGORIES, SCENARIO_ANGLES)]
    return build_categories(entries)


@pytest.fixture
def layout(categories, config):
    return compute_layout(categories, SCENARIO_MAGNITUDES, 600, config)


@pytest.fixture
def sample_csv(tmp_path):
    path = tmp_path / "radar.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path
