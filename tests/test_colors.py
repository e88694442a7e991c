import math

import pytest

from config import NO_DATA_COLOR
from models.colors import (
    PALETTE, PALETTE_MIDPOINT, colorize, fixed_range_indices, hex_to_rgb,
    mean_centered_baseline, mean_centered_indices, trimmed_mean,
)
from providers.types import StationRecord
from services.reconciler import parse_weather

NAN = float("nan")


def _station(sid, temp=None, status="0"):
    weather = None
    if temp is not None:
        row = [status, "", "01/01/2024", "12:00", str(temp)]
        weather = parse_weather(row)
    return StationRecord(id=sid, name=sid, province="BG", latitude=45.7, longitude=9.6, weather=weather)


def test_palette_has_25_entries():
    assert len(PALETTE) == 25
    assert PALETTE_MIDPOINT == 12


def test_fixed_range_all_equal_gives_midpoint():
    assert fixed_range_indices([7.0, 7.0, 7.0]) == [12, 12, 12]


def test_fixed_range_linear_mapping():
    assert fixed_range_indices([0.0, 10.0, 20.0]) == [0, 12, 24]
    assert fixed_range_indices([0.0, 1.0, 100.0])[1] == math.floor(1 / 100 * 24)


def test_fixed_range_nan_is_none():
    assert fixed_range_indices([NAN, 3.0, 5.0]) == [None, 0, 24]
    assert fixed_range_indices([NAN]) == [None]
    assert fixed_range_indices([]) == []


def test_trimmed_mean_drops_outliers():
    temps = [20.0] * 20 + [8.0, 40.0]
    assert trimmed_mean(temps) == pytest.approx(20.0)


def test_mean_centered_baseline_and_extremes():
    temps = [20.0] * 20 + [8.0, 40.0]
    assert mean_centered_baseline(temps) == 8
    indices = mean_centered_indices(temps)
    assert indices[0] == 12
    # Exactamente en la base -> paso 0
    assert indices[20] == 0
    # 24 o más grados por encima -> último color
    assert indices[21] == 24


def test_mean_centered_below_baseline_is_step_zero():
    temps = [20.0] * 20 + [-5.0]
    assert mean_centered_indices(temps)[-1] == 0


def test_mean_centered_rounds_half_up():
    # media 12.5 -> 13 -> base 1 (round() de Python daría 12)
    assert mean_centered_baseline([12.0, 13.0]) == 1


def test_mean_centered_without_data():
    assert mean_centered_baseline([NAN]) is None
    assert mean_centered_indices([NAN, NAN]) == [None, None]


def test_colorize_assigns_palette_and_gray():
    stations = [_station("a", 0.0), _station("b", 20.0), _station("c")]
    out = colorize(stations, "fixed_range")
    assert [s.color for s in out] == [PALETTE[0], PALETTE[24], NO_DATA_COLOR]
    # Las originales no se tocan
    assert stations[0].color == NO_DATA_COLOR


def test_colorize_unparsable_temperature_is_gray():
    out = colorize([_station("a", "n/d"), _station("b", 4.0)], "fixed_range")
    assert out[0].color == NO_DATA_COLOR
    assert out[1].color == PALETTE[12]


def test_colorize_ignores_invalid_status():
    out = colorize([_station("a", 50.0, status="X"), _station("b", 4.0), _station("c", 6.0)], "fixed_range")
    assert out[0].color == NO_DATA_COLOR
    assert out[1].color == PALETTE[0]
    assert out[2].color == PALETTE[24]


def test_colorize_rejects_unknown_strategy():
    with pytest.raises(ValueError):
        colorize([], "rainbow")


def test_hex_to_rgb():
    assert hex_to_rgb("#ff8000") == [255, 128, 0]
