import math
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from models.projection import project
from providers.types import StationRecord
from services.options import PipelineOptions
from services.reconciler import parse_timestamp, parse_weather, reconcile

ROME = ZoneInfo("Europe/Rome")


def test_valid_row_produces_record(make_metadata, make_measurement, noon_2024):
    out = reconcile([make_metadata()], [make_measurement(o9="60")], now=noon_2024)
    assert len(out) == 1
    s = out[0]
    assert s.id == "101"
    assert s.name == "Test"
    assert s.province == "BG"
    assert s.altitude == 500.0
    assert (s.latitude, s.longitude) == project(100, 200)
    assert s.weather is not None
    assert s.weather.current_temp == 5.5
    assert s.weather.humidity == 60.0


@pytest.mark.parametrize("x, y", [("-1", "200"), ("100", "-1"), ("-1", "-1"), (-1, 10)])
def test_disabled_pixel_is_excluded(make_metadata, make_measurement, noon_2024, x, y):
    out = reconcile([make_metadata(x=x, y=y)], [make_measurement()], now=noon_2024)
    assert out == []


def test_withdrawn_sensor_is_excluded(make_metadata, make_measurement, noon_2024):
    out = reconcile([make_metadata()], [make_measurement(status="X")], now=noon_2024)
    assert out == []


def test_stale_reading_is_excluded(make_metadata, make_measurement):
    now = datetime(2024, 1, 2, 0, 1, tzinfo=ROME)  # 12h01 después de las 12:00
    assert reconcile([make_metadata()], [make_measurement()], now=now) == []


def test_reading_within_threshold_is_kept(make_metadata, make_measurement):
    now = datetime(2024, 1, 1, 23, 59, tzinfo=ROME)
    assert len(reconcile([make_metadata()], [make_measurement()], now=now)) == 1


def test_recency_across_dst_change_uses_real_elapsed_time(make_metadata, make_measurement):
    # 23:30 CET -> 12:15 CEST del día siguiente son 11h45 reales
    measurement = make_measurement(date="30/03/2024", time="23:30")
    now = datetime(2024, 3, 31, 12, 15, tzinfo=ROME)
    assert len(reconcile([make_metadata()], [measurement], now=now)) == 1

    later = datetime(2024, 3, 31, 12, 45, tzinfo=ROME)
    assert reconcile([make_metadata()], [measurement], now=later) == []


def test_recency_filter_can_be_disabled(make_metadata, make_measurement):
    now = datetime(2030, 1, 1, tzinfo=ROME)
    opts = PipelineOptions(recency_filter=False)
    assert len(reconcile([make_metadata()], [make_measurement()], opts, now=now)) == 1


def test_unparsable_date_counts_as_stale(make_metadata, make_measurement, noon_2024):
    out = reconcile([make_metadata()], [make_measurement(date="--/--/----")], now=noon_2024)
    assert out == []


def test_naive_now_is_treated_as_local(make_metadata, make_measurement):
    out = reconcile([make_metadata()], [make_measurement()], now=datetime(2024, 1, 1, 13, 0))
    assert len(out) == 1


def test_strict_policy_drops_missing_temperature(make_metadata, make_measurement, noon_2024):
    rows = [make_measurement(temp="")]
    assert reconcile([make_metadata()], rows, PipelineOptions(strict_temperature=True), now=noon_2024) == []


def test_lenient_policy_keeps_missing_temperature(make_metadata, make_measurement, noon_2024):
    out = reconcile([make_metadata()], [make_measurement(temp="n.d.")], now=noon_2024)
    assert len(out) == 1
    assert math.isnan(out[0].weather.current_temp)


def test_missing_measurement_row(make_metadata, make_measurement, noon_2024):
    metadata = [make_metadata(), make_metadata(sid="102")]
    measurements = [make_measurement()]

    lenient = reconcile(metadata, measurements, now=noon_2024)
    assert [s.id for s in lenient] == ["101", "102"]
    assert lenient[1].weather is None

    required = reconcile(metadata, measurements, PipelineOptions(require_weather=True), now=noon_2024)
    assert [s.id for s in required] == ["101"]

    strict = reconcile(metadata, measurements, PipelineOptions(strict_temperature=True), now=noon_2024)
    assert [s.id for s in strict] == ["101"]


def test_positional_join_pairs_by_index(make_metadata, make_measurement, noon_2024):
    metadata = [make_metadata(sid="A"), make_metadata(sid="B")]
    measurements = [make_measurement(temp="1"), make_measurement(temp="2")]
    out = reconcile(metadata, measurements, now=noon_2024)
    assert [(s.id, s.weather.current_temp) for s in out] == [("A", 1.0), ("B", 2.0)]


def test_garbage_rows_are_skipped(make_metadata, make_measurement, noon_2024):
    metadata = ["not a row", None, [], make_metadata(sid="OK"), make_metadata(sid="BAD", x="abc")]
    measurements = [make_measurement()] * 5
    out = reconcile(metadata, measurements, now=noon_2024)
    assert [s.id for s in out] == ["OK"]


def test_non_list_inputs_do_not_raise():
    assert reconcile(None, None) == []
    assert reconcile("oops", {}) == []


def test_id_join_uses_fallback_identity(make_metadata, make_measurement, noon_2024):
    fallback = [
        StationRecord(id="202", name="Conosciuta", province="MI", latitude=45.0, longitude=9.0, altitude=120.0),
        StationRecord(id="999", name="Assente", province="CO", latitude=46.0, longitude=9.1),
    ]
    metadata = [make_metadata(sid="101"), make_metadata(sid="202", name="Dal feed", altitude="")]
    measurements = [make_measurement(temp="1"), make_measurement(temp="2")]
    out = reconcile(metadata, measurements, PipelineOptions(join="id"), now=noon_2024, fallback=fallback)
    assert len(out) == 1
    s = out[0]
    assert s.id == "202"
    assert s.name == "Dal feed"
    assert (s.latitude, s.longitude) == (45.0, 9.0)
    assert s.altitude == 120.0
    assert s.weather.current_temp == 2.0


def test_id_join_still_applies_pixel_sentinel(make_metadata, make_measurement, noon_2024):
    fallback = [StationRecord(id="202", name="x", province="MI", latitude=45.0, longitude=9.0)]
    out = reconcile(
        [make_metadata(sid="202", x="-1")], [make_measurement()],
        PipelineOptions(join="id"), now=noon_2024, fallback=fallback,
    )
    assert out == []


def test_id_join_without_fallback_is_empty(make_metadata, make_measurement, noon_2024):
    assert reconcile([make_metadata()], [make_measurement()], PipelineOptions(join="id"), now=noon_2024) == []


def test_parse_weather_offsets(make_measurement):
    row = make_measurement(
        o5="10", o6="13:00", o7="1", o8="06:00", o9="60", o14="-2.1",
        o25="12", o26="40", o27="14:10", o30="NE", o31="1016.4",
        o37="3.2", o40="812", o41="0.4", o42="8.8",
    )
    w = parse_weather(row)
    assert w.status == "0"
    assert (w.date, w.time) == ("01/01/2024", "12:00")
    assert (w.max_temp, w.max_temp_time) == (10.0, "13:00")
    assert (w.min_temp, w.min_temp_time) == (1.0, "06:00")
    assert w.dew_point == -2.1
    assert (w.wind_speed, w.max_wind_speed, w.max_wind_speed_time) == (12.0, 40.0, "14:10")
    assert w.wind_direction == "NE"
    assert w.pressure == 1016.4
    assert (w.precipitation_day, w.precipitation_year) == (3.2, 812.0)
    assert (w.rain_rate, w.max_rain_rate) == (0.4, 8.8)


def test_parse_weather_short_row_is_nan():
    w = parse_weather(["0", "y", "01/01/2024", "12:00", "5,5"])
    assert w.current_temp == 5.5
    assert math.isnan(w.pressure)
    assert w.wind_direction == ""


def test_parse_timestamp():
    ts = parse_timestamp("31/12/2023", "23:50")
    assert ts == datetime(2023, 12, 31, 23, 50, tzinfo=ROME)
    assert parse_timestamp("2023-12-31", "23:50") is None
    assert datetime(2024, 1, 1, 11, 50, tzinfo=ROME) - ts == timedelta(hours=12)
