"""
Cruce de metadatos (coords) y medidas (datostazione) en StationRecord.

Los desplazamientos de cada campo se han sacado a mano del feed: no hay
esquema documentado y pueden cambiar sin aviso.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from config import FEED_TZ, PIXEL_DISABLED, STATUS_WITHDRAWN
from models.projection import project
from providers.types import StationRecord, WeatherReading
from utils.helpers import is_nan, safe_float, safe_text
from .options import PipelineOptions

logger = logging.getLogger(__name__)

FEED_ZONE = ZoneInfo(FEED_TZ)

# Fila de coords
META_ID = 0
META_NAME = 1
META_PROVINCE = 2
META_PIXEL_X = 3
META_PIXEL_Y = 4
META_ALTITUDE = 6

# Fila de datostazione: campo -> desplazamiento
STATUS_OFFSET = 0
WEATHER_OFFSETS: Dict[str, int] = {
    "date": 2,
    "time": 3,
    "current_temp": 4,
    "max_temp": 5,
    "max_temp_time": 6,
    "min_temp": 7,
    "min_temp_time": 8,
    "humidity": 9,
    "dew_point": 14,
    "wind_speed": 25,
    "max_wind_speed": 26,
    "max_wind_speed_time": 27,
    "wind_direction": 30,
    "pressure": 31,
    "precipitation_day": 37,
    "precipitation_year": 40,
    "rain_rate": 41,
    "max_rain_rate": 42,
}
TEXT_FIELDS = {"date", "time", "max_temp_time", "min_temp_time", "max_wind_speed_time", "wind_direction"}


class RowRejected(Exception):
    """Fila descartada en este ciclo (motivo en el mensaje)."""


def _field(row: Sequence[Any], idx: int) -> Any:
    if idx < len(row):
        return row[idx]
    return None


def parse_weather(row: Sequence[Any]) -> WeatherReading:
    """Construye la lectura a partir de los desplazamientos fijos; lo ilegible queda en NaN"""
    values: Dict[str, Any] = {"status": safe_text(_field(row, STATUS_OFFSET))}
    for name, offset in WEATHER_OFFSETS.items():
        raw = _field(row, offset)
        values[name] = safe_text(raw) if name in TEXT_FIELDS else safe_float(raw)
    return WeatherReading(**values)


def parse_timestamp(date_txt: str, time_txt: str) -> Optional[datetime]:
    """dd/mm/yyyy + HH:MM en hora local italiana"""
    try:
        naive = datetime.strptime(f"{date_txt.strip()} {time_txt.strip()}", "%d/%m/%Y %H:%M")
    except (ValueError, AttributeError):
        return None
    return naive.replace(tzinfo=FEED_ZONE)


def is_stale(weather: WeatherReading, now: datetime, max_age_hours: float) -> bool:
    ts = parse_timestamp(weather.date, weather.time)
    if ts is None:
        return True
    # En UTC: con el mismo tzinfo Python resta horas de pared y el cambio de hora descuadra
    age = now.astimezone(timezone.utc) - ts.astimezone(timezone.utc)
    return age > timedelta(hours=max_age_hours)


def _pixel(meta: Sequence[Any]) -> Tuple[float, float]:
    px = safe_float(_field(meta, META_PIXEL_X))
    py = safe_float(_field(meta, META_PIXEL_Y))
    if px == PIXEL_DISABLED or py == PIXEL_DISABLED:
        raise RowRejected("estación desactivada (píxel -1)")
    if is_nan(px) or is_nan(py):
        raise RowRejected("posición en píxeles ilegible")
    return px, py


def _weather_for(
    measurement: Optional[Sequence[Any]],
    options: PipelineOptions,
    now: datetime,
) -> Optional[WeatherReading]:
    if measurement is None:
        if options.require_weather or options.strict_temperature:
            raise RowRejected("sin fila de medidas")
        return None

    weather = parse_weather(measurement)
    if weather.status == STATUS_WITHDRAWN:
        raise RowRejected("sensor retirado (X)")
    if options.recency_filter and is_stale(weather, now, options.max_age_hours):
        raise RowRejected(f"lectura antigua o sin fecha ({weather.date} {weather.time})")
    if options.strict_temperature and not weather.has_temperature:
        raise RowRejected("temperatura actual ilegible")
    return weather


def _build_record(
    meta: Sequence[Any],
    measurement: Optional[Sequence[Any]],
    options: PipelineOptions,
    now: datetime,
    coords: Optional[Tuple[float, float]] = None,
    fallback: Optional[StationRecord] = None,
) -> StationRecord:
    if not isinstance(meta, (list, tuple)):
        raise RowRejected("fila de metadatos no es un array")
    if measurement is not None and not isinstance(measurement, (list, tuple)):
        measurement = None

    sid = safe_text(_field(meta, META_ID))
    if not sid:
        raise RowRejected("sin id")

    px, py = _pixel(meta)
    weather = _weather_for(measurement, options, now)

    if coords is None:
        coords = project(px, py, options.calibration)
    lat, lon = coords

    name = safe_text(_field(meta, META_NAME)) or (fallback.name if fallback else sid)
    province = safe_text(_field(meta, META_PROVINCE)) or (fallback.province if fallback else "")
    altitude = safe_float(_field(meta, META_ALTITUDE))
    if is_nan(altitude) and fallback is not None:
        altitude = fallback.altitude

    return StationRecord(
        id=sid,
        name=name,
        province=province,
        latitude=lat,
        longitude=lon,
        altitude=altitude,
        weather=weather,
    )


def _reconcile_positional(metadata_rows, measurement_rows, options, now) -> List[StationRecord]:
    out: List[StationRecord] = []
    for i, meta in enumerate(metadata_rows):
        measurement = measurement_rows[i] if i < len(measurement_rows) else None
        try:
            out.append(_build_record(meta, measurement, options, now))
        except RowRejected as e:
            logger.debug(f"Fila {i} descartada: {e}")
        except Exception as e:
            logger.debug(f"Fila {i} descartada por error inesperado: {e!r}")
    return out


def _reconcile_by_id(metadata_rows, measurement_rows, options, now, fallback) -> List[StationRecord]:
    if not fallback:
        logger.warning("Join por id sin dataset de respaldo: no hay estaciones")
        return []

    positions: Dict[str, int] = {}
    for i, meta in enumerate(metadata_rows):
        if isinstance(meta, (list, tuple)):
            sid = safe_text(_field(meta, META_ID))
            if sid and sid not in positions:
                positions[sid] = i

    out: List[StationRecord] = []
    for known in fallback:
        i = positions.get(known.id)
        if i is None:
            logger.debug(f"Estación {known.id} no aparece en coords")
            continue
        measurement = measurement_rows[i] if i < len(measurement_rows) else None
        try:
            out.append(_build_record(
                metadata_rows[i], measurement, options, now,
                coords=(known.latitude, known.longitude),
                fallback=known,
            ))
        except RowRejected as e:
            logger.debug(f"Estación {known.id} descartada: {e}")
        except Exception as e:
            logger.debug(f"Estación {known.id} descartada por error inesperado: {e!r}")
    return out


def reconcile(
    metadata_rows: Sequence[Any],
    measurement_rows: Sequence[Any],
    options: Optional[PipelineOptions] = None,
    now: Optional[datetime] = None,
    fallback: Optional[Sequence[StationRecord]] = None,
) -> List[StationRecord]:
    """
    Cruza metadatos y medidas y devuelve las estaciones válidas (sin color).

    Nunca lanza: un problema en una fila solo quita esa estación del ciclo.

    Args:
        metadata_rows: Filas parseadas de `coords`
        measurement_rows: Filas parseadas de `datostazione`, alineadas por índice
        options: Políticas activas
        now: Instante de referencia para el filtro de antigüedad
        fallback: Estaciones conocidas (solo para join "id")
    """
    options = options or PipelineOptions()
    now = now or datetime.now(FEED_ZONE)
    if now.tzinfo is None:
        now = now.replace(tzinfo=FEED_ZONE)
    metadata_rows = metadata_rows if isinstance(metadata_rows, (list, tuple)) else []
    measurement_rows = measurement_rows if isinstance(measurement_rows, (list, tuple)) else []

    if len(metadata_rows) != len(measurement_rows):
        logger.info(f"coords ({len(metadata_rows)}) y datostazione ({len(measurement_rows)}) no tienen la misma longitud")

    if options.join == "id":
        stations = _reconcile_by_id(metadata_rows, measurement_rows, options, now, list(fallback or []))
    else:
        stations = _reconcile_positional(metadata_rows, measurement_rows, options, now)

    logger.info(f"Estaciones válidas: {len(stations)}/{len(metadata_rows)}")
    return stations
