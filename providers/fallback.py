"""
Dataset estático de estaciones (primer pintado y fuente de identidad para el join por id).

Formato: lista JSON de objetos ``{id, name, province, altitude, latitude,
longitude, weather}`` con el bloque ``weather`` en camelCase, igual que lo
escribe ``fetch_lombardia_snapshot.py``.
"""
import json
import logging
from dataclasses import fields
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from config import FALLBACK_DATA_PATH
from utils.helpers import is_nan, safe_float, safe_text
from .types import StationRecord, WeatherReading

logger = logging.getLogger(__name__)

# Campo del dataclass -> clave en el JSON
WEATHER_JSON_KEYS: Dict[str, str] = {
    "status": "status",
    "date": "date",
    "time": "time",
    "current_temp": "currentTemp",
    "max_temp": "maxTemp",
    "max_temp_time": "maxTempTime",
    "min_temp": "minTemp",
    "min_temp_time": "minTempTime",
    "humidity": "humidity",
    "dew_point": "dewPoint",
    "wind_speed": "windSpeed",
    "max_wind_speed": "maxWindSpeed",
    "max_wind_speed_time": "maxWindSpeedTime",
    "wind_direction": "windDirection",
    "pressure": "pressure",
    "precipitation_day": "precipitationDay",
    "precipitation_year": "precipitationYear",
    "rain_rate": "rainRate",
    "max_rain_rate": "maxRainRate",
}

_NUMERIC_FIELDS = {f.name for f in fields(WeatherReading) if f.type in (float, "float")}


def weather_from_json(raw: Any) -> Optional[WeatherReading]:
    if not isinstance(raw, dict):
        return None
    values = {}
    for attr, key in WEATHER_JSON_KEYS.items():
        if attr in _NUMERIC_FIELDS:
            values[attr] = safe_float(raw.get(key))
        else:
            values[attr] = safe_text(raw.get(key))
    if not values["status"]:
        values["status"] = "0"
    return WeatherReading(**values)


def weather_to_json(weather: Optional[WeatherReading]) -> Optional[Dict[str, Any]]:
    if weather is None:
        return None
    out = {}
    for attr, key in WEATHER_JSON_KEYS.items():
        value = getattr(weather, attr)
        if isinstance(value, float) and is_nan(value):
            value = None
        out[key] = value
    return out


def station_to_json(station: StationRecord) -> Dict[str, Any]:
    altitude = None if is_nan(station.altitude) else station.altitude
    return {
        "id": station.id,
        "name": station.name,
        "province": station.province,
        "altitude": altitude,
        "latitude": station.latitude,
        "longitude": station.longitude,
        "color": station.color,
        "weather": weather_to_json(station.weather),
    }


def station_from_json(raw: Any) -> Optional[StationRecord]:
    if not isinstance(raw, dict):
        return None
    sid = safe_text(raw.get("id"))
    lat = safe_float(raw.get("latitude"))
    lon = safe_float(raw.get("longitude"))
    if not sid or is_nan(lat) or is_nan(lon):
        return None
    return StationRecord(
        id=sid,
        name=safe_text(raw.get("name")) or sid,
        province=safe_text(raw.get("province")),
        latitude=lat,
        longitude=lon,
        altitude=safe_float(raw.get("altitude")),
        weather=weather_from_json(raw.get("weather")),
    )


@lru_cache(maxsize=2)
def _load_stations(path: str) -> Tuple[StationRecord, ...]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Dataset de respaldo no encontrado: {path}")
        return ()
    except (OSError, ValueError) as e:
        logger.warning(f"Dataset de respaldo ilegible ({path}): {e}")
        return ()
    if not isinstance(data, list):
        return ()
    out = []
    for item in data:
        station = station_from_json(item)
        if station is not None:
            out.append(station)
    return tuple(out)


def load_fallback_stations(path: Optional[str] = None) -> List[StationRecord]:
    """Devuelve las estaciones del dataset estático (lista vacía si no hay)."""
    return list(_load_stations(path or FALLBACK_DATA_PATH))
