"""
Tipos de estación y dataset estático de respaldo.
"""
from .types import StationRecord, WeatherReading
from .fallback import load_fallback_stations, station_to_json, station_from_json

__all__ = [
    "StationRecord",
    "WeatherReading",
    "load_fallback_stations",
    "station_to_json",
    "station_from_json",
]
