"""
Tipos de dominio para las estaciones de la red lombarda.
"""
from dataclasses import dataclass
from typing import Optional

from config import NO_DATA_COLOR, STATUS_VALID


@dataclass(frozen=True)
class WeatherReading:
    """Lectura en vivo de una estación. Los numéricos no parseables son NaN."""
    status: str
    date: str
    time: str
    current_temp: float
    max_temp: float
    max_temp_time: str
    min_temp: float
    min_temp_time: str
    humidity: float
    dew_point: float
    wind_speed: float
    max_wind_speed: float
    max_wind_speed_time: str
    wind_direction: str
    pressure: float
    precipitation_day: float
    precipitation_year: float
    rain_rate: float
    max_rain_rate: float

    @property
    def is_valid(self) -> bool:
        return self.status == STATUS_VALID

    @property
    def has_temperature(self) -> bool:
        t = self.current_temp
        return t == t


@dataclass(frozen=True)
class StationRecord:
    """Estación normalizada lista para pintar en el mapa."""
    id: str
    name: str
    province: str
    latitude: float
    longitude: float
    altitude: float = float("nan")
    weather: Optional[WeatherReading] = None
    color: str = NO_DATA_COLOR

    @property
    def temperature(self) -> float:
        if self.weather is None:
            return float("nan")
        return self.weather.current_temp
