"""
Opciones con nombre del pipeline (las variantes antiguas del mapa, unificadas)
"""
from dataclasses import dataclass

from config import (
    DEFAULT_COLOR_STRATEGY, DEFAULT_JOIN, DEFAULT_STRICT_TEMPERATURE,
    DEFAULT_REQUIRE_WEATHER, DEFAULT_RECENCY_FILTER, MAX_DATA_AGE_HOURS,
)
from models.colors import STRATEGIES
from models.projection import AffineCalibration, DEFAULT_CALIBRATION

JOIN_STRATEGIES = ("positional", "id")


@dataclass(frozen=True)
class PipelineOptions:
    """
    strict_temperature: descarta estaciones sin temperatura actual parseable
        (si es False se pintan con "?").
    require_weather: descarta estaciones sin fila de medidas.
    recency_filter: descarta lecturas con más de `max_age_hours`.
    color_strategy: "fixed_range" o "mean_centered".
    join: "positional" (índice del array) o "id" (contra el dataset estático).
    """
    strict_temperature: bool = DEFAULT_STRICT_TEMPERATURE
    require_weather: bool = DEFAULT_REQUIRE_WEATHER
    recency_filter: bool = DEFAULT_RECENCY_FILTER
    max_age_hours: float = MAX_DATA_AGE_HOURS
    color_strategy: str = DEFAULT_COLOR_STRATEGY
    join: str = DEFAULT_JOIN
    calibration: AffineCalibration = DEFAULT_CALIBRATION

    def __post_init__(self):
        if self.color_strategy not in STRATEGIES:
            raise ValueError(f"color_strategy inválida: {self.color_strategy}")
        if self.join not in JOIN_STRATEGIES:
            raise ValueError(f"join inválido: {self.join}")
        if self.max_age_hours <= 0:
            raise ValueError("max_age_hours debe ser positivo")
