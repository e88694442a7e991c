"""
Colores de temperatura para los marcadores del mapa.

Dos estrategias intercambiables, ambas funciones puras del ciclo actual:

- ``fixed_range``: escala lineal entre la mínima y la máxima del ciclo.
- ``mean_centered``: escala de 1 °C por paso anclada a la media recortada.
"""
import math
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence

from config import PALETTE_SIZE, MEAN_OUTLIER_DEG, MEAN_BASELINE_OFFSET, NO_DATA_COLOR
from providers.types import StationRecord
from utils.helpers import is_nan, round_half_up

# De frío (violeta/azul) a calor (rojo/granate)
PALETTE: List[str] = [
    "#4b0082", "#3a0ca3", "#2c3ec8", "#1f5fe0", "#1e7fef",
    "#229ff0", "#2bbbe8", "#36d1d6", "#44ddb5", "#5ae38f",
    "#7be66a", "#a0e650", "#c4e43f", "#e2dc34", "#f5cc2e",
    "#fbb42a", "#fc9a27", "#fa7f25", "#f46424", "#eb4a24",
    "#de3326", "#cc2229", "#b5172b", "#9a0f2a", "#7a0a26",
]
assert len(PALETTE) == PALETTE_SIZE

PALETTE_MIDPOINT = (PALETTE_SIZE - 1) // 2


def _valid(temps: Sequence[float]) -> List[float]:
    return [t for t in temps if not is_nan(t) and not math.isinf(t)]


def fixed_range_indices(temps: Sequence[float]) -> List[Optional[int]]:
    """
    Índice de paleta por temperatura con escala lineal min..max del ciclo.
    Si min == max todas van al punto medio. NaN -> None.
    """
    valid = _valid(temps)
    if not valid:
        return [None] * len(temps)
    t_min, t_max = min(valid), max(valid)
    span = t_max - t_min
    last = PALETTE_SIZE - 1

    out: List[Optional[int]] = []
    for t in temps:
        if is_nan(t) or math.isinf(t):
            out.append(None)
        elif span == 0:
            out.append(PALETTE_MIDPOINT)
        else:
            idx = math.floor((t - t_min) / span * last)
            out.append(max(0, min(last, idx)))
    return out


def trimmed_mean(temps: Sequence[float], window: float = MEAN_OUTLIER_DEG) -> float:
    """Media, descartando las lecturas a más de `window` grados de la media simple"""
    valid = _valid(temps)
    if not valid:
        return float("nan")
    mean = sum(valid) / len(valid)
    kept = [t for t in valid if abs(t - mean) <= window]
    if not kept:
        return mean
    return sum(kept) / len(kept)


def mean_centered_baseline(temps: Sequence[float]) -> Optional[int]:
    m = trimmed_mean(temps)
    if is_nan(m):
        return None
    return round_half_up(m) - MEAN_BASELINE_OFFSET


def mean_centered_indices(temps: Sequence[float]) -> List[Optional[int]]:
    """
    Paso 0 en la base; el paso i (1..N-1) requiere t >= base + i.
    Por encima del último paso se queda en el último color.
    """
    baseline = mean_centered_baseline(temps)
    last = PALETTE_SIZE - 1

    out: List[Optional[int]] = []
    for t in temps:
        if baseline is None or is_nan(t) or math.isinf(t):
            out.append(None)
            continue
        step = 0
        for i in range(1, last + 1):
            if t >= baseline + i:
                step = i
        out.append(min(step, last))
    return out


STRATEGIES: Dict[str, Callable[[Sequence[float]], List[Optional[int]]]] = {
    "fixed_range": fixed_range_indices,
    "mean_centered": mean_centered_indices,
}


def color_for_index(idx: Optional[int]) -> str:
    if idx is None:
        return NO_DATA_COLOR
    return PALETTE[max(0, min(PALETTE_SIZE - 1, idx))]


def hex_to_rgb(color: str) -> List[int]:
    c = color.lstrip("#")
    return [int(c[i:i + 2], 16) for i in (0, 2, 4)]


def colorize(stations: Sequence[StationRecord], strategy: str = "fixed_range") -> List[StationRecord]:
    """
    Devuelve copias de las estaciones con `color` asignado.

    Solo cuentan las lecturas válidas con temperatura; el resto va en gris.
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Estrategia de color desconocida: {strategy}")

    temps = []
    for s in stations:
        if s.weather is not None and s.weather.is_valid:
            temps.append(s.weather.current_temp)
        else:
            temps.append(float("nan"))

    indices = STRATEGIES[strategy](temps)
    return [replace(s, color=color_for_index(idx)) for s, idx in zip(stations, indices)]
