"""
Proyección de la posición en píxeles del mapa antiguo a latitud/longitud
"""
from dataclasses import dataclass
from typing import Tuple

from config import PROJ_A, PROJ_B, PROJ_C, PROJ_D


@dataclass(frozen=True)
class AffineCalibration:
    """lat = a * y + c ; lon = b * x + d"""
    a: float
    b: float
    c: float
    d: float


DEFAULT_CALIBRATION = AffineCalibration(a=PROJ_A, b=PROJ_B, c=PROJ_C, d=PROJ_D)


def project(pixel_x: float, pixel_y: float, calibration: AffineCalibration = DEFAULT_CALIBRATION) -> Tuple[float, float]:
    """
    Convierte coordenadas de píxel a (lat, lon).

    No valida nada: el centinela -1 se descarta antes de llamar aquí.

    Args:
        pixel_x: Columna en el lienzo antiguo
        pixel_y: Fila en el lienzo antiguo
        calibration: Constantes del ajuste afín

    Returns:
        Tupla (latitud, longitud)
    """
    lat = calibration.a * float(pixel_y) + calibration.c
    lon = calibration.b * float(pixel_x) + calibration.d
    return lat, lon


def unproject(lat: float, lon: float, calibration: AffineCalibration = DEFAULT_CALIBRATION) -> Tuple[float, float]:
    """Inversa de project(); útil para recalibrar contra estaciones conocidas"""
    pixel_y = (float(lat) - calibration.c) / calibration.a
    pixel_x = (float(lon) - calibration.d) / calibration.b
    return pixel_x, pixel_y
