"""
Ciclo completo: descarga -> extracción -> parseo -> cruce -> color -> publicación.
"""
import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence, Tuple

from api.centrometeo import FeedError, fetch_feed_text
from models.colors import colorize
from providers.types import StationRecord
from utils.js_literal import parse_literal_array
from .extractor import extract_fragments
from .options import PipelineOptions
from .reconciler import reconcile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleResult:
    ok: bool
    stations: Tuple[StationRecord, ...] = ()
    error: Optional[str] = None
    published: bool = False


class StationStore:
    """
    Conjunto publicado de estaciones. Se sustituye entero al final de un
    ciclo correcto; los lectores reciben una tupla inmutable.
    """

    def __init__(self, initial: Sequence[StationRecord] = ()):
        self._lock = threading.Lock()
        self._stations: Tuple[StationRecord, ...] = tuple(initial)
        self._updated_at: Optional[float] = None
        self._live = False

    def publish(self, stations: Sequence[StationRecord]) -> None:
        snapshot = tuple(stations)
        with self._lock:
            self._stations = snapshot
            self._updated_at = time.time()
            self._live = True

    def snapshot(self) -> Tuple[StationRecord, ...]:
        with self._lock:
            return self._stations

    @property
    def updated_at(self) -> Optional[float]:
        return self._updated_at

    @property
    def is_live(self) -> bool:
        """False mientras solo se muestra el dataset estático"""
        return self._live


def parse_feed(text: str) -> Optional[Tuple[List[Any], List[Any]]]:
    """
    Extrae y parsea los dos arrays de la respuesta.

    Returns:
        (filas de coords, filas de datostazione), o None si falta algún fragmento.
        Un fragmento ilegible llega como lista vacía.
    """
    fragments = extract_fragments(text)
    if fragments is None:
        return None
    return parse_literal_array(fragments.metadata), parse_literal_array(fragments.measurements)


def build_stations(
    metadata_rows: List[Any],
    measurement_rows: List[Any],
    options: PipelineOptions,
    now: Optional[datetime] = None,
    fallback: Optional[Sequence[StationRecord]] = None,
) -> List[StationRecord]:
    stations = reconcile(metadata_rows, measurement_rows, options, now=now, fallback=fallback)
    return colorize(stations, options.color_strategy)


def run_cycle(
    text: str,
    options: Optional[PipelineOptions] = None,
    now: Optional[datetime] = None,
    fallback: Optional[Sequence[StationRecord]] = None,
) -> Optional[List[StationRecord]]:
    """
    Convierte el texto de la respuesta en estaciones coloreadas.

    Returns:
        Lista de estaciones, o None si faltan los fragmentos en la respuesta.
    """
    options = options or PipelineOptions()
    rows = parse_feed(text)
    if rows is None:
        return None
    return build_stations(*rows, options, now=now, fallback=fallback)


def refresh(
    store: StationStore,
    options: Optional[PipelineOptions] = None,
    fetch: Callable[[], str] = fetch_feed_text,
    fallback: Optional[Sequence[StationRecord]] = None,
    now: Optional[datetime] = None,
) -> CycleResult:
    """
    Un ciclo de refresco.

    Si el feed se ha leído entero el conjunto publicado se sustituye, aunque
    quede vacío porque todas las filas se han descartado. Los fallos de
    transporte, de extracción o de parseo dejan el store como estaba.
    """
    options = options or PipelineOptions()
    try:
        text = fetch()
    except FeedError as e:
        logger.warning(f"Ciclo abortado, fallo de transporte: {e}")
        return CycleResult(ok=False, error=f"transporte: {e}")

    try:
        rows = parse_feed(text)
        if rows is None:
            return CycleResult(ok=False, error="fragmentos no encontrados")
        metadata_rows, measurement_rows = rows
        if not metadata_rows or not measurement_rows:
            # Fragmento ilegible o vacío: se mantiene el último mapa bueno
            logger.warning("Feed sin filas legibles; se conserva el conjunto publicado")
            return CycleResult(ok=True, stations=(), published=False)
        stations = build_stations(metadata_rows, measurement_rows, options, now=now, fallback=fallback)
    except Exception as e:
        logger.exception("Error inesperado procesando el feed")
        return CycleResult(ok=False, error=f"proceso: {e!r}")

    store.publish(stations)
    logger.info(f"✅ Publicadas {len(stations)} estaciones")
    return CycleResult(ok=True, stations=tuple(stations), published=True)
