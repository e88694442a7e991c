"""
Refresco periódico con guarda de "un solo ciclo en vuelo".
"""
import logging
import threading
import time
from typing import Callable, Optional, Sequence

from config import REFRESH_SECONDS
from providers.types import StationRecord
from .options import PipelineOptions
from .pipeline import CycleResult, StationStore, refresh

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Ejecuta `task` cada `interval_s` segundos en un hilo demonio.

    Dos ciclos nunca se solapan: si llega un disparo con otro en curso, se
    descarta (el siguiente tick hace de reintento). cancel() detiene los
    disparos futuros; una descarga en curso no se interrumpe.
    """

    def __init__(self, task: Callable[[], object], interval_s: float = REFRESH_SECONDS, name: str = "station-refresh"):
        if interval_s <= 0:
            raise ValueError("El intervalo debe ser positivo")
        self._task = task
        self._interval_s = float(interval_s)
        self._name = name
        self._in_flight = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval_s(self) -> float:
        return self._interval_s

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    @property
    def in_flight(self) -> bool:
        return self._in_flight.locked()

    def trigger(self) -> bool:
        """Ejecuta la tarea si no hay otra en curso. Devuelve si se ejecutó."""
        if self._stop.is_set():
            return False
        if not self._in_flight.acquire(blocking=False):
            logger.info("Refresco omitido: ya hay un ciclo en curso")
            return False
        try:
            self._task()
        except Exception:
            logger.exception("Error no controlado en el ciclo de refresco")
        finally:
            self._in_flight.release()
        return True

    def _loop(self, run_immediately: bool) -> None:
        if run_immediately:
            self.trigger()
        while not self._stop.wait(self._interval_s):
            self.trigger()
        logger.info(f"Planificador {self._name} detenido")

    def start(self, run_immediately: bool = True) -> None:
        if self._thread is not None:
            raise RuntimeError("El planificador ya se ha arrancado")
        self._thread = threading.Thread(target=self._loop, args=(run_immediately,), name=self._name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)


class LiveStationController:
    """
    Estado de una sesión de visualización: store publicado, opciones y
    control de "¿toca refrescar?". En Streamlit el temporizador es
    st_autorefresh; cualquier otro rerun (widgets) no vuelve a descargar.
    """

    def __init__(
        self,
        options: Optional[PipelineOptions] = None,
        fallback: Sequence[StationRecord] = (),
        fetch: Optional[Callable[[], str]] = None,
        interval_s: float = REFRESH_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.options = options or PipelineOptions()
        self.fallback = list(fallback)
        self.store = StationStore(initial=self.fallback)
        self.last_result: Optional[CycleResult] = None
        self._fetch = fetch
        self._interval_s = float(interval_s)
        self._clock = clock
        self._last_attempt: Optional[float] = None
        self._in_flight = threading.Lock()

    def set_options(self, options: PipelineOptions) -> None:
        if options != self.options:
            self.options = options
            self._last_attempt = None

    def is_due(self) -> bool:
        if self._last_attempt is None:
            return True
        # Margen de 1 s: el rerun del autorefresh no llega exacto
        return self._clock() - self._last_attempt >= self._interval_s - 1.0

    def refresh_if_due(self, force: bool = False) -> Optional[CycleResult]:
        if not (force or self.is_due()):
            return None
        if not self._in_flight.acquire(blocking=False):
            logger.info("Refresco omitido: ya hay un ciclo en curso")
            return None
        try:
            self._last_attempt = self._clock()
            kwargs = {"fetch": self._fetch} if self._fetch is not None else {}
            self.last_result = refresh(self.store, self.options, fallback=self.fallback, **kwargs)
            return self.last_result
        finally:
            self._in_flight.release()
