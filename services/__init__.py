"""
Módulo de servicios: extracción, cruce y refresco de estaciones
"""
from .extractor import FeedFragments, extract_fragment, extract_fragments
from .options import PipelineOptions, JOIN_STRATEGIES
from .reconciler import reconcile, parse_weather, parse_timestamp
from .pipeline import CycleResult, StationStore, build_stations, parse_feed, run_cycle, refresh
from .scheduler import RefreshScheduler, LiveStationController

__all__ = [
    'FeedFragments',
    'extract_fragment',
    'extract_fragments',
    'PipelineOptions',
    'JOIN_STRATEGIES',
    'reconcile',
    'parse_weather',
    'parse_timestamp',
    'CycleResult',
    'StationStore',
    'parse_feed',
    'build_stations',
    'run_cycle',
    'refresh',
    'RefreshScheduler',
    'LiveStationController',
]
