#!/usr/bin/env python3
"""
Descarga el feed de Centro Meteo Lombardo y vuelca las estaciones en JSON.

Sirve también para regenerar el dataset estático de respaldo.

Uso:
  python3 fetch_lombardia_snapshot.py
  python3 fetch_lombardia_snapshot.py --output data_stazioni_lombardia.json
  python3 fetch_lombardia_snapshot.py --watch --interval 60 --output live.json
  python3 fetch_lombardia_snapshot.py --base-url http://localhost:8788/api
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from functools import partial
from typing import List, Sequence
from zoneinfo import ZoneInfo

from api import fetch_feed_text
from config import (
    FEED_BASE_URL, FEED_TZ, MIN_REFRESH_SECONDS, REFRESH_SECONDS, MAX_DATA_AGE_HOURS,
    DEFAULT_COLOR_STRATEGY, DEFAULT_JOIN,
)
from models.colors import STRATEGIES
from providers import StationRecord, load_fallback_stations, station_to_json
from services import JOIN_STRATEGIES, PipelineOptions, RefreshScheduler, StationStore, refresh

LOCAL_TZ = ZoneInfo(FEED_TZ)


def _dump(stations: Sequence[StationRecord], output: str) -> None:
    payload: List[dict] = [station_to_json(s) for s in stations]
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if output == "-":
        print(text)
        return
    tmp_path = f"{output}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(text)
    os.replace(tmp_path, output)
    print(f"  💾 {len(payload)} estaciones guardadas en {output}")


def _options_from_args(args: argparse.Namespace) -> PipelineOptions:
    return PipelineOptions(
        strict_temperature=args.strict,
        require_weather=args.require_weather,
        recency_filter=args.recency,
        max_age_hours=args.max_age_hours,
        color_strategy=args.color_strategy,
        join=args.join,
    )


def run_once(args: argparse.Namespace, store: StationStore, options: PipelineOptions, fallback) -> bool:
    fetch = partial(fetch_feed_text, base_url=args.base_url, timeout=args.timeout)
    result = refresh(store, options, fetch=fetch, fallback=fallback)
    if not result.ok:
        print(f"✗ Ciclo fallido: {result.error}", file=sys.stderr)
        return False
    if result.published:
        _dump(store.snapshot(), args.output)
    else:
        print("⚠️ Feed sin filas legibles; no se sobrescribe la salida", file=sys.stderr)
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Vuelca en JSON las estaciones en vivo de Centro Meteo Lombardo")
    parser.add_argument("--base-url", default=FEED_BASE_URL)
    parser.add_argument("--output", default="-", help="Fichero de salida ('-' = stdout)")
    parser.add_argument("--fallback-path", default=None)
    parser.add_argument("--timeout", type=float, default=15.0)
    parser.add_argument("--strict", action="store_true", help="Descarta estaciones sin temperatura")
    parser.add_argument("--require-weather", action="store_true")
    parser.add_argument("--no-recency", dest="recency", action="store_false")
    parser.add_argument("--max-age-hours", type=float, default=MAX_DATA_AGE_HOURS)
    parser.add_argument("--color-strategy", choices=sorted(STRATEGIES), default=DEFAULT_COLOR_STRATEGY)
    parser.add_argument("--join", choices=JOIN_STRATEGIES, default=DEFAULT_JOIN)
    parser.add_argument("--watch", action="store_true", help="Repite cada --interval segundos")
    parser.add_argument("--interval", type=int, default=REFRESH_SECONDS)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, force=True)

    print("=== SNAPSHOT CENTRO METEO LOMBARDO ===", file=sys.stderr)
    print(f"Hora local: {datetime.now(LOCAL_TZ).strftime('%Y-%m-%d %H:%M:%S')}", file=sys.stderr)
    print(f"Base URL: {args.base_url}", file=sys.stderr)

    options = _options_from_args(args)
    fallback = load_fallback_stations(args.fallback_path) if args.join == "id" else []
    store = StationStore()

    if not args.watch:
        return 0 if run_once(args, store, options, fallback) else 1

    if args.interval < MIN_REFRESH_SECONDS:
        parser.error(f"--interval mínimo {MIN_REFRESH_SECONDS}s")

    scheduler = RefreshScheduler(partial(run_once, args, store, options, fallback), interval_s=args.interval)
    scheduler.start()
    try:
        while scheduler.running:
            scheduler.join(timeout=1.0)
    except KeyboardInterrupt:
        print("\n⚠️  Cancelado por el usuario", file=sys.stderr)
    finally:
        scheduler.cancel()
    return 0


if __name__ == "__main__":
    sys.exit(main())
