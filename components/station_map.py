"""
Mapa de estaciones con pydeck: un círculo coloreado por temperatura y la
temperatura redondeada como etiqueta.
"""
import inspect
from dataclasses import dataclass
from html import escape
from typing import Any, Dict, List, Sequence

import pydeck as pdk
import streamlit as st

from config import MAP_CENTER_LAT, MAP_CENTER_LON, MAP_ZOOM
from models.colors import hex_to_rgb
from providers.types import StationRecord
from utils.helpers import is_nan, fmt_value, round_half_up


@dataclass(frozen=True)
class MapStyle:
    """Configuración explícita del mapa (nada de tocar defaults globales de la librería)."""
    map_style: str
    label_color: tuple = (15, 18, 25, 255)
    outline_color: tuple = (16, 20, 28, 140)
    radius_m: int = 1800
    radius_min_px: int = 9
    radius_max_px: int = 22
    label_size: int = 12
    center_lat: float = MAP_CENTER_LAT
    center_lon: float = MAP_CENTER_LON
    zoom: float = MAP_ZOOM


def map_style_for(dark: bool) -> MapStyle:
    if dark:
        return MapStyle(
            map_style="https://basemaps.cartocdn.com/gl/dark-matter-gl-style/style.json",
            label_color=(255, 255, 255, 235),
            outline_color=(230, 230, 230, 120),
        )
    return MapStyle(map_style="https://basemaps.cartocdn.com/gl/positron-gl-style/style.json")


def marker_label(station: StationRecord) -> str:
    """Temperatura redondeada o "?" si no hay lectura utilizable"""
    t = station.temperature
    if is_nan(t):
        return "?"
    return str(round_half_up(t))


def popup_lines(station: StationRecord) -> List[str]:
    """Líneas de texto del popup de una estación (sin HTML)"""
    w = station.weather
    if w is None:
        return ["Sin datos meteorológicos disponibles."]
    wind_dir = f" {w.wind_direction}" if w.wind_direction else ""
    return [
        f"Última actualización: {w.date} {w.time}".strip(),
        f"Temperatura: {fmt_value(w.current_temp, 1, '°C')}",
        f"Humedad: {fmt_value(w.humidity, 0, '%')}",
        f"Viento: {fmt_value(w.wind_speed, 1, 'km/h')}{wind_dir}",
        f"Presión: {fmt_value(w.pressure, 1, 'hPa')}",
        f"Precipitación hoy: {fmt_value(w.precipitation_day, 1, 'mm')}",
    ]


def popup_html(station: StationRecord) -> str:
    title = escape(station.name)
    if station.province:
        title += f" ({escape(station.province)})"
    body = "<br/>".join(escape(line) for line in popup_lines(station))
    return f"<b>{title}</b><br/>{body}"


def build_map_points(stations: Sequence[StationRecord]) -> List[Dict[str, Any]]:
    points = []
    for s in stations:
        points.append(
            {
                "id": s.id,
                "lat": float(s.latitude),
                "lon": float(s.longitude),
                "name": s.name,
                "province": s.province,
                "label": marker_label(s),
                "color": hex_to_rgb(s.color) + [230],
                "popup": popup_html(s),
                "alt_txt": "—" if is_nan(s.altitude) else f"{s.altitude:.0f} m",
            }
        )
    return points


def build_deck(points: List[Dict[str, Any]], style: MapStyle) -> pdk.Deck:
    layers = [
        pdk.Layer(
            "ScatterplotLayer",
            id="stations-layer",
            data=points,
            pickable=True,
            auto_highlight=True,
            filled=True,
            stroked=True,
            get_position="[lon, lat]",
            get_fill_color="color",
            get_line_color=list(style.outline_color),
            line_width_min_pixels=1,
            get_radius=style.radius_m,
            radius_min_pixels=style.radius_min_px,
            radius_max_pixels=style.radius_max_px,
        ),
        pdk.Layer(
            "TextLayer",
            id="labels-layer",
            data=points,
            pickable=False,
            get_position="[lon, lat]",
            get_text="label",
            get_size=style.label_size,
            get_color=list(style.label_color),
            get_text_anchor="'middle'",
            get_alignment_baseline="'center'",
        ),
    ]
    return pdk.Deck(
        map_style=style.map_style,
        initial_view_state=pdk.ViewState(
            latitude=style.center_lat,
            longitude=style.center_lon,
            zoom=style.zoom,
            pitch=0,
        ),
        layers=layers,
        tooltip={
            "html": "{popup}<br/>Altitud: {alt_txt}",
            "style": {
                "backgroundColor": "rgba(18, 18, 18, 0.92)",
                "color": "white",
                "fontSize": "12px",
            },
        },
    )


def _pydeck_chart_stretch(deck, key: str, height: int = 720):
    """Renderiza pydeck de forma compatible entre versiones de Streamlit."""
    params = inspect.signature(st.pydeck_chart).parameters
    kwargs = {"height": int(height), "key": key}
    if "on_select" in params:
        kwargs["on_select"] = "rerun"
    if "selection_mode" in params:
        kwargs["selection_mode"] = "single-object"

    if "use_container_width" in params:
        return st.pydeck_chart(deck, use_container_width=True, **kwargs)
    if "width" in params:
        return st.pydeck_chart(deck, width=1200, **kwargs)
    return st.pydeck_chart(deck, **kwargs)


def selected_station_id(deck_event) -> str:
    """Id de la estación pinchada en el mapa ("" si no hay selección)"""
    selection = {}
    try:
        if hasattr(deck_event, "get"):
            selection = deck_event.get("selection", {}) or {}
        elif hasattr(deck_event, "selection"):
            selection = getattr(deck_event, "selection", {}) or {}
        objects = selection.get("objects", {}) if hasattr(selection, "get") else {}
    except (AttributeError, TypeError):
        return ""
    picked = objects.get("stations-layer", []) if isinstance(objects, dict) else []
    if isinstance(picked, list) and picked and isinstance(picked[0], dict):
        return str(picked[0].get("id", ""))
    return ""


def render_station_map(stations: Sequence[StationRecord], style: MapStyle, key: str = "stations_map") -> str:
    """Pinta el mapa y devuelve el id de la estación seleccionada ("" si ninguna)"""
    deck = build_deck(build_map_points(stations), style)
    try:
        event = _pydeck_chart_stretch(deck, key=key)
    except Exception as map_err:
        st.warning(f"No se pudo renderizar el mapa ({map_err}).")
        return ""
    return selected_station_id(event)
