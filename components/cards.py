"""
Componentes de tarjetas y grillas para visualizacion de datos
"""

from html import escape
from typing import List, Sequence

import pandas as pd
import streamlit as st

from providers.types import StationRecord
from utils.helpers import html_clean, is_nan


ICONS = {
    "temp": "🌡️",
    "max": "🔺",
    "min": "🔻",
    "rh": "💧",
    "dew": "🌫️",
    "wind": "💨",
    "gust": "🌬️",
    "press": "🧭",
    "rain": "🌧️",
    "rate": "☔",
}

DEFINITIONS = {
    "Temperatura": "Temperatura del aire medida por la estación en el último volcado.",
    "Máxima": "Temperatura máxima del día y hora a la que se registró.",
    "Mínima": "Temperatura mínima del día y hora a la que se registró.",
    "Humedad": "Humedad relativa del aire.",
    "Punto de rocío": "Temperatura a la que el aire se saturaría si se enfría a presión constante.",
    "Viento": "Velocidad media del viento y dirección.",
    "Racha máxima": "Racha de viento más fuerte del día.",
    "Presión": "Presión atmosférica referida al nivel del mar.",
    "Lluvia hoy": "Precipitación acumulada desde las 00:00 locales.",
    "Intensidad": "Intensidad de lluvia actual y máxima del día.",
}


def card(title: str, value: str, unit: str = "", icon_kind: str = "temp", subtitle_html: str = "") -> str:
    """
    Genera HTML de una tarjeta de dato meteorologico.
    """
    unit_html = f"<span class='unit'>{unit}</span>" if unit else ""
    sub_html = f"<div class='subtitle'>{subtitle_html}</div>" if subtitle_html else ""
    tip = escape(DEFINITIONS.get(title, ""))

    return html_clean(
        f"""
  <div class="card card-h" title="{tip}">
    <div class="icon-col"><div class="icon big">{ICONS.get(icon_kind, "")}</div></div>
    <div class="content-col">
      <div class="card-title">{escape(title)}</div>
      <div class="card-value">{value}{unit_html}</div>
      {sub_html}
    </div>
  </div>
"""
    )


def _num(x, decimals=1) -> str:
    return "—" if is_nan(x) else f"{x:.{decimals}f}"


def _at(time_txt: str) -> str:
    return f"a las {escape(time_txt)}" if time_txt else ""


def station_cards(station: StationRecord) -> List[str]:
    """Tarjetas de detalle para la estación seleccionada"""
    w = station.weather
    if w is None:
        return []
    wind_sub = escape(w.wind_direction) if w.wind_direction else ""
    rate_sub = f"máx. {_num(w.max_rain_rate)} mm/h" if not is_nan(w.max_rain_rate) else ""
    year_sub = f"año: {_num(w.precipitation_year)} mm" if not is_nan(w.precipitation_year) else ""
    return [
        card("Temperatura", _num(w.current_temp), "°C", "temp"),
        card("Máxima", _num(w.max_temp), "°C", "max", _at(w.max_temp_time)),
        card("Mínima", _num(w.min_temp), "°C", "min", _at(w.min_temp_time)),
        card("Humedad", _num(w.humidity, 0), "%", "rh"),
        card("Punto de rocío", _num(w.dew_point), "°C", "dew"),
        card("Viento", _num(w.wind_speed), "km/h", "wind", wind_sub),
        card("Racha máxima", _num(w.max_wind_speed), "km/h", "gust", _at(w.max_wind_speed_time)),
        card("Presión", _num(w.pressure), "hPa", "press"),
        card("Lluvia hoy", _num(w.precipitation_day), "mm", "rain", year_sub),
        card("Intensidad", _num(w.rain_rate), "mm/h", "rate", rate_sub),
    ]


def stations_dataframe(stations: Sequence[StationRecord]) -> pd.DataFrame:
    """Tabla resumen ordenada por temperatura (las estaciones sin dato al final)"""
    rows = []
    for s in stations:
        w = s.weather
        rows.append(
            {
                "ID": s.id,
                "Estación": s.name,
                "Prov.": s.province,
                "Altitud (m)": None if is_nan(s.altitude) else s.altitude,
                "T (°C)": None if w is None or is_nan(w.current_temp) else w.current_temp,
                "HR (%)": None if w is None or is_nan(w.humidity) else w.humidity,
                "Viento (km/h)": None if w is None or is_nan(w.wind_speed) else w.wind_speed,
                "Lluvia hoy (mm)": None if w is None or is_nan(w.precipitation_day) else w.precipitation_day,
                "Hora": "" if w is None else f"{w.date} {w.time}".strip(),
            }
        )
    df = pd.DataFrame(rows)
    if not df.empty:
        df = df.sort_values("T (°C)", ascending=False, na_position="last").reset_index(drop=True)
    return df


def section_title(text: str):
    """
    Renderiza un titulo de seccion.
    """
    st.markdown(f"<div class='section-title'>{text}</div>", unsafe_allow_html=True)


def render_grid(cards: list, cols: int = 3, extra_class: str = ""):
    """
    Renderiza una grilla de tarjetas.
    """
    cards_html = "".join(cards)
    html = f"<div class='grid grid-{cols} {extra_class}'>{cards_html}</div>"
    st.markdown(html, unsafe_allow_html=True)


def render_station_detail(station: StationRecord):
    section_title(f"{escape(station.name)} ({escape(station.province)})")
    alt = "" if is_nan(station.altitude) else f" · {station.altitude:.0f} m"
    st.caption(f"ID {station.id}{alt} · {station.latitude:.4f}, {station.longitude:.4f}")
    cards = station_cards(station)
    if not cards:
        st.info("Sin datos meteorológicos disponibles.")
        return
    st.caption(f"Última actualización: {station.weather.date} {station.weather.time}")
    render_grid(cards, cols=5)
