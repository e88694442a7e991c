"""
Componentes de sidebar: tema y opciones del pipeline
"""
import time
from datetime import datetime
from typing import Optional, Tuple

import streamlit as st

from config import (
    DEFAULT_COLOR_STRATEGY, DEFAULT_JOIN, DEFAULT_STRICT_TEMPERATURE,
    DEFAULT_REQUIRE_WEATHER, DEFAULT_RECENCY_FILTER, MAX_DATA_AGE_HOURS,
)
from services.options import PipelineOptions

COLOR_LABELS = {
    "fixed_range": "Escala mín–máx del ciclo",
    "mean_centered": "Centrada en la media",
}
JOIN_LABELS = {
    "positional": "Por posición en el feed",
    "id": "Por id (dataset estático)",
}


def elapsed_text(last_update: Optional[float], now: Optional[float] = None) -> str:
    if last_update is None:
        return "nunca"
    elapsed = (now or time.time()) - last_update
    if elapsed < 60:
        return f"hace {int(elapsed)}s"
    elif elapsed < 3600:
        return f"hace {int(elapsed/60)}min"
    return f"hace {int(elapsed/3600)}h {int((elapsed%3600)/60)}min"


def render_sidebar(last_update: Optional[float] = None) -> Tuple[PipelineOptions, bool, bool]:
    """
    Renderiza la barra lateral con configuración

    Args:
        last_update: epoch de la última publicación en vivo (None si aún no hay)

    Returns:
        Tupla (opciones del pipeline, dark, refresco forzado)
    """
    st.sidebar.title("⚙️ Ajustes")
    theme_mode = st.sidebar.radio("Tema", ["Auto", "Claro", "Oscuro"], index=0)

    st.sidebar.markdown("---")
    st.sidebar.markdown("### 🎨 Colores")
    strategies = list(COLOR_LABELS)
    color_strategy = st.sidebar.radio(
        "Escala de temperatura",
        strategies,
        index=strategies.index(DEFAULT_COLOR_STRATEGY),
        format_func=COLOR_LABELS.get,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown("### 🧹 Filtrado")
    strict = st.sidebar.checkbox(
        "Ocultar estaciones sin temperatura",
        value=DEFAULT_STRICT_TEMPERATURE,
        help="Si se desactiva, se muestran con '?'",
    )
    require_weather = st.sidebar.checkbox("Ocultar estaciones sin medidas", value=DEFAULT_REQUIRE_WEATHER)
    recency = st.sidebar.checkbox(
        f"Solo datos de las últimas {MAX_DATA_AGE_HOURS} h",
        value=DEFAULT_RECENCY_FILTER,
    )
    joins = list(JOIN_LABELS)
    join = st.sidebar.selectbox(
        "Cruce metadatos/medidas",
        joins,
        index=joins.index(DEFAULT_JOIN),
        format_func=JOIN_LABELS.get,
    )

    st.sidebar.markdown("---")
    force_refresh = st.sidebar.button("🔄 Refrescar ahora", use_container_width=True)
    st.sidebar.caption(f"Última actualización: {elapsed_text(last_update)}")

    options = PipelineOptions(
        strict_temperature=strict,
        require_weather=require_weather,
        recency_filter=recency,
        color_strategy=color_strategy,
        join=join,
    )

    # Determinar tema
    now = datetime.now()
    auto_dark = (now.hour >= 20) or (now.hour <= 7)

    if theme_mode == "Auto":
        dark = auto_dark
    elif theme_mode == "Oscuro":
        dark = True
    else:
        dark = False

    return options, dark, force_refresh
