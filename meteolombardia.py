"""
MeteoLombardia - Mapa en vivo de la red de estaciones de Centro Meteo Lombardo
Aplicación principal
"""
import streamlit as st
st.set_page_config(
    page_title="MeteoLombardia",
    page_icon="🌡️",
    layout="wide",
    initial_sidebar_state="collapsed"
)
import logging
from streamlit_autorefresh import st_autorefresh

# Imports locales
from config import REFRESH_SECONDS
from utils import html_clean, age_string
from providers import load_fallback_stations
from services import LiveStationController
from components import (
    render_sidebar, map_style_for, render_station_map,
    render_station_detail, stations_dataframe, section_title,
)

# Configurar logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _get_controller() -> LiveStationController:
    """Un controlador por sesión; arranca con el dataset estático"""
    if "live_controller" not in st.session_state:
        fallback = load_fallback_stations()
        logger.info(f"Nueva sesión con {len(fallback)} estaciones de respaldo")
        st.session_state.live_controller = LiveStationController(fallback=fallback)
    return st.session_state.live_controller


controller = _get_controller()

# ============================================================
# SIDEBAR Y TEMA
# ============================================================

options, dark, force_refresh = render_sidebar(controller.store.updated_at)
controller.set_options(options)

card_bg = "rgba(255,255,255,0.04)" if dark else "rgba(0,0,0,0.03)"
st.markdown(
    html_clean(
        f"""
        <style>
        .grid {{ display: grid; gap: 0.6rem; margin: 0.4rem 0 1rem 0; }}
        .grid-5 {{ grid-template-columns: repeat(5, minmax(0, 1fr)); }}
        @media (max-width: 900px) {{ .grid-5 {{ grid-template-columns: repeat(2, minmax(0, 1fr)); }} }}
        .card {{ display: flex; gap: 0.6rem; padding: 0.7rem 0.8rem; border-radius: 14px; background: {card_bg}; }}
        .card .icon.big {{ font-size: 1.6rem; }}
        .card-title {{ font-size: 0.8rem; opacity: 0.75; }}
        .card-value {{ font-size: 1.35rem; font-weight: 600; }}
        .card-value .unit {{ font-size: 0.85rem; margin-left: 0.2rem; opacity: 0.8; }}
        .subtitle {{ font-size: 0.75rem; opacity: 0.7; }}
        .section-title {{ font-size: 1.15rem; font-weight: 600; margin: 0.6rem 0 0.2rem 0; }}
        </style>
        """
    ),
    unsafe_allow_html=True,
)

# ============================================================
# CICLO DE REFRESCO
# ============================================================

result = controller.refresh_if_due(force=force_refresh)
if result is not None and not result.ok:
    st.warning(f"No se pudo actualizar ({result.error}). Se muestran los últimos datos válidos.")

stations = controller.store.snapshot()

st.title("🌡️ MeteoLombardia")
col1, col2, col3 = st.columns(3)
col1.metric("Estaciones", len(stations))
col2.metric("Con temperatura", sum(1 for s in stations if s.weather is not None and s.weather.has_temperature))
if controller.store.is_live and controller.store.updated_at is not None:
    col3.metric("Actualizado", f"hace {age_string(controller.store.updated_at)}")
else:
    col3.metric("Actualizado", "Datos de respaldo")

# ============================================================
# MAPA
# ============================================================

selected_id = render_station_map(stations, map_style_for(dark))
if selected_id:
    st.session_state["selected_station_id"] = selected_id

selected_id = st.session_state.get("selected_station_id", "")
selected = next((s for s in stations if s.id == selected_id), None)
if selected is not None:
    render_station_detail(selected)
else:
    st.caption("Pulsa una estación en el mapa para ver el detalle.")

with st.expander("Tabla de estaciones"):
    section_title("Todas las estaciones")
    st.dataframe(stations_dataframe(stations), use_container_width=True, hide_index=True)

# ============================================================
# AUTOREFRESH
# ============================================================

st_autorefresh(interval=REFRESH_SECONDS * 1000, key="refresh_data")
