"""
Módulo de componentes visuales
"""
from .cards import card, section_title, render_grid, station_cards, stations_dataframe, render_station_detail
from .sidebar import render_sidebar, elapsed_text
from .station_map import MapStyle, map_style_for, build_map_points, build_deck, render_station_map, marker_label, popup_html

__all__ = [
    'card',
    'section_title',
    'render_grid',
    'station_cards',
    'stations_dataframe',
    'render_station_detail',
    'render_sidebar',
    'elapsed_text',
    'MapStyle',
    'map_style_for',
    'build_map_points',
    'build_deck',
    'render_station_map',
    'marker_label',
    'popup_html',
]
