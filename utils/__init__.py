"""
Módulo de utilidades
"""
from .helpers import html_clean, is_nan, safe_float, safe_text, round_half_up, age_string, fmt_value
from .js_literal import parse_literal_array, dump_literal

__all__ = [
    'html_clean',
    'is_nan',
    'safe_float',
    'safe_text',
    'round_half_up',
    'age_string',
    'fmt_value',
    'parse_literal_array',
    'dump_literal',
]
