"""
Módulo de modelos y cálculos
"""
from .projection import AffineCalibration, DEFAULT_CALIBRATION, project, unproject

from .colors import (
    PALETTE, PALETTE_MIDPOINT,
    fixed_range_indices, mean_centered_indices, mean_centered_baseline, trimmed_mean,
    color_for_index, hex_to_rgb, colorize, STRATEGIES
)

__all__ = [
    # Projection
    'AffineCalibration', 'DEFAULT_CALIBRATION', 'project', 'unproject',
    # Colors
    'PALETTE', 'PALETTE_MIDPOINT',
    'fixed_range_indices', 'mean_centered_indices', 'mean_centered_baseline', 'trimmed_mean',
    'color_for_index', 'hex_to_rgb', 'colorize', 'STRATEGIES',
]
