"""
Grille Geometry Package

This package provides the rotation orbit matrices for the supported grille
sizes and the quarter-turn rotation used by the cipher.
"""

from .orbit_matrix import (
    Coordinate,
    GrilleSize,
    center_label,
    orbit_coordinates,
    orbit_count,
    orbit_matrix,
    validate_orbit_matrix,
)
from .rotation import rotate_clockwise, rotate_coordinate

__all__ = [
    'Coordinate', 'GrilleSize', 'center_label', 'orbit_coordinates', 'orbit_count',
    'orbit_matrix', 'validate_orbit_matrix', 'rotate_clockwise', 'rotate_coordinate',
]
