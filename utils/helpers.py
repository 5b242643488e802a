"""
Helper utility functions for Maze Runner 3D
"""

import math


def clamp(value, min_value, max_value):
    """Clamp a value between min and max"""
    return max(min_value, min(value, max_value))


def ground_distance(a, b):
    """Distance between two 3D points on the x/z ground plane"""
    return math.hypot(b[0] - a[0], b[2] - a[2])


def format_counter(collected, total):
    """Format pickup counter for the HUD"""
    return f"{collected}/{total}"


def shade_color(color, factor):
    """Scale an RGB color by factor, clamped to 0-255"""
    return tuple(int(clamp(c * factor, 0, 255)) for c in color)
