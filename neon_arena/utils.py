"""
Utility functions for game mechanics
"""

from __future__ import annotations
import colorsys
import math
import random
from dataclasses import dataclass
from typing import Tuple, Optional
import numpy as np

Color = Tuple[int, int, int]


@dataclass
class Viewport:
    """Current playfield size; resized by the window, read every frame"""
    width: float
    height: float


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def rects_overlap(a, b) -> bool:
    """
    Axis-aligned overlap test for anything with x, y, width, height.

    Strict inequalities: rectangles that only share an edge do not collide.
    """
    return (
        a.x < b.x + b.width and
        a.x + a.width > b.x and
        a.y < b.y + b.height and
        a.y + a.height > b.y
    )


def hex_to_rgb(value: str) -> Color:
    """'#ff0066' -> (255, 0, 102)"""
    value = value.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected a 6-digit hex colour, got {value!r}")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def hsl_to_rgb(hue_deg: float, saturation: float = 1.0, lightness: float = 0.5) -> Color:
    """CSS-style hsl() to an RGB tuple"""
    r, g, b = colorsys.hls_to_rgb((hue_deg % 360) / 360.0, lightness, saturation)
    return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
