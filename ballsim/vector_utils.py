#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

These are small, fast functions for vector math used throughout the app.
"""
from typing import Tuple

Vector2 = Tuple[float, float]

ZERO: Vector2 = (0.0, 0.0)


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec(x, y) -> Vector2:
    return (float(x), float(y))


def vec_add(a: Vector2, b: Vector2) -> Vector2:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vector2, b: Vector2) -> Vector2:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(a: Vector2, s: float) -> Vector2:
    return (a[0] * s, a[1] * s)


def vec_len_sq(a: Vector2) -> float:
    """Squared length; avoids the square root for proximity checks."""
    return a[0] * a[0] + a[1] * a[1]
