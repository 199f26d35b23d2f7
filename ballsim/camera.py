#!/usr/bin/env python3
"""
Camera utilities for 2D world-to-screen transforms.

The engine works in world units; the viewport draws in pixels inside a border.
"""
from typing import Tuple
from .constants import BORDER_SIZE, PIXELS_PER_UNIT, VIEW_HEIGHT, VIEW_WIDTH
from .vector_utils import clamp


class Camera2D:
    """
    Maps world coordinates to screen pixels: scale by pixels_per_unit, then offset
    by the border and the pan.
    """

    MIN_PIXELS_PER_UNIT = 2.0
    MAX_PIXELS_PER_UNIT = 200.0

    def __init__(self, pixels_per_unit=PIXELS_PER_UNIT, border=BORDER_SIZE):
        self.ppu = pixels_per_unit
        self.border = border
        self.pan = [0.0, 0.0]
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def world_to_screen(self, pos: Tuple[float, float]) -> Tuple[int, int]:
        px = pos[0] * self.ppu + self.border + self.pan[0]
        py = pos[1] * self.ppu + self.border + self.pan[1]
        return (int(round(px)), int(round(py)))

    def screen_to_world(self, screen: Tuple[float, float]) -> Tuple[float, float]:
        wx = (screen[0] - self.border - self.pan[0]) / self.ppu
        wy = (screen[1] - self.border - self.pan[1]) / self.ppu
        return (wx, wy)

    def screen_length(self, units: float) -> int:
        return max(1, int(round(units * self.ppu)))

    def zoom(self, factor: float) -> None:
        factor = clamp(factor, 0.05, 20.0)
        self.ppu = clamp(self.ppu * factor, self.MIN_PIXELS_PER_UNIT, self.MAX_PIXELS_PER_UNIT)

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.pan[0] += dx_pixels
        self.pan[1] += dy_pixels
