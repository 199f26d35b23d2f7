#!/usr/bin/env python3
"""
Shared constants for Ball Simulator (world units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Ball geometry
BALL_RADIUS = 1.0  # world units; also the pick radius for find_nearest

# Force law
DEFAULT_FORCE_CONSTANT = 1.0
CONTACT_DISTANCE_FACTOR = 2.0  # contact threshold = radius * factor (two touching discs)

# Integrator
DEFAULT_TIME_STEP = 0.001  # simulation time per tick
DEFAULT_TICK_INTERVAL = 0.0  # real seconds slept after each tick

# Initial scene: two balls, stopped
DEFAULT_BALL_POSITIONS = ((15.0, 15.0), (25.0, 15.0))

# Presenter
MINIMUM_MOVE_PATH = 5.0  # squared pixels; a shorter press-release is a click

# Rendering (viewport)
VIEW_WIDTH = 800
VIEW_HEIGHT = 600
BORDER_SIZE = 5
PIXELS_PER_UNIT = 20.0
BACKGROUND_COLOR = (10, 12, 18)
BORDER_COLOR = (40, 45, 60)
BALL_COLOR = (100, 149, 237)
PINNED_BALL_COLOR = (255, 204, 0)
TEXT_COLOR = (220, 220, 220)
