#!/usr/bin/env python3
"""
Data models for Ball Simulator.

This module defines the Ball dataclass owned by the simulation engine and the
BallState value copy handed out to callers.

Identity and usage
- Every Ball receives a unique positive integer id when constructed. NULL_ID (0)
  is reserved to mean "no ball" and is never allocated.
- position and velocity are (x, y) tuples in world units; they are replaced, never
  mutated in place, so a tuple read under the lock is a safe value copy.
- Access to Ball instances is coordinated by Model using a lock; no caller outside
  the engine ever holds a Ball.
"""
import itertools
import threading
from dataclasses import dataclass, field
from typing import List, Tuple

from .constants import (
    BALL_RADIUS,
    DEFAULT_BALL_POSITIONS,
    DEFAULT_FORCE_CONSTANT,
    DEFAULT_TICK_INTERVAL,
    DEFAULT_TIME_STEP,
)
from .vector_utils import ZERO, vec_add, vec_len_sq, vec_scale, vec_sub

BallId = int

NULL_ID: BallId = 0

_id_counter = itertools.count(1)
_id_lock = threading.Lock()


def next_ball_id() -> BallId:
    """Allocate a fresh id; safe to call from any thread."""
    with _id_lock:
        return next(_id_counter)


def is_null(ball_id: BallId) -> bool:
    return ball_id == NULL_ID


@dataclass
class Ball:
    """
    A simulated circular body.

    Fields:
    - position: 2D position (x, y)
    - velocity: 2D velocity (vx, vy)
    - pinned: when True the integrator leaves position and velocity untouched
    - id: assigned at construction, immutable
    """
    position: Tuple[float, float] = ZERO
    velocity: Tuple[float, float] = ZERO
    pinned: bool = False
    id: BallId = field(default_factory=next_ball_id, init=False)

    def set_position(self, position: Tuple[float, float]) -> None:
        self.position = (float(position[0]), float(position[1]))

    def set_velocity(self, velocity: Tuple[float, float]) -> None:
        self.velocity = (float(velocity[0]), float(velocity[1]))

    def set_pinned(self, pinned: bool) -> None:
        """Pin or release the ball. Pinning always brings it to rest first."""
        if pinned:
            self.velocity = ZERO
        self.pinned = bool(pinned)

    def distance_sq_to(self, position: Tuple[float, float]) -> float:
        return vec_len_sq(vec_sub(self.position, position))

    def apply_force(self, force: Tuple[float, float], dt: float) -> None:
        """Forward Euler velocity update (unit mass)."""
        if self.pinned:
            return
        self.velocity = vec_add(self.velocity, vec_scale(force, dt))

    def make_step(self, dt: float) -> None:
        if self.pinned:
            return
        self.position = vec_add(self.position, vec_scale(self.velocity, dt))

    def state(self) -> "BallState":
        return BallState(self.id, self.position, self.velocity, self.pinned)


@dataclass(frozen=True)
class BallState:
    """Point-in-time value copy of a Ball, safe to hand across threads."""
    id: BallId
    position: Tuple[float, float]
    velocity: Tuple[float, float]
    pinned: bool


@dataclass
class SimulationSettings:
    """
    Engine construction parameters.

    Fields:
    - radius: shared ball radius (pick radius; the contact distance is twice this)
    - force_constant: scale of the pairwise force
    - time_step: simulation time advanced per tick
    - tick_interval: real seconds the loop sleeps after each tick
    - initial_positions: balls created live at construction
    - initial_pinned: pinned flags matching initial_positions (missing entries = unpinned)
    """
    radius: float = BALL_RADIUS
    force_constant: float = DEFAULT_FORCE_CONSTANT
    time_step: float = DEFAULT_TIME_STEP
    tick_interval: float = DEFAULT_TICK_INTERVAL
    initial_positions: List[Tuple[float, float]] = field(
        default_factory=lambda: list(DEFAULT_BALL_POSITIONS))
    initial_pinned: List[bool] = field(default_factory=list)
