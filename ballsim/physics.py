#!/usr/bin/env python3
"""
Force law for Ball Simulator.

Responsibilities
- Compute the net pairwise force acting on one ball given every live ball.

Force law
- For a pair separated by distance r (vector d from target to other), the target
  is pulled along d with magnitude k * (1/r - 1/r^2). Attraction fades with
  distance, so bodies drift together.
- Pairs closer than the contact distance (two touching discs, 2 * radius) contribute
  exactly zero. This removes the singularity at r -> 0 and gives hard-contact
  behaviour: bodies stop pulling once they touch.
- Beyond the contact distance the magnitude strictly decreases with r.

Numerical notes
- Complexity is O(N) per target, O(N^2) per tick (direct summation). Entity counts
  are human-scale, so no spatial partitioning is used.
- The integrator is forward Euler on unit masses (see Ball.apply_force/make_step).

Threading
- This module is pure compute: compute_force only reads the balls passed in and
  never touches shared state. Model calls it while holding its lock.
"""

import math
from typing import Iterable, Tuple

from .constants import BALL_RADIUS, CONTACT_DISTANCE_FACTOR, DEFAULT_FORCE_CONSTANT
from .data_models import Ball


class ForceLaw:
    """
    Pairwise attraction with a contact cut-off.

    The force on a target from one other ball is:
    F = k * (1/r - 1/r^2) * d / r      for r >= contact_distance
    F = 0                              otherwise
    """

    def __init__(self, force_constant: float = DEFAULT_FORCE_CONSTANT,
                 contact_distance: float = BALL_RADIUS * CONTACT_DISTANCE_FACTOR):
        """
        Initialize the force law.

        Args:
            force_constant: Scale k of the pairwise force
            contact_distance: Center-to-center distance below which force is suppressed
        """
        self.force_constant = float(force_constant)
        self.contact_distance = max(0.0, float(contact_distance))

    def set_contact_distance(self, contact_distance: float) -> None:
        """
        Update the contact distance.

        Args:
            contact_distance: New threshold in world units (must be >= 0)
        """
        self.contact_distance = max(0.0, float(contact_distance))

    def pair_force(self, source: Tuple[float, float],
                   other: Tuple[float, float]) -> Tuple[float, float]:
        """
        Force exerted on a body at `source` by a body at `other`.

        Returns (0.0, 0.0) when the two are within the contact distance.
        """
        dx = other[0] - source[0]
        dy = other[1] - source[1]
        r_squared = dx * dx + dy * dy
        if r_squared < self.contact_distance * self.contact_distance or r_squared == 0.0:
            return (0.0, 0.0)

        r = math.sqrt(r_squared)
        # k * (1/r - 1/r^2) along the unit vector d / r
        scale = self.force_constant * (1.0 / r_squared - 1.0 / (r_squared * r))
        return (dx * scale, dy * scale)

    def compute_force(self, target: Ball, balls: Iterable[Ball]) -> Tuple[float, float]:
        """
        Net force on `target` from every other ball.

        Self-interaction is skipped by id, so `balls` may include the target.

        Args:
            target: Ball the force acts on.
            balls: All live balls (any iterable; only read).

        Returns:
            (fx, fy) net force.
        """
        fx_total, fy_total = 0.0, 0.0
        for other in balls:
            if other.id == target.id:
                continue
            fx, fy = self.pair_force(target.position, other.position)
            fx_total += fx
            fy_total += fy
        return (fx_total, fy_total)


DEFAULT_FORCE_LAW = ForceLaw()


def compute_force(target: Ball, balls: Iterable[Ball]) -> Tuple[float, float]:
    """Net force on `target` using the default force law."""
    return DEFAULT_FORCE_LAW.compute_force(target, balls)
