#!/usr/bin/env python3
"""
Simulation engine for Ball Simulator.

What this module does
- Owns the ball registry (id -> Ball), the pending creation/deletion queues, the
  fixed time step and the background simulation thread.
- Exposes thread-safe operations for an outside caller (typically a UI thread):
  add/remove/move/pin balls, spatial lookup, and value-copy snapshots for drawing.

Threading model
- One lock guards the registry, both queues, the time step and the running flag.
  Every public operation holds it only for its own short critical section.
- The simulation thread takes the lock once per ball per pass (force pass, move
  pass) and once per queue drain, never for a whole tick, so callers stay responsive.
  A consequence: a ball moved or pinned by the caller between the force pass and the
  move pass of one tick is integrated with a force computed from the earlier layout.
  This relaxation is accepted; ticks are tiny and the next tick sees the new layout.
- While running, add/remove requests are queued and merged by the simulation thread,
  so the registry never changes under an in-progress pass. Each tick drains the
  queues twice (after the force pass and after the move pass), which bounds the delay
  before a request becomes visible to one tick. While stopped there is no concurrent
  pass and requests are applied immediately.
- The simulation thread only iterates its own list snapshot of the registry, so it
  never touches a ball the caller has asked to delete mid-pass.

Lifetime
- start() spawns the loop and returns; stop() clears the running flag and joins it.
- close(), the context-manager protocol and simulation() guarantee the loop is torn
  down before the Model is discarded.
"""
import logging
import math
import threading
import time
from contextlib import contextmanager
from typing import Dict, List, Optional, Tuple

from .constants import CONTACT_DISTANCE_FACTOR
from .data_models import NULL_ID, Ball, BallId, BallState, SimulationSettings, is_null
from .physics import ForceLaw
from .vector_utils import ZERO, vec

logger = logging.getLogger(__name__)


class UnknownEntityError(KeyError):
    """Raised when an operation addresses a ball id that is not in the registry."""

    def __init__(self, ball_id: BallId):
        super().__init__(ball_id)
        self.ball_id = ball_id

    def __str__(self):
        return f"Unknown ball id {self.ball_id}"


class Model:
    """
    Ball registry plus fixed-step simulation loop.

    All public methods are safe to call from any thread, concurrently with the
    simulation thread.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None):
        settings = settings or SimulationSettings()
        self._lock = threading.Lock()
        # Serializes start/stop; never taken by the simulation thread
        self._lifecycle_lock = threading.Lock()
        self._balls: Dict[BallId, Ball] = {}
        self._balls_to_create: List[Ball] = []
        self._ids_to_delete: List[BallId] = []
        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._tick_count = 0

        self._time_step = self._checked_time_step(settings.time_step)
        self._tick_interval = max(0.0, float(settings.tick_interval))
        self._radius = max(0.0, float(settings.radius))
        self.physics = ForceLaw(settings.force_constant, self._radius * CONTACT_DISTANCE_FACTOR)

        for i, position in enumerate(settings.initial_positions):
            ball = Ball(vec(*position))
            if i < len(settings.initial_pinned) and settings.initial_pinned[i]:
                ball.set_pinned(True)
            self._balls[ball.id] = ball

    @property
    def radius(self) -> float:
        """Shared ball radius; fixed at construction since the force cut-off derives from it."""
        return self._radius

    @classmethod
    def from_scene(cls, scene) -> "Model":
        """Build a stopped engine from a loaded scene_loader.Scene."""
        return cls(scene.settings)

    # ------------------------------------------------------------------
    # Registry mutation
    # ------------------------------------------------------------------

    def add_ball(self, position: Tuple[float, float]) -> BallId:
        """
        Create a ball at rest at `position` and return its id.

        While running the ball is queued and appears after the next drain; the id is
        valid immediately either way.
        """
        ball = Ball(vec(*position))
        with self._lock:
            self._balls_to_create.append(ball)
            if not self._running:
                self._create_balls()
        return ball.id

    def remove_ball(self, ball_id: BallId) -> None:
        """Delete a ball by id. Null or already-absent ids are ignored."""
        if is_null(ball_id):
            return
        with self._lock:
            pending = [b for b in self._balls_to_create if b.id != ball_id]
            if len(pending) != len(self._balls_to_create):
                # Never merged; drop it from the queue instead
                self._balls_to_create[:] = pending
                return
            self._ids_to_delete.append(ball_id)
            if not self._running:
                self._delete_balls()

    def remove_ball_at(self, position: Tuple[float, float]) -> BallId:
        """Delete the ball under `position`, if any. Returns its id or NULL_ID."""
        ball_id = self.find_nearest(position)
        self.remove_ball(ball_id)
        return ball_id

    def move_ball(self, ball_id: BallId, position: Tuple[float, float]) -> None:
        if is_null(ball_id):
            return
        position = vec(*position)
        with self._lock:
            self._get(ball_id).set_position(position)

    def set_pinned(self, ball_id: BallId, pinned: bool) -> None:
        """Pin (velocity forced to zero) or release (velocity kept) a ball."""
        if is_null(ball_id):
            return
        with self._lock:
            self._get(ball_id).set_pinned(pinned)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_nearest(self, position: Tuple[float, float]) -> BallId:
        """
        Return the first ball whose center lies within one radius of `position`.

        Registry order decides between several candidates. Returns NULL_ID when no
        ball is close enough.
        """
        position = vec(*position)
        with self._lock:
            radius_sq = self._radius * self._radius
            for ball_id, ball in self._balls.items():
                if ball.distance_sq_to(position) < radius_sq:
                    return ball_id
        return NULL_ID

    def positions(self) -> List[Tuple[float, float]]:
        with self._lock:
            return [ball.position for ball in self._balls.values()]

    def ids(self) -> List[BallId]:
        with self._lock:
            return list(self._balls)

    def snapshot(self) -> List[BallState]:
        """Value copies of every live ball."""
        with self._lock:
            return [ball.state() for ball in self._balls.values()]

    def position(self, ball_id: BallId) -> Tuple[float, float]:
        with self._lock:
            return self._get(ball_id).position

    def velocity(self, ball_id: BallId) -> Tuple[float, float]:
        with self._lock:
            return self._get(ball_id).velocity

    def ball_count(self) -> int:
        with self._lock:
            return len(self._balls)

    def tick_count(self) -> int:
        """Number of integration ticks completed since construction."""
        with self._lock:
            return self._tick_count

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def get_time_step(self) -> float:
        with self._lock:
            return self._time_step

    def set_time_step(self, time_step: float) -> None:
        """Change the step; takes effect from the next tick."""
        time_step = self._checked_time_step(time_step)
        with self._lock:
            self._time_step = time_step

    # ------------------------------------------------------------------
    # Simulation lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Spawn the simulation thread. No-op if it is already running."""
        with self._lifecycle_lock:
            with self._lock:
                if self._running:
                    return
                self._running = True
                self._thread = threading.Thread(target=self._simulate, name="ball-sim", daemon=True)
                self._thread.start()
                dt = self._time_step
        logger.info("Simulation started (dt=%g)", dt)

    def stop(self) -> None:
        """
        Stop the simulation thread and wait for it to exit.

        On return no tick is in progress, every ball is at rest and any request
        queued after the final tick has been applied. Stopping a stopped engine is a
        no-op.
        """
        with self._lock:
            if self._thread is threading.current_thread():
                raise RuntimeError("stop() cannot be called from the simulation thread")
        with self._lifecycle_lock:
            with self._lock:
                thread = self._thread
                if not self._running and thread is None:
                    return
                self._running = False

            # The handle stays set until the join returns so the loop can recognise itself
            if thread is not None:
                thread.join()

            with self._lock:
                self._thread = None
                self._delete_balls()
                self._create_balls()
                for ball in self._balls.values():
                    ball.set_velocity(ZERO)
                ticks = self._tick_count
        logger.info("Simulation stopped after %d ticks", ticks)

    def start_stop(self) -> bool:
        """Toggle the simulation. Returns True if it is running afterwards."""
        if self.is_running():
            self.stop()
            return False
        self.start()
        return True

    @contextmanager
    def simulation(self):
        """Run the simulation for the duration of a with-block."""
        self.start()
        try:
            yield self
        finally:
            self.stop()

    def close(self) -> None:
        self.stop()

    def __enter__(self) -> "Model":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Simulation thread
    # ------------------------------------------------------------------

    def _simulate(self) -> None:
        try:
            while True:
                with self._lock:
                    if not self._running:
                        break
                    dt = self._time_step
                self._step(dt)
                if self._tick_interval > 0.0:
                    time.sleep(self._tick_interval)
                else:
                    # Yield the interpreter to caller threads
                    time.sleep(0)
        except Exception:
            logger.exception("Simulation thread crashed")
            with self._lock:
                self._running = False
            raise

    def _step(self, dt: float) -> None:
        """One tick: force pass, drain, move pass, drain."""
        for ball in self._live_balls():
            with self._lock:
                if ball.pinned:
                    continue
                force = self.physics.compute_force(ball, self._balls.values())
                ball.apply_force(force, dt)
        self._drain()

        for ball in self._live_balls():
            with self._lock:
                ball.make_step(dt)
        self._drain()

        with self._lock:
            self._tick_count += 1

    def _live_balls(self) -> List[Ball]:
        with self._lock:
            return list(self._balls.values())

    def _drain(self) -> None:
        with self._lock:
            self._delete_balls()
            self._create_balls()

    # The helpers below expect the caller to hold self._lock.

    def _get(self, ball_id: BallId) -> Ball:
        try:
            return self._balls[ball_id]
        except KeyError:
            raise UnknownEntityError(ball_id) from None

    def _create_balls(self) -> None:
        if not self._balls_to_create:
            return
        for ball in self._balls_to_create:
            self._balls[ball.id] = ball
        logger.debug("Created %d ball(s)", len(self._balls_to_create))
        self._balls_to_create.clear()

    def _delete_balls(self) -> None:
        if not self._ids_to_delete:
            return
        for ball_id in self._ids_to_delete:
            self._balls.pop(ball_id, None)
        logger.debug("Deleted %d ball(s)", len(self._ids_to_delete))
        self._ids_to_delete.clear()

    @staticmethod
    def _checked_time_step(time_step: float) -> float:
        time_step = float(time_step)
        if not math.isfinite(time_step) or time_step <= 0.0:
            raise ValueError(f"time step must be a finite positive number, got {time_step!r}")
        return time_step
