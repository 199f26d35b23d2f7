#!/usr/bin/env python3
"""
Pointer-gesture presenter for Ball Simulator.

Translates viewport pointer events (screen pixels) into engine operations and turns
engine snapshots into drawing info. It holds no pygame state, so any front end can
drive it.

Gestures
- Left press on a ball: pin it and hold it.
- Move with the left button down: drag the held ball.
- Left release close to the press point (a click): delete the held ball.
- Left release after a drag: release the held ball.
- Right release anywhere: add a ball at the pointer.

Threading
- Called from the viewport thread only. The engine may delete the held ball under
  us (for instance a scene reload); UnknownEntityError is treated as "the ball is
  gone" and the held reference is dropped.
"""
import logging
from dataclasses import dataclass
from typing import List, Tuple

from .camera import Camera2D
from .constants import MINIMUM_MOVE_PATH
from .data_models import NULL_ID, BallId, is_null
from .model import Model, UnknownEntityError
from .vector_utils import vec_len_sq, vec_sub

logger = logging.getLogger(__name__)

LEFT_BUTTON = 1
RIGHT_BUTTON = 3


@dataclass(frozen=True)
class BallDrawingInfo:
    center: Tuple[int, int]
    radius: int
    pinned: bool


class MousePresenter:
    def __init__(self, model: Model, camera: Camera2D):
        self.model = model
        self.camera = camera
        self.held_ball: BallId = NULL_ID
        self._press_position: Tuple[float, float] = (0.0, 0.0)

    def mouse_pressed(self, screen_pos: Tuple[float, float], button: int) -> None:
        if button != LEFT_BUTTON:
            return
        ball_id = self.model.find_nearest(self.camera.screen_to_world(screen_pos))
        if is_null(ball_id):
            return
        try:
            self.model.set_pinned(ball_id, True)
        except UnknownEntityError:
            logger.debug("Ball %s vanished before it could be held", ball_id)
            return
        self.held_ball = ball_id
        self._press_position = screen_pos

    def mouse_moved(self, screen_pos: Tuple[float, float], left_down: bool) -> None:
        if is_null(self.held_ball) or not left_down:
            return
        try:
            self.model.move_ball(self.held_ball, self.camera.screen_to_world(screen_pos))
        except UnknownEntityError:
            self._drop_held()

    def mouse_released(self, screen_pos: Tuple[float, float], button: int) -> None:
        if button == RIGHT_BUTTON:
            self.model.add_ball(self.camera.screen_to_world(screen_pos))
            return
        if is_null(self.held_ball) or button != LEFT_BUTTON:
            return
        if vec_len_sq(vec_sub(screen_pos, self._press_position)) < MINIMUM_MOVE_PATH:
            self.model.remove_ball(self.held_ball)
        else:
            try:
                self.model.set_pinned(self.held_ball, False)
            except UnknownEntityError:
                logger.debug("Held ball %s vanished before release", self.held_ball)
        self.held_ball = NULL_ID

    def _drop_held(self) -> None:
        logger.debug("Held ball %s vanished during drag", self.held_ball)
        self.held_ball = NULL_ID

    def balls_to_draw(self) -> List[BallDrawingInfo]:
        radius = self.camera.screen_length(self.model.radius)
        return [
            BallDrawingInfo(self.camera.world_to_screen(state.position), radius, state.pinned)
            for state in self.model.snapshot()
        ]

    def time_step(self) -> float:
        return self.model.get_time_step()

    def time_step_changed(self, new_value: float) -> None:
        try:
            self.model.set_time_step(new_value)
        except ValueError as e:
            logger.warning("Ignoring time step change: %s", e)

    def start_stop_pressed(self) -> bool:
        return self.model.start_stop()
