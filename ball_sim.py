#!/usr/bin/env python3
"""
Ball Simulator application entry point and viewport.

What this module does
- Builds the simulation engine (ballsim.model.Model), optionally from a scene file.
- Runs a Pygame viewport on the main thread that polls engine snapshots at 60 FPS and
  feeds pointer events through ballsim.presenter.MousePresenter.

Threading model
- The engine advances physics on its own background thread. The viewport never
  touches engine internals: it calls the engine's lock-protected operations and
  draws value copies returned by Model.snapshot().

Controls
- Left press + drag: hold and move a ball. Left click: delete it.
- Right click: add a ball.
- Space: start/stop the simulation. +/-: double/halve the time step.
- Mouse wheel: zoom. Arrow keys: pan. Esc: quit.

Running
1) Install dependencies: `pip install pygame`
2) Run this module: `python ball_sim.py [--scene anchored_ring] [--dt 0.001]`
"""

import argparse
import logging
import sys

import pygame

from ballsim.camera import Camera2D
from ballsim.constants import (
    BACKGROUND_COLOR,
    BALL_COLOR,
    BORDER_COLOR,
    BORDER_SIZE,
    PINNED_BALL_COLOR,
    TEXT_COLOR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from ballsim.model import Model
from ballsim.presenter import LEFT_BUTTON, MousePresenter
from ballsim.scene_loader import SceneError, load_scene

logger = logging.getLogger("ball_sim")

# ============================================================
# Pygame Viewport
# ============================================================


class PygameViewport:
    """
    Pygame loop: draws balls and the status line, forwards input to the presenter.
    """
    def __init__(self, model: Model):
        self.model = model
        self.camera = Camera2D()
        self.presenter = MousePresenter(model, self.camera)
        self.surface = None
        self.clock = None
        self.font = None
        self.pan_speed_keys = 600  # pixels per second
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Ball Simulator")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont(None, 20)

        try:
            while self.running:
                real_dt = self.clock.tick(60) / 1000.0
                self.handle_events(real_dt)
                self.draw()
        finally:
            pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.pan_pixels(self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.pan_pixels(-self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.pan_pixels(0, self.pan_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.pan_pixels(0, -self.pan_speed_keys * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.presenter.start_stop_pressed()
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    self.presenter.time_step_changed(self.presenter.time_step() * 2.0)
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    self.presenter.time_step_changed(self.presenter.time_step() / 2.0)

            elif event.type == pygame.MOUSEWHEEL:
                self.camera.zoom(1.1 if event.y > 0 else 1.0 / 1.1)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                self.presenter.mouse_pressed(event.pos, event.button)

            elif event.type == pygame.MOUSEBUTTONUP:
                self.presenter.mouse_released(event.pos, event.button)

            elif event.type == pygame.MOUSEMOTION:
                left_down = bool(event.buttons[LEFT_BUTTON - 1])
                self.presenter.mouse_moved(event.pos, left_down)

    def draw(self):
        surf = self.surface
        surf.fill(BORDER_COLOR)
        w, h = self.camera.viewport_size
        pygame.draw.rect(surf, BACKGROUND_COLOR,
                         (BORDER_SIZE, BORDER_SIZE, w - 2 * BORDER_SIZE, h - 2 * BORDER_SIZE))

        for info in self.presenter.balls_to_draw():
            color = PINNED_BALL_COLOR if info.pinned else BALL_COLOR
            pygame.draw.circle(surf, color, info.center, info.radius)

        state = "running" if self.model.is_running() else "stopped"
        status = f"{state}   dt={self.presenter.time_step():g}   balls={self.model.ball_count()}"
        surf.blit(self.font.render(status, True, TEXT_COLOR), (BORDER_SIZE + 6, BORDER_SIZE + 4))

        pygame.display.flip()


# ============================================================
# Application Entry
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive attracting-balls simulation")
    parser.add_argument("--scene", help="scene file path, or name inside scenes/")
    parser.add_argument("--dt", type=float, help="fixed time step per tick")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--paused", action="store_true", help="start with the simulation stopped")
    return parser.parse_args(argv)


def build_model(args) -> Model:
    if args.scene:
        model = Model.from_scene(load_scene(args.scene))
    else:
        model = Model()
    if args.dt is not None:
        model.set_time_step(args.dt)
    return model


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        model = build_model(args)
    except (SceneError, ValueError) as e:
        logger.error("%s", e)
        return 2

    with model:
        if not args.paused:
            model.start()
        PygameViewport(model).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
