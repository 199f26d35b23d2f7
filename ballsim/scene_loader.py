#!/usr/bin/env python3
"""
Scene JSON loading utilities.

A scene is a starting configuration for the engine: simulation parameters plus
the balls that exist at construction.

Schema
======
Scene JSON (scenes/*.json), every key optional:
{
  "name": "Human-friendly scene name",
  "description": "Optional description",
  "time_step": 0.001,
  "radius": 1.0,
  "force_constant": 1.0,
  "tick_interval": 0.0,
  "balls": [
    {"position": [15.0, 15.0], "pinned": false}
  ]
}

A scene without "balls" starts with the default two balls. Users can add their own
JSON files into the scenes folder and they'll be picked up by list_scenes().
"""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .data_models import SimulationSettings

logger = logging.getLogger(__name__)

SCENES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "scenes")


class SceneError(Exception):
    """Raised when a scene file cannot be read or is not a JSON object."""


@dataclass
class Scene:
    name: str
    description: str = ""
    settings: SimulationSettings = field(default_factory=SimulationSettings)


def _read_json(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise SceneError(f"Cannot read scene '{path}': {e}") from e
    if not isinstance(data, dict):
        raise SceneError(f"Scene '{path}' must contain a JSON object")
    return data


def _coerce_position(p) -> Tuple[float, float]:
    return (float(p[0]), float(p[1]))


def _resolve(path_or_name: str) -> str:
    if os.path.isfile(path_or_name):
        return path_or_name
    name = path_or_name if path_or_name.lower().endswith(".json") else path_or_name + ".json"
    return os.path.join(SCENES_DIR, name)


def list_scenes(directory: Optional[str] = None) -> List[Tuple[str, str]]:
    """Return list of (file_name, display_name) for available scenes."""
    directory = directory or SCENES_DIR
    items: List[Tuple[str, str]] = []
    if not os.path.isdir(directory):
        return items
    for fn in sorted(os.listdir(directory)):
        if not fn.lower().endswith(".json"):
            continue
        try:
            data = _read_json(os.path.join(directory, fn))
        except SceneError as e:
            logger.warning("Skipping scene: %s", e)
            continue
        items.append((fn, data.get("name") or os.path.splitext(fn)[0]))
    return items


def scene_from_dict(data: dict, default_name: str = "Scene") -> Scene:
    """
    Build a Scene from parsed JSON.

    Invalid numeric parameters raise SceneError; malformed ball entries are skipped.
    """
    settings = SimulationSettings()
    try:
        for key in ("time_step", "radius", "force_constant", "tick_interval"):
            if data.get(key) is not None:
                setattr(settings, key, float(data[key]))
    except (TypeError, ValueError) as e:
        raise SceneError(f"Invalid scene parameter: {e}") from e
    if settings.time_step <= 0.0:
        raise SceneError(f"Scene time_step must be positive, got {settings.time_step}")

    if "balls" in data:
        positions: List[Tuple[float, float]] = []
        pinned: List[bool] = []
        for i, b in enumerate(data.get("balls") or []):
            try:
                positions.append(_coerce_position(b["position"]))
                pinned.append(bool(b.get("pinned", False)))
            except (KeyError, IndexError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed ball #%d in scene '%s'", i, default_name)
                continue
        settings.initial_positions = positions
        settings.initial_pinned = pinned

    return Scene(
        name=data.get("name") or default_name,
        description=data.get("description", ""),
        settings=settings,
    )


def load_scene(path_or_name: str) -> Scene:
    """
    Load a scene by file path, or by file name inside the scenes folder.
    """
    path = _resolve(path_or_name)
    data = _read_json(path)
    scene = scene_from_dict(data, os.path.splitext(os.path.basename(path))[0])
    logger.info("Loaded scene '%s' with %d ball(s)", scene.name,
                len(scene.settings.initial_positions))
    return scene
