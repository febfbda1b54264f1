"""Parser settings: canvas bounds and the default bubble position.

The canvas extent belongs to the drawing layer, so the parser only receives
it as configuration. load_settings() returns defaults merged with values
from the environment (entry points call load_dotenv() first, so a .env file
works too). Core functions never read the environment themselves; they take
a ParserSettings or fall back to DEFAULT_SETTINGS.
"""

import logging
import os
from typing import Any

from pydantic import BaseModel

from .models import Position

logger = logging.getLogger(__name__)

_SETTINGS_DEFAULTS: dict[str, int] = {
    "canvas_width": 2000,
    "canvas_height": 1200,
    "default_x": 100,
    "default_y": 100,
}

# env var → settings field
_ENV_VARS: dict[str, str] = {
    "MANGA_CANVAS_WIDTH": "canvas_width",
    "MANGA_CANVAS_HEIGHT": "canvas_height",
    "MANGA_DEFAULT_X": "default_x",
    "MANGA_DEFAULT_Y": "default_y",
}


class ParserSettings(BaseModel):
    canvas_width: int = _SETTINGS_DEFAULTS["canvas_width"]
    canvas_height: int = _SETTINGS_DEFAULTS["canvas_height"]
    default_x: int = _SETTINGS_DEFAULTS["default_x"]
    default_y: int = _SETTINGS_DEFAULTS["default_y"]

    @property
    def default_position(self) -> Position:
        return Position(x=self.default_x, y=self.default_y)

    def in_bounds(self, x: int, y: int) -> bool:
        """Inclusive on both ends: 0..=width, 0..=height."""
        return 0 <= x <= self.canvas_width and 0 <= y <= self.canvas_height


DEFAULT_SETTINGS = ParserSettings()


def load_settings(overrides: dict[str, Any] | None = None) -> ParserSettings:
    """Read settings, returning defaults merged with environment values.

    Explicit overrides win over the environment. Non-integer environment
    values are ignored with a warning rather than failing startup.
    """
    values: dict[str, Any] = dict(_SETTINGS_DEFAULTS)
    for env_name, field in _ENV_VARS.items():
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            continue
        try:
            values[field] = int(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not an integer", env_name, raw)
    if overrides:
        values.update(overrides)
    return ParserSettings(**values)
