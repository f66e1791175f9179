"""Session tunables, loaded from an optional config.json beside the content."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields

from world_weaver import settings

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"


@dataclass(frozen=True)
class GameConfig:
    start_gold: int = settings.PLAYER_START_GOLD
    max_frame_dt: float = settings.MAX_FRAME_DT
    shop_stock_size: int = settings.SHOP_STOCK_SIZE
    step_reward_gold: int = settings.STEP_REWARD_GOLD
    quest_reward_gold: int = settings.QUEST_REWARD_GOLD
    grant_reward_gold: int = settings.GRANT_REWARD_GOLD
    reward_repeat_grants: bool = False  # pay grant gold even when the item is already held
    seed: int | None = None


def config_from_dict(data: dict) -> GameConfig:
    """Build a GameConfig from a dict, ignoring unknown or mistyped keys."""
    defaults = GameConfig()
    kwargs = {}
    for f in fields(GameConfig):
        if f.name not in data:
            continue
        value = data[f.name]
        default = getattr(defaults, f.name)
        if default is None:
            # Only the seed is optional
            if value is not None and (not isinstance(value, int) or isinstance(value, bool)):
                logger.warning("Ignoring config key %r: expected int", f.name)
                continue
        elif not isinstance(value, type(default)):
            # Allow ints where floats are expected
            if isinstance(default, float) and isinstance(value, int) and not isinstance(value, bool):
                value = float(value)
            else:
                logger.warning("Ignoring config key %r: expected %s", f.name, type(default).__name__)
                continue
        kwargs[f.name] = value
    return GameConfig(**kwargs)


def load_config(data_dir: str | None) -> GameConfig:
    """Load config.json from *data_dir*, returning defaults if absent or invalid."""
    if data_dir is None:
        return GameConfig()
    path = os.path.join(data_dir, CONFIG_FILENAME)
    try:
        with open(path, "r") as f:
            data = json.load(f)
        if isinstance(data, dict):
            return config_from_dict(data)
        logger.warning("%s is not a JSON object; using defaults", path)
    except FileNotFoundError:
        pass
    except (json.JSONDecodeError, TypeError, OSError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
    return GameConfig()
