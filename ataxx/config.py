# ataxx/config.py
from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Maximum minimax depth before falling back to the static evaluation.
MAX_DEPTH = 4


@dataclass
class SearchConfig:
    depth: int = MAX_DEPTH
    alternate_sense: bool = False  # textbook alpha-beta instead of the classic engine behaviour


@dataclass
class GameConfig:
    red: str = "manual"
    blue: str = "auto"


@dataclass
class UIConfig:
    square_size: int = 50
    piece_radius: int = 15
    block_width: int = 40
    fps: int = 30


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    game: GameConfig = field(default_factory=GameConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "WARNING"

    @staticmethod
    def load_from_toml(path: str = "ataxx.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "game", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
                else:
                    logger.debug("ignoring unknown option %s.%s", section, k)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg


def load_config() -> Config:
    cfg = Config.load_from_toml(os.environ.get("ATAXX_CONFIG_TOML", "ataxx.toml"))
    # allow env override of depth for quick experiments
    override_depth = os.environ.get("ATAXX_SEARCH_DEPTH")
    if override_depth:
        try:
            cfg.search.depth = int(override_depth)
        except ValueError:
            logger.warning("ignoring invalid ATAXX_SEARCH_DEPTH=%r", override_depth)
    return cfg


# single globally importable config instance
CONFIG = load_config()
