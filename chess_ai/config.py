# chess_ai/config.py
import logging
import os
import tomllib
from dataclasses import dataclass, field
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# Defaults (centipawns)
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 280,
    "BISHOP": 320,
    "ROOK": 479,
    "QUEEN": 929,
    "KING": 60000,
}

@dataclass
class SearchConfig:
    depth: int = 3

@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    positional_table_path: Optional[str] = None  # TOML file with a [tables] section
    # keep the opponent-promotion term looking up the pawn table at the target square
    promotion_parity: bool = True
    # carry the root search value between turns instead of re-scoring the played move
    running_score_from_search: bool = True

@dataclass
class UIConfig:
    engine_name: str = "ChessAI"
    api_port: int = 8000

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            if section not in raw:
                continue
            target = getattr(cfg, section)
            for k, v in raw[section].items():
                if hasattr(target, k):
                    setattr(target, k, v)
                else:
                    logger.warning("Unknown config key %s.%s ignored", section, k)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"]).upper()
        return cfg

    def apply_env(self, environ=None) -> "Config":
        """Apply CHESS_AI_SEARCH_DEPTH / CHESS_AI_LOG_LEVEL overrides."""
        environ = os.environ if environ is None else environ
        override_depth = environ.get("CHESS_AI_SEARCH_DEPTH")
        if override_depth:
            try:
                self.search.depth = int(override_depth)
            except ValueError:
                logger.warning("Ignoring non-integer CHESS_AI_SEARCH_DEPTH=%r", override_depth)
        override_level = environ.get("CHESS_AI_LOG_LEVEL")
        if override_level:
            self.log_level = override_level.upper()
        return self

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("CHESS_AI_CONFIG_TOML", "config.toml")).apply_env()
