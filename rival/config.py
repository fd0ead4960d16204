# rival/config.py
from dataclasses import dataclass, field
from typing import Dict, List
import os
import tomllib  # python >=3.11

# Defaults (centipawns)
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 320,
    "BISHOP": 330,
    "ROOK": 500,
    "QUEEN": 900,
    "KING": 20000,
}

# Piece-square tables, written as seen from White with rank 8 on the first
# row. White pieces index them with ``square ^ 56``, Black pieces with
# ``square`` directly.
PST_PAWN = [
      0,   0,   0,   0,   0,   0,   0,   0,
     50,  50,  50,  50,  50,  50,  50,  50,
     10,  10,  20,  30,  30,  20,  10,  10,
      5,   5,  10,  25,  25,  10,   5,   5,
      0,   0,   0,  20,  20,   0,   0,   0,
      5,  -5, -10,   0,   0, -10,  -5,   5,
      5,  10,  10, -20, -20,  10,  10,   5,
      0,   0,   0,   0,   0,   0,   0,   0,
]

PST_KNIGHT = [
    -50, -40, -30, -30, -30, -30, -40, -50,
    -40, -20,   0,   0,   0,   0, -20, -40,
    -30,   0,  10,  15,  15,  10,   0, -30,
    -30,   5,  15,  20,  20,  15,   5, -30,
    -30,   0,  15,  20,  20,  15,   0, -30,
    -30,   5,  10,  15,  15,  10,   5, -30,
    -40, -20,   0,   5,   5,   0, -20, -40,
    -50, -40, -30, -30, -30, -30, -40, -50,
]

PST_BISHOP = [
    -20, -10, -10, -10, -10, -10, -10, -20,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -10,   0,   5,  10,  10,   5,   0, -10,
    -10,   5,   5,  10,  10,   5,   5, -10,
    -10,   0,  10,  10,  10,  10,   0, -10,
    -10,  10,  10,  10,  10,  10,  10, -10,
    -10,   5,   0,   0,   0,   0,   5, -10,
    -20, -10, -10, -10, -10, -10, -10, -20,
]

PST_ROOK = [
      0,   0,   0,   0,   0,   0,   0,   0,
      5,  10,  10,  10,  10,  10,  10,   5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
     -5,   0,   0,   0,   0,   0,   0,  -5,
      0,   0,   0,   5,   5,   0,   0,   0,
]

PST_QUEEN = [
    -20, -10, -10,  -5,  -5, -10, -10, -20,
    -10,   0,   0,   0,   0,   0,   0, -10,
    -10,   0,   5,   5,   5,   5,   0, -10,
     -5,   0,   5,   5,   5,   5,   0,  -5,
      0,   0,   5,   5,   5,   5,   0,  -5,
    -10,   5,   5,   5,   5,   5,   0, -10,
    -10,   0,   5,   0,   0,   0,   0, -10,
    -20, -10, -10,  -5,  -5, -10, -10, -20,
]

PST_KING_MG = [
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -30, -40, -40, -50, -50, -40, -40, -30,
    -20, -30, -30, -40, -40, -30, -30, -20,
    -10, -20, -20, -20, -20, -20, -20, -10,
     20,  20,   0,   0,   0,   0,  20,  20,
     20,  30,  10,   0,   0,  10,  30,  20,
]

PST_KING_EG = [
    -50, -40, -30, -20, -20, -30, -40, -50,
    -30, -20, -10,   0,   0, -10, -20, -30,
    -30, -10,  20,  30,  30,  20, -10, -30,
    -30, -10,  30,  40,  40,  30, -10, -30,
    -30, -10,  30,  40,  40,  30, -10, -30,
    -30, -10,  20,  30,  30,  20, -10, -30,
    -30, -30,   0,   0,   0,   0, -30, -30,
    -50, -30, -30, -30, -30, -30, -30, -50,
]


@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    pst_mg: Dict[str, List[int]] = field(default_factory=lambda: {
        "PAWN": PST_PAWN, "KNIGHT": PST_KNIGHT, "BISHOP": PST_BISHOP,
        "ROOK": PST_ROOK, "QUEEN": PST_QUEEN, "KING": PST_KING_MG,
    })
    pst_eg: Dict[str, List[int]] = field(default_factory=lambda: {
        "PAWN": PST_PAWN, "KNIGHT": PST_KNIGHT, "BISHOP": PST_BISHOP,
        "ROOK": PST_ROOK, "QUEEN": PST_QUEEN, "KING": PST_KING_EG,
    })
    phase_weights: Dict[str, int] = field(default_factory=lambda: {
        "KNIGHT": 1, "BISHOP": 1, "ROOK": 2, "QUEEN": 4
    })
    max_phase: int = 24
    bishop_pair_bonus: int = 30
    isolated_pawn_penalty: int = -15
    # indexed by rank relative to the pawn's owner
    passed_pawn_bonus: List[int] = field(default_factory=lambda: [0, 5, 10, 20, 35, 60, 100, 0])
    mobility_weights: Dict[str, int] = field(default_factory=lambda: {
        "KNIGHT": 4, "BISHOP": 4, "ROOK": 2, "QUEEN": 1
    })
    missing_shield_penalty: int = 15
    tempo_bonus: int = 10


@dataclass
class SearchTuning:
    # nodes between deadline polls inside the tree
    time_check_nodes: int = 2048
    q_max_depth: int = 8
    default_difficulty: str = "medium"


@dataclass
class UIConfig:
    engine_name: str = "Rival"
    selfplay_move_limit: int = 200


@dataclass
class Config:
    search: SearchTuning = field(default_factory=SearchTuning)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "rival.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        # unknown keys are ignored
        for section in ("search", "eval", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg


# single globally importable config instance (read-only at runtime)
CONFIG = Config.load_from_toml(os.environ.get("RIVAL_CONFIG_TOML", "rival.toml"))
if os.environ.get("RIVAL_LOG_LEVEL"):
    CONFIG.log_level = os.environ["RIVAL_LOG_LEVEL"].upper()
