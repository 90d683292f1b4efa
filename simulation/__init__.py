"""Bot-only game simulation."""

from simulation.runner import (
    GameResult,
    GameLog,
    GameRunner,
    MoveRecord,
    save_game_log,
    run_batch,
)

__all__ = [
    "GameResult",
    "GameLog",
    "GameRunner",
    "MoveRecord",
    "save_game_log",
    "run_batch",
]
