"""Game module for tetris_ga.

Exports the playfield model:
- Board: grid state, collision, merge and line clearing
- Piece: tetromino value object with quarter-turn masks
- TetrominoType: enum of the seven catalogue shapes
- ScoringRules: line-clear table, levels and fall interval

The session state machine lives in `tetris_ga.game.core` (GameSession).
"""

from .grid import HEIGHT, WIDTH, Board
from .pieces import Piece, TetrominoType, mask_for, rotate_mask
from .rules import ScoringRules

__all__ = [
    "WIDTH",
    "HEIGHT",
    "Board",
    "Piece",
    "TetrominoType",
    "mask_for",
    "rotate_mask",
    "ScoringRules",
]
