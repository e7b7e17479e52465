"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- GameGrid: Board occupancy, locking and line clearing
- Piece: 4x4 tetromino mask with rotation transforms
- TetrominoType: Enum of available piece types
- ScoringRules: Points awarded per cleared row
- FallingBlockGame: Engine driving the active piece, gravity and score
"""

from .grid import GameGrid
from .pieces import BASE_SHAPES, MASK_SIZE, PALETTE, Piece, TetrominoType
from .rules import ScoringRules
from .core import Action, FallingBlockGame, GameConfig, PieceSnapshot

__all__ = [
    "GameGrid",
    "Piece",
    "TetrominoType",
    "BASE_SHAPES",
    "MASK_SIZE",
    "PALETTE",
    "ScoringRules",
    "FallingBlockGame",
    "GameConfig",
    "PieceSnapshot",
    "Action",
]
