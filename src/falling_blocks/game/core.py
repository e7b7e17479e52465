from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, List, Optional, Tuple

import numpy as np

from .grid import GameGrid
from .pieces import Piece, TetrominoType
from .rules import ScoringRules


logger = logging.getLogger(__name__)

PieceSource = Callable[[], TetrominoType]
ScoreListener = Callable[[int], None]
GameOverListener = Callable[[], None]


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0
    gravity_interval_ms: int = 500
    # Also end the game when a piece lands with cells still above row 0
    lock_out_ends_game: bool = False

    def __post_init__(self) -> None:
        if self.width < 4 or self.height <= 0:
            raise ValueError(f"board must be at least 4 columns wide and 1 row high, got {self.width}x{self.height}")
        if self.gravity_interval_ms <= 0:
            raise ValueError("gravity_interval_ms must be positive")


@dataclass(frozen=True, eq=False)
class PieceSnapshot:
    kind: TetrominoType
    mask: np.ndarray
    color: int
    x: int
    y: int


class FallingBlockGame:
    """Falling-block engine: active piece, gravity, locking, line clears and score.

    The engine owns no clock and no input device. Hosts call
    ``on_gravity_tick`` from a periodic timer and the movement commands from
    their input handlers, then read ``get_board_snapshot`` and
    ``get_active_piece_snapshot`` to draw a frame. Illegal moves are reported
    as ``False``; the only terminal condition is a spawn that does not fit.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        piece_source: Optional[PieceSource] = None,
        on_score_changed: Optional[ScoreListener] = None,
        on_game_over: Optional[GameOverListener] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self._piece_source: PieceSource = piece_source or self._random_kind
        self.grid = GameGrid(self.config.width, self.config.height)
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_spawned = 0
        self.game_over = False
        self.current_piece: Optional[Piece] = None
        self.current_x = 0
        self.current_y = 0
        self._score_listeners: List[ScoreListener] = []
        self._game_over_listeners: List[GameOverListener] = []
        if on_score_changed is not None:
            self.add_score_listener(on_score_changed)
        if on_game_over is not None:
            self.add_game_over_listener(on_game_over)
        self.reset()

    def add_score_listener(self, listener: ScoreListener) -> None:
        self._score_listeners.append(listener)

    def add_game_over_listener(self, listener: GameOverListener) -> None:
        self._game_over_listeners.append(listener)

    @property
    def running(self) -> bool:
        return not self.game_over

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.grid.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_spawned = 0
        self.game_over = False
        self.current_piece = None
        self.spawn_piece()

    def _random_kind(self) -> TetrominoType:
        return self.rng.choice(list(TetrominoType))

    def spawn_x(self) -> int:
        return self.config.width // 2 - 2

    def spawn_piece(self) -> bool:
        if self.game_over:
            return False
        piece = Piece.spawn(self._piece_source())
        x, y = self.spawn_x(), self.config.spawn_y
        if not self.grid.can_place(piece, x, y):
            self._end_game(f"{piece.kind.name} piece blocked at spawn")
            return False
        self.current_piece = piece
        self.current_x = x
        self.current_y = y
        self.pieces_spawned += 1
        logger.debug("spawned %s at (%d, %d)", piece.kind.name, x, y)
        return True

    def _end_game(self, reason: str) -> None:
        if self.game_over:
            return
        self.game_over = True
        self.current_piece = None
        logger.info("game over: %s, score=%d", reason, self.score)
        for listener in list(self._game_over_listeners):
            listener()

    def try_move(self, candidate: Piece, new_x: int, new_y: int) -> bool:
        if self.game_over:
            return False
        if not self.grid.can_place(candidate, new_x, new_y):
            return False
        self.current_piece = candidate
        self.current_x = new_x
        self.current_y = new_y
        return True

    def move_left(self) -> bool:
        if self.current_piece is None:
            return False
        return self.try_move(self.current_piece, self.current_x - 1, self.current_y)

    def move_right(self) -> bool:
        if self.current_piece is None:
            return False
        return self.try_move(self.current_piece, self.current_x + 1, self.current_y)

    def rotate_cw(self) -> bool:
        if self.current_piece is None:
            return False
        return self.try_move(self.current_piece.rotated_cw(), self.current_x, self.current_y)

    def rotate_ccw(self) -> bool:
        if self.current_piece is None:
            return False
        return self.try_move(self.current_piece.rotated_ccw(), self.current_x, self.current_y)

    def soft_drop_one_row(self) -> bool:
        """Move the piece down one row, locking it if it cannot descend."""
        if self.game_over or self.current_piece is None:
            return False
        if self.try_move(self.current_piece, self.current_x, self.current_y + 1):
            return True
        self.on_piece_landed()
        return False

    def hard_drop(self) -> int:
        rows = 0
        while self.soft_drop_one_row():
            rows += 1
        return rows

    def on_gravity_tick(self) -> bool:
        return self.soft_drop_one_row()

    def on_piece_landed(self) -> int:
        if self.game_over or self.current_piece is None:
            return 0
        piece, x, y = self.current_piece, self.current_x, self.current_y
        self.grid.lock(piece, x, y)
        logger.debug("locked %s at (%d, %d)", piece.kind.name, x, y)
        lines = self.grid.clear_and_compact()
        if lines > 0:
            self.lines_cleared_total += lines
            self.score += self.rules.score_for_lines(lines)
            for listener in list(self._score_listeners):
                listener(self.score)
        if self.config.lock_out_ends_game and any(cy < 0 for _, cy in piece.cells_at(x, y)):
            self._end_game(f"{piece.kind.name} piece locked above the board")
            return lines
        self.spawn_piece()
        return lines

    def get_board_snapshot(self) -> np.ndarray:
        return self.grid.clone_state()

    def get_active_piece_snapshot(self) -> Optional[PieceSnapshot]:
        piece = self.current_piece
        if piece is None:
            return None
        return PieceSnapshot(
            kind=piece.kind,
            mask=piece.mask,
            color=piece.color,
            x=self.current_x,
            y=self.current_y,
        )

    def step(self, action: Action) -> Tuple[np.ndarray, bool, bool, dict]:
        if self.game_over:
            return self.get_state(), False, True, self._info()

        moved = False
        if action == Action.LEFT:
            moved = self.move_left()
        elif action == Action.RIGHT:
            moved = self.move_right()
        elif action == Action.ROTATE_CW:
            moved = self.rotate_cw()
        elif action == Action.ROTATE_CCW:
            moved = self.rotate_ccw()
        elif action == Action.SOFT_DROP:
            moved = self.soft_drop_one_row()
        elif action == Action.HARD_DROP:
            moved = self.hard_drop() > 0
        elif action == Action.NONE:
            pass

        return self.get_state(), moved, self.game_over, self._info()

    def _info(self) -> dict:
        return {
            "score": self.score,
            "lines_cleared_total": self.lines_cleared_total,
        }

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None and not self.game_over:
            for x, y in self.current_piece.cells_at(self.current_x, self.current_y):
                if self.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -self.current_piece.color
        return state
