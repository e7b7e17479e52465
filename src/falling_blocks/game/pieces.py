from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple

import numpy as np


MASK_SIZE = 4


class TetrominoType(IntEnum):
    I = 1
    L = 2
    J = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Shape = np.ndarray


def _mask(rows: List[str]) -> Shape:
    padded = [r.ljust(MASK_SIZE, ".") for r in rows]
    padded += ["." * MASK_SIZE] * (MASK_SIZE - len(padded))
    arr = np.array([[1 if c == "#" else 0 for c in r] for r in padded], dtype=np.int8)
    arr.setflags(write=False)
    return arr


# Layouts sit in the top-left corner of the 4x4 mask
BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _mask(["####"]),
    TetrominoType.L: _mask(["###", "#"]),
    TetrominoType.J: _mask(["###", "..#"]),
    TetrominoType.O: _mask(["##", "##"]),
    TetrominoType.S: _mask([".##", "##"]),
    TetrominoType.T: _mask(["###", ".#"]),
    TetrominoType.Z: _mask(["##", ".##"]),
}

# Color handle -> RGB, handle 0 is the empty cell
PALETTE: Dict[int, Tuple[int, int, int]] = {
    0: (20, 20, 26),
    int(TetrominoType.I): (0, 0, 255),
    int(TetrominoType.L): (255, 0, 0),
    int(TetrominoType.J): (0, 255, 0),
    int(TetrominoType.O): (255, 0, 255),
    int(TetrominoType.S): (255, 255, 0),
    int(TetrominoType.T): (0, 255, 255),
    int(TetrominoType.Z): (255, 165, 0),
}


def _freeze(shape: Shape) -> Shape:
    arr = np.array(shape, dtype=np.int8, copy=True)
    if arr.shape != (MASK_SIZE, MASK_SIZE):
        raise ValueError(f"piece mask must be {MASK_SIZE}x{MASK_SIZE}, got {arr.shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Piece:
    """A 4x4 occupancy mask with one color handle.

    Pieces are values: rotating returns a new Piece and never touches the
    mask of the original. Rotation does no legality checks, that is the
    grid's job (see ``GameGrid.can_place``).
    """

    kind: TetrominoType
    mask: Shape

    def __post_init__(self) -> None:
        object.__setattr__(self, "mask", _freeze(self.mask))

    @classmethod
    def spawn(cls, kind: TetrominoType) -> "Piece":
        return cls(kind=kind, mask=BASE_SHAPES[kind])

    @property
    def color(self) -> int:
        return int(self.kind)

    def rotated_cw(self) -> "Piece":
        # new[i, j] = old[3 - j, i]
        return Piece(self.kind, np.rot90(self.mask, 1, axes=(1, 0)))

    def rotated_ccw(self) -> "Piece":
        # new[i, j] = old[j, 3 - i]
        return Piece(self.kind, np.rot90(self.mask, 1, axes=(0, 1)))

    def same_shape(self, other: "Piece") -> bool:
        return self.kind == other.kind and bool(np.array_equal(self.mask, other.mask))

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        cells: List[Tuple[int, int]] = []
        for dy in range(MASK_SIZE):
            for dx in range(MASK_SIZE):
                if self.mask[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells
