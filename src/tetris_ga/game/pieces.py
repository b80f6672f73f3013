from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 0
    T = 1
    O = 2
    S = 3
    Z = 4
    J = 5
    L = 6


MASK_SIZE = 4

# 4x4 masks, flattened row by row ("X" occupied). Base orientation only.
_BASE_LAYOUTS = {
    TetrominoType.I: "..X...X...X...X.",
    TetrominoType.T: "..X..XX...X.....",
    TetrominoType.O: ".....XX..XX.....",
    TetrominoType.S: ".X...XX...X.....",
    TetrominoType.Z: "..X..XX..X......",
    TetrominoType.J: "..X...X..XX.....",
    TetrominoType.L: "X...X...XX......",
}

Mask = np.ndarray


def _frozen(mask: np.ndarray) -> Mask:
    mask.setflags(write=False)
    return mask


def mask_from_layout(layout: str) -> Mask:
    cells = np.array([c == "X" for c in layout], dtype=np.bool_)
    return _frozen(cells.reshape(MASK_SIZE, MASK_SIZE))


BASE_MASKS = {kind: mask_from_layout(layout) for kind, layout in _BASE_LAYOUTS.items()}

# out[x*4 + (3-y)] takes in[y*4 + x]
_ROTATION_SOURCE = np.empty(MASK_SIZE * MASK_SIZE, dtype=np.intp)
for _y in range(MASK_SIZE):
    for _x in range(MASK_SIZE):
        _ROTATION_SOURCE[_x * MASK_SIZE + (MASK_SIZE - 1 - _y)] = _y * MASK_SIZE + _x


def rotate_mask(mask: Mask) -> Mask:
    """Quarter turn of a 4x4 mask. Returns a new read-only array."""
    flat = np.asarray(mask, dtype=np.bool_).reshape(-1)
    return _frozen(flat[_ROTATION_SOURCE].reshape(MASK_SIZE, MASK_SIZE))


def rotate_mask_times(mask: Mask, times: int) -> Mask:
    out = mask
    for _ in range(times % 4):
        out = rotate_mask(out)
    return out


def mask_for(kind: TetrominoType, rotation: int = 0) -> Mask:
    return rotate_mask_times(BASE_MASKS[TetrominoType(kind)], rotation)


def mask_cells(mask: Mask) -> List[Tuple[int, int]]:
    """Occupied (px, py) offsets of a mask."""
    ys, xs = np.nonzero(mask)
    return [(int(px), int(py)) for py, px in zip(ys, xs)]


def random_kind(rng: random.Random) -> TetrominoType:
    return TetrominoType(rng.randrange(len(TetrominoType)))


@dataclass(frozen=True)
class Piece:
    kind: TetrominoType
    rotation: int = 0  # 0..3

    @property
    def color(self) -> int:
        return int(self.kind) + 1

    @property
    def mask(self) -> Mask:
        return mask_for(self.kind, self.rotation)

    def rotated(self, delta: int = 1) -> "Piece":
        return Piece(self.kind, (self.rotation + delta) % 4)
