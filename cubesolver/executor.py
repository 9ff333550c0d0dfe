from __future__ import annotations

from typing import Iterable, Mapping, Optional, Tuple

import numpy as np

from cubesolver.models import Color, CubeState, Face, FaceletColors, RotationDirection
from cubesolver.moves import MOVE_DETAILS, MoveLike, parse_move
from cubesolver.state import replace_faces


Strip = Tuple[Face, Tuple[int, int, int]]

# Clockwise quarter turn of the key face moves the stickers of each strip into
# the next strip of its cycle, element by element (last strip wraps to first).
# Indices are listed in the order that makes the element-wise copy correct, so
# reversed strips are encoded by reversed index order.
ADJACENT_CYCLES: Mapping[Face, Tuple[Strip, Strip, Strip, Strip]] = {
    Face.UP: (
        (Face.FRONT, (0, 1, 2)),
        (Face.LEFT, (0, 1, 2)),
        (Face.BACK, (0, 1, 2)),
        (Face.RIGHT, (0, 1, 2)),
    ),
    Face.DOWN: (
        (Face.FRONT, (6, 7, 8)),
        (Face.RIGHT, (6, 7, 8)),
        (Face.BACK, (6, 7, 8)),
        (Face.LEFT, (6, 7, 8)),
    ),
    Face.RIGHT: (
        (Face.FRONT, (2, 5, 8)),
        (Face.UP, (2, 5, 8)),
        (Face.BACK, (6, 3, 0)),
        (Face.DOWN, (2, 5, 8)),
    ),
    Face.LEFT: (
        (Face.UP, (0, 3, 6)),
        (Face.FRONT, (0, 3, 6)),
        (Face.DOWN, (0, 3, 6)),
        (Face.BACK, (8, 5, 2)),
    ),
    Face.FRONT: (
        (Face.UP, (6, 7, 8)),
        (Face.RIGHT, (0, 3, 6)),
        (Face.DOWN, (2, 1, 0)),
        (Face.LEFT, (8, 5, 2)),
    ),
    Face.BACK: (
        (Face.UP, (2, 1, 0)),
        (Face.LEFT, (0, 3, 6)),
        (Face.DOWN, (6, 7, 8)),
        (Face.RIGHT, (8, 5, 2)),
    ),
}


def rotate_face_values(values: FaceletColors, clockwise: bool = True) -> FaceletColors:
    """Rotates one face's 3x3 grid a quarter turn; the center stays put."""

    grid = np.array(values, dtype=object).reshape(3, 3)
    rotated = np.rot90(grid, -1 if clockwise else 1)
    return tuple(rotated.flatten().tolist())


def _quarter_turn(faces: dict[Face, list[Optional[Color]]], face: Face, clockwise: bool) -> None:
    faces[face] = list(rotate_face_values(tuple(faces[face]), clockwise=clockwise))

    cycle = ADJACENT_CYCLES[face]
    if not clockwise:
        cycle = tuple(reversed(cycle))

    before = {strip_face: list(faces[strip_face]) for strip_face, _ in cycle}
    for i, (source_face, source_indices) in enumerate(cycle):
        target_face, target_indices = cycle[(i + 1) % len(cycle)]
        for source_index, target_index in zip(source_indices, target_indices):
            faces[target_face][target_index] = before[source_face][source_index]


class MoveExecutor:
    """Applies outer-face turns to immutable cube states."""

    @staticmethod
    def apply_move(state: CubeState, move: MoveLike) -> CubeState:
        notation = parse_move(move)
        details = MOVE_DETAILS[notation]

        faces = {face: list(values) for face, values in state.faces.items()}
        clockwise = details.direction == RotationDirection.CLOCKWISE
        for _ in range(details.degrees // 90):
            _quarter_turn(faces, details.face, clockwise)

        return replace_faces(state, faces)

    @classmethod
    def apply_moves(cls, state: CubeState, moves: Iterable[MoveLike]) -> CubeState:
        current = state
        for move in moves:
            current = cls.apply_move(current, move)
        return current
