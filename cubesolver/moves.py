from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Union

from cubesolver.models import Face, RotationDirection


class MoveNotation(str, Enum):
    U = "U"
    U_PRIME = "U'"
    U2 = "U2"
    D = "D"
    D_PRIME = "D'"
    D2 = "D2"
    L = "L"
    L_PRIME = "L'"
    L2 = "L2"
    R = "R"
    R_PRIME = "R'"
    R2 = "R2"
    F = "F"
    F_PRIME = "F'"
    F2 = "F2"
    B = "B"
    B_PRIME = "B'"
    B2 = "B2"

    def __str__(self) -> str:
        return self.value


MoveLike = Union[MoveNotation, str]


@dataclass(frozen=True)
class MoveDetails:
    face: Face
    direction: RotationDirection
    degrees: int
    description: str


_FACE_NAMES: Mapping[Face, str] = {
    Face.UP: "top",
    Face.DOWN: "bottom",
    Face.LEFT: "left",
    Face.RIGHT: "right",
    Face.FRONT: "front",
    Face.BACK: "back",
}


def _build_move_details() -> dict[MoveNotation, MoveDetails]:
    details: dict[MoveNotation, MoveDetails] = {}
    for move in MoveNotation:
        face = Face(move.value[0])
        name = _FACE_NAMES[face]
        suffix = move.value[1:]
        if suffix == "2":
            details[move] = MoveDetails(
                face=face,
                direction=RotationDirection.CLOCKWISE,
                degrees=180,
                description=f"Rotate {name} face 180°",
            )
        elif suffix == "'":
            details[move] = MoveDetails(
                face=face,
                direction=RotationDirection.COUNTERCLOCKWISE,
                degrees=90,
                description=f"Rotate {name} face counter-clockwise 90°",
            )
        else:
            details[move] = MoveDetails(
                face=face,
                direction=RotationDirection.CLOCKWISE,
                degrees=90,
                description=f"Rotate {name} face clockwise 90°",
            )
    return details


MOVE_DETAILS: Mapping[MoveNotation, MoveDetails] = _build_move_details()

ALL_MOVES: tuple[MoveNotation, ...] = tuple(MoveNotation)
QUARTER_TURNS: tuple[MoveNotation, ...] = tuple(
    move for move in MoveNotation if MOVE_DETAILS[move].degrees == 90
)


def parse_move(move: MoveLike) -> MoveNotation:
    if isinstance(move, MoveNotation):
        return move
    text = move.strip()
    try:
        return MoveNotation(text)
    except ValueError as exc:
        raise ValueError(f"Unknown move notation: '{move}'") from exc


def parse_moves(moves: Iterable[MoveLike]) -> list[MoveNotation]:
    return [parse_move(move) for move in moves]


def invert_move(move: MoveLike) -> MoveNotation:
    parsed = parse_move(move)
    face = parsed.value[0]
    suffix = parsed.value[1:]
    if suffix == "":
        return MoveNotation(f"{face}'")
    if suffix == "'":
        return MoveNotation(face)
    return parsed


def invert_moves(moves: Iterable[MoveLike]) -> list[MoveNotation]:
    return [invert_move(move) for move in reversed(list(moves))]


def format_moves(moves: Iterable[MoveLike]) -> str:
    return " ".join(parse_move(move).value for move in moves)
