"""Conversion between cube states and the 54-character facelet string.

The string lists faces in U, R, F, D, L, B order, nine row-major facelets
each. Every character names the face whose solved color the sticker shows,
which is the labeling two-phase solvers such as ``kociemba`` expect.
"""

from __future__ import annotations

from typing import Mapping

from cubesolver.formula import FormulaConverter, FormulaSyntaxError
from cubesolver.models import (
    CENTER_COLORS,
    CENTER_POSITION,
    FACE_ORDER,
    FACELETS_PER_FACE,
    TOTAL_FACELETS,
    Color,
    CubeState,
    Face,
)
from cubesolver.moves import MoveNotation
from cubesolver.state import build_state

COLOR_TO_FACE_LETTER: Mapping[Color, str] = {
    color: face.value for face, color in CENTER_COLORS.items()
}
FACE_LETTER_TO_COLOR: Mapping[str, Color] = {
    letter: color for color, letter in COLOR_TO_FACE_LETTER.items()
}


def state_to_facelet_string(state: CubeState) -> str:
    chars: list[str] = []
    for face in FACE_ORDER:
        for position, color in enumerate(state.faces[face]):
            if color is None:
                raise ValueError(
                    f"Cannot encode incomplete state: facelet {face.value}{position} is not set"
                )
            chars.append(COLOR_TO_FACE_LETTER[color])
    return "".join(chars)


def facelet_string_to_state(text: str) -> CubeState:
    if len(text) != TOTAL_FACELETS:
        raise ValueError(f"Facelet string must contain exactly 54 characters, got {len(text)}")

    unknown = sorted(set(text) - set(FACE_LETTER_TO_COLOR))
    if unknown:
        raise ValueError(f"Facelet string contains unsupported characters: {''.join(unknown)}")

    centers = text[CENTER_POSITION::FACELETS_PER_FACE]
    expected = "".join(face.value for face in FACE_ORDER)
    if centers != expected:
        raise ValueError(f"Facelet string centers must read {expected}, got {centers}")

    faces: dict[Face, list[Color]] = {}
    for index, face in enumerate(FACE_ORDER):
        block = text[index * FACELETS_PER_FACE:(index + 1) * FACELETS_PER_FACE]
        faces[face] = [FACE_LETTER_TO_COLOR[char] for char in block]
    return build_state(faces)


def solved_facelet_string() -> str:
    return "".join(face.value * FACELETS_PER_FACE for face in FACE_ORDER)


def parse_solver_moves(text: str) -> list[MoveNotation]:
    """Parses a solver answer such as ``"R U2 F'"`` into move values."""

    try:
        return FormulaConverter.convert(text) if text.strip() else []
    except FormulaSyntaxError as exc:
        raise ValueError(f"Unparseable solver output '{text}': {exc}") from exc
