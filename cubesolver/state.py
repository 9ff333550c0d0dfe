from __future__ import annotations

import time
from collections import Counter
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from cubesolver.models import (
    CENTER_COLORS,
    CENTER_POSITION,
    FACE_ORDER,
    FACELETS_PER_FACE,
    TOTAL_FACELETS,
    Color,
    CubeMetadata,
    CubeState,
    Face,
)

_CORNER_POSITIONS = frozenset({0, 2, 6, 8})
_EDGE_POSITIONS = frozenset({1, 3, 5, 7})


def piece_type(position: int) -> str:
    if position == CENTER_POSITION:
        return "center"
    if position in _CORNER_POSITIONS:
        return "corner"
    if position in _EDGE_POSITIONS:
        return "edge"
    raise ValueError(f"Facelet position must be in 0..8, got {position}")


def _freeze(faces: Mapping[Face, Sequence[Optional[Color]]]) -> Mapping[Face, tuple]:
    frozen: dict[Face, tuple] = {}
    for face in FACE_ORDER:
        if face not in faces:
            raise ValueError(f"Missing face {face.value}")
        values = tuple(faces[face])
        if len(values) != FACELETS_PER_FACE:
            raise ValueError(f"Face {face.value} must have 9 facelets, got {len(values)}")
        center = values[CENTER_POSITION]
        if center != CENTER_COLORS[face]:
            shown = center.value if center is not None else "nothing"
            raise ValueError(
                f"Center of face {face.value} must be {CENTER_COLORS[face].value}, got {shown}"
            )
        frozen[face] = values
    return MappingProxyType(frozen)


def _count_configured(faces: Mapping[Face, Sequence[Optional[Color]]]) -> int:
    return sum(1 for face in FACE_ORDER for color in faces[face] if color is not None)


def build_state(
    faces: Mapping[Face, Sequence[Optional[Color]]],
    is_valid: bool = False,
) -> CubeState:
    """Creates a state from per-face color lists, recomputing metadata."""

    frozen = _freeze(faces)
    configured = _count_configured(frozen)
    metadata = CubeMetadata(
        total_configured=configured,
        is_complete=configured == TOTAL_FACELETS,
        is_valid=is_valid,
        last_modified=time.time(),
    )
    return CubeState(faces=frozen, metadata=metadata)


def replace_faces(
    state: CubeState,
    changes: Mapping[Face, Sequence[Optional[Color]]],
) -> CubeState:
    """Returns a new state with some faces replaced; configured count is kept."""

    faces = dict(state.faces)
    faces.update({face: tuple(values) for face, values in changes.items()})
    metadata = CubeMetadata(
        total_configured=state.metadata.total_configured,
        is_complete=state.metadata.is_complete,
        is_valid=state.metadata.is_valid,
        last_modified=time.time(),
    )
    return CubeState(faces=_freeze(faces), metadata=metadata)


def create_empty_cube_state() -> CubeState:
    faces = {}
    for face in FACE_ORDER:
        values: list[Optional[Color]] = [None] * FACELETS_PER_FACE
        values[CENTER_POSITION] = CENTER_COLORS[face]
        faces[face] = values
    return build_state(faces)


def create_solved_cube() -> CubeState:
    faces = {face: [CENTER_COLORS[face]] * FACELETS_PER_FACE for face in FACE_ORDER}
    return build_state(faces, is_valid=True)


def with_facelet(state: CubeState, face: Face, position: int, color: Optional[Color]) -> CubeState:
    if position == CENTER_POSITION:
        raise ValueError(f"Center facelet of face {face.value} cannot be changed")
    piece_type(position)

    values = list(state.faces[face])
    values[position] = color
    faces = dict(state.faces)
    faces[face] = values
    return build_state(faces)


def count_configured_facelets(state: CubeState) -> int:
    return _count_configured(state.faces)


def is_configuration_complete(state: CubeState) -> bool:
    return count_configured_facelets(state) == TOTAL_FACELETS


def is_face_complete(state: CubeState, face: Face) -> bool:
    return all(color is not None for color in state.faces[face])


def color_counts(state: CubeState) -> dict[Color, int]:
    counter = Counter(
        color for face in FACE_ORDER for color in state.faces[face] if color is not None
    )
    return {color: counter.get(color, 0) for color in Color}


def is_solved(state: CubeState) -> bool:
    for face in FACE_ORDER:
        center = state.faces[face][CENTER_POSITION]
        if any(color != center for color in state.faces[face]):
            return False
    return True


def unsolved_faces(state: CubeState) -> list[Face]:
    return [
        face
        for face in FACE_ORDER
        if any(color != state.faces[face][CENTER_POSITION] for color in state.faces[face])
    ]
