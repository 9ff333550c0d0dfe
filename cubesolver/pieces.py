"""Corner and edge geometry of the 3x3 cube.

Corners are listed with their U/D facelet first followed by the other two
facelets in clockwise order, edges with their U/D (or F/B for middle layer
edges) facelet first. This ordering is what the orientation counting in
:func:`decompose` relies on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

from cubesolver.models import CENTER_COLORS, CENTER_POSITION, Color, CubeState, Face, FaceletId

U, R, F, D, L, B = Face.UP, Face.RIGHT, Face.FRONT, Face.DOWN, Face.LEFT, Face.BACK


def _ids(*pairs: Tuple[Face, int]) -> Tuple[FaceletId, ...]:
    return tuple(FaceletId(face, position) for face, position in pairs)


CORNERS: Mapping[str, Tuple[FaceletId, ...]] = {
    "URF": _ids((U, 8), (R, 0), (F, 2)),
    "UFL": _ids((U, 6), (F, 0), (L, 2)),
    "ULB": _ids((U, 0), (L, 0), (B, 2)),
    "UBR": _ids((U, 2), (B, 0), (R, 2)),
    "DFR": _ids((D, 2), (F, 8), (R, 6)),
    "DLF": _ids((D, 0), (L, 8), (F, 6)),
    "DBL": _ids((D, 6), (B, 8), (L, 6)),
    "DRB": _ids((D, 8), (R, 8), (B, 6)),
}

EDGES: Mapping[str, Tuple[FaceletId, ...]] = {
    "UR": _ids((U, 5), (R, 1)),
    "UF": _ids((U, 7), (F, 1)),
    "UL": _ids((U, 3), (L, 1)),
    "UB": _ids((U, 1), (B, 1)),
    "DR": _ids((D, 5), (R, 7)),
    "DF": _ids((D, 1), (F, 7)),
    "DL": _ids((D, 3), (L, 7)),
    "DB": _ids((D, 7), (B, 7)),
    "FR": _ids((F, 5), (R, 3)),
    "FL": _ids((F, 3), (L, 5)),
    "BL": _ids((B, 5), (L, 3)),
    "BR": _ids((B, 3), (R, 5)),
}

def _home_colors(facelets: Sequence[FaceletId]) -> Tuple[Color, ...]:
    return tuple(CENTER_COLORS[facelet.face] for facelet in facelets)


VALID_CORNER_COMBINATIONS: frozenset = frozenset(
    frozenset(_home_colors(facelets)) for facelets in CORNERS.values()
)
VALID_EDGE_COMBINATIONS: frozenset = frozenset(
    frozenset(_home_colors(facelets)) for facelets in EDGES.values()
)


def piece_colors(state: CubeState, facelets: Sequence[FaceletId]) -> Tuple[Optional[Color], ...]:
    return tuple(state.at(facelet) for facelet in facelets)


@dataclass(frozen=True)
class CubieState:
    """Permutation and orientation of the 8 corners and 12 edges.

    ``corner_permutation[i]`` is the index of the corner cubie sitting in slot
    ``i``; ``None`` entries mark slots whose colors match no real cubie.
    """

    corner_permutation: Tuple[Optional[int], ...]
    corner_orientation: Tuple[int, ...]
    edge_permutation: Tuple[Optional[int], ...]
    edge_orientation: Tuple[int, ...]


def permutation_parity(permutation: Sequence[int]) -> int:
    parity = 0
    for i in range(len(permutation)):
        for j in range(i + 1, len(permutation)):
            if permutation[i] > permutation[j]:
                parity ^= 1
    return parity


def decompose(state: CubeState) -> CubieState:
    """Reads corner and edge cubies off a complete state."""

    face_of_color = {state.get(face, CENTER_POSITION): face for face in Face}
    up_down = {U, D}

    corner_faces = [tuple(facelet.face for facelet in facelets) for facelets in CORNERS.values()]
    edge_faces = [tuple(facelet.face for facelet in facelets) for facelets in EDGES.values()]

    corner_permutation: list[Optional[int]] = []
    corner_orientation: list[int] = []
    for facelets in CORNERS.values():
        faces = [face_of_color.get(state.at(facelet)) for facelet in facelets]
        orientation = next((i for i, face in enumerate(faces) if face in up_down), 0)
        first = faces[(orientation + 1) % 3]
        second = faces[(orientation + 2) % 3]
        match = next(
            (j for j, home in enumerate(corner_faces) if home[1] == first and home[2] == second),
            None,
        )
        corner_permutation.append(match)
        corner_orientation.append(orientation)

    edge_permutation: list[Optional[int]] = []
    edge_orientation: list[int] = []
    for facelets in EDGES.values():
        faces = tuple(face_of_color.get(state.at(facelet)) for facelet in facelets)
        match: Optional[int] = None
        orientation = 0
        for j, home in enumerate(edge_faces):
            if faces == home:
                match = j
                break
            if faces == home[::-1]:
                match, orientation = j, 1
                break
        edge_permutation.append(match)
        edge_orientation.append(orientation)

    return CubieState(
        corner_permutation=tuple(corner_permutation),
        corner_orientation=tuple(corner_orientation),
        edge_permutation=tuple(edge_permutation),
        edge_orientation=tuple(edge_orientation),
    )
