from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple

from cubesolver.errors import ValidationErrorCode

FACELETS_PER_FACE = 9
TOTAL_FACELETS = 54
CENTER_POSITION = 4


class Face(str, Enum):
    UP = "U"
    DOWN = "D"
    LEFT = "L"
    RIGHT = "R"
    FRONT = "F"
    BACK = "B"


class Color(str, Enum):
    WHITE = "white"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    ORANGE = "orange"
    RED = "red"


class RotationDirection(str, Enum):
    CLOCKWISE = "clockwise"
    COUNTERCLOCKWISE = "counterclockwise"


class Complexity(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class AlgorithmGroup(str, Enum):
    CROSS = "CROSS"
    F2L = "F2L"
    OLL = "OLL"
    PLL = "PLL"
    NO_GROUP = "NO_GROUP"


# Order of the 54-character facelet string.
FACE_ORDER: Tuple[Face, ...] = (Face.UP, Face.RIGHT, Face.FRONT, Face.DOWN, Face.LEFT, Face.BACK)

CENTER_COLORS: Mapping[Face, Color] = {
    Face.UP: Color.WHITE,
    Face.DOWN: Color.YELLOW,
    Face.LEFT: Color.ORANGE,
    Face.RIGHT: Color.RED,
    Face.FRONT: Color.GREEN,
    Face.BACK: Color.BLUE,
}

OPPOSITE_FACES: Mapping[Face, Face] = {
    Face.UP: Face.DOWN,
    Face.DOWN: Face.UP,
    Face.LEFT: Face.RIGHT,
    Face.RIGHT: Face.LEFT,
    Face.FRONT: Face.BACK,
    Face.BACK: Face.FRONT,
}

OPPOSITE_COLORS: Mapping[Color, Color] = {
    CENTER_COLORS[face]: CENTER_COLORS[opposite] for face, opposite in OPPOSITE_FACES.items()
}

FaceletColors = Tuple[Optional[Color], ...]


@dataclass(frozen=True)
class FaceletId:
    face: Face
    position: int

    def __post_init__(self) -> None:
        if not 0 <= self.position < FACELETS_PER_FACE:
            raise ValueError(f"Facelet position must be in 0..8, got {self.position}")

    def __str__(self) -> str:
        return f"{self.face.value}{self.position}"


@dataclass(frozen=True)
class CubeMetadata:
    total_configured: int
    is_complete: bool
    is_valid: bool = False
    last_modified: float = 0.0


@dataclass(frozen=True)
class CubeState:
    """Immutable facelet map: every face holds a tuple of nine optional colors.

    Equality compares facelets only; metadata is bookkeeping for consumers.
    """

    faces: Mapping[Face, FaceletColors]
    metadata: CubeMetadata = field(compare=False)

    def face(self, face: Face) -> FaceletColors:
        return self.faces[face]

    def get(self, face: Face, position: int) -> Optional[Color]:
        return self.faces[face][position]

    def at(self, facelet: FaceletId) -> Optional[Color]:
        return self.faces[facelet.face][facelet.position]


@dataclass(frozen=True)
class ValidationIssue:
    code: ValidationErrorCode
    message: str
    affected_facelets: Tuple[FaceletId, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    is_complete: bool
    errors: Tuple[ValidationIssue, ...] = ()
    warnings: Tuple[ValidationIssue, ...] = ()

    def codes(self) -> list[ValidationErrorCode]:
        return [issue.code for issue in self.errors]


@dataclass(frozen=True)
class AssemblyIncrement:
    step_number: int
    notation: str
    face: Face
    direction: RotationDirection
    degrees: int
    cube_state_after: CubeState
    description: str


@dataclass(frozen=True)
class SolutionMetadata:
    timestamp: float
    version: str
    complexity: Complexity


@dataclass(frozen=True)
class Solution:
    initial_state: CubeState
    increments: Tuple[AssemblyIncrement, ...]
    total_moves: int
    algorithm_used: str
    calculation_time_ms: float
    is_solved: bool
    metadata: SolutionMetadata

    @property
    def moves(self) -> list[str]:
        return [increment.notation for increment in self.increments]


@dataclass(frozen=True)
class AlgorithmPreset:
    name: str
    formula: str
    group: AlgorithmGroup = AlgorithmGroup.NO_GROUP
    aliases: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Preset name must be non-empty")
        if not self.formula.strip():
            raise ValueError("Preset formula must be non-empty")
