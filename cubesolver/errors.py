from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


class AssemblyErrorCode(str, Enum):
    INVALID_CUBE_STATE = "INVALID_CUBE_STATE"
    INCOMPLETE_CUBE_STATE = "INCOMPLETE_CUBE_STATE"
    UNSOLVABLE_CUBE = "UNSOLVABLE_CUBE"
    CALCULATION_TIMEOUT = "CALCULATION_TIMEOUT"
    ALGORITHM_ERROR = "ALGORITHM_ERROR"
    MAX_MOVES_EXCEEDED = "MAX_MOVES_EXCEEDED"
    ALREADY_SOLVED = "ALREADY_SOLVED"


ASSEMBLY_ERROR_MESSAGES: dict[AssemblyErrorCode, str] = {
    AssemblyErrorCode.INVALID_CUBE_STATE: (
        "The cube state is invalid and cannot be solved. Please check your configuration."
    ),
    AssemblyErrorCode.INCOMPLETE_CUBE_STATE: (
        "The cube state is incomplete. All 54 facelets must be configured."
    ),
    AssemblyErrorCode.UNSOLVABLE_CUBE: (
        "This cube configuration cannot be solved. It may be physically impossible."
    ),
    AssemblyErrorCode.CALCULATION_TIMEOUT: (
        "Solution calculation timed out. The cube may be too complex."
    ),
    AssemblyErrorCode.ALGORITHM_ERROR: "The solving algorithm encountered an unexpected error.",
    AssemblyErrorCode.MAX_MOVES_EXCEEDED: (
        "Could not find a solution within the maximum move limit."
    ),
    AssemblyErrorCode.ALREADY_SOLVED: (
        "The cube is already in a solved state. No moves needed."
    ),
}


class AssemblyError(Exception):
    """Typed failure raised by the solving pipeline.

    ``code`` identifies the failure kind so callers can pick a remediation
    ("try again" for a timeout, "check the configuration" for an invalid cube)
    without parsing the message. ``details`` carries structured diagnostics
    such as validation issues or move counts.
    """

    def __init__(
        self,
        code: AssemblyErrorCode,
        message: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message or ASSEMBLY_ERROR_MESSAGES[code])
        self.code = code
        self.details: dict[str, Any] = dict(details or {})

    @classmethod
    def create(cls, code: AssemblyErrorCode, **details: Any) -> "AssemblyError":
        return cls(code, ASSEMBLY_ERROR_MESSAGES[code], details)

    def __repr__(self) -> str:
        return f"AssemblyError(code={self.code.value!r}, message={str(self)!r})"


class ValidationErrorCode(str, Enum):
    COLOR_OVERUSE = "COLOR_OVERUSE"
    COLOR_UNDERUSE = "COLOR_UNDERUSE"
    INVALID_CORNER = "INVALID_CORNER"
    INVALID_EDGE = "INVALID_EDGE"
    OPPOSITE_COLORS_CORNER = "OPPOSITE_COLORS_CORNER"
    OPPOSITE_COLORS_EDGE = "OPPOSITE_COLORS_EDGE"
    DUPLICATE_COLORS_PIECE = "DUPLICATE_COLORS_PIECE"
    UNSOLVABLE_PARITY = "UNSOLVABLE_PARITY"
    UNSOLVABLE_STATE = "UNSOLVABLE_STATE"
    INCOMPLETE_CONFIGURATION = "INCOMPLETE_CONFIGURATION"


VALIDATION_MESSAGES: dict[ValidationErrorCode, str] = {
    ValidationErrorCode.COLOR_OVERUSE: (
        "The {color} color has been used {count} times. Each color should appear exactly 9 times."
    ),
    ValidationErrorCode.COLOR_UNDERUSE: (
        "The {color} color has been used {count} times. Each color should appear exactly 9 times."
    ),
    ValidationErrorCode.INVALID_CORNER: (
        "The corner piece at {locations} has an invalid color combination: {colors}."
    ),
    ValidationErrorCode.INVALID_EDGE: (
        "The edge piece at {locations} has an invalid color combination: {colors}."
    ),
    ValidationErrorCode.OPPOSITE_COLORS_CORNER: (
        "The corner piece has opposite colors ({color1} and {color2}) which cannot appear together."
    ),
    ValidationErrorCode.OPPOSITE_COLORS_EDGE: (
        "The edge piece has opposite colors ({color1} and {color2}) which cannot appear together."
    ),
    ValidationErrorCode.DUPLICATE_COLORS_PIECE: (
        "The piece has the same color ({color}) appearing twice, which is impossible."
    ),
    ValidationErrorCode.UNSOLVABLE_PARITY: (
        "This cube configuration is unsolvable due to incorrect permutation parity."
    ),
    ValidationErrorCode.UNSOLVABLE_STATE: (
        "This cube configuration is physically impossible to achieve."
    ),
    ValidationErrorCode.INCOMPLETE_CONFIGURATION: (
        "Configuration is incomplete. Please configure all {remaining} remaining facelets."
    ),
}


def format_validation_message(code: ValidationErrorCode, **values: Any) -> str:
    message = VALIDATION_MESSAGES[code]
    for key, value in values.items():
        message = message.replace(f"{{{key}}}", str(value))
    return message
