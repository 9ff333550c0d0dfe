from __future__ import annotations

import logging
from itertools import combinations
from typing import Iterable, Optional, Sequence

from cubesolver.errors import (
    AssemblyError,
    AssemblyErrorCode,
    ValidationErrorCode,
    format_validation_message,
)
from cubesolver.models import (
    FACELETS_PER_FACE,
    OPPOSITE_COLORS,
    TOTAL_FACELETS,
    Color,
    CubeState,
    FaceletId,
    ValidationIssue,
    ValidationResult,
)
from cubesolver.pieces import (
    CORNERS,
    EDGES,
    VALID_CORNER_COMBINATIONS,
    VALID_EDGE_COMBINATIONS,
    decompose,
    permutation_parity,
    piece_colors,
)
from cubesolver.state import color_counts, count_configured_facelets

logger = logging.getLogger(__name__)

_SOLVABILITY_CODES = frozenset(
    {ValidationErrorCode.UNSOLVABLE_PARITY, ValidationErrorCode.UNSOLVABLE_STATE}
)


def format_positions(facelets: Iterable[FaceletId]) -> str:
    return ", ".join(str(facelet) for facelet in facelets)


class CubeValidator:
    """Checks completeness, color balance and piece legality of a cube state.

    With ``check_solvability`` enabled a state that passes every other check
    is also decomposed into cubies and tested for twist, flip and permutation
    parity, so physically unreachable configurations are rejected before a
    solver ever sees them.
    """

    def __init__(self, check_solvability: bool = False) -> None:
        self.check_solvability = check_solvability

    def validate(self, state: CubeState) -> ValidationResult:
        configured = count_configured_facelets(state)
        if configured < TOTAL_FACELETS:
            remaining = TOTAL_FACELETS - configured
            issue = ValidationIssue(
                code=ValidationErrorCode.INCOMPLETE_CONFIGURATION,
                message=format_validation_message(
                    ValidationErrorCode.INCOMPLETE_CONFIGURATION,
                    remaining=remaining,
                ),
            )
            return ValidationResult(is_valid=False, is_complete=False, errors=(issue,))

        errors: list[ValidationIssue] = []
        errors.extend(self._validate_color_counts(state))
        errors.extend(self._validate_pieces(state, CORNERS.values(), corner=True))
        errors.extend(self._validate_pieces(state, EDGES.values(), corner=False))

        if not errors and self.check_solvability:
            errors.extend(self._validate_solvability(state))

        if errors:
            logger.debug("Validation found %d issue(s)", len(errors))
        return ValidationResult(is_valid=not errors, is_complete=True, errors=tuple(errors))

    def validate_or_raise(self, state: CubeState) -> ValidationResult:
        result = self.validate(state)
        if result.is_valid:
            return result

        if not result.is_complete:
            code = AssemblyErrorCode.INCOMPLETE_CUBE_STATE
        elif all(issue.code in _SOLVABILITY_CODES for issue in result.errors):
            code = AssemblyErrorCode.UNSOLVABLE_CUBE
        else:
            code = AssemblyErrorCode.INVALID_CUBE_STATE
        raise AssemblyError.create(code, errors=list(result.errors))

    def _validate_color_counts(self, state: CubeState) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for color, count in color_counts(state).items():
            if count > FACELETS_PER_FACE:
                code = ValidationErrorCode.COLOR_OVERUSE
            elif count < FACELETS_PER_FACE:
                code = ValidationErrorCode.COLOR_UNDERUSE
            else:
                continue
            issues.append(
                ValidationIssue(
                    code=code,
                    message=format_validation_message(code, color=color.value, count=count),
                )
            )
        return issues

    def _validate_pieces(
        self,
        state: CubeState,
        pieces: Iterable[Sequence[FaceletId]],
        corner: bool,
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for facelets in pieces:
            colors = piece_colors(state, facelets)
            issue = self._check_piece(colors, tuple(facelets), corner=corner)
            if issue is not None:
                issues.append(issue)
        return issues

    @staticmethod
    def _check_piece(
        colors: Sequence[Optional[Color]],
        facelets: tuple[FaceletId, ...],
        corner: bool,
    ) -> Optional[ValidationIssue]:
        for first, second in combinations(colors, 2):
            if OPPOSITE_COLORS[first] == second:
                code = (
                    ValidationErrorCode.OPPOSITE_COLORS_CORNER
                    if corner
                    else ValidationErrorCode.OPPOSITE_COLORS_EDGE
                )
                return ValidationIssue(
                    code=code,
                    message=format_validation_message(
                        code, color1=first.value, color2=second.value
                    ),
                    affected_facelets=facelets,
                )

        for first, second in combinations(colors, 2):
            if first == second:
                return ValidationIssue(
                    code=ValidationErrorCode.DUPLICATE_COLORS_PIECE,
                    message=format_validation_message(
                        ValidationErrorCode.DUPLICATE_COLORS_PIECE, color=first.value
                    ),
                    affected_facelets=facelets,
                )

        allowed = VALID_CORNER_COMBINATIONS if corner else VALID_EDGE_COMBINATIONS
        if frozenset(colors) not in allowed:
            code = ValidationErrorCode.INVALID_CORNER if corner else ValidationErrorCode.INVALID_EDGE
            return ValidationIssue(
                code=code,
                message=format_validation_message(
                    code,
                    locations=format_positions(facelets),
                    colors=", ".join(color.value for color in colors),
                ),
                affected_facelets=facelets,
            )
        return None

    @staticmethod
    def _validate_solvability(state: CubeState) -> list[ValidationIssue]:
        cubies = decompose(state)

        def _issue(code: ValidationErrorCode) -> ValidationIssue:
            return ValidationIssue(code=code, message=format_validation_message(code))

        corners = cubies.corner_permutation
        edges = cubies.edge_permutation
        if None in corners or None in edges:
            return [_issue(ValidationErrorCode.UNSOLVABLE_STATE)]
        if len(set(corners)) != len(corners) or len(set(edges)) != len(edges):
            return [_issue(ValidationErrorCode.UNSOLVABLE_STATE)]

        issues: list[ValidationIssue] = []
        if sum(cubies.corner_orientation) % 3 != 0 or sum(cubies.edge_orientation) % 2 != 0:
            issues.append(_issue(ValidationErrorCode.UNSOLVABLE_STATE))
        if permutation_parity(corners) != permutation_parity(edges):
            issues.append(_issue(ValidationErrorCode.UNSOLVABLE_PARITY))
        return issues
