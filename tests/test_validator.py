from __future__ import annotations

import pytest

from cubesolver.errors import AssemblyError, AssemblyErrorCode, ValidationErrorCode
from cubesolver.executor import MoveExecutor
from cubesolver.formula import FormulaConverter
from cubesolver.models import Color, CubeState, Face, FaceletId
from cubesolver.pieces import CORNERS
from cubesolver.state import create_empty_cube_state, create_solved_cube, with_facelet
from cubesolver.validator import CubeValidator


def _swap(state: CubeState, first: FaceletId, second: FaceletId) -> CubeState:
    first_color = state.at(first)
    second_color = state.at(second)
    state = with_facelet(state, first.face, first.position, second_color)
    return with_facelet(state, second.face, second.position, first_color)


def _scrambled() -> CubeState:
    return MoveExecutor.apply_moves(create_solved_cube(), FormulaConverter.convert("R U F' L2 D B'"))


def test_solved_and_scrambled_cubes_are_valid() -> None:
    validator = CubeValidator(check_solvability=True)
    for state in (create_solved_cube(), _scrambled()):
        result = validator.validate(state)
        assert result.is_valid
        assert result.is_complete
        assert result.errors == ()


def test_incomplete_state_short_circuits_with_remaining_count() -> None:
    result = CubeValidator().validate(create_empty_cube_state())
    assert not result.is_valid
    assert not result.is_complete
    assert result.codes() == [ValidationErrorCode.INCOMPLETE_CONFIGURATION]
    assert "48 remaining" in result.errors[0].message


def test_fifty_three_facelets_is_incomplete() -> None:
    state = with_facelet(create_solved_cube(), Face.FRONT, 0, None)
    result = CubeValidator().validate(state)
    assert result.codes() == [ValidationErrorCode.INCOMPLETE_CONFIGURATION]
    assert "1 remaining" in result.errors[0].message


def test_color_overuse_and_underuse_are_both_reported() -> None:
    state = with_facelet(create_solved_cube(), Face.UP, 0, Color.YELLOW)
    result = CubeValidator().validate(state)

    assert not result.is_valid
    codes = result.codes()
    assert ValidationErrorCode.COLOR_OVERUSE in codes
    assert ValidationErrorCode.COLOR_UNDERUSE in codes
    overuse = next(issue for issue in result.errors if issue.code == ValidationErrorCode.COLOR_OVERUSE)
    assert "yellow color has been used 10 times" in overuse.message


def test_opposite_colors_on_corner_cite_the_corner_facelets() -> None:
    state = _swap(create_solved_cube(), FaceletId(Face.FRONT, 2), FaceletId(Face.DOWN, 1))
    result = CubeValidator().validate(state)

    corner_issues = [
        issue for issue in result.errors if issue.code == ValidationErrorCode.OPPOSITE_COLORS_CORNER
    ]
    assert len(corner_issues) == 1
    assert set(corner_issues[0].affected_facelets) == set(CORNERS["URF"])
    assert "white and yellow" in corner_issues[0].message
    assert ValidationErrorCode.COLOR_OVERUSE not in result.codes()


def test_duplicate_colors_on_edge_are_reported() -> None:
    state = _swap(create_solved_cube(), FaceletId(Face.FRONT, 2), FaceletId(Face.DOWN, 1))
    result = CubeValidator().validate(state)

    duplicates = [
        issue for issue in result.errors if issue.code == ValidationErrorCode.DUPLICATE_COLORS_PIECE
    ]
    assert len(duplicates) == 1
    assert set(duplicates[0].affected_facelets) == {FaceletId(Face.DOWN, 1), FaceletId(Face.FRONT, 7)}


def test_opposite_colors_on_edge_are_reported_once_per_piece() -> None:
    state = _swap(create_solved_cube(), FaceletId(Face.FRONT, 1), FaceletId(Face.DOWN, 1))
    result = CubeValidator().validate(state)

    codes = result.codes()
    assert codes.count(ValidationErrorCode.OPPOSITE_COLORS_EDGE) == 1
    assert codes.count(ValidationErrorCode.DUPLICATE_COLORS_PIECE) == 1
    assert "white and yellow" in result.errors[0].message


def test_flipped_edge_passes_piece_checks_but_not_solvability() -> None:
    state = _swap(create_solved_cube(), FaceletId(Face.UP, 7), FaceletId(Face.FRONT, 1))

    assert CubeValidator().validate(state).is_valid
    result = CubeValidator(check_solvability=True).validate(state)
    assert result.codes() == [ValidationErrorCode.UNSOLVABLE_STATE]


def test_twisted_corner_is_unsolvable() -> None:
    solved = create_solved_cube()
    u8, r0, f2 = CORNERS["URF"]
    state = with_facelet(solved, u8.face, u8.position, solved.at(f2))
    state = with_facelet(state, r0.face, r0.position, solved.at(u8))
    state = with_facelet(state, f2.face, f2.position, solved.at(r0))

    result = CubeValidator(check_solvability=True).validate(state)
    assert result.codes() == [ValidationErrorCode.UNSOLVABLE_STATE]


def test_swapped_edges_have_wrong_parity() -> None:
    swapped = _swap(create_solved_cube(), FaceletId(Face.FRONT, 1), FaceletId(Face.RIGHT, 1))
    assert CubeValidator().validate(swapped).is_valid

    result = CubeValidator(check_solvability=True).validate(swapped)
    assert result.codes() == [ValidationErrorCode.UNSOLVABLE_PARITY]


def test_validate_or_raise_maps_issue_kinds_to_error_codes() -> None:
    validator = CubeValidator(check_solvability=True)

    with pytest.raises(AssemblyError) as incomplete:
        validator.validate_or_raise(create_empty_cube_state())
    assert incomplete.value.code == AssemblyErrorCode.INCOMPLETE_CUBE_STATE

    with pytest.raises(AssemblyError) as invalid:
        validator.validate_or_raise(with_facelet(create_solved_cube(), Face.UP, 0, Color.YELLOW))
    assert invalid.value.code == AssemblyErrorCode.INVALID_CUBE_STATE
    assert invalid.value.details["errors"]

    swapped = _swap(create_solved_cube(), FaceletId(Face.FRONT, 1), FaceletId(Face.RIGHT, 1))
    with pytest.raises(AssemblyError) as unsolvable:
        validator.validate_or_raise(swapped)
    assert unsolvable.value.code == AssemblyErrorCode.UNSOLVABLE_CUBE
