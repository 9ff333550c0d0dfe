from __future__ import annotations

import pytest

from cubesolver.bridge import (
    facelet_string_to_state,
    parse_solver_moves,
    solved_facelet_string,
    state_to_facelet_string,
)
from cubesolver.executor import MoveExecutor
from cubesolver.formula import FormulaConverter
from cubesolver.models import Color, Face
from cubesolver.moves import MoveNotation
from cubesolver.state import create_empty_cube_state, create_solved_cube, is_solved

AFTER_R = "UUFUUFUUFRRRRRRRRRFFDFFDFFDDDBDDBDDBLLLLLLLLLUBBUBBUBB"


def test_solved_cube_encodes_face_letters() -> None:
    assert solved_facelet_string() == "U" * 9 + "R" * 9 + "F" * 9 + "D" * 9 + "L" * 9 + "B" * 9
    assert state_to_facelet_string(create_solved_cube()) == solved_facelet_string()


def test_encoding_follows_moves() -> None:
    state = MoveExecutor.apply_move(create_solved_cube(), MoveNotation.R)
    assert state_to_facelet_string(state) == AFTER_R


def test_decoding_restores_the_state() -> None:
    scrambled = MoveExecutor.apply_moves(create_solved_cube(), FormulaConverter.convert("F2 L' D B U2 R'"))
    decoded = facelet_string_to_state(state_to_facelet_string(scrambled))

    assert decoded == scrambled
    assert decoded.get(Face.UP, 4) == Color.WHITE
    assert decoded.metadata.total_configured == 54
    assert is_solved(facelet_string_to_state(solved_facelet_string()))


def test_encoding_incomplete_state_fails() -> None:
    with pytest.raises(ValueError, match="U0 is not set"):
        state_to_facelet_string(create_empty_cube_state())


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("U" * 53, "exactly 54 characters, got 53"),
        ("X" + "U" * 53, "unsupported characters: X"),
        (
            "D" * 9 + "R" * 9 + "F" * 9 + "U" * 9 + "L" * 9 + "B" * 9,
            "centers must read URFDLB, got DRFULB",
        ),
    ],
)
def test_decoding_rejects_malformed_strings(text: str, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        facelet_string_to_state(text)


def test_parse_solver_moves() -> None:
    assert parse_solver_moves("R U2 F' D") == [
        MoveNotation.R,
        MoveNotation.U2,
        MoveNotation.F_PRIME,
        MoveNotation.D,
    ]
    assert parse_solver_moves("  ") == []
    with pytest.raises(ValueError, match="Unparseable solver output"):
        parse_solver_moves("R Q")
