from __future__ import annotations

import pytest

from cubesolver.executor import MoveExecutor
from cubesolver.models import AlgorithmGroup, AlgorithmPreset
from cubesolver.pieces import CORNERS, EDGES
from cubesolver.presets import PRESET_LIST, get_preset, list_preset_names, preset_moves
from cubesolver.solvers.layer_by_layer import piece_solved
from cubesolver.state import create_solved_cube, is_solved


def _slot(facelets) -> frozenset:
    return frozenset(facelet.face for facelet in facelets)


def test_preset_lookup_is_case_insensitive_and_supports_aliases() -> None:
    assert get_preset("sune").name == "Sune"
    assert get_preset("SexyMove").name == "Sexy"
    assert get_preset(" aperm ").name == "Aa"
    assert get_preset("ua").group == AlgorithmGroup.PLL


def test_unknown_preset_lists_available_names() -> None:
    with pytest.raises(KeyError, match="Available presets"):
        get_preset("Nope")


def test_list_preset_names_is_sorted_and_unique() -> None:
    names = list_preset_names()
    assert names == sorted(names)
    assert len(names) == len(PRESET_LIST)


def test_every_preset_formula_parses() -> None:
    for preset in PRESET_LIST:
        assert preset_moves(preset.name)
    assert len(preset_moves("Superflip")) == 20


def test_preset_validation() -> None:
    with pytest.raises(ValueError):
        AlgorithmPreset(name=" ", formula="R")
    with pytest.raises(ValueError):
        AlgorithmPreset(name="Empty", formula="")


@pytest.mark.parametrize(("name", "order"), [("Sexy", 6), ("Sune", 6), ("Ua", 3), ("Aa", 3)])
def test_algorithm_orders(name: str, order: int) -> None:
    solved = create_solved_cube()
    moves = preset_moves(name)
    state = solved
    for step in range(order):
        state = MoveExecutor.apply_moves(state, moves)
        if step < order - 1:
            assert not is_solved(state)
    assert is_solved(state)


def test_inverse_pairs_cancel() -> None:
    solved = create_solved_cube()
    assert is_solved(MoveExecutor.apply_moves(solved, preset_moves("Ua") + preset_moves("Ub")))
    assert is_solved(MoveExecutor.apply_moves(solved, preset_moves("Aa") + preset_moves("Ab")))


def test_u_perm_keeps_corners_and_a_perm_keeps_edges() -> None:
    solved = create_solved_cube()
    after_u = MoveExecutor.apply_moves(solved, preset_moves("Ua"))
    after_a = MoveExecutor.apply_moves(solved, preset_moves("Aa"))

    assert all(piece_solved(after_u, _slot(facelets)) for facelets in CORNERS.values())
    assert all(piece_solved(after_a, _slot(facelets)) for facelets in EDGES.values())
    assert not all(piece_solved(after_u, _slot(facelets)) for facelets in EDGES.values())
    assert not all(piece_solved(after_a, _slot(facelets)) for facelets in CORNERS.values())
