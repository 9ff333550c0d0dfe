from __future__ import annotations

import logging
from typing import Iterable, Sequence

from cubesolver.executor import MoveExecutor
from cubesolver.models import CubeState
from cubesolver.moves import MoveLike, format_moves
from cubesolver.state import is_solved as _is_solved
from cubesolver.state import unsolved_faces

logger = logging.getLogger(__name__)


class StateSimulator:
    """Replays move sequences over cube states."""

    def __init__(self, executor: type[MoveExecutor] = MoveExecutor) -> None:
        self._executor = executor

    def apply_move(self, state: CubeState, move: MoveLike) -> CubeState:
        return self._executor.apply_move(state, move)

    def apply_moves(self, state: CubeState, moves: Iterable[MoveLike]) -> CubeState:
        return self._executor.apply_moves(state, moves)

    def generate_intermediate_states(
        self,
        state: CubeState,
        moves: Sequence[MoveLike],
    ) -> list[CubeState]:
        """Returns the state after each move; entry ``i`` follows ``moves[:i + 1]``."""

        states: list[CubeState] = []
        current = state
        for move in moves:
            current = self._executor.apply_move(current, move)
            states.append(current)
        return states

    @staticmethod
    def is_solved(state: CubeState) -> bool:
        return _is_solved(state)

    def verify_solution(self, initial: CubeState, moves: Sequence[MoveLike]) -> bool:
        final = self.apply_moves(initial, moves)
        if _is_solved(final):
            return True

        logger.warning(
            "Move sequence does not solve the cube; unsolved faces: %s (moves: %s)",
            ", ".join(face.value for face in unsolved_faces(final)),
            format_moves(moves),
        )
        return False
