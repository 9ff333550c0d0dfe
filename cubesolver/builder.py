from __future__ import annotations

import time
from typing import Optional, Sequence

from cubesolver.models import AssemblyIncrement, Complexity, CubeState, Solution, SolutionMetadata
from cubesolver.moves import MOVE_DETAILS, MoveLike, parse_moves
from cubesolver.simulator import StateSimulator

SOLUTION_VERSION = "1.0.0"
EASY_MAX_MOVES = 20
MEDIUM_MAX_MOVES = 50


def complexity_for(total_moves: int) -> Complexity:
    if total_moves <= EASY_MAX_MOVES:
        return Complexity.EASY
    if total_moves <= MEDIUM_MAX_MOVES:
        return Complexity.MEDIUM
    return Complexity.HARD


class SolutionBuilder:
    def __init__(self, simulator: Optional[StateSimulator] = None) -> None:
        self._simulator = simulator or StateSimulator()

    def build(
        self,
        initial_state: CubeState,
        moves: Sequence[MoveLike],
        algorithm_used: str,
        calculation_time_ms: float,
    ) -> Solution:
        notations = parse_moves(moves)
        states = self._simulator.generate_intermediate_states(initial_state, notations)

        increments = []
        for index, (move, state_after) in enumerate(zip(notations, states)):
            details = MOVE_DETAILS[move]
            increments.append(
                AssemblyIncrement(
                    step_number=index + 1,
                    notation=move.value,
                    face=details.face,
                    direction=details.direction,
                    degrees=details.degrees,
                    cube_state_after=state_after,
                    description=details.description,
                )
            )

        final_state = states[-1] if states else initial_state
        return Solution(
            initial_state=initial_state,
            increments=tuple(increments),
            total_moves=len(notations),
            algorithm_used=algorithm_used,
            calculation_time_ms=calculation_time_ms,
            is_solved=self._simulator.is_solved(final_state),
            metadata=SolutionMetadata(
                timestamp=time.time(),
                version=SOLUTION_VERSION,
                complexity=complexity_for(len(notations)),
            ),
        )
