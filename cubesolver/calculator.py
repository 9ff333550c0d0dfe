from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Optional

from cubesolver.builder import SolutionBuilder
from cubesolver.errors import AssemblyError, AssemblyErrorCode
from cubesolver.models import CubeState, Solution
from cubesolver.moves import format_moves
from cubesolver.simulator import StateSimulator
from cubesolver.solvers.base import CubeSolver
from cubesolver.solvers.kociemba_solver import KociembaSolver
from cubesolver.solvers.layer_by_layer import LayerByLayerSolver
from cubesolver.validator import CubeValidator

logger = logging.getLogger(__name__)

ALGORITHM_KOCIEMBA = "kociemba"
ALGORITHM_LAYER_BY_LAYER = "layer-by-layer"

SOLVER_FACTORIES: Mapping[str, Callable[[], CubeSolver]] = {
    ALGORITHM_KOCIEMBA: KociembaSolver,
    ALGORITHM_LAYER_BY_LAYER: LayerByLayerSolver,
}

ENV_MAX_MOVES = "CUBESOLVER_MAX_MOVES"
ENV_TIMEOUT_MS = "CUBESOLVER_TIMEOUT_MS"
ENV_ALGORITHM = "CUBESOLVER_ALGORITHM"


def _positive_int_from_env(name: str) -> Optional[int]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer") from exc
    if value <= 0:
        raise ValueError(f"Environment variable {name} must be > 0")
    return value


@dataclass(frozen=True)
class SolverConfig:
    # None picks the per-algorithm default below.
    max_moves: Optional[int] = None
    timeout_ms: int = 5000
    algorithm: str = ALGORITHM_KOCIEMBA
    default_max_moves: int = 100
    # The layer-by-layer method routinely needs well over 100 moves.
    layer_by_layer_max_moves: int = 300
    check_solvability: bool = True

    def __post_init__(self) -> None:
        if self.max_moves is not None and self.max_moves < 1:
            raise ValueError("max_moves must be >= 1")
        if self.default_max_moves < 1:
            raise ValueError("default_max_moves must be >= 1")
        if self.layer_by_layer_max_moves < 1:
            raise ValueError("layer_by_layer_max_moves must be >= 1")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0")
        if self.algorithm not in SOLVER_FACTORIES:
            available = ", ".join(sorted(SOLVER_FACTORIES))
            raise ValueError(f"Unknown algorithm: {self.algorithm}. Available algorithms: {available}")

    @property
    def move_limit(self) -> int:
        if self.max_moves is not None:
            return self.max_moves
        if self.algorithm == ALGORITHM_LAYER_BY_LAYER:
            return self.layer_by_layer_max_moves
        return self.default_max_moves

    @classmethod
    def from_env(cls, base: Optional["SolverConfig"] = None) -> "SolverConfig":
        config = base or cls()
        changes: dict[str, Any] = {}

        max_moves = _positive_int_from_env(ENV_MAX_MOVES)
        if max_moves is not None:
            changes["max_moves"] = max_moves

        timeout_ms = _positive_int_from_env(ENV_TIMEOUT_MS)
        if timeout_ms is not None:
            changes["timeout_ms"] = timeout_ms

        algorithm = os.environ.get(ENV_ALGORITHM, "").strip().lower()
        if algorithm:
            changes["algorithm"] = algorithm

        return replace(config, **changes) if changes else config


class SolutionCalculator:
    """Validates a cube, runs the selected solver under a timeout and checks the result.

    The returned :class:`Solution` is always verified: moves that fail to
    solve the cube are reported as ``ALGORITHM_ERROR`` instead of returned.
    """

    def __init__(
        self,
        config: Optional[SolverConfig] = None,
        solvers: Optional[Mapping[str, CubeSolver]] = None,
    ) -> None:
        self._config = config or SolverConfig()
        self._solvers: dict[str, CubeSolver] = dict(solvers or {})
        self._simulator = StateSimulator()
        self._builder = SolutionBuilder(self._simulator)

    @property
    def config(self) -> SolverConfig:
        return self._config

    @property
    def algorithm(self) -> str:
        return self._config.algorithm

    def update_config(self, **changes: Any) -> SolverConfig:
        self._config = replace(self._config, **changes)
        return self._config

    def set_algorithm(self, algorithm: str) -> None:
        self.update_config(algorithm=algorithm.strip().lower())

    def is_solved(self, state: CubeState) -> bool:
        return self._simulator.is_solved(state)

    def _solver(self) -> CubeSolver:
        name = self._config.algorithm
        if name not in self._solvers:
            self._solvers[name] = SOLVER_FACTORIES[name]()
        return self._solvers[name]

    async def calculate_solution(self, state: CubeState) -> Solution:
        config = self._config
        validator = CubeValidator(check_solvability=config.check_solvability)
        validator.validate_or_raise(state)

        started = time.perf_counter()
        if self._simulator.is_solved(state):
            logger.info("Cube is already solved")
            return self._builder.build(state, [], config.algorithm, 0.0)

        solver = self._solver()
        logger.info("Solving with %s (timeout %d ms)", solver.name, config.timeout_ms)
        try:
            moves = await asyncio.wait_for(solver.solve(state), timeout=config.timeout_ms / 1000)
        except asyncio.TimeoutError as exc:
            raise AssemblyError.create(
                AssemblyErrorCode.CALCULATION_TIMEOUT,
                timeout_ms=config.timeout_ms,
                algorithm=solver.name,
            ) from exc
        except AssemblyError:
            raise
        except Exception as exc:
            raise AssemblyError.create(
                AssemblyErrorCode.ALGORITHM_ERROR,
                algorithm=solver.name,
                original_error=exc,
            ) from exc
        elapsed_ms = (time.perf_counter() - started) * 1000

        if len(moves) > config.move_limit:
            raise AssemblyError.create(
                AssemblyErrorCode.MAX_MOVES_EXCEEDED,
                moves_found=len(moves),
                max_allowed=config.move_limit,
            )

        solution = self._builder.build(state, moves, solver.name, elapsed_ms)
        if not solution.is_solved:
            raise AssemblyError(
                AssemblyErrorCode.ALGORITHM_ERROR,
                f"Solution verification failed: {solver.name} produced {len(moves)} moves "
                "that do not solve the cube",
                {"algorithm": solver.name, "moves": format_moves(moves)},
            )

        logger.info(
            "Solved with %s in %d moves (%.1f ms, %s)",
            solver.name,
            solution.total_moves,
            elapsed_ms,
            solution.metadata.complexity.value,
        )
        return solution
