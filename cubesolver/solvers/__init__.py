from cubesolver.solvers.base import CubeSolver
from cubesolver.solvers.kociemba_solver import KociembaSolver
from cubesolver.solvers.layer_by_layer import LayerByLayerSolver, SolvingPhase

__all__ = [
    "CubeSolver",
    "KociembaSolver",
    "LayerByLayerSolver",
    "SolvingPhase",
]
