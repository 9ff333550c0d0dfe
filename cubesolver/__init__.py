from cubesolver.bridge import facelet_string_to_state, state_to_facelet_string
from cubesolver.builder import SolutionBuilder
from cubesolver.calculator import SolutionCalculator, SolverConfig
from cubesolver.configuration import (
    ConfigurationProgress,
    ConfigurationStateManager,
    GuidedFlowManager,
)
from cubesolver.errors import AssemblyError, AssemblyErrorCode, ValidationErrorCode
from cubesolver.executor import MoveExecutor
from cubesolver.formula import FormulaConverter, FormulaSyntaxError
from cubesolver.models import (
    AlgorithmGroup,
    AlgorithmPreset,
    Color,
    CubeState,
    Face,
    FaceletId,
    RotationDirection,
    Solution,
    ValidationResult,
)
from cubesolver.moves import MOVE_DETAILS, MoveNotation, invert_move, invert_moves
from cubesolver.presets import get_preset, list_preset_names
from cubesolver.simulator import StateSimulator
from cubesolver.state import create_empty_cube_state, create_solved_cube, is_solved
from cubesolver.validator import CubeValidator

__all__ = [
    "AlgorithmGroup",
    "AlgorithmPreset",
    "AssemblyError",
    "AssemblyErrorCode",
    "Color",
    "ConfigurationProgress",
    "ConfigurationStateManager",
    "CubeState",
    "CubeValidator",
    "Face",
    "FaceletId",
    "FormulaConverter",
    "FormulaSyntaxError",
    "GuidedFlowManager",
    "MOVE_DETAILS",
    "MoveExecutor",
    "MoveNotation",
    "RotationDirection",
    "Solution",
    "SolutionBuilder",
    "SolutionCalculator",
    "SolverConfig",
    "StateSimulator",
    "ValidationErrorCode",
    "ValidationResult",
    "create_empty_cube_state",
    "create_solved_cube",
    "facelet_string_to_state",
    "get_preset",
    "invert_move",
    "invert_moves",
    "is_solved",
    "list_preset_names",
    "state_to_facelet_string",
]
