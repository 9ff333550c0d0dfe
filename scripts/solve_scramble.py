#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from cubesolver.bridge import facelet_string_to_state, state_to_facelet_string
from cubesolver.calculator import SOLVER_FACTORIES, SolutionCalculator, SolverConfig
from cubesolver.errors import AssemblyError
from cubesolver.executor import MoveExecutor
from cubesolver.formula import FormulaConverter
from cubesolver.presets import preset_moves
from cubesolver.state import create_solved_cube


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scramble a cube and print a verified step-by-step solution."
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("--scramble", help="Scramble formula applied to a solved cube")
    source_group.add_argument("--preset", help="Preset name whose formula is used as the scramble")
    source_group.add_argument("--facelets", help="54-character URFDLB facelet string")

    parser.add_argument(
        "--algorithm",
        choices=sorted(SOLVER_FACTORIES),
        help="Solving strategy (defaults to CUBESOLVER_ALGORITHM or kociemba)",
    )
    parser.add_argument("--max-moves", type=int, help="Maximum accepted solution length")
    parser.add_argument("--timeout-ms", type=int, help="Solving time budget in milliseconds")
    parser.add_argument("--steps", action="store_true", help="Print every step with its description")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args()


def _resolve_config(args: argparse.Namespace) -> SolverConfig:
    config = SolverConfig.from_env()
    changes = {
        "algorithm": args.algorithm,
        "max_moves": args.max_moves,
        "timeout_ms": args.timeout_ms,
    }
    overrides = {key: value for key, value in changes.items() if value is not None}
    return replace(config, **overrides) if overrides else config


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.facelets:
        state = facelet_string_to_state(args.facelets.strip())
    else:
        moves = preset_moves(args.preset) if args.preset else FormulaConverter.convert(args.scramble)
        state = MoveExecutor.apply_moves(create_solved_cube(), moves)

    calculator = SolutionCalculator(_resolve_config(args))
    print(f"Cube: {state_to_facelet_string(state)}")

    try:
        solution = asyncio.run(calculator.calculate_solution(state))
    except AssemblyError as exc:
        print(f"Error [{exc.code.value}]: {exc}", file=sys.stderr)
        return 1

    print(
        f"Solution ({solution.algorithm_used}, {solution.total_moves} moves, "
        f"{solution.metadata.complexity.value}): {' '.join(solution.moves)}"
    )
    if args.steps:
        for increment in solution.increments:
            print(f"{increment.step_number:>3}. {increment.notation:<3} {increment.description}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
