from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

import kociemba

from cubesolver.bridge import parse_solver_moves, solved_facelet_string, state_to_facelet_string
from cubesolver.errors import AssemblyError, AssemblyErrorCode
from cubesolver.models import CubeState
from cubesolver.moves import MoveNotation

logger = logging.getLogger(__name__)

# Kept apart from the loop's default executor, which asyncio.run joins on exit.
_SEARCH_POOL = ThreadPoolExecutor(max_workers=2, thread_name_prefix="kociemba")


class KociembaSolver:
    """Two-phase solver backed by the ``kociemba`` package.

    The search is CPU bound and synchronous, so it runs on a module-level
    thread pool. When the caller's timeout fires the awaiting coroutine is
    cancelled and the eventual answer from the worker thread is dropped; the
    event loop can close without waiting for that thread.
    """

    name = "kociemba"

    async def solve(self, state: CubeState) -> list[MoveNotation]:
        facelets = state_to_facelet_string(state)
        if facelets == solved_facelet_string():
            return []

        loop = asyncio.get_running_loop()
        try:
            answer = await loop.run_in_executor(_SEARCH_POOL, kociemba.solve, facelets)
        except ValueError as exc:
            raise AssemblyError(
                AssemblyErrorCode.ALGORITHM_ERROR,
                f"Two-phase solver rejected the cube: {exc}",
                {"facelets": facelets, "original_error": str(exc)},
            ) from exc

        moves = parse_solver_moves(answer)
        logger.debug("Two-phase solver answered with %d moves for %s", len(moves), facelets)
        return moves
