from __future__ import annotations

from typing import Protocol, runtime_checkable

from cubesolver.models import CubeState
from cubesolver.moves import MoveNotation


@runtime_checkable
class CubeSolver(Protocol):
    """Strategy interface used by the solution calculator."""

    name: str

    async def solve(self, state: CubeState) -> list[MoveNotation]:
        ...
