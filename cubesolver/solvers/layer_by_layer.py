"""Beginner's-method solver.

The white layer (UP) is built first and the yellow layer (DOWN) last. All
canned algorithms are written for a cube held yellow side up, so every phase
works in a :class:`Frame` that maps those virtual faces onto the real ones:
virtual U is the real DOWN face and virtual F is one of the four side faces.

Each step picks its algorithm from the position of the piece being placed,
then checks the result against the target piece plus every piece solved
before it. A phase that runs out of attempts logs a warning and the solver
moves on; the calculator's verification reports the resulting failure.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from itertools import product
from typing import Callable, FrozenSet, Iterable, Mapping, Optional, Sequence

import numpy as np

from cubesolver.executor import MoveExecutor
from cubesolver.formula import FormulaConverter
from cubesolver.models import CENTER_POSITION, Color, CubeState, Face, FaceletId
from cubesolver.moves import MoveNotation
from cubesolver.pieces import CORNERS, EDGES
from cubesolver.presets import get_preset

logger = logging.getLogger(__name__)

Slot = FrozenSet[Face]
Goal = Callable[[CubeState], bool]

DEFAULT_MAX_ATTEMPTS = 20

# Side faces in the order they are met walking around the DOWN face.
SIDE_FACES: tuple[Face, ...] = (Face.FRONT, Face.RIGHT, Face.BACK, Face.LEFT)

_AXES: Mapping[Face, tuple[int, int, int]] = {
    Face.UP: (0, 1, 0),
    Face.DOWN: (0, -1, 0),
    Face.RIGHT: (1, 0, 0),
    Face.LEFT: (-1, 0, 0),
    Face.FRONT: (0, 0, 1),
    Face.BACK: (0, 0, -1),
}
_FACE_BY_AXIS = {axis: face for face, axis in _AXES.items()}

_SLOTS: Mapping[Slot, Mapping[Face, FaceletId]] = {
    frozenset(facelet.face for facelet in facelets): {facelet.face: facelet for facelet in facelets}
    for facelets in (*CORNERS.values(), *EDGES.values())
}

U_TURNS = ("", "U", "U2", "U'")


class SolvingPhase(str, Enum):
    WHITE_CROSS = "WhiteCross"
    WHITE_CORNERS = "WhiteCorners"
    MIDDLE_LAYER = "MiddleLayer"
    YELLOW_CROSS = "YellowCross"
    YELLOW_FACE_ORIENTED = "YellowFaceOriented"
    YELLOW_CORNERS_POSITIONED = "YellowCornersPositioned"
    YELLOW_EDGES_POSITIONED = "YellowEdgesPositioned"
    DONE = "Done"


@lru_cache(maxsize=None)
def _formula(text: str) -> tuple[MoveNotation, ...]:
    return tuple(FormulaConverter.convert(text)) if text.strip() else ()


@lru_cache(maxsize=None)
def _preset_formula(name: str) -> str:
    return get_preset(name).formula


@dataclass(frozen=True)
class Frame:
    """Maps virtual face letters of an algorithm onto the real cube faces."""

    to_actual: Mapping[Face, Face]

    @classmethod
    def oriented(cls, up: Face, front: Face) -> "Frame":
        up_axis = np.array(_AXES[up])
        front_axis = np.array(_AXES[front])
        if int(np.dot(up_axis, front_axis)) != 0:
            raise ValueError(f"Faces {up.value} and {front.value} are not adjacent")
        right_axis = np.cross(up_axis, front_axis)

        vectors = {
            Face.UP: up_axis,
            Face.DOWN: -up_axis,
            Face.FRONT: front_axis,
            Face.BACK: -front_axis,
            Face.RIGHT: right_axis,
            Face.LEFT: -right_axis,
        }
        return cls(
            {
                virtual: _FACE_BY_AXIS[tuple(int(value) for value in vector)]
                for virtual, vector in vectors.items()
            }
        )

    def face(self, letter: str) -> Face:
        return self.to_actual[Face(letter)]

    def slot(self, name: str) -> Slot:
        return frozenset(self.face(letter) for letter in name)

    def names(self, slot: Slot) -> frozenset[str]:
        to_virtual = {actual: virtual for virtual, actual in self.to_actual.items()}
        return frozenset(to_virtual[face].value for face in slot)

    def translate(self, moves: Iterable[MoveNotation]) -> list[MoveNotation]:
        return [
            MoveNotation(f"{self.to_actual[Face(move.value[0])].value}{move.value[1:]}")
            for move in moves
        ]


def yellow_up_frame(front: Face) -> Frame:
    return Frame.oriented(up=Face.DOWN, front=front)


FRAMES: tuple[Frame, ...] = tuple(yellow_up_frame(side) for side in SIDE_FACES)


def _center(state: CubeState, face: Face) -> Color:
    return state.get(face, CENTER_POSITION)


def piece_colors(state: CubeState, slot: Slot) -> dict[Face, Optional[Color]]:
    return {face: state.at(facelet) for face, facelet in _SLOTS[slot].items()}


def piece_solved(state: CubeState, slot: Slot) -> bool:
    return all(color == _center(state, face) for face, color in piece_colors(state, slot).items())


def piece_positioned(state: CubeState, slot: Slot) -> bool:
    """True when the piece belongs in ``slot``, whatever its orientation."""

    colors = set(piece_colors(state, slot).values())
    return colors == {_center(state, face) for face in slot}


def locate(state: CubeState, colors: FrozenSet[Color]) -> Slot:
    for slot in _SLOTS:
        if len(slot) == len(colors) and frozenset(piece_colors(state, slot).values()) == colors:
            return slot
    names = ", ".join(sorted(color.value for color in colors))
    raise ValueError(f"No piece with colors {names} found on the cube")


def _describe(colors: Iterable[Color]) -> str:
    return "-".join(sorted(color.value for color in colors))


def frame_for(slot: Slot, name: str) -> Frame:
    for frame in FRAMES:
        if frame.slot(name) == slot:
            return frame
    raise ValueError(f"Slot {sorted(face.value for face in slot)} is never {name}")


def last_layer_edges() -> list[Slot]:
    return [frozenset({Face.DOWN, side}) for side in SIDE_FACES]


def last_layer_corners() -> list[Slot]:
    return [
        frozenset({Face.DOWN, side, SIDE_FACES[(i + 1) % len(SIDE_FACES)]})
        for i, side in enumerate(SIDE_FACES)
    ]


def _yellow_up(state: CubeState, slot: Slot) -> bool:
    return piece_colors(state, slot)[Face.DOWN] == _center(state, Face.DOWN)


def oriented_edges(state: CubeState) -> frozenset[Face]:
    return frozenset(
        next(face for face in slot if face != Face.DOWN)
        for slot in last_layer_edges()
        if _yellow_up(state, slot)
    )


def oriented_corners(state: CubeState) -> int:
    return sum(1 for slot in last_layer_corners() if _yellow_up(state, slot))


def corners_aligned_modulo_turn(state: CubeState) -> bool:
    """True when a single turn of the last layer positions all four corners."""

    slots = last_layer_corners()
    homes = {frozenset(_center(state, face) for face in slot): i for i, slot in enumerate(slots)}
    offsets = set()
    for i, slot in enumerate(slots):
        home = homes.get(frozenset(piece_colors(state, slot).values()))
        if home is None:
            return False
        offsets.add((home - i) % len(slots))
    return len(offsets) == 1


class _SolveRun:
    def __init__(self, state: CubeState, max_attempts: int) -> None:
        self.state = state
        self.moves: list[MoveNotation] = []
        self.max_attempts = max_attempts
        self.locked: list[Slot] = []
        self.white = _center(state, Face.UP)

    def simulate(self, moves: Sequence[MoveNotation], state: Optional[CubeState] = None) -> CubeState:
        return MoveExecutor.apply_moves(self.state if state is None else state, moves)

    def apply(self, moves: Sequence[MoveNotation]) -> None:
        self.state = self.simulate(moves)
        self.moves.extend(moves)

    def apply_formula(self, frame: Frame, formula: str) -> None:
        self.apply(frame.translate(_formula(formula)))

    def keeps_locked(self, state: CubeState) -> bool:
        return all(piece_solved(state, slot) for slot in self.locked)

    def try_candidates(self, frame: Frame, formulas: Sequence[str], goal: Goal) -> bool:
        for formula in formulas:
            moves = frame.translate(_formula(formula))
            if goal(self.simulate(moves)):
                self.apply(moves)
                return True
        return False

    def align_top(self, goal: Goal) -> bool:
        return self.try_candidates(FRAMES[0], U_TURNS, goal)

    def search(
        self,
        options: Sequence[Sequence[MoveNotation]],
        goal: Goal,
        depth: int,
    ) -> Optional[list[MoveNotation]]:
        """Breadth-first search over sequences of at most ``depth`` options."""

        for length in range(1, depth + 1):
            for combo in product(options, repeat=length):
                moves = [move for option in combo for move in option]
                if goal(self.simulate(moves)):
                    return moves
        return None

    def lock(self, slot: Slot) -> None:
        if slot not in self.locked:
            self.locked.append(slot)

    def piece_at(self, colors: FrozenSet[Color], frame: Frame) -> frozenset[str]:
        return frame.names(locate(self.state, colors))


class LayerByLayerSolver:
    name = "layer-by-layer"

    def __init__(self, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts

    async def solve(
        self,
        state: CubeState,
        stop_after: Optional[SolvingPhase] = None,
    ) -> list[MoveNotation]:
        run = _SolveRun(state, self.max_attempts)
        phases = (
            (SolvingPhase.WHITE_CROSS, self._white_cross),
            (SolvingPhase.WHITE_CORNERS, self._white_corners),
            (SolvingPhase.MIDDLE_LAYER, self._middle_layer),
            (SolvingPhase.YELLOW_CROSS, self._yellow_cross),
            (SolvingPhase.YELLOW_FACE_ORIENTED, self._yellow_face),
            (SolvingPhase.YELLOW_CORNERS_POSITIONED, self._yellow_corners),
            (SolvingPhase.YELLOW_EDGES_POSITIONED, self._yellow_edges),
        )
        for phase, step in phases:
            before = len(run.moves)
            await step(run)
            logger.debug("%s finished with %d moves", phase.value, len(run.moves) - before)
            await asyncio.sleep(0)
            if phase == stop_after:
                return run.moves

        logger.debug("%s reached after %d moves", SolvingPhase.DONE.value, len(run.moves))
        return run.moves

    def _give_up(self, phase: SolvingPhase, detail: str) -> None:
        logger.warning(
            "%s did not converge within %d attempts (%s); continuing best-effort",
            phase.value,
            self.max_attempts,
            detail,
        )

    async def _white_cross(self, run: _SolveRun) -> None:
        for frame in FRAMES:
            target = frame.slot("DF")
            colors = frozenset({run.white, _center(run.state, frame.face("F"))})

            def placed(state: CubeState, target: Slot = target) -> bool:
                return piece_solved(state, target) and run.keeps_locked(state)

            def lifted(state: CubeState, colors: FrozenSet[Color] = colors) -> bool:
                return "U" in frame.names(locate(state, colors)) and run.keeps_locked(state)

            for _ in range(run.max_attempts):
                if piece_solved(run.state, target):
                    break
                where = run.piece_at(colors, frame)
                if "D" in where:
                    (side,) = where - {"D"}
                    run.apply_formula(frame, f"{side}2")
                elif "U" not in where:
                    sides = sorted(where)
                    run.try_candidates(
                        frame,
                        [f"{side} U {side}'" for side in sides] + [f"{side}' U {side}" for side in sides],
                        lifted,
                    )
                else:
                    run.align_top(lambda state, colors=colors: frame.names(locate(state, colors)) == {"U", "F"})
                    run.try_candidates(frame, ("F2", "U' R' F R", "U L F' L'"), placed)
            if not piece_solved(run.state, target):
                self._give_up(SolvingPhase.WHITE_CROSS, f"edge {_describe(colors)}")
            else:
                run.lock(target)
            await asyncio.sleep(0)

    async def _white_corners(self, run: _SolveRun) -> None:
        extract = _preset_formula("CornerExtract")
        insert = _preset_formula("Sexy")

        for frame in FRAMES:
            target = frame.slot("DFR")
            colors = frozenset(
                {run.white, _center(run.state, frame.face("F")), _center(run.state, frame.face("R"))}
            )

            for _ in range(run.max_attempts):
                if piece_solved(run.state, target):
                    break
                slot = locate(run.state, colors)
                if "D" in frame.names(slot):
                    run.apply_formula(frame_for(slot, "DFR"), extract)
                    continue
                run.align_top(lambda state, colors=colors: frame.names(locate(state, colors)) == {"U", "F", "R"})
                for _ in range(5):
                    run.apply_formula(frame, insert)
                    if piece_solved(run.state, target):
                        break
            if not piece_solved(run.state, target):
                self._give_up(SolvingPhase.WHITE_CORNERS, f"corner {_describe(colors)}")
            else:
                run.lock(target)
            await asyncio.sleep(0)

    async def _middle_layer(self, run: _SolveRun) -> None:
        right_insert = _preset_formula("RightInsert")
        left_insert = _preset_formula("LeftInsert")

        for frame in FRAMES:
            target = frame.slot("FR")
            colors = frozenset({_center(run.state, frame.face("F")), _center(run.state, frame.face("R"))})

            def placed(state: CubeState, target: Slot = target) -> bool:
                return piece_solved(state, target) and run.keeps_locked(state)

            for _ in range(run.max_attempts):
                if piece_solved(run.state, target):
                    break
                slot = locate(run.state, colors)
                if "U" not in frame.names(slot):
                    run.apply_formula(frame_for(slot, "FR"), right_insert)
                    continue

                side_face = next(face for face in slot if face != Face.DOWN)
                side_color = piece_colors(run.state, slot)[side_face]
                insert_frame = next(f for f in FRAMES if _center(run.state, f.face("F")) == side_color)
                run.align_top(
                    lambda state, colors=colors, f=insert_frame: f.names(locate(state, colors)) == {"U", "F"}
                )
                run.try_candidates(insert_frame, (right_insert, left_insert), placed)
            if not piece_solved(run.state, target):
                self._give_up(SolvingPhase.MIDDLE_LAYER, f"edge {_describe(colors)}")
            else:
                run.lock(target)
            await asyncio.sleep(0)

    async def _yellow_cross(self, run: _SolveRun) -> None:
        formulas = (_preset_formula("YellowCross"), _preset_formula("YellowCrossAlt"))

        def score(state: CubeState) -> tuple[bool, bool, int]:
            oriented = oriented_edges(state)
            line = oriented in (
                frozenset({Face.FRONT, Face.BACK}),
                frozenset({Face.LEFT, Face.RIGHT}),
            )
            return len(oriented) == 4, line, len(oriented)

        for _ in range(run.max_attempts):
            if len(oriented_edges(run.state)) == 4:
                return
            best: Optional[tuple[tuple[bool, bool, int], list[MoveNotation]]] = None
            for frame in FRAMES:
                for formula in formulas:
                    moves = frame.translate(_formula(formula))
                    candidate = run.simulate(moves)
                    if not run.keeps_locked(candidate):
                        continue
                    if best is None or score(candidate) > best[0]:
                        best = (score(candidate), moves)
            if best is None:
                break
            run.apply(best[1])
            await asyncio.sleep(0)
        if len(oriented_edges(run.state)) != 4:
            self._give_up(SolvingPhase.YELLOW_CROSS, f"{len(oriented_edges(run.state))} edges oriented")

    async def _yellow_face(self, run: _SolveRun) -> None:
        sune = _preset_formula("Sune")
        yellow = _center(run.state, Face.DOWN)

        def cross_kept(state: CubeState) -> bool:
            return run.keeps_locked(state) and len(oriented_edges(state)) == 4

        def chosen_frame() -> Frame:
            count = oriented_corners(run.state)
            for frame in FRAMES:
                corner = piece_colors(run.state, frame.slot("UFL"))
                if count == 0 and corner[frame.face("L")] == yellow:
                    return frame
                if count == 1 and corner[frame.face("U")] == yellow:
                    return frame
                if count == 2 and corner[frame.face("F")] == yellow:
                    return frame
            return FRAMES[0]

        for _ in range(run.max_attempts):
            if oriented_corners(run.state) == 4:
                return
            done = [
                frame
                for frame in FRAMES
                if oriented_corners(run.simulate(frame.translate(_formula(sune)))) == 4
            ]
            run.apply_formula(done[0] if done else chosen_frame(), sune)
            await asyncio.sleep(0)

        if oriented_corners(run.state) == 4 and cross_kept(run.state):
            return
        logger.debug("Sune cycling did not orient the corners, twisting them one by one")
        self._twist_corners(run)
        if oriented_corners(run.state) != 4 or not cross_kept(run.state):
            self._give_up(SolvingPhase.YELLOW_FACE_ORIENTED, f"{oriented_corners(run.state)} corners oriented")

    @staticmethod
    def _twist_corners(run: _SolveRun) -> None:
        frame = FRAMES[0]
        twist = _preset_formula("CornerTwist")
        corner = frame.slot("UFR")
        for _ in range(4):
            for _ in range(6):
                if _yellow_up(run.state, corner):
                    break
                run.apply_formula(frame, twist)
            run.apply_formula(frame, "U")

    async def _yellow_corners(self, run: _SolveRun) -> None:
        top = FRAMES[0]
        options = [
            top.translate(_formula(turn)) + frame.translate(_formula(_preset_formula(name)))
            for name in ("Aa", "Ab")
            for turn in U_TURNS
            for frame in FRAMES
        ]

        def ready(state: CubeState) -> bool:
            return (
                corners_aligned_modulo_turn(state)
                and run.keeps_locked(state)
                and len(oriented_edges(state)) == 4
                and oriented_corners(state) == 4
            )

        for attempt in range(run.max_attempts):
            if corners_aligned_modulo_turn(run.state):
                break
            path = run.search(options, ready, depth=1)
            # No single cycle fits (reversed cyclic order): any cycle leads to a case that has one.
            run.apply(path if path is not None else options[attempt % len(options)])
            await asyncio.sleep(0)

        aligned = run.align_top(
            lambda state: all(piece_positioned(state, slot) for slot in last_layer_corners())
        )
        if not aligned:
            self._give_up(SolvingPhase.YELLOW_CORNERS_POSITIONED, "corners cannot be aligned")

    async def _yellow_edges(self, run: _SolveRun) -> None:
        options = [
            frame.translate(_formula(_preset_formula(name)))
            for frame in FRAMES
            for name in ("Ua", "Ub")
        ]

        def solved(state: CubeState) -> bool:
            return all(piece_solved(state, slot) for slot in _SLOTS)

        if solved(run.state):
            return
        path = run.search(options, solved, depth=2)
        if path is None:
            self._give_up(SolvingPhase.YELLOW_EDGES_POSITIONED, "no edge cycle found")
            return
        run.apply(path)
