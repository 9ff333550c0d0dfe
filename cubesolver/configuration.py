from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Tuple

from cubesolver.models import (
    CENTER_POSITION,
    FACELETS_PER_FACE,
    TOTAL_FACELETS,
    Color,
    CubeState,
    Face,
)
from cubesolver.state import (
    build_state,
    color_counts,
    count_configured_facelets,
    create_empty_cube_state,
    is_face_complete,
    with_facelet,
)

logger = logging.getLogger(__name__)

# Order in which a user is walked through the faces.
GUIDED_FACE_ORDER: Tuple[Face, ...] = (
    Face.FRONT,
    Face.RIGHT,
    Face.BACK,
    Face.LEFT,
    Face.UP,
    Face.DOWN,
)


@dataclass(frozen=True)
class ConfigurationProgress:
    current_face: Face = Face.FRONT
    current_step: int = 0
    total_steps: int = len(GUIDED_FACE_ORDER)
    completed_faces: Tuple[Face, ...] = ()
    percent_complete: int = 0


StateObserver = Callable[[CubeState, ConfigurationProgress], Any]


def _percent_complete(state: CubeState) -> int:
    return round(count_configured_facelets(state) / TOTAL_FACELETS * 100)


class ConfigurationStateManager:
    """Owns the cube being configured and notifies observers on every change.

    Observers are called synchronously, in subscription order, after each
    successful mutation. A failing observer is logged and skipped so the
    remaining observers still receive the update.
    """

    def __init__(self, initial_state: Optional[CubeState] = None) -> None:
        self._observers: dict[int, StateObserver] = {}
        self._ids = itertools.count(1)
        self._state = create_empty_cube_state()
        self._progress = ConfigurationProgress(percent_complete=_percent_complete(self._state))
        if initial_state is not None:
            self._state = build_state(initial_state.faces)
            self._refresh_progress()

    @property
    def cube_state(self) -> CubeState:
        return self._state

    @property
    def progress(self) -> ConfigurationProgress:
        return self._progress

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def subscribe(self, callback: StateObserver) -> Callable[[], None]:
        observer_id = next(self._ids)
        self._observers[observer_id] = callback

        def unsubscribe() -> None:
            self._observers.pop(observer_id, None)

        return unsubscribe

    def unsubscribe_all(self) -> None:
        self._observers.clear()

    def can_modify_facelet(self, face: Face, position: int) -> bool:
        return 0 <= position < FACELETS_PER_FACE and position != CENTER_POSITION

    def get_facelet_color(self, face: Face, position: int) -> Optional[Color]:
        return self._state.get(face, position)

    def set_facelet_color(self, face: Face, position: int, color: Optional[Color]) -> bool:
        if not self.can_modify_facelet(face, position):
            logger.debug("Refusing to change facelet %s%d", face.value, position)
            return False

        self._state = with_facelet(self._state, face, position, color)
        self._refresh_progress()
        self._notify()
        return True

    def color_counts(self) -> dict[Color, int]:
        return color_counts(self._state)

    def set_validation_status(self, is_valid: bool) -> None:
        self._state = replace(self._state, metadata=replace(self._state.metadata, is_valid=is_valid))
        self._notify()

    def set_progress(self, **changes: Any) -> None:
        self._progress = replace(self._progress, **changes)
        self._notify()

    def set_state(self, state: CubeState) -> None:
        self._state = build_state(state.faces)
        self._refresh_progress()
        self._notify()

    def reset(self) -> None:
        self._state = create_empty_cube_state()
        self._progress = ConfigurationProgress(percent_complete=_percent_complete(self._state))
        self._notify()

    def _refresh_progress(self) -> None:
        completed = tuple(face for face in GUIDED_FACE_ORDER if is_face_complete(self._state, face))
        self._progress = replace(
            self._progress,
            completed_faces=completed,
            percent_complete=_percent_complete(self._state),
        )

    def _notify(self) -> None:
        for callback in list(self._observers.values()):
            try:
                callback(self._state, self._progress)
            except Exception:
                logger.exception("State observer %r failed", callback)


FACE_INSTRUCTIONS: dict[Face, str] = {
    Face.FRONT: "Configure the front face (green center). Look at the face facing you.",
    Face.RIGHT: "Configure the right face (red center). Rotate the cube or look at the right side.",
    Face.BACK: "Configure the back face (blue center). Look at the face opposite to you.",
    Face.LEFT: "Configure the left face (orange center). Rotate the cube or look at the left side.",
    Face.UP: "Configure the top face (white center). Look at the face on top of the cube.",
    Face.DOWN: "Configure the bottom face (yellow center). Look at the face at the bottom of the cube.",
}


class GuidedFlowManager:
    """Walks a user through the faces in :data:`GUIDED_FACE_ORDER`.

    Moving forward is only allowed once the current face is fully configured.
    Every step is pushed into the state manager's progress, which notifies its
    observers.
    """

    def __init__(self, manager: ConfigurationStateManager) -> None:
        self._manager = manager
        self._index = 0

    @property
    def current_face(self) -> Face:
        return GUIDED_FACE_ORDER[self._index]

    @property
    def current_step(self) -> int:
        return self._index

    @property
    def total_steps(self) -> int:
        return len(GUIDED_FACE_ORDER)

    @property
    def instructions(self) -> str:
        return FACE_INSTRUCTIONS[self.current_face]

    def is_current_face_complete(self) -> bool:
        return is_face_complete(self._manager.cube_state, self.current_face)

    def completed_faces(self) -> list[Face]:
        state = self._manager.cube_state
        return [face for face in GUIDED_FACE_ORDER if is_face_complete(state, face)]

    def remaining_faces(self) -> list[Face]:
        completed = set(self.completed_faces())
        return [face for face in GUIDED_FACE_ORDER if face not in completed]

    def is_complete(self) -> bool:
        return self._manager.cube_state.metadata.is_complete

    def next_face(self) -> bool:
        if not self.is_current_face_complete():
            return False
        if self._index >= len(GUIDED_FACE_ORDER) - 1:
            return False
        self._go_to(self._index + 1)
        return True

    def previous_face(self) -> bool:
        if self._index <= 0:
            return False
        self._go_to(self._index - 1)
        return True

    def jump_to_face(self, face: Face) -> None:
        self._go_to(GUIDED_FACE_ORDER.index(face))

    def reset(self) -> None:
        self._go_to(0)

    def _go_to(self, index: int) -> None:
        self._index = index
        logger.debug("Guided flow at step %d (%s)", index, self.current_face.value)
        self._manager.set_progress(
            current_face=self.current_face,
            current_step=index,
            total_steps=self.total_steps,
            completed_faces=tuple(self.completed_faces()),
        )
