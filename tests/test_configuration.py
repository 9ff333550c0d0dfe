from __future__ import annotations

import logging

import pytest

from cubesolver.configuration import (
    FACE_INSTRUCTIONS,
    GUIDED_FACE_ORDER,
    ConfigurationProgress,
    ConfigurationStateManager,
    GuidedFlowManager,
)
from cubesolver.models import CENTER_COLORS, Color, CubeMetadata, CubeState, Face
from cubesolver.state import create_solved_cube


@pytest.fixture
def manager() -> ConfigurationStateManager:
    return ConfigurationStateManager()


def test_starts_with_centers_only(manager: ConfigurationStateManager) -> None:
    assert manager.get_facelet_color(Face.UP, 4) == Color.WHITE
    assert manager.get_facelet_color(Face.UP, 0) is None
    assert manager.progress.percent_complete == 11
    assert manager.progress.completed_faces == ()
    assert manager.color_counts()[Color.GREEN] == 1


def test_setting_a_facelet_notifies_observers(manager: ConfigurationStateManager) -> None:
    seen: list[tuple[CubeState, ConfigurationProgress]] = []
    manager.subscribe(lambda state, progress: seen.append((state, progress)))

    assert manager.set_facelet_color(Face.FRONT, 0, Color.RED)
    assert len(seen) == 1
    state, progress = seen[0]
    assert state.get(Face.FRONT, 0) == Color.RED
    assert state.metadata.total_configured == 7
    assert progress.percent_complete == 13


def test_center_facelets_are_locked(manager: ConfigurationStateManager) -> None:
    calls: list[CubeState] = []
    manager.subscribe(lambda state, progress: calls.append(state))

    assert not manager.can_modify_facelet(Face.UP, 4)
    assert not manager.set_facelet_color(Face.UP, 4, Color.RED)
    assert manager.get_facelet_color(Face.UP, 4) == Color.WHITE
    assert calls == []


def test_failing_observer_does_not_block_others(
    manager: ConfigurationStateManager, caplog: pytest.LogCaptureFixture
) -> None:
    received: list[int] = []

    def broken(state: CubeState, progress: ConfigurationProgress) -> None:
        raise RuntimeError("observer failed")

    manager.subscribe(broken)
    manager.subscribe(lambda state, progress: received.append(progress.percent_complete))

    with caplog.at_level(logging.ERROR, logger="cubesolver.configuration"):
        manager.set_facelet_color(Face.LEFT, 8, Color.ORANGE)

    assert received == [13]
    assert "State observer" in caplog.text


def test_unsubscribe(manager: ConfigurationStateManager) -> None:
    calls: list[int] = []
    unsubscribe = manager.subscribe(lambda state, progress: calls.append(1))
    manager.subscribe(lambda state, progress: calls.append(2))
    assert manager.observer_count == 2

    unsubscribe()
    unsubscribe()
    manager.set_facelet_color(Face.DOWN, 0, Color.YELLOW)
    assert calls == [2]

    manager.unsubscribe_all()
    assert manager.observer_count == 0


def test_progress_tracks_completed_faces(manager: ConfigurationStateManager) -> None:
    for position in (0, 1, 2, 3, 5, 6, 7, 8):
        manager.set_facelet_color(Face.RIGHT, position, Color.RED)

    assert manager.progress.completed_faces == (Face.RIGHT,)
    assert manager.progress.percent_complete == 26


def test_set_state_and_reset(manager: ConfigurationStateManager) -> None:
    notified: list[int] = []
    manager.subscribe(lambda state, progress: notified.append(progress.percent_complete))

    manager.set_state(create_solved_cube())
    assert manager.progress.percent_complete == 100
    assert len(manager.progress.completed_faces) == 6
    assert manager.cube_state == create_solved_cube()

    manager.reset()
    assert manager.get_facelet_color(Face.FRONT, 0) is None
    assert notified == [100, 11]


def test_validation_status_and_manual_progress(manager: ConfigurationStateManager) -> None:
    manager.set_validation_status(True)
    assert manager.cube_state.metadata.is_valid

    manager.set_progress(current_face=Face.BACK, current_step=2)
    assert manager.progress.current_face == Face.BACK
    assert manager.progress.current_step == 2
    assert manager.progress.total_steps == 6


def test_initial_state_is_used() -> None:
    manager = ConfigurationStateManager(create_solved_cube())
    assert manager.progress.percent_complete == 100
    assert manager.cube_state.metadata.is_complete


def test_set_state_rejects_swapped_centers(manager: ConfigurationStateManager) -> None:
    faces = {face: (CENTER_COLORS[face],) * 9 for face in Face}
    faces[Face.UP], faces[Face.DOWN] = faces[Face.DOWN], faces[Face.UP]
    swapped = CubeState(faces=faces, metadata=CubeMetadata(total_configured=54, is_complete=True))
    calls: list[CubeState] = []
    manager.subscribe(lambda state, progress: calls.append(state))

    with pytest.raises(ValueError, match="Center of face U must be white"):
        manager.set_state(swapped)
    assert manager.get_facelet_color(Face.UP, 4) == Color.WHITE
    assert calls == []


def _fill(manager: ConfigurationStateManager, face: Face) -> None:
    for position in (0, 1, 2, 3, 5, 6, 7, 8):
        manager.set_facelet_color(face, position, CENTER_COLORS[face])


def test_guided_flow_only_advances_past_complete_faces(manager: ConfigurationStateManager) -> None:
    flow = GuidedFlowManager(manager)
    assert flow.current_face == Face.FRONT
    assert flow.instructions == FACE_INSTRUCTIONS[Face.FRONT]

    assert not flow.next_face()
    assert flow.current_step == 0

    _fill(manager, Face.FRONT)
    assert flow.is_current_face_complete()
    assert flow.next_face()
    assert flow.current_face == Face.RIGHT
    assert manager.progress.current_face == Face.RIGHT
    assert manager.progress.current_step == 1
    assert manager.progress.completed_faces == (Face.FRONT,)
    assert flow.completed_faces() == [Face.FRONT]
    assert flow.remaining_faces() == list(GUIDED_FACE_ORDER[1:])


def test_guided_flow_bounds(manager: ConfigurationStateManager) -> None:
    flow = GuidedFlowManager(manager)
    assert not flow.previous_face()
    assert flow.current_step == 0

    manager.set_state(create_solved_cube())
    for step in range(1, flow.total_steps):
        assert flow.next_face()
        assert flow.current_step == step
    assert flow.current_face == Face.DOWN
    assert not flow.next_face()
    assert flow.current_step == flow.total_steps - 1
    assert flow.is_complete()

    assert flow.previous_face()
    assert flow.current_face == Face.UP


def test_guided_flow_jump_and_reset(manager: ConfigurationStateManager) -> None:
    seen: list[Face] = []
    manager.subscribe(lambda state, progress: seen.append(progress.current_face))
    flow = GuidedFlowManager(manager)

    flow.jump_to_face(Face.LEFT)
    assert flow.current_step == 3
    assert flow.instructions.startswith("Configure the left face")

    flow.reset()
    assert flow.current_face == Face.FRONT
    assert manager.progress.current_step == 0
    assert seen == [Face.LEFT, Face.FRONT]
