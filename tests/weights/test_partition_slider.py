"""Tests for the partition slider drag state machine."""

import pytest

from weightforge.weights.partition_slider import (
    PartitionSlider, find_unlocked, transfer,
)
from weightforge.weights.weight_set import WeightEntry, WeightSet


def _set(*weights, locked=()):
    return WeightSet(
        WeightEntry(i, w, i in locked) for i, w in enumerate(weights)
    )


# ── Target resolution ─────────────────────────────────────────────────

class TestSmartLock:

    def test_find_unlocked_skips_locked(self):
        ws = _set(0.25, 0.25, 0.25, 0.25, locked={1, 2})
        assert find_unlocked(ws, 2, leftward=True) == 0
        assert find_unlocked(ws, 1, leftward=False) == 3

    def test_targets_skip_locked_neighbours(self):
        ws = _set(0.25, 0.25, 0.25, 0.25, locked={1, 2})
        slider = PartitionSlider(ws)
        assert slider.targets(1) == (0, 3)

    def test_boundary_before_locked_tail_not_grabbable(self):
        ws = _set(0.5, 0.3, 0.2, locked={2})
        slider = PartitionSlider(ws)
        assert not slider.can_grab(1)
        assert slider.can_grab(0)
        assert slider.grabbable_boundaries() == [0]

    def test_locked_head_blocks_first_boundary(self):
        ws = _set(0.5, 0.5, locked={0})
        slider = PartitionSlider(ws)
        assert not slider.grab(0)
        assert not slider.dragging

    def test_out_of_range_boundary(self):
        slider = PartitionSlider(_set(0.5, 0.5))
        assert slider.targets(1) is None
        assert slider.targets(-1) is None

    def test_single_entry_has_no_boundaries(self):
        slider = PartitionSlider(_set(1.0))
        assert slider.boundary_count == 0
        assert slider.grabbable_boundaries() == []


# ── Transfer ──────────────────────────────────────────────────────────

class TestTransfer:

    def test_moves_weight_between_pair(self):
        ws = _set(0.5, 0.5)
        assert transfer(ws, 0, 1, 0.1)
        assert ws.weights() == pytest.approx([0.6, 0.4])

    def test_left_clamp_passes_overflow_through(self):
        ws = _set(0.2, 0.5, 0.3)
        transfer(ws, 0, 1, -0.5)
        assert ws[0].weight == 0.0
        assert ws[1].weight == pytest.approx(0.7)
        assert ws[2].weight == 0.3

    def test_right_clamp_passes_overflow_through(self):
        ws = _set(0.6, 0.4)
        transfer(ws, 0, 1, 0.9)
        assert ws.weights() == pytest.approx([1.0, 0.0])
        assert ws[1].weight == 0.0

    def test_no_change_returns_false(self):
        ws = _set(0.0, 1.0)
        assert not transfer(ws, 0, 1, -0.2)


# ── State machine ─────────────────────────────────────────────────────

class TestDragSession:

    def test_idle_drag_is_ignored(self):
        ws = _set(0.5, 0.5)
        slider = PartitionSlider(ws)
        assert not slider.drag(0.2)
        assert ws.weights() == [0.5, 0.5]

    def test_grab_drag_release(self):
        ws = _set(0.5, 0.5)
        slider = PartitionSlider(ws)
        assert slider.grab(0)
        assert slider.drag_session.boundary == 0
        assert slider.drag(0.25)
        assert ws.weights() == pytest.approx([0.75, 0.25])
        assert slider.release()
        assert not slider.dragging
        assert ws.weights() == pytest.approx([0.75, 0.25])

    def test_second_grab_while_dragging_ignored(self):
        slider = PartitionSlider(_set(0.4, 0.3, 0.3))
        assert slider.grab(0)
        assert not slider.grab(1)
        assert slider.drag_session.boundary == 0

    def test_drag_conserves_pair_and_total(self):
        ws = _set(0.1, 0.3, 0.2, 0.4, locked={1, 2})
        slider = PartitionSlider(ws)
        slider.grab(1)
        before = ws[0].weight + ws[3].weight
        for delta in (0.05, -0.3, 0.7, -0.02, 0.4, -1.0):
            slider.drag(delta)
            assert ws[0].weight + ws[3].weight == pytest.approx(before, abs=1e-12)
            assert ws.total_weight() == pytest.approx(1.0, abs=1e-12)
            assert min(ws.weights()) >= 0.0
        assert ws[1].weight == 0.3
        assert ws[2].weight == 0.2

    def test_clamp_at_zero_through_slider(self):
        ws = _set(0.2, 0.8)
        slider = PartitionSlider(ws)
        slider.grab(0)
        slider.drag(-0.5)
        assert ws[0].weight == 0.0
        assert ws[1].weight == pytest.approx(1.0)

    def test_foreign_token_ignored(self):
        ws = _set(0.5, 0.5)
        a = PartitionSlider(ws)
        b = PartitionSlider(ws)
        assert a.token != b.token
        assert not a.grab(0, token=b.token)
        assert a.grab(0, token=a.token)
        assert not a.drag(0.1, token=b.token)
        assert not a.release(token=b.token)
        assert a.dragging
        assert not b.dragging

    def test_two_sliders_do_not_interfere(self):
        ws1 = _set(0.5, 0.5)
        ws2 = _set(0.5, 0.5)
        a = PartitionSlider(ws1)
        b = PartitionSlider(ws2)
        a.grab(0)
        b.grab(0)
        a.drag(0.2)
        b.release()
        assert a.dragging
        assert ws1.weights() == pytest.approx([0.7, 0.3])
        assert ws2.weights() == [0.5, 0.5]

    def test_lock_during_drag_stops_updates(self):
        ws = _set(0.5, 0.5)
        slider = PartitionSlider(ws)
        slider.grab(0)
        ws.set_locked(1, True)
        assert not slider.drag(0.1)
        assert ws.weights() == [0.5, 0.5]

    def test_on_changed_callback(self):
        calls = []
        slider = PartitionSlider(_set(0.5, 0.5))
        slider.on_changed = lambda: calls.append(1)
        slider.grab(0)
        slider.drag(0.1)
        slider.drag(0.0)
        assert calls == [1]

    def test_bind_drops_drag(self):
        slider = PartitionSlider(_set(0.5, 0.5))
        slider.grab(0)
        slider.bind(_set(1.0))
        assert not slider.dragging


# ── Pixel layout and pointer events ───────────────────────────────────

class TestPointer:

    def test_segments_and_boundaries(self):
        slider = PartitionSlider(_set(0.25, 0.5, 0.25))
        assert slider.segments(200.0) == [(0.0, 50.0), (50.0, 100.0), (150.0, 50.0)]
        assert slider.boundary_positions(200.0) == [50.0, 150.0]

    def test_boundary_hit_test(self):
        slider = PartitionSlider(_set(0.25, 0.5, 0.25))
        assert slider.boundary_at(52.0, 200.0) == 0
        assert slider.boundary_at(146.0, 200.0) == 1
        assert slider.boundary_at(100.0, 200.0) is None

    def test_locked_boundary_not_hit(self):
        slider = PartitionSlider(_set(0.25, 0.5, 0.25, locked={2}))
        assert slider.boundary_at(150.0, 200.0) is None

    def test_press_drag_release_in_pixels(self):
        ws = _set(0.5, 0.5)
        slider = PartitionSlider(ws)
        assert slider.on_mouse_press(101.0, 200.0)
        assert slider.on_mouse_drag(20.0, 200.0)
        assert ws.weights() == pytest.approx([0.6, 0.4])
        assert slider.on_mouse_release()
        assert not slider.on_mouse_release()

    def test_press_off_handle(self):
        slider = PartitionSlider(_set(0.5, 0.5))
        assert not slider.on_mouse_press(10.0, 200.0)

    def test_zero_width_ignored(self):
        slider = PartitionSlider(_set(0.5, 0.5))
        slider.grab(0)
        assert not slider.on_mouse_drag(5.0, 0.0)
