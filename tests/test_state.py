"""
Test suite for SystemState and Rate.

Tests cover:
- Construction and shape validation
- Immutability and buffer ownership
- Derived states (add_mul, advance_positions, with_time)
- Rate arithmetic
"""

import pytest
import numpy as np
from titansim import SystemState, Rate, Vector3d


def make_state(time=0.0):
    positions = [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 2.0, 0.0]]
    velocities = [[0.0, 0.0, 0.0], [0.0, 1.0, 0.0], [-1.0, 0.0, 0.0]]
    return SystemState(positions, velocities, time)


class TestConstruction:
    """Test SystemState construction."""

    def test_basic_construction(self):
        state = make_state(time=5.0)

        assert state.n_bodies == 3
        assert len(state) == 3
        assert state.time == 5.0
        assert state.positions.shape == (3, 3)
        assert state.velocities.shape == (3, 3)

    def test_from_vectors(self):
        state = SystemState.from_vectors([Vector3d(1, 2, 3)], [Vector3d(4, 5, 6)], 1.0)

        assert state.position_of(0) == Vector3d(1, 2, 3)
        assert state.velocity_of(0) == Vector3d(4, 5, 6)

    def test_mismatched_lengths(self):
        """positions and velocities must have one entry per body."""
        with pytest.raises(ValueError, match="same length"):
            SystemState([[0, 0, 0], [1, 0, 0]], [[0, 0, 0]])

    def test_wrong_width(self):
        with pytest.raises(ValueError, match=r"shape \(n, 3\)"):
            SystemState([[0, 0]], [[0, 0]])

    def test_non_finite_time(self):
        with pytest.raises(ValueError, match="finite"):
            SystemState([[0, 0, 0]], [[0, 0, 0]], np.inf)

    def test_empty_state_allowed(self):
        """An empty state can be built (the Solver rejects it)."""
        state = SystemState([], [])
        assert state.n_bodies == 0


class TestImmutability:
    """States never change after construction."""

    def test_arrays_read_only(self):
        state = make_state()
        with pytest.raises(ValueError):
            state.positions[0, 0] = 1.0
        with pytest.raises(ValueError):
            state.velocities[0, 0] = 1.0

    def test_input_buffers_copied(self):
        """Mutating the caller's array does not affect the state."""
        positions = np.zeros((2, 3))
        velocities = np.zeros((2, 3))
        state = SystemState(positions, velocities)
        positions[0, 0] = 99.0

        assert state.positions[0, 0] == 0.0

    def test_add_mul_returns_new_state(self):
        state = make_state()
        rate = Rate(np.ones((3, 3)), 2 * np.ones((3, 3)))
        new = state.add_mul(0.5, rate)

        assert new is not state
        np.testing.assert_allclose(new.positions, state.positions + 0.5)
        np.testing.assert_allclose(new.velocities, state.velocities + 1.0)
        assert new.time == 0.5
        # original untouched
        assert state.time == 0.0
        assert state.positions[1, 0] == 1.0

    def test_add_mul_length_mismatch(self):
        state = make_state()
        rate = Rate(np.ones((2, 3)), np.ones((2, 3)))
        with pytest.raises(ValueError, match="Rate has 2 bodies"):
            state.add_mul(1.0, rate)

    def test_advance_positions_does_not_alias(self):
        """advance_positions reads the velocity field without keeping it."""
        state = make_state()
        field = np.ones((3, 3))
        new = state.advance_positions(2.0, field)
        field[:] = 100.0

        np.testing.assert_allclose(new.positions, state.positions + 2.0)
        np.testing.assert_array_equal(new.velocities, state.velocities)
        assert new.time == state.time
        assert not np.shares_memory(new.positions, field)

    def test_advance_positions_shape(self):
        with pytest.raises(ValueError, match="velocity field"):
            make_state().advance_positions(1.0, np.ones((2, 3)))

    def test_with_time(self):
        state = make_state()
        relabelled = state.with_time(42.0)

        assert relabelled.time == 42.0
        np.testing.assert_array_equal(relabelled.positions, state.positions)
        assert state.time == 0.0


class TestAccessors:
    """Test per-body accessors and special methods."""

    def test_position_and_velocity_of(self):
        state = make_state()

        assert state.position_of(2) == Vector3d(0, 2, 0)
        assert state.velocity_of(1) == Vector3d(0, 1, 0)
        assert state.position_of(-1) == Vector3d(0, 2, 0)

    def test_equality(self):
        assert make_state() == make_state()
        assert make_state() != make_state(time=1.0)

    def test_str_lists_bodies(self):
        text = str(make_state())
        assert text.count("\n") == 3
        assert "[2]" in text


class TestRate:
    """Test Rate arithmetic used by Runge-Kutta stages."""

    def test_add_and_scale(self):
        a = Rate(np.ones((2, 3)), np.zeros((2, 3)))
        b = Rate(np.zeros((2, 3)), np.ones((2, 3)))
        c = (a + 2.0 * b) * 0.5

        np.testing.assert_allclose(c.velocities, 0.5)
        np.testing.assert_allclose(c.accelerations, 1.0)
        assert len(c) == 2

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="Rate arrays must match"):
            Rate(np.ones((2, 3)), np.ones((3, 3)))

    def test_accessors(self):
        rate = Rate([[1, 2, 3]], [[4, 5, 6]])
        assert rate.velocity_of(0) == Vector3d(1, 2, 3)
        assert rate.acceleration_of(0) == Vector3d(4, 5, 6)
