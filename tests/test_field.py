"""
Test suite for GravityField.

Tests cover:
- Identity velocity rate
- Pairwise Newtonian accelerations
- Full N-body coupling (probe exerts gravity)
- Singular and non-finite configurations
- Energy and momentum diagnostics
"""

import pytest
import numpy as np
from titansim import (GravityField, SystemState, Catalog, Body, Vector3d,
                      NumericalError, temp_config)


class TestConstruction:
    """Test GravityField construction and validation."""

    def test_default_G_from_config(self):
        assert GravityField([1.0]).G == 6.674e-11
        with temp_config(G=1.0):
            assert GravityField([1.0]).G == 1.0

    def test_explicit_G(self):
        assert GravityField([1.0, 2.0], G=2.0).G == 2.0

    def test_accepts_catalog(self):
        catalog = Catalog([Body('A', 1.0, 0.0, [0, 0, 0], [0, 0, 0]),
                           Body('B', 2.0, 0.0, [1, 0, 0], [0, 0, 0])])
        field = GravityField(catalog, G=1.0)
        np.testing.assert_array_equal(field.masses, [1.0, 2.0])

    @pytest.mark.parametrize("masses", [[1.0, 0.0], [1.0, -2.0], [np.nan]])
    def test_invalid_masses(self, masses):
        with pytest.raises(ValueError, match="positive and finite"):
            GravityField(masses)

    def test_invalid_G(self):
        with pytest.raises(ValueError, match="Gravitational constant"):
            GravityField([1.0], G=0.0)

    def test_masses_read_only(self):
        field = GravityField([1.0, 2.0])
        with pytest.raises(ValueError):
            field.masses[0] = 5.0


class TestEvaluate:
    """Test derivative evaluation."""

    def test_velocity_rate_is_state_velocity(self):
        state = SystemState([[0, 0, 0], [1, 0, 0]], [[1, 2, 3], [4, 5, 6]])
        rate = GravityField([1.0, 1.0], G=1.0).evaluate(state)

        np.testing.assert_array_equal(rate.velocities, state.velocities)

    def test_two_body_acceleration(self):
        """a = G m / d^2 directed at the other body."""
        G, m0, m1, d = 2.0, 3.0, 5.0, 4.0
        state = SystemState([[0, 0, 0], [d, 0, 0]], np.zeros((2, 3)))
        rate = GravityField([m0, m1], G=G).evaluate(state)

        np.testing.assert_allclose(rate.accelerations[0], [G * m1 / d**2, 0, 0])
        np.testing.assert_allclose(rate.accelerations[1], [-G * m0 / d**2, 0, 0])

    def test_symmetric_three_body(self):
        """Middle body between equal masses feels no net force."""
        state = SystemState([[-1, 0, 0], [0, 0, 0], [1, 0, 0]], np.zeros((3, 3)))
        rate = GravityField([7.0, 1.0, 7.0], G=1.0).evaluate(state)

        np.testing.assert_allclose(rate.accelerations[1], [0, 0, 0], atol=1e-15)
        # outer bodies pulled inward
        assert rate.accelerations[0, 0] > 0
        assert rate.accelerations[2, 0] < 0

    def test_superposition_matches_pairwise_sum(self):
        """Vectorised result equals an explicit pairwise loop."""
        rng = np.random.default_rng(3)
        positions = rng.normal(size=(5, 3))
        masses = rng.uniform(1.0, 10.0, size=5)
        state = SystemState(positions, np.zeros((5, 3)))
        rate = GravityField(masses, G=0.5).evaluate(state)

        expected = np.zeros((5, 3))
        for i in range(5):
            for j in range(5):
                if i != j:
                    r = positions[j] - positions[i]
                    expected[i] += 0.5 * masses[j] * r / np.linalg.norm(r)**3
        np.testing.assert_allclose(rate.accelerations, expected, rtol=1e-12)

    def test_light_body_exerts_gravity(self):
        """Full N-body coupling: the probe pulls on the heavy body too."""
        state = SystemState([[0, 0, 0], [1, 0, 0]], np.zeros((2, 3)))
        rate = GravityField([1.0, 1e-9], G=1.0).evaluate(state)

        assert rate.accelerations[0, 0] == pytest.approx(1e-9)

    def test_momentum_balance(self):
        """Sum of m_i a_i is zero for internal forces."""
        rng = np.random.default_rng(11)
        masses = rng.uniform(1.0, 5.0, size=4)
        state = SystemState(rng.normal(size=(4, 3)), np.zeros((4, 3)))
        rate = GravityField(masses, G=1.0).evaluate(state)

        np.testing.assert_allclose(masses @ rate.accelerations, 0.0, atol=1e-12)

    def test_callable(self):
        state = SystemState([[0, 0, 0], [1, 0, 0]], np.zeros((2, 3)))
        field = GravityField([1.0, 1.0], G=1.0)
        np.testing.assert_array_equal(field(state).accelerations,
                                      field.evaluate(state).accelerations)

    def test_single_body_has_no_acceleration(self):
        state = SystemState([[1, 2, 3]], [[0, 0, 0]])
        rate = GravityField([1.0], G=1.0).evaluate(state)
        np.testing.assert_array_equal(rate.accelerations, [[0, 0, 0]])

    def test_state_not_modified(self):
        state = SystemState([[0, 0, 0], [1, 0, 0]], [[0, 1, 0], [0, 0, 1]])
        before = state.positions.copy()
        GravityField([1.0, 1.0], G=1.0).evaluate(state)
        np.testing.assert_array_equal(state.positions, before)


class TestNumericalErrors:
    """Singular configurations are reported, never propagated as NaN."""

    def test_coincident_bodies(self):
        state = SystemState([[0, 0, 0], [1, 1, 1], [1, 1, 1]], np.zeros((3, 3)))
        with pytest.raises(NumericalError, match="Coincident bodies") as exc_info:
            GravityField([1.0, 1.0, 1.0], G=1.0).evaluate(state)

        assert exc_info.value.pairs == [(1, 2)]

    def test_numerical_error_is_arithmetic_error(self):
        state = SystemState([[0, 0, 0], [0, 0, 0]], np.zeros((2, 3)))
        with pytest.raises(ArithmeticError):
            GravityField([1.0, 1.0], G=1.0).evaluate(state)

    def test_overflowing_acceleration(self):
        """Separations so small the force overflows are reported."""
        state = SystemState([[0, 0, 0], [1e-200, 0, 0]], np.zeros((2, 3)))
        with pytest.raises(NumericalError):
            GravityField([1.0, 1.0], G=1.0).evaluate(state)

    def test_mass_count_mismatch(self):
        state = SystemState([[0, 0, 0], [1, 0, 0]], np.zeros((2, 3)))
        with pytest.raises(ValueError, match="State has 2 bodies"):
            GravityField([1.0, 1.0, 1.0]).evaluate(state)


class TestDiagnostics:
    """Test energy, momentum and centre of mass helpers."""

    def test_energies(self):
        state = SystemState([[0, 0, 0], [2, 0, 0]], [[0, 0, 0], [0, 3, 0]])
        field = GravityField([4.0, 1.0], G=1.0)

        assert field.kinetic_energy(state) == pytest.approx(4.5)
        assert field.potential_energy(state) == pytest.approx(-2.0)
        assert field.total_energy(state) == pytest.approx(2.5)

    def test_momentum_and_centre_of_mass(self):
        state = SystemState([[0, 0, 0], [3, 0, 0]], [[1, 0, 0], [0, 2, 0]])
        field = GravityField([2.0, 1.0], G=1.0)

        np.testing.assert_allclose(field.linear_momentum(state), [2, 2, 0])
        np.testing.assert_allclose(field.centre_of_mass(state), [1, 0, 0])
