"""
Pytest tests for the numerical flux library.

Tests verify:
1. Consistency: F(u, u) equals the analytic flux
2. Symmetry under swapping states and flipping the normal
3. Entropy conservation of the two-point fluxes
4. Non-conservative fluxes never touch height or topography
5. Well-balancedness for a lake at rest over a topography jump
6. HLL wave structure branches, colliding states and degenerate speeds
"""

import numpy as np
import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from dgsem.src import (
    ShallowWaterEquations2D, CompressibleEulerEquations2D,
    flux_central, flux_lax_friedrichs, flux_hll, flux_hlle,
    FluxLaxFriedrichs, FluxHLL, FluxHydrostaticReconstruction,
    flux_fjordholm_etal, flux_wintermeyer_etal,
    flux_nonconservative_fjordholm_etal, flux_nonconservative_wintermeyer_etal,
    flux_nonconservative_audusse_etal, hydrostatic_reconstruction_audusse_etal,
    max_abs_speed_naive, min_max_speed_naive, min_max_speed_davis, calc_interface_flux
)
from dgsem.tests.states import random_swe_states, random_euler_states, random_normals


SWE_FLUXES = [
    flux_central,
    flux_lax_friedrichs,
    FluxLaxFriedrichs(max_abs_speed_naive),
    flux_hll,
    flux_hlle,
    FluxHLL(min_max_speed_davis),
    flux_fjordholm_etal,
    flux_wintermeyer_etal,
    FluxHydrostaticReconstruction(flux_lax_friedrichs),
    FluxHydrostaticReconstruction(flux_hll),
]

EULER_FLUXES = [
    flux_central,
    flux_lax_friedrichs,
    flux_hll,
    flux_hlle,
    FluxHLL(min_max_speed_davis),
]

NONCONSERVATIVE_FLUXES = [
    flux_nonconservative_fjordholm_etal,
    flux_nonconservative_wintermeyer_etal,
    flux_nonconservative_audusse_etal,
]


@pytest.fixture
def equations():
    return ShallowWaterEquations2D(gravity=9.81)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


class TestConsistency:
    """F(u, u, n) must reduce to the analytic flux f(u) . n"""

    @pytest.mark.parametrize("numerical_flux", SWE_FLUXES)
    @pytest.mark.parametrize("direction", [0, 1, 'normal'])
    def test_swe(self, equations, rng, numerical_flux, direction):
        u = random_swe_states(rng, 40)
        if direction == 'normal':
            direction = random_normals(rng, 40)

        np.testing.assert_allclose(numerical_flux(u, u, direction, equations),
                                   equations.flux(u, direction),
                                   rtol=1e-12, atol=1e-12)

    @pytest.mark.parametrize("numerical_flux", EULER_FLUXES)
    @pytest.mark.parametrize("direction", [0, 1, 'normal'])
    def test_euler(self, rng, numerical_flux, direction):
        equations = CompressibleEulerEquations2D(gamma=1.4)
        u = random_euler_states(rng, 40, equations)
        if direction == 'normal':
            direction = random_normals(rng, 40)

        np.testing.assert_allclose(numerical_flux(u, u, direction, equations),
                                   equations.flux(u, direction),
                                   rtol=1e-12, atol=1e-12)

    def test_single_face(self, equations):
        u = np.array([1.5, 0.3, -0.2, 0.1])
        f = flux_lax_friedrichs(u, u, 0, equations)

        assert f.shape == (4,)
        np.testing.assert_allclose(f, equations.flux(u, 0))


class TestSymmetry:
    """F(u_ll, u_rr, n) = -F(u_rr, u_ll, -n) for conservative fluxes"""

    @pytest.mark.parametrize("numerical_flux", SWE_FLUXES)
    def test_swe(self, equations, rng, numerical_flux):
        u_ll = random_swe_states(rng, 40, v_max=0.6)
        u_rr = random_swe_states(rng, 40, v_max=0.6)
        u_rr[3] = u_ll[3]
        normal = random_normals(rng, 40)

        np.testing.assert_allclose(numerical_flux(u_ll, u_rr, normal, equations),
                                   -numerical_flux(u_rr, u_ll, -normal, equations),
                                   rtol=1e-12, atol=1e-11)

    @pytest.mark.parametrize("numerical_flux", EULER_FLUXES)
    def test_euler(self, rng, numerical_flux):
        equations = CompressibleEulerEquations2D(gamma=1.4)
        u_ll = random_euler_states(rng, 40, equations, v_max=0.2)
        u_rr = random_euler_states(rng, 40, equations, v_max=0.2)
        normal = random_normals(rng, 40)

        np.testing.assert_allclose(numerical_flux(u_ll, u_rr, normal, equations),
                                   -numerical_flux(u_rr, u_ll, -normal, equations),
                                   rtol=1e-12, atol=1e-11)


class TestEntropyConservation:
    """
    Over a flat bottom the energy conservative fluxes satisfy
        (w_rr - w_ll) . F = psi_rr - psi_ll,   psi = g h^2 (v . n) / 2
    """

    @pytest.mark.parametrize("numerical_flux", [flux_fjordholm_etal, flux_wintermeyer_etal])
    def test_entropy_flux_potential(self, equations, rng, numerical_flux):
        u_ll = random_swe_states(rng, 40)
        u_rr = random_swe_states(rng, 40)
        u_ll[3] = 0.0
        u_rr[3] = 0.0
        normal = random_normals(rng, 40)

        w_jump = equations.cons2entropy(u_rr) - equations.cons2entropy(u_ll)
        f = numerical_flux(u_ll, u_rr, normal, equations)
        entropy_production = np.sum(w_jump[:3] * f[:3], axis=0)

        def potential(u):
            return 0.5 * equations.gravity * u[0]**2 * equations.normal_velocity(u, normal)

        np.testing.assert_allclose(entropy_production, potential(u_rr) - potential(u_ll),
                                   rtol=1e-10, atol=1e-10)


class TestNonconservativeFluxes:
    """Test the bottom topography fluxes."""

    @pytest.mark.parametrize("nonconservative_flux", NONCONSERVATIVE_FLUXES)
    def test_height_and_topography_components_zero(self, equations, rng, nonconservative_flux):
        u_ll = random_swe_states(rng, 40)
        u_rr = random_swe_states(rng, 40)
        normal = random_normals(rng, 40)

        for direction in (0, 1, normal):
            f = nonconservative_flux(u_ll, u_rr, direction, equations)
            assert np.all(f[0] == 0.0), "Non-conservative flux must not change h"
            assert np.all(f[3] == 0.0), "Non-conservative flux must not change b"

    @pytest.mark.parametrize("nonconservative_flux", NONCONSERVATIVE_FLUXES)
    def test_zero_for_flat_bottom(self, equations, rng, nonconservative_flux):
        u_ll = random_swe_states(rng, 40)
        u_rr = random_swe_states(rng, 40)
        u_rr[3] = u_ll[3]

        np.testing.assert_allclose(nonconservative_flux(u_ll, u_rr, 0, equations), 0.0,
                                   atol=1e-14)

    def test_wintermeyer_uses_left_height(self, equations):
        u_ll = np.array([2.0, 0.0, 0.0, 0.1])
        u_rr = np.array([5.0, 0.0, 0.0, 0.4])
        f = flux_nonconservative_wintermeyer_etal(u_ll, u_rr, np.array([1.0, 2.0]), equations)

        source = equations.gravity * 2.0 * 0.3
        np.testing.assert_allclose(f, [0.0, source, 2 * source, 0.0])


class TestHydrostaticReconstruction:
    """Test the Audusse et al. reconstruction."""

    def test_noop_for_equal_states(self, equations, rng):
        u = random_swe_states(rng, 40)
        u_ll_star, u_rr_star = hydrostatic_reconstruction_audusse_etal(u, u, equations)

        np.testing.assert_allclose(u_ll_star, u, rtol=1e-14)
        np.testing.assert_allclose(u_rr_star, u, rtol=1e-14)

    def test_heights_clipped_at_step(self, equations):
        u_ll = np.array([0.2, 0.2, 0.0, 0.0])
        u_rr = np.array([0.5, 0.0, 0.0, 1.0])
        u_ll_star, u_rr_star = hydrostatic_reconstruction_audusse_etal(u_ll, u_rr, equations)

        assert u_ll_star[0] == 0.0, "Left height must be clipped to zero below the step"
        assert u_ll_star[1] == 0.0
        assert u_rr_star[0] == pytest.approx(0.5)
        assert u_ll_star[3] == 0.0 and u_rr_star[3] == 1.0


class TestWellBalanced:
    """A lake at rest must produce no momentum change across any step."""

    SURFACE_FLUXES = [
        (FluxHydrostaticReconstruction(flux_lax_friedrichs), flux_nonconservative_audusse_etal),
        (FluxHydrostaticReconstruction(flux_hll), flux_nonconservative_audusse_etal),
        (FluxHydrostaticReconstruction(flux_hlle), flux_nonconservative_audusse_etal),
    ]

    @pytest.mark.parametrize("surface_flux", SURFACE_FLUXES)
    @pytest.mark.parametrize("direction", [0, 1, np.array([1.2, -1.6])])
    def test_topography_jump(self, equations, surface_flux, direction):
        u_ll = np.array([0.7, 0.0, 0.0, 0.3])
        u_rr = np.array([0.3, 0.0, 0.0, 0.7])

        flux_left, flux_right = calc_interface_flux(u_ll, u_rr, direction,
                                                    surface_flux, equations)

        # The surface terms cancel the volume terms of a lake at rest exactly
        np.testing.assert_allclose(flux_left, equations.flux(u_ll, direction), atol=1e-13)
        np.testing.assert_allclose(flux_right, equations.flux(u_rr, direction), atol=1e-13)

    @pytest.mark.parametrize("surface_flux", SURFACE_FLUXES)
    def test_random_lakes(self, equations, rng, surface_flux):
        b_ll = rng.uniform(0.0, 0.9, 30)
        b_rr = rng.uniform(0.0, 0.9, 30)
        zeros = np.zeros(30)
        u_ll = np.array([1.0 - b_ll, zeros, zeros, b_ll])
        u_rr = np.array([1.0 - b_rr, zeros, zeros, b_rr])
        normal = random_normals(rng, 30)

        flux_left, flux_right = calc_interface_flux(u_ll, u_rr, normal, surface_flux, equations)

        np.testing.assert_allclose(flux_left, equations.flux(u_ll, normal), atol=1e-13)
        np.testing.assert_allclose(flux_right, equations.flux(u_rr, normal), atol=1e-13)

    def test_wintermeyer_volume_flux(self, equations):
        """Split-form volume terms of a lake at rest balance pairwise."""
        u_ll = np.array([0.7, 0.0, 0.0, 0.3])
        u_rr = np.array([0.3, 0.0, 0.0, 0.7])

        f = flux_wintermeyer_etal(u_ll, u_rr, 0, equations)
        left = f + 0.5 * flux_nonconservative_wintermeyer_etal(u_ll, u_rr, 0, equations)
        right = f + 0.5 * flux_nonconservative_wintermeyer_etal(u_rr, u_ll, 0, equations)

        np.testing.assert_allclose(left, equations.flux(u_ll, 0), atol=1e-13)
        np.testing.assert_allclose(right, equations.flux(u_rr, 0), atol=1e-13)


class TestDissipation:
    """Test the dissipation of non-transported variables."""

    @pytest.mark.parametrize("numerical_flux", [flux_lax_friedrichs, flux_hll, flux_hlle])
    def test_no_topography_dissipation(self, equations, rng, numerical_flux):
        u_ll = random_swe_states(rng, 40, v_max=0.6)
        u_rr = random_swe_states(rng, 40, v_max=0.6)
        normal = random_normals(rng, 40)

        f = numerical_flux(u_ll, u_rr, normal, equations)
        assert np.all(f[3] == 0.0), "Topography must not be dissipated"

    def test_lax_friedrichs_dissipation(self, equations):
        u_ll = np.array([1.0, 0.0, 0.0, 0.0])
        u_rr = np.array([2.0, 0.0, 0.0, 0.0])
        lambda_max = np.sqrt(equations.gravity * 2.0)

        f = flux_lax_friedrichs(u_ll, u_rr, 0, equations)
        central = flux_central(u_ll, u_rr, 0, equations)
        np.testing.assert_allclose(f[0], central[0] - 0.5 * lambda_max)
        np.testing.assert_allclose(f[1:], central[1:])


class TestHLL:
    """Test the HLL wave structure."""

    def test_supersonic_right_takes_left_flux(self, equations):
        u_ll = np.array([1.0, 10.0, 0.0, 0.0])
        u_rr = np.array([1.2, 12.0, 1.0, 0.0])

        np.testing.assert_allclose(flux_hll(u_ll, u_rr, 0, equations),
                                   equations.flux(u_ll, 0))

    def test_supersonic_left_takes_right_flux(self, equations):
        u_ll = np.array([1.0, -10.0, 0.0, 0.0])
        u_rr = np.array([1.2, -12.0, 1.0, 0.0])

        np.testing.assert_allclose(flux_hll(u_ll, u_rr, 0, equations),
                                   equations.flux(u_rr, 0))

    def test_subsonic_blend(self, equations):
        u_ll = np.array([2.0, 0.0, 0.0, 0.0])
        u_rr = np.array([1.0, 0.0, 0.0, 0.0])
        c_ll = np.sqrt(equations.gravity * 2.0)
        c_rr = np.sqrt(equations.gravity * 1.0)
        f_ll = equations.flux(u_ll, 0)
        f_rr = equations.flux(u_rr, 0)

        expected = (c_rr * f_ll + c_ll * f_rr - c_ll * c_rr * (u_rr - u_ll)) / (c_rr + c_ll)
        expected[3] = 0.0
        np.testing.assert_allclose(FluxHLL(min_max_speed_naive)(u_ll, u_rr, 0, equations),
                                   expected)

    def test_mixed_branches_in_batch(self, equations):
        u_ll = np.array([[1.0, 2.0], [10.0, 0.0], [0.0, 0.0], [0.0, 0.0]])
        u_rr = np.array([[1.2, 1.0], [12.0, 0.0], [0.0, 0.0], [0.0, 0.0]])

        f = flux_hll(u_ll, u_rr, 0, equations)
        np.testing.assert_allclose(f[:, 0], equations.flux(u_ll[:, 0], 0))
        np.testing.assert_allclose(f[:, 1], flux_hll(u_ll[:, 1], u_rr[:, 1], 0, equations))

    def test_degenerate_speeds_raise(self, equations):
        def inverted_speeds(u_ll, u_rr, direction, equations):
            return np.array(1.0), np.array(-1.0)

        u = np.array([1.0, 0.0, 0.0, 0.0])
        with pytest.raises(ValueError):
            FluxHLL(inverted_speeds)(u, u, 0, equations)

    def test_colliding_jets(self, equations):
        # Naive bounds invert here (lambda_min = 1.87 > lambda_max = -1.87)
        u_ll = np.array([1.0, 5.0, 0.0, 0.0])
        u_rr = np.array([1.0, -5.0, 0.0, 0.0])

        f = flux_hll(u_ll, u_rr, 0, equations)
        assert np.all(np.isfinite(f))
        assert f[0] == pytest.approx(0.0, abs=1e-14)
        assert f[3] == 0.0

        f_reconstructed = FluxHydrostaticReconstruction(flux_hll)(u_ll, u_rr, 0, equations)
        np.testing.assert_allclose(f_reconstructed, f)

    def test_colliding_jets_naive_speeds_raise(self, equations):
        u_ll = np.array([1.0, 5.0, 0.0, 0.0])
        u_rr = np.array([1.0, -5.0, 0.0, 0.0])
        with pytest.raises(ValueError):
            FluxHLL(min_max_speed_naive)(u_ll, u_rr, 0, equations)
