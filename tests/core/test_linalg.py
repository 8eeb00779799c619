"""
Tests for the least squares kernels and timing utilities.

Validates:
    - QR rank detection on full-rank and collinear matrices
    - QR solve matches numpy's lstsq
    - (X'X)⁻¹ from R matches a direct inverse
    - Normal equations agree with QR and reject singular X'X
    - Rank and conditioning judged on column-equilibrated X
    - Timer sections and error states
"""

import numpy as np
import pytest

from pyols.core.exceptions import SingularMatrixError
from pyols.core.compute.linalg import (
    normal_equations_cpu,
    qr_cpu,
    qr_solve_cpu,
    qr_unscaled_covariance,
)
from pyols.core.compute.timing import Timer
from pyols.core.compute.tolerances import (
    CPU_FP64,
    CPU_FP64_ILL_CONDITIONED,
    CPU_FP64_NORMAL_EQUATIONS,
    select_tolerance,
)


@pytest.fixture
def design(rng):
    X = np.column_stack([np.ones(60), rng.standard_normal((60, 3))])
    y = X @ np.array([0.5, 1.0, -1.0, 2.0]) + rng.standard_normal(60) * 0.1
    return X, y


@pytest.fixture
def large_scale_design(rng):
    """Full-rank design whose predictor lives around 1e13."""
    x = rng.uniform(1e13, 5e13, 50)
    X = np.column_stack([np.ones(50), x])
    y = 3.0 + 2e-13 * x + rng.standard_normal(50) * 0.1
    return X, y


class TestQR:

    def test_full_rank(self, design):
        X, _ = design
        assert qr_cpu(X).rank == 4

    def test_collinear_rank(self, collinear_data):
        X, _ = collinear_data
        assert qr_cpu(X).rank == 2

    def test_duplicate_rows_rank(self):
        X = np.array([[1.0, 3.0], [1.0, 3.0], [1.0, 3.0]])
        assert qr_cpu(X).rank == 1

    def test_zero_matrix_rank(self):
        assert qr_cpu(np.zeros((4, 2))).rank == 0

    def test_condition_estimate_infinite_when_singular(self):
        assert qr_cpu(np.zeros((4, 2))).condition_estimate == float('inf')

    def test_large_scale_column_is_full_rank(self, large_scale_design):
        X, _ = large_scale_design
        assert qr_cpu(X).rank == 2

    def test_rank_unchanged_by_column_scaling(self, design):
        X, _ = design
        assert qr_cpu(X * np.array([1.0, 1e-9, 1e6, 1e13])).rank == 4

    def test_scaled_diagonal(self, design):
        X, _ = design
        scaled = qr_cpu(X).scaled_diagonal
        assert scaled[0] == pytest.approx(1.0)
        assert np.all((scaled > 0) & (scaled <= 1.0 + 1e-12))

    def test_zero_column_rank(self):
        X = np.column_stack([np.ones(5), np.zeros(5)])
        assert qr_cpu(X).rank == 1

    def test_solve_matches_lstsq(self, design):
        X, y = design
        beta = qr_solve_cpu(X, y, check_rank=True)
        expected, *_ = np.linalg.lstsq(X, y, rcond=None)
        np.testing.assert_allclose(beta, expected, rtol=CPU_FP64.rtol, atol=CPU_FP64.atol)

    def test_solve_reuses_decomposition(self, design):
        X, y = design
        qr_result = qr_cpu(X)
        np.testing.assert_array_equal(
            qr_solve_cpu(X, y, check_rank=True, qr_result=qr_result),
            qr_solve_cpu(X, y, check_rank=True),
        )

    def test_solve_rank_deficient_raises(self, collinear_data):
        X, y = collinear_data
        with pytest.raises(SingularMatrixError) as exc_info:
            qr_solve_cpu(X, y, check_rank=True)
        assert exc_info.value.rank == 2
        assert exc_info.value.expected_rank == 3
        assert exc_info.value.matrix_name == 'X'

    def test_unscaled_covariance_matches_inverse(self, design):
        X, _ = design
        R = qr_cpu(X).R
        np.testing.assert_allclose(
            qr_unscaled_covariance(R),
            np.linalg.inv(X.T @ X),
            rtol=CPU_FP64_NORMAL_EQUATIONS.rtol,
            atol=CPU_FP64_NORMAL_EQUATIONS.atol,
        )


class TestNormalEquations:

    def test_agrees_with_qr(self, design):
        X, y = design
        solved = normal_equations_cpu(X.T @ X, X.T @ y)
        tol = select_tolerance('cpu_normal')
        np.testing.assert_allclose(
            solved.coefficients,
            qr_solve_cpu(X, y, check_rank=True),
            rtol=tol.rtol,
            atol=tol.atol,
        )

    def test_inverse_is_symmetric(self, design):
        X, y = design
        solved = normal_equations_cpu(X.T @ X, X.T @ y)
        np.testing.assert_array_equal(solved.XtX_inv, solved.XtX_inv.T)

    def test_condition_number_reported(self, design):
        X, y = design
        assert np.isfinite(normal_equations_cpu(X.T @ X, X.T @ y).condition_number)

    def test_singular_raises(self, collinear_data):
        X, y = collinear_data
        with pytest.raises(SingularMatrixError) as exc_info:
            normal_equations_cpu(X.T @ X, X.T @ y)
        assert exc_info.value.matrix_name == "X'X"
        assert exc_info.value.expected_rank == 3

    def test_large_scale_column_accepted(self, large_scale_design):
        X, y = large_scale_design
        solved = normal_equations_cpu(X.T @ X, X.T @ y)
        tol = select_tolerance('cpu_normal', is_ill_conditioned=True)
        np.testing.assert_allclose(
            solved.coefficients,
            qr_solve_cpu(X, y, check_rank=True),
            rtol=tol.rtol,
            atol=0.0,
        )

    def test_zero_column_raises(self):
        X = np.column_stack([np.ones(5), np.zeros(5)])
        with pytest.raises(SingularMatrixError) as exc_info:
            normal_equations_cpu(X.T @ X, X.T @ np.arange(5.0))
        assert exc_info.value.rank == 1

    def test_exactly_singular_raises(self):
        X = np.array([[1.0, 1.0], [1.0, 1.0], [1.0, 1.0]])
        with pytest.raises(SingularMatrixError):
            normal_equations_cpu(X.T @ X, X.T @ np.array([1.0, 2.0, 3.0]))


class TestTolerances:

    def test_qr_tier(self):
        assert select_tolerance('cpu_qr') is CPU_FP64

    def test_normal_tier(self):
        assert select_tolerance('cpu_normal') is CPU_FP64_NORMAL_EQUATIONS

    def test_ill_conditioned_tier(self):
        assert select_tolerance('cpu_qr', is_ill_conditioned=True) is CPU_FP64_ILL_CONDITIONED


class TestTimer:

    def test_sections_recorded(self):
        timer = Timer()
        timer.start()
        with timer.section('solve'):
            pass
        timer.stop()
        result = timer.result()
        assert 'total_seconds' in result
        assert 'solve' in result
        assert result['solve'] >= 0.0

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section('scan'):
            pass
        with timer.section('scan'):
            pass
        timer.stop()
        assert set(timer.result()) == {'total_seconds', 'scan'}

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()
