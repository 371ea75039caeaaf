import numpy as np
import pytest
import scipy.linalg

from gm3d import GeometryError, Matrix4, Point3, SingularMatrixError, mul_point
from gm3d.matrix import SINGULAR_EPS_FACTOR


def well_conditioned(rng, dtype=np.float64):
    a = rng.uniform(-1.0, 1.0, (4, 4)) + 4.0 * np.eye(4)
    return Matrix4.from_rows(a, dtype=dtype)


def test_inverse_of_identity():
    m = Matrix4.identity()
    m.inverse()
    assert m == Matrix4.identity()


def test_inverse_round_trip_double(rng):
    for _ in range(25):
        m = well_conditioned(rng)
        inv = m.inversed()
        assert (m @ inv).isclose(Matrix4.identity(), rel_tol=0.0, abs_tol=1e-9)
        assert (inv @ m).isclose(Matrix4.identity(), rel_tol=0.0, abs_tol=1e-9)


def test_inverse_round_trip_single(rng):
    m = well_conditioned(rng, np.float32)
    inv = m.inversed()
    assert inv.dtype is np.float32
    assert (m @ inv).isclose(Matrix4.identity(np.float32), rel_tol=0.0, abs_tol=1e-5)


def test_inverse_matches_scipy(rng):
    for _ in range(10):
        a = rng.normal(size=(4, 4))
        ours = Matrix4.from_rows(a).inversed().to_array()
        np.testing.assert_allclose(ours, scipy.linalg.inv(a), rtol=1e-9, atol=1e-9)


def test_determinant_matches_scipy(rng):
    for _ in range(10):
        a = rng.normal(size=(4, 4))
        assert Matrix4.from_rows(a).determinant() == pytest.approx(scipy.linalg.det(a), rel=1e-9)


def test_inverse_needs_row_swaps():
    m = Matrix4.new(
        0, 1, 0, 0,
        1, 0, 0, 0,
        0, 0, 0, 1,
        0, 0, 1, 0,
    )
    assert m.inversed() == m


def test_inverse_of_affine_transform():
    m = Matrix4.scaling(2.0, 4.0, 8.0) @ Matrix4.translation(1.0, 2.0, 3.0)
    p = Point3(0.5, -1.0, 2.0)
    back = mul_point(mul_point(p, m), m.inversed())
    assert back.isclose(p, rel_tol=1e-12, abs_tol=1e-12)


def test_inverse_is_scale_independent():
    tiny = Matrix4.scaling(1e-200, 1e-200, 1e-200) @ Matrix4.translation(1e-200, 0.0, 0.0)
    tiny[3, 3] = 1e-200
    inv = tiny.inversed()
    assert (tiny @ inv).isclose(Matrix4.identity(), rel_tol=0.0, abs_tol=1e-9)


def test_inverse_in_place_mutates():
    m = Matrix4.scaling(2.0, 4.0, 8.0)
    m.inverse()
    assert m == Matrix4.scaling(0.5, 0.25, 0.125)


def test_zero_matrix_is_singular(dtype):
    with pytest.raises(SingularMatrixError):
        Matrix4.zeros(dtype).inversed()


@pytest.mark.parametrize("rows", [
    [[2, 0, 0, 0], [0, 1, 0, 0], [2, 0, 0, 0], [0, 0, 0, 1]],
    [[1, 2, 3, 4], [5, 6, 7, 8], [1, 2, 3, 4], [9, 1, 2, 3]],
    [[1, 2, 3, 4], [2, 4, 6, 8], [0, 1, 0, 1], [3, 3, 3, 3]],
])
def test_dependent_rows_are_singular(rows, dtype):
    m = Matrix4.from_rows(rows, dtype=dtype)
    original = m.copy()
    with pytest.raises(SingularMatrixError) as exc:
        m.inverse()
    assert m == original
    assert exc.value.tolerance >= 0.0


def test_singular_error_is_recoverable_value_error():
    assert issubclass(SingularMatrixError, GeometryError)
    assert issubclass(SingularMatrixError, ValueError)
    try:
        Matrix4.new(*range(1, 17)).inversed()
    except ValueError as e:
        assert "singular" in str(e)
    else:
        pytest.fail("expected SingularMatrixError")


def near_dependent(delta, scale, dtype):
    # рядки 0 і 1 відрізняються лише на delta у стовпці 1
    m = Matrix4.from_rows([
        [1.0, 1.0, 0.0, 0.0],
        [1.0, 1.0 + delta, 0.0, 0.0],
        [0.0, 0.0, 1.0, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ], dtype=dtype)
    return m * scale


@pytest.mark.parametrize("scale", [1e-30, 1.0, 1e30])
def test_rounding_level_difference_is_singular(scale, dtype):
    eps = float(np.finfo(dtype).eps)
    m = near_dependent(2 * eps, scale, dtype)
    with pytest.raises(SingularMatrixError):
        m.inversed()
    assert m.determinant() == 0.0


@pytest.mark.parametrize("scale", [1e-30, 1.0, 1e30])
def test_small_but_real_difference_is_invertible(scale, dtype):
    m = near_dependent(1e-3, scale, dtype)
    inv = m.inversed()
    assert (m @ inv).isclose(Matrix4.identity(dtype), rel_tol=0.0, abs_tol=1e-3)


def test_large_translation_inverts_in_single_precision():
    m = Matrix4.translation(1e6, 0.0, 0.0, dtype=np.float32)
    assert m.determinant() == pytest.approx(1.0, rel=1e-6)
    inv = m.inversed()
    assert inv.isclose(Matrix4.translation(-1e6, 0.0, 0.0, dtype=np.float32), rel_tol=1e-5, abs_tol=1e-5)


def test_badly_scaled_diagonal_is_invertible(dtype):
    tiny = SINGULAR_EPS_FACTOR * float(np.finfo(dtype).eps) / 2
    m = Matrix4.scaling(1e6, 1e6, 1e6, dtype=dtype)
    m[3, 3] = tiny
    inv = m.inversed()
    assert inv[3, 3] == pytest.approx(1.0 / tiny, rel=1e-6)
    assert inv[0, 0] == pytest.approx(1e-6, rel=1e-6)


def test_non_finite_matrix_is_singular():
    m = Matrix4.identity()
    m[1, 2] = np.nan
    with pytest.raises(SingularMatrixError):
        m.inverse()
    assert np.isnan(m[1, 2])
