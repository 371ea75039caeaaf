# gm3d/matrix.py
from __future__ import annotations

import logging
from numbers import Real
from typing import Any, Generic, Iterator, Optional, Sequence, Tuple

import numpy as np

from .errors import SingularMatrixError
from .geom import Point3, Vector3
from .scalar import Scalar, check_same_scalar, epsilon, literal, resolve_fixed

logger = logging.getLogger(__name__)

# Опорний елемент вважаємо нульовим, якщо |pivot| <= SINGULAR_EPS_FACTOR * eps(S) * bound,
# де bound: сума модулів доданків, з яких цей елемент склався під час елімінації
SINGULAR_EPS_FACTOR = 16


def _check_index(index: Any, owner: str) -> None:
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)) or not 0 <= index < 4:
        raise IndexError(f"{owner} index out of range: {index!r}")


def _split_pair(index: tuple) -> Tuple[Any, Any]:
    if len(index) != 2:
        raise IndexError(f"Matrix4 index needs (row, column), got {index!r}")
    return index


class MatrixRow:
    """Живе представлення рядка матриці: m[i][j] = v змінює саму матрицю."""
    __slots__ = ("_row",)
    __array_ufunc__ = None

    def __init__(self, row: np.ndarray):
        self._row = row

    def __getitem__(self, j: int):
        _check_index(j, "Matrix4 column")
        return self._row[j]

    def __setitem__(self, j: int, value: Any) -> None:
        _check_index(j, "Matrix4 column")
        self._row[j] = value

    def __iter__(self) -> Iterator:
        return iter(self._row)

    def __len__(self) -> int:
        return 4

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MatrixRow):
            return bool(np.array_equal(self._row, other._row))
        if isinstance(other, (list, tuple)):
            return len(other) == 4 and bool(np.array_equal(self._row, other))
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"MatrixRow({[float(v) for v in self._row]!r})"


class Matrix4(Generic[Scalar]):
    """
    Матриця 4x4, рядково-орієнтована (row-major), конвенція рядка-вектора:
    p' = p * M, трансляція у рядку 3.
    Оператори: A @ B (добуток), A * s / s * A (множення на скаляр), A + B, A - B, -A.
    A * B не визначено, лише multiply() або @.
    """
    __slots__ = ("_m",)
    __array_ufunc__ = None
    _fixed_scalar: Optional[type] = None

    def __init__(self, rows: Sequence[Sequence[Any]] | None = None, dtype: Any = None):
        kind = resolve_fixed(self._fixed_scalar, dtype)
        if rows is None:
            self._m = np.zeros((4, 4), dtype=kind)
        else:
            arr = np.array(rows, dtype=kind)
            if arr.shape != (4, 4):
                raise ValueError(f"Matrix4 needs 4x4 rows, got shape {arr.shape}")
            self._m = arr

    # ---------- конструктори ----------
    @classmethod
    def new(cls, *values: Any, dtype: Any = None) -> "Matrix4":
        """16 значень у порядку рядків: new(m00, m01, m02, m03, m10, ..., m33)."""
        if len(values) != 16:
            raise TypeError(f"Matrix4.new expects 16 values, got {len(values)}")
        kind = resolve_fixed(cls._fixed_scalar, dtype)
        return cls._from_array(np.array(values, dtype=kind).reshape(4, 4))

    @classmethod
    def zeros(cls, dtype: Any = None) -> "Matrix4":
        return cls(dtype=dtype)

    @classmethod
    def identity(cls, dtype: Any = None) -> "Matrix4":
        return cls._from_array(np.eye(4, dtype=resolve_fixed(cls._fixed_scalar, dtype)))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Any]], dtype: Any = None) -> "Matrix4":
        return cls(rows, dtype=dtype)

    @classmethod
    def translation(cls, tx: Any, ty: Any, tz: Any, dtype: Any = None) -> "Matrix4":
        mat = cls.identity(dtype)
        mat._m[3, :3] = (tx, ty, tz)
        return mat

    @classmethod
    def scaling(cls, sx: Any, sy: Any, sz: Any, dtype: Any = None) -> "Matrix4":
        mat = cls.identity(dtype)
        mat._m[0, 0] = sx
        mat._m[1, 1] = sy
        mat._m[2, 2] = sz
        return mat

    @classmethod
    def _from_array(cls, arr: np.ndarray) -> "Matrix4":
        obj = cls.__new__(cls)
        obj._m = arr
        return obj

    # ---------- доступ ----------
    @property
    def dtype(self) -> type:
        return self._m.dtype.type

    def __getitem__(self, index: Any):
        if isinstance(index, tuple):
            i, j = _split_pair(index)
            _check_index(i, "Matrix4 row")
            _check_index(j, "Matrix4 column")
            return self._m[i, j]
        _check_index(index, "Matrix4 row")
        return MatrixRow(self._m[index])

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, tuple):
            i, j = _split_pair(index)
            _check_index(i, "Matrix4 row")
            _check_index(j, "Matrix4 column")
            self._m[i, j] = value
            return
        _check_index(index, "Matrix4 row")
        row = np.asarray(value, dtype=self.dtype)
        if row.shape != (4,):
            raise ValueError(f"Matrix4 row needs 4 values, got shape {row.shape}")
        self._m[index] = row

    def __iter__(self) -> Iterator[MatrixRow]:
        for i in range(4):
            yield MatrixRow(self._m[i])

    def __len__(self) -> int:
        return 4

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows = ", ".join(repr([float(v) for v in row]) for row in self._m)
        return f"Matrix4([{rows}], dtype={np.dtype(self.dtype).name})"

    def copy(self) -> "Matrix4":
        return self._from_array(self._m.copy())

    def to_array(self) -> np.ndarray:
        return self._m.copy()

    def isclose(self, other: "Matrix4", rel_tol: float = 1e-9, abs_tol: float = 0.0) -> bool:
        return bool(np.allclose(self._m, other._m, rtol=rel_tol, atol=abs_tol))

    # ---------- оператори ----------
    def __matmul__(self, other: Any):
        if isinstance(other, Matrix4):
            return multiply(self, other)
        return NotImplemented

    def __mul__(self, other: Any):
        if isinstance(other, (Matrix4, Vector3, Point3)) or not isinstance(other, Real):
            return NotImplemented
        return Matrix4._from_array(self._m * literal(self.dtype, other))

    __rmul__ = __mul__

    def __add__(self, other: Any):
        if not isinstance(other, Matrix4):
            return NotImplemented
        check_same_scalar(self, other)
        return Matrix4._from_array(self._m + other._m)

    def __sub__(self, other: Any):
        if not isinstance(other, Matrix4):
            return NotImplemented
        check_same_scalar(self, other)
        return Matrix4._from_array(self._m - other._m)

    def __neg__(self) -> "Matrix4":
        return Matrix4._from_array(-self._m)

    # ---------- транспонування ----------
    def transpose(self) -> None:
        self._m[...] = self._m.T.copy()

    def transposed(self) -> "Matrix4":
        return Matrix4._from_array(self._m.T.copy())

    # ---------- визначник / обернена ----------
    def determinant(self) -> Scalar:
        """
        Добуток опорних елементів прямого ходу Гауса (зі знаком перестановок).
        Якщо опорний елемент тоне в похибці округлення, матриця вироджена і результат 0.
        Нескінченні чи NaN-елементи дають NaN.
        """
        if not np.all(np.isfinite(self._m)):
            return literal(self.dtype, np.nan)
        try:
            det, _ = _eliminate(self._m, invert=False)
        except SingularMatrixError:
            return literal(self.dtype, 0.0)
        return det

    def inverse(self) -> None:
        """
        Обернути на місці. Для виродженої матриці SingularMatrixError,
        і сама матриця лишається без змін.
        """
        self._m[...] = _invert(self._m)

    def inversed(self) -> "Matrix4":
        return Matrix4._from_array(_invert(self._m))


class Mat4f(Matrix4[np.float32]):
    __slots__ = ()
    _fixed_scalar = np.float32


class Mat4d(Matrix4[np.float64]):
    __slots__ = ()
    _fixed_scalar = np.float64


def _invert(m: np.ndarray) -> np.ndarray:
    if not np.all(np.isfinite(m)):
        logger.debug("inverse failed: non-finite entries")
        raise SingularMatrixError("Matrix is singular: non-finite entries",
                                  determinant=float("nan"), tolerance=float("nan"))
    _, out = _eliminate(m, invert=True)
    return out


def _eliminate(m: np.ndarray, invert: bool) -> Tuple[Any, Optional[np.ndarray]]:
    """
    Гаус (invert=False) або Гаус-Жордан на [M | I] (invert=True) з частковим
    вибором опорного елемента. Повертає (визначник, обернена або None).

    Поруч з a ведемо bound: для кожного елемента суму модулів доданків, з яких
    він склався (спершу |m_ij|, далі + |factor| * bound опорного рядка).
    Кандидат у опорні значущий, лише коли |a_ri| > SINGULAR_EPS_FACTOR * eps(S) * bound_ri,
    тобто перевищує власну похибку округлення. Поріг не залежить ні від масштабу
    всієї матриці, ні від сусідніх рядків: трансляція на 1e6 у float32 обертається,
    а рядок, що став залишком від віднімання майже рівного, відкидається.
    Серед значущих беремо найбільший за модулем; немає жодного -> SingularMatrixError.
    """
    n = 4
    kind = m.dtype.type
    a = m.copy()
    bound = np.abs(a)
    out = np.eye(n, dtype=kind) if invert else None
    noise = kind(SINGULAR_EPS_FACTOR) * epsilon(kind)
    det = kind(1.0)
    for i in range(n):
        # півот
        piv = -1
        maxv = kind(0.0)
        for r in range(i, n):
            v = abs(a[r, i])
            if v > noise * bound[r, i] and v > maxv:
                maxv = v; piv = r
        if piv < 0:
            worst = i + int(np.argmax(np.abs(a[i:, i])))
            pivot = abs(a[worst, i])
            tol = noise * bound[worst, i]
            logger.debug("elimination stopped: pivot %s at column %d below tolerance %s", pivot, i, tol)
            raise SingularMatrixError(
                f"Matrix is singular: pivot {float(pivot)!r} at column {i} <= tolerance {float(tol)!r}",
                determinant=float(det * a[worst, i]), tolerance=float(tol),
            )
        if piv != i:
            a[[i, piv]] = a[[piv, i]]
            bound[[i, piv]] = bound[[piv, i]]
            if invert:
                out[[i, piv]] = out[[piv, i]]
            det = -det
        det *= a[i, i]
        inv = kind(1.0) / a[i, i]
        a[i] *= inv
        bound[i] *= abs(inv)
        if invert:
            out[i] *= inv
        # Жордан: вгору і вниз; для визначника досить униз
        for r in (range(n) if invert else range(i+1, n)):
            if r == i:
                continue
            factor = a[r, i]
            if factor != 0.0:
                a[r] -= factor * a[i]
                bound[r] += abs(factor) * bound[i]
                if invert:
                    out[r] -= factor * out[i]
    return det, out


# ---------- вільні функції ----------
def multiply(lhs: Matrix4[Scalar], rhs: Matrix4[Scalar]) -> Matrix4[Scalar]:
    """result[i][j] = sum_k lhs[i][k] * rhs[k][j]. Не комутативний."""
    check_same_scalar(lhs, rhs)
    return Matrix4._from_array(lhs._m @ rhs._m)


def mul_point(p: Point3[Scalar], m: Matrix4[Scalar]) -> Point3[Scalar]:
    """
    Точка у однорідних координатах (w = 1) на всю матрицю 4x4, потім ділення на w'.
    Нульовий w' дає inf/NaN за правилами IEEE, не перехоплюємо.
    """
    check_same_scalar(p, m)
    a = m._m
    x = p.x*a[0, 0] + p.y*a[1, 0] + p.z*a[2, 0] + a[3, 0]
    y = p.x*a[0, 1] + p.y*a[1, 1] + p.z*a[2, 1] + a[3, 1]
    z = p.x*a[0, 2] + p.y*a[1, 2] + p.z*a[2, 2] + a[3, 2]
    w = p.x*a[0, 3] + p.y*a[1, 3] + p.z*a[2, 3] + a[3, 3]
    with np.errstate(divide="ignore", invalid="ignore"):
        return Point3(x / w, y / w, z / w, dtype=p.dtype)


def mul_vector(v: Vector3[Scalar], m: Matrix4[Scalar]) -> Vector3[Scalar]:
    """Напрям: лише лінійний блок 3x3, без трансляції (рядок 3) і без w."""
    check_same_scalar(v, m)
    a = m._m
    x = v.x*a[0, 0] + v.y*a[1, 0] + v.z*a[2, 0]
    y = v.x*a[0, 1] + v.y*a[1, 1] + v.z*a[2, 1]
    z = v.x*a[0, 2] + v.y*a[1, 2] + v.z*a[2, 2]
    return Vector3(x, y, z, dtype=v.dtype)
