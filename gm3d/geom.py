# gm3d/geom.py
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from numbers import Real
from typing import Any, Generic, Iterator, Optional

import numpy as np

from .scalar import Scalar, check_same_scalar, literal, resolve_fixed, sqrt, zero

logger = logging.getLogger(__name__)


class Tuple3(ABC, Generic[Scalar]):
    """
    Спільна абстрактна основа Vector3 / Point3: три компоненти (x, y, z) одного типу скаляра.
    Індекси лише 0 -> x, 1 -> y, 2 -> z; будь-який інший (і від'ємний теж) дає IndexError.
    Екземпляри змінні (нормалізація, присвоєння за індексом), тому не хешуються.
    Сам Tuple3 не створюється: довжину для normalize() визначає підклас.
    """
    __slots__ = ("_c",)
    # numpy не повинен перетворювати нас на масив у бінарних операціях (np.float64(2) * v)
    __array_ufunc__ = None
    # закріплена точність підкласу (Vec3f, Point3d, ...); None -> береться з dtype
    _fixed_scalar: Optional[type] = None

    def __init__(self, x: Any, y: Any, z: Any, dtype: Any = None):
        self._c = np.array((x, y, z), dtype=resolve_fixed(self._fixed_scalar, dtype))

    # ---------- конструктори ----------
    @classmethod
    def new(cls, x: Any, y: Any, z: Any, dtype: Any = None):
        return cls(x, y, z, dtype=dtype)

    @classmethod
    def zeros(cls, dtype: Any = None):
        kind = resolve_fixed(cls._fixed_scalar, dtype)
        z = zero(kind)
        return cls(z, z, z, dtype=kind)

    @classmethod
    def _from_array(cls, arr: np.ndarray):
        obj = cls.__new__(cls)
        obj._c = arr
        return obj

    # ---------- доступ ----------
    @property
    def dtype(self) -> type:
        return self._c.dtype.type

    @property
    def x(self) -> Scalar:
        return self._c[0]

    @x.setter
    def x(self, value: Any) -> None:
        self._c[0] = value

    @property
    def y(self) -> Scalar:
        return self._c[1]

    @y.setter
    def y(self, value: Any) -> None:
        self._c[1] = value

    @property
    def z(self) -> Scalar:
        return self._c[2]

    @z.setter
    def z(self, value: Any) -> None:
        self._c[2] = value

    def _check_index(self, index: Any) -> None:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)) or not 0 <= index < 3:
            raise IndexError(f"{type(self).__name__} index out of range: {index!r}")

    def __getitem__(self, index: int) -> Scalar:
        self._check_index(index)
        return self._c[index]

    def __setitem__(self, index: int, value: Any) -> None:
        self._check_index(index)
        self._c[index] = value

    def __iter__(self) -> Iterator[Scalar]:
        yield self._c[0]; yield self._c[1]; yield self._c[2]

    def __len__(self) -> int:
        return 3

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple3) or _kind(other) is not _kind(self):
            return NotImplemented
        return bool(np.array_equal(self._c, other._c))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        name = np.dtype(self.dtype).name
        return f"{type(self).__name__}({float(self.x)!r}, {float(self.y)!r}, {float(self.z)!r}, dtype={name})"

    def copy(self):
        return self._from_array(self._c.copy())

    def to_array(self) -> np.ndarray:
        """Незалежна копія компонент як numpy-масив форми (3,)."""
        return self._c.copy()

    def isclose(self, other: "Tuple3", rel_tol: float = 1e-9, abs_tol: float = 0.0) -> bool:
        if not isinstance(other, Tuple3) or _kind(other) is not _kind(self):
            return False
        return bool(np.allclose(self._c, other._c, rtol=rel_tol, atol=abs_tol))

    # ---------- нормалізація ----------
    @abstractmethod
    def _length(self) -> Scalar:
        ...

    def normalize(self) -> None:
        """
        Нормалізувати на місці. Нульова довжина: no-op (без ділення на нуль,
        без NaN); NaN-довжина теж не проходить перевірку > 0, тож компоненти не чіпаємо.
        """
        length = self._length()
        if length > zero(self.dtype):
            inv_len = literal(self.dtype, 1.0) / length
            self._c *= inv_len
        else:
            logger.debug("normalize skipped for %r: length is %s", self, length)

    def normalized(self):
        out = self.copy()
        out.normalize()
        return out


class Vector3(Tuple3[Scalar]):
    """
    Вільний вектор (напрям/величина, без положення).
    Оператори: v + v, v - v, -v, v * s, s * v, v / s.
    Оператора для векторного добутку немає: лише cross() на ім'я.
    """
    __slots__ = ()

    def dot(self, other: "Vector3[Scalar]") -> Scalar:
        return dot(self, other)

    def cross(self, other: "Vector3[Scalar]") -> "Vector3[Scalar]":
        return cross(self, other)

    def magnitude(self) -> Scalar:
        return magnitude(self)

    def _length(self) -> Scalar:
        return self.magnitude()

    def __add__(self, other: Any):
        if isinstance(other, Vector3):
            check_same_scalar(self, other)
            return Vector3._from_array(self._c + other._c)
        # vector + point обробляє Point3.__radd__
        return NotImplemented

    def __sub__(self, other: Any):
        if isinstance(other, Vector3):
            check_same_scalar(self, other)
            return Vector3._from_array(self._c - other._c)
        return NotImplemented

    def __neg__(self) -> "Vector3[Scalar]":
        return Vector3._from_array(-self._c)

    def __mul__(self, other: Any):
        if isinstance(other, Tuple3) or not isinstance(other, Real):
            return NotImplemented
        return Vector3._from_array(self._c * literal(self.dtype, other))

    __rmul__ = __mul__

    def __truediv__(self, other: Any):
        if isinstance(other, Tuple3) or not isinstance(other, Real):
            return NotImplemented
        return Vector3._from_array(self._c / literal(self.dtype, other))


class Point3(Tuple3[Scalar]):
    """
    Точка в просторі. Афінні правила:
      p - p -> Vector3,  p + v -> Point3,  v + p -> Point3,  p - v -> Point3.
    p + p та множення точок не визначені (TypeError).
    """
    __slots__ = ()

    def distance_from_origin(self) -> Scalar:
        return distance_from_origin(self)

    def _length(self) -> Scalar:
        return self.distance_from_origin()

    def __add__(self, other: Any):
        if isinstance(other, Vector3):
            check_same_scalar(self, other)
            return Point3._from_array(self._c + other._c)
        return NotImplemented

    def __radd__(self, other: Any):
        if isinstance(other, Vector3):
            check_same_scalar(self, other)
            return Point3._from_array(other._c + self._c)
        return NotImplemented

    def __sub__(self, other: Any):
        if isinstance(other, Point3):
            check_same_scalar(self, other)
            return Vector3._from_array(self._c - other._c)
        if isinstance(other, Vector3):
            check_same_scalar(self, other)
            return Point3._from_array(self._c - other._c)
        return NotImplemented


# ---------- закріплена точність ----------
class Vec3f(Vector3[np.float32]):
    __slots__ = ()
    _fixed_scalar = np.float32


class Vec3d(Vector3[np.float64]):
    __slots__ = ()
    _fixed_scalar = np.float64


class Point3f(Point3[np.float32]):
    __slots__ = ()
    _fixed_scalar = np.float32


class Point3d(Point3[np.float64]):
    __slots__ = ()
    _fixed_scalar = np.float64


def _kind(t: Tuple3) -> type:
    # Vec3f і Vector3 одного роду: рівні при рівних компонентах
    return Point3 if isinstance(t, Point3) else Vector3


# ---------- вільні функції ----------
def dot(a: Vector3[Scalar], b: Vector3[Scalar]) -> Scalar:
    check_same_scalar(a, b)
    return a.x*b.x + a.y*b.y + a.z*b.z


def cross(a: Vector3[Scalar], b: Vector3[Scalar]) -> Vector3[Scalar]:
    """Правосторонній векторний добуток; cross(a, b) == -cross(b, a)."""
    check_same_scalar(a, b)
    return Vector3(a.y*b.z - a.z*b.y,
                   a.z*b.x - a.x*b.z,
                   a.x*b.y - a.y*b.x, dtype=a.dtype)


def magnitude(v: Vector3[Scalar]) -> Scalar:
    return sqrt(dot(v, v))


def distance_from_origin(p: Point3[Scalar]) -> Scalar:
    return sqrt(p.x*p.x + p.y*p.y + p.z*p.z)


def normalize(t: Tuple3[Scalar]) -> None:
    t.normalize()
