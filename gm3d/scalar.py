# gm3d/scalar.py
from __future__ import annotations

from typing import Any, Tuple, TypeVar

import numpy as np

# Тип скаляра S: numpy float32 (одинарна точність) або float64 (подвійна).
Scalar = TypeVar("Scalar", bound=np.floating)

SUPPORTED_SCALARS: Tuple[type, ...] = (np.float32, np.float64)
DEFAULT_SCALAR: type = np.float64


def resolve_scalar(dtype: Any = None) -> type:
    """
    Привести dtype до конкретного numpy-типу скаляра.
    None -> DEFAULT_SCALAR; float / "f8" / "float64" -> np.float64; "f4" / "float32" -> np.float32.
    Все інше (int, complex, float16, ...) дає TypeError.
    """
    if dtype is None:
        return DEFAULT_SCALAR
    try:
        kind = np.dtype(dtype).type
    except TypeError as e:
        raise TypeError(f"Unsupported scalar type: {dtype!r}") from e
    if kind not in SUPPORTED_SCALARS:
        raise TypeError(f"Unsupported scalar type: {dtype!r} (expected float32 or float64)")
    return kind


def resolve_fixed(fixed: type | None, dtype: Any = None) -> type:
    """
    Як resolve_scalar, але для класів із закріпленою точністю (Vec3f, Mat4d, ...):
    dtype=None дає закріплений тип, інший явний dtype дає TypeError.
    """
    if fixed is None:
        return resolve_scalar(dtype)
    if dtype is not None and resolve_scalar(dtype) is not fixed:
        raise TypeError(
            f"Scalar type is fixed to {np.dtype(fixed).name}, got {np.dtype(dtype).name}"
        )
    return fixed


def zero(dtype: Any = None) -> np.floating:
    return resolve_scalar(dtype)(0.0)


def literal(dtype: Any, value: float) -> np.floating:
    """Конвертація дрібного float-літерала (0.0, 1.0, ...) у скаляр потрібної точності."""
    return resolve_scalar(dtype)(value)


def sqrt(value: np.floating) -> np.floating:
    # np.sqrt зберігає точність: float32 -> float32
    return np.sqrt(value)


def epsilon(dtype: Any = None) -> np.floating:
    """Машинний епсилон для типу скаляра."""
    kind = resolve_scalar(dtype)
    return np.finfo(kind).eps


def same_scalar(a: Any, b: Any) -> bool:
    return getattr(a, "dtype", None) == getattr(b, "dtype", None)


def check_same_scalar(a: Any, b: Any) -> type:
    """Обидва операнди мають однаковий тип скаляра, інакше TypeError (змішування точностей)."""
    if not same_scalar(a, b):
        raise TypeError(
            f"Mixed scalar types: {np.dtype(a.dtype).name} and {np.dtype(b.dtype).name}"
        )
    return a.dtype
