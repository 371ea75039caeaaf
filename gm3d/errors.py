# gm3d/errors.py
from __future__ import annotations


class GeometryError(Exception):
    """Базовий клас для очікуваних числових вироджень (не помилок програміста)."""


class SingularMatrixError(GeometryError, ValueError):
    """
    Матриця не має оберненої: визначник нульовий або зневажливо малий
    відносно масштабу елементів.
    determinant: оцінка визначника (добуток опорних елементів на момент зупинки).
    tolerance: поріг, з яким порівнювали опорний елемент.
    """

    def __init__(self, message: str = "Matrix is singular", determinant: float = 0.0,
                 tolerance: float = 0.0):
        super().__init__(message)
        self.determinant = determinant
        self.tolerance = tolerance
