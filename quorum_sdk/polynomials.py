"""
Polynomials over a pluggable field, in coefficient form and point form
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Sequence, Tuple, TypeVar

from .errors import ValidationError
from .finite_field import Field, exponentiate, product

T = TypeVar("T")


@dataclass(frozen=True)
class Point(Generic[T]):
    """Input/output pair obtained by evaluating a polynomial"""
    input: T
    output: T


@dataclass(frozen=True)
class PolynomialInfo(Generic[T]):
    """Degree of a polynomial and the field used for its arithmetic"""
    degree: int
    field: Field[T]

    def __post_init__(self):
        if isinstance(self.degree, bool) or not isinstance(self.degree, int):
            raise ValidationError("Polynomial degree must be an integer")
        if self.degree < 0:
            raise ValidationError(f"Polynomial degree cannot be negative, got {self.degree}")
        if not isinstance(self.field, Field):
            raise ValidationError("Polynomial field must be a Field instance")

    @property
    def threshold(self) -> int:
        """Number of points needed to pin the polynomial down"""
        return self.degree + 1


class Polynomial(ABC, Generic[T]):
    """Polynomial that can be evaluated at any input"""

    def __init__(self, info: PolynomialInfo[T]):
        self.info = info

    @abstractmethod
    def evaluate_at(self, x: T) -> Point[T]:
        """Evaluate the polynomial at x and return the resulting point"""


class CoefficientPolynomial(Polynomial[T]):
    """
    Polynomial stored as its coefficient list, constant term first
    """

    def __init__(self, info: PolynomialInfo[T], coefficients: Sequence[T]):
        """
        Initialize coefficient polynomial

        Args:
            info: Degree and field of the polynomial
            coefficients: Exactly degree + 1 coefficients, index 0 is the constant term
        """
        super().__init__(info)

        coefficients = tuple(coefficients)
        if len(coefficients) != info.degree + 1:
            raise ValidationError(
                f"Expected {info.degree + 1} coefficients for degree {info.degree}, "
                f"got {len(coefficients)}"
            )

        self.coefficients: Tuple[T, ...] = coefficients

    def evaluate_at(self, x: T) -> Point[T]:
        field = self.info.field

        # reduce the constant term too, degree 0 has no add below
        value = field.add(self.coefficients[0], 0)
        for i, coeff in enumerate(self.coefficients[1:], start=1):
            value = field.add(value, field.multiply(coeff, exponentiate(field, x, i)))

        return Point(x, value)


class LagrangePolynomial(Polynomial[T]):
    """
    Polynomial stored as degree + 1 points with distinct inputs.

    Evaluation uses Lagrange interpolation through the field operations, so
    a modular field gives exact results while the integer field gives
    deterministic but truncated ones. Evaluating at zero recovers the
    constant term.
    """

    def __init__(self, info: PolynomialInfo[T], points: Sequence[Point[T]]):
        """
        Initialize interpolation polynomial

        Args:
            info: Degree and field of the polynomial
            points: Exactly degree + 1 points with pairwise distinct inputs
        """
        super().__init__(info)

        points = tuple(points)
        if len(points) != info.degree + 1:
            raise ValidationError(
                f"Need exactly {info.degree + 1} points for degree {info.degree}, "
                f"got {len(points)}",
                details={"required": info.degree + 1, "given": len(points)}
            )

        self.points: Tuple[Point[T], ...] = points

    def _basis_terms(self, x: T, i: int) -> Tuple[T, T]:
        """Numerator and denominator of the i-th basis polynomial at x"""
        field = self.info.field
        x_i = self.points[i].input
        others = [p.input for j, p in enumerate(self.points) if j != i]

        if not others:
            # degree 0: empty products
            return 1, 1

        numerator = product(field, (field.subtract(x, x_j) for x_j in others))
        denominator = product(field, (field.subtract(x_i, x_j) for x_j in others))
        return numerator, denominator

    def evaluate_at(self, x: T) -> Point[T]:
        field = self.info.field

        value = None
        for i, point in enumerate(self.points):
            numerator, denominator = self._basis_terms(x, i)
            term = field.multiply(point.output, field.divide(numerator, denominator))
            value = term if value is None else field.add(value, term)

        return Point(x, value)
