"""
Field arithmetic for Shamir's Secret Sharing
Big-integer values over all integers or over a prime modulus
"""

from abc import ABC, abstractmethod
from typing import Generic, Iterable, Tuple, TypeVar

from .errors import NoInverseError, ValidationError

T = TypeVar("T")

# Exponents p for which 2^p - 1 is prime
MERSENNE_EXPONENTS: Tuple[int, ...] = (
    2, 3, 5, 7, 13, 17, 19, 31, 61, 89, 107, 127, 521, 607, 1279,
    2203, 2281, 3217, 4253, 4423, 9689, 9941, 11213, 19937,
)


class Field(ABC, Generic[T]):
    """
    Number system supporting the four basic operators on values of type T
    """

    @abstractmethod
    def add(self, a: T, b: T) -> T:
        """Sum of a and b"""

    @abstractmethod
    def subtract(self, a: T, b: T) -> T:
        """Difference a - b"""

    @abstractmethod
    def multiply(self, a: T, b: T) -> T:
        """Product of a and b"""

    @abstractmethod
    def divide(self, a: T, b: T) -> T:
        """
        Quotient a / b

        Raises:
            NoInverseError: If b has no multiplicative inverse
        """

    def to_signed(self, value: T) -> T:
        """Map a field value back to the signed integer it stands for"""
        return value


class IntegerField(Field[int]):
    """
    Arithmetic over all integers.

    Division truncates toward zero, so it is not a multiplicative inverse
    and this is not a true field. Interpolation over it is deterministic
    but only exact when every intermediate quotient happens to be exact.
    """

    def add(self, a: int, b: int) -> int:
        return a + b

    def subtract(self, a: int, b: int) -> int:
        return a - b

    def multiply(self, a: int, b: int) -> int:
        return a * b

    def divide(self, a: int, b: int) -> int:
        if b == 0:
            raise NoInverseError("Division by zero in integer field")

        quotient = abs(a) // abs(b)
        return quotient if (a < 0) == (b < 0) else -quotient

    def __repr__(self) -> str:
        return "IntegerField()"

    def __eq__(self, other) -> bool:
        return isinstance(other, IntegerField)

    def __hash__(self) -> int:
        return hash(IntegerField)


class ModularField(Field[int]):
    """
    Arithmetic over the integers modulo a prime.

    The modulus is not checked for primality; a composite modulus makes
    division fail for every value sharing a factor with it.
    """

    def __init__(self, modulus: int):
        """
        Initialize modular field

        Args:
            modulus: Field size, should be a prime larger than any value to share
        """
        if isinstance(modulus, bool) or not isinstance(modulus, int):
            raise ValidationError("Modulus must be an integer")
        if modulus < 2:
            raise ValidationError("Modulus must be at least 2")

        self._modulus = modulus

    @property
    def modulus(self) -> int:
        return self._modulus

    def _mod(self, value: int) -> int:
        # floor modulo, always in [0, modulus) for a positive modulus
        return value % self._modulus

    def add(self, a: int, b: int) -> int:
        return self._mod(a + b)

    def subtract(self, a: int, b: int) -> int:
        return self._mod(a - b)

    def multiply(self, a: int, b: int) -> int:
        return self._mod(self._mod(a) * self._mod(b))

    def divide(self, a: int, b: int) -> int:
        return self.multiply(a, self.inverse(b))

    def inverse(self, a: int) -> int:
        """
        Multiplicative inverse using the extended Euclidean algorithm

        Raises:
            NoInverseError: If gcd(a, modulus) != 1
        """
        old_r, r = self._mod(a), self._modulus
        old_s, s = 1, 0

        while r:
            q = old_r // r
            old_r, r = r, old_r - q * r
            old_s, s = s, old_s - q * s

        if old_r != 1:
            raise NoInverseError(
                f"{a} has no inverse modulo {self._modulus}",
                details={"gcd": old_r}
            )

        return self._mod(old_s)

    def to_signed(self, value: int) -> int:
        """Centred lift: values above modulus // 2 stand for negatives"""
        value = self._mod(value)
        return value - self._modulus if value > self._modulus // 2 else value

    def __repr__(self) -> str:
        return f"ModularField({self._modulus})"

    def __eq__(self, other) -> bool:
        return isinstance(other, ModularField) and other.modulus == self._modulus

    def __hash__(self) -> int:
        return hash((ModularField, self._modulus))


def exponentiate(field: Field[T], a: T, n: int) -> T:
    """
    Raise a to the n-th power by repeated multiplication

    Args:
        field: Field used for the multiplications
        a: Base value
        n: Positive integer exponent

    Returns:
        a multiplied by itself n times (a^1 == a)
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValidationError("Exponent must be an integer")
    if n < 1:
        raise ValidationError(f"Exponent must be positive, got {n}")

    value = a
    for _ in range(n - 1):
        value = field.multiply(value, a)
    return value


def product(field: Field[T], values: Iterable[T]) -> T:
    """Left-fold multiply over a non-empty sequence of values"""
    iterator = iter(values)
    try:
        result = next(iterator)
    except StopIteration:
        raise ValidationError("Cannot take the product of an empty sequence") from None

    for value in iterator:
        result = field.multiply(result, value)
    return result


def mersenne_prime(exponent: int) -> int:
    """Return 2^exponent - 1 for a known Mersenne prime exponent"""
    if exponent not in MERSENNE_EXPONENTS:
        raise ValidationError(f"2^{exponent} - 1 is not a known Mersenne prime")
    return (1 << exponent) - 1


def modulus_for_chunk_size(chunk_size: int) -> int:
    """
    Smallest Mersenne prime that holds any signed chunk_size-byte value

    The prime is larger than 2^(8 * chunk_size + 1), leaving room for the
    centred lift used when turning reconstructed values back into bytes.
    """
    if chunk_size < 1:
        raise ValidationError("Chunk size must be positive")

    bound = 8 * chunk_size + 1
    for exponent in MERSENNE_EXPONENTS:
        if exponent > bound:
            return mersenne_prime(exponent)

    raise ValidationError(f"No tabulated Mersenne prime covers {chunk_size}-byte chunks")
