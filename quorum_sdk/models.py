"""
Data models for Quorum SDK
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .errors import ValidationError
from .finite_field import IntegerField, ModularField
from .polynomials import Point, PolynomialInfo

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"-?[0-9]+")


def _positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"{name} must be a positive integer, got {value!r}")


def _parse_int(value: Any, name: str) -> int:
    """Integer from a serialized int or decimal string, nothing else"""
    if isinstance(value, bool):
        raise ValidationError(f"Field {name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _DECIMAL.fullmatch(value):
        return int(value)
    raise ValidationError(f"Field {name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class ShareInfo:
    """Public parameters needed to create and recombine shares"""
    # Bytes per chunk; also the size of each random coefficient
    chunk_size: int
    # Shares handed out; the threshold is polynomial_info.degree + 1
    number_of_shares: int
    polynomial_info: PolynomialInfo[int]
    # Evaluation input of the first share; later shares count up from it
    first_input: int = 0

    def __post_init__(self):
        _positive_int("Chunk size", self.chunk_size)
        _positive_int("Number of shares", self.number_of_shares)
        if not isinstance(self.polynomial_info, PolynomialInfo):
            raise ValidationError("polynomial_info must be a PolynomialInfo")
        if self.number_of_shares < self.threshold:
            raise ValidationError(
                f"Threshold {self.threshold} cannot exceed number of shares {self.number_of_shares}"
            )
        if isinstance(self.first_input, bool) or not isinstance(self.first_input, int) or self.first_input < 0:
            raise ValidationError(f"First input must be a non-negative integer, got {self.first_input!r}")

        field = self.polynomial_info.field
        if isinstance(field, ModularField) and field.modulus <= 1 << (8 * self.chunk_size):
            logger.warning(
                "Modulus of %d bits is too small for %d-byte chunks; reconstruction may be wrong",
                field.modulus.bit_length(), self.chunk_size
            )

    @classmethod
    def create(
        cls,
        chunk_size: int,
        number_of_shares: int,
        degree: int,
        modulus: Optional[int] = None,
        first_input: int = 0
    ) -> "ShareInfo":
        """
        Build share parameters from plain values

        Args:
            chunk_size: Bytes per chunk
            number_of_shares: Total shares to create
            degree: Polynomial degree, threshold is degree + 1
            modulus: Prime modulus, or None for unmodulated integer arithmetic
            first_input: Evaluation input of the first share
        """
        field = IntegerField() if modulus is None else ModularField(modulus)
        return cls(chunk_size, number_of_shares, PolynomialInfo(degree, field), first_input)

    @property
    def threshold(self) -> int:
        return self.polynomial_info.threshold

    @property
    def inputs(self) -> range:
        """Evaluation inputs of the shares, in share order"""
        return range(self.first_input, self.first_input + self.number_of_shares)

    def chunk_count(self, secret_length: int) -> int:
        """Number of chunks a secret of secret_length bytes is split into"""
        return -(-secret_length // self.chunk_size)

    def chunk_lengths(self, secret_length: int) -> Tuple[int, ...]:
        """Byte length of every chunk of a secret, in order"""
        count = self.chunk_count(secret_length)
        if not count:
            return ()
        last = secret_length - self.chunk_size * (count - 1)
        return (self.chunk_size,) * (count - 1) + (last,)


@dataclass(frozen=True)
class Share:
    """
    One recipient's portion of a secret.

    Holds one point per chunk of the original data, all evaluated at the
    same input. Points are aligned by position across shares, so their
    order must be kept.
    """
    points: Tuple[Point[int], ...]
    secret_length: int

    def __post_init__(self):
        object.__setattr__(self, "points", tuple(self.points))
        if isinstance(self.secret_length, bool) or not isinstance(self.secret_length, int) or self.secret_length < 0:
            raise ValidationError(f"Secret length must be a non-negative integer, got {self.secret_length!r}")
        if len({p.input for p in self.points}) > 1:
            raise ValidationError("All points of a share must have the same input")

    @property
    def index(self) -> Optional[int]:
        """Evaluation input shared by every point, None for an empty share"""
        return self.points[0].input if self.points else None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with integers as decimal strings"""
        return {
            "index": None if self.index is None else str(self.index),
            "secret_length": self.secret_length,
            "points": [{"x": str(p.input), "y": str(p.output)} for p in self.points]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Share":
        """Rebuild a share from to_dict output"""
        try:
            points = [Point(_parse_int(p["x"], "x"), _parse_int(p["y"], "y")) for p in data["points"]]
            share = cls(points, _parse_int(data["secret_length"], "secret_length"))
        except (KeyError, TypeError) as e:
            raise ValidationError(f"Malformed share data: {str(e)}")

        if "index" not in data:
            return share

        index = data["index"]
        if index is not None:
            index = _parse_int(index, "index")
        if index != share.index:
            raise ValidationError(
                f"Share index {index} does not match point input {share.index}"
            )

        return share

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, payload: str) -> "Share":
        try:
            data = json.loads(payload)
        except (TypeError, json.JSONDecodeError) as e:
            raise ValidationError(f"Invalid share JSON: {str(e)}")
        if not isinstance(data, dict):
            raise ValidationError("Share JSON must be an object")
        return cls.from_dict(data)
