"""
This module defines the Point class, which represents affine points on the
secp256k1 curve y^2 = x^3 + 7 over the field of order P. It implements the
group law (addition, doubling, negation and double-and-add scalar
multiplication) together with the x-only encoding used for Nostr public keys.

An x-only key fixes x but not the parity of y. Point.lift_x returns both
candidate points, even y first, so verifiers can try them in a fixed order.
"""

from __future__ import annotations
from typing import Optional, Tuple
from .constants import B, G_x, G_y, KEY_SIZE, N, P
from .errors import NoSquareRoot
from .modular import bytes_to_int, int_to_bytes, mod_inverse, mod_sqrt, to_bytes32


class Point:
    """Class representing a secp256k1 point in affine coordinates."""

    def __init__(self, x: Optional[int] = None, y: Optional[int] = None):
        """
        Initialize a point on the curve.

        Parameters:
        x (Optional[int], optional): The x-coordinate of the point.
            Defaults to None, representing the point at infinity.
        y (Optional[int], optional): The y-coordinate of the point.
            Defaults to None, also representing the point at infinity.
        """
        self.x = x
        self.y = y

    @classmethod
    def lift_x(cls, x: int) -> Tuple[Point, ...]:
        """
        Recover the points whose x-coordinate is x.

        Parameters:
        x (int): The x-coordinate, which must be a field element.

        Returns:
        Tuple[Point, ...]: The even-y point followed by the odd-y point, or an
        empty tuple when x is not the x-coordinate of any curve point.
        """
        if not 0 <= x < P:
            return ()

        y_squared = (pow(x, 3, P) + B) % P
        try:
            y = mod_sqrt(y_squared, P)
        except NoSquareRoot:
            return ()

        if y % 2 == 0:
            even_y, odd_y = y, (P - y) % P
        else:
            even_y, odd_y = (P - y) % P, y

        return (cls(x, even_y), cls(x, odd_y))

    @classmethod
    def xonly_deserialize(cls, public_key: bytes) -> Point:
        """
        Deserialize a point from its 32-byte x-only representation, choosing
        the even y-coordinate.

        Parameters:
        public_key (bytes): 32 bytes or 64 hex characters holding x.

        Returns:
        Point: The even-y point with the given x-coordinate.

        Raises:
        InvalidKeyLength: If the input is not 32 bytes long.
        NoSquareRoot: If no curve point has this x-coordinate.
        """
        x = bytes_to_int(to_bytes32(public_key))
        candidates = cls.lift_x(x)
        if not candidates:
            raise NoSquareRoot("No curve point has this x-coordinate.")

        return candidates[0]

    def xonly_serialize(self) -> bytes:
        """
        Serialize the x-coordinate of the point to 32 big-endian bytes.

        Raises:
        ValueError: If the point is at infinity.
        """
        if self.x is None:
            raise ValueError("Cannot serialize the point at infinity.")

        return int_to_bytes(self.x, KEY_SIZE)

    def is_zero(self) -> bool:
        """Check if the point is the point at infinity."""
        return self.x is None or self.y is None

    def is_on_curve(self) -> bool:
        """Check the curve equation. The point at infinity is on the curve."""
        if self.is_zero():
            return True
        if not (0 <= self.x < P and 0 <= self.y < P):
            return False

        return (self.y * self.y - pow(self.x, 3, P) - B) % P == 0

    def __eq__(self, other: object) -> bool:
        """
        Compare two points. Every representation of the point at infinity is
        equal to every other.

        Parameters:
        other (object): The object to compare with.

        Returns:
        bool: True if both are the same curve point.
        """
        if not isinstance(other, Point):
            return NotImplemented
        if self.is_zero() or other.is_zero():
            return self.is_zero() and other.is_zero()
        return self.x == other.x and self.y == other.y

    def __neg__(self) -> Point:
        """Reflect the point over the x-axis."""
        if self.is_zero():
            return self

        return self.__class__(self.x, (P - self.y) % P)

    def _dbl(self) -> Point:
        """
        Double the point using the tangent slope. A point with y = 0 has
        order two, so its double is the point at infinity.
        """
        if self.is_zero() or self.y == 0:
            return self.__class__()

        x = self.x
        y = self.y
        s = (3 * x * x * mod_inverse(2 * y, P)) % P
        sum_x = (s * s - 2 * x) % P
        sum_y = (s * (x - sum_x) - y) % P

        return self.__class__(sum_x, sum_y)

    def __add__(self, other: Point) -> Point:
        """
        Add two points on the curve.

        Raises:
        ValueError: If other is not a Point.
        """
        if not isinstance(other, Point):
            raise ValueError("The other object must be an instance of Point")

        if self.is_zero():
            return other
        if other.is_zero():
            return self
        if self.x == other.x:
            if self.y == other.y:
                return self._dbl()
            # P + (-P)
            return self.__class__()

        s = ((other.y - self.y) * mod_inverse(other.x - self.x, P)) % P
        sum_x = (s * s - self.x - other.x) % P
        sum_y = (s * (self.x - sum_x) - self.y) % P

        return self.__class__(sum_x, sum_y)

    def __sub__(self, other: Point) -> Point:
        """
        Subtract one point from another by adding its negation.

        Raises:
        ValueError: If other is not a Point.
        """
        if not isinstance(other, Point):
            raise ValueError("The other object must be an instance of Point")

        return self + -other

    def __rmul__(self, scalar: int) -> Point:
        """
        Multiply this point by an integer scalar using double-and-add over
        the bits of the scalar, least significant first. The scalar is
        reduced modulo the group order, so 0 * G and N * G are both the point
        at infinity.

        Raises:
        ValueError: If the scalar is not an integer.
        """
        if not isinstance(scalar, int) or isinstance(scalar, bool):
            raise ValueError("The scalar must be an integer")

        scalar %= N

        addend = self
        result = self.__class__()
        while scalar:
            if scalar & 1:
                result = result + addend
            addend = addend._dbl()
            scalar >>= 1

        return result

    def __str__(self) -> str:
        """Return the coordinates in hexadecimal, or "0" for the point at infinity."""
        if self.is_zero():
            return "0"
        return f"X: 0x{self.x:x}\nY: 0x{self.y:x}"

    def __repr__(self) -> str:
        """Return a constructor-style representation of the point."""
        if self.is_zero():
            return f"{self.__class__.__name__}(x=None, y=None)"
        return f"{self.__class__.__name__}(x={self.x}, y={self.y})"


def parse_xonly(public_key: bytes) -> int:
    """Return the x-coordinate held by a 32-byte x-only public key."""
    return bytes_to_int(to_bytes32(public_key))


# The generator point G
G: Point = Point(G_x, G_y)
