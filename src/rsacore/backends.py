"""Arbitrary-precision integer back-ends used by key generation and the cipher transform.

Everything rsacore needs from a big-integer library is the capability set of `BigIntBackend`. Key generation and
encryption are written once against that interface; a back-end only has to supply the primitives. Two ship with the
package:

    native: builtin `int`, `math` and the primality tests of `rsacore.primality`.
    gmpy2: GMP/MPFR through gmpy2, including MPFR floats at caller-chosen precision.

Typical usage example:

    backend = get_backend("gmpy2")
    state = backend.random_state(seed=42)
    p = backend.next_prime(backend.random_below(state, 2**512))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from abc import ABC
from abc import abstractmethod
import math
import random
import secrets
from typing import Any

import gmpy2

from rsacore import primality
from rsacore.errors import InvalidParameterError

# Extra MPFR bits beyond the integer part, so rounding to the nearest integer never sees a truncated fraction.
_GUARD_BITS: int = 64


def eea(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*s0 + b*t0 = r0 = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of two integers, as well as the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


class BigIntBackend(ABC):
    """Abstract capability set of a big-integer library.

    Addition, subtraction and multiplication are taken from the operators of the back-end's integer type.
    """

    name: str = ""

    @abstractmethod
    def integer(self, value: int) -> Any:
        """Convert a native integer to the back-end's integer type."""

    @abstractmethod
    def gcd(self, a: Any, b: Any) -> Any:
        ...

    @abstractmethod
    def lcm(self, a: Any, b: Any) -> Any:
        ...

    @abstractmethod
    def invert(self, a: Any, modulus: Any) -> Any | None:
        """Modular inverse of `a`, or None when `gcd(a, modulus) != 1`."""

    @abstractmethod
    def powmod(self, base: Any, exp: Any, modulus: Any) -> Any:
        """Modular exponentiation by repeated squaring; the full power is never materialized."""

    @abstractmethod
    def is_prime(self, value: Any) -> bool:
        ...

    @abstractmethod
    def next_prime(self, value: Any) -> Any:
        """Smallest probable prime greater than or equal to `value`."""

    @abstractmethod
    def random_state(self, seed: int | None = None) -> Any:
        """A fresh random number generator state, seeded from the OS if `seed` is None.

        A state must not be shared between concurrent generation calls.
        """

    @abstractmethod
    def random_below(self, state: Any, bound: Any) -> Any:
        """Uniformly distributed integer in `[0, bound)` drawn from `state`."""

    @abstractmethod
    def scaled_sqrt2(self, exponent: int, precision: int) -> Any:
        """`sqrt(2) * 2**exponent` rounded to the nearest integer.

        Args:
            exponent: Power of two scaling the root. Must be >= 0.
            precision: Minimum number of significant bits the computation is carried out with.
        """


class NativeBackend(BigIntBackend):
    """Builtin Python integers."""

    name = "native"

    def integer(self, value: int) -> int:
        return int(value)

    def gcd(self, a: int, b: int) -> int:
        return math.gcd(a, b)

    def lcm(self, a: int, b: int) -> int:
        return math.lcm(a, b)

    def invert(self, a: int, modulus: int) -> int | None:
        r, s, _ = eea(a % modulus, modulus)
        if r != 1:
            return None
        return s % modulus

    def powmod(self, base: int, exp: int, modulus: int) -> int:
        return pow(base, exp, modulus)

    def is_prime(self, value: int) -> bool:
        return primality.check_prime(value)

    def next_prime(self, value: int) -> int:
        return primality.next_prime(value)

    def random_state(self, seed: int | None = None) -> random.Random:
        if seed is None:
            return secrets.SystemRandom()
        return random.Random(seed)

    def random_below(self, state: random.Random, bound: int) -> int:
        return state.randrange(bound)

    def scaled_sqrt2(self, exponent: int, precision: int) -> int:
        # Exact: sqrt(2) * 2**e == sqrt(2**(2e + 1)), so no float precision is involved at all.
        square = 1 << (2 * exponent + 1)
        root = math.isqrt(square)
        # x rounds up iff x >= (r + 1/2)**2, i.e. x - r**2 > r for integers.
        if square - root * root > root:
            root += 1
        return root


class GmpyBackend(BigIntBackend):
    """GMP integers and MPFR floats through gmpy2."""

    name = "gmpy2"

    def integer(self, value: int) -> gmpy2.mpz:
        return gmpy2.mpz(value)

    def gcd(self, a, b) -> gmpy2.mpz:
        return gmpy2.gcd(a, b)

    def lcm(self, a, b) -> gmpy2.mpz:
        return gmpy2.lcm(a, b)

    def invert(self, a, modulus) -> gmpy2.mpz | None:
        if gmpy2.gcd(a, modulus) != 1:
            return None
        return gmpy2.invert(a, modulus)

    def powmod(self, base, exp, modulus) -> gmpy2.mpz:
        return gmpy2.powmod(base, exp, modulus)

    def is_prime(self, value) -> bool:
        return bool(gmpy2.is_prime(value, 50))

    def next_prime(self, value) -> gmpy2.mpz:
        # gmpy2.next_prime is strictly greater than its argument.
        return gmpy2.next_prime(gmpy2.mpz(value) - 1)

    def random_state(self, seed: int | None = None):
        if seed is None:
            seed = secrets.randbits(256)
        return gmpy2.random_state(seed)

    def random_below(self, state, bound) -> gmpy2.mpz:
        return gmpy2.mpz_random(state, bound)

    def scaled_sqrt2(self, exponent: int, precision: int) -> gmpy2.mpz:
        ctx = gmpy2.context(precision=max(precision, exponent + _GUARD_BITS))
        scaled = ctx.mul(ctx.sqrt(2), gmpy2.mpz(1) << exponent)
        return gmpy2.mpz(ctx.rint(scaled))


BACKENDS: dict[str, type[BigIntBackend]] = {
    NativeBackend.name: NativeBackend,
    GmpyBackend.name: GmpyBackend,
}

DEFAULT_BACKEND = NativeBackend.name


def get_backend(backend: str | BigIntBackend | None = None) -> BigIntBackend:
    """Resolve a back-end by name, passing instances through.

    Args:
        backend: A registered back-end name, a `BigIntBackend` instance or None for the default.

    Returns:
        The back-end instance.

    Raises:
        InvalidParameterError: If the name is not registered.
    """
    if isinstance(backend, BigIntBackend):
        return backend
    name = DEFAULT_BACKEND if backend is None else backend
    try:
        return BACKENDS[name]()
    except KeyError:
        raise InvalidParameterError(f"Unknown big-integer backend {name!r}. Choose from {sorted(BACKENDS)}.") from None
