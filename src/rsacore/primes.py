"""Bounded prime sampling for IFC key generation, roughly based on FIPS 186-5 Appendix A.1.3.

Each prime factor of an `nlen`-bit modulus is drawn from the closed interval

    sqrt(2) * 2**(nlen/2 - 1) <= p <= 2**(nlen/2) - 1

so that the product of two such primes always has exactly `nlen` bits. A uniform point is drawn from the interval and
advanced to the next prime at or above it. Primes that follow long prime gaps are favoured by this; that is the accepted
trade-off for a tractable search and is not corrected for.

Typical usage example:

    low, high = prime_bounds(2048)
    p = sample_prime(2048)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
from typing import Any

from rsacore.backends import BigIntBackend
from rsacore.backends import get_backend
from rsacore.errors import InvalidParameterError
from rsacore.errors import KeyConstructionError

log = logging.getLogger(__name__)

MINIMUM_KEY_SIZE: int = 4
# Redraws allowed per prime bit when a strict draw overshoots the upper bound.
_REDRAW_FACTOR: int = 5


def validate_size(nlen: int) -> None:
    """Reject security parameters that cannot be split into two prime factors.

    Args:
        nlen: Target modulus bit-length.

    Raises:
        InvalidParameterError: If `nlen` is not an integer or is smaller than `MINIMUM_KEY_SIZE`.
    """
    if isinstance(nlen, bool) or not isinstance(nlen, int):
        raise InvalidParameterError(f"Key size must be an integer, got {type(nlen).__name__}.")
    if nlen < MINIMUM_KEY_SIZE:
        raise InvalidParameterError(f"Key size must be at least {MINIMUM_KEY_SIZE} bits, got {nlen}.")


def prime_bounds(nlen: int, backend: str | BigIntBackend | None = None) -> tuple[int, int]:
    """Compute the closed interval a prime factor of an `nlen`-bit modulus must lie in.

    The lower bound involves sqrt(2) and is evaluated with at least `nlen` bits of precision before rounding to the
    nearest integer. Native floats would misplace it for any realistic key size.

    Args:
        nlen: Target modulus bit-length. Odd values are split by integer halving.
        backend: Big-integer back-end used for the irrational bound.

    Returns:
        Tuple of (lower bound, upper bound), both inclusive.

    Raises:
        InvalidParameterError: If `nlen` is below the minimum.
    """
    validate_size(nlen)
    backend = get_backend(backend)
    half = nlen // 2
    low = int(backend.scaled_sqrt2(half - 1, nlen))
    high = (1 << half) - 1
    return low, high


def sample_prime(nlen: int,
                 backend: str | BigIntBackend | None = None,
                 rng: Any = None,
                 strict: bool = True) -> int:
    """Sample a probable prime from the interval given by `prime_bounds`.

    Args:
        nlen: Target modulus bit-length; the prime gets half of it.
        backend: Big-integer back-end to compute with. Defaults to the native one.
        rng: Random state of `backend` owned by the calling generation.
            If not provided, a fresh state is created for this call alone.
        strict: Whether to redraw when the next prime overshoots the upper bound. Defaults to True.
            If False, the overshooting prime is returned as is.

    Returns:
        A probable prime, at least the lower bound and, if `strict`, at most the upper bound.

    Raises:
        InvalidParameterError: If `nlen` is below the minimum.
        KeyConstructionError: If strict sampling kept overshooting way beyond reason.
    """
    backend = get_backend(backend)
    low, high = prime_bounds(nlen, backend)
    if rng is None:
        rng = backend.random_state()
    span = backend.integer(high - low + 1)
    base = backend.integer(low)
    draws = (nlen // 2) * _REDRAW_FACTOR
    for _ in range(draws):
        candidate = base + backend.random_below(rng, span)
        prime = backend.next_prime(candidate)
        if not strict or prime <= high:
            return int(prime)
        log.debug("Next prime above %d overshoots the %d-bit bound, redrawing.", candidate, nlen // 2)
    raise KeyConstructionError(f"Drew {draws} candidates with no prime inside the {nlen // 2}-bit bound. "
                               "Check the random number generator.")
