"""Probabilistic primality testing on builtin integers.

Backs the native big-integer backend. Candidates go through trial division by a cached table of small primes first,
then through the FIPS 186-5 Miller-Rabin test with the iteration counts of Appendix C.1.

Typical usage example:

    get_pre_primes(12000)
    check_prime(2**127 - 1)
    next_prime(1000)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import itertools
import math
import secrets

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
# (bit-length ceiling, rounds) pairs from FIPS 186-5 Appendix C.1; larger candidates get _MAX_ROUNDS.
_ROUNDS_BY_SIZE: tuple[tuple[int, int], ...] = ((512, 40), (1024, 56), (1536, 64), (2048, 70))
_MAX_ROUNDS: int = 74


def _sieve(n: int = 10000) -> list[int]:
    """Sieve of Eratosthenes over a byte table, one flag per integer up to `n` inclusive."""
    if n < 2:
        return []
    flags = bytearray(b"\x01") * (n + 1)
    flags[:2] = b"\x00\x00"
    for i in range(2, math.isqrt(n) + 1):
        if flags[i]:
            flags[i * i::i] = bytes(len(range(i * i, n + 1, i)))
    return [i for i, flag in enumerate(flags) if flag]


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Small primes up to at least `n`, shared through a module-level table.

    The table is rebuilt when it does not reach `n`, when it is empty or when `change` forces it (in which case it
    covers exactly `n` afterwards). It is rebound rather than extended, so a reader never sees a partial table.

    Raises:
        ValueError: If `n` is negative.
    """
    global _SMALL_PRIMES, _SMALL_PRIMES_CAP
    if n < 0:
        raise ValueError("n must be >= 0")
    if change or not _SMALL_PRIMES or n > _SMALL_PRIMES_CAP:
        _SMALL_PRIMES, _SMALL_PRIMES_CAP = _sieve(n), n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """False when a small prime up to `n` divides `no` (or `no < 2`), True when `no` survives."""
    if no < 2:
        return False
    divisors = itertools.takewhile(lambda prime: prime * prime <= no, get_pre_primes(n))
    return all(no % prime for prime in divisors)


def _is_witness(base: int, w: int, a: int, m: int) -> bool:
    """Whether `base` proves `w` composite, with `w - 1 == m * 2**a` and `m` odd."""
    z = pow(base, m, w)
    if z == 1 or z == w - 1:
        return False
    for _ in range(a - 1):
        z = z * z % w
        if z == w - 1:
            return False
        if z == 1:
            break
    return True


def _miller_rabin(w: int, iters: int) -> bool:
    """Miller-Rabin probable-prime test of FIPS 186-5 B.3.1 with `iters` random bases.

    Args:
        w: Integer to be tested.
        iters: Number of bases to try.

    Returns:
        True if `w` is probably prime, False if a base witnessed compositeness.
    """
    if w < 5:
        return w in (2, 3)
    if not w & 1:
        return False
    a = ((w - 1) & (1 - w)).bit_length() - 1
    m = (w - 1) >> a
    return not any(_is_witness(secrets.randbelow(w - 3) + 2, w, a, m) for _ in range(iters))


def check_prime(candidate: int, iters: int | None = None, n: int = 10000) -> bool:
    """Composite primality test: trial division by small primes, then Miller-Rabin.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform.
            If not provided the count follows FIPS 186-5 Appendix C.1 for the bit-length of `candidate`.
        n: The number up to which to generate primes for trial division. Defaults to 10000.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if not _trial_division(candidate, n):
        return False
    if iters is None:
        bits = candidate.bit_length()
        iters = next((rounds for ceiling, rounds in _ROUNDS_BY_SIZE if bits <= ceiling), _MAX_ROUNDS)
    return _miller_rabin(candidate, iters)


def next_prime(value: int) -> int:
    """Smallest probable prime greater than or equal to `value`."""
    if value <= 2:
        return 2
    candidate = value | 1
    while not check_prime(candidate):
        candidate += 2
    return candidate
