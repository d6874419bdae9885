"""RSA keypair construction from a single security-strength parameter.

Two primes are sampled independently from the FIPS 186-5 interval, checked for separation and turned into a public
and private exponent over the Carmichael totient `lcm(p - 1, q - 1)`. The primes are dropped once the keys exist.

Typical usage example:

    pub, priv = generate_keypair(3072)
    pub, priv = generate_keypair(64, seed=7, attempts=10)
    pub, priv = build_keypair(61, 53, e=17)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import warnings

from rsacore import primes
from rsacore.backends import BigIntBackend
from rsacore.backends import get_backend
from rsacore.errors import InvalidParameterError
from rsacore.errors import KeyConstructionError
from rsacore.rsa import PrivateKey
from rsacore.rsa import PublicKey

log = logging.getLogger(__name__)

PUBLIC_EXPONENT: int = 65537
TOTIENTS: tuple[str, ...] = ("carmichael", "euler")
SECURE_KEY_SIZE: int = 2048
_MINIMUM_PRIME_SEPARATION: int = 100


def separation_bound(nlen: int) -> int:
    """Minimum distance `|p - q|` must exceed, `2**(nlen/2 - 100)`, or 0 below 200-bit keys."""
    exponent = nlen // 2 - _MINIMUM_PRIME_SEPARATION
    return 1 << exponent if exponent >= 0 else 0


def build_keypair(p: int,
                  q: int,
                  e: int = PUBLIC_EXPONENT,
                  backend: str | BigIntBackend | None = None,
                  totient: str = "carmichael") -> tuple[PublicKey, PrivateKey]:
    """Derive a keypair from two given primes.

    Args:
        p: The first prime.
        q: The second prime. Must differ from `p`.
        e: The public exponent. Defaults (and recommended) to 65537.
        backend: Big-integer back-end to compute with.
        totient: "carmichael" for `lcm(p - 1, q - 1)` or "euler" for `(p - 1) * (q - 1)`. Defaults to "carmichael".
            Both give working keys; Carmichael yields the smallest private exponent.

    Returns:
        Tuple of (public key, private key).

    Raises:
        InvalidParameterError: If `totient` is unknown.
        KeyConstructionError: If `p == q` or `e` has no inverse modulo the totient.
    """
    if totient not in TOTIENTS:
        raise InvalidParameterError(f"Unknown totient {totient!r}. Choose from {TOTIENTS}.")
    if p == q:
        raise KeyConstructionError("Prime factors must be distinct.")
    backend = get_backend(backend)
    bp, bq, be = backend.integer(p), backend.integer(q), backend.integer(e)
    n = bp * bq
    if totient == "carmichael":
        t = backend.lcm(bp - 1, bq - 1)
    else:
        t = (bp - 1) * (bq - 1)
    d = backend.invert(be, t)
    if d is None:
        raise KeyConstructionError(f"Public exponent {e} is not invertible modulo the totient, gcd is "
                                   f"{backend.gcd(be, t)}.")
    return PublicKey(int(be), int(n)), PrivateKey(int(d), int(n))


def generate_keypair(nlen: int,
                     *,
                     backend: str | BigIntBackend | None = None,
                     seed: int | None = None,
                     attempts: int = 1,
                     strict: bool = True,
                     totient: str = "carmichael") -> tuple[PublicKey, PrivateKey]:
    """Generates an RSA keypair with the fixed public exponent 65537.

    Args:
        nlen: Target modulus bit-length, e.g. 2048. Should be even; odd values are split by integer halving.
        backend: Big-integer back-end to compute with. Defaults to the native one.
        seed: Seed for the random state of this call. If not provided, the state is seeded from the OS.
            A seeded state makes the keypair reproducible for the same back-end.
        attempts: How many times to sample fresh primes when construction fails, including an exhausted draw budget
            in the sampler. Defaults to 1 (no retry).
        strict: Whether the sampler redraws primes overshooting the upper bound. Defaults to True.
        totient: Passed to `build_keypair`.

    Returns:
        Tuple of (public key, private key).

    Raises:
        InvalidParameterError: If `nlen` is too small or `attempts` is not positive.
        KeyConstructionError: If the last attempt still produced unusable primes.
    """
    primes.validate_size(nlen)
    if attempts < 1:
        raise InvalidParameterError("attempts must be >= 1")
    if nlen < SECURE_KEY_SIZE:
        warnings.warn(f"Key size {nlen} is insecure! Use for testing only.", RuntimeWarning, stacklevel=2)
    backend = get_backend(backend)
    rng = backend.random_state(seed)
    min_distance = separation_bound(nlen)
    last_error = None
    for attempt in range(1, attempts + 1):
        try:
            p = primes.sample_prime(nlen, backend, rng, strict)
            q = primes.sample_prime(nlen, backend, rng, strict)
            if abs(p - q) <= min_distance:
                raise KeyConstructionError(f"Prime factors are not separated by more than {min_distance}.")
            return build_keypair(p, q, PUBLIC_EXPONENT, backend, totient)
        except KeyConstructionError as exc:
            log.debug("Keypair attempt %d of %d failed: %s", attempt, attempts, exc)
            last_error = exc
    raise last_error
