"""Textbook RSA core in an Academic Sense.

Provides keypair generation with FIPS 186-5 bounded primes and the unpadded RSA transform over arbitrary-precision
integers. Arithmetic goes through a pluggable big-integer back-end: builtin integers by default, or gmpy2.

Typical usage example:

    pub, priv = generate_keypair(3072)
    c = encrypt(65, pub)
    m = decrypt(c, priv)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsacore.backends import BigIntBackend
from rsacore.backends import get_backend
from rsacore.errors import InvalidParameterError
from rsacore.errors import KeyConstructionError
from rsacore.errors import RSAError
from rsacore.keygen import build_keypair
from rsacore.keygen import generate_keypair
from rsacore.keygen import PUBLIC_EXPONENT
from rsacore.primality import check_prime
from rsacore.primes import prime_bounds
from rsacore.primes import sample_prime
from rsacore.rsa import decrypt
from rsacore.rsa import encrypt
from rsacore.rsa import PrivateKey
from rsacore.rsa import PublicKey

__version__ = "0.1.0"
__all__ = [
    "BigIntBackend",
    "get_backend",
    "RSAError",
    "InvalidParameterError",
    "KeyConstructionError",
    "PUBLIC_EXPONENT",
    "build_keypair",
    "generate_keypair",
    "check_prime",
    "prime_bounds",
    "sample_prime",
    "PublicKey",
    "PrivateKey",
    "encrypt",
    "decrypt",
]
