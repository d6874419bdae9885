"""Provides the RSA keys and the core RSA transform, under "textbook" RSA conditions.

No padding is applied: the message representative is exponentiated as is. Messages and ciphertexts must already be
integers in `[0, n)`. The transform itself does not check this, the calling layer does, with `check_representative`.
Outside that range the result is still congruent to the true one modulo `n`, but the original can no longer be
recovered uniquely.

Typical usage example:

    pub, priv = generate_keypair(3072)
    c = encrypt(65, pub)
    m = decrypt(c, priv)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from typing import NamedTuple

from rsacore.backends import BigIntBackend
from rsacore.backends import get_backend
from rsacore.errors import InvalidParameterError


class PublicKey(NamedTuple):
    """An RSA public key.

    Attributes:
        e: The public exponent.
        n: The modulus.
    """
    e: int
    n: int

    @property
    def size(self) -> int:
        """Modulus length in bits."""
        return self.n.bit_length()

    def encrypt(self, message: int, backend: str | BigIntBackend | None = None) -> int:
        return encrypt(message, self, backend)


class PrivateKey(NamedTuple):
    """An RSA private key.

    Carries its own copy of the modulus so that it stays usable without the public key. The prime factors are not
    retained.

    Attributes:
        d: The private exponent.
        n: The modulus.
    """
    d: int
    n: int

    @property
    def size(self) -> int:
        """Modulus length in bits."""
        return self.n.bit_length()

    def decrypt(self, ciphertext: int, backend: str | BigIntBackend | None = None) -> int:
        return decrypt(ciphertext, self, backend)


def encrypt(message: int, key: PublicKey, backend: str | BigIntBackend | None = None) -> int:
    """Encrypt an integer message representative: `c = m^e mod n`.

    Args:
        message: The int-marshalled message. Expected in `[0, n)`, not validated.
        key: The public key.
        backend: Big-integer back-end performing the modular exponentiation.

    Returns:
        The ciphertext representative.
    """
    backend = get_backend(backend)
    return int(backend.powmod(backend.integer(message), backend.integer(key.e), backend.integer(key.n)))


def decrypt(ciphertext: int, key: PrivateKey, backend: str | BigIntBackend | None = None) -> int:
    """Decrypt an integer ciphertext representative: `m = c^d mod n`.

    Args:
        ciphertext: The ciphertext representative. Expected in `[0, n)`, not validated.
        key: The private key.
        backend: Big-integer back-end performing the modular exponentiation.

    Returns:
        The message representative.
    """
    backend = get_backend(backend)
    return int(backend.powmod(backend.integer(ciphertext), backend.integer(key.d), backend.integer(key.n)))


def check_representative(value: int, mod: int) -> int:
    """Validate that a message or ciphertext representative is inside `[0, mod)`.

    Args:
        value: The representative to check.
        mod: The modulus of the key it will be used with.

    Returns:
        `value`, unchanged.

    Raises:
        InvalidParameterError: If the representative is out of range for the key.
    """
    if not 0 <= value < mod:
        raise InvalidParameterError("Message representative must be in range [0, mod-1]")
    return value


def bytes_to_integer(msg: bytes) -> int:
    """Converts a byte string to its big-endian unsigned integer representative."""
    return int.from_bytes(msg, byteorder="big", signed=False)


def integer_to_bytes(msg: int, fixedlen: int | None = None) -> bytes:
    """Converts an integer to a big-endian byte string.

    Args:
        msg: The integer to unmarshal.
        fixedlen: The target length of the byte string. Defaults to the shortest length holding `msg`.

    Returns:
        The representative bytes. (AKA Octet String)
    """
    if fixedlen is None:
        fixedlen = (msg.bit_length() + 7) // 8
    return msg.to_bytes(fixedlen, byteorder="big", signed=False)
