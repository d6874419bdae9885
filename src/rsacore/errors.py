"""Exceptions raised by rsacore.

Two failure families exist: parameters that can never produce a key (`InvalidParameterError`) and key material that
was sampled fine but cannot be assembled into a valid keypair (`KeyConstructionError`). Both derive from the builtin
exception a caller would naturally catch, so `except ValueError` keeps working for parameter errors.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSAError(Exception):
    """Base class for every rsacore failure."""


class InvalidParameterError(RSAError, ValueError):
    """A parameter is out of its admissible range, detected before any work is done."""


class KeyConstructionError(RSAError, RuntimeError):
    """Sampled primes or the public exponent do not yield a valid keypair.

    Callers may recover by regenerating with fresh primes, which `generate_keypair` only does when asked to via
    `attempts`.
    """
