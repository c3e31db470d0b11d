"""
secp256k1 and Keccak-256 primitives for signature packages.

This module provides the cryptographic building blocks shared by the
signer and the verifier: hashing, secret-key parsing, public-key
derivation, recoverable ECDSA signing and public-key recovery.

Curve arithmetic comes from the python-ecdsa library. Hashing uses
Keccak-256 from eth-hash, the pre-standard Keccak variant used across
blockchain ecosystems. It is NOT interchangeable with hashlib.sha3_256,
which applies different padding and yields different digests.

Security Note:
    Signing is deterministic (RFC 6979): the nonce is derived from the
    secret key and the digest, so the same inputs always produce the same
    signature and a nonce can never be reused across different digests.
"""

import hashlib
from typing import Tuple

from ecdsa import SECP256k1, SigningKey
from ecdsa.ecdsa import RSZeroError
from ecdsa.ellipticcurve import INFINITY, PointJacobi
from ecdsa.numbertheory import SquareRootError, inverse_mod, square_root_mod_prime
from ecdsa.rfc6979 import generate_k
from ecdsa.util import number_to_string, sigdecode_string, sigencode_string, string_to_number
from eth_hash.auto import keccak

from .exceptions import InvalidMessageError, InvalidSecretKeyError, RecoveryFailureError


# The only curve this protocol signs on
CURVE = SECP256k1

# Hash used for RFC 6979 nonce derivation (the message digest is Keccak-256)
NONCE_HASH_FUNC = hashlib.sha256

SECRET_KEY_LENGTH = 32
DIGEST_LENGTH = 32
SIGNATURE_LENGTH = 64
RECOVERED_KEY_LENGTH = 64

# Uncompressed SEC1 point marker
UNCOMPRESSED_PREFIX = b"\x04"

_ORDER = CURVE.order
_HALF_ORDER = _ORDER // 2
_FIELD_PRIME = CURVE.curve.p()


def keccak256(data: bytes) -> bytes:
    """
    Hash arbitrary-length data with Keccak-256.

    Args:
        data: Bytes to hash.

    Returns:
        32-byte digest.

    Raises:
        TypeError: If data is not bytes-like.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"keccak256 expects bytes, got {type(data).__name__}")
    return keccak(bytes(data))


def parse_secret_key(secret_key: bytes) -> int:
    """
    Parse a 32-byte big-endian secret key into a curve scalar.

    Raises:
        InvalidSecretKeyError: If the key is not 32 bytes or is outside
            the range [1, n-1].
    """
    if not isinstance(secret_key, (bytes, bytearray)) or len(secret_key) != SECRET_KEY_LENGTH:
        raise InvalidSecretKeyError(
            f"Secret key must be {SECRET_KEY_LENGTH} bytes"
        )

    secexp = string_to_number(bytes(secret_key))
    if not 1 <= secexp < _ORDER:
        raise InvalidSecretKeyError("Secret key is outside the valid scalar range [1, n-1]")
    return secexp


def parse_message(digest: bytes) -> int:
    """
    Parse a 32-byte digest into a message scalar reduced modulo n.

    Raises:
        InvalidMessageError: If the digest is not 32 bytes.
    """
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != DIGEST_LENGTH:
        raise InvalidMessageError(
            f"Message digest must be {DIGEST_LENGTH} bytes"
        )
    return string_to_number(bytes(digest)) % _ORDER


def derive_public_key(secret_key: bytes) -> bytes:
    """
    Derive the uncompressed public key for a secret key.

    Args:
        secret_key: 32-byte secret key.

    Returns:
        65 bytes: the 0x04 prefix followed by the 32-byte X and Y coordinates.

    Raises:
        InvalidSecretKeyError: If the secret key is invalid.
    """
    secexp = parse_secret_key(secret_key)
    signing_key = SigningKey.from_secret_exponent(secexp, curve=CURVE)
    return signing_key.get_verifying_key().to_string("uncompressed")


def sign_recoverable(digest: bytes, secret_key: bytes) -> Tuple[bytes, int]:
    """
    Sign a 32-byte digest and capture the recovery identifier.

    The nonce k is derived with RFC 6979. The recovery identifier is read
    off the nonce point R = k*G while signing: bit 0 is the parity of R.y,
    bit 1 is set when R.x overflowed the group order. Signatures are
    normalised to low-s; negating s mirrors R, so bit 0 flips with it.

    Args:
        digest: 32-byte message digest (already hashed).
        secret_key: 32-byte secret key.

    Returns:
        Tuple of (signature, recovery_id) where signature is r||s
        (64 bytes, big-endian) and recovery_id is in 0..3.

    Raises:
        InvalidMessageError: If the digest is malformed.
        InvalidSecretKeyError: If the secret key is invalid.
    """
    e = parse_message(digest)
    secexp = parse_secret_key(secret_key)

    generator = CURVE.generator
    private_key = SigningKey.from_secret_exponent(secexp, curve=CURVE).privkey

    retry_gen = 0
    while True:
        k = generate_k(_ORDER, secexp, NONCE_HASH_FUNC, bytes(digest), retry_gen=retry_gen)
        try:
            signature = private_key.sign(e, k)
        except RSZeroError:
            retry_gen += 1
            continue
        break

    nonce_point = generator * k
    recovery_id = (nonce_point.y() & 1) | (2 if nonce_point.x() >= _ORDER else 0)

    r, s = signature.r, signature.s
    if s > _HALF_ORDER:
        s = _ORDER - s
        recovery_id ^= 1

    return sigencode_string(r, s, _ORDER), recovery_id


def recover_public_key(digest: bytes, recovery_id: int, signature: bytes) -> bytes:
    """
    Recover the signer's public key from a digest and signature.

    Reconstructs the nonce point R from r and the recovery identifier, then
    solves the ECDSA verification equation for the public key:
    Q = r^-1 * (s*R - e*G).

    Args:
        digest: 32-byte message digest the signature was made over.
        recovery_id: Recovery identifier, 0..3.
        signature: r||s, 64 bytes.

    Returns:
        The recovered public key as 64 bytes (X||Y, no prefix).

    Raises:
        RecoveryFailureError: If the inputs are out of range or no valid
            point can be recovered.
    """
    if not isinstance(signature, (bytes, bytearray)) or len(signature) != SIGNATURE_LENGTH:
        raise RecoveryFailureError(f"Signature must be {SIGNATURE_LENGTH} bytes")
    if not isinstance(recovery_id, int) or not 0 <= recovery_id <= 3:
        raise RecoveryFailureError(f"Recovery id must be in 0..3, got {recovery_id!r}")
    try:
        e = parse_message(digest)
    except InvalidMessageError as ex:
        raise RecoveryFailureError(f"Invalid digest: {ex}") from ex

    r, s = sigdecode_string(bytes(signature), _ORDER)
    if not 1 <= r < _ORDER:
        raise RecoveryFailureError("Signature r value out of range")
    if not 1 <= s < _ORDER:
        raise RecoveryFailureError("Signature s value out of range")

    curve = CURVE.curve
    x = r + (recovery_id >> 1) * _ORDER
    if x >= _FIELD_PRIME:
        raise RecoveryFailureError("Recovery id is inconsistent with signature")

    alpha = (pow(x, 3, _FIELD_PRIME) + curve.a() * x + curve.b()) % _FIELD_PRIME
    try:
        beta = square_root_mod_prime(alpha, _FIELD_PRIME)
    except SquareRootError as ex:
        raise RecoveryFailureError("Signature r value is not the x-coordinate of a curve point") from ex

    y = beta if beta % 2 == (recovery_id & 1) else _FIELD_PRIME - beta
    nonce_point = PointJacobi(curve, x, y, 1, _ORDER)

    generator = CURVE.generator
    point = (nonce_point * s + generator * ((-e) % _ORDER)) * inverse_mod(r, _ORDER)
    if point == INFINITY:
        raise RecoveryFailureError("Recovered point is the point at infinity")

    return number_to_string(point.x(), _FIELD_PRIME) + number_to_string(point.y(), _FIELD_PRIME)
