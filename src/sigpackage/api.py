"""
Public API for producing and verifying signature packages.

This module provides the two roles of the protocol:
- sign(): Hash a message, sign the digest and package the result
- verify(): Recover the signer's key from a package and check it

The verifier never needs the signer's secret key, and it does not need the
public key in advance either: the key is reconstructed from the signature
and recovery identifier, then compared with the key the package claims.

Security Assumptions:
    1. The verifier always re-hashes the package data itself. A digest
       supplied by the sender is never trusted.
    2. Key management, replay protection and multi-signature aggregation
       are the caller's responsibility.

Example:
    >>> package = sign(message, secret_key)
    >>> # ... transport package.to_bytes() to the verifying party ...
    >>> verify(SignaturePackage.from_bytes(received))
"""

import logging
from typing import Callable, Optional

from .crypto import (
    UNCOMPRESSED_PREFIX,
    derive_public_key,
    keccak256,
    recover_public_key,
    sign_recoverable,
)
from .exceptions import InvalidMessageError, SigPackageError, SignatureMismatchError
from .package import DATA_LENGTH, SignaturePackage


logger = logging.getLogger(__name__)

# Called with the 32-byte package data after a successful verification
StateUpdate = Callable[[bytes], None]


def sign(message: bytes, secret_key: bytes) -> SignaturePackage:
    """
    Sign a message and package the signature for transport.

    The message is hashed with Keccak-256 and the digest is signed with
    deterministic ECDSA over secp256k1. Raw message bytes are never passed
    to the signing primitive.

    Args:
        message: The message to sign (32 bytes).
        secret_key: The signer's 32-byte secret key. It is not retained.

    Returns:
        A SignaturePackage holding the signature, recovery identifier,
        uncompressed public key and the original message.

    Raises:
        InvalidMessageError: If the message is not 32 bytes.
        InvalidSecretKeyError: If the secret key is not a valid scalar.

    Example:
        >>> package = sign(b"\\x02" * 32, b"\\x01" * 32)
        >>> package.public_key[0]
        4
    """
    if not isinstance(message, (bytes, bytearray)) or len(message) != DATA_LENGTH:
        raise InvalidMessageError(f"Message must be {DATA_LENGTH} bytes")

    digest = keccak256(message)
    public_key = derive_public_key(secret_key)
    signature, recovery_id = sign_recoverable(digest, secret_key)

    return SignaturePackage(
        verifier_signature=signature,
        recovery_id=recovery_id,
        public_key=public_key,
        data=bytes(message),
    )


def verify(package: SignaturePackage, on_verified: Optional[StateUpdate] = None) -> None:
    """
    Verify a signature package by public-key recovery.

    Args:
        package: The package to verify.
        on_verified: Optional callback invoked with package.data once the
            signature has been verified. It is never called on failure.

    Raises:
        RecoveryFailureError: If the signature and recovery identifier are
            malformed or inconsistent (malformed input).
        SignatureMismatchError: If the signature is well formed but was not
            produced by the claimed public key.

    Example:
        >>> verify(package)  # returns None, raises on failure
    """
    digest = keccak256(package.data)
    recovered = recover_public_key(digest, package.recovery_id, package.verifier_signature)

    if UNCOMPRESSED_PREFIX + recovered != package.public_key:
        logger.debug("Recovered key does not match claimed public key")
        raise SignatureMismatchError()

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Signature verified for data %s", package.data.hex())
    if on_verified is not None:
        on_verified(package.data)


class SignatureVerifier:
    """
    Class-based verifier bound to a state-update callback.

    Attributes:
        on_verified: Callback run with the package data after each
            successful verification, or None.

    Example:
        >>> verifier = SignatureVerifier(on_verified=store.record)
        >>> verifier.verify(package)
    """

    def __init__(self, on_verified: Optional[StateUpdate] = None):
        self.on_verified = on_verified

    def verify(self, package: SignaturePackage) -> None:
        """
        Verify a package.

        See module-level verify() for full documentation.
        """
        verify(package, self.on_verified)

    def is_valid(self, package: SignaturePackage) -> bool:
        """
        Return True if the package verifies, False on any verification error.

        The state-update callback still runs when the package verifies.
        """
        try:
            self.verify(package)
        except SigPackageError:
            return False
        return True
