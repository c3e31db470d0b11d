"""
The signature package exchanged between signer and verifier.

A package is an immutable value with a fixed-width canonical byte layout.
Signer and verifier may run in different processes or trust domains, so
both sides must agree on this layout bit for bit:

    [64 bytes: verifier_signature (r||s, big-endian)]
    [ 1 byte : recovery_id]
    [65 bytes: public_key (0x04||X||Y)]
    [32 bytes: data]

No length prefixes are used; every field has a fixed width.
"""

import dataclasses
from dataclasses import dataclass

from .exceptions import InvalidPackageError


SIGNATURE_LENGTH = 64
PUBLIC_KEY_LENGTH = 65
DATA_LENGTH = 32
PACKAGE_LENGTH = SIGNATURE_LENGTH + 1 + PUBLIC_KEY_LENGTH + DATA_LENGTH


def _as_fixed_bytes(name: str, value, length: int) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidPackageError(f"{name} must be bytes, got {type(value).__name__}")
    value = bytes(value)
    if len(value) != length:
        raise InvalidPackageError(
            f"{name} must be {length} bytes, got {len(value)} bytes"
        )
    return value


@dataclass(frozen=True)
class SignaturePackage:
    """
    Signature material bundled with the signed data and the signer's key.

    Attributes:
        verifier_signature: ECDSA signature r||s (64 bytes). Not range
            checked here; the verifier's recovery step rejects bad values.
        recovery_id: Selects which candidate public key the signature
            recovers to. Any single byte is representable; only 0..3 can
            ever verify.
        public_key: Uncompressed public key claimed to have signed (65 bytes).
        data: The original, unhashed message (32 bytes).
    """

    verifier_signature: bytes
    recovery_id: int
    public_key: bytes
    data: bytes

    def __post_init__(self) -> None:
        # frozen, so normalised values are written through object.__setattr__
        object.__setattr__(
            self,
            "verifier_signature",
            _as_fixed_bytes("verifier_signature", self.verifier_signature, SIGNATURE_LENGTH),
        )
        object.__setattr__(
            self,
            "public_key",
            _as_fixed_bytes("public_key", self.public_key, PUBLIC_KEY_LENGTH),
        )
        object.__setattr__(self, "data", _as_fixed_bytes("data", self.data, DATA_LENGTH))

        if isinstance(self.recovery_id, bool) or not isinstance(self.recovery_id, int):
            raise InvalidPackageError("recovery_id must be an integer")
        if not 0 <= self.recovery_id <= 0xFF:
            raise InvalidPackageError(
                f"recovery_id must fit in one byte, got {self.recovery_id}"
            )

    def to_bytes(self) -> bytes:
        """Serialize the package to its canonical 162-byte layout."""
        return b"".join(
            [
                self.verifier_signature,
                bytes([self.recovery_id]),
                self.public_key,
                self.data,
            ]
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "SignaturePackage":
        """
        Deserialize a package from its canonical layout.

        Raises:
            InvalidPackageError: If the input is not exactly 162 bytes.
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise InvalidPackageError("Package data must be bytes")
        data = bytes(data)
        if len(data) != PACKAGE_LENGTH:
            raise InvalidPackageError(
                f"Package must be {PACKAGE_LENGTH} bytes, got {len(data)} bytes"
            )

        offset = 0
        signature = data[offset:offset + SIGNATURE_LENGTH]
        offset += SIGNATURE_LENGTH

        recovery_id = data[offset]
        offset += 1

        public_key = data[offset:offset + PUBLIC_KEY_LENGTH]
        offset += PUBLIC_KEY_LENGTH

        message = data[offset:offset + DATA_LENGTH]

        return cls(
            verifier_signature=signature,
            recovery_id=recovery_id,
            public_key=public_key,
            data=message,
        )

    def replace(self, **changes) -> "SignaturePackage":
        """Return a copy of this package with the given fields replaced."""
        return dataclasses.replace(self, **changes)
