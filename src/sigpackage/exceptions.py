"""
Custom exceptions for the sigpackage library.

Signing and verification failures are reported as typed exceptions so that
callers can tell malformed input (an unparsable key, a signature that
recovers to no point) apart from a well-formed signature produced by the
wrong key. None of these messages ever contain secret key material.
"""


class SigPackageError(Exception):
    """Base exception for all sigpackage errors."""

    pass


class InvalidSecretKeyError(SigPackageError):
    """
    Raised when a secret key cannot be used for signing.

    The key must be exactly 32 bytes and, read as a big-endian integer,
    lie in the range [1, n-1] where n is the secp256k1 group order.
    """

    def __init__(self, message: str = "Invalid secret key"):
        self.message = message
        super().__init__(self.message)


class InvalidMessageError(SigPackageError):
    """
    Raised when a message or message digest cannot be signed.

    This covers messages of the wrong width and digests that do not parse
    as a curve message scalar.
    """

    def __init__(self, message: str = "Invalid message"):
        self.message = message
        super().__init__(self.message)


class RecoveryFailureError(SigPackageError):
    """
    Raised when no public key can be recovered from a signature.

    This indicates malformed input: r or s out of range, a recovery
    identifier outside 0..3 or inconsistent with the signature, or a
    recovered point at infinity.
    """

    def __init__(self, message: str = "Failed to recover public key from signature"):
        self.message = message
        super().__init__(self.message)


class SignatureMismatchError(SigPackageError):
    """
    Raised when a signature recovers to a key other than the claimed one.

    Unlike RecoveryFailureError, the signature itself is well formed; it
    was simply not produced by the holder of the claimed public key.
    """

    def __init__(self, message: str = "Signature does not match the claimed public key"):
        self.message = message
        super().__init__(self.message)


class InvalidPackageError(SigPackageError):
    """Raised when a signature package has malformed fields or bytes."""

    def __init__(self, message: str = "Invalid or malformed signature package"):
        self.message = message
        super().__init__(self.message)


class InvalidInstructionError(SigPackageError):
    """Raised when instruction data cannot be decoded or routed."""

    def __init__(self, message: str = "Invalid instruction data"):
        self.message = message
        super().__init__(self.message)


class IncorrectProgramIdError(InvalidInstructionError):
    """Raised when an instruction is addressed to a different program."""

    def __init__(self, message: str = "Instruction addressed to an incorrect program id"):
        super().__init__(message)


class StateUpdateError(SigPackageError):
    """
    Raised when the state-update collaborator fails after verification.

    The signature itself verified; the downstream update did not complete,
    so the instruction as a whole fails.
    """

    def __init__(self, message: str = "State update failed after signature verification"):
        self.message = message
        super().__init__(self.message)
