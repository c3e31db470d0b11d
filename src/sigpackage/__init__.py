"""
sigpackage - secp256k1 signature packages verified by public-key recovery.

A signer hashes a message with Keccak-256, signs the digest with
deterministic ECDSA over secp256k1 and bundles the signature, recovery
identifier, public key and message into a SignaturePackage. A verifier
recovers the signer's public key from the signature alone and checks it
against the key the package claims, so it needs no key distribution ahead
of time.

Quick Start:
    >>> from sigpackage import sign, verify, SignaturePackage
    >>>
    >>> package = sign(message, secret_key)
    >>> wire = package.to_bytes()
    >>>
    >>> # On the verifying side
    >>> verify(SignaturePackage.from_bytes(wire))

Hosting the verifier behind an instruction entry point:
    >>> from sigpackage import ProgramConfig, VerifierProgram, VerifySig, encode_instruction
    >>>
    >>> program = VerifierProgram(ProgramConfig(program_id=pid), on_verified=store)
    >>> result = program.process_instruction(pid, encode_instruction(VerifySig(package)))

See Also:
    - api.py: sign() and verify()
    - package.py: SignaturePackage and its byte layout
    - crypto.py: Keccak-256, recoverable signing, public-key recovery
    - program.py: Instruction codec and hosted verifier
    - exceptions.py: Custom exception types
"""

__version__ = "0.1.0"
__author__ = "sigpackage Contributors"

# Public API - main functions
from .api import sign, verify, SignatureVerifier

# Data model
from .package import SignaturePackage

# Hosted verifier
from .program import (
    InstructionKind,
    ProgramConfig,
    ProgramResult,
    VerifierProgram,
    VerifySig,
    decode_instruction,
    encode_instruction,
)

# Exceptions for error handling
from .exceptions import (
    SigPackageError,
    InvalidSecretKeyError,
    InvalidMessageError,
    RecoveryFailureError,
    SignatureMismatchError,
    InvalidPackageError,
    InvalidInstructionError,
    IncorrectProgramIdError,
    StateUpdateError,
)

__all__ = [
    # Version
    "__version__",
    # Main API
    "sign",
    "verify",
    "SignatureVerifier",
    # Types
    "SignaturePackage",
    # Hosted verifier
    "InstructionKind",
    "ProgramConfig",
    "ProgramResult",
    "VerifierProgram",
    "VerifySig",
    "decode_instruction",
    "encode_instruction",
    # Exceptions
    "SigPackageError",
    "InvalidSecretKeyError",
    "InvalidMessageError",
    "RecoveryFailureError",
    "SignatureMismatchError",
    "InvalidPackageError",
    "InvalidInstructionError",
    "IncorrectProgramIdError",
    "StateUpdateError",
]
