"""
Hosted verifier program and its instruction codec.

An execution environment (for example a blockchain virtual machine) hosts
the verifier as a program and routes instructions to it. This module models
that boundary without any VM: instructions are a tagged variant encoded as
one tag byte followed by the variant payload, and VerifierProgram turns
typed verification errors into a failed ProgramResult with diagnostic log
lines instead of letting them escape to the host.

Instruction layout:
    [1 byte : instruction tag]
    [N bytes: variant payload]

VerifySig (tag 0) carries a canonical 162-byte SignaturePackage.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Union

from .api import StateUpdate, verify
from .exceptions import (
    IncorrectProgramIdError,
    InvalidInstructionError,
    InvalidPackageError,
    SigPackageError,
    StateUpdateError,
)
from .package import SignaturePackage


logger = logging.getLogger(__name__)

PROGRAM_ID_LENGTH = 32


class InstructionKind(IntEnum):
    """Tags of the instructions the verifier program accepts."""

    VERIFY_SIG = 0


@dataclass(frozen=True)
class VerifySig:
    """Verify the signature carried in a package."""

    package: SignaturePackage

    kind = InstructionKind.VERIFY_SIG


Instruction = Union[VerifySig]


@dataclass(frozen=True)
class ProgramConfig:
    """
    Configuration for a hosted verifier program.

    Attributes:
        program_id: 32-byte address the program is deployed at. Instructions
            addressed to any other id are rejected.
    """

    program_id: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.program_id, bytes) or len(self.program_id) != PROGRAM_ID_LENGTH:
            raise ValueError(f"program_id must be {PROGRAM_ID_LENGTH} bytes")


@dataclass
class ProgramResult:
    """
    Outcome of processing one instruction.

    Attributes:
        success: Whether the instruction completed.
        logs: Human-readable diagnostic lines emitted while processing.
        error: "<ErrorClass>: <message>" on failure, otherwise None.
    """

    success: bool
    logs: List[str] = field(default_factory=list)
    error: Optional[str] = None


def encode_instruction(instruction: Instruction) -> bytes:
    """Encode an instruction as its tag byte followed by its payload."""
    if isinstance(instruction, VerifySig):
        return bytes([instruction.kind]) + instruction.package.to_bytes()
    raise InvalidInstructionError(f"Unsupported instruction: {type(instruction).__name__}")


def decode_instruction(data: bytes) -> Instruction:
    """
    Decode instruction bytes into an instruction variant.

    Raises:
        InvalidInstructionError: If the data is empty, carries an unknown
            tag, or the payload is malformed.
    """
    if not data:
        raise InvalidInstructionError("Instruction data is empty")

    tag, payload = data[0], bytes(data[1:])
    try:
        kind = InstructionKind(tag)
    except ValueError as e:
        raise InvalidInstructionError(f"Unknown instruction tag: {tag}") from e

    if kind is InstructionKind.VERIFY_SIG:
        try:
            return VerifySig(SignaturePackage.from_bytes(payload))
        except InvalidPackageError as e:
            raise InvalidInstructionError(f"Malformed VerifySig payload: {e}") from e

    raise InvalidInstructionError(f"Unhandled instruction: {kind.name}")


class VerifierProgram:
    """
    Verifier hosted behind an instruction-dispatching entry point.

    Attributes:
        config: Program configuration.
        on_verified: State-update collaborator, called with the package data
            after a successful verification.

    Example:
        >>> program = VerifierProgram(ProgramConfig(program_id=pid))
        >>> result = program.process_instruction(pid, encode_instruction(VerifySig(pkg)))
        >>> result.success
        True
    """

    def __init__(self, config: ProgramConfig, on_verified: Optional[StateUpdate] = None):
        self.config = config
        self.on_verified = on_verified

    def process_instruction(self, program_id: bytes, instruction_data: bytes) -> ProgramResult:
        """
        Route one instruction to its handler.

        Failures never raise; they are reported in the returned result.
        """
        result = ProgramResult(success=False)
        try:
            if program_id != self.config.program_id:
                raise IncorrectProgramIdError()
            instruction = decode_instruction(instruction_data)
            if isinstance(instruction, VerifySig):
                self._verify_sig(instruction.package, result)
        except SigPackageError as e:
            result.error = f"{type(e).__name__}: {e}"
            logger.warning("Instruction failed: %s", result.error)
            return result

        result.success = True
        return result

    def _verify_sig(self, package: SignaturePackage, result: ProgramResult) -> None:
        self._log(result, "Attempting to verify signature")
        try:
            verify(package)
        except SigPackageError:
            self._log(result, "Signature verification failed")
            raise

        self._log(result, "Signature valid!")
        self._update_state(package.data, result)

    def _update_state(self, data: bytes, result: ProgramResult) -> None:
        self._log(result, f"Updating state with data {data.hex()}")
        if self.on_verified is None:
            return
        try:
            self.on_verified(data)
        except Exception as e:
            # the collaborator may raise anything; report it as a typed failure
            raise StateUpdateError(f"State update failed: {e}") from e

    @staticmethod
    def _log(result: ProgramResult, line: str) -> None:
        result.logs.append(line)
        logger.info(line)
