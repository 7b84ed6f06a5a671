"""Architecture detection for compiled binaries.

Only ELF executables can run on Lambda, so pyelftools is enough to
recover the instruction set from the file header.
"""

from __future__ import annotations

import io
from collections.abc import Callable

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile

from lambda_build.errors import UnsupportedArchitectureError
from lambda_build.types import Architecture

# (e_machine, ELF class) -> Lambda architecture
SUPPORTED_MACHINES = {
    ("EM_AARCH64", 64): Architecture.ARM64,
    ("EM_X86_64", 64): Architecture.X86_64,
}

ArchitectureDetector = Callable[[bytes], Architecture]


def detect_architecture(data: bytes) -> Architecture:
    """Detect the architecture of an ELF binary.

    Args:
        data: Raw bytes of the binary.

    Returns:
        The Lambda architecture of the binary.

    Raises:
        UnsupportedArchitectureError: If the bytes are not ELF, or the
            machine is neither 64-bit ARM nor x86_64.
    """
    try:
        elf = ELFFile(io.BytesIO(data))
    except ELFError as e:
        raise UnsupportedArchitectureError(f"unknown ({e})") from e

    machine = elf.header["e_machine"]
    arch = SUPPORTED_MACHINES.get((machine, elf.elfclass))
    if arch is None:
        if machine == "EM_X86_64":
            # x32 ABI: x86_64 instructions in a 32-bit container
            raise UnsupportedArchitectureError("EM_X86_64 (x32)")
        raise UnsupportedArchitectureError(str(machine))
    return arch


__all__ = ["SUPPORTED_MACHINES", "ArchitectureDetector", "detect_architecture"]
