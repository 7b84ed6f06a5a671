"""Shared fixtures: synthetic ELF images and settings.

The images are just an ELF header plus a null section header. That is
enough for architecture detection, so tests never need a compiler.
"""

import struct
from collections.abc import Callable
from pathlib import Path

import pytest

from lambda_build.config import Settings

EM_X86_64 = 62
EM_AARCH64 = 183


def make_elf(machine: int, elfclass: int = 64) -> bytes:
    """Build a minimal little-endian ELF executable image."""
    ident = b"\x7fELF" + bytes([2 if elfclass == 64 else 1, 1, 1, 0, 0]) + bytes(7)
    if elfclass == 64:
        header = struct.pack(
            "<HHIQQQIHHHHHH",
            2,  # ET_EXEC
            machine,
            1,
            0,  # e_entry
            0,  # e_phoff
            64,  # e_shoff
            0,
            64,  # e_ehsize
            56,  # e_phentsize
            0,
            64,  # e_shentsize
            1,  # e_shnum
            0,  # e_shstrndx
        )
        return ident + header + bytes(64)
    header = struct.pack(
        "<HHIIIIIHHHHHH",
        2,
        machine,
        1,
        0,
        0,
        52,
        0,
        52,
        32,
        0,
        40,
        1,
        0,
    )
    return ident + header + bytes(40)


@pytest.fixture
def elf_image() -> Callable[..., bytes]:
    """Factory for synthetic ELF images."""
    return make_elf


@pytest.fixture
def arm64_elf() -> bytes:
    """A 64-bit ARM executable image."""
    return make_elf(EM_AARCH64)


@pytest.fixture
def x86_64_elf() -> bytes:
    """A 64-bit x86 executable image."""
    return make_elf(EM_X86_64)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary project directory."""
    return Settings(
        target_dir=tmp_path / "target",
        manifest_path=tmp_path / "Cargo.toml",
    )
