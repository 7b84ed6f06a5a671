"""Rust toolchain module.

This module handles:
- Reading host compiler facts (triple, release channel)
- Installing missing target components with rustup
- Installing the zig linker helper
- Discovering binary targets from the manifest

CargoToolchain bundles these behind one object so the build pipeline
can be exercised against a fake toolchain.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from lambda_build.toolchain.components import ensure_target_available
from lambda_build.toolchain.linker import ensure_zig_linker
from lambda_build.toolchain.metadata import binary_targets
from lambda_build.toolchain.rustc import read_host_facts

if TYPE_CHECKING:
    from lambda_build.config import Settings
    from lambda_build.types import HostFacts


class CargoToolchain:
    """Toolchain operations backed by the real rustc, rustup and cargo."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def host_facts(self) -> HostFacts:
        return read_host_facts(self.settings.rustc_command)

    def ensure_target(self, target: str, host: HostFacts) -> None:
        ensure_target_available(
            target,
            host.host_triple,
            host.release_channel,
            rustc=self.settings.rustc_command,
            rustup=self.settings.rustup_command,
            auto_install=self.settings.auto_install,
        )

    def ensure_linker(self) -> None:
        ensure_zig_linker(
            cargo=self.settings.cargo_command,
            auto_install=self.settings.auto_install,
        )

    def binary_targets(self, manifest_path: Path) -> list[str]:
        return binary_targets(manifest_path, cargo=self.settings.cargo_command)


__all__ = ["CargoToolchain"]
