"""Zig linker helper management.

Cross-compiling for Lambda links with Zig through the cargo-zigbuild
subcommand. This module detects both pieces and installs whichever is
missing:
- Zig, either as `zig` on PATH or as the `ziglang` Python distribution
- cargo-zigbuild, installed with `cargo install`
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys

from lambda_build.errors import LinkerUnavailableError

logger = logging.getLogger(__name__)

ZIG = "zig"
CARGO_ZIGBUILD = "cargo-zigbuild"


def zig_available() -> bool:
    """Check for Zig on PATH or as the ziglang Python package."""
    if shutil.which(ZIG):
        return True
    try:
        result = subprocess.run(
            [sys.executable, "-m", "ziglang", "version"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return False
    return result.returncode == 0


def zigbuild_available() -> bool:
    """Check for the cargo-zigbuild subcommand on PATH."""
    return shutil.which(CARGO_ZIGBUILD) is not None


def _install(component: str, cmd: list[str]) -> None:
    logger.info("Installing %s: %s", component, " ".join(cmd))
    try:
        subprocess.run(cmd, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise LinkerUnavailableError(
            component,
            f"Failed to install {component}: {e}",
        ) from e


def ensure_zig_linker(cargo: str = "cargo", auto_install: bool = True) -> None:
    """Guarantee Zig and cargo-zigbuild are installed.

    Calling this when both are present is a no-op.

    Args:
        cargo: cargo executable used to install cargo-zigbuild.
        auto_install: Install missing components.

    Raises:
        LinkerUnavailableError: If a component is missing and cannot be installed.
    """
    checks = [
        (ZIG, zig_available, [sys.executable, "-m", "pip", "install", "ziglang"]),
        (
            CARGO_ZIGBUILD,
            zigbuild_available,
            [cargo, "install", "--locked", CARGO_ZIGBUILD],
        ),
    ]
    for component, is_available, install_cmd in checks:
        if is_available():
            logger.debug("%s is installed", component)
            continue
        if not auto_install:
            raise LinkerUnavailableError(
                component,
                f"{component} is required to cross-compile, install it or "
                "use --disable-zig-linker",
            )
        _install(component, install_cmd)
        if not is_available():
            raise LinkerUnavailableError(
                component,
                f"{component} still unavailable after installation",
            )


__all__ = [
    "CARGO_ZIGBUILD",
    "ZIG",
    "ensure_zig_linker",
    "zig_available",
    "zigbuild_available",
]
