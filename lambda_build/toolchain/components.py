"""Rust target component management.

Makes sure the host compiler has the standard library for a target,
adding it with rustup when it is missing.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from lambda_build.errors import ToolchainUnavailableError
from lambda_build.toolchain.rustc import sysroot as rustc_sysroot

logger = logging.getLogger(__name__)

# rustup can only manage toolchains it distributes
RUSTUP_CHANNELS = frozenset({"stable", "beta", "nightly"})


def is_target_installed(target: str, sysroot: Path) -> bool:
    """Check whether the sysroot contains the standard library for target."""
    return (sysroot / "lib" / "rustlib" / target).is_dir()


def install_target(
    target: str,
    host_triple: str,
    release_channel: str,
    rustup: str = "rustup",
) -> None:
    """Add a target component with rustup.

    Raises:
        ToolchainUnavailableError: If rustup is missing or the install fails.
    """
    toolchain = f"{release_channel}-{host_triple}"
    cmd = [rustup, "target", "add", "--toolchain", toolchain, target]
    logger.info("Installing target component %s for toolchain %s", target, toolchain)
    try:
        subprocess.run(cmd, capture_output=True, text=True, check=True)
    except FileNotFoundError as e:
        raise ToolchainUnavailableError(
            f"{rustup} not found; install the {target} target manually",
            target=target,
        ) from e
    except subprocess.CalledProcessError as e:
        raise ToolchainUnavailableError(
            f"Failed to install target {target}: {(e.stderr or '').strip()}",
            target=target,
        ) from e


def ensure_target_available(
    target: str,
    host_triple: str,
    release_channel: str,
    *,
    rustc: str = "rustc",
    rustup: str = "rustup",
    auto_install: bool = True,
) -> None:
    """Guarantee the host compiler can build for target.

    Calling this when the component is already installed is a no-op.

    Args:
        target: Normalized target triple.
        host_triple: Host compiler triple.
        release_channel: Host compiler channel.
        rustc: rustc executable.
        rustup: rustup executable.
        auto_install: Install the component when missing.

    Raises:
        ToolchainUnavailableError: If the component is missing and cannot be installed.
    """
    root = rustc_sysroot(rustc)
    if is_target_installed(target, root):
        logger.debug("Target component %s already installed in %s", target, root)
        return

    if release_channel not in RUSTUP_CHANNELS:
        raise ToolchainUnavailableError(
            f"Target {target} is not installed and the {release_channel} "
            "toolchain is not managed by rustup",
            target=target,
        )
    if not auto_install:
        raise ToolchainUnavailableError(
            f"Target {target} is not installed, run "
            f"`rustup target add {target}` first",
            target=target,
        )

    install_target(target, host_triple, release_channel, rustup=rustup)

    if not is_target_installed(target, rustc_sysroot(rustc)):
        raise ToolchainUnavailableError(
            f"Target {target} still unavailable after installation",
            target=target,
        )


__all__ = [
    "RUSTUP_CHANNELS",
    "ensure_target_available",
    "install_target",
    "is_target_installed",
]
