"""Host compiler facts.

Reads the host triple and release channel from `rustc -vV`, and the
compiler sysroot from `rustc --print sysroot`.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from lambda_build.errors import ToolchainUnavailableError
from lambda_build.types import HostFacts

logger = logging.getLogger(__name__)


def release_channel(release: str) -> str:
    """Derive the release channel from a rustc release string.

    Args:
        release: e.g. 1.75.0, 1.76.0-beta.3, 1.77.0-nightly.

    Returns:
        stable, beta, nightly or dev.
    """
    if "-nightly" in release:
        return "nightly"
    if "-beta" in release:
        return "beta"
    if "-dev" in release:
        return "dev"
    return "stable"


def parse_version_verbose(output: str) -> HostFacts:
    """Parse the output of `rustc -vV`.

    Args:
        output: Text printed by `rustc -vV`.

    Returns:
        HostFacts with host triple and release channel.

    Raises:
        ToolchainUnavailableError: If host or release lines are missing.
    """
    fields: dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition(":")
        if sep:
            fields[key.strip()] = value.strip()

    host = fields.get("host")
    release = fields.get("release")
    if not host or not release:
        raise ToolchainUnavailableError(
            "Unexpected `rustc -vV` output: missing host or release"
        )

    return HostFacts(
        host_triple=host,
        release_channel=release_channel(release),
        release=release,
    )


def _run_rustc(rustc: str, *args: str) -> str:
    cmd = [rustc, *args]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise ToolchainUnavailableError(
            f"{rustc} not found, install Rust from https://rustup.rs/"
        ) from e
    except subprocess.CalledProcessError as e:
        raise ToolchainUnavailableError(
            f"{' '.join(cmd)} failed: {(e.stderr or '').strip()}"
        ) from e
    return result.stdout


def read_host_facts(rustc: str = "rustc") -> HostFacts:
    """Read host facts from the installed compiler.

    Raises:
        ToolchainUnavailableError: If rustc is missing or fails.
    """
    facts = parse_version_verbose(_run_rustc(rustc, "-vV"))
    logger.debug(
        "Host compiler: %s (%s channel) on %s",
        facts.release,
        facts.release_channel,
        facts.host_triple,
    )
    return facts


def sysroot(rustc: str = "rustc") -> Path:
    """Return the sysroot of the active compiler.

    Raises:
        ToolchainUnavailableError: If rustc is missing or fails.
    """
    return Path(_run_rustc(rustc, "--print", "sysroot").strip())


__all__ = [
    "parse_version_verbose",
    "read_host_facts",
    "release_channel",
    "sysroot",
]
