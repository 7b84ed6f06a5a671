"""Build runner for executing cargo builds.

This module handles:
- Validating the --bin filter against the manifest's binaries
- Composing the `cargo zigbuild` / `cargo build` command
- Composing the build environment (symbol stripping for release)
- Executing the build synchronously with subprocess
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from lambda_build.errors import BuildSpawnError, UnknownBinaryTargetError
from lambda_build.types import BuildRequest, ResolvedTarget

logger = logging.getLogger(__name__)

STRIP_SYMBOLS_FLAG = "-C strip=symbols"


@dataclass
class BuildResult:
    """Result of a build execution.

    Attributes:
        success: Whether the build succeeded.
        exit_code: Process exit code, or None if the process died by a signal.
        started_at: Build start time.
        finished_at: Build finish time.
        command: The command that was executed.
    """

    success: bool
    exit_code: int | None
    started_at: datetime
    finished_at: datetime
    command: str


def validate_binary_filter(requested: Iterable[str], discovered: Iterable[str]) -> None:
    """Check that every requested binary exists in the manifest.

    Args:
        requested: Names given with --bin.
        discovered: Binary names declared by the manifest.

    Raises:
        UnknownBinaryTargetError: For the first requested name not declared.
    """
    known = set(discovered)
    for name in requested:
        if name not in known:
            raise UnknownBinaryTargetError(name)


def compose_build_command(
    target: ResolvedTarget,
    request: BuildRequest,
    cargo: str = "cargo",
) -> list[str]:
    """Compose the cargo build command for a resolved target.

    Args:
        target: Resolved build target.
        request: The build request.
        cargo: cargo executable.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    if request.disable_zig_linker:
        # plain cargo does not understand glibc-versioned triples
        cmd = [cargo, "build", "--target", target.platform_key]
    else:
        cmd = [cargo, "zigbuild", "--target", target.triple]

    if request.release:
        cmd.append("--release")
    if request.profile:
        cmd.extend(["--profile", request.profile])

    for name in request.bins:
        cmd.extend(["--bin", name])

    cmd.extend(["--manifest-path", str(request.manifest_path)])
    cmd.extend(request.extra_args)
    return cmd


def compose_build_env(
    request: BuildRequest,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Compose the environment for the build process.

    Release builds strip symbols from the produced binaries.

    Args:
        request: The build request.
        base_env: Environment to start from (default: os.environ).

    Returns:
        Environment dictionary.
    """
    env = dict(os.environ if base_env is None else base_env)
    if request.release:
        existing = env.get("RUSTFLAGS", "").strip()
        env["RUSTFLAGS"] = f"{existing} {STRIP_SYMBOLS_FLAG}".strip()
    return env


def run_build(
    command: list[str],
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> BuildResult:
    """Execute a build and wait for it to finish.

    Output goes straight to this process's stdout/stderr. There is no
    timeout: a hanging compiler hangs the run.

    Args:
        command: Command to execute.
        env: Environment for the process (default: inherited).
        cwd: Working directory.

    Returns:
        BuildResult with execution details.

    Raises:
        BuildSpawnError: If the process cannot be started.
    """
    cmd_str = shlex.join(command)
    logger.info("Executing build: %s", cmd_str)

    started_at = datetime.now(timezone.utc)
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            check=False,
        )
    except OSError as e:
        raise BuildSpawnError(f"Failed to run {command[0]}: {e}") from e
    finished_at = datetime.now(timezone.utc)

    # Negative return codes mean the child was killed by a signal
    exit_code = result.returncode if result.returncode >= 0 else None
    success = result.returncode == 0
    duration = (finished_at - started_at).total_seconds()
    if success:
        logger.info("Build finished in %.1fs", duration)
    else:
        logger.error("Build failed with exit code %s after %.1fs", result.returncode, duration)

    return BuildResult(
        success=success,
        exit_code=exit_code,
        started_at=started_at,
        finished_at=finished_at,
        command=cmd_str,
    )


__all__ = [
    "STRIP_SYMBOLS_FLAG",
    "BuildResult",
    "compose_build_command",
    "compose_build_env",
    "run_build",
    "validate_binary_filter",
]
