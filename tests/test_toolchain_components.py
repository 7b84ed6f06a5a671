"""Tests for toolchain/components.py module.

The sysroot is a temporary directory; rustup is mocked.
"""

import subprocess
from unittest.mock import patch

import pytest

from lambda_build.errors import ToolchainUnavailableError
from lambda_build.toolchain.components import (
    ensure_target_available,
    install_target,
    is_target_installed,
)

TARGET = "aarch64-unknown-linux-gnu"
HOST = "x86_64-unknown-linux-gnu"


@pytest.fixture
def sysroot(tmp_path):
    """A fake sysroot with only the host standard library."""
    root = tmp_path / "sysroot"
    (root / "lib" / "rustlib" / HOST).mkdir(parents=True)
    with patch("lambda_build.toolchain.components.rustc_sysroot", return_value=root):
        yield root


def _add_component(root):
    def _run(cmd, **kwargs):
        (root / "lib" / "rustlib" / cmd[-1]).mkdir(parents=True)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    return _run


class TestIsTargetInstalled:
    """Tests for is_target_installed function."""

    def test_installed(self, sysroot):
        assert is_target_installed(HOST, sysroot)

    def test_not_installed(self, sysroot):
        assert not is_target_installed(TARGET, sysroot)


class TestInstallTarget:
    """Tests for install_target function."""

    def test_rustup_command(self):
        with patch("lambda_build.toolchain.components.subprocess.run") as mock_run:
            install_target(TARGET, HOST, "stable")

        cmd = mock_run.call_args[0][0]
        assert cmd == [
            "rustup",
            "target",
            "add",
            "--toolchain",
            f"stable-{HOST}",
            TARGET,
        ]

    def test_rustup_missing(self):
        with patch(
            "lambda_build.toolchain.components.subprocess.run",
            side_effect=FileNotFoundError("rustup"),
        ):
            with pytest.raises(ToolchainUnavailableError) as exc_info:
                install_target(TARGET, HOST, "stable")
        assert exc_info.value.target == TARGET


class TestEnsureTargetAvailable:
    """Tests for ensure_target_available function."""

    def test_noop_when_installed(self, sysroot):
        """Should not call rustup when the component exists."""
        with patch("lambda_build.toolchain.components.subprocess.run") as mock_run:
            ensure_target_available(HOST, HOST, "stable")
        mock_run.assert_not_called()

    def test_installs_missing_target(self, sysroot):
        with patch(
            "lambda_build.toolchain.components.subprocess.run",
            side_effect=_add_component(sysroot),
        ) as mock_run:
            ensure_target_available(TARGET, HOST, "nightly")

        assert mock_run.call_count == 1
        assert f"nightly-{HOST}" in mock_run.call_args[0][0]
        assert is_target_installed(TARGET, sysroot)

    def test_idempotent(self, sysroot):
        """A second call after installation is a no-op."""
        with patch(
            "lambda_build.toolchain.components.subprocess.run",
            side_effect=_add_component(sysroot),
        ) as mock_run:
            ensure_target_available(TARGET, HOST, "stable")
            ensure_target_available(TARGET, HOST, "stable")
        assert mock_run.call_count == 1

    def test_install_failure(self, sysroot):
        error = subprocess.CalledProcessError(1, ["rustup"], stderr="network down")
        with patch("lambda_build.toolchain.components.subprocess.run", side_effect=error):
            with pytest.raises(ToolchainUnavailableError) as exc_info:
                ensure_target_available(TARGET, HOST, "stable")
        assert "network down" in str(exc_info.value)

    def test_still_missing_after_install(self, sysroot):
        with patch("lambda_build.toolchain.components.subprocess.run"):
            with pytest.raises(ToolchainUnavailableError):
                ensure_target_available(TARGET, HOST, "stable")

    def test_dev_channel_not_managed(self, sysroot):
        with patch("lambda_build.toolchain.components.subprocess.run") as mock_run:
            with pytest.raises(ToolchainUnavailableError):
                ensure_target_available(TARGET, HOST, "dev")
        mock_run.assert_not_called()

    def test_auto_install_disabled(self, sysroot):
        with patch("lambda_build.toolchain.components.subprocess.run") as mock_run:
            with pytest.raises(ToolchainUnavailableError) as exc_info:
                ensure_target_available(TARGET, HOST, "stable", auto_install=False)
        mock_run.assert_not_called()
        assert "rustup target add" in str(exc_info.value)
