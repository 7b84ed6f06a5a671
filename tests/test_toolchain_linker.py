"""Tests for toolchain/linker.py module.

PATH lookups and installers are mocked.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from lambda_build.errors import LinkerUnavailableError
from lambda_build.toolchain.linker import (
    CARGO_ZIGBUILD,
    ZIG,
    ensure_zig_linker,
    zig_available,
    zigbuild_available,
)

MODULE = "lambda_build.toolchain.linker"


class TestZigAvailable:
    """Tests for zig_available function."""

    def test_zig_on_path(self):
        with patch(f"{MODULE}.shutil.which", return_value="/usr/bin/zig"):
            assert zig_available()

    def test_ziglang_package(self):
        """Should fall back to `python -m ziglang`."""
        with (
            patch(f"{MODULE}.shutil.which", return_value=None),
            patch(f"{MODULE}.subprocess.run", return_value=MagicMock(returncode=0)),
        ):
            assert zig_available()

    def test_not_available(self):
        with (
            patch(f"{MODULE}.shutil.which", return_value=None),
            patch(f"{MODULE}.subprocess.run", return_value=MagicMock(returncode=1)),
        ):
            assert not zig_available()


class TestZigbuildAvailable:
    """Tests for zigbuild_available function."""

    def test_on_path(self):
        with patch(f"{MODULE}.shutil.which", return_value="/bin/cargo-zigbuild") as which:
            assert zigbuild_available()
        which.assert_called_once_with(CARGO_ZIGBUILD)


class TestEnsureZigLinker:
    """Tests for ensure_zig_linker function."""

    def test_noop_when_installed(self):
        with (
            patch(f"{MODULE}.zig_available", return_value=True),
            patch(f"{MODULE}.zigbuild_available", return_value=True),
            patch(f"{MODULE}.subprocess.run") as mock_run,
        ):
            ensure_zig_linker()
        mock_run.assert_not_called()

    def test_installs_cargo_zigbuild(self):
        with (
            patch(f"{MODULE}.zig_available", return_value=True),
            patch(f"{MODULE}.zigbuild_available", side_effect=[False, True]),
            patch(f"{MODULE}.subprocess.run") as mock_run,
        ):
            ensure_zig_linker(cargo="/opt/cargo")

        cmd = mock_run.call_args[0][0]
        assert cmd[:2] == ["/opt/cargo", "install"]
        assert CARGO_ZIGBUILD in cmd

    def test_installs_ziglang(self):
        with (
            patch(f"{MODULE}.zig_available", side_effect=[False, True]),
            patch(f"{MODULE}.zigbuild_available", return_value=True),
            patch(f"{MODULE}.subprocess.run") as mock_run,
        ):
            ensure_zig_linker()

        cmd = mock_run.call_args[0][0]
        assert cmd[-3:] == ["pip", "install", "ziglang"]

    def test_install_failure(self):
        error = subprocess.CalledProcessError(101, ["cargo", "install"])
        with (
            patch(f"{MODULE}.zig_available", return_value=True),
            patch(f"{MODULE}.zigbuild_available", return_value=False),
            patch(f"{MODULE}.subprocess.run", side_effect=error),
        ):
            with pytest.raises(LinkerUnavailableError) as exc_info:
                ensure_zig_linker()
        assert exc_info.value.component == CARGO_ZIGBUILD

    def test_still_missing_after_install(self):
        with (
            patch(f"{MODULE}.zig_available", return_value=False),
            patch(f"{MODULE}.zigbuild_available", return_value=True),
            patch(f"{MODULE}.subprocess.run"),
        ):
            with pytest.raises(LinkerUnavailableError) as exc_info:
                ensure_zig_linker()
        assert exc_info.value.component == ZIG

    def test_auto_install_disabled(self):
        with (
            patch(f"{MODULE}.zig_available", return_value=False),
            patch(f"{MODULE}.zigbuild_available", return_value=True),
            patch(f"{MODULE}.subprocess.run") as mock_run,
        ):
            with pytest.raises(LinkerUnavailableError) as exc_info:
                ensure_zig_linker(auto_install=False)
        mock_run.assert_not_called()
        assert "--disable-zig-linker" in str(exc_info.value)
