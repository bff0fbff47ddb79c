"""Unit tests for edidrw.driver.manager host checks."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from edidrw.driver import manager as manager_module
from edidrw.driver.manager import I2cDriverManager, PrerequisiteReport
from edidrw.exceptions import MissingToolError, PrivilegeError


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def mgr() -> I2cDriverManager:
    return I2cDriverManager()


@pytest.fixture()
def fake_dev(tmp_path: Path, monkeypatch) -> Path:
    """Fake /dev and /sys/class/i2c-dev trees with two adapters."""
    dev = tmp_path / "dev"
    dev.mkdir()
    for name in ("i2c-10", "i2c-2", "tty0", "i2c-foo"):
        (dev / name).touch()

    sysfs = tmp_path / "sys"
    (sysfs / "i2c-2").mkdir(parents=True)
    (sysfs / "i2c-2" / "name").write_text("i915 gmbus dpb\n")

    monkeypatch.setattr(manager_module, "DEV_DIR", dev)
    monkeypatch.setattr(manager_module, "SYS_I2C_DEV", sysfs)
    return dev


@pytest.fixture()
def proc_modules(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "modules"
    monkeypatch.setattr(manager_module, "PROC_MODULES", path)
    return path


# ---------------------------------------------------------------------------
# PrerequisiteReport
# ---------------------------------------------------------------------------

class TestPrerequisiteReport:
    def test_supported_platform_without_items(self):
        report = PrerequisiteReport(items=(), is_supported_platform=True)
        assert report.all_satisfied is True

    def test_unsupported_platform_fails(self):
        report = PrerequisiteReport(items=(), is_supported_platform=False)
        assert report.all_satisfied is False


# ---------------------------------------------------------------------------
# Privilege and tools
# ---------------------------------------------------------------------------

class TestPrivilege:
    @patch("edidrw.driver.manager.os.geteuid", return_value=0)
    @patch("edidrw.driver.manager.sys")
    def test_root(self, mock_sys, mock_euid, mgr):
        mock_sys.platform = "linux"
        assert mgr.is_root() is True
        mgr.require_root()

    @patch("edidrw.driver.manager.os.geteuid", return_value=1000)
    @patch("edidrw.driver.manager.sys")
    def test_not_root(self, mock_sys, mock_euid, mgr):
        mock_sys.platform = "linux"
        with pytest.raises(PrivilegeError, match="root"):
            mgr.require_root()

    @patch("edidrw.driver.manager.sys")
    def test_non_linux_is_never_root(self, mock_sys, mgr):
        mock_sys.platform = "darwin"
        assert mgr.is_root() is False


class TestCheckTools:
    @patch("edidrw.transport.i2ctools.shutil.which")
    def test_missing_i2cset(self, mock_which, mgr):
        mock_which.side_effect = lambda tool: None if tool == "i2cset" else f"/usr/sbin/{tool}"
        with pytest.raises(MissingToolError, match="i2cset"):
            mgr.check_tools()

    @patch("edidrw.transport.i2ctools.shutil.which", return_value="/usr/sbin/tool")
    def test_all_present(self, mock_which, mgr):
        mgr.check_tools()


# ---------------------------------------------------------------------------
# Module loading
# ---------------------------------------------------------------------------

class TestModuleLoaded:
    @patch("edidrw.driver.manager.sys")
    def test_loaded(self, mock_sys, mgr, proc_modules):
        mock_sys.platform = "linux"
        proc_modules.write_text(
            "snd 110592 0 - Live 0x0000000000000000\n"
            "i2c_dev 24576 0 - Live 0x0000000000000000\n"
        )
        assert mgr.is_module_loaded() is True

    @patch("edidrw.driver.manager.sys")
    def test_not_loaded(self, mock_sys, mgr, proc_modules):
        mock_sys.platform = "linux"
        proc_modules.write_text("snd 110592 0 - Live 0x0000000000000000\n")
        assert mgr.is_module_loaded() is False

    @patch("edidrw.driver.manager.sys")
    def test_unreadable(self, mock_sys, mgr, proc_modules):
        mock_sys.platform = "linux"
        assert mgr.is_module_loaded() is False


class TestLoadModules:
    def test_already_loaded_is_noop(self, mgr):
        with patch.object(mgr, "is_module_loaded", return_value=True), \
                patch("edidrw.driver.manager.subprocess.run") as mock_run:
            result = mgr.load_modules()
        assert result.success is True
        assert "already loaded" in result.output
        mock_run.assert_not_called()

    @patch("edidrw.driver.manager.subprocess.run")
    @patch("edidrw.driver.manager.shutil.which", return_value="/sbin/modprobe")
    def test_runs_modprobe(self, mock_which, mock_run, mgr):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="", stderr=""
        )
        with patch.object(mgr, "is_module_loaded", return_value=False):
            result = mgr.load_modules()

        assert result.success is True
        assert mock_run.call_args[0][0] == ["/sbin/modprobe", "i2c-dev"]

    @patch("edidrw.driver.manager.subprocess.run")
    @patch("edidrw.driver.manager.shutil.which", return_value="/sbin/modprobe")
    def test_failure_is_tolerated(self, mock_which, mock_run, mgr):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="",
            stderr="modprobe: FATAL: Module i2c-dev not found.\n",
        )
        with patch.object(mgr, "is_module_loaded", return_value=False):
            result = mgr.load_modules()

        assert result.success is False
        assert "not found" in result.error

    @patch("edidrw.driver.manager.subprocess.run")
    @patch("edidrw.driver.manager.shutil.which", return_value="/sbin/modprobe")
    def test_timeout(self, mock_which, mock_run, mgr):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="modprobe", timeout=30)
        with patch.object(mgr, "is_module_loaded", return_value=False):
            result = mgr.load_modules()

        assert result.success is False
        assert "timed out" in result.error

    @patch("edidrw.driver.manager.shutil.which", return_value=None)
    def test_no_modprobe(self, mock_which, mgr):
        with patch.object(mgr, "is_module_loaded", return_value=False):
            result = mgr.load_modules()
        assert result.success is False
        assert "modprobe not found" in result.error


# ---------------------------------------------------------------------------
# Buses
# ---------------------------------------------------------------------------

class TestListBuses:
    def test_sorted_numeric(self, mgr, fake_dev):
        buses = mgr.list_buses()
        assert [b.number for b in buses] == [2, 10]
        assert buses[0].device == str(fake_dev / "i2c-2")

    def test_adapter_names(self, mgr, fake_dev):
        names = {b.number: b.name for b in mgr.list_buses()}
        assert names == {2: "i915 gmbus dpb", 10: ""}

    def test_bus_exists(self, mgr, fake_dev):
        assert mgr.bus_exists(2) is True
        assert mgr.bus_exists(3) is False


# ---------------------------------------------------------------------------
# Prerequisites
# ---------------------------------------------------------------------------

class TestCheckPrerequisites:
    @patch("edidrw.driver.manager.sys")
    def test_unsupported_platform(self, mock_sys, mgr):
        mock_sys.platform = "darwin"
        report = mgr.check_prerequisites()
        assert report.is_supported_platform is False
        assert not report.all_satisfied

    @patch("edidrw.driver.manager.find_missing_tools", return_value=[])
    @patch("edidrw.driver.manager.sys")
    def test_all_satisfied(self, mock_sys, mock_tools, mgr, fake_dev):
        mock_sys.platform = "linux"
        with patch.object(mgr, "is_root", return_value=True), \
                patch.object(mgr, "is_module_loaded", return_value=True):
            report = mgr.check_prerequisites(bus=2)

        assert report.all_satisfied
        assert [p.name for p in report.items] == [
            "Root Access", "Kernel Module", "i2c-tools", "Bus Node",
        ]

    @patch("edidrw.driver.manager.find_missing_tools", return_value=["i2cget"])
    @patch("edidrw.driver.manager.sys")
    def test_reports_missing(self, mock_sys, mock_tools, mgr, fake_dev):
        mock_sys.platform = "linux"
        with patch.object(mgr, "is_root", return_value=False), \
                patch.object(mgr, "is_module_loaded", return_value=False):
            report = mgr.check_prerequisites(bus=5)

        missing = {p.name for p in report.missing}
        assert missing == {"Root Access", "i2c-tools", "Bus Node"}
        assert not report.all_satisfied
