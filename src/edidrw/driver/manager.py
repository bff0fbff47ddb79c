"""Host checks for I2C access: privilege, i2c-dev module, tools and bus nodes.

Loads the i2c-dev kernel module with modprobe when it is missing. Load
failures are reported, not raised, since the module may be built in.
"""

from __future__ import annotations

import os
import re
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from edidrw.exceptions import MissingToolError, PrivilegeError
from edidrw.transport.i2ctools import REQUIRED_TOOLS, find_missing_tools
from edidrw.utils.logging import get_logger

logger = get_logger(__name__)

MODULE_NAME = "i2c-dev"
PROC_MODULES = Path("/proc/modules")
DEV_DIR = Path("/dev")
SYS_I2C_DEV = Path("/sys/class/i2c-dev")
MODPROBE_TIMEOUT_S = 30

_BUS_NODE_RE = re.compile(r"^i2c-(\d+)$")


@dataclass(frozen=True)
class Prerequisite:
    """A single host prerequisite."""

    name: str
    description: str
    satisfied: bool
    detail: str = ""


@dataclass(frozen=True)
class PrerequisiteReport:
    """Full prerequisites check result."""

    items: tuple[Prerequisite, ...] = ()
    is_supported_platform: bool = False

    @property
    def all_satisfied(self) -> bool:
        return self.is_supported_platform and all(p.satisfied for p in self.items)

    @property
    def missing(self) -> tuple[Prerequisite, ...]:
        return tuple(p for p in self.items if not p.satisfied)


@dataclass(frozen=True)
class LoadResult:
    """Result of a module load attempt."""

    success: bool
    output: str = ""
    error: str = ""


@dataclass(frozen=True)
class I2cBusInfo:
    """An I2C adapter exposed under /dev."""

    number: int
    device: str
    name: str = ""


class I2cDriverManager:
    """Checks and prepares the host for userspace I2C access."""

    def __init__(self, module_name: str = MODULE_NAME) -> None:
        self._module_name = module_name

    @property
    def module_name(self) -> str:
        return self._module_name

    def is_root(self) -> bool:
        """Check if running as root. Returns False on non-Linux."""
        if sys.platform != "linux":
            return False
        return os.geteuid() == 0

    def require_root(self) -> None:
        if not self.is_root():
            raise PrivilegeError("This tool must be run as root")

    def check_tools(self) -> None:
        missing = find_missing_tools()
        if missing:
            raise MissingToolError(
                f"Required tools not found: {', '.join(missing)} "
                "(install the i2c-tools package)"
            )

    def is_module_loaded(self) -> bool:
        """Check /proc/modules for the i2c-dev module."""
        if sys.platform != "linux":
            return False
        # /proc/modules lists names with underscores.
        wanted = self._module_name.replace("-", "_")
        try:
            modules_text = PROC_MODULES.read_text()
            return any(
                line.split()[0] == wanted
                for line in modules_text.splitlines()
                if line.strip()
            )
        except (OSError, IndexError):
            return False

    def load_modules(self) -> LoadResult:
        """Run modprobe for the i2c-dev module if it is not loaded yet."""
        if self.is_module_loaded():
            return LoadResult(success=True, output=f"{self._module_name} is already loaded.")

        modprobe = shutil.which("modprobe")
        if modprobe is None:
            logger.warning("modprobe_not_found", module=self._module_name)
            return LoadResult(success=False, error="modprobe not found")

        logger.info("module_load_start", module=self._module_name)
        try:
            result = subprocess.run(
                [modprobe, self._module_name],
                capture_output=True,
                text=True,
                timeout=MODPROBE_TIMEOUT_S,
            )
        except subprocess.TimeoutExpired:
            logger.warning("module_load_timeout", module=self._module_name)
            return LoadResult(
                success=False,
                error=f"modprobe timed out after {MODPROBE_TIMEOUT_S} seconds.",
            )

        success = result.returncode == 0
        if success:
            logger.info("module_load_complete", module=self._module_name)
        else:
            logger.warning(
                "module_load_failed",
                module=self._module_name,
                return_code=result.returncode,
                stderr=result.stderr.strip(),
            )
        return LoadResult(
            success=success,
            output=result.stdout,
            error=result.stderr if not success else "",
        )

    def list_buses(self) -> list[I2cBusInfo]:
        """List /dev/i2c-N adapters, sorted by bus number."""
        if not DEV_DIR.exists():
            return []
        buses: list[I2cBusInfo] = []
        for node in DEV_DIR.iterdir():
            match = _BUS_NODE_RE.match(node.name)
            if match is None:
                continue
            buses.append(I2cBusInfo(
                number=int(match.group(1)),
                device=str(node),
                name=self._adapter_name(node.name),
            ))
        return sorted(buses, key=lambda b: b.number)

    def bus_exists(self, bus: int) -> bool:
        return (DEV_DIR / f"i2c-{bus}").exists()

    def check_prerequisites(self, bus: int | None = None) -> PrerequisiteReport:
        if sys.platform != "linux":
            return PrerequisiteReport(is_supported_platform=False)

        items: list[Prerequisite] = []

        is_root = self.is_root()
        items.append(Prerequisite(
            name="Root Access",
            description="Required for bus access",
            satisfied=is_root,
            detail="Running as root" if is_root else "Re-run with sudo",
        ))

        loaded = self.is_module_loaded()
        has_nodes = bool(self.list_buses())
        items.append(Prerequisite(
            name="Kernel Module",
            description=self._module_name,
            satisfied=loaded or has_nodes,
            detail="Loaded" if loaded else (
                "Built in (/dev/i2c-* present)" if has_nodes else
                f"Not loaded. Load with: sudo modprobe {self._module_name}"
            ),
        ))

        missing = find_missing_tools()
        items.append(Prerequisite(
            name="i2c-tools",
            description=" / ".join(REQUIRED_TOOLS),
            satisfied=not missing,
            detail="Found" if not missing else (
                f"Missing {', '.join(missing)}. Install with: sudo apt install i2c-tools"
            ),
        ))

        if bus is not None:
            exists = self.bus_exists(bus)
            items.append(Prerequisite(
                name="Bus Node",
                description=f"/dev/i2c-{bus}",
                satisfied=exists,
                detail="Present" if exists else "Not found",
            ))

        return PrerequisiteReport(items=tuple(items), is_supported_platform=True)

    def _adapter_name(self, node_name: str) -> str:
        name_file = SYS_I2C_DEV / node_name / "name"
        try:
            return name_file.read_text().strip()
        except OSError:
            return ""
