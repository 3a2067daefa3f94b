"""Host information for the dashboard: OS, kernel, shell, uptime, managers."""
import logging
import os
import platform
import re
import subprocess
import time
from collections import Counter
from pathlib import Path
from typing import Callable

import psutil

from models import PackageManagerStatus, PackageManagerType, SystemInfo, SystemStats
from services.packages import collect_packages, run_command

logger = logging.getLogger("lph.system")

OS_RELEASE = Path("/etc/os-release")

# Binary probed with --version to detect each manager
MANAGER_BINARIES: dict[PackageManagerType, str] = {
    PackageManagerType.APT: "apt",
    PackageManagerType.YUM: "yum",
    PackageManagerType.PACMAN: "pacman",
    PackageManagerType.SNAP: "snap",
    PackageManagerType.FLATPAK: "flatpak",
    PackageManagerType.BREW: "brew",
}

_VERSION_RE = re.compile(r"version\s+v?(\d+(?:\.\d+)+)", re.IGNORECASE)
_DOTTED_RE = re.compile(r"(\d+(?:\.\d+)+)")


def parse_version(output: str) -> str | None:
    """First ``version X.Y`` in --version output, else the first dotted number."""
    match = _VERSION_RE.search(output) or _DOTTED_RE.search(output)
    return match.group(1) if match else None


def _os_name() -> str:
    if platform.system() != "Linux":
        return f"{platform.system()} {platform.machine()}"
    try:
        for line in OS_RELEASE.read_text(encoding="utf-8", errors="ignore").splitlines():
            key, _, value = line.partition("=")
            if key == "PRETTY_NAME":
                return value.strip().strip('"') or "Linux"
    except OSError:
        pass
    return "Linux"


def _uptime() -> str:
    try:
        seconds = time.time() - psutil.boot_time()
    except (OSError, RuntimeError):
        return "Unknown"
    days = int(seconds // 86400)
    hours = int((seconds % 86400) // 3600)
    return f"{days} days, {hours} hours"


def get_package_manager_status(
    run: Callable[[list[str]], str] = run_command,
) -> list[PackageManagerStatus]:
    statuses = []
    for manager, binary in MANAGER_BINARIES.items():
        try:
            output = run([binary, "--version"])
        except (OSError, subprocess.CalledProcessError):
            statuses.append(PackageManagerStatus(name=manager, available=False))
            continue
        statuses.append(PackageManagerStatus(
            name=manager,
            available=True,
            version=parse_version(output),
        ))
    return statuses


def get_system_info(run: Callable[[list[str]], str] = run_command) -> SystemInfo:
    managers = [s.name for s in get_package_manager_status(run) if s.available]
    return SystemInfo(
        os=_os_name(),
        kernel=platform.release() or "Unknown",
        shell=os.environ.get("SHELL") or "/bin/bash",
        uptime=_uptime(),
        managers=managers,
    )


def get_disk_usage(path: str = "/") -> str:
    try:
        usage = psutil.disk_usage(path)
    except OSError as exc:
        logger.warning("disk usage of %s unavailable: %s", path, exc)
        return "Unknown"
    return f"{round(usage.percent)}%"


def get_system_stats(run: Callable[[list[str]], str] = run_command) -> SystemStats:
    packages = collect_packages(run)
    info = get_system_info(run)
    counts = Counter(p.manager.value for p in packages)
    return SystemStats(
        total_packages=len(packages),
        package_counts=dict(counts),
        package_managers=len(info.managers),
        disk_usage=get_disk_usage(),
        system_info=info,
    )
