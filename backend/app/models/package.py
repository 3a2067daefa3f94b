"""Package inventory and host information types.

Packages are derived data, recomputed on every request; ``id`` is only
stable within a single collection pass.
"""
import enum

from models.base import CamelModel


class PackageManagerType(str, enum.Enum):
    APT = "APT"
    YUM = "YUM"
    PACMAN = "PACMAN"
    SNAP = "SNAP"
    FLATPAK = "FLATPAK"
    BREW = "BREW"


class Package(CamelModel):
    id: str
    name: str
    version: str
    description: str
    manager: PackageManagerType
    install_date: str | None = None
    size: str | None = None
    usage: list[str] | None = None


class SystemInfo(CamelModel):
    os: str
    kernel: str
    shell: str
    uptime: str
    managers: list[PackageManagerType] = []


class PackageManagerStatus(CamelModel):
    name: PackageManagerType
    available: bool
    version: str | None = None


class SystemStats(CamelModel):
    total_packages: int
    package_counts: dict[str, int]
    package_managers: int
    disk_usage: str
    system_info: SystemInfo
