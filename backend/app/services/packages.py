"""Package inventory: asks each package manager what is installed.

Nothing is cached or persisted: every call runs the manager binaries again.
Each manager is isolated: a missing binary, a non-zero exit or a parse
failure drops that manager's packages and nothing else.

All calls here block; async callers should use asyncio.to_thread().
"""
import logging
import subprocess
from typing import Callable

from models import Package, PackageManagerType

logger = logging.getLogger("lph.packages")

ALL_MANAGERS = "ALL"


def run_command(cmd: list[str]) -> str:
    """Run a manager binary and return its stdout.

    Raises FileNotFoundError if the binary is absent and
    subprocess.CalledProcessError on a non-zero exit.
    """
    result = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def _format_kib(value: str) -> str | None:
    """dpkg Installed-Size (KiB) → '12.3 MB'."""
    if not value.isdigit():
        return None
    size = float(value) * 1024
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return None


# ---------------------------------------------------------------------------
# Parsers: text output → Package records
# ---------------------------------------------------------------------------
def parse_dpkg(output: str) -> list[Package]:
    """``Package|Version|Installed-Size|Summary`` lines from dpkg-query."""
    packages = []
    for line in output.splitlines():
        if not line.strip():
            continue
        parts = line.split("|")
        if len(parts) < 2 or not parts[0]:
            continue
        name = parts[0]
        size = _format_kib(parts[2]) if len(parts) > 2 else None
        packages.append(Package(
            id=f"apt-{name}-{len(packages)}",
            name=name,
            version=parts[1] or "Unknown",
            description="|".join(parts[3:]) or "No description",
            manager=PackageManagerType.APT,
            size=size,
        ))
    return packages


def parse_rpm(output: str) -> list[Package]:
    """``name|version|summary`` lines from dnf repoquery or rpm -qa."""
    packages = []
    for line in output.splitlines():
        if "|" not in line:
            continue  # dnf banners, "Installed Packages" headers
        parts = line.strip().split("|")
        if not parts[0]:
            continue
        packages.append(Package(
            id=f"yum-{parts[0]}-{len(packages)}",
            name=parts[0],
            version=parts[1] or "Unknown",
            description="|".join(parts[2:]) or "No description",
            manager=PackageManagerType.YUM,
        ))
    return packages


def parse_pacman(output: str) -> list[Package]:
    """``name version`` lines from pacman -Q."""
    packages = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        packages.append(Package(
            id=f"pacman-{parts[0]}-{len(packages)}",
            name=parts[0],
            version=parts[1],
            description="Arch Linux package",
            manager=PackageManagerType.PACMAN,
        ))
    return packages


def parse_snap(output: str) -> list[Package]:
    """``snap list`` table: Name Version Rev Tracking Publisher Notes."""
    packages = []
    for line in output.splitlines()[1:]:
        parts = line.split()
        if len(parts) < 2:
            continue
        notes = " ".join(parts[5:])
        packages.append(Package(
            id=f"snap-{parts[0]}-{len(packages)}",
            name=parts[0],
            version=parts[1],
            description=notes if notes and notes != "-" else "Snap package",
            manager=PackageManagerType.SNAP,
        ))
    return packages


def parse_flatpak(output: str) -> list[Package]:
    """Tab-separated ``application, version, name`` from flatpak list --columns."""
    packages = []
    for line in output.splitlines():
        parts = [p.strip() for p in line.split("\t")]
        if not parts[0] or parts[0] == "Application ID":
            continue
        version = parts[1] if len(parts) > 1 and parts[1] else "Unknown"
        label = parts[2] if len(parts) > 2 and parts[2] else ""
        packages.append(Package(
            id=f"flatpak-{parts[0]}-{len(packages)}",
            name=parts[0],
            version=version,
            description=label or "Flatpak package",
            manager=PackageManagerType.FLATPAK,
        ))
    return packages


# ---------------------------------------------------------------------------
# Collectors: one per manager
# ---------------------------------------------------------------------------
def collect_apt(run: Callable[[list[str]], str] = run_command) -> list[Package]:
    return parse_dpkg(run([
        "dpkg-query", "-W",
        "-f=${Package}|${Version}|${Installed-Size}|${binary:Summary}\n",
    ]))


def collect_yum(run: Callable[[list[str]], str] = run_command) -> list[Package]:
    try:
        output = run([
            "dnf", "repoquery", "--installed", "--qf", "%{name}|%{version}|%{summary}\n",
        ])
    except (OSError, subprocess.CalledProcessError):
        output = run(["rpm", "-qa", "--queryformat", "%{NAME}|%{VERSION}|%{SUMMARY}\n"])
    return parse_rpm(output)


def collect_pacman(run: Callable[[list[str]], str] = run_command) -> list[Package]:
    return parse_pacman(run(["pacman", "-Q"]))


def collect_snap(run: Callable[[list[str]], str] = run_command) -> list[Package]:
    return parse_snap(run(["snap", "list"]))


def collect_flatpak(run: Callable[[list[str]], str] = run_command) -> list[Package]:
    return parse_flatpak(run(["flatpak", "list", "--columns=application,version,name"]))


COLLECTORS: dict[PackageManagerType, Callable[..., list[Package]]] = {
    PackageManagerType.APT: collect_apt,
    PackageManagerType.YUM: collect_yum,
    PackageManagerType.PACMAN: collect_pacman,
    PackageManagerType.SNAP: collect_snap,
    PackageManagerType.FLATPAK: collect_flatpak,
}


def collect_packages(run: Callable[[list[str]], str] = run_command) -> list[Package]:
    """Installed packages from every manager, in APT, YUM, PACMAN, SNAP, FLATPAK order."""
    packages: list[Package] = []
    for manager, collector in COLLECTORS.items():
        try:
            found = collector(run)
        except FileNotFoundError:
            logger.debug("%s not available", manager.value)
            continue
        except subprocess.CalledProcessError as exc:
            logger.warning(
                "%s query failed (exit %s): %s",
                manager.value, exc.returncode, (exc.stderr or "").strip()[:200],
            )
            continue
        except Exception as exc:
            logger.error("Error getting %s packages: %s", manager.value, exc, exc_info=True)
            continue
        logger.debug("%s: %d packages", manager.value, len(found))
        packages.extend(found)
    return packages


def search_packages(packages: list[Package], query: str) -> list[Package]:
    """Case-insensitive substring match on name or description."""
    needle = query.lower()
    return [
        p for p in packages
        if needle in p.name.lower() or needle in p.description.lower()
    ]


def filter_by_manager(packages: list[Package], manager: str) -> list[Package]:
    """Exact manager match; ``ALL`` returns the list unchanged."""
    if manager == ALL_MANAGERS:
        return packages
    return [p for p in packages if p.manager.value == manager]

