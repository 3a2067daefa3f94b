import subprocess

from models import PackageManagerType
from services import system


def test_parse_version():
    assert system.parse_version("apt 2.6.1 (amd64)") == "2.6.1"
    assert system.parse_version("Flatpak 1.14.4") == "1.14.4"
    assert system.parse_version("Homebrew version v4.2.0") == "4.2.0"
    assert system.parse_version("no digits here") is None


def _run(cmd):
    if cmd[0] == "apt":
        return "apt 2.6.1 (amd64)\n"
    if cmd[0] == "snap":
        return "snap    2.61.1\nsnapd   2.61.1\n"
    if cmd[0] == "yum":
        raise subprocess.CalledProcessError(1, cmd)
    raise FileNotFoundError(cmd[0])


def test_package_manager_status():
    statuses = {s.name: s for s in system.get_package_manager_status(_run)}

    assert set(statuses) == set(PackageManagerType)
    assert statuses[PackageManagerType.APT].available is True
    assert statuses[PackageManagerType.APT].version == "2.6.1"
    assert statuses[PackageManagerType.SNAP].version == "2.61.1"
    assert statuses[PackageManagerType.YUM].available is False
    assert statuses[PackageManagerType.BREW].available is False
    assert statuses[PackageManagerType.BREW].version is None


def test_system_info_lists_available_managers():
    info = system.get_system_info(_run)
    assert info.managers == [PackageManagerType.APT, PackageManagerType.SNAP]
    assert info.kernel
    assert info.os


def test_disk_usage_percentage(tmp_path):
    assert system.get_disk_usage(str(tmp_path)).endswith("%")
    assert system.get_disk_usage(str(tmp_path / "missing")) == "Unknown"


def test_system_stats_counts_by_manager():
    def run(cmd):
        if cmd[0] == "dpkg-query":
            return "bash|5.2|10|shell\nvim|9.0|20|editor\n"
        if cmd[-1] != "--version":
            raise FileNotFoundError(cmd[0])
        return _run(cmd)

    stats = system.get_system_stats(run)
    assert stats.total_packages == 2
    assert stats.package_counts == {"APT": 2}
    assert stats.package_managers == 2
    assert stats.system_info.managers == [PackageManagerType.APT, PackageManagerType.SNAP]
