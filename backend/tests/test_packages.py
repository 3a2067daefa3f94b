import subprocess

import pytest

from models import Package, PackageManagerType
from services import packages

DPKG_OUTPUT = (
    "bash|5.2.15-2|7164|GNU Bourne Again SHell\n"
    "curl|7.88.1||command line tool for transferring data with URL syntax\n"
    "\n"
    "libfoo|1.0|12|\n"
)

SNAP_OUTPUT = """Name    Version   Rev    Tracking       Publisher   Notes
core22  20240111  1122   latest/stable  canonical✓  base
firefox 122.0     3600   latest/stable  mozilla✓    -
"""

FLATPAK_OUTPUT = "org.gimp.GIMP\t2.10.36\tGNU Image Manipulation Program\ncom.example.Bare\t\t\n"


def fake_runner(outputs):
    """Map the first argv element to stdout, an exception, or absence."""
    def run(cmd):
        result = outputs.get(cmd[0])
        if result is None:
            raise FileNotFoundError(cmd[0])
        if isinstance(result, Exception):
            raise result
        return result
    return run


def test_parse_dpkg():
    found = packages.parse_dpkg(DPKG_OUTPUT)

    assert [p.name for p in found] == ["bash", "curl", "libfoo"]
    assert found[0].id == "apt-bash-0"
    assert found[0].version == "5.2.15-2"
    assert found[0].size == "7.0 MB"
    assert found[0].description == "GNU Bourne Again SHell"
    assert found[1].size is None
    assert found[2].description == "No description"
    assert all(p.manager is PackageManagerType.APT for p in found)


def test_parse_rpm_skips_banners():
    output = "Last metadata expiration check: 0:01:02 ago\nbash|5.2.26|The GNU Bourne Again shell\n"
    found = packages.parse_rpm(output)
    assert len(found) == 1
    assert found[0].id == "yum-bash-0"
    assert found[0].description == "The GNU Bourne Again shell"


def test_parse_pacman():
    found = packages.parse_pacman("linux 6.7.4.arch1-1\nvim 9.1.0-1\n\n")
    assert [(p.name, p.version) for p in found] == [
        ("linux", "6.7.4.arch1-1"), ("vim", "9.1.0-1"),
    ]
    assert found[1].description == "Arch Linux package"


def test_parse_snap():
    found = packages.parse_snap(SNAP_OUTPUT)
    assert [p.name for p in found] == ["core22", "firefox"]
    assert found[0].description == "base"
    assert found[1].description == "Snap package"


def test_parse_flatpak():
    found = packages.parse_flatpak(FLATPAK_OUTPUT)
    assert found[0].name == "org.gimp.GIMP"
    assert found[0].description == "GNU Image Manipulation Program"
    assert found[1].version == "Unknown"
    assert found[1].description == "Flatpak package"


def test_collect_packages_isolates_failures():
    run = fake_runner({
        "dpkg-query": DPKG_OUTPUT,
        "dnf": subprocess.CalledProcessError(1, ["dnf"], stderr="no repos"),
        "rpm": subprocess.CalledProcessError(1, ["rpm"], stderr="no db"),
        "snap": SNAP_OUTPUT,
        "flatpak": RuntimeError("unexpected"),
    })

    found = packages.collect_packages(run)

    managers = {p.manager for p in found}
    assert managers == {PackageManagerType.APT, PackageManagerType.SNAP}
    assert len(found) == 5
    # APT results come first
    assert found[0].manager is PackageManagerType.APT


def test_collect_yum_falls_back_to_rpm():
    run = fake_runner({"rpm": "bash|5.2.26|shell\n"})
    found = packages.collect_yum(run)
    assert [p.name for p in found] == ["bash"]


def test_collect_packages_with_nothing_installed():
    assert packages.collect_packages(fake_runner({})) == []


@pytest.fixture
def inventory():
    return [
        Package(id="apt-vim-0", name="vim", version="9", description="Vi IMproved",
                manager=PackageManagerType.APT),
        Package(id="snap-code-0", name="code", version="1", description="Editor from Microsoft",
                manager=PackageManagerType.SNAP),
        Package(id="apt-nano-1", name="nano", version="7", description="small text EDITOR",
                manager=PackageManagerType.APT),
    ]


def test_search_is_case_insensitive_on_name_and_description(inventory):
    assert [p.name for p in packages.search_packages(inventory, "EDITOR")] == ["code", "nano"]
    assert [p.name for p in packages.search_packages(inventory, "Vim")] == ["vim"]
    assert packages.search_packages(inventory, "emacs") == []


def test_filter_by_manager(inventory):
    assert [p.name for p in packages.filter_by_manager(inventory, "APT")] == ["vim", "nano"]
    assert packages.filter_by_manager(inventory, "ALL") == inventory
    assert packages.filter_by_manager(inventory, "apt") == []
