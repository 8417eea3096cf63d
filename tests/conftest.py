import re
import shutil
import subprocess
from pathlib import Path

import pytest

from xlibre_builder.build.build_tracker import BuildTracker
from xlibre_builder.common.config_loader import ConfigLoader
from xlibre_builder.models import PackageKind, PackageSpec
from xlibre_builder.orchestrator.build_orchestrator import BuildOrchestrator

PKG_EXT = ".pkg.tar.zst"


def _read_pkgbuild_field(text, field):
    match = re.search(rf"^{field}=\(?([^)\n]*)\)?$", text, re.MULTILINE)
    return match.group(1).split() if match else []


class FakeHost:
    """Stands in for ShellExecutor: simulates git, pacman, makepkg and repo-add"""

    def __init__(self):
        self.installed = set()
        self.unavailable = set()
        self.fail_build = set()
        self.lie_build = set()
        self.fail_clone = set()
        self.fail_local_install = set()
        self.sudo_ok = True
        self.upgrade_ok = True
        self.fail_repo_add = False
        self.timeout_build = set()
        self.timeout_clone = set()
        self.timeout_feed = set()
        self.commands = []
        self.indexed = []

    # ShellExecutor interface -------------------------------------------------

    def run_command(self, cmd, cwd=None, capture=True, check=False, shell=None,
                    log_cmd=True, timeout=None, extra_env=None):
        cmd = [str(part) for part in cmd]
        self.commands.append((cmd, Path(cwd) if cwd else None))
        if self._times_out(cmd, cwd):
            raise subprocess.TimeoutExpired(cmd, timeout)
        returncode = self._dispatch(cmd, Path(cwd) if cwd else None)
        return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr="")

    def run_command_with_retry(self, cmd, max_retries=5, initial_delay=2.0, retry_errors=None, **kwargs):
        kwargs.pop("check", None)
        return self.run_command(cmd, **kwargs)

    # Helpers for assertions --------------------------------------------------

    def calls(self, *prefix):
        return [(cmd, cwd) for cmd, cwd in self.commands if cmd[:len(prefix)] == list(prefix)]

    def makepkg_order(self):
        return [cwd.name for _, cwd in self.calls("makepkg")]

    # Simulation ----------------------------------------------------------------

    def _times_out(self, cmd, cwd):
        if cmd[0] == "makepkg":
            return Path(cwd).name in self.timeout_build
        if cmd[:2] == ["git", "clone"]:
            return any(name in cmd[2] for name in self.timeout_clone)
        if cmd[:3] == ["sudo", "pacman", "-S"]:
            return cmd[-1] in self.timeout_feed
        return False

    def _dispatch(self, cmd, cwd):
        if cmd[:3] == ["sudo", "-n", "true"]:
            return 0 if self.sudo_ok else 1
        if cmd[:2] == ["pacman", "-Q"]:
            return 0 if cmd[2] in self.installed else 1
        if cmd[:3] == ["sudo", "pacman", "-Syu"]:
            return 0 if self.upgrade_ok else 1
        if cmd[:3] == ["sudo", "pacman", "-S"]:
            name = cmd[-1]
            if name in self.unavailable:
                return 1
            self.installed.add(name)
            return 0
        if cmd[:3] == ["sudo", "pacman", "-U"]:
            pkg_file = Path(cmd[-1])
            name = pkg_file.name[:-len(PKG_EXT)].rsplit("-", 3)[0]
            if name in self.fail_local_install or not pkg_file.is_file():
                return 1
            self.installed.add(name)
            return 0
        if cmd[:3] == ["sudo", "pacman", "-Rdd"]:
            targets = cmd[4:]
            # One transaction: any missing target aborts the removal
            if not targets or any(t not in self.installed for t in targets):
                return 1
            self.installed.difference_update(targets)
            return 0
        if cmd[:2] == ["git", "clone"]:
            url, dest = cmd[2], Path(cmd[3])
            if any(name in url for name in self.fail_clone):
                return 128
            (dest / ".git").mkdir(parents=True)
            return 0
        if cmd[0] == "git" and "pull" in cmd:
            return 0
        if cmd[0] == "makepkg":
            return self._makepkg(cwd)
        if cmd[0] == "repo-add":
            return self._repo_add(cmd, cwd)
        raise AssertionError(f"Unexpected command: {cmd}")

    def _makepkg(self, pkg_dir):
        text = (pkg_dir / "PKGBUILD").read_text()
        pkgnames = _read_pkgbuild_field(text, "pkgname")
        pkgver = _read_pkgbuild_field(text, "pkgver")[0]
        pkgrel = _read_pkgbuild_field(text, "pkgrel")[0]
        identifier = pkg_dir.name

        (pkg_dir / "src").mkdir(exist_ok=True)
        (pkg_dir / "pkg").mkdir(exist_ok=True)

        if identifier in self.fail_build:
            (pkg_dir / f"{identifier}-{pkgver}-{pkgrel}-x86_64-build.log").write_text("error\n")
            (pkg_dir / f"{identifier}-partial.tar.gz").write_text("")
            return 2
        if identifier in self.lie_build:
            return 0

        for name in pkgnames:
            (pkg_dir / f"{name}-{pkgver}-{pkgrel}-x86_64{PKG_EXT}").write_text(name)
            self.installed.add(name)
        return 0

    def _repo_add(self, cmd, cwd):
        if self.fail_repo_add:
            return 1
        db_file, packages = cmd[1], cmd[2:]
        for package in packages:
            assert (cwd / package).is_file()
        (cwd / db_file).write_text("\n".join(packages))
        self.indexed = list(packages)
        return 0


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def config(tmp_path):
    return ConfigLoader(environ={"XLIBRE_BASE_DIR": str(tmp_path / "XLibre")}).load()


@pytest.fixture
def all_tools(monkeypatch):
    monkeypatch.setattr(shutil, "which", lambda tool: f"/usr/bin/{tool}")


SERVER = PackageSpec(
    identifier="xlibre-server",
    source_url="https://github.com/X11Libre/xserver",
    artifacts=("xlibre-server", "xlibre-server-xvfb"),
    kind=PackageKind.FOUNDATIONAL,
)
DUMMY = PackageSpec("xlibre-video-dummy", "https://github.com/X11Libre/xf86-video-dummy")
VESA = PackageSpec("xlibre-video-vesa", "https://github.com/X11Libre/xf86-video-vesa")
BASE = PackageSpec("xlibre-base", None, kind=PackageKind.META)


@pytest.fixture
def small_set():
    return [SERVER, DUMMY, BASE]


@pytest.fixture
def make_orchestrator(config, host, all_tools):
    def factory(package_set):
        tracker = BuildTracker(config["success_log"], config["failed_log"])
        return BuildOrchestrator(config, package_set=package_set, shell_executor=host, tracker=tracker)
    return factory


def archive_name(artifact, config):
    return f"{artifact}-{config['pkgver']}-{config['pkgrel']}-{config['arch']}{config['pkg_ext']}"
