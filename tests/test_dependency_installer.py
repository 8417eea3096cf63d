import pytest

from conftest import BASE, DUMMY, SERVER, archive_name
from xlibre_builder.build.dependency_installer import DependencyInstaller, build_local_providers
from xlibre_builder.common.errors import DepInstallFailed, MissingLocalArtifact
from xlibre_builder.models import Recipe
from xlibre_builder.repo.host_database import PacmanDatabase


def make_recipe(depends, makedepends):
    return Recipe(
        pkgnames=["demo"], pkgver="1", pkgrel="1", pkgdesc="demo", url="", body="",
        depends=list(depends), makedepends=list(makedepends),
    )


@pytest.fixture
def installer(host, config):
    config["repo_dir"].mkdir(parents=True)
    return DependencyInstaller(
        PacmanDatabase(host),
        config["repo_dir"],
        build_local_providers([SERVER, DUMMY, BASE]),
        config["pkgver"],
        config["pkgrel"],
        config["arch"],
    )


def feed_installs(host):
    return [cmd[-1] for cmd, _ in host.calls("sudo", "pacman", "-S")]


def test_dependency_named_twice_is_installed_once(installer, host):
    installer.install_deps("demo", make_recipe(["mesa", "libx11"], ["meson", "mesa", "libx11"]))
    assert sorted(feed_installs(host)) == ["libx11", "mesa", "meson"]


def test_dependency_order_does_not_matter(installer, host):
    installer.install_deps("demo", make_recipe(["b", "a"], ["c"]))
    first = feed_installs(host)
    host.commands.clear()
    installer.install_deps("demo", make_recipe(["c"], ["a", "b"]))
    assert feed_installs(host) == first


def test_local_provider_installs_every_artifact(installer, host, config):
    for artifact in SERVER.artifacts:
        (config["repo_dir"] / archive_name(artifact, config)).write_text(artifact)

    installer.install_deps("xlibre-video-dummy", make_recipe(["xlibre-server"], ["git"]))

    assert [cmd[-1] for cmd, _ in host.calls("sudo", "pacman", "-U")] == [
        str(config["repo_dir"] / archive_name(a, config)) for a in SERVER.artifacts
    ]
    assert feed_installs(host) == ["git"]
    assert set(SERVER.artifacts) <= host.installed


def test_missing_local_artifact(installer, host, config):
    (config["repo_dir"] / archive_name("xlibre-server", config)).write_text("")

    with pytest.raises(MissingLocalArtifact) as excinfo:
        installer.install_deps("xlibre-video-dummy", make_recipe(["xlibre-server"], []))

    assert excinfo.value.artifact_path.name == archive_name("xlibre-server-xvfb", config)
    assert excinfo.value.pkg_name == "xlibre-video-dummy"


def test_first_unavailable_dependency_stops_installation(installer, host):
    host.unavailable.add("libfoo")

    with pytest.raises(DepInstallFailed) as excinfo:
        installer.install_deps("demo", make_recipe(["zzz", "aaa"], ["libfoo"]))

    assert excinfo.value.dependency == "libfoo"
    assert feed_installs(host) == ["aaa", "libfoo"]
    # Nothing is rolled back
    assert "aaa" in host.installed


def test_excluded_names_are_never_installed(installer, host):
    installer.install_deps("xlibre-server", make_recipe(["xlibre-server", "mesa"], []), exclude=SERVER.artifacts)
    assert feed_installs(host) == ["mesa"]
    assert host.calls("sudo", "pacman", "-U") == []


def test_local_providers_cover_every_package_of_the_run():
    providers = build_local_providers([SERVER, DUMMY, BASE])
    assert providers["xlibre-server"] == list(SERVER.artifacts)
    assert providers["xlibre-video-dummy"] == ["xlibre-video-dummy"]
    assert "mesa" not in providers
