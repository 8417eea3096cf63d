"""
Recipe Synthesizer - produces the PKGBUILD for each package kind
"""

import logging

from ..models import PackageKind, Recipe
from .patches import patches_for

logger = logging.getLogger(__name__)

# ==============================================================================
# Dependency lists
# ==============================================================================

SERVER_DEPENDS = [
    'libx11', 'xorgproto', 'libxkbfile', 'libxfont2', 'mesa', 'libxcvt',
    'pixman', 'dbus', 'systemd-libs',
]

SERVER_MAKEDEPENDS = [
    'git', 'meson', 'ninja', 'autoconf', 'automake', 'pkgconf', 'xorgproto',
    'libx11', 'libxkbfile', 'libxfont2', 'mesa', 'libxcvt', 'pixman', 'xtrans',
    'xorg-font-util', 'wayland-protocols', 'libepoxy', 'nettle', 'libtirpc',
    'libdrm', 'libpciaccess', 'python', 'wayland', 'libxshmfence', 'libunwind',
    'libxau', 'libxdmcp', 'libxext', 'libxrender', 'libxrandr', 'libxfixes',
    'libxdamage', 'libxcomposite', 'libxinerama', 'libxv', 'libxvmc',
    'xcb-util', 'xcb-util-wm', 'xcb-util-keysyms',
]

DRIVER_MAKEDEPENDS = [
    'git', 'meson', 'ninja', 'autoconf', 'automake', 'pkgconf', 'xorgproto',
    'libx11', 'systemd-libs', 'libevdev', 'libinput', 'valgrind', 'libdrm',
    'cmake', 'libxcursor', 'libxss', 'libxtst',
]

META_DEPENDS = [
    'xlibre-server', 'xlibre-input-libinput', 'xlibre-input-evdev',
    'xlibre-video-vesa', 'xlibre-video-fbdev', 'libx11', 'libxext', 'libxrandr',
]

SERVER_MESON_FLAGS = ['-Dxvfb=true', '-Dxwayland=true', '-Dxnest=true', '-Dxdmcp=true']
SERVER_CONFIGURE_FLAGS = ['--enable-xvfb', '--enable-xwayland', '--enable-xnest', '--enable-xdmcp']

# Server sub-packages that ship a single, optional binary:
# artifact suffix -> (binary, meson output path, description)
OPTIONAL_SERVER_BINARIES = {
    'xvfb': ('Xvfb', 'build/hw/vfb/Xvfb', 'XLibre virtual framebuffer server'),
    'xwayland': ('Xwayland', 'build/hw/xwayland/Xwayland', 'XLibre Xwayland server'),
    'xnest': ('Xnest', 'build/hw/xnest/Xnest', 'XLibre nested X server'),
}


class RecipeSynthesizer:
    """Pure: the same spec, version and release always give the same recipe"""

    def __init__(self, arch='x86_64', maintainer=''):
        self.arch = arch
        self.maintainer = maintainer

    def synthesize(self, spec, version, release) -> Recipe:
        if spec.kind is PackageKind.FOUNDATIONAL:
            return self._server_recipe(spec, version, release)
        if spec.kind is PackageKind.META:
            return self._meta_recipe(spec, version, release)
        return self._driver_recipe(spec, version, release)

    def _git_source(self, spec):
        return f"{spec.repo_dir}::git+{spec.source_url}.git"

    # --------------------------------------------------------------------------
    # Foundational
    # --------------------------------------------------------------------------

    def _server_recipe(self, spec, version, release):
        repo_dir = spec.repo_dir
        functions = [self._server_prepare(repo_dir), self._server_build(repo_dir)]
        for artifact in spec.artifacts:
            functions.append(self._server_package_function(spec, artifact))

        return Recipe(
            pkgnames=list(spec.artifacts),
            pkgver=version,
            pkgrel=release,
            pkgdesc="XLibre X11 server (fork of Xorg)",
            url=spec.source_url,
            arch=self.arch,
            options=['!debug'],
            depends=list(SERVER_DEPENDS),
            makedepends=list(SERVER_MAKEDEPENDS),
            sources=[self._git_source(spec)],
            maintainer=self.maintainer,
            body="\n\n".join(functions),
        )

    @staticmethod
    def _server_prepare(repo_dir):
        return (
            "prepare() {\n"
            f"    cd {repo_dir}\n"
            "    # Apply patches if needed\n"
            "}"
        )

    @staticmethod
    def _server_build(repo_dir):
        meson_flags = " \\\n            ".join(SERVER_MESON_FLAGS)
        configure_flags = " ".join(SERVER_CONFIGURE_FLAGS)
        return f"""build() {{
    cd {repo_dir}
    if [ -f meson.build ]; then
        echo "Using Meson build system" >&2
        meson setup build \\
            --prefix=/usr \\
            --libexecdir=/usr/lib \\
            {meson_flags}
        ninja -C build
    else
        echo "Using Autotools build system" >&2
        ./autogen.sh
        ./configure --prefix=/usr --libexecdir=/usr/lib {configure_flags}
        make -j$(nproc)
    fi
    # Log built binaries
    echo "Built binaries:" >&2
    find . -type f -executable >&2
}}"""

    def _server_package_function(self, spec, artifact):
        repo_dir = spec.repo_dir
        base = spec.identifier

        if artifact == base:
            return f"""package_{artifact}() {{
    depends=({_quote(SERVER_DEPENDS)})
    provides=('xorg-server')
    conflicts=('xorg-server' 'xorg-server-devel')
    pkgdesc="XLibre X11 server core"

    cd {repo_dir}
    if [ -d build ]; then
        DESTDIR="$pkgdir" ninja -C build install
    else
        make DESTDIR="$pkgdir" install
    fi
    rm -rf "$pkgdir"/usr/bin/{{Xvfb,Xwayland,Xnest}} 2>/dev/null || true
    rm -rf "$pkgdir"/usr/share/X11/xorg.conf.d
}}"""

        suffix = artifact[len(base) + 1:] if artifact.startswith(base + "-") else artifact
        if suffix == "common":
            return f"""package_{artifact}() {{
    pkgdesc="XLibre server common files"
    depends=('{base}')
    conflicts=('xorg-server-devel')

    cd {repo_dir}
    install -Dm644 -t "$pkgdir"/usr/share/X11/xorg.conf.d config/*.conf 2>/dev/null || true
}}"""

        if suffix not in OPTIONAL_SERVER_BINARIES:
            raise ValueError(f"No packaging rule for {artifact}")

        binary, build_path, description = OPTIONAL_SERVER_BINARIES[suffix]
        return f"""package_{artifact}() {{
    pkgdesc="{description}"
    depends=('{base}')

    cd {repo_dir}
    if [ -f {build_path} ]; then
        echo "Installing {build_path} for {artifact}" >&2
        install -Dm755 {build_path} "$pkgdir"/usr/bin/{binary}
    elif [ -f {binary} ]; then
        echo "Installing {binary} for {artifact}" >&2
        install -Dm755 {binary} "$pkgdir"/usr/bin/{binary}
    else
        echo "Warning: {binary} binary not found for {artifact}, skipping installation" >&2
    fi
}}"""

    # --------------------------------------------------------------------------
    # Driver
    # --------------------------------------------------------------------------

    def _driver_recipe(self, spec, version, release):
        repo_dir = spec.repo_dir
        driver_type = spec.identifier.replace("xlibre-", "", 1)

        functions = []
        prepare = self._driver_prepare(spec)
        if prepare:
            functions.append(prepare)
        functions.append(f"""build() {{
    cd {repo_dir}
    if [ -f meson.build ]; then
        echo "Using Meson build system" >&2
        meson setup build --prefix=/usr
        ninja -C build
    else
        echo "Using Autotools build system" >&2
        ./autogen.sh
        ./configure --prefix=/usr
        make -j$(nproc)
    fi
}}""")
        functions.append(f"""package() {{
    cd {repo_dir}
    if [ -d build ]; then
        DESTDIR="$pkgdir" ninja -C build install
    else
        make DESTDIR="$pkgdir" install
    fi
}}""")

        return Recipe(
            pkgnames=[spec.identifier],
            pkgver=version,
            pkgrel=release,
            pkgdesc=f"XLibre {driver_type} driver",
            url=spec.source_url,
            arch=self.arch,
            options=['!debug'],
            depends=['xlibre-server'],
            makedepends=list(DRIVER_MAKEDEPENDS),
            sources=[self._git_source(spec)],
            maintainer=self.maintainer,
            body="\n\n".join(functions),
        )

    @staticmethod
    def _driver_prepare(spec):
        steps = patches_for(spec.identifier)
        if not steps:
            return None

        log = '"$srcdir/modifications.log"'
        lines = ["prepare() {", f"    cd {spec.repo_dir}"]
        for step in steps:
            lines.append(f"    # {step.description}")
            lines.append(f"    {step.command}")
        lines.append("    # Log changes for verification")
        lines.append(f'    echo "Modified files for {spec.identifier}:" >> {log}')
        for step in steps:
            lines.append(f'    {step.verify} >> {log} || echo "{step.missing_note}" >> {log}')
        lines.append("}")
        return "\n".join(lines)

    # --------------------------------------------------------------------------
    # Meta
    # --------------------------------------------------------------------------

    def _meta_recipe(self, spec, version, release):
        return Recipe(
            pkgnames=[spec.identifier],
            pkgver=version,
            pkgrel=release,
            pkgdesc="XLibre base meta-package",
            url="https://github.com/X11Libre/xserver",
            arch=self.arch,
            depends=list(META_DEPENDS),
            maintainer=self.maintainer,
            body=(
                "package() {\n"
                "    # Meta-package, no files to install\n"
                "    true\n"
                "}"
            ),
        )


def _quote(items):
    return " ".join(f"'{item}'" for item in items)
