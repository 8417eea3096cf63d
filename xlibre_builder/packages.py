"""
Package definitions for XLibre Package Builder
=================================================================================
PURPOSE: Defines which packages to build and how they are categorized.

ORGANIZATION:
1. FOUNDATIONAL_PACKAGE: the X server, built before everything else
2. DRIVER_PACKAGES: input and video drivers, built in any order
3. META_PACKAGE: dependency-only package, built last

NOTE: Ordering comes from each PackageSpec's kind (tier), not from list order.
"""

from .models import PackageKind, PackageSpec

UPSTREAM = "https://github.com/X11Libre"

# ==============================================================================
# 1. FOUNDATIONAL PACKAGE
# ==============================================================================

FOUNDATIONAL_PACKAGE = PackageSpec(
    identifier="xlibre-server",
    source_url=f"{UPSTREAM}/xserver",
    artifacts=(
        "xlibre-server",
        "xlibre-server-common",
        "xlibre-server-xvfb",
        "xlibre-server-xwayland",
        "xlibre-server-xnest",
    ),
    kind=PackageKind.FOUNDATIONAL,
)

# ==============================================================================
# 2. DRIVER PACKAGES
# ==============================================================================
# Each one builds from X11Libre/xf86-<input|video>-<name>

INPUT_DRIVERS = [
    "elographics",
    "evdev",
    "joystick",
    "keyboard",
    "libinput",
    "mouse",
    "synaptics",
    "vmmouse",
]

VIDEO_DRIVERS = [
    "amdgpu", "apm", "ark", "ast", "ati", "chips", "cirrus", "dummy",
    "fbdev", "freedreno", "geode", "i128", "i740", "intel", "mach64",
    "mga", "neomagic", "nested", "nouveau", "nv", "omap", "qxl", "r128",
    "rendition", "s3virge", "savage", "siliconmotion", "sis", "sisusb",
    "suncg14", "suncg6", "sunffb", "sunleo", "suntcx", "tdfx", "trident",
    "v4l", "vesa", "vmware", "voodoo", "wsfb", "xgi",
]


def _driver(category, name):
    return PackageSpec(
        identifier=f"xlibre-{category}-{name}",
        source_url=f"{UPSTREAM}/xf86-{category}-{name}",
        kind=PackageKind.DRIVER,
    )


DRIVER_PACKAGES = (
    [_driver("input", name) for name in INPUT_DRIVERS]
    + [_driver("video", name) for name in VIDEO_DRIVERS]
)

# ==============================================================================
# 3. META PACKAGE
# ==============================================================================

META_PACKAGE = PackageSpec(
    identifier="xlibre-base",
    source_url=None,
    kind=PackageKind.META,
)


def get_package_set(exclude=None):
    """Full package set, minus excluded driver identifiers"""
    exclude = set(exclude or ())
    drivers = [spec for spec in DRIVER_PACKAGES if spec.identifier not in exclude]
    return [FOUNDATIONAL_PACKAGE] + drivers + [META_PACKAGE]
