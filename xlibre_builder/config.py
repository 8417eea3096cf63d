"""
Configuration file for XLibre Package Builder
=================================================================================
PURPOSE: Default settings for the build run. ConfigLoader reads these values
         and overlays the optional YAML file and environment variables.

ORGANIZATION:
1. Filesystem layout
2. Package versioning
3. Build timeouts
4. Conflicting packages
5. Required build tools
"""

# ==============================================================================
# 1. FILESYSTEM LAYOUT
# ==============================================================================

# BASE_DIR: Everything lives under this directory (sources, PKGBUILDs, repo, logs)
# Can be overridden by XLIBRE_BASE_DIR environment variable
BASE_DIR = "~/XLibre"

# REPO_SUBDIR: Where finished archives and the repository database are kept
REPO_SUBDIR = "xlibre-repo/x86_64"

# REPO_DB_NAME: Appears in pacman.conf as [xlibre-repo] and as xlibre-repo.db.tar.gz
REPO_DB_NAME = "xlibre-repo"

# Log files (relative to BASE_DIR)
LOG_FILE = "build-xlibre.log"
FAILED_BUILDS_LOG = "failed-builds.log"
SUCCESSFUL_BUILDS_LOG = "successful-builds.log"
STATE_FILE = "build_state.json"

# YAML override file looked up in BASE_DIR when XLIBRE_BUILDER_CONFIG is unset
CONFIG_FILE_NAME = "xlibre-builder.yaml"

# ==============================================================================
# 2. PACKAGE VERSIONING
# ==============================================================================
# Every package in the set shares one version (update as needed)

PKGVER = "21.1.99.1"
PKGREL = "1"
ARCH = "x86_64"
PKG_EXT = ".pkg.tar.zst"

MAINTAINER = "Your Name <your.email@example.com>"

# Flags for the build-and-install step (-s syncdeps, -i install after build)
MAKEPKG_FLAGS = ["-si", "--noconfirm"]

# ==============================================================================
# 3. BUILD TIMEOUTS (seconds, None blocks until the tool exits)
# ==============================================================================

MAKEPKG_TIMEOUT = {
    "default": 3600,            # 1 hour for drivers
    "xlibre-server": 7200,      # 2 hours for the full server
    "xlibre-video-intel": 5400, # SNA backend is slow to compile
}

GIT_TIMEOUT = 1800
PACMAN_TIMEOUT = 1800

# ==============================================================================
# 4. CONFLICTING PACKAGES
# ==============================================================================
# Removed with pacman -Rdd before the package is built; only installed ones are passed.

CONFLICTING_PACKAGES = {
    "xlibre-server": ["xorg-server", "xorg-server-devel"],
}

# ==============================================================================
# 5. REQUIRED BUILD TOOLS
# ==============================================================================
# Checked before anything else; a missing one aborts the run.

REQUIRED_TOOLS = [
    "git",       # Source checkout
    "makepkg",   # Package build tool
    "pacman",    # Host package manager
    "repo-add",  # Repository database indexer
    "meson",     # Modern build system
    "ninja",     # Backend used by meson
    "autoconf",  # Generate configure scripts
    "automake",  # Makefile generator
    "pkgconf",   # Library configuration tool
    "sed",       # Used by prepare() patches
]
