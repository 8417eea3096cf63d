"""
Data model shared by the build modules
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class PackageKind(Enum):
    FOUNDATIONAL = 0
    DRIVER = 1
    META = 2

    @property
    def tier(self) -> int:
        return self.value


class BuildOutcome(Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class PackageSpec:
    identifier: str
    source_url: Optional[str]
    artifacts: Tuple[str, ...] = ()
    kind: PackageKind = PackageKind.DRIVER

    def __post_init__(self):
        # Single-artifact packages produce an archive named after themselves
        if not self.artifacts:
            object.__setattr__(self, "artifacts", (self.identifier,))

    @property
    def tier(self) -> int:
        return self.kind.tier

    @property
    def is_foundational(self) -> bool:
        return self.kind is PackageKind.FOUNDATIONAL

    @property
    def is_meta(self) -> bool:
        return self.kind is PackageKind.META

    @property
    def repo_dir(self) -> Optional[str]:
        """Directory name git gives the clone of source_url"""
        if not self.source_url:
            return None
        name = self.source_url.rstrip("/").rsplit("/", 1)[-1]
        if name.endswith(".git"):
            name = name[:-4]
        return name


@dataclass
class Recipe:
    """In-memory PKGBUILD; dependency lists are read from here, never re-parsed"""

    pkgnames: List[str]
    pkgver: str
    pkgrel: str
    pkgdesc: str
    url: str
    body: str
    arch: str = "x86_64"
    license: str = "MIT"
    options: List[str] = field(default_factory=list)
    depends: List[str] = field(default_factory=list)
    makedepends: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    maintainer: str = ""

    def all_dependencies(self) -> List[str]:
        return sorted(set(self.depends) | set(self.makedepends))

    def render(self) -> str:
        lines = []
        if self.maintainer:
            lines.append(f"# Maintainer: {self.maintainer}")
        if len(self.pkgnames) == 1:
            lines.append(f"pkgname={self.pkgnames[0]}")
        else:
            lines.append(f"pkgname=({' '.join(self.pkgnames)})")
        lines.append(f"pkgver={self.pkgver}")
        lines.append(f"pkgrel={self.pkgrel}")
        lines.append(f'pkgdesc="{self.pkgdesc}"')
        lines.append(f"arch=('{self.arch}')")
        lines.append(f'url="{self.url}"')
        lines.append(f"license=('{self.license}')")
        if self.options:
            lines.append(f"options=({_bash_array(self.options)})")
        lines.append(f"depends=({_bash_array(self.depends)})")
        if self.makedepends:
            lines.append(f"makedepends=({_bash_array(self.makedepends)})")
        if self.sources:
            quoted = " ".join(f'"{source}"' for source in self.sources)
            lines.append(f"source=({quoted})")
            lines.append(f"sha256sums=({_bash_array(['SKIP'] * len(self.sources))})")
        return "\n".join(lines) + "\n\n" + self.body.strip("\n") + "\n"


def _bash_array(items) -> str:
    return " ".join(f"'{item}'" for item in items)


def artifact_filename(artifact: str, pkgver: str, pkgrel: str, arch: str, suffix: str = ".pkg.tar.zst") -> str:
    return f"{artifact}-{pkgver}-{pkgrel}-{arch}{suffix}"
