"""
Error types for the package builder

Fatal errors stop the whole run (exit code 1). Build errors belong to a
single package and are caught at the package boundary.
"""


class BuilderError(Exception):
    """Base class for all builder errors"""


class FatalError(BuilderError):
    """Error that aborts the whole run"""


class ConfigError(FatalError):
    """Invalid or unreadable configuration"""


class ToolMissing(FatalError):
    """A required external tool is not on PATH"""

    def __init__(self, tool):
        super().__init__(f"{tool} is not installed. Please install it in the chroot.")
        self.tool = tool


class PrivilegeMissing(FatalError):
    """Passwordless sudo is not available for the invoking user"""


class HostUpdateFailed(FatalError):
    """Full system upgrade before the builds failed"""


class CatalogFailed(FatalError):
    """repo-add could not index the repository directory"""


class FoundationalBuildFailed(FatalError):
    """The package every other package depends on could not be built"""

    def __init__(self, pkg_name, cause):
        super().__init__(f"{pkg_name} failed, cannot continue: {cause}")
        self.pkg_name = pkg_name
        self.cause = cause


class BuildError(BuilderError):
    """Per-package failure"""

    def __init__(self, pkg_name, message):
        super().__init__(message)
        self.pkg_name = pkg_name


class SourceFetchFailed(BuildError):
    pass


class DepInstallFailed(BuildError):
    def __init__(self, pkg_name, dependency, message=None):
        super().__init__(pkg_name, message or f"Failed to install dependency {dependency}")
        self.dependency = dependency


class MissingLocalArtifact(DepInstallFailed):
    def __init__(self, pkg_name, dependency, artifact_path):
        super().__init__(
            pkg_name,
            dependency,
            f"{dependency} requires {artifact_path.name}, not found in {artifact_path.parent}",
        )
        self.artifact_path = artifact_path


class NativeBuildFailed(BuildError):
    pass


class ArtifactMissingAfterBuild(BuildError):
    def __init__(self, pkg_name, missing):
        super().__init__(pkg_name, f"makepkg reported success but produced no {', '.join(missing)}")
        self.missing = list(missing)


class RecipeWriteFailed(BuildError):
    pass


class ArtifactMoveFailed(BuildError):
    def __init__(self, pkg_name, pkg_file, error):
        super().__init__(pkg_name, f"Could not move {pkg_file.name} into the repository: {error}")
        self.pkg_file = pkg_file
