"""API document build error types."""

from pathlib import Path


class BuildError(Exception):
    """Base error for building an API document."""

    pass


class VirtualManifestError(BuildError):
    """The manifest has no [project] table, so there is no package to document."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(
            f"Manifest must be for an actual package. `{path}` is a virtual manifest"
        )
        self.path = Path(path)


class GeneralBuildError(BuildError):
    """The package sources could not be processed. Carries the diagnostic text."""

    def __init__(self, diagnostics: str) -> None:
        super().__init__(f"Failed to build API document. Diagnostics: {diagnostics}")
        self.diagnostics = diagnostics


class ManifestParseError(BuildError):
    """pyproject.toml is not valid TOML."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Failed to parse manifest {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class MetadataError(BuildError):
    """Project metadata is incomplete or the import package cannot be located."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Invalid project metadata in {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class BuildIoError(BuildError):
    """Reading sources or writing the document failed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"I/O error for {path}: {reason}")
        self.path = Path(path)
        self.reason = reason
