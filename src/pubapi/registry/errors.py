"""Package index error types."""


class RegistryError(Exception):
    """Base error for fetching published versions."""

    pass


class PackageNotFoundError(RegistryError):
    """The index does not know this name/version."""

    def __init__(self, name: str, version: str, index_url: str) -> None:
        super().__init__(f"`{name}@{version}` not found on index {index_url}")
        self.name = name
        self.version = version
        self.index_url = index_url


class DownloadError(RegistryError):
    """Transport failure or unexpected HTTP status."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to download {url}: {reason}")
        self.url = url
        self.reason = reason


class NoDistributionError(RegistryError):
    """Neither a pure-python wheel nor an sdist is available."""

    def __init__(self, name: str, version: str, reason: str) -> None:
        super().__init__(f"No usable distribution for `{name}@{version}`: {reason}")
        self.name = name
        self.version = version


class DigestMismatchError(RegistryError):
    """Downloaded bytes do not match the published sha256."""

    def __init__(self, filename: str, expected: str, actual: str) -> None:
        super().__init__(
            f"sha256 mismatch for {filename}: expected {expected}, got {actual}"
        )
        self.filename = filename
        self.expected = expected
        self.actual = actual


class UnsafeArchiveError(RegistryError):
    """An archive member would be written outside the extraction directory."""

    def __init__(self, filename: str, member: str) -> None:
        super().__init__(f"Refusing to extract {member!r} from {filename}")
        self.filename = filename
        self.member = member
