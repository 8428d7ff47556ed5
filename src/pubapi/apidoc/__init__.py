"""API document building and item extraction."""

from pubapi.apidoc.builder import BuildOptions, build, build_document, write_document
from pubapi.apidoc.errors import (
    BuildError,
    BuildIoError,
    GeneralBuildError,
    ManifestParseError,
    MetadataError,
    VirtualManifestError,
)
from pubapi.apidoc.extract import items_from_file, load_document, public_items
from pubapi.apidoc.manifest import Manifest, read_manifest, read_project_name

__all__ = [
    # Building
    "BuildOptions",
    "build",
    "build_document",
    "write_document",
    # Errors
    "BuildError",
    "BuildIoError",
    "GeneralBuildError",
    "ManifestParseError",
    "MetadataError",
    "VirtualManifestError",
    # Extraction
    "items_from_file",
    "load_document",
    "public_items",
    # Manifest
    "Manifest",
    "read_manifest",
    "read_project_name",
]
