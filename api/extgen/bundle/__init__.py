"""Generated bundle model, decoding, export, and publishing."""

from .export import (
    SECURITY_REVIEW_NAME,
    TESTING_GUIDE_NAME,
    ExportArtifact,
    ExportFailure,
    ExportResult,
    build_bundle_zip,
    bundle_slug,
    export_bundle,
    export_file,
)
from .models import Bundle, BundleFormatError, SourceFile, group_files, load_bundle

__all__ = [
    "SECURITY_REVIEW_NAME",
    "TESTING_GUIDE_NAME",
    "Bundle",
    "BundleFormatError",
    "ExportArtifact",
    "ExportFailure",
    "ExportResult",
    "SourceFile",
    "build_bundle_zip",
    "bundle_slug",
    "export_bundle",
    "export_file",
    "group_files",
    "load_bundle",
]
