from __future__ import annotations

import json
import logging
import zipfile
from dataclasses import dataclass, field
from io import BytesIO

from ..icons.raster import RenderUnavailable, render_description_png
from ..util import final_segment, slugify
from .models import Bundle, SourceFile

logger = logging.getLogger(__name__)

TESTING_GUIDE_NAME = "TESTING_GUIDE.md"
SECURITY_REVIEW_NAME = "SECURITY_REVIEW.md"
DEFAULT_ARCHIVE_SLUG = "chrome-extension"

# Fixed member timestamp so identical bundles give identical archives.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


@dataclass(frozen=True)
class ExportArtifact:
    path: str
    body: bytes
    media_type: str

    @property
    def download_name(self) -> str:
        return final_segment(self.path) or "download"


@dataclass(frozen=True)
class ExportFailure:
    path: str
    error: str


@dataclass
class ExportResult:
    artifacts: list[ExportArtifact] = field(default_factory=list)
    failures: list[ExportFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def export_file(file: SourceFile, content: str | None = None) -> ExportArtifact:
    """
    Bytes for one bundle file: text as UTF-8, icon descriptions rendered to PNG.

    ``content`` overrides the stored content (unsaved edits). Raises RenderUnavailable.
    """
    body = file.content if content is None else content
    if file.kind == "binary-description":
        return ExportArtifact(path=file.path, body=render_description_png(body), media_type="image/png")
    return ExportArtifact(path=file.path, body=body.encode("utf-8"), media_type="text/plain; charset=utf-8")


def export_bundle(bundle: Bundle) -> ExportResult:
    result = ExportResult()
    for f in bundle.files:
        try:
            result.artifacts.append(export_file(f))
        except RenderUnavailable as e:
            logger.warning("Skipping %s: %s", f.path, e)
            result.failures.append(ExportFailure(path=f.path, error=str(e)))

    for name, text in ((TESTING_GUIDE_NAME, bundle.testing_guide), (SECURITY_REVIEW_NAME, bundle.security_review)):
        # The generated guide replaces a bundle file of the same name.
        result.artifacts = [a for a in result.artifacts if a.path != name]
        result.artifacts.append(ExportArtifact(path=name, body=(text or "").encode("utf-8"), media_type="text/markdown"))

    logger.info("Exported %d artifact(s), skipped %d", len(result.artifacts), len(result.failures))
    return result


def write_zip(artifacts: list[ExportArtifact]) -> bytes:
    buf = BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for a in artifacts:
            info = zipfile.ZipInfo(a.path, date_time=_ZIP_EPOCH)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            zf.writestr(info, a.body)
    return buf.getvalue()


def build_bundle_zip(bundle: Bundle) -> tuple[bytes, ExportResult]:
    result = export_bundle(bundle)
    return write_zip(result.artifacts), result


def bundle_slug(bundle: Bundle) -> str:
    """Archive name from the manifest's ``name``, else the generic default."""
    manifest = bundle.get("manifest.json")
    if manifest is not None:
        try:
            data = json.loads(manifest.content)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict) and isinstance(data.get("name"), str):
            return slugify(data["name"], fallback=DEFAULT_ARCHIVE_SLUG)
    return DEFAULT_ARCHIVE_SLUG
