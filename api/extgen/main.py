from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import FastAPI, Header, HTTPException, Response
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from extgen.bundle.export import build_bundle_zip, bundle_slug, export_file
from extgen.bundle.models import Bundle, BundleFormatError, SourceFile, group_files, load_bundle
from extgen.bundle.s3 import publish_bundle_zip
from extgen.config import auth_disabled, expected_api_key, get_settings
from extgen.icons.grammar import parse_icon_spec
from extgen.icons.models import IconEdit, IconSpec
from extgen.icons.mutate import apply_icon_edit
from extgen.icons.raster import RenderUnavailable, render_icon_png
from extgen.logging_config import setup_logging
from extgen.preview.composer import PreviewComposition, compose_preview_report
from extgen.preview.sandbox import preview_headers, sandboxed_iframe

_settings = get_settings()
setup_logging(level=_settings.log_level, log_file=_settings.log_file or None)
logger = logging.getLogger("extgen.main")

app = FastAPI(title="ExtensionGen Core API", docs_url="/docs", redoc_url=None)


def _require_api_key(x_api_key: str | None) -> None:
    if auth_disabled():
        return
    try:
        expected = expected_api_key()
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    if not x_api_key or x_api_key.strip() != expected:
        raise HTTPException(status_code=401, detail="Invalid API key")


def _render_or_503(spec: IconSpec) -> bytes:
    try:
        return render_icon_png(spec)
    except RenderUnavailable as e:
        raise HTTPException(status_code=503, detail=f"Icon render unavailable: {e}") from e


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


class DescriptionIn(BaseModel):
    description: str = ""


class IconEditIn(BaseModel):
    description: str = ""
    edit: IconEdit


@app.post("/icons/parse")
def icons_parse(body: DescriptionIn) -> dict[str, Any]:
    spec = parse_icon_spec(body.description)
    return {"spec": spec.model_dump(), "fill_mode": spec.fill_mode}


@app.post("/icons/edit")
def icons_edit(body: IconEditIn) -> dict[str, Any]:
    description = apply_icon_edit(body.description, body.edit)
    return {
        "description": description,
        "changed": description != body.description,
        "spec": parse_icon_spec(description).model_dump(),
    }


@app.post("/icons/render")
def icons_render(body: DescriptionIn) -> Response:
    png = _render_or_503(parse_icon_spec(body.description))
    return Response(content=png, media_type="image/png", headers={"Cache-Control": "no-store"})


class PreviewIn(BaseModel):
    files: list[SourceFile] = Field(default_factory=list)
    selected_path: str = Field(..., min_length=1)
    edited_content: str | None = None


def _compose(body: PreviewIn) -> PreviewComposition:
    selected = next((f for f in body.files if f.path == body.selected_path.lstrip("/")), None)
    if selected is None:
        raise HTTPException(status_code=404, detail=f"No file '{body.selected_path}' in bundle")
    return compose_preview_report(selected, body.edited_content, body.files)


@app.post("/preview", response_class=HTMLResponse)
def preview(body: PreviewIn) -> HTMLResponse:
    report = _compose(body)
    headers = preview_headers()
    if report.unresolved:
        headers["X-Preview-Unresolved-Count"] = str(len(report.unresolved))
    return HTMLResponse(content=report.document, headers=headers)


@app.post("/preview/embed", response_class=HTMLResponse)
def preview_embed(body: PreviewIn) -> str:
    report = _compose(body)
    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Preview</title>
  </head>
  <body style="margin:0;">
    {sandboxed_iframe(report.document)}
  </body>
</html>"""


class BundleTextIn(BaseModel):
    text: str = ""


@app.post("/bundle/decode")
def bundle_decode(body: BundleTextIn) -> dict[str, Any]:
    try:
        bundle = load_bundle(body.text)
    except BundleFormatError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return bundle.model_dump(by_alias=True)


@app.post("/bundle/summary")
def bundle_summary(bundle: Bundle) -> dict[str, Any]:
    groups = group_files(bundle.files)
    return {
        "slug": bundle_slug(bundle),
        "files_count": len(bundle.files),
        "groups": {name: [f.path for f in members] for name, members in groups.items()},
    }


class FileDownloadIn(BaseModel):
    file: SourceFile
    content: str | None = None


@app.post("/bundle/file")
def bundle_file(body: FileDownloadIn) -> Response:
    try:
        artifact = export_file(body.file, body.content)
    except RenderUnavailable as e:
        raise HTTPException(status_code=503, detail=f"Icon render unavailable: {e}") from e
    return Response(
        content=artifact.body,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(artifact.download_name)}"},
    )


@app.post("/bundle/export")
def bundle_export(bundle: Bundle) -> Response:
    body, result = build_bundle_zip(bundle)
    slug = bundle_slug(bundle)
    headers = {"Content-Disposition": f'attachment; filename="{slug}.zip"'}
    if result.failures:
        headers["X-Export-Skipped-Count"] = str(len(result.failures))
    return Response(content=body, media_type="application/zip", headers=headers)


@app.post("/bundle/publish")
def bundle_publish(
    bundle: Bundle,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> dict[str, Any]:
    _require_api_key(x_api_key)

    body, result = build_bundle_zip(bundle)
    try:
        published = publish_bundle_zip(body=body, slug=bundle_slug(bundle))
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    except (BotoCoreError, ClientError) as e:
        logger.exception("Bundle publish failed")
        raise HTTPException(status_code=502, detail=f"S3 upload failed: {e}") from e

    return {
        "ok": True,
        "key": published.key,
        "url": published.url,
        "size_bytes": published.size_bytes,
        "skipped": [{"path": f.path, "error": f.error} for f in result.failures],
    }
