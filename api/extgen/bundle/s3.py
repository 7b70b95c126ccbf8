# Purpose: Publish exported bundle archives to S3 and hand back pre-signed download URLs.
# Dependencies: boto3 (AWS S3).
# Notes: Requires AWS_REGION, S3_BUCKET; S3_PREFIX is optional.
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from hashlib import sha256

import boto3

logger = logging.getLogger(__name__)

ZIP_CONTENT_TYPE = "application/zip"


@dataclass(frozen=True)
class S3Config:
    region: str
    bucket: str
    prefix: str


@dataclass(frozen=True)
class PublishedBundle:
    key: str
    url: str
    size_bytes: int


def get_s3_config() -> S3Config:
    region = os.environ.get("AWS_REGION", "").strip()
    bucket = os.environ.get("S3_BUCKET", "").strip()
    prefix = os.environ.get("S3_PREFIX", "").strip()

    if not region:
        raise RuntimeError("AWS_REGION is not set")
    if not bucket:
        raise RuntimeError("S3_BUCKET is not set")
    if prefix and not prefix.endswith("/"):
        prefix = prefix + "/"

    return S3Config(region=region, bucket=bucket, prefix=prefix)


def s3_client(*, region: str):
    return boto3.client("s3", region_name=region)


def bundle_key(*, prefix: str, slug: str, body: bytes) -> str:
    # Content-addressed so re-publishing the same archive reuses the object.
    return f"{prefix}bundles/{slug}-{sha256(body).hexdigest()[:12]}.zip"


def put_bytes(*, client, bucket: str, key: str, body: bytes, content_type: str, cache_control: str = "") -> None:
    kwargs = {"Bucket": bucket, "Key": key, "Body": body, "ContentType": content_type or "application/octet-stream"}
    if cache_control:
        kwargs["CacheControl"] = cache_control
    client.put_object(**kwargs)


def presign_get(*, client, bucket: str, key: str, filename: str, expires_in: int = 3600) -> str:
    return client.generate_presigned_url(
        ClientMethod="get_object",
        Params={
            "Bucket": bucket,
            "Key": key,
            "ResponseContentDisposition": f'attachment; filename="{filename}"',
        },
        ExpiresIn=expires_in,
    )


def publish_bundle_zip(*, body: bytes, slug: str, cfg: S3Config | None = None, client=None) -> PublishedBundle:
    cfg = cfg or get_s3_config()
    client = client or s3_client(region=cfg.region)
    key = bundle_key(prefix=cfg.prefix, slug=slug, body=body)
    put_bytes(
        client=client,
        bucket=cfg.bucket,
        key=key,
        body=body,
        content_type=ZIP_CONTENT_TYPE,
        cache_control="private, max-age=3600",
    )
    url = presign_get(client=client, bucket=cfg.bucket, key=key, filename=f"{slug}.zip")
    logger.info("Published %s (%d bytes) to s3://%s/%s", slug, len(body), cfg.bucket, key)
    return PublishedBundle(key=key, url=url, size_bytes=len(body))
