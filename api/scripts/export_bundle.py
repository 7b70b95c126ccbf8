#!/usr/bin/env python3
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from extgen.bundle.export import build_bundle_zip, bundle_slug
from extgen.bundle.models import BundleFormatError, load_bundle
from extgen.config import get_settings
from extgen.logging_config import setup_logging


def main() -> int:
    ap = argparse.ArgumentParser(description="Package a generated extension bundle (JSON) into a zip archive")
    ap.add_argument("--bundle", required=True, help="Path to the generator's JSON reply")
    ap.add_argument("--out", default="", help="Output zip path (default: <manifest-name>.zip in the cwd)")
    ap.add_argument("--publish", action="store_true", help="Also upload the archive to S3 and print a download URL")
    args = ap.parse_args()

    settings = get_settings()
    logger = setup_logging(level=settings.log_level, log_file=settings.log_file or None)

    try:
        bundle = load_bundle(Path(args.bundle).read_text(encoding="utf-8"))
    except (OSError, BundleFormatError) as e:
        raise SystemExit(f"Could not load bundle: {e}")

    body, result = build_bundle_zip(bundle)
    slug = bundle_slug(bundle)
    out = Path(args.out) if args.out else Path(f"{slug}.zip")
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(body)
    logger.info("Wrote %s (%d bytes, %d files)", out, len(body), len(result.artifacts))

    for failure in result.failures:
        print(f"skipped {failure.path}: {failure.error}", file=sys.stderr)

    if args.publish:
        from extgen.bundle.s3 import publish_bundle_zip

        published = publish_bundle_zip(body=body, slug=slug)
        print(published.url)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
