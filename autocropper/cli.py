"""Пакетная обрезка без интерфейса: файл -> обрезанный файл/архив рядом."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from autocropper.logging_config import setup_logging
from autocropper.models.session_model import Configuration
from autocropper.services.batch_service import BatchProcessor
from autocropper.services.errors import AutocropperError, CodecFailure, InvalidPaddingInput, UnsupportedFileType
from autocropper.services.package_service import OutputPackager
from autocropper.services.upload_service import UploadService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOTHING_CROPPED = 1
EXIT_INVALID_INPUT = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="autocropper-cli",
        description="Crop images (or every image in a zip) to their visible pixels and add transparent padding.",
    )
    p.add_argument("input", type=Path, help="Image (.png/.jpg/.jpeg/.svg) or .zip archive.")
    p.add_argument("--padding", type=str, default="0", help="Transparent padding in pixels on every side (default: 0).")
    p.add_argument("--output-dir", type=Path, help="Where the result is written (default: next to the input).")
    p.add_argument("--strict", action="store_true", help="Fail the whole batch on the first broken image.")
    p.add_argument("--log-level", type=str, default="INFO", help="Log file level (DEBUG, INFO, WARNING...).")
    p.add_argument("--log-dir", type=str, default="logs", help="Directory for autocropper.log.")
    return p.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    try:
        config = Configuration.from_text(args.padding)
    except InvalidPaddingInput as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    input_path: Path = args.input
    if not input_path.is_file():
        print(f"[ERROR] File not found: {input_path}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    processor = BatchProcessor(strict=args.strict)
    uploads = UploadService(batch_processor=processor)
    try:
        session = uploads.load_path(input_path)
    except UnsupportedFileType as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except CodecFailure as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return EXIT_NOTHING_CROPPED

    for failure in session.load_failures:
        print(f"[SKIP] {failure.message}")

    result = processor.process_batch(session.original, config.padding)
    session = session.with_cropped(result)
    for failure in session.crop_failures:
        print(f"[SKIP] {failure.message}")

    if not session.cropped:
        print("[ERROR] Nothing to crop.", file=sys.stderr)
        return EXIT_NOTHING_CROPPED

    artifact = OutputPackager().package(session.upload, session.cropped)
    output_dir: Path = args.output_dir or input_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / artifact.file_name
    out_path.write_bytes(artifact.data)
    print(f"[OK] {len(session.cropped)} image(s) -> {out_path}")
    logger.info("Wrote %s (%s, %d bytes)", out_path, artifact.mime_type, len(artifact.data))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(log_level=getattr(logging, args.log_level.upper(), logging.INFO), log_dir=args.log_dir)
    try:
        return run(args)
    except AutocropperError as exc:
        # strict mode surfaces the first per-item error here
        logger.error("Batch aborted: %s", exc)
        print(f"[ERROR] {exc}", file=sys.stderr)
        return EXIT_NOTHING_CROPPED


if __name__ == "__main__":
    sys.exit(main())
