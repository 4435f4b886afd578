"""
Module: cli

Purpose:
    Command line entry point.

Usage:
    pdf-stamper build job.json -o out.pdf [--number-of-pages N] [--max-pages N]
    pdf-stamper check job.json
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from pdf_stamper import __version__
from pdf_stamper.context import UnknownFontError, UnknownTemplateError
from pdf_stamper.core.dispatch import UnknownHandlerError
from pdf_stamper.core.models import PageData, Parity
from pdf_stamper.core.schemas import ValidationError
from pdf_stamper.jobs import load_job
from pdf_stamper.stamping import PAGE_TRANSFORMS, REGION_FILLERS, PageLimitExceeded, assemble

logger = logging.getLogger("pdf_stamper.cli")

# Input problems reported without a traceback
_USER_ERRORS = (
    ValidationError,
    FileNotFoundError,
    UnknownTemplateError,
    UnknownFontError,
    UnknownHandlerError,
    PageLimitExceeded,
    ValueError,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdf-stamper",
        description="Stamp page data onto PDF templates",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    build = commands.add_parser("build", help="Assemble a document from a job file")
    build.add_argument("job", type=Path, help="Job JSON file")
    build.add_argument("-o", "--output", type=Path, required=True, help="Output PDF path")
    build.add_argument("--number-of-pages", type=int, help="Pad the document to at least N pages")
    build.add_argument("--max-pages", type=int, help="Fail if composition exceeds N pages")

    check = commands.add_parser("check", help="Validate a job file without stamping")
    check.add_argument("job", type=Path, help="Job JSON file")
    return parser


def _build(args: argparse.Namespace) -> None:
    job = load_job(args.job)
    overrides = {}
    if args.number_of_pages is not None:
        overrides["number_of_pages"] = args.number_of_pages
    if args.max_pages is not None:
        overrides["max_pages"] = args.max_pages
    options = dataclasses.replace(job.options, **overrides)

    data = assemble(job.pages, job.context, options, out=args.output)
    logger.info(f"Wrote {args.output} ({len(data)} bytes)")


def _missing_images(pages: Iterable[PageData]) -> List[Path]:
    missing = []
    for page in pages:
        for entry in (*page.locations.values(), *page.filler_locations.values()):
            contents = entry.get("contents")
            image = contents.get("image") if isinstance(contents, dict) else None
            if isinstance(image, Path) and not image.exists():
                missing.append(image)
    return missing


def _check(args: argparse.Namespace) -> None:
    job = load_job(args.job)
    context = job.context
    referenced = {page.template for page in job.pages}
    for name in context.template_names:
        description = context.template(name)
        if description.overflow:
            referenced.add(description.overflow)
        if description.only_on is not None and description.only_on.filler:
            referenced.add(description.only_on.filler)
    missing = sorted(name for name in referenced if name not in context)
    if missing:
        raise UnknownTemplateError(f"Unknown templates referenced: {', '.join(missing)}")

    # Unregistered region types and transform kinds would only fail mid-build
    for name in context.template_names:
        description = context.template(name)
        for parity in Parity:
            for region in context.regions_for_parity(name, parity):
                REGION_FILLERS.get(region.type)
            for transform in description.transforms.for_parity(parity):
                PAGE_TRANSFORMS.get(transform.kind)

    images = _missing_images(job.pages)
    if images:
        raise FileNotFoundError(f"Image files not found: {', '.join(str(path) for path in images)}")
    logger.info(f"{args.job} is valid")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    try:
        if args.command == "build":
            _build(args)
        else:
            _check(args)
    except _USER_ERRORS as exc:
        logger.error(str(exc))
        if isinstance(exc, ValidationError):
            for error in exc.errors:
                logger.error(f"  {error}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
