"""
Module: jobs

Purpose:
    Stamping jobs read from JSON: templates, partial templates, fonts,
    pages and assembly options in one file. Paths (template PDFs, fonts,
    image contents) are relative to the job file.

Key Classes:
    - Job: A loaded, validated job

Key Functions:
    - load_job(): Read and validate a job file

Used By:
    - cli: build and check commands
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Tuple

from pdf_stamper.context import StampContext, base_context, register_templates
from pdf_stamper.core.models import PageData
from pdf_stamper.core.schemas import validate_job
from pdf_stamper.stamping import AssemblyOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Job:
    """
    A loaded stamping job (immutable).

    Attributes:
        path: The job file
        context: Context with the job's templates and fonts registered
        pages: Logical pages in order
        options: Assembly options from the job
    """

    path: Path
    context: StampContext
    pages: Tuple[PageData, ...]
    options: AssemblyOptions


def _resolve(base_dir: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base_dir / path


def _locations_with_paths(locations: Mapping[str, Any], base_dir: Path) -> dict[str, Any]:
    resolved = {}
    for name, entry in locations.items():
        contents = entry.get("contents")
        if isinstance(contents, dict) and isinstance(contents.get("image"), str):
            entry = {**entry, "contents": {**contents, "image": _resolve(base_dir, contents["image"])}}
        resolved[name] = entry
    return resolved


def load_job(path: Path) -> Job:
    """
    Load a job file.

    Raises:
        ValidationError: If the job or one of its templates is invalid
        FileNotFoundError: If a referenced template PDF or font is missing
    """
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    validate_job(data)
    base_dir = path.parent

    context = register_templates(
        base_context(),
        data["templates"],
        base_dir=base_dir,
        partials=data.get("partials", ()),
    )
    for font in data.get("fonts", ()):
        context.add_font(_resolve(base_dir, font["path"]), font["family"], font.get("style", "regular"))

    pages = tuple(
        PageData(
            template=page["template"],
            locations=_locations_with_paths(page.get("locations", {}), base_dir),
            filler_locations=_locations_with_paths(page.get("filler_locations", {}), base_dir),
        )
        for page in data["pages"]
    )
    logger.info(
        f"Loaded job {path.name}: {len(context.template_names)} templates, {len(pages)} pages"
    )
    return Job(
        path=path,
        context=context,
        pages=pages,
        options=AssemblyOptions.from_dict(data.get("options")),
    )
