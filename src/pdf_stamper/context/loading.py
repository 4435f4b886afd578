"""
Module: context.loading

Purpose:
    Read template descriptions from JSON. Template PDF paths in JSON are
    relative to the JSON file they appear in.

Key Functions:
    - load_template_file(): Load and register one template JSON file
    - register_templates(): Register validated template dicts on a context

Dependencies:
    - core.schemas: JSON schema validation
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

from pdf_stamper.core.models import TemplateDescription
from pdf_stamper.core.schemas import validate_template

from .registry import StampContext

logger = logging.getLogger(__name__)


def _resolve(base_dir: Path, value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else base_dir / path


def _with_resolved_sources(data: Mapping[str, Any], base_dir: Path) -> dict[str, Any]:
    resolved = dict(data)
    if "source" in resolved:
        resolved["source"] = _resolve(base_dir, resolved["source"])
    for parity in ("odd", "even"):
        variant = resolved.get(parity)
        if variant and "source" in variant:
            resolved[parity] = {**variant, "source": str(_resolve(base_dir, variant["source"]))}
    return resolved


def register_templates(
    context: StampContext,
    templates: Iterable[Mapping[str, Any]],
    *,
    base_dir: Path,
    partials: Iterable[Mapping[str, Any]] = (),
) -> StampContext:
    """
    Register template dicts (already schema-validated) on a context.

    Full templates are registered first so partials can inherit from any
    of them; partials are registered in the order given.

    Raises:
        ValueError: If a full template has no "source"
    """
    for data in templates:
        data = _with_resolved_sources(data, base_dir)
        if "source" not in data:
            raise ValueError(f"Template {data['name']!r} needs a 'source' PDF")
        source = data.pop("source")
        context.add_template(TemplateDescription.from_dict(data), source)

    for data in partials:
        data = _with_resolved_sources(data, base_dir)
        data.pop("source", None)
        context.add_template_partial(TemplateDescription.from_dict(data))

    return context


def load_template_file(path: Path, context: StampContext) -> StampContext:
    """
    Load one template description JSON file into a context.

    A file with "inherit" is registered as a partial template.

    Raises:
        ValidationError: If the JSON does not match the template schema
        FileNotFoundError: If the file or its source PDF is missing
    """
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    validate_template(data)
    logger.debug(f"Loaded template {data['name']!r} from {path}")

    if "inherit" in data:
        return register_templates(context, (), base_dir=path.parent, partials=(data,))
    return register_templates(context, (data,), base_dir=path.parent)
