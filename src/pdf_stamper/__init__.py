"""Top-level package for pdf-stamper.

Builds PDF documents by stamping page data onto template pages. Templates
decide where content goes; page data decides what goes there.

Provides subpackages:
- pdf_stamper.core – data models, handler dispatch, schema validation
- pdf_stamper.context – template and font registry
- pdf_stamper.stamping – page composition and document assembly
- pdf_stamper.fillers – built-in region types (text, text-parsed, image)
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        return pkg_version("pdf-stamper")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()

from .core.models import PageData, PageRestriction, PageTransform, Parity, RegionSpec, TemplateDescription  # noqa: E402
from .context import StampContext, base_context, load_template_file  # noqa: E402
from .stamping import AssemblyOptions, assemble, register_page_transform, register_region_filler  # noqa: E402

__all__: list[str] = [
    "__version__",
    "PageData",
    "PageRestriction",
    "PageTransform",
    "Parity",
    "RegionSpec",
    "TemplateDescription",
    "StampContext",
    "base_context",
    "load_template_file",
    "AssemblyOptions",
    "assemble",
    "register_page_transform",
    "register_region_filler",
]
