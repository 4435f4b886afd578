import re
import sys
from pathlib import Path

import fitz
import pytest
from PIL import Image

# Add src to sys.path so we can import pdf_stamper
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from pdf_stamper.core.models import RegionSpec  # noqa: E402
from pdf_stamper.stamping.regions import REGION_FILLERS  # noqa: E402

LABEL_RE = re.compile(r"TEMPLATE:(\S+)")
ITEM_RE = re.compile(r"ITEM:(\S+)")


def _region(name, type="probe", priority=0, **options):
    return RegionSpec(
        name=name,
        type=type,
        x=50,
        y=50,
        width=400,
        height=600,
        priority=priority,
        options=options,
    )


class ProbeFiller:
    """
    Region filler that records every call.

    Draws one "ITEM:<value>" line per entry of contents["items"] up to the
    region's "capacity" field and returns the rest as overflow.
    """

    def __init__(self):
        self.calls = []

    @property
    def names(self):
        return [call["name"] for call in self.calls]

    def __call__(self, document, canvas, data, context):
        self.calls.append(dict(data))
        items = list(data["contents"].get("items", []))
        capacity = data.get("capacity", len(items))
        if items[:capacity]:
            surface = canvas.surface
            surface.setFont("Helvetica", 10)
            for index, item in enumerate(items[:capacity]):
                surface.drawString(data["x"], data["y"] + data["height"] - 12 * (index + 1), f"ITEM:{item}")
        if len(items) > capacity:
            return {"contents": {"items": items[capacity:]}}
        return None


@pytest.fixture
def probe():
    """Register a recording filler under the "probe" region type."""
    filler = ProbeFiller()
    REGION_FILLERS.register("probe")(filler)
    yield filler
    REGION_FILLERS.unregister("probe")


@pytest.fixture
def template_pdf(tmp_path: Path):
    """Factory writing a one-page template PDF labelled "TEMPLATE:<label>"."""
    def _make(label: str, width: float = 595, height: float = 842) -> Path:
        path = tmp_path / f"{label}.pdf"
        doc = fitz.open()
        page = doc.new_page(width=width, height=height)
        page.insert_text((20, 20), f"TEMPLATE:{label}")
        doc.save(path)
        doc.close()
        return path
    return _make


@pytest.fixture
def labels_of():
    """Template label of every page in a document (None for blank pages)."""
    def _labels(document):
        if isinstance(document, (bytes, bytearray)):
            with fitz.open(stream=bytes(document), filetype="pdf") as doc:
                return _labels(doc)
        labels = []
        for page in document:
            match = LABEL_RE.search(page.get_text())
            labels.append(match.group(1) if match else None)
        return labels
    return _labels


@pytest.fixture
def items_of():
    """ITEM values drawn on each page of a document."""
    def _items(document):
        return [ITEM_RE.findall(page.get_text()) for page in document]
    return _items


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def make_region():
    """Factory for region specs with a fixed box; extra keyword arguments become options."""
    return _region
