"""
Tests for loading stamping jobs from JSON and assembling them end to end.
"""

import json

import pytest

from pdf_stamper.core.schemas import ValidationError
from pdf_stamper.jobs import load_job
from pdf_stamper.stamping import assemble

BODY = {"name": "body", "type": "text", "x": 50, "y": 100, "width": 400, "height": 30}


@pytest.fixture
def job_file(tmp_path, template_pdf):
    """Factory writing a job JSON next to a "letter" template PDF."""
    template_pdf("letter")

    def _write(**overrides):
        data = {
            "templates": [
                {"name": "letter", "source": "letter.pdf", "overflow": "letter-cont", "regions": [BODY]},
            ],
            "partials": [
                {"name": "letter-cont", "inherit": "letter"},
            ],
            "pages": [
                {"template": "letter", "locations": {"body": {"contents": {"text": "l1\nl2\nl3\nl4\nl5"}}}},
            ],
        }
        data.update(overrides)
        path = tmp_path / "job.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


def test_load_job_when_valid_then_context_pages_and_options(job_file, tmp_path):
    job = load_job(job_file(options={"number_of_pages": 4, "max_pages": 10}))

    assert set(job.context.template_names) == {"letter", "letter-cont"}
    assert job.pages[0].template == "letter"
    assert job.options.number_of_pages == 4
    assert job.options.max_pages == 10


def test_load_job_when_save_options_given_then_passed_to_assembly_options(job_file):
    job = load_job(job_file(options={"garbage": 1, "deflate": False}))

    assert job.options.garbage == 1
    assert job.options.deflate is False


def test_load_job_when_image_path_relative_then_resolved_against_job(job_file, tmp_path):
    pages = [{"template": "letter", "locations": {"logo": {"contents": {"image": "img/logo.png"}}}}]

    job = load_job(job_file(pages=pages))

    assert job.pages[0].location("logo")["contents"]["image"] == tmp_path / "img" / "logo.png"


def test_load_job_when_fonts_then_queued_for_embedding(job_file, tmp_path):
    (tmp_path / "Inter-Bold.ttf").write_bytes(b"")

    job = load_job(job_file(fonts=[{"path": "Inter-Bold.ttf", "family": "Inter", "style": "bold"}]))

    (font,) = job.context.pending_font_embeddings()
    assert font.key == ("inter", "bold")
    assert font.path == tmp_path / "Inter-Bold.ttf"


def test_load_job_when_invalid_then_raises(job_file):
    with pytest.raises(ValidationError):
        load_job(job_file(pages=[{"template": "letter", "extra": True}]))


def test_load_job_when_template_pdf_missing_then_raises(job_file):
    templates = [{"name": "memo", "source": "memo.pdf"}]

    with pytest.raises(FileNotFoundError, match="memo.pdf"):
        load_job(job_file(templates=templates, partials=[]))


def test_assemble_job_when_text_overflows_then_continues_on_partial_template(job_file, labels_of):
    job = load_job(job_file())

    data = assemble(job.pages, job.context, job.options)

    # The partial stamps onto the parent's PDF
    assert labels_of(data) == ["letter", "letter", "letter"]
