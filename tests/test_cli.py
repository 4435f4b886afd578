"""
Tests for the command line entry point.
"""

import json
import logging

import fitz
import pytest

from pdf_stamper.cli import main


@pytest.fixture
def job_path(tmp_path, template_pdf):
    template_pdf("cover")
    template_pdf("back")

    def _write(**overrides):
        data = {
            "templates": [
                {"name": "cover", "source": "cover.pdf"},
                {"name": "back", "source": "back.pdf"},
            ],
            "pages": [{"template": "cover"}, {"template": "back"}],
        }
        data.update(overrides)
        path = tmp_path / "job.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


def test_build_when_valid_job_then_writes_pdf(job_path, tmp_path, labels_of):
    out = tmp_path / "out" / "doc.pdf"

    assert main(["build", str(job_path()), "-o", str(out)]) == 0

    assert labels_of(out.read_bytes()) == ["cover", "back"]


def test_build_when_number_of_pages_flag_then_overrides_job_options(job_path, tmp_path, labels_of):
    out = tmp_path / "doc.pdf"
    job = job_path(options={"number_of_pages": 3})

    assert main(["build", str(job), "-o", str(out), "--number-of-pages", "4"]) == 0

    assert labels_of(out.read_bytes()) == ["cover", None, None, "back"]


def test_build_when_max_pages_exceeded_then_exit_code_1(job_path, tmp_path, caplog):
    out = tmp_path / "doc.pdf"

    assert main(["build", str(job_path()), "-o", str(out), "--max-pages", "1"]) == 1

    assert "Page limit 1 exceeded" in caplog.text
    assert not out.exists()


def test_build_when_page_template_unknown_then_exit_code_1(job_path, tmp_path, caplog):
    job = job_path(pages=[{"template": "missing"}])

    assert main(["build", str(job), "-o", str(tmp_path / "doc.pdf")]) == 1

    assert "No template 'missing'" in caplog.text


def test_check_when_valid_then_exit_code_0(job_path, caplog):
    caplog.set_level(logging.INFO)

    assert main(["check", str(job_path())]) == 0

    assert "is valid" in caplog.text


def test_check_when_overflow_template_unknown_then_reported(job_path, caplog):
    templates = [{"name": "cover", "source": "cover.pdf", "overflow": "cover-cont"}]

    assert main(["check", str(job_path(templates=templates, pages=[{"template": "cover"}]))]) == 1

    assert "cover-cont" in caplog.text


def test_check_when_schema_invalid_then_every_error_logged(job_path, caplog):
    job = job_path(pages=[{}], options={"max_pages": 0})

    assert main(["check", str(job)]) == 1

    assert "'template' is a required property" in caplog.text
    assert "options.max_pages" in caplog.text


def test_version_flag_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])

    assert exc.value.code == 0
    assert "pdf-stamper" in capsys.readouterr().out


def test_build_output_is_valid_pdf(job_path, tmp_path):
    out = tmp_path / "doc.pdf"

    main(["build", str(job_path()), "-o", str(out)])

    with fitz.open(out) as doc:
        assert doc.page_count == 2


def test_check_when_region_type_unregistered_then_reported_with_known_types(job_path, caplog):
    regions = [{"name": "code", "type": "barcode", "x": 0, "y": 0, "width": 100, "height": 50}]
    templates = [{"name": "cover", "source": "cover.pdf", "regions": regions}]

    assert main(["check", str(job_path(templates=templates, pages=[{"template": "cover"}]))]) == 1

    assert "No region filler registered for 'barcode'" in caplog.text
    assert "text-parsed" in caplog.text


def test_check_when_transform_kind_unregistered_then_reported(job_path, caplog):
    templates = [{"name": "cover", "source": "cover.pdf", "transform_pages": {"even": [["mirror"]]}}]

    assert main(["check", str(job_path(templates=templates, pages=[{"template": "cover"}]))]) == 1

    assert "No page transform registered for 'mirror'" in caplog.text


def test_check_when_image_file_missing_then_reported(job_path, caplog):
    # Arrange
    regions = [{"name": "logo", "type": "image", "x": 0, "y": 0, "width": 100, "height": 50}]
    templates = [{"name": "cover", "source": "cover.pdf", "regions": regions}]
    pages = [
        {"template": "cover", "locations": {"logo": {"contents": {"image": "img/logo.png"}}}},
        {"template": "cover", "filler_locations": {"logo": {"contents": {"image": "img/blank.png"}}}},
    ]

    # Act
    code = main(["check", str(job_path(templates=templates, pages=pages))])

    # Assert
    assert code == 1
    assert "Image files not found" in caplog.text
    assert "logo.png" in caplog.text
    assert "blank.png" in caplog.text


def test_check_when_image_file_present_then_valid(job_path, sample_image, caplog):
    caplog.set_level(logging.INFO)
    regions = [{"name": "logo", "type": "image", "x": 0, "y": 0, "width": 100, "height": 50}]
    templates = [{"name": "cover", "source": "cover.pdf", "regions": regions}]
    pages = [{"template": "cover", "locations": {"logo": {"contents": {"image": sample_image.name}}}}]

    assert main(["check", str(job_path(templates=templates, pages=pages))]) == 0

    assert "is valid" in caplog.text
