"""
Unit tests for template and job schema validation.
"""

import pytest

from pdf_stamper.core.schemas import ValidationError, validate_job, validate_template


def _template(**extra):
    return {
        "name": "letter",
        "source": "letter.pdf",
        "regions": [{"name": "body", "type": "text", "x": 0, "y": 0, "width": 100, "height": 100}],
        **extra,
    }


class TestValidateTemplate:

    def test_when_valid_then_no_error(self):
        validate_template(_template(
            overflow="letter-cont",
            only_on={"pages": "even", "filler": "blank"},
            transform_pages={"odd": [["rotate", 90]], "even": [{"kind": "rotate", "args": [0]}]},
        ))

    def test_when_region_missing_geometry_then_raises_with_path(self):
        data = _template(regions=[{"name": "body", "type": "text", "x": 0, "y": 0, "width": 100}])

        with pytest.raises(ValidationError, match="'height' is a required property") as exc:
            validate_template(data)

        assert exc.value.path == "regions.0"

    def test_when_only_on_pages_not_parity_then_raises(self):
        with pytest.raises(ValidationError):
            validate_template(_template(only_on={"pages": "third"}))

    def test_when_unknown_top_level_key_then_raises(self):
        with pytest.raises(ValidationError, match="Additional properties"):
            validate_template(_template(holes=[]))

    def test_region_type_specific_fields_allowed(self):
        data = _template(regions=[{
            "name": "body", "type": "text", "x": 0, "y": 0, "width": 100, "height": 100,
            "font": "times", "size": 12, "align": "center",
        }])

        validate_template(data)


class TestValidateJob:

    def test_when_valid_then_no_error(self):
        validate_job({
            "templates": [_template()],
            "pages": [{"template": "letter", "locations": {"body": {"contents": {"text": "Hi"}}}}],
            "options": {"number_of_pages": 4},
        })

    def test_when_location_has_no_contents_then_raises(self):
        with pytest.raises(ValidationError, match="'contents' is a required property"):
            validate_job({
                "templates": [_template()],
                "pages": [{"template": "letter", "locations": {"body": {"text": "Hi"}}}],
            })

    def test_when_nested_template_invalid_then_error_names_template(self):
        with pytest.raises(ValidationError, match="Invalid template 'letter'"):
            validate_job({"templates": [_template(regions="nope")], "pages": []})

    def test_errors_collects_every_violation(self):
        with pytest.raises(ValidationError) as exc:
            validate_job({"templates": [], "pages": [{}], "options": {"max_pages": 0}})

        assert len(exc.value.errors) == 2

    def test_when_save_options_given_then_no_error(self):
        validate_job({"templates": [], "pages": [], "options": {"garbage": 0, "deflate": False}})

    @pytest.mark.parametrize("options", [{"garbage": 5}, {"garbage": -1}, {"deflate": "yes"}])
    def test_when_save_options_out_of_range_then_raises(self, options):
        with pytest.raises(ValidationError):
            validate_job({"templates": [], "pages": [], "options": options})
