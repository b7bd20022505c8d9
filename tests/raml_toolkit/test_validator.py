"""
Tests for RAML loading and the remaining mercury profile rules.
"""

import pytest

from raml_toolkit.raml_toolkit_exceptions import RamlToolkitException
from raml_toolkit.validator import (
    load_raml,
    render_raml,
    rule_id,
    validate_document,
    validate_file,
)
from raml_toolkit.validator.raml_loader import RamlInclude
from tests import test_utils as utils

PROFILE = "mercury-profile"


class TestLoadRaml:
    """Tests for loading and rendering RAML documents."""

    def test_load_from_path_and_url(self, tmp_path):
        """Test that a rendered fixture loads back unchanged."""
        url = utils.render_spec_as_url(utils.get_happy_spec(), str(tmp_path))
        doc = load_raml(url)
        assert doc["title"] == "Happy API"
        assert doc == utils.get_happy_spec()

    def test_missing_header_is_rejected(self, tmp_path):
        """Test that a document without the RAML 1.0 header is rejected."""
        path = tmp_path / "api.raml"
        path.write_text("title: Not RAML\n")
        with pytest.raises(RamlToolkitException):
            load_raml(str(path))

    def test_non_mapping_is_rejected(self, tmp_path):
        """Test that a top-level sequence is rejected."""
        path = tmp_path / "api.raml"
        path.write_text("#%RAML 1.0\n- just\n- a list\n")
        with pytest.raises(RamlToolkitException):
            load_raml(str(path))

    def test_unsupported_scheme_is_rejected(self):
        """Test that only file URLs and paths are accepted."""
        with pytest.raises(RamlToolkitException):
            load_raml("https://example.com/api.raml")

    def test_include_tags_are_kept_unresolved(self, tmp_path):
        """Test that an !include value is kept as the included path."""
        path = tmp_path / "api.raml"
        path.write_text("#%RAML 1.0\ntitle: Included\ntypes:\n  A: !include types/a.raml\n")
        doc = load_raml(str(path))
        assert isinstance(doc["types"]["A"], RamlInclude)
        assert doc["types"]["A"] == "types/a.raml"

    def test_include_tags_survive_rendering(self, tmp_path):
        """Test that rendering a loaded document writes the !include tag back."""
        path = tmp_path / "api.raml"
        path.write_text("#%RAML 1.0\ntitle: Included\ntypes:\n  A: !include types/a.raml\n")

        rendered = render_raml(load_raml(str(path)))
        assert rendered.startswith("#%RAML 1.0\n")
        assert "A: !include types/a.raml\n" in rendered

        copy = tmp_path / "copy.raml"
        copy.write_text(rendered)
        reloaded = load_raml(str(copy))
        assert isinstance(reloaded["types"]["A"], RamlInclude)
        assert reloaded["types"]["A"] == "types/a.raml"


class TestMercuryProfile:
    """Tests for the resource, method and version rules of the mercury profile."""

    @pytest.fixture
    def doc(self):
        """A fresh copy of the happy RAML fixture."""
        return utils.get_happy_spec()

    def test_unknown_profile(self, doc):
        """Test that validating against an unknown profile raises."""
        with pytest.raises(RamlToolkitException):
            validate_document(doc, "no-such-profile")

    def test_resource_name_must_be_kebab_case(self, doc):
        """Test that a resource segment outside kebab case is reported once."""
        utils.rename_key(doc, "/resource", "/Resource_Name")
        report = validate_document(doc, PROFILE)
        utils.breaks_only_one_rule(report, rule_id("resource-name-validation"))
        assert report.results[0].target == "/Resource_Name"

    def test_uri_parameter_segment_is_allowed(self, doc):
        """Test that URI parameter segments and nested kebab-case segments conform."""
        doc["/resource"]["/{resourceId}"]["/sub-items"] = {
            "get": {"responses": {200: {"body": {"application/json": {"type": "object"}}}}}
        }
        utils.conforms(validate_document(doc, PROFILE))

    def test_method_without_response(self, doc):
        """Test that a method without responses is reported."""
        del doc["/resource"]["/{resourceId}"]["get"]["responses"]
        report = validate_document(doc, PROFILE)
        utils.breaks_only_one_rule(report, rule_id("require-method-response"))
        assert report.results[0].target == "/resource/{resourceId}.get"

    def test_missing_version(self, doc):
        """Test that a document without a version is reported."""
        del doc["version"]
        utils.breaks_only_one_rule(
            validate_document(doc, PROFILE), rule_id("require-api-version")
        )

    def test_malformed_version(self, doc):
        """Test that a version not shaped like v<N> is reported."""
        doc["version"] = "1.0"
        utils.breaks_only_one_rule(
            validate_document(doc, PROFILE), rule_id("require-api-version")
        )

    def test_several_rules_broken_at_once(self, doc, tmp_path):
        """Test that every broken rule is listed once in the report."""
        del doc["version"]
        utils.rename_key(doc["types"]["ClassA"]["properties"], "property1", "property1??")
        report = validate_file(utils.render_spec_as_url(doc, str(tmp_path)), PROFILE)
        assert not report.conforms
        assert report.broken_rules() == sorted(
            [
                rule_id("require-api-version"),
                rule_id("no-literal-question-marks-in-property-names"),
            ]
        )
