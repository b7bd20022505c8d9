"""
Helpers shared by the raml_toolkit tests.
"""

import json
import os
import pathlib
import tempfile
from typing import Any, Dict, List, Optional, Tuple

from raml_toolkit.validator import ValidationReport, load_raml, render_raml

FIXTURES_DIR = pathlib.Path(__file__).parent / "fixtures"


def get_happy_spec() -> Dict[str, Any]:
    """A freshly loaded copy of the RAML fixture that passes every rule."""
    return load_raml(str(FIXTURES_DIR / "happy-spec.raml"))


def get_search_response() -> List[Dict[str, Any]]:
    with open(FIXTURES_DIR / "search-response.json") as f:
        return json.load(f)


def rename_key(obj: Dict[str, Any], old_key: str, new_key: str) -> None:
    obj[new_key] = obj.pop(old_key)


def render_spec_as_url(doc: Dict[str, Any], directory: Optional[str] = None) -> str:
    """Write the document to a temporary .raml file and return its file URL."""
    fd, path = tempfile.mkstemp(suffix=".raml", dir=directory)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(render_raml(doc))
    return pathlib.Path(path).as_uri()


def conforms(report: ValidationReport) -> None:
    assert report.conforms, [result.model_dump() for result in report.results]
    assert report.results == []


def breaks_only_one_rule(report: ValidationReport, rule: str) -> None:
    assert not report.conforms
    assert report.broken_rules() == [rule]
    assert len(report.results) == 1


class RecordingSink:
    """Warning sink that keeps every warning instead of logging it."""

    def __init__(self) -> None:
        self.warnings: List[Tuple[str, str]] = []

    def warn(self, message: str, hint: str) -> None:
        self.warnings.append((message, hint))
