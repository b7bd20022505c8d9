"""
RAML profile validation.

This package handles:
1. Loading RAML 1.0 documents
2. Running the rules of a named profile against them
3. Reporting every rule violation found
"""

from .raml_loader import load_raml, render_raml
from .report import ValidationReport, ValidationResult, rule_id
from .profiles import PROFILES
from .validator import validate_document, validate_file

__all__ = [
    "load_raml",
    "render_raml",
    "ValidationReport",
    "ValidationResult",
    "rule_id",
    "PROFILES",
    "validate_document",
    "validate_file",
]
