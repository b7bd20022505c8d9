"""
Validates RAML documents against a named profile.
"""

import logging
from typing import Any, Dict, Optional

from raml_toolkit.raml_toolkit_exceptions import RamlToolkitException
from raml_toolkit.raml_toolkit_logger import RamlToolLogger
from raml_toolkit.validator.profiles import PROFILES
from raml_toolkit.validator.raml_loader import load_raml
from raml_toolkit.validator.report import ValidationReport


def validate_document(
    doc: Dict[str, Any], profile_name: str, logger: Optional[RamlToolLogger] = None
) -> ValidationReport:
    """
    Run every rule of a profile against an already parsed document.

    Raises:
        RamlToolkitException: If the profile is unknown
    """
    if profile_name not in PROFILES:
        raise RamlToolkitException(
            f"Unknown profile: {profile_name}. Available: {', '.join(sorted(PROFILES))}"
        )

    results = []
    for rule in PROFILES[profile_name]:
        results.extend(rule(doc))

    report = ValidationReport.from_results(profile_name, results)
    if logger is not None:
        logger.log(
            f"Validated against {profile_name}: conforms={report.conforms}, "
            f"{len(report.results)} result(s)",
            logging.INFO,
        )
    return report


def validate_file(
    url: str, profile_name: str, logger: Optional[RamlToolLogger] = None
) -> ValidationReport:
    """
    Load a RAML document from a file URL or path and validate it.
    """
    return validate_document(load_raml(url), profile_name, logger)
