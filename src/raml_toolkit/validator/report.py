"""
Pydantic models for validation reports.
"""

from typing import List

from pydantic import BaseModel, Field

VOCABULARY = "http://a.ml/vocabularies/data#"


def rule_id(rule_name: str) -> str:
    return f"{VOCABULARY}{rule_name}"


class ValidationResult(BaseModel):
    """A single rule failure."""

    validation_id: str = Field(..., description="Full id of the broken rule")
    message: str
    target: str = Field(..., description="Location of the offending node")
    level: str = "Violation"


class ValidationReport(BaseModel):
    """Outcome of validating one document against a profile."""

    profile: str
    conforms: bool
    results: List[ValidationResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, profile: str, results: List[ValidationResult]) -> "ValidationReport":
        conforms = not any(result.level == "Violation" for result in results)
        return cls(profile=profile, conforms=conforms, results=results)

    def broken_rules(self) -> List[str]:
        return sorted({result.validation_id for result in self.results})
