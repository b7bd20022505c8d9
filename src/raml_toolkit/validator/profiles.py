"""
Validation profiles and the rules they are made of.

A rule is a callable taking the parsed RAML document and returning the
ValidationResults it produces. A profile is a named list of rules.
"""

import re
from typing import Any, Callable, Dict, Iterator, List, Tuple

from raml_toolkit.validator.report import ValidationResult, rule_id

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")

Rule = Callable[[Dict[str, Any]], List[ValidationResult]]

# ============================================================================
# Document traversal
# ============================================================================


def iter_resources(
    node: Dict[str, Any], path: str = ""
) -> Iterator[Tuple[str, str, Dict[str, Any]]]:
    """Yield (full path, relative path, resource) for every nested resource, in document order."""
    for key, value in node.items():
        if isinstance(key, str) and key.startswith("/"):
            full_path = path + key
            resource = value if isinstance(value, dict) else {}
            yield full_path, key, resource
            yield from iter_resources(resource, full_path)


def iter_methods(doc: Dict[str, Any]) -> Iterator[Tuple[str, str, Dict[str, Any]]]:
    for path, _, resource in iter_resources(doc):
        for method in HTTP_METHODS:
            if method in resource:
                declaration = resource[method]
                yield path, method, declaration if isinstance(declaration, dict) else {}


def _iter_body(body: Any, location: str) -> Iterator[Tuple[str, Any]]:
    if not isinstance(body, dict):
        return
    if not any("/" in str(key) for key in body):
        # Body declared without a media type
        yield location, body
        return
    for media_type, declaration in body.items():
        yield f"{location}.{media_type}", declaration


def iter_type_declarations(doc: Dict[str, Any]) -> Iterator[Tuple[str, Any]]:
    """Yield (location, declaration) for root types and every request/response body."""
    types = doc.get("types")
    if isinstance(types, dict):
        for name, declaration in types.items():
            yield f"types.{name}", declaration

    for path, method, declaration in iter_methods(doc):
        yield from _iter_body(declaration.get("body"), f"{path}.{method}.body")
        responses = declaration.get("responses")
        if isinstance(responses, dict):
            for code, response in responses.items():
                if isinstance(response, dict):
                    yield from _iter_body(
                        response.get("body"), f"{path}.{method}.responses.{code}.body"
                    )


def iter_properties(declaration: Any, location: str) -> Iterator[Tuple[str, str, Any]]:
    """Yield (location, name, property declaration), nested properties included."""
    if not isinstance(declaration, dict):
        return
    properties = declaration.get("properties")
    if isinstance(properties, dict):
        for name, prop in properties.items():
            prop_location = f"{location}.properties.{name}"
            yield prop_location, str(name), prop
            yield from iter_properties(prop, prop_location)
    yield from iter_properties(declaration.get("items"), f"{location}.items")


# ============================================================================
# Rules
# ============================================================================


def has_literal_question_mark(name: str, prop: Any) -> bool:
    """
    A single trailing ``?`` marks the property as optional, but only while
    ``required`` is not declared. Any other ``?`` is part of the name.
    """
    required_declared = isinstance(prop, dict) and "required" in prop
    if name.endswith("?") and not required_declared:
        name = name[:-1]
    return "?" in name


def no_literal_question_marks_in_property_names(doc: Dict[str, Any]) -> List[ValidationResult]:
    results = []
    for location, declaration in iter_type_declarations(doc):
        for prop_location, name, prop in iter_properties(declaration, location):
            if has_literal_question_mark(name, prop):
                results.append(
                    ValidationResult(
                        validation_id=rule_id("no-literal-question-marks-in-property-names"),
                        message=f"Property name '{name}' contains a literal question mark",
                        target=prop_location,
                    )
                )
    return results


RESOURCE_SEGMENT = re.compile(r"^([a-z0-9]+(-[a-z0-9]+)*|\{[A-Za-z][A-Za-z0-9_]*\})$")


def resource_name_validation(doc: Dict[str, Any]) -> List[ValidationResult]:
    results = []
    for path, relative_path, _ in iter_resources(doc):
        for segment in relative_path.split("/"):
            if segment and not RESOURCE_SEGMENT.match(segment):
                results.append(
                    ValidationResult(
                        validation_id=rule_id("resource-name-validation"),
                        message=f"Resource segment '{segment}' must be lowercase kebab-case or a URI parameter",
                        target=path,
                    )
                )
                break
    return results


def require_method_response(doc: Dict[str, Any]) -> List[ValidationResult]:
    results = []
    for path, method, declaration in iter_methods(doc):
        if not declaration.get("responses"):
            results.append(
                ValidationResult(
                    validation_id=rule_id("require-method-response"),
                    message=f"Method {method.upper()} {path} does not declare any response",
                    target=f"{path}.{method}",
                )
            )
    return results


API_VERSION = re.compile(r"^v\d+$")


def require_api_version(doc: Dict[str, Any]) -> List[ValidationResult]:
    version = doc.get("version")
    if isinstance(version, str) and API_VERSION.match(version):
        return []
    return [
        ValidationResult(
            validation_id=rule_id("require-api-version"),
            message=f"API version must be of the form v<N>, got {version!r}",
            target="version",
        )
    ]


PROFILES: Dict[str, List[Rule]] = {
    "mercury-profile": [
        no_literal_question_marks_in_property_names,
        resource_name_validation,
        require_method_response,
        require_api_version,
    ],
}
