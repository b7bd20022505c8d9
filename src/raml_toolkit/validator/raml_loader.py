"""
Loading of RAML 1.0 documents from file URLs or paths.
"""

import pathlib
from typing import Any, Dict
from urllib.parse import urlparse
from urllib.request import url2pathname

import yaml

from raml_toolkit.raml_toolkit_exceptions import RamlToolkitException

RAML_HEADER = "#%RAML 1.0"


class RamlInclude(str):
    """Target of an ``!include`` tag. Compares equal to the included path."""

    def __repr__(self) -> str:
        return f"!include {str(self)}"


class RamlLoader(yaml.SafeLoader):
    """SafeLoader that keeps ``!include`` references unresolved."""


class RamlDumper(yaml.SafeDumper):
    """SafeDumper that writes ``RamlInclude`` values back as ``!include`` tags."""


def _construct_include(loader: RamlLoader, node: yaml.Node) -> RamlInclude:
    return RamlInclude(loader.construct_scalar(node))


def _represent_include(dumper: RamlDumper, data: RamlInclude) -> yaml.Node:
    return dumper.represent_scalar("!include", str(data))


RamlLoader.add_constructor("!include", _construct_include)
RamlDumper.add_representer(RamlInclude, _represent_include)


def url_to_path(url: str) -> pathlib.Path:
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return pathlib.Path(url2pathname(parsed.path))
    if not parsed.scheme or len(parsed.scheme) == 1:
        # A bare path, possibly with a drive letter
        return pathlib.Path(url)
    raise RamlToolkitException(f"Unsupported URL scheme '{parsed.scheme}' for {url}")


def load_raml(url: str) -> Dict[str, Any]:
    """
    Read and parse a RAML document.

    Args:
        url: ``file://`` URL or filesystem path of the document

    Returns:
        The document as nested dictionaries

    Raises:
        RamlToolkitException: If the document is not a RAML 1.0 mapping
    """
    path = url_to_path(url)
    text = path.read_text(encoding="utf-8")

    first_line = text.lstrip("\ufeff").split("\n", 1)[0].strip()
    if not first_line.startswith(RAML_HEADER):
        raise RamlToolkitException(
            f"{path} is not a RAML 1.0 document, expected header '{RAML_HEADER}'"
        )

    doc = yaml.load(text, Loader=RamlLoader)
    if not isinstance(doc, dict):
        raise RamlToolkitException(f"{path} does not contain a RAML mapping")
    return doc


def render_raml(doc: Dict[str, Any]) -> str:
    """Serialize a document back to RAML 1.0 text, keeping ``!include`` tags."""
    return f"{RAML_HEADER}\n" + yaml.dump(
        doc, Dumper=RamlDumper, sort_keys=False, allow_unicode=True
    )
