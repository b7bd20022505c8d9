"""
Exchange asset models.

This package provides Pydantic data models for the asset metadata served by
the Anypoint Exchange registry, plus the helpers that map raw registry JSON
into them.
"""

from .exchange_types import (
    Categories,
    FileInfo,
    RestApi,
    AssetInstance,
    DeploymentVersionQuery,
    map_categories,
    get_file_by_classifier,
)

__all__ = [
    "Categories",
    "FileInfo",
    "RestApi",
    "AssetInstance",
    "DeploymentVersionQuery",
    "map_categories",
    "get_file_by_classifier",
]
