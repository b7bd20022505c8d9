"""
Pydantic data models for assets returned by the Anypoint Exchange API.

The registry answers in camelCase JSON; fields are populated through aliases
and can also be filled by their snake_case names. Models are frozen because
a descriptor is never changed once built from a registry response.
"""

import re
from typing import Any, Dict, List, Optional, Pattern, Union

from pydantic import BaseModel, ConfigDict, Field

Categories = Dict[str, Any]


class FileInfo(BaseModel):
    """
    A downloadable file attached to an asset.

    Checksums are carried as received and are not verified.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    classifier: str = Field(..., description="Role of the file, e.g. fat-raml")
    packaging: Optional[str] = Field(None, description="Packaging format, e.g. zip")
    external_link: Optional[str] = Field(None, alias="externalLink")
    created_date: Optional[str] = Field(None, alias="createdDate")
    md5: Optional[str] = None
    sha1: Optional[str] = None
    # A flag, or the name of the root RAML file
    main_file: Optional[Union[bool, str]] = Field(None, alias="mainFile")


class RestApi(BaseModel):
    """
    One version of a registry asset.

    ``id`` is only present when the asset can be resolved and downloaded.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    updated_date: Optional[str] = Field(None, alias="updatedDate")
    group_id: str = Field(..., alias="groupId")
    asset_id: str = Field(..., alias="assetId")
    version: Optional[str] = None
    categories: Categories = Field(default_factory=dict)
    fat_raml: Optional[FileInfo] = Field(None, alias="fatRaml")

    @classmethod
    def from_exchange_response(
        cls, api_response: Dict[str, Any], classifier: str = "fat-raml"
    ) -> "RestApi":
        """
        Build a descriptor from a raw asset object.

        Args:
            api_response: Parsed JSON object for one asset
            classifier: Classifier of the file to keep as the canonical archive

        Returns:
            RestApi with flattened categories and the canonical file selected
        """
        return cls(
            id=api_response.get("id"),
            name=api_response.get("name"),
            description=api_response.get("description"),
            updated_date=api_response.get("updatedDate"),
            group_id=api_response.get("groupId"),
            asset_id=api_response.get("assetId"),
            version=api_response.get("version"),
            categories=map_categories(api_response.get("categories") or []),
            fat_raml=get_file_by_classifier(api_response.get("files") or [], classifier),
        )


class AssetInstance(BaseModel):
    """A deployed instance of an asset version."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    environment_name: Optional[str] = Field(None, alias="environmentName")
    version: Optional[str] = None


class DeploymentVersionQuery(BaseModel):
    """
    Picks the asset version deployed to an environment matching a pattern.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    rest_api: RestApi
    deployment: Pattern

    @classmethod
    def create(cls, rest_api: RestApi, deployment) -> "DeploymentVersionQuery":
        if isinstance(deployment, str):
            deployment = re.compile(deployment)
        return cls(rest_api=rest_api, deployment=deployment)

    @property
    def asset_path(self) -> str:
        return f"{self.rest_api.group_id}/{self.rest_api.asset_id}"

    def resolve(self, asset: Dict[str, Any]) -> Optional[str]:
        """
        Scan the instances of a fetched asset in listed order.

        Returns:
            The version of the first instance whose environment name matches,
            otherwise the asset's own version
        """
        for raw_instance in asset.get("instances") or []:
            instance = AssetInstance(**raw_instance)
            if instance.environment_name and self.deployment.search(
                instance.environment_name
            ):
                if instance.version:
                    return instance.version

        # No instance matched the intended deployment
        return asset.get("version")


def map_categories(categories: List[Dict[str, Any]]) -> Categories:
    """Flatten ``[{key, value}]`` category entries into a mapping."""
    cats: Categories = {}
    for category in categories:
        cats[category["key"]] = category["value"]
    return cats


def get_file_by_classifier(
    files: List[Dict[str, Any]], classifier: str
) -> Optional[FileInfo]:
    """
    Select the file with the given classifier.

    Every match overwrites the previous one, so when several files share a
    classifier the last one listed is returned.
    """
    my_file = None
    for file in files:
        if file.get("classifier") == classifier:
            my_file = FileInfo(
                classifier=file["classifier"],
                packaging=file.get("packaging"),
                external_link=file.get("externalLink"),
                created_date=file.get("createdDate"),
                md5=file.get("md5"),
                sha1=file.get("sha1"),
                main_file=file.get("mainFile"),
            )
    return my_file
