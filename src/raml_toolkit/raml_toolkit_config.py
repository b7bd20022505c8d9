"""
Configuration parameters for the Exchange client.

Settings can be built from a dictionary, usually the ``[exchange]`` table of
an ``exchange.toml`` file:

```toml
[exchange]
download_folder = "download"
deployment = "^prod"

[[exchange.apis]]
group_id = "893f605e-10e2-423a-bdb4-f952f56eb6d8"
asset_id = "shopper-products"
version = "1.0.3"
```
"""

import os
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from raml_toolkit.raml_toolkit_exceptions import RamlToolkitException

ANYPOINT_BASE_URI = "https://anypoint.mulesoft.com/exchange/api/v2"
ANYPOINT_BASE_URI_WITHOUT_VERSION = "https://anypoint.mulesoft.com/exchange"
DEFAULT_DOWNLOAD_FOLDER = "download"
FAT_RAML_CLASSIFIER = "fat-raml"
ACCESS_TOKEN_ENV_VAR = "ANYPOINT_ACCESS_TOKEN"


@dataclass
class ApiConfig:
    """A single API pinned in the configuration file."""

    group_id: str
    asset_id: str
    version: Optional[str] = None

    def validate(self) -> Tuple[bool, Optional[str]]:
        """
        Validate the API entry.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not self.group_id:
            return False, f"No group_id specified for API {self.asset_id or '<unnamed>'}"
        if not self.asset_id:
            return False, f"No asset_id specified for API in group {self.group_id}"
        return True, None

    @property
    def asset_path(self) -> str:
        if self.version:
            return f"{self.group_id}/{self.asset_id}/{self.version}"
        return f"{self.group_id}/{self.asset_id}"


@dataclass
class ExchangeConfig:
    """
    Configuration parameters
    """

    base_uri: str = ANYPOINT_BASE_URI
    ui_base_uri: str = ANYPOINT_BASE_URI_WITHOUT_VERSION
    download_folder: str = DEFAULT_DOWNLOAD_FOLDER
    fat_raml_classifier: str = FAT_RAML_CLASSIFIER
    deployment: Optional[str] = None
    access_token: Optional[str] = None
    apis: List[ApiConfig] = field(default_factory=list)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ExchangeConfig":
        """
        Create an ExchangeConfig from a dictionary (loaded from TOML).

        Accepts either the whole document or just the ``exchange`` table.

        Raises:
            RamlToolkitException: If configuration is invalid
        """
        section = config_dict.get("exchange", config_dict)
        if not isinstance(section, dict):
            raise RamlToolkitException("'exchange' must be a table")

        apis_list = section.get("apis", [])
        if not isinstance(apis_list, list):
            raise RamlToolkitException("'apis' must be a list")

        apis = []
        for entry in apis_list:
            if not isinstance(entry, dict):
                raise RamlToolkitException(f"API entry must be a table, got: {entry!r}")
            api = ApiConfig(
                group_id=entry.get("group_id", ""),
                asset_id=entry.get("asset_id", ""),
                version=entry.get("version"),
            )
            is_valid, error_msg = api.validate()
            if not is_valid:
                raise RamlToolkitException(error_msg)
            apis.append(api)

        access_token = section.get("access_token") or os.environ.get(ACCESS_TOKEN_ENV_VAR)

        return cls(
            base_uri=section.get("base_uri", ANYPOINT_BASE_URI).rstrip("/"),
            ui_base_uri=section.get("ui_base_uri", ANYPOINT_BASE_URI_WITHOUT_VERSION).rstrip("/"),
            download_folder=section.get("download_folder", DEFAULT_DOWNLOAD_FOLDER),
            fat_raml_classifier=section.get("fat_raml_classifier", FAT_RAML_CLASSIFIER),
            deployment=section.get("deployment"),
            access_token=access_token,
            apis=apis,
        )

    @classmethod
    def from_toml(cls, path: str) -> "ExchangeConfig":
        with open(path, "rb") as f:
            toml_dict = tomllib.load(f)
        return cls.from_dict(toml_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert ExchangeConfig to dictionary representation, without the token."""
        out = asdict(self)
        out.pop("access_token")
        return out
