"""
MCP (Model Context Protocol) runner for raml_toolkit.

This module exposes the Exchange client and the RAML profile validator as MCP
tools using the fastmcp framework. It reads an `exchange.toml` file from the
workspace root to find the registry settings, the access token and the APIs
pinned for download.

1. Loads exchange.toml at startup when present
2. Each tool checks for configuration at call time as fallback
3. Tool results are JSON strings with a "status" field
"""

import json
import logging
import os
from typing import Optional

import httpx
from fastmcp import FastMCP

from raml_toolkit.exchange_downloader import ExchangeDownloader
from raml_toolkit.exchange_models import RestApi
from raml_toolkit.raml_toolkit_config import ACCESS_TOKEN_ENV_VAR, ExchangeConfig
from raml_toolkit.raml_toolkit_exceptions import RamlToolkitException
from raml_toolkit.raml_toolkit_logger import RamlToolLogger
from raml_toolkit.validator import validate_file

EXCHANGE_TOML = "exchange.toml"

EXCHANGE_TOML_SCHEMA = """
# Exchange configuration for raml_toolkit MCP

[exchange]
# Bearer token for Anypoint Exchange (optional, falls back to $ANYPOINT_ACCESS_TOKEN)
# access_token = "..."

# Folder the fat RAML archives are written to (optional, defaults to "download")
download_folder = "download"

# Pattern used to pick the deployed version when an API has no version (optional)
# deployment = "^prod"

# APIs to download with exchange_download_configured
[[exchange.apis]]
group_id = "893f605e-10e2-423a-bdb4-f952f56eb6d8"
asset_id = "shopper-products"
version = "1.0.3"
"""


class MCPToolError(Exception):
    """Base exception for MCP tool errors."""

    pass


class ExchangeNotConfiguredException(MCPToolError):
    """Exception raised when no access token is available."""

    pass


class MCPRunner:
    """
    MCP runner that exposes Exchange lookups, downloads and RAML validation as tools.

    Workflow:
    - If exchange.toml exists at startup it is loaded immediately
    - If it is missing, every Exchange tool looks for it again at call time
    - Without a file, $ANYPOINT_ACCESS_TOKEN alone is enough to use the defaults

    Example usage:
    ```python
    runner = MCPRunner("/path/to/workspace")
    server = runner.create_mcp_server()
    server.run()
    ```
    """

    def __init__(
        self,
        workspace_root: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the MCP runner.

        Args:
            workspace_root: Root directory of the workspace. If None, uses current directory.
            client: HTTP client handed to the downloader, mainly for tests
        """
        self.workspace_root = workspace_root or os.getcwd()
        self.logger = RamlToolLogger()
        self.client = client
        self.config: Optional[ExchangeConfig] = None

        self._try_load_config()

    @property
    def config_path(self) -> str:
        return os.path.join(self.workspace_root, EXCHANGE_TOML)

    def _try_load_config(self) -> None:
        """
        Attempt to load exchange.toml, but don't fail if it is missing or broken.
        """
        if not os.path.exists(self.config_path):
            return

        try:
            self.config = ExchangeConfig.from_toml(self.config_path)
            self.logger.log(
                f"Loaded Exchange configuration with {len(self.config.apis)} pinned API(s)",
                logging.INFO,
            )
        except (OSError, ValueError, RamlToolkitException) as e:
            self.logger.log(
                f"Failed to load {EXCHANGE_TOML} from {self.config_path}: {str(e)}",
                logging.ERROR,
            )

    def _ensure_configured(self) -> bool:
        """
        Check if configuration needs to be loaded at tool call time.

        Returns:
            True if a configuration with an access token is available
        """
        if self.config is None:
            self._try_load_config()

        if self.config is None and os.environ.get(ACCESS_TOKEN_ENV_VAR):
            self.config = ExchangeConfig.from_dict({})

        return self.config is not None and bool(self.config.access_token)

    def get_configuration_error_message(self) -> str:
        return (
            "Anypoint Exchange access is not configured.\n\n"
            f"Please set ${ACCESS_TOKEN_ENV_VAR} or create an '{EXCHANGE_TOML}' file in your "
            "workspace root with the following schema:\n\n"
            f"{EXCHANGE_TOML_SCHEMA}"
        )

    def get_downloader(self) -> ExchangeDownloader:
        if not self._ensure_configured():
            raise ExchangeNotConfiguredException(self.get_configuration_error_message())
        return ExchangeDownloader(self.logger, self.config, self.client)

    def _not_configured(self) -> str:
        return json.dumps(
            {"status": "error", "message": self.get_configuration_error_message()}
        )

    async def search(self, query: str) -> str:
        if not self._ensure_configured():
            return self._not_configured()
        try:
            apis = await self.get_downloader().search_exchange(self.config.access_token, query)
        except httpx.HTTPError as e:
            raise MCPToolError(f"Failed to search Exchange: {str(e)}")
        return json.dumps(
            {"status": "success", "apis": [api.model_dump(mode="json") for api in apis]}
        )

    async def get_asset(self, asset_path: str) -> str:
        if not self._ensure_configured():
            return self._not_configured()
        try:
            asset = await self.get_downloader().get_asset(self.config.access_token, asset_path)
        except httpx.HTTPError as e:
            raise MCPToolError(f"Failed to get asset: {str(e)}")
        if asset is None:
            return json.dumps({"status": "not_found", "asset_path": asset_path})
        return json.dumps({"status": "success", "asset": asset})

    async def get_specific_api(self, group_id: str, asset_id: str, version: str) -> str:
        if not self._ensure_configured():
            return self._not_configured()
        try:
            api = await self.get_downloader().get_specific_api(
                self.config.access_token, group_id, asset_id, version
            )
        except httpx.HTTPError as e:
            raise MCPToolError(f"Failed to get API: {str(e)}")
        if api is None:
            return json.dumps({"status": "not_found", "asset_path": f"{group_id}/{asset_id}/{version}"})
        return json.dumps({"status": "success", "api": api.model_dump(mode="json")})

    async def get_version_by_deployment(self, group_id: str, asset_id: str, deployment: str) -> str:
        if not self._ensure_configured():
            return self._not_configured()
        try:
            version = await self.get_downloader().get_version_by_deployment(
                self.config.access_token,
                RestApi(group_id=group_id, asset_id=asset_id),
                deployment,
            )
        except httpx.HTTPError as e:
            raise MCPToolError(f"Failed to get version: {str(e)}")
        if version is None:
            return json.dumps({"status": "not_found", "asset_path": f"{group_id}/{asset_id}"})
        return json.dumps({"status": "success", "version": version})

    def _resolve_destination(self, destination_folder: Optional[str]) -> str:
        folder = destination_folder or self.config.download_folder
        if not os.path.isabs(folder):
            folder = os.path.join(self.workspace_root, folder)
        return folder

    async def download(self, query: str, destination_folder: Optional[str] = None) -> str:
        if not self._ensure_configured():
            return self._not_configured()
        try:
            folder = await self.get_downloader().search_and_download(
                self.config.access_token, query, self._resolve_destination(destination_folder)
            )
        except (httpx.HTTPError, OSError) as e:
            raise MCPToolError(f"Failed to download APIs: {str(e)}")
        return json.dumps({"status": "success", "destination_folder": folder})

    async def download_configured(self, destination_folder: Optional[str] = None) -> str:
        if not self._ensure_configured():
            return self._not_configured()
        try:
            folder = await self.get_downloader().download_configured_apis(
                self.config.access_token,
                destination_folder=self._resolve_destination(destination_folder),
            )
        except (httpx.HTTPError, OSError) as e:
            raise MCPToolError(f"Failed to download APIs: {str(e)}")
        return json.dumps({"status": "success", "destination_folder": folder})

    def validate(self, file_path: str, profile: str = "mercury-profile") -> str:
        if not os.path.isabs(file_path):
            file_path = os.path.join(self.workspace_root, file_path)
        try:
            report = validate_file(file_path, profile, self.logger)
        except (OSError, RamlToolkitException) as e:
            raise MCPToolError(f"Failed to validate {file_path}: {str(e)}")
        return json.dumps({"status": "success", "report": report.model_dump(mode="json")})

    def create_mcp_server(self) -> FastMCP:
        """
        Create and configure a fastmcp server instance with the raml_toolkit tools.
        """
        server = FastMCP("raml-toolkit-mcp")
        self._register_tools(server)
        return server

    def _register_tools(self, server: FastMCP) -> None:
        """
        Register all tools with the fastmcp server.

        Args:
            server: The fastmcp server instance
        """

        @server.tool()
        async def exchange_search(query: str) -> str:
            """Search Exchange for APIs matching a free text query.

            Args:
                query: Search string
            """
            return await self.search(query)

        @server.tool()
        async def exchange_get_asset(asset_path: str) -> str:
            """Get raw asset metadata from Exchange.

            Args:
                asset_path: groupId/assetId/version, groupId/assetId or groupId
            """
            return await self.get_asset(asset_path)

        @server.tool()
        async def exchange_get_specific_api(group_id: str, asset_id: str, version: str) -> str:
            """Get the descriptor of one API version.

            Args:
                group_id: Exchange group id
                asset_id: Exchange asset id
                version: Asset version
            """
            return await self.get_specific_api(group_id, asset_id, version)

        @server.tool()
        async def exchange_get_version_by_deployment(
            group_id: str, asset_id: str, deployment: str
        ) -> str:
            """Get the API version deployed to an environment matching a pattern.

            Args:
                group_id: Exchange group id
                asset_id: Exchange asset id
                deployment: Regular expression matched against environment names
            """
            return await self.get_version_by_deployment(group_id, asset_id, deployment)

        @server.tool()
        async def exchange_download(query: str, destination_folder: Optional[str] = None) -> str:
            """Search Exchange and download the fat RAML of every hit.

            Args:
                query: Search string
                destination_folder: Folder for the archives
            """
            return await self.download(query, destination_folder)

        @server.tool()
        async def exchange_download_configured(destination_folder: Optional[str] = None) -> str:
            """Download the fat RAML of every API pinned in exchange.toml.

            Args:
                destination_folder: Folder for the archives
            """
            return await self.download_configured(destination_folder)

        @server.tool()
        def raml_validate(file_path: str, profile: str = "mercury-profile") -> str:
            """Validate a RAML file against a profile.

            Args:
                file_path: Path of the RAML file, relative to the workspace root
                profile: Name of the validation profile
            """
            return self.validate(file_path, profile)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    MCPRunner().create_mcp_server().run()


__all__ = [
    "MCPRunner",
    "MCPToolError",
    "ExchangeNotConfiguredException",
    "EXCHANGE_TOML_SCHEMA",
    "main",
]
