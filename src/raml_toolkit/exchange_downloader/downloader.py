"""
Exchange asset resolver and downloader.

Resolves asset metadata from the Anypoint Exchange registry and downloads the
fat RAML archive of each asset.
"""

import asyncio
import pathlib
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable, List, Optional, Pattern, Union

import httpx

from raml_toolkit.exchange_models import DeploymentVersionQuery, RestApi
from raml_toolkit.raml_toolkit_config import ApiConfig, ExchangeConfig
from raml_toolkit.raml_toolkit_logger import WarningSink


class ExchangeDownloader:
    """
    Resolves and downloads API assets from Exchange.

    Lookups that find nothing are reported through the warning sink and
    return None. Network errors, HTTP errors on searches and downloads, and
    file write errors propagate to the caller.
    """

    def __init__(
        self,
        logger: WarningSink,
        config: Optional[ExchangeConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the downloader.

        Args:
            logger: Sink for warnings carrying a manual remediation hint
            config: Registry endpoints and defaults
            client: Shared HTTP client. A short lived client is opened per
                request when omitted.
        """
        self.logger = logger
        self.config = config or ExchangeConfig()
        self.client = client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.client is not None:
            yield self.client
            return

        async with httpx.AsyncClient(follow_redirects=True) as client:
            yield client

    @staticmethod
    def _auth_headers(access_token: str) -> dict:
        return {"Authorization": f"Bearer {access_token}"}

    async def download_rest_api(
        self, rest_api: RestApi, destination_folder: Optional[str] = None
    ) -> Optional[httpx.Response]:
        """
        Download the fat RAML archive of an asset to ``<folder>/<assetId>.zip``.

        Returns:
            The download response, or None when the asset has no registry id
            or no fat RAML archive
        """
        if not rest_api.id or rest_api.fat_raml is None or not rest_api.fat_raml.external_link:
            self.logger.warn(
                f"Failed to download '{rest_api.name}' RAML as Fat RAML download information is missing.",
                f"Please download it manually from {self.config.ui_base_uri}/{rest_api.group_id}/{rest_api.asset_id} "
                "and update the relevant details in apis/api-config.json",
            )
            return None

        dest_dir = pathlib.Path(destination_folder or self.config.download_folder)
        dest_dir.mkdir(parents=True, exist_ok=True)
        zip_file_path = dest_dir / f"{rest_api.asset_id}.zip"

        async with self._session() as client:
            response = await client.get(rest_api.fat_raml.external_link)
        response.raise_for_status()

        zip_file_path.write_bytes(response.content)
        return response

    async def download_rest_apis(
        self, rest_apis: Iterable[RestApi], destination_folder: Optional[str] = None
    ) -> str:
        """
        Download several assets at once.

        All downloads are started together. The first failure is raised;
        archives already written are left in place and the remaining
        downloads are not cancelled.

        Returns:
            The destination folder
        """
        destination_folder = destination_folder or self.config.download_folder
        await asyncio.gather(
            *(self.download_rest_api(api, destination_folder) for api in rest_apis)
        )
        return destination_folder

    async def get_asset(self, access_token: str, asset_path: str) -> Optional[Any]:
        """
        Get an asset from Exchange. The path can be any of:
          * groupId/assetId/version
          * groupId/assetId
          * groupId

        Returns:
            Parsed JSON body, or None if the registry did not answer with success
        """
        url = f"{self.config.base_uri}/assets/{asset_path}"
        async with self._session() as client:
            res = await client.get(url, headers=self._auth_headers(access_token))

        if not res.is_success:
            self.logger.warn(
                f"Failed to get information about {asset_path} from exchange: "
                f"{res.status_code} - {res.reason_phrase}",
                f"Please get it manually from {url} and update the relevant details in apis/api-config.json",
            )
            return None

        return res.json()

    async def search_exchange(
        self, access_token: str, search_string: str
    ) -> List[RestApi]:
        """
        Search Exchange and map every hit, in registry order.
        """
        async with self._session() as client:
            res = await client.get(
                f"{self.config.base_uri}/assets",
                params={"search": search_string},
                headers=self._auth_headers(access_token),
            )
        res.raise_for_status()

        return [
            RestApi.from_exchange_response(rest_api, self.config.fat_raml_classifier)
            for rest_api in res.json()
        ]

    async def get_version_by_deployment(
        self,
        access_token: str,
        rest_api: RestApi,
        deployment: Union[str, Pattern],
    ) -> Optional[str]:
        """
        Look at the deployed instances of an API for one matching the pattern.

        Returns:
            The version of the first matching instance, the asset's own version
            if none matches, or None if the asset could not be fetched
        """
        query = DeploymentVersionQuery.create(rest_api, deployment)
        asset = await self.get_asset(access_token, query.asset_path)
        if not asset:
            return None
        return query.resolve(asset)

    async def get_specific_api(
        self,
        access_token: str,
        group_id: str,
        asset_id: str,
        version: Optional[str],
    ) -> Optional[RestApi]:
        """
        Get details on a specific group/asset/version combination.

        No request is made when version is empty.
        """
        if not version:
            return None

        api = await self.get_asset(access_token, f"{group_id}/{asset_id}/{version}")
        if not api:
            return None
        return RestApi.from_exchange_response(api, self.config.fat_raml_classifier)

    async def _resolve_api_config(
        self, access_token: str, api_config: ApiConfig
    ) -> Optional[RestApi]:
        version = api_config.version
        if not version and self.config.deployment:
            version = await self.get_version_by_deployment(
                access_token,
                RestApi(group_id=api_config.group_id, asset_id=api_config.asset_id),
                self.config.deployment,
            )
            if not version:
                return None

        if version:
            return await self.get_specific_api(
                access_token, api_config.group_id, api_config.asset_id, version
            )

        # Without a version the registry answers with the latest one
        asset = await self.get_asset(access_token, api_config.asset_path)
        if not asset:
            return None
        return RestApi.from_exchange_response(asset, self.config.fat_raml_classifier)

    async def download_configured_apis(
        self,
        access_token: str,
        api_configs: Optional[List[ApiConfig]] = None,
        destination_folder: Optional[str] = None,
    ) -> str:
        """
        Resolve the configured APIs and download every one that resolves.

        Entries that cannot be resolved are skipped; a warning has already
        been emitted for them.
        """
        api_configs = self.config.apis if api_configs is None else api_configs
        resolved = await asyncio.gather(
            *(self._resolve_api_config(access_token, api) for api in api_configs)
        )
        return await self.download_rest_apis(
            [api for api in resolved if api is not None], destination_folder
        )

    async def search_and_download(
        self,
        access_token: str,
        search_string: str,
        destination_folder: Optional[str] = None,
    ) -> str:
        rest_apis = await self.search_exchange(access_token, search_string)
        return await self.download_rest_apis(rest_apis, destination_folder)
