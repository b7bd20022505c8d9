"""
Tools for working with RAML API definitions published on Anypoint Exchange.
"""

from raml_toolkit.exchange_downloader import ExchangeDownloader
from raml_toolkit.exchange_models import FileInfo, RestApi
from raml_toolkit.raml_toolkit_config import ApiConfig, ExchangeConfig
from raml_toolkit.raml_toolkit_exceptions import RamlToolkitException
from raml_toolkit.raml_toolkit_logger import RamlToolLogger, WarningSink

__all__ = [
    "ExchangeDownloader",
    "FileInfo",
    "RestApi",
    "ApiConfig",
    "ExchangeConfig",
    "RamlToolkitException",
    "RamlToolLogger",
    "WarningSink",
]
