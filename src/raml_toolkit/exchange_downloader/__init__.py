"""
Exchange downloader.

This package handles:
1. Looking up asset metadata in Exchange
2. Searching Exchange
3. Picking asset versions by deployment environment
4. Downloading fat RAML archives
"""

from .downloader import ExchangeDownloader

__all__ = ["ExchangeDownloader"]
