"""
CareSync: Page Asset Cache
Install-time pre-cache, cache-first fetch with a dynamic runtime partition,
and activation-time eviction of partitions from older versions
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional
from urllib.parse import urljoin, urlsplit

import requests
from pydantic import BaseModel, Field

import config
from errors import AssetInstallError, NetworkError

logger = logging.getLogger(__name__)

# ============================================================================
# REQUEST / RESPONSE
# ============================================================================

class AssetRequest(BaseModel):
    url: str
    method: str = Field(default="GET")
    destination: str = Field(default="", description="'document' for top-level page loads")


class AssetResponse(BaseModel):
    url: str
    status: int = Field(default=200)
    body: bytes = Field(default=b"")
    headers: Dict[str, str] = Field(default_factory=dict)
    type: str = Field(default="basic", description="'basic' for same-origin responses")

    @property
    def ok(self) -> bool:
        return self.status == 200


Fetcher = Callable[[AssetRequest], Awaitable[AssetResponse]]


def origin_of(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


class RequestsFetcher:
    """Network fetch through requests, run off the event loop"""

    def __init__(self, origin: str = config.ASSET_ORIGIN, timeout: float = config.REQUEST_TIMEOUT):
        self.origin = origin_of(origin)
        self.timeout = timeout

    def _fetch(self, request: AssetRequest) -> AssetResponse:
        try:
            response = requests.request(request.method, request.url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Network fetch failed for {request.url}: {e}") from e

        return AssetResponse(
            url=request.url,
            status=response.status_code,
            body=response.content,
            headers=dict(response.headers),
            type="basic" if origin_of(response.url or request.url) == self.origin else "cors",
        )

    async def __call__(self, request: AssetRequest) -> AssetResponse:
        return await asyncio.to_thread(self._fetch, request)


# ============================================================================
# CACHE STORAGE
# ============================================================================

class CacheStorage:
    """Named partitions of url -> response, shared by every deployed version"""

    def __init__(self):
        self._partitions: Dict[str, Dict[str, AssetResponse]] = {}

    def open(self, name: str) -> Dict[str, AssetResponse]:
        return self._partitions.setdefault(name, {})

    def keys(self) -> List[str]:
        return list(self._partitions)

    def delete(self, name: str) -> bool:
        return self._partitions.pop(name, None) is not None

    def match(self, url: str) -> Optional[AssetResponse]:
        for partition in self._partitions.values():
            if url in partition:
                return partition[url]
        return None


# ============================================================================
# PAGE ASSET CACHE
# ============================================================================

class CacheState(str, Enum):
    INSTALLING = "Installing"
    INSTALLED = "Installed"
    ACTIVATING = "Activating"
    ACTIVE = "Active"


class PageAssetCache:
    """
    One deployed version of the page cache.
    Partition names embed the version, so a bump orphans the old ones.
    """

    def __init__(self, caches: CacheStorage, fetcher: Fetcher,
                 version: int = config.ASSET_CACHE_VERSION,
                 origin: str = config.ASSET_ORIGIN,
                 static_assets: Optional[List[str]] = None,
                 offline_fallback: str = config.OFFLINE_FALLBACK_DOCUMENT):
        self.caches = caches
        self.fetcher = fetcher
        self.version = version
        self.origin = origin
        self.static_assets = list(config.STATIC_ASSETS if static_assets is None else static_assets)
        self.offline_fallback = offline_fallback
        self.state: Optional[CacheState] = None
        self.controls_clients = False

    @property
    def static_partition(self) -> str:
        return f"static-v{self.version}"

    @property
    def dynamic_partition(self) -> str:
        return f"dynamic-v{self.version}"

    def resolve(self, url: str) -> str:
        return urljoin(self.origin, url)

    # ------------------------------------------------------------- lifecycle

    async def install(self) -> None:
        """Pre-cache every static asset; any failure aborts the whole install"""
        self.state = CacheState.INSTALLING
        logger.info(f"📦 Installing asset cache v{self.version} ({len(self.static_assets)} assets)")

        fetched: Dict[str, AssetResponse] = {}
        for asset in self.static_assets:
            url = self.resolve(asset)
            try:
                response = await self.fetcher(AssetRequest(url=url))
            except NetworkError as e:
                raise self._install_failed(f"Cannot fetch {asset}: {e}") from e
            if not response.ok:
                raise self._install_failed(f"Cannot fetch {asset}: HTTP {response.status}")
            fetched[url] = response

        self.caches.open(self.static_partition).update(fetched)
        self.state = CacheState.INSTALLED

    def _install_failed(self, reason: str) -> AssetInstallError:
        logger.error(f"❌ Asset cache install failed: {reason}")
        self.state = None
        return AssetInstallError(reason)

    async def activate(self) -> List[str]:
        """Delete partitions of other versions, then take control of open pages"""
        self.state = CacheState.ACTIVATING
        keep = {self.static_partition, self.dynamic_partition}

        deleted = []
        for name in self.caches.keys():
            if name not in keep:
                logger.info(f"🗑️ Deleting old cache: {name}")
                self.caches.delete(name)
                deleted.append(name)

        self.controls_clients = True
        self.state = CacheState.ACTIVE
        return deleted

    async def deploy(self) -> List[str]:
        """install() followed immediately by activate()"""
        await self.install()
        return await self.activate()

    # ----------------------------------------------------------------- fetch

    async def fetch(self, request: AssetRequest) -> AssetResponse:
        if request.method.upper() != "GET":
            return await self.fetcher(request)

        url = self.resolve(request.url)
        cached = self.caches.match(url)
        if cached is not None:
            return cached

        network_request = request.model_copy(update={"url": url})
        try:
            response = await self.fetcher(network_request)
        except NetworkError:
            if request.destination == "document":
                fallback = self.caches.match(self.resolve(self.offline_fallback))
                if fallback is not None:
                    logger.info(f"📴 Serving offline fallback for {url}")
                    return fallback
            raise

        if response.ok and response.type == "basic":
            self.caches.open(self.dynamic_partition)[url] = response.model_copy(deep=True)
        return response
