"""
Page asset cache tests: all-or-nothing install, cache-first fetch, activation cleanup
"""

import asyncio

import pytest

from asset_cache import AssetRequest, AssetResponse, CacheState, CacheStorage, PageAssetCache
from errors import AssetInstallError, NetworkError

ORIGIN = "http://clinic.local"


class FakeNetwork:
    """Serves canned responses; `down` simulates a lost connection"""

    def __init__(self):
        self.down = False
        self.missing = set()
        self.calls = []

    async def __call__(self, request: AssetRequest) -> AssetResponse:
        self.calls.append((request.method, request.url))
        if self.down:
            raise NetworkError("offline")
        if request.url in self.missing:
            return AssetResponse(url=request.url, status=404)
        kind = "basic" if request.url.startswith(ORIGIN) else "cors"
        return AssetResponse(url=request.url, body=f"body of {request.url}".encode(), type=kind)


@pytest.fixture
def network():
    return FakeNetwork()


@pytest.fixture
def caches():
    return CacheStorage()


def make_cache(caches, network, version=2):
    return PageAssetCache(
        caches, network, version=version, origin=ORIGIN,
        static_assets=["/", "/index.html", "/app.js"],
    )


class TestInstall:

    def test_install_precaches_static_assets(self, caches, network):
        cache = make_cache(caches, network)
        asyncio.run(cache.install())

        assert cache.state is CacheState.INSTALLED
        assert set(caches.open("static-v2")) == {
            f"{ORIGIN}/", f"{ORIGIN}/index.html", f"{ORIGIN}/app.js",
        }

    def test_install_is_all_or_nothing(self, caches, network):
        network.missing.add(f"{ORIGIN}/app.js")
        cache = make_cache(caches, network)

        with pytest.raises(AssetInstallError):
            asyncio.run(cache.install())
        assert caches.open("static-v2") == {}

    def test_failed_reinstall_keeps_live_partition(self, caches, network):
        asyncio.run(make_cache(caches, network).deploy())
        network.missing.add(f"{ORIGIN}/app.js")

        cache = make_cache(caches, network)
        with pytest.raises(AssetInstallError):
            asyncio.run(cache.install())

        assert f"{ORIGIN}/index.html" in caches.open("static-v2")
        network.down = True
        response = asyncio.run(cache.fetch(AssetRequest(url="/patients/7", destination="document")))
        assert response.url == f"{ORIGIN}/index.html"

    def test_install_fails_when_network_down(self, caches, network):
        network.down = True
        with pytest.raises(AssetInstallError):
            asyncio.run(make_cache(caches, network).install())


class TestActivate:

    def test_activation_deletes_only_stale_partitions(self, caches, network):
        caches.open("static-v2")[f"{ORIGIN}/"] = AssetResponse(url=f"{ORIGIN}/")
        caches.open("dynamic-v2")
        caches.open("hospital-management-v1")

        cache = make_cache(caches, network)
        deleted = asyncio.run(cache.activate())

        assert deleted == ["hospital-management-v1"]
        assert sorted(caches.keys()) == ["dynamic-v2", "static-v2"]
        assert f"{ORIGIN}/" in caches.open("static-v2")
        assert cache.state is CacheState.ACTIVE
        assert cache.controls_clients

    def test_redeploy_evicts_previous_version(self, caches, network):
        asyncio.run(make_cache(caches, network, version=2).deploy())
        asyncio.run(make_cache(caches, network, version=2).fetch(AssetRequest(url="/logo.png")))
        asyncio.run(make_cache(caches, network, version=3).deploy())

        assert sorted(caches.keys()) == ["static-v3"]


class TestFetch:

    def test_cache_hit_is_served_without_network(self, caches, network):
        cache = make_cache(caches, network)
        asyncio.run(cache.deploy())
        network.calls.clear()

        response = asyncio.run(cache.fetch(AssetRequest(url="/app.js")))

        assert response.body == f"body of {ORIGIN}/app.js".encode()
        assert network.calls == []

    def test_same_origin_miss_is_stored_in_dynamic_partition(self, caches, network):
        cache = make_cache(caches, network)
        asyncio.run(cache.fetch(AssetRequest(url="/api/hospitals")))

        assert f"{ORIGIN}/api/hospitals" in caches.open("dynamic-v2")

        network.down = True
        response = asyncio.run(cache.fetch(AssetRequest(url="/api/hospitals")))
        assert response.status == 200

    def test_cross_origin_and_errors_are_not_cached(self, caches, network):
        cache = make_cache(caches, network)
        network.missing.add(f"{ORIGIN}/gone")
        asyncio.run(cache.fetch(AssetRequest(url="https://cdn.example.com/lib.js")))
        asyncio.run(cache.fetch(AssetRequest(url="/gone")))

        assert caches.open("dynamic-v2") == {}

    def test_non_get_requests_bypass_cache(self, caches, network):
        cache = make_cache(caches, network)
        asyncio.run(cache.fetch(AssetRequest(url=f"{ORIGIN}/api/sync", method="POST")))
        asyncio.run(cache.fetch(AssetRequest(url=f"{ORIGIN}/api/sync", method="POST")))

        assert network.calls == [("POST", f"{ORIGIN}/api/sync")] * 2
        assert "dynamic-v2" not in caches.keys()

    def test_offline_document_falls_back_to_index(self, caches, network):
        cache = make_cache(caches, network)
        asyncio.run(cache.deploy())
        network.down = True

        response = asyncio.run(cache.fetch(AssetRequest(url="/patients/42", destination="document")))

        assert response.url == f"{ORIGIN}/index.html"

    def test_offline_asset_miss_propagates(self, caches, network):
        cache = make_cache(caches, network)
        asyncio.run(cache.deploy())
        network.down = True

        with pytest.raises(NetworkError):
            asyncio.run(cache.fetch(AssetRequest(url="/images/banner.png")))
