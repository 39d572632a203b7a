"""
Unit tests for the catalog cache gateway.
"""

import asyncio

import pytest

from storefront.constants import CATEGORIES, CONFIG, PRODUCTS
from storefront.db.sqlite import StoreError
from storefront.services.cache_gateway import CacheEntry, CacheGateway

TTL = 300


class TestCacheEntry:
    def test_empty_entry_is_never_fresh(self):
        assert not CacheEntry().is_fresh(now=0.0, ttl=TTL)

    def test_fresh_until_ttl(self):
        entry = CacheEntry(payload=[], last_refreshed_at=100.0)
        assert entry.is_fresh(now=100.0 + TTL - 1, ttl=TTL)
        assert not entry.is_fresh(now=100.0 + TTL, ttl=TTL)


class TestCacheGateway:
    @pytest.fixture
    def gateway(self, store, clock):
        return CacheGateway(store, ttl=TTL, clock=clock)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource,call", [(PRODUCTS, "products"), (CATEGORIES, "categories"), (CONFIG, "config")])
    async def test_second_read_within_ttl_hits_cache(self, gateway, store, clock, resource, call):
        first = await gateway.get(resource)
        clock.advance(TTL - 1)
        second = await gateway.get(resource)

        assert second is first
        assert store.calls[call] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource,call", [(PRODUCTS, "products"), (CATEGORIES, "categories"), (CONFIG, "config")])
    async def test_read_after_ttl_refreshes(self, gateway, store, clock, resource, call):
        await gateway.get(resource)
        clock.advance(TTL)
        await gateway.get(resource)

        assert store.calls[call] == 2
        assert gateway.entry(resource).last_refreshed_at == clock.now

    @pytest.mark.asyncio
    async def test_products_are_transformed(self, gateway):
        products = await gateway.get_products()

        assert len(products) == 1
        assert products[0].id == "1"
        assert products[0].images == ["https://img/cam-1.jpg", "https://img/cam-2.jpg"]

    @pytest.mark.asyncio
    async def test_config_is_normalized(self, gateway):
        config = await gateway.get_config()
        assert config.app_name == "Safari"
        assert config.whatsapp_number == "0991234567"

    @pytest.mark.asyncio
    async def test_empty_list_is_cached(self, gateway, store):
        store.products = []
        assert await gateway.get_products() == []
        assert await gateway.get_products() == []
        assert store.calls["products"] == 1

    @pytest.mark.asyncio
    async def test_failure_propagates_and_keeps_entry(self, gateway, store, clock):
        cached = await gateway.get_products()
        refreshed_at = gateway.entry(PRODUCTS).last_refreshed_at

        clock.advance(TTL)
        store.fail = True
        with pytest.raises(StoreError):
            await gateway.get_products()

        entry = gateway.entry(PRODUCTS)
        assert entry.payload is cached
        assert entry.last_refreshed_at == refreshed_at

    @pytest.mark.asyncio
    async def test_failed_refresh_does_not_extend_ttl(self, gateway, store, clock):
        await gateway.get_products()
        clock.advance(TTL)
        store.fail = True
        with pytest.raises(StoreError):
            await gateway.get_products()

        # the stale payload is not served afterwards
        with pytest.raises(StoreError):
            await gateway.get_products()
        assert store.calls["products"] == 3

    @pytest.mark.asyncio
    async def test_failure_on_empty_cache(self, gateway, store):
        store.fail = True
        with pytest.raises(StoreError):
            await gateway.get_config()
        assert gateway.entry(CONFIG).payload is None

    @pytest.mark.asyncio
    async def test_concurrent_misses_each_query_the_store(self, gateway, store):
        await asyncio.gather(gateway.get_products(), gateway.get_products())
        assert store.calls["products"] == 2

    @pytest.mark.asyncio
    async def test_unknown_resource(self, gateway):
        with pytest.raises(KeyError):
            await gateway.get("orders")

    @pytest.mark.asyncio
    async def test_single_product_is_not_cached(self, gateway, store):
        assert (await gateway.get_product("1")).name == "Cámara IP Wifi"
        await gateway.get_product("1")
        assert store.calls["product"] == 2

    @pytest.mark.asyncio
    async def test_single_product_missing(self, gateway, store):
        assert await gateway.get_product("99") is None
        assert await gateway.get_product("abc") is None
        assert store.calls["product"] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("product_id", ["99999999999999999999", "٣", "１", "-1", "1.0", ""])
    async def test_single_product_out_of_range_or_non_ascii(self, gateway, store, product_id):
        assert await gateway.get_product(product_id) is None
        assert store.calls["product"] == 0
