"""
Unit Tests - Product Catalog
"""
import pytest

from foodchop.domain import Err, ErrorKind, FoodPayload, FoodProduct, Ok
from foodchop.services import FoodMarketplace, ProductCatalog
from foodchop.storage import StorageError
from foodchop.storage.memory import MemoryRecordMap
from tests.conftest import CUSTOMER, OWNER


class FailingRecordMap(MemoryRecordMap):
    """Memory map whose writes always fail"""
    
    async def _write(self, key, raw):
        raise StorageError("disk full")
    
    async def _compare_and_set(self, key, expected, raw):
        raise StorageError("disk full")


class TestLookupProduct:
    """Tests for lookup_product"""
    
    async def test_add_then_lookup_returns_equal_record(self, marketplace, burger_payload):
        """A product read back equals the one returned by add_product"""
        added = await marketplace.catalog.add_product(burger_payload)
        
        found = await marketplace.catalog.lookup_product(added.value.id)
        
        assert isinstance(found, Ok)
        assert found.value == added.value
    
    async def test_empty_id_is_invalid(self, marketplace):
        result = await marketplace.catalog.lookup_product("")
        
        assert isinstance(result, Err)
        assert result.kind == ErrorKind.INVALID_INPUT
        assert result.message == "Invalid ID provided."
    
    async def test_unknown_id_not_found(self, marketplace):
        result = await marketplace.catalog.lookup_product("missing")
        
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.message == "Product with id=missing not found"


class TestAddProduct:
    """Tests for add_product"""
    
    async def test_assigns_fresh_ids(self, marketplace, burger_payload):
        first = await marketplace.catalog.add_product(burger_payload)
        second = await marketplace.catalog.add_product(burger_payload)
        
        assert first.value.id != second.value.id
        assert first.value.name == "Burger"
        assert first.value.quantity_available == 10
    
    @pytest.mark.parametrize(
        "field",
        ["name", "description", "price", "quantity_available"],
    )
    async def test_missing_field_is_invalid(self, marketplace, burger_payload, field):
        payload = burger_payload.model_copy(update={field: None})
        
        result = await marketplace.catalog.add_product(payload)
        
        assert result.kind == ErrorKind.INVALID_INPUT
        assert result.message == "Invalid payload"
    
    @pytest.mark.parametrize("field", ["price", "quantity_available"])
    async def test_zero_counts_as_missing(self, marketplace, burger_payload, field):
        """Zero price or quantity is rejected like a missing field"""
        payload = burger_payload.model_copy(update={field: 0})
        
        result = await marketplace.catalog.add_product(payload)
        
        assert result.kind == ErrorKind.INVALID_INPUT
    
    async def test_negative_price_is_invalid(self, marketplace, burger_payload):
        payload = burger_payload.model_copy(update={"price": -100})
        
        result = await marketplace.catalog.add_product(payload)
        
        assert result.kind == ErrorKind.INVALID_INPUT
    
    async def test_duplicate_id(self, memory_backend, burger_payload):
        """An id collision is reported and the stored product is kept"""
        catalog = ProductCatalog(
            memory_backend.collection("products", FoodProduct),
            owner=OWNER,
            id_factory=lambda: "fixed-id",
        )
        first = await catalog.add_product(burger_payload)
        second = await catalog.add_product(burger_payload.model_copy(update={"name": "Other"}))
        
        assert isinstance(first, Ok)
        assert second.kind == ErrorKind.DUPLICATE_ID
        assert second.message == "Product with the same id already exists"
        stored = await catalog.lookup_product("fixed-id")
        assert stored.value.name == "Burger"
    
    async def test_storage_failure(self, burger_payload):
        catalog = ProductCatalog(FailingRecordMap("products", FoodProduct, {}), owner=OWNER)
        
        result = await catalog.add_product(burger_payload)
        
        assert result.kind == ErrorKind.STORAGE_FAILURE
        assert result.message == "Failed to create product"


class TestListProducts:

    async def test_empty_catalog(self, marketplace):
        result = await marketplace.catalog.list_products()
        
        assert result.value == []
    
    async def test_lists_all_products(self, marketplace, burger_payload):
        await marketplace.catalog.add_product(burger_payload)
        await marketplace.catalog.add_product(burger_payload.model_copy(update={"name": "Fries"}))
        
        result = await marketplace.catalog.list_products()
        
        assert sorted(p.name for p in result.value) == ["Burger", "Fries"]


class TestUpdateProductQuantity:
    """Tests for update_product_quantity"""
    
    async def test_owner_updates_quantity(self, marketplace, burger):
        result = await marketplace.catalog.update_product_quantity(burger.id, 42, OWNER)
        
        assert result.value.quantity_available == 42
        stored = await marketplace.catalog.lookup_product(burger.id)
        assert stored.value.quantity_available == 42
    
    async def test_owner_may_set_zero(self, marketplace, burger):
        result = await marketplace.catalog.update_product_quantity(burger.id, 0, OWNER)
        
        assert result.value.quantity_available == 0
    
    async def test_non_owner_unauthorized(self, marketplace, burger):
        result = await marketplace.catalog.update_product_quantity(burger.id, 42, CUSTOMER)
        
        assert result.kind == ErrorKind.UNAUTHORIZED
        assert result.message == "You are not the owner of this product"
        stored = await marketplace.catalog.lookup_product(burger.id)
        assert stored.value.quantity_available == 10
    
    async def test_unknown_product_not_found(self, marketplace):
        """Existence is checked before ownership"""
        result = await marketplace.catalog.update_product_quantity("missing", 5, CUSTOMER)
        
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.message == "Couldn't update Product with id=missing. Product not found"
    
    async def test_empty_id_is_invalid(self, marketplace):
        result = await marketplace.catalog.update_product_quantity("", 5, OWNER)
        
        assert result.kind == ErrorKind.INVALID_INPUT
        assert result.message == "Invalid Product ID provided."
    
    @pytest.mark.parametrize("quantity", [None, -1])
    async def test_bad_quantity_is_invalid(self, marketplace, burger, quantity):
        result = await marketplace.catalog.update_product_quantity(burger.id, quantity, OWNER)
        
        assert result.kind == ErrorKind.INVALID_INPUT
        assert result.message == "Invalid quantity provided."
    
    async def test_missing_product_reported_before_bad_quantity(self, marketplace):
        result = await marketplace.catalog.update_product_quantity("missing", -1, OWNER)
        
        assert result.kind == ErrorKind.NOT_FOUND
    
    async def test_ownership_checked_before_quantity(self, marketplace, burger):
        result = await marketplace.catalog.update_product_quantity(burger.id, -1, CUSTOMER)
        
        assert result.kind == ErrorKind.UNAUTHORIZED
    
    async def test_nobody_updates_without_configured_owner(self, memory_backend, burger_payload):
        unowned = FoodMarketplace(memory_backend, owner=None)
        burger = (await unowned.catalog.add_product(burger_payload)).value
        
        for caller in [CUSTOMER, "2vxsx-fae"]:
            result = await unowned.catalog.update_product_quantity(burger.id, 1, caller)
            assert result.kind == ErrorKind.UNAUTHORIZED
        
        stored = await unowned.catalog.lookup_product(burger.id)
        assert stored.value.quantity_available == 10


async def test_owner_comes_from_configuration(memory_backend, burger_payload):
    """The privileged identity is whatever the marketplace was built with"""
    marketplace = FoodMarketplace(memory_backend, owner=CUSTOMER)
    burger = (await marketplace.catalog.add_product(burger_payload)).value
    
    allowed = await marketplace.catalog.update_product_quantity(burger.id, 1, CUSTOMER)
    denied = await marketplace.catalog.update_product_quantity(burger.id, 1, OWNER)
    
    assert isinstance(allowed, Ok)
    assert denied.kind == ErrorKind.UNAUTHORIZED
