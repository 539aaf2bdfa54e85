"""
Unit Tests - Review Collection
"""
import pytest

from foodchop.domain import CustomerInteraction, CustomerInteractionPayload, ErrorKind, Ok
from foodchop.services import ReviewCollection
from foodchop.storage import StorageError
from foodchop.storage.memory import MemoryRecordMap
from tests.conftest import CUSTOMER, FIXED_NOW, OTHER_CUSTOMER


class TestAddCustomerInteraction:
    
    async def test_stamps_caller_and_time(self, marketplace, review_payload):
        result = await marketplace.reviews.add_customer_interaction(review_payload, CUSTOMER)
        
        assert isinstance(result, Ok)
        review = result.value
        assert review.customer_id == CUSTOMER
        assert review.product_id == review_payload.product_id
        assert review.rating == 5
        assert review.review == "Great burger"
        assert review.created_at == FIXED_NOW
    
    @pytest.mark.parametrize("field", ["product_id", "rating", "review"])
    async def test_missing_field_is_invalid(self, marketplace, review_payload, field):
        payload = review_payload.model_copy(update={field: None})
        
        result = await marketplace.reviews.add_customer_interaction(payload, CUSTOMER)
        
        assert result.kind == ErrorKind.INVALID_INPUT
        assert result.message == "Invalid payload"
    
    async def test_zero_rating_counts_as_missing(self, marketplace, review_payload):
        payload = review_payload.model_copy(update={"rating": 0})
        
        result = await marketplace.reviews.add_customer_interaction(payload, CUSTOMER)
        
        assert result.kind == ErrorKind.INVALID_INPUT
    
    @pytest.mark.parametrize("rating", [-3, 11, 1000])
    async def test_rating_is_not_range_checked(self, marketplace, review_payload, rating):
        payload = review_payload.model_copy(update={"rating": rating})
        
        result = await marketplace.reviews.add_customer_interaction(payload, CUSTOMER)
        
        assert result.value.rating == rating
    
    async def test_product_existence_is_not_checked(self, marketplace):
        payload = CustomerInteractionPayload(product_id="no-such-product", rating=3, review="ok")
        
        result = await marketplace.reviews.add_customer_interaction(payload, CUSTOMER)
        
        assert isinstance(result, Ok)
    
    async def test_storage_failure(self, review_payload):
        class FailingReviews(MemoryRecordMap):
            async def _write(self, key, raw):
                raise StorageError("unavailable")
        
        reviews = ReviewCollection(FailingReviews("customer_interactions", CustomerInteraction, {}))
        
        result = await reviews.add_customer_interaction(review_payload, CUSTOMER)
        
        assert result.kind == ErrorKind.STORAGE_FAILURE
        assert result.message == "Failed to create customer interaction"


class TestGetCustomerInteractionsByProduct:
    
    async def test_returns_all_reviews_for_product(self, marketplace, review_payload):
        await marketplace.reviews.add_customer_interaction(review_payload, CUSTOMER)
        await marketplace.reviews.add_customer_interaction(review_payload, OTHER_CUSTOMER)
        await marketplace.reviews.add_customer_interaction(
            CustomerInteractionPayload(product_id="fries", rating=4, review="Crispy"), CUSTOMER
        )
        
        result = await marketplace.reviews.get_customer_interactions_by_product(
            review_payload.product_id
        )
        
        assert len(result.value) == 2
        assert {r.customer_id for r in result.value} == {CUSTOMER, OTHER_CUSTOMER}
    
    async def test_no_reviews(self, marketplace):
        result = await marketplace.reviews.get_customer_interactions_by_product("fries")
        
        assert result.value == []
    
    async def test_empty_id_is_invalid(self, marketplace):
        result = await marketplace.reviews.get_customer_interactions_by_product("")
        
        assert result.kind == ErrorKind.INVALID_INPUT
        assert result.message == "Invalid Product ID provided."
