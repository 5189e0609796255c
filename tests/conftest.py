import pytest

from app.config import Settings
from app.errors import ShopifyGraphQLError

JEDDAH_GID = "gid://shopify/Collection/1001"
RIYADH_GID = "gid://shopify/Collection/1002"
DAMMAM_GID = "gid://shopify/Collection/1003"
SECRET = "shpss_test_secret"


class FakeMutator:
    """In-memory stand-in for the Shopify collection mutations."""

    def __init__(self, fail_on=None, user_errors=None, graphql_error_on=None):
        self.calls = []
        self.fail_on = set(fail_on or ())
        self.graphql_error_on = set(graphql_error_on or ())
        self.user_errors = dict(user_errors or {})

    async def _call(self, action, collection_id, product_gid):
        self.calls.append((action, collection_id, product_gid))
        if collection_id in self.fail_on:
            raise RuntimeError(f"transport failure for {collection_id}")
        if collection_id in self.graphql_error_on:
            raise ShopifyGraphQLError(502, {"errors": [{"message": "Bad gateway"}]})
        return self.user_errors.get(collection_id, [])

    async def add_product_to_collection(self, collection_id, product_gid):
        return await self._call("add", collection_id, product_gid)

    async def remove_product_from_collection(self, collection_id, product_gid):
        return await self._call("remove", collection_id, product_gid)


@pytest.fixture
def fake_mutator():
    return FakeMutator()


@pytest.fixture
def make_mutator():
    return FakeMutator


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = {
            "SHOPIFY_SHOP": "deals-test.myshopify.com",
            "SHOPIFY_ADMIN_ACCESS_TOKEN": "shpat_test",
            "SHOPIFY_API_SECRET": SECRET,
            "CITY_SOURCE": "title",
            "PROMO_SOURCE": "price",
            "DEALS_JEDDAH_COLLECTION_GID": JEDDAH_GID,
            "DEALS_RIYADH_COLLECTION_GID": RIYADH_GID,
            "DEALS_DAMMAM_COLLECTION_GID": DAMMAM_GID,
            "LOG_LEVEL": "info",
            "SKIP_HMAC": False,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
