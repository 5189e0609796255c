import logging

import aiohttp

from app.config import settings
from app.errors import ShopifyGraphQLError
from app.shopify.collections import add_to_collection, remove_from_collection

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = aiohttp.ClientTimeout(total=30)


class ShopifyClient:
    def __init__(self, shop=None, token=None, api_version=None, timeout=DEFAULT_TIMEOUT):
        # Use provided params or fall back to settings
        self.shop = shop or settings.SHOPIFY_SHOP
        self.token = token or settings.SHOPIFY_ADMIN_ACCESS_TOKEN
        self.api_version = api_version or settings.SHOPIFY_API_VERSION
        self.timeout = timeout

        self.graphql_url = f"https://{self.shop}/admin/api/{self.api_version}/graphql.json"

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.token or "",
        }

    async def graphql(self, query: str, variables: dict | None = None) -> dict:
        """
        POST a GraphQL document to the Admin API.
        Raises ShopifyGraphQLError on a non-2xx status or top-level `errors`.
        """
        payload = {"query": query, "variables": variables or {}}
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(self.graphql_url, json=payload, headers=self._headers()) as resp:
                try:
                    data = await resp.json(content_type=None)
                except ValueError:
                    data = {"body": await resp.text()}

                if resp.status >= 400 or (isinstance(data, dict) and data.get("errors")):
                    logger.error("Shopify GraphQL Error %s: %s", resp.status, data)
                    raise ShopifyGraphQLError(resp.status, data)
                return data

    # CollectionMutator
    async def add_product_to_collection(self, collection_id: str, product_gid: str) -> list[dict]:
        return await add_to_collection(self, collection_id, product_gid)

    async def remove_product_from_collection(self, collection_id: str, product_gid: str) -> list[dict]:
        return await remove_from_collection(self, collection_id, product_gid)
