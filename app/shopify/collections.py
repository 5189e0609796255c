import logging

logger = logging.getLogger(__name__)

ADD_TO_COLLECTION = """#graphql
mutation AddToCollection($id: ID!, $pids: [ID!]!) {
  collectionAddProducts(id: $id, productIds: $pids) {
    userErrors { field message }
  }
}
"""

REMOVE_FROM_COLLECTION = """#graphql
mutation RemoveFromCollection($id: ID!, $pids: [ID!]!) {
  collectionRemoveProducts(id: $id, productIds: $pids) {
    userErrors { field message }
  }
}
"""


def _user_errors(resp: dict, mutation_name: str) -> list[dict]:
    data = (resp or {}).get("data") or {}
    return (data.get(mutation_name) or {}).get("userErrors") or []


async def add_to_collection(shopify_client, collection_id: str, product_gid: str) -> list[dict]:
    """
    Add one product to a collection. Adding a product that is already a member is a no-op
    on Shopify's side. Returns the mutation's userErrors (empty on a clean run).
    """
    resp = await shopify_client.graphql(ADD_TO_COLLECTION, {"id": collection_id, "pids": [product_gid]})
    errs = _user_errors(resp, "collectionAddProducts")
    if errs:
        logger.warning("Add userErrors for %s -> %s: %s", product_gid, collection_id, errs)
    return errs


async def remove_from_collection(shopify_client, collection_id: str, product_gid: str) -> list[dict]:
    resp = await shopify_client.graphql(REMOVE_FROM_COLLECTION, {"id": collection_id, "pids": [product_gid]})
    errs = _user_errors(resp, "collectionRemoveProducts")
    if errs:
        logger.warning("Remove userErrors for %s -> %s: %s", product_gid, collection_id, errs)
    return errs
