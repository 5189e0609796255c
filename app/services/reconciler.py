import asyncio
import logging
from typing import Any, List, Literal, Optional, Protocol, Sequence

from pydantic import BaseModel

from app.errors import ShopifyGraphQLError
from app.services.decision_planner import Decision, VariantId
from app.services.signal_extractor import City

logger = logging.getLogger(__name__)


class CollectionMutator(Protocol):
    async def add_product_to_collection(self, collection_id: str, product_gid: str) -> list: ...

    async def remove_product_from_collection(self, collection_id: str, product_gid: str) -> list: ...


class ReconcileResult(BaseModel):
    city: City
    action: Literal["add", "remove"]
    collection_id: str
    variant_id: VariantId = None
    ok: bool
    user_errors: List[Any] = []
    error: Optional[Any] = None


async def _apply(decision: Decision, product_gid: str, mutator: CollectionMutator) -> ReconcileResult:
    base = {
        "city": decision.city,
        "action": decision.action,
        "collection_id": decision.collection_id,
        "variant_id": decision.variant_id,
    }
    try:
        if decision.action == "add":
            user_errors = await mutator.add_product_to_collection(decision.collection_id, product_gid)
        else:
            user_errors = await mutator.remove_product_from_collection(decision.collection_id, product_gid)
        return ReconcileResult(**base, ok=True, user_errors=list(user_errors or []))
    except ShopifyGraphQLError as e:
        logger.error("Mutation error for %s %s: %s", decision.city.value, decision.action, e.response)
        return ReconcileResult(**base, ok=False, error=e.response)
    except Exception as e:
        logger.exception("Mutation error for %s %s: %s", decision.city.value, decision.action, e)
        return ReconcileResult(**base, ok=False, error=str(e))


async def execute(
    decisions: Sequence[Decision],
    product_gid: str,
    mutator: CollectionMutator,
) -> List[ReconcileResult]:
    """
    Apply every decision once, concurrently. Results come back in decision order and a
    failed mutation only fails its own result; nothing already applied is rolled back.
    """
    if not decisions:
        return []
    return list(await asyncio.gather(*(_apply(d, product_gid, mutator) for d in decisions)))
