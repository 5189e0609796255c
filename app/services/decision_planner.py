import logging
import math
from typing import Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, field_serializer

from app.config import DealsConfig
from app.services.signal_extractor import City, classify_city, classify_promo
from app.shopify.models import ShopifyProduct, ShopifyVariant

logger = logging.getLogger(__name__)

VariantId = Optional[Union[int, str]]


class Decision(BaseModel):
    city: City
    action: Literal["add", "remove"]
    collection_id: str
    variant_id: VariantId = None
    price: float
    compare_at_price: float

    @field_serializer("price", "compare_at_price")
    def _nan_as_null(self, v: float):
        return None if math.isnan(v) else v


class PlanSkip(BaseModel):
    variant_id: VariantId = None
    reason: Literal["unrecognized_city", "no_collection"]
    city: Optional[City] = None


class DecisionPlan(BaseModel):
    decisions: List[Decision] = []
    skipped: List[PlanSkip] = []


def build_plan(
    product: ShopifyProduct,
    variants: Iterable[ShopifyVariant],
    config: DealsConfig,
) -> DecisionPlan:
    """
    One decision per variant that has a recognized city and a configured collection,
    in variant order. Variants that are filtered out are recorded in `skipped`.
    """
    log = logger.info if config.verbose else logger.debug
    result = DecisionPlan()

    for v in variants:
        city = classify_city(v, config)
        if city is None:
            log("Variant %s skipped: no city in %r", v.id, v.title)
            result.skipped.append(PlanSkip(variant_id=v.id, reason="unrecognized_city"))
            continue

        signal = classify_promo(v, product, city, config)
        if config.verbose:
            logger.info(
                "Variant %s (%s) price=%s cap=%s promo=%s",
                v.id, city.value, signal.price, signal.cap, signal.promo,
            )

        collection_id = config.collection_for(city)
        if not collection_id:
            log(
                "No collection GID configured for city=%s. Expected DEALS_%s_COLLECTION_GID",
                city.value, city.value.upper(),
            )
            result.skipped.append(PlanSkip(variant_id=v.id, reason="no_collection", city=city))
            continue

        result.decisions.append(
            Decision(
                city=city,
                action="add" if signal.promo else "remove",
                collection_id=collection_id,
                variant_id=v.id,
                price=signal.price,
                compare_at_price=signal.cap,
            )
        )

    return result


def plan(
    product: ShopifyProduct,
    variants: Iterable[ShopifyVariant],
    config: DealsConfig,
) -> List[Decision]:
    return build_plan(product, variants, config).decisions
