import math
import re
from enum import Enum
from typing import Any

from pydantic import BaseModel

from app.config import (
    DealsConfig,
    MetafieldCitySource,
    MetafieldPromoStrategy,
    PricePromoStrategy,
    TagPromoStrategy,
    TitleCitySource,
)
from app.shopify.models import ShopifyProduct, ShopifyVariant

NAN = float("nan")
_WS_RE = re.compile(r"\s+")


class City(str, Enum):
    JEDDAH = "jeddah"
    RIYADH = "riyadh"
    DAMMAM = "dammam"


# Checked in this order; includes the near-miss spellings seen in variant titles
CITY_FRAGMENTS: dict[City, tuple[str, ...]] = {
    City.JEDDAH: ("jeddah", "jedddah", "jiddah"),
    City.RIYADH: ("riyadh", "riyad"),
    City.DAMMAM: ("dammam", "damam"),
}


class PromoSignal(BaseModel):
    promo: bool
    price: float = NAN
    cap: float = NAN


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------

def normalize(s: Any) -> str:
    if s is None:
        return ""
    return _WS_RE.sub(" ", str(s).lower()).strip()


def to_number(value: Any) -> float:
    """Parse a price-like value ("1,299.00", 80, None) into a float, nan if unusable."""
    if value is None or isinstance(value, bool):
        return NAN
    if isinstance(value, (int, float)):
        n = float(value)
    else:
        text = str(value).replace(",", "").strip()
        if not text:
            return NAN
        try:
            n = float(text)
        except ValueError:
            return NAN
    return n if math.isfinite(n) else NAN


def normalize_city_name(s: Any) -> City | None:
    n = normalize(s)
    if not n:
        return None
    for city, fragments in CITY_FRAGMENTS.items():
        if any(fragment in n for fragment in fragments):
            return city
    return None


# ----------------------------------------------------------------------
# City classification
# ----------------------------------------------------------------------

def classify_city(variant: ShopifyVariant, config: DealsConfig) -> City | None:
    source = config.city_source
    if isinstance(source, MetafieldCitySource):
        mf = variant.find_metafield(source.namespace, source.key)
        if mf is not None and normalize(mf.value):
            return normalize_city_name(mf.value)
    elif not isinstance(source, TitleCitySource):
        raise TypeError(f"Unsupported city source: {source!r}")

    # e.g. "Jeddah" or "Jeddah / Large"
    return normalize_city_name(variant.title)


# ----------------------------------------------------------------------
# Promo detectors
# ----------------------------------------------------------------------

def promo_by_price(variant: ShopifyVariant) -> PromoSignal:
    price = to_number(variant.price)
    cap = to_number(variant.compare_at_price)
    promo = not math.isnan(price) and not math.isnan(cap) and cap > price
    return PromoSignal(promo=promo, price=price, cap=cap)


def promo_by_metafield(variant: ShopifyVariant, namespace: str, key: str) -> PromoSignal:
    mf = variant.find_metafield(namespace, key)
    val = normalize(mf.value if mf is not None else "")
    return PromoSignal(
        promo=val in ("true", "1"),
        price=to_number(variant.price),
        cap=to_number(variant.compare_at_price),
    )


def promo_by_tag(product: ShopifyProduct, city: City) -> PromoSignal:
    tags = (product.tags or "").lower()
    return PromoSignal(promo=f"deal-{city.value}" in tags)


def classify_promo(
    variant: ShopifyVariant,
    product: ShopifyProduct,
    city: City,
    config: DealsConfig,
) -> PromoSignal:
    strategy = config.promo_strategy
    if isinstance(strategy, PricePromoStrategy):
        return promo_by_price(variant)
    if isinstance(strategy, MetafieldPromoStrategy):
        return promo_by_metafield(variant, strategy.namespace, strategy.key)
    if isinstance(strategy, TagPromoStrategy):
        return promo_by_tag(product, city)
    raise TypeError(f"Unsupported promo strategy: {strategy!r}")
