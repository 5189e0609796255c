from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Required at request time; left optional so a missing value is reported, not raised on import
    SHOPIFY_SHOP: str | None = None
    SHOPIFY_ADMIN_ACCESS_TOKEN: str | None = None
    SHOPIFY_API_SECRET: str | None = None
    SHOPIFY_API_VERSION: str = "2025-10"

    CITY_SOURCE: str = "title"  # 'title' | 'metafield'
    CITY_METAFIELD_NAMESPACE: str = "custom"
    CITY_METAFIELD_KEY: str = "city"

    PROMO_SOURCE: str = "price"  # 'price' | 'metafield' | 'tag'
    PROMO_METAFIELD_NAMESPACE: str = "custom"
    PROMO_METAFIELD_KEY: str = "promo_active"

    DEALS_JEDDAH_COLLECTION_GID: str | None = None
    DEALS_RIYADH_COLLECTION_GID: str | None = None
    DEALS_DAMMAM_COLLECTION_GID: str | None = None

    LOG_LEVEL: str = "info"
    SKIP_HMAC: bool = False

    @property
    def verbose(self) -> bool:
        return self.LOG_LEVEL.strip().lower() == "debug"


settings = Settings()


# ----------------------------------------------------------------------
# Immutable per-request config threaded through extractor / planner
# ----------------------------------------------------------------------

class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class TitleCitySource(_Frozen):
    kind: Literal["title"] = "title"


class MetafieldCitySource(_Frozen):
    kind: Literal["metafield"] = "metafield"
    namespace: str = "custom"
    key: str = "city"


class PricePromoStrategy(_Frozen):
    kind: Literal["price"] = "price"


class MetafieldPromoStrategy(_Frozen):
    kind: Literal["metafield"] = "metafield"
    namespace: str = "custom"
    key: str = "promo_active"


class TagPromoStrategy(_Frozen):
    kind: Literal["tag"] = "tag"


CitySource = Union[TitleCitySource, MetafieldCitySource]
PromoStrategy = Union[PricePromoStrategy, MetafieldPromoStrategy, TagPromoStrategy]


class DealsConfig(_Frozen):
    city_source: CitySource = Field(default_factory=TitleCitySource, discriminator="kind")
    promo_strategy: PromoStrategy = Field(default_factory=PricePromoStrategy, discriminator="kind")
    # city value ('jeddah', ...) -> collection GID; missing city means unmanaged
    collections: dict[str, str] = Field(default_factory=dict)
    verbose: bool = False

    def collection_for(self, city) -> str | None:
        key = getattr(city, "value", city)
        return self.collections.get(key) or None


def _city_source_from(s: Settings) -> CitySource:
    mode = (s.CITY_SOURCE or "title").strip().lower()
    if mode == "title":
        return TitleCitySource()
    if mode == "metafield":
        return MetafieldCitySource(namespace=s.CITY_METAFIELD_NAMESPACE, key=s.CITY_METAFIELD_KEY)
    raise ConfigurationError(f"Unknown CITY_SOURCE {s.CITY_SOURCE!r} (expected 'title' or 'metafield')")


def _promo_strategy_from(s: Settings) -> PromoStrategy:
    mode = (s.PROMO_SOURCE or "price").strip().lower()
    if mode == "price":
        return PricePromoStrategy()
    if mode == "metafield":
        return MetafieldPromoStrategy(namespace=s.PROMO_METAFIELD_NAMESPACE, key=s.PROMO_METAFIELD_KEY)
    if mode == "tag":
        return TagPromoStrategy()
    raise ConfigurationError(f"Unknown PROMO_SOURCE {s.PROMO_SOURCE!r} (expected 'price', 'metafield' or 'tag')")


def build_deals_config(s: Settings | None = None) -> DealsConfig:
    """
    Build the immutable DealsConfig from settings.
    Raises ConfigurationError for an unknown city/promo source.
    """
    if s is None:
        s = settings

    collections = {
        "jeddah": s.DEALS_JEDDAH_COLLECTION_GID,
        "riyadh": s.DEALS_RIYADH_COLLECTION_GID,
        "dammam": s.DEALS_DAMMAM_COLLECTION_GID,
    }

    return DealsConfig(
        city_source=_city_source_from(s),
        promo_strategy=_promo_strategy_from(s),
        collections={city: gid for city, gid in collections.items() if gid},
        verbose=s.verbose,
    )


def require_shopify_credentials(s: Settings) -> None:
    missing = [
        name
        for name in ("SHOPIFY_SHOP", "SHOPIFY_ADMIN_ACCESS_TOKEN", "SHOPIFY_API_SECRET")
        if not getattr(s, name)
    ]
    if missing:
        raise ConfigurationError(f"Missing env vars {' / '.join(missing)}")
