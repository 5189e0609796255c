from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

PriceValue = Union[str, int, float, None]


class Metafield(BaseModel):
    model_config = ConfigDict(extra="ignore")

    namespace: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def _value_as_text(cls, v):
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, bool):
            return "true" if v else "false"
        return str(v)


class ShopifyVariant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[Union[int, str]] = None
    title: Optional[str] = None
    price: PriceValue = None
    compare_at_price: PriceValue = None
    metafields: List[Metafield] = []

    @field_validator("title", mode="before")
    @classmethod
    def _title_as_text(cls, v):
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("metafields", mode="before")
    @classmethod
    def _null_metafields(cls, v):
        return v or []

    def find_metafield(self, namespace: str, key: str) -> Metafield | None:
        for mf in self.metafields:
            if mf.namespace == namespace and mf.key == key:
                return mf
        return None


class ShopifyProduct(BaseModel):
    """products/update webhook body; only the fields the deals sync reads."""

    model_config = ConfigDict(extra="ignore")

    id: int
    tags: str = ""
    variants: List[ShopifyVariant] = []

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_as_text(cls, v):
        if v is None:
            return ""
        if isinstance(v, list):
            return ", ".join(str(t) for t in v if t is not None)
        return v

    @field_validator("variants", mode="before")
    @classmethod
    def _null_variants(cls, v):
        # missing / null / non-list variants -> empty list
        return v if isinstance(v, list) else []

    @property
    def gid(self) -> str:
        return product_gid(self.id)


def product_gid(id_num: int | str) -> str:
    return f"gid://shopify/Product/{id_num}"
