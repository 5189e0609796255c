from typing import Any


class ConfigurationError(RuntimeError):
    """Required setting missing or invalid; aborts the whole webhook invocation."""


class ShopifyGraphQLError(RuntimeError):
    def __init__(self, status: int, response: Any, message: str = "Shopify GraphQL error"):
        super().__init__(f"{message} (status {status})")
        self.status = status
        self.response = response
