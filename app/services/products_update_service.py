import json
import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ValidationError

from app.config import Settings, build_deals_config, require_shopify_credentials, settings as default_settings
from app.errors import ConfigurationError
from app.services.decision_planner import build_plan
from app.services.hmac_verifier import get_hmac_header, verify_shopify_hmac
from app.services.reconciler import CollectionMutator, execute
from app.shopify.client import ShopifyClient
from app.shopify.models import ShopifyProduct

logger = logging.getLogger(__name__)


class WebhookResponse(BaseModel):
    status_code: int
    body: dict[str, Any]


def _error(status_code: int, message: str) -> WebhookResponse:
    return WebhookResponse(status_code=status_code, body={"ok": False, "error": message})


async def handle_products_update(
    raw_body: bytes,
    headers: Optional[Mapping],
    settings: Settings | None = None,
    mutator: CollectionMutator | None = None,
) -> WebhookResponse:
    """
    Process a Shopify products/update webhook:
    - verify the HMAC over the raw body (unless SKIP_HMAC is on)
    - classify every variant into a city + promo signal
    - add the product to / remove it from each city's deals collection

    Only config errors, bad signatures and unparsable payloads fail the whole call;
    per-decision failures are reported in `results`.
    """
    if settings is None:
        settings = default_settings

    try:
        require_shopify_credentials(settings)
        config = build_deals_config(settings)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return _error(500, str(e))

    raw_body = raw_body or b""

    # --- HMAC verification (with optional bypass for testing) ---
    if settings.SKIP_HMAC:
        logger.warning("WARNING: HMAC verification bypassed (testing mode: SKIP_HMAC=1)")
    elif not verify_shopify_hmac(raw_body, get_hmac_header(headers), settings.SHOPIFY_API_SECRET):
        logger.warning("Rejected products/update webhook: invalid signature")
        return _error(401, "Invalid webhook signature")

    try:
        product = ShopifyProduct.model_validate(json.loads(raw_body))
    except (ValueError, ValidationError) as e:
        logger.error("Malformed products/update payload: %s", e)
        return _error(400, "Malformed payload")

    try:
        if config.verbose:
            logger.info("Incoming product %s variant titles: %s", product.id, [v.title for v in product.variants])

        plan = build_plan(product, product.variants, config)

        if config.verbose:
            logger.info("Decisions: %s", [d.model_dump(mode="json") for d in plan.decisions])

        if mutator is None:
            mutator = ShopifyClient(
                shop=settings.SHOPIFY_SHOP,
                token=settings.SHOPIFY_ADMIN_ACCESS_TOKEN,
                api_version=settings.SHOPIFY_API_VERSION,
            )
        results = await execute(plan.decisions, product.gid, mutator)
    except Exception:
        logger.exception("Unexpected error processing product %s", product.id)
        return _error(500, "Server error")

    failed = sum(1 for r in results if not r.ok)
    logger.info(
        "✔ Product %s → %s decisions, %s failed, %s skipped",
        product.id, len(results), failed, len(plan.skipped),
    )

    return WebhookResponse(
        status_code=200,
        body={
            "ok": True,
            "product_id": product.id,
            "decisions": [d.model_dump(mode="json") for d in plan.decisions],
            "results": [r.model_dump(mode="json") for r in results],
            "skipped": [s.model_dump(mode="json") for s in plan.skipped],
        },
    )
