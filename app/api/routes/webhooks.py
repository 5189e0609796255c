from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.services.products_update_service import handle_products_update

router = APIRouter()


@router.post("/shopify/products-update")
async def shopify_products_update(request: Request):
  """
  Receive Shopify products/update webhooks and reconcile the city deals collections.

  - Reads the raw body (needed as-is for the HMAC check)
  - Runs the decision + reconciliation pass inline
  - Returns the decisions and per-decision results
  """
  raw_body = await request.body()
  result = await handle_products_update(raw_body, request.headers, settings)
  return JSONResponse(result.body, status_code=result.status_code)
