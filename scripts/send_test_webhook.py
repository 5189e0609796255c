import sys, os

import requests

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(ROOT)

from app.config import settings
from app.services.hmac_verifier import HMAC_HEADER, sign_body

DEFAULT_URL = "http://localhost:8000/webhooks/shopify/products-update"


def main():
    if len(sys.argv) < 2:
        print("Usage: python send_test_webhook.py payload.json [url]")
        sys.exit(1)

    if not settings.SHOPIFY_API_SECRET:
        raise RuntimeError("Missing SHOPIFY_API_SECRET (settings)")

    json_path = sys.argv[1]
    url = sys.argv[2] if len(sys.argv) > 2 else DEFAULT_URL

    # sign the exact bytes we send
    with open(json_path, "rb") as f:
        raw_body = f.read()

    resp = requests.post(
        url,
        data=raw_body,
        headers={
            "Content-Type": "application/json",
            HMAC_HEADER: sign_body(raw_body, settings.SHOPIFY_API_SECRET),
            "X-Shopify-Topic": "products/update",
        },
        timeout=45,
    )
    print(f"Status: {resp.status_code}")
    print(resp.text)


if __name__ == "__main__":
    main()
