import json

import pytest
from fastapi.testclient import TestClient

from app.api.routes import webhooks
from app.main import app
from app.services import products_update_service
from app.services.hmac_verifier import sign_body

SECRET = "shpss_test_secret"
URL = "/webhooks/shopify/products-update"


@pytest.fixture
def client(monkeypatch, make_settings, fake_mutator):
    monkeypatch.setattr(webhooks, "settings", make_settings())
    # never reach the real Admin API from the route
    monkeypatch.setattr(products_update_service, "ShopifyClient", lambda **kwargs: fake_mutator)
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_signed_webhook_is_reconciled(client, fake_mutator):
    body = json.dumps({
        "id": 42,
        "variants": [{"id": 1, "title": "Dammam", "price": "9.50", "compare_at_price": "12.00"}],
    }).encode("utf-8")

    resp = client.post(URL, content=body, headers={"x-shopify-hmac-sha256": sign_body(body, SECRET)})

    assert resp.status_code == 200
    data = resp.json()
    assert data["decisions"][0]["city"] == "dammam"
    assert data["decisions"][0]["action"] == "add"
    assert data["decisions"][0]["price"] == 9.5
    assert fake_mutator.calls == [("add", "gid://shopify/Collection/1003", "gid://shopify/Product/42")]


def test_unsigned_webhook_is_rejected(client, fake_mutator):
    resp = client.post(URL, content=b'{"id": 42}')

    assert resp.status_code == 401
    assert resp.json()["ok"] is False
    assert fake_mutator.calls == []
