"""HTTP tests for the webhook, admin and storefront APIs."""

import json
from datetime import datetime

from commerce_control.config.constants import (
    NONCE_CURRENCY_SETTINGS,
    NONCE_GENERAL_SETTINGS,
    NONCE_LOG_DETAILS,
    NONCE_ORDER_CONTROL,
    NONCE_PAYMENT_GATEWAY_RULE,
    NONCE_PRODUCT_PRICES,
)
from commerce_control.core.nonce import create_nonce

API_KEY = "test-api-key"


class TestServiceEndpoints:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["endpoints"]["webhook"] == "POST /shipping-webhook"

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"] == "ok"
        assert data["checks"]["cache"]["backend"] == "memory"
        assert data["checks"]["forwarding"] == "disabled"
        assert data["checks"]["settings"] == {"backend": "database", "status": "ok"}


class TestWebhook:
    def test_event_updates_order_and_is_logged(self, client, admin_headers, nonce_headers):
        client.put("/api/admin/orders/1001", headers=admin_headers)

        response = client.post(
            "/shipping-webhook",
            json={"order_id": "1001", "tracking_number": "TRK1", "status": "shipped"},
            headers={"X-Forwarded-For": "203.0.113.9"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Event received and processed"
        assert body["data"]["order_updated"] is True

        order = client.get("/api/admin/orders/1001", headers=admin_headers).json()
        assert order["shipping_tracking_number"] == "TRK1"
        assert order["shipping_status"] == "shipped"
        assert order["notes"][0]["note"] == "Shipping status updated: shipped"

        detail = client.post(
            "/api/admin/logs/detail",
            json={"log_id": body["log_id"]},
            headers=nonce_headers(NONCE_LOG_DETAILS),
        ).json()
        assert detail["success"] is True
        assert detail["data"]["status"] == "success"
        assert detail["data"]["ip_address"] == "203.0.113.9"
        assert detail["data"]["request_params"]["tracking_number"] == "TRK1"

    def test_invalid_json_is_still_logged(self, client):
        response = client.post("/shipping-webhook", content=b"not json")
        assert response.status_code == 200
        assert response.json()["data"]["order_id"] is None

    def test_non_object_payload_is_an_error(self, client, admin_headers):
        response = client.post("/shipping-webhook", json=[1, 2, 3])

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Payload must be a JSON object"

        stats = client.get("/api/admin/dashboard", headers=admin_headers).json()["webhooks"]
        assert stats["total_logs"] == 1
        assert stats["error_logs"] == 1

    def test_unknown_slug(self, client):
        assert client.post("/some-other-hook", json={}).status_code == 404

    def test_changed_slug_takes_effect(self, client, nonce_headers):
        response = client.put(
            "/api/admin/settings/general",
            json={"endpoint_slug": "Carrier Hook"},
            headers=nonce_headers(NONCE_GENERAL_SETTINGS),
        )
        assert response.json()["settings"]["endpoint_slug"] == "carrier-hook"

        assert client.post("/carrier-hook", json={}).status_code == 200
        assert client.post("/shipping-webhook", json={}).status_code == 404


class TestAdminAuth:
    def test_missing_api_key(self, client):
        assert client.get("/api/admin/dashboard").status_code == 401

    def test_wrong_api_key(self, client):
        assert client.get("/api/admin/dashboard", headers={"X-API-Key": "nope"}).status_code == 401

    def test_missing_nonce(self, client, admin_headers):
        response = client.put("/api/admin/order-control", json={}, headers=admin_headers)
        assert response.status_code == 403

    def test_nonce_for_another_action(self, client, admin_headers):
        headers = {**admin_headers, "X-CSRF-Token": create_nonce(API_KEY, NONCE_CURRENCY_SETTINGS)}
        response = client.put("/api/admin/order-control", json={}, headers=headers)
        assert response.status_code == 403

    def test_issued_nonce_is_accepted(self, client, admin_headers):
        nonce = client.get(
            "/api/admin/nonce", params={"action": NONCE_ORDER_CONTROL}, headers=admin_headers
        ).json()["nonce"]
        response = client.put(
            "/api/admin/order-control",
            json={"enable_orders": True},
            headers={**admin_headers, "X-CSRF-Token": nonce},
        )
        assert response.status_code == 200

    def test_unknown_nonce_action(self, client, admin_headers):
        response = client.get("/api/admin/nonce", params={"action": "bogus"}, headers=admin_headers)
        assert response.status_code == 400


class TestLogDetail:
    def test_invalid_nonce(self, client, admin_headers):
        response = client.post(
            "/api/admin/logs/detail", json={"log_id": 1, "nonce": "forged"}, headers=admin_headers
        )
        assert response.status_code == 403
        assert response.json() == {"success": False, "data": "Invalid security token"}

    def test_nonce_in_body(self, client, admin_headers):
        log_id = client.post("/shipping-webhook", json={}).json()["log_id"]
        nonce = create_nonce(API_KEY, NONCE_LOG_DETAILS)
        response = client.post(
            "/api/admin/logs/detail", json={"log_id": log_id, "nonce": nonce}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["id"] == log_id

    def test_invalid_log_id(self, client, nonce_headers):
        response = client.post(
            "/api/admin/logs/detail", json={"log_id": "abc"}, headers=nonce_headers(NONCE_LOG_DETAILS)
        )
        assert response.status_code == 400
        assert response.json()["data"] == "Invalid log ID"

    def test_missing_log(self, client, nonce_headers):
        response = client.post(
            "/api/admin/logs/detail", json={"log_id": 999}, headers=nonce_headers(NONCE_LOG_DETAILS)
        )
        assert response.status_code == 404
        assert response.json()["data"] == "Log not found"

    def test_logs_page(self, client, admin_headers):
        for index in range(3):
            client.post("/shipping-webhook", json={"order_id": str(index)})
        data = client.get("/api/admin/logs", headers=admin_headers).json()
        assert data["total"] == 3
        assert data["logs"][0]["request_params"]["order_id"] == "2"


class TestOrderControl:
    def test_validation_error(self, client, nonce_headers):
        response = client.put(
            "/api/admin/order-control",
            json={"restriction_type": "warehouse"},
            headers=nonce_headers(NONCE_ORDER_CONTROL),
        )
        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["loc"] == ["restriction_type"]

    def test_checkout_gate(self, client, nonce_headers, freeze_store_clock):
        client.put(
            "/api/admin/order-control",
            json={
                "enable_timeframe": True,
                "start_time": "09:00",
                "end_time": "17:00",
                "redirect_url": "",
                "disabled_message": "We are closed",
            },
            headers=nonce_headers(NONCE_ORDER_CONTROL),
        )

        freeze_store_clock(datetime(2024, 6, 15, 20, 0))
        status = client.get("/api/store/checkout/status").json()
        assert status == {
            "orders_enabled": False,
            "message": "We are closed",
            "redirect_url": "https://shop.example/",
        }
        rejected = client.post("/api/store/checkout/validate")
        assert rejected.status_code == 403
        assert rejected.json()["message"] == "We are closed"

        freeze_store_clock(datetime(2024, 6, 15, 10, 0))
        assert client.get("/api/store/checkout/status").json() == {"orders_enabled": True}
        assert client.post("/api/store/checkout/validate").status_code == 200

    def test_product_scope(self, client, admin_headers, nonce_headers, freeze_store_clock):
        catalog_headers = nonce_headers(NONCE_PRODUCT_PRICES)
        client.put("/api/admin/products/1", json={"name": "Cake", "base_price": 10}, headers=catalog_headers)
        client.put("/api/admin/products/2", json={"name": "Bread", "base_price": 4}, headers=catalog_headers)
        client.put(
            "/api/admin/order-control",
            json={"enable_orders": False, "restriction_type": "products", "restricted_products": [1]},
            headers=nonce_headers(NONCE_ORDER_CONTROL),
        )
        freeze_store_clock(datetime(2024, 6, 15, 12, 0))

        assert client.get("/api/store/products/1").json()["purchasable"] is False
        assert client.get("/api/store/products/2").json()["purchasable"] is False

        client.put(
            "/api/admin/order-control",
            json={
                "restriction_type": "products",
                "restricted_products": [1],
                "enable_timeframe": True,
                "start_time": "06:00",
                "end_time": "08:00",
            },
            headers=nonce_headers(NONCE_ORDER_CONTROL),
        )
        assert client.get("/api/store/products/1").json()["purchasable"] is False
        assert client.get("/api/store/products/2").json()["purchasable"] is True


class TestPaymentGateways:
    def test_rule_lifecycle_and_filtering(self, client, admin_headers, nonce_headers):
        headers = nonce_headers(NONCE_PAYMENT_GATEWAY_RULE)
        client.put(
            "/api/admin/currency",
            json={
                "enable_currency_switcher": True,
                "default_currency": "USD",
                "currencies": [{"code": "EUR", "symbol": "€", "rate": 0.9}],
            },
            headers=nonce_headers(NONCE_CURRENCY_SETTINGS),
        )

        created = client.post(
            "/api/admin/payment-gateways/rules",
            json={"name": "Euro", "currencies": ["eur"], "gateways": ["paypal"]},
            headers=headers,
        ).json()["rule"]
        assert created["currencies"] == ["EUR"]

        eur = client.get("/api/store/payment-gateways", params={"currency": "EUR"}).json()
        assert eur == {"currency": "EUR", "gateways": {"paypal": "PayPal"}}

        usd = client.get("/api/store/payment-gateways", params={"currency": "USD"}).json()
        assert len(usd["gateways"]) == 5

        toggled = client.post(
            f"/api/admin/payment-gateways/rules/{created['id']}/toggle", headers=headers
        ).json()["rule"]
        assert toggled["enabled"] is False
        eur = client.get("/api/store/payment-gateways", params={"currency": "EUR"}).json()
        assert len(eur["gateways"]) == 5

        overview = client.get("/api/admin/payment-gateways", headers=admin_headers).json()
        assert overview["statistics"]["total_rules"] == 1
        assert overview["statistics"]["enabled_rules"] == 0
        assert overview["active_currencies"] == ["USD", "EUR"]

        deleted = client.delete(f"/api/admin/payment-gateways/rules/{created['id']}", headers=headers)
        assert deleted.status_code == 200
        assert client.get("/api/admin/payment-gateways", headers=admin_headers).json()["rules"] == []

    def test_empty_rule_is_rejected(self, client, nonce_headers):
        response = client.post(
            "/api/admin/payment-gateways/rules",
            json={"name": "Empty", "currencies": [], "gateways": ["paypal"]},
            headers=nonce_headers(NONCE_PAYMENT_GATEWAY_RULE),
        )
        assert response.status_code == 422

    def test_unknown_rule(self, client, nonce_headers):
        response = client.delete(
            "/api/admin/payment-gateways/rules/missing",
            headers=nonce_headers(NONCE_PAYMENT_GATEWAY_RULE),
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Rule not found"


class TestCurrency:
    def setup_store(self, client, admin_headers, nonce_headers):
        client.put(
            "/api/admin/currency",
            json={
                "enable_currency_switcher": True,
                "default_currency": "USD",
                "currencies": [
                    {"code": "EUR", "symbol": "€", "rate": 0.9},
                    {"code": "GBP", "symbol": "£", "rate": 0.5},
                ],
            },
            headers=nonce_headers(NONCE_CURRENCY_SETTINGS),
        )
        client.put(
            "/api/admin/products/7",
            json={"name": "Tea", "base_price": 20, "category_ids": [3]},
            headers=nonce_headers(NONCE_PRODUCT_PRICES),
        )
        client.put(
            "/api/admin/products/7/currency-prices",
            json={"EUR": 15, "GBP": None},
            headers=nonce_headers(NONCE_PRODUCT_PRICES),
        )

    def test_prices_and_symbols(self, client, admin_headers, nonce_headers):
        self.setup_store(client, admin_headers, nonce_headers)

        usd = client.get("/api/store/products/7").json()
        assert (usd["currency"], usd["price"], usd["symbol"]) == ("USD", 20, "$")

        eur = client.get("/api/store/products/7", params={"currency": "EUR"}).json()
        assert (eur["price"], eur["symbol"]) == (15, "€")

        gbp = client.get("/api/store/products/7", params={"currency": "GBP"}).json()
        assert (gbp["price"], gbp["symbol"]) == (10, "£")

        prices = client.get("/api/admin/products/7/currency-prices", headers=admin_headers).json()
        assert prices == {"product_id": 7, "prices": {"EUR": 15.0}}

    def test_currency_cookie(self, client, admin_headers, nonce_headers):
        self.setup_store(client, admin_headers, nonce_headers)

        response = client.get("/api/store/currencies", params={"currency": "GBP"})
        assert response.json()["current_currency"] == "GBP"
        assert response.cookies.get("commerce_currency") == "GBP"

        # Later requests use the remembered currency
        assert client.get("/api/store/products/7").json()["currency"] == "GBP"

    def test_currency_list(self, client, admin_headers, nonce_headers):
        self.setup_store(client, admin_headers, nonce_headers)

        data = client.get("/api/store/currencies").json()
        assert data["enabled"] is True
        assert [c["code"] for c in data["currencies"]] == ["USD", "EUR", "GBP"]
        assert data["currencies"][1]["symbol"] == "€"

    def test_unknown_product(self, client):
        assert client.get("/api/store/products/404").status_code == 404

    def test_catalog_update_requires_token(self, client, admin_headers):
        response = client.put(
            "/api/admin/products/7", json={"name": "Tea", "base_price": 1}, headers=admin_headers
        )
        assert response.status_code == 403
        assert client.get("/api/store/products/7").status_code == 404


def test_dashboard(client, admin_headers):
    client.post("/shipping-webhook", content=json.dumps({"order_id": "1"}))
    data = client.get("/api/admin/dashboard", headers=admin_headers).json()

    assert data["endpoint_url"] == "https://shop.example/shipping-webhook"
    assert data["webhooks"]["total_logs"] == 1
    assert data["webhooks"]["success_logs"] == 1
    assert data["order_control"]["current_status"] == "active"
    assert data["payment_gateways"]["available_gateways"] == 5
