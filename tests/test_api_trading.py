"""
HTTP tests for the trading routes.

Exercise the full stack (FastAPI, use cases, SQLite) through TestClient
and check the response envelope, status codes and error mapping.
"""

from decimal import Decimal

from fastapi.testclient import TestClient

from papertrade.main import create_app


class TestEnvelopeAndErrors:
    """Tests for cross-cutting response behavior."""

    def test_health(self, client) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Server is running"
        assert body["data"]["status"] == "ok"

    def test_security_headers_are_set(self, client) -> None:
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_unknown_route(self, client) -> None:
        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found"}

    def test_missing_token(self, client) -> None:
        response = client.get("/api/portfolio")

        assert response.status_code == 401
        assert response.json()["message"] == "Access token required"

    def test_garbage_token_is_forbidden(self, client) -> None:
        response = client.get("/api/portfolio", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 403
        assert response.json()["message"] == "Invalid token"

    def test_admin_route_rejects_regular_user(self, client, auth_headers, user) -> None:
        response = client.get("/api/transactions/all", headers=auth_headers(user))

        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permissions"

    def test_validation_error_envelope(self, client, auth_headers, user) -> None:
        response = client.post(
            "/api/transactions/buy",
            json={"productId": 1, "units": -1},
            headers=auth_headers(user),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation error"
        assert any("units" in error for error in body["errors"])

    def test_rate_limit(self, settings, engine) -> None:
        limited = settings.model_copy(
            update={"rate_limit_enabled": True, "rate_limit_default": "2/minute"}
        )
        app = create_app(limited, engine=engine)

        with TestClient(app) as client:
            statuses = [client.get("/api/products").status_code for _ in range(3)]
            body = client.get("/api/products").json()

        assert statuses == [200, 200, 429]
        assert body["success"] is False

    def test_engine_is_opened_at_startup(self, settings) -> None:
        app = create_app(settings)

        assert app.state.engine is None
        with TestClient(app) as client:
            response = client.get("/api/products")
            assert app.state.engine is not None

        assert response.status_code == 200

    def test_importing_module_app_opens_no_pool(self) -> None:
        from papertrade.main import app as module_app

        assert module_app.state.engine is None
        assert module_app.state.redis is None


class TestProductRoutes:
    """Tests for the catalog endpoints."""

    def test_list_and_get(self, client, make_product) -> None:
        product = make_product(name="Acme Corp", price=Decimal("12.50"))

        listed = client.get("/api/products").json()["data"]["products"]
        detail = client.get(f"/api/products/{product.id}").json()["data"]["product"]

        assert [p["name"] for p in listed] == ["Acme Corp"]
        assert Decimal(detail["price"]) == Decimal("12.50")
        assert detail["is_watched"] is None

    def test_missing_product(self, client) -> None:
        response = client.get("/api/products/999")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_admin_creates_product_and_duplicate_conflicts(
        self, client, auth_headers, admin
    ) -> None:
        payload = {"name": "New Fund", "category": "Mutual Funds", "price": "25.00"}

        created = client.post("/api/products", json=payload, headers=auth_headers(admin))
        duplicate = client.post("/api/products", json=payload, headers=auth_headers(admin))

        assert created.status_code == 201
        assert created.json()["message"] == "Product created successfully"
        assert duplicate.status_code == 409

    def test_admin_updates_price(self, client, auth_headers, admin, make_product) -> None:
        product = make_product(price=Decimal("10.00"))

        response = client.put(
            f"/api/products/{product.id}/price",
            json={"price": "11.25"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert Decimal(response.json()["data"]["product"]["price"]) == Decimal("11.25")


class TestTradingRoutes:
    """Tests for buying, selling, the portfolio and the watchlist."""

    def test_buy_debits_wallet_and_updates_portfolio(
        self, client, auth_headers, user, make_product
    ) -> None:
        product = make_product(price=Decimal("250.00"))
        headers = auth_headers(user)

        response = client.post(
            "/api/transactions/buy",
            json={"productId": product.id, "units": "4"},
            headers=headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Product purchased successfully"
        assert Decimal(body["data"]["new_wallet_balance"]) == Decimal("99000.00")
        assert Decimal(body["data"]["transaction"]["total_amount"]) == Decimal("1000.00")

        holdings = client.get("/api/portfolio", headers=headers).json()["data"]["holdings"]
        assert len(holdings) == 1
        assert Decimal(holdings[0]["quantity"]) == Decimal("4")

    def test_insufficient_funds(self, client, auth_headers, make_user, make_product) -> None:
        poor = make_user(balance=Decimal("10.00"))
        product = make_product(price=Decimal("50.00"))

        response = client.post(
            "/api/transactions/buy",
            json={"productId": product.id, "units": "1"},
            headers=auth_headers(poor),
        )

        assert response.status_code == 400
        assert response.json()["message"].startswith("Insufficient wallet balance")
        ledger = client.get("/api/transactions/my", headers=auth_headers(poor)).json()
        assert ledger["data"]["transactions"] == []

    def test_buy_unknown_product(self, client, auth_headers, user) -> None:
        response = client.post(
            "/api/transactions/buy",
            json={"productId": 999, "units": "1"},
            headers=auth_headers(user),
        )

        assert response.status_code == 404

    def test_sell_and_summary(self, client, auth_headers, user, make_product) -> None:
        product = make_product(price=Decimal("100.00"))
        headers = auth_headers(user)
        client.post(
            "/api/transactions/buy", json={"productId": product.id, "units": "2"}, headers=headers
        )

        sold = client.post(
            "/api/transactions/sell", json={"productId": product.id, "units": "1"}, headers=headers
        )
        summary = client.get("/api/portfolio/summary", headers=headers).json()["data"]

        assert sold.status_code == 201
        assert sold.json()["message"] == "Product sold successfully"
        assert Decimal(summary["wallet_balance"]) == Decimal("99900.00")
        assert Decimal(summary["summary"]["total_invested"]) == Decimal("100.00")

    def test_watchlist(self, client, auth_headers, user, make_product) -> None:
        product = make_product()
        headers = auth_headers(user)

        added = client.post(f"/api/portfolio/watchlist/{product.id}", headers=headers)
        again = client.post(f"/api/portfolio/watchlist/{product.id}", headers=headers)
        detail = client.get(f"/api/products/{product.id}", headers=headers).json()
        removed = client.delete(f"/api/portfolio/watchlist/{product.id}", headers=headers)
        missing = client.delete(f"/api/portfolio/watchlist/{product.id}", headers=headers)

        assert added.status_code == 201
        assert added.json()["message"] == "Product added to watchlist"
        assert again.status_code == 400
        assert detail["data"]["product"]["is_watched"] is True
        assert removed.json()["message"] == "Product removed from watchlist"
        assert missing.status_code == 404


class TestOrderAndAlertRoutes:
    """Tests for orders, the execution batch and alerts over HTTP."""

    def test_place_execute_and_list(
        self, client, auth_headers, user, admin, make_product
    ) -> None:
        product = make_product(price=Decimal("20.00"))
        headers = auth_headers(user)

        placed = client.post(
            "/api/orders",
            json={"product_id": product.id, "order_type": "buy", "quantity": "5"},
            headers=headers,
        )
        executed = client.post("/api/orders/execute", headers=auth_headers(admin))
        orders = client.get("/api/orders", headers=headers).json()["data"]

        assert placed.status_code == 201
        assert placed.json()["data"]["order"]["order_status"] == "pending"
        assert executed.json()["message"] == "Executed 1 of 1 pending orders"
        assert orders["orders"][0]["order_status"] == "executed"
        assert (orders["limit"], orders["offset"]) == (50, 0)

    def test_execute_requires_admin(self, client, auth_headers, user) -> None:
        response = client.post("/api/orders/execute", headers=auth_headers(user))

        assert response.status_code == 403

    def test_cancel_order(self, client, auth_headers, user, make_product) -> None:
        product = make_product()
        headers = auth_headers(user)
        order_id = client.post(
            "/api/orders",
            json={"product_id": product.id, "order_type": "buy", "quantity": "1"},
            headers=headers,
        ).json()["data"]["order"]["id"]

        response = client.delete(f"/api/orders/{order_id}", headers=headers)

        assert response.json()["message"] == "Order cancelled successfully"
        assert response.json()["data"]["order"]["order_status"] == "cancelled"

    def test_alert_lifecycle(self, client, auth_headers, user, admin, make_product) -> None:
        product = make_product(price=Decimal("100.00"))
        headers = auth_headers(user)

        created = client.post(
            "/api/alerts",
            json={"product_id": product.id, "alert_type": "price_below", "target_value": "150"},
            headers=headers,
        )
        check = client.post("/api/alerts/check", headers=auth_headers(admin))
        alerts = client.get("/api/alerts", headers=headers).json()["data"]["alerts"]
        unread = client.get("/api/notifications/unread-count", headers=headers).json()

        assert created.status_code == 201
        assert check.json()["message"] == "1 alerts triggered"
        assert alerts[0]["is_active"] is False
        assert unread["data"]["unread_count"] == 1

    def test_analytics(self, client, auth_headers, user, make_product) -> None:
        stock = make_product(category="Stocks", price=Decimal("30.00"))
        fund = make_product(category="Mutual Funds", price=Decimal("10.00"))
        headers = auth_headers(user)
        for product in (stock, fund):
            client.post(
                "/api/transactions/buy",
                json={"productId": product.id, "units": "1"},
                headers=headers,
            )

        data = client.get("/api/analytics/portfolio", headers=headers).json()["data"]

        shares = {a["category"]: Decimal(a["percentage"]) for a in data["allocation"]}
        assert shares == {"Stocks": Decimal("75.00"), "Mutual Funds": Decimal("25.00")}
