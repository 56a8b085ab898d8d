"""Entity CRUD endpoints: validation codes, conflicts and the status lifecycle."""
import pytest

from conftest import add_portfolio, add_transaction, add_user


def error_of(response, status=400):
    assert response.status_code == status, response.text
    return response.json()


@pytest.fixture
def owner(session):
    user = add_user(session, "owner@example.com", "0xowner")
    portfolio = add_portfolio(session, user)
    return user.id, portfolio.id


def new_transaction(client, user_id, portfolio_id, **overrides):
    body = {
        "userId": user_id,
        "portfolioId": portfolio_id,
        "txHash": "0xabc",
        "type": "swap",
        "timestamp": "2024-05-01T12:30:00Z",
        "tokenIn": "ETH",
        "tokenOut": "USDC",
        "amountIn": 1.5,
        "amountOut": 4800,
        "gasFee": 3.2,
    }
    body.update(overrides)
    return client.post("/api/transactions", json=body)


class TestUsers:
    def test_create_and_fetch(self, client):
        response = client.post(
            "/api/users", json={"email": "  New@Example.COM ", "walletAddress": "0x1"}
        )
        assert response.status_code == 201
        user = response.json()
        assert user["email"] == "new@example.com"
        assert user["premiumTier"] == "free"
        assert user["createdAt"].endswith("Z")

        fetched = client.get("/api/users", params={"id": user["id"]}).json()
        assert fetched == user
        by_wallet = client.get("/api/users", params={"walletAddress": "0x1"}).json()
        assert by_wallet["id"] == user["id"]

    def test_missing_email(self, client):
        body = error_of(client.post("/api/users", json={"email": "  "}))
        assert body == {
            "error": "Email is required and must be a non-empty string",
            "code": "MISSING_REQUIRED_FIELDS",
        }

    def test_invalid_tier(self, client):
        response = client.post("/api/users", json={"email": "a@b.c", "premiumTier": "gold"})
        assert error_of(response)["code"] == "INVALID_PREMIUM_TIER"

    def test_duplicate_email(self, client):
        client.post("/api/users", json={"email": "dup@example.com"})
        body = error_of(client.post("/api/users", json={"email": "DUP@example.com"}))
        assert body["code"] == "EMAIL_EXISTS"

    def test_duplicate_wallet(self, client):
        client.post("/api/users", json={"email": "w1@example.com", "walletAddress": "0xw"})
        response = client.post("/api/users", json={"email": "w2@example.com", "walletAddress": "0xw"})
        assert error_of(response)["code"] == "WALLET_ADDRESS_EXISTS"

    def test_list_and_search(self, client, session):
        for name in ("ann", "ben", "cara"):
            add_user(session, f"{name}@example.com")
        users = client.get("/api/users", params={"limit": "2"}).json()
        assert [u["email"] for u in users] == ["ann@example.com", "ben@example.com"]
        second = client.get("/api/users", params={"limit": "2", "offset": "2"}).json()
        assert [u["email"] for u in second] == ["cara@example.com"]
        found = client.get("/api/users", params={"search": "BEN"}).json()
        assert [u["email"] for u in found] == ["ben@example.com"]

    def test_update(self, client, owner):
        user_id, _ = owner
        response = client.put(
            "/api/users", params={"id": user_id}, json={"premiumTier": "enterprise"}
        )
        assert response.status_code == 200
        assert response.json()["premiumTier"] == "enterprise"
        assert response.json()["walletAddress"] == "0xowner"

    def test_delete_returns_last_state(self, client, session):
        user = add_user(session, "gone@example.com")
        response = client.delete("/api/users", params={"id": user.id})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User deleted successfully"
        assert body["user"]["email"] == "gone@example.com"
        missing = error_of(client.get("/api/users", params={"id": user.id}), 404)
        assert missing == {"error": "User not found", "code": "USER_NOT_FOUND"}

    def test_delete_refused_while_user_owns_records(self, client, owner):
        user_id, _ = owner
        response = client.delete("/api/users", params={"id": user_id})
        assert error_of(response) == {
            "error": "User still has dependent records",
            "code": "USER_HAS_DEPENDENTS",
        }
        assert client.get("/api/users", params={"id": user_id}).status_code == 200

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_malformed_id(self, client, method):
        kwargs = {"json": {}} if method == "put" else {}
        response = getattr(client, method)("/api/users", params={"id": "abc"}, **kwargs)
        assert error_of(response) == {"error": "Valid ID is required", "code": "INVALID_ID"}

    def test_write_requires_id(self, client):
        assert error_of(client.delete("/api/users"))["code"] == "INVALID_ID"


class TestPortfolios:
    def test_create_accepts_json_text_tokens(self, client, owner):
        user_id, _ = owner
        response = client.post(
            "/api/portfolios",
            json={"userId": user_id, "walletAddress": "0xp", "tokens": '[{"symbol": "ETH"}]'},
        )
        assert response.status_code == 201
        assert response.json()["tokens"] == [{"symbol": "ETH"}]

    def test_create_for_unknown_user(self, client):
        response = client.post(
            "/api/portfolios", json={"userId": 999, "walletAddress": "0xp", "tokens": []}
        )
        assert error_of(response) == {"error": "User not found", "code": "USER_NOT_FOUND"}

    def test_invalid_tokens(self, client, owner):
        user_id, _ = owner
        response = client.post(
            "/api/portfolios", json={"userId": user_id, "walletAddress": "0xp", "tokens": "{oops"}
        )
        assert error_of(response)["code"] == "INVALID_JSON"

    def test_update_tokens(self, client, owner):
        _, portfolio_id = owner
        response = client.put(
            "/api/portfolios",
            params={"id": portfolio_id},
            json={"tokens": [{"symbol": "BTC", "balance": 2}], "totalValueUsd": 120000},
        )
        assert response.status_code == 200
        assert response.json()["tokens"] == [{"symbol": "BTC", "balance": 2}]
        assert response.json()["totalValueUsd"] == 120000

    def test_delete_refused_while_transactions_reference_it(self, client, owner):
        _, portfolio_id = owner
        assert new_transaction(client, *owner).status_code == 201
        response = client.delete("/api/portfolios", params={"id": portfolio_id})
        assert error_of(response) == {
            "error": "Portfolio still has transactions",
            "code": "PORTFOLIO_HAS_DEPENDENTS",
        }
        assert client.get("/api/portfolios", params={"id": portfolio_id}).status_code == 200

    def test_delete_empty_portfolio(self, client, owner):
        _, portfolio_id = owner
        body = client.delete("/api/portfolios", params={"id": portfolio_id}).json()
        assert body["portfolio"]["id"] == portfolio_id
        assert error_of(client.get("/api/portfolios", params={"id": portfolio_id}), 404)["code"] == "PORTFOLIO_NOT_FOUND"

    def test_not_found(self, client):
        body = error_of(client.get("/api/portfolios", params={"id": 404}), 404)
        assert body["code"] == "PORTFOLIO_NOT_FOUND"


class TestTransactions:
    def test_create_normalizes_timestamp(self, client, owner):
        response = new_transaction(client, *owner)
        assert response.status_code == 201
        tx = response.json()
        assert tx["timestamp"] == "2024-05-01T12:30:00.000Z"
        assert tx["status"] == "pending"
        by_hash = client.get("/api/transactions", params={"txHash": "0xabc"}).json()
        assert by_hash["id"] == tx["id"]

    def test_duplicate_hash(self, client, owner):
        new_transaction(client, *owner)
        body = error_of(new_transaction(client, *owner))
        assert body == {
            "error": "Transaction with this txHash already exists",
            "code": "DUPLICATE_TX_HASH",
        }

    def test_missing_fields(self, client, owner):
        response = new_transaction(client, *owner, txHash=None)
        assert error_of(response) == {
            "error": "Missing required fields: userId, portfolioId, txHash, type, timestamp",
            "code": "MISSING_REQUIRED_FIELDS",
        }

    @pytest.mark.parametrize(
        "overrides, code",
        [
            ({"type": "stake"}, "INVALID_TYPE"),
            ({"status": "done"}, "INVALID_STATUS"),
            ({"timestamp": "last tuesday"}, "INVALID_TIMESTAMP"),
            ({"amountIn": "lots"}, "INVALID_AMOUNT"),
            ({"userId": "abc"}, "INVALID_USER_ID"),
            ({"userId": 999}, "USER_NOT_FOUND"),
            ({"portfolioId": 999}, "PORTFOLIO_NOT_FOUND"),
        ],
    )
    def test_invalid_fields(self, client, owner, overrides, code):
        assert error_of(new_transaction(client, *owner, **overrides))["code"] == code

    def test_status_lifecycle(self, client, owner):
        tx_id = new_transaction(client, *owner).json()["id"]

        confirmed = client.put("/api/transactions", params={"id": tx_id}, json={"status": "confirmed"})
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "confirmed"

        same = client.put("/api/transactions", params={"id": tx_id}, json={"status": "confirmed"})
        assert same.status_code == 200

        back = client.put("/api/transactions", params={"id": tx_id}, json={"status": "pending"})
        assert error_of(back) == {
            "error": "Cannot change status from confirmed to pending",
            "code": "INVALID_STATUS_TRANSITION",
        }

    def test_list_filters(self, client, session, owner):
        user_id, portfolio_id = owner
        user = add_user(session, "other@example.com")
        portfolio = add_portfolio(session, user)
        add_transaction(session, user, portfolio, token_in="BTC", status="failed",
                        timestamp="2024-01-02T00:00:00.000Z", tx_hash="0x2")
        new_transaction(client, user_id, portfolio_id, tokenIn="SOL")

        mine = client.get("/api/transactions", params={"userId": user_id}).json()
        assert [t["txHash"] for t in mine] == ["0xabc"]
        failed = client.get("/api/transactions", params={"status": "failed"}).json()
        assert [t["txHash"] for t in failed] == ["0x2"]
        sol = client.get("/api/transactions", params={"search": "sol"}).json()
        assert [t["txHash"] for t in sol] == ["0xabc"]
        bad = client.get("/api/transactions", params={"type": "stake"})
        assert error_of(bad)["code"] == "INVALID_TYPE"

    def test_delete(self, client, owner):
        tx_id = new_transaction(client, *owner).json()["id"]
        body = client.delete("/api/transactions", params={"id": tx_id}).json()
        assert body["message"] == "Transaction deleted successfully"
        assert body["transaction"]["txHash"] == "0xabc"
        missing = error_of(client.get("/api/transactions", params={"id": tx_id}), 404)
        assert missing["code"] == "TRANSACTION_NOT_FOUND"


class TestWatchlists:
    def test_create_update_delete(self, client, owner):
        user_id, _ = owner
        created = client.post(
            "/api/watchlists", json={"userId": user_id, "name": "Majors", "tokens": ["BTC", "ETH"]}
        )
        assert created.status_code == 201
        watchlist_id = created.json()["id"]

        renamed = client.put("/api/watchlists", params={"id": watchlist_id}, json={"name": "L1s"})
        assert renamed.json()["name"] == "L1s"
        assert renamed.json()["tokens"] == ["BTC", "ETH"]

        blank_name = client.put("/api/watchlists", params={"id": watchlist_id}, json={"name": " "})
        assert error_of(blank_name)["error"] == "Name cannot be empty"

        deleted = client.delete("/api/watchlists", params={"id": watchlist_id}).json()
        assert deleted["message"] == "Watchlist deleted successfully"
        assert deleted["watchlist"]["name"] == "L1s"

    def test_tokens_must_be_array(self, client, owner):
        user_id, _ = owner
        response = client.post(
            "/api/watchlists", json={"userId": user_id, "name": "x", "tokens": "BTC"}
        )
        assert error_of(response) == {
            "error": "Tokens must be a valid JSON array",
            "code": "INVALID_JSON",
        }

    def test_not_found(self, client):
        body = error_of(client.get("/api/watchlists", params={"id": 7}), 404)
        assert body["code"] == "WATCHLIST_NOT_FOUND"


class TestPriceAlerts:
    def alert(self, client, user_id, **overrides):
        body = {
            "userId": user_id,
            "tokenSymbol": "ETH",
            "tokenAddress": "0xeth",
            "condition": "above",
            "targetPrice": 4000,
        }
        body.update(overrides)
        return client.post("/api/price-alerts", json=body)

    def test_create_and_flag(self, client, owner):
        user_id, _ = owner
        created = self.alert(client, user_id)
        assert created.status_code == 201
        assert created.json()["triggered"] is False
        alert_id = created.json()["id"]

        flagged = client.put(
            "/api/price-alerts", params={"id": alert_id}, json={"triggered": True}
        )
        assert flagged.json()["triggered"] is True

        bad_flag = client.put(
            "/api/price-alerts", params={"id": alert_id}, json={"notified": "yes"}
        )
        assert error_of(bad_flag)["code"] == "INVALID_FLAG"

    @pytest.mark.parametrize(
        "overrides, code",
        [
            ({"condition": "equals"}, "INVALID_CONDITION"),
            ({"targetPrice": 0}, "INVALID_PRICE"),
            ({"targetPrice": "cheap"}, "INVALID_PRICE"),
            ({"tokenSymbol": ""}, "MISSING_REQUIRED_FIELDS"),
        ],
    )
    def test_invalid_fields(self, client, owner, overrides, code):
        user_id, _ = owner
        assert error_of(self.alert(client, user_id, **overrides))["code"] == code

    def test_delete_shape(self, client, owner):
        user_id, _ = owner
        alert_id = self.alert(client, user_id).json()["id"]
        body = client.delete("/api/price-alerts", params={"id": alert_id}).json()
        assert body["message"] == "Price alert deleted successfully"
        assert body["alert"]["tokenSymbol"] == "ETH"
        missing = error_of(client.get("/api/price-alerts", params={"id": alert_id}), 404)
        assert missing["code"] == "ALERT_NOT_FOUND"


class TestSubscriptions:
    def subscribe(self, client, user_id, **overrides):
        body = {
            "userId": user_id,
            "stripeCustomerId": "cus_1",
            "stripeSubscriptionId": "sub_1",
            "plan": "pro",
            "currentPeriodEnd": "2024-06-01T00:00:00.000Z",
        }
        body.update(overrides)
        return client.post("/api/subscriptions", json=body)

    def test_create_and_update(self, client, owner):
        user_id, _ = owner
        created = self.subscribe(client, user_id)
        assert created.status_code == 201
        assert created.json()["status"] == "active"

        cancelled = client.put(
            "/api/subscriptions", params={"id": created.json()["id"]}, json={"status": "cancelled"}
        )
        assert cancelled.json()["status"] == "cancelled"

    def test_invalid_plan(self, client, owner):
        user_id, _ = owner
        assert error_of(self.subscribe(client, user_id, plan="free"))["code"] == "INVALID_PLAN"

    def test_duplicate_stripe_ids(self, client, owner):
        user_id, _ = owner
        self.subscribe(client, user_id)
        response = self.subscribe(client, user_id, stripeSubscriptionId="sub_2")
        assert error_of(response)["code"] == "DUPLICATE_STRIPE_ID"

    def test_not_found(self, client):
        body = error_of(client.delete("/api/subscriptions", params={"id": 3}), 404)
        assert body["code"] == "SUBSCRIPTION_NOT_FOUND"
