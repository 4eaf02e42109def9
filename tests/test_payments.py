from unittest.mock import MagicMock, patch

from service_modules.payment_service import is_stripe_configured


def _connect(api, trainer):
    response = api.post("/api/payments/trainer/connect/setup", headers=trainer["headers"])
    assert response.status_code == 200
    return response.json()


def test_connect_account_in_test_mode(api, trainer):
    assert api.get("/api/payments/trainer/connect/status", headers=trainer["headers"]).json() == {"connected": False}

    account = _connect(api, trainer)
    assert account["accountId"].startswith("test_acct_")
    assert account["onboardingUrl"].endswith("/profile?stripe_success=true")

    status = api.get("/api/payments/trainer/connect/status", headers=trainer["headers"]).json()
    assert status == {
        "connected": True,
        "accountId": account["accountId"],
        "onboardingCompleted": True,
        "chargesEnabled": True,
        "payoutsEnabled": True,
    }

    again = api.post("/api/payments/trainer/connect/setup", headers=trainer["headers"])
    assert again.status_code == 400
    assert again.json()["detail"] == "Stripe account already connected"


def test_payment_requires_connected_trainer(api, trainer, linked_client):
    response = api.post("/api/payments/create-payment-intent", json={"trainerId": trainer["id"], "amount": 50},
                        headers=linked_client["headers"])
    assert response.status_code == 400
    assert response.json()["detail"] == "Trainer has not set up payments"

    response = api.post("/api/payments/create-payment-intent", json={"trainerId": trainer["id"]},
                        headers=linked_client["headers"])
    assert response.json()["detail"] == "Trainer ID and amount are required"


def test_one_time_payment(api, trainer, linked_client, client_user):
    _connect(api, trainer)
    intent = api.post("/api/payments/create-payment-intent", json={
        "trainerId": trainer["id"], "amount": 75.5, "description": "Assessment"
    }, headers=linked_client["headers"]).json()
    assert intent["paymentIntentId"].startswith("test_pi_")
    assert intent["clientSecret"] == f"{intent['paymentIntentId']}_secret_test"

    history = api.get("/api/payments/trainer/history", headers=trainer["headers"]).json()
    assert history[0]["status"] == "pending"
    assert history[0]["client_name"] == linked_client["name"]

    denied = api.post(f"/api/payments/payments/{intent['paymentId']}/confirm", headers=client_user["headers"])
    assert denied.status_code == 403

    confirmed = api.post(f"/api/payments/payments/{intent['paymentId']}/confirm", headers=linked_client["headers"])
    assert confirmed.json()["message"] == "Payment confirmed"
    assert confirmed.json()["payment"]["status"] == "completed"

    mine = api.get("/api/payments/client/history", headers=linked_client["headers"]).json()
    assert mine[0]["trainer_name"] == trainer["name"]
    assert mine[0]["amount"] == 75.5

    assert api.post("/api/payments/payments/nope/confirm", headers=trainer["headers"]).status_code == 404


def test_subscription_lifecycle(api, trainer, linked_client, client_user):
    _connect(api, trainer)
    sub = api.post("/api/payments/create-subscription", json={
        "trainerId": trainer["id"], "amount": 200, "billingCycle": "weekly"
    }, headers=linked_client["headers"]).json()
    assert sub["subscriptionId"].startswith("test_sub_")
    assert sub["status"] == "active"
    assert sub["clientSecret"].endswith("_secret_test")

    trainer_subs = api.get("/api/payments/trainer/subscriptions", headers=trainer["headers"]).json()
    assert trainer_subs[0]["client_name"] == linked_client["name"]
    assert trainer_subs[0]["billing_cycle"] == "weekly"

    denied = api.post(f"/api/payments/subscriptions/{sub['id']}/cancel", headers=trainer["headers"])
    assert denied.status_code == 403
    denied = api.post(f"/api/payments/subscriptions/{sub['id']}/cancel", headers=client_user["headers"])
    assert denied.status_code == 403

    cancelled = api.post(f"/api/payments/subscriptions/{sub['id']}/cancel", headers=linked_client["headers"])
    assert cancelled.json() == {"message": "Subscription cancelled successfully"}

    client_subs = api.get("/api/payments/client/subscriptions", headers=linked_client["headers"]).json()
    assert client_subs[0]["status"] == "cancelled"
    assert client_subs[0]["cancelled_at"] is not None
    assert client_subs[0]["trainer_name"] == trainer["name"]


def test_payment_routes_check_roles(api, trainer, linked_client):
    response = api.post("/api/payments/trainer/connect/setup", headers=linked_client["headers"])
    assert response.status_code == 403
    response = api.post("/api/payments/create-payment-intent", json={"trainerId": trainer["id"], "amount": 5},
                        headers=trainer["headers"])
    assert response.status_code == 403


def test_live_mode_calls_stripe(api, trainer):
    account = MagicMock(id="acct_live123")
    link = MagicMock(url="https://connect.stripe.com/setup/abc")
    with patch("service_modules.payment_service.is_stripe_configured", return_value=True), \
            patch("stripe.Account.create", return_value=account) as create_account, \
            patch("stripe.AccountLink.create", return_value=link):
        result = _connect(api, trainer)

    assert result == {"accountId": "acct_live123", "onboardingUrl": "https://connect.stripe.com/setup/abc"}
    assert create_account.call_args.kwargs["type"] == "express"
    assert create_account.call_args.kwargs["metadata"] == {"trainer_id": trainer["id"]}

    remote = MagicMock(details_submitted=True, charges_enabled=True, payouts_enabled=False)
    with patch("service_modules.payment_service.is_stripe_configured", return_value=True), \
            patch("stripe.Account.retrieve", return_value=remote):
        status = api.get("/api/payments/trainer/connect/status", headers=trainer["headers"]).json()
    assert status["onboardingCompleted"] is True
    assert status["payoutsEnabled"] is False


def test_live_payment_intent_sends_cents_to_trainer(api, trainer, linked_client):
    _connect(api, trainer)
    intent = MagicMock(id="pi_live", client_secret="pi_live_secret")
    with patch("service_modules.payment_service.is_stripe_configured", return_value=True), \
            patch("stripe.PaymentIntent.create", return_value=intent) as create_intent:
        result = api.post("/api/payments/create-payment-intent", json={
            "trainerId": trainer["id"], "amount": 19.99
        }, headers=linked_client["headers"]).json()

    assert result["clientSecret"] == "pi_live_secret"
    kwargs = create_intent.call_args.kwargs
    assert kwargs["amount"] == 1999
    assert kwargs["application_fee_amount"] == 0
    assert kwargs["transfer_data"]["destination"].startswith("test_acct_")


def test_is_stripe_configured(monkeypatch):
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
    assert is_stripe_configured() is False
    monkeypatch.setenv("STRIPE_SECRET_KEY", "your_stripe_key_here_placeholder")
    assert is_stripe_configured() is False
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_" + "x" * 24)
    assert is_stripe_configured() is True
