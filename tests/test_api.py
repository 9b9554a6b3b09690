from conftest import auth_headers, promote_to_admin, register


def _create_wishlist(client, headers, **overrides):
    payload = {
        "title": "Ada's 30th Birthday",
        "occasion": "birthday",
        "visibility": "public",
        "items": [{"name": "Blender", "unit_price_kobo": 500_000, "qty_total": 2}],
        "goals": [{"title": "Trip to Zanzibar", "target_amount_kobo": 1_000_000}],
    }
    payload.update(overrides)
    response = client.post("/api/wishlists", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_echoes_correlation_id(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Correlation-ID"] == "req-123"


def test_correlation_id_generated_when_missing(client):
    response = client.get("/health")
    assert response.headers["X-Correlation-ID"]


def test_register_login_and_verify(client):
    body = register(client, "ada")
    assert body["account"]["is_verified"] is False
    assert body["verification_token"]

    duplicate = client.post(
        "/api/auth/register",
        json={"username": "ada", "password": "secret123", "email": "other@example.com"},
    )
    assert duplicate.status_code == 409

    login = client.post("/api/auth/login", json={"login": "ada@example.com", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["username"] == "ada"

    wrong = client.post("/api/auth/login", json={"login": "ada", "password": "wrongpass"})
    assert wrong.status_code == 401

    verified = client.post("/api/auth/verify", json={"token": body["verification_token"]})
    assert verified.status_code == 200
    assert verified.json()["is_verified"] is True

    me = client.get("/api/auth/me", headers=auth_headers(body))
    assert me.json()["is_verified"] is True


def test_protected_routes_require_token(client):
    assert client.get("/api/auth/me").status_code in (401, 403)
    assert client.get("/api/wallet").status_code in (401, 403)


def test_wishlist_share_and_claim_flow(client):
    owner = auth_headers(register(client, "ada"))
    spender = auth_headers(register(client, "bola"))
    wishlist = _create_wishlist(client, owner)
    item_id = wishlist["items"][0]["id"]

    shared = client.get(f"/api/wishlists/by-slug/{wishlist['slug']}")
    assert shared.status_code == 200
    assert shared.json()["items"][0]["qty_available"] == 2

    own_claim = client.post(f"/api/items/{item_id}/claims", json={}, headers=owner)
    assert own_claim.status_code == 400

    claim = client.post(f"/api/items/{item_id}/claims", json={"note": "On it"}, headers=spender)
    assert claim.status_code == 201, claim.text
    claim_id = claim.json()["id"]
    assert claim.json()["status"] == "pending"

    shared = client.get(f"/api/wishlists/by-slug/{wishlist['slug']}")
    assert shared.json()["items"][0]["qty_available"] == 1

    mine = client.get("/api/claims/mine", headers=spender).json()["claims"]
    assert [c["id"] for c in mine] == [claim_id]

    assert client.get(f"/api/claims/{claim_id}", headers=owner).status_code == 200
    stranger = auth_headers(register(client, "chidi"))
    assert client.get(f"/api/claims/{claim_id}", headers=stranger).status_code == 403

    calendar = client.get(f"/api/claims/{claim_id}/calendar", headers=spender)
    assert calendar.status_code == 200
    assert calendar.json()["google_calendar_url"].startswith("https://calendar.google.com/")
    assert calendar.json()["share_url"].endswith(f"/ada/{wishlist['slug']}")

    stats = client.get("/api/claims/stats", headers=spender).json()
    assert stats["total"] == 1
    assert stats["value_kobo"] == 500_000

    assert client.delete(f"/api/claims/{claim_id}", headers=spender).status_code == 204
    shared = client.get(f"/api/wishlists/by-slug/{wishlist['slug']}")
    assert shared.json()["items"][0]["qty_available"] == 2


def test_guest_claim_creates_account(client):
    owner = auth_headers(register(client, "ada"))
    item_id = _create_wishlist(client, owner)["items"][0]["id"]

    response = client.post(
        f"/api/items/{item_id}/claims/guest",
        json={"email": "guest@example.com", "username": "guest", "password": "secret123"},
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["account"]["username"] == "guest"
    mine = client.get("/api/claims/mine", headers=auth_headers(body)).json()["claims"]
    assert [c["id"] for c in mine] == [body["claim"]["id"]]


def test_private_wishlist_hidden_from_others(client):
    owner = auth_headers(register(client, "ada"))
    wishlist = _create_wishlist(client, owner, visibility="private")
    assert client.get(f"/api/wishlists/by-slug/{wishlist['slug']}").status_code == 404
    assert client.get(f"/api/wishlists/{wishlist['id']}", headers=owner).status_code == 200


def test_manual_cash_payment_settled_by_admin(client):
    owner_body = register(client, "ada")
    owner = auth_headers(owner_body)
    spender = auth_headers(register(client, "bola"))
    admin_body = register(client, "root")
    promote_to_admin(client, "root")
    admin = auth_headers(admin_body)

    item_id = _create_wishlist(client, owner)["items"][0]["id"]
    claim_id = client.post(f"/api/items/{item_id}/claims", json={}, headers=spender).json()["id"]

    checkout = client.post("/api/payments/cash", json={"claim_id": claim_id, "amount_kobo": 500_000}, headers=spender)
    assert checkout.status_code == 201, checkout.text
    checkout = checkout.json()
    assert checkout["mode"] == "manual"
    reference = checkout["reference"]
    assert reference.startswith("cash_")
    assert reference in checkout["instructions"]

    assert client.post(f"/api/admin/payments/{reference}/settle", json={}, headers=owner).status_code == 403
    settled = client.post(f"/api/admin/payments/{reference}/settle", json={"gateway_ref": "bank-1"}, headers=admin)
    assert settled.status_code == 200, settled.text
    assert settled.json()["status"] == "success"
    again = client.post(f"/api/admin/payments/{reference}/settle", json={}, headers=admin)
    assert again.json()["status"] == "success"

    wallet = client.get("/api/wallet", headers=owner).json()
    assert wallet["summary"]["balance_kobo"] == 500_000
    assert [tx["category"] for tx in wallet["transactions"]] == ["wishlist_purchase"]

    claim = client.get(f"/api/claims/{claim_id}", headers=spender).json()
    assert claim["status"] == "fulfilled"

    payout = client.post(
        "/api/payouts",
        json={"amount_kobo": 200_000, "bank_code": "058", "account_number": "0123456789"},
        headers=owner,
    )
    assert payout.status_code == 201, payout.text
    assert payout.json()["status"] == "requested"

    too_much = client.post(
        "/api/payouts",
        json={"amount_kobo": 400_000, "bank_code": "058", "account_number": "0123456789"},
        headers=owner,
    )
    assert too_much.status_code in (400, 409, 422)

    assert client.get("/api/admin/stats", headers=admin).json()["pending_payouts"] == 1

    reconcile = client.get(f"/api/admin/users/{owner_body['account']['id']}/reconcile", headers=admin).json()
    assert reconcile["is_consistent"] is True

    entries = client.get("/api/admin/audit", headers=admin).json()["entries"]
    assert [e["action"] for e in entries] == ["payment.settle", "payment.settle"]


def test_contribution_without_account(client):
    owner = auth_headers(register(client, "ada"))
    goal_id = _create_wishlist(client, owner)["goals"][0]["id"]

    response = client.post(
        "/api/payments/contributions",
        json={"goal_id": goal_id, "amount_kobo": 100_000, "email": "friend@example.com", "display_name": "Friend"},
    )

    assert response.status_code == 201, response.text
    assert response.json()["reference"].startswith("contrib_")
    # Pending contributions are not listed until they settle.
    listed = client.get(f"/api/payments/goals/{goal_id}/contributions").json()["contributions"]
    assert listed == []


def test_webhook_rejects_unsigned_body(client):
    response = client.post("/api/payments/webhook", content=b'{"event": "charge.success"}')
    assert response.status_code == 401


def test_admin_cannot_disable_self(client):
    admin_body = register(client, "root")
    promote_to_admin(client, "root")
    admin = auth_headers(admin_body)
    response = client.patch(
        f"/api/admin/users/{admin_body['account']['id']}/status", json={"is_active": False}, headers=admin
    )
    assert response.status_code == 400


def test_notifications_for_owner(client):
    owner = auth_headers(register(client, "ada"))
    spender = auth_headers(register(client, "bola"))
    item_id = _create_wishlist(client, owner)["items"][0]["id"]
    client.post(f"/api/items/{item_id}/claims", json={}, headers=spender)

    notifications = client.get("/api/notifications", headers=owner).json()["notifications"]
    claim_notes = [n for n in notifications if n["type"] == "item_claimed"]
    assert len(claim_notes) == 1

    read = client.post(f"/api/notifications/{claim_notes[0]['id']}/read", headers=owner)
    assert read.status_code == 200
    assert read.json()["status"] == "read"


def test_null_updates_are_rejected_with_400(client):
    owner = auth_headers(register(client, "ada"))
    wishlist = _create_wishlist(client, owner)
    item_id = wishlist["items"][0]["id"]
    goal_id = wishlist["goals"][0]["id"]

    assert client.patch(f"/api/wishlists/items/{item_id}", json={"qty_total": None}, headers=owner).status_code == 400
    assert client.patch(f"/api/wishlists/items/{item_id}", json={"name": None}, headers=owner).status_code == 400
    response = client.patch(f"/api/wishlists/goals/{goal_id}", json={"target_amount_kobo": None}, headers=owner)
    assert response.status_code == 400


def test_owner_analytics(client):
    owner = auth_headers(register(client, "ada"))
    _create_wishlist(client, owner)
    _create_wishlist(client, owner, occasion="wedding", wishlist_date="2020-05-01", title="Tolu & Ada")

    analytics = client.get("/api/wishlists/analytics", headers=owner)

    assert analytics.status_code == 200, analytics.text
    body = analytics.json()
    assert body["total_wishlists"] == 2
    assert body["live_wishlists"] == 1
    assert body["completed_wishlists"] == 1
    assert body["target_amount_kobo"] == 2_000_000
    assert body["completion_rate"] == 0.0


def test_admin_can_reject_an_approved_payout(client):
    owner_body = register(client, "ada")
    owner = auth_headers(owner_body)
    spender = auth_headers(register(client, "bola"))
    admin_body = register(client, "root")
    promote_to_admin(client, "root")
    admin = auth_headers(admin_body)
    item_id = _create_wishlist(client, owner)["items"][0]["id"]
    claim_id = client.post(f"/api/items/{item_id}/claims", json={}, headers=spender).json()["id"]
    reference = client.post(
        "/api/payments/cash", json={"claim_id": claim_id, "amount_kobo": 500_000}, headers=spender
    ).json()["reference"]
    client.post(f"/api/admin/payments/{reference}/settle", json={}, headers=admin)
    payout_id = client.post(
        "/api/payouts",
        json={"amount_kobo": 200_000, "bank_code": "058", "account_number": "0123456789"},
        headers=owner,
    ).json()["id"]

    approved = client.patch(f"/api/admin/payouts/{payout_id}/status", json={"status": "processing"}, headers=admin)
    assert approved.status_code == 200, approved.text
    rejected = client.patch(
        f"/api/admin/payouts/{payout_id}/status", json={"status": "failed", "reason": "Wrong account"}, headers=admin
    )

    assert rejected.status_code == 200, rejected.text
    assert rejected.json()["status"] == "failed"
    assert client.get("/api/wallet", headers=owner).json()["summary"]["balance_kobo"] == 500_000
