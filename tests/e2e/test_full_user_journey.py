from app.models.domain.user_domain import Role


def test_full_contact_unlock_journey(client, repos, auth_headers, monkeypatch):
    def fake_payment_intent(**kwargs):
        return {"id": "pi_journey", "client_secret": "pi_journey_secret"}

    monkeypatch.setattr("app.services.payment_service.stripe.PaymentIntent.create", fake_payment_intent)
    monkeypatch.setattr("app.services.payment_service.settings.STRIPE_SECRET_KEY", "sk_test_journey")

    for email in ("bob@example.com", "carol@example.com", "erin@example.com"):
        assert client.post("/users", json={"email": email}).status_code == 201
    repos.users.add("root@example.com", Role.ADMIN)

    bob = auth_headers("bob@example.com")
    carol = auth_headers("carol@example.com")
    erin = auth_headers("erin@example.com")
    admin = auth_headers("root@example.com")

    created = client.post(
        "/biodatas",
        json={
            "name": "Carol",
            "biodata_type": "Female",
            "age": 29,
            "permanent_division": "Sylhet",
            "contact_email": "carol.private@example.com",
            "mobile_number": "+8801700000000",
        },
        headers=carol,
    )
    assert created.status_code == 201
    biodata_id = created.json()["biodata_id"]

    # Bob browses and only sees public fields
    profile = client.get(f"/biodatas/{biodata_id}", headers=bob)
    assert profile.status_code == 200
    assert "mobile_number" not in profile.json()

    intent = client.post("/create-payment-intent", json={"purpose": "contact_unlock"}, headers=bob)
    assert intent.status_code == 200
    assert intent.json()["client_secret"] == "pi_journey_secret"

    recorded = client.post(
        "/payments", json={"payment_reference": "pi_journey", "biodata_id": biodata_id}, headers=bob
    )
    assert recorded.status_code == 201

    requested = client.post(
        "/contact-requests",
        json={"biodata_id": biodata_id, "payment_reference": "pi_journey"},
        headers=bob,
    )
    assert requested.status_code == 201
    request_id = requested.json()["id"]
    assert requested.json()["status"] == "pending"

    # Still hidden while pending
    assert "contact_email" not in client.get(f"/biodatas/{biodata_id}", headers=bob).json()

    pending = client.get("/admin/contact-requests", params={"status": "pending"}, headers=admin)
    assert [r["id"] for r in pending.json()["requests"]] == [request_id]

    approved = client.patch(f"/admin/contact-requests/{request_id}/approve", headers=admin)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    again = client.patch(f"/admin/contact-requests/{request_id}/approve", headers=admin)
    assert again.status_code == 409
    assert again.json()["error"] == "already_approved"

    unlocked = client.get(f"/biodatas/{biodata_id}", headers=bob).json()
    assert unlocked["contact_email"] == "carol.private@example.com"
    assert unlocked["mobile_number"] == "+8801700000000"

    mine = client.get("/contact-requests/me", headers=bob).json()["requests"]
    assert mine[0]["name"] == "Carol"
    assert mine[0]["mobile_number"] == "+8801700000000"

    # Another member is unaffected by Bob's approval
    assert "mobile_number" not in client.get(f"/biodatas/{biodata_id}", headers=erin).json()

    stats = client.get("/admin-stats", headers=admin).json()
    assert stats["biodata_count"] == 1
    assert stats["contact_request_count"] == 1
    assert stats["revenue"] == 5.0
