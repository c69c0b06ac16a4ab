"""
Order API tests.

Verifies:
- Placement requires an authenticated account and reserves stock
- Buyers see and cancel only their own orders
- Cancellation restores stock once, however many times it is requested
- Tracking is manager-only and appends stamped events
"""

import pytest


def place(client, headers, product_id, quantity, **extra):
    return client.post(
        "/api/orders",
        json={"product_id": product_id, "quantity": quantity, **extra},
        headers=headers,
    )


def stock(client, product_id):
    return client.get(f"/api/products/{product_id}").get_json()["product"]["quantity"]


# =============================================================================
# PLACEMENT
# =============================================================================


class TestPlaceOrder:
    def test_place_reserves_stock(self, client, product, buyer, buyer_headers):
        resp = place(client, buyer_headers, product.id, 3, delivery_address="Road 7, Dhaka")

        assert resp.status_code == 201
        order = resp.get_json()["order"]
        assert order["status"] == "pending"
        assert order["user_email"] == buyer.email
        assert order["total_price"] == 37.5
        assert order["delivery_address"] == "Road 7, Dhaka"
        assert stock(client, product.id) == 7

    def test_unauthenticated(self, client, product):
        resp = place(client, {}, product.id, 1)
        assert resp.status_code == 401
        assert stock(client, product.id) == 10

    def test_insufficient_stock(self, client, product, buyer_headers):
        resp = place(client, buyer_headers, product.id, 999)
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["error"] == "InsufficientStock"
        assert body["details"]["available"] == 10
        assert stock(client, product.id) == 10

    @pytest.mark.parametrize("quantity", [0, -3, 2.5])
    def test_invalid_quantity(self, client, product, buyer_headers, quantity):
        resp = place(client, buyer_headers, product.id, quantity)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "InvalidQuantity"

    def test_quantity_required(self, client, product, buyer_headers):
        resp = client.post("/api/orders", json={"product_id": product.id}, headers=buyer_headers)
        assert resp.status_code == 400

    def test_product_id_must_be_integer(self, client, product, buyer_headers):
        resp = place(client, buyer_headers, str(product.id), 1)
        assert resp.status_code == 400

    def test_unknown_product(self, client, db_session, buyer_headers):
        assert place(client, buyer_headers, 8080, 1).status_code == 404

    def test_details_must_be_strings(self, client, product, buyer_headers):
        resp = place(client, buyer_headers, product.id, 1, contact_number=1700000000)
        assert resp.status_code == 400

    @pytest.mark.parametrize("quantity", [10**20, 2**31, "99999999999999999999"])
    def test_quantity_beyond_integer_range(self, client, product, buyer_headers, quantity):
        resp = place(client, buyer_headers, product.id, quantity)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "InvalidQuantity"
        assert stock(client, product.id) == 10

    def test_product_id_beyond_integer_range(self, client, db_session, buyer_headers):
        resp = place(client, buyer_headers, 10**20, 1)
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "NotFound"


# =============================================================================
# VISIBILITY
# =============================================================================


class TestOrderVisibility:
    def test_buyer_sees_only_own_orders(self, client, product, buyer, buyer_headers, other_buyer_headers):
        place(client, buyer_headers, product.id, 1)
        place(client, other_buyer_headers, product.id, 2)

        body = client.get("/api/orders?user_email=other@garments.test", headers=buyer_headers).get_json()

        assert body["count"] == 1
        assert body["orders"][0]["user_email"] == buyer.email

    def test_manager_sees_all_orders(self, client, product, buyer_headers, other_buyer_headers, manager_headers):
        place(client, buyer_headers, product.id, 1)
        place(client, other_buyer_headers, product.id, 2)
        assert client.get("/api/orders", headers=manager_headers).get_json()["count"] == 2

    def test_status_filter(self, client, product, buyer_headers, manager_headers):
        first = place(client, buyer_headers, product.id, 1).get_json()["order"]
        place(client, buyer_headers, product.id, 1)
        client.patch(f"/api/orders/{first['id']}", json={"status": "approved"}, headers=manager_headers)

        body = client.get("/api/orders?status=approved", headers=manager_headers).get_json()
        assert [o["id"] for o in body["orders"]] == [first["id"]]

    def test_foreign_order_hidden_from_buyer(self, client, product, buyer_headers, other_buyer_headers):
        order = place(client, other_buyer_headers, product.id, 1).get_json()["order"]
        assert client.get(f"/api/orders/{order['id']}", headers=buyer_headers).status_code == 404
        assert client.get(f"/api/orders/{order['id']}", headers=other_buyer_headers).status_code == 200

    def test_list_requires_auth(self, client, db_session):
        assert client.get("/api/orders").status_code == 401

    def test_out_of_range_filters(self, client, manager_headers):
        resp = client.get(f"/api/orders?product_id={10**20}", headers=manager_headers)
        assert resp.status_code == 400
        assert client.get(f"/api/orders/{10**20}", headers=manager_headers).status_code == 404


# =============================================================================
# STATUS CHANGES
# =============================================================================


class TestOrderStatus:
    def test_buyer_cancels_own_order_once(self, client, product, buyer_headers):
        order = place(client, buyer_headers, product.id, 4).get_json()["order"]
        assert stock(client, product.id) == 6

        for _ in range(3):
            resp = client.patch(f"/api/orders/{order['id']}", json={"status": "cancelled"}, headers=buyer_headers)
            assert resp.status_code == 200
            assert resp.get_json()["order"]["status"] == "cancelled"

        assert stock(client, product.id) == 10

    def test_buyer_cannot_approve(self, client, product, buyer_headers):
        order = place(client, buyer_headers, product.id, 1).get_json()["order"]
        resp = client.patch(f"/api/orders/{order['id']}", json={"status": "approved"}, headers=buyer_headers)
        assert resp.status_code == 403

    def test_buyer_cannot_cancel_foreign_order(self, client, product, buyer_headers, other_buyer_headers):
        order = place(client, other_buyer_headers, product.id, 2).get_json()["order"]
        resp = client.patch(f"/api/orders/{order['id']}", json={"status": "cancelled"}, headers=buyer_headers)
        assert resp.status_code == 404
        assert stock(client, product.id) == 8

    def test_manager_cannot_revive_cancelled(self, client, product, buyer_headers, manager_headers):
        order = place(client, buyer_headers, product.id, 2).get_json()["order"]
        client.patch(f"/api/orders/{order['id']}", json={"status": "cancelled"}, headers=manager_headers)

        resp = client.patch(f"/api/orders/{order['id']}", json={"status": "approved"}, headers=manager_headers)

        assert resp.status_code == 409
        assert resp.get_json()["error"] == "InvalidTransition"
        assert stock(client, product.id) == 10

    @pytest.mark.parametrize("body", [{}, {"status": "lost"}, {"quantity": 1}])
    def test_invalid_patch(self, client, product, buyer_headers, manager_headers, body):
        order = place(client, buyer_headers, product.id, 1).get_json()["order"]
        resp = client.patch(f"/api/orders/{order['id']}", json=body, headers=manager_headers)
        assert resp.status_code == 400

    def test_unknown_order(self, client, db_session, manager_headers):
        resp = client.patch("/api/orders/4040", json={"status": "approved"}, headers=manager_headers)
        assert resp.status_code == 404


# =============================================================================
# TRACKING
# =============================================================================


class TestOrderTracking:
    def test_manager_appends_tracking(self, client, product, buyer_headers, manager_headers):
        order = place(client, buyer_headers, product.id, 1).get_json()["order"]

        client.patch(
            f"/api/orders/{order['id']}/tracking",
            json={"status": "Packed", "location": "Gazipur"},
            headers=manager_headers,
        )
        resp = client.patch(
            f"/api/orders/{order['id']}",
            json={"status": "approved", "tracking": {"note": "Out for delivery"}},
            headers=manager_headers,
        )

        assert resp.status_code == 200
        body = resp.get_json()["order"]
        assert body["status"] == "approved"
        assert [e.get("status") for e in body["tracking"]] == ["Packed", None]
        assert all("recorded_at" in e for e in body["tracking"])

    @pytest.mark.parametrize("headers_fixture", ["buyer_headers", "admin_headers", "suspended_headers"])
    def test_non_managers_cannot_track(self, client, request, product, buyer_headers, headers_fixture):
        order = place(client, buyer_headers, product.id, 1).get_json()["order"]
        headers = request.getfixturevalue(headers_fixture)

        resp = client.patch(f"/api/orders/{order['id']}/tracking", json={"note": "x"}, headers=headers)

        assert resp.status_code == 403

    def test_buyer_cannot_smuggle_tracking_into_cancel(self, client, product, buyer_headers):
        order = place(client, buyer_headers, product.id, 1).get_json()["order"]
        resp = client.patch(
            f"/api/orders/{order['id']}",
            json={"status": "cancelled", "tracking": {"note": "x"}},
            headers=buyer_headers,
        )
        assert resp.status_code == 403
        assert stock(client, product.id) == 9

    def test_empty_event_rejected(self, client, product, buyer_headers, manager_headers):
        order = place(client, buyer_headers, product.id, 1).get_json()["order"]
        resp = client.patch(f"/api/orders/{order['id']}/tracking", json={}, headers=manager_headers)
        assert resp.status_code == 400

    def test_rejected_status_change_discards_tracking(self, client, product, buyer_headers, manager_headers):
        order = place(client, buyer_headers, product.id, 2).get_json()["order"]
        client.patch(f"/api/orders/{order['id']}", json={"status": "cancelled"}, headers=manager_headers)

        resp = client.patch(
            f"/api/orders/{order['id']}",
            json={"status": "approved", "tracking": {"note": "shipped"}},
            headers=manager_headers,
        )

        assert resp.status_code == 409
        assert resp.get_json()["error"] == "InvalidTransition"
        body = client.get(f"/api/orders/{order['id']}", headers=manager_headers).get_json()["order"]
        assert body["status"] == "cancelled"
        assert body["tracking"] == []

    def test_invalid_event_discards_status_change(self, client, product, buyer_headers, manager_headers):
        order = place(client, buyer_headers, product.id, 2).get_json()["order"]

        resp = client.patch(
            f"/api/orders/{order['id']}",
            json={"status": "cancelled", "tracking": {"eta": "soon"}},
            headers=manager_headers,
        )

        assert resp.status_code == 400
        assert stock(client, product.id) == 8
        body = client.get(f"/api/orders/{order['id']}", headers=manager_headers).get_json()["order"]
        assert body["status"] == "pending"

    def test_cancel_with_tracking_applies_both(self, client, product, buyer_headers, manager_headers):
        order = place(client, buyer_headers, product.id, 3).get_json()["order"]

        resp = client.patch(
            f"/api/orders/{order['id']}",
            json={"status": "cancelled", "tracking": {"note": "Refused at the door"}},
            headers=manager_headers,
        )

        assert resp.status_code == 200
        body = resp.get_json()["order"]
        assert body["status"] == "cancelled"
        assert [e["note"] for e in body["tracking"]] == ["Refused at the door"]
        assert stock(client, product.id) == 10
