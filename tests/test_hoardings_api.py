import pytest

from conftest import auth_headers, future

from app.db.models.booking import Booking

HOARDINGS = "/api/hoardings"


def _payload(**overrides):
    payload = {
        "name": "Airport Road Unipole",
        "description": "Double-sided unipole before the flyover",
        "media_type": "Static Billboard",
        "address": "Airport Road",
        "area": "Viman Nagar",
        "city": "Pune",
        "state": "Maharashtra",
        "width": 30,
        "height": 15,
        "units": "ft",
        "pricing": {
            "base_price": 45000,
            "per": "month",
            "additional_costs": [{"name": "Printing", "cost": 5000, "is_included": True}],
        },
    }
    payload.update(overrides)
    return payload


def test_vendor_creates_pending_hoarding(client, vendor):
    response = client.post(HOARDINGS, json=_payload(), headers=auth_headers(vendor))
    assert response.status_code == 201, response.json()
    body = response.json()
    assert body["status"] == "pending"
    assert body["vendor_id"] == vendor.id
    assert body["aspect_ratio"] == "2:1"
    assert body["pricing"]["per"] == "month"
    assert body["pricing"]["additional_costs"][0]["is_included"] is True


def test_buyer_cannot_create_hoarding(client, buyer):
    response = client.post(HOARDINGS, json=_payload(), headers=auth_headers(buyer))
    assert response.status_code == 403


def test_invalid_media_type_is_rejected(client, vendor):
    response = client.post(HOARDINGS, json=_payload(media_type="Hologram"), headers=auth_headers(vendor))
    assert response.status_code == 400


def test_search_lists_only_approved(client, make_hoarding):
    make_hoarding(city="Pune")
    make_hoarding(city="Mumbai")
    make_hoarding(city="Pune", status="pending")

    response = client.get(HOARDINGS, params={"city": "pun"})
    assert response.status_code == 200
    body = response.json()
    assert body["total_hoardings"] == 1
    assert body["hoardings"][0]["city"] == "Pune"


def test_search_by_price_range(client, make_hoarding):
    make_hoarding(base_price=500)
    make_hoarding(base_price=5000)
    body = client.get(HOARDINGS, params={"min_price": 1000, "max_price": 10000}).json()
    assert [h["pricing"]["base_price"] for h in body["hoardings"]] == [5000]


def test_admin_moderates_pending_hoarding_once(client, vendor, admin):
    created = client.post(HOARDINGS, json=_payload(), headers=auth_headers(vendor)).json()
    url = f"{HOARDINGS}/{created['id']}/status"

    assert client.patch(url, json={"status": "approved"}, headers=auth_headers(vendor)).status_code == 403

    approved = client.patch(url, json={"status": "approved"}, headers=auth_headers(admin))
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    again = client.patch(url, json={"status": "rejected"}, headers=auth_headers(admin))
    assert again.status_code == 400


def test_owner_updates_hoarding(client, vendor, hoarding):
    response = client.patch(
        f"{HOARDINGS}/{hoarding.id}",
        json={"width": 48, "height": 36, "landmark": "Opp. mall"},
        headers=auth_headers(vendor),
    )
    assert response.status_code == 200
    assert response.json()["aspect_ratio"] == "4:3"
    assert response.json()["landmark"] == "Opp. mall"


def test_other_vendor_cannot_update(client, make_user, hoarding):
    response = client.patch(
        f"{HOARDINGS}/{hoarding.id}",
        json={"name": "Hijacked"},
        headers=auth_headers(make_user("vendor")),
    )
    assert response.status_code == 403


def test_delete_blocked_by_active_booking(client, buyer, vendor, hoarding):
    client.post(
        "/api/bookings",
        json={"hoarding_id": hoarding.id, "start_date": str(future(3)), "end_date": str(future(4))},
        headers=auth_headers(buyer),
    )
    response = client.delete(f"{HOARDINGS}/{hoarding.id}", headers=auth_headers(vendor))
    assert response.status_code == 400


def test_owner_deletes_hoarding(client, vendor, hoarding):
    assert client.delete(f"{HOARDINGS}/{hoarding.id}", headers=auth_headers(vendor)).status_code == 204
    assert client.get(f"{HOARDINGS}/{hoarding.id}").status_code == 404


def test_vendor_lists_own_hoardings(client, vendor, make_user, make_hoarding):
    make_hoarding(status="pending")
    make_hoarding(owner=make_user("vendor"))
    body = client.get(f"{HOARDINGS}/mine", headers=auth_headers(vendor)).json()
    assert body["total_hoardings"] == 1
    assert body["hoardings"][0]["status"] == "pending"


@pytest.mark.parametrize("field", ["media", "units", "media_type", "name", "pricing"])
def test_null_for_required_field_is_rejected_and_listing_stays_readable(client, vendor, hoarding, field):
    response = client.patch(f"{HOARDINGS}/{hoarding.id}", json={field: None}, headers=auth_headers(vendor))
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"

    fetched = client.get(f"{HOARDINGS}/{hoarding.id}")
    assert fetched.status_code == 200
    assert fetched.json()["media"] == []
    assert fetched.json()["units"] == "ft"
    assert client.get(HOARDINGS).status_code == 200


def test_nullable_fields_can_be_cleared(client, vendor, hoarding):
    client.patch(f"{HOARDINGS}/{hoarding.id}", json={"landmark": "Near depot"}, headers=auth_headers(vendor))
    response = client.patch(f"{HOARDINGS}/{hoarding.id}", json={"landmark": None}, headers=auth_headers(vendor))
    assert response.status_code == 200
    assert response.json()["landmark"] is None


def test_delete_removes_past_bookings(client, db, buyer, vendor, hoarding):
    booking = client.post(
        "/api/bookings",
        json={"hoarding_id": hoarding.id, "start_date": str(future(3)), "end_date": str(future(4))},
        headers=auth_headers(buyer),
    ).json()
    client.patch(f"/api/bookings/{booking['id']}/status", json={"status": "rejected"}, headers=auth_headers(vendor))

    assert client.delete(f"{HOARDINGS}/{hoarding.id}", headers=auth_headers(vendor)).status_code == 204
    assert db.query(Booking).filter(Booking.id == booking["id"]).count() == 0
