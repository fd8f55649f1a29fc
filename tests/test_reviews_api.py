import pytest

from conftest import auth_headers, future

from app.db.models.review import Review
from app.schemas.review import ReviewCreate
from app.services import reviews as review_service

REVIEWS = "/api/reviews"


@pytest.fixture
def completed_booking(client, buyer, vendor, hoarding):
    headers = auth_headers(vendor)
    booking = client.post(
        "/api/bookings",
        json={"hoarding_id": hoarding.id, "start_date": str(future(5)), "end_date": str(future(7))},
        headers=auth_headers(buyer),
    ).json()
    client.patch(f"/api/bookings/{booking['id']}/status", json={"status": "accepted"}, headers=headers)
    client.patch(
        f"/api/bookings/{booking['id']}/proof",
        files=[("proof_images", ("site.png", b"\x89PNG", "image/png"))],
        headers=headers,
    )
    done = client.patch(f"/api/bookings/{booking['id']}/status", json={"status": "completed"}, headers=headers)
    assert done.json()["status"] == "completed"
    return done.json()


def _review(client, user, booking, rating=4, comment="Great visibility"):
    return client.post(
        REVIEWS,
        json={
            "hoarding_id": booking["hoarding_id"],
            "booking_id": booking["id"],
            "rating": rating,
            "comment": comment,
        },
        headers=auth_headers(user),
    )


def _hoarding(client, hoarding_id):
    return client.get(f"/api/hoardings/{hoarding_id}").json()


def test_buyer_reviews_completed_booking(client, buyer, completed_booking):
    response = _review(client, buyer, completed_booking, rating=4)
    assert response.status_code == 201, response.json()
    assert response.json()["buyer_id"] == buyer.id

    hoarding = _hoarding(client, completed_booking["hoarding_id"])
    assert hoarding["average_rating"] == 4.0
    assert hoarding["review_count"] == 1


def test_second_review_for_same_booking_conflicts(client, buyer, completed_booking):
    assert _review(client, buyer, completed_booking).status_code == 201
    again = _review(client, buyer, completed_booking, rating=1)
    assert again.status_code == 400
    assert again.json()["error"] == "conflict"


def test_review_needs_completed_booking(client, buyer, hoarding):
    booking = client.post(
        "/api/bookings",
        json={"hoarding_id": hoarding.id, "start_date": str(future(5)), "end_date": str(future(7))},
        headers=auth_headers(buyer),
    ).json()
    response = _review(client, buyer, booking)
    assert response.status_code == 404


def test_review_of_someone_elses_booking_is_not_found(client, make_user, completed_booking):
    response = _review(client, make_user("buyer"), completed_booking)
    assert response.status_code == 404


def test_rating_out_of_range_is_rejected(client, buyer, completed_booking):
    assert _review(client, buyer, completed_booking, rating=6).status_code == 400


def test_rating_is_recomputed_on_update_and_delete(client, buyer, completed_booking):
    review = _review(client, buyer, completed_booking, rating=5).json()
    url = f"{REVIEWS}/{review['id']}"

    updated = client.patch(url, json={"rating": 2, "comment": "Faded print"}, headers=auth_headers(buyer))
    assert updated.status_code == 200
    assert _hoarding(client, completed_booking["hoarding_id"])["average_rating"] == 2.0

    assert client.delete(url, headers=auth_headers(buyer)).status_code == 204
    hoarding = _hoarding(client, completed_booking["hoarding_id"])
    assert hoarding["average_rating"] == 0
    assert hoarding["review_count"] == 0


def test_only_author_can_modify_review(client, buyer, make_user, completed_booking):
    review = _review(client, buyer, completed_booking).json()
    other = make_user("buyer")
    response = client.patch(f"{REVIEWS}/{review['id']}", json={"rating": 1}, headers=auth_headers(other))
    assert response.status_code == 403


def test_list_reviews_for_hoarding(client, buyer, completed_booking):
    _review(client, buyer, completed_booking)
    response = client.get(f"{REVIEWS}/hoarding/{completed_booking['hoarding_id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["total_reviews"] == 1
    assert body["reviews"][0]["comment"] == "Great visibility"


def test_review_is_not_saved_when_rating_recompute_fails(db, monkeypatch, buyer, completed_booking):
    def broken_recompute(db, hoarding_id):
        raise RuntimeError("aggregate update failed")

    monkeypatch.setattr(review_service, "recompute_hoarding_rating", broken_recompute)
    payload = ReviewCreate(
        hoarding_id=completed_booking["hoarding_id"],
        booking_id=completed_booking["id"],
        rating=5,
    )

    with pytest.raises(RuntimeError):
        review_service.create_review(db, buyer, payload)

    db.rollback()
    assert db.query(Review).count() == 0
