from datetime import timedelta
from decimal import Decimal

from app.core.config import settings
from app.models import Booking
from app.services.time_utils import reference_now

REVIEWS_URL = f"{settings.API_PREFIX}/reviews/"
FIELDS_URL = f"{settings.API_PREFIX}/fields/"


def add_booking(db_session, field, user_id, status="CONFIRMED", start="18:00", end="19:00"):
    booking = Booking(
        id_field=field.id_field,
        id_user=user_id,
        booking_date=reference_now().date() + timedelta(days=1),
        start_time=start,
        end_time=end,
        status=status,
        total_price=Decimal("50.00"),
    )
    db_session.add(booking)
    db_session.commit()
    return booking


def field_rating(client, field_id):
    data = client.get(f"{FIELDS_URL}{field_id}").json()
    return Decimal(str(data["rating_avg"])), data["rating_count"]


class TestSubmitReview:
    def test_player_with_booking_rates_field(self, client, db_session, make_field, player_headers):
        field = make_field()
        add_booking(db_session, field, user_id=1)

        response = client.post(
            REVIEWS_URL,
            json={"id_field": field.id_field, "rating": 4, "comment": "Good turf"},
            headers=player_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["rating"] == 4
        assert body["id_user"] == 1
        assert field_rating(client, field.id_field) == (Decimal("4"), 1)

    def test_second_review_replaces_the_first(
        self, client, db_session, make_field, player_headers, other_player_headers
    ):
        field = make_field()
        add_booking(db_session, field, user_id=1)
        add_booking(db_session, field, user_id=2, start="20:00", end="21:00")
        client.post(REVIEWS_URL, json={"id_field": field.id_field, "rating": 5}, headers=player_headers)
        client.post(
            REVIEWS_URL, json={"id_field": field.id_field, "rating": 4}, headers=other_player_headers
        )

        assert field_rating(client, field.id_field) == (Decimal("4.5"), 2)

        response = client.post(
            REVIEWS_URL, json={"id_field": field.id_field, "rating": 2}, headers=player_headers
        )

        assert response.status_code == 200
        assert field_rating(client, field.id_field) == (Decimal("3"), 2)
        reviews = client.get(f"{FIELDS_URL}{field.id_field}/reviews").json()
        assert sorted(item["rating"] for item in reviews) == [2, 4]

    def test_requires_confirmed_booking(self, client, db_session, make_field, player_headers):
        field = make_field()
        add_booking(db_session, field, user_id=1, status="CANCELLED")

        response = client.post(
            REVIEWS_URL, json={"id_field": field.id_field, "rating": 3}, headers=player_headers
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "You must have a confirmed booking to leave a review"
        assert field_rating(client, field.id_field) == (Decimal("0"), 0)

    def test_only_players_can_review(self, client, make_field, owner_headers):
        field = make_field()

        response = client.post(
            REVIEWS_URL, json={"id_field": field.id_field, "rating": 3}, headers=owner_headers
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Only players can leave reviews"

    def test_rating_out_of_range(self, client, make_field, player_headers):
        field = make_field()

        response = client.post(
            REVIEWS_URL, json={"id_field": field.id_field, "rating": 6}, headers=player_headers
        )

        assert response.status_code == 422

    def test_unknown_field(self, client, player_headers):
        response = client.post(REVIEWS_URL, json={"id_field": 404, "rating": 3}, headers=player_headers)

        assert response.status_code == 404

    def test_reviews_of_unknown_field(self, client):
        response = client.get(f"{FIELDS_URL}404/reviews")

        assert response.status_code == 404
