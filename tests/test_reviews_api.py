"""API tests for the review endpoints nested under a product."""

from storefront.models import Product, Review


def review_body(ratings=4, **overrides):
    body = {"ratings": ratings, "title": "Great fit", "comment": "True to size"}
    body.update(overrides)
    return body


class TestUpsertReview:
    def test_first_review(self, client, auth_as, customer, product_factory):
        product = product_factory()
        auth_as(customer)

        response = client.put(f"/products/{product.id}/reviews", json=review_body(4))

        assert response.status_code == 200
        assert response.json() == {"success": True, "ratings": 4.0, "numOfReviews": 1}

        reviews = client.get(f"/products/{product.id}/reviews").json()["reviews"]
        assert len(reviews) == 1
        assert reviews[0]["name"] == "Bob Buyer"
        assert reviews[0]["avatar"] == "https://cdn.test/avatars/bob.png"
        assert reviews[0]["recommend"] is True

    def test_same_user_updates_in_place(self, client, auth_as, customer, product_factory, db_session):
        product = product_factory()
        auth_as(customer)

        client.put(f"/products/{product.id}/reviews", json=review_body(2))
        created_at = db_session.query(Review).one().created_at

        response = client.put(
            f"/products/{product.id}/reviews",
            json=review_body(5, title="Changed my mind", recommend=False),
        )

        assert response.json()["numOfReviews"] == 1
        assert response.json()["ratings"] == 5
        db_session.expire_all()
        review = db_session.query(Review).one()
        assert review.title == "Changed my mind"
        assert review.recommend is False
        assert review.created_at == created_at

    def test_two_users_average(self, client, auth_as, customer, other_customer, product_factory, db_session):
        product = product_factory()

        auth_as(customer)
        client.put(f"/products/{product.id}/reviews", json=review_body(4))
        auth_as(other_customer)
        response = client.put(f"/products/{product.id}/reviews", json=review_body(2))

        assert response.json() == {"success": True, "ratings": 3.0, "numOfReviews": 2}
        db_session.expire_all()
        stored = db_session.get(Product, product.id)
        assert stored.ratings == 3
        assert stored.num_of_reviews == 2

    def test_rating_out_of_range(self, client, product_factory):
        product = product_factory()
        assert client.put(f"/products/{product.id}/reviews", json=review_body(6)).status_code == 422
        assert client.put(f"/products/{product.id}/reviews", json=review_body(0)).status_code == 422

    def test_unknown_product(self, client):
        response = client.put("/products/999/reviews", json=review_body())
        assert response.status_code == 404


class TestGetReviews:
    def test_empty(self, client, product_factory):
        product = product_factory()
        assert client.get(f"/products/{product.id}/reviews").json() == {"success": True, "reviews": []}

    def test_unknown_product(self, client):
        assert client.get("/products/999/reviews").status_code == 404


class TestDeleteReview:
    def _review_as(self, client, auth_as, user, product, ratings):
        auth_as(user)
        client.put(f"/products/{product.id}/reviews", json=review_body(ratings))

    def test_owner_deletes_and_stats_recompute(
        self, client, auth_as, customer, other_customer, product_factory, db_session
    ):
        product = product_factory()
        self._review_as(client, auth_as, customer, product, 4)
        self._review_as(client, auth_as, other_customer, product, 2)
        review_id = db_session.query(Review).filter(Review.user_id == customer.id).one().id

        auth_as(customer)
        response = client.delete(f"/products/{product.id}/reviews/{review_id}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "ratings": 2.0, "numOfReviews": 1}
        assert db_session.query(Review).count() == 1

    def test_deleting_last_review_resets_ratings(self, client, auth_as, customer, product_factory, db_session):
        product = product_factory()
        self._review_as(client, auth_as, customer, product, 5)
        review_id = db_session.query(Review).one().id

        response = client.delete(f"/products/{product.id}/reviews/{review_id}")

        assert response.json() == {"success": True, "ratings": 0.0, "numOfReviews": 0}

    def test_other_user_is_forbidden(self, client, auth_as, customer, other_customer, product_factory, db_session):
        product = product_factory()
        self._review_as(client, auth_as, customer, product, 5)
        review_id = db_session.query(Review).one().id

        auth_as(other_customer)
        response = client.delete(f"/products/{product.id}/reviews/{review_id}")

        assert response.status_code == 403
        assert db_session.query(Review).count() == 1

    def test_admin_can_delete_any_review(self, client, auth_as, admin_user, customer, product_factory, db_session):
        product = product_factory()
        self._review_as(client, auth_as, customer, product, 3)
        review_id = db_session.query(Review).one().id

        auth_as(admin_user)
        response = client.delete(f"/products/{product.id}/reviews/{review_id}")

        assert response.status_code == 200
        assert db_session.query(Review).count() == 0

    def test_unknown_review(self, client, product_factory):
        product = product_factory()
        response = client.delete(f"/products/{product.id}/reviews/12345")
        assert response.status_code == 404
        assert response.json()["detail"] == "Review not found"

    def test_unknown_product(self, client):
        assert client.delete("/products/999/reviews/1").status_code == 404
