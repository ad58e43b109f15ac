"""
Rating categories and rating submission over HTTP.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from uniyelp.models.rating import CollegeRating, Rating, RatingCategory

API = "/api/v1/ratings"


@pytest.fixture
def category(db):
    category = RatingCategory(name="Campus Life", slug="campus-life")
    db.add(category)
    db.commit()
    return category


def rate(client, headers, **overrides):
    body = {"entityType": "college", "entityId": "", "categoryId": "", "rating": "4"}
    body.update(overrides)
    return client.post(API, json=body, headers=headers)


class TestSubmitRating:
    def test_member_rates_a_college(self, client, db, member, session_cookie, catalog, category):
        response = rate(
            client,
            session_cookie(member),
            entityId=catalog.college.id,
            categoryId=category.id,
            review="Friendly faculty",
        )
        assert response.status_code == 200
        rating_id = response.json()["data"]["id"]

        assert db.query(Rating).filter(Rating.id == rating_id, Rating.user_id == member.id).count() == 1
        assert db.query(CollegeRating).filter(CollegeRating.rating_id == rating_id).count() == 1

    def test_api_key_can_rate(self, client, member, api_key, catalog, category):
        headers = {"X-API-Key": api_key(member)}
        response = rate(client, headers, entityType="course", entityId=catalog.courses[0].id, categoryId=category.id)
        assert response.status_code == 200

    def test_anonymous_is_401(self, client, db, catalog, category):
        response = rate(client, {}, entityId=catalog.college.id, categoryId=category.id)
        assert response.status_code == 401
        assert db.query(Rating).count() == 0

    def test_unknown_entity_type_is_400(self, client, db, member, session_cookie, catalog, category):
        response = rate(
            client,
            session_cookie(member),
            entityType="campus",
            entityId=catalog.college.id,
            categoryId=category.id,
        )
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid entity type: campus"}
        assert db.query(Rating).count() == 0

    def test_unknown_category_is_404(self, client, db, member, session_cookie, catalog):
        response = rate(client, session_cookie(member), entityId=catalog.college.id, categoryId="missing")
        assert response.status_code == 404
        assert response.json()["success"] is False
        assert db.query(Rating).count() == 0

    def test_list_ratings_for_entity(self, client, member, session_cookie, catalog, category):
        headers = session_cookie(member)
        rate(client, headers, entityId=catalog.college.id, categoryId=category.id, rating="5")
        rate(client, headers, entityType="department", entityId=catalog.departments[0].id, categoryId=category.id)

        response = client.get(API, params={"entityType": "college", "entityId": catalog.college.id})
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["items"][0]["rating"] == "5"
        assert data["items"][0]["user_id"] == member.id

    def test_list_ratings_unknown_type(self, client):
        response = client.get(API, params={"entityType": "campus", "entityId": "x"})
        assert response.status_code == 400


class TestCategories:
    def test_public_reads(self, client, category):
        assert client.get(f"{API}/categories").json()["data"][0]["slug"] == "campus-life"
        assert client.get(f"{API}/categories/{category.id}").json()["data"]["name"] == "Campus Life"
        assert client.get(f"{API}/categories/slug/campus-life").json()["data"]["id"] == category.id
        assert client.get(f"{API}/categories/slug/nothing").status_code == 404

    def test_admin_manages_categories(self, client, admin, session_cookie):
        headers = session_cookie(admin)

        created = client.post(f"{API}/admin/categories", json={"name": "Value for Money"}, headers=headers)
        assert created.status_code == 200
        category_id = created.json()["data"]["id"]
        assert client.get(f"{API}/categories/slug/value-for-money").status_code == 200

        updated = client.patch(
            f"{API}/admin/categories/{category_id}",
            json={"description": "Fees versus quality", "sortOrder": "2"},
            headers=headers,
        )
        assert updated.status_code == 200
        assert client.get(f"{API}/categories/{category_id}").json()["data"]["sort_order"] == "2"

        assert client.delete(f"{API}/admin/categories/{category_id}", headers=headers).status_code == 200
        assert client.get(f"{API}/categories/{category_id}").status_code == 404

    def test_duplicate_category_is_409(self, client, admin, session_cookie, category):
        response = client.post(f"{API}/admin/categories", json={"name": "Campus Life"}, headers=session_cookie(admin))
        assert response.status_code == 409

    def test_member_cannot_manage_categories(self, client, member, session_cookie):
        response = client.post(f"{API}/admin/categories", json={"name": "Food"}, headers=session_cookie(member))
        assert response.status_code == 403

    def test_category_in_use_cannot_be_deleted(self, client, db, admin, session_cookie, catalog, category):
        headers = session_cookie(admin)
        rate(client, headers, entityId=catalog.college.id, categoryId=category.id)

        response = client.delete(f"{API}/admin/categories/{category.id}", headers=headers)

        assert response.status_code == 409
        assert response.json()["success"] is False
        assert db.query(RatingCategory).filter(RatingCategory.id == category.id).count() == 1
        assert db.query(Rating).filter(Rating.rating_category_id == category.id).count() == 1

    def test_failed_delete_is_a_store_failure(self, client, db, admin, session_cookie, category, monkeypatch):
        headers = session_cookie(admin)

        def broken_commit(*args, **kwargs):
            raise IntegrityError("DELETE FROM rating_categories", {}, Exception("FOREIGN KEY constraint failed"))

        monkeypatch.setattr(db, "commit", broken_commit)
        response = client.delete(f"{API}/admin/categories/{category.id}", headers=headers)
        monkeypatch.undo()

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "Internal storage error"}
        assert db.query(RatingCategory).filter(RatingCategory.id == category.id).count() == 1
