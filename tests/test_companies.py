"""
Tests for company endpoints.

Tests:
- Create (admin only, duplicates)
- Search with employee-count filters and unknown parameters
- Get with jobs
- Partial update
- Delete
"""

import pytest

from app.models.company import Company
from app.models.job import Job


NEW_COMPANY = {
    "handle": "new",
    "name": "New",
    "description": "DescNew",
    "numEmployees": 10,
    "logoUrl": "http://new.img",
}


class TestCreateCompany:
    """Test POST /companies/"""

    def test_admin_can_create(self, client, admin_headers):
        response = client.post("/api/v1/companies/", json=NEW_COMPANY, headers=admin_headers)

        assert response.status_code == 201
        assert response.json() == NEW_COMPANY

    def test_non_admin_forbidden(self, client, user_headers):
        response = client.post("/api/v1/companies/", json=NEW_COMPANY, headers=user_headers)
        assert response.status_code == 403

    def test_anonymous_unauthorized(self, client):
        response = client.post("/api/v1/companies/", json=NEW_COMPANY)
        assert response.status_code == 401

    def test_duplicate_handle(self, client, admin_headers, seed_companies):
        response = client.post(
            "/api/v1/companies/",
            json={**NEW_COMPANY, "handle": "c1"},
            headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Duplicate company: c1"

    def test_duplicate_name_caught_by_constraint(self, client, admin_headers, seed_companies):
        """Names are unique too, enforced by the database constraint"""
        response = client.post(
            "/api/v1/companies/",
            json={**NEW_COMPANY, "name": "C1"},
            headers=admin_headers
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("bad", [
        {"handle": "Not Valid"},
        {"numEmployees": -1},
        {"extra": "field"},
    ])
    def test_invalid_data(self, client, admin_headers, bad):
        response = client.post("/api/v1/companies/", json={**NEW_COMPANY, **bad}, headers=admin_headers)
        assert response.status_code == 422


class TestListCompanies:
    """Test GET /companies/"""

    def test_no_filters(self, client, seed_companies):
        response = client.get("/api/v1/companies/")

        assert response.status_code == 200
        assert [c["handle"] for c in response.json()] == ["c1", "c2", "c3"]
        assert response.json()[0] == {
            "handle": "c1",
            "name": "C1",
            "description": "Desc1",
            "numEmployees": 1,
            "logoUrl": "http://c1.img",
        }

    def test_min_employees(self, client, seed_companies):
        response = client.get("/api/v1/companies/", params={"minEmployees": 2})
        assert [c["handle"] for c in response.json()] == ["c2", "c3"]

    def test_employee_range(self, client, seed_companies):
        response = client.get("/api/v1/companies/", params={"minEmployees": 2, "maxEmployees": 2})
        assert [c["handle"] for c in response.json()] == ["c2"]

    def test_no_matches(self, client, seed_companies):
        response = client.get("/api/v1/companies/", params={"minEmployees": 100})

        assert response.status_code == 200
        assert response.json() == []

    def test_min_greater_than_max(self, client, seed_companies):
        response = client.get("/api/v1/companies/", params={"minEmployees": 5, "maxEmployees": 1})

        assert response.status_code == 400
        assert "minEmployees" in response.json()["detail"]

    def test_negative_filter_rejected(self, client, seed_companies):
        response = client.get("/api/v1/companies/", params={"minEmployees": -1})

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid value for minEmployees")

    def test_huge_employee_count(self, client, seed_companies):
        response = client.get("/api/v1/companies/", params={"maxEmployees": "9" * 30})

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid value for maxEmployees")

    def test_unknown_parameter_rejected(self, client, seed_companies):
        response = client.get("/api/v1/companies/", params={"handle": "c1"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Unknown field: handle"

    def test_non_numeric_filter(self, client, seed_companies):
        response = client.get("/api/v1/companies/", params={"minEmployees": "lots"})
        assert response.status_code == 422


class TestGetCompany:
    """Test GET /companies/{handle}"""

    def test_with_jobs(self, client, seed_jobs):
        response = client.get("/api/v1/companies/c1")

        assert response.status_code == 200
        data = response.json()
        assert data["handle"] == "c1"
        assert [j["title"] for j in data["jobs"]] == ["J1", "J2", "J3"]
        assert data["jobs"][0] == {"id": seed_jobs["J1"], "title": "J1", "salary": 1, "equity": 0.1}

    def test_without_jobs(self, client, seed_jobs):
        response = client.get("/api/v1/companies/c3")

        assert response.status_code == 200
        assert response.json()["jobs"] == []

    def test_not_found(self, client):
        response = client.get("/api/v1/companies/nope")

        assert response.status_code == 404
        assert response.json()["detail"] == "No company: nope"


class TestUpdateCompany:
    """Test PATCH /companies/{handle}"""

    def test_partial_update(self, client, admin_headers, seed_companies):
        response = client.patch(
            "/api/v1/companies/c1",
            json={"name": "C1-new", "numEmployees": 50},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json() == {
            "handle": "c1",
            "name": "C1-new",
            "description": "Desc1",
            "numEmployees": 50,
            "logoUrl": "http://c1.img",
        }

    def test_null_clears_optional_field(self, client, admin_headers, seed_companies):
        response = client.patch(
            "/api/v1/companies/c1",
            json={"numEmployees": None, "logoUrl": None},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["numEmployees"] is None
        assert response.json()["logoUrl"] is None

    def test_update_persists(self, client, admin_headers, seed_companies):
        client.patch("/api/v1/companies/c2", json={"description": "Changed"}, headers=admin_headers)

        response = client.get("/api/v1/companies/c2")
        assert response.json()["description"] == "Changed"

    def test_empty_payload(self, client, admin_headers, seed_companies):
        response = client.patch("/api/v1/companies/c1", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "No data"

    def test_handle_cannot_change(self, client, admin_headers, seed_companies):
        response = client.patch("/api/v1/companies/c1", json={"handle": "c1-new"}, headers=admin_headers)
        assert response.status_code == 422

    def test_not_found(self, client, admin_headers, seed_companies):
        response = client.patch("/api/v1/companies/nope", json={"name": "x"}, headers=admin_headers)
        assert response.status_code == 404

    def test_duplicate_name(self, client, admin_headers, seed_companies):
        response = client.patch("/api/v1/companies/c1", json={"name": "C2"}, headers=admin_headers)
        assert response.status_code == 400

    def test_non_admin_forbidden(self, client, user_headers, seed_companies):
        response = client.patch("/api/v1/companies/c1", json={"name": "x"}, headers=user_headers)
        assert response.status_code == 403


class TestDeleteCompany:
    """Test DELETE /companies/{handle}"""

    def test_delete_cascades_to_jobs(self, client, admin_headers, seed_jobs, db_session):
        response = client.delete("/api/v1/companies/c1", headers=admin_headers)

        assert response.status_code == 204
        assert db_session.get(Company, "c1") is None
        assert db_session.query(Job).filter(Job.company_handle == "c1").count() == 0

    def test_not_found(self, client, admin_headers):
        response = client.delete("/api/v1/companies/nope", headers=admin_headers)
        assert response.status_code == 404

    def test_anonymous_unauthorized(self, client, seed_companies):
        response = client.delete("/api/v1/companies/c1")
        assert response.status_code == 401
