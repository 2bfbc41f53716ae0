"""
Test suite for job endpoints.

Tests cover:
- Job creation
- Job search (minSalary, hasEquity, unknown parameters)
- Job retrieval
- Partial update and delete
- Error handling
"""

import pytest
from app.models.job import Job


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_create_job_success(self, client, admin_headers, seed_companies):
        """Test successful job creation"""
        response = client.post("/api/v1/jobs/", json={
            "title": "New",
            "salary": 100,
            "equity": 0.5,
            "companyHandle": "c1"
        }, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["id"], int)
        assert data == {
            "id": data["id"],
            "title": "New",
            "salary": 100,
            "equity": 0.5,
            "companyHandle": "c1",
        }

    def test_create_job_unknown_company(self, client, admin_headers, seed_companies):
        response = client.post("/api/v1/jobs/", json={
            "title": "New",
            "companyHandle": "nope"
        }, headers=admin_headers)

        assert response.status_code == 404

    def test_create_duplicate_title(self, client, admin_headers, seed_jobs):
        """A company cannot post two jobs with the same title"""
        response = client.post("/api/v1/jobs/", json={
            "title": "J1",
            "companyHandle": "c1"
        }, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Duplicate job")

    def test_same_title_other_company(self, client, admin_headers, seed_jobs):
        response = client.post("/api/v1/jobs/", json={
            "title": "J1",
            "companyHandle": "c2"
        }, headers=admin_headers)

        assert response.status_code == 201

    @pytest.mark.parametrize("bad", [
        {"equity": 1.5},
        {"salary": -1},
        {"title": ""},
    ])
    def test_create_job_invalid(self, client, admin_headers, seed_companies, bad):
        payload = {"title": "New", "companyHandle": "c1", **bad}
        response = client.post("/api/v1/jobs/", json=payload, headers=admin_headers)

        assert response.status_code == 422

    def test_create_job_requires_admin(self, client, user_headers, seed_companies):
        response = client.post("/api/v1/jobs/", json={
            "title": "New",
            "companyHandle": "c1"
        }, headers=user_headers)

        assert response.status_code == 403


class TestJobSearch:
    """Tests for GET /jobs/"""

    def test_list_all(self, client, seed_jobs):
        response = client.get("/api/v1/jobs/")

        assert response.status_code == 200
        assert [j["title"] for j in response.json()] == ["J1", "J2", "J3", "J4"]
        assert response.json()[0] == {
            "id": seed_jobs["J1"],
            "title": "J1",
            "salary": 1,
            "equity": 0.1,
            "companyHandle": "c1",
        }

    def test_min_salary(self, client, seed_jobs):
        response = client.get("/api/v1/jobs/", params={"minSalary": 2})
        assert [j["title"] for j in response.json()] == ["J2", "J3"]

    def test_has_equity_true(self, client, seed_jobs):
        """Zero and missing equity are both excluded"""
        response = client.get("/api/v1/jobs/", params={"hasEquity": "true"})
        assert [j["title"] for j in response.json()] == ["J1", "J2"]

    def test_has_equity_false_is_unfiltered(self, client, seed_jobs):
        response = client.get("/api/v1/jobs/", params={"hasEquity": "false"})
        assert len(response.json()) == 4

    def test_combined_filters(self, client, seed_jobs):
        response = client.get("/api/v1/jobs/", params={"minSalary": 2, "hasEquity": "true"})
        assert [j["title"] for j in response.json()] == ["J2"]

    def test_negative_min_salary(self, client, seed_jobs):
        response = client.get("/api/v1/jobs/", params={"minSalary": -1})
        assert response.status_code == 400

    def test_huge_min_salary(self, client, seed_jobs):
        """Values beyond the integer column are a 400, not a server error"""
        response = client.get("/api/v1/jobs/", params={"minSalary": "1" + "0" * 400})

        assert response.status_code == 400
        assert response.json()["detail"].startswith("Invalid value for minSalary")

    def test_unknown_parameter(self, client, seed_jobs):
        response = client.get("/api/v1/jobs/", params={"equity": "0.1"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Unknown field: equity"


class TestJobRetrieval:
    """Tests for job retrieval endpoint"""

    def test_get_job_by_id(self, client, seed_jobs):
        response = client.get(f"/api/v1/jobs/{seed_jobs['J4']}")

        assert response.status_code == 200
        assert response.json() == {
            "id": seed_jobs["J4"],
            "title": "J4",
            "salary": None,
            "equity": None,
            "companyHandle": "c2",
        }

    def test_get_nonexistent_job(self, client):
        """Test retrieving a job that doesn't exist"""
        response = client.get("/api/v1/jobs/99999")

        assert response.status_code == 404
        assert response.json()["detail"] == "No job: 99999"


class TestJobUpdate:
    """Tests for PATCH /jobs/{id}"""

    def test_update(self, client, admin_headers, seed_jobs):
        response = client.patch(
            f"/api/v1/jobs/{seed_jobs['J1']}",
            json={"title": "J1-new", "salary": 500},
            headers=admin_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "J1-new"
        assert data["salary"] == 500
        assert data["equity"] == 0.1
        assert data["companyHandle"] == "c1"

    def test_company_handle_cannot_change(self, client, admin_headers, seed_jobs):
        response = client.patch(
            f"/api/v1/jobs/{seed_jobs['J1']}",
            json={"companyHandle": "c2"},
            headers=admin_headers
        )

        assert response.status_code == 422

    def test_empty_payload(self, client, admin_headers, seed_jobs):
        response = client.patch(f"/api/v1/jobs/{seed_jobs['J1']}", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "No data"

    def test_not_found(self, client, admin_headers, seed_jobs):
        response = client.patch("/api/v1/jobs/99999", json={"salary": 1}, headers=admin_headers)
        assert response.status_code == 404

    def test_requires_admin(self, client, user_headers, seed_jobs):
        response = client.patch(f"/api/v1/jobs/{seed_jobs['J1']}", json={"salary": 1}, headers=user_headers)
        assert response.status_code == 403


class TestJobDeletion:
    """Tests for DELETE /jobs/{id}"""

    def test_delete(self, client, admin_headers, seed_jobs, db_session):
        response = client.delete(f"/api/v1/jobs/{seed_jobs['J2']}", headers=admin_headers)

        assert response.status_code == 204
        assert db_session.get(Job, seed_jobs["J2"]) is None

    def test_delete_nonexistent(self, client, admin_headers):
        response = client.delete("/api/v1/jobs/99999", headers=admin_headers)
        assert response.status_code == 404
