"""
Test the job role and lookup endpoints.
"""
from datetime import timedelta

from fastapi import status

from backend.models.db.job_role import JobRole
from backend.utils.validators import utc_today


def future_date(days=30):
    return (utc_today() + timedelta(days=days)).isoformat()


class TestJobListing:
    """Public read endpoints."""

    def test_list_jobs_sorted_by_role_name(self, test_client, make_job_role):
        make_job_role(role_name="Tester")
        make_job_role(role_name="Architect")
        make_job_role(role_name="Developer", deleted=True)

        response = test_client.get("/jobs")

        assert response.status_code == status.HTTP_200_OK
        names = [job["roleName"] for job in response.json()]
        assert names == ["Architect", "Tester"]

    def test_list_jobs_descending_with_limit(self, test_client, make_job_role):
        for name in ("Alpha", "Bravo", "Charlie"):
            make_job_role(role_name=name)

        response = test_client.get("/jobs", params={"sortBy": "roleName", "sortOrder": "desc", "limit": 2})

        assert [job["roleName"] for job in response.json()] == ["Charlie", "Bravo"]

    def test_list_jobs_rejects_negative_limit(self, test_client):
        response = test_client.get("/jobs", params={"limit": -1})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_job_payload_shape(self, test_client, open_job_role):
        data = test_client.get(f"/jobs/{open_job_role.id}").json()

        assert data["id"] == open_job_role.id
        assert data["roleName"] == "Software Engineer"
        assert data["capabilityName"] == "Engineering"
        assert data["bandName"] == "Associate"
        assert data["statusName"] == "Open"
        assert data["openPositions"] == 1
        assert data["closingDate"] == open_job_role.closing_date.isoformat()

    def test_get_missing_job(self, test_client):
        response = test_client.get("/jobs/999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Not found", "message": "Job with ID 999 not found"}

    def test_get_job_with_bad_id(self, test_client):
        response = test_client.get("/jobs/abc")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid job ID"

    def test_lookups(self, test_client):
        capabilities = test_client.get("/capabilities").json()
        bands = test_client.get("/bands").json()
        statuses = test_client.get("/statuses").json()

        assert len(capabilities) == 15
        assert len(bands) == 9
        assert {s["name"] for s in statuses} == {"Open", "Closed"}
        assert [c["name"] for c in capabilities] == sorted(c["name"] for c in capabilities)


class TestJobAdministration:
    """Create, update and soft-delete require an admin."""

    def test_create_job_role(self, test_client, admin_headers):
        payload = {
            "roleName": "Engineer",
            "location": "Belfast",
            "capabilityId": 1,
            "bandId": 2,
            "closingDate": future_date(),
            "description": "Build things",
        }

        response = test_client.post("/jobs/job", json=payload, headers=admin_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["roleName"] == "Engineer"
        assert data["openPositions"] == 1
        assert data["statusName"] == "Open"
        assert data["description"] == "Build things"

    def test_create_job_role_requires_admin(self, test_client, auth_headers):
        response = test_client.post("/jobs/job", json={"roleName": "X"}, headers=auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_job_role_with_past_date(self, test_client, admin_headers):
        payload = {
            "roleName": "Engineer",
            "location": "Belfast",
            "capabilityId": 1,
            "bandId": 2,
            "closingDate": (utc_today() - timedelta(days=1)).isoformat(),
        }

        response = test_client.post("/jobs/job", json=payload, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Bad request", "message": "Closing date must be in the future"}

    def test_create_job_role_with_unknown_capability(self, test_client, admin_headers):
        payload = {
            "roleName": "Engineer",
            "location": "Belfast",
            "capabilityId": 999,
            "bandId": 2,
            "closingDate": future_date(),
        }

        response = test_client.post("/jobs/job", json=payload, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Invalid capability ID or band ID" in response.json()["message"]

    def test_update_round_trip(self, test_client, admin_headers, open_job_role):
        before = test_client.get(f"/jobs/{open_job_role.id}").json()

        response = test_client.put(f"/jobs/{open_job_role.id}", json={"roleName": "X"}, headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        after = test_client.get(f"/jobs/{open_job_role.id}").json()
        assert after["roleName"] == "X"
        assert {k: v for k, v in after.items() if k != "roleName"} == {
            k: v for k, v in before.items() if k != "roleName"
        }

    def test_update_with_empty_body(self, test_client, admin_headers, open_job_role):
        response = test_client.put(f"/jobs/{open_job_role.id}", json={}, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "No updates provided"

    def test_update_missing_job(self, test_client, admin_headers):
        response = test_client.put("/jobs/999", json={"location": "Derry"}, headers=admin_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Job role not found"

    def test_soft_delete(self, test_client, test_db_session, admin_headers, open_job_role):
        response = test_client.delete(f"/jobs/{open_job_role.id}", headers=admin_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "Job role deleted successfully"}
        assert test_client.get(f"/jobs/{open_job_role.id}").status_code == status.HTTP_404_NOT_FOUND
        assert test_db_session.get(JobRole, open_job_role.id).deleted is True

        second = test_client.delete(f"/jobs/{open_job_role.id}", headers=admin_headers)
        assert second.status_code == status.HTTP_404_NOT_FOUND


class TestAutoCloseEndpoint:

    def test_auto_close_reports_count(self, test_client, make_job_role):
        make_job_role(closing_date=utc_today() - timedelta(days=1))
        make_job_role(open_positions=0)
        make_job_role()

        response = test_client.post("/jobs/auto-close")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "closedCount": 2,
            "message": "Successfully auto-closed 2 job role(s)",
        }
        assert test_client.post("/jobs/auto-close").json()["closedCount"] == 0
