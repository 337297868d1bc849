"""
Tests for job listings, staff-only fields and the application flow.
"""

import pytest

API = "/api/v1/jobs"

JOB = {
    "title": "Senior Python Engineer",
    "department": "Engineering",
    "description": "Build APIs",
    "locationType": "remote",
    "employmentType": "full-time",
    "responsibilities": ["Design services"],
    "salaryMin": 90000,
    "salaryMax": 120000,
    "internalNotes": "Budget approved",
}

APPLICATION = {
    "applicantName": "Jane Doe",
    "applicantEmail": "Jane.Doe@Example.com",
    "resumeUrl": "https://files.example.com/cv/jane-doe.pdf",
}


async def create_job(client, headers, **overrides):
    resp = await client.post(API, json={**JOB, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestJobListings:
    @pytest.mark.asyncio
    async def test_create_returns_staff_view(self, client, editor, editor_headers):
        job = await create_job(client, editor_headers)

        assert job["slug"] == "senior-python-engineer"
        assert job["status"] == "draft"
        assert job["internalNotes"] == "Budget approved"
        assert job["postedBy"] == editor.id
        assert job["responsibilities"] == ["Design services"]
        assert job["benefits"] == []

    @pytest.mark.asyncio
    async def test_deadline_with_offset_stored_as_utc(self, client, editor_headers):
        job = await create_job(client, editor_headers, applicationDeadline="2026-03-01T12:00:00-05:00")

        assert job["applicationDeadline"] == "2026-03-01T17:00:00"

    @pytest.mark.asyncio
    async def test_public_view_hides_internal_notes(self, client, editor_headers):
        job = await create_job(client, editor_headers, status="active")

        resp = await client.get(f"{API}/{job['id']}")

        data = resp.json()["data"]
        assert "internalNotes" not in data
        assert "postedBy" not in data
        assert data["salaryMin"] is not None

    @pytest.mark.asyncio
    async def test_hidden_salary_only_for_staff(self, client, editor_headers, viewer_headers):
        job = await create_job(client, editor_headers, salaryVisible=False)

        public = (await client.get(f"{API}/slug/{job['slug']}")).json()["data"]
        viewer = (await client.get(f"{API}/{job['id']}", headers=viewer_headers)).json()["data"]
        staff = (await client.get(f"{API}/{job['id']}", headers=editor_headers)).json()["data"]

        assert public["salaryMin"] is None and public["salaryMax"] is None
        assert viewer["salaryMin"] is None
        assert staff["salaryMin"] is not None
        assert staff["internalNotes"] == "Budget approved"

    @pytest.mark.asyncio
    async def test_salary_range_validated(self, client, editor_headers):
        resp = await client.post(API, json={**JOB, "salaryMin": 200000}, headers=editor_headers)
        assert resp.status_code == 422

        job = await create_job(client, editor_headers)
        resp = await client.put(f"{API}/{job['id']}", json={"salaryMax": 1000}, headers=editor_headers)
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_list_filters(self, client, editor_headers):
        await create_job(client, editor_headers, status="active")
        await create_job(client, editor_headers, title="Designer", department="Design", locationType="onsite")

        active = await client.get(API, params={"status": "active"})
        onsite = await client.get(API, params={"locationType": "onsite"})
        search = await client.get(API, params={"search": "python"})

        assert [j["title"] for j in active.json()["data"]] == ["Senior Python Engineer"]
        assert [j["title"] for j in onsite.json()["data"]] == ["Designer"]
        assert search.json()["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_viewer_cannot_create(self, client, viewer_headers):
        resp = await client.post(API, json=JOB, headers=viewer_headers)
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_soft_delete(self, client, editor_headers):
        job = await create_job(client, editor_headers)

        resp = await client.delete(f"{API}/{job['id']}", headers=editor_headers)

        assert resp.json()["message"] == "Job deleted successfully"
        assert (await client.get(f"{API}/{job['id']}")).status_code == 404


class TestApplications:
    @pytest.mark.asyncio
    async def test_apply_to_active_job(self, client, editor_headers, smtp_send):
        job = await create_job(client, editor_headers, status="active")

        resp = await client.post(f"{API}/{job['id']}/apply", json=APPLICATION)

        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["applicantEmail"] == "jane.doe@example.com"
        assert data["resumeFilename"] == "jane-doe.pdf"
        assert data["status"] == "new"
        assert data["job"]["title"] == "Senior Python Engineer"
        smtp_send.assert_awaited_once()
        assert smtp_send.await_args.args[0]["Subject"] == "New Application: Senior Python Engineer"

    @pytest.mark.asyncio
    async def test_draft_job_rejects_applications(self, client, editor_headers, smtp_send):
        job = await create_job(client, editor_headers)

        resp = await client.post(f"{API}/{job['id']}/apply", json=APPLICATION)

        assert resp.status_code == 400
        smtp_send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_job(self, client):
        resp = await client.post(f"{API}/999/apply", json=APPLICATION)
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_duplicate_application_case_insensitive(self, client, editor_headers):
        job = await create_job(client, editor_headers, status="active")
        await client.post(f"{API}/{job['id']}/apply", json=APPLICATION)

        resp = await client.post(
            f"{API}/{job['id']}/apply", json={**APPLICATION, "applicantEmail": "JANE.DOE@example.com"}
        )

        assert resp.status_code == 409
        assert resp.json()["error"]["message"] == "You have already applied for this position"

    @pytest.mark.asyncio
    async def test_same_applicant_other_job(self, client, editor_headers):
        first = await create_job(client, editor_headers, status="active")
        second = await create_job(client, editor_headers, title="Staff Engineer", status="active")
        await client.post(f"{API}/{first['id']}/apply", json=APPLICATION)

        resp = await client.post(f"{API}/{second['id']}/apply", json=APPLICATION)

        assert resp.status_code == 201

    @pytest.mark.asyncio
    async def test_invalid_email_and_url(self, client, editor_headers):
        job = await create_job(client, editor_headers, status="active")
        resp = await client.post(
            f"{API}/{job['id']}/apply",
            json={**APPLICATION, "applicantEmail": "not-an-email", "resumeUrl": "nope"},
        )
        fields = {d["field"] for d in resp.json()["error"]["details"]}
        assert resp.status_code == 422
        assert {"applicantEmail", "resumeUrl"} <= fields

    @pytest.mark.asyncio
    async def test_staff_application_lists(self, client, editor_headers, viewer_headers):
        first = await create_job(client, editor_headers, status="active")
        second = await create_job(client, editor_headers, title="Staff Engineer", status="active")
        await client.post(f"{API}/{first['id']}/apply", json=APPLICATION)
        await client.post(f"{API}/{second['id']}/apply", json={**APPLICATION, "applicantName": "Jane Again"})

        per_job = await client.get(f"{API}/{first['id']}/applications", headers=editor_headers)
        everything = await client.get(f"{API}/all/applications", headers=editor_headers)
        denied = await client.get(f"{API}/all/applications", headers=viewer_headers)

        assert per_job.json()["pagination"]["total"] == 1
        assert everything.json()["pagination"]["total"] == 2
        assert denied.status_code == 403

    @pytest.mark.asyncio
    async def test_status_update(self, client, editor_headers):
        job = await create_job(client, editor_headers, status="active")
        applied = await client.post(f"{API}/{job['id']}/apply", json=APPLICATION)
        app_id = applied.json()["data"]["id"]

        resp = await client.patch(
            f"{API}/applications/{app_id}/status",
            json={"status": "shortlisted", "notes": "Strong CV"},
            headers=editor_headers,
        )

        assert resp.json()["data"]["status"] == "shortlisted"
        assert resp.json()["data"]["notes"] == "Strong CV"

        filtered = await client.get(f"{API}/all/applications", params={"status": "new"}, headers=editor_headers)
        assert filtered.json()["pagination"]["total"] == 0

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, client, editor_headers):
        resp = await client.patch(
            f"{API}/applications/1/status", json={"status": "hired"}, headers=editor_headers
        )
        assert resp.status_code == 422
