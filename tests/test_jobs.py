# tests/test_jobs.py
import pytest


@pytest.mark.asyncio
async def test_create_and_get_job(client, register_user, job_payload):
    uid, headers = await register_user()
    r = await client.post("/api/job", json=job_payload, headers=headers)
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["postedBy"] == uid
    assert data["applicantCount"] == 0
    assert data["isActive"] is True
    assert data["salary"]["currency"] == "USD"

    got = await client.get(f"/api/job/{data['id']}")
    assert got.status_code == 200
    assert got.json()["data"]["postedBy"]["name"] == "Alice"


@pytest.mark.asyncio
async def test_create_job_requires_auth_and_valid_type(client, register_user, job_payload):
    r = await client.post("/api/job", json=job_payload)
    assert r.status_code == 401

    _, headers = await register_user()
    bad = await client.post("/api/job", json={**job_payload, "type": "Gig"}, headers=headers)
    assert bad.status_code == 400
    assert bad.json()["message"] == "Validation error"


@pytest.mark.asyncio
async def test_job_not_found(client):
    assert (await client.get("/api/job/not-an-id")).status_code == 404
    r = await client.get("/api/job/64b7f0c2a1b2c3d4e5f60718")
    assert r.status_code == 404
    assert r.json()["message"] == "Job not found"


@pytest.mark.asyncio
async def test_list_filters_and_pagination(client, register_user, create_job):
    _, headers = await register_user()
    await create_job(headers, title="Backend Engineer", salary={"min": 50000})
    await create_job(headers, title="Frontend Engineer", type="Contract", location="Paris", salary={"min": 90000})
    await create_job(headers, title="Data Intern", type="Internship", salary={"min": 10000})

    r = await client.get("/api/job", params={"limit": 2})
    body = r.json()
    assert body["count"] == 2
    assert body["pagination"] == {"totalItems": 3, "totalPages": 2, "currentPage": 1}

    page2 = await client.get("/api/job", params={"limit": 2, "page": 2})
    assert page2.json()["count"] == 1

    contracts = await client.get("/api/job", params={"type": "Contract"})
    assert [j["title"] for j in contracts.json()["data"]] == ["Frontend Engineer"]

    search = await client.get("/api/job", params={"search": "engineer"})
    assert search.json()["count"] == 2

    paris = await client.get("/api/job", params={"location": "paris"})
    assert paris.json()["count"] == 1

    by_salary = await client.get("/api/job", params={"sort": "salary"})
    assert [j["title"] for j in by_salary.json()["data"]] == ["Frontend Engineer", "Backend Engineer", "Data Intern"]

    # unknown sort keys fall back to newest first
    unknown = await client.get("/api/job", params={"sort": "oldest"})
    assert unknown.status_code == 200
    assert unknown.json()["count"] == 3

    assert (await client.get("/api/job", params={"limit": 500})).status_code == 400


@pytest.mark.asyncio
async def test_inactive_jobs_are_hidden(client, register_user, create_job):
    _, headers = await register_user()
    jid = await create_job(headers)
    await client.put(f"/api/job/{jid}", json={"isActive": False}, headers=headers)
    r = await client.get("/api/job")
    assert r.json()["count"] == 0


@pytest.mark.asyncio
async def test_only_poster_may_update_or_delete(client, register_user, create_job):
    _, poster = await register_user()
    _, other = await register_user(name="Bob", email="bob@example.com")
    jid = await create_job(poster)

    assert (await client.put(f"/api/job/{jid}", json={"title": "Mine"}, headers=other)).status_code == 403
    assert (await client.delete(f"/api/job/{jid}", headers=other)).status_code == 403

    updated = await client.put(f"/api/job/{jid}", json={"title": "Senior Backend Engineer"}, headers=poster)
    assert updated.json()["data"]["title"] == "Senior Backend Engineer"

    removed = await client.delete(f"/api/job/{jid}", headers=poster)
    assert removed.json() == {"success": True, "message": "Job removed"}
    assert (await client.get(f"/api/job/{jid}")).status_code == 404


@pytest.mark.asyncio
async def test_apply_twice(client, register_user, create_job):
    _, poster = await register_user()
    _, bob = await register_user(name="Bob", email="bob@example.com")
    jid = await create_job(poster)

    r = await client.put(f"/api/job/{jid}/apply", json={"coverLetter": "Hire me"}, headers=bob)
    assert r.status_code == 200
    assert r.json()["message"] == "Applied for job successfully"

    again = await client.put(f"/api/job/{jid}/apply", headers=bob)
    assert again.status_code == 400
    assert again.json()["message"] == "Already applied for this job"

    applied = await client.get("/api/profile/jobs/applied", headers=bob)
    assert applied.json()["count"] == 1
    assert applied.json()["data"][0]["status"] == "applied"
    assert applied.json()["data"][0]["job"]["id"] == jid

    job = (await client.get(f"/api/job/{jid}")).json()["data"]
    assert job["applicantCount"] == 1
    assert job["applicants"][0]["user"]["name"] == "Bob"
    assert job["applicants"][0]["coverLetter"] == "Hire me"


@pytest.mark.asyncio
async def test_apply_after_deadline(client, register_user, create_job):
    _, poster = await register_user()
    _, bob = await register_user(name="Bob", email="bob@example.com")
    jid = await create_job(poster, applicationDeadline="2000-01-01T00:00:00Z")

    r = await client.put(f"/api/job/{jid}/apply", headers=bob)
    assert r.status_code == 400
    assert r.json()["message"] == "Application deadline has passed"


@pytest.mark.asyncio
async def test_save_toggles(client, register_user, create_job):
    _, headers = await register_user()
    jid = await create_job(headers)

    states = []
    for _ in range(3):
        r = await client.put(f"/api/job/{jid}/save", headers=headers)
        states.append(r.json()["isSaved"])
    assert states == [True, False, True]

    saved = await client.get("/api/profile/jobs/saved", headers=headers)
    assert [j["id"] for j in saved.json()["data"]] == [jid]


@pytest.mark.asyncio
async def test_application_status_update(client, register_user, create_job):
    _, poster = await register_user()
    bob_id, bob = await register_user(name="Bob", email="bob@example.com")
    jid = await create_job(poster)
    await client.put(f"/api/job/{jid}/apply", headers=bob)

    denied = await client.put(f"/api/job/{jid}/application/{bob_id}", json={"status": "interview"}, headers=bob)
    assert denied.status_code == 403

    invalid = await client.put(f"/api/job/{jid}/application/{bob_id}", json={"status": "hired"}, headers=poster)
    assert invalid.status_code == 400

    r = await client.put(f"/api/job/{jid}/application/{bob_id}", json={"status": "interview"}, headers=poster)
    assert r.status_code == 200
    assert r.json()["message"] == "Application status updated to interview"

    applied = await client.get("/api/profile/jobs/applied", headers=bob)
    assert applied.json()["data"][0]["status"] == "interview"

    missing = await client.put(
        f"/api/job/{jid}/application/64b7f0c2a1b2c3d4e5f60718", json={"status": "rejected"}, headers=poster
    )
    assert missing.status_code == 404
    assert missing.json()["message"] == "Applicant not found"
